from django.apps import AppConfig


class ProcessOutputConfig(AppConfig):
    name = "django_processoutput"
    verbose_name = "Django Process Output"
