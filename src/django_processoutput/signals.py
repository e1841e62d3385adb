from django.dispatch import Signal

pre_process_monitor = Signal()
post_process_monitor = Signal()
