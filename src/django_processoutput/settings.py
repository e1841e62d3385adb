import locale
import os
from copy import deepcopy

from django.conf import settings

DEFAULTS: dict[str, object] = {
    # Monitoring
    "POLL_INTERVAL": 0.1,
    # Text handling
    "ENCODING": None,
    "ENCODING_ERRORS": "replace",
    "LINE_SEPARATOR": None,
    # Console output
    "CONSOLE_STDOUT_PREFIX": "",
    "CONSOLE_STDERR_PREFIX": "",
}


def get_setting(key: str) -> object:
    """Get a django-processoutput setting, falling back to defaults."""
    user_settings: dict[str, object] = getattr(settings, "DJANGO_PROCESSOUTPUT", {})
    if key in user_settings:
        value = user_settings[key]
        return deepcopy(value) if isinstance(value, (dict, list, set)) else value
    if key in DEFAULTS:
        value = DEFAULTS[key]
        return deepcopy(value) if isinstance(value, (dict, list, set)) else value
    msg = f"Unknown django-processoutput setting: {key}"
    raise KeyError(msg)


def get_encoding() -> str:
    """Return the configured text encoding, or the platform default."""
    encoding = get_setting("ENCODING")
    return str(encoding) if encoding else locale.getpreferredencoding(False)


def get_line_separator() -> str:
    separator = get_setting("LINE_SEPARATOR")
    return os.linesep if separator is None else str(separator)
