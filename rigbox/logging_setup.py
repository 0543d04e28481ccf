"""CLI logging setup: simple %(message)s format for standalone commands."""

import logging
import sys

from rigbox.redact import SecretRedactingFilter

_LEVEL_NAMES = [
    (logging.DEBUG, "debug"),
    (logging.INFO, "info"),
    (logging.WARNING, "warn"),
    (logging.ERROR, "error"),
]


def setup_cli_logging(level=logging.INFO):
    """Configure root logger with plain message format for CLI commands.

    Produces output identical to print(). Filters are attached to the
    handler so records from every named logger are redacted.
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.addFilter(SecretRedactingFilter())
    root.addHandler(handler)


def level_name(logger: logging.Logger) -> str:
    """Map a logger's effective level to the name provisioners expect."""
    level = logger.getEffectiveLevel()
    for threshold, name in _LEVEL_NAMES:
        if level <= threshold:
            return name
    return "fatal"
