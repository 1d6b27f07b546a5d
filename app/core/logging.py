"""
Process-wide logging setup.

Logs go to stdout only; gunicorn and most hosts capture it as-is.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
HANDLER_NAME = "babylog"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    # Idempotent: app reloads and test imports must not stack handlers.
    if not any(h.get_name() == HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.set_name(HANDLER_NAME)
        root.addHandler(handler)
    root.setLevel(level.upper())
