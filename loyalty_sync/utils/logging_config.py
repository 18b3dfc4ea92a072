"""
Logging setup for the loyalty sync service.

Configures the root logger once per process. gunicorn captures stdout/stderr,
so a single stream handler is all that is needed.

Environment Variables:
    LOG_LEVEL: Root log level (default: INFO)
"""
import os
import sys
import logging

LOG_FORMAT = '[LoyaltySync] %(asctime)s %(levelname)s %(name)s: %(message)s'

_configured = False


def setup_logging(level: str = None) -> None:
    """
    Configure root logging.

    Safe to call more than once; only the first call installs the handler.

    Args:
        level: Log level name, defaults to $LOG_LEVEL or INFO
    """
    global _configured

    level_name = (level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # Outbound HTTP libraries are chatty at INFO
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    _configured = True

