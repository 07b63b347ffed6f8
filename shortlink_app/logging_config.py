"""
Logging setup shared by the API process and the click workers.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Attach a single console handler to the root logger (idempotent)."""
    global _configured

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    if _configured:
        return

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)
    _configured = True
