"""
Console logging for the search service.

Search traces (interpreted filters, result counts, discarded stale searches)
are logged under the "aistore" namespace; third-party HTTP and SDK loggers
are kept at WARNING so a model call does not drown the trace.
"""

import logging
import sys

NOISY_LOGGERS = ("uvicorn", "uvicorn.access", "httpx", "httpcore", "openai")


def setup_logging(log_level: str = "INFO", debug: bool = False) -> None:
    """
    Configure application-wide logging with console output.

    Args:
        log_level: Logging level for application modules (DEBUG, INFO, ...)
        debug: Include module:line in each record and let openai log its requests
    """
    fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    if debug:
        fmt = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"

    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    # Remove existing handlers to avoid duplicates on reload
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if debug:
        logging.getLogger("openai").setLevel(logging.DEBUG)

    logging.getLogger("aistore").setLevel(level)
    logging.getLogger(__name__).info(f"Logging configured (level={logging.getLevelName(level)}, debug={debug})")
