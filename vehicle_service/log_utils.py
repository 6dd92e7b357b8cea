"""
Logging setup shared by the application and its entry points.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """Attach a single console handler to the package logger."""
    logger = logging.getLogger("vehicle_service")
    logger.setLevel(level.upper())

    if not any(getattr(h, "_vehicle_service", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handler._vehicle_service = True
        logger.addHandler(handler)

    logger.propagate = False
