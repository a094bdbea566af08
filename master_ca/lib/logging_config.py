"""JSON logging configuration for the master CA."""

import logging
import os

from pythonjsonlogger import jsonlogger

LOG_LEVEL_ENV_VAR = "MASTER_CA_LOG_LEVEL"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with focused field set.

    Includes only 6 fields: timestamp, level, message, exc_info, funcName, lineno.
    """

    def add_fields(self, log_record, record, message_dict):
        """Override to include only specified fields.

        Args:
            log_record: Dict to be logged as JSON
            record: LogRecord object from logging framework
            message_dict: Dict containing message and args
        """
        super().add_fields(log_record, record, message_dict)

        if "levelname" in log_record:
            log_record["level"] = log_record.pop("levelname")

        allowed_fields = {
            "timestamp",
            "level",
            "message",
            "exc_info",
            "funcName",
            "lineno",
        }

        keys_to_remove = [key for key in log_record if key not in allowed_fields]
        for key in keys_to_remove:
            log_record.pop(key)


def _setup_logger() -> logging.Logger:
    """Initialize and configure singleton logger.

    The level comes from MASTER_CA_LOG_LEVEL and defaults to INFO.

    Returns:
        Configured logger with CustomJsonFormatter
    """
    logger = logging.getLogger("master_ca")

    # Prevent duplicate handlers if module reloaded
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    formatter = CustomJsonFormatter(
        fmt="%(timestamp)s %(levelname)s %(funcName)s %(lineno)d %(message)s",
        timestamp=True,
    )
    handler.setFormatter(formatter)

    logger.setLevel(os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper())
    logger.addHandler(handler)
    logger.propagate = False

    return logger


LOGGER = _setup_logger()
