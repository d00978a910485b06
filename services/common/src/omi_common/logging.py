import logging
import os
import sys

from pythonjsonlogger import jsonlogger

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
_SERVER_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")


def setup_logging() -> logging.Logger:
    """
    Configures structured JSON logging for the conversation services.

    The root logger and the uvicorn loggers share a single stdout handler
    with a JSON formatter, so request logs and pipeline logs (including the
    ``extra`` fields passed by callers) end up in one machine-readable stream.
    The level is read from ``LOG_LEVEL`` (default ``INFO``).

    Safe to call from every module: the handler is installed only once.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    root_logger = logging.getLogger()
    level = os.getenv("LOG_LEVEL", "INFO").upper()

    if getattr(root_logger, "_omi_configured", False):
        return root_logger

    formatter = jsonlogger.JsonFormatter(_LOG_FORMAT)
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    root_logger.setLevel(level)
    root_logger.handlers = [stream_handler]

    for logger_name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(logger_name)
        server_logger.setLevel(level)
        server_logger.handlers = [stream_handler]
        server_logger.propagate = False

    root_logger._omi_configured = True
    return root_logger
