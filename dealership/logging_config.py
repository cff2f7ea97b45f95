import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from dealership.config import get_settings

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging() -> None:
    """
    Configures the root logger once for the whole process.

    JSON lines on stdout when LOG_JSON is set (container log collectors),
    plain text otherwise. Library loggers that log every statement or
    request are lowered to WARNING.
    """
    settings = get_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.LOG_LEVEL.upper())

    # Prevent duplicate logs when called more than once (reload, tests)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_handler = logging.StreamHandler(sys.stdout)
    if settings.LOG_JSON:
        formatter = JsonFormatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%SZ")
    else:
        formatter = logging.Formatter(TEXT_FORMAT)
    log_handler.setFormatter(formatter)
    root_logger.addHandler(log_handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    root_logger.info("Logging initialized", extra={"app": settings.APP_NAME})
