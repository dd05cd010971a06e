"""
Logging setup shared by the API process and the Celery worker.

Every module asks for its logger with ``get_logger(__name__)``; handlers and
format are installed once by ``setup_logging()`` at process start.
"""

import logging
import sys

from storefront.utils.settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(levelname)s - [PID:%(process)d] - %(name)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    """
    Configures the root logger: one stdout handler with the service format.

    Third-party loggers that are noisy at INFO are pushed to WARNING.
    """
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for noisy in ("urllib3", "sqlalchemy.engine", "celery.app.trace"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
