"""Logging configuration for the application."""

import logging
import sys

from filestore.core.config import get_settings


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout. Chatty vendor SDK loggers are held at WARNING.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for noisy in ("botocore", "boto3", "urllib3", "httpx", "oss2", "qcloud_cos"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

