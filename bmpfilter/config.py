# bmpfilter/config.py
from __future__ import annotations

import logging
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

LOG_LEVEL = os.getenv("BMPFILTER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s'
LOG_DATEFMT = '%H:%M:%S'

DEFAULT_KERNEL = os.getenv("BMPFILTER_DEFAULT_KERNEL", "sobel-x")
GRAY_SUFFIX = os.getenv("BMPFILTER_GRAY_SUFFIX", "_gray")
CONV_SUFFIX = os.getenv("BMPFILTER_CONV_SUFFIX", "_conv")

MAX_UPLOAD_MB = int(os.getenv("BMPFILTER_MAX_UPLOAD_MB", "50"))
HOST = os.getenv("BMPFILTER_HOST", "127.0.0.1")
PORT = int(os.getenv("BMPFILTER_PORT", "5000"))


def configure_logging(level: str | None = None) -> None:
    """
    Centralized logging configuration for the command line and the server.
    Library modules only create loggers; this is called once by a front end.
    """
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
