"""Shared helpers"""

from .logging import configure_logging, get_logger
