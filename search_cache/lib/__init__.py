"""
Library package initialization
"""

from .config_loader import ConfigLoader, load_config
from .logger import configure_logging, get_logger

__all__ = [
    "ConfigLoader",
    "load_config",
    "configure_logging",
    "get_logger",
]
