"""
Configuration module for Doc Composer.
"""
from .constants import *
from .logging_config import setup_logger, get_logger, JSONFormatter
from .settings import Settings, settings

__all__ = [
    # Logging
    'setup_logger',
    'get_logger',
    'JSONFormatter',
    # Settings
    'Settings',
    'settings',
    # Constants (all exported via *)
]
