"""
Configuration package
"""

from .settings import settings, Settings
from .logging_config import setup_logging, get_request_id, set_request_id

__all__ = ['settings', 'Settings', 'setup_logging', 'get_request_id', 'set_request_id']
