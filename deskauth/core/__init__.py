"""
Core module - Contains configuration, logging, and the authentication core.
"""

from deskauth.core.config import AuthSettings
from deskauth.core.logging import configure_logging, get_secure_logger, SecureLogFilter

__all__ = ["AuthSettings", "configure_logging", "get_secure_logger", "SecureLogFilter"]
