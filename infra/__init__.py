"""
Infrastructure module exports.

Configuration and bootstrap for the application context.
"""

from .config import AppConfig, get_config
from .bootstrap import AppContext, bootstrap_context

__all__ = [
    "AppConfig",
    "get_config",
    "AppContext",
    "bootstrap_context",
]
