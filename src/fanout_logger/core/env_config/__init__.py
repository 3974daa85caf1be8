"""
Environment configuration system for fanout-logger.

Load Logger options from .env files, environment variables and YAML/JSON files.

Example:
    >>> from fanout_logger.core.env_config import load_from_env
    >>>
    >>> # Load from .env
    >>> options = load_from_env()
    >>>
    >>> # Load with overrides
    >>> options = load_from_env(level="warn", url="https://logs.example.com")
"""

from .loader import load_from_env, print_config_summary, mask_secret
from .validator import LoggerSettings
from .file_loader import ConfigFileLoader

__all__ = [
    "load_from_env",
    "print_config_summary",
    "mask_secret",
    "LoggerSettings",
    "ConfigFileLoader",
]
