"""Configuration for venues, fetching and logging."""

from .loader import get_default_config, load_config, validate_config

__all__ = [
    "get_default_config",
    "load_config",
    "validate_config",
]
