"""
Runtime Configuration Module

Provides configuration loading and management for tree construction.
"""

from .runtime import RuntimeConfig, TreeConfig, get_default_config_template

__all__ = [
    "RuntimeConfig",
    "TreeConfig",
    "get_default_config_template",
]
