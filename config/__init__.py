"""
Configuration management for FakeHash types.
"""
from .config_manager import (
    DEFAULTS,
    Config,
    ConfigManager,
    get_config_manager,
    load_config,
    get_config,
    set_config
)

__all__ = [
    'DEFAULTS',
    'Config',
    'ConfigManager',
    'get_config_manager',
    'load_config',
    'get_config',
    'set_config',
]
