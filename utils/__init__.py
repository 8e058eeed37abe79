"""
Utility modules for FakeHash types.
"""
from .logging_config import get_logger, LoggerFactory
from .exceptions import *
from .error_handlers import ErrorContext
from .cache import LRUCache

__all__ = [
    'get_logger',
    'LoggerFactory',
    'ErrorContext',
    'LRUCache',
    'FakeHashError',
    'ValidationError',
    'ShapeMismatch',
    'KeyTypeMismatch',
    'ValueTypeMismatch',
    'RegistryError',
    'DuplicateNameConflict',
    'UnknownBaseType',
    'ConfigurationError',
]
