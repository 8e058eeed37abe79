"""
Custom exception hierarchy for FakeHash types.
"""
from typing import Any, Dict, Optional


class FakeHashError(Exception):
    """Base exception for all FakeHash errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'details': self.details
        }


# Validation Exceptions
class ValidationError(FakeHashError):
    """Raised when a value fails a type constraint."""
    pass


class ShapeMismatch(ValidationError):
    """Raised when a value is not list-like or has the wrong length or parity."""
    pass


class KeyTypeMismatch(ValidationError):
    """Raised when an element in key position is not a string."""
    pass


class ValueTypeMismatch(ValidationError):
    """Raised when an element in value position fails the element constraint."""
    pass


# Registry Exceptions
class RegistryError(FakeHashError):
    """Base exception for type registry errors."""
    pass


class DuplicateNameConflict(RegistryError):
    """Raised when a name is already bound to a different definition."""
    pass


class UnknownBaseType(RegistryError):
    """Raised when a type name is not present in the registry."""
    pass


# Configuration Exceptions
class ConfigurationError(FakeHashError):
    """Raised when configuration is invalid."""
    pass
