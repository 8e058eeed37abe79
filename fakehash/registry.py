"""
Type registry: name lookup, parameterization and memoization.
"""
import threading
from typing import Dict, Optional, Union
from utils.logging_config import get_logger
from utils.exceptions import (
    DuplicateNameConflict,
    UnknownBaseType,
    RegistryError,
    ConfigurationError
)
from utils.error_handlers import ErrorContext
from utils.cache import LRUCache
from config import get_config
from .constraint import (
    TypeConstraint,
    ParameterizableTypeConstraint,
    ParameterizedTypeConstraint
)

logger = get_logger(__name__)

TypeRef = Union[TypeConstraint, str]


class TypeRegistry:
    """
    Mapping from type name to type constraint.

    Populated during initialization and read afterwards. Parameterized
    constraints are memoized by ``(base, parameter)`` identity in a bounded
    LRU cache whose capacity comes from ``registry.cache_size``.
    """

    def __init__(self, cache_size: Optional[int] = None):
        self._types: Dict[str, TypeConstraint] = {}
        self._parameterizable: Dict[str, ParameterizableTypeConstraint] = {}
        # Reentrant: generators may parameterize while a parameterization runs
        self._lock = threading.RLock()
        if cache_size is None:
            cache_size = get_config('registry.cache_size', 256)
        self._cache = LRUCache(capacity=_cache_capacity(cache_size))

    def register(self, constraint: TypeConstraint) -> TypeConstraint:
        """
        Register ``constraint`` under its name.

        Registering an equal definition again is a no-op. A different
        definition under an existing name raises ``DuplicateNameConflict``.
        The parent, when given, must already be registered.
        """
        if not isinstance(constraint, TypeConstraint):
            raise RegistryError(
                f"Only TypeConstraint instances can be registered, got {type(constraint).__name__}",
                details={'value': repr(constraint)}
            )

        with self._lock:
            existing = self._types.get(constraint.name)
            if existing is not None:
                if existing.equals(constraint):
                    logger.debug(f"Type '{constraint.name}' already registered")
                    return existing
                raise DuplicateNameConflict(
                    f"Type '{constraint.name}' is already registered with a different definition",
                    details={
                        'name': constraint.name,
                        'existing': existing.package_defined_in,
                        'new': constraint.package_defined_in
                    }
                )

            parent = constraint.parent
            if parent is not None:
                registered_parent = self._types.get(parent.name)
                if registered_parent is None or not registered_parent.equals(parent):
                    raise UnknownBaseType(
                        f"Parent type '{parent.name}' of '{constraint.name}' is not registered",
                        details={'name': constraint.name, 'parent': parent.name}
                    )

            self._types[constraint.name] = constraint
            logger.debug(f"Registered type '{constraint.name}'")
            return constraint

    def add_parameterizable(self, constraint: ParameterizableTypeConstraint):
        """Allow ``constraint`` to be used as ``Name[Param]``."""
        if not isinstance(constraint, ParameterizableTypeConstraint):
            raise RegistryError(
                f"Type '{constraint.name}' is not parameterizable",
                details={'name': constraint.name}
            )

        with self._lock:
            registered = self._types.get(constraint.name)
            if registered is None:
                raise UnknownBaseType(
                    f"Type '{constraint.name}' must be registered before it is marked parameterizable",
                    details={'name': constraint.name}
                )
            if not registered.equals(constraint):
                raise DuplicateNameConflict(
                    f"Type '{constraint.name}' is registered with a different definition",
                    details={'name': constraint.name}
                )
            self._parameterizable[constraint.name] = registered

    def find(self, name: str) -> Optional[TypeConstraint]:
        """Return the constraint registered as ``name``, or None."""
        return self._types.get(name)

    def require(self, name: str) -> TypeConstraint:
        """Return the constraint registered as ``name`` or raise ``UnknownBaseType``."""
        constraint = self._types.get(name)
        if constraint is None:
            raise UnknownBaseType(
                f"Unknown type: {name}",
                details={'available_types': sorted(self._types)}
            )
        return constraint

    def resolve(self, type_ref: TypeRef) -> TypeConstraint:
        """Accept a constraint or the name of a registered one."""
        if isinstance(type_ref, TypeConstraint):
            return type_ref
        if isinstance(type_ref, str):
            return self.require(type_ref)
        raise RegistryError(
            f"Expected a type constraint or type name, got {type(type_ref).__name__}",
            details={'value': repr(type_ref)}
        )

    def is_parameterizable(self, name: str) -> bool:
        return name in self._parameterizable

    def parameterize(self, base: TypeRef, type_parameter: TypeRef) -> ParameterizedTypeConstraint:
        """
        Return ``base[type_parameter]``, reusing a cached instance when one exists.

        Args:
            base: Parameterizable constraint or its registered name
            type_parameter: Element constraint or its registered name

        Raises:
            UnknownBaseType: a name is not registered
            RegistryError: ``base`` is not parameterizable
        """
        if isinstance(base, str):
            self.require(base)
            if base not in self._parameterizable:
                raise RegistryError(
                    f"Type '{base}' is not parameterizable",
                    details={'name': base, 'parameterizable': sorted(self._parameterizable)}
                )
            base = self._parameterizable[base]
        elif not isinstance(base, ParameterizableTypeConstraint):
            raise RegistryError(
                f"Type '{base}' is not parameterizable",
                details={'value': repr(base)}
            )

        parameter = self.resolve(type_parameter)
        key = (id(base), id(parameter))

        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

            parameterized = base.parameterize(parameter, registry=self)
            self._cache.set(key, parameterized)
            logger.debug(f"Parameterized '{parameterized.name}'")
            return parameterized

    def names(self) -> list:
        """List all registered type names."""
        return list(self._types)

    def list_names(self, package: Optional[str] = None) -> Dict[str, str]:
        """
        Map short names to canonical names.

        Args:
            package: Only include types defined in this module
        """
        return {
            name: constraint.name
            for name, constraint in self._types.items()
            if package is None or constraint.package_defined_in == package
        }

    def cache_stats(self) -> dict:
        """Parameterization cache statistics."""
        with self._lock:
            return self._cache.stats()

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)


def _cache_capacity(value) -> int:
    """Coerce ``registry.cache_size`` to a positive int or raise ``ConfigurationError``."""
    try:
        if isinstance(value, bool):
            raise TypeError("bool is not a cache size")
        capacity = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"registry.cache_size must be a positive integer, got {value!r}",
            details={'key': 'registry.cache_size', 'value': repr(value), 'error': str(e)}
        ) from e

    if capacity < 1:
        raise ConfigurationError(
            f"registry.cache_size must be >= 1, got {capacity}",
            details={'key': 'registry.cache_size', 'value': repr(value)}
        )
    return capacity


_default_registry: Optional[TypeRegistry] = None
_default_lock = threading.Lock()


def get_type_registry() -> TypeRegistry:
    """
    Return the process-wide registry, creating and populating it once.

    Uses double-checked locking so concurrent first callers register the
    builtin and shape types exactly once.
    """
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                from .builtin import register_builtin_types
                from .shapes import register_types

                registry = TypeRegistry()
                with ErrorContext("register default types"):
                    register_builtin_types(registry)
                    register_types(registry)
                _default_registry = registry
                logger.debug(f"Initialized type registry with {len(registry)} types")
    return _default_registry


def find_type_constraint(name: str) -> TypeConstraint:
    """Look up ``name`` in the process-wide registry."""
    return get_type_registry().require(name)
