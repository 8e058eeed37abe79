"""
Type constraint engine.

A ``TypeConstraint`` is a named predicate with an optional parent: a value
satisfies the constraint when it satisfies every ancestor and the
constraint's own predicate. An ``optimized_constraint`` replaces the whole
chain with one function that is semantically equal to it.

A ``ParameterizableTypeConstraint`` additionally carries a
``constraint_generator``. Given a type parameter (another constraint) it
returns a closure that checks the elements of a value, producing a
``ParameterizedTypeConstraint`` such as ``KeyWith[Str]``. The generator
also receives the registry doing the parameterization (None outside one),
so any types it looks up by name come from that registry.
"""
from typing import Any, Callable, Optional, Union
from utils.exceptions import ValidationError, RegistryError

Predicate = Callable[[Any], bool]


def _always(value: Any) -> bool:
    return True


class TypeConstraint:
    """Named, optionally inherited value predicate."""

    def __init__(
        self,
        name: str,
        parent: Optional['TypeConstraint'] = None,
        constraint: Optional[Predicate] = None,
        optimized_constraint: Optional[Predicate] = None,
        message: Optional[Callable[[Any], str]] = None,
        package_defined_in: Optional[str] = None
    ):
        if not name:
            raise ValueError("type constraint name must be a non-empty string")
        self.name = name
        self.parent = parent
        self.constraint = constraint
        self.optimized_constraint = optimized_constraint
        self.message = message
        self.package_defined_in = package_defined_in
        self._compiled = self._compile()

    def _compile(self) -> Predicate:
        """Fold the parent chain and own predicate into one function."""
        if self.optimized_constraint is not None:
            return self.optimized_constraint

        constraint = self.constraint
        if self.parent is None:
            return constraint or _always

        parent_check = self.parent.check
        if constraint is None:
            return parent_check

        def compiled(value):
            return parent_check(value) and constraint(value)

        return compiled

    def check(self, value: Any) -> bool:
        """Return True when ``value`` satisfies this constraint."""
        return bool(self._compiled(value))

    __call__ = check

    def get_message(self, value: Any) -> str:
        """Describe why ``value`` failed."""
        if self.message is not None:
            return self.message(value)
        return f"Validation failed for '{self.name}' with value {value!r}"

    def validate(self, value: Any) -> Optional[str]:
        """Return None when valid, otherwise the failure message."""
        if self.check(value):
            return None
        return self.get_message(value)

    def assert_valid(self, value: Any) -> bool:
        """Return True or raise ``ValidationError``."""
        if self.check(value):
            return True
        raise ValidationError(
            self.get_message(value),
            details={'type': self.name, 'value': repr(value)}
        )

    def equals(self, other: Union['TypeConstraint', str, None]) -> bool:
        """
        Two constraints are equal when they are the same object or share a
        name, a parent and the same predicate functions.
        """
        if other is self:
            return True
        if not isinstance(other, TypeConstraint) or type(other) is not type(self):
            return False
        return (
            other.name == self.name
            and other.constraint is self.constraint
            and other.optimized_constraint is self.optimized_constraint
            and _same_parent(self.parent, other.parent)
        )

    def is_subtype_of(self, other: Union['TypeConstraint', str]) -> bool:
        """True when ``other`` is a strict ancestor of this constraint."""
        current = self.parent
        while current is not None:
            if _matches(current, other):
                return True
            current = current.parent
        return False

    def is_a_type_of(self, other: Union['TypeConstraint', str]) -> bool:
        """True when this constraint is ``other`` or one of its subtypes."""
        return _matches(self, other) or self.is_subtype_of(other)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"

    def __str__(self) -> str:
        return self.name


class ParameterizableTypeConstraint(TypeConstraint):
    """
    A constraint that can be specialized by a type parameter.

    Args:
        name: Unique name of the shape
        parent: Base constraint, checked before ``constraint``
        constraint: Structure-only predicate
        optimized_constraint: Fast predicate equal to parent chain + constraint
        constraint_generator: Maps (type parameter, registry) to an element predicate
    """

    def __init__(
        self,
        name: str,
        constraint_generator: Callable[[TypeConstraint, Any], Predicate],
        parent: Optional[TypeConstraint] = None,
        constraint: Optional[Predicate] = None,
        optimized_constraint: Optional[Predicate] = None,
        message: Optional[Callable[[Any], str]] = None,
        package_defined_in: Optional[str] = None
    ):
        if not callable(constraint_generator):
            raise TypeError(f"constraint_generator for '{name}' must be callable")
        self.constraint_generator = constraint_generator
        super().__init__(
            name,
            parent=parent,
            constraint=constraint,
            optimized_constraint=optimized_constraint,
            message=message,
            package_defined_in=package_defined_in
        )

    def generate_constraint_for(self, type_parameter: TypeConstraint, registry=None) -> Predicate:
        """Run the generator for ``type_parameter``."""
        return self.constraint_generator(type_parameter, registry)

    def parameterize(self, type_parameter: TypeConstraint, registry=None) -> 'ParameterizedTypeConstraint':
        """Build a new, uncached ``Name[Param]`` constraint."""
        if not isinstance(type_parameter, TypeConstraint):
            raise RegistryError(
                f"Type parameter for '{self.name}' must be a TypeConstraint, "
                f"got {type(type_parameter).__name__}",
                details={'type': self.name, 'parameter': repr(type_parameter)}
            )
        return ParameterizedTypeConstraint(self, type_parameter, registry=registry)

    def __getitem__(self, type_parameter: Union[TypeConstraint, str]) -> 'ParameterizedTypeConstraint':
        """``KeyWith[Str]``: parameterize through the default registry cache."""
        from .registry import get_type_registry

        if isinstance(type_parameter, tuple):
            raise RegistryError(
                f"'{self.name}' takes exactly one type parameter, got {len(type_parameter)}",
                details={'type': self.name}
            )
        return get_type_registry().parameterize(self, type_parameter)

    def equals(self, other) -> bool:
        return (
            super().equals(other)
            and other.constraint_generator is self.constraint_generator
        )


class ParameterizedTypeConstraint(TypeConstraint):
    """The result of applying a type parameter to a parameterizable constraint."""

    def __init__(
        self,
        parameterized_from: ParameterizableTypeConstraint,
        type_parameter: TypeConstraint,
        registry=None
    ):
        self.parameterized_from = parameterized_from
        self.type_parameter = type_parameter
        super().__init__(
            f"{parameterized_from.name}[{type_parameter.name}]",
            parent=parameterized_from,
            constraint=parameterized_from.generate_constraint_for(type_parameter, registry),
            message=parameterized_from.message,
            package_defined_in=parameterized_from.package_defined_in
        )

    def equals(self, other) -> bool:
        if other is self:
            return True
        if not isinstance(other, ParameterizedTypeConstraint):
            return False
        return (
            self.parameterized_from.equals(other.parameterized_from)
            and self.type_parameter.equals(other.type_parameter)
        )


def _same_parent(left: Optional[TypeConstraint], right: Optional[TypeConstraint]) -> bool:
    if left is None or right is None:
        return left is right
    return left.equals(right)


def _matches(constraint: TypeConstraint, other: Union[TypeConstraint, str]) -> bool:
    if isinstance(other, str):
        return constraint.name == other
    return constraint.equals(other)
