"""
Types for emulating hash-like behaviour with lists.

* ``KeyWith[X]``: one ``[key, value]`` pair.
* ``FlatMap[X]``: ``[key, value, key, value, ...]``.
* ``OrderedPairList[X]``: ``[[key, value], [key, value], ...]``.

Keys must satisfy ``Str``; values must satisfy ``X``. Unparameterized,
each type checks structure only.

    >>> from fakehash import KeyWith, Str
    >>> KeyWith[Str].check(["Content-Type", "text/plain"])
    True
"""
from typing import Any, Iterator, Optional, Tuple, Type
from utils.exceptions import (
    ValidationError,
    ShapeMismatch,
    KeyTypeMismatch,
    ValueTypeMismatch
)
from .constraint import TypeConstraint, ParameterizableTypeConstraint
from .builtin import Ref
from .composition import PAIR_TYPE_NAME, key_with_of
from .registry import find_type_constraint

PACKAGE = __name__

FLAT_MAP_NAME = "FlatMap"
ORDERED_PAIR_LIST_NAME = "OrderedPairList"


def is_key_with(value: Any) -> bool:
    """A list or tuple of exactly two elements."""
    return isinstance(value, (list, tuple)) and len(value) == 2


def is_flat_map(value: Any) -> bool:
    """A list or tuple with an even number of elements; empty is valid."""
    return isinstance(value, (list, tuple)) and len(value) % 2 == 0


def is_ordered_pair_list(value: Any) -> bool:
    """Any list or tuple. Element shape is only checked once parameterized."""
    return isinstance(value, (list, tuple))


def _lookup(registry, name: str) -> TypeConstraint:
    if registry is None:
        return find_type_constraint(name)
    return registry.require(name)


def _key_with_generator(type_parameter: TypeConstraint, registry=None):
    check = type_parameter.check
    key_check = _lookup(registry, 'Str').check

    def key_with_of_parameter(value):
        if not key_check(value[0]):
            return False
        return check(value[1])

    return key_with_of_parameter


def _flat_map_generator(type_parameter: TypeConstraint, registry=None):
    check = type_parameter.check
    key_check = _lookup(registry, 'Str').check

    def flat_map_of_parameter(value):
        if len(value) % 2:
            return False
        for index in range(0, len(value), 2):
            if not key_check(value[index]):
                return False
            if not check(value[index + 1]):
                return False
        return True

    return flat_map_of_parameter


def _ordered_pair_list_generator(type_parameter: TypeConstraint, registry=None):
    pair_check = key_with_of(type_parameter, registry).check

    def ordered_pair_list_of_parameter(value):
        for element in value:
            if not pair_check(element):
                return False
        return True

    return ordered_pair_list_of_parameter


KeyWith = ParameterizableTypeConstraint(
    PAIR_TYPE_NAME,
    constraint_generator=_key_with_generator,
    parent=Ref,
    constraint=is_key_with,
    optimized_constraint=is_key_with,
    package_defined_in=PACKAGE
)

FlatMap = ParameterizableTypeConstraint(
    FLAT_MAP_NAME,
    constraint_generator=_flat_map_generator,
    parent=Ref,
    constraint=is_flat_map,
    optimized_constraint=is_flat_map,
    package_defined_in=PACKAGE
)

OrderedPairList = ParameterizableTypeConstraint(
    ORDERED_PAIR_LIST_NAME,
    constraint_generator=_ordered_pair_list_generator,
    parent=Ref,
    constraint=is_ordered_pair_list,
    optimized_constraint=is_ordered_pair_list,
    package_defined_in=PACKAGE
)

SHAPE_TYPES = (KeyWith, FlatMap, OrderedPairList)


def register_types(registry):
    """Register the shape types into ``registry`` and mark them parameterizable."""
    for shape in SHAPE_TYPES:
        registry.register(shape)
        registry.add_parameterizable(shape)


def type_storage() -> dict:
    """Names of the types this module provides, short name to canonical name."""
    return {shape.name: shape.name for shape in SHAPE_TYPES}


def _pairs(shape_name: str, value) -> Iterator[Tuple[Any, Any]]:
    if shape_name == PAIR_TYPE_NAME:
        yield value[0], value[1]
    elif shape_name == FLAT_MAP_NAME:
        for index in range(0, len(value), 2):
            yield value[index], value[index + 1]


def diagnose(constraint: TypeConstraint, value: Any) -> Optional[Type[ValidationError]]:
    """
    Classify why ``value`` fails a shape constraint.

    Returns ``ShapeMismatch``, ``KeyTypeMismatch`` or ``ValueTypeMismatch``
    for the first failing check, or None when ``value`` is valid.
    """
    base = getattr(constraint, 'parameterized_from', constraint)
    if base.name not in type_storage():
        raise ValueError(f"'{constraint.name}' is not a shape type")

    if not base.check(value):
        return ShapeMismatch

    type_parameter = getattr(constraint, 'type_parameter', None)
    if type_parameter is None:
        return None

    key_check = find_type_constraint('Str').check
    if base.name == ORDERED_PAIR_LIST_NAME:
        for element in value:
            if not is_key_with(element):
                return ShapeMismatch
            error = _first_pair_error([(element[0], element[1])], key_check, type_parameter.check)
            if error is not None:
                return error
        return None

    return _first_pair_error(_pairs(base.name, value), key_check, type_parameter.check)


def _first_pair_error(pairs, key_check, value_check) -> Optional[Type[ValidationError]]:
    for key, item in pairs:
        if not key_check(key):
            return KeyTypeMismatch
        if not value_check(item):
            return ValueTypeMismatch
    return None


def assert_shape(constraint: TypeConstraint, value: Any) -> Any:
    """Return ``value`` or raise the mismatch class reported by ``diagnose``."""
    error = diagnose(constraint, value)
    if error is not None:
        raise error(
            constraint.get_message(value),
            details={'type': constraint.name, 'value': repr(value)}
        )
    return value
