"""
Base type hierarchy the shape types build on.

    Any
      Item
        Bool
        Maybe[X]
        Defined
          Value
            Str
            Num
              Int
          Ref
            ArrayRef[X]
            HashRef[X]
"""
from typing import Any as AnyValue
from collections.abc import Mapping
import numpy as np
from .constraint import TypeConstraint, ParameterizableTypeConstraint

PACKAGE = __name__

_SCALARS = (str, bytes, int, float, complex, np.generic)


def is_value(value: AnyValue) -> bool:
    """True for defined scalars: strings, bytes and numbers (NumPy scalars included)."""
    return isinstance(value, _SCALARS)


def is_ref(value: AnyValue) -> bool:
    """True for defined non-scalars such as containers and objects."""
    return value is not None and not isinstance(value, _SCALARS)


def is_str(value: AnyValue) -> bool:
    return isinstance(value, str)


def is_num(value: AnyValue) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def is_int(value: AnyValue) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, np.integer))


def is_bool(value: AnyValue) -> bool:
    return isinstance(value, (bool, np.bool_))


def is_list_like(value: AnyValue) -> bool:
    """Ordered, 0-indexed containers: ``list`` and ``tuple``."""
    return isinstance(value, (list, tuple))


def is_mapping(value: AnyValue) -> bool:
    return isinstance(value, Mapping)


def _array_ref_generator(type_parameter: TypeConstraint, registry=None):
    check = type_parameter.check

    def array_ref_of(value):
        for element in value:
            if not check(element):
                return False
        return True

    return array_ref_of


def _hash_ref_generator(type_parameter: TypeConstraint, registry=None):
    check = type_parameter.check

    def hash_ref_of(value):
        for element in value.values():
            if not check(element):
                return False
        return True

    return hash_ref_of


def _maybe_generator(type_parameter: TypeConstraint, registry=None):
    check = type_parameter.check

    def maybe_of(value):
        return value is None or check(value)

    return maybe_of


Any = TypeConstraint('Any', optimized_constraint=lambda value: True, package_defined_in=PACKAGE)
Item = TypeConstraint('Item', parent=Any, optimized_constraint=lambda value: True, package_defined_in=PACKAGE)
Bool = TypeConstraint('Bool', parent=Item, constraint=is_bool, package_defined_in=PACKAGE)
Defined = TypeConstraint(
    'Defined',
    parent=Item,
    constraint=lambda value: value is not None,
    package_defined_in=PACKAGE
)
Value = TypeConstraint('Value', parent=Defined, constraint=is_value, optimized_constraint=is_value, package_defined_in=PACKAGE)
Str = TypeConstraint('Str', parent=Value, constraint=is_str, optimized_constraint=is_str, package_defined_in=PACKAGE)
Num = TypeConstraint('Num', parent=Value, constraint=is_num, optimized_constraint=is_num, package_defined_in=PACKAGE)
Int = TypeConstraint('Int', parent=Num, constraint=is_int, optimized_constraint=is_int, package_defined_in=PACKAGE)
Ref = TypeConstraint('Ref', parent=Defined, constraint=is_ref, optimized_constraint=is_ref, package_defined_in=PACKAGE)

ArrayRef = ParameterizableTypeConstraint(
    'ArrayRef',
    constraint_generator=_array_ref_generator,
    parent=Ref,
    constraint=is_list_like,
    optimized_constraint=is_list_like,
    package_defined_in=PACKAGE
)
HashRef = ParameterizableTypeConstraint(
    'HashRef',
    constraint_generator=_hash_ref_generator,
    parent=Ref,
    constraint=is_mapping,
    optimized_constraint=is_mapping,
    package_defined_in=PACKAGE
)
Maybe = ParameterizableTypeConstraint(
    'Maybe',
    constraint_generator=_maybe_generator,
    parent=Item,
    package_defined_in=PACKAGE
)

BUILTIN_TYPES = (Any, Item, Bool, Defined, Value, Str, Num, Int, Ref, ArrayRef, HashRef, Maybe)
PARAMETERIZABLE_TYPES = (ArrayRef, HashRef, Maybe)


def register_builtin_types(registry):
    """Register the base hierarchy into ``registry``, parents first."""
    for constraint in BUILTIN_TYPES:
        registry.register(constraint)
    for constraint in PARAMETERIZABLE_TYPES:
        registry.add_parameterizable(constraint)
