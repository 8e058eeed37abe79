"""
Types for emulating hash-like behaviours with lists.
"""
from .constraint import (
    TypeConstraint,
    ParameterizableTypeConstraint,
    ParameterizedTypeConstraint
)
from .registry import (
    TypeRegistry,
    get_type_registry,
    find_type_constraint
)
from .builtin import (
    Any,
    Item,
    Bool,
    Defined,
    Value,
    Str,
    Num,
    Int,
    Ref,
    ArrayRef,
    HashRef,
    Maybe
)
from .shapes import (
    KeyWith,
    FlatMap,
    OrderedPairList,
    is_key_with,
    is_flat_map,
    is_ordered_pair_list,
    register_types,
    type_storage,
    diagnose,
    assert_shape
)
from .composition import key_with_of
from .schema import Field, Schema, Record

__version__ = "0.1.0"

get_type_registry()

__all__ = [
    'TypeConstraint',
    'ParameterizableTypeConstraint',
    'ParameterizedTypeConstraint',
    'TypeRegistry',
    'get_type_registry',
    'find_type_constraint',
    'Any',
    'Item',
    'Bool',
    'Defined',
    'Value',
    'Str',
    'Num',
    'Int',
    'Ref',
    'ArrayRef',
    'HashRef',
    'Maybe',
    'KeyWith',
    'FlatMap',
    'OrderedPairList',
    'is_key_with',
    'is_flat_map',
    'is_ordered_pair_list',
    'register_types',
    'type_storage',
    'diagnose',
    'assert_shape',
    'key_with_of',
    'Field',
    'Schema',
    'Record',
]
