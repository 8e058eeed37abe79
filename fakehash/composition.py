"""
Anonymous ``KeyWith[X]`` constraints for composing shape types.
"""
from typing import Optional, Union
from .constraint import TypeConstraint, ParameterizedTypeConstraint
from .registry import TypeRegistry, get_type_registry

PAIR_TYPE_NAME = "KeyWith"


def key_with_of(
    type_parameter: Union[TypeConstraint, str],
    registry: Optional[TypeRegistry] = None
) -> ParameterizedTypeConstraint:
    """
    Return ``KeyWith[type_parameter]`` from the registry's parameterization cache.

    The result is named ``KeyWith[<parameter name>]`` for display but is never
    registered under that name.
    """
    registry = registry or get_type_registry()
    return registry.parameterize(PAIR_TYPE_NAME, type_parameter)
