"""
Typed field declarations for validating records.
"""
from copy import deepcopy
from typing import Any, Dict, Optional, Union
from utils.logging_config import get_logger
from utils.exceptions import ValidationError
from .constraint import TypeConstraint
from .registry import get_type_registry

logger = get_logger(__name__)

_MISSING = object()


class Field:
    """
    A typed attribute.

    Args:
        isa: Type constraint, or the name of a registered one
        required: If True, construction fails when the field is absent
        default: Value used when the field is absent, copied for each
            record. A zero-argument callable is called per record instead.
    """

    def __init__(
        self,
        isa: Union[TypeConstraint, str],
        required: bool = True,
        default: Any = _MISSING
    ):
        self.isa = get_type_registry().resolve(isa)
        self.required = required and default is _MISSING
        self.default = default
        self.name: Optional[str] = None
        if default is not _MISSING and not callable(default):
            message = self.isa.validate(default)
            if message is not None:
                raise ValidationError(
                    f"Default value does not pass the type constraint because: {message}",
                    details={'type': self.isa.name, 'default': repr(default)}
                )

    def __set_name__(self, owner, name: str):
        self.name = name

    def has_default(self) -> bool:
        return self.default is not _MISSING

    def get_default(self) -> Any:
        """Build a fresh, validated default value."""
        if callable(self.default):
            return self.validate(self.default())
        return deepcopy(self.default)

    def validate(self, value: Any) -> Any:
        """Validate a value for this field."""
        message = self.isa.validate(value)
        if message is not None:
            raise ValidationError(
                f"Attribute ({self.name}) does not pass the type constraint because: {message}",
                details={'attribute': self.name, 'type': self.isa.name, 'value': repr(value)}
            )
        return value

    def __get__(self, instance, owner):
        if instance is None:
            return self
        try:
            return instance.__dict__[self.name]
        except KeyError:
            raise AttributeError(f"Attribute ({self.name}) is not set") from None

    def __set__(self, instance, value):
        instance.__dict__[self.name] = self.validate(value)


class Schema:
    """Schema for validating dictionaries against typed fields."""

    def __init__(self, fields: Dict[str, Field], strict: bool = False):
        """
        Initialize schema.

        Args:
            fields: Mapping of field name to ``Field``
            strict: If True, reject extra keys not in schema
        """
        self.fields = fields
        self.strict = strict
        for name, field in fields.items():
            if field.name is None:
                field.name = name

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate data against schema."""
        if not isinstance(data, dict):
            raise ValidationError(
                f"Expected dict, got {type(data)}",
                details={'actual_type': str(type(data))}
            )

        validated = {}
        errors = []

        for key, field in self.fields.items():
            if key not in data:
                if field.has_default():
                    try:
                        validated[key] = field.get_default()
                    except ValidationError as e:
                        errors.append(e.message)
                elif field.required:
                    errors.append(f"Attribute ({key}) is required")
                continue

            try:
                validated[key] = field.validate(data[key])
            except ValidationError as e:
                errors.append(e.message)

        if self.strict:
            extra_keys = set(data.keys()) - set(self.fields.keys())
            if extra_keys:
                errors.append(f"Unexpected fields: {sorted(extra_keys)}")

        if errors:
            logger.debug(f"Schema validation failed with {len(errors)} errors")
            raise ValidationError(
                "Schema validation failed",
                details={'errors': errors}
            )

        return validated


class Record:
    """
    Base class for objects with typed fields.

        class Request(Record):
            header = Field(KeyWith[Str])

    Construction validates every keyword argument against its field and
    fails when a required field is missing. Assignment validates too.
    """

    _schema: Schema = Schema({})
    strict = True

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        fields = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, Field):
                    fields[name] = value
        cls._schema = Schema(fields, strict=cls.strict)

    def __init__(self, **kwargs):
        validated = self._schema.validate(kwargs)
        self.__dict__.update(validated)

    def to_dict(self) -> Dict[str, Any]:
        return {
            name: self.__dict__[name]
            for name in self._schema.fields
            if name in self.__dict__
        }

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value!r}" for name, value in self.to_dict().items())
        return f"{self.__class__.__name__}({fields})"
