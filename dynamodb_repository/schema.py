"""
Schema capability used by Repository.

A schema validates and transforms data for a single entity type. The
repository never looks inside it: it calls ``validate`` on every candidate
before a write and on every raw item after a read, and ``to_item`` to turn a
validated value into the attribute mapping that gets stored.

Key derivation belongs to the schema. With pydantic this is typically a pair
of computed fields built from domain fields:

    class Comment(BaseModel):
        post_id: str
        comment_id: str = Field(default_factory=lambda: str(uuid4()))
        content: str

        @computed_field
        @property
        def pk(self) -> str:
            return self.post_id

        @computed_field
        @property
        def sk(self) -> str:
            return f"comment#{self.comment_id}"
"""

import logging
from typing import Any, Dict, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from .exceptions import SchemaValidationError

T = TypeVar('T')
T_co = TypeVar('T_co', covariant=True)

logger = logging.getLogger(__name__)


@runtime_checkable
class Schema(Protocol[T_co]):
    """Validate-and-transform capability for one entity type."""

    name: str

    def validate(self, data: Any) -> T_co:
        """Return the validated value or raise SchemaValidationError."""
        ...

    def to_item(self, value: Any) -> Dict[str, Any]:
        """Return the attribute mapping to store for a validated value."""
        ...


class PydanticSchema(Generic[T]):
    """Schema backed by a pydantic model (or any type pydantic can validate).

    Defaults, ``field_validator``s and computed key fields all run inside
    pydantic; failures come back as SchemaValidationError carrying pydantic's
    per-field diagnostics.
    """

    def __init__(self, type_: Any, exclude_none: bool = True):
        """Initialize schema.

        Args:
            type_: Pydantic model class, TypedDict, dataclass or annotated type
            exclude_none: Drop attributes whose value is None before storing
        """
        self.type_ = type_
        self.name = getattr(type_, '__name__', repr(type_))
        self.exclude_none = exclude_none
        self._adapter = TypeAdapter(type_)

    def validate(self, data: Any) -> T:
        try:
            return self._adapter.validate_python(data)
        except ValidationError as e:
            errors = [
                {'loc': error['loc'], 'msg': error['msg'], 'type': error['type']}
                for error in e.errors()
            ]
            logger.error(f"Validation against {self.name} failed with {e.error_count()} error(s)")
            raise SchemaValidationError(
                f"Data does not match schema {self.name}", errors=errors, original_error=e
            ) from e

    def to_item(self, value: T) -> Dict[str, Any]:
        return self._adapter.dump_python(value, exclude_none=self.exclude_none)

    def __repr__(self) -> str:
        return f"PydanticSchema({self.name})"


def as_schema(schema: Any) -> Schema:
    """Return ``schema`` unchanged if it already is a Schema, else wrap it in PydanticSchema."""
    if isinstance(schema, Schema):
        return schema
    return PydanticSchema(schema)
