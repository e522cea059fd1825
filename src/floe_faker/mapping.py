"""Mapping between model instances and storage rows.

A row is a plain mapping of column name to value. The default ColumnMapper
uses the Column markers declared on the model class (see floe_faker.schema).
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel

from floe_faker.schema import columns_of, describe

ModelT = TypeVar("ModelT", bound=BaseModel)


class RowMapper(Protocol):
    """Converts model instances to rows and back."""

    def to_row(self, instance: BaseModel) -> dict[str, Any]: ...

    def from_row(self, row: Mapping[str, Any], model_class: type[ModelT]) -> ModelT: ...

    def projection_for(self, model_class: type[BaseModel]) -> list[str]: ...


def _to_storage(value: Any) -> Any:
    """Convert values that storage backends cannot hold natively."""
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


class ColumnMapper:
    """RowMapper driven by Column markers.

    Example:
        >>> mapper = ColumnMapper()
        >>> mapper.to_row(Room(id=1, name="lab"))
        {'_id': 1, 'name': 'lab'}
        >>> mapper.from_row({"_id": 1, "name": "lab"}, Room)
        Room(id=1, name='lab')
    """

    def to_row(self, instance: BaseModel) -> dict[str, Any]:
        """Return the column values of an instance, untagged fields excluded."""
        return {
            descriptor.column: _to_storage(getattr(instance, descriptor.name))
            for descriptor in describe(type(instance))
        }

    def from_row(self, row: Mapping[str, Any], model_class: type[ModelT]) -> ModelT:
        """Build an instance from a row.

        Columns the model does not declare are ignored. Declared columns
        missing from the row keep their field defaults. Values are validated
        (and coerced) by the model.
        """
        values = {
            descriptor.name: row[descriptor.column]
            for descriptor in describe(model_class)
            if descriptor.column in row
        }
        return model_class.model_validate(values)

    def projection_for(self, model_class: type[BaseModel]) -> list[str]:
        """Return the columns to read back, in declaration order."""
        return columns_of(model_class)
