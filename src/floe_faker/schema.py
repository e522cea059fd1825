"""Column declarations and field descriptors for fakeable models.

Model classes are pydantic models whose persisted fields carry a Column
marker in their annotation. Only tagged fields are generated, mapped to rows,
and read back; untagged fields are ignored.

Example:
    >>> from typing import Annotated
    >>> from pydantic import BaseModel
    >>>
    >>> class Room(BaseModel):
    ...     id: Annotated[int, Column("_id")] = 0
    ...     name: Annotated[str | None, Column("name")] = None
    ...     draft: bool = False  # not persisted
    >>>
    >>> [f.column for f in describe(Room)]
    ['_id', 'name']
"""

from __future__ import annotations

import types
from dataclasses import dataclass
from functools import cache
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel


@dataclass(frozen=True)
class Column:
    """Marks a model field as persisted under the given column name."""

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            msg = "Column name must not be empty"
            raise ValueError(msg)


@dataclass(frozen=True)
class FieldDescriptor:
    """A column-tagged field of a model class.

    Attributes:
        name: Attribute name on the model.
        column: Storage column name.
        value_type: Declared type with Optional unwrapped.
        nullable: True if the declared type admits None.
    """

    name: str
    column: str
    value_type: Any
    nullable: bool = False


def unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Strip None from an Optional/union annotation.

    Args:
        annotation: Declared field annotation.

    Returns:
        Tuple of (inner type, nullable). Unions of more than one non-None
        member are returned unchanged.
    """
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        nullable = len(args) != len(get_args(annotation))
        if len(args) == 1:
            return args[0], nullable
        return annotation, nullable
    return annotation, False


def _split_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    if get_origin(annotation) is Annotated:
        inner, *metadata = get_args(annotation)
        return inner, tuple(metadata)
    return annotation, ()


@cache
def describe(model_class: type[BaseModel]) -> tuple[FieldDescriptor, ...]:
    """Return the column-tagged fields of a model class.

    Inherited fields are included, in pydantic's field order. The marker
    may sit on the whole annotation or on the non-None member of an
    Optional. The result is computed once per class.

    Args:
        model_class: A pydantic model class.

    Returns:
        Tuple of FieldDescriptor, one per tagged field.

    Raises:
        TypeError: If model_class is not a pydantic model.
    """
    if not (isinstance(model_class, type) and issubclass(model_class, BaseModel)):
        msg = f"{model_class!r} is not a pydantic model class"
        raise TypeError(msg)

    descriptors: list[FieldDescriptor] = []
    for name, info in model_class.model_fields.items():
        # Annotated[T, Column(...)] | None keeps its metadata inside the union
        value_type, nullable = unwrap_optional(info.annotation)
        value_type, inner_metadata = _split_annotated(value_type)
        markers = (*info.metadata, *inner_metadata)
        column = next((m for m in markers if isinstance(m, Column)), None)
        if column is None:
            continue
        descriptors.append(
            FieldDescriptor(
                name=name,
                column=column.name,
                value_type=value_type,
                nullable=nullable,
            )
        )
    return tuple(descriptors)


def columns_of(model_class: type[BaseModel]) -> list[str]:
    """Return the column names of a model class in declaration order."""
    return [descriptor.column for descriptor in describe(model_class)]
