"""Persisted fake model instances for integration tests.

This package builds instances of models declared in a model graph, fills
every column with a type-correct placeholder value, leaves columns owned by
relationships untouched, and returns the object as read back from a store.

Key Components:
- engine: ModelFaker and ModelBuilder
- graph: ModelGraph, ModelDescriptor and relationship kinds
- generators: GeneratorRegistry and fixed-width numeric types
- schema: Column markers on pydantic models
- mapping: row mapping between objects and stores
- stores: RecordStore protocol and the PyArrow-backed InMemoryStore

Example:
    >>> from typing import Annotated
    >>> from pydantic import BaseModel
    >>> from floe_faker import Column, InMemoryStore, ModelFaker, ModelGraphBuilder
    >>>
    >>> class Room(BaseModel):
    ...     id: Annotated[int, Column("_id")] = 0
    ...     name: Annotated[str | None, Column("name")] = None
    >>>
    >>> graph = ModelGraphBuilder().model(Room, table="rooms").build()
    >>> room = ModelFaker(graph).build(Room, InMemoryStore())
    >>> room.id != 0 and room.name is not None
    True
"""

from __future__ import annotations

__version__ = "0.1.0"

from floe_faker.config import FakerSettings
from floe_faker.engine import ModelBuilder, ModelFaker
from floe_faker.errors import (
    FieldAssignmentError,
    FloeFakerError,
    InstantiationError,
    MissingGeneratorError,
    ModelGraphError,
    PersistenceEmptyResultError,
    UnknownModelError,
    UnsupportedRelationshipError,
)
from floe_faker.generators import (
    Float32,
    Float64,
    GeneratorRegistry,
    Int16,
    Int32,
    Int64,
)
from floe_faker.graph import (
    ManyToManyRelationship,
    ModelDescriptor,
    ModelGraph,
    ModelGraphBuilder,
    OneToManyRelationship,
    OneToOneRelationship,
    PolymorphicRelationship,
    RecursiveModelRelationship,
)
from floe_faker.mapping import ColumnMapper, RowMapper
from floe_faker.schema import Column, FieldDescriptor, describe
from floe_faker.stores import InMemoryStore, RecordLocator, RecordStore

__all__ = [
    # Engine
    "ModelFaker",
    "ModelBuilder",
    # Graph
    "ModelGraph",
    "ModelGraphBuilder",
    "ModelDescriptor",
    "OneToManyRelationship",
    "OneToOneRelationship",
    "RecursiveModelRelationship",
    "ManyToManyRelationship",
    "PolymorphicRelationship",
    # Generators
    "GeneratorRegistry",
    "Int16",
    "Int32",
    "Int64",
    "Float32",
    "Float64",
    # Schema and mapping
    "Column",
    "FieldDescriptor",
    "describe",
    "RowMapper",
    "ColumnMapper",
    # Stores
    "RecordStore",
    "RecordLocator",
    "InMemoryStore",
    # Configuration
    "FakerSettings",
    # Exceptions
    "FloeFakerError",
    "ModelGraphError",
    "UnknownModelError",
    "UnsupportedRelationshipError",
    "InstantiationError",
    "MissingGeneratorError",
    "FieldAssignmentError",
    "PersistenceEmptyResultError",
]
