"""Model graph: the declarative input describing fakeable models.

This module provides:
- ModelDescriptor: where a model class is stored
- Relationship variants, discriminated by ``kind``
- ModelGraph: immutable collection of models and relationships
- ModelGraphBuilder: fluent construction helper

Only OneToManyRelationship can be faked. The other kinds can be declared,
but a ModelFaker refuses to start for a graph containing them.

Example:
    >>> graph = (
    ...     ModelGraphBuilder()
    ...     .model(Building, table="buildings")
    ...     .model(Room, table="rooms")
    ...     .one_to_many(Room, references=Building, by="building_id")
    ...     .build()
    ... )
    >>> [m.table for m in graph.visit_models()]
    ['buildings', 'rooms']
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from floe_faker.errors import ModelGraphError


class ModelDescriptor(BaseModel):
    """Storage metadata for one model class.

    Attributes:
        model_class: The pydantic model class.
        table: Table rows of this model are inserted into.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    model_class: type[BaseModel]
    table: str = Field(..., min_length=1, description="Storage table name")


class OneToManyRelationship(BaseModel):
    """Many ``model`` records reference one ``referenced_model`` record.

    ``model`` owns ``linked_by_column``, which the faker never fills.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["one_to_many"] = "one_to_many"
    model: type[BaseModel]
    referenced_model: type[BaseModel]
    linked_by_column: str = Field(..., min_length=1)

    def endpoints(self) -> tuple[type[BaseModel], ...]:
        return (self.model, self.referenced_model)


class OneToOneRelationship(BaseModel):
    """At most one ``model`` record references a ``referenced_model`` record."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["one_to_one"] = "one_to_one"
    model: type[BaseModel]
    referenced_model: type[BaseModel]
    linked_by_column: str = Field(..., min_length=1)

    def endpoints(self) -> tuple[type[BaseModel], ...]:
        return (self.model, self.referenced_model)


class RecursiveModelRelationship(BaseModel):
    """Records of ``model`` reference other records of the same model."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["recursive"] = "recursive"
    model: type[BaseModel]
    parent_column: str = Field(..., min_length=1)

    def endpoints(self) -> tuple[type[BaseModel], ...]:
        return (self.model,)


class ManyToManyRelationship(BaseModel):
    """``model`` and ``referenced_model`` are linked through ``join_model``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["many_to_many"] = "many_to_many"
    model: type[BaseModel]
    referenced_model: type[BaseModel]
    join_model: type[BaseModel]

    def endpoints(self) -> tuple[type[BaseModel], ...]:
        return (self.model, self.referenced_model, self.join_model)


class PolymorphicRelationship(BaseModel):
    """``model`` references a record of one of ``candidates``.

    The referenced model is named by ``type_column`` and its key is stored
    in ``id_column``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["polymorphic"] = "polymorphic"
    model: type[BaseModel]
    candidates: tuple[type[BaseModel], ...] = Field(..., min_length=1)
    type_column: str = Field(..., min_length=1)
    id_column: str = Field(..., min_length=1)

    def endpoints(self) -> tuple[type[BaseModel], ...]:
        return (self.model, *self.candidates)


Relationship = Annotated[
    Union[
        OneToManyRelationship,
        OneToOneRelationship,
        RecursiveModelRelationship,
        ManyToManyRelationship,
        PolymorphicRelationship,
    ],
    Field(discriminator="kind"),
]


class ModelGraph(BaseModel):
    """Immutable set of declared models and the relationships between them.

    Raises:
        ModelGraphError: On construction, if a model class is declared twice
            or a relationship refers to an undeclared model class.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    models: tuple[ModelDescriptor, ...] = ()
    relationships: tuple[Relationship, ...] = ()

    @model_validator(mode="after")
    def check_declarations(self) -> ModelGraph:
        """Reject duplicate models and dangling relationship endpoints."""
        declared: set[type[BaseModel]] = set()
        for descriptor in self.models:
            if descriptor.model_class in declared:
                raise ModelGraphError(
                    "Model declared more than once", model=descriptor.model_class
                )
            declared.add(descriptor.model_class)

        for relationship in self.relationships:
            for endpoint in relationship.endpoints():
                if endpoint not in declared:
                    raise ModelGraphError(
                        f"Relationship {relationship.kind} refers to an undeclared model",
                        model=endpoint,
                    )
        return self

    def visit_models(self) -> Iterator[ModelDescriptor]:
        """Yield every declared model once."""
        yield from self.models

    def visit_relationships(self) -> Iterator[Relationship]:
        """Yield every declared relationship once."""
        yield from self.relationships


class ModelGraphBuilder:
    """Fluent helper for assembling a ModelGraph."""

    def __init__(self) -> None:
        self._models: list[ModelDescriptor] = []
        self._relationships: list[Relationship] = []

    def model(
        self,
        model_class: type[BaseModel],
        *,
        table: str,
    ) -> ModelGraphBuilder:
        """Declare a model class stored in ``table``."""
        self._models.append(ModelDescriptor(model_class=model_class, table=table))
        return self

    def one_to_many(
        self,
        model_class: type[BaseModel],
        *,
        references: type[BaseModel],
        by: str,
    ) -> ModelGraphBuilder:
        """Declare that ``model_class`` references ``references`` via column ``by``."""
        self._relationships.append(
            OneToManyRelationship(
                model=model_class,
                referenced_model=references,
                linked_by_column=by,
            )
        )
        return self

    def relationship(self, relationship: Relationship) -> ModelGraphBuilder:
        """Declare a relationship of any kind."""
        self._relationships.append(relationship)
        return self

    def build(self) -> ModelGraph:
        return ModelGraph(
            models=tuple(self._models),
            relationships=tuple(self._relationships),
        )
