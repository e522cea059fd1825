"""Dependency index: which columns of a model are owned by relationships.

A column owned by a relationship references another record and must never
receive a generated placeholder value.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import assert_never

from pydantic import BaseModel

from floe_faker.errors import UnsupportedRelationshipError
from floe_faker.graph import (
    ManyToManyRelationship,
    ModelGraph,
    OneToManyRelationship,
    OneToOneRelationship,
    PolymorphicRelationship,
    RecursiveModelRelationship,
)


@dataclass(frozen=True)
class Dependency:
    """Columns of ``model`` that reference a ``referenced_model`` record."""

    model: type[BaseModel]
    referenced_model: type[BaseModel]
    columns: tuple[str, ...]


class DependencyIndex:
    """Multimap from model class to the dependencies it owns.

    Built once from a graph; read-only afterwards.

    Raises:
        UnsupportedRelationshipError: From from_graph, if the graph declares
            a relationship kind other than one-to-many.

    Example:
        >>> index = DependencyIndex.from_graph(graph)
        >>> index.dependencies_of(Room)
        frozenset({'building_id'})
    """

    def __init__(self, dependencies: Mapping[type[BaseModel], tuple[Dependency, ...]]) -> None:
        self._dependencies = MappingProxyType(dict(dependencies))

    @classmethod
    def from_graph(cls, graph: ModelGraph) -> DependencyIndex:
        """Visit every relationship once and register owned columns."""
        dependencies: defaultdict[type[BaseModel], list[Dependency]] = defaultdict(list)

        for relationship in graph.visit_relationships():
            match relationship:
                case OneToManyRelationship():
                    dependencies[relationship.model].append(
                        Dependency(
                            model=relationship.model,
                            referenced_model=relationship.referenced_model,
                            columns=(relationship.linked_by_column,),
                        )
                    )
                case OneToOneRelationship():
                    raise UnsupportedRelationshipError("one_to_one", model=relationship.model)
                case RecursiveModelRelationship():
                    raise UnsupportedRelationshipError("recursive", model=relationship.model)
                case ManyToManyRelationship():
                    raise UnsupportedRelationshipError("many_to_many", model=relationship.model)
                case PolymorphicRelationship():
                    raise UnsupportedRelationshipError("polymorphic", model=relationship.model)
                case _:
                    assert_never(relationship)

        return cls({model: tuple(deps) for model, deps in dependencies.items()})

    def __len__(self) -> int:
        return sum(len(deps) for deps in self._dependencies.values())

    def dependencies_for(self, model_class: type) -> tuple[Dependency, ...]:
        """Return every dependency owned by a model class."""
        return self._dependencies.get(model_class, ())

    def dependencies_of(self, model_class: type) -> frozenset[str]:
        """Return the set of columns owned by relationships."""
        return frozenset(
            column
            for dependency in self.dependencies_for(model_class)
            for column in dependency.columns
        )
