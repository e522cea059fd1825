"""Model registry: resolves model classes to their descriptors."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel

from floe_faker.errors import UnknownModelError
from floe_faker.graph import ModelDescriptor, ModelGraph


class ModelRegistry:
    """Read-only index of the models declared in a graph.

    Example:
        >>> registry = ModelRegistry.from_graph(graph)
        >>> registry.resolve(Room).table
        'rooms'
    """

    def __init__(self, models: Mapping[type[BaseModel], ModelDescriptor]) -> None:
        self._models = MappingProxyType(dict(models))

    @classmethod
    def from_graph(cls, graph: ModelGraph) -> ModelRegistry:
        """Index every model of the graph by its class."""
        return cls({descriptor.model_class: descriptor for descriptor in graph.visit_models()})

    @property
    def models(self) -> Mapping[type[BaseModel], ModelDescriptor]:
        return self._models

    def __contains__(self, model_class: object) -> bool:
        return model_class in self._models

    def __len__(self) -> int:
        return len(self._models)

    def resolve(self, model_class: type) -> ModelDescriptor:
        """Return the descriptor of a model class.

        Raises:
            UnknownModelError: If the class was never declared in the graph.
        """
        try:
            return self._models[model_class]
        except KeyError:
            raise UnknownModelError(model_class) from None
