"""ModelFaker: builds persisted fake instances of graph models.

A build runs, in order:
1. resolve the class in the model registry (UnknownModelError)
2. instantiate a blank object (InstantiationError)
3. collect the columns owned by relationships
4. generate every other tagged field (MissingGeneratorError,
   FieldAssignmentError)
5. map the object to a row
6. insert the row
7. read it back by locator
8. fail if nothing came back (PersistenceEmptyResultError)
9. map the row back to an object

Steps 1-4 touch no store, so a failure there leaves nothing persisted.

Example:
    >>> faker = ModelFaker(graph, generators=GeneratorRegistry(seed=42))
    >>> store = InMemoryStore()
    >>> room = faker.i_need(Room).into(store)
    >>> room.id
    1
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from floe_faker.config import FakerSettings
from floe_faker.errors import (
    FieldAssignmentError,
    FloeFakerError,
    InstantiationError,
    MissingGeneratorError,
    PersistenceEmptyResultError,
)
from floe_faker.generators import GeneratorRegistry
from floe_faker.graph import ModelDescriptor, ModelGraph
from floe_faker.mapping import ColumnMapper, RowMapper
from floe_faker.observability import get_logger
from floe_faker.registry import ModelRegistry
from floe_faker.relationships import DependencyIndex
from floe_faker.schema import describe
from floe_faker.stores import RecordStore

ModelT = TypeVar("ModelT", bound=BaseModel)


class ModelBuilder(Generic[ModelT]):
    """Builds instances of one resolved model class.

    Obtained from ModelFaker.i_need; the class has already been resolved,
    so UnknownModelError cannot occur past this point. A builder keeps no
    state between builds.
    """

    def __init__(
        self,
        model_class: type[ModelT],
        descriptor: ModelDescriptor,
        *,
        dependency_columns: frozenset[str],
        generators: GeneratorRegistry,
        mapper: RowMapper,
    ) -> None:
        self._model_class = model_class
        self._descriptor = descriptor
        self._dependency_columns = dependency_columns
        self._generators = generators
        self._mapper = mapper
        self._log = get_logger().bind(model=model_class.__name__, table=descriptor.table)

    @property
    def model_class(self) -> type[ModelT]:
        return self._model_class

    @property
    def descriptor(self) -> ModelDescriptor:
        return self._descriptor

    def related_to(self, parent: Any) -> ModelBuilder[ModelT]:
        """Reserved hook for relating the built object to a parent record.

        Currently inert: the parent is not inspected and no column is set.
        Dependency columns keep their field defaults either way.
        """
        # TODO: set the linking column from the Dependency whose
        # referenced_model is type(parent)
        self._log.debug("related_to_ignored", parent=type(parent).__name__)
        return self

    def fake(self) -> ModelT:
        """Return a populated instance without persisting it."""
        try:
            instance = self._model_class()
        except Exception as exc:
            raise InstantiationError(self._model_class, cause=str(exc)) from exc

        generated = 0
        for field in describe(self._model_class):
            if field.column in self._dependency_columns:
                continue

            generator = self._generators.generator_for(field.value_type)
            if generator is None:
                raise MissingGeneratorError(
                    field.value_type,
                    model=self._model_class,
                    field=field.name,
                )

            value = generator(self._generators.fake)
            try:
                setattr(instance, field.name, value)
            except (AttributeError, TypeError, ValueError) as exc:
                raise FieldAssignmentError(
                    self._model_class,
                    field.name,
                    cause=str(exc),
                ) from exc
            generated += 1

        self._log.debug("fake_generated", fields=generated)
        return instance

    def into(self, store: RecordStore) -> ModelT:
        """Persist a fake instance and return it as read back from the store.

        Args:
            store: Store the row is inserted into and read back from.

        Returns:
            Instance mapped from the stored row, including any
            store-assigned values such as the key.

        Raises:
            InstantiationError: The blank object could not be created.
            MissingGeneratorError: A tagged field has no generator.
            FieldAssignmentError: A generated value was rejected.
            PersistenceEmptyResultError: The read-back returned no row.
        """
        try:
            instance = self.fake()
            row = self._mapper.to_row(instance)

            locator = store.insert(self._descriptor.table, row)
            self._log.info("record_inserted", key=locator.key)

            stored = store.query(locator, self._mapper.projection_for(self._model_class))
            if not stored:
                raise PersistenceEmptyResultError(
                    self._model_class,
                    table=locator.table,
                    key=locator.key,
                )
        except FloeFakerError as e:
            self._log.warning("build_failed", error=type(e).__name__, reason=str(e))
            raise

        self._log.debug("record_read_back", key=locator.key)
        return self._mapper.from_row(stored, self._model_class)


class ModelFaker:
    """Creates persisted fake instances of the models in a graph.

    The model registry and dependency index are built once, here, and are
    read-only afterwards.

    Raises:
        UnsupportedRelationshipError: If the graph declares a relationship
            kind other than one-to-many.
        MissingGeneratorError: If eager validation is enabled and a model
            has a field without a generator.

    Example:
        >>> faker = ModelFaker(graph)
        >>> room = faker.build(Room, InMemoryStore())
    """

    def __init__(
        self,
        graph: ModelGraph,
        *,
        mapper: RowMapper | None = None,
        generators: GeneratorRegistry | None = None,
        settings: FakerSettings | None = None,
    ) -> None:
        """Initialize the faker.

        Args:
            graph: Model graph describing the fakeable models.
            mapper: Row mapper (default: ColumnMapper).
            generators: Generator registry (default: built-in generators
                seeded from settings).
            settings: Runtime settings (default: loaded from environment).
        """
        self._settings = settings or FakerSettings()
        self._mapper: RowMapper = mapper or ColumnMapper()
        self._generators = generators or GeneratorRegistry(settings=self._settings)
        self._models = ModelRegistry.from_graph(graph)
        self._dependencies = DependencyIndex.from_graph(graph)

        get_logger().info(
            "faker_initialized",
            models=len(self._models),
            dependencies=len(self._dependencies),
            seed=self._generators.seed,
        )

        if self._settings.eager_validation:
            self.validate()

    @property
    def models(self) -> ModelRegistry:
        return self._models

    @property
    def dependencies(self) -> DependencyIndex:
        return self._dependencies

    @property
    def generators(self) -> GeneratorRegistry:
        return self._generators

    def validate(self) -> None:
        """Check that every generated field of every model has a generator.

        Raises:
            MissingGeneratorError: For the first field without a generator.
        """
        for model_class in self._models.models:
            owned = self._dependencies.dependencies_of(model_class)
            for field in describe(model_class):
                if field.column in owned:
                    continue
                if self._generators.generator_for(field.value_type) is None:
                    raise MissingGeneratorError(
                        field.value_type,
                        model=model_class,
                        field=field.name,
                    )

    def i_need(self, model_class: type[ModelT]) -> ModelBuilder[ModelT]:
        """Return a builder for a model class.

        Raises:
            UnknownModelError: If the class is not declared in the graph.
        """
        descriptor = self._models.resolve(model_class)
        get_logger().debug("model_resolved", model=model_class.__name__, table=descriptor.table)
        return ModelBuilder(
            model_class,
            descriptor,
            dependency_columns=self._dependencies.dependencies_of(model_class),
            generators=self._generators,
            mapper=self._mapper,
        )

    def build(self, model_class: type[ModelT], store: RecordStore) -> ModelT:
        """Build and persist one instance of a model class."""
        return self.i_need(model_class).into(store)

    def build_many(
        self,
        model_class: type[ModelT],
        store: RecordStore,
        count: int,
    ) -> list[ModelT]:
        """Build and persist ``count`` independent instances."""
        if count < 0:
            msg = f"count must be >= 0, got {count}"
            raise ValueError(msg)
        builder = self.i_need(model_class)
        return [builder.into(store) for _ in range(count)]
