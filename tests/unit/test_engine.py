"""Unit tests for ModelFaker and ModelBuilder.

Tests cover:
- Rejection of classes outside the model graph before any store call
- Relationship-owned columns never receiving generated values
- Every other column receiving a non-default value
- Read-after-write: the returned object is the stored row
- Independent instances per build
- Unsupported relationship kinds failing at construction
- Each failure kind of a build
"""

from __future__ import annotations

from datetime import datetime

import pytest

from floe_faker import (
    FakerSettings,
    FieldAssignmentError,
    FloeFakerError,
    GeneratorRegistry,
    InMemoryStore,
    InstantiationError,
    ManyToManyRelationship,
    MissingGeneratorError,
    ModelFaker,
    ModelGraph,
    ModelGraphBuilder,
    OneToOneRelationship,
    PersistenceEmptyResultError,
    PolymorphicRelationship,
    RecursiveModelRelationship,
    UnknownModelError,
    UnsupportedRelationshipError,
)
from floe_faker.graph import Relationship
from tests.doubles import RecordingStore
from tests.models import (
    Badge,
    Building,
    ClassOutsideOfTheModelGraph,
    Color,
    Desk,
    Lamp,
    Plaque,
    Room,
    Sensor,
)

pytestmark = pytest.mark.unit


class PlainClass:
    pass


class TestUnknownModels:
    """Classes outside the graph are rejected before any side effect."""

    def test_i_need_rejects_class_outside_graph(self, faker: ModelFaker) -> None:
        with pytest.raises(UnknownModelError) as exc_info:
            faker.i_need(ClassOutsideOfTheModelGraph)

        assert exc_info.value.model is ClassOutsideOfTheModelGraph
        assert "ClassOutsideOfTheModelGraph" in str(exc_info.value)

    def test_build_rejects_class_outside_graph_without_store_calls(
        self,
        faker: ModelFaker,
        recording_store: RecordingStore,
    ) -> None:
        with pytest.raises(UnknownModelError):
            faker.build(ClassOutsideOfTheModelGraph, recording_store)

        assert recording_store.calls == 0

    def test_rejects_non_model_class(self, faker: ModelFaker) -> None:
        with pytest.raises(UnknownModelError):
            faker.i_need(PlainClass)  # type: ignore[type-var]

    def test_unknown_model_is_distinguishable(self, faker: ModelFaker) -> None:
        """UnknownModelError is its own kind and also a LookupError."""
        with pytest.raises(LookupError):
            faker.i_need(ClassOutsideOfTheModelGraph)

        assert not issubclass(UnknownModelError, InstantiationError)
        assert not issubclass(UnknownModelError, PersistenceEmptyResultError)


class TestSimpleObject:
    """Models without relationships."""

    def test_should_create_simple_object(self, faker: ModelFaker, store: InMemoryStore) -> None:
        room = faker.build(Room, store)

        assert isinstance(room, Room)
        assert room.id != 0
        assert room.name is not None
        assert room.name != ""

    def test_returned_object_is_the_stored_row(
        self,
        faker: ModelFaker,
        store: InMemoryStore,
    ) -> None:
        room = faker.build(Room, store)

        stored = store.table("rooms")
        assert stored is not None
        assert stored.to_pylist() == [{"_id": room.id, "name": room.name}]

    def test_store_assigned_key_replaces_generated_key(
        self,
        faker: ModelFaker,
        store: InMemoryStore,
    ) -> None:
        """The id comes from the store's read-back, not the generated value."""
        first = faker.build(Room, store)
        second = faker.build(Room, store)

        assert (first.id, second.id) == (1, 2)

    def test_fake_returns_unsaved_populated_instance(self, faker: ModelFaker) -> None:
        room = faker.i_need(Room).fake()

        assert room.id != 0
        assert room.name

    def test_read_back_uses_model_projection(
        self,
        faker: ModelFaker,
    ) -> None:
        store = RecordingStore(query_result={"_id": 99, "name": "from-store"})

        room = faker.build(Room, store)

        assert room == Room(id=99, name="from-store")
        (locator, projection) = store.queries[0]
        assert locator.table == "rooms"
        assert locator.key == 1
        assert projection == ["_id", "name"]


class TestDependencyColumns:
    """Columns owned by one-to-many relationships are never generated."""

    def test_owned_columns_keep_defaults(self, faker: ModelFaker, store: InMemoryStore) -> None:
        desk = faker.build(Desk, store)

        assert desk.room_id == 0
        assert desk.building_id is None
        assert desk.label

    def test_owned_columns_stored_as_sent(
        self,
        faker: ModelFaker,
        store: InMemoryStore,
    ) -> None:
        desks = faker.build_many(Desk, store, 10)

        stored = store.table("desks")
        assert stored is not None
        assert stored.column("room_id").to_pylist() == [0] * 10
        assert stored.column("building_id").to_pylist() == [None] * 10
        assert [d.room_id for d in desks] == stored.column("room_id").to_pylist()

    def test_owned_columns_not_generated_before_insert(
        self,
        faker: ModelFaker,
        recording_store: RecordingStore,
    ) -> None:
        with pytest.raises(PersistenceEmptyResultError):
            faker.build(Sensor, recording_store)

        (table, row) = recording_store.inserts[0]
        assert table == "sensors"
        assert row["desk_id"] == 0


class TestTotalCoverage:
    """Every tagged, non-owned field receives a non-default value."""

    def test_every_scalar_kind_is_generated(
        self,
        faker: ModelFaker,
        store: InMemoryStore,
    ) -> None:
        sensor = faker.build(Sensor, store)

        assert sensor.id == 1
        assert sensor.serial
        assert 1 <= sensor.channel <= 2**15 - 1
        assert sensor.reading_count is not None
        assert 1 <= sensor.reading_count <= 2**31 - 1
        assert sensor.active is True
        assert sensor.gain > 0
        assert sensor.offset is not None
        assert sensor.offset > 0
        assert sensor.ratio > 0

    def test_inherited_fields_are_generated(self, faker: ModelFaker, store: InMemoryStore) -> None:
        sensor = faker.build(Sensor, store)

        assert isinstance(sensor.created_at, datetime)

    def test_untagged_fields_are_ignored(self, faker: ModelFaker) -> None:
        sensor = faker.i_need(Sensor).fake()

        assert sensor.notes == ""


class TestIndependentBuilds:
    def test_two_builds_produce_independent_instances(
        self,
        faker: ModelFaker,
        store: InMemoryStore,
    ) -> None:
        first = faker.build(Room, store)
        second = faker.build(Room, store)

        assert first is not second
        assert first.name != second.name

    def test_builder_can_be_reused(self, faker: ModelFaker, store: InMemoryStore) -> None:
        builder = faker.i_need(Building)

        buildings = [builder.into(store) for _ in range(3)]

        assert [b.id for b in buildings] == [1, 2, 3]
        assert len({b.name for b in buildings}) == 3

    def test_same_seed_reproduces_values(self, graph: ModelGraph) -> None:
        first = ModelFaker(graph, generators=GeneratorRegistry(seed=7)).i_need(Room).fake()
        second = ModelFaker(graph, generators=GeneratorRegistry(seed=7)).i_need(Room).fake()

        assert first == second

    def test_build_many(self, faker: ModelFaker, store: InMemoryStore) -> None:
        rooms = faker.build_many(Room, store, 3)

        assert [r.id for r in rooms] == [1, 2, 3]
        assert store.count("rooms") == 3

    def test_build_many_rejects_negative_count(
        self,
        faker: ModelFaker,
        store: InMemoryStore,
    ) -> None:
        with pytest.raises(ValueError, match="count"):
            faker.build_many(Room, store, -1)


class TestUnsupportedRelationships:
    @pytest.mark.parametrize(
        ("relationship", "kind"),
        [
            (
                OneToOneRelationship(model=Desk, referenced_model=Room, linked_by_column="room_id"),
                "one_to_one",
            ),
            (RecursiveModelRelationship(model=Room, parent_column="parent_id"), "recursive"),
            (
                ManyToManyRelationship(model=Room, referenced_model=Building, join_model=Desk),
                "many_to_many",
            ),
            (
                PolymorphicRelationship(
                    model=Desk,
                    candidates=(Room, Building),
                    type_column="owner_type",
                    id_column="owner_id",
                ),
                "polymorphic",
            ),
        ],
    )
    def test_faker_cannot_be_constructed(self, relationship: Relationship, kind: str) -> None:
        graph = (
            ModelGraphBuilder()
            .model(Building, table="buildings")
            .model(Room, table="rooms")
            .model(Desk, table="desks")
            .relationship(relationship)
            .build()
        )

        with pytest.raises(UnsupportedRelationshipError) as exc_info:
            ModelFaker(graph)

        assert exc_info.value.kind == kind
        assert isinstance(exc_info.value, NotImplementedError)


class TestBuildFailures:
    def test_instantiation_failure(self, recording_store: RecordingStore) -> None:
        faker = ModelFaker(ModelGraphBuilder().model(Badge, table="badges").build())

        with pytest.raises(InstantiationError) as exc_info:
            faker.build(Badge, recording_store)

        assert exc_info.value.model is Badge
        assert exc_info.value.__cause__ is not None
        assert recording_store.calls == 0

    def test_missing_generator_names_the_type(self, recording_store: RecordingStore) -> None:
        faker = ModelFaker(ModelGraphBuilder().model(Lamp, table="lamps").build())

        with pytest.raises(MissingGeneratorError) as exc_info:
            faker.build(Lamp, recording_store)

        assert exc_info.value.field_type is Color
        assert exc_info.value.field == "color"
        assert "Color" in str(exc_info.value)
        assert recording_store.calls == 0

    def test_custom_generator_fills_the_gap(self) -> None:
        generators = GeneratorRegistry(seed=1).with_generator(Color, lambda fake: Color.BLUE)
        faker = ModelFaker(
            ModelGraphBuilder().model(Lamp, table="lamps").build(),
            generators=generators,
        )

        lamp = faker.i_need(Lamp).fake()

        assert lamp.color is Color.BLUE

    def test_field_assignment_failure(self, recording_store: RecordingStore) -> None:
        faker = ModelFaker(ModelGraphBuilder().model(Plaque, table="plaques").build())

        with pytest.raises(FieldAssignmentError) as exc_info:
            faker.build(Plaque, recording_store)

        assert exc_info.value.field == "id"
        assert recording_store.calls == 0

    def test_generator_errors_are_not_assignment_errors(
        self, recording_store: RecordingStore
    ) -> None:
        def broken(fake: object) -> Color:
            msg = "palette exhausted"
            raise ValueError(msg)

        faker = ModelFaker(
            ModelGraphBuilder().model(Lamp, table="lamps").build(),
            generators=GeneratorRegistry(seed=1).with_generator(Color, broken),
        )

        with pytest.raises(ValueError, match="palette exhausted") as exc_info:
            faker.build(Lamp, recording_store)

        assert not isinstance(exc_info.value, FieldAssignmentError)
        assert recording_store.calls == 0

    @pytest.mark.parametrize("query_result", [None, {}])
    def test_empty_read_back(self, faker: ModelFaker, query_result: dict | None) -> None:
        store = RecordingStore(query_result=query_result)

        with pytest.raises(PersistenceEmptyResultError) as exc_info:
            faker.build(Room, store)

        assert exc_info.value.table == "rooms"
        assert exc_info.value.key == 1
        assert len(store.inserts) == 1

    def test_store_errors_propagate_unwrapped(self, faker: ModelFaker) -> None:
        store = RecordingStore(fail_insert=True)

        with pytest.raises(RuntimeError, match="rejected"):
            faker.build(Room, store)

    def test_all_build_errors_share_a_base(self) -> None:
        for error in (
            UnknownModelError,
            UnsupportedRelationshipError,
            InstantiationError,
            MissingGeneratorError,
            FieldAssignmentError,
            PersistenceEmptyResultError,
        ):
            assert issubclass(error, FloeFakerError)

    def test_failed_build_is_logged(
        self,
        faker: ModelFaker,
        recording_store: RecordingStore,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with pytest.raises(PersistenceEmptyResultError):
            faker.build(Room, recording_store)

        assert "build_failed" in capsys.readouterr().out


class TestRelatedTo:
    def test_related_to_returns_same_builder(self, faker: ModelFaker) -> None:
        builder = faker.i_need(Desk)

        assert builder.related_to(Room(id=5, name="lab")) is builder

    def test_related_to_has_no_effect(self, faker: ModelFaker, store: InMemoryStore) -> None:
        room = faker.build(Room, store)

        desk = faker.i_need(Desk).related_to(room).into(store)

        assert desk.room_id == 0


class TestEagerValidation:
    def test_missing_generator_detected_at_construction(self) -> None:
        graph = ModelGraphBuilder().model(Room, table="rooms").model(Lamp, table="lamps").build()

        with pytest.raises(MissingGeneratorError):
            ModelFaker(graph, settings=FakerSettings(eager_validation=True))

    def test_lazy_by_default(self) -> None:
        graph = ModelGraphBuilder().model(Lamp, table="lamps").build()

        faker = ModelFaker(graph, settings=FakerSettings())

        assert Lamp in faker.models

    def test_owned_columns_are_not_validated(self) -> None:
        """A column owned by a relationship needs no generator."""
        graph = (
            ModelGraphBuilder()
            .model(Room, table="rooms")
            .model(Lamp, table="lamps")
            .one_to_many(Lamp, references=Room, by="color")
            .build()
        )

        faker = ModelFaker(graph, settings=FakerSettings(eager_validation=True))

        assert faker.i_need(Lamp).fake().color is None

    def test_validate_passes_for_office_graph(self, faker: ModelFaker) -> None:
        faker.validate()
