"""Placeholder value generators keyed by field type.

Every default generator returns a value that differs from the zero value of
its type (0, 0.0, "", False, ...), so tests can tell whether a field was
touched by the faker.

Fixed-width numeric columns are declared with the NewTypes below; plain
``int`` and ``float`` fields use the 32-bit and 64-bit generators.

Example:
    >>> registry = GeneratorRegistry(seed=42)
    >>> registry.generate(Int16) > 0
    True
    >>> from pathlib import Path
    >>> registry = registry.with_generator(Path, lambda fake: Path(fake.file_path()))
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from types import MappingProxyType
from typing import Any, NewType

from faker import Faker

from floe_faker.config import FakerSettings

Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)

Generator = Callable[[Faker], Any]

_INT16_MAX = 2**15 - 1
_INT32_MAX = 2**31 - 1
_INT64_MAX = 2**63 - 1
# Largest finite float32 is ~3.4e38; stay well inside so values survive a round trip
_FLOAT32_MAX = 1e6
# Temporal values are drawn from this fixed window, independent of the clock
TIME_WINDOW_START = datetime(2020, 1, 1, tzinfo=timezone.utc)
TIME_WINDOW_END = datetime(2025, 1, 1, tzinfo=timezone.utc)


def text_generator(length: int = 12) -> Generator:
    """Return a generator of random ASCII letters of a fixed length."""
    if length < 1:
        msg = "length must be >= 1"
        raise ValueError(msg)

    def generate(fake: Faker) -> str:
        return fake.pystr(min_chars=length, max_chars=length)

    return generate


def int16(fake: Faker) -> int:
    return fake.random_int(min=1, max=_INT16_MAX)


def int32(fake: Faker) -> int:
    return fake.random_int(min=1, max=_INT32_MAX)


def int64(fake: Faker) -> int:
    return fake.random_int(min=1, max=_INT64_MAX)


def boolean(fake: Faker) -> bool:
    # False is the default value, so it would hide an untouched field
    return True


def float32(fake: Faker) -> float:
    return fake.pyfloat(right_digits=2, min_value=1, max_value=_FLOAT32_MAX)


def float64(fake: Faker) -> float:
    return fake.pyfloat(min_value=1, max_value=1e12)


def decimal(fake: Faker) -> Decimal:
    return fake.pydecimal(right_digits=2, min_value=1, max_value=999999)


def timestamp(fake: Faker) -> datetime:
    return fake.date_time_between(
        start_date=TIME_WINDOW_START,
        end_date=TIME_WINDOW_END,
        tzinfo=timezone.utc,
    )


def calendar_date(fake: Faker) -> date:
    return fake.date_between(
        start_date=TIME_WINDOW_START.date(),
        end_date=TIME_WINDOW_END.date(),
    )


def identifier(fake: Faker) -> uuid.UUID:
    return uuid.UUID(fake.uuid4())


def blob(fake: Faker) -> bytes:
    return fake.binary(length=16)


def default_generators(*, text_length: int = 12) -> dict[Any, Generator]:
    """Build the default type-to-generator mapping.

    Args:
        text_length: Length of generated str values.

    Returns:
        Fresh mutable dict; callers may extend it before building a registry.
    """
    return {
        str: text_generator(text_length),
        Int16: int16,
        Int32: int32,
        Int64: int64,
        int: int32,
        bool: boolean,
        Float32: float32,
        Float64: float64,
        float: float64,
        Decimal: decimal,
        datetime: timestamp,
        date: calendar_date,
        uuid.UUID: identifier,
        bytes: blob,
    }


class GeneratorRegistry:
    """Maps field types to generators and owns the random stream.

    The registry is a plain value: each ModelFaker receives one, and tests
    can build isolated registries with their own seed or mapping.

    Attributes:
        seed: Seed of the random stream, or None for unseeded output.
        fake: Faker instance passed to every generator.
    """

    def __init__(
        self,
        generators: Mapping[Any, Generator] | None = None,
        *,
        seed: int | None = None,
        locale: str | None = None,
        settings: FakerSettings | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            generators: Type-to-generator mapping. Defaults to the built-in set.
            seed: Random seed. Overrides settings.seed.
            locale: Faker locale. Overrides settings.locale.
            settings: Settings supplying defaults for the arguments above.
        """
        settings = settings or FakerSettings()
        if generators is None:
            generators = default_generators(text_length=settings.text_length)
        self._generators: dict[Any, Generator] = dict(generators)
        self._locale = locale or settings.locale
        self.seed = seed if seed is not None else settings.seed
        self.fake = Faker(self._locale)
        if self.seed is not None:
            self.fake.seed_instance(self.seed)

    @property
    def generators(self) -> Mapping[Any, Generator]:
        """Read-only view of the registered generators."""
        return MappingProxyType(self._generators)

    def __contains__(self, field_type: object) -> bool:
        return field_type in self._generators

    def generator_for(self, field_type: Any) -> Generator | None:
        """Return the generator registered for a type, or None."""
        return self._generators.get(field_type)

    def generate(self, field_type: Any) -> Any:
        """Generate a value for a type.

        Raises:
            KeyError: If no generator is registered for the type.
        """
        return self._generators[field_type](self.fake)

    def register(self, field_type: Any, generator: Generator) -> None:
        """Register or replace the generator for a type on this registry."""
        self._generators[field_type] = generator

    def with_generator(self, field_type: Any, generator: Generator) -> GeneratorRegistry:
        """Return a new registry with one more generator.

        The new registry starts a fresh random stream from the same seed.
        """
        generators = dict(self._generators)
        generators[field_type] = generator
        return GeneratorRegistry(generators, seed=self.seed, locale=self._locale)

    def reseed(self, seed: int) -> None:
        """Restart the random stream from a new seed."""
        self.seed = seed
        self.fake.seed_instance(seed)
