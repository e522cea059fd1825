"""Record stores: the persistence side of a faked build.

This module provides:
- RecordLocator: reference to an inserted row
- RecordStore: protocol a ModelFaker writes through
- InMemoryStore: PyArrow-backed store with auto-increment keys

Store errors are never wrapped or retried by the faker.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

import pyarrow as pa
import pyarrow.compute as pc
from pydantic import BaseModel, ConfigDict

from floe_faker.config import FakerSettings
from floe_faker.observability import get_logger


class RecordLocator(BaseModel):
    """Reference to a row returned by RecordStore.insert.

    Attributes:
        table: Table the row was inserted into.
        key: Store-assigned key of the row.
    """

    model_config = ConfigDict(frozen=True)

    table: str
    key: Any


class RecordStore(Protocol):
    """Persistence collaborator of ModelFaker."""

    def insert(self, table: str, row: Mapping[str, Any]) -> RecordLocator:
        """Insert a row and return its locator."""
        ...

    def query(
        self,
        locator: RecordLocator,
        projection: Sequence[str],
    ) -> Mapping[str, Any] | None:
        """Return the projected columns of one row, or None if absent."""
        ...


class InMemoryStore:
    """Store rows in memory and expose each table as a PyArrow table.

    Every insert assigns the next integer key (starting at 1) to the key
    column, overwriting whatever value the row carried, like an
    auto-increment primary key. Column types are inferred from all values
    of a column, so a column may start out null and receive values later.

    Example:
        >>> store = InMemoryStore()
        >>> locator = store.insert("rooms", {"name": "lab"})
        >>> store.query(locator, ["_id", "name"])
        {'_id': 1, 'name': 'lab'}
    """

    def __init__(
        self,
        *,
        key_column: str = "_id",
        key_columns: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize an empty store.

        Args:
            key_column: Default key column for all tables.
            key_columns: Per-table key column overrides.
        """
        self.key_column = key_column
        self._key_columns: dict[str, str] = dict(key_columns or {})
        self._rows: dict[str, list[dict[str, Any]]] = {}
        self._tables: dict[str, pa.Table] = {}
        self._log = get_logger().bind(store="memory")

    @classmethod
    def from_settings(cls, settings: FakerSettings | None = None) -> InMemoryStore:
        """Create a store whose key column comes from FakerSettings."""
        settings = settings or FakerSettings()
        return cls(key_column=settings.key_column)

    def key_column_for(self, table: str) -> str:
        return self._key_columns.get(table, self.key_column)

    def set_key_column(self, table: str, column: str) -> None:
        """Use ``column`` as the key column of ``table``."""
        self._key_columns[table] = column

    def insert(self, table: str, row: Mapping[str, Any]) -> RecordLocator:
        """Append a row to a table, creating the table on first use."""
        rows = self._rows.setdefault(table, [])
        key = len(rows) + 1

        record = dict(row)
        record[self.key_column_for(table)] = key
        rows.append(record)
        self._tables.pop(table, None)

        self._log.debug("row_inserted", table=table, key=key)
        return RecordLocator(table=table, key=key)

    def query(
        self,
        locator: RecordLocator,
        projection: Sequence[str],
    ) -> dict[str, Any] | None:
        """Return one row by key, restricted to ``projection``.

        Columns in the projection that the table never received are left
        out of the result. Unknown tables and keys return None.
        """
        data = self.table(locator.table)
        if data is None:
            return None

        key_column = self.key_column_for(locator.table)
        matches = data.filter(pc.equal(data[key_column], locator.key))
        if matches.num_rows == 0:
            return None

        present = [column for column in projection if column in matches.column_names]
        if not present:
            return {}
        return matches.select(present).slice(0, 1).to_pylist()[0]

    def table(self, name: str) -> pa.Table | None:
        """Return everything stored in a table as a PyArrow table.

        The table is built once and reused until the next insert into it.
        """
        rows = self._rows.get(name)
        if rows is None:
            return None
        if name not in self._tables:
            columns = list(dict.fromkeys(column for row in rows for column in row))
            self._tables[name] = pa.table(
                {column: [row.get(column) for row in rows] for column in columns}
            )
        return self._tables[name]

    def count(self, name: str) -> int:
        return len(self._rows.get(name, ()))

    def clear(self) -> None:
        """Drop all tables and reset key sequences."""
        self._rows.clear()
        self._tables.clear()
