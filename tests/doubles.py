"""Store doubles for floe-faker tests."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from floe_faker import RecordLocator


class RecordingStore:
    """Records every call and answers read-backs with a fixed result.

    Args:
        query_result: What query returns (None by default, i.e. no row).
        fail_insert: Raise RuntimeError from insert.
    """

    def __init__(
        self,
        *,
        query_result: Mapping[str, Any] | None = None,
        fail_insert: bool = False,
    ) -> None:
        self.inserts: list[tuple[str, dict[str, Any]]] = []
        self.queries: list[tuple[RecordLocator, list[str]]] = []
        self._query_result = query_result
        self._fail_insert = fail_insert

    @property
    def calls(self) -> int:
        return len(self.inserts) + len(self.queries)

    def insert(self, table: str, row: Mapping[str, Any]) -> RecordLocator:
        if self._fail_insert:
            msg = f"insert into {table} rejected"
            raise RuntimeError(msg)
        self.inserts.append((table, dict(row)))
        return RecordLocator(table=table, key=len(self.inserts))

    def query(
        self,
        locator: RecordLocator,
        projection: Sequence[str],
    ) -> Mapping[str, Any] | None:
        self.queries.append((locator, list(projection)))
        return self._query_result
