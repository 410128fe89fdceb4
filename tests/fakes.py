"""
Test doubles: an in-memory MySQL connection and fake LLM SDK clients.

FakeConnection maps exact statement text to result rows (dicts, as with
pymysql's DictCursor). Statements with no entry fail the way MySQL does
for a missing table.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pymysql


class FakeCursor:
    def __init__(self, connection: "FakeConnection") -> None:
        self.connection = connection
        self._rows: list[dict[str, Any]] = []

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        return None

    def execute(self, statement: str) -> int:
        self.connection.executed.append(statement)
        result = self.connection.responses.get(statement)
        if isinstance(result, Exception):
            raise result
        if result is None:
            raise pymysql.err.ProgrammingError(1146, f"No response for: {statement}")
        self._rows = list(result)
        return len(self._rows)

    def fetchall(self) -> list[dict[str, Any]]:
        return list(self._rows)

    def fetchone(self) -> dict[str, Any] | None:
        return self._rows[0] if self._rows else None


class FakeConnection:
    """Stands in for a pymysql connection opened with DictCursor."""

    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses
        self.executed: list[str] = []
        self.closed = False
        self.pings: list[bool] = []

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def ping(self, reconnect: bool = True) -> None:
        self.pings.append(reconnect)

    def close(self) -> None:
        self.closed = True


ORDERS_DDL = (
    "CREATE TABLE `orders` (\n"
    "  `id` bigint NOT NULL AUTO_INCREMENT,\n"
    "  `cid` int DEFAULT NULL,\n"
    "  PRIMARY KEY (`id`)\n"
    ") ENGINE=InnoDB"
)

ORDERS_QUERY = "SELECT * FROM orders o JOIN customers c ON o.cid=c.id"


def orders_schema() -> dict[str, Any]:
    """One table, two columns, one index."""
    return {
        "DESCRIBE `orders`": [
            {"Field": "id", "Type": "bigint", "Null": "NO", "Key": "PRI",
             "Default": None, "Extra": "auto_increment"},
            {"Field": "cid", "Type": "int", "Null": "YES", "Key": "",
             "Default": None, "Extra": ""},
        ],
        "SHOW INDEX FROM `orders`": [
            {"Table": "orders", "Non_unique": 0, "Key_name": "PRIMARY",
             "Seq_in_index": 1, "Column_name": "id", "Collation": "A",
             "Cardinality": 1000, "Sub_part": None, "Packed": None, "Null": "",
             "Index_type": "BTREE", "Comment": "", "Index_comment": "",
             "Visible": "YES", "Expression": None},
        ],
        "SHOW CREATE TABLE `orders`": [
            {"Table": "orders", "Create Table": ORDERS_DDL},
        ],
    }


def orders_plan() -> list[dict[str, Any]]:
    return [
        {"id": 1, "select_type": "SIMPLE", "table": "o", "partitions": None,
         "type": "ALL", "possible_keys": None, "key": None, "key_len": None,
         "ref": None, "rows": 1000, "filtered": 100.0, "Extra": None},
        {"id": 1, "select_type": "SIMPLE", "table": "c", "partitions": None,
         "type": "eq_ref", "possible_keys": "PRIMARY", "key": "PRIMARY",
         "key_len": "4", "ref": "shop.o.cid", "rows": 1, "filtered": 100.0,
         "Extra": None},
    ]


def orders_connection() -> FakeConnection:
    """orders exists, customers does not; EXPLAIN and VERSION() succeed."""
    responses: dict[str, Any] = orders_schema()
    responses[f"EXPLAIN {ORDERS_QUERY}"] = orders_plan()
    responses["SELECT VERSION() AS version"] = [{"version": "8.0.36"}]
    return FakeConnection(responses)


# ── Fake LLM clients ─────────────────────────────────────────────────────


def openai_chunk(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


def openai_empty_chunk() -> SimpleNamespace:
    return SimpleNamespace(choices=[])


class FakeOpenAIStream:
    def __init__(self, chunks: list[Any], error: Exception | None = None) -> None:
        self.chunks = chunks
        self.error = error
        self.closed = False

    def __iter__(self):
        yield from self.chunks
        if self.error is not None:
            raise self.error

    def close(self) -> None:
        self.closed = True


class FakeOpenAIFactory:
    """
    Callable used as client_factory; records every client it builds and
    every create() request.
    """

    def __init__(
        self,
        chunks: list[Any] | None = None,
        error: Exception | None = None,
        connect_error: Exception | None = None,
    ) -> None:
        self.chunks = chunks or []
        self.error = error
        self.connect_error = connect_error
        self.calls: list[dict[str, Any]] = []
        self.requests: list[dict[str, Any]] = []
        self.streams: list[FakeOpenAIStream] = []

    def __call__(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=self._create)))

    def _create(self, **kwargs: Any) -> FakeOpenAIStream:
        self.requests.append(kwargs)
        if self.connect_error is not None:
            raise self.connect_error
        stream = FakeOpenAIStream(self.chunks, self.error)
        self.streams.append(stream)
        return stream


class FakeClaudeStream:
    def __init__(self, texts: list[str]) -> None:
        self.text_stream = iter(texts)
        self.exited = False

    def __enter__(self) -> "FakeClaudeStream":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.exited = True


class FakeAnthropicFactory:
    def __init__(self, texts: list[str]) -> None:
        self.texts = texts
        self.calls: list[dict[str, Any]] = []
        self.requests: list[dict[str, Any]] = []

    def __call__(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        return SimpleNamespace(messages=SimpleNamespace(stream=self._stream))

    def _stream(self, **kwargs: Any) -> FakeClaudeStream:
        self.requests.append(kwargs)
        return FakeClaudeStream(self.texts)
