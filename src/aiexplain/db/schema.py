"""
Schema inspection for referenced tables.

For each table, three statements run in a fixed order:
1. DESCRIBE <table>           -> ColumnDescriptor per column
2. SHOW INDEX FROM <table>    -> IndexDescriptor per (index, column) pair
3. SHOW CREATE TABLE <table>  -> DDL text

Identifiers cannot be bound as statement parameters, so names are
backtick-quoted instead.

A table that fails any step is dropped from the result; the rest of the
tables are still inspected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import pymysql

from aiexplain.exceptions import TableInspectionError
from aiexplain.models import ColumnDescriptor, IndexDescriptor, TableDescriptor

logger = logging.getLogger(__name__)


def quote_identifier(name: str) -> str:
    """
    Backtick-quote a possibly schema-qualified identifier.

    >>> quote_identifier("shop.orders")
    '`shop`.`orders`'
    """
    parts = name.split(".")
    return ".".join("`" + part.replace("`", "``") + "`" for part in parts)


def as_text(value: Any) -> str:
    """Driver value to str; NULL becomes empty, bytes are decoded."""
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _column_from_row(row: dict[str, Any]) -> ColumnDescriptor:
    default = row.get("Default")
    return ColumnDescriptor(
        field=as_text(row.get("Field")),
        type=as_text(row.get("Type")),
        nullable=as_text(row.get("Null")).upper() == "YES",
        key=as_text(row.get("Key")),
        default=None if default is None else as_text(default),
        extra=as_text(row.get("Extra")),
    )


def _index_from_row(row: dict[str, Any]) -> IndexDescriptor:
    # Column_name is NULL for functional key parts (MySQL 8.0.13+)
    column = row.get("Column_name")
    if column is None:
        column = row.get("Expression")
    return IndexDescriptor(
        index_name=as_text(row.get("Key_name")),
        column_name=as_text(column),
        unique=int(row.get("Non_unique") or 0) == 0,
    )


@dataclass
class InspectionOutcome:
    """Tables that were described, and those that could not be."""

    tables: list[TableDescriptor] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def table_names(self) -> list[str]:
        return [t.table_name for t in self.tables]


class SchemaInspector:
    """
    Describes tables over an open connection.

    The connection must return rows as dicts (pymysql DictCursor).
    """

    def __init__(self, connection: Any) -> None:
        self.connection = connection

    def _fetch_all(self, statement: str) -> list[dict[str, Any]]:
        with self.connection.cursor() as cursor:
            cursor.execute(statement)
            return list(cursor.fetchall())

    def inspect(self, table: str) -> TableDescriptor:
        """
        Describe one table.

        Raises:
            TableInspectionError: If any of the three statements fails.
        """
        quoted = quote_identifier(table)

        try:
            column_rows = self._fetch_all(f"DESCRIBE {quoted}")
            index_rows = self._fetch_all(f"SHOW INDEX FROM {quoted}")
            ddl_rows = self._fetch_all(f"SHOW CREATE TABLE {quoted}")
        except pymysql.MySQLError as e:
            raise TableInspectionError(table, e) from e

        if not ddl_rows:
            raise TableInspectionError(table, LookupError("SHOW CREATE TABLE returned no rows"))

        ddl_row = ddl_rows[0]
        # Views report "Create View" instead of "Create Table"
        create_table = ddl_row.get("Create Table", ddl_row.get("Create View"))

        return TableDescriptor(
            table_name=table,
            columns=tuple(_column_from_row(row) for row in column_rows),
            indexes=tuple(_index_from_row(row) for row in index_rows),
            create_table=as_text(create_table),
        )

    def inspect_many(self, tables: list[str]) -> InspectionOutcome:
        """Describe tables one at a time, skipping any that fail."""
        outcome = InspectionOutcome()

        for table in tables:
            try:
                descriptor = self.inspect(table)
            except TableInspectionError as e:
                logger.warning("Skipping table %s: %s", table, e.original_error)
                outcome.failures[table] = str(e.original_error)
                continue
            outcome.tables.append(descriptor)

        logger.debug(
            "Inspected %d of %d tables", len(outcome.tables), len(tables)
        )
        return outcome
