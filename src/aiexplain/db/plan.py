"""
EXPLAIN execution for the query under analysis.

Runs traditional (tabular) EXPLAIN and decodes each row into a PlanRow,
keeping the engine's row order. Nullable columns decode to empty values
rather than rejecting the row.
"""

from __future__ import annotations

import logging
from typing import Any

import pymysql

from aiexplain.db.schema import as_text
from aiexplain.exceptions import PlanInspectionError
from aiexplain.models import PlanRow
from aiexplain.sql.extractor import strip_explain_prefix

logger = logging.getLogger(__name__)


def _parse_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_float(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def decode_plan_row(row: dict[str, Any]) -> PlanRow:
    """Decode one EXPLAIN row (dict keyed by column name)."""
    return PlanRow(
        id=_parse_int(row.get("id")),
        select_type=as_text(row.get("select_type")),
        table=as_text(row.get("table")),
        partitions=as_text(row.get("partitions")),
        access_type=as_text(row.get("type")),
        possible_keys=as_text(row.get("possible_keys")),
        key=as_text(row.get("key")),
        key_len=as_text(row.get("key_len")),
        ref=as_text(row.get("ref")),
        rows=_parse_int(row.get("rows")) or 0,
        filtered=_parse_float(row.get("filtered")),
        extra=as_text(row.get("Extra")),
    )


class PlanInspector:
    """Runs EXPLAIN over an open connection."""

    def __init__(self, connection: Any) -> None:
        self.connection = connection

    def explain(self, sql: str) -> list[PlanRow]:
        """
        EXPLAIN the query and return its plan rows in engine order.

        Raises:
            PlanInspectionError: If the statement is rejected (bad SQL,
                unknown table, ...).
        """
        query = strip_explain_prefix(sql)

        try:
            with self.connection.cursor() as cursor:
                cursor.execute(f"EXPLAIN {query}")
                rows = list(cursor.fetchall())
        except pymysql.MySQLError as e:
            raise PlanInspectionError(query, e) from e

        plan = [decode_plan_row(row) for row in rows]
        logger.debug("EXPLAIN returned %d rows", len(plan))
        return plan
