"""
AnalysisService - orchestration layer for aiexplain.

Runs the analysis pipeline over one open connection:

    extract tables -> describe each table -> EXPLAIN -> assemble request

The CLI is a thin adapter around this service; the completion call is left
to the caller so it can decide how to present streamed output.

Usage:
    from aiexplain.engine import AnalysisService

    with open_connection(config) as conn:
        prepared = AnalysisService(conn).prepare(sql)

    prompt = build_prompt(prepared.request)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from aiexplain.db.connection import server_version
from aiexplain.db.plan import PlanInspector
from aiexplain.db.schema import SchemaInspector
from aiexplain.exceptions import NoTablesFoundError
from aiexplain.models import AnalysisRequest, PlanRow, TableDescriptor
from aiexplain.sql.extractor import extract_tables, strip_explain_prefix

logger = logging.getLogger(__name__)


def assemble_request(
    sql: str,
    tables: Sequence[TableDescriptor],
    plan: Sequence[PlanRow],
    mysql_version: str | None = None,
) -> AnalysisRequest:
    """Combine the query, its table structures and its plan."""
    return AnalysisRequest(
        sql_query=sql,
        table_infos=tuple(tables),
        explain_plan=tuple(plan),
        mysql_version=mysql_version,
    )


@dataclass(frozen=True)
class PreparedAnalysis:
    """
    Result of the database half of the pipeline.

    Attributes:
        request: The assembled request for the language model.
        referenced_tables: Every table the query mentions, in order.
        failures: Tables that could not be described, with the reason.
    """

    request: AnalysisRequest
    referenced_tables: tuple[str, ...] = ()
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def is_partial(self) -> bool:
        """Whether some referenced tables are missing from the request."""
        return bool(self.failures)


class AnalysisService:
    """
    Builds an AnalysisRequest for a query.

    Args:
        connection: Open DB-API connection returning dict rows.
        include_version: Look up VERSION() and include it in the request.
    """

    def __init__(self, connection: Any, include_version: bool = True) -> None:
        self.connection = connection
        self.include_version = include_version
        self.schema_inspector = SchemaInspector(connection)
        self.plan_inspector = PlanInspector(connection)

    def prepare(self, sql: str) -> PreparedAnalysis:
        """
        Run extraction, schema inspection and EXPLAIN for one query.

        Tables that fail inspection are skipped. Everything else that
        fails stops the run.

        Raises:
            NoTablesFoundError: If no table reference is found.
            PlanInspectionError: If EXPLAIN fails.
        """
        query = strip_explain_prefix(sql)

        tables = extract_tables(query)
        if not tables:
            raise NoTablesFoundError(query)
        logger.debug("Referenced tables: %s", tables)

        outcome = self.schema_inspector.inspect_many(tables)
        plan = self.plan_inspector.explain(query)
        version = server_version(self.connection) if self.include_version else None

        request = assemble_request(query, outcome.tables, plan, mysql_version=version)
        return PreparedAnalysis(
            request=request,
            referenced_tables=tuple(tables),
            failures=dict(outcome.failures),
        )
