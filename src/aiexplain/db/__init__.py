"""
Database access for aiexplain.

Read-only MySQL inspection:
- Open a scoped connection from Config
- Describe referenced tables (columns, indexes, DDL)
- Run EXPLAIN on the query
"""

from aiexplain.db.connection import connect, open_connection, server_version
from aiexplain.db.plan import PlanInspector, decode_plan_row
from aiexplain.db.schema import InspectionOutcome, SchemaInspector, quote_identifier

__all__ = [
    "InspectionOutcome",
    "PlanInspector",
    "SchemaInspector",
    "connect",
    "decode_plan_row",
    "open_connection",
    "quote_identifier",
    "server_version",
]
