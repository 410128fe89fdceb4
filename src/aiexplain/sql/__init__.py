"""SQL text helpers."""

from aiexplain.sql.extractor import extract_tables, strip_explain_prefix

__all__ = [
    "extract_tables",
    "strip_explain_prefix",
]
