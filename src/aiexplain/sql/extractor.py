"""
Table reference extraction.

A lexical scan, not a parser: every identifier that follows a FROM or JOIN
keyword is taken as a table name. Simple single-line FROM/JOIN queries are
handled; aliases that collide with the keywords, derived tables and
subqueries are not understood.

Comments are dropped with the sqlparse lexer before scanning so that a
commented-out JOIN does not produce a table. Only the lexer runs; statement
grouping has a token limit that long IN lists exceed.
"""

from __future__ import annotations

import re

from sqlparse import lexer
from sqlparse import tokens as T

# FROM/JOIN followed by a (possibly schema-qualified) identifier
TABLE_REFERENCE = re.compile(r"\b(?:FROM|JOIN)\s+([\w.]+)", re.IGNORECASE)

# EXPLAIN with an optional FORMAT=... option; only tabular output is decoded
EXPLAIN_PREFIX = re.compile(r"^EXPLAIN\b(?:\s+FORMAT\s*=\s*\w+)?", re.IGNORECASE)


def strip_explain_prefix(sql: str) -> str:
    """
    Remove a leading EXPLAIN keyword and surrounding whitespace.

    A FORMAT option right after the keyword goes with it.

    >>> strip_explain_prefix("  explain SELECT 1 ")
    'SELECT 1'
    >>> strip_explain_prefix("EXPLAIN FORMAT=JSON SELECT 1")
    'SELECT 1'
    """
    query = sql.strip()
    query = EXPLAIN_PREFIX.sub("", query, count=1)
    return query.strip()


def strip_comments(sql: str) -> str:
    """Replace every SQL comment with a single space."""
    return "".join(
        " " if ttype in T.Comment else value
        for ttype, value in lexer.tokenize(sql)
    )


def extract_tables(sql: str) -> list[str]:
    """
    Return the distinct tables referenced by FROM/JOIN, in first-seen order.

    Identifiers are compared exactly; ``Orders`` and ``orders`` are two
    entries. Returns an empty list when nothing matches.
    """
    text = strip_comments(sql)

    seen: set[str] = set()
    tables: list[str] = []
    for match in TABLE_REFERENCE.finditer(text):
        name = match.group(1)
        if name not in seen:
            seen.add(name)
            tables.append(name)

    return tables
