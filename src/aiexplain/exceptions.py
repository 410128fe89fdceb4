"""
Package-level exception hierarchy for aiexplain.

All exceptions inherit from AiExplainError, enabling:
- Catching all aiexplain errors with a single except clause
- Context fields for debugging (table, config_key, original_error)
- Structured serialization via to_dict() for JSON error output

Hierarchy:
    AiExplainError
    ├── ConfigurationError       – Missing or invalid .env settings
    ├── DatabaseConnectionError  – MySQL unreachable or login refused
    ├── NoTablesFoundError       – No FROM/JOIN table in the query
    ├── TableInspectionError     – One table could not be described (recoverable)
    ├── PlanInspectionError      – EXPLAIN failed for the query
    └── CompletionError          – The chat completion stream failed
"""

from __future__ import annotations

from typing import Any


class AiExplainError(Exception):
    """
    Base exception for all aiexplain errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON error output."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
        }


# ── Configuration Errors ─────────────────────────────────────────────────


class ConfigurationError(AiExplainError):
    """
    Error loading configuration.

    Attributes:
        config_key: The configuration key that caused the error (if known).
    """

    def __init__(self, message: str, config_key: str | None = None) -> None:
        self.config_key = config_key
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["config_key"] = self.config_key
        return result


# ── Database Errors ──────────────────────────────────────────────────────


class DatabaseConnectionError(AiExplainError):
    """Could not open a connection to the MySQL server."""
    pass


class NoTablesFoundError(AiExplainError):
    """
    The query references no table that could be detected.

    Raised by the orchestration layer when extraction returns nothing;
    the extractor itself never raises.
    """

    def __init__(self, sql: str) -> None:
        self.sql = sql
        super().__init__("No table names detected in the query")


class TableInspectionError(AiExplainError):
    """
    Failed to describe a single table.

    Recoverable: the caller drops the table and keeps going.

    Attributes:
        table: The table identifier that failed.
        original_error: The underlying driver exception.
    """

    def __init__(self, table: str, original_error: Exception) -> None:
        self.table = table
        self.original_error = original_error
        super().__init__(
            f"Failed to inspect table '{table}': "
            f"{original_error.__class__.__name__}: {original_error}"
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["table"] = self.table
        result["original_error_type"] = self.original_error.__class__.__name__
        return result


class PlanInspectionError(AiExplainError):
    """
    EXPLAIN could not be executed for the query.

    Attributes:
        sql: The query that was explained.
        original_error: The underlying driver exception.
    """

    def __init__(self, sql: str, original_error: Exception) -> None:
        self.sql = sql
        self.original_error = original_error
        super().__init__(f"EXPLAIN failed: {original_error}")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["sql"] = self.sql
        result["original_error_type"] = self.original_error.__class__.__name__
        return result


# ── Completion Errors ────────────────────────────────────────────────────


class CompletionError(AiExplainError):
    """
    The chat completion request or its stream failed.

    The message is the transport's own error text, unmodified.
    """

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
    ) -> None:
        self.original_error = original_error
        super().__init__(message)
