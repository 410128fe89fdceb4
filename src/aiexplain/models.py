"""
Pydantic models for the analysis request sent to the language model.

The structure is:
- AnalysisRequest: the query, its tables and its EXPLAIN plan
- TableDescriptor: one table's columns, indexes and CREATE statement
- PlanRow: one row of traditional (tabular) MySQL EXPLAIN output

All models are frozen snapshots taken at inspection time.

MySQL EXPLAIN fields:
- id: SELECT identifier (NULL for UNION RESULT rows)
- select_type: SIMPLE, PRIMARY, UNION, SUBQUERY, DERIVED, etc.
- table: Table name or alias
- partitions: Matching partitions
- type: Access type (ALL, index, range, ref, eq_ref, const, system, NULL)
- possible_keys: Indexes that could be used
- key: Index actually used
- key_len: Length of key used
- ref: Columns compared to index
- rows: Estimated rows to examine
- filtered: Percentage of rows filtered by condition
- Extra: Additional information

Reference: https://dev.mysql.com/doc/refman/8.0/en/explain-output.html
"""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field


class ColumnDescriptor(BaseModel):
    """One row of DESCRIBE output."""

    model_config = ConfigDict(frozen=True)

    field: str
    type: str
    nullable: bool = False
    key: str = Field(default="", description="PRI, UNI, MUL or empty")
    default: str | None = None
    extra: str = Field(default="", description="e.g. auto_increment")


class IndexDescriptor(BaseModel):
    """
    One (index, column) pair from SHOW INDEX.

    A composite index yields one descriptor per participating column, all
    sharing the same index_name. Use TableDescriptor.grouped_indexes() for
    a one-entry-per-index view.
    """

    model_config = ConfigDict(frozen=True)

    index_name: str
    column_name: str
    unique: bool = False


class IndexGroup(BaseModel):
    """An index with all its columns, in sequence order."""

    model_config = ConfigDict(frozen=True)

    index_name: str
    columns: tuple[str, ...]
    unique: bool = False


class TableDescriptor(BaseModel):
    """Structure of one referenced table."""

    model_config = ConfigDict(frozen=True)

    table_name: str
    columns: tuple[ColumnDescriptor, ...] = ()
    indexes: tuple[IndexDescriptor, ...] = ()
    create_table: str = ""

    def grouped_indexes(self) -> list[IndexGroup]:
        """
        Group the flattened index descriptors by index name.

        Groups keep first-seen order; columns keep the order SHOW INDEX
        reported them (Seq_in_index).
        """
        order: list[str] = []
        columns: dict[str, list[str]] = {}
        unique: dict[str, bool] = {}

        for idx in self.indexes:
            if idx.index_name not in columns:
                order.append(idx.index_name)
                columns[idx.index_name] = []
                unique[idx.index_name] = idx.unique
            columns[idx.index_name].append(idx.column_name)

        return [
            IndexGroup(index_name=name, columns=tuple(columns[name]), unique=unique[name])
            for name in order
        ]


class PlanRow(BaseModel):
    """A single row in MySQL EXPLAIN output."""

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    select_type: str = ""
    table: str = ""
    partitions: str = ""
    access_type: str = Field(default="", description="'type' column in MySQL")
    possible_keys: str = ""
    key: str = ""
    key_len: str = ""
    ref: str = ""
    rows: int = 0
    filtered: float = 0.0
    extra: str = ""

    @property
    def is_full_table_scan(self) -> bool:
        """Check if this is a full table scan (type='ALL')."""
        return self.access_type == "ALL"

    @property
    def is_using_filesort(self) -> bool:
        """Check if query requires filesort."""
        return "Using filesort" in self.extra

    @property
    def is_using_temporary(self) -> bool:
        """Check if query requires temporary table."""
        return "Using temporary" in self.extra

    @property
    def has_unused_index(self) -> bool:
        """Check if possible index exists but isn't used."""
        return bool(self.possible_keys) and not self.key


class AnalysisRequest(BaseModel):
    """
    Everything the language model gets to see about one query.

    table_infos may hold fewer tables than the query references: tables
    that failed inspection are left out.
    """

    model_config = ConfigDict(frozen=True)

    sql_query: str
    table_infos: tuple[TableDescriptor, ...] = ()
    explain_plan: tuple[PlanRow, ...] = ()
    mysql_version: str | None = None

    def to_json(self) -> str:
        """Canonical JSON: declared field order, 2-space indent."""
        return json.dumps(self.model_dump(mode="json"), indent=2, ensure_ascii=False)
