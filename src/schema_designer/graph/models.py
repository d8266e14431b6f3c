"""
Data models for schema graph nodes and edges.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class FieldType(str, Enum):
    """Scalar column types a field can take."""

    INTEGER = "INTEGER"
    BIG_INTEGER = "BIG_INTEGER"
    STRING = "STRING"
    TEXT = "TEXT"
    BOOLEAN = "BOOLEAN"
    FLOAT = "FLOAT"
    DECIMAL = "DECIMAL"
    DATE = "DATE"
    DATETIME = "DATETIME"
    TIMESTAMP = "TIMESTAMP"


@dataclass(frozen=True)
class Position:
    """Top-left corner of a table on the canvas."""

    x: float
    y: float


@dataclass
class TableOptions:
    """Structural flags of a table."""

    has_auto_id: bool = True
    remember_token: bool = False
    soft_deletes: bool = False
    timestamps: bool = True


@dataclass
class Table:
    """Represents a table in the schema graph."""

    id: str
    name: str
    position: Position
    options: TableOptions = field(default_factory=TableOptions)
    created_at: int = 0  # epoch milliseconds


@dataclass
class Field:
    """Represents a column owned by exactly one table."""

    id: str
    table_id: str
    name: str
    type: FieldType = FieldType.INTEGER


@dataclass
class Relation:
    """Represents an inferred foreign-key edge from a field to a table."""

    id: str
    field_id: str
    from_table_id: str
    to_table_id: str


@dataclass
class SchemaSnapshot:
    """Post-operation view of all three collections."""

    tables: List[Table]
    fields: List[Field]
    relations: List[Relation]
