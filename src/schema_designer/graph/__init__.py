"""
Graph module for schema storage and querying.

This module provides the storage layer for the schema designer:
- models: Data classes for tables, fields and relations
- schema: Database schema creation
- node_operations: Table and field CRUD operations
- edge_operations: Relation CRUD operations
- queries: Query operations
- graph: Main SchemaGraph facade
"""

from schema_designer.graph.graph import SchemaGraph
from schema_designer.graph.models import (
    Field,
    FieldType,
    Position,
    Relation,
    SchemaSnapshot,
    Table,
    TableOptions,
)

__all__ = [
    "SchemaGraph",
    "Field",
    "FieldType",
    "Position",
    "Relation",
    "SchemaSnapshot",
    "Table",
    "TableOptions",
]
