"""
Main facade for the schema graph.

Delegates to specialized operation classes and owns the Kuzu connection.
"""

import logging
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import kuzu

from schema_designer.graph.edge_operations import EdgeOperations
from schema_designer.graph.models import (
    Field,
    FieldType,
    Position,
    Relation,
    SchemaSnapshot,
    Table,
)
from schema_designer.graph.node_operations import NodeOperations
from schema_designer.graph.queries import QueryOperations
from schema_designer.graph.schema import SchemaManager

logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"


class SchemaGraph:
    """KuzuDB-backed store for designed tables, fields and relations.

    With no ``db_path`` the graph lives in an in-memory database and vanishes
    with the instance; with a path it persists to that database directory.
    The store applies writes as given: keeping relations consistent with
    field and table names is the job of ``SchemaGraphManager``.
    """

    def __init__(
        self,
        db_path: Optional[Path] = None,
        read_only: bool = False,
        buffer_pool_size: int = 0,
        max_db_size: Optional[int] = None,
    ):
        """Initialize KuzuDB connection and create schema if needed.

        Args:
            db_path: Path to KuzuDB database directory. None for in-memory.
            read_only: If True, opens database in read-only mode. Schema
                      creation is skipped and all write methods raise.
            buffer_pool_size: Buffer pool size in bytes, 0 for Kuzu's default
            max_db_size: Upper bound of the database address space in bytes
                        (a power of two), None for Kuzu's default
        """
        if db_path is not None and not read_only:
            db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db_path = db_path
        self.read_only = read_only
        db_options = {"read_only": read_only, "buffer_pool_size": buffer_pool_size}
        if max_db_size is not None:
            db_options["max_db_size"] = max_db_size
        self.db = kuzu.Database(
            str(db_path) if db_path is not None else IN_MEMORY,
            **db_options,
        )
        self.conn = kuzu.Connection(self.db)
        self._transaction_depth = 0

        self.schema_manager = SchemaManager(self.conn)
        if not self.read_only:
            self.schema_manager.create_schema()

        self.queries = QueryOperations(self.conn)

        helper_methods = {
            "next_seq": self._next_seq,
        }
        self.node_ops = NodeOperations(self.conn, self.read_only, helper_methods)
        self.edge_ops = EdgeOperations(self.conn, self.read_only, helper_methods)

    def _next_seq(self, label: str) -> int:
        """Next creation-order number for a node or rel label."""
        return self.queries.max_seq(label) + 1

    # ID generation
    @staticmethod
    def make_table_id() -> str:
        """Create a new opaque table identifier (e.g., 'tbl_a1b2c3d4e5f6')."""
        return f"tbl_{uuid.uuid4().hex[:12]}"

    @staticmethod
    def make_field_id() -> str:
        """Create a new opaque field identifier (e.g., 'fld_a1b2c3d4e5f6')."""
        return f"fld_{uuid.uuid4().hex[:12]}"

    @staticmethod
    def make_relation_id() -> str:
        """Create a new opaque relation identifier (e.g., 'rel_a1b2c3d4e5f6')."""
        return f"rel_{uuid.uuid4().hex[:12]}"

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the enclosed writes as one Kuzu transaction.

        Nested scopes join the outermost transaction. Any exception rolls
        back every write made since the outermost scope opened.
        """
        if self._transaction_depth > 0:
            self._transaction_depth += 1
            try:
                yield
            finally:
                self._transaction_depth -= 1
            return

        self.conn.execute("BEGIN TRANSACTION")
        self._transaction_depth = 1
        try:
            yield
        except BaseException:
            self._transaction_depth = 0
            self.conn.execute("ROLLBACK")
            logger.debug("Transaction rolled back")
            raise
        self._transaction_depth = 0
        self.conn.execute("COMMIT")

    # Delegate node operations
    def add_table(self, table: Table) -> None:
        """Add a table node."""
        return self.node_ops.add_table(table)

    def set_table_name(self, table_id: str, name: str) -> None:
        """Rename a table node."""
        return self.node_ops.set_table_name(table_id, name)

    def set_table_position(self, table_id: str, position: Position) -> None:
        """Move a table node."""
        return self.node_ops.set_table_position(table_id, position)

    def set_table_option(self, table_id: str, option: str, value: bool) -> None:
        """Set one option flag of a table node."""
        return self.node_ops.set_table_option(table_id, option, value)

    def delete_table(self, table_id: str) -> None:
        """Delete a table node."""
        return self.node_ops.delete_table(table_id)

    def add_field(self, field: Field) -> None:
        """Add a field node owned by ``field.table_id``."""
        return self.node_ops.add_field(field)

    def set_field_name(self, field_id: str, name: str) -> None:
        """Rename a field node."""
        return self.node_ops.set_field_name(field_id, name)

    def set_field_type(self, field_id: str, field_type: FieldType) -> None:
        """Change the type of a field node."""
        return self.node_ops.set_field_type(field_id, field_type)

    def delete_field(self, field_id: str) -> None:
        """Delete a field node and its edges."""
        return self.node_ops.delete_field(field_id)

    # Delegate edge operations
    def add_relation(self, relation: Relation) -> None:
        """Add a relation edge."""
        return self.edge_ops.add_relation(relation)

    def delete_relation(self, relation_id: str) -> None:
        """Delete a relation edge."""
        return self.edge_ops.delete_relation(relation_id)

    # Delegate query operations
    def get_table(self, table_id: str) -> Optional[Table]:
        """Get table by id."""
        return self.queries.get_table(table_id)

    def get_tables(self) -> List[Table]:
        """Get all tables."""
        return self.queries.get_tables()

    def find_tables_by_name(self, name: str) -> List[Table]:
        """Get tables with this exact name."""
        return self.queries.find_tables_by_name(name)

    def get_positions(self) -> List[Position]:
        """Get every table position."""
        return self.queries.get_positions()

    def get_field(self, field_id: str) -> Optional[Field]:
        """Get field by id."""
        return self.queries.get_field(field_id)

    def get_fields(self) -> List[Field]:
        """Get all fields."""
        return self.queries.get_fields()

    def get_fields_for_table(self, table_id: str) -> List[Field]:
        """Get fields owned by a table."""
        return self.queries.get_fields_for_table(table_id)

    def find_fields_by_name(self, name: str) -> List[Field]:
        """Get fields with this exact name."""
        return self.queries.find_fields_by_name(name)

    def get_relations(self) -> List[Relation]:
        """Get all relations."""
        return self.queries.get_relations()

    def get_relations_for_field(self, field_id: str) -> List[Relation]:
        """Get relations leaving a field."""
        return self.queries.get_relations_for_field(field_id)

    def get_relations_to_table(self, table_id: str) -> List[Relation]:
        """Get relations referencing a table."""
        return self.queries.get_relations_to_table(table_id)

    def get_relations_for_table(self, table_id: str) -> List[Relation]:
        """Get relations touching a table as source or target."""
        return self.queries.get_relations_for_table(table_id)

    def get_statistics(self) -> Dict[str, int]:
        """Get statistics about the graph."""
        return self.queries.get_statistics()

    def snapshot(self) -> SchemaSnapshot:
        """Read all three collections at once."""
        return SchemaSnapshot(
            tables=self.get_tables(),
            fields=self.get_fields(),
            relations=self.get_relations(),
        )

    # Utility methods
    def clear_all(self) -> None:
        """Clear all data from the database.

        Raises:
            RuntimeError: If database is in read-only mode
        """
        if self.read_only:
            raise RuntimeError(
                "Cannot perform write operation: database is in read-only mode. "
                "Create a new SchemaGraph instance with read_only=False to enable writes."
            )
        with self.transaction():
            self.conn.execute("MATCH (f:SchemaField) DETACH DELETE f")
            self.conn.execute("MATCH (t:SchemaTable) DETACH DELETE t")

    def close(self) -> None:
        """Release the connection and database handles."""
        self.conn.close()
        self.db.close()
