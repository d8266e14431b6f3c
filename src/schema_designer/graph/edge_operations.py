"""
Edge CRUD operations for the schema graph.
"""

import logging

import kuzu

from schema_designer.graph.models import Relation

logger = logging.getLogger(__name__)


class EdgeOperations:
    """Handles CRUD operations for REFERS_TO relation edges."""

    def __init__(
        self,
        conn: kuzu.Connection,
        read_only: bool,
        helper_methods: dict,
    ):
        """Initialize edge operations.

        Args:
            conn: KuzuDB connection to use for operations
            read_only: Whether database is in read-only mode
            helper_methods: Dictionary containing helper methods from facade
        """
        self.conn = conn
        self.read_only = read_only
        self._next_seq = helper_methods["next_seq"]

    def _check_read_only(self) -> None:
        """Raise exception if database is in read-only mode.

        Raises:
            RuntimeError: If database is in read-only mode
        """
        if self.read_only:
            raise RuntimeError(
                "Cannot perform write operation: database is in read-only mode. "
                "Create a new SchemaGraph instance with read_only=False to enable writes."
            )

    def add_relation(self, relation: Relation) -> None:
        """Add a foreign-key edge from a field to the table it references.

        Args:
            relation: Relation to store

        Raises:
            RuntimeError: If database is in read-only mode
        """
        self._check_read_only()
        self.conn.execute(
            """
            MATCH (f:SchemaField {id: $field_id}), (t:SchemaTable {id: $to_table_id})
            CREATE (f)-[:REFERS_TO {id: $id, from_table_id: $from_table_id, seq: $seq}]->(t)
        """,
            {
                "id": relation.id,
                "field_id": relation.field_id,
                "from_table_id": relation.from_table_id,
                "to_table_id": relation.to_table_id,
                "seq": self._next_seq("REFERS_TO"),
            },
        )
        logger.debug(
            f"Created relation {relation.id}: field {relation.field_id} -> "
            f"table {relation.to_table_id}"
        )

    def delete_relation(self, relation_id: str) -> None:
        """Delete a relation edge by id.

        Deleting an id that is not stored matches nothing and is a no-op.

        Args:
            relation_id: Relation identifier

        Raises:
            RuntimeError: If database is in read-only mode
        """
        self._check_read_only()
        self.conn.execute(
            """
            MATCH (:SchemaField)-[r:REFERS_TO]->(:SchemaTable)
            WHERE r.id = $id
            DELETE r
        """,
            {"id": relation_id},
        )
        logger.debug(f"Deleted relation {relation_id}")
