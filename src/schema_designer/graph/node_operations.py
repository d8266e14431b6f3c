"""
Node CRUD operations for the schema graph.

Tables and fields are stored as ``SchemaTable`` and ``SchemaField`` nodes,
joined by a ``HAS_FIELD`` edge from owner to field.
"""

import logging

import kuzu

from schema_designer.graph.models import Field, FieldType, Position, Table

logger = logging.getLogger(__name__)

# Table option attribute -> node property
OPTION_COLUMNS = {
    "has_auto_id": "has_auto_id",
    "remember_token": "remember_token",
    "soft_deletes": "soft_deletes",
    "timestamps": "timestamps",
}


class NodeOperations:
    """Handles CRUD operations for table and field nodes."""

    def __init__(
        self,
        conn: kuzu.Connection,
        read_only: bool,
        helper_methods: dict,
    ):
        """Initialize node operations.

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

    def add_table(self, table: Table) -> None:
        """Add a table node to the graph.

        Args:
            table: Table to store

        Raises:
            RuntimeError: If database is in read-only mode
        """
        self._check_read_only()
        self.conn.execute(
            """
            CREATE (t:SchemaTable {
                id: $id,
                name: $name,
                pos_x: $pos_x,
                pos_y: $pos_y,
                has_auto_id: $has_auto_id,
                remember_token: $remember_token,
                soft_deletes: $soft_deletes,
                timestamps: $timestamps,
                created_at: $created_at,
                seq: $seq
            })
        """,
            {
                "id": table.id,
                "name": table.name,
                "pos_x": float(table.position.x),
                "pos_y": float(table.position.y),
                "has_auto_id": table.options.has_auto_id,
                "remember_token": table.options.remember_token,
                "soft_deletes": table.options.soft_deletes,
                "timestamps": table.options.timestamps,
                "created_at": int(table.created_at),
                "seq": self._next_seq("SchemaTable"),
            },
        )
        logger.debug(f"Created table node {table.id} ({table.name})")

    def set_table_name(self, table_id: str, name: str) -> None:
        """Update the name of a table node.

        Args:
            table_id: Table identifier
            name: New table name

        Raises:
            RuntimeError: If database is in read-only mode
        """
        self._check_read_only()
        self.conn.execute(
            """
            MATCH (t:SchemaTable {id: $id})
            SET t.name = $name
        """,
            {"id": table_id, "name": name},
        )

    def set_table_position(self, table_id: str, position: Position) -> None:
        """Update the canvas position of a table node.

        Args:
            table_id: Table identifier
            position: New top-left corner

        Raises:
            RuntimeError: If database is in read-only mode
        """
        self._check_read_only()
        self.conn.execute(
            """
            MATCH (t:SchemaTable {id: $id})
            SET t.pos_x = $pos_x, t.pos_y = $pos_y
        """,
            {"id": table_id, "pos_x": float(position.x), "pos_y": float(position.y)},
        )

    def set_table_option(self, table_id: str, option: str, value: bool) -> None:
        """Update a single option flag of a table node.

        Args:
            table_id: Table identifier
            option: Option attribute name (see ``OPTION_COLUMNS``)
            value: New flag value

        Raises:
            RuntimeError: If database is in read-only mode
            KeyError: If option is not a known option attribute
        """
        self._check_read_only()
        # Property names cannot be parameterized, so they come from a fixed map
        column = OPTION_COLUMNS[option]
        self.conn.execute(
            f"""
            MATCH (t:SchemaTable {{id: $id}})
            SET t.{column} = $value
        """,
            {"id": table_id, "value": bool(value)},
        )

    def delete_table(self, table_id: str) -> None:
        """Delete a table node together with any edge still attached to it.

        Owned fields are not touched; callers delete them first.

        Args:
            table_id: Table identifier

        Raises:
            RuntimeError: If database is in read-only mode
        """
        self._check_read_only()
        self.conn.execute(
            """
            MATCH (t:SchemaTable {id: $id})
            DETACH DELETE t
        """,
            {"id": table_id},
        )
        logger.debug(f"Deleted table node {table_id}")

    def add_field(self, field: Field) -> None:
        """Add a field node and its HAS_FIELD edge from the owning table.

        Args:
            field: Field to store

        Raises:
            RuntimeError: If database is in read-only mode
        """
        self._check_read_only()
        self.conn.execute(
            """
            CREATE (f:SchemaField {
                id: $id,
                table_id: $table_id,
                name: $name,
                field_type: $field_type,
                seq: $seq
            })
        """,
            {
                "id": field.id,
                "table_id": field.table_id,
                "name": field.name,
                "field_type": FieldType(field.type).value,
                "seq": self._next_seq("SchemaField"),
            },
        )

        self.conn.execute(
            """
            MATCH (t:SchemaTable {id: $table_id}), (f:SchemaField {id: $field_id})
            CREATE (t)-[:HAS_FIELD]->(f)
        """,
            {"table_id": field.table_id, "field_id": field.id},
        )
        logger.debug(f"Created field node {field.id} ({field.name}) on {field.table_id}")

    def set_field_name(self, field_id: str, name: str) -> None:
        """Update the name of a field node.

        Raises:
            RuntimeError: If database is in read-only mode
        """
        self._check_read_only()
        self.conn.execute(
            """
            MATCH (f:SchemaField {id: $id})
            SET f.name = $name
        """,
            {"id": field_id, "name": name},
        )

    def set_field_type(self, field_id: str, field_type: FieldType) -> None:
        """Update the scalar type of a field node.

        Raises:
            RuntimeError: If database is in read-only mode
        """
        self._check_read_only()
        self.conn.execute(
            """
            MATCH (f:SchemaField {id: $id})
            SET f.field_type = $field_type
        """,
            {"id": field_id, "field_type": FieldType(field_type).value},
        )

    def delete_field(self, field_id: str) -> None:
        """Delete a field node together with its HAS_FIELD and REFERS_TO edges.

        Raises:
            RuntimeError: If database is in read-only mode
        """
        self._check_read_only()
        self.conn.execute(
            """
            MATCH (f:SchemaField {id: $id})
            DETACH DELETE f
        """,
            {"id": field_id},
        )
        logger.debug(f"Deleted field node {field_id}")
