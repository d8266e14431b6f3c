"""
Database schema management for the schema graph.
"""

import kuzu

NODE_TABLES = ("SchemaTable", "SchemaField")
REL_TABLES = ("HAS_FIELD", "REFERS_TO")


class SchemaManager:
    """Manages KuzuDB node and rel table creation."""

    def __init__(self, conn: kuzu.Connection):
        """Initialize schema manager.

        Args:
            conn: KuzuDB connection to use for schema operations
        """
        self.conn = conn

    def create_schema(self) -> None:
        """Create KuzuDB schema with node and edge tables."""
        # Designed table: canvas position and option flags are flattened
        # into scalar properties
        self.conn.execute("""
            CREATE NODE TABLE IF NOT EXISTS SchemaTable(
                id STRING,
                name STRING,
                pos_x DOUBLE,
                pos_y DOUBLE,
                has_auto_id BOOLEAN,
                remember_token BOOLEAN,
                soft_deletes BOOLEAN,
                timestamps BOOLEAN,
                created_at INT64,
                seq INT64,
                PRIMARY KEY(id)
            )
        """)

        # table_id duplicates the HAS_FIELD edge for cheap lookups
        self.conn.execute("""
            CREATE NODE TABLE IF NOT EXISTS SchemaField(
                id STRING,
                table_id STRING,
                name STRING,
                field_type STRING,
                seq INT64,
                PRIMARY KEY(id)
            )
        """)

        self.conn.execute("""
            CREATE REL TABLE IF NOT EXISTS HAS_FIELD(
                FROM SchemaTable TO SchemaField
            )
        """)

        # Inferred foreign key: field -> referenced table
        self.conn.execute("""
            CREATE REL TABLE IF NOT EXISTS REFERS_TO(
                FROM SchemaField TO SchemaTable,
                id STRING,
                from_table_id STRING,
                seq INT64
            )
        """)
