"""
Query operations for the schema graph.
"""

from typing import Dict, List, Optional

import kuzu

from schema_designer.graph.models import (
    Field,
    FieldType,
    Position,
    Relation,
    Table,
    TableOptions,
)

_TABLE_COLUMNS = """
    t.id, t.name, t.pos_x, t.pos_y,
    t.has_auto_id, t.remember_token, t.soft_deletes, t.timestamps,
    t.created_at, t.seq
"""

_FIELD_COLUMNS = "f.id, f.table_id, f.name, f.field_type, f.seq"

_RELATION_COLUMNS = "r.id, f.id, r.from_table_id, t.id, r.seq"


def _row_to_table(row: list) -> Table:
    return Table(
        id=row[0],
        name=row[1],
        position=Position(x=row[2], y=row[3]),
        options=TableOptions(
            has_auto_id=row[4],
            remember_token=row[5],
            soft_deletes=row[6],
            timestamps=row[7],
        ),
        created_at=row[8],
    )


def _row_to_field(row: list) -> Field:
    return Field(id=row[0], table_id=row[1], name=row[2], type=FieldType(row[3]))


def _row_to_relation(row: list) -> Relation:
    return Relation(id=row[0], field_id=row[1], from_table_id=row[2], to_table_id=row[3])


class QueryOperations:
    """Handles read queries for the schema graph.

    Every list is returned in creation order.
    """

    def __init__(self, conn: kuzu.Connection):
        """Initialize query operations.

        Args:
            conn: KuzuDB connection to use for operations
        """
        self.conn = conn

    def _collect(self, query: str, parameters: Optional[dict] = None) -> List[list]:
        result = self.conn.execute(query, parameters or {})
        rows = []
        while result.has_next():
            rows.append(result.get_next())
        return rows

    # Tables

    def get_table(self, table_id: str) -> Optional[Table]:
        """Get table node by id.

        Args:
            table_id: Table identifier

        Returns:
            Table if found, None otherwise
        """
        rows = self._collect(
            f"MATCH (t:SchemaTable {{id: $id}}) RETURN {_TABLE_COLUMNS}",
            {"id": table_id},
        )
        return _row_to_table(rows[0]) if rows else None

    def get_tables(self) -> List[Table]:
        """Get all tables in the graph."""
        rows = self._collect(
            f"MATCH (t:SchemaTable) RETURN {_TABLE_COLUMNS} ORDER BY t.seq"
        )
        return [_row_to_table(row) for row in rows]

    def find_tables_by_name(self, name: str) -> List[Table]:
        """Get all tables carrying exactly this name.

        Args:
            name: Table name to match (case-sensitive)

        Returns:
            Matching tables, oldest first
        """
        rows = self._collect(
            f"""
            MATCH (t:SchemaTable)
            WHERE t.name = $name
            RETURN {_TABLE_COLUMNS}
            ORDER BY t.seq
        """,
            {"name": name},
        )
        return [_row_to_table(row) for row in rows]

    def get_positions(self) -> List[Position]:
        """Get the canvas position of every table."""
        rows = self._collect("MATCH (t:SchemaTable) RETURN t.pos_x, t.pos_y, t.seq ORDER BY t.seq")
        return [Position(x=row[0], y=row[1]) for row in rows]

    # Fields

    def get_field(self, field_id: str) -> Optional[Field]:
        """Get field node by id.

        Args:
            field_id: Field identifier

        Returns:
            Field if found, None otherwise
        """
        rows = self._collect(
            f"MATCH (f:SchemaField {{id: $id}}) RETURN {_FIELD_COLUMNS}",
            {"id": field_id},
        )
        return _row_to_field(rows[0]) if rows else None

    def get_fields(self) -> List[Field]:
        """Get all fields in the graph."""
        rows = self._collect(
            f"MATCH (f:SchemaField) RETURN {_FIELD_COLUMNS} ORDER BY f.seq"
        )
        return [_row_to_field(row) for row in rows]

    def get_fields_for_table(self, table_id: str) -> List[Field]:
        """Get the fields owned by a table, following HAS_FIELD edges.

        Args:
            table_id: Owning table identifier

        Returns:
            List of Field objects
        """
        rows = self._collect(
            f"""
            MATCH (t:SchemaTable {{id: $table_id}})-[:HAS_FIELD]->(f:SchemaField)
            RETURN {_FIELD_COLUMNS}
            ORDER BY f.seq
        """,
            {"table_id": table_id},
        )
        return [_row_to_field(row) for row in rows]

    def find_fields_by_name(self, name: str) -> List[Field]:
        """Get fields named exactly ``name`` across all tables."""
        rows = self._collect(
            f"""
            MATCH (f:SchemaField)
            WHERE f.name = $name
            RETURN {_FIELD_COLUMNS}
            ORDER BY f.seq
        """,
            {"name": name},
        )
        return [_row_to_field(row) for row in rows]

    # Relations

    def get_relations(self) -> List[Relation]:
        """Get all relation edges in the graph."""
        rows = self._collect(
            f"""
            MATCH (f:SchemaField)-[r:REFERS_TO]->(t:SchemaTable)
            RETURN {_RELATION_COLUMNS}
            ORDER BY r.seq
        """
        )
        return [_row_to_relation(row) for row in rows]

    def get_relations_for_field(self, field_id: str) -> List[Relation]:
        """Get relation edges leaving a field.

        At rest there is at most one; the list form lets callers repair
        anything beyond that.
        """
        rows = self._collect(
            f"""
            MATCH (f:SchemaField {{id: $field_id}})-[r:REFERS_TO]->(t:SchemaTable)
            RETURN {_RELATION_COLUMNS}
            ORDER BY r.seq
        """,
            {"field_id": field_id},
        )
        return [_row_to_relation(row) for row in rows]

    def get_relations_to_table(self, table_id: str) -> List[Relation]:
        """Get relation edges referencing a table (incoming foreign keys)."""
        rows = self._collect(
            f"""
            MATCH (f:SchemaField)-[r:REFERS_TO]->(t:SchemaTable {{id: $table_id}})
            RETURN {_RELATION_COLUMNS}
            ORDER BY r.seq
        """,
            {"table_id": table_id},
        )
        return [_row_to_relation(row) for row in rows]

    def get_relations_for_table(self, table_id: str) -> List[Relation]:
        """Get relation edges where the table is either source or target.

        Args:
            table_id: Table identifier

        Returns:
            List of Relation objects, each listed once
        """
        rows = self._collect(
            f"""
            MATCH (f:SchemaField)-[r:REFERS_TO]->(t:SchemaTable)
            WHERE r.from_table_id = $table_id OR t.id = $table_id
            RETURN {_RELATION_COLUMNS}
            ORDER BY r.seq
        """,
            {"table_id": table_id},
        )
        return [_row_to_relation(row) for row in rows]

    def get_statistics(self) -> Dict[str, int]:
        """Get statistics about the graph.

        Returns:
            Dictionary with total tables, fields and relations
        """
        stats = {}
        for key, query in (
            ("total_tables", "MATCH (t:SchemaTable) RETURN COUNT(*)"),
            ("total_fields", "MATCH (f:SchemaField) RETURN COUNT(*)"),
            ("total_relations", "MATCH ()-[r:REFERS_TO]->() RETURN COUNT(*)"),
        ):
            rows = self._collect(query)
            stats[key] = rows[0][0] if rows else 0
        return stats

    def max_seq(self, label: str) -> int:
        """Get the highest sequence number stored under a node or rel label.

        Args:
            label: One of SchemaTable, SchemaField or REFERS_TO

        Returns:
            Highest sequence number, 0 when nothing is stored
        """
        if label == "REFERS_TO":
            query = "MATCH ()-[r:REFERS_TO]->() RETURN max(r.seq)"
        elif label in ("SchemaTable", "SchemaField"):
            query = f"MATCH (n:{label}) RETURN max(n.seq)"
        else:
            raise ValueError(f"Unknown label: {label}")
        rows = self._collect(query)
        if not rows or rows[0][0] is None:
            return 0
        return rows[0][0]
