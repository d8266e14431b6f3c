"""
Schema graph manager: the mutation and read API of the designer.

Every mutation runs in a single graph transaction and ends with an inference
pass over the fields it may have affected, so relations always match the
field/table naming convention once the call returns. Observers subscribed
with ``subscribe`` receive a snapshot after each successful mutation.

Example:
    >>> manager = SchemaGraphManager()
    >>> user = manager.rename_table(manager.create_table().id, "User")
    >>> manager.set_pointer(400, 80)
    >>> post = manager.rename_table(manager.create_table().id, "Post")
    >>> field = manager.add_field(post.id)
    >>> _ = manager.update_field(field.id, "name", "user_id")
    >>> [r.to_table_id for r in manager.relations] == [user.id]
    True
"""

import logging
import time
from collections import Counter
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Tuple, Union

from schema_designer.exceptions import InvalidOperationError, NotFoundError
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
from schema_designer.inference import (
    candidate_field_names,
    field_refers_to,
    is_foreign_key_name,
    referenced_table_name,
)
from schema_designer.positions import (
    DEFAULT_MAX_POSITION_ATTEMPTS,
    DEFAULT_POSITION_STEP,
    find_free_position,
)

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "NewTable"
DEFAULT_FIELD_NAME = "field"
DEFAULT_FIELD_TYPE = FieldType.INTEGER

# Accepted option names -> TableOptions attribute
OPTION_ALIASES: Dict[str, str] = {
    "has_auto_id": "has_auto_id",
    "hasAutoId": "has_auto_id",
    "id": "has_auto_id",
    "remember_token": "remember_token",
    "rememberToken": "remember_token",
    "soft_deletes": "soft_deletes",
    "softDeletes": "soft_deletes",
    "timestamps": "timestamps",
}

Listener = Callable[[SchemaSnapshot], None]
PositionLike = Union[Position, Tuple[float, float]]


@dataclass
class ProjectState:
    """State of the project owning the schema."""

    is_modified: bool = False


def _now_millis() -> int:
    return int(time.time() * 1000)


def _coerce_position(position: PositionLike) -> Position:
    if isinstance(position, Position):
        return position
    try:
        x, y = position
        return Position(x=float(x), y=float(y))
    except (TypeError, ValueError) as e:
        raise InvalidOperationError(f"Invalid position: {position!r}") from e


def _coerce_field_type(value: Union[FieldType, str]) -> FieldType:
    try:
        return FieldType(value.upper() if isinstance(value, str) else value)
    except ValueError as e:
        choices = ", ".join(t.value for t in FieldType)
        raise InvalidOperationError(
            f"Unsupported field type {value!r}. Choose one of: {choices}"
        ) from e


class SchemaGraphManager:
    """Owns tables, fields and relations and keeps relations inferred.

    Relations are never authored directly: they are created and removed by
    the inference pass that runs inside table and field mutations.
    """

    def __init__(
        self,
        graph: Optional[SchemaGraph] = None,
        *,
        position_step: float = DEFAULT_POSITION_STEP,
        max_position_attempts: int = DEFAULT_MAX_POSITION_ATTEMPTS,
        clock: Callable[[], int] = _now_millis,
    ):
        """Initialize the manager.

        Args:
            graph: Store to manage. Defaults to a fresh in-memory graph.
            position_step: Offset applied when a new table's position collides
            max_position_attempts: Candidates tried before giving up placement
            clock: Returns the current time in epoch milliseconds
        """
        self.graph = graph if graph is not None else SchemaGraph()
        self.project = ProjectState()
        self.position_step = position_step
        self.max_position_attempts = max_position_attempts
        self._clock = clock
        self._pointer = Position(x=0.0, y=0.0)
        self._listeners: List[Listener] = []

    # Notifications

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with a snapshot after each mutation.

        Args:
            listener: Callable receiving a SchemaSnapshot

        Returns:
            Callable that unregisters the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def mark_saved(self) -> None:
        """Clear the project modified flag after the caller persisted it."""
        self.project.is_modified = False

    def _notify(self) -> None:
        self.project.is_modified = True
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                # The mutation is already committed
                logger.exception(f"Schema listener {listener!r} failed")

    def set_pointer(self, x: float, y: float) -> None:
        """Record the last known pointer location, used to place new tables."""
        self._pointer = Position(x=float(x), y=float(y))

    # Reads

    @property
    def tables(self) -> List[Table]:
        return self.graph.get_tables()

    @property
    def fields(self) -> List[Field]:
        return self.graph.get_fields()

    @property
    def relations(self) -> List[Relation]:
        return self.graph.get_relations()

    def snapshot(self) -> SchemaSnapshot:
        """Read tables, fields and relations in one go."""
        return self.graph.snapshot()

    def get_table(self, table_id: str) -> Table:
        """Get a table by id.

        Raises:
            NotFoundError: If no table has this id
        """
        table = self.graph.get_table(table_id)
        if table is None:
            raise NotFoundError("table", table_id)
        return table

    def get_field(self, field_id: str) -> Field:
        """Get a field by id.

        Raises:
            NotFoundError: If no field has this id
        """
        field = self.graph.get_field(field_id)
        if field is None:
            raise NotFoundError("field", field_id)
        return field

    def fields_for_table(self, table_id: str) -> List[Field]:
        """Get the fields owned by a table, for display.

        Raises:
            NotFoundError: If no table has this id
        """
        self.get_table(table_id)
        return self.graph.get_fields_for_table(table_id)

    def relations_for_table(self, table_id: str) -> List[Relation]:
        """Get relations where the table is source or target, for display.

        Raises:
            NotFoundError: If no table has this id
        """
        self.get_table(table_id)
        return self.graph.get_relations_for_table(table_id)

    def check_invariants(self) -> List[str]:
        """Describe every way the stored graph breaks consistency.

        Returns:
            Human-readable problems; empty when the graph is consistent
        """
        snapshot = self.snapshot()
        tables = {table.id: table for table in snapshot.tables}
        fields = {field.id: field for field in snapshot.fields}
        problems = []

        for field in snapshot.fields:
            if field.table_id not in tables:
                problems.append(
                    f"field {field.id} belongs to missing table {field.table_id}"
                )

        per_field = Counter(relation.field_id for relation in snapshot.relations)
        for relation in snapshot.relations:
            field = fields.get(relation.field_id)
            target = tables.get(relation.to_table_id)
            if field is None:
                problems.append(
                    f"relation {relation.id} references missing field {relation.field_id}"
                )
            elif relation.from_table_id != field.table_id:
                problems.append(
                    f"relation {relation.id} starts at {relation.from_table_id} "
                    f"but field {field.id} belongs to {field.table_id}"
                )
            if target is None:
                problems.append(
                    f"relation {relation.id} references missing table {relation.to_table_id}"
                )
            elif field is not None and not field_refers_to(field.name, target.name):
                problems.append(
                    f"relation {relation.id} links field '{field.name}' "
                    f"to table '{target.name}'"
                )

        for field_id, count in per_field.items():
            if count > 1:
                problems.append(f"field {field_id} has {count} relations")

        for field in snapshot.fields:
            if field.id in per_field:
                continue
            if any(field_refers_to(field.name, t.name) for t in snapshot.tables):
                problems.append(f"field {field.id} ('{field.name}') has no relation")

        return problems

    # Inference

    def _resolve_target(self, field_name: str) -> Optional[Table]:
        """Table a field name refers to, preferring the capitalized form."""
        exact = referenced_table_name(field_name)
        if exact is None:
            return None
        matches = self.graph.find_tables_by_name(exact)
        if matches:
            return matches[0]
        for table in self.graph.get_tables():
            if field_refers_to(field_name, table.name):
                return table
        return None

    def _reconcile_field(self, field: Field) -> Optional[Relation]:
        """Make the relations of one field match its current name.

        Keeps an existing relation whose target still matches, otherwise
        drops it and links the field to the referenced table if one exists.

        Args:
            field: Field with its current (possibly uncommitted) name

        Returns:
            The field's relation after reconciliation, or None

        Raises:
            NotFoundError: If the field's owning table does not exist
        """
        if self.graph.get_table(field.table_id) is None:
            raise NotFoundError("table", field.table_id)

        kept: Optional[Relation] = None
        for relation in self.graph.get_relations_for_field(field.id):
            target = self.graph.get_table(relation.to_table_id)
            if (
                kept is None
                and target is not None
                and relation.from_table_id == field.table_id
                and field_refers_to(field.name, target.name)
            ):
                kept = relation
                continue
            self.graph.delete_relation(relation.id)
            logger.debug(f"Removed relation {relation.id} of field '{field.name}'")

        if kept is not None:
            return kept

        target = self._resolve_target(field.name)
        if target is None:
            if is_foreign_key_name(field.name):
                logger.debug(
                    f"No table for foreign key '{field.name}', leaving it unlinked"
                )
            return None

        relation = Relation(
            id=self.graph.make_relation_id(),
            field_id=field.id,
            from_table_id=field.table_id,
            to_table_id=target.id,
        )
        self.graph.add_relation(relation)
        logger.debug(f"Linked field '{field.name}' to table '{target.name}'")
        return relation

    def _reconcile_table_name(self, table_id: str, name: str) -> None:
        """Inference pass for fields affected by a table taking ``name``."""
        affected: Dict[str, Field] = {}
        for field_name in sorted(candidate_field_names(name)):
            for field in self.graph.find_fields_by_name(field_name):
                affected[field.id] = field
        for relation in self.graph.get_relations_to_table(table_id):
            field = self.graph.get_field(relation.field_id)
            if field is not None:
                affected[field.id] = field

        for field in affected.values():
            self._reconcile_field(field)

    def _delete_field(self, field: Field) -> None:
        for relation in self.graph.get_relations_for_field(field.id):
            self.graph.delete_relation(relation.id)
        self.graph.delete_field(field.id)

    # Table lifecycle

    def create_table(self) -> Table:
        """Create a table with default name, options and one default field.

        The table is placed at the pointer location, shifted until it does
        not coincide with an existing table.

        Returns:
            The created table

        Raises:
            PositionUnavailableError: If no free position is found
        """
        with self.graph.transaction():
            position = find_free_position(
                self._pointer,
                self.graph.get_positions(),
                step=self.position_step,
                max_attempts=self.max_position_attempts,
            )
            table = Table(
                id=self.graph.make_table_id(),
                name=DEFAULT_TABLE_NAME,
                position=position,
                options=TableOptions(),
                created_at=self._clock(),
            )
            self.graph.add_table(table)
            self.graph.add_field(
                Field(
                    id=self.graph.make_field_id(),
                    table_id=table.id,
                    name=DEFAULT_FIELD_NAME,
                    type=DEFAULT_FIELD_TYPE,
                )
            )
            self._reconcile_table_name(table.id, table.name)

        logger.info(f"Created table {table.id} at ({position.x}, {position.y})")
        self._notify()
        return table

    def remove_table(self, table_id: str) -> None:
        """Remove a table, its fields and every relation touching it.

        Removing an unknown table is a logged no-op.

        Args:
            table_id: Table identifier
        """
        if self.graph.get_table(table_id) is None:
            logger.warning(f"remove_table: table {table_id} not found, nothing to do")
            return

        with self.graph.transaction():
            incoming = self.graph.get_relations_to_table(table_id)
            for relation in incoming:
                self.graph.delete_relation(relation.id)
            for field in self.graph.get_fields_for_table(table_id):
                self._delete_field(field)
            self.graph.delete_table(table_id)

            # Another table may carry the same name
            for relation in incoming:
                field = self.graph.get_field(relation.field_id)
                if field is not None:
                    self._reconcile_field(field)

        logger.info(f"Removed table {table_id}")
        self._notify()

    def rename_table(self, table_id: str, name: str) -> Table:
        """Rename a table and re-infer relations for the new name.

        Args:
            table_id: Table identifier
            name: New table name

        Returns:
            The renamed table

        Raises:
            NotFoundError: If no table has this id
            InvalidOperationError: If name is not a string
        """
        if not isinstance(name, str):
            raise InvalidOperationError(f"Table name must be a string, got {name!r}")
        self.get_table(table_id)

        with self.graph.transaction():
            self.graph.set_table_name(table_id, name)
            self._reconcile_table_name(table_id, name)

        self._notify()
        return self.get_table(table_id)

    def reposition_table(self, table_id: str, position: PositionLike) -> Table:
        """Move a table. No inference side effects.

        Raises:
            NotFoundError: If no table has this id
            InvalidOperationError: If position is not an (x, y) pair
        """
        new_position = _coerce_position(position)
        self.get_table(table_id)

        with self.graph.transaction():
            self.graph.set_table_position(table_id, new_position)

        self._notify()
        return self.get_table(table_id)

    def set_table_option(self, table_id: str, option: str, value: bool) -> Table:
        """Set one option flag of a table, leaving the others untouched.

        Args:
            table_id: Table identifier
            option: Option name, snake_case or camelCase (``softDeletes``)
            value: New flag value

        Returns:
            The updated table

        Raises:
            NotFoundError: If no table has this id
            InvalidOperationError: If the option name is unknown or the value
                is not a bool
        """
        attribute = OPTION_ALIASES.get(option)
        if attribute is None:
            raise InvalidOperationError(
                f"Unknown table option {option!r}. "
                f"Choose one of: {', '.join(sorted(set(OPTION_ALIASES.values())))}"
            )
        if not isinstance(value, bool):
            raise InvalidOperationError(
                f"Table option value must be a bool, got {value!r}"
            )
        self.get_table(table_id)

        with self.graph.transaction():
            self.graph.set_table_option(table_id, attribute, value)

        self._notify()
        return self.get_table(table_id)

    def clear(self) -> None:
        """Remove every table, field and relation."""
        self.graph.clear_all()
        logger.info("Cleared schema")
        self._notify()

    # Field lifecycle

    def add_field(self, table_id: str) -> Field:
        """Add a field with default name and type to a table.

        Raises:
            NotFoundError: If no table has this id
        """
        self.get_table(table_id)
        field = Field(
            id=self.graph.make_field_id(),
            table_id=table_id,
            name=DEFAULT_FIELD_NAME,
            type=DEFAULT_FIELD_TYPE,
        )
        with self.graph.transaction():
            self.graph.add_field(field)

        self._notify()
        return field

    def update_field(
        self, field_id: str, attribute: str, value: Union[str, FieldType]
    ) -> Field:
        """Update a field's name or type.

        Renaming runs the inference pass for the field; changing the type
        does not.

        Args:
            field_id: Field identifier
            attribute: "name" or "type"
            value: New name, or a FieldType (or its string value)

        Returns:
            The updated field

        Raises:
            NotFoundError: If no field has this id
            InvalidOperationError: If the attribute or value is not accepted
        """
        field = self.get_field(field_id)

        if attribute == "name":
            if not isinstance(value, str):
                raise InvalidOperationError(
                    f"Field name must be a string, got {value!r}"
                )
            with self.graph.transaction():
                self.graph.set_field_name(field_id, value)
                self._reconcile_field(replace(field, name=value))
        elif attribute == "type":
            field_type = _coerce_field_type(value)
            with self.graph.transaction():
                self.graph.set_field_type(field_id, field_type)
        else:
            raise InvalidOperationError(
                f"Unknown field attribute {attribute!r}. Choose 'name' or 'type'"
            )

        self._notify()
        return self.get_field(field_id)

    def remove_field(self, field_id: str) -> None:
        """Remove a field and its relation.

        Removing an unknown field is a logged no-op.
        """
        field = self.graph.get_field(field_id)
        if field is None:
            logger.warning(f"remove_field: field {field_id} not found, nothing to do")
            return

        with self.graph.transaction():
            self._delete_field(field)

        self._notify()
