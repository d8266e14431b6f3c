"""Errors raised by the schema designer."""


class SchemaDesignerError(Exception):
    """Base class for schema designer errors."""


class NotFoundError(SchemaDesignerError, KeyError):
    """A table, field or relation id is not in its collection.

    Attributes:
        kind: Entity kind ("table", "field" or "relation")
        entity_id: The id that was looked up
    """

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} '{entity_id}' not found")

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.args[0]


class InvalidOperationError(SchemaDesignerError, ValueError):
    """An operation was called with an attribute or value it does not accept."""


class PositionUnavailableError(SchemaDesignerError):
    """No free canvas position was found within the attempt budget."""
