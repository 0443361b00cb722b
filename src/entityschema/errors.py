"""Exceptions raised by the entity schema compiler and synchronizer.

Database failures are not wrapped: whatever the connection raises propagates
unchanged once the active transaction has been rolled back.
"""

from typing import Any


class EntitySchemaError(Exception):
    """Base class for errors raised by entityschema itself."""


class TableExistsError(EntitySchemaError):
    """Raised when creating a table that is already present."""

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        super().__init__(f"Table '{table_name}' already exists")


class InvalidStateTransitionError(EntitySchemaError):
    """Raised when a schema operation is not valid for the table's current state."""

    def __init__(self, table_name: str, operation: str, reason: str) -> None:
        self.table_name = table_name
        self.operation = operation
        self.reason = reason
        super().__init__(f"Cannot {operation} on '{table_name}': {reason}")


class RelationSpecError(EntitySchemaError):
    """Raised when a relation is configured without a field it needs."""

    def __init__(self, relation_name: str, field: str, reason: str = "missing") -> None:
        self.relation_name = relation_name
        self.field = field
        self.reason = reason
        super().__init__(f"Relation '{relation_name}': {field} is {reason}")


class SearchValueError(EntitySchemaError):
    """Raised when a search filter value cannot be coerced to its attribute's type."""

    def __init__(self, attribute: str, value: Any) -> None:
        self.attribute = attribute
        self.value = value
        super().__init__(f"Invalid search value for '{attribute}': {value!r}")
