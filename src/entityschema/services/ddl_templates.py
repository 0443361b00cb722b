"""Column and audit trigger DDL for synthesized entity tables."""

from typing import Protocol

from sqlalchemy import Boolean, Column, Integer, Numeric, String, Text, text
from sqlalchemy.dialects import sqlite
from sqlalchemy.types import TypeEngine

from entityschema.models.attribute import AttributeSpec
from entityschema.models.enums import AttributeType
from entityschema.models.table import TableColumn

DECIMAL_PRECISION = 18
DECIMAL_SCALE = 4

# Server defaults for the audit columns, overwritten by the insert trigger.
AUDIT_PLACEHOLDERS = {"date_created": "0", "date_updated": "0", "uid": "''"}

_SQLITE_NOW = "CAST(strftime('%s', 'now') AS INTEGER)"
_SQLITE_UUID = (
    "lower(hex(randomblob(4)) || '-' || hex(randomblob(2)) || '-' || "
    "hex(randomblob(2)) || '-' || hex(randomblob(2)) || '-' || hex(randomblob(6)))"
)


class DdlTemplates(Protocol):
    def column_definition(self, column: TableColumn) -> Column: ...

    def insert_audit_trigger(self, table_name: str) -> str: ...

    def update_audit_trigger(self, table_name: str) -> str: ...


def column_type(attribute: AttributeSpec) -> TypeEngine:
    """Map an attribute to its SQLAlchemy column type."""
    if attribute.type is AttributeType.STRING:
        return String(attribute.max_size)
    if attribute.type is AttributeType.TEXT:
        return Text()
    if attribute.type is AttributeType.INTEGER:
        return Integer()
    if attribute.type is AttributeType.BOOLEAN:
        return Boolean()
    if attribute.type is AttributeType.DECIMAL:
        return Numeric(DECIMAL_PRECISION, DECIMAL_SCALE)
    return String(attribute.max_size)


def _placeholder(column_name: str):
    default = AUDIT_PLACEHOLDERS.get(column_name)
    return text(default) if default is not None else None


class SQLiteDdlTemplates:
    """Templates producing SQLite audit triggers.

    The insert trigger stamps ``date_created``, ``date_updated`` and a random
    36-character ``uid`` on new rows; the update trigger refreshes
    ``date_updated``.
    """

    def __init__(self) -> None:
        self._preparer = sqlite.dialect().identifier_preparer

    def column_definition(self, column: TableColumn) -> Column:
        if column.primary_key:
            return Column(column.name, Integer, primary_key=True, autoincrement=True)
        return Column(
            column.name,
            column_type(column.attribute),
            nullable=not column.attribute.required,
            server_default=_placeholder(column.name),
        )

    def insert_audit_trigger(self, table_name: str) -> str:
        table = self._preparer.quote(table_name)
        trigger = self._preparer.quote(f"{table_name}_insert_audit")
        lines = [
            f"CREATE TRIGGER {trigger}",
            f"    AFTER INSERT ON {table}",
            "    FOR EACH ROW",
            "BEGIN",
            f"    UPDATE {table}",
            f"    SET date_created = {_SQLITE_NOW},",
            f"        date_updated = {_SQLITE_NOW},",
            f"        uid = {_SQLITE_UUID}",
            "    WHERE id = NEW.id;",
            "END",
        ]
        return "\n".join(lines)

    def update_audit_trigger(self, table_name: str) -> str:
        table = self._preparer.quote(table_name)
        trigger = self._preparer.quote(f"{table_name}_update_audit")
        lines = [
            f"CREATE TRIGGER {trigger}",
            f"    AFTER UPDATE ON {table}",
            "    FOR EACH ROW",
            "BEGIN",
            f"    UPDATE {table}",
            f"    SET date_updated = {_SQLITE_NOW}",
            "    WHERE id = NEW.id;",
            "END",
        ]
        return "\n".join(lines)
