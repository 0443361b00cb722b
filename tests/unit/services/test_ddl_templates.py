"""Tests for the SQLite DDL templates."""

from sqlalchemy import Boolean, Integer, Numeric, String, Text

from entityschema.models.attribute import AttributeSpec
from entityschema.models.enums import AttributeType
from entityschema.models.table import TableColumn
from entityschema.services.ddl_templates import SQLiteDdlTemplates, column_type


def _column(name: str, **settings) -> TableColumn:
    return TableColumn(name=name, attribute=AttributeSpec(**settings))


class TestColumnDefinition:
    """Tests for column rendering."""

    def test_primary_key(self) -> None:
        column = SQLiteDdlTemplates().column_definition(
            TableColumn(name="id", attribute=AttributeSpec(type=AttributeType.INTEGER), primary_key=True)
        )

        assert column.name == "id"
        assert column.primary_key is True
        assert isinstance(column.type, Integer)

    def test_required_string_uses_max_size(self) -> None:
        column = SQLiteDdlTemplates().column_definition(_column("title", max_size=255, required=True))

        assert isinstance(column.type, String)
        assert column.type.length == 255
        assert column.nullable is False

    def test_optional_column_is_nullable(self) -> None:
        column = SQLiteDdlTemplates().column_definition(_column("views", type=AttributeType.INTEGER))

        assert column.nullable is True

    def test_audit_columns_get_placeholder_defaults(self) -> None:
        templates = SQLiteDdlTemplates()
        stamp = templates.column_definition(_column("date_created", type=AttributeType.INTEGER, required=True))
        uid = templates.column_definition(_column("uid", max_size=36, required=True))

        assert str(stamp.server_default.arg) == "0"
        assert str(uid.server_default.arg) == "''"
        assert stamp.nullable is False

    def test_attribute_columns_have_no_default(self) -> None:
        column = SQLiteDdlTemplates().column_definition(_column("title", required=True))

        assert column.server_default is None

    def test_returns_fresh_columns(self) -> None:
        templates = SQLiteDdlTemplates()
        spec = _column("title")

        assert templates.column_definition(spec) is not templates.column_definition(spec)


class TestColumnType:
    """Tests for attribute type mapping."""

    def test_maps_each_attribute_type(self) -> None:
        assert isinstance(column_type(AttributeSpec(type=AttributeType.TEXT)), Text)
        assert isinstance(column_type(AttributeSpec(type=AttributeType.INTEGER)), Integer)
        assert isinstance(column_type(AttributeSpec(type=AttributeType.BOOLEAN)), Boolean)
        assert isinstance(column_type(AttributeSpec(type=AttributeType.DECIMAL)), Numeric)

    def test_decimal_precision(self) -> None:
        decimal = column_type(AttributeSpec(type=AttributeType.DECIMAL))

        assert (decimal.precision, decimal.scale) == (18, 4)


class TestAuditTriggers:
    """Tests for audit trigger DDL."""

    def test_insert_trigger_stamps_audit_columns(self) -> None:
        ddl = SQLiteDdlTemplates().insert_audit_trigger("article")

        assert ddl.startswith("CREATE TRIGGER article_insert_audit")
        assert "AFTER INSERT ON article" in ddl
        assert "date_created =" in ddl
        assert "date_updated =" in ddl
        assert "uid =" in ddl
        assert ddl.rstrip().endswith("END")

    def test_update_trigger_stamps_date_updated(self) -> None:
        ddl = SQLiteDdlTemplates().update_audit_trigger("article")

        assert ddl.startswith("CREATE TRIGGER article_update_audit")
        assert "AFTER UPDATE ON article" in ddl
        assert "date_updated =" in ddl
        assert "date_created" not in ddl

    def test_quotes_reserved_table_names(self) -> None:
        ddl = SQLiteDdlTemplates().update_audit_trigger("order")

        assert 'ON "order"' in ddl
