"""Tests for the schema synchronizer factories."""

from pathlib import Path

from entityschema.models.entity import EntityMetadata
from entityschema.services.connection import SQLAlchemyConnection
from entityschema.services.ddl_templates import SQLiteDdlTemplates
from entityschema.services.factory import create_schema_synchronizer, create_test_schema_synchronizer
from entityschema.services.synchronizer import SchemaSynchronizer


class RecordingTemplates(SQLiteDdlTemplates):
    """SQLite templates that remember which tables they rendered triggers for."""

    def __init__(self) -> None:
        super().__init__()
        self.tables: list[str] = []

    def insert_audit_trigger(self, table_name: str) -> str:
        self.tables.append(table_name)
        return super().insert_audit_trigger(table_name)


class TestCreateSchemaSynchronizer:
    """Tests for create_schema_synchronizer factory."""

    def test_creates_synchronizer_instance(self, tmp_path: Path) -> None:
        synchronizer = create_schema_synchronizer(f"sqlite+aiosqlite:///{tmp_path / 'schema.db'}")

        assert isinstance(synchronizer, SchemaSynchronizer)

    def test_wires_all_dependencies(self, tmp_path: Path) -> None:
        synchronizer = create_schema_synchronizer(f"sqlite+aiosqlite:///{tmp_path / 'schema.db'}")

        assert isinstance(synchronizer._connection, SQLAlchemyConnection)
        assert isinstance(synchronizer._templates, SQLiteDdlTemplates)

    def test_respects_templates(self, tmp_path: Path) -> None:
        templates = RecordingTemplates()

        synchronizer = create_schema_synchronizer(
            f"sqlite+aiosqlite:///{tmp_path / 'schema.db'}",
            templates=templates,
        )

        assert synchronizer._templates is templates

    async def test_persists_tables_to_file(self, tmp_path: Path) -> None:
        database_url = f"sqlite+aiosqlite:///{tmp_path / 'schema.db'}"
        entity = EntityMetadata(entity_name="Article")

        first = create_schema_synchronizer(database_url)
        await first.create_table(entity)
        await first._connection.dispose()

        second = create_schema_synchronizer(database_url)
        assert await second._connection.table_exists("article") is True
        await second._connection.dispose()


class TestCreateTestSchemaSynchronizer:
    """Tests for create_test_schema_synchronizer factory."""

    def test_creates_synchronizer_instance(self) -> None:
        synchronizer = create_test_schema_synchronizer()

        assert isinstance(synchronizer, SchemaSynchronizer)

    async def test_each_call_gets_its_own_database(self) -> None:
        entity = EntityMetadata(entity_name="Article")
        synchronizer1 = create_test_schema_synchronizer()
        synchronizer2 = create_test_schema_synchronizer()

        await synchronizer1.create_table(entity)

        assert await synchronizer1._connection.table_exists("article") is True
        assert await synchronizer2._connection.table_exists("article") is False

    async def test_can_create_and_drop_tables(self) -> None:
        entity = EntityMetadata(entity_name="Article")
        synchronizer = create_test_schema_synchronizer()

        await synchronizer.create_table(entity)

        assert await synchronizer.drop_table(entity) is True
