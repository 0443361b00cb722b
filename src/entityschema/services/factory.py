"""Factory functions for creating and wiring the schema synchronizer.

Provides a production factory bound to a database URL and a test factory
that uses an in-memory SQLite database for fast, isolated testing.
"""

import structlog

from entityschema.services.connection import SQLAlchemyConnection, create_async_engine_from_url
from entityschema.services.ddl_templates import DdlTemplates, SQLiteDdlTemplates
from entityschema.services.synchronizer import SchemaSynchronizer

IN_MEMORY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def create_schema_synchronizer(
    database_url: str,
    templates: DdlTemplates | None = None,
    echo: bool = False,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> SchemaSynchronizer:
    """Create a SchemaSynchronizer bound to a database.

    Args:
        database_url: SQLAlchemy async database URL.
        templates: Column and trigger DDL templates. Defaults to SQLite templates.
        echo: Log emitted SQL through SQLAlchemy's logger.
        logger: Structured logger shared by the connection and synchronizer.

    Returns:
        Configured SchemaSynchronizer ready for use.
    """
    logger = logger or structlog.get_logger(__name__)

    engine = create_async_engine_from_url(database_url, echo=echo)
    connection = SQLAlchemyConnection(engine=engine, logger=logger)

    return SchemaSynchronizer(
        connection=connection,
        templates=templates or SQLiteDdlTemplates(),
        logger=logger,
    )


def create_test_schema_synchronizer(
    logger: structlog.stdlib.BoundLogger | None = None,
) -> SchemaSynchronizer:
    """Create a SchemaSynchronizer over a fresh in-memory SQLite database.

    The database lives as long as the returned synchronizer's engine and is
    not shared with any other call.
    """
    return create_schema_synchronizer(IN_MEMORY_DATABASE_URL, logger=logger)
