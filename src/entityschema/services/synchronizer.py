"""Synchronize an entity's table, audit triggers and foreign keys with a database.

Every operation runs in a single transaction on the injected connection.
A failure anywhere rolls the whole operation back and the original exception
propagates unchanged; nothing is retried.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog

from entityschema.errors import InvalidStateTransitionError, RelationSpecError, TableExistsError
from entityschema.models.base import foreign_key_column
from entityschema.models.entity import EntityMetadata
from entityschema.models.table import ForeignKeyReference, TableDefinition
from entityschema.services.connection import DatabaseConnection
from entityschema.services.ddl_templates import DdlTemplates
from entityschema.services.relation_compiler import belongs_to_target


@asynccontextmanager
async def transaction(
    connection: DatabaseConnection,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> AsyncIterator[DatabaseConnection]:
    """Run the enclosed block in one transaction.

    Commits on normal exit. On any exception, a failed commit or
    cancellation included, rolls back and re-raises the original exception.
    A rollback that fails is logged and does not replace the original
    exception.
    """
    log = logger or structlog.get_logger(__name__)
    await connection.begin_transaction()
    try:
        yield connection
        await connection.commit()
    except BaseException as exc:
        try:
            await connection.rollback()
        except Exception as rollback_error:
            log.error(
                "rollback_failed",
                error=str(rollback_error),
                original_error=repr(exc),
            )
        else:
            log.warning("transaction_rolled_back", error=repr(exc))
        raise


def foreign_key_name(table_name: str, target_entity: str) -> str:
    return f"{table_name}_{target_entity.lower()}_fk"


def plan_foreign_keys(entity: EntityMetadata) -> list[ForeignKeyReference]:
    """Derive the foreign keys of an entity's belongs-to relations.

    Raises:
        RelationSpecError: If a relation has no target, or two relations
            would produce the same constraint name.
    """
    references: list[ForeignKeyReference] = []
    owners: dict[str, str] = {}
    for name, relation in entity.belongs_to.items():
        target = belongs_to_target(name, relation)
        constraint_name = foreign_key_name(entity.table_name, target)
        if constraint_name in owners:
            raise RelationSpecError(
                name,
                "model",
                reason=f"mapped to constraint '{constraint_name}' already used by '{owners[constraint_name]}'",
            )
        owners[constraint_name] = name
        reference = ForeignKeyReference(
            constraint_name=constraint_name,
            table_name=entity.table_name,
            column=foreign_key_column(name),
            ref_table=target.lower(),
        )
        references.append(reference)
    return references


class SchemaSynchronizer:
    """Creates and drops entity tables and their foreign keys.

    Table state moves from absent, to created without foreign keys, to
    created with foreign keys. Operations must be serialized per table by
    the caller. The connection and DDL templates are injected for
    testability.
    """

    def __init__(
        self,
        connection: DatabaseConnection,
        templates: DdlTemplates,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._connection = connection
        self._templates = templates
        self._logger = logger or structlog.get_logger(__name__)

    async def create_table(self, entity: EntityMetadata) -> TableDefinition:
        """Create an entity's table with its insert and update audit triggers.

        Args:
            entity: The entity whose table to create.

        Returns:
            The TableDefinition the table was created from.

        Raises:
            TableExistsError: If the table already exists. No DDL is issued.
        """
        table_name = entity.table_name
        if await self._connection.table_exists(table_name):
            raise TableExistsError(table_name)

        definition = TableDefinition.for_entity(entity)
        async with transaction(self._connection, self._logger):
            columns = [self._templates.column_definition(column) for column in definition.columns]
            await self._connection.create_table(table_name, columns)
            await self._connection.execute(self._templates.insert_audit_trigger(table_name))
            await self._connection.execute(self._templates.update_audit_trigger(table_name))

        self._logger.info(
            "table_created",
            table=table_name,
            column_count=len(definition.columns),
        )
        return definition

    async def add_foreign_keys(self, entity: EntityMetadata) -> list[ForeignKeyReference]:
        """Add a foreign key for every belongs-to relation of the entity.

        All constraints are added in one transaction: if any fails, none remain.

        Returns:
            The foreign keys that were added.

        Raises:
            InvalidStateTransitionError: If the table does not exist.
            RelationSpecError: If a belongs-to relation is misconfigured.
        """
        await self._require_table(entity, "add foreign keys")
        references = plan_foreign_keys(entity)

        async with transaction(self._connection, self._logger):
            for reference in references:
                await self._connection.add_foreign_key(
                    reference.constraint_name,
                    reference.table_name,
                    reference.column,
                    reference.ref_table,
                    reference.ref_column,
                )

        self._logger.info(
            "foreign_keys_added",
            table=entity.table_name,
            constraints=[reference.constraint_name for reference in references],
        )
        return references

    async def drop_foreign_keys(self, entity: EntityMetadata) -> list[ForeignKeyReference]:
        """Drop the foreign keys added by :meth:`add_foreign_keys`, all or nothing.

        Raises:
            InvalidStateTransitionError: If the table does not exist.
            RelationSpecError: If a belongs-to relation is misconfigured.
        """
        await self._require_table(entity, "drop foreign keys")
        references = plan_foreign_keys(entity)

        async with transaction(self._connection, self._logger):
            for reference in references:
                await self._connection.drop_foreign_key(reference.constraint_name, reference.table_name)

        self._logger.info(
            "foreign_keys_dropped",
            table=entity.table_name,
            constraints=[reference.constraint_name for reference in references],
        )
        return references

    async def drop_table(self, entity: EntityMetadata) -> bool:
        """Drop an entity's table if it exists.

        Returns:
            True if the table was dropped, False if it did not exist.
        """
        table_name = entity.table_name
        if not await self._connection.table_exists(table_name):
            self._logger.debug("table_drop_skipped", table=table_name)
            return False

        async with transaction(self._connection, self._logger):
            await self._connection.drop_table(table_name)

        self._logger.info("table_dropped", table=table_name)
        return True

    async def _require_table(self, entity: EntityMetadata, operation: str) -> None:
        if not await self._connection.table_exists(entity.table_name):
            raise InvalidStateTransitionError(entity.table_name, operation, "table does not exist")
