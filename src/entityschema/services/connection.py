"""Database connection used by the schema synchronizer.

Uses SQLAlchemy's native async support. SQLite does not run DDL inside a
transaction unless the driver's own transaction handling is switched off,
so engines for SQLite get the event hooks that emit ``BEGIN`` explicitly.
"""

from collections.abc import Sequence
from typing import Any, Protocol

import structlog
from sqlalchemy import Column, ForeignKeyConstraint, Integer, MetaData, Table, event, inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncTransaction, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.schema import AddConstraint, DropConstraint, DropTable


class DatabaseConnection(Protocol):
    async def begin_transaction(self) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def table_exists(self, name: str) -> bool: ...

    async def create_table(self, name: str, columns: Sequence[Column]) -> None: ...

    async def execute(self, ddl: str) -> None: ...

    async def add_foreign_key(
        self,
        constraint_name: str,
        table: str,
        column: str,
        ref_table: str,
        ref_column: str,
    ) -> None: ...

    async def drop_foreign_key(self, constraint_name: str, table: str) -> None: ...

    async def drop_table(self, name: str) -> None: ...


class SQLAlchemyConnection:
    """Runs schema DDL against an AsyncEngine, one connection per transaction.

    Each transaction holds its own connection from the engine until it is
    committed or rolled back. DDL methods require an active transaction;
    ``table_exists`` works with or without one.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._engine = engine
        self._logger = logger or structlog.get_logger(__name__)
        self._connection: AsyncConnection | None = None
        self._transaction: AsyncTransaction | None = None

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None

    async def begin_transaction(self) -> None:
        if self._connection is not None:
            raise RuntimeError("A transaction is already active on this connection.")

        connection = await self._engine.connect()
        try:
            self._transaction = await connection.begin()
        except BaseException:
            await connection.close()
            raise
        self._connection = connection
        self._logger.debug("transaction_started")

    async def commit(self) -> None:
        """Commit and release the connection.

        A failed commit keeps the transaction active so the caller can roll
        it back.
        """
        transaction = self._require_transaction()
        await transaction.commit()
        await self._release()
        self._logger.debug("transaction_committed")

    async def rollback(self) -> None:
        transaction = self._require_transaction()
        try:
            await transaction.rollback()
        finally:
            await self._release()
        self._logger.debug("transaction_rolled_back")

    async def table_exists(self, name: str) -> bool:
        if self._connection is not None:
            return await self._connection.run_sync(_has_table, name)
        async with self._engine.connect() as connection:
            return await connection.run_sync(_has_table, name)

    async def create_table(self, name: str, columns: Sequence[Column]) -> None:
        table = Table(name, MetaData(), *columns)
        await self._active().run_sync(table.create)

    async def execute(self, ddl: str) -> None:
        await self._active().execute(text(ddl))

    async def add_foreign_key(
        self,
        constraint_name: str,
        table: str,
        column: str,
        ref_table: str,
        ref_column: str,
    ) -> None:
        constraint = build_foreign_key_constraint(constraint_name, table, [column], ref_table, [ref_column])
        await self._active().execute(AddConstraint(constraint))

    async def drop_foreign_key(self, constraint_name: str, table: str) -> None:
        connection = self._active()
        reflected = await connection.run_sync(_reflect_foreign_key, table, constraint_name)
        if reflected is None:
            raise InvalidRequestError(f"Foreign key '{constraint_name}' not found on table '{table}'")
        constraint = build_foreign_key_constraint(
            constraint_name,
            table,
            reflected["constrained_columns"],
            reflected["referred_table"],
            reflected["referred_columns"],
        )
        await connection.execute(DropConstraint(constraint))

    async def drop_table(self, name: str) -> None:
        await self._active().execute(DropTable(Table(name, MetaData())))

    async def dispose(self) -> None:
        """Release pooled database connections held by the engine."""
        await self._engine.dispose()

    def _active(self) -> AsyncConnection:
        if self._connection is None:
            raise RuntimeError("No active transaction. Call begin_transaction() first.")
        return self._connection

    def _require_transaction(self) -> AsyncTransaction:
        if self._transaction is None:
            raise RuntimeError("No active transaction. Call begin_transaction() first.")
        return self._transaction

    async def _release(self) -> None:
        connection = self._connection
        self._connection = None
        self._transaction = None
        if connection is not None:
            await connection.close()


def build_foreign_key_constraint(
    constraint_name: str,
    table: str,
    columns: Sequence[str],
    ref_table: str,
    ref_columns: Sequence[str],
) -> ForeignKeyConstraint:
    """Build a named foreign key attached to a minimal table stub.

    Only the columns taking part in the key are declared, which is all
    ``AddConstraint``/``DropConstraint`` need to render.
    """
    metadata = MetaData()
    referenced = Table(ref_table, metadata, *(Column(name, Integer) for name in ref_columns))
    if table == ref_table:
        local = referenced
        for name in columns:
            if name not in local.c:
                local.append_column(Column(name, Integer))
    else:
        local = Table(table, metadata, *(Column(name, Integer) for name in columns))

    constraint = ForeignKeyConstraint(
        list(columns),
        [f"{ref_table}.{name}" for name in ref_columns],
        name=constraint_name,
    )
    local.append_constraint(constraint)
    return constraint


def _has_table(connection: Connection, name: str) -> bool:
    return inspect(connection).has_table(name)


def _reflect_foreign_key(connection: Connection, table: str, constraint_name: str) -> dict[str, Any] | None:
    for foreign_key in inspect(connection).get_foreign_keys(table):
        if foreign_key.get("name") == constraint_name:
            return dict(foreign_key)
    return None


def create_async_engine_from_url(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async SQLAlchemy engine for the given database URL.

    Args:
        database_url: SQLAlchemy URL, e.g. ``sqlite+aiosqlite:///schema.db``
            or ``sqlite+aiosqlite:///:memory:``.
        echo: Log emitted SQL through SQLAlchemy's logger.

    Returns:
        AsyncEngine instance. SQLite engines run DDL transactionally.
    """
    if database_url.endswith(":memory:"):
        # every connection must see the same in-memory database
        engine = create_async_engine(database_url, echo=echo, poolclass=StaticPool)
    else:
        engine = create_async_engine(database_url, echo=echo)

    if engine.dialect.name == "sqlite":
        _enable_transactional_ddl(engine)
    return engine


def _enable_transactional_ddl(engine: AsyncEngine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(connection: Connection) -> None:
        connection.exec_driver_sql("BEGIN")
