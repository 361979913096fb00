# ruff: noqa: PLR6301
"""Execution helpers that expand a query before handing it to a DB-API connection.

These adapters do not own the connection and do not translate driver errors:
anything raised by ``cursor.execute`` propagates unchanged. They work with any
driver whose paramstyle accepts ``?`` for positional and ``:name`` for named
values, e.g. :mod:`sqlite3` or ``aiosqlite``.
"""

from collections.abc import AsyncGenerator, Generator
from contextlib import asynccontextmanager, contextmanager
from typing import Any, Optional

from sqlexpand.parameters.config import ExpansionConfig
from sqlexpand.parameters.expander import ParameterExpander
from sqlexpand.parameters.types import ExpansionResult
from sqlexpand.typing import StatementParameters
from sqlexpand.utils.logging import get_logger

__all__ = ("AsyncExpandingDriver", "ExpandingDriver", "run")

logger = get_logger("driver")


def _first_column(row: Any) -> Any:
    if row is None:
        return None
    if isinstance(row, dict):
        return next(iter(row.values()), None)
    return row[0]


class ExpandingDriver:
    """Runs queries with array placeholders on a synchronous DB-API connection."""

    __slots__ = ("connection", "expander")

    def __init__(self, connection: Any, config: Optional[ExpansionConfig] = None) -> None:
        self.connection = connection
        self.expander = ParameterExpander(config)

    def _cursor(self) -> Any:
        return self.connection.cursor()

    def prepare(self, sql: str, parameters: StatementParameters = None) -> ExpansionResult:
        """Expand ``sql`` without executing it."""
        result = self.expander.expand(sql, parameters)
        logger.debug("Prepared statement: %s", result.sql)
        return result

    def execute(self, sql: str, parameters: StatementParameters = None) -> Any:
        """Expand, execute and return the open cursor.

        Equivalent to preparing the rewritten statement and executing it with the
        flattened parameters. The caller owns the returned cursor.
        """
        expanded_sql, expanded_parameters = self.prepare(sql, parameters)
        cursor = self._cursor()
        try:
            cursor.execute(expanded_sql, expanded_parameters)
        except Exception:
            cursor.close()
            raise
        return cursor

    @contextmanager
    def select_cursor(self, sql: str, parameters: StatementParameters = None) -> Generator[Any, None, None]:
        """Yield the cursor of an executed statement and close it afterwards."""
        cursor = self.execute(sql, parameters)
        try:
            yield cursor
        finally:
            cursor.close()

    def select(self, sql: str, parameters: StatementParameters = None) -> "list[Any]":
        """Return every row."""
        with self.select_cursor(sql, parameters) as cursor:
            return list(cursor.fetchall())

    def select_one(self, sql: str, parameters: StatementParameters = None) -> Any:
        """Return the first row, or None if there is none."""
        with self.select_cursor(sql, parameters) as cursor:
            return cursor.fetchone()

    def select_value(self, sql: str, parameters: StatementParameters = None) -> Any:
        """Return the first column of the first row, or None if there is none."""
        return _first_column(self.select_one(sql, parameters))


class AsyncExpandingDriver:
    """Runs queries with array placeholders on an async connection.

    The connection must provide ``await connection.cursor()`` returning a cursor
    with awaitable ``execute``, ``fetchone``, ``fetchall`` and ``close``.
    """

    __slots__ = ("connection", "expander")

    def __init__(self, connection: Any, config: Optional[ExpansionConfig] = None) -> None:
        self.connection = connection
        self.expander = ParameterExpander(config)

    async def _cursor(self) -> Any:
        return await self.connection.cursor()

    def prepare(self, sql: str, parameters: StatementParameters = None) -> ExpansionResult:
        """Expand ``sql`` without executing it."""
        result = self.expander.expand(sql, parameters)
        logger.debug("Prepared statement: %s", result.sql)
        return result

    async def execute(self, sql: str, parameters: StatementParameters = None) -> Any:
        """Expand, execute and return the open cursor."""
        expanded_sql, expanded_parameters = self.prepare(sql, parameters)
        cursor = await self._cursor()
        try:
            await cursor.execute(expanded_sql, expanded_parameters)
        except Exception:
            await cursor.close()
            raise
        return cursor

    @asynccontextmanager
    async def select_cursor(self, sql: str, parameters: StatementParameters = None) -> AsyncGenerator[Any, None]:
        """Yield the cursor of an executed statement and close it afterwards."""
        cursor = await self.execute(sql, parameters)
        try:
            yield cursor
        finally:
            await cursor.close()

    async def select(self, sql: str, parameters: StatementParameters = None) -> "list[Any]":
        async with self.select_cursor(sql, parameters) as cursor:
            return list(await cursor.fetchall())

    async def select_one(self, sql: str, parameters: StatementParameters = None) -> Any:
        async with self.select_cursor(sql, parameters) as cursor:
            return await cursor.fetchone()

    async def select_value(self, sql: str, parameters: StatementParameters = None) -> Any:
        return _first_column(await self.select_one(sql, parameters))


def run(
    connection: Any, sql: str, parameters: StatementParameters = None, config: Optional[ExpansionConfig] = None
) -> Any:
    """Expand ``sql`` and execute it on ``connection``, returning the cursor.

    Example::

        cursor = run(conn, "select * from t where v = ? or w in ([?])", [1, [2, 3, 4]])
    """
    return ExpandingDriver(connection, config).execute(sql, parameters)
