"""Mock builders shared by the repository, service and sync tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import DBAPIError


def make_session() -> AsyncMock:
    """Create a mock AsyncSession."""
    session = AsyncMock()
    # session.add() is synchronous in SQLAlchemy
    session.add = MagicMock()
    return session


def scalar_result(value: Any) -> MagicMock:
    """A result whose scalar accessors all return *value*."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar_one.return_value = value
    result.scalar.return_value = value
    return result


def scalars_result(values: list) -> MagicMock:
    """A result whose scalars().all() returns *values*."""
    result = MagicMock()
    scalars = MagicMock()
    scalars.all.return_value = values
    result.scalars.return_value = scalars
    return result


def rowcount_result(rowcount: int) -> MagicMock:
    result = MagicMock()
    result.rowcount = rowcount
    return result


def executed_statement(session: AsyncMock, index: int = 0) -> Any:
    """The statement passed to the index-th session.execute call."""
    return session.execute.call_args_list[index].args[0]


def compile_pg(stmt: Any) -> Any:
    """Compile a statement with the PostgreSQL dialect."""
    return stmt.compile(dialect=postgresql.dialect())


def sql_text(stmt: Any) -> str:
    return str(compile_pg(stmt))


class FakeTransaction:
    """Async context manager standing in for session.begin()/begin_nested()."""

    def __init__(self) -> None:
        self.committed = False
        self.rolled_back = False

    async def __aenter__(self) -> "FakeTransaction":
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        if exc_type is None:
            self.committed = True
        else:
            self.rolled_back = True
        return False


def make_session_factory(session: AsyncMock) -> tuple[MagicMock, list[FakeTransaction]]:
    """Build an async_sessionmaker stand-in yielding *session*.

    Returns the factory and the list of transactions begun on the session.
    """
    transactions: list[FakeTransaction] = []

    def _begin() -> FakeTransaction:
        tx = FakeTransaction()
        transactions.append(tx)
        return tx

    session.begin = MagicMock(side_effect=_begin)
    session.begin_nested = MagicMock(side_effect=_begin)

    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=session)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory, transactions


class FakeAsyncpgError(Exception):
    """Stands in for an asyncpg server error (``sqlstate``, ``constraint_name``)."""

    def __init__(self, message: str, sqlstate: str, constraint_name: str | None = None):
        super().__init__(message)
        self.sqlstate = sqlstate
        self.constraint_name = constraint_name


def dialect_error(
    error_class: type[DBAPIError],
    sqlstate: str,
    constraint_name: str | None = None,
    message: str = "server error",
) -> DBAPIError:
    """Wrap a fake asyncpg error the way the asyncpg dialect does.

    The dialect's own DBAPI error carries the SQLSTATE and is raised from
    the asyncpg error; SQLAlchemy then wraps it in *error_class*.
    """
    cause = FakeAsyncpgError(message, sqlstate, constraint_name)
    adapted = Exception(message)
    adapted.sqlstate = sqlstate
    adapted.__cause__ = cause
    return error_class("SQL", {}, adapted)
