"""PostgreSQL error details behind SQLAlchemy's DBAPIError.

The asyncpg dialect re-raises every asyncpg exception as one of its own
DBAPI error classes, copying the SQLSTATE onto it. Other fields, such as
the constraint name, are only on the asyncpg exception it was raised from.
"""

from __future__ import annotations

from sqlalchemy.exc import DBAPIError

UNIQUE_VIOLATION = "23505"

# SQLSTATE prefixes worth retrying: connection exceptions (08), transaction
# rollbacks such as deadlocks (40), insufficient resources (53), server
# shutdown (57P) and statement timeouts (57014).
TRANSIENT_SQLSTATE_PREFIXES = ("08", "40", "53", "57P", "57014")


def pg_error_field(error: DBAPIError, name: str) -> str | None:
    orig = error.orig
    for source in (orig, getattr(orig, "__cause__", None)):
        value = getattr(source, name, None)
        if value:
            return value
    return None


def sqlstate(error: DBAPIError) -> str | None:
    return pg_error_field(error, "sqlstate") or pg_error_field(error, "pgcode")


def is_transient_sqlstate(error: DBAPIError) -> bool:
    code = sqlstate(error)
    return code is not None and code.startswith(TRANSIENT_SQLSTATE_PREFIXES)
