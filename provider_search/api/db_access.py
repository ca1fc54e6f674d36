# This file wraps the SQLAlchemy engine used by the search service and health checks.
# It accepts raw SQL strings or SQLAlchemy Core statements and always returns plain dictionaries.
# SQLite engines get the haversine function registered on connect so spatial search runs locally.

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import column, create_engine, event, insert, inspect, table, text
from sqlalchemy.engine import Connection, Engine, Result, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.base import Executable

from provider_search.search.geo import register_sqlite_functions

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
REQUEST_LOG_COLUMNS = ("request_id", "path", "method", "status_code", "duration_ms", "created_at")

Statement = str | Executable


def _run(connection: Connection, query: Statement, params: Mapping[str, Any] | None) -> Result[Any]:
    statement = text(query) if isinstance(query, str) else query
    return connection.execute(statement, dict(params or {}))


class DatabaseClient:
    """Thin engine wrapper for read queries and the request log."""

    def __init__(self, *, database_url: str) -> None:
        url = make_url(database_url)
        is_sqlite = url.get_backend_name() == "sqlite"
        self._engine: Engine = create_engine(
            url,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False} if is_sqlite else {},
        )
        if is_sqlite:
            event.listen(self._engine, "connect", register_sqlite_functions)
        self._request_log_ready: bool | None = None

    @property
    def engine(self) -> Engine:
        return self._engine

    def can_connect(self) -> bool:
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        return True

    def table_exists(self, table_name: str) -> bool:
        return inspect(self._engine).has_table(_checked_identifier(table_name))

    def fetch_all(self, query: Statement, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        with self._engine.connect() as connection:
            return [dict(row) for row in _run(connection, query, params).mappings()]

    def fetch_one(self, query: Statement, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        with self._engine.connect() as connection:
            row = _run(connection, query, params).mappings().first()
        return None if row is None else dict(row)

    def fetch_scalar(self, query: Statement, params: Mapping[str, Any] | None = None) -> Any:
        with self._engine.connect() as connection:
            return _run(connection, query, params).scalar_one()

    def execute(self, query: Statement, params: Mapping[str, Any] | None = None) -> None:
        with self._engine.begin() as connection:
            _run(connection, query, params)

    def log_request(
        self,
        *,
        table_name: str,
        request_id: str,
        path: str,
        method: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        """Append one row to the request log table when that table exists."""

        if self._request_log_ready is None:
            self._request_log_ready = self.table_exists(table_name)
        if not self._request_log_ready:
            return

        request_log = table(table_name, *(column(name) for name in REQUEST_LOG_COLUMNS))
        self.execute(
            insert(request_log).values(
                request_id=request_id,
                path=path,
                method=method,
                status_code=status_code,
                duration_ms=duration_ms,
                created_at=datetime.now(tz=UTC),
            )
        )


def _checked_identifier(identifier: str) -> str:
    if not _IDENTIFIER_RE.match(identifier):
        raise ValueError(f"Unsafe SQL identifier: {identifier!r}")
    return identifier
