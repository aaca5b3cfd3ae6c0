"""PostgreSQL client wrapper used by the schema inspector."""

import logging
from typing import Any, Optional, Sequence

import psycopg
from psycopg.rows import dict_row

from pgschemagen.exceptions import DatabaseConnectionError

__all__ = ["PostgresClient"]

logger = logging.getLogger(__name__)


class PostgresClient:
    """Thin wrapper around a single psycopg connection.

    Rows come back as dicts. When a timeout is passed to fetchall, it is
    applied as the session's statement_timeout before the query runs, so a
    slow catalog query is cancelled server-side.
    """

    def __init__(self, conninfo: str, connect_timeout: Optional[float] = None) -> None:
        self._conninfo = conninfo
        self._connect_timeout = connect_timeout
        self._conn: psycopg.Connection | None = None

    def connect(self) -> None:
        """Open the connection. Must be called before fetchall."""
        if self._conn is not None:
            raise RuntimeError("Already connected. Call close() before reconnecting.")

        kwargs: dict[str, Any] = {"row_factory": dict_row, "autocommit": True}
        if self._connect_timeout is not None:
            kwargs["connect_timeout"] = max(1, int(self._connect_timeout))

        try:
            logger.debug("Connecting to PostgreSQL...")
            self._conn = psycopg.connect(self._conninfo, **kwargs)
        except psycopg.Error as e:
            raise DatabaseConnectionError(f"connect: {e}") from e
        logger.debug("PostgreSQL connection established")

    def fetchall(
        self,
        sql: str,
        params: Sequence[Any] = (),
        timeout: Optional[float] = None,
    ) -> list[dict[str, Any]]:
        if self._conn is None:
            raise RuntimeError("Not connected. Call connect() first.")
        with self._conn.cursor() as cur:
            if timeout is not None:
                # 0 disables statement_timeout, so never send less than 1ms
                millis = max(1, int(timeout * 1000))
                cur.execute(
                    "SELECT set_config('statement_timeout', %s, false)",
                    (str(millis),),
                )
            cur.execute(sql, params)
            return cur.fetchall()

    def close(self) -> None:
        if self._conn is not None:
            try:
                self._conn.close()
            finally:
                self._conn = None

    def __enter__(self) -> "PostgresClient":
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()
