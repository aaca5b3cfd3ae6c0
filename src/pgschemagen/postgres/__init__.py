"""PostgreSQL connectivity."""

from pgschemagen.postgres.client import PostgresClient

__all__ = ["PostgresClient"]
