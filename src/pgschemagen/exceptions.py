"""Exception classes for pgschemagen."""

__all__ = [
    "SchemagenError",
    "ConfigError",
    "ValidationError",
    "DatabaseConnectionError",
    "QueryError",
    "DeadlineExceededError",
    "BuildError",
    "RenderError",
    "OutputError",
]


class SchemagenError(Exception):
    """Base exception for pgschemagen."""


class ConfigError(SchemagenError):
    """Malformed configuration or unknown generator type."""


class ValidationError(SchemagenError):
    """Precondition failure, e.g. a missing output directory."""


class DatabaseConnectionError(SchemagenError):
    """Could not connect to the database."""


class QueryError(SchemagenError):
    """A catalog query or row scan failed."""


class DeadlineExceededError(QueryError):
    """Introspection ran past its deadline or was cancelled."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(message)


class BuildError(SchemagenError):
    """Base error raised while a generator builds its artifacts."""


class RenderError(BuildError):
    """Template lookup or rendering failed."""

    def __init__(self, template_name: str, message: str):
        self.template_name = template_name
        super().__init__(message)


class OutputError(BuildError):
    """An artifact could not be written."""
