"""Generate source artifacts from a live PostgreSQL schema."""

__version__ = "0.1.0"
