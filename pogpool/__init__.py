"""Generate C CRUD model code from PostgreSQL table definitions, with a simple connection pool and array helpers."""

__version__ = "0.1.0"
__all__ = ["arrays", "cli", "codegen", "config", "pool", "templates"]