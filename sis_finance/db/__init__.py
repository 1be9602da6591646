"""Database layer - engine, session scope and declarative bases."""

from sis_finance.db.base import UUID, Base, TimestampedBase, UUIDString
from sis_finance.db.engine import (
    create_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    session_scope,
)

__all__ = [
    "get_engine",
    "get_session",
    "init_engine_from_url",
    "session_scope",
    "create_tables",
    "Base",
    "TimestampedBase",
    "UUIDString",
    "UUID",
]
