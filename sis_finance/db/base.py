"""
Module: sis_finance.db.base
Responsibility: Declarative base classes for every ORM model in the ledger.
    Provides the UUID primary key convention, the type annotation map that
    keeps money in Decimal, and the TimestampedBase mixin.
Architecture position: Ledger > DB.  Lowest-level import target; MUST NOT
    import from models/, services/ or selectors/.

Invariants enforced:
    - UUID primary keys (uuid4) on every table, stored as String(36) so the
      same schema runs on PostgreSQL and SQLite.
    - Decimal maps to Numeric(38, 9).  Monetary amounts are NEVER float.
    - datetime maps to timezone-aware DateTime.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """UUID stored as its 36-character string form."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return None

    def process_result_value(self, value, dialect):
        if value is not None:
            return PyUUID(value)
        return None


class Base(DeclarativeBase):
    """
    Declarative base for all ledger models.

    Guarantees:
        - id is a uuid4-generated UUID.
        - Decimal columns are Numeric(38, 9).
        - datetime columns are timezone-aware.
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
    }

    id: Mapped[PyUUID] = mapped_column(
        UUIDString(),
        primary_key=True,
        default=uuid4,
    )


class TimestampedBase(Base):
    """
    Abstract base adding created_at / updated_at.

    created_at is set by the server on INSERT; updated_at is refreshed on
    every UPDATE issued through the ORM.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


UUID = PyUUID
