"""
BaseService -- abstract base for all ledger write services.

Responsibility:
    Common constructor and session contract.  Services receive a SQLAlchemy
    ``Session`` and persist with ``session.flush()`` -- never
    ``session.commit()``.  The caller (usually ``session_scope()``) owns the
    transaction, so several service calls can form one atomic unit of work.

    Operations that must be all-or-nothing on their own (a savings
    transaction, an academic-year activation) wrap their writes in
    ``session.begin_nested()`` so a failure rolls back only their savepoint.
"""

from abc import ABC
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sis_finance.db.base import Base
from sis_finance.domain.clock import Clock, SystemClock
from sis_finance.exceptions import PersistenceError

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for all ledger services.

    Guarantees:
        - Never commits or rolls back the caller's transaction.
        - Store failures surface as ``PersistenceError`` with the original
          SQLAlchemy exception chained.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        self.session = session
        self._clock = clock or SystemClock()

    @contextmanager
    def _persisting(self, operation: str) -> Iterator[None]:
        """Translate SQLAlchemy failures raised inside the block."""
        try:
            yield
        except SQLAlchemyError as exc:
            raise PersistenceError(operation) from exc
