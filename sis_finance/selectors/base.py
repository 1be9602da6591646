"""
Module: sis_finance.selectors.base
Responsibility: Abstract base class for read-only query selectors.
Architecture position: Ledger > Selectors.  May import from db/ and models/.
    Selectors NEVER add, flush, commit or delete -- they accept the caller's
    session and return DTOs, not ORM instances.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from sis_finance.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(ABC, Generic[ModelType]):
    """
    Abstract base class for all selectors.

    Guarantees:
        - session is stored as a public attribute for subclass query use.
        - No mutation of any kind.
    """

    def __init__(self, session: Session):
        self.session = session
