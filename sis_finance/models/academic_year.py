"""
Module: sis_finance.models.academic_year
Responsibility: ORM persistence for academic years (e.g. "2024/2025").

Invariants enforced:
    - name is unique (uq_academic_year_name).
    - At most one row has is_active = True.  Maintained by
      AcademicYearService, which deactivates every other year in the same
      savepoint that activates or inserts the new one.
"""

from datetime import date

from sqlalchemy import Boolean, Date, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from sis_finance.db.base import TimestampedBase


class AcademicYear(TimestampedBase):
    __tablename__ = "academic_years"

    __table_args__ = (
        UniqueConstraint("name", name="uq_academic_year_name"),
        Index("idx_academic_year_active", "is_active"),
    )

    name: Mapped[str] = mapped_column(String(20), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    def __repr__(self) -> str:
        flag = " (active)" if self.is_active else ""
        return f"<AcademicYear {self.name}{flag}>"

    def contains_date(self, check_date: date) -> bool:
        if self.start_date is None or self.end_date is None:
            return False
        return self.start_date <= check_date <= self.end_date
