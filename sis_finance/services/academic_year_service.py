"""
AcademicYearService -- academic years and the single active one.

Invariants enforced:
    - At most one academic year is active.  Creating an active year or
      activating an existing one deactivates every other year in the same
      savepoint, so no committed state ever shows two (or, mid-switch,
      zero) active years.
    - Names are unique (AcademicYearExistsError).
"""

from datetime import date
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from sis_finance.domain.dtos import AcademicYearInfo
from sis_finance.exceptions import (
    AcademicYearExistsError,
    AcademicYearNotFoundError,
    ValidationError,
)
from sis_finance.logging_config import get_logger
from sis_finance.models.academic_year import AcademicYear
from sis_finance.services.base import BaseService

logger = get_logger("services.academic_year")


class AcademicYearService(BaseService[AcademicYear]):

    def create_academic_year(
        self,
        name: str,
        start_date: date | None = None,
        end_date: date | None = None,
        is_active: bool = False,
    ) -> AcademicYearInfo:
        """
        Insert an academic year, deactivating all others when it is active.

        Raises:
            ValidationError: empty name, or end_date before start_date.
            AcademicYearExistsError: the name is taken.
        """
        if not name or not name.strip():
            raise ValidationError("name", "is required")
        if start_date and end_date and end_date < start_date:
            raise ValidationError("end_date", "must not be before start_date")

        existing = self.session.execute(
            select(AcademicYear.id).where(AcademicYear.name == name)
        ).scalar_one_or_none()
        if existing is not None:
            raise AcademicYearExistsError(name)

        year = AcademicYear(
            name=name,
            start_date=start_date,
            end_date=end_date,
            is_active=is_active,
        )
        with self._persisting("create_academic_year"):
            try:
                with self.session.begin_nested():
                    if is_active:
                        self._deactivate_all()
                    self.session.add(year)
                    self.session.flush()
            except IntegrityError:
                raise AcademicYearExistsError(name) from None

        logger.info(
            "academic_year_created",
            extra={"academic_year_id": str(year.id), "academic_year_name": name, "is_active": is_active},
        )
        return AcademicYearInfo.from_model(year)

    def activate(self, year_id: UUID) -> AcademicYearInfo:
        """Make ``year_id`` the only active academic year."""
        year = self.session.get(AcademicYear, year_id)
        if year is None:
            raise AcademicYearNotFoundError(str(year_id))

        with self._persisting("activate_academic_year"):
            with self.session.begin_nested():
                self._deactivate_all()
                year.is_active = True
                self.session.flush()

        logger.info(
            "academic_year_activated",
            extra={"academic_year_id": str(year_id), "academic_year_name": year.name},
        )
        return AcademicYearInfo.from_model(year)

    def _deactivate_all(self) -> None:
        self.session.execute(
            update(AcademicYear)
            .where(AcademicYear.is_active.is_(True))
            .values(is_active=False)
            .execution_options(synchronize_session="fetch")
        )

    def get_all_academic_years(self) -> list[AcademicYearInfo]:
        """Latest start date first."""
        rows = self.session.execute(
            select(AcademicYear).order_by(AcademicYear.start_date.desc())
        ).scalars().all()
        return [AcademicYearInfo.from_model(y) for y in rows]

    def get_active_academic_year(self) -> AcademicYearInfo | None:
        year = self.session.execute(
            select(AcademicYear).where(AcademicYear.is_active.is_(True))
        ).scalars().first()
        return AcademicYearInfo.from_model(year) if year else None
