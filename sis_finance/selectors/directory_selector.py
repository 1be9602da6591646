"""
DirectorySelector -- read-only lookups into the student/parent/user directory.

The ledger uses these to resolve who should hear about a new bill and which
students' bills a parent may see.  Lookups that find nothing return None;
callers decide whether that is an error.
"""

from uuid import UUID

from sqlalchemy import select

from sis_finance.domain.dtos import ParentInfo, StudentInfo
from sis_finance.models.directory import Parent, Student, User
from sis_finance.selectors.base import BaseSelector


class DirectorySelector(BaseSelector[Student]):

    def get_student(self, student_id: UUID) -> StudentInfo | None:
        student = self.session.get(Student, student_id)
        return StudentInfo.from_model(student) if student else None

    def get_parent(self, parent_id: UUID) -> ParentInfo | None:
        parent = self.session.get(Parent, parent_id)
        return ParentInfo.from_model(parent) if parent else None

    def get_parent_by_user(self, user_id: UUID) -> ParentInfo | None:
        parent = self.session.execute(
            select(Parent).where(Parent.user_id == user_id)
        ).scalars().first()
        return ParentInfo.from_model(parent) if parent else None

    def get_student_by_user(self, user_id: UUID) -> StudentInfo | None:
        student = self.session.execute(
            select(Student).where(Student.user_id == user_id)
        ).scalars().first()
        return StudentInfo.from_model(student) if student else None

    def get_children_of_parent(self, parent_id: UUID) -> list[StudentInfo]:
        """Students linked to a parent, ordered by NISN."""
        students = self.session.execute(
            select(Student)
            .where(Student.parent_id == parent_id)
            .order_by(Student.nisn)
        ).scalars().all()
        return [StudentInfo.from_model(s) for s in students]

    def get_user_role(self, user_id: UUID) -> int | None:
        return self.session.execute(
            select(User.role_id).where(User.id == user_id)
        ).scalar_one_or_none()
