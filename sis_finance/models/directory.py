"""
Module: sis_finance.models.directory
Responsibility: Minimal ORM shapes of the directory records the ledger joins
    against -- users, students, parents and teachers.  These rows are owned
    by the wider school system; the ledger reads them to resolve bill
    recipients, filter bills by unit, and count heads for the dashboard.
Architecture position: Ledger > Models.  May import from db/base.py only.
"""

from enum import IntEnum
from uuid import UUID

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sis_finance.db.base import TimestampedBase


class UserRole(IntEnum):
    """Role numbers assigned by the user directory."""

    SUPER_ADMIN = 1
    ADMIN_MTS = 2
    ADMIN_MA = 3
    TEACHER = 4
    HOMEROOM_TEACHER = 5
    STUDENT = 6
    PARENT = 7


class User(TimestampedBase):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    email: Mapped[str | None] = mapped_column(String(150), nullable=True, unique=True)
    role_id: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<User {self.name} role={self.role_id}>"


class Parent(TimestampedBase):
    __tablename__ = "parents"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    user: Mapped[User] = relationship(lazy="joined")
    children: Mapped[list["Student"]] = relationship(back_populates="parent")

    __table_args__ = (Index("idx_parent_user", "user_id"),)


class Student(TimestampedBase):
    """
    A student as seen by the ledger.

    ``unit_id`` is the school division used to filter bill listings.
    ``parent_id`` links the student to the parent notified about new bills.
    """

    __tablename__ = "students"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    nisn: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    parent_id: Mapped[UUID | None] = mapped_column(ForeignKey("parents.id"), nullable=True)
    unit_id: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Active")

    user: Mapped[User] = relationship(lazy="joined")
    parent: Mapped[Parent | None] = relationship(back_populates="children")

    __table_args__ = (
        Index("idx_student_user", "user_id"),
        Index("idx_student_parent", "parent_id"),
        Index("idx_student_unit", "unit_id"),
    )

    def __repr__(self) -> str:
        return f"<Student {self.nisn} unit={self.unit_id}>"


class Teacher(TimestampedBase):
    __tablename__ = "teachers"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    nip: Mapped[str | None] = mapped_column(String(30), nullable=True, unique=True)
    unit_id: Mapped[int] = mapped_column(Integer, nullable=False)
