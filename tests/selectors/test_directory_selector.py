"""Tests for DirectorySelector lookups."""

from uuid import uuid4

from sis_finance.models import UserRole


class TestDirectorySelector:

    def test_get_student(self, directory_selector, student, parent):
        info = directory_selector.get_student(student.id)

        assert info.name == "Ahmad"
        assert info.parent_id == parent.id
        assert info.unit_id == 1

    def test_missing_rows_return_none(self, directory_selector):
        assert directory_selector.get_student(uuid4()) is None
        assert directory_selector.get_parent(uuid4()) is None
        assert directory_selector.get_parent_by_user(uuid4()) is None
        assert directory_selector.get_student_by_user(uuid4()) is None

    def test_parent_by_user(self, directory_selector, parent):
        info = directory_selector.get_parent_by_user(parent.user_id)
        assert info.id == parent.id
        assert info.name == "Budi Santoso"

    def test_student_by_user(self, directory_selector, student):
        assert directory_selector.get_student_by_user(student.user_id).id == student.id

    def test_children_of_parent(self, directory_selector, student_factory, parent, student):
        sibling = student_factory("Fatimah", parent=parent)
        student_factory("Unrelated")

        children = directory_selector.get_children_of_parent(parent.id)

        assert {c.id for c in children} == {student.id, sibling.id}

    def test_user_role(self, directory_selector, parent, clerk):
        assert directory_selector.get_user_role(parent.user_id) == UserRole.PARENT
        assert directory_selector.get_user_role(clerk.id) == UserRole.ADMIN_MTS
        assert directory_selector.get_user_role(uuid4()) is None
