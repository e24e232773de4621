"""
Tests for Cognito claim helpers and role gates.
"""
import pytest

from helpers import make_event, staff_event, student_event
from shared import auth
from shared.errors import PermissionDeniedError


class TestRoles:

    @pytest.mark.parametrize('groups', [['manager'], ['warden'], ['student', 'warden']])
    def test_managers_and_wardens_are_staff(self, groups):
        assert auth.is_staff(make_event(groups=groups))

    def test_students_are_not_staff(self):
        assert not auth.is_staff(student_event())

    def test_groups_accept_a_list_claim(self):
        event = make_event()
        event['requestContext']['authorizer']['claims']['cognito:groups'] = ['warden']

        assert auth.get_user_groups(event) == ['warden']

    def test_missing_authorizer_has_no_groups(self):
        assert auth.get_user_groups({}) == []
        assert auth.get_roll_number({}) is None


class TestGates:

    def test_require_student_returns_roll_number(self):
        assert auth.require_student(student_event(roll_number='21CS2002')) == '21CS2002'

    def test_student_without_roll_number_is_refused(self):
        with pytest.raises(PermissionDeniedError):
            auth.require_student(make_event(groups=['student']))

    def test_require_staff_refuses_students(self):
        auth.require_staff(staff_event())

        with pytest.raises(PermissionDeniedError):
            auth.require_staff(student_event())

    def test_students_view_only_their_own(self):
        event = student_event(roll_number='21CS1001')

        assert auth.can_view(event, '21CS1001')
        assert not auth.can_view(event, '21CS9999')
        assert auth.can_view(staff_event(), '21CS9999')
