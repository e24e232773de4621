"""
Authentication utilities for extracting user info from Cognito tokens.
"""
from typing import Optional

from .errors import PermissionDeniedError
from .models import UserRole


def get_roll_number(event: dict) -> Optional[str]:
    """Extract a student's roll number from the custom Cognito attribute."""
    try:
        return event['requestContext']['authorizer']['claims']['custom:rollNumber']
    except (KeyError, TypeError):
        return None


def get_user_groups(event: dict) -> list:
    """Extract user groups (student, manager, warden) from Cognito claims."""
    try:
        groups = event['requestContext']['authorizer']['claims'].get('cognito:groups', '')
        if isinstance(groups, str):
            return groups.split(',') if groups else []
        return groups or []
    except (KeyError, TypeError):
        return []


def is_student(event: dict) -> bool:
    return UserRole.STUDENT in get_user_groups(event)


def is_manager(event: dict) -> bool:
    return UserRole.MANAGER in get_user_groups(event)


def is_warden(event: dict) -> bool:
    return UserRole.WARDEN in get_user_groups(event)


def is_staff(event: dict) -> bool:
    """Managers and wardens see every complaint."""
    return is_manager(event) or is_warden(event)


def require_staff(event: dict) -> None:
    if not is_staff(event):
        raise PermissionDeniedError("Only managers and wardens can perform this action")


def require_student(event: dict) -> str:
    """Return the caller's roll number, or raise if the caller is not a student."""
    roll_number = get_roll_number(event)
    if not is_student(event) or not roll_number:
        raise PermissionDeniedError("Only students can perform this action")
    return roll_number


def can_view(event: dict, roll_number: str) -> bool:
    """Staff see everything; students only their own complaints."""
    if is_staff(event):
        return True
    return is_student(event) and get_roll_number(event) == roll_number
