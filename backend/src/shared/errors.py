"""
Exception hierarchy for complaint operations.
Each error carries the HTTP status code the handlers answer with.
"""


class ComplaintError(Exception):
    """Base class for all complaint errors."""
    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidComplaintError(ComplaintError, ValueError):
    """A complaint record or request carries missing or out-of-range values."""
    status_code = 400


class InvalidStateError(ComplaintError):
    """The complaint's current state forbids the requested operation."""
    status_code = 409


class ComplaintNotFoundError(ComplaintError):
    status_code = 404

    def __init__(self, complaint_id: str):
        self.complaint_id = complaint_id
        super().__init__(f"Complaint {complaint_id} not found")


class ConcurrentUpdateError(ComplaintError):
    """The stored row changed since it was read."""
    status_code = 409

    def __init__(self, complaint_id: str):
        self.complaint_id = complaint_id
        super().__init__(f"Complaint {complaint_id} was modified by another request")


class PermissionDeniedError(ComplaintError):
    status_code = 403


class CorruptComplaintError(ComplaintError):
    """A stored row cannot be read back as a complaint."""
    status_code = 500

    def __init__(self, complaint_id: str):
        self.complaint_id = complaint_id
        super().__init__(f"Stored complaint {complaint_id} is unreadable")
