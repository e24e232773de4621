"""
Data models and status constants for the hostel complaints backend.
Based on the complaint lifecycle: Pending/Assigned → Escalated → ... → Resolved
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import InvalidComplaintError


class ComplaintStatus:
    """Complaint lifecycle statuses."""
    PENDING = 'Pending'
    ASSIGNED = 'Assigned'
    ESCALATED = 'Escalated'
    RESOLVED = 'Resolved'

    ALL = (PENDING, ASSIGNED, ESCALATED, RESOLVED)


class ComplaintLevel:
    """Escalation levels, lowest first."""
    LEVEL_1 = 'Level 1'
    LEVEL_2 = 'Level 2'
    LEVEL_3 = 'Level 3'
    LEVEL_4 = 'Level 4'

    ORDER = (LEVEL_1, LEVEL_2, LEVEL_3, LEVEL_4)


class Severity:
    """Severity chosen by the student."""
    NORMAL = 'Normal'
    NEEDS_QUICK_ATTENTION = 'Needs Quick Attention'
    EXTREME = 'Extreme'

    ALL = (NORMAL, NEEDS_QUICK_ATTENTION, EXTREME)


class UserRole:
    """Cognito groups mapped to dashboard roles."""
    STUDENT = 'student'
    MANAGER = 'manager'
    WARDEN = 'warden'


# Who is responsible at each level
LEVEL_ROLES = {
    ComplaintLevel.LEVEL_1: 'Assigned Staff',
    ComplaintLevel.LEVEL_2: 'Supervisor',
    ComplaintLevel.LEVEL_3: 'Warden + Contractor',
    ComplaintLevel.LEVEL_4: 'Direct Warden Interaction',
}

HOSTELS = (
    'Boys Hostel A',
    'Boys Hostel B',
    'Boys Hostel C',
    'Girls Hostel A',
    'Girls Hostel B',
    'International Hostel',
)

ISSUE_TYPES = (
    'Plumbing',
    'Electrical',
    'Furniture',
    'Cleanliness',
    'Internet/WiFi',
    'Air Conditioning',
    'Security',
    'Pest Control',
    'Water Supply',
    'Other',
)

MIN_RATING = 1
MAX_RATING = 5


def next_level(level: str) -> Optional[str]:
    """Return the level after `level`, or None at the top."""
    index = ComplaintLevel.ORDER.index(level)
    if index + 1 < len(ComplaintLevel.ORDER):
        return ComplaintLevel.ORDER[index + 1]
    return None


@dataclass(frozen=True)
class Worker:
    name: str
    phone: str

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> 'Worker':
        return cls(name=data['name'], phone=data['phone'])


@dataclass(frozen=True)
class Feedback:
    rating: int
    comment: str
    submitted_at: str

    def to_item(self) -> Dict[str, Any]:
        return {
            'rating': self.rating,
            'comment': self.comment,
            'submittedAt': self.submitted_at,
        }


@dataclass
class Complaint:
    """
    A single complaint row.

    Construction validates level, status and severity so that a record with
    an unknown value never reaches the escalation logic.
    """
    complaint_id: str
    hostel: str
    room_number: str
    student_name: str
    roll_number: str
    issue_type: str
    severity: str
    description: str
    status: str
    level: str
    created_at: str
    updated_at: str
    images: List[str] = field(default_factory=list)
    video: Optional[str] = None
    assigned_worker_name: Optional[str] = None
    assigned_worker_phone: Optional[str] = None
    feedback: Optional[Feedback] = None

    def __post_init__(self):
        if not self.complaint_id:
            raise InvalidComplaintError("Complaint id is required")
        if self.level not in ComplaintLevel.ORDER:
            raise InvalidComplaintError(f"Unknown level: {self.level!r}")
        if self.status not in ComplaintStatus.ALL:
            raise InvalidComplaintError(f"Unknown status: {self.status!r}")
        if self.severity not in Severity.ALL:
            raise InvalidComplaintError(f"Unknown severity: {self.severity!r}")
        if self.feedback is not None and self.status != ComplaintStatus.RESOLVED:
            raise InvalidComplaintError("Feedback is only allowed on resolved complaints")

    @property
    def is_resolved(self) -> bool:
        return self.status == ComplaintStatus.RESOLVED

    @property
    def is_max_level(self) -> bool:
        return self.level == ComplaintLevel.LEVEL_4

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> 'Complaint':
        """Build a Complaint from a DynamoDB item."""
        try:
            feedback = None
            raw_feedback = item.get('feedback')
            if raw_feedback:
                feedback = Feedback(
                    rating=int(raw_feedback['rating']),
                    comment=raw_feedback.get('comment', ''),
                    submitted_at=raw_feedback['submittedAt'],
                )

            return cls(
                complaint_id=item['complaintId'],
                hostel=item['hostel'],
                room_number=item['roomNumber'],
                student_name=item['studentName'],
                roll_number=item['rollNumber'],
                issue_type=item['issueType'],
                severity=item['severity'],
                description=item.get('description', ''),
                status=item['status'],
                level=item['level'],
                created_at=item['createdAt'],
                updated_at=item.get('updatedAt', item['createdAt']),
                images=list(item.get('images') or []),
                video=item.get('video'),
                assigned_worker_name=item.get('assignedWorkerName'),
                assigned_worker_phone=item.get('assignedWorkerPhone'),
                feedback=feedback,
            )
        except KeyError as e:
            raise InvalidComplaintError(f"Complaint record is missing {e.args[0]}") from e

    def to_item(self) -> Dict[str, Any]:
        """Serialize to a DynamoDB item. Absent optional fields are omitted."""
        item = {
            'complaintId': self.complaint_id,
            'hostel': self.hostel,
            'roomNumber': self.room_number,
            'studentName': self.student_name,
            'rollNumber': self.roll_number,
            'issueType': self.issue_type,
            'severity': self.severity,
            'description': self.description,
            'images': list(self.images),
            'status': self.status,
            'level': self.level,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

        if self.video:
            item['video'] = self.video
        if self.assigned_worker_name:
            item['assignedWorkerName'] = self.assigned_worker_name
        if self.assigned_worker_phone:
            item['assignedWorkerPhone'] = self.assigned_worker_phone
        if self.feedback:
            item['feedback'] = self.feedback.to_item()

        return item

