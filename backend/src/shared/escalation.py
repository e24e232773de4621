"""
Escalation engine for hostel complaints.

Decides level, status and worker changes for a complaint snapshot and
returns them as a field delta. The engine performs no I/O: callers persist
the delta through the complaint store.

Levels only move forward (Level 1 → 2 → 3 → 4) and a resolved complaint is
frozen. Auto-escalation is checked on read, against a caller-supplied `now`.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .config import config
from .errors import InvalidComplaintError, InvalidStateError
from .models import (
    Complaint,
    ComplaintLevel,
    ComplaintStatus,
    Feedback,
    MAX_RATING,
    MIN_RATING,
    Worker,
    next_level,
)

# Auto-escalate complaints unresolved for this many whole days
AUTO_ESCALATE_DAYS = 3

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class EscalationResult:
    """
    Fields to persist after an engine decision.

    `changes` uses the store's attribute names. An empty delta with
    `at_max_level` set is the defined outcome of escalating a Level 4
    complaint.
    """
    changes: Mapping[str, Any] = field(default_factory=dict)
    at_max_level: bool = False

    @property
    def level(self) -> Optional[str]:
        return self.changes.get('level')

    @property
    def status(self) -> Optional[str]:
        return self.changes.get('status')

    @property
    def worker(self) -> Optional[Worker]:
        if 'assignedWorkerName' not in self.changes:
            return None
        return Worker(
            name=self.changes['assignedWorkerName'],
            phone=self.changes['assignedWorkerPhone'],
        )

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    def to_update(self) -> Dict[str, Any]:
        return dict(self.changes)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_between(start: str, now: datetime) -> int:
    """Whole days elapsed since `start`, floored."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - parse_timestamp(start)) // ONE_DAY


class EscalationEngine:
    """Stateless escalation policy over injected worker tables."""

    def __init__(
        self,
        level_workers: Mapping[str, Worker],
        issue_workers: Mapping[str, Worker],
        default_worker: Optional[Worker] = None,
        auto_escalate_days: int = AUTO_ESCALATE_DAYS
    ):
        missing = [level for level in ComplaintLevel.ORDER if level not in level_workers]
        if missing:
            raise ValueError(f"No worker configured for {', '.join(missing)}")

        self.level_workers = MappingProxyType(dict(level_workers))
        # Issue types are matched case-insensitively
        self.issue_workers = MappingProxyType({
            issue.strip().lower(): worker for issue, worker in issue_workers.items()
        })
        self.default_worker = default_worker or self.level_workers[ComplaintLevel.LEVEL_1]
        self.auto_escalate_days = auto_escalate_days

    def assign_initial_worker(self, issue_type: Optional[str]) -> Worker:
        """Pick the first responder for an issue type, or the default Level 1 worker."""
        key = (issue_type or '').strip().lower()
        return self.issue_workers.get(key, self.default_worker)

    def worker_for_level(self, level: str) -> Worker:
        return self.level_workers[level]

    def escalate(self, complaint: Complaint) -> EscalationResult:
        """
        Move a complaint one level up and hand it to that level's worker.

        Raises:
            InvalidStateError: if the complaint is already resolved
        """
        if complaint.is_resolved:
            raise InvalidStateError(
                f"Complaint {complaint.complaint_id} is resolved and cannot be escalated"
            )

        new_level = next_level(complaint.level)
        if new_level is None:
            return EscalationResult(at_max_level=True)

        worker = self.worker_for_level(new_level)
        return EscalationResult(changes={
            'level': new_level,
            'status': ComplaintStatus.ESCALATED,
            'assignedWorkerName': worker.name,
            'assignedWorkerPhone': worker.phone,
        })

    def check_auto_escalation(self, complaint: Complaint, now: datetime) -> Optional[EscalationResult]:
        """
        Return the escalation delta if the complaint has waited too long.

        Elapsed time is floored to whole days, so a complaint qualifies once
        `now - createdAt` reaches exactly `auto_escalate_days` days.
        """
        if complaint.is_resolved or complaint.is_max_level:
            return None

        if days_between(complaint.created_at, now) < self.auto_escalate_days:
            return None

        return self.escalate(complaint)

    def resolve(self, complaint: Complaint) -> EscalationResult:
        # Level and worker stay as they are
        return EscalationResult(changes={'status': ComplaintStatus.RESOLVED})

    def submit_feedback(
        self,
        complaint: Complaint,
        rating: Any,
        comment: Optional[str],
        now: datetime
    ) -> EscalationResult:
        """
        Attach the student's rating to a resolved complaint.

        Raises:
            InvalidStateError: if the complaint is not resolved or already rated
            InvalidComplaintError: if the rating is not an integer from 1 to 5
                or the comment is not a string
        """
        if not complaint.is_resolved:
            raise InvalidStateError("Feedback can only be given on resolved complaints")
        if complaint.feedback is not None:
            raise InvalidStateError("Feedback has already been submitted for this complaint")

        if isinstance(rating, bool) or not isinstance(rating, int):
            raise InvalidComplaintError("Rating must be an integer")
        if not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidComplaintError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        if comment is not None and not isinstance(comment, str):
            raise InvalidComplaintError("Comment must be text")

        feedback = Feedback(rating=rating, comment=(comment or '').strip(), submitted_at=now.isoformat())
        return EscalationResult(changes={'feedback': feedback.to_item()})

    def ensure_deletable(self, complaint: Complaint) -> None:
        if not complaint.is_resolved:
            raise InvalidStateError("Only resolved complaints can be deleted")


def build_engine(cfg=config) -> EscalationEngine:
    """Create an engine from the configured worker tables."""
    level_workers = {level: Worker.from_dict(w) for level, w in cfg.LEVEL_WORKERS.items()}
    issue_workers = {issue: Worker.from_dict(w) for issue, w in cfg.ISSUE_WORKERS.items()}
    return EscalationEngine(
        level_workers=level_workers,
        issue_workers=issue_workers,
        auto_escalate_days=cfg.AUTO_ESCALATE_DAYS
    )
