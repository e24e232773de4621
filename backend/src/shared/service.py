"""
Glue between the escalation engine and the complaint store.

Auto-escalation happens on read: every fetch or listing runs the check and
persists the resulting delta before the complaint is returned.
"""
from datetime import datetime
from typing import Any, Dict, List

from .dynamo import get_complaint, update_complaint
from .errors import ConcurrentUpdateError
from .escalation import EscalationEngine, build_engine, days_between
from .logging import logger
from .models import Complaint, LEVEL_ROLES
from .s3_utils import sign_attachments

_engine = None


def get_engine() -> EscalationEngine:
    """Engine built once per Lambda container from config."""
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine


def apply_auto_escalation(complaint: Complaint, now: datetime, engine: EscalationEngine = None) -> Complaint:
    """
    Escalate the complaint if it is overdue and return the stored result.

    A lost race is not an error: another request already changed the row, so
    the fresh copy is returned instead.
    """
    engine = engine or get_engine()
    result = engine.check_auto_escalation(complaint, now)
    if result is None or not result.has_changes:
        return complaint

    try:
        updated = update_complaint(
            complaint.complaint_id,
            result.to_update(),
            expected_updated_at=complaint.updated_at,
            updated_at=now.isoformat()
        )
    except ConcurrentUpdateError:
        logger.warning(f"Complaint {complaint.complaint_id} changed during auto-escalation, re-reading")
        return get_complaint(complaint.complaint_id)

    logger.info(
        f"Auto-escalated complaint {complaint.complaint_id} "
        f"from {complaint.level} to {updated.level}"
    )
    return updated


def apply_auto_escalation_all(complaints: List[Complaint], now: datetime) -> List[Complaint]:
    engine = get_engine()
    return [apply_auto_escalation(c, now, engine) for c in complaints]


def serialize_complaint(complaint: Complaint, now: datetime, sign_media: bool = True) -> Dict[str, Any]:
    """Complaint item plus the fields the dashboards display."""
    body = complaint.to_item()
    body['role'] = LEVEL_ROLES[complaint.level]
    body['daysSinceCreated'] = days_between(complaint.created_at, now)
    if sign_media:
        body.update(sign_attachments(complaint.images, complaint.video))
    return body
