"""
Dashboard statistics over complaint lists.
All functions are pure; handlers fetch the complaints first.
"""
from datetime import datetime
from typing import Dict, List, Mapping, Optional

from .escalation import days_between
from .models import Complaint, ComplaintStatus, Severity, Worker


def filter_complaints(
    complaints: List[Complaint],
    search: Optional[str] = None,
    status: Optional[str] = None,
    severity: Optional[str] = None,
    hostel: Optional[str] = None
) -> List[Complaint]:
    """
    Filter the way the dashboards do, newest first.

    `search` matches case-insensitively against the complaint id, issue type,
    student name and hostel. Empty filters and 'all' match everything.
    """
    query = (search or '').strip().lower()

    def matches(complaint: Complaint) -> bool:
        if query and not any(
            query in value.lower()
            for value in (complaint.complaint_id, complaint.issue_type, complaint.student_name, complaint.hostel)
        ):
            return False
        if status and status != 'all' and complaint.status != status:
            return False
        if severity and severity != 'all' and complaint.severity != severity:
            return False
        if hostel and hostel != 'all' and complaint.hostel != hostel:
            return False
        return True

    selected = [c for c in complaints if matches(c)]
    return sorted(selected, key=lambda c: c.created_at, reverse=True)


def summarize(complaints: List[Complaint]) -> Dict[str, int]:
    """Count complaints per status. Anything not resolved counts as unresolved."""
    counts = {status: 0 for status in ComplaintStatus.ALL}
    for complaint in complaints:
        counts[complaint.status] += 1

    return {
        'total': len(complaints),
        'pending': counts[ComplaintStatus.PENDING],
        'assigned': counts[ComplaintStatus.ASSIGNED],
        'escalated': counts[ComplaintStatus.ESCALATED],
        'resolved': counts[ComplaintStatus.RESOLVED],
        'unresolved': len(complaints) - counts[ComplaintStatus.RESOLVED],
    }


def group_by_severity(complaints: List[Complaint]) -> Dict[str, List[Complaint]]:
    """Most severe group first."""
    groups = {severity: [] for severity in reversed(Severity.ALL)}
    for complaint in complaints:
        groups[complaint.severity].append(complaint)
    return groups


def worker_workload(complaints: List[Complaint], level_workers: Mapping[str, Worker]) -> List[Dict]:
    """Active and resolved complaint counts per level worker."""
    workload = []
    for level, worker in level_workers.items():
        assigned = [c for c in complaints if c.assigned_worker_name == worker.name]
        resolved = sum(1 for c in assigned if c.status == ComplaintStatus.RESOLVED)
        workload.append({
            'level': level,
            'name': worker.name,
            'phone': worker.phone,
            'active': len(assigned) - resolved,
            'resolved': resolved,
        })
    return workload


def overdue_complaints(complaints: List[Complaint], now: datetime, days: int) -> List[Complaint]:
    """Unresolved complaints at least `days` whole days old."""
    return [
        c for c in complaints
        if not c.is_resolved and days_between(c.created_at, now) >= days
    ]
