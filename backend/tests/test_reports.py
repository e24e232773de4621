"""
Tests for dashboard filtering and statistics.
"""
from helpers import at, make_complaint
from shared.models import ComplaintLevel, ComplaintStatus, Severity, Worker
from shared.reports import filter_complaints, group_by_severity, overdue_complaints, summarize, worker_workload


def sample_complaints():
    return [
        make_complaint(complaint_id='HC-A', issue_type='Plumbing', created_at='2025-01-01T10:00:00+00:00'),
        make_complaint(
            complaint_id='HC-B', issue_type='Electrical', hostel='Girls Hostel A', student_name='Meera',
            severity=Severity.EXTREME, status=ComplaintStatus.ESCALATED, level=ComplaintLevel.LEVEL_2,
            assigned_worker_name='Maintenance Supervisor', assigned_worker_phone='9876500000',
            created_at='2025-01-03T10:00:00+00:00'
        ),
        make_complaint(
            complaint_id='HC-C', issue_type='Internet/WiFi', severity=Severity.NEEDS_QUICK_ATTENTION,
            status=ComplaintStatus.RESOLVED, assigned_worker_name='Maintenance Supervisor',
            assigned_worker_phone='9876500000', created_at='2025-01-02T10:00:00+00:00'
        ),
    ]


class TestFilterComplaints:

    def test_search_matches_issue_type_case_insensitively(self):
        result = filter_complaints(sample_complaints(), search='wifi')
        assert [c.complaint_id for c in result] == ['HC-C']

    def test_search_matches_student_name_and_hostel(self):
        assert [c.complaint_id for c in filter_complaints(sample_complaints(), search='meera')] == ['HC-B']
        assert [c.complaint_id for c in filter_complaints(sample_complaints(), search='girls')] == ['HC-B']

    def test_status_and_severity_filters(self):
        complaints = sample_complaints()

        assert [c.complaint_id for c in filter_complaints(complaints, status=ComplaintStatus.RESOLVED)] == ['HC-C']
        assert [c.complaint_id for c in filter_complaints(complaints, severity=Severity.EXTREME)] == ['HC-B']

    def test_all_matches_everything_newest_first(self):
        result = filter_complaints(sample_complaints(), status='all', severity='all')
        assert [c.complaint_id for c in result] == ['HC-B', 'HC-C', 'HC-A']


class TestSummaries:

    def test_summarize(self):
        assert summarize(sample_complaints()) == {
            'total': 3,
            'pending': 1,
            'assigned': 0,
            'escalated': 1,
            'resolved': 1,
            'unresolved': 2,
        }

    def test_group_by_severity_order(self):
        groups = group_by_severity(sample_complaints())

        assert list(groups) == [Severity.EXTREME, Severity.NEEDS_QUICK_ATTENTION, Severity.NORMAL]
        assert [c.complaint_id for c in groups[Severity.NORMAL]] == ['HC-A']

    def test_worker_workload(self):
        workers = {
            ComplaintLevel.LEVEL_1: Worker('Carpenter Krishna', '9876543210'),
            ComplaintLevel.LEVEL_2: Worker('Maintenance Supervisor', '9876500000'),
        }

        workload = worker_workload(sample_complaints(), workers)

        assert workload[0]['active'] == 0
        assert workload[1] == {
            'level': ComplaintLevel.LEVEL_2,
            'name': 'Maintenance Supervisor',
            'phone': '9876500000',
            'active': 1,
            'resolved': 1,
        }

    def test_overdue(self):
        now = at('2025-01-05T10:00:00+00:00')

        overdue = overdue_complaints(sample_complaints(), now, days=3)

        assert [c.complaint_id for c in overdue] == ['HC-A']
