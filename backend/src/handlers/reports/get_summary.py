"""
Report Summary Handler.
GET /reports/summary?hostel=

Numbers behind the manager and warden dashboards: status counts, severity
breakdown, per-worker workload and overdue complaints.
"""
from shared.auth import require_staff
from shared.dynamo import list_complaints
from shared.errors import ComplaintError
from shared.logging import logger, log_event
from shared.reports import filter_complaints, group_by_severity, overdue_complaints, summarize, worker_workload
from shared.service import apply_auto_escalation_all, get_engine, serialize_complaint
from shared.utils import error_response, format_response, get_query_param, utc_now


def handler(event, context):
    log_event(event)

    try:
        require_staff(event)

        now = utc_now()
        complaints = apply_auto_escalation_all(list_complaints(), now)
        complaints = filter_complaints(complaints, hostel=get_query_param(event, 'hostel'))

        engine = get_engine()
        by_severity = group_by_severity(complaints)
        overdue = overdue_complaints(complaints, now, engine.auto_escalate_days)

        return format_response(200, {
            'generatedAt': now.isoformat(),
            'stats': summarize(complaints),
            'bySeverity': {
                severity: [serialize_complaint(c, now, sign_media=False) for c in group]
                for severity, group in by_severity.items()
            },
            'severityCounts': {severity: len(group) for severity, group in by_severity.items()},
            'workload': worker_workload(complaints, engine.level_workers),
            'overdue': [c.complaint_id for c in overdue]
        })

    except ComplaintError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error building report summary: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
