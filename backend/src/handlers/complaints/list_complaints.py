"""
List Complaints Handler.
GET /complaints?search=&status=&severity=&hostel=

Students see only their own complaints; managers and wardens see all.
Every listed complaint goes through the auto-escalation check first.
"""
from shared.auth import get_roll_number, is_staff, is_student
from shared.dynamo import list_complaints, query_complaints
from shared.errors import ComplaintError
from shared.logging import logger, log_event
from shared.reports import filter_complaints, summarize
from shared.service import apply_auto_escalation_all, serialize_complaint
from shared.utils import error_response, format_response, get_query_param, utc_now


def handler(event, context):
    log_event(event)

    try:
        if is_staff(event):
            complaints = list_complaints()
        elif is_student(event) and get_roll_number(event):
            complaints = query_complaints(roll_number=get_roll_number(event))
        else:
            return format_response(403, {'error': 'Not allowed to list complaints'})

        now = utc_now()
        complaints = apply_auto_escalation_all(complaints, now)

        filtered = filter_complaints(
            complaints,
            search=get_query_param(event, 'search'),
            status=get_query_param(event, 'status'),
            severity=get_query_param(event, 'severity'),
            hostel=get_query_param(event, 'hostel')
        )

        return format_response(200, {
            'complaints': [serialize_complaint(c, now, sign_media=False) for c in filtered],
            'count': len(filtered),
            'stats': summarize(complaints)
        })

    except ComplaintError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error listing complaints: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
