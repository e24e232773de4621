"""
Get Complaint Handler.
GET /complaints/{complaintId}

Runs the auto-escalation check before returning, so an overdue complaint
is escalated the moment anyone looks at it.
"""
from shared.auth import can_view
from shared.dynamo import get_complaint
from shared.errors import ComplaintError, ComplaintNotFoundError
from shared.logging import logger, log_event
from shared.service import apply_auto_escalation, serialize_complaint
from shared.utils import error_response, format_response, get_path_param, utc_now


def handler(event, context):
    log_event(event)

    complaint_id = get_path_param(event, 'complaintId')
    if not complaint_id:
        return format_response(400, {'error': 'Missing complaintId'})

    try:
        complaint = get_complaint(complaint_id)

        # Students must not learn whether someone else's complaint exists
        if not can_view(event, complaint.roll_number):
            raise ComplaintNotFoundError(complaint_id)

        now = utc_now()
        complaint = apply_auto_escalation(complaint, now)

        return format_response(200, {'complaint': serialize_complaint(complaint, now)})

    except ComplaintError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error getting complaint {complaint_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
