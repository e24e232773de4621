"""
Submit Feedback Handler.
POST /complaints/{complaintId}/feedback
Body: { "rating": 1-5, "comment": "..." }
"""
from shared.auth import require_student
from shared.dynamo import get_complaint, update_complaint
from shared.errors import ComplaintError, ComplaintNotFoundError
from shared.logging import logger, log_event
from shared.service import get_engine, serialize_complaint
from shared.utils import error_response, format_response, get_path_param, parse_body, utc_now


def handler(event, context):
    log_event(event)

    complaint_id = get_path_param(event, 'complaintId')
    if not complaint_id:
        return format_response(400, {'error': 'Missing complaintId'})

    try:
        roll_number = require_student(event)
        body = parse_body(event)

        complaint = get_complaint(complaint_id)
        if complaint.roll_number != roll_number:
            raise ComplaintNotFoundError(complaint_id)

        now = utc_now()
        result = get_engine().submit_feedback(complaint, body.get('rating'), body.get('comment'), now)
        updated = update_complaint(
            complaint_id,
            result.to_update(),
            expected_updated_at=complaint.updated_at,
            updated_at=now.isoformat()
        )

        logger.info(f"Feedback {updated.feedback.rating}/5 recorded for complaint {complaint_id}")

        return format_response(200, {
            'message': 'Thank you for your feedback!',
            'complaint': serialize_complaint(updated, now, sign_media=False)
        })

    except ComplaintError as e:
        logger.warning(f"Rejected feedback for {complaint_id}: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.error(f"Error submitting feedback for {complaint_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
