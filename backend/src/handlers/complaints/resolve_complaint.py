"""
Resolve Complaint Handler.
POST /complaints/{complaintId}/resolve

Marks a complaint resolved. Level and worker are kept for the record.
Resolving an already-resolved complaint changes nothing.
"""
from shared.auth import require_staff
from shared.dynamo import get_complaint, update_complaint
from shared.errors import ComplaintError
from shared.logging import logger, log_event
from shared.service import get_engine, serialize_complaint
from shared.utils import error_response, format_response, get_path_param, utc_now


def handler(event, context):
    log_event(event)

    complaint_id = get_path_param(event, 'complaintId')
    if not complaint_id:
        return format_response(400, {'error': 'Missing complaintId'})

    try:
        require_staff(event)

        complaint = get_complaint(complaint_id)
        now = utc_now()

        if complaint.is_resolved:
            return format_response(200, {
                'message': 'Complaint is already resolved',
                'complaint': serialize_complaint(complaint, now, sign_media=False)
            })

        result = get_engine().resolve(complaint)
        updated = update_complaint(
            complaint_id,
            result.to_update(),
            expected_updated_at=complaint.updated_at,
            updated_at=now.isoformat()
        )

        logger.info(f"Resolved complaint {complaint_id} at {updated.level}")

        return format_response(200, {
            'message': 'The complaint has been marked as resolved.',
            'complaint': serialize_complaint(updated, now, sign_media=False)
        })

    except ComplaintError as e:
        logger.warning(f"Could not resolve complaint {complaint_id}: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.error(f"Error resolving complaint {complaint_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
