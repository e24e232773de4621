"""
Escalate Complaint Handler.
POST /complaints/{complaintId}/escalate

Moves the complaint one level up and assigns that level's worker. A Level 4
complaint is left untouched and reported as already at the maximum level.
"""
from shared.auth import require_staff
from shared.dynamo import get_complaint, update_complaint
from shared.errors import ComplaintError
from shared.logging import logger, log_event
from shared.models import LEVEL_ROLES
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
        result = get_engine().escalate(complaint)
        now = utc_now()

        if result.at_max_level:
            logger.info(f"Complaint {complaint_id} is already at {complaint.level}")
            return format_response(200, {
                'message': 'Complaint is already at the maximum level',
                'atMaxLevel': True,
                'complaint': serialize_complaint(complaint, now, sign_media=False)
            })

        updated = update_complaint(
            complaint_id,
            result.to_update(),
            expected_updated_at=complaint.updated_at,
            updated_at=now.isoformat()
        )

        logger.info(
            f"Escalated complaint {complaint_id} from {complaint.level} to {updated.level}, "
            f"assigned to {updated.assigned_worker_name}"
        )

        return format_response(200, {
            'message': f'Escalated to {LEVEL_ROLES[updated.level]}',
            'atMaxLevel': False,
            'complaint': serialize_complaint(updated, now, sign_media=False)
        })

    except ComplaintError as e:
        logger.warning(f"Could not escalate complaint {complaint_id}: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.error(f"Error escalating complaint {complaint_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
