"""
Delete Complaint Handler.
DELETE /complaints/{complaintId}

Only resolved complaints can be deleted; the store repeats the check in its
condition expression. Attachments are removed from S3 after the row.
"""
from botocore.exceptions import ClientError

from shared.auth import require_staff
from shared.dynamo import delete_complaint, get_complaint
from shared.errors import ComplaintError
from shared.logging import logger, log_event
from shared.s3_utils import delete_attachments
from shared.service import get_engine
from shared.utils import error_response, format_response, get_path_param


def handler(event, context):
    log_event(event)

    complaint_id = get_path_param(event, 'complaintId')
    if not complaint_id:
        return format_response(400, {'error': 'Missing complaintId'})

    try:
        require_staff(event)

        complaint = get_complaint(complaint_id)
        get_engine().ensure_deletable(complaint)

        delete_complaint(complaint_id)

        attachments = list(complaint.images)
        if complaint.video:
            attachments.append(complaint.video)
        try:
            delete_attachments(attachments)
        except ClientError as e:
            # The row is gone; leftover objects do not undo the delete
            logger.warning(f"Could not remove attachments of deleted complaint {complaint_id}: {e}")

        return format_response(200, {'message': 'The resolved complaint has been deleted.'})

    except ComplaintError as e:
        logger.warning(f"Could not delete complaint {complaint_id}: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.error(f"Error deleting complaint {complaint_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
