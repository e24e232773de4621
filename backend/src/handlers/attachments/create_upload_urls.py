"""
Create Attachment Upload URLs Handler.
POST /complaints/{complaintId}/attachments
Body: { "images": [{"contentType": "image/jpeg"}, ...], "video": {"contentType": "video/mp4"} }

Returns presigned PUT URLs and records the new object keys on the complaint.
The browser uploads straight to S3.
"""
from shared.auth import require_student
from shared.config import config
from shared.dynamo import get_complaint, update_complaint
from shared.errors import ComplaintError, ComplaintNotFoundError, InvalidComplaintError, InvalidStateError
from shared.logging import logger, log_event
from shared.s3_utils import (
    IMAGE_CONTENT_TYPES,
    VIDEO_CONTENT_TYPES,
    build_attachment_key,
    generate_upload_url,
)
from shared.utils import error_response, format_response, get_path_param, parse_body, utc_now


def plan_uploads(complaint, body: dict) -> dict:
    """
    Validate the requested attachments against the complaint's limits.

    Returns:
        Dict with 'images' and 'video' entries of (key, content_type)

    Raises:
        InvalidComplaintError: on unsupported types or too many files
        InvalidStateError: if the complaint is already resolved
    """
    if complaint.is_resolved:
        raise InvalidStateError("Attachments cannot be added to a resolved complaint")

    requested_images = body.get('images') or []
    requested_video = body.get('video')
    if not isinstance(requested_images, list):
        raise InvalidComplaintError("images must be a list")
    if not requested_images and not requested_video:
        raise InvalidComplaintError("No attachments requested")

    if len(complaint.images) + len(requested_images) > config.MAX_IMAGES_PER_COMPLAINT:
        raise InvalidComplaintError(
            f"A complaint can have at most {config.MAX_IMAGES_PER_COMPLAINT} images"
        )

    images = []
    for entry in requested_images:
        content_type = entry.get('contentType') if isinstance(entry, dict) else None
        if content_type not in IMAGE_CONTENT_TYPES:
            raise InvalidComplaintError(f"Unsupported image type: {content_type}")
        key = build_attachment_key(complaint.complaint_id, 'images', IMAGE_CONTENT_TYPES[content_type])
        images.append((key, content_type))

    video = None
    if requested_video:
        if complaint.video:
            raise InvalidComplaintError("A complaint can have only one video")
        content_type = requested_video.get('contentType') if isinstance(requested_video, dict) else None
        if content_type not in VIDEO_CONTENT_TYPES:
            raise InvalidComplaintError(f"Unsupported video type: {content_type}")
        key = build_attachment_key(complaint.complaint_id, 'video', VIDEO_CONTENT_TYPES[content_type])
        video = (key, content_type)

    return {'images': images, 'video': video}


def handler(event, context):
    log_event(event)

    complaint_id = get_path_param(event, 'complaintId')
    if not complaint_id:
        return format_response(400, {'error': 'Missing complaintId'})

    if not config.ATTACHMENTS_BUCKET:
        logger.error("ATTACHMENTS_BUCKET is not configured")
        return format_response(500, {'error': 'Attachments are not available'})

    try:
        roll_number = require_student(event)

        complaint = get_complaint(complaint_id)
        if complaint.roll_number != roll_number:
            raise ComplaintNotFoundError(complaint_id)

        plan = plan_uploads(complaint, parse_body(event))

        uploads = [
            {'key': key, 'uploadUrl': generate_upload_url(key, content_type), 'kind': 'image'}
            for key, content_type in plan['images']
        ]
        fields = {'images': complaint.images + [key for key, _ in plan['images']]}

        if plan['video']:
            key, content_type = plan['video']
            uploads.append({'key': key, 'uploadUrl': generate_upload_url(key, content_type), 'kind': 'video'})
            fields['video'] = key

        now = utc_now()
        update_complaint(
            complaint_id,
            fields,
            expected_updated_at=complaint.updated_at,
            updated_at=now.isoformat()
        )

        logger.info(f"Issued {len(uploads)} upload URLs for complaint {complaint_id}")

        return format_response(200, {
            'uploads': uploads,
            'expiresIn': config.PRESIGNED_URL_EXPIRATION
        })

    except ComplaintError as e:
        logger.warning(f"Rejected attachments for {complaint_id}: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.error(f"Error creating upload URLs for {complaint_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
