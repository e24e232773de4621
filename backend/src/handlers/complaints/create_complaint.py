"""
Create Complaint Handler.
POST /complaints

A student files a complaint for their room. The complaint starts at Level 1;
with auto-assignment on, the issue-type worker is attached and the status is
Assigned, otherwise it waits as Pending.
"""
from shared.auth import require_student
from shared.config import config
from shared.dynamo import put_complaint
from shared.errors import ComplaintError, InvalidComplaintError
from shared.logging import logger, log_event
from shared.models import Complaint, ComplaintLevel, ComplaintStatus, HOSTELS, Severity
from shared.service import get_engine, serialize_complaint
from shared.utils import error_response, format_response, generate_complaint_id, parse_body, utc_now

REQUIRED_FIELDS = ('hostel', 'roomNumber', 'studentName', 'issueType', 'description')


def build_complaint(body: dict, roll_number: str, now) -> Complaint:
    """
    Validate the request body and build a new Level 1 complaint.

    Raises:
        InvalidComplaintError: on missing fields or unknown hostel/severity
    """
    missing = [name for name in REQUIRED_FIELDS if not str(body.get(name) or '').strip()]
    if missing:
        raise InvalidComplaintError(f"Missing required fields: {', '.join(missing)}")

    hostel = str(body['hostel']).strip()
    if hostel not in HOSTELS:
        raise InvalidComplaintError(f"Unknown hostel: {hostel}")

    issue_type = str(body['issueType']).strip()
    if issue_type == 'Other':
        issue_type = str(body.get('customIssue') or '').strip()
        if not issue_type:
            raise InvalidComplaintError("customIssue is required when issueType is Other")

    timestamp = now.isoformat()
    complaint = Complaint(
        complaint_id=generate_complaint_id(int(now.timestamp() * 1000)),
        hostel=hostel,
        room_number=str(body['roomNumber']).strip(),
        student_name=str(body['studentName']).strip(),
        roll_number=roll_number,
        issue_type=issue_type,
        severity=body.get('severity') or Severity.NORMAL,
        description=str(body['description']).strip(),
        status=ComplaintStatus.PENDING,
        level=ComplaintLevel.LEVEL_1,
        created_at=timestamp,
        updated_at=timestamp,
    )

    if config.AUTO_ASSIGN_ON_CREATE:
        worker = get_engine().assign_initial_worker(issue_type)
        complaint.status = ComplaintStatus.ASSIGNED
        complaint.assigned_worker_name = worker.name
        complaint.assigned_worker_phone = worker.phone

    return complaint


def handler(event, context):
    log_event(event)

    try:
        roll_number = require_student(event)
        now = utc_now()
        complaint = put_complaint(build_complaint(parse_body(event), roll_number, now))

        logger.info(
            f"Complaint {complaint.complaint_id} filed by {roll_number} "
            f"({complaint.issue_type}, {complaint.severity}, {complaint.status})"
        )

        return format_response(201, {
            'message': f'Your complaint ID is: {complaint.complaint_id}',
            'complaint': serialize_complaint(complaint, now, sign_media=False)
        })

    except ComplaintError as e:
        logger.warning(f"Rejected complaint: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.error(f"Error creating complaint: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
