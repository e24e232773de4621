"""
Builders for complaints and API Gateway events used across the tests.
"""
import json
from datetime import datetime, timezone

from shared.models import Complaint, ComplaintLevel, ComplaintStatus, Severity

CREATED_AT = '2025-01-01T10:00:00+00:00'


def make_complaint(**overrides) -> Complaint:
    fields = {
        'complaint_id': 'HC-TEST-0001',
        'hostel': 'Boys Hostel A',
        'room_number': '101',
        'student_name': 'Asha',
        'roll_number': '21CS1001',
        'issue_type': 'Plumbing',
        'severity': Severity.NORMAL,
        'description': 'Leaking tap',
        'status': ComplaintStatus.PENDING,
        'level': ComplaintLevel.LEVEL_1,
        'created_at': CREATED_AT,
        'updated_at': CREATED_AT,
    }
    fields.update(overrides)
    return Complaint(**fields)


def at(value: str) -> datetime:
    return datetime.fromisoformat(value).astimezone(timezone.utc)


def make_event(groups=None, roll_number=None, complaint_id=None, body=None, query=None) -> dict:
    claims = {'sub': 'user-sub'}
    if groups:
        claims['cognito:groups'] = ','.join(groups)
    if roll_number:
        claims['custom:rollNumber'] = roll_number

    event = {
        'requestContext': {'authorizer': {'claims': claims}},
        'pathParameters': {'complaintId': complaint_id} if complaint_id else None,
        'queryStringParameters': query,
    }
    if body is not None:
        event['body'] = json.dumps(body)
    return event


def staff_event(**kwargs) -> dict:
    return make_event(groups=['manager'], **kwargs)


def student_event(roll_number='21CS1001', **kwargs) -> dict:
    return make_event(groups=['student'], roll_number=roll_number, **kwargs)


def body_of(response: dict) -> dict:
    return json.loads(response['body'])
