"""
DynamoDB access for the complaints table.

State-changing writes are conditional on the `updatedAt` value the caller
read, so two staff members escalating the same complaint cannot both win.
Errors other than failed conditions propagate to the handler unchanged.
"""
import boto3
from typing import List, Dict, Any, Optional
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError
from .config import config
from .errors import (
    ComplaintNotFoundError,
    ConcurrentUpdateError,
    CorruptComplaintError,
    InvalidComplaintError,
    InvalidStateError,
)
from .logging import logger
from .models import Complaint, ComplaintStatus

dynamodb = boto3.resource('dynamodb', region_name=config.AWS_REGION)


def _table():
    return dynamodb.Table(config.COMPLAINTS_TABLE)


def _is_condition_failure(error: ClientError) -> bool:
    return error.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException'


def _to_complaint(item: Dict[str, Any]) -> Complaint:
    """Read a stored item, treating a malformed row as a server fault."""
    try:
        return Complaint.from_item(item)
    except InvalidComplaintError as e:
        complaint_id = item.get('complaintId', '<no id>')
        logger.error(f"Malformed complaint row {complaint_id}: {e.message}")
        raise CorruptComplaintError(complaint_id) from e


def put_complaint(complaint: Complaint) -> Complaint:
    """
    Insert a new complaint.

    Raises:
        ConcurrentUpdateError: if a complaint with the same id already exists
    """
    try:
        _table().put_item(
            Item=complaint.to_item(),
            ConditionExpression='attribute_not_exists(complaintId)'
        )
    except ClientError as e:
        if _is_condition_failure(e):
            raise ConcurrentUpdateError(complaint.complaint_id) from e
        raise

    logger.info(f"Created complaint {complaint.complaint_id}")
    return complaint


def get_complaint(complaint_id: str) -> Complaint:
    """
    Fetch a single complaint.

    Raises:
        ComplaintNotFoundError: if no row exists for the id
    """
    response = _table().get_item(Key={'complaintId': complaint_id})
    item = response.get('Item')
    if not item:
        raise ComplaintNotFoundError(complaint_id)
    return _to_complaint(item)


def update_complaint(
    complaint_id: str,
    fields: Dict[str, Any],
    expected_updated_at: Optional[str],
    updated_at: str
) -> Complaint:
    """
    Apply a partial update and stamp `updatedAt`.

    Args:
        complaint_id: Complaint to update
        fields: Attribute names and new values
        expected_updated_at: The `updatedAt` the caller read; None skips the check
        updated_at: New `updatedAt` value

    Returns:
        The complaint as stored after the update

    Raises:
        ConcurrentUpdateError: if the row changed since it was read
        ComplaintNotFoundError: if the row does not exist
    """
    values = dict(fields)
    values['updatedAt'] = updated_at

    names = {}
    assignments = []
    expression_values = {}
    for index, (name, value) in enumerate(values.items()):
        names[f'#f{index}'] = name
        expression_values[f':v{index}'] = value
        assignments.append(f'#f{index} = :v{index}')

    condition = 'attribute_exists(complaintId)'
    if expected_updated_at is not None:
        names['#expected'] = 'updatedAt'
        expression_values[':expected'] = expected_updated_at
        condition += ' AND #expected = :expected'

    try:
        response = _table().update_item(
            Key={'complaintId': complaint_id},
            UpdateExpression='SET ' + ', '.join(assignments),
            ConditionExpression=condition,
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=expression_values,
            ReturnValues='ALL_NEW'
        )
    except ClientError as e:
        if _is_condition_failure(e):
            if expected_updated_at is None:
                raise ComplaintNotFoundError(complaint_id) from e
            raise ConcurrentUpdateError(complaint_id) from e
        raise

    return _to_complaint(response['Attributes'])


def _scan_all(**scan_params) -> List[Dict[str, Any]]:
    """Scan the table, following pagination."""
    table = _table()
    items = []

    while True:
        response = table.scan(**scan_params)
        items.extend(response.get('Items', []))
        last_key = response.get('LastEvaluatedKey')
        if not last_key:
            return items
        scan_params['ExclusiveStartKey'] = last_key


def list_complaints() -> List[Complaint]:
    return [_to_complaint(item) for item in _scan_all()]


def query_complaints(roll_number: Optional[str] = None, status: Optional[str] = None) -> List[Complaint]:
    """
    List complaints matching store-side filters.

    Uses a filtered scan; the table is small enough per campus that a
    RollNumberIndex GSI is not required.
    """
    filter_expression = None
    if roll_number:
        filter_expression = Attr('rollNumber').eq(roll_number)
    if status:
        status_filter = Attr('status').eq(status)
        filter_expression = status_filter if filter_expression is None else filter_expression & status_filter

    if filter_expression is None:
        return list_complaints()

    items = _scan_all(FilterExpression=filter_expression)
    return [_to_complaint(item) for item in items]


def delete_complaint(complaint_id: str) -> None:
    """
    Delete a resolved complaint.

    Raises:
        InvalidStateError: if the stored complaint is not resolved (or missing)
    """
    try:
        _table().delete_item(
            Key={'complaintId': complaint_id},
            ConditionExpression='#status = :resolved',
            ExpressionAttributeNames={'#status': 'status'},
            ExpressionAttributeValues={':resolved': ComplaintStatus.RESOLVED}
        )
    except ClientError as e:
        if _is_condition_failure(e):
            raise InvalidStateError("Only resolved complaints can be deleted") from e
        raise

    logger.info(f"Deleted complaint {complaint_id}")
