"""
Tests for the complaints table access layer.
"""
import pytest
from unittest.mock import MagicMock, patch
from botocore.exceptions import ClientError

from helpers import CREATED_AT, make_complaint
from shared import dynamo
from shared.errors import ComplaintNotFoundError, ConcurrentUpdateError, CorruptComplaintError, InvalidStateError
from shared.models import ComplaintStatus


def client_error(code: str) -> ClientError:
    return ClientError({'Error': {'Code': code, 'Message': code}}, 'Operation')


@pytest.fixture
def table():
    mock_table = MagicMock()
    with patch.object(dynamo, 'dynamodb') as mock_resource:
        mock_resource.Table.return_value = mock_table
        yield mock_table


class TestUpdateComplaint:

    def test_update_is_conditional_on_updated_at(self, table):
        stored = make_complaint(status=ComplaintStatus.RESOLVED, updated_at='2025-01-02T00:00:00+00:00')
        table.update_item.return_value = {'Attributes': stored.to_item()}

        result = dynamo.update_complaint(
            'HC-TEST-0001',
            {'status': ComplaintStatus.RESOLVED},
            expected_updated_at=CREATED_AT,
            updated_at='2025-01-02T00:00:00+00:00'
        )

        kwargs = table.update_item.call_args.kwargs
        assert kwargs['ConditionExpression'] == 'attribute_exists(complaintId) AND #expected = :expected'
        assert kwargs['ExpressionAttributeValues'][':expected'] == CREATED_AT
        assert set(kwargs['ExpressionAttributeNames'].values()) == {'status', 'updatedAt'}
        assert result.status == ComplaintStatus.RESOLVED

    def test_failed_condition_is_a_conflict(self, table):
        table.update_item.side_effect = client_error('ConditionalCheckFailedException')

        with pytest.raises(ConcurrentUpdateError):
            dynamo.update_complaint('HC-TEST-0001', {'status': 'Resolved'}, CREATED_AT, CREATED_AT)

    def test_missing_row_without_expectation_is_not_found(self, table):
        table.update_item.side_effect = client_error('ConditionalCheckFailedException')

        with pytest.raises(ComplaintNotFoundError):
            dynamo.update_complaint('HC-TEST-0001', {'status': 'Resolved'}, None, CREATED_AT)

    def test_other_errors_propagate(self, table):
        table.update_item.side_effect = client_error('ProvisionedThroughputExceededException')

        with pytest.raises(ClientError):
            dynamo.update_complaint('HC-TEST-0001', {'status': 'Resolved'}, CREATED_AT, CREATED_AT)


class TestReads:

    def test_get_missing_complaint(self, table):
        table.get_item.return_value = {}

        with pytest.raises(ComplaintNotFoundError):
            dynamo.get_complaint('HC-MISSING')

    def test_malformed_row_is_a_server_fault(self, table):
        item = make_complaint().to_item()
        del item['hostel']
        table.get_item.return_value = {'Item': item}

        with pytest.raises(CorruptComplaintError) as excinfo:
            dynamo.get_complaint('HC-TEST-0001')

        assert excinfo.value.status_code == 500

    def test_row_with_unknown_level_in_scan_is_corrupt(self, table):
        item = make_complaint().to_item()
        item['level'] = 'Level 9'
        table.scan.return_value = {'Items': [item]}

        with pytest.raises(CorruptComplaintError):
            dynamo.list_complaints()

    def test_list_follows_pagination(self, table):
        table.scan.side_effect = [
            {'Items': [make_complaint(complaint_id='HC-1').to_item()], 'LastEvaluatedKey': {'complaintId': 'HC-1'}},
            {'Items': [make_complaint(complaint_id='HC-2').to_item()]},
        ]

        complaints = dynamo.list_complaints()

        assert [c.complaint_id for c in complaints] == ['HC-1', 'HC-2']
        assert table.scan.call_args_list[1].kwargs['ExclusiveStartKey'] == {'complaintId': 'HC-1'}

    def test_query_by_roll_number_uses_filter(self, table):
        table.scan.return_value = {'Items': []}

        dynamo.query_complaints(roll_number='21CS1001')

        assert 'FilterExpression' in table.scan.call_args.kwargs


class TestWrites:

    def test_put_refuses_duplicate_id(self, table):
        table.put_item.side_effect = client_error('ConditionalCheckFailedException')

        with pytest.raises(ConcurrentUpdateError):
            dynamo.put_complaint(make_complaint())

    def test_delete_requires_resolved(self, table):
        table.delete_item.side_effect = client_error('ConditionalCheckFailedException')

        with pytest.raises(InvalidStateError):
            dynamo.delete_complaint('HC-TEST-0001')

        kwargs = table.delete_item.call_args.kwargs
        assert kwargs['ExpressionAttributeValues'] == {':resolved': ComplaintStatus.RESOLVED}
