"""Tests for DynamoDB single-table client."""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from trip_assistant.data.dynamodb import DynamoDBClient, table_definition


@pytest.fixture
def mock_boto3():
    with patch("trip_assistant.data.dynamodb.boto3") as mock:
        mock_table = MagicMock()
        mock_resource = MagicMock()
        mock_resource.Table.return_value = mock_table
        mock.resource.return_value = mock_resource
        yield mock, mock_table


def test_client_init_local(mock_boto3):
    mock, mock_table = mock_boto3
    client = DynamoDBClient(
        table_name="test-table",
        endpoint_url="http://localhost:8000",
        region="ap-south-1",
    )
    assert client.table_name == "test-table"
    mock.resource.assert_called_once_with(
        "dynamodb", region_name="ap-south-1", endpoint_url="http://localhost:8000"
    )


def test_client_init_aws(mock_boto3):
    mock, mock_table = mock_boto3
    DynamoDBClient(table_name="test-table", region="ap-south-1")
    mock.resource.assert_called_once_with("dynamodb", region_name="ap-south-1")


def test_put_item(mock_boto3):
    mock, mock_table = mock_boto3
    client = DynamoDBClient(table_name="test-table")
    client.put_item({"PK": "TRIP#1", "SK": "METADATA", "Data": {"title": "Goa"}})
    mock_table.put_item.assert_called_once()


def test_get_item(mock_boto3):
    mock, mock_table = mock_boto3
    mock_table.get_item.return_value = {
        "Item": {"PK": "TRIP#1", "SK": "METADATA", "Data": {"title": "Goa"}}
    }
    client = DynamoDBClient(table_name="test-table")
    item = client.get_item("TRIP#1", "METADATA")
    assert item["PK"] == "TRIP#1"
    mock_table.get_item.assert_called_once_with(Key={"PK": "TRIP#1", "SK": "METADATA"})


def test_get_item_not_found(mock_boto3):
    mock, mock_table = mock_boto3
    mock_table.get_item.return_value = {}
    client = DynamoDBClient(table_name="test-table")
    assert client.get_item("TRIP#999", "METADATA") is None


def test_query_follows_pagination(mock_boto3):
    mock, mock_table = mock_boto3
    mock_table.query.side_effect = [
        {"Items": [{"SK": "1"}], "LastEvaluatedKey": {"PK": "x", "SK": "1"}},
        {"Items": [{"SK": "2"}]},
    ]
    client = DynamoDBClient(table_name="test-table")
    items = client.query(pk="TRIP#1")
    assert [i["SK"] for i in items] == ["1", "2"]
    second_call = mock_table.query.call_args_list[1][1]
    assert second_call["ExclusiveStartKey"] == {"PK": "x", "SK": "1"}


def test_query_gsi1_uses_index(mock_boto3):
    mock, mock_table = mock_boto3
    mock_table.query.return_value = {"Items": []}
    client = DynamoDBClient(table_name="test-table")
    assert client.query_gsi1("TRIP#1#CART", limit=5) == []
    call_kwargs = mock_table.query.call_args[1]
    assert call_kwargs["IndexName"] == "GSI1"
    assert call_kwargs["Limit"] == 5


def test_update_item_builds_set_expression(mock_boto3):
    mock, mock_table = mock_boto3
    mock_table.update_item.return_value = {"Attributes": {"PK": "TRIP#1"}}
    client = DynamoDBClient(table_name="test-table")
    result = client.update_item("TRIP#1", "METADATA", {"Data": {"budget": 1}})
    call_kwargs = mock_table.update_item.call_args[1]
    assert call_kwargs["UpdateExpression"] == "SET #f0 = :v0"
    assert call_kwargs["ExpressionAttributeNames"] == {"#f0": "Data"}
    assert call_kwargs["ExpressionAttributeValues"] == {":v0": {"budget": 1}}
    assert result == {"PK": "TRIP#1"}


def test_batch_write(mock_boto3):
    mock, mock_table = mock_boto3
    writer = MagicMock()
    mock_table.batch_writer.return_value.__enter__.return_value = writer
    client = DynamoDBClient(table_name="test-table")
    client.batch_write([{"PK": "A"}, {"PK": "B"}])
    assert writer.put_item.call_count == 2


def test_delete_item(mock_boto3):
    mock, mock_table = mock_boto3
    client = DynamoDBClient(table_name="test-table")
    client.delete_item("CARTITEM#1", "METADATA")
    mock_table.delete_item.assert_called_once_with(
        Key={"PK": "CARTITEM#1", "SK": "METADATA"}
    )


def test_create_table_when_missing(mock_boto3):
    mock, mock_table = mock_boto3
    mock_table.load.side_effect = ClientError(
        {"Error": {"Code": "ResourceNotFoundException", "Message": "missing"}},
        "DescribeTable",
    )
    client = DynamoDBClient(table_name="test-table")
    client.create_table_if_not_exists()
    kwargs = mock_table.meta.client.create_table.call_args[1]
    assert kwargs["TableName"] == "test-table"
    assert kwargs["GlobalSecondaryIndexes"][0]["IndexName"] == "GSI1"


def test_create_table_when_present(mock_boto3):
    mock, mock_table = mock_boto3
    client = DynamoDBClient(table_name="test-table")
    client.create_table_if_not_exists()
    mock_table.meta.client.create_table.assert_not_called()


def test_create_table_reraises_other_errors(mock_boto3):
    mock, mock_table = mock_boto3
    mock_table.load.side_effect = ClientError(
        {"Error": {"Code": "AccessDeniedException", "Message": "no"}},
        "DescribeTable",
    )
    client = DynamoDBClient(table_name="test-table")
    with pytest.raises(ClientError):
        client.create_table_if_not_exists()
    mock_table.meta.client.create_table.assert_not_called()


def test_table_definition_declares_gsi_keys():
    definition = table_definition("trips")
    names = {a["AttributeName"] for a in definition["AttributeDefinitions"]}
    assert names == {"PK", "SK", "GSI1PK", "GSI1SK"}
    assert definition["BillingMode"] == "PAY_PER_REQUEST"
