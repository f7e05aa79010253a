"""
DynamoDB single-table client for persisted trips.

Points at DynamoDB Local when an endpoint URL is given (DYNAMODB_ENDPOINT),
otherwise at AWS DynamoDB in the configured region.
"""

from typing import Any

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from trip_assistant.utils.logging import get_logger

logger = get_logger(__name__)

GSI1 = "GSI1"

# (partition, sort) attribute names for the base table and for GSI1
TABLE_KEYS = ("PK", "SK")
GSI1_KEYS = ("GSI1PK", "GSI1SK")


def _key_schema(keys: tuple[str, str]) -> list[dict[str, str]]:
    hash_key, range_key = keys
    return [
        {"AttributeName": hash_key, "KeyType": "HASH"},
        {"AttributeName": range_key, "KeyType": "RANGE"},
    ]


def table_definition(table_name: str) -> dict[str, Any]:
    """``create_table`` arguments: string PK/SK, one all-projecting GSI, on demand."""
    return {
        "TableName": table_name,
        "KeySchema": _key_schema(TABLE_KEYS),
        "AttributeDefinitions": [
            {"AttributeName": name, "AttributeType": "S"}
            for name in TABLE_KEYS + GSI1_KEYS
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": GSI1,
                "KeySchema": _key_schema(GSI1_KEYS),
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }


class DynamoDBClient:
    """Item-level access to one table laid out as PK/SK plus GSI1."""

    def __init__(
        self,
        table_name: str,
        region: str = "ap-south-1",
        endpoint_url: str | None = None,
    ):
        self.table_name = table_name
        options: dict[str, Any] = {"region_name": region}
        if endpoint_url:
            options["endpoint_url"] = endpoint_url
            logger.info(f"Using DynamoDB Local at {endpoint_url}")
        self.table = boto3.resource("dynamodb", **options).Table(table_name)

    @staticmethod
    def _key(pk: str, sk: str) -> dict[str, str]:
        return {"PK": pk, "SK": sk}

    def put_item(self, item: dict[str, Any]) -> None:
        self.table.put_item(Item=item)

    def get_item(self, pk: str, sk: str) -> dict[str, Any] | None:
        return self.table.get_item(Key=self._key(pk, sk)).get("Item")

    def delete_item(self, pk: str, sk: str) -> None:
        self.table.delete_item(Key=self._key(pk, sk))

    def query(
        self,
        pk: str,
        sk_prefix: str | None = None,
        index_name: str | None = None,
        limit: int | None = None,
        scan_forward: bool = True,
    ) -> list[dict[str, Any]]:
        """
        All items under one partition key, reading every result page.

        Args:
            pk: Partition key value
            sk_prefix: Only sort keys starting with this
            index_name: Query GSI1 (GSI1PK/GSI1SK) instead of the table
            limit: Stop after this many items
            scan_forward: Ascending sort key order when True
        """
        hash_attr, range_attr = GSI1_KEYS if index_name else TABLE_KEYS
        condition = Key(hash_attr).eq(pk)
        if sk_prefix:
            condition &= Key(range_attr).begins_with(sk_prefix)

        request: dict[str, Any] = {
            "KeyConditionExpression": condition,
            "ScanIndexForward": scan_forward,
        }
        if index_name:
            request["IndexName"] = index_name
        if limit:
            request["Limit"] = limit

        items: list[dict[str, Any]] = []
        while True:
            page = self.table.query(**request)
            items.extend(page.get("Items", []))
            start_key = page.get("LastEvaluatedKey")
            if start_key is None or (limit and len(items) >= limit):
                return items[:limit] if limit else items
            request["ExclusiveStartKey"] = start_key

    def query_gsi1(
        self,
        gsi1pk: str,
        sk_prefix: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        return self.query(gsi1pk, sk_prefix=sk_prefix, index_name=GSI1, limit=limit)

    def update_item(
        self,
        pk: str,
        sk: str,
        updates: dict[str, Any],
    ) -> dict[str, Any]:
        """SET the given top-level attributes and return the item as stored."""
        names = {f"#f{i}": field for i, field in enumerate(updates)}
        values = {f":v{i}": value for i, value in enumerate(updates.values())}
        assignments = ", ".join(f"#f{i} = :v{i}" for i in range(len(updates)))

        response = self.table.update_item(
            Key=self._key(pk, sk),
            UpdateExpression=f"SET {assignments}",
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
            ReturnValues="ALL_NEW",
        )
        return response.get("Attributes", {})

    def batch_write(self, items: list[dict[str, Any]]) -> None:
        """Put many items; boto3's batch writer chunks them into requests of 25."""
        with self.table.batch_writer() as writer:
            for item in items:
                writer.put_item(Item=item)

    def create_table_if_not_exists(self) -> None:
        """Create the table and GSI1 unless it already exists (local development)."""
        try:
            self.table.load()
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") != "ResourceNotFoundException":
                raise
        else:
            logger.info(f"Table {self.table_name} already exists")
            return

        self.table.meta.client.create_table(**table_definition(self.table_name))
        logger.info(f"Created table {self.table_name}")
