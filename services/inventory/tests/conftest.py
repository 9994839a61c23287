from __future__ import annotations

import copy
from decimal import Decimal

import pytest
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from inventory_records.config import Settings
from inventory_records.main import create_app

_serializer = TypeSerializer()


def _serialize(values):
    # Runs values through boto3's TypeSerializer, which rejects floats and numbers DynamoDB cannot hold
    for value in values.values():
        _serializer.serialize(value)


class FakeTable:
    """In-memory stand-in for the subset of the boto3 Table API the service uses."""

    def __init__(self, page_size: int | None = None):
        self.items: dict = {}
        self.page_size = page_size
        self.queries: list = []

    def put_item(self, Item):
        _serialize(Item)
        self.items[Item["id"]] = copy.deepcopy(Item)
        return {}

    def get_item(self, Key):
        item = self.items.get(Key["id"])
        if item is None:
            return {}
        return {"Item": copy.deepcopy(item)}

    def update_item(self, Key, UpdateExpression, ConditionExpression, ExpressionAttributeNames,
                    ExpressionAttributeValues, ReturnValues):
        _serialize(ExpressionAttributeValues)
        assert ConditionExpression == "attribute_exists(#pk)"
        item = self.items.get(Key["id"])
        if item is None:
            raise ClientError(
                {"Error": {"Code": "ConditionalCheckFailedException", "Message": "The conditional request failed"}},
                "UpdateItem",
            )
        assert UpdateExpression.startswith("SET ")
        for assignment in UpdateExpression[len("SET "):].split(", "):
            name, placeholder = (part.strip() for part in assignment.split("="))
            item[ExpressionAttributeNames[name]] = copy.deepcopy(ExpressionAttributeValues[placeholder])
        return {"Attributes": copy.deepcopy(item)}

    def delete_item(self, Key, ReturnValues="NONE"):
        item = self.items.pop(Key["id"], None)
        if item is None or ReturnValues != "ALL_OLD":
            return {}
        return {"Attributes": item}

    def query(self, IndexName, KeyConditionExpression, ExpressionAttributeValues, ExclusiveStartKey=None):
        self.queries.append(IndexName)
        assert KeyConditionExpression == "inventory_id = :id"
        value = ExpressionAttributeValues[":id"]
        matches = [item for item in self.items.values() if item.get("inventory_id") == value]
        return {"Items": copy.deepcopy(matches)}

    def scan(self, ExclusiveStartKey=None):
        keys = list(self.items)
        start = keys.index(ExclusiveStartKey["id"]) + 1 if ExclusiveStartKey else 0
        end = len(keys) if self.page_size is None else start + self.page_size
        page = [copy.deepcopy(self.items[key]) for key in keys[start:end]]
        response = {"Items": page}
        if end < len(keys):
            response["LastEvaluatedKey"] = {"id": keys[end - 1]}
        return response


@pytest.fixture()
def settings():
    return Settings(table_name="TestInventoryTable", index_name="TestInventoryIdIndex")


@pytest.fixture()
def table():
    return FakeTable()


@pytest.fixture()
def client(settings, table):
    app = create_app(settings, table=table)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture()
def stored_record(table):
    table.items["rec-1"] = {
        "id": "rec-1",
        "inventory_id": 7,
        "created_at": "2024-05-01T10:00:00.000Z",
        "price": Decimal("19.99"),
        "quantity": 3,
        "exchange_type": "buy",
        "status": "open",
        "user": {"user_id": 5, "role_user": "trader"},
    }
    return table.items["rec-1"]
