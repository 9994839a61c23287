"""
CRUD (Create, Read, Update, Delete) operations for the Historical Inventory service.

This module contains all DynamoDB operations for inventory records. Each
function maps to a single store call (or a paginated sequence of calls for
query and scan).
"""
import json
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError

from . import schemas
from .config import DEFAULT_INDEX_NAME

logger = logging.getLogger(__name__)

PRIMARY_KEY = "id"


def _to_item(data: Dict[str, Any]) -> Dict[str, Any]:
    # The DynamoDB document API rejects float, numbers must be Decimal
    return json.loads(json.dumps(data), parse_float=Decimal)


def _from_item(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {key: _from_item(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_from_item(val) for val in value]
    return value


def _collect_pages(operation, **kwargs) -> List[Dict[str, Any]]:
    items = []
    while True:
        response = operation(**kwargs)
        items.extend(response.get("Items", []))
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            break
        kwargs["ExclusiveStartKey"] = last_key
    return [_from_item(item) for item in items]


def create_record(table, record: schemas.InventoryRecord) -> Dict[str, Any]:
    """
    Store a new inventory record.

    Args:
        table: DynamoDB table
        record: Normalized record to store

    Returns:
        The stored record as a plain dict
    """
    item = record.model_dump()
    table.put_item(Item=_to_item(item))
    logger.info(f"Created inventory record {item[PRIMARY_KEY]}")
    return item


def get_record(table, record_id: Any) -> Optional[Dict[str, Any]]:
    """
    Retrieve a single inventory record by ID.

    Args:
        table: DynamoDB table
        record_id: ID of the record to retrieve

    Returns:
        Record dict or None if not found
    """
    response = table.get_item(Key={PRIMARY_KEY: record_id})
    item = response.get("Item")
    if item is None:
        return None
    return _from_item(item)


def update_record(table, record_id: Any, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Update an existing inventory record.

    Args:
        table: DynamoDB table
        record_id: ID of the record to update
        updates: Normalized fields to set (the ID is never updated)

    Returns:
        Updated record dict or None if not found
    """
    names = {"#pk": PRIMARY_KEY}
    values = {}
    assignments = []
    for key, value in updates.items():
        if key == PRIMARY_KEY:
            continue
        names[f"#{key}"] = key
        values[f":{key}"] = value
        assignments.append(f"#{key} = :{key}")

    if not assignments:
        return get_record(table, record_id)

    try:
        response = table.update_item(
            Key={PRIMARY_KEY: record_id},
            UpdateExpression=f"SET {', '.join(assignments)}",
            ConditionExpression="attribute_exists(#pk)",
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=_to_item(values),
            ReturnValues="ALL_NEW",
        )
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
            return None
        raise

    logger.info(f"Updated inventory record {record_id}: {sorted(values)}")
    return _from_item(response.get("Attributes"))


def delete_record(table, record_id: Any) -> bool:
    """
    Delete an inventory record.

    Args:
        table: DynamoDB table
        record_id: ID of the record to delete

    Returns:
        True if the record was deleted, False if not found
    """
    response = table.delete_item(Key={PRIMARY_KEY: record_id}, ReturnValues="ALL_OLD")
    return "Attributes" in response


def get_records_by_inventory_id(table, inventory_id: Any, index_name: str = DEFAULT_INDEX_NAME) -> List[Dict[str, Any]]:
    """
    Retrieve all records of one inventory through the secondary index.

    Args:
        table: DynamoDB table
        inventory_id: Already sanitized inventory_id to match
        index_name: Name of the secondary index on inventory_id

    Returns:
        List of record dicts (possibly empty)
    """
    return _collect_pages(
        table.query,
        IndexName=index_name,
        KeyConditionExpression="inventory_id = :id",
        ExpressionAttributeValues=_to_item({":id": inventory_id}),
    )


def get_all_records(table) -> List[Dict[str, Any]]:
    """
    Retrieve every record in the table with a full scan.

    Returns:
        List of record dicts
    """
    return _collect_pages(table.scan)
