"""
Queue consumer for the Historical Inventory service.

Handles SQS batches delivered to a Lambda function. Each message body is
JSON of the form {"operation": ..., "data": {...}}: "update" updates an
existing record by data["id"], any other operation creates a new record.

Messages are processed one at a time; a failing message is logged and
skipped, and the batch as a whole always reports success.
"""
import json
import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional

from . import crud, normalizer, schemas
from .config import Settings
from .database import create_table

logger = logging.getLogger(__name__)

SQS_EVENT_SOURCE = "aws:sqs"


def _build_response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Access-Control-Allow-Origin": "*", "Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def process_message(table, record: Dict[str, Any]) -> None:
    """
    Apply a single queue message to the table.

    Args:
        table: DynamoDB table
        record: SQS record whose "body" holds the JSON message

    Raises:
        Any parsing or store error; callers isolate failures per message
    """
    message = schemas.QueueMessage.model_validate(json.loads(record["body"]))

    if message.operation == "update":
        data = message.data if isinstance(message.data, Mapping) else {}
        record_id = data.get("id")
        if record_id is None:
            logger.error("Update message has no record id, skipping")
            return

        updated = crud.update_record(table, record_id, normalizer.build_updates(data))
        if updated is None:
            logger.warning(f"Inventory record {record_id} not found, update skipped")
            return
        logger.info(f"Item updated: {updated}")
        return

    item = crud.create_record(table, normalizer.build_record(message.data, generate_id=True))
    logger.info(f"Item created: {item}")


def process_messages(table, records: Iterable[Dict[str, Any]]) -> int:
    """
    Process a batch of SQS records sequentially.

    Returns:
        Number of records processed without error
    """
    processed = 0
    for record in records:
        try:
            process_message(table, record)
            processed += 1
        except Exception:
            logger.exception(f"Error processing SQS message {record.get('messageId')}")
    return processed


def build_queue_handler(settings: Optional[Settings] = None, table=None):
    """
    Build the Lambda entry point for SQS events.

    Args:
        settings: Service settings, read from the environment when omitted
        table: DynamoDB table to use, built from settings when omitted

    Returns:
        handler(event, context) callable
    """
    settings = settings or Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)
    table = table if table is not None else create_table(settings)

    def handler(event, context):
        logger.debug(f"Event received: {json.dumps(event, default=str)}")

        records = event.get("Records") or []
        if not records or records[0].get("eventSource") != SQS_EVENT_SOURCE:
            logger.error("Event does not contain SQS records")
            return _build_response(400, {"message": "No SQS records in event"})

        processed = process_messages(table, records)
        return _build_response(200, {"message": "SQS messages processed", "processed": processed})

    return handler


handler = build_queue_handler()
