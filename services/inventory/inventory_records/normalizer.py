"""
Normalization of inbound payloads into inventory records.

Every write entry point (HTTP create, queue create, queue update) goes
through this module so stored records always have the same shape.
Normalization never fails: unusable values are replaced by safe defaults
and a warning is logged.
"""
import logging
import math
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal, DecimalException
from typing import Any, Dict, Optional, Union

from boto3.dynamodb.types import DYNAMODB_CONTEXT

from . import schemas

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = ("inventory_id", "price", "quantity")

# Textual forms that always mean "no number"
_EMPTY_LITERALS = {"NaN", "null", "undefined", "Infinity", "-Infinity"}

_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}


def sanitize_number(value: Any) -> Union[int, float]:
    """
    Coerce a value into a finite number the table can store.

    Integers too long for a DynamoDB number (38 significant digits) are
    stored as floats. Values outside the DynamoDB number range become 0.

    Args:
        value: Any inbound value (number, numeric string, None, ...)

    Returns:
        The numeric value of `value` if it is finite, otherwise 0
    """
    if value is None:
        return 0

    if isinstance(value, str) and (value in _EMPTY_LITERALS or not value.strip()):
        return 0

    number = _to_number(value)
    if isinstance(number, int) and not _fits_store(number):
        number = _int_to_float(number)

    if number is None or (isinstance(number, float) and not math.isfinite(number)) or not _fits_store(number):
        logger.warning(f"Invalid number value detected: {value!r}, setting to 0")
        return 0

    return number


def _fits_store(number: Union[int, float]) -> bool:
    # floats reach the table through their repr, see crud._to_item
    try:
        DYNAMODB_CONTEXT.create_decimal(repr(number) if isinstance(number, float) else number)
    except DecimalException:
        return False
    return True


def _int_to_float(number: int) -> Optional[float]:
    try:
        return float(number)
    except OverflowError:
        return None


def _to_number(value: Any) -> Optional[Union[int, float]]:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, str):
        return _parse_number(value.strip())
    return None


def _parse_number(text: str) -> Optional[Union[int, float]]:
    # Same literals as JavaScript's Number(): no digit separators, 0x/0o/0b prefixes
    if "_" in text or not text.isascii():
        return None

    radix = _RADIX_PREFIXES.get(text[:2].lower())
    if radix is not None:
        digits = text[2:]
        if not digits.isalnum():
            return None
        try:
            return int(digits, radix)
        except ValueError:
            return None

    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _as_mapping(payload: Any) -> Mapping:
    if isinstance(payload, Mapping):
        return payload
    if payload is not None:
        logger.warning(f"Payload is not an object ({type(payload).__name__}), treating it as empty")
    return {}


def build_record(payload: Any, generate_id: bool = False) -> schemas.InventoryRecord:
    """
    Build a complete inventory record from an arbitrary payload.

    Args:
        payload: Inbound mapping of field name to value; any field may be missing
        generate_id: If True a new UUID is assigned, otherwise payload["id"] is kept as-is

    Returns:
        InventoryRecord with every field populated
    """
    body = _as_mapping(payload)
    user = _as_mapping(body.get("user"))

    return schemas.InventoryRecord(
        id=str(uuid.uuid4()) if generate_id else body.get("id"),
        inventory_id=sanitize_number(body.get("inventory_id")),
        created_at=body.get("created_at") or utc_now_iso(),
        price=sanitize_number(body.get("price")),
        quantity=sanitize_number(body.get("quantity")),
        exchange_type=body.get("exchange_type"),
        status=body.get("status"),
        user=schemas.UserInfo(
            user_id=sanitize_number(user.get("user_id")),
            role_user=user.get("role_user"),
        ),
    )


def build_updates(payload: Any) -> Dict[str, Any]:
    """
    Normalize a partial update payload.

    Only mutable fields present in the payload are returned. Numeric fields
    are coerced like in build_record; the record id and unknown keys are
    dropped.

    Args:
        payload: Inbound mapping with a subset of record fields

    Returns:
        dict of field name to normalized value
    """
    body = _as_mapping(payload)
    updates = schemas.InventoryRecordUpdate.model_validate(dict(body)).model_dump(exclude_unset=True)

    for field in NUMERIC_FIELDS:
        if field in updates:
            updates[field] = sanitize_number(updates[field])

    if "user" in updates:
        user = updates["user"]
        if isinstance(user, Mapping):
            updates["user"] = {**user, "user_id": sanitize_number(user.get("user_id"))}
        else:
            updates["user"] = schemas.UserInfo().model_dump()

    return updates
