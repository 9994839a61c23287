"""
Pydantic schemas for inventory records and queue messages.

These schemas define the shape of stored records, partial updates and the
messages delivered through the queue.
"""
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict

Number = Union[int, float]


class UserInfo(BaseModel):
    """User attached to an inventory record."""
    user_id: Number = 0
    role_user: Any = None


class InventoryRecord(BaseModel):
    """
    Canonical inventory record as stored in the table.

    Attributes:
        id: Primary key (UUID string for generated records)
        inventory_id: Inventory the record belongs to, key of the secondary index
        created_at: ISO-8601 creation timestamp
        price: Unit price
        quantity: Quantity exchanged
        exchange_type: Opaque exchange kind (e.g. "buy")
        status: Opaque record status
        user: User that produced the record
    """
    id: Any = None
    inventory_id: Number = 0
    created_at: Any = None
    price: Number = 0
    quantity: Number = 0
    exchange_type: Any = None
    status: Any = None
    user: UserInfo = UserInfo()


class InventoryRecordUpdate(BaseModel):
    """
    Partial update of an inventory record. All fields are optional.

    Only the fields explicitly set by the caller are applied; the record id
    is not part of this schema and can never be updated.
    """
    inventory_id: Optional[Any] = None
    created_at: Optional[Any] = None
    price: Optional[Any] = None
    quantity: Optional[Any] = None
    exchange_type: Optional[Any] = None
    status: Optional[Any] = None
    user: Optional[Any] = None


class QueueMessage(BaseModel):
    """Body of a queue message: an operation tag and its payload."""
    model_config = ConfigDict(extra="ignore")

    operation: Any = None
    data: Any = None
