"""
Configuration for the Historical Inventory service.

Settings are read once from the environment at process start and passed
explicitly to the HTTP app and the queue handler.
"""
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_TABLE_NAME = "HistoricalInventoryTable"
DEFAULT_INDEX_NAME = "InventoryIdIndex"


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings.

    Attributes:
        table_name (str): DynamoDB table holding inventory records
        index_name (str): Secondary index keyed by inventory_id
        region_name (str): AWS region for the DynamoDB resource
        endpoint_url (str): Optional endpoint override (e.g. DynamoDB Local)
        log_level (str): Root logging level
    """
    table_name: str = DEFAULT_TABLE_NAME
    index_name: str = DEFAULT_INDEX_NAME
    region_name: str = "us-east-1"
    endpoint_url: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            table_name=os.getenv("TABLE_NAME", DEFAULT_TABLE_NAME),
            index_name=os.getenv("INDEX_NAME", DEFAULT_INDEX_NAME),
            region_name=os.getenv("AWS_REGION", "us-east-1"),
            endpoint_url=os.getenv("DYNAMODB_ENDPOINT_URL") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
