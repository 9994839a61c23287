"""
DynamoDB connection setup for the Historical Inventory service.

This module builds the boto3 table handle shared by all request handlers
and provides the FastAPI dependency that hands it to route functions.
"""
import boto3
from fastapi import Request

from .config import Settings


def create_table(settings: Settings):
    """
    Build a DynamoDB Table resource from settings.

    Args:
        settings: Service settings

    Returns:
        boto3 DynamoDB Table resource
    """
    dynamodb = boto3.resource(
        "dynamodb",
        region_name=settings.region_name,
        endpoint_url=settings.endpoint_url,
    )
    return dynamodb.Table(settings.table_name)


def get_table(request: Request):
    """
    Dependency function that provides the shared DynamoDB table.

    Usage:
        Use as a FastAPI dependency to inject the table into route handlers.
    """
    return request.app.state.table


def get_settings(request: Request) -> Settings:
    """Dependency function that provides the service settings."""
    return request.app.state.settings
