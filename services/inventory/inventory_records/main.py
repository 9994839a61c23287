"""
    Historical Inventory Service API

    This module implements a FastAPI-based microservice for inventory records
    stored in a DynamoDB table with a secondary index on inventory_id.

    Endpoints:
        GET /?inventory_id=N: List records of one inventory (secondary index)
        GET /{record_id}: Get a single record by ID
        GET /: List every record (full table scan)
        POST /: Normalize a JSON body and create a record with a new ID
        GET /healthz: Health check endpoint for orchestration systems

    Any other method answers 405, and any unexpected failure answers 500 with
    the error message. Every response carries a permissive CORS header.

    Attributes:
        app (FastAPI): The application built from environment settings
"""
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import crud, normalizer
from .config import Settings
from .database import create_table, get_settings, get_table

logger = logging.getLogger(__name__)

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

router = APIRouter()


def build_response(status_code: int, body: Any) -> JSONResponse:
    """
    Build the JSON response envelope shared by every endpoint.

    Args:
        status_code: HTTP status code
        body: JSON-serializable body

    Returns:
        JSONResponse with Content-Type application/json and the CORS header
    """
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=CORS_HEADERS)


def _find_by_inventory_id(table, settings: Settings, inventory_id: str) -> JSONResponse:
    items = crud.get_records_by_inventory_id(
        table, normalizer.sanitize_number(inventory_id), index_name=settings.index_name
    )
    return build_response(status.HTTP_200_OK, items)


@router.get("/healthz", response_model=dict)
def health():
    """
    Health check endpoint for the inventory service.

    Returns:
        dict: {"status": "healthy"} while the service is running.
    """
    return {"status": "healthy"}


@router.get("/")
def list_records(
    inventory_id: Optional[str] = None,
    table=Depends(get_table),
    settings: Settings = Depends(get_settings),
):
    """
    List records of one inventory, or every record when no inventory_id is given.

    Args:
        inventory_id: Optional inventory_id to look up through the secondary index
        table: DynamoDB table (injected)
        settings: Service settings (injected)

    Returns:
        List of record objects
    """
    if inventory_id:
        return _find_by_inventory_id(table, settings, inventory_id)
    return build_response(status.HTTP_200_OK, crud.get_all_records(table))


@router.get("/{record_id}")
def get_record(
    record_id: str,
    inventory_id: Optional[str] = None,
    table=Depends(get_table),
    settings: Settings = Depends(get_settings),
):
    """
    Get a single record by ID.

    An inventory_id query parameter takes precedence over the path ID.

    Returns:
        Record object, or 404 if the record does not exist
    """
    if inventory_id:
        return _find_by_inventory_id(table, settings, inventory_id)

    item = crud.get_record(table, record_id)
    if item is None:
        return build_response(status.HTTP_404_NOT_FOUND, {"message": "Item not found"})
    return build_response(status.HTTP_200_OK, item)


@router.post("/")
async def create_record(request: Request, table=Depends(get_table)):
    """
    Create a record from an arbitrary JSON body.

    The body is normalized and always gets a freshly generated ID.

    Returns:
        Created record object (201)
    """
    payload = await request.json()
    record = normalizer.build_record(payload, generate_id=True)
    item = await run_in_threadpool(crud.create_record, table, record)
    return build_response(status.HTTP_201_CREATED, item)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return build_response(exc.status_code, {"message": "Method not allowed"})
    return build_response(exc.status_code, {"message": exc.detail})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Error handling {request.method} {request.url.path}")
    # The raw message is returned to the caller on purpose
    return build_response(status.HTTP_500_INTERNAL_SERVER_ERROR, {"error": str(exc)})


def create_app(settings: Optional[Settings] = None, table=None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Service settings, read from the environment when omitted
        table: DynamoDB table to use, built from settings when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    application = FastAPI(title="historical-inventory-service")
    application.state.settings = settings
    application.state.table = table if table is not None else create_table(settings)

    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(Exception, unhandled_exception_handler)
    application.include_router(router)
    return application


app = create_app()
