"""
Request history API routes.

History records are created by the relay for every attempt; they can
also be inserted directly. Records are never updated.
"""

from fastapi import APIRouter, Depends

from ..dependencies import get_storage
from ..exceptions import ErrorResponse, ResourceNotFoundError
from ..schemas.api_request import ApiRequestCreate, ApiRequestResponse
from ..services.storage import Storage


router = APIRouter(prefix="/api/requests", tags=["requests"])


@router.get("", response_model=list[ApiRequestResponse])
def list_requests(storage: Storage = Depends(get_storage)):
    """
    List all history records, most recent first.
    """
    return storage.list_api_requests()


@router.post("", response_model=ApiRequestResponse)
def create_request(request_data: ApiRequestCreate, storage: Storage = Depends(get_storage)):
    """
    Insert a history record.

    Args:
        request_data: Request details and optional outcome
        storage: Record store

    Returns:
        The created record with assigned ID and timestamp
    """
    return storage.create_api_request(request_data)


@router.get(
    "/{request_id}",
    response_model=ApiRequestResponse,
    responses={404: {"model": ErrorResponse}}
)
def get_request(request_id: int, storage: Storage = Depends(get_storage)):
    """
    Get a single history record by ID.

    Raises:
        ResourceNotFoundError: 404 if the record does not exist
    """
    record = storage.get_api_request(request_id)
    if record is None:
        raise ResourceNotFoundError("Request", request_id)
    return record
