"""
Configuration management API routes.

Provides create, read, partial update and delete for saved request bundles.
"""

from fastapi import APIRouter, Depends

from ..dependencies import get_storage
from ..exceptions import ErrorResponse, ResourceNotFoundError
from ..schemas.configuration import (
    ConfigurationCreate,
    ConfigurationUpdate,
    ConfigurationResponse,
)
from ..services.storage import Storage


router = APIRouter(prefix="/api/configurations", tags=["configurations"])


@router.get("", response_model=list[ConfigurationResponse])
def list_configurations(storage: Storage = Depends(get_storage)):
    """
    List all configurations, most recently created first.
    """
    return storage.list_configurations()


@router.post("", response_model=ConfigurationResponse)
def create_configuration(
    config_data: ConfigurationCreate,
    storage: Storage = Depends(get_storage)
):
    """
    Create a new configuration.

    Args:
        config_data: Name, optional description and endpoints
        storage: Record store

    Returns:
        The created configuration with assigned ID and creation time
    """
    return storage.create_configuration(config_data)


@router.get(
    "/{config_id}",
    response_model=ConfigurationResponse,
    responses={404: {"model": ErrorResponse}}
)
def get_configuration(config_id: int, storage: Storage = Depends(get_storage)):
    config = storage.get_configuration(config_id)
    if config is None:
        raise ResourceNotFoundError("Configuration", config_id)
    return config


@router.put(
    "/{config_id}",
    response_model=ConfigurationResponse,
    responses={404: {"model": ErrorResponse}}
)
def update_configuration(
    config_id: int,
    config_data: ConfigurationUpdate,
    storage: Storage = Depends(get_storage)
):
    """
    Update an existing configuration.

    Only fields present in the body are changed; id and createdAt never change.

    Raises:
        ResourceNotFoundError: 404 if the configuration does not exist
    """
    config = storage.update_configuration(config_id, config_data)
    if config is None:
        raise ResourceNotFoundError("Configuration", config_id)
    return config


@router.delete("/{config_id}", responses={404: {"model": ErrorResponse}})
def delete_configuration(config_id: int, storage: Storage = Depends(get_storage)):
    """
    Delete a configuration.

    Raises:
        ResourceNotFoundError: 404 if the configuration does not exist
    """
    if not storage.delete_configuration(config_id):
        raise ResourceNotFoundError("Configuration", config_id)
    return {"success": True}
