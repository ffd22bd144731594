"""Shared route dependencies and service-error to HTTP translation."""

from typing import Annotated, NoReturn

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import (
    AlertConflictError,
    AlertInternalError,
    AlertNotFoundError,
    AlertServiceError,
    EndpointNotFoundError,
)
from app.services.alert_repository import AlertRepository


def get_alert_repository(
    db: Annotated[Session, Depends(get_db)],
) -> AlertRepository:
    """Dependency: repository bound to the request's session."""
    return AlertRepository(db)


def raise_http_error(e: AlertServiceError) -> NoReturn:
    """Re-raise a service error as the matching HTTPException."""
    if isinstance(e, AlertConflictError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    if isinstance(e, (AlertNotFoundError, EndpointNotFoundError)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    if isinstance(e, AlertInternalError):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message
        ) from e
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
