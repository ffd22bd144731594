"""Core app configuration, error taxonomy and database wiring."""

from app.core.config import get_settings, settings
from app.core.errors import (
    AlertConflictError,
    AlertInternalError,
    AlertNotFoundError,
    AlertServiceError,
    EndpointNotFoundError,
)

__all__ = [
    "AlertConflictError",
    "AlertInternalError",
    "AlertNotFoundError",
    "AlertServiceError",
    "EndpointNotFoundError",
    "get_settings",
    "settings",
]
