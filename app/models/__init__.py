"""SQLAlchemy ORM models."""

from app.models.alert import Alert
from app.models.api_endpoint import ApiEndpoint, OpenApiSpec
from app.models.base import Base

__all__ = ["Alert", "ApiEndpoint", "Base", "OpenApiSpec"]
