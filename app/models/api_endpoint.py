"""ORM models for observed API endpoints and their OpenAPI specs."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import relationship, validates

from app.models.base import Base, JSONType


class OpenApiSpec(Base):
    """
    Uploaded OpenAPI document.

    minimized_spec_context caches source locations per pointer-path key
    ("paths./users.get"): {"lineNumber": int, "minimizedSpec": str}.
    """

    __tablename__ = "open_api_specs"
    __table_args__ = (
        CheckConstraint("extension IN ('JSON', 'YAML')", name="ck_open_api_specs_extension"),
    )

    name = Column(String(255), primary_key=True)
    spec = Column(Text, nullable=False)
    extension = Column(String(16), nullable=False, default="JSON")
    minimized_spec_context = Column(JSONType, nullable=False, default=dict)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    endpoints = relationship("ApiEndpoint", back_populates="openapi_spec")

    @validates("extension")
    def _normalize_extension(self, key, value):
        return value.upper() if value else value


class ApiEndpoint(Base):
    """An endpoint discovered from traffic. Read-only for the alerting core."""

    __tablename__ = "api_endpoints"

    uuid = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    path = Column(String(2048), nullable=False)
    host = Column(String(1024), nullable=False, index=True)
    method = Column(String(16), nullable=False)
    openapi_spec_name = Column(
        String(255),
        ForeignKey("open_api_specs.name", ondelete="SET NULL"),
        nullable=True,
    )

    openapi_spec = relationship("OpenApiSpec", back_populates="endpoints")
    alerts = relationship("Alert", back_populates="api_endpoint")
