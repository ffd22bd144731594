"""ORM model for alerts raised against API endpoints."""

import uuid

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import relationship

from app.models.base import Base, JSONType

# At most one unresolved alert per (endpoint, type, description).
UNRESOLVED_ALERT_INDEX = "uq_alerts_unresolved_endpoint_type_description"
_UNRESOLVED_PREDICATE = text("status != 'RESOLVED'")


class Alert(Base):
    """
    Persisted alert. status is OPEN, IGNORED or RESOLVED; resolution_message is only
    set while RESOLVED. Rows are never deleted by the alerting core.
    """

    __tablename__ = "alerts"
    __table_args__ = (
        Index(
            UNRESOLVED_ALERT_INDEX,
            "api_endpoint_uuid",
            "type",
            "description",
            unique=True,
            postgresql_where=_UNRESOLVED_PREDICATE,
            sqlite_where=_UNRESOLVED_PREDICATE,
        ),
    )

    uuid = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type = Column(String(64), nullable=False, index=True)
    risk_score = Column(Integer, nullable=False, index=True)
    status = Column(String(16), nullable=False, default="OPEN", index=True)
    description = Column(Text, nullable=False)
    context = Column(JSONType, nullable=False, default=dict)
    resolution_message = Column(Text, nullable=True)
    api_endpoint_uuid = Column(
        String(36),
        ForeignKey("api_endpoints.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
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

    api_endpoint = relationship("ApiEndpoint", back_populates="alerts")
