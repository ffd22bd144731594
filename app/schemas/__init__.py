"""Pydantic request/response schemas."""

from app.schemas.alerts import (
    AlertDraft,
    AlertListResponse,
    AlertResponse,
    AlertStatus,
    AlertType,
    GetAlertParams,
    UpdateAlertRequest,
    UpdateAlertType,
)
from app.schemas.findings import (
    ApiTrace,
    DataField,
    DataSection,
    FindingBatch,
    IngestResponse,
    TraceHeader,
)
from app.schemas.health import HealthResponse
from app.schemas.validation import ValidatorError

__all__ = [
    "AlertDraft",
    "AlertListResponse",
    "AlertResponse",
    "AlertStatus",
    "AlertType",
    "ApiTrace",
    "DataField",
    "DataSection",
    "FindingBatch",
    "GetAlertParams",
    "HealthResponse",
    "IngestResponse",
    "TraceHeader",
    "UpdateAlertRequest",
    "UpdateAlertType",
    "ValidatorError",
]
