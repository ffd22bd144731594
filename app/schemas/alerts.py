"""Pydantic schemas for alerts: draft values, list/detail responses, and lifecycle commands."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

AlertType = Literal[
    "NEW_ENDPOINT",
    "OPEN_API_SPEC_DIFF",
    "PII_DATA_DETECTED",
    "QUERY_SENSITIVE_DATA",
    "PATH_SENSITIVE_DATA",
    "BASIC_AUTHENTICATION_DETECTED",
    "UNSECURED_ENDPOINT_DETECTED",
]

AlertStatus = Literal["OPEN", "IGNORED", "RESOLVED"]

UpdateAlertType = Literal["IGNORE", "UNIGNORE", "RESOLVE", "UNRESOLVE"]

SortOrder = Literal["ASC", "DESC"]

SpecExtension = Literal["JSON", "YAML"]


class CamelModel(BaseModel):
    """Base for API-facing models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AlertDraft(CamelModel):
    """A fully built alert that has not been persisted yet. Immutable once constructed."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    type: AlertType
    risk_score: int = Field(..., ge=0)
    api_endpoint_uuid: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    context: dict[str, Any] = Field(default_factory=dict)


class SpecContextSummary(CamelModel):
    """The slice of an OpenAPI spec needed to render alert locations in a list."""

    extension: SpecExtension
    minimized_spec_context: dict[str, Any] = Field(default_factory=dict)


class AlertEndpointSummary(CamelModel):
    """Endpoint fields shown next to each alert."""

    uuid: str
    method: str
    path: str
    host: str
    openapi_spec_name: str | None = None
    openapi_spec: SpecContextSummary | None = None


class AlertResponse(CamelModel):
    """One alert as returned by the list and detail endpoints."""

    uuid: str
    type: AlertType
    risk_score: int
    status: AlertStatus
    description: str
    context: dict[str, Any] = Field(default_factory=dict)
    resolution_message: str | None = None
    api_endpoint_uuid: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    api_endpoint: AlertEndpointSummary | None = None


class AlertListResponse(CamelModel):
    """A page of alerts plus the unpaginated match count."""

    alerts: list[AlertResponse] = Field(default_factory=list)
    total: int = Field(..., ge=0)


class UpdateAlertRequest(CamelModel):
    """User command applied to a single alert."""

    update_type: UpdateAlertType
    resolution_message: str | None = Field(
        default=None,
        max_length=4096,
        description="Only used by RESOLVE; trimmed, and stored as null when blank.",
    )


class GetAlertParams(CamelModel):
    """Filter, sort and pagination request for listing alerts. Empty lists mean no filter."""

    api_endpoint_uuid: str | None = None
    alert_types: list[AlertType] | None = None
    risk_scores: list[int] | None = None
    hosts: list[str] | None = None
    status: list[AlertStatus] | None = None
    offset: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=1)
    order: SortOrder | None = Field(
        default=None,
        description="Risk score direction; DESC when unspecified.",
    )
