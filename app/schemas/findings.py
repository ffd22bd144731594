"""Pydantic schemas for findings handed off by upstream analyzers."""

from typing import Literal

from pydantic import ConfigDict, Field

from app.schemas.alerts import CamelModel
from app.schemas.validation import ValidatorError

DataSection = Literal[
    "REQUEST_PATH",
    "REQUEST_QUERY",
    "REQUEST_HEADER",
    "REQUEST_BODY",
    "RESPONSE_HEADER",
    "RESPONSE_BODY",
]


class TraceHeader(CamelModel):
    """A single HTTP header captured in a trace."""

    name: str
    value: str = ""


class ApiTrace(CamelModel):
    """
    Observed request/response pair. Only host, path and request headers are read by the
    alerting core; any other captured fields are kept and copied into alert context.
    """

    model_config = ConfigDict(extra="allow")

    host: str = ""
    path: str = ""
    method: str | None = None
    request_headers: list[TraceHeader] = Field(default_factory=list)


class DataField(CamelModel):
    """A field of a trace carrying zero or more sensitive-data classifications."""

    data_section: DataSection
    data_path: str = Field(..., min_length=1)
    data_classes: list[str] = Field(default_factory=list)


class FindingBatch(CamelModel):
    """One ingestion pass worth of findings for a single endpoint."""

    api_endpoint_uuid: str = Field(..., min_length=1)
    trace: ApiTrace | None = None
    new_endpoint: bool = Field(
        default=False,
        description="Raise a NEW_ENDPOINT alert for this endpoint.",
    )
    new_endpoint_description: str | None = None
    data_fields: list[DataField] = Field(default_factory=list)
    spec_diffs: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Diff description -> pointer-path segments into the endpoint's OpenAPI spec.",
    )
    request_validation_errors: list[ValidatorError] = Field(
        default_factory=list,
        description="Request validator errors for the trace; each becomes a spec diff.",
    )
    response_validation_errors: list[ValidatorError] = Field(
        default_factory=list,
        description="Response validator errors for the trace; each becomes a spec diff.",
    )
    unsecured_descriptions: list[str] = Field(
        default_factory=list,
        description="Transport-security findings for this endpoint, tested against the trace.",
    )


class IngestResponse(CamelModel):
    """Alerts created by one ingestion pass."""

    accepted: int = Field(..., ge=0)
    ids: list[str] = Field(default_factory=list)
