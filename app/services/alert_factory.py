"""Alert construction: turn upstream findings into deduplicated alert drafts.

Every builder returns immutable AlertDraft values and never writes alerts itself; the caller
persists them (see alert_ingest). Drafts appended earlier in a call are dedup candidates for
later findings in the same call, so findings are processed strictly in input order.

Batch builders (data fields, spec diffs, transport security) are best-effort: any failure
is logged and the call yields an empty list instead of aborting the ingestion pass.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import BaseModel

from app.schemas.alerts import AlertDraft
from app.schemas.findings import ApiTrace, DataField
from app.services.dedup import is_suppressed
from app.services.risk_score import risk_score_for
from app.services.spec_locator import DEFAULT_CONTEXT_RADIUS, SpecLocator

if TYPE_CHECKING:
    from app.models import OpenApiSpec
    from app.services.alert_repository import AlertRepository

logger = logging.getLogger(__name__)

BASIC_AUTH_DESCRIPTION = "Basic Authentication detected in Authorization header."

DATA_SECTION_TO_LABEL: dict[str, str] = {
    "REQUEST_PATH": "Request Path Parameters",
    "REQUEST_QUERY": "Request Query Parameters",
    "REQUEST_HEADER": "Request Headers",
    "REQUEST_BODY": "Request Body",
    "RESPONSE_HEADER": "Response Headers",
    "RESPONSE_BODY": "Response Body",
}


class EndpointLike(Protocol):
    """Anything with an endpoint uuid and path: usually the ORM ApiEndpoint."""

    uuid: str
    path: str


def get_path_tokens(path: str | None) -> list[str]:
    """Split an endpoint path into non-empty segments; "/" is its own single token."""
    if not path:
        return []
    if path == "/":
        return ["/"]
    return [token for token in path.split("/") if token]


def default_description(alert_type: str, endpoint_path: str = "") -> str:
    if alert_type == "NEW_ENDPOINT":
        return f"A new endpoint has been detected: {endpoint_path}."
    if alert_type == "OPEN_API_SPEC_DIFF":
        return "A OpenAPI Spec diff has been detected."
    if alert_type == "PII_DATA_DETECTED":
        return "PII Data has been detected."
    return "A new alert."


def _trace_payload(trace: ApiTrace | Mapping[str, Any] | None) -> dict[str, Any] | None:
    """JSON-safe copy of a trace for storing in alert context."""
    if trace is None:
        return None
    if isinstance(trace, BaseModel):
        return trace.model_dump(mode="json", by_alias=True)
    return dict(trace)


def build_alert_draft(
    alert_type: str,
    api_endpoint_uuid: str,
    description: str,
    context: Mapping[str, Any] | None = None,
) -> AlertDraft:
    """Finished draft with the risk score for its type."""
    return AlertDraft(
        type=alert_type,
        risk_score=risk_score_for(alert_type),
        api_endpoint_uuid=api_endpoint_uuid,
        description=description,
        context=dict(context or {}),
    )


def _append_unless_duplicate(
    repository: "AlertRepository",
    alerts: list[AlertDraft],
    alert_type: str,
    api_endpoint_uuid: str,
    description: str,
    context: Mapping[str, Any] | None,
) -> bool:
    """Append a new draft unless suppressed by dedup; True if appended."""
    if is_suppressed(repository, alerts, api_endpoint_uuid, alert_type, description):
        return False
    alerts.append(build_alert_draft(alert_type, api_endpoint_uuid, description, context))
    return True


def create_alert(
    repository: "AlertRepository",
    alert_type: str,
    api_endpoint: EndpointLike,
    description: str | None = None,
    context: Mapping[str, Any] | None = None,
    no_duplicate: bool = False,
) -> AlertDraft | None:
    """
    Single draft of alert_type for api_endpoint, with a type-specific default description.

    With no_duplicate, returns None when an unresolved alert with the same key is stored.
    """
    alert_description = description or default_description(alert_type, api_endpoint.path)
    if no_duplicate and is_suppressed(
        repository, None, api_endpoint.uuid, alert_type, alert_description
    ):
        return None
    return build_alert_draft(alert_type, api_endpoint.uuid, alert_description, context)


def create_new_endpoint_alert(
    repository: "AlertRepository",
    api_endpoint: EndpointLike,
    description: str | None = None,
    trace: ApiTrace | None = None,
) -> AlertDraft | None:
    context = {"trace": _trace_payload(trace)} if trace is not None else None
    return create_alert(
        repository,
        "NEW_ENDPOINT",
        api_endpoint,
        description=description,
        context=context,
        no_duplicate=True,
    )


def _has_basic_auth_header(trace: ApiTrace | None) -> bool:
    if trace is None:
        return False
    for header in trace.request_headers:
        if header.name.lower() == "authorization" and "basic " in header.value.lower():
            return True
    return False


def create_basic_auth_alerts(
    repository: "AlertRepository",
    api_endpoint_uuid: str,
    trace: ApiTrace | None,
    existing: Sequence[AlertDraft] | None = None,
) -> list[AlertDraft]:
    """
    Scan the trace's request headers for Basic credentials in Authorization.

    At most one BASIC_AUTHENTICATION_DETECTED draft is added per call, however many headers
    match. Returns existing drafts followed by the new one, if any.
    """
    alerts = list(existing or [])
    if _has_basic_auth_header(trace):
        _append_unless_duplicate(
            repository,
            alerts,
            "BASIC_AUTHENTICATION_DETECTED",
            api_endpoint_uuid,
            BASIC_AUTH_DESCRIPTION,
            {"trace": _trace_payload(trace)},
        )
    return alerts


def _path_parameter_candidate(
    data_field: DataField,
    data_class: str,
    api_endpoint_path: str,
    trace_payload: dict[str, Any] | None,
) -> tuple[str, str, dict[str, Any]]:
    """PATH_SENSITIVE_DATA description citing the 1-based token position when the field is found."""
    description = f"Path Parameters contain sensitive data of type {data_class}."
    context: dict[str, Any] = {"trace": trace_payload}
    for i, token in enumerate(get_path_tokens(api_endpoint_path)):
        if token == f"{{{data_field.data_path}}}":
            context["pathTokenIdx"] = i
            description = (
                f"Path Parameter at position {i + 1} contains sensitive data of type {data_class}."
            )
    return "PATH_SENSITIVE_DATA", description, context


def _data_class_candidates(
    data_field: DataField,
    data_class: str,
    api_endpoint_path: str,
    trace_payload: dict[str, Any] | None,
) -> list[tuple[str, str, dict[str, Any]]]:
    """(type, description, context) candidates for one classification of one field."""
    label = DATA_SECTION_TO_LABEL.get(data_field.data_section, data_field.data_section)
    candidates = [
        (
            "PII_DATA_DETECTED",
            f"Sensitive data of type {data_class} has been detected in field "
            f"'{data_field.data_path}' of {label}.",
            {"trace": trace_payload},
        )
    ]
    if data_field.data_section == "REQUEST_QUERY":
        candidates.append(
            (
                "QUERY_SENSITIVE_DATA",
                f"Query Parameter '{data_field.data_path}' contains sensitive data of type "
                f"{data_class}.",
                {"trace": trace_payload},
            )
        )
    if data_field.data_section == "REQUEST_PATH":
        candidates.append(
            _path_parameter_candidate(data_field, data_class, api_endpoint_path, trace_payload)
        )
    return candidates


def create_data_field_alerts(
    repository: "AlertRepository",
    data_fields: Sequence[DataField] | None,
    api_endpoint_uuid: str,
    api_endpoint_path: str,
    trace: ApiTrace | None = None,
    existing: Sequence[AlertDraft] | None = None,
) -> list[AlertDraft]:
    """
    Sensitive-data drafts for every classified field, plus Basic auth detection for fields
    in the request headers. Returns existing drafts followed by the new ones.
    """
    try:
        if not data_fields:
            return []
        alerts = list(existing or [])
        trace_payload = _trace_payload(trace)
        for data_field in data_fields:
            if data_field.data_section == "REQUEST_HEADER":
                alerts = create_basic_auth_alerts(repository, api_endpoint_uuid, trace, alerts)
            for data_class in data_field.data_classes:
                for alert_type, description, context in _data_class_candidates(
                    data_field, data_class, api_endpoint_path, trace_payload
                ):
                    _append_unless_duplicate(
                        repository, alerts, alert_type, api_endpoint_uuid, description, context
                    )
        return alerts
    except Exception as e:
        logger.exception("Error creating sensitive data alerts: %s", e)
        return []


def create_spec_diff_alerts(
    repository: "AlertRepository",
    alert_items: Mapping[str, Sequence[str]] | None,
    api_endpoint_uuid: str,
    trace: ApiTrace | None,
    openapi_spec: "OpenApiSpec",
    radius: int = DEFAULT_CONTEXT_RADIUS,
) -> list[AlertDraft]:
    """
    One OPEN_API_SPEC_DIFF draft per diff description, keyed by its pointer-path.

    Each new draft's pointer is located in the spec so the UI can show the offending lines;
    newly computed locations are written to the spec's cache immediately.
    """
    try:
        if not alert_items:
            return []
        locator = SpecLocator(openapi_spec, repository, radius=radius)
        trace_payload = _trace_payload(trace)
        alerts: list[AlertDraft] = []
        for description, pointer in alert_items.items():
            if is_suppressed(
                repository, alerts, api_endpoint_uuid, "OPEN_API_SPEC_DIFF", description
            ):
                continue
            path_pointer = [str(segment) for segment in pointer]
            locator.locate(path_pointer)
            alerts.append(
                build_alert_draft(
                    "OPEN_API_SPEC_DIFF",
                    api_endpoint_uuid,
                    description,
                    {"pathPointer": path_pointer, "trace": trace_payload},
                )
            )
        return alerts
    except Exception as e:
        logger.exception("Error creating spec diff alerts: %s", e)
        return []


def create_missing_hsts_alerts(
    repository: "AlertRepository",
    alert_props: Sequence[tuple[EndpointLike, ApiTrace, str]] | None,
) -> list[AlertDraft]:
    """One UNSECURED_ENDPOINT_DETECTED draft per (endpoint, tested trace, description)."""
    try:
        if not alert_props:
            return []
        alerts: list[AlertDraft] = []
        for endpoint, trace, description in alert_props:
            _append_unless_duplicate(
                repository,
                alerts,
                "UNSECURED_ENDPOINT_DETECTED",
                endpoint.uuid,
                description,
                {
                    "tested_against": f"{trace.host}/{trace.path}",
                    "trace": _trace_payload(trace),
                },
            )
        return alerts
    except Exception as e:
        logger.exception("Error creating unsecured endpoint alerts: %s", e)
        return []
