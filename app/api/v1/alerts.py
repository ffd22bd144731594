"""Alerts endpoints: filtered listing, top alerts, detail, and lifecycle commands."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.deps import get_alert_repository, raise_http_error
from app.core.config import get_settings
from app.core.errors import AlertNotFoundError, AlertServiceError
from app.schemas.alerts import (
    AlertListResponse,
    AlertResponse,
    AlertStatus,
    AlertType,
    GetAlertParams,
    SortOrder,
    UpdateAlertRequest,
)
from app.services.alert_lifecycle import update_alert
from app.services.alert_query import get_alert, get_alerts, get_top_alerts
from app.services.alert_repository import AlertRepository

router = APIRouter()


@router.get("", response_model=AlertListResponse)
def list_alerts(
    repository: Annotated[AlertRepository, Depends(get_alert_repository)],
    api_endpoint_uuid: Annotated[str | None, Query(alias="apiEndpointUuid")] = None,
    alert_types: Annotated[list[AlertType] | None, Query(alias="alertTypes")] = None,
    risk_scores: Annotated[list[int] | None, Query(alias="riskScores")] = None,
    hosts: Annotated[list[str] | None, Query()] = None,
    status: Annotated[list[AlertStatus] | None, Query()] = None,
    offset: Annotated[int | None, Query(ge=0)] = None,
    limit: Annotated[int | None, Query(ge=1)] = None,
    order: Annotated[SortOrder | None, Query()] = None,
) -> AlertListResponse:
    """
    Return one page of alerts plus the total number of matches.

    Filters combine with AND; list filters match any of their values. Sorted by risk
    score (order, DESC by default), then status descending, then newest first.
    """
    settings = get_settings()
    params = GetAlertParams(
        api_endpoint_uuid=api_endpoint_uuid,
        alert_types=alert_types,
        risk_scores=risk_scores,
        hosts=hosts,
        status=status,
        offset=offset,
        limit=limit or settings.ALERTS_DEFAULT_LIMIT,
        order=order,
    )
    alerts, total = get_alerts(repository, params, max_limit=settings.ALERTS_MAX_LIMIT)
    return AlertListResponse(
        alerts=[AlertResponse.model_validate(a) for a in alerts],
        total=total,
    )


@router.get("/top", response_model=list[AlertResponse])
def list_top_alerts(
    repository: Annotated[AlertRepository, Depends(get_alert_repository)],
) -> list[AlertResponse]:
    """Highest-risk open alerts for the dashboard."""
    alerts = get_top_alerts(repository, get_settings().TOP_ALERTS_LIMIT)
    return [AlertResponse.model_validate(a) for a in alerts]


@router.get("/{alert_id}", response_model=AlertResponse)
def read_alert(
    alert_id: str,
    repository: Annotated[AlertRepository, Depends(get_alert_repository)],
) -> AlertResponse:
    alert = get_alert(repository, alert_id)
    if alert is None:
        raise_http_error(AlertNotFoundError(f"Alert {alert_id} not found."))
    return AlertResponse.model_validate(alert)


@router.put("/{alert_id}", response_model=AlertResponse)
def put_alert(
    alert_id: str,
    body: UpdateAlertRequest,
    repository: Annotated[AlertRepository, Depends(get_alert_repository)],
) -> AlertResponse:
    """
    Apply a lifecycle command: IGNORE, UNIGNORE, RESOLVE (with optional resolutionMessage)
    or UNRESOLVE. Returns 409 when the command is not valid from the alert's status.
    """
    try:
        alert = update_alert(
            repository, alert_id, body.update_type, body.resolution_message
        )
    except AlertServiceError as e:
        repository.session.rollback()
        raise_http_error(e)
    repository.session.commit()
    return AlertResponse.model_validate(alert)
