"""Alert listing: typed filter spec -> SQLAlchemy statements, plus the read operations."""

from typing import TYPE_CHECKING

from sqlalchemy import Select, func, select
from sqlalchemy.orm import joinedload
from sqlalchemy.sql.elements import ColumnElement

from app.models import Alert, ApiEndpoint, OpenApiSpec
from app.schemas.alerts import GetAlertParams

if TYPE_CHECKING:
    from app.services.alert_repository import AlertRepository


def build_alert_filters(params: GetAlertParams) -> list[ColumnElement[bool]]:
    """Translate set filters into WHERE clauses. None and empty lists add no clause."""
    filters: list[ColumnElement[bool]] = []
    if params.api_endpoint_uuid:
        filters.append(Alert.api_endpoint_uuid == params.api_endpoint_uuid)
    if params.alert_types:
        filters.append(Alert.type.in_(params.alert_types))
    if params.risk_scores:
        filters.append(Alert.risk_score.in_(params.risk_scores))
    if params.hosts:
        filters.append(Alert.api_endpoint.has(ApiEndpoint.host.in_(params.hosts)))
    if params.status:
        filters.append(Alert.status.in_(params.status))
    return filters


def build_alert_order(params: GetAlertParams) -> list[ColumnElement]:
    """Risk score in the requested direction (DESC by default), then status and age, newest first."""
    risk = Alert.risk_score.asc() if params.order == "ASC" else Alert.risk_score.desc()
    return [risk, Alert.status.desc(), Alert.created_at.desc()]


def build_alert_query(
    params: GetAlertParams,
    max_limit: int | None = None,
) -> tuple[Select, Select]:
    """
    Return (page statement, count statement) for params.

    The page loads only the endpoint and spec columns used for list display; the raw spec
    text is never fetched.
    """
    filters = build_alert_filters(params)

    page_stmt = (
        select(Alert)
        .options(
            joinedload(Alert.api_endpoint).load_only(
                ApiEndpoint.uuid,
                ApiEndpoint.method,
                ApiEndpoint.path,
                ApiEndpoint.host,
                ApiEndpoint.openapi_spec_name,
            ),
            joinedload(Alert.api_endpoint)
            .joinedload(ApiEndpoint.openapi_spec)
            .load_only(OpenApiSpec.extension, OpenApiSpec.minimized_spec_context),
        )
        .where(*filters)
        .order_by(*build_alert_order(params))
    )
    if params.offset:
        page_stmt = page_stmt.offset(params.offset)
    limit = params.limit
    if limit and max_limit:
        limit = min(limit, max_limit)
    if limit:
        page_stmt = page_stmt.limit(limit)

    count_stmt = select(func.count()).select_from(Alert).where(*filters)
    return page_stmt, count_stmt


def get_alerts(
    repository: "AlertRepository",
    params: GetAlertParams,
    max_limit: int | None = None,
) -> tuple[list[Alert], int]:
    """Filtered, sorted page of alerts plus the total match count."""
    return repository.find_paged(params, max_limit=max_limit)


def get_alert(repository: "AlertRepository", alert_id: str) -> Alert | None:
    return repository.find_by_id(alert_id)


def get_top_alerts(repository: "AlertRepository", limit: int) -> list[Alert]:
    """Highest-risk OPEN alerts, newest first within a risk score."""
    alerts, _ = repository.find_paged(
        GetAlertParams(status=["OPEN"], order="DESC", limit=limit),
        max_limit=limit,
    )
    return alerts
