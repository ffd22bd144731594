"""Persistence for alerts and OpenAPI spec location caches, over an explicit Session."""

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.models import Alert, ApiEndpoint, OpenApiSpec
from app.schemas.alerts import AlertDraft, GetAlertParams
from app.services.alert_query import build_alert_query

logger = logging.getLogger(__name__)


class AlertRepository:
    """
    Alert storage bound to one request-scoped Session.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_id(self, alert_id: str) -> Alert | None:
        """Load one alert with its endpoint (and the endpoint's spec) eagerly."""
        stmt = (
            select(Alert)
            .options(joinedload(Alert.api_endpoint).joinedload(ApiEndpoint.openapi_spec))
            .where(Alert.uuid == alert_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_where(self, **conditions: Any) -> Alert | None:
        """Return the first alert whose columns equal the given values, or None."""
        stmt = select(Alert).filter_by(**conditions).limit(1)
        return self.session.execute(stmt).scalars().first()

    def find_unresolved(
        self,
        api_endpoint_uuid: str,
        alert_type: str,
        description: str,
    ) -> Alert | None:
        """Return an OPEN or IGNORED alert with the same endpoint, type and description."""
        stmt = (
            select(Alert)
            .where(
                Alert.api_endpoint_uuid == api_endpoint_uuid,
                Alert.type == alert_type,
                Alert.description == description,
                Alert.status != "RESOLVED",
            )
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def find_paged(
        self,
        params: GetAlertParams,
        max_limit: int | None = None,
    ) -> tuple[list[Alert], int]:
        """Return (page of alerts, total matching count ignoring pagination)."""
        page_stmt, count_stmt = build_alert_query(params, max_limit=max_limit)
        total = self.session.execute(count_stmt).scalar_one()
        alerts = list(self.session.execute(page_stmt).scalars().all())
        return alerts, total

    def find_endpoint(self, api_endpoint_uuid: str) -> ApiEndpoint | None:
        stmt = (
            select(ApiEndpoint)
            .options(joinedload(ApiEndpoint.openapi_spec))
            .where(ApiEndpoint.uuid == api_endpoint_uuid)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def count_alerts(self) -> int:
        return self.session.execute(select(func.count()).select_from(Alert)).scalar_one()

    def save(self, alert: Alert) -> Alert:
        """Add or update a whole alert row and flush it."""
        self.session.add(alert)
        self.session.flush()
        return alert

    def save_drafts(self, drafts: Iterable[AlertDraft]) -> list[Alert]:
        """
        Persist drafts as OPEN alerts, each inside its own SAVEPOINT.

        A draft that collides with the unresolved-alert unique index (a concurrent ingestion
        raised it first) is skipped; the others are still saved.
        """
        saved: list[Alert] = []
        for draft in drafts:
            row = Alert(
                type=draft.type,
                risk_score=draft.risk_score,
                status="OPEN",
                api_endpoint_uuid=draft.api_endpoint_uuid,
                description=draft.description,
                context=dict(draft.context),
            )
            try:
                with self.session.begin_nested():
                    self.session.add(row)
                    self.session.flush()
            except IntegrityError:
                logger.info(
                    "Skipped %s alert for endpoint %s: unresolved duplicate already stored",
                    draft.type,
                    draft.api_endpoint_uuid,
                )
                continue
            saved.append(row)
        return saved

    def update_spec_context(self, spec_name: str, entries: dict[str, Any]) -> dict[str, Any]:
        """
        Merge entries into the stored minimized_spec_context of spec_name and return the result.

        The row is re-read under SELECT ... FOR UPDATE so concurrent writers for different
        pointer keys on the same spec do not overwrite each other.
        """
        stmt = (
            select(OpenApiSpec)
            .where(OpenApiSpec.name == spec_name)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        spec = self.session.execute(stmt).scalar_one_or_none()
        if spec is None:
            logger.warning("Cannot cache spec locations: spec %r not found", spec_name)
            return dict(entries)
        merged = {**(spec.minimized_spec_context or {}), **entries}
        spec.minimized_spec_context = merged
        self.session.flush()
        return merged
