"""Ingestion hand-off: run every finding kind of one batch through the factory and persist."""

import logging
from typing import TYPE_CHECKING

from app.core.errors import EndpointNotFoundError
from app.models import Alert
from app.schemas.alerts import AlertDraft
from app.schemas.findings import FindingBatch
from app.services.alert_factory import (
    create_data_field_alerts,
    create_missing_hsts_alerts,
    create_new_endpoint_alert,
    create_spec_diff_alerts,
)
from app.services.spec_locator import DEFAULT_CONTEXT_RADIUS
from app.services.validation_messages import spec_diffs_from_validation

if TYPE_CHECKING:
    from app.services.alert_repository import AlertRepository

logger = logging.getLogger(__name__)


def build_batch_drafts(
    repository: "AlertRepository",
    batch: FindingBatch,
    radius: int = DEFAULT_CONTEXT_RADIUS,
) -> list[AlertDraft]:
    """All drafts for one batch, in order: new endpoint, data fields, spec diffs, transport."""
    endpoint = repository.find_endpoint(batch.api_endpoint_uuid)
    if endpoint is None:
        raise EndpointNotFoundError(f"API endpoint {batch.api_endpoint_uuid} not found.")

    drafts: list[AlertDraft] = []
    if batch.new_endpoint:
        draft = create_new_endpoint_alert(
            repository, endpoint, batch.new_endpoint_description, batch.trace
        )
        if draft is not None:
            drafts.append(draft)

    drafts.extend(
        create_data_field_alerts(
            repository, batch.data_fields, endpoint.uuid, endpoint.path, batch.trace
        )
    )

    spec_diffs = dict(batch.spec_diffs)
    validation_diffs = spec_diffs_from_validation(
        batch.request_validation_errors,
        batch.response_validation_errors,
        ["paths", endpoint.path, endpoint.method.lower()],
    )
    for message, pointer in validation_diffs.items():
        spec_diffs.setdefault(message, pointer)

    if spec_diffs:
        if endpoint.openapi_spec is None:
            logger.warning(
                "Ignoring %s spec diffs for endpoint %s: no OpenAPI spec attached",
                len(spec_diffs),
                endpoint.uuid,
            )
        else:
            drafts.extend(
                create_spec_diff_alerts(
                    repository,
                    spec_diffs,
                    endpoint.uuid,
                    batch.trace,
                    endpoint.openapi_spec,
                    radius=radius,
                )
            )

    if batch.unsecured_descriptions and batch.trace is not None:
        drafts.extend(
            create_missing_hsts_alerts(
                repository,
                [(endpoint, batch.trace, d) for d in batch.unsecured_descriptions],
            )
        )
    return drafts


def ingest_findings(
    repository: "AlertRepository",
    batch: FindingBatch,
    radius: int = DEFAULT_CONTEXT_RADIUS,
) -> list[Alert]:
    """Build drafts for batch and persist them. Caller commits."""
    drafts = build_batch_drafts(repository, batch, radius=radius)
    saved = repository.save_drafts(drafts)
    logger.info(
        "Findings ingested",
        extra={
            "api_endpoint_uuid": batch.api_endpoint_uuid,
            "drafts": len(drafts),
            "alerts_created": len(saved),
        },
    )
    return saved
