"""Duplicate suppression for candidate alerts.

A candidate is suppressed when an alert with the same endpoint and description was already
built earlier in the current batch, or when an unresolved (OPEN or IGNORED) alert with the
same endpoint, type and description is persisted. Resolved alerts never suppress.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from app.schemas.alerts import AlertDraft

if TYPE_CHECKING:
    from app.models import Alert
    from app.services.alert_repository import AlertRepository

logger = logging.getLogger(__name__)


def is_duplicate_in_batch(
    batch: Iterable[AlertDraft] | None,
    api_endpoint_uuid: str,
    description: str,
) -> bool:
    """True if a draft in batch already targets this endpoint with this description."""
    if not batch:
        return False
    for draft in batch:
        if draft.api_endpoint_uuid == api_endpoint_uuid and draft.description == description:
            return True
    return False


def existing_unresolved_alert(
    repository: "AlertRepository",
    api_endpoint_uuid: str,
    alert_type: str,
    description: str,
) -> "Alert | None":
    """Return a persisted, not-yet-resolved alert with the same key, or None."""
    return repository.find_unresolved(api_endpoint_uuid, alert_type, description)


def is_suppressed(
    repository: "AlertRepository",
    batch: Iterable[AlertDraft] | None,
    api_endpoint_uuid: str,
    alert_type: str,
    description: str,
) -> bool:
    """In-batch check first; the store is only queried when the batch has no match."""
    if is_duplicate_in_batch(batch, api_endpoint_uuid, description):
        logger.debug(
            "Suppressed %s alert (duplicate in batch) for endpoint %s",
            alert_type,
            api_endpoint_uuid,
        )
        return True
    if existing_unresolved_alert(repository, api_endpoint_uuid, alert_type, description) is not None:
        logger.debug(
            "Suppressed %s alert (unresolved alert exists) for endpoint %s",
            alert_type,
            api_endpoint_uuid,
        )
        return True
    return False
