"""Alert status transitions driven by user commands.

    command    valid from   result
    IGNORE     OPEN         IGNORED
    UNIGNORE   IGNORED      OPEN
    RESOLVE    OPEN         RESOLVED (resolution message: trimmed input, or None when blank)
    UNRESOLVE  RESOLVED     OPEN

Any other (status, command) pair raises AlertConflictError with a message specific to the
pair; an unknown command raises AlertInternalError.
"""

import logging
from typing import TYPE_CHECKING

from app.core.errors import AlertConflictError, AlertInternalError, AlertNotFoundError
from app.models import Alert

if TYPE_CHECKING:
    from app.services.alert_repository import AlertRepository

logger = logging.getLogger(__name__)


def _clean_resolution_message(message: str | None) -> str | None:
    if message is None:
        return None
    return message.strip() or None


def apply_transition(
    status: str,
    update_type: str,
    resolution_message: str | None = None,
) -> tuple[str, str | None]:
    """Return (new status, new resolution message) or raise for an invalid transition."""
    if update_type == "IGNORE":
        if status == "IGNORED":
            raise AlertConflictError("Alert is already being ignored.")
        if status == "RESOLVED":
            raise AlertConflictError("Alert is resolved and cannot be ignored.")
        return "IGNORED", None
    if update_type == "UNIGNORE":
        if status != "IGNORED":
            raise AlertConflictError("Alert is currently not ignored.")
        return "OPEN", None
    if update_type == "RESOLVE":
        if status == "RESOLVED":
            raise AlertConflictError("Alert is already resolved.")
        if status == "IGNORED":
            raise AlertConflictError("Alert is ignored and cannot be resolved.")
        return "RESOLVED", _clean_resolution_message(resolution_message)
    if update_type == "UNRESOLVE":
        if status != "RESOLVED":
            raise AlertConflictError("Alert is currently not resolved.")
        return "OPEN", None
    raise AlertInternalError("Unknown update type.")


def update_alert(
    repository: "AlertRepository",
    alert_id: str,
    update_type: str,
    resolution_message: str | None = None,
) -> Alert:
    """Load the alert, apply the command, and save the whole row. Caller commits."""
    alert = repository.find_by_id(alert_id)
    if alert is None:
        raise AlertNotFoundError(f"Alert {alert_id} not found.")

    previous = alert.status
    alert.status, alert.resolution_message = apply_transition(
        alert.status, update_type, resolution_message
    )
    repository.save(alert)
    logger.info(
        "Alert status updated",
        extra={
            "alert_id": alert_id,
            "update_type": update_type,
            "from_status": previous,
            "to_status": alert.status,
        },
    )
    return alert
