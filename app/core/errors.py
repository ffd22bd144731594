"""Error taxonomy for the alerting core.

Conflict and internal errors propagate to the caller of a lifecycle command; the route
layer maps them to HTTP status codes. Batch construction never raises these past the
factory (it degrades to an empty result instead).
"""


class AlertServiceError(Exception):
    """Base error for alert operations; carries a user-facing message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AlertConflictError(AlertServiceError):
    """Requested status transition is not valid from the alert's current status."""


class AlertNotFoundError(AlertServiceError):
    """No alert exists with the requested id."""


class AlertInternalError(AlertServiceError):
    """Programming defect: unknown update command or unmapped alert type."""


class EndpointNotFoundError(AlertServiceError):
    """Findings reference an API endpoint that is not stored."""
