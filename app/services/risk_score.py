"""Risk scoring: fixed mapping from alert type to an integer severity (higher is worse)."""

from app.core.errors import AlertInternalError

RISK_SCORE_NONE = 0
RISK_SCORE_LOW = 1
RISK_SCORE_MEDIUM = 2
RISK_SCORE_HIGH = 3

ALERT_TYPE_TO_RISK_SCORE: dict[str, int] = {
    "NEW_ENDPOINT": RISK_SCORE_LOW,
    "OPEN_API_SPEC_DIFF": RISK_SCORE_MEDIUM,
    "PII_DATA_DETECTED": RISK_SCORE_HIGH,
    "QUERY_SENSITIVE_DATA": RISK_SCORE_HIGH,
    "PATH_SENSITIVE_DATA": RISK_SCORE_HIGH,
    "BASIC_AUTHENTICATION_DETECTED": RISK_SCORE_MEDIUM,
    "UNSECURED_ENDPOINT_DETECTED": RISK_SCORE_HIGH,
}


def risk_score_for(alert_type: str) -> int:
    """Return the risk score for alert_type. An unmapped type is a programming error."""
    try:
        return ALERT_TYPE_TO_RISK_SCORE[alert_type]
    except KeyError as e:
        raise AlertInternalError(f"No risk score mapped for alert type {alert_type!r}.") from e
