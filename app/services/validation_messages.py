"""Human-readable alert messages from OpenAPI validator error descriptors."""

from collections.abc import Iterable

from app.schemas.validation import ValidatorError


def _category(error: ValidatorError) -> str:
    return (error.error_code or "").split(".")[0]


def _format(error: ValidatorError, surface: str) -> str:
    category = _category(error)
    if category == "required":
        return f"Required property '{error.path}' is missing from {surface}"
    if category == "type":
        return f"Property '{error.path}' {error.message} in {surface}"
    if category == "additionalProperties":
        return (
            f"Property '{error.path}' is present in {surface} "
            "without being defined in OpenAPI Spec"
        )
    return f"{error.message}: '{error.path}' in {surface}"


def messages_from_request_errors(errors: Iterable[ValidatorError] | None) -> list[str]:
    """One message per request validation error, e.g. "... from request query"."""
    if not errors:
        return []
    return [_format(error, f"request {error.location}") for error in errors]


def messages_from_response_errors(errors: Iterable[ValidatorError] | None) -> list[str]:
    """One message per response validation error; responses are always the body."""
    if not errors:
        return []
    return [_format(error, "response body") for error in errors]


def spec_diffs_from_validation(
    request_errors: Iterable[ValidatorError] | None,
    response_errors: Iterable[ValidatorError] | None,
    operation_pointer: list[str],
) -> dict[str, list[str]]:
    """
    Spec-diff mapping (message -> pointer-path) for validator errors of one trace.

    Errors without a pointer are attributed to operation_pointer. When two errors render to
    the same message the first pointer is kept.
    """
    diffs: dict[str, list[str]] = {}
    for errors, render in (
        (list(request_errors or []), messages_from_request_errors),
        (list(response_errors or []), messages_from_response_errors),
    ):
        for error, message in zip(errors, render(errors)):
            diffs.setdefault(message, list(error.pointer) or list(operation_pointer))
    return diffs
