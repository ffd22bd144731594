"""Unit tests for app.services.validation_messages."""

import unittest

from app.schemas.validation import ValidatorError
from app.services.validation_messages import (
    messages_from_request_errors,
    messages_from_response_errors,
    spec_diffs_from_validation,
)


def _error(
    error_code: str,
    path: str = "name",
    message: str = "should be string",
    location: str | None = "body",
    pointer: list[str] | None = None,
) -> ValidatorError:
    return ValidatorError(
        path=path, message=message, errorCode=error_code, location=location, pointer=pointer or []
    )


class TestRequestMessages(unittest.TestCase):
    def test_none_is_empty(self) -> None:
        self.assertEqual(messages_from_request_errors(None), [])

    def test_each_category(self) -> None:
        messages = messages_from_request_errors(
            [
                _error("required.openapi.validation", location="query"),
                _error("type.openapi.validation"),
                _error("additionalProperties.openapi.validation"),
                _error("format.openapi.validation", message="should match format"),
            ]
        )
        self.assertEqual(
            messages,
            [
                "Required property 'name' is missing from request query",
                "Property 'name' should be string in request body",
                "Property 'name' is present in request body without being defined in OpenAPI Spec",
                "should match format: 'name' in request body",
            ],
        )


class TestResponseMessages(unittest.TestCase):
    def test_each_category(self) -> None:
        messages = messages_from_response_errors(
            [
                _error("required.openapi.responseValidation"),
                _error("type.openapi.responseValidation"),
                _error("additionalProperties.openapi.responseValidation"),
                _error("enum", message="should be one of"),
            ]
        )
        self.assertEqual(
            messages,
            [
                "Required property 'name' is missing from response body",
                "Property 'name' should be string in response body",
                "Property 'name' is present in response body without being defined in OpenAPI Spec",
                "should be one of: 'name' in response body",
            ],
        )


class TestSpecDiffsFromValidation(unittest.TestCase):
    OPERATION = ["paths", "/users/{id}", "get"]

    def test_messages_keyed_to_pointers(self) -> None:
        diffs = spec_diffs_from_validation(
            [_error("required.openapi.validation", location="query")],
            [_error("type.openapi.responseValidation", pointer=["paths", "/users/{id}", "get", "responses"])],
            self.OPERATION,
        )
        self.assertEqual(
            diffs,
            {
                "Required property 'name' is missing from request query": self.OPERATION,
                "Property 'name' should be string in response body": ["paths", "/users/{id}", "get", "responses"],
            },
        )

    def test_repeated_message_keeps_first_pointer(self) -> None:
        diffs = spec_diffs_from_validation(
            [_error("required.x"), _error("required.x", pointer=["paths"])],
            None,
            self.OPERATION,
        )
        self.assertEqual(list(diffs.values()), [self.OPERATION])

    def test_no_errors(self) -> None:
        self.assertEqual(spec_diffs_from_validation(None, [], self.OPERATION), {})


if __name__ == "__main__":
    unittest.main()
