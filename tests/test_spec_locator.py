"""Unit tests for app.services.spec_locator: JSON/YAML source locations and the location cache."""

import unittest
from unittest.mock import MagicMock, patch

from json_source_map import calculate

from app.models import OpenApiSpec
from app.services.spec_locator import (
    SpecLocator,
    YamlSourceMap,
    json_pointer,
    minimize_spec,
    spec_context_key,
)

SPEC_JSON = """{
  "openapi": "3.0.0",
  "paths": {
    "/users/{id}": {
      "get": {
        "summary": "Get user"
      }
    }
  }
}"""

SPEC_YAML = """openapi: 3.0.0
paths:
  /users/{id}:
    get:
      summary: Get user
    delete:
      summary: Delete user
"""

POINTER = ["paths", "/users/{id}", "get"]


def _spec(text: str, extension: str, context: dict | None = None) -> OpenApiSpec:
    return OpenApiSpec(
        name="users-api",
        spec=text,
        extension=extension,
        minimized_spec_context=context or {},
    )


class TestHelpers(unittest.TestCase):
    def test_spec_context_key(self) -> None:
        self.assertEqual(spec_context_key(POINTER), "paths./users/{id}.get")

    def test_json_pointer_keeps_slashes_in_segments(self) -> None:
        self.assertEqual(json_pointer(POINTER), "/paths//users/{id}/get")

    def test_json_pointer_matches_source_map_keys(self) -> None:
        source_map = calculate(SPEC_JSON)
        self.assertIn(json_pointer(POINTER), source_map)
        self.assertIn(json_pointer(["paths", "/users/{id}"]), source_map)

    def test_minimize_spec_window(self) -> None:
        text = "\n".join(f"line{i}" for i in range(1, 21))
        self.assertEqual(
            minimize_spec(text, 10, radius=2),
            "line9\nline10\nline11\nline12",
        )

    def test_minimize_spec_clamps_at_start(self) -> None:
        text = "a\r\nb\r\nc"
        self.assertEqual(minimize_spec(text, 1, radius=5), "a\nb\nc")


class TestYamlSourceMap(unittest.TestCase):
    def test_lookup_reports_line_where_value_opens(self) -> None:
        source_map = YamlSourceMap.build(SPEC_YAML)
        self.assertEqual(source_map.lookup(POINTER), 5)
        self.assertEqual(source_map.lookup(["paths"]), 3)
        self.assertIsNone(source_map.lookup(["paths", "/orders"]))

    def test_sequence_items_are_indexed(self) -> None:
        source_map = YamlSourceMap.build("tags:\n  - name: a\n  - name: b\n")
        self.assertEqual(source_map.lookup(["tags", "1", "name"]), 3)

    def test_empty_document(self) -> None:
        self.assertIsNone(YamlSourceMap.build("").lookup(["paths"]))


class TestSpecLocatorJson(unittest.TestCase):
    def test_locates_key_line_one_based(self) -> None:
        locator = SpecLocator(_spec(SPEC_JSON, "JSON"), radius=2)
        location = locator.locate(POINTER)
        self.assertEqual(location.line_number, 5)
        self.assertEqual(
            location.minimized_spec,
            '    "/users/{id}": {\n      "get": {\n        "summary": "Get user"\n      }',
        )

    def test_second_lookup_uses_cache_without_parsing(self) -> None:
        repository = MagicMock()
        locator = SpecLocator(_spec(SPEC_JSON, "JSON"), repository)
        with patch("app.services.spec_locator.calculate", wraps=calculate) as parse:
            first = locator.locate(POINTER)
            second = locator.locate(POINTER)
        self.assertEqual(parse.call_count, 1)
        self.assertEqual(first, second)
        repository.update_spec_context.assert_called_once_with(
            "users-api",
            {"paths./users/{id}.get": first.to_cache_entry()},
        )

    def test_stored_cache_entry_skips_parse(self) -> None:
        cached = {"paths./users/{id}.get": {"lineNumber": 42, "minimizedSpec": "cached"}}
        repository = MagicMock()
        locator = SpecLocator(_spec(SPEC_JSON, "JSON", cached), repository)
        with patch("app.services.spec_locator.calculate") as parse:
            location = locator.locate(POINTER)
        parse.assert_not_called()
        repository.update_spec_context.assert_not_called()
        self.assertEqual(location.line_number, 42)
        self.assertEqual(location.minimized_spec, "cached")

    def test_unknown_pointer_is_not_cached(self) -> None:
        repository = MagicMock()
        locator = SpecLocator(_spec(SPEC_JSON, "JSON"), repository)
        self.assertIsNone(locator.locate(["paths", "/orders"]))
        repository.update_spec_context.assert_not_called()
        self.assertEqual(locator.context, {})

    def test_document_parsed_once_for_several_pointers(self) -> None:
        locator = SpecLocator(_spec(SPEC_JSON, "JSON"))
        with patch("app.services.spec_locator.calculate", wraps=calculate) as parse:
            locator.locate(POINTER)
            locator.locate(["paths", "/users/{id}"])
        self.assertEqual(parse.call_count, 1)
        self.assertEqual(
            set(locator.context),
            {"paths./users/{id}.get", "paths./users/{id}"},
        )


class TestSpecLocatorYaml(unittest.TestCase):
    def test_locates_key_line(self) -> None:
        locator = SpecLocator(_spec(SPEC_YAML, "YAML"), radius=1)
        location = locator.locate(POINTER)
        self.assertEqual(location.line_number, 4)
        self.assertEqual(location.minimized_spec, "    get:\n      summary: Get user")

    def test_unknown_pointer(self) -> None:
        self.assertIsNone(SpecLocator(_spec(SPEC_YAML, "YAML")).locate(["components"]))

    def test_unsupported_extension(self) -> None:
        self.assertIsNone(SpecLocator(_spec(SPEC_YAML, "XML")).locate(POINTER))

    def test_lowercase_extension_is_normalized(self) -> None:
        spec = _spec(SPEC_YAML, "yaml")
        self.assertEqual(spec.extension, "YAML")
        self.assertEqual(SpecLocator(spec).locate(POINTER).line_number, 4)


if __name__ == "__main__":
    unittest.main()
