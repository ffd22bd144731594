"""Source locations for OpenAPI diff pointers, cached per spec.

A pointer-path such as ["paths", "/users/{id}", "get"] is resolved to a line in the raw
spec text and a short snippet around it. Results are memoized in the spec's
minimized_spec_context under the dotted key "paths./users/{id}.get" and written back to
the store as soon as they are computed, so each distinct pointer is parsed for at most once.
"""

import logging
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import yaml
from json_source_map import calculate
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from app.models import OpenApiSpec
    from app.services.alert_repository import AlertRepository

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_RADIUS = 5

_LINE_SPLIT = re.compile(r"\r?\n")


class SpecLocation(BaseModel):
    """Cached location of a pointer inside a spec; serialized with the camelCase cache keys."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    line_number: int = Field(..., alias="lineNumber", ge=1)
    minimized_spec: str = Field(..., alias="minimizedSpec")

    def to_cache_entry(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def spec_context_key(pointer: Sequence[str]) -> str:
    """Cache key for a pointer-path: segments joined with '.'."""
    return ".".join(pointer)


def json_pointer(pointer: Sequence[str]) -> str:
    """Key of pointer in a json_source_map result: raw segments, each prefixed with "/".

    The map does not escape segments, so "/users/{id}" stays "//users/{id}".
    """
    return "".join("/" + str(segment) for segment in pointer)


def minimize_spec(spec_text: str, line_number: int, radius: int = DEFAULT_CONTEXT_RADIUS) -> str:
    """Lines [line_number - radius, line_number + radius) of the spec, by zero-based index."""
    lines = _LINE_SPLIT.split(spec_text)
    start = max(line_number - radius, 0)
    return "\n".join(lines[start : line_number + radius])


class YamlSourceMap:
    """
    Maps pointer-paths of a YAML document to the one-based line where each value opens.

    Built from a single composition pass, so aliases and anchors resolve to the node they
    reference. Sequence items are addressed by their index as a string.
    """

    def __init__(self) -> None:
        self._lines: dict[tuple[str, ...], int] = {}

    @classmethod
    def build(cls, text: str) -> "YamlSourceMap":
        source_map = cls()
        root = yaml.compose(text, Loader=yaml.SafeLoader)
        if root is not None:
            source_map._visit(root, (), set())
        return source_map

    def _visit(self, node: yaml.Node, path: tuple[str, ...], active: set[int]) -> None:
        if id(node) in active:
            return
        if isinstance(node, yaml.MappingNode):
            children = [(str(key.value), value) for key, value in node.value]
        elif isinstance(node, yaml.SequenceNode):
            children = [(str(i), item) for i, item in enumerate(node.value)]
        else:
            return
        active.add(id(node))
        for segment, child in children:
            child_path = path + (segment,)
            self._lines.setdefault(child_path, child.start_mark.line + 1)
            self._visit(child, child_path, active)
        active.discard(id(node))

    def lookup(self, pointer: Sequence[str]) -> int | None:
        return self._lines.get(tuple(str(segment) for segment in pointer))


class SpecLocator:
    """
    Resolves pointer-paths within one OpenAPI spec, reusing and extending its location cache.

    The source map is built lazily and at most once per locator; cache hits never parse.
    """

    def __init__(
        self,
        spec: "OpenApiSpec",
        repository: "AlertRepository | None" = None,
        radius: int = DEFAULT_CONTEXT_RADIUS,
    ) -> None:
        self.spec_name: str = spec.name
        self.spec_text: str = spec.spec or ""
        self.extension: str = spec.extension or ""
        self.repository = repository
        self.radius = radius
        self._context: dict[str, Any] = dict(spec.minimized_spec_context or {})
        self._json_map: dict[str, Any] | None = None
        self._yaml_map: YamlSourceMap | None = None

    @property
    def context(self) -> dict[str, Any]:
        """Current view of the spec's location cache, including entries added by this locator."""
        return dict(self._context)

    def locate(self, pointer: Sequence[str]) -> SpecLocation | None:
        """Return the cached or freshly computed location of pointer, or None if unresolved."""
        key = spec_context_key(pointer)
        cached = self._context.get(key)
        if cached:
            return SpecLocation.model_validate(cached)

        line_number = self._line_number(pointer)
        if not line_number:
            logger.debug("No source location for %r in spec %s", key, self.spec_name)
            return None

        location = SpecLocation(
            line_number=line_number,
            minimized_spec=minimize_spec(self.spec_text, line_number, self.radius),
        )
        self._context[key] = location.to_cache_entry()
        if self.repository is not None:
            self.repository.update_spec_context(self.spec_name, {key: location.to_cache_entry()})
        return location

    def _line_number(self, pointer: Sequence[str]) -> int | None:
        if self.extension == "JSON":
            if self._json_map is None:
                self._json_map = calculate(self.spec_text)
            entry = self._json_map.get(json_pointer(pointer))
            if entry is None or entry.key_start is None:
                return None
            return entry.key_start.line + 1
        if self.extension == "YAML":
            if self._yaml_map is None:
                self._yaml_map = YamlSourceMap.build(self.spec_text)
            line = self._yaml_map.lookup(pointer)
            if line is None:
                return None
            return line - 1
        logger.warning("Unsupported spec extension %r for spec %s", self.extension, self.spec_name)
        return None
