"""Input loader: JSON / YAML text to plain data, with position tracking for YAML."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import MarkedYAMLError, YAMLError
from ruamel.yaml.scalarbool import ScalarBoolean
from ruamel.yaml.scalarfloat import ScalarFloat
from ruamel.yaml.scalarint import ScalarInt

from fieldguard.models.errors import DecodeError, SourceSpan
from fieldguard.settings import get_settings

logger = logging.getLogger("fieldguard.loader")

# Regex to detect YAML anchor definitions (&name).
# Matches & at line start or after whitespace/sequence indicators, followed by
# an anchor name, but NOT inside quoted strings (good-enough heuristic).
_ANCHOR_RE = re.compile(r"(?:^|[\s\-:])&(\w+)", re.MULTILINE)
_MAP_KEY_RE = re.compile(r"\[([^\]\d][^\]]*)\]")
_COMMENT_RE = re.compile(r"(^|\s)#.*$", re.MULTILINE)


@dataclass
class SourceMap:
    """Maps wire paths (``a.b``, ``a[0]``) to their source positions."""

    _positions: dict[str, SourceSpan] = field(default_factory=dict)

    def add(self, path: str, span: SourceSpan) -> None:
        self._positions[path] = span

    def get(self, path: str) -> SourceSpan | None:
        span = self._positions.get(path)
        if span is None:
            # Map entries are addressed as ``a[key]`` by the decoder
            span = self._positions.get(_MAP_KEY_RE.sub(r".\1", path))
        return span

    @property
    def paths(self) -> list[str]:
        return list(self._positions.keys())


class InputLoader:
    """Loads raw JSON or YAML text into plain dicts / lists / scalars.

    Both formats go through the same size, depth and node count limits
    (from :class:`fieldguard.settings.Settings` unless given explicitly).
    YAML loading additionally returns a :class:`SourceMap` built from the
    line/column info ruamel.yaml keeps on every parsed node.
    """

    def __init__(
        self,
        *,
        max_document_size: int | None = None,
        max_depth: int | None = None,
        max_node_count: int | None = None,
    ) -> None:
        settings = get_settings()
        self.max_document_size = max_document_size or settings.max_document_size
        self.max_depth = max_depth or settings.max_depth
        self.max_node_count = max_node_count or settings.max_node_count
        self._yaml = YAML()

    # -- safety checks -------------------------------------------------------

    def _check_size(self, content: str | bytes) -> None:
        if len(content) > self.max_document_size:
            raise DecodeError(
                f"document exceeds maximum size "
                f"({len(content):,} > {self.max_document_size:,} limit)"
            )

    def _check_shape(self, data: Any) -> None:
        """Post-parse defense-in-depth: reject too deep or too large documents."""
        count = 0
        stack: list[tuple[Any, int]] = [(data, 1)]
        while stack:
            node, depth = stack.pop()
            count += 1
            if count > self.max_node_count:
                raise DecodeError(f"document exceeds maximum node count ({self.max_node_count:,})")
            if depth > self.max_depth:
                raise DecodeError(f"document exceeds maximum nesting depth ({self.max_depth})")
            if isinstance(node, dict):
                stack.extend((v, depth + 1) for v in node.values())
            elif isinstance(node, list):
                stack.extend((v, depth + 1) for v in node)

    # -- public loading API --------------------------------------------------

    def load_json(self, content: str | bytes, filename: str = "<string>") -> Any:
        """Parse JSON text. Raises DecodeError on malformed or oversized input."""
        self._check_size(content)
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            span = SourceSpan(file=filename, line=exc.lineno, column=exc.colno)
            raise DecodeError(f"invalid JSON: {exc.msg}", span) from exc
        except UnicodeDecodeError as exc:
            raise DecodeError(f"invalid JSON: {exc}") from exc
        except RecursionError as exc:
            raise DecodeError(
                f"document exceeds maximum nesting depth ({self.max_depth})"
            ) from exc
        self._check_shape(data)
        return data

    def load_yaml(self, content: str, filename: str = "<string>") -> tuple[Any, SourceMap]:
        """Parse YAML text and return plain data + source position map."""
        self._check_size(content)
        if _ANCHOR_RE.search(_COMMENT_RE.sub(r"\1", content)):
            raise DecodeError("YAML anchors/aliases are not supported")
        try:
            data = self._yaml.load(content)
        except MarkedYAMLError as exc:
            span = None
            mark = exc.problem_mark
            if mark is not None:
                span = SourceSpan(file=filename, line=mark.line + 1, column=mark.column + 1)
            raise DecodeError(f"invalid YAML: {exc.problem or exc}", span) from exc
        except YAMLError as exc:
            raise DecodeError(f"invalid YAML: {exc}") from exc
        except RecursionError as exc:
            raise DecodeError(
                f"document exceeds maximum nesting depth ({self.max_depth})"
            ) from exc
        if data is None:
            return {}, SourceMap()
        try:
            plain = self._to_plain(data)
        except RecursionError as exc:
            raise DecodeError(
                f"document exceeds maximum nesting depth ({self.max_depth})"
            ) from exc
        self._check_shape(plain)
        source_map = SourceMap()
        self._extract_positions(data, filename, "", source_map)
        logger.debug("Loaded YAML %s (%d positions)", filename, len(source_map.paths))
        return plain, source_map

    def load_yaml_file(self, path: Path) -> tuple[Any, SourceMap]:
        with path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        return self.load_yaml(content, str(path))

    def _extract_positions(
        self,
        data: Any,
        filename: str,
        prefix: str,
        source_map: SourceMap,
    ) -> None:
        """Recursively extract source positions from ruamel.yaml nodes."""
        if isinstance(data, CommentedMap):
            for key in data:
                key_path = f"{prefix}.{key}" if prefix else str(key)
                try:
                    position = data.lc.key(key)
                except (AttributeError, KeyError, TypeError):
                    position = None
                if position:
                    line, col = position
                    source_map.add(key_path, SourceSpan(file=filename, line=line + 1, column=col + 1))
                self._extract_positions(data[key], filename, key_path, source_map)
        elif isinstance(data, CommentedSeq):
            for i, item in enumerate(data):
                item_path = f"{prefix}[{i}]"
                try:
                    position = data.lc.item(i)
                except (AttributeError, KeyError, TypeError):
                    position = None
                if position:
                    line, col = position
                    source_map.add(item_path, SourceSpan(file=filename, line=line + 1, column=col + 1))
                self._extract_positions(item, filename, item_path, source_map)

    def _to_plain(self, data: Any) -> Any:
        """Convert ruamel.yaml nodes and scalar wrappers to plain Python values."""
        if isinstance(data, dict):
            return {str(k): self._to_plain(v) for k, v in data.items()}
        if isinstance(data, list):
            return [self._to_plain(item) for item in data]
        if isinstance(data, ScalarBoolean):
            return bool(data)
        if isinstance(data, ScalarInt):
            return int(data)
        if isinstance(data, ScalarFloat):
            return float(data)
        if isinstance(data, str):
            return str(data)
        return data
