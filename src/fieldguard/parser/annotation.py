"""Annotation parser: splits a field's constraint string into its sections.

Grammar (comma separated)::

    min=3,dive,keys,alpha,endkeys,email
    ^^^^^      ^^^^^^^^^^^^^^^^^^^^ ^^^^^
    collection key section          element section

A parameter may itself contain commas (``regexp=^[a-z]{1,3}$``): a piece that
does not start with an identifier is glued back onto the previous token's
parameter. A piece made only of ``|``-separated names (``email|uuid``) is a
single token whose alternatives are tried in turn; a ``|`` after ``=`` is part
of the parameter.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from fieldguard.catalog import DIVE, ENDKEYS, KEYS, MARKERS
from fieldguard.models.errors import AnnotationError
from fieldguard.models.fields import FieldKind, ParsedTag

_TOKEN_RE = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*)\s*(?:=(.*))?$", re.DOTALL)
_ANY_OF_RE = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*(?:\s*\|\s*[A-Za-z_][A-Za-z0-9_]*)+)\s*$")
_MAX_ALIAS_DEPTH = 8


@dataclass
class Token:
    name: str
    param: str | None = None

    @property
    def value(self) -> str:
        return (self.param or "").strip()


def tokenize(raw: str, label: str = "<annotation>") -> list[Token]:
    """Split an annotation string into name/parameter tokens."""
    tokens: list[Token] = []
    for piece in raw.split(","):
        match = _TOKEN_RE.match(piece)
        if match:
            tokens.append(Token(match.group(1), match.group(2)))
            continue
        match = _ANY_OF_RE.match(piece)
        if match:
            tokens.append(Token(re.sub(r"\s+", "", match.group(1))))
            continue
        if not piece.strip():
            continue
        if tokens and tokens[-1].param is not None:
            tokens[-1].param = f"{tokens[-1].param},{piece}"
            continue
        if piece.strip().startswith("="):
            raise AnnotationError(f"{label}: empty constraint name in '{raw}'")
        raise AnnotationError(f"{label}: invalid token '{piece.strip()}' in '{raw}'")
    return tokens


def _expand_aliases(
    tokens: list[Token], aliases: Mapping[str, str], label: str, depth: int = 0
) -> list[Token]:
    if not aliases:
        return tokens
    if depth > _MAX_ALIAS_DEPTH:
        raise AnnotationError(f"{label}: alias expansion is too deep (cyclic alias?)")
    expanded: list[Token] = []
    for token in tokens:
        expansion = aliases.get(token.name)
        if expansion is None or token.param is not None:
            expanded.append(token)
            continue
        inner = tokenize(expansion, label)
        expanded.extend(_expand_aliases(inner, aliases, label, depth + 1))
    return expanded


def parse_tag(
    raw: str | None,
    kind: FieldKind,
    *,
    label: str = "<field>",
    aliases: Mapping[str, str] | None = None,
) -> ParsedTag | None:
    """Parse ``raw`` for a field of the given kind.

    Returns ``None`` when there is no annotation. Raises
    :class:`AnnotationError` for misplaced ``dive``/``keys``/``endkeys``
    markers; these are programming errors and surface when the validator is
    built.
    """
    if raw is None or not raw.strip():
        return None

    tokens = _expand_aliases(tokenize(raw, label), aliases or {}, label)

    collection: dict[str, str] = {}
    element: dict[str, str] = {}
    keys: dict[str, str] = {}
    dive = False
    in_keys = False
    keys_seen = False
    endkeys_seen = False

    for token in tokens:
        if token.name in MARKERS:
            if token.param is not None:
                raise AnnotationError(f"{label}: '{token.name}' does not take a parameter")
            if token.name == DIVE:
                if dive:
                    raise AnnotationError(f"{label}: nested 'dive' is not supported")
                if not kind.is_collection:
                    raise AnnotationError(
                        f"{label}: 'dive' can only be used on sequence or map types, got {kind}"
                    )
                dive = True
            elif token.name == KEYS:
                if not dive:
                    raise AnnotationError(f"{label}: 'keys' can only appear after 'dive'")
                if keys_seen:
                    raise AnnotationError(f"{label}: 'keys' may appear only once")
                if kind != FieldKind.MAP:
                    raise AnnotationError(
                        f"{label}: 'keys' can only be used on map types, got {kind}"
                    )
                keys_seen = in_keys = True
            else:
                if not keys_seen:
                    raise AnnotationError(f"{label}: 'endkeys' without preceding 'keys'")
                if endkeys_seen:
                    raise AnnotationError(f"{label}: 'endkeys' may appear only once")
                endkeys_seen = True
                in_keys = False
            continue

        if in_keys:
            keys[token.name] = token.value
        elif dive:
            element[token.name] = token.value
        else:
            collection[token.name] = token.value

    if keys_seen and not endkeys_seen:
        raise AnnotationError(f"{label}: 'keys' without closing 'endkeys'")

    return ParsedTag(collection=collection, dive=dive, element=element, keys=keys)

