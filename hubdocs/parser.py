"""Extracts structured documentation from Solidity-style contract sources."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import UnitConflictError
from .logging import get_logger
from .models import DEFAULT_CHAPTER, Event, Operation, Parameter, ParsedUnit, SourceUnit
from .natspec import (
    OPERATION_DESCRIPTION_TAGS,
    UNIT_DESCRIPTION_TAGS,
    parse_doc_comment,
    preceding_doc_block,
)

_DECLARATION_RE = re.compile(
    r"^[ \t]*(?P<decl>(?:abstract\s+)?(?P<kind>contract|interface|library)\s+(?P<name>[A-Za-z_$][\w$]*))",
    re.MULTILINE,
)
_FUNCTION_RE = re.compile(r"\bfunction\s+(?P<name>[A-Za-z_$][\w$]*)\s*\(")
_EVENT_RE = re.compile(r"\bevent\s+(?P<name>[A-Za-z_$][\w$]*)\s*\([^)]*\)\s*(?:anonymous\s*)?;")
_DATA_LOCATIONS = {"memory", "storage", "calldata"}

logger = get_logger("parser")


@dataclass(frozen=True)
class Declaration:
    """A top-level contract, interface or library declaration."""

    kind: str
    name: str
    start: int
    body_start: int
    body_end: int


def parse_unit(unit: SourceUnit, *, default_chapter: str = DEFAULT_CHAPTER) -> Optional[ParsedUnit]:
    """Parse one source unit, returning ``None`` when it declares nothing recognisable."""
    masked = mask_source(unit.text)
    declarations = find_declarations(masked)
    if not declarations:
        return None

    target = select_target(declarations, unit.preferred_name)
    comment = parse_doc_comment(preceding_doc_block(unit.text, target.start))
    description = comment.first(*UNIT_DESCRIPTION_TAGS) or ""
    chapter = comment.chapter() or default_chapter

    return ParsedUnit(
        name=target.name,
        description=description,
        chapter=chapter,
        operations=_parse_operations(unit.text, masked, target),
        events=_parse_events(masked, target),
        kind=target.kind,
    )


def find_declarations(masked: str) -> List[Declaration]:
    """Locate declarations in comment- and string-masked source, in source order."""
    declarations: List[Declaration] = []
    for match in _DECLARATION_RE.finditer(masked):
        body_start, body_end = _body_span(masked, match.end())
        declarations.append(
            Declaration(
                kind=match.group("kind"),
                name=match.group("name"),
                start=match.start("decl"),
                body_start=body_start,
                body_end=body_end,
            )
        )
    return declarations


def select_target(declarations: List[Declaration], preferred_name: Optional[str]) -> Declaration:
    """Pick the documented declaration.

    Rules, in order: the declaration named ``preferred_name``; otherwise the
    first declaration in the source.
    """
    preferred = (preferred_name or "").strip()
    if preferred:
        for declaration in declarations:
            if declaration.name == preferred:
                return declaration
        logger.debug(
            "Declaration '%s' not found; documenting '%s' instead",
            preferred,
            declarations[0].name,
        )
    return declarations[0]


def apply_registry_metadata(
    parsed: ParsedUnit, unit: SourceUnit, *, default_chapter: str = DEFAULT_CHAPTER
) -> ParsedUnit:
    """Merge catalog metadata carried on ``unit`` into ``parsed``.

    An explicit chapter tag in the source wins over the registry category.
    """
    if unit.category and (not parsed.chapter or parsed.chapter == default_chapter):
        parsed.chapter = unit.category
    if not parsed.description and unit.description:
        parsed.description = unit.description
    parsed.registry_key = unit.registry_key
    parsed.display_name = unit.display_name
    parsed.documentation = unit.documentation
    return parsed


class UnitIndex:
    """Keeps parsed units in arrival order and rejects duplicate names.

    Names in ``reserved`` belong to generated pages and are refused,
    compared case-insensitively.
    """

    def __init__(self, reserved: Iterable[str] = ()) -> None:
        self._units: List[ParsedUnit] = []
        self._origins: Dict[str, str] = {}
        self._reserved = {name.lower() for name in reserved}

    def add(self, parsed: ParsedUnit, filename: str) -> None:
        if parsed.name.lower() in self._reserved:
            raise UnitConflictError(parsed.name, filename)
        if parsed.name in self._origins:
            raise UnitConflictError(parsed.name, filename, self._origins[parsed.name])
        self._origins[parsed.name] = filename
        self._units.append(parsed)

    def units(self) -> List[ParsedUnit]:
        return list(self._units)

    def __len__(self) -> int:
        return len(self._units)


def mask_source(text: str) -> str:
    """Blank out comments and string literals while preserving offsets and newlines.

    An unterminated block comment or string is left as plain text.
    """
    chars = list(text)
    length = len(text)
    index = 0
    while index < length:
        char = text[index]
        pair = text[index : index + 2]
        if pair == "//":
            end = text.find("\n", index)
            end = length if end == -1 else end
            _blank(chars, index, end)
            index = end
        elif pair == "/*":
            end = text.find("*/", index + 2)
            if end == -1:
                index += 2
                continue
            _blank(chars, index, end + 2)
            index = end + 2
        elif char in {'"', "'"}:
            end = _string_end(text, index)
            if end == -1:
                index += 1
                continue
            _blank(chars, index + 1, end)
            index = end + 1
        else:
            index += 1
    return "".join(chars)


def _blank(chars: List[str], start: int, end: int) -> None:
    for position in range(start, end):
        if chars[position] != "\n":
            chars[position] = " "


def _string_end(text: str, start: int) -> int:
    quote = text[start]
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index
        if char == "\n":
            return -1
        index += 1
    return -1


def _body_span(masked: str, offset: int) -> Tuple[int, int]:
    open_index = masked.find("{", offset)
    if open_index == -1:
        return offset, offset
    # A ';' before the first '{' means a body-less declaration.
    semicolon = masked.find(";", offset, open_index)
    if semicolon != -1:
        return offset, offset
    depth = 0
    for index in range(open_index, len(masked)):
        char = masked[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return open_index + 1, index
    return open_index + 1, len(masked)


def _parse_operations(text: str, masked: str, target: Declaration) -> List[Operation]:
    operations: List[Operation] = []
    for match in _FUNCTION_RE.finditer(masked, target.body_start, target.body_end):
        header, params = _function_header(masked, match.start(), match.end() - 1)
        comment = parse_doc_comment(preceding_doc_block(text, match.start()))
        types = _parameter_types(params)
        returns = comment.all("return")
        operations.append(
            Operation(
                name=match.group("name"),
                description=comment.first(*OPERATION_DESCRIPTION_TAGS) or "",
                parameters=[
                    _parameter(value, types) for value in comment.all("param") if value
                ],
                returns="; ".join(returns) if returns else None,
                signature=header,
            )
        )
    return operations


def _parameter(value: str, types: Dict[str, str]) -> Parameter:
    name, *rest = value.split(None, 1)
    description = rest[0].strip() if rest else ""
    return Parameter(name=name, type=types.get(name, ""), description=description)


def _function_header(masked: str, start: int, open_paren: int) -> Tuple[str, str]:
    """Return the condensed one-line header and the raw parameter list."""
    depth = 0
    close_paren = len(masked)
    for index in range(open_paren, len(masked)):
        if masked[index] == "(":
            depth += 1
        elif masked[index] == ")":
            depth -= 1
            if depth == 0:
                close_paren = index
                break
    params = masked[open_paren + 1 : close_paren]

    end = len(masked)
    for index in range(close_paren, len(masked)):
        if masked[index] in "{;":
            end = index
            break
    header = " ".join(masked[start:end].split())
    header = re.sub(r"\(\s+", "(", header)
    header = re.sub(r"\s+\)", ")", header)
    return header, params


def _parameter_types(params: str) -> Dict[str, str]:
    types: Dict[str, str] = {}
    for part in params.split(","):
        tokens = part.split()
        if len(tokens) < 2 or tokens[-1] in _DATA_LOCATIONS:
            continue
        types[tokens[-1]] = " ".join(tokens[:-1])
    return types


def _parse_events(masked: str, target: Declaration) -> List[Event]:
    return [
        Event(name=match.group("name"), description=f"Event emitted by {match.group('name')}")
        for match in _EVENT_RE.finditer(masked, target.body_start, target.body_end)
    ]


__all__ = [
    "Declaration",
    "UnitIndex",
    "apply_registry_metadata",
    "find_declarations",
    "mask_source",
    "parse_unit",
    "select_target",
]
