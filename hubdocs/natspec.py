"""Documentation comment location and NatSpec tag parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Ordered fallbacks: the first tag present wins.
UNIT_DESCRIPTION_TAGS = ("notice", "title")
OPERATION_DESCRIPTION_TAGS = ("notice", "dev")
CHAPTER_TAGS = ("custom:chapter", "chapter")

_TAG_RE = re.compile(r"^@(?P<tag>[\w-]+(?::[\w-]+)?):?\s*(?P<value>.*)$")
_UNTAGGED_CHAPTER_RE = re.compile(r"^chapter:\s*(?P<value>.*)$", re.IGNORECASE)
_CHAPTER_VALUE_RE = re.compile(r"[\w-]+")


@dataclass
class DocComment:
    """Tagged fields of one documentation comment, in source order."""

    tags: List[Tuple[str, str]] = field(default_factory=list)
    text: List[str] = field(default_factory=list)

    def first(self, *names: str) -> Optional[str]:
        """Return the value of the first tag in ``names`` that is present."""
        for name in names:
            for tag, value in self.tags:
                if tag == name:
                    return value
        return None

    def all(self, name: str) -> List[str]:
        return [value for tag, value in self.tags if tag == name]

    def chapter(self) -> Optional[str]:
        raw = self.first(*CHAPTER_TAGS)
        if raw is None:
            return None
        match = _CHAPTER_VALUE_RE.search(raw)
        return match.group(0) if match else None


def preceding_doc_block(text: str, position: int) -> Optional[str]:
    """Return the raw body of the doc comment that ends right before ``position``.

    Only whitespace may separate the comment from ``position``. Both ``/** */``
    blocks and runs of ``///`` lines are recognised. Anything else, including an
    unterminated block, counts as no comment.
    """
    head = text[:position].rstrip()
    if head.endswith("*/"):
        start = head.rfind("/*", 0, len(head) - 2)
        if start == -1 or not head.startswith("/**", start):
            return None
        return head[start + 3 : -2]

    lines = head.splitlines()
    collected: List[str] = []
    while lines and lines[-1].lstrip().startswith("///"):
        collected.append(lines.pop().lstrip()[3:])
    if not collected:
        return None
    return "\n".join(reversed(collected))


def parse_doc_comment(body: Optional[str]) -> DocComment:
    """Split a comment body into tags; multi-line values are joined with spaces."""
    comment = DocComment()
    if not body:
        return comment

    current: Optional[List[str]] = None
    for raw_line in body.splitlines():
        line = raw_line.strip()
        if line.startswith("*"):
            line = line.lstrip("*").strip()
        if not line:
            current = None
            continue
        chapter = _UNTAGGED_CHAPTER_RE.match(line)
        if chapter:
            # Legacy "chapter: <name>" lines carry no '@'.
            comment.tags.append(("chapter", chapter.group("value").strip()))
            current = None
            continue
        match = _TAG_RE.match(line)
        if match:
            comment.tags.append((match.group("tag"), match.group("value").strip()))
            current = [match.group("value").strip()]
            _sync_last(comment, current)
            continue
        if current is not None:
            current.append(line)
            _sync_last(comment, current)
        else:
            comment.text.append(line)
    return comment


def _sync_last(comment: DocComment, parts: List[str]) -> None:
    tag, _ = comment.tags[-1]
    comment.tags[-1] = (tag, " ".join(part for part in parts if part))


__all__ = [
    "CHAPTER_TAGS",
    "DocComment",
    "OPERATION_DESCRIPTION_TAGS",
    "UNIT_DESCRIPTION_TAGS",
    "parse_doc_comment",
    "preceding_doc_block",
]
