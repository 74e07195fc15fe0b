"""Renders the documentation set (index, per-unit pages, navigation tree)."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import ParsedUnit, TestCase
from .lint import MarkdownLinter

INDEX_PAGE = "README.md"
SUMMARY_PAGE = "SUMMARY.md"
DEFAULT_TITLE = "FHEVM Examples"
RESERVED_UNIT_NAMES = frozenset(Path(page).stem for page in (INDEX_PAGE, SUMMARY_PAGE))


@dataclass
class Chapter:
    """Units sharing a chapter, in first-encounter order."""

    key: str
    label: str
    units: List[ParsedUnit] = field(default_factory=list)


def format_chapter_name(chapter: str) -> str:
    """Title-case a hyphenated chapter key (``user-decryption`` -> ``User Decryption``)."""
    return " ".join(word[:1].upper() + word[1:] for word in chapter.split("-"))


def strip_leading_heading(markdown: str | None) -> str:
    """Drop a leading ``# Title`` line; pages already render their own title."""
    trimmed = (markdown or "").strip()
    if not trimmed:
        return ""
    lines = trimmed.splitlines()
    if lines[0].startswith("# "):
        return "\n".join(lines[1:]).strip()
    return trimmed


def group_by_chapter(units: Iterable[ParsedUnit]) -> List[Chapter]:
    chapters: "OrderedDict[str, Chapter]" = OrderedDict()
    for unit in units:
        chapter = chapters.get(unit.chapter)
        if chapter is None:
            chapter = Chapter(key=unit.chapter, label=format_chapter_name(unit.chapter))
            chapters[unit.chapter] = chapter
        chapter.units.append(unit)
    return list(chapters.values())


def unit_page_name(unit: ParsedUnit) -> str:
    return f"{unit.name}.md"


class PageRenderer:
    """Turns parsed units and their matched test cases into markdown pages.

    Rendering is pure: templates are read through jinja2, nothing is written.
    """

    INDEX_TEMPLATE = "index.md.j2"
    UNIT_TEMPLATE = "unit.md.j2"
    SUMMARY_TEMPLATE = "summary.md.j2"

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        title: str = DEFAULT_TITLE,
        include_functions: bool = False,
        linter: MarkdownLinter | None = None,
    ) -> None:
        self.title = title
        self.include_functions = include_functions
        self.linter = linter or MarkdownLinter()
        self._env = self._create_env(templates_dir)

    def render(
        self,
        units: Sequence[ParsedUnit],
        tests_by_name: Mapping[str, Sequence[TestCase]],
    ) -> Dict[str, str]:
        """Return ``filename -> content`` for every page of the documentation set."""
        chapters = group_by_chapter(units)
        pages: Dict[str, str] = {INDEX_PAGE: self.render_index(units, chapters)}
        for unit in units:
            pages[unit_page_name(unit)] = self.render_unit(unit, tests_by_name.get(unit.name, ()))
        pages[SUMMARY_PAGE] = self.render_summary(chapters)
        return pages

    def render_index(self, units: Sequence[ParsedUnit], chapters: Sequence[Chapter]) -> str:
        return self._render(
            self.INDEX_TEMPLATE,
            title=self.title,
            chapters=chapters,
            registry_backed=any(unit.registry_key for unit in units),
        )

    def render_unit(self, unit: ParsedUnit, tests: Sequence[TestCase]) -> str:
        return self._render(
            self.UNIT_TEMPLATE,
            unit=unit,
            tests=list(tests),
            walkthrough=strip_leading_heading(unit.documentation),
            include_functions=self.include_functions,
        )

    def render_summary(self, chapters: Sequence[Chapter]) -> str:
        return self._render(self.SUMMARY_TEMPLATE, chapters=chapters)

    def _render(self, template_name: str, **context: object) -> str:
        template = self._env.get_template(template_name)
        return self.linter.lint(template.render(**context))

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        env.filters["chapter_label"] = format_chapter_name
        return env


__all__ = [
    "INDEX_PAGE",
    "RESERVED_UNIT_NAMES",
    "SUMMARY_PAGE",
    "Chapter",
    "PageRenderer",
    "format_chapter_name",
    "group_by_chapter",
    "strip_leading_heading",
    "unit_page_name",
]
