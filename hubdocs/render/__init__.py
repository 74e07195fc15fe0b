"""Markdown rendering for the generated documentation set."""

from .lint import MarkdownLinter
from .pages import INDEX_PAGE, RESERVED_UNIT_NAMES, SUMMARY_PAGE, PageRenderer, format_chapter_name

__all__ = [
    "INDEX_PAGE",
    "RESERVED_UNIT_NAMES",
    "SUMMARY_PAGE",
    "MarkdownLinter",
    "PageRenderer",
    "format_chapter_name",
]
