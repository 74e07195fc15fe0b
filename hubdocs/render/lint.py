"""Whitespace normalisation applied to every rendered page.

Templates emit conditional sections and embed registry walkthroughs verbatim,
so blank-line runs and heading spacing vary with the input. Linting makes the
output byte-stable for a given input, which keeps unchanged pages untouched
on re-runs.
"""

from __future__ import annotations

from typing import List


class MarkdownLinter:
    """Normalises line endings, blank runs and heading spacing outside code fences.

    Leading blank lines are dropped, runs of blanks collapse to one, every
    heading gets a blank line above it, and the page ends with one newline.
    Fenced blocks (including indented fences inside walkthroughs) pass through
    unchanged apart from trailing whitespace.
    """

    def lint(self, markdown: str) -> str:
        normalized = markdown.replace("\r\n", "\n").replace("\r", "\n")
        lines = normalized.split("\n")
        cleaned: List[str] = []
        in_code = False
        previous_blank = False

        for line in lines:
            stripped = line.rstrip()
            if stripped.lstrip().startswith("```"):
                in_code = not in_code
                cleaned.append(stripped)
                previous_blank = False
                continue

            if not in_code:
                if stripped.startswith("#") and cleaned and cleaned[-1] != "":
                    cleaned.append("")
                if not stripped:
                    if previous_blank or not cleaned:
                        continue
                    previous_blank = True
                    cleaned.append("")
                    continue

            cleaned.append(stripped)
            previous_blank = False

        while cleaned and cleaned[-1] == "":
            cleaned.pop()

        return "\n".join(cleaned) + "\n"
