"""Scenario extraction from mocha-style test specifications."""

from __future__ import annotations

import re
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Dict, Iterable, List

from .logging import get_logger
from .models import TestCase, TestSource

_STRING = r"""(?P<quote>["'`])(?P<value>(?:\\.|(?!(?P=quote)).)*?)(?P=quote)"""
_DESCRIBE_RE = re.compile(r"(?<![\w.$])describe(?:\.only|\.skip)?\s*\(\s*" + _STRING, re.DOTALL)
_IT_RE = re.compile(r"(?<![\w.$])it(?:\.only|\.skip)?\s*\(\s*" + _STRING, re.DOTALL)
_TEST_SUFFIXES = (".test.ts", ".spec.ts", ".test.js", ".spec.js")

logger = get_logger("testcases")


@dataclass
class TestSuite:
    """Ordered scenarios extracted from one test specification."""

    __test__ = False

    association_key: str
    cases: List[TestCase] = field(default_factory=list)


def extract_test_cases(text: str, filename: str = "") -> TestSuite:
    """Return the association key and scenario descriptions found in ``text``.

    The key is the first ``describe(...)`` title, falling back to the file's
    base name without its test suffix. Scenario strings are kept verbatim.
    """
    describe = _DESCRIBE_RE.search(text)
    key = describe.group("value").strip() if describe else _stem(filename)
    cases = [TestCase(description=match.group("value")) for match in _IT_RE.finditer(text)]
    return TestSuite(association_key=key, cases=cases)


def associate_tests(sources: Iterable[TestSource]) -> Dict[str, List[TestCase]]:
    """Group extracted scenarios by unit name, concatenating in source order.

    A provider-supplied association key takes precedence over the one found
    in the text.
    """
    grouped: "OrderedDict[str, List[TestCase]]" = OrderedDict()
    for source in sources:
        suite = extract_test_cases(source.text, source.filename)
        key = source.association_key or suite.association_key
        if not key:
            logger.warning("Could not associate test specification %s with a unit", source.filename)
            continue
        grouped.setdefault(key, []).extend(suite.cases)
        logger.debug("Associated %d test cases from %s with %s", len(suite.cases), source.filename, key)
    return dict(grouped)


def _stem(filename: str) -> str:
    name = PurePath(filename).name
    for suffix in _TEST_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return PurePath(name).stem


__all__ = ["TestSuite", "associate_tests", "extract_test_cases"]
