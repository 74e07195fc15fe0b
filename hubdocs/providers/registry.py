"""Source provider backed by the in-memory example registry."""

from __future__ import annotations

from typing import Iterable, List

from ..models import SourceUnit, TestSource
from ..registry import ExampleEntry
from .base import SourceProvider


class RegistryProvider(SourceProvider):
    """Supplies one unit and one test specification per registry entry."""

    mode = "hub"

    def __init__(self, entries: Iterable[ExampleEntry]) -> None:
        self._entries = list(entries)

    def list_units(self) -> List[SourceUnit]:
        return [
            SourceUnit(
                text=entry.contract_code,
                filename=f"{entry.contract_name}.sol",
                preferred_name=entry.contract_name,
                registry_key=entry.key,
                category=entry.category,
                description=entry.description,
                display_name=entry.name,
                documentation=entry.documentation,
            )
            for entry in self._entries
        ]

    def list_tests(self) -> List[TestSource]:
        return [
            TestSource(
                text=entry.test_code,
                filename=f"{entry.contract_name}.test.ts",
                association_key=entry.contract_name,
                registry_key=entry.key,
            )
            for entry in self._entries
        ]
