"""Core data models shared across hubdocs components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional

DEFAULT_CHAPTER = "general"


@dataclass(frozen=True)
class SourceUnit:
    """One raw contract source handed to the parser."""

    text: str
    filename: str
    preferred_name: Optional[str] = None
    registry_key: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    display_name: Optional[str] = None
    documentation: Optional[str] = None


@dataclass(frozen=True)
class TestSource:
    """Raw test specification text, optionally pre-associated with a unit.

    ``registry_key`` ties the specification to the registry entry that supplied
    it, so its cases follow whichever unit that entry resolves to.
    """

    __test__ = False

    text: str
    filename: str
    association_key: Optional[str] = None
    registry_key: Optional[str] = None


@dataclass
class Parameter:
    """A documented function parameter."""

    name: str
    type: str
    description: str


@dataclass
class Operation:
    """A documented function declared inside a unit."""

    name: str
    description: str
    parameters: List[Parameter] = field(default_factory=list)
    returns: Optional[str] = None
    signature: str = ""


@dataclass
class Event:
    """An event declared inside a unit."""

    name: str
    description: str


@dataclass
class ParsedUnit:
    """Structured documentation extracted from a single source unit."""

    name: str
    description: str
    chapter: str = DEFAULT_CHAPTER
    operations: List[Operation] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    kind: str = "contract"
    registry_key: Optional[str] = None
    display_name: Optional[str] = None
    documentation: Optional[str] = None


@dataclass(frozen=True)
class TestCase:
    """A single scenario description taken verbatim from a test specification."""

    __test__ = False

    description: str


@dataclass(frozen=True)
class BuildManifest:
    """Filenames written by one build, relative to the output directory."""

    files: FrozenSet[str] = frozenset()

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "BuildManifest":
        return cls(files=frozenset(names))

    def sorted_files(self) -> List[str]:
        return sorted(self.files)
