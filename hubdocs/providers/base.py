"""Base class for source providers."""

from abc import ABC, abstractmethod
from typing import List

from ..models import SourceUnit, TestSource


class SourceProvider(ABC):
    """Contract for components that supply contract sources and test specifications."""

    mode: str = ""

    @abstractmethod
    def list_units(self) -> List[SourceUnit]:
        """Return every source unit to document, in a stable order."""

    @abstractmethod
    def list_tests(self) -> List[TestSource]:
        """Return the raw test specifications associated with the units."""
