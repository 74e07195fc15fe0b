"""Source provider that scans contract and test directories."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List

from ..logging import get_logger
from ..models import SourceUnit, TestSource
from .base import SourceProvider

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    "artifacts",
    "cache",
    "typechain-types",
}


class FilesystemProvider(SourceProvider):
    """Walks the contracts and tests roots for files with the configured suffixes."""

    mode = "filesystem"

    def __init__(
        self,
        contracts_root: Path,
        tests_root: Path,
        *,
        contract_suffix: str = ".sol",
        test_suffix: str = ".test.ts",
    ) -> None:
        self.contracts_root = contracts_root
        self.tests_root = tests_root
        self.contract_suffix = contract_suffix
        self.test_suffix = test_suffix
        self.logger = get_logger("providers.filesystem")

    def list_units(self) -> List[SourceUnit]:
        units = [
            SourceUnit(text=path.read_text(encoding="utf-8"), filename=path.name)
            for path in _iter_files(self.contracts_root, self.contract_suffix)
        ]
        self.logger.debug("Found %d contract sources under %s", len(units), self.contracts_root)
        return units

    def list_tests(self) -> List[TestSource]:
        tests = [
            TestSource(text=path.read_text(encoding="utf-8"), filename=path.name)
            for path in _iter_files(self.tests_root, self.test_suffix)
        ]
        self.logger.debug("Found %d test specifications under %s", len(tests), self.tests_root)
        return tests


def _iter_files(root: Path, suffix: str) -> Iterator[Path]:
    if not root.is_dir():
        return
    for dirpath, dirnames, filenames in os.walk(root):
        # Sorted traversal keeps page order stable between runs.
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
        for filename in sorted(filenames):
            if filename.endswith(suffix):
                yield Path(dirpath) / filename
