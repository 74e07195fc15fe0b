"""Pipeline orchestration for one documentation build."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .config import HubDocsConfig, load_config
from .errors import UnitConflictError
from .logging import get_logger
from .manifest import ManifestTracker
from .models import BuildManifest, ParsedUnit, SourceUnit, TestCase, TestSource
from .parser import UnitIndex, apply_registry_metadata, parse_unit
from .providers import SourceProvider, build_provider, resolve_mode
from .render import RESERVED_UNIT_NAMES, PageRenderer
from .testcases import associate_tests


@dataclass
class BuildResult:
    """Outcome of a single build."""

    mode: str
    output_dir: Path
    manifest: BuildManifest
    removed: List[Path] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class Orchestrator:
    """Wires providers, parser, test extractor, renderer and manifest tracker."""

    def __init__(
        self,
        provider: SourceProvider | None = None,
        renderer: PageRenderer | None = None,
    ) -> None:
        self._provider_override = provider
        self._renderer_override = renderer
        self.logger = get_logger("orchestrator")

    def run(
        self,
        project_root: str | Path = ".",
        output_dir: str | Path = "docs",
        *,
        force_hub: bool = False,
        include_functions: Optional[bool] = None,
    ) -> BuildResult:
        """Generate the documentation set for ``project_root`` into ``output_dir``."""
        root = Path(project_root).expanduser().resolve()
        if not root.is_dir():
            raise NotADirectoryError(f"Project root is not a directory: {project_root}")
        output = Path(output_dir).expanduser().resolve()

        config = load_config(root)
        if include_functions is not None:
            config.output.include_functions = include_functions

        if self._provider_override is not None:
            provider = self._provider_override
            mode = provider.mode
        else:
            mode = resolve_mode(config, force_hub=force_hub)
            provider = build_provider(config, mode)
        self.logger.info("Generating documentation for %s (%s mode)", root, mode)

        units, skipped, accepted = self._parse_units(provider.list_units(), config)
        tests_by_name = associate_tests(self._link_tests(provider.list_tests(), accepted))
        self._report_unmatched(units, tests_by_name)

        renderer = self._renderer_override or PageRenderer(
            config.output.templates_dir,
            title=config.output.title,
            include_functions=config.output.include_functions,
        )
        rendered = renderer.render(units, tests_by_name)

        tracker = ManifestTracker(output)
        removed = tracker.pre_clean(keep=set(rendered))
        for path in removed:
            self.logger.info("Removed stale page %s", path.name)
        manifest = tracker.commit(rendered)

        self.logger.info(
            "Documentation generated in %s (%d pages, %d skipped)",
            output,
            len(manifest.files),
            len(skipped),
        )
        return BuildResult(
            mode=mode,
            output_dir=output,
            manifest=manifest,
            removed=removed,
            skipped=skipped,
        )

    def _parse_units(
        self, sources: Sequence[SourceUnit], config: HubDocsConfig
    ) -> Tuple[List[ParsedUnit], List[str], Dict[str, str]]:
        """Parse and collect units; also map each accepted registry key to its unit name."""
        default_chapter = config.output.default_chapter
        index = UnitIndex(reserved=RESERVED_UNIT_NAMES)
        skipped: List[str] = []
        accepted: Dict[str, str] = {}
        for source in sources:
            parsed = parse_unit(source, default_chapter=default_chapter)
            if parsed is None:
                self.logger.warning("No contract declaration found in %s; skipping", source.filename)
                skipped.append(source.filename)
                continue
            if source.registry_key is not None:
                apply_registry_metadata(parsed, source, default_chapter=default_chapter)
            try:
                index.add(parsed, source.filename)
            except UnitConflictError as exc:
                self.logger.warning("%s; skipping", exc)
                skipped.append(source.filename)
                continue
            if source.registry_key is not None:
                accepted[source.registry_key] = parsed.name
            self.logger.debug(
                "Parsed %s from %s (%d functions, %d events)",
                parsed.name,
                source.filename,
                len(parsed.operations),
                len(parsed.events),
            )
        return index.units(), skipped, accepted

    def _link_tests(
        self, sources: Sequence[TestSource], accepted: Dict[str, str]
    ) -> List[TestSource]:
        """Key registry test specifications by the unit their entry resolved to.

        Specifications whose entry produced no accepted unit are dropped.
        """
        linked: List[TestSource] = []
        for source in sources:
            if source.registry_key is None:
                linked.append(source)
                continue
            name = accepted.get(source.registry_key)
            if name is None:
                self.logger.debug(
                    "Dropping tests from %s; registry entry '%s' produced no page",
                    source.filename,
                    source.registry_key,
                )
                continue
            linked.append(replace(source, association_key=name))
        return linked

    def _report_unmatched(
        self, units: Sequence[ParsedUnit], tests_by_name: Dict[str, List[TestCase]]
    ) -> None:
        names = {unit.name for unit in units}
        for key in tests_by_name:
            if key not in names:
                self.logger.debug("Test specification '%s' matches no documented unit", key)
