"""Build manifest tracking for safe regeneration of the output directory."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Collection, List, Mapping

from .errors import UnsafePathError
from .logging import get_logger
from .models import BuildManifest

MANIFEST_FILENAME = ".docs-manifest.json"
MANAGED_SUFFIX = ".md"

logger = get_logger("manifest")


def manifest_path(output_dir: Path) -> Path:
    return output_dir / MANIFEST_FILENAME


def load_manifest(output_dir: Path) -> BuildManifest:
    """Read the previous build's manifest; anything unreadable counts as empty."""
    path = manifest_path(output_dir)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return BuildManifest()
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable manifest %s: %s", path, exc)
        return BuildManifest()

    files = payload.get("files") if isinstance(payload, dict) else None
    if not isinstance(files, list):
        logger.warning("Ignoring malformed manifest %s", path)
        return BuildManifest()
    return BuildManifest.from_names(name for name in files if isinstance(name, str))


def stale_paths(
    previous: BuildManifest, output_dir: Path, keep: Collection[str] = ()
) -> List[Path]:
    """Return previously generated files that are safe to delete.

    A recorded name qualifies only when it carries the managed suffix, its
    resolved parent is exactly the output directory, and it is not in ``keep``.
    """
    root = output_dir.resolve()
    paths: List[Path] = []
    for name in previous.sorted_files():
        if name in keep:
            continue
        if not name.endswith(MANAGED_SUFFIX):
            logger.debug("Skipping unmanaged manifest entry %s", name)
            continue
        candidate = (root / name).resolve()
        if candidate.parent != root:
            logger.warning("Refusing to delete %s outside %s", name, root)
            continue
        paths.append(candidate)
    return paths


def remove_stale(paths: Collection[Path]) -> List[Path]:
    removed: List[Path] = []
    for path in paths:
        if path.is_file():
            path.unlink()
            removed.append(path)
            logger.debug("Removed stale page %s", path.name)
    return removed


def write_outputs(output_dir: Path, rendered: Mapping[str, str]) -> BuildManifest:
    """Write every rendered page and return the manifest of exactly those names.

    Pages whose bytes are unchanged are left untouched. The first failing
    write propagates; files already written stay in place.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    root = output_dir.resolve()
    written: List[str] = []
    for name, content in rendered.items():
        target = _safe_target(root, name)
        data = content.encode("utf-8")
        if target.is_file() and target.read_bytes() == data:
            logger.debug("%s unchanged", name)
        else:
            target.write_bytes(data)
            logger.debug("Wrote %s", name)
        written.append(name)
    return BuildManifest.from_names(written)


def save_manifest(output_dir: Path, manifest: BuildManifest) -> Path:
    path = manifest_path(output_dir)
    payload = {"files": manifest.sorted_files()}
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return path


def _safe_target(root: Path, name: str) -> Path:
    target = (root / name).resolve()
    if target.parent != root or not name.endswith(MANAGED_SUFFIX):
        raise UnsafePathError(f"Refusing to write {name!r} outside {root}")
    return target


class ManifestTracker:
    """Pre-clean and commit steps for one build against one output directory."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir
        self.previous = load_manifest(output_dir)

    def pre_clean(self, keep: Collection[str] = ()) -> List[Path]:
        """Delete previously generated pages that are not about to be rewritten."""
        return remove_stale(stale_paths(self.previous, self.output_dir, keep))

    def commit(self, rendered: Mapping[str, str]) -> BuildManifest:
        """Write the rendered pages, then record them as the new manifest."""
        manifest = write_outputs(self.output_dir, rendered)
        save_manifest(self.output_dir, manifest)
        return manifest


__all__ = [
    "MANAGED_SUFFIX",
    "MANIFEST_FILENAME",
    "ManifestTracker",
    "load_manifest",
    "remove_stale",
    "save_manifest",
    "stale_paths",
    "write_outputs",
]
