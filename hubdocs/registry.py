"""Loading and validation of the example hub registry (scripts/examples.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from .errors import RegistryError

_REQUIRED_FIELDS = ("name", "description", "contract_name", "category")


@dataclass(frozen=True)
class ExampleEntry:
    """A validated catalog entry describing one example project."""

    key: str
    name: str
    description: str
    contract_name: str
    category: str
    contract_code: str
    test_code: str
    documentation: Optional[str] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)


def load_registry(path: Path, *, root: Path | None = None) -> List[ExampleEntry]:
    """Read the registry descriptor and return its entries in catalog order.

    ``*_file`` fields are resolved relative to ``root`` (the project root),
    defaulting to the directory that holds the descriptor.
    """
    if not path.exists():
        raise RegistryError(f"Registry descriptor not found: {path}")

    base = (root or path.parent).resolve()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise RegistryError(f"Failed to parse {path.name}: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("examples"), dict):
        raise RegistryError(f"{path.name} must contain an 'examples' mapping")

    return [
        build_entry(str(key), raw, base=base) for key, raw in data["examples"].items()
    ]


def build_entry(key: str, raw: Any, *, base: Path | None = None) -> ExampleEntry:
    """Validate one raw registry record into an :class:`ExampleEntry`."""
    if not isinstance(raw, Mapping):
        raise RegistryError(f"Registry entry '{key}' must be a mapping")

    values: Dict[str, str] = {}
    for name in _REQUIRED_FIELDS:
        value = raw.get(name)
        if not isinstance(value, str) or not value.strip():
            raise RegistryError(f"Registry entry '{key}' is missing required field '{name}'")
        values[name] = value.strip()

    contract_code = _read_text_field(key, raw, "contract", base)
    if contract_code is None:
        raise RegistryError(
            f"Registry entry '{key}' needs 'contract_code' or 'contract_file'"
        )
    test_code = _read_text_field(key, raw, "test", base)
    if test_code is None:
        raise RegistryError(f"Registry entry '{key}' needs 'test_code' or 'test_file'")
    documentation = _read_text_field(key, raw, "documentation", base)

    tags_raw = raw.get("tags") or []
    if not isinstance(tags_raw, list):
        raise RegistryError(f"Registry entry '{key}' field 'tags' must be a list")

    return ExampleEntry(
        key=key,
        name=values["name"],
        description=values["description"],
        contract_name=values["contract_name"],
        category=values["category"],
        contract_code=contract_code,
        test_code=test_code,
        documentation=documentation,
        tags=tuple(str(tag) for tag in tags_raw),
    )


def _read_text_field(
    key: str, raw: Mapping[str, Any], prefix: str, base: Path | None
) -> Optional[str]:
    # ``documentation`` is the inline form; ``contract``/``test`` use ``*_code``.
    inline_name = prefix if prefix == "documentation" else f"{prefix}_code"
    inline = raw.get(inline_name)
    if inline is not None:
        if not isinstance(inline, str):
            raise RegistryError(f"Registry entry '{key}' field '{inline_name}' must be a string")
        return inline

    file_name = raw.get(f"{prefix}_file")
    if file_name is None:
        return None
    if not isinstance(file_name, str) or base is None:
        raise RegistryError(f"Registry entry '{key}' field '{prefix}_file' cannot be resolved")
    file_path = base / file_name
    try:
        return file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RegistryError(
            f"Registry entry '{key}' references unreadable file {file_name}: {exc}"
        ) from exc


__all__ = ["ExampleEntry", "build_entry", "load_registry"]
