"""Configuration loading for hubdocs (.hubdocs.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .models import DEFAULT_CHAPTER

CONFIG_FILENAME = ".hubdocs.yml"
DEFAULT_REGISTRY_PATH = "scripts/examples.yml"


@dataclass
class RegistryConfig:
    """Location of the hub registry descriptor."""

    path: str = DEFAULT_REGISTRY_PATH


@dataclass
class SourcesConfig:
    """Directory roots and suffixes scanned in filesystem mode."""

    contracts_dir: str = "contracts"
    tests_dir: str = "test"
    contract_suffix: str = ".sol"
    test_suffix: str = ".test.ts"


@dataclass
class OutputConfig:
    """Rendering options for the generated documentation set."""

    title: str = "FHEVM Examples"
    default_chapter: str = DEFAULT_CHAPTER
    include_functions: bool = False
    templates_dir: Optional[Path] = None


@dataclass
class HubDocsConfig:
    """Represents the settings defined in .hubdocs.yml."""

    root: Path
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @property
    def registry_path(self) -> Path:
        return self.root / self.registry.path

    @property
    def contracts_root(self) -> Path:
        return self.root / self.sources.contracts_dir

    @property
    def tests_root(self) -> Path:
        return self.root / self.sources.tests_dir


def load_config(config_path: Path) -> HubDocsConfig:
    """Load configuration from disk, returning defaults when no file exists."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return HubDocsConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    registry = RegistryConfig()
    registry_data = _as_dict(data.get("registry"))
    if registry_data:
        registry.path = _as_str(registry_data.get("path")) or DEFAULT_REGISTRY_PATH

    sources = SourcesConfig()
    sources_data = _as_dict(data.get("sources"))
    if sources_data:
        sources.contracts_dir = _as_str(sources_data.get("contracts_dir")) or sources.contracts_dir
        sources.tests_dir = _as_str(sources_data.get("tests_dir")) or sources.tests_dir
        sources.contract_suffix = (
            _as_str(sources_data.get("contract_suffix")) or sources.contract_suffix
        )
        sources.test_suffix = _as_str(sources_data.get("test_suffix")) or sources.test_suffix

    output = OutputConfig()
    output_data = _as_dict(data.get("output"))
    if output_data:
        output.title = _as_str(output_data.get("title")) or output.title
        output.default_chapter = (
            _as_str(output_data.get("default_chapter")) or output.default_chapter
        )
        include_functions = _as_bool(output_data.get("include_functions"))
        if include_functions is not None:
            output.include_functions = include_functions
        templates_dir = _as_str(output_data.get("templates_dir"))
        output.templates_dir = root / templates_dir if templates_dir else None

    return HubDocsConfig(root=root, registry=registry, sources=sources, output=output)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None
