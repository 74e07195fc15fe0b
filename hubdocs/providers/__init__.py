"""Source providers and mode selection."""

from __future__ import annotations

from .base import SourceProvider
from .filesystem import FilesystemProvider
from .registry import RegistryProvider
from ..config import HubDocsConfig
from ..errors import RegistryError
from ..registry import load_registry

HUB_MODE = "hub"
FILESYSTEM_MODE = "filesystem"


def resolve_mode(config: HubDocsConfig, *, force_hub: bool = False) -> str:
    """Return the build mode: forced hub, detected hub, or filesystem."""
    if force_hub:
        return HUB_MODE
    if config.registry_path.is_file():
        return HUB_MODE
    return FILESYSTEM_MODE


def build_provider(config: HubDocsConfig, mode: str) -> SourceProvider:
    """Instantiate the provider for an already-resolved mode."""
    if mode == HUB_MODE:
        if not config.registry_path.is_file():
            raise RegistryError(
                f"Hub mode requested but no registry found at {config.registry_path}"
            )
        return RegistryProvider(load_registry(config.registry_path, root=config.root))
    if mode == FILESYSTEM_MODE:
        return FilesystemProvider(
            config.contracts_root,
            config.tests_root,
            contract_suffix=config.sources.contract_suffix,
            test_suffix=config.sources.test_suffix,
        )
    raise ValueError(f"Unknown build mode: {mode}")


__all__ = [
    "FILESYSTEM_MODE",
    "HUB_MODE",
    "FilesystemProvider",
    "RegistryProvider",
    "SourceProvider",
    "build_provider",
    "resolve_mode",
]
