"""Exception hierarchy shared across hubdocs components."""

from __future__ import annotations


class HubDocsError(RuntimeError):
    """Base class for errors raised by the documentation generator."""


class ConfigError(HubDocsError):
    """Raised when the configuration file cannot be parsed."""


class RegistryError(HubDocsError):
    """Raised when the example registry is missing or malformed."""


class UnitConflictError(HubDocsError):
    """Raised when a source unit's documentation name is already taken.

    ``first_filename`` is the unit that claimed the name first, or ``None``
    when the name belongs to a generated page such as the index.
    """

    def __init__(self, name: str, filename: str, first_filename: str | None = None) -> None:
        if first_filename is None:
            message = f"Unit '{name}' from {filename} would overwrite the generated {name}.md page"
        else:
            message = f"Unit '{name}' from {filename} conflicts with the unit already parsed from {first_filename}"
        super().__init__(message)
        self.name = name
        self.filename = filename
        self.first_filename = first_filename


class UnsafePathError(HubDocsError):
    """Raised when an output path would escape the output directory."""


__all__ = [
    "ConfigError",
    "HubDocsError",
    "RegistryError",
    "UnitConflictError",
    "UnsafePathError",
]
