"""Documentation generator for the FHEVM example hub."""

__version__ = "0.1.0"
