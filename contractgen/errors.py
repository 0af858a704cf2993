# contractgen/errors.py
"""Exception types raised by the contractgen pipeline.

Library modules raise these; the CLI turns them into ``click.ClickException``
so users get a one-line message instead of a traceback.
"""

from __future__ import annotations


class ContractgenError(Exception):
    """Base class for all contractgen failures."""


class DefinitionsError(ContractgenError):
    """Raised when a definitions patch file cannot be loaded."""


class SchemaPatchError(ContractgenError):
    """Raised when a schema file cannot be read, patched or written."""


class ContractsDirError(ContractgenError):
    """Raised when the contracts directory is missing or unreadable."""


class SchemaNotFoundError(ContractgenError):
    """Raised when a contract directory has no usable schema."""


class CodegenError(ContractgenError):
    """Raised when binding generation fails for a contract."""

    def __init__(self, contract: str, message: str) -> None:
        super().__init__(f"{contract}: {message}")
        self.contract = contract


class BuildError(ContractgenError):
    """Raised when the build refuses to run (e.g. unsafe output path)."""
