# contractgen/config.py
"""
contractgen configuration: single source of truth via Pydantic Settings.

Resolution order: CLI flags > env vars (CONTRACTGEN_*) > .env file > defaults.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ContractgenConfig(BaseSettings):
    """Central configuration for contractgen."""

    model_config = SettingsConfigDict(
        env_prefix="CONTRACTGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Layout ---
    contracts_dir: Path = Path("contracts")
    out_dir: Path = Path("generated/contracts")

    # --- Definitions patch ---
    # Empty string disables the patch step.
    patch_contract: str = "transmuter"
    # Defaults to "<patch_contract>.json" inside the contract's schema folder.
    patch_schema_file: Optional[str] = None
    patch_overwrite: bool = True
    definitions_file: Optional[Path] = None

    # --- Codegen ---
    bundle_file: str = "__init__.py"
    bundle_scope: str = "contracts"
    generate_types: bool = True
    generate_client: bool = True
    target_python_version: str = "3.10"

    # --- Paths ---
    home_dir: Path = Field(default_factory=lambda: Path.home() / ".contractgen")

    @property
    def log_dir(self) -> Path:
        return self.home_dir / "logs"

    @property
    def patch_target(self) -> Optional[Path]:
        """Schema file the definitions patch is applied to, if any."""
        if not self.patch_contract:
            return None
        filename = self.patch_schema_file or f"{self.patch_contract}.json"
        return self.contracts_dir / self.patch_contract / "schema" / filename


@lru_cache(maxsize=1)
def get_config() -> ContractgenConfig:
    """Return the global config singleton."""
    return ContractgenConfig()
