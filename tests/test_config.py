# tests/test_config.py
"""Tests for ContractgenConfig: Pydantic Settings single source of truth."""

from pathlib import Path


class TestContractgenConfig:
    """Test ContractgenConfig defaults and overrides."""

    def test_default_values(self):
        """Config should have sensible defaults without any env vars."""
        from contractgen.config import ContractgenConfig

        cfg = ContractgenConfig()
        assert cfg.contracts_dir == Path("contracts")
        assert cfg.out_dir == Path("generated/contracts")
        assert cfg.patch_contract == "transmuter"
        assert cfg.patch_overwrite is True
        assert cfg.bundle_file == "__init__.py"
        assert cfg.bundle_scope == "contracts"
        assert cfg.generate_types is True
        assert cfg.generate_client is True
        assert cfg.target_python_version == "3.10"

    def test_env_override(self, monkeypatch):
        """Environment variables with CONTRACTGEN_ prefix override defaults."""
        from contractgen.config import ContractgenConfig

        monkeypatch.setenv("CONTRACTGEN_CONTRACTS_DIR", "/srv/contracts")
        monkeypatch.setenv("CONTRACTGEN_GENERATE_TYPES", "false")
        monkeypatch.setenv("CONTRACTGEN_BUNDLE_SCOPE", "bindings")
        cfg = ContractgenConfig()
        assert cfg.contracts_dir == Path("/srv/contracts")
        assert cfg.generate_types is False
        assert cfg.bundle_scope == "bindings"

    def test_home_dir_from_env(self, isolated_home):
        from contractgen.config import ContractgenConfig

        cfg = ContractgenConfig()
        assert cfg.home_dir == isolated_home
        assert cfg.log_dir == isolated_home / "logs"

    def test_patch_target_default(self):
        from contractgen.config import ContractgenConfig

        cfg = ContractgenConfig(contracts_dir=Path("c"))
        assert cfg.patch_target == Path("c/transmuter/schema/transmuter.json")

    def test_patch_target_custom_file(self):
        from contractgen.config import ContractgenConfig

        cfg = ContractgenConfig(patch_contract="pool", patch_schema_file="raw.json")
        assert cfg.patch_target == Path("contracts/pool/schema/raw.json")

    def test_patch_disabled(self, monkeypatch):
        from contractgen.config import ContractgenConfig

        monkeypatch.setenv("CONTRACTGEN_PATCH_CONTRACT", "")
        assert ContractgenConfig().patch_target is None

    def test_get_config_singleton(self):
        """get_config() returns the same instance."""
        from contractgen.config import get_config

        assert get_config() is get_config()
