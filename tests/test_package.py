# tests/test_package.py
"""Tests for top-level package API."""

import importlib.util
from pathlib import Path


class TestPackageImports:
    """Verify the public API surface."""

    def test_version(self):
        import contractgen

        assert contractgen.__version__ == "0.1.0"

    def test_public_api(self):
        import contractgen

        for name in contractgen.__all__:
            assert hasattr(contractgen, name), name

    def test_cli_importable(self):
        from contractgen.cli import cli

        assert callable(cli)

    def test_submodules_not_shadowed(self):
        import types

        import contractgen

        assert isinstance(contractgen.codegen, types.ModuleType)
        assert callable(contractgen.codegen.generate_types)


class TestCodegenScript:
    """scripts/codegen.py drives the build from a repository root."""

    def _load(self):
        path = Path(__file__).resolve().parents[1] / "scripts" / "codegen.py"
        spec = importlib.util.spec_from_file_location("codegen_script", path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    def test_main_generates_bindings(self, contracts_dir, tmp_path, monkeypatch, capsys):
        from contractgen.config import get_config

        monkeypatch.setenv("CONTRACTGEN_GENERATE_TYPES", "false")
        get_config.cache_clear()

        script = self._load()
        repo = contracts_dir.parent
        assert script.main(["--root", str(repo)]) == 0

        assert (repo / "sdk" / "contracts" / "__init__.py").is_file()
        assert "generated successfully" in capsys.readouterr().out

    def test_main_reports_errors(self, tmp_path, capsys):
        script = self._load()
        assert script.main(["--root", str(tmp_path / "empty"), "--no-patch"]) == 1
        assert "Contracts directory not found" in capsys.readouterr().err
