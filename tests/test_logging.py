# tests/test_logging.py
"""Tests for session-based logging setup."""

import logging


class TestSetupLogging:

    def test_creates_session_file(self, tmp_path):
        from contractgen.utils.logging import get_current_log_file, get_session_id, setup_logging

        log_file = setup_logging(level="DEBUG", log_dir=tmp_path)

        assert log_file.parent == tmp_path
        assert log_file.name.startswith("contractgen_")
        assert log_file.name.endswith(f"_{get_session_id()}.log")
        assert get_current_log_file() == log_file
        assert "logging session started" in log_file.read_text(encoding="utf-8")

    def test_latest_symlink(self, tmp_path):
        from contractgen.utils.logging import SYMLINK_NAME, setup_logging

        log_file = setup_logging(log_dir=tmp_path)
        link = tmp_path / SYMLINK_NAME
        if link.is_symlink():
            assert link.resolve() == log_file.resolve()

    def test_module_loggers_write_with_session_id(self, tmp_path):
        from contractgen.utils.logging import get_logger, get_session_id, setup_logging

        log_file = setup_logging(level="INFO", log_dir=tmp_path)
        get_logger("contractgen.patch").info("patched schema")

        lines = [l for l in log_file.read_text(encoding="utf-8").splitlines() if "patched schema" in l]
        assert len(lines) == 1
        assert get_session_id() in lines[0]
        assert "contractgen.patch" in lines[0]

    def test_level_filters_debug(self, tmp_path):
        from contractgen.utils.logging import get_logger, setup_logging

        log_file = setup_logging(level="WARNING", log_dir=tmp_path)
        get_logger(__name__).info("quiet")
        get_logger(__name__).warning("loud")

        text = log_file.read_text(encoding="utf-8")
        assert "quiet" not in text
        assert "loud" in text

    def test_env_log_dir(self, tmp_path, monkeypatch):
        from contractgen.utils.logging import get_log_directory

        monkeypatch.setenv("CONTRACTGEN_LOG_DIR", str(tmp_path / "elsewhere"))
        assert get_log_directory() == tmp_path / "elsewhere"

    def test_get_logger_namespaces(self):
        from contractgen.utils.logging import get_logger

        assert get_logger("build").name == "contractgen.build"
        assert get_logger("contractgen.cli").name == "contractgen.cli"

    def test_repeated_setup_replaces_handlers(self, tmp_path):
        from contractgen.utils.logging import setup_logging

        setup_logging(log_dir=tmp_path / "a")
        setup_logging(log_dir=tmp_path / "b")
        handlers = logging.getLogger("contractgen").handlers
        assert len(handlers) == 1
