"""
Tests for the command line entry point and settings.
"""

import json
import logging

import pytest
from transcript.__main__ import main
from transcript.config import Settings, configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    """configure_logging replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def script(tmp_path):
    def write(text, name="page.html"):
        path = tmp_path / name
        path.write_text(text)
        return str(path)
    return write


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.permissive is False
        assert settings.log_level == "WARNING"

    @pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
    def test_permissive_truthy(self, raw):
        assert Settings.from_env({"TRANSCRIPT_PERMISSIVE": raw}).permissive is True

    @pytest.mark.parametrize("raw", ["", "0", "false", "no"])
    def test_permissive_falsy(self, raw):
        assert Settings.from_env({"TRANSCRIPT_PERMISSIVE": raw}).permissive is False

    def test_log_level(self):
        assert Settings.from_env({"TRANSCRIPT_LOG_LEVEL": "debug"}).log_level == "DEBUG"

    def test_configure_logging_rejects_unknown_level(self):
        with pytest.raises(ValueError):
            configure_logging("chatty")

    def test_configure_logging_sets_level(self):
        configure_logging("info")
        assert logging.getLogger().level == logging.INFO


class TestTokensCommand:
    """Test `tokens`."""

    def test_prints_tokens(self, script, capsys):
        path = script("<trans>let x = 5;</trans>")
        assert main(["tokens", path]) == 0
        out = capsys.readouterr().out
        assert "OPEN_TRANS_TAG" in out
        assert "LET" in out
        assert "'EndOfFile'" in out

    def test_aborted_scan(self, script, capsys):
        path = script("<trans>1 @</trans>")
        assert main(["tokens", path]) == 1
        captured = capsys.readouterr()
        assert "UNKNOWN" in captured.out
        assert "'UnexpectedEndOfFile'" in captured.out
        assert "E001" in captured.err


class TestAstCommand:
    """Test `ast`."""

    def test_prints_tree(self, script, capsys):
        path = script("<trans>let x = 1 + 2;</trans>")
        assert main(["ast", path]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Program")
        assert "BinaryExpr" in out

    def test_parse_error(self, script, capsys):
        path = script("<trans>const x;</trans>")
        assert main(["ast", path]) == 1
        assert "E106" in capsys.readouterr().err


class TestRunCommand:
    """Test `run`."""

    def test_prints_value(self, script, capsys):
        path = script("<p>hello</p><trans>let x = 5; x;</trans>")
        assert main(["run", path]) == 0
        assert capsys.readouterr().out == "5\n"

    def test_prints_object(self, script, capsys):
        path = script("<trans>let a = 1; { a, b: 2 }</trans>")
        assert main(["run", path]) == 0
        assert capsys.readouterr().out == "{ a: 1, b: 2 }\n"

    def test_runtime_error(self, script, capsys):
        path = script("<trans>1 / 0</trans>")
        assert main(["run", path]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "E406" in captured.err

    def test_permissive_flag(self, script, capsys):
        path = script("<trans>let x = 1 / 0; 3</trans>")
        assert main(["run", "--permissive", path]) == 1
        captured = capsys.readouterr()
        assert captured.out == "3\n"
        assert "E406" in captured.err

    def test_permissive_from_environment(self, script, capsys, monkeypatch):
        monkeypatch.setenv("TRANSCRIPT_PERMISSIVE", "1")
        path = script("<trans>missing; 4</trans>")
        assert main(["run", path]) == 1
        assert capsys.readouterr().out == "4\n"

    def test_json_output(self, script, capsys):
        path = script("<trans>let x = 2; x * 3 / 0</trans>")
        assert main(["run", "--json", path]) == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["success"] is False
        assert payload["value"] is None
        assert payload["error"] == "division by zero"
        assert payload["error_count"] == 1
        assert payload["diagnostics"][0]["code"] == "E406"
        assert payload["diagnostics"][0]["range"]["start"]["line"] == 1

    def test_json_success(self, script, capsys):
        path = script("<trans>{ a: 1 }</trans>")
        assert main(["run", "--json", path]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["success"] is True
        assert payload["value"] == {"a": 1}
        assert payload["diagnostics"] == []

    def test_missing_file(self, tmp_path, capsys):
        assert main(["run", str(tmp_path / "absent.html")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_log_level(self, script, capsys):
        path = script("<trans>1</trans>")
        assert main(["--log-level", "loud", "run", path]) == 2
        assert "Unknown log level" in capsys.readouterr().err
