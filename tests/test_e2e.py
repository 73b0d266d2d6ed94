"""
End-to-End Tests - Full workflows through the command line.
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from proptab.reader import PropertiesReader
from proptab.table import PropertyTable
from proptab.spec import ASCII_ENV_VAR


PROJECT_ROOT = Path(__file__).parent.parent


def run_cli(*args, env=None):
    full_env = dict(os.environ)
    full_env.pop(ASCII_ENV_VAR, None)
    full_env["PYTHONIOENCODING"] = "utf-8"
    if env:
        full_env.update(env)
    return subprocess.run(
        [sys.executable, "-m", "proptab.cli", *[str(a) for a in args]],
        capture_output=True, text=True, encoding="utf-8", cwd=PROJECT_ROOT, env=full_env,
    )


@pytest.fixture
def app_file(tmp_path):
    path = tmp_path / "app.properties"
    path.write_text(
        "# application settings\n"
        "server.host = localhost\n"
        "server.port : 8080\n"
        "greeting = hello \\\n"
        "           world\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def defaults_file(tmp_path):
    path = tmp_path / "defaults.properties"
    path.write_text("server.port=80\nlog.level=info\n", encoding="utf-8")
    return path


class TestCLIBasics:

    def test_no_command_prints_usage(self):
        result = run_cli()
        assert result.returncode == 0
        assert "Usage:" in result.stdout

    def test_help(self):
        result = run_cli("--help")
        assert result.returncode == 0
        assert "get" in result.stdout
        assert "convert" in result.stdout

    def test_version(self):
        from proptab import __version__
        result = run_cli("--version")
        assert result.returncode == 0
        assert f"proptab {__version__}" in result.stdout


class TestCLIWorkflow:
    """Edit a file the way a user would, one command at a time."""

    def test_get(self, app_file):
        result = run_cli("get", app_file, "greeting")
        assert result.returncode == 0
        assert result.stdout == "hello world\n"

    def test_get_missing_key(self, app_file):
        result = run_cli("get", app_file, "nope")
        assert result.returncode == 1
        assert "not found" in result.stderr

    def test_get_missing_file(self, tmp_path):
        result = run_cli("get", tmp_path / "missing.properties", "k")
        assert result.returncode == 1
        assert "Error: File not found" in result.stderr

    def test_get_from_defaults(self, app_file, defaults_file):
        result = run_cli("get", app_file, "log.level", "-d", defaults_file)
        assert result.stdout == "info\n"
        result = run_cli("get", app_file, "server.port", "-d", defaults_file)
        assert result.stdout == "8080\n"

    def test_keys(self, app_file, defaults_file):
        result = run_cli("keys", app_file, "-d", defaults_file)
        assert result.returncode == 0
        assert result.stdout.splitlines() == [
            "greeting", "log.level", "server.host", "server.port",
        ]

    def test_set_then_get(self, tmp_path):
        path = tmp_path / "new.properties"
        result = run_cli("set", path, "name with space", "caf\u00e9")
        assert result.returncode == 0
        assert "Updated" in result.stdout
        assert path.read_bytes() == "name\\ with\\ space=caf\u00e9\n".encode("utf-8")

        result = run_cli("get", path, "name with space")
        assert result.stdout == "caf\u00e9\n"

    def test_set_ascii_from_environment(self, tmp_path):
        path = tmp_path / "env.properties"
        result = run_cli("set", path, "k", "\u20ac", env={ASCII_ENV_VAR: "1"})
        assert result.returncode == 0
        assert path.read_bytes() == b"k=\\u20ac\n"

    def test_delete(self, app_file):
        result = run_cli("delete", app_file, "server.host")
        assert result.returncode == 0
        table = PropertiesReader.read(app_file)
        assert "server.host" not in table
        assert table.get("server.port") == "8080"

    def test_delete_missing_key(self, app_file):
        result = run_cli("delete", app_file, "nope")
        assert result.returncode == 1

    def test_dump_ascii_with_comment(self, tmp_path):
        path = tmp_path / "dump.properties"
        path.write_text("euro = \u20ac\n", encoding="utf-8")
        result = run_cli("dump", path, "--ascii", "-c", "Generated")
        assert result.returncode == 0
        assert result.stdout.splitlines() == ["#Generated", "euro=\\u20ac"]

    def test_dump_to_file(self, app_file, tmp_path):
        out = tmp_path / "out.properties"
        result = run_cli("dump", app_file, "-o", out)
        assert result.returncode == 0
        assert PropertiesReader.read(out).data == PropertiesReader.read(app_file).data


class TestCLIConvert:

    def test_json_round_trip(self, app_file, tmp_path):
        json_path = tmp_path / "app.json"
        result = run_cli("convert", "to", "json", app_file, "-o", json_path)
        assert result.returncode == 0
        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert data["greeting"] == "hello world"

        back = tmp_path / "back.properties"
        result = run_cli("convert", "from", "json", json_path, "-o", back)
        assert result.returncode == 0
        assert PropertiesReader.read(back).data == PropertiesReader.read(app_file).data

    def test_csv_to_stdout(self, app_file):
        result = run_cli("convert", "to", "csv", app_file)
        assert result.returncode == 0
        assert result.stdout.splitlines()[0] == "key,value"

    def test_from_invalid_json(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("[1, 2]", encoding="utf-8")
        result = run_cli("convert", "from", "json", bad, "-o", tmp_path / "x.properties")
        assert result.returncode == 1
        assert "Error:" in result.stderr


class TestLibraryWorkflow:

    def test_layered_configuration(self, tmp_path):
        base = PropertyTable({"host": "localhost", "port": "8080"})
        base_path = tmp_path / "base.properties"
        base.write(str(base_path), "base settings")

        local = PropertyTable.with_defaults(PropertiesReader.read(base_path))
        local.loads("port = 9090\n")
        local_path = tmp_path / "local.properties"
        local.write(str(local_path))

        loaded = PropertiesReader.read_chain(local_path, [base_path])
        assert loaded.get("host") == "localhost"
        assert loaded.get("port") == "9090"
        assert local_path.read_text(encoding="utf-8") == "port=9090\n"


class TestMainInProcess:
    """Call cli.main() directly, without a subprocess."""

    def test_get(self, app_file, capsys):
        from proptab.cli import main
        main(["get", str(app_file), "server.host"])
        assert capsys.readouterr().out == "localhost\n"

    def test_missing_key_exits_1(self, app_file, capsys):
        from proptab.cli import main
        with pytest.raises(SystemExit) as exc:
            main(["get", str(app_file), "nope"])
        assert exc.value.code == 1
        assert "not found" in capsys.readouterr().err

    def test_oversized_json_is_an_error(self, tmp_path, capsys, monkeypatch):
        from proptab import cli
        monkeypatch.setattr("proptab.spec.MAX_FILE_SIZE", 4)
        src = tmp_path / "big.json"
        src.write_text('{"a": "1"}', encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            cli.main(["convert", "from", "json", str(src), "-o", str(tmp_path / "o.properties")])
        assert exc.value.code == 1
        assert "exceeds maximum" in capsys.readouterr().err

    def test_verbose_logs_debug(self, app_file, caplog):
        import logging
        from proptab.cli import main
        with caplog.at_level(logging.DEBUG, logger="proptab"):
            main(["-v", "keys", str(app_file)])
        assert any("loaded 3 records" in r.getMessage() for r in caplog.records)
