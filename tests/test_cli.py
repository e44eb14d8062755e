"""Tests for the variant-kit command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from variant_kit.cli import main
from variant_kit.fs import BACKUP_DIR_NAME

DISABLED = 'let t="TodoWrite";x={isEnabled(){return!gQ()}};function gQ(){return!1}'


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    for name in (
        "VARIANT_KIT_CONFIG",
        "VARIANT_KIT_CONFIG_DIR",
        "VARIANT_KIT_BACKUP",
        "VARIANT_KIT_PRESETS",
        "VARIANT_KIT_VERBOSE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


def _bundle(tmp_path: Path, content: str = DISABLED) -> Path:
    path = tmp_path / "cli.js"
    path.write_text(content, encoding="utf-8")
    return path


class TestTeamMode:
    def test_status(self, tmp_path, capsys):
        assert main(["team-mode", "status", str(_bundle(tmp_path))]) == 0
        assert "Team mode: disabled" in capsys.readouterr().out

    def test_status_unknown_is_error(self, tmp_path, capsys):
        path = _bundle(tmp_path, "var nothing=1;")
        assert main(["team-mode", "status", str(path)]) == 1
        assert "could not detect the team mode gate" in capsys.readouterr().err

    def test_status_missing_file(self, tmp_path, capsys):
        assert main(["team-mode", "status", str(tmp_path / "missing.js")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_enable(self, tmp_path, capsys):
        path = _bundle(tmp_path)
        assert main(["team-mode", "enable", str(path)]) == 0
        out = capsys.readouterr().out
        assert "Team mode enabled" in out
        assert "Backup:" in out
        assert "function gQ(){return!0}" in path.read_text(encoding="utf-8")

    def test_enable_twice_reports_already(self, tmp_path, capsys):
        path = _bundle(tmp_path)
        main(["team-mode", "enable", str(path), "--no-backup"])
        capsys.readouterr()
        assert main(["team-mode", "enable", str(path)]) == 0
        assert "already enabled" in capsys.readouterr().out

    def test_disable_no_backup(self, tmp_path):
        path = _bundle(tmp_path, DISABLED.replace("return!1", "return!0"))
        assert main(["team-mode", "disable", str(path), "--no-backup"]) == 0
        assert "function gQ(){return!1}" in path.read_text(encoding="utf-8")
        assert not (tmp_path / BACKUP_DIR_NAME).exists()

    def test_dry_run(self, tmp_path, capsys):
        path = _bundle(tmp_path)
        assert main(["team-mode", "enable", str(path), "--dry-run"]) == 0
        assert "(dry-run)" in capsys.readouterr().out
        assert path.read_text(encoding="utf-8") == DISABLED

    def test_enable_unknown_is_error(self, tmp_path, capsys):
        path = _bundle(tmp_path, "var nothing=1;")
        assert main(["team-mode", "enable", str(path)]) == 1
        assert "no changes were made" in capsys.readouterr().err
        assert path.read_text(encoding="utf-8") == "var nothing=1;"

    def test_status_non_utf8_bundle_is_error(self, tmp_path, capsys):
        path = tmp_path / "cli.js"
        path.write_bytes(b'const x="TodoWrite";\xff\xfe')
        assert main(["team-mode", "status", str(path)]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_enable_non_utf8_bundle_is_error(self, tmp_path, capsys):
        path = tmp_path / "cli.js"
        path.write_bytes(b'const x="TodoWrite";\xff\xfe')
        assert main(["team-mode", "enable", str(path)]) == 1
        assert "Error:" in capsys.readouterr().err
        assert path.read_bytes() == b'const x="TodoWrite";\xff\xfe'

    def test_backup_disabled_by_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VARIANT_KIT_BACKUP", "false")
        path = _bundle(tmp_path)
        assert main(["team-mode", "enable", str(path)]) == 0
        assert not (tmp_path / BACKUP_DIR_NAME).exists()


class TestMcp:
    def test_list(self, capsys):
        assert main(["mcp", "list"]) == 0
        out = capsys.readouterr().out
        assert "codex: Codex Subagent (codex-subagent)" in out
        assert "Command: uvx codex-as-mcp@latest" in out
        assert "Command: npx -y gemini-mcp-tool" in out
        assert "Warning:" in out

    def test_add(self, tmp_path, capsys):
        config_dir = tmp_path / "variant"
        assert main(["mcp", "add", "codex,gemini", "--config-dir", str(config_dir)]) == 0
        out = capsys.readouterr().out
        assert "[+] codex-subagent: added (codex)" in out
        assert "2 added" in out
        data = json.loads((config_dir / ".claude.json").read_text(encoding="utf-8"))
        assert set(data["mcpServers"]) == {"codex-subagent", "gemini-cli"}

    def test_add_again_reports_existing(self, tmp_path, capsys):
        config_dir = tmp_path / "variant"
        main(["mcp", "add", "codex", "--config-dir", str(config_dir)])
        capsys.readouterr()
        assert main(["mcp", "add", "codex", "--config-dir", str(config_dir)]) == 0
        out = capsys.readouterr().out
        assert "[~] codex-subagent: already configured" in out
        assert "0 added" in out

    def test_add_warns_about_unknown(self, tmp_path, capsys):
        config_dir = tmp_path / "variant"
        assert main(["mcp", "add", "bogus,gemini", "--config-dir", str(config_dir)]) == 0
        captured = capsys.readouterr()
        assert "Unknown preset skipped: bogus" in captured.err
        assert "[+] gemini-cli: added (gemini)" in captured.out

    def test_add_dry_run(self, tmp_path, capsys):
        config_dir = tmp_path / "variant"
        assert main(["mcp", "add", "codex", "--config-dir", str(config_dir), "--dry-run"]) == 0
        assert "[+] codex-subagent: added (codex)" in capsys.readouterr().out
        assert not (config_dir / ".claude.json").exists()

    def test_add_uses_configured_presets(self, tmp_path, monkeypatch):
        config_dir = tmp_path / "variant"
        monkeypatch.setenv("VARIANT_KIT_PRESETS", "gemini")
        monkeypatch.setenv("VARIANT_KIT_CONFIG_DIR", str(config_dir))
        assert main(["mcp", "add"]) == 0
        data = json.loads((config_dir / ".claude.json").read_text(encoding="utf-8"))
        assert list(data["mcpServers"]) == ["gemini-cli"]

    def test_add_without_presets_is_error(self, tmp_path, capsys):
        assert main(["mcp", "add", "--config-dir", str(tmp_path)]) == 1
        assert "no presets given" in capsys.readouterr().err

    def test_add_rejects_non_object_config(self, tmp_path, capsys):
        (tmp_path / ".claude.json").write_text("[]", encoding="utf-8")
        assert main(["mcp", "add", "codex", "--config-dir", str(tmp_path)]) == 1
        assert "not a JSON object" in capsys.readouterr().err

    def test_status(self, tmp_path, capsys):
        main(["mcp", "add", "gemini", "--config-dir", str(tmp_path)])
        capsys.readouterr()
        assert main(["mcp", "status", "--config-dir", str(tmp_path)]) == 0
        out = capsys.readouterr().out
        assert "[*] gemini: gemini-cli" in out
        assert "[ ] codex: codex-subagent" in out


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage:" in capsys.readouterr().out


def test_bad_config_file(tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text("[1]", encoding="utf-8")
    assert main(["--config", str(bad), "mcp", "list"]) == 1
    assert "failed to load config" in capsys.readouterr().err


def test_malformed_yaml_config(tmp_path, capsys):
    pytest.importorskip("yaml")
    bad = tmp_path / "bad.yaml"
    bad.write_text("toolkit: [unclosed\n", encoding="utf-8")
    assert main(["--config", str(bad), "mcp", "list"]) == 1
    assert "failed to load config" in capsys.readouterr().err
