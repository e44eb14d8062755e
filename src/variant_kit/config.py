"""Runtime configuration for variant-kit commands."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from .mcp_presets import parse_mcp_presets


def _parse_bool(value: Any, default: Optional[bool] = None) -> Optional[bool]:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "y", "on"}:
        return True
    if text in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _parse_preset_list(value: Any) -> Optional[list[str]]:
    if isinstance(value, str):
        return parse_mcp_presets(value)
    if isinstance(value, list):
        return parse_mcp_presets(",".join(str(item) for item in value))
    return None


def _read_config_file(path: str) -> dict[str, Any]:
    data = Path(path).read_text(encoding="utf-8")
    suffix = Path(path).suffix.lower()
    if suffix in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:
            raise ValueError(
                "YAML config requested but PyYAML is not installed. "
                "Install `pyyaml` or use JSON config."
            ) from exc
        try:
            parsed = yaml.safe_load(data) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    else:
        parsed = json.loads(data)
    if not isinstance(parsed, dict):
        raise ValueError("variant-kit config must be a mapping object")
    return parsed


@dataclass
class ToolkitConfig:
    """Resolved config after file/env/CLI merge."""

    verbose: bool = False
    config_dir: str = field(default_factory=lambda: str(Path.home()))
    backup: bool = True
    default_presets: list[str] = field(default_factory=list)
    source_path: Optional[str] = None


def _apply_file_config(cfg: ToolkitConfig, config_data: dict) -> ToolkitConfig:
    toolkit = config_data.get("toolkit", {})
    if isinstance(toolkit, dict):
        if _parse_bool(toolkit.get("verbose")) is not None:
            cfg.verbose = bool(_parse_bool(toolkit.get("verbose")))
        if isinstance(toolkit.get("config_dir"), str) and toolkit["config_dir"]:
            cfg.config_dir = toolkit["config_dir"]
        if _parse_bool(toolkit.get("backup")) is not None:
            cfg.backup = bool(_parse_bool(toolkit.get("backup")))

    mcp = config_data.get("mcp", {})
    if isinstance(mcp, dict):
        presets = _parse_preset_list(mcp.get("presets"))
        if presets is not None:
            cfg.default_presets = presets
    return cfg


def _apply_env(cfg: ToolkitConfig, env: Mapping[str, str]) -> ToolkitConfig:
    if _parse_bool(env.get("VARIANT_KIT_VERBOSE")) is not None:
        cfg.verbose = bool(_parse_bool(env.get("VARIANT_KIT_VERBOSE")))
    if env.get("VARIANT_KIT_CONFIG_DIR"):
        cfg.config_dir = env["VARIANT_KIT_CONFIG_DIR"]
    if _parse_bool(env.get("VARIANT_KIT_BACKUP")) is not None:
        cfg.backup = bool(_parse_bool(env.get("VARIANT_KIT_BACKUP")))
    if env.get("VARIANT_KIT_PRESETS"):
        cfg.default_presets = parse_mcp_presets(env["VARIANT_KIT_PRESETS"])
    return cfg


def _apply_cli_overrides(cfg: ToolkitConfig, cli: Mapping[str, Any]) -> ToolkitConfig:
    if cli.get("verbose") is not None:
        cfg.verbose = bool(cli["verbose"])
    if cli.get("config_dir"):
        cfg.config_dir = str(cli["config_dir"])
    if cli.get("backup") is not None:
        cfg.backup = bool(cli["backup"])
    return cfg


def load_toolkit_config(
    config_path: Optional[str] = None,
    cli_overrides: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> ToolkitConfig:
    """Resolve config from defaults + file + env + CLI."""
    env_map = os.environ if env is None else env
    cli = dict(cli_overrides or {})
    cfg = ToolkitConfig()

    resolved_path = config_path or env_map.get("VARIANT_KIT_CONFIG")
    if resolved_path:
        cfg = _apply_file_config(cfg, _read_config_file(resolved_path))
        cfg.source_path = resolved_path

    cfg = _apply_env(cfg, env_map)
    cfg = _apply_cli_overrides(cfg, cli)

    cfg.config_dir = os.path.expanduser(cfg.config_dir)
    return cfg
