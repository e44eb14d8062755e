"""Register MCP presets in a variant's ``.claude.json``."""

from __future__ import annotations

import logging
from pathlib import Path

from .fs import ensure_dir, read_json, write_json
from .mcp_presets import get_mcp_preset, get_mcp_server_name

logger = logging.getLogger(__name__)

CLAUDE_CONFIG_FILE = ".claude.json"
SERVERS_KEY = "mcpServers"


def get_claude_config_path(config_dir: str | Path) -> Path:
    return Path(config_dir) / CLAUDE_CONFIG_FILE


def _load_config(config_path: Path) -> dict:
    data = read_json(config_path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{config_path} is not a JSON object")
    return data


def _servers_of(config: dict, config_path: Path) -> dict:
    servers = config.get(SERVERS_KEY)
    if servers is None:
        return {}
    if not isinstance(servers, dict):
        raise ValueError(f"'{SERVERS_KEY}' in {config_path} is not a dict")
    return servers


def list_configured_mcp_servers(config_dir: str | Path) -> dict[str, dict]:
    """Return the ``mcpServers`` mapping, empty when the config is absent."""
    config_path = get_claude_config_path(config_dir)
    return dict(_servers_of(_load_config(config_path), config_path))


def ensure_mcp_presets(config_dir: str | Path, keys: list[str]) -> list[str]:
    """Add the server entry of each preset that is not configured yet.

    Unknown keys are skipped. The whole config is read and written back so
    unrelated settings survive. Returns the keys that were added.
    """
    config_path = get_claude_config_path(config_dir)
    config = _load_config(config_path)
    servers = dict(_servers_of(config, config_path))

    added: list[str] = []
    for key in keys:
        preset = get_mcp_preset(key)
        if preset is None:
            logger.debug("Skipping unknown MCP preset %r", key)
            continue
        server_name = get_mcp_server_name(key)
        if server_name in servers:
            logger.debug("MCP server %s already configured in %s", server_name, config_path)
            continue
        servers[server_name] = preset.server.to_dict()
        added.append(key)

    if added:
        config[SERVERS_KEY] = servers
        ensure_dir(config_dir)
        write_json(config_path, config)
        logger.info("Added MCP presets %s to %s", ", ".join(added), config_path)

    return added


def ensure_mcp_preset(config_dir: str | Path, key: str) -> bool:
    """Single-preset form of :func:`ensure_mcp_presets`."""
    return bool(ensure_mcp_presets(config_dir, [key]))
