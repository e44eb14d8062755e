"""Pre-configured MCP servers that delegate work to other coding agents.

Preset keys and the server names they map to are written into user configs,
so both must stay stable once published.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class McpServerConfig:
    command: str
    args: tuple[str, ...] = ()
    env: Optional[dict[str, str]] = None

    def to_dict(self) -> dict:
        """Entry shape stored under ``mcpServers``."""
        entry: dict = {"command": self.command, "args": list(self.args)}
        if self.env:
            entry["env"] = dict(self.env)
        return entry


@dataclass(frozen=True)
class McpPreset:
    key: str
    label: str
    description: str
    server: McpServerConfig
    prerequisites: tuple[str, ...] = ()
    warning: Optional[str] = None


@dataclass
class PresetValidation:
    valid: list[str] = field(default_factory=list)
    unknown: list[str] = field(default_factory=list)


# https://github.com/evilpsycho42/codex-as-mcp
CODEX_PRESET = McpPreset(
    key="codex",
    label="Codex Subagent",
    description="Delegate coding tasks to OpenAI Codex CLI with spawn_agent and spawn_agents_parallel tools",
    server=McpServerConfig(command="uvx", args=("codex-as-mcp@latest",)),
    prerequisites=(
        "Codex CLI v0.46.0+ installed",
        "Non-interactive auth configured in ~/.codex/config.toml",
    ),
    warning="Uses --full-auto flag granting command execution and file editing permissions",
)

# https://github.com/jamubc/gemini-mcp-tool
GEMINI_PRESET = McpPreset(
    key="gemini",
    label="Gemini CLI",
    description="Query Google Gemini for large file analysis (1M+ tokens) and sandboxed code execution",
    server=McpServerConfig(command="npx", args=("-y", "gemini-mcp-tool")),
    prerequisites=(
        "Node.js v16.0.0+",
        "Google Gemini CLI installed and configured",
    ),
)

_MCP_PRESETS: tuple[McpPreset, ...] = (CODEX_PRESET, GEMINI_PRESET)

_SERVER_NAMES = {
    "codex": "codex-subagent",
    "gemini": "gemini-cli",
}


def list_mcp_presets() -> list[McpPreset]:
    return list(_MCP_PRESETS)


def get_mcp_preset(key: str) -> Optional[McpPreset]:
    for preset in _MCP_PRESETS:
        if preset.key == key:
            return preset
    return None


def parse_mcp_presets(text: Optional[str]) -> list[str]:
    """Parse comma-separated preset keys, keeping only known ones in order."""
    if not text:
        return []
    keys = [part.strip().lower() for part in text.split(",")]
    return [key for key in keys if get_mcp_preset(key) is not None]


def validate_mcp_presets(keys: list[str]) -> PresetValidation:
    result = PresetValidation()
    for key in keys:
        if get_mcp_preset(key) is not None:
            result.valid.append(key)
        else:
            result.unknown.append(key)
    return result


def get_mcp_server_name(preset_key: str) -> str:
    """Name used as the key under ``mcpServers`` for a preset."""
    if get_mcp_preset(preset_key) is None:
        return preset_key
    return _SERVER_NAMES.get(preset_key, preset_key)
