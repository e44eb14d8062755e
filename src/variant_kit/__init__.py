"""variant-kit: team mode patching and MCP preset registration for CLI variants."""

__version__ = "0.1.0"

from .claude_config import ensure_mcp_preset, ensure_mcp_presets
from .fs import ensure_dir, read_json, write_json
from .mcp_presets import (
    McpPreset,
    McpServerConfig,
    get_mcp_preset,
    get_mcp_server_name,
    list_mcp_presets,
    parse_mcp_presets,
    validate_mcp_presets,
)
from .team_mode_patch import TeamModeState, detect_team_mode_state, set_team_mode_enabled

__all__ = [
    "TeamModeState",
    "detect_team_mode_state",
    "set_team_mode_enabled",
    "McpPreset",
    "McpServerConfig",
    "list_mcp_presets",
    "get_mcp_preset",
    "parse_mcp_presets",
    "validate_mcp_presets",
    "get_mcp_server_name",
    "ensure_mcp_preset",
    "ensure_mcp_presets",
    "ensure_dir",
    "read_json",
    "write_json",
]
