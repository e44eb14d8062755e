"""CLI entry point for variant-kit."""

from __future__ import annotations

import argparse
import logging
import sys

from .config import ToolkitConfig, load_toolkit_config

_GATE_NOT_FOUND_HINT = (
    "could not detect the team mode gate in {path}. "
    "The bundle layout may have changed; no changes were made."
)


def _add_bundle_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("bundle", help="Path to the CLI bundle (cli.js)")
    parser.add_argument("--dry-run", action="store_true", help="Show what would change without modifying files")
    parser.add_argument(
        "--no-backup",
        dest="backup",
        action="store_false",
        default=None,
        help="Do not back up the bundle before patching",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="variant-kit",
        description="variant-kit - manage a CLI variant's team mode and MCP presets",
    )
    parser.add_argument("--config", help="Path to variant-kit config (JSON or YAML)")
    parser.add_argument("--verbose", "-v", action="store_true", default=None, help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    # -- team-mode subcommand --
    p_team = sub.add_parser("team-mode", help="Inspect or toggle team mode in a CLI bundle")
    team_sub = p_team.add_subparsers(dest="team_command")

    p_status = team_sub.add_parser("status", help="Report whether team mode is enabled")
    p_status.add_argument("bundle", help="Path to the CLI bundle (cli.js)")

    p_enable = team_sub.add_parser("enable", help="Enable team mode")
    _add_bundle_args(p_enable)
    p_disable = team_sub.add_parser("disable", help="Disable team mode")
    _add_bundle_args(p_disable)

    # -- mcp subcommand --
    p_mcp = sub.add_parser("mcp", help="Manage delegation MCP server presets")
    mcp_sub = p_mcp.add_subparsers(dest="mcp_command")

    mcp_sub.add_parser("list", help="List available MCP presets")

    p_add = mcp_sub.add_parser("add", help="Register MCP presets in .claude.json")
    p_add.add_argument("presets", nargs="?", help="Comma-separated preset keys (e.g. codex,gemini)")
    p_add.add_argument("--config-dir", help="Directory holding .claude.json (default: home directory)")
    p_add.add_argument("--dry-run", action="store_true", help="Show what would be added without modifying files")

    p_mcp_status = mcp_sub.add_parser("status", help="Show which presets are registered")
    p_mcp_status.add_argument("--config-dir", help="Directory holding .claude.json (default: home directory)")

    return parser


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    cli_overrides = {
        "verbose": args.verbose,
        "config_dir": getattr(args, "config_dir", None),
        "backup": getattr(args, "backup", None),
    }
    try:
        config = load_toolkit_config(config_path=args.config, cli_overrides=cli_overrides)
    except (OSError, ValueError) as exc:
        print(f"Error: failed to load config: {exc}", file=sys.stderr)
        return 1

    _configure_logging(config.verbose)

    if args.command == "team-mode" and args.team_command == "status":
        return _run_team_status(args)
    if args.command == "team-mode" and args.team_command in ("enable", "disable"):
        return _run_team_toggle(args, config, enable=args.team_command == "enable")
    if args.command == "mcp" and args.mcp_command == "list":
        return _run_mcp_list()
    if args.command == "mcp" and args.mcp_command == "add":
        return _run_mcp_add(args, config)
    if args.command == "mcp" and args.mcp_command == "status":
        return _run_mcp_status(config)

    parser.print_help()
    return 1


# ---------------------------------------------------------------------------
# team-mode handlers
# ---------------------------------------------------------------------------


def _run_team_status(args: argparse.Namespace) -> int:
    from .bundle import inspect_bundle
    from .team_mode_patch import TeamModeState

    try:
        state = inspect_bundle(args.bundle)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if state is TeamModeState.UNKNOWN:
        print(f"Error: {_GATE_NOT_FOUND_HINT.format(path=args.bundle)}", file=sys.stderr)
        return 1

    print(f"Team mode: {state.value}")
    return 0


def _run_team_toggle(args: argparse.Namespace, config: ToolkitConfig, enable: bool) -> int:
    from .bundle import patch_bundle
    from .team_mode_patch import TeamModeState

    try:
        outcome = patch_bundle(args.bundle, enable, dry_run=args.dry_run, backup=config.backup)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if outcome.state is TeamModeState.UNKNOWN:
        print(f"Error: {_GATE_NOT_FOUND_HINT.format(path=args.bundle)}", file=sys.stderr)
        return 1

    if args.dry_run:
        print("(dry-run) No files were modified.\n")

    if not outcome.changed:
        print(f"Team mode already {outcome.state.value}.")
        return 0

    print(f"Team mode {outcome.state.value}: {outcome.path}")
    if outcome.backup and outcome.backup != "(dry-run)":
        print(f"  Backup: {outcome.backup}")
    return 0


# ---------------------------------------------------------------------------
# mcp handlers
# ---------------------------------------------------------------------------


def _run_mcp_list() -> int:
    from .mcp_presets import get_mcp_server_name, list_mcp_presets

    for preset in list_mcp_presets():
        command_line = " ".join([preset.server.command, *preset.server.args])
        print(f"{preset.key}: {preset.label} ({get_mcp_server_name(preset.key)})")
        print(f"  {preset.description}")
        print(f"  Command: {command_line}")
        for item in preset.prerequisites:
            print(f"  Requires: {item}")
        if preset.warning:
            print(f"  Warning: {preset.warning}")
    return 0


def _run_mcp_add(args: argparse.Namespace, config: ToolkitConfig) -> int:
    from .claude_config import ensure_mcp_presets, get_claude_config_path, list_configured_mcp_servers
    from .mcp_presets import get_mcp_server_name, validate_mcp_presets

    if args.presets:
        requested = [part.strip().lower() for part in args.presets.split(",") if part.strip()]
    else:
        requested = list(config.default_presets)
    requested = list(dict.fromkeys(requested))
    if not requested:
        print("Error: no presets given and none configured.", file=sys.stderr)
        print("Usage: variant-kit mcp add codex,gemini", file=sys.stderr)
        return 1

    validation = validate_mcp_presets(requested)
    for key in validation.unknown:
        print(f"[mcp] Unknown preset skipped: {key}", file=sys.stderr)

    config_path = get_claude_config_path(config.config_dir)
    try:
        if args.dry_run:
            existing = list_configured_mcp_servers(config.config_dir)
            added = [key for key in validation.valid if get_mcp_server_name(key) not in existing]
        else:
            added = ensure_mcp_presets(config.config_dir, validation.valid)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.dry_run:
        print("(dry-run) No files were modified.\n")

    print(f"{config_path}")
    for key in validation.valid:
        name = get_mcp_server_name(key)
        if key in added:
            print(f"  [+] {name}: added ({key})")
        else:
            print(f"  [~] {name}: already configured")

    print()
    print(f"Total: {len(validation.valid)} presets requested, {len(added)} added.")
    return 0


def _run_mcp_status(config: ToolkitConfig) -> int:
    from .claude_config import get_claude_config_path, list_configured_mcp_servers
    from .mcp_presets import get_mcp_server_name, list_mcp_presets

    try:
        servers = list_configured_mcp_servers(config.config_dir)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"{get_claude_config_path(config.config_dir)}")
    for preset in list_mcp_presets():
        name = get_mcp_server_name(preset.key)
        marker = "[*]" if name in servers else "[ ]"
        print(f"  {marker} {preset.key}: {name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
