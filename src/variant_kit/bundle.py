"""File-level team mode operations on an installed CLI bundle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .fs import backup_file, write_text_atomic
from .team_mode_patch import TeamModeState, detect_team_mode_state, set_team_mode_enabled

logger = logging.getLogger(__name__)


@dataclass
class BundlePatchOutcome:
    path: str
    state: TeamModeState
    changed: bool
    backup: Optional[str] = None


def read_bundle(path: str | Path) -> str:
    """Read bundle text without newline translation."""
    with open(path, encoding="utf-8", newline="") as fh:
        return fh.read()


def inspect_bundle(path: str | Path) -> TeamModeState:
    return detect_team_mode_state(read_bundle(path))


def patch_bundle(
    path: str | Path,
    enable: bool,
    dry_run: bool = False,
    backup: bool = True,
) -> BundlePatchOutcome:
    """Toggle team mode in the bundle at ``path``.

    The file is only rewritten when the gate literal actually changes.
    """
    result = set_team_mode_enabled(read_bundle(path), enable)
    outcome = BundlePatchOutcome(path=str(path), state=result.state, changed=result.changed)

    if not result.changed:
        if result.state is TeamModeState.UNKNOWN:
            logger.warning("Team mode gate not found in %s; bundle left untouched", path)
        return outcome

    if dry_run:
        outcome.backup = "(dry-run)" if backup else None
        return outcome

    if backup:
        outcome.backup = backup_file(path)
    write_text_atomic(path, result.content)
    logger.info("Team mode %s in %s", result.state.value, path)
    return outcome
