"""Detect and toggle the team mode feature gate inside a minified CLI bundle.

The bundle has no stable structure across releases, so the gate is located
with a narrow two-stage search:

1. find the ``TodoWrite`` tool name assignment (the marker),
2. within a bounded window after it, find ``isEnabled(){return!<fn>()}``,
3. find ``function <fn>(){return!0}`` / ``!1`` anywhere in the bundle.

Anything that does not match exactly is reported as ``unknown`` and left
untouched.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

TODO_WRITE_MARKER = re.compile(r'(?:var|let|const)\s+[A-Za-z_$][\w$]*="TodoWrite";', re.ASCII)
IS_ENABLED_FN_RE = re.compile(r"isEnabled\(\)\{return!([A-Za-z_$][\w$]*)\(\)\}", re.ASCII)
GATE_WINDOW_CHARS = 8000

TRUE_LITERAL = "!0"
FALSE_LITERAL = "!1"


class TeamModeState(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TeamModeGate:
    """Gate function name found near the marker."""

    fn_name: str
    marker_index: int


@dataclass(frozen=True)
class TeamModePatchResult:
    content: str
    changed: bool
    state: TeamModeState


def _state_for(enable: bool) -> TeamModeState:
    return TeamModeState.ENABLED if enable else TeamModeState.DISABLED


def gate_definition_pattern(fn_name: str) -> re.Pattern:
    """Compile the gate definition pattern for ``fn_name``.

    The name comes straight out of the bundle, so it is always escaped and
    matched literally.
    """
    return re.compile(r"function\s+" + re.escape(fn_name) + r"\(\)\{return(!0|!1)\}")


def find_team_mode_gate(content: str) -> Optional[TeamModeGate]:
    """Locate the gate function name dispatched from the TodoWrite tool."""
    marker = TODO_WRITE_MARKER.search(content)
    if marker is None:
        return None

    start = marker.start()
    window = content[start:start + GATE_WINDOW_CHARS]
    dispatch = IS_ENABLED_FN_RE.search(window)
    if dispatch is None:
        logger.debug("TodoWrite marker at %d but no isEnabled dispatch within %d chars", start, GATE_WINDOW_CHARS)
        return None

    return TeamModeGate(fn_name=dispatch.group(1), marker_index=start)


def _locate_gate_definition(content: str) -> Optional[re.Match]:
    gate = find_team_mode_gate(content)
    if gate is None:
        return None

    match = gate_definition_pattern(gate.fn_name).search(content)
    if match is None:
        logger.debug("Gate function %r is dispatched but its definition was not found", gate.fn_name)
    return match


def detect_team_mode_state(content: str) -> TeamModeState:
    match = _locate_gate_definition(content)
    if match is None:
        return TeamModeState.UNKNOWN
    return _state_for(match.group(1) == TRUE_LITERAL)


def set_team_mode_enabled(content: str, enable: bool) -> TeamModePatchResult:
    """Rewrite the gate's boolean literal so team mode is ``enable``.

    Only the literal of the first matching definition changes; the rest of
    ``content`` is returned byte for byte.
    """
    match = _locate_gate_definition(content)
    if match is None:
        return TeamModePatchResult(content=content, changed=False, state=TeamModeState.UNKNOWN)

    desired = TRUE_LITERAL if enable else FALSE_LITERAL
    if match.group(1) == desired:
        return TeamModePatchResult(content=content, changed=False, state=_state_for(enable))

    start, end = match.span(1)
    updated = content[:start] + desired + content[end:]
    return TeamModePatchResult(content=updated, changed=True, state=_state_for(enable))
