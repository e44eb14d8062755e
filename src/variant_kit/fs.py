"""Filesystem helpers: bounded, sanitized JSON I/O and atomic text writes."""

from __future__ import annotations

import json
import logging
import os
import platform
import shutil
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

MAX_JSON_BYTES = 1024 * 1024  # 1 MB
BACKUP_DIR_NAME = ".variant-kit-backups"

_UNSAFE_PROPERTY_NAMES = frozenset(("__proto__", "constructor", "prototype"))


def ensure_dir(path: str | Path) -> None:
    """Create ``path`` and any missing parents. No-op if it already exists."""
    Path(path).mkdir(parents=True, exist_ok=True)


def sanitize_json(value: Any) -> Any:
    """Return a detached copy of ``value`` without prototype pollution keys.

    Keys named ``__proto__``, ``constructor`` or ``prototype`` are dropped at
    every depth so the data is safe to hand to JS tooling that merges it.
    """
    if isinstance(value, dict):
        return {
            key: sanitize_json(item)
            for key, item in value.items()
            if key not in _UNSAFE_PROPERTY_NAMES
        }
    if isinstance(value, list):
        return [sanitize_json(item) for item in value]
    return value


def write_text_atomic(path: str | Path, text: str) -> None:
    """Atomic write with Windows retry on locked files."""
    target = os.fspath(path)
    tmp_path = target + ".tmp"

    try:
        with open(tmp_path, "w", encoding="utf-8", newline="") as fh:
            fh.write(text)

        max_retries = 3 if platform.system() == "Windows" else 1
        for attempt in range(max_retries):
            try:
                os.replace(tmp_path, target)
                return
            except OSError:
                if attempt < max_retries - 1:
                    time.sleep(0.1)
                else:
                    raise
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def write_json(path: str | Path, data: Any) -> None:
    """Serialize ``data`` as indented JSON, replacing any existing file."""
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    write_text_atomic(path, content)


def read_json(path: str | Path) -> Optional[Any]:
    """Read a JSON file, failing closed.

    Returns ``None`` when the file is missing, larger than ``MAX_JSON_BYTES``,
    not valid JSON, or unreadable. Callers treat ``None`` as "use defaults".
    """
    try:
        size = Path(path).stat().st_size
        if size > MAX_JSON_BYTES:
            logger.debug("Ignoring %s: JSON file too large (%d bytes, max %d)", path, size, MAX_JSON_BYTES)
            return None
        raw = Path(path).read_text(encoding="utf-8")
        return sanitize_json(json.loads(raw))
    except FileNotFoundError:
        return None
    except (OSError, ValueError, RecursionError) as exc:
        # ValueError covers JSONDecodeError and UnicodeDecodeError;
        # RecursionError covers pathologically nested documents.
        logger.debug("Failed to read JSON from %s: %s", path, exc)
        return None


def backup_file(path: str | Path) -> str:
    """Backup a file to a sibling .variant-kit-backups/ directory.

    Returns the backup file path.
    """
    source = Path(path)
    backup_dir = source.parent / BACKUP_DIR_NAME
    ensure_dir(backup_dir)

    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    backup_path = backup_dir / f"{source.stem}.{timestamp}.bak"

    shutil.copy2(str(source), str(backup_path))
    logger.info("Backed up %s to %s", source, backup_path)
    return str(backup_path)
