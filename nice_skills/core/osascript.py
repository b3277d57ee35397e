"""Thin async wrapper around macOS ``osascript``."""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)

OSASCRIPT = "osascript"


class ScriptError(RuntimeError):
    """Raised when an AppleScript snippet cannot be run or exits non-zero."""


async def run_osascript(script: str) -> str:
    """Run ``script`` and return its trimmed stdout.

    Raises :class:`ScriptError` carrying stderr when the interpreter fails, or
    the OS error message when ``osascript`` cannot be launched at all.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            OSASCRIPT,
            "-e",
            script,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise ScriptError(str(exc)) from exc

    stdout, stderr = await process.communicate()
    if process.returncode != 0:
        detail = (stderr or b"").decode("utf-8", errors="replace").strip()
        logger.debug(f"[osascript] exit {process.returncode}: {detail}")
        raise ScriptError(detail or f"osascript exited with status {process.returncode}")
    return (stdout or b"").decode("utf-8", errors="replace").strip()


def escape_applescript_string(value: str, *, newlines: bool = False) -> str:
    """Escape ``value`` for use inside a double-quoted AppleScript literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    if newlines:
        escaped = escaped.replace("\n", "\\n")
    return escaped


__all__ = ["ScriptError", "run_osascript", "escape_applescript_string"]
