"""Helpers for choosing and launching the Playwright browser engine."""

from __future__ import annotations

from difflib import get_close_matches
from typing import Dict, List, Tuple

SUPPORTED_ENGINES: Tuple[str, ...] = ("chromium", "firefox", "webkit")

# Only Chromium understands --start-maximized; the other engines size the
# window from the OS default when the context has no fixed viewport.
_LAUNCH_ARGS: Dict[str, Tuple[str, ...]] = {
    "chromium": ("--start-maximized",),
}


def normalize_browser_name(name: str | None) -> str:
    """Return the canonical engine name for ``name``.

    Matching ignores case and surrounding whitespace, and close typos such as
    ``"chromim"`` resolve to the nearest supported engine.

    Raises
    ------
    ValueError
        If ``name`` is empty or cannot be matched to a supported engine.
    """

    cleaned = (name or "").strip().lower()
    if not cleaned:
        raise ValueError("Browser engine cannot be empty.")
    if cleaned in SUPPORTED_ENGINES:
        return cleaned

    matches = get_close_matches(cleaned, SUPPORTED_ENGINES, n=1, cutoff=0.6)
    if matches:
        return matches[0]

    raise ValueError(f"Unsupported browser engine '{name}'. Choose from {', '.join(SUPPORTED_ENGINES)}.")


def launch_args_for(engine: str) -> List[str]:
    return list(_LAUNCH_ARGS.get(engine, ()))


__all__ = ["SUPPORTED_ENGINES", "normalize_browser_name", "launch_args_for"]
