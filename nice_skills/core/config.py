"""Runtime settings resolved from the environment (and optional .env files)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

try:
    from dotenv import load_dotenv  # type: ignore
except Exception:
    load_dotenv = None  # type: ignore

from .browser_utils import normalize_browser_name

DEFAULT_OUTPUT_DIR = "recordings"
DEFAULT_POSTMAN_APP = "Postman"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8765


def _env_flag(value: Optional[str], default: str = "0") -> bool:
    return (value if value is not None else default).strip().lower() in {"1", "true", "yes"}


def _load_env_files() -> None:
    """Load environment variables from .env files.

    The working directory is tried first, then the repository root. Values that
    are already present in the process environment are never overridden.
    """
    if load_dotenv is None:
        return
    try:
        load_dotenv(override=False)
    except Exception:
        pass
    try:
        repo_root = Path(__file__).resolve().parents[2]
        root_env = repo_root / ".env"
        if root_env.exists():
            load_dotenv(dotenv_path=root_env, override=False)
    except Exception:
        pass


@dataclass(frozen=True)
class Settings:
    output_dir: Path
    browser_engine: str = "chromium"
    browser_headless: bool = False
    postman_app_name: str = DEFAULT_POSTMAN_APP
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    version: str = "dev"

    @property
    def screenshots_dir(self) -> Path:
        return self.output_dir / "screenshots"


def load_settings(env: Optional[Mapping[str, str]] = None, *, load_env_files: bool = True) -> Settings:
    """Build :class:`Settings` from ``env`` (defaults to ``os.environ``).

    Raises ``ValueError`` when ``BROWSER_ENGINE`` names an unknown engine or
    ``NICE_SKILLS_PORT`` is not an integer.
    """
    if env is None:
        if load_env_files:
            _load_env_files()
        env = os.environ

    port_raw = env.get("NICE_SKILLS_PORT", str(DEFAULT_PORT))
    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"NICE_SKILLS_PORT must be an integer, got '{port_raw}'.")

    return Settings(
        output_dir=Path(env.get("RECORDER_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)).resolve(),
        browser_engine=normalize_browser_name(env.get("BROWSER_ENGINE", "chromium")),
        browser_headless=_env_flag(env.get("BROWSER_HEADLESS")),
        postman_app_name=env.get("POSTMAN_APP_NAME", DEFAULT_POSTMAN_APP).strip() or DEFAULT_POSTMAN_APP,
        host=env.get("NICE_SKILLS_HOST", DEFAULT_HOST),
        port=port,
        log_level=env.get("NICE_SKILLS_LOG_LEVEL", "INFO").upper(),
        version=env.get("APP_VERSION", "dev"),
    )


__all__ = ["Settings", "load_settings"]
