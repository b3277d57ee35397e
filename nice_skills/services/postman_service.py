"""Keyboard-driven control of the Postman desktop app through System Events.

The keystroke sequences assume Postman's default layout and that its main
window has focus. Nothing is cached between calls.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from ..core.osascript import escape_applescript_string, run_osascript
from ..core.results import ToolResult, error_message

logger = logging.getLogger(__name__)

ScriptRunner = Callable[[str], Awaitable[str]]
Sleeper = Callable[[float], Awaitable[None]]

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")


class AppController(ABC):
    """Minimal capability surface needed to script a desktop application."""

    @abstractmethod
    async def activate(self) -> str:
        """Launch the application or bring it to the front."""

    @abstractmethod
    async def send_keys(self, statements: str) -> str:
        """Run System Events statements against the application's process."""

    @abstractmethod
    async def quit(self) -> str:
        """Ask the application to quit."""


class AppleScriptController(AppController):
    def __init__(self, app_name: str = "Postman", runner: ScriptRunner = run_osascript) -> None:
        self.app_name = app_name
        self._runner = runner

    @property
    def _quoted_name(self) -> str:
        return escape_applescript_string(self.app_name)

    async def activate(self) -> str:
        return await self._runner(
            f'tell application "{self._quoted_name}"\n'
            "  activate\n"
            "end tell"
        )

    async def send_keys(self, statements: str) -> str:
        return await self._runner(
            'tell application "System Events"\n'
            f'  tell process "{self._quoted_name}"\n'
            f"{statements}\n"
            "  end tell\n"
            "end tell"
        )

    async def quit(self) -> str:
        return await self._runner(
            f'tell application "{self._quoted_name}"\n'
            "  quit\n"
            "end tell"
        )


class PostmanService:
    """Tool operations for building and sending a request in Postman."""

    def __init__(self, controller: AppController, sleep: Sleeper = asyncio.sleep) -> None:
        self.controller = controller
        self._sleep = sleep

    async def open(self) -> ToolResult:
        try:
            await self.controller.activate()
            # give a cold start time to draw its window
            await self._sleep(2.0)
            return ToolResult.ok("Postman opened")
        except Exception as exc:
            logger.warning(f"Could not activate {getattr(self.controller, 'app_name', 'Postman')}: {exc}")
            return ToolResult.fail(f"Failed to open Postman: {error_message(exc)}. Make sure Postman is installed.")

    async def new_request(self) -> ToolResult:
        try:
            await self.controller.send_keys('    keystroke "n" using {command down}')
            await self._sleep(1.0)
            return ToolResult.ok("New request created in Postman")
        except Exception as exc:
            return ToolResult.fail(f"Failed to create new request: {error_message(exc)}")

    async def set_method(self, method: str) -> ToolResult:
        try:
            method_upper = (method or "").upper()
            await self.controller.send_keys(
                "    set methodButton to first pop up button of first group of first window\n"
                "    click methodButton\n"
                "    delay 0.3\n"
                f'    keystroke "{escape_applescript_string(method_upper)}"\n'
                "    delay 0.2\n"
                "    keystroke return"
            )
            await self._sleep(0.5)
            return ToolResult.ok(f"Method set to: {method_upper}", method=method_upper)
        except Exception as exc:
            return ToolResult.fail(f"Failed to set method: {error_message(exc)}")

    async def set_url(self, url: str) -> ToolResult:
        try:
            await self.controller.send_keys(
                '    keystroke "l" using {command down}\n'
                "    delay 0.2\n"
                '    keystroke "a" using {command down}\n'
                f'    keystroke "{escape_applescript_string(url)}"'
            )
            await self._sleep(0.5)
            return ToolResult.ok(f"URL set to: {url}", url=url)
        except Exception as exc:
            return ToolResult.fail(f"Failed to set URL: {error_message(exc)}")

    async def set_body(self, body: str) -> ToolResult:
        try:
            # key code 48 is Tab; cmd+Tab moves focus toward the body editor
            await self.controller.send_keys(
                "    key code 48 using {command down}\n"
                "    delay 0.3\n"
                f'    keystroke "{escape_applescript_string(body, newlines=True)}"'
            )
            await self._sleep(0.5)
            return ToolResult.ok("Body content set")
        except Exception as exc:
            return ToolResult.fail(f"Failed to set body: {error_message(exc)}")

    async def send(self) -> ToolResult:
        """Submit the request.

        Reports ``status: "sent"`` once the shortcut is delivered; the response
        pane is never inspected.
        """
        try:
            await self.controller.send_keys("    keystroke return using {command down}")
            await self._sleep(2.0)
            return ToolResult.ok("Request sent", status="sent")
        except Exception as exc:
            logger.warning(f"Send shortcut was not delivered: {exc}")
            return ToolResult.fail(f"Failed to send request: {error_message(exc)}")

    async def close(self) -> ToolResult:
        try:
            await self.controller.quit()
            return ToolResult.ok("Postman closed")
        except Exception as exc:
            return ToolResult.fail(f"Failed to close Postman: {error_message(exc)}")


__all__ = ["AppController", "AppleScriptController", "PostmanService", "HTTP_METHODS"]
