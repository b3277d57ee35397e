"""The set of tool modules a server instance owns."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.config import Settings
from ..recorder.screen_recorder import RecordingManager
from ..services.browser_service import BrowserSession
from ..services.postman_service import AppleScriptController, PostmanService

logger = logging.getLogger(__name__)


@dataclass
class ToolContext:
    recordings: RecordingManager
    browser: BrowserSession
    postman: PostmanService

    @classmethod
    def from_settings(cls, settings: Settings) -> "ToolContext":
        return cls(
            recordings=RecordingManager(settings.output_dir),
            browser=BrowserSession(
                settings.screenshots_dir,
                engine=settings.browser_engine,
                headless=settings.browser_headless,
            ),
            postman=PostmanService(AppleScriptController(settings.postman_app_name)),
        )

    async def aclose(self) -> None:
        """Release everything the tools hold: capture processes and the browser."""
        await self.recordings.stop_all()
        result = await self.browser.close()
        if not result.success:
            logger.warning(result.message)
