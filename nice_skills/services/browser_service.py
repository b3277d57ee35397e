"""Visible Playwright browser driven one step at a time."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from ..core.browser_utils import launch_args_for
from ..core.results import ToolResult, error_message

logger = logging.getLogger(__name__)

NAVIGATION_TIMEOUT_MS = 30000
ACTION_TIMEOUT_MS = 10000
WAIT_FOR_TEXT_TIMEOUT_MS = 10000
SETTLE_MS = 500
NO_SESSION_MESSAGE = "No browser session active. Call browser_navigate first."


class BrowserSession:
    """Owns a single browser, context and page.

    The session is created lazily by :meth:`navigate` and repaired when the
    browser has disconnected or the page was closed. Every other operation
    needs a live page and fails without one, since a blank page has nothing to
    act on. Calls are not serialized; overlapping calls share the one page.
    """

    def __init__(
        self,
        screenshots_dir: Path,
        *,
        engine: str = "chromium",
        headless: bool = False,
        playwright_factory: Callable[[], Any] = async_playwright,
    ) -> None:
        self.screenshots_dir = Path(screenshots_dir)
        self.engine = engine
        self.headless = headless
        self._playwright_factory = playwright_factory
        self._playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None

    def has_page(self) -> bool:
        return self.page is not None and not self.page.is_closed()

    async def _launch_browser(self) -> Browser:
        if self._playwright is None:
            self._playwright = await self._playwright_factory().start()
        launcher = getattr(self._playwright, self.engine)
        logger.info(f"Launching {self.engine} (headless={self.headless})")
        return await launcher.launch(headless=self.headless, args=launch_args_for(self.engine))

    async def ensure_session(self) -> Tuple[Browser, Page]:
        if self.browser is None or not self.browser.is_connected():
            self.browser = await self._launch_browser()
            # no_viewport lets the page use the full maximized window
            self.context = await self.browser.new_context(no_viewport=True)
            self.page = await self.context.new_page()

        if self.page is None or self.page.is_closed():
            if self.context is None:
                self.context = await self.browser.new_context(no_viewport=True)
            self.page = await self.context.new_page()

        return self.browser, self.page

    def _screenshots_dir(self) -> Path:
        self.screenshots_dir.mkdir(parents=True, exist_ok=True)
        return self.screenshots_dir

    async def navigate(self, url: str) -> ToolResult:
        try:
            _, page = await self.ensure_session()
            await page.goto(url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT_MS)
            title = await page.title()
            current_url = page.url
            return ToolResult.ok(f"Navigated to: {current_url}", url=current_url, title=title)
        except Exception as exc:
            logger.warning(f"Navigation to {url} failed: {exc}")
            return ToolResult.fail(f"Failed to navigate: {error_message(exc)}")

    async def click(self, selector: Optional[str] = None, text: Optional[str] = None) -> ToolResult:
        if not self.has_page():
            return ToolResult.fail(NO_SESSION_MESSAGE)
        page = self.page
        try:
            if text:
                await page.get_by_text(text, exact=False).first.click(timeout=ACTION_TIMEOUT_MS)
            elif selector:
                await page.click(selector, timeout=ACTION_TIMEOUT_MS)
            else:
                return ToolResult.fail("Either selector or text must be provided")

            await page.wait_for_timeout(SETTLE_MS)

            target = f" ({selector})" if selector else ""
            label = f' with text "{text}"' if text else ""
            return ToolResult.ok(f"Clicked element{target}{label}")
        except Exception as exc:
            return ToolResult.fail(f"Failed to click: {error_message(exc)}")

    async def type(self, text: str, selector: Optional[str] = None) -> ToolResult:
        if not self.has_page():
            return ToolResult.fail(NO_SESSION_MESSAGE)
        page = self.page
        try:
            if selector:
                await page.fill(selector, text, timeout=ACTION_TIMEOUT_MS)
            else:
                await page.keyboard.type(text)
            return ToolResult.ok(f"Typed text{f' into {selector}' if selector else ''}")
        except Exception as exc:
            return ToolResult.fail(f"Failed to type: {error_message(exc)}")

    async def screenshot(self, name: Optional[str] = None) -> ToolResult:
        if not self.has_page():
            return ToolResult.fail(NO_SESSION_MESSAGE)
        try:
            filename = name or f"screenshot_{int(time.time() * 1000)}"
            screenshot_path = self._screenshots_dir() / f"{filename}.png"
            await self.page.screenshot(path=str(screenshot_path), full_page=False)
            return ToolResult.ok(f"Screenshot saved to: {screenshot_path}", screenshotPath=str(screenshot_path))
        except Exception as exc:
            return ToolResult.fail(f"Failed to take screenshot: {error_message(exc)}")

    async def wait_for_text(self, text: str, timeout_ms: Optional[int] = None) -> ToolResult:
        if not self.has_page():
            return ToolResult.fail(NO_SESSION_MESSAGE)
        try:
            await self.page.get_by_text(text, exact=False).first.wait_for(
                state="visible",
                timeout=timeout_ms or WAIT_FOR_TEXT_TIMEOUT_MS,
            )
            return ToolResult.ok(f'Found text: "{text}"', textFound=True)
        except Exception as exc:
            return ToolResult.fail(f"Text not found within timeout: {error_message(exc)}", textFound=False)

    async def close(self) -> ToolResult:
        browser, playwright = self.browser, self._playwright
        self.browser = None
        self.context = None
        self.page = None
        self._playwright = None
        try:
            try:
                if browser is not None and browser.is_connected():
                    await browser.close()
            finally:
                # the driver process outlives a failed browser close otherwise
                if playwright is not None:
                    await playwright.stop()
            return ToolResult.ok("Browser closed")
        except Exception as exc:
            logger.warning(f"Browser close failed: {exc}")
            return ToolResult.fail(f"Failed to close browser: {error_message(exc)}")


__all__ = ["BrowserSession", "NO_SESSION_MESSAGE"]
