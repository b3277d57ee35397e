"""Routes a (tool name, arguments) pair to the owning tool module."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from ..core.results import ToolResult, error_message
from .context import ToolContext

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], Awaitable[ToolResult]]


@dataclass
class ToolResponse:
    """Transport-neutral reply: the text payload plus the protocol error flag."""

    text: str
    is_error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"isError": self.is_error, "text": self.text}


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


class Dispatcher:
    """Invoke tools by name without ever letting an exception escape.

    Tool-level failures (``success: false``) are returned as ordinary
    responses. Only unknown names and exceptions raised while invoking a tool
    set ``is_error``.
    """

    def __init__(self, context: ToolContext) -> None:
        self.context = context
        self._handlers: Dict[str, Handler] = {
            "start_recording": self._start_recording,
            "stop_recording": self._stop_recording,
            "browser_navigate": self._browser_navigate,
            "browser_click": self._browser_click,
            "browser_type": self._browser_type,
            "browser_screenshot": self._browser_screenshot,
            "browser_wait_for_text": self._browser_wait_for_text,
            "browser_close": self._browser_close,
            "postman_open": self._postman_open,
            "postman_new_request": self._postman_new_request,
            "postman_set_method": self._postman_set_method,
            "postman_set_url": self._postman_set_url,
            "postman_set_body": self._postman_set_body,
            "postman_send": self._postman_send,
            "postman_close": self._postman_close,
        }

    @property
    def tool_names(self) -> List[str]:
        return list(self._handlers)

    async def dispatch(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResponse:
        handler = self._handlers.get(name)
        if handler is None:
            logger.warning(f"Unknown tool requested: {name}")
            return ToolResponse(f"Unknown tool: {name}", is_error=True)

        args = dict(arguments or {})
        logger.info(f"Calling tool {name}")
        try:
            result = await handler(args)
        except Exception as exc:
            logger.exception(f"Tool {name} raised")
            return ToolResponse(f"Error executing {name}: {error_message(exc)}", is_error=True)

        if not result.success:
            logger.warning(f"Tool {name} failed: {result.message}")
        return ToolResponse(result.to_json())

    # Recording

    async def _start_recording(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.recordings.start(_optional_int(args.get("displayId")))

    async def _stop_recording(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.recordings.stop(args.get("recordingId"))

    # Browser

    async def _browser_navigate(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.browser.navigate(args.get("url"))

    async def _browser_click(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.browser.click(args.get("selector"), args.get("text"))

    async def _browser_type(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.browser.type(args.get("text"), args.get("selector"))

    async def _browser_screenshot(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.browser.screenshot(args.get("name"))

    async def _browser_wait_for_text(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.browser.wait_for_text(args.get("text"), _optional_int(args.get("timeout")))

    async def _browser_close(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.browser.close()

    # Postman

    async def _postman_open(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.postman.open()

    async def _postman_new_request(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.postman.new_request()

    async def _postman_set_method(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.postman.set_method(args.get("method"))

    async def _postman_set_url(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.postman.set_url(args.get("url"))

    async def _postman_set_body(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.postman.set_body(args.get("body"))

    async def _postman_send(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.postman.send()

    async def _postman_close(self, args: Dict[str, Any]) -> ToolResult:
        return await self.context.postman.close()


__all__ = ["Dispatcher", "ToolResponse"]
