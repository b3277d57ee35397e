"""Tool schemas advertised to clients."""

from __future__ import annotations

from typing import Any, Dict, List

from ..services.postman_service import HTTP_METHODS

_NO_ARGS: Dict[str, Any] = {"type": "object", "properties": {}}


def _schema(properties: Dict[str, Any], required: List[str] | None = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    # Recording
    {
        "name": "start_recording",
        "description": "Start recording the screen. Returns a recording ID to use when stopping.",
        "inputSchema": _schema({
            "displayId": {"type": "number", "description": "Optional display ID to record (default: main display)"},
        }),
    },
    {
        "name": "stop_recording",
        "description": "Stop an active recording and save the video file.",
        "inputSchema": _schema(
            {"recordingId": {"type": "string", "description": "The recording ID returned from start_recording"}},
            ["recordingId"],
        ),
    },
    # Browser
    {
        "name": "browser_navigate",
        "description": "Open a browser and navigate to a URL. The browser window will be visible on screen.",
        "inputSchema": _schema({"url": {"type": "string", "description": "The URL to navigate to"}}, ["url"]),
    },
    {
        "name": "browser_click",
        "description": "Click an element on the page by CSS selector or visible text.",
        "inputSchema": _schema({
            "selector": {"type": "string", "description": "CSS selector of the element to click"},
            "text": {"type": "string", "description": "Visible text of the element to click (alternative to selector)"},
        }),
    },
    {
        "name": "browser_type",
        "description": "Type text into an input field.",
        "inputSchema": _schema(
            {
                "text": {"type": "string", "description": "The text to type"},
                "selector": {
                    "type": "string",
                    "description": "CSS selector of the input element (optional - types into focused element if not provided)",
                },
            },
            ["text"],
        ),
    },
    {
        "name": "browser_screenshot",
        "description": "Take a screenshot of the current browser state.",
        "inputSchema": _schema({"name": {"type": "string", "description": "Optional name for the screenshot file"}}),
    },
    {
        "name": "browser_wait_for_text",
        "description": "Wait for specific text to appear on the page.",
        "inputSchema": _schema(
            {
                "text": {"type": "string", "description": "The text to wait for"},
                "timeout": {"type": "number", "description": "Timeout in milliseconds (default: 10000)"},
            },
            ["text"],
        ),
    },
    {
        "name": "browser_close",
        "description": "Close the browser.",
        "inputSchema": _NO_ARGS,
    },
    # Postman
    {
        "name": "postman_open",
        "description": "Launch the Postman application.",
        "inputSchema": _NO_ARGS,
    },
    {
        "name": "postman_new_request",
        "description": "Create a new request in Postman.",
        "inputSchema": _NO_ARGS,
    },
    {
        "name": "postman_set_method",
        "description": "Set the HTTP method for the current request.",
        "inputSchema": _schema(
            {
                "method": {
                    "type": "string",
                    "description": "HTTP method (GET, POST, PUT, DELETE, etc.)",
                    "enum": list(HTTP_METHODS),
                },
            },
            ["method"],
        ),
    },
    {
        "name": "postman_set_url",
        "description": "Set the URL for the current request.",
        "inputSchema": _schema({"url": {"type": "string", "description": "The request URL"}}, ["url"]),
    },
    {
        "name": "postman_set_body",
        "description": "Set the request body (for POST, PUT, etc.).",
        "inputSchema": _schema({"body": {"type": "string", "description": "The request body content"}}, ["body"]),
    },
    {
        "name": "postman_send",
        "description": "Send the current request in Postman.",
        "inputSchema": _NO_ARGS,
    },
    {
        "name": "postman_close",
        "description": "Close the Postman application.",
        "inputSchema": _NO_ARGS,
    },
]
