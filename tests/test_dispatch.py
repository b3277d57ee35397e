"""Tests for tool dispatch, result serialization and the MCP tool surface."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from nice_skills.api.context import ToolContext
from nice_skills.api.definitions import TOOL_DEFINITIONS
from nice_skills.api.dispatch import Dispatcher
from nice_skills.api.server import create_server, list_tool_models
from nice_skills.core.config import load_settings
from nice_skills.core.results import ToolResult
from nice_skills.recorder.screen_recorder import RecordingManager


def _mock_context():
    context = MagicMock(spec=ToolContext)
    for attr in ("recordings", "browser", "postman"):
        setattr(context, attr, MagicMock())
    return context


def _payload(response):
    return json.loads(response.text)


def test_result_serialization_omits_missing_data():
    assert ToolResult.ok("done").to_dict() == {"success": True, "message": "done"}
    assert json.loads(ToolResult.fail("nope", textFound=False).to_json()) == {
        "success": False,
        "message": "nope",
        "data": {"textFound": False},
    }


def test_definitions_match_dispatch_table():
    """Every advertised tool is dispatchable and vice versa."""
    dispatcher = Dispatcher(_mock_context())
    advertised = [tool["name"] for tool in TOOL_DEFINITIONS]
    assert sorted(advertised) == sorted(dispatcher.tool_names)
    assert len(advertised) == len(set(advertised))


def test_tool_schemas():
    tools = {tool.name: tool for tool in list_tool_models()}
    assert tools["stop_recording"].inputSchema["required"] == ["recordingId"]
    assert tools["browser_type"].inputSchema["required"] == ["text"]
    assert "required" not in tools["browser_click"].inputSchema
    assert tools["postman_set_method"].inputSchema["properties"]["method"]["enum"] == [
        "GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS",
    ]


def test_create_server_registers_handlers():
    from mcp import types

    server = create_server(Dispatcher(_mock_context()))
    assert types.ListToolsRequest in server.request_handlers
    assert types.CallToolRequest in server.request_handlers


async def _call_over_mcp(dispatcher, name, arguments=None):
    from mcp import types

    server = create_server(dispatcher)
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    return (await handler(request)).root


@pytest.mark.asyncio
async def test_mcp_call_returns_envelope_as_single_text_item(tmp_path):
    context = _mock_context()
    context.recordings = RecordingManager(tmp_path, [])

    result = await _call_over_mcp(Dispatcher(context), "stop_recording", {"recordingId": "rec_bogus"})

    assert result.isError is False
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    assert json.loads(result.content[0].text) == {
        "success": False,
        "message": "No active recording found with ID: rec_bogus",
    }


@pytest.mark.asyncio
async def test_mcp_call_flags_unknown_tool():
    result = await _call_over_mcp(Dispatcher(_mock_context()), "nope", {})

    assert result.isError is True
    assert [item.text for item in result.content] == ["Unknown tool: nope"]


@pytest.mark.asyncio
async def test_mcp_call_flags_raising_tool():
    result = await _call_over_mcp(Dispatcher(_mock_context()), "start_recording", {"displayId": "main"})

    assert result.isError is True
    assert len(result.content) == 1
    assert result.content[0].text.startswith("Error executing start_recording: invalid literal for int()")


@pytest.mark.asyncio
async def test_unknown_tool_is_flagged_not_raised():
    dispatcher = Dispatcher(_mock_context())

    response = await dispatcher.dispatch("launch_rockets", {"count": 3})

    assert response.is_error is True
    assert response.text == "Unknown tool: launch_rockets"


@pytest.mark.asyncio
async def test_exception_becomes_error_response():
    context = _mock_context()
    context.browser.navigate = AsyncMock(side_effect=RuntimeError("driver crashed"))
    dispatcher = Dispatcher(context)

    response = await dispatcher.dispatch("browser_navigate", {"url": "https://example.com"})

    assert response.is_error is True
    assert response.text == "Error executing browser_navigate: driver crashed"
    assert response.to_dict() == {"isError": True, "text": response.text}


@pytest.mark.asyncio
async def test_tool_failure_is_not_a_protocol_error():
    context = _mock_context()
    context.browser.click = AsyncMock(return_value=ToolResult.fail("Failed to click: Timeout 10000ms exceeded."))
    dispatcher = Dispatcher(context)

    response = await dispatcher.dispatch("browser_click", {"text": "Nonexistent"})

    assert response.is_error is False
    assert _payload(response) == {"success": False, "message": "Failed to click: Timeout 10000ms exceeded."}
    context.browser.click.assert_awaited_once_with(None, "Nonexistent")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, args, owner, method, expected",
    [
        ("start_recording", {"displayId": 2.0}, "recordings", "start", (2,)),
        ("start_recording", None, "recordings", "start", (None,)),
        ("stop_recording", {"recordingId": "rec_1"}, "recordings", "stop", ("rec_1",)),
        ("browser_navigate", {"url": "https://example.com"}, "browser", "navigate", ("https://example.com",)),
        ("browser_type", {"text": "hi", "selector": "#q"}, "browser", "type", ("hi", "#q")),
        ("browser_screenshot", {}, "browser", "screenshot", (None,)),
        ("browser_wait_for_text", {"text": "Done", "timeout": 2500}, "browser", "wait_for_text", ("Done", 2500)),
        ("browser_close", {}, "browser", "close", ()),
        ("postman_open", {}, "postman", "open", ()),
        ("postman_new_request", {}, "postman", "new_request", ()),
        ("postman_set_method", {"method": "post"}, "postman", "set_method", ("post",)),
        ("postman_set_url", {"url": "https://api.example.com"}, "postman", "set_url", ("https://api.example.com",)),
        ("postman_set_body", {"body": "{}"}, "postman", "set_body", ("{}",)),
        ("postman_send", {}, "postman", "send", ()),
        ("postman_close", {}, "postman", "close", ()),
    ],
)
async def test_arguments_are_routed(name, args, owner, method, expected):
    context = _mock_context()
    handler = AsyncMock(return_value=ToolResult.ok("fine"))
    setattr(getattr(context, owner), method, handler)
    dispatcher = Dispatcher(context)

    response = await dispatcher.dispatch(name, args)

    assert response.is_error is False
    assert _payload(response) == {"success": True, "message": "fine"}
    handler.assert_awaited_once_with(*expected)


@pytest.mark.asyncio
async def test_stop_bogus_recording_end_to_end(tmp_path):
    context = _mock_context()
    context.recordings = RecordingManager(tmp_path, [])
    dispatcher = Dispatcher(context)

    response = await dispatcher.dispatch("stop_recording", {"recordingId": "rec_bogus"})

    assert response.is_error is False
    assert _payload(response) == {"success": False, "message": "No active recording found with ID: rec_bogus"}


@pytest.mark.asyncio
async def test_start_recording_without_backend_end_to_end(tmp_path):
    context = _mock_context()
    context.recordings = RecordingManager(tmp_path, [])
    dispatcher = Dispatcher(context)

    response = await dispatcher.dispatch("start_recording", {})

    payload = _payload(response)
    assert payload["success"] is False
    assert "No screen recording tool available" in payload["message"]


@pytest.mark.asyncio
async def test_context_from_settings_and_close(tmp_path):
    settings = load_settings({"RECORDER_OUTPUT_DIR": str(tmp_path / "out"), "POSTMAN_APP_NAME": "Postman Canary"})
    context = ToolContext.from_settings(settings)

    assert context.recordings.output_dir == tmp_path / "out"
    assert context.browser.screenshots_dir == Path(tmp_path / "out" / "screenshots")
    assert context.postman.controller.app_name == "Postman Canary"

    await context.aclose()
    assert context.recordings.list_active() == []
    assert context.browser.page is None
