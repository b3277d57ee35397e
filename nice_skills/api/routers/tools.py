from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Request
from pydantic import BaseModel, Field

from ..definitions import TOOL_DEFINITIONS


router = APIRouter(prefix="/tools", tags=["tools"])


class ToolDefinition(BaseModel):
    name: str
    description: str
    inputSchema: Dict[str, Any] = Field(..., description="JSON schema of the tool arguments.")


class ToolCallResponse(BaseModel):
    isError: bool = Field(False, description="True for unknown tools and tools that raised.")
    text: str = Field(..., description="JSON encoded result envelope, or the error text.")


@router.get("", response_model=List[ToolDefinition])
async def list_tools() -> List[ToolDefinition]:
    return [ToolDefinition(**tool) for tool in TOOL_DEFINITIONS]


@router.post("/{name}", response_model=ToolCallResponse)
async def call_tool(
    name: str,
    request: Request,
    arguments: Optional[Dict[str, Any]] = Body(default=None),
) -> ToolCallResponse:
    response = await request.app.state.dispatcher.dispatch(name, arguments)
    return ToolCallResponse(**response.to_dict())
