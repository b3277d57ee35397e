"""The uniform result envelope returned by every tool operation."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ToolResult:
    """Normalized outcome of a tool call.

    ``message`` is always human readable. A failed result carries no data
    beyond diagnostic flags such as ``textFound``.
    """

    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None

    @classmethod
    def ok(cls, message: str, **data: Any) -> "ToolResult":
        return cls(True, message, data or None)

    @classmethod
    def fail(cls, message: str, **data: Any) -> "ToolResult":
        return cls(False, message, data or None)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


def error_message(exc: BaseException) -> str:
    """Render an exception the way provider errors are passed through to callers."""
    return str(exc) or exc.__class__.__name__
