"""api/routes/tools.py: Direct tool invocation endpoint.

POST /tools/call: execute a registered MusicalTool by name with a params dict.
GET  /tools/list: list all registered tools with their parameter schemas.

Thin HTTP boundary: no business logic. Delegates to the global ToolRegistry
in tools/registry.py. Tool errors are encoded in the response body
(success=False, error=str); only an unknown tool name is an HTTP error.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from tools.registry import get_registry

router = APIRouter(prefix="/tools", tags=["tools"])


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class ToolCallRequest(BaseModel):
    """POST /tools/call request body."""

    name: str
    """Tool name as returned by GET /tools/list."""

    params: dict[str, Any] = Field(default_factory=dict)
    """Keyword arguments forwarded to the tool."""


class ToolCallResponse(BaseModel):
    """POST /tools/call response body."""

    success: bool
    data: Any = None
    error: str | None = None
    metadata: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("/call", response_model=ToolCallResponse)
def call_tool(request: ToolCallRequest) -> ToolCallResponse:
    """Execute a registered tool by name.

    Raises:
        HTTPException(404): Tool not registered.
    """
    registry = get_registry()
    tool = registry.get(request.name)
    if tool is None:
        available = [t["name"] for t in registry.list_tools()]
        raise HTTPException(
            status_code=404,
            detail=f"Tool '{request.name}' not found. Available tools: {available}",
        )

    result = tool(**request.params)
    return ToolCallResponse(
        success=result.success,
        data=result.data,
        error=result.error,
        metadata=result.metadata,
    )


@router.get("/list")
def list_tools() -> list[dict[str, Any]]:
    """List all registered tools with their parameter schemas."""
    return get_registry().list_tools()
