"""Health, tool and manifest schemas for the service surface."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Standard health check response."""

    status: str = "ok"


class ToolParameter(BaseModel):
    """Parameter definition for a tool."""

    name: str
    type: str  # string, integer, boolean, number, array, object
    description: str
    required: bool = True


class ToolDefinition(BaseModel):
    """Definition of a single tool exposed by the service."""

    name: str  # e.g. "weather.weather_snapshot"
    description: str
    parameters: list[ToolParameter]
    required_permission: str = "guest"


class ModuleManifest(BaseModel):
    """Manifest describing the service and its tools."""

    module_name: str
    description: str
    tools: list[ToolDefinition]


class ToolCall(BaseModel):
    """A tool call request."""

    tool_name: str
    arguments: dict


class ToolResult(BaseModel):
    """Result from a tool execution."""

    tool_name: str
    success: bool
    result: Any = None
    error: str | None = None
