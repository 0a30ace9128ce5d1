"""Weather service FastAPI app."""

from __future__ import annotations

import httpx
import structlog
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skycast.auth import require_service_auth
from skycast.config import get_settings
from skycast.errors import WeatherError, classify_error, user_message
from skycast.manifest import MANIFEST
from skycast.orchestrator import build_orchestrator
from skycast.schemas import HealthResponse, ModuleManifest, ToolCall, ToolResult
from skycast.tools import WeatherTools

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
)

logger = structlog.get_logger()
app = FastAPI(title="Weather Service", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

tools: WeatherTools | None = None
http_client: httpx.AsyncClient | None = None


@app.on_event("startup")
async def startup():
    global tools, http_client
    settings = get_settings()

    http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    orchestrator = build_orchestrator(settings, http_client)
    tools = WeatherTools(orchestrator)
    logger.info(
        "weather_service_ready",
        sources=[p.label for p in orchestrator.providers],
        cache_ttl=settings.cache_ttl_seconds,
        cooldown=settings.provider_cooldown_seconds,
    )


@app.on_event("shutdown")
async def shutdown():
    global http_client
    if http_client is not None:
        await http_client.aclose()
        http_client = None


@app.get("/manifest", response_model=ModuleManifest)
async def manifest(_=Depends(require_service_auth)):
    """Return the service manifest."""
    return MANIFEST


@app.post("/execute", response_model=ToolResult)
async def execute(call: ToolCall, _=Depends(require_service_auth)):
    """Execute a tool call."""
    if tools is None:
        return ToolResult(tool_name=call.tool_name, success=False, error="Service not ready")

    try:
        tool_name = call.tool_name.split(".")[-1]
        args = dict(call.arguments)

        if tool_name == "weather_snapshot":
            result = await tools.weather_snapshot(**args)
        elif tool_name == "weather_sources":
            result = await tools.weather_sources()
        elif tool_name == "weather_reset":
            result = await tools.weather_reset()
        else:
            return ToolResult(
                tool_name=call.tool_name,
                success=False,
                error=f"Unknown tool: {call.tool_name}",
            )

        return ToolResult(tool_name=call.tool_name, success=True, result=result)
    except WeatherError as e:
        category = classify_error(e)
        logger.warning("weather_unavailable", tool=call.tool_name, category=category.value, error=str(e))
        return ToolResult(
            tool_name=call.tool_name,
            success=False,
            result={"category": category.value, "detail": str(e)},
            error=user_message(e),
        )
    except Exception as e:
        logger.error("tool_execution_error", tool=call.tool_name, error=str(e), exc_info=True)
        return ToolResult(tool_name=call.tool_name, success=False, error=str(e))


@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok")
