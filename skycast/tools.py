"""Weather tool implementations."""

from __future__ import annotations

import structlog

from skycast.models import WeatherQuery
from skycast.orchestrator import WeatherOrchestrator

logger = structlog.get_logger()


class WeatherTools:
    """Tool implementations backed by the weather orchestrator."""

    def __init__(self, orchestrator: WeatherOrchestrator):
        self.orchestrator = orchestrator

    async def weather_snapshot(self, latitude: float, longitude: float, name: str) -> dict:
        """Get the unified weather snapshot for a coordinate."""
        query = WeatherQuery.of(latitude, longitude, name)
        snapshot, source = await self.orchestrator.fetch_with_source(query)
        return {
            **snapshot.model_dump(mode="json"),
            "description": snapshot.current.description,
            "source": source.label,
        }

    async def weather_sources(self) -> dict:
        """Report which providers are available and which one answered last."""
        sources = await self.orchestrator.source_status()
        last = self.orchestrator.last_used_provider
        return {
            "last_used": last.label if last else None,
            "sources": sources,
        }

    async def weather_reset(self) -> dict:
        """Clear provider cooldowns and cached snapshots."""
        await self.orchestrator.reset_errors()
        await self.orchestrator.clear_cache()
        return {"reset": True}
