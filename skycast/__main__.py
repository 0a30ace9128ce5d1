"""Run the weather service: ``python -m skycast``."""

from __future__ import annotations

import asyncio

import uvicorn

from skycast.config import get_settings
from skycast.main import app, logger


async def serve() -> None:
    settings = get_settings()
    logger.info("starting_weather_service", host=settings.host, port=settings.port)
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level="info",
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(serve())
