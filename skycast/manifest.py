"""Weather service manifest: tool definitions."""

from skycast.schemas import ModuleManifest, ToolDefinition, ToolParameter

MANIFEST = ModuleManifest(
    module_name="weather",
    description=(
        "Get a unified weather snapshot (current conditions, 48-hour and multi-day forecast) "
        "for a coordinate. Falls back across Open-Meteo, wthrcdn and Visual Crossing."
    ),
    tools=[
        ToolDefinition(
            name="weather.weather_snapshot",
            description=(
                "Get current conditions, the next 48 hours, and up to 16 days of forecast "
                "for a coordinate. The place name is used for display and for the "
                "China-region source, which looks weather up by city name. "
                "Example: 'What's the weather at 31.23, 121.47 (Shanghai)?'"
            ),
            parameters=[
                ToolParameter(
                    name="latitude",
                    type="number",
                    description="Latitude in decimal degrees (-90 to 90)",
                ),
                ToolParameter(
                    name="longitude",
                    type="number",
                    description="Longitude in decimal degrees (-180 to 180)",
                ),
                ToolParameter(
                    name="name",
                    type="string",
                    description="Display name of the place (e.g. 'Shanghai', '北京')",
                ),
            ],
            required_permission="guest",
        ),
        ToolDefinition(
            name="weather.weather_sources",
            description=(
                "List the weather sources with their priority, whether each is available "
                "or cooling down after a failure, and which source answered last."
            ),
            parameters=[],
            required_permission="guest",
        ),
        ToolDefinition(
            name="weather.weather_reset",
            description="Clear source cooldowns and cached snapshots so the next request refetches.",
            parameters=[],
            required_permission="admin",
        ),
    ],
)
