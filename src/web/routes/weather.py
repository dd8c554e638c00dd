"""Weather proxy route (WeatherAPI current conditions + air quality)."""

import structlog
from fastapi import APIRouter, HTTPException

from weather import WeatherAPIError
from web.deps import get_weather_client
from web.models import WeatherRequest

logger = structlog.get_logger()

router = APIRouter(prefix="/api/weather", tags=["weather"])


@router.post("")
def current_weather(body: WeatherRequest):
    """Raw WeatherAPI payload for the given coordinates."""
    client = get_weather_client()
    try:
        if not client.api_key:
            raise HTTPException(status_code=500, detail="Weather API key is not configured")
        if body.latitude is None or body.longitude is None:
            raise HTTPException(status_code=400, detail="Latitude and longitude are required")
        return client.current(body.latitude, body.longitude)
    except WeatherAPIError as e:
        logger.error("weather.proxy_error", status=e.status_code, error=e.message)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    finally:
        client.close()
