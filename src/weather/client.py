"""WeatherAPI.com client: current conditions plus air quality for a coordinate."""

import os
from typing import Optional

import httpx
import structlog

from cli.retry import http_retry

logger = structlog.get_logger()

WEATHER_API_URL = "https://api.weatherapi.com/v1/current.json"


class WeatherAPIError(Exception):
    """Upstream failure; ``status_code`` is what the caller should return."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class WeatherClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = WEATHER_API_URL,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key or os.getenv("WEATHER_API_KEY")
        self.base_url = base_url
        self.client = client or httpx.Client(timeout=timeout)

    @http_retry()
    def _get(self, params: dict) -> httpx.Response:
        return self.client.get(self.base_url, params=params)

    def current(self, latitude: float, longitude: float) -> dict:
        """Raw ``current.json?aqi=yes`` payload for a coordinate.

        Raises:
            WeatherAPIError: No API key, transport failure, or non-2xx upstream
                status (message taken from the upstream error body when present).
        """
        if not self.api_key:
            raise WeatherAPIError("Weather API key is not configured", 500)

        params = {"key": self.api_key, "q": f"{latitude},{longitude}", "aqi": "yes"}
        try:
            response = self._get(params)
        except httpx.RequestError as e:
            logger.error("weather.request_failed", error=str(e))
            raise WeatherAPIError(f"Weather API request failed: {e}", 502) from e

        if response.is_error:
            message = f"Weather API request failed with status {response.status_code}"
            try:
                message = response.json()["error"]["message"] or message
            except (ValueError, KeyError, TypeError):
                pass
            logger.warning("weather.upstream_error", status=response.status_code, error=message)
            raise WeatherAPIError(message, response.status_code)

        return response.json()

    def close(self):
        self.client.close()
