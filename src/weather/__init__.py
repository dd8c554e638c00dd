from .client import WeatherAPIError, WeatherClient

__all__ = ["WeatherClient", "WeatherAPIError"]
