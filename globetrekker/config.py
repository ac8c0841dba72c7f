# ABOUTME: Runtime settings for the external data sources, read from the environment.
# ABOUTME: Loads a .env file first so API keys can live outside the shell environment.

import os

from dotenv import load_dotenv
from pydantic import BaseModel

RESTCOUNTRIES_URL = "https://restcountries.com/v3.1"
OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5"
EXCHANGE_RATE_URL = "https://v6.exchangerate-api.com/v6"


class Settings(BaseModel):
    """API keys, base URLs and the HTTP timeout used by every service."""

    openweather_api_key: str = ""
    exchange_rate_api_key: str = ""
    restcountries_url: str = RESTCOUNTRIES_URL
    openweather_url: str = OPENWEATHER_URL
    exchange_rate_url: str = EXCHANGE_RATE_URL
    http_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, after loading .env if present."""
        load_dotenv()
        return cls(
            openweather_api_key=os.environ.get("OPENWEATHER_API_KEY", ""),
            exchange_rate_api_key=os.environ.get("EXCHANGE_RATE_API_KEY", ""),
            restcountries_url=os.environ.get("RESTCOUNTRIES_URL", RESTCOUNTRIES_URL),
            openweather_url=os.environ.get("OPENWEATHER_URL", OPENWEATHER_URL),
            exchange_rate_url=os.environ.get("EXCHANGE_RATE_URL", EXCHANGE_RATE_URL),
            http_timeout=float(os.environ.get("HTTP_TIMEOUT", "10")),
        )
