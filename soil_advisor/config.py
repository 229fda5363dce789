# soil_advisor/config.py
import os
from typing import List
from pydantic import BaseModel
from dotenv import load_dotenv

class Settings(BaseModel):
    # 🤖 LLM
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_temperature: float = 0.2
    gemini_max_retries: int = 0   # no retry policy unless asked for

    # 🌦 Weather (optional, features degrade without a key)
    openweather_api_key: str = ""
    openweather_base_url: str = "https://api.openweathermap.org/data/2.5"
    openweather_units: str = "metric"
    weather_timeout: float = 10.0
    default_location: str = "New Delhi, India"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


def load_settings() -> Settings:
    """Read settings from the environment (and .env if present)."""
    load_dotenv()
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        gemini_temperature=float(os.getenv("GEMINI_TEMPERATURE", "0.2")),
        gemini_max_retries=int(os.getenv("GEMINI_MAX_RETRIES", "0")),
        openweather_api_key=os.getenv("OPENWEATHER_API_KEY", ""),
        openweather_base_url=os.getenv("OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5"),
        weather_timeout=float(os.getenv("WEATHER_TIMEOUT", "10")),
        default_location=os.getenv("DEFAULT_LOCATION", "New Delhi, India"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
