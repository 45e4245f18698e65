from functools import lru_cache
from pathlib import Path
from typing import List
import tempfile

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SPEED_LIMITS_PATH = Path(__file__).resolve().parent.parent / "data" / "speed_limits.json"


class Settings(BaseSettings):
    # API Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: str = "*"  # Comma-separated list

    # Environment name
    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "app.log"  # Empty string disables the file handler

    # Route provider (OSRM)
    OSRM_BASE_URL: str = "http://router.project-osrm.org/route/v1/driving"
    ROUTE_GEOMETRY: str = "geojson"
    ROUTE_TIMEOUT_S: float = 30.0

    # Jurisdiction resolver (Nominatim reverse geocoding)
    NOMINATIM_URL: str = "https://nominatim.openstreetmap.org/reverse"
    NOMINATIM_USER_AGENT: str = "Waystop/0.1"
    REVERSE_GEOCODE_TIMEOUT_S: float = 10.0

    # Speed limits
    SPEED_LIMITS_PATH: Path = DEFAULT_SPEED_LIMITS_PATH
    DEFAULT_SPEED_MPH: float = 60.0
    UNKNOWN_JURISDICTION_SPEED_MPH: float = 60.0

    # Stop generation
    USER_STOP_TOLERANCE_DEG: float = 0.05

    # Spreadsheet exports are written here and removed once streamed
    EXPORT_DIR: Path = Path(tempfile.gettempdir())

    model_config = SettingsConfigDict(
        case_sensitive=True,  # Variables are case-sensitive
        env_file=".env",      # Load environment variables from .env file
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("ROUTE_GEOMETRY")
    @classmethod
    def check_route_geometry(cls, v: str) -> str:
        v = v.lower()
        if v not in ("geojson", "polyline"):
            raise ValueError(f"ROUTE_GEOMETRY must be 'geojson' or 'polyline', got '{v}'")
        return v

    @field_validator("DEFAULT_SPEED_MPH", "UNKNOWN_JURISDICTION_SPEED_MPH", "USER_STOP_TOLERANCE_DEG")
    @classmethod
    def check_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


@lru_cache()  # Cache the settings object for performance
def get_settings() -> Settings:
    return Settings()
