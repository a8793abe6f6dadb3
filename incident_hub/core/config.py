from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env lives in the project root (same level as "incident_hub/")
load_dotenv(Path(__file__).resolve().parents[2] / ".env")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    app_name: str = "Community Incident Reporter"

    mongo_uri: str = Field("mongodb://localhost:27017", alias="MONGO_URI")
    mongo_db: str = Field("incident_hub", alias="MONGO_DB")

    google_maps_api_key: Optional[str] = Field(None, alias="GOOGLE_MAPS_API_KEY")
    geolocation_url: str = Field(
        "https://www.googleapis.com/geolocation/v1/geolocate", alias="GEOLOCATION_URL"
    )
    geocoding_url: str = Field(
        "https://maps.googleapis.com/maps/api/geocode/json", alias="GEOCODING_URL"
    )
    device_timeout_seconds: float = Field(5.0, alias="DEVICE_TIMEOUT_SECONDS")
    maps_timeout_seconds: float = Field(10.0, alias="MAPS_TIMEOUT_SECONDS")

    upload_dir: str = Field("uploads", alias="UPLOAD_DIR")
    public_base_url: str = Field("http://localhost:8000", alias="PUBLIC_BASE_URL")
    max_photos: int = Field(5, alias="MAX_PHOTOS")

    session_ttl_hours: int = Field(24 * 14, alias="SESSION_TTL_HOURS")

    # comma separated
    cors_origins: str = Field(
        "http://localhost:3000,http://127.0.0.1:3000", alias="CORS_ORIGINS"
    )

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_dir: Optional[str] = Field(None, alias="LOG_DIR")

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
