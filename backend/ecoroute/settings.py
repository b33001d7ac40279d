from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

REPO_ROOT = Path(__file__).resolve().parents[2]
ENV_FILE = REPO_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE), env_file_encoding="utf-8", extra="ignore"
    )

    # human-readable console logs instead of JSON
    DEBUG: bool = False

    # Routing provider (OSRM)
    OSRM_BASE_URL: str = "https://router.project-osrm.org"
    OSRM_PROFILE: str = "driving"
    OSRM_TIMEOUT_SECONDS: float = Field(default=6.0, gt=0)
    OSRM_CONNECT_TIMEOUT_SECONDS: float = Field(default=3.0, gt=0)
    OSRM_ALTERNATIVES: bool = True

    # Upper bound the resolver puts around any provider fetch
    PROVIDER_TIMEOUT_SECONDS: float = Field(default=8.0, gt=0)

    # Travel speed assumptions (km/h)
    URBAN_SPEED_KMH: float = Field(default=40.0, gt=0)
    WALKING_SPEED_KMH: float = Field(default=5.0, gt=0)
    CYCLING_SPEED_KMH: float = Field(default=15.0, gt=0)

    # Map fitting hints. The tier-2 straight line gets wider padding and a
    # lower zoom ceiling than provider and tier-1 routes.
    FIT_PADDING_PX: int = Field(default=50, ge=0)
    FIT_MAX_ZOOM: int = Field(default=15, ge=1, le=22)
    FALLBACK_LINE_PADDING_PX: int = Field(default=150, ge=0)
    FALLBACK_LINE_MAX_ZOOM: int = Field(default=13, ge=1, le=22)

    # Marker icon handed to the rendering collaborator
    MARKER_ICON_URL: str = (
        "https://unpkg.com/leaflet@1.9.4/dist/images/marker-icon.png"
    )
    MARKER_SHADOW_URL: str = (
        "https://unpkg.com/leaflet@1.9.4/dist/images/marker-shadow.png"
    )

    # Circuit breaker around the routing provider
    CIRCUIT_BREAKER_ENABLED: bool = True
    CIRCUIT_FAILURE_THRESHOLD: int = Field(default=3, ge=1)
    CIRCUIT_COOLDOWN_SECONDS: float = Field(default=60.0, ge=0)

    # Seed for the mock provider and mock geocoder
    MOCK_SEED: int = 42


settings = Settings()
