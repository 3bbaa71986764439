from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CONSTELLATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Constellation Configuration
    max_locations: int = Field(
        default=2000, ge=1,
        description="Max locations accepted per build; building is quadratic in this",
    )
    max_track_points: int = Field(
        default=20000, ge=1,
        description="Max raw points accepted per request, checked before collapsing",
    )
    default_viewport_width: float = Field(default=400, description="Default viewport width")
    default_viewport_height: float = Field(default=400, description="Default viewport height")

    # Location Preparation
    track_minimum_distance_m: float = Field(
        default=1609.34, description="Movement in meters that starts a new place"
    )
    most_visited_radius_m: float = Field(
        default=5000, description="Radius in meters grouping visits to one place"
    )


# Instantiate singleton settings object
settings = Settings()
