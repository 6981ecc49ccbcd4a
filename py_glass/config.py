"""Configuration management."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from GLASS_* environment variables or .env."""

    model_config = SettingsConfigDict(env_prefix="GLASS_", env_file=".env", extra="ignore")

    # Drawable area and sites
    width: int = Field(default=2320, ge=1, le=20000, description="Image width in pixels")
    height: int = Field(default=800, ge=1, le=20000, description="Image height in pixels")
    num_points: int = Field(default=20, ge=1, le=2000, description="Number of sites")
    seed: Optional[str] = Field(default=None, description="Random seed (random when unset)")

    # Algorithm tuning
    tolerance: float = Field(
        default=1.0, gt=0, description="Squared-distance tolerance for equidistant samples"
    )
    degree_threshold: int = Field(
        default=6, ge=1, le=6, description="Residual degree threshold of the elimination order"
    )
    workers: int = Field(default=1, ge=1, le=64, description="Threads for bisector sampling")

    # Rendering
    grid_columns: int = Field(default=58, ge=0, description="Guide grid columns (0 disables)")
    grid_rows: int = Field(default=20, ge=0, description="Guide grid rows (0 disables)")

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8822, description="API port")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="console", description="Log format (console or json)")

    @property
    def grid(self):
        """Guide grid as (columns, rows), or None when disabled."""
        if self.grid_columns and self.grid_rows:
            return (self.grid_columns, self.grid_rows)
        return None


settings = Settings()
