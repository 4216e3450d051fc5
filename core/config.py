# core/config.py

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class TesseraConfig(BaseSettings):
    """Configuration for the TESSERA layout engine."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="TESSERA_")

    # Data source
    data_source_url: str = "https://sheetdb.io/api/v1/ko70jl7ke64px"
    request_timeout: float = 10.0  # seconds

    # Transitions
    base_duration: float = 2.0  # seconds; each tween lasts between 1x and 2x this
    initial_layout: Literal["table", "sphere", "helix", "grid"] = "table"
    scatter_extent: float = 2000.0  # initial positions in [-extent, extent)
    random_seed: Optional[int] = None

    # Frame clock
    frame_rate: float = 60.0

    # Viewport
    viewport_width: int = 1280
    viewport_height: int = 720

    # Logging
    log_level: str = "INFO"
