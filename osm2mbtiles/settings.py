"""
Settings for the converter, read from the environment.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    extensions: list[str] = ["png", "jpg"]
    "File extensions (without the dot, case-insensitive) imported as tiles."

    commit_interval: int = Field(1000, gt=0)
    "Number of tiles written between commits."

    conversion_log_limit: int = Field(100, ge=0)
    "How many row conversions to log at debug level, counting from the first tile."

    derive_metadata: bool = True
    "Fill in minzoom, maxzoom and bounds metadata from the imported tiles when not configured."

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    class Config:
        env_prefix = "OSM2MBTILES_"


settings = Settings()
