"""Configuration loader for the book library tracker."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "Book Library"
    version: str = "1.0.0"


class StorageConfig(BaseModel):
    """Local persistence configuration."""

    sqlite_path: str = "./db/library.db"
    library_key: str = "library_v1"
    theme_key: str = "theme"
    default_theme: str = "dark"


class GenerationConfig(BaseModel):
    """Generative-AI service configuration."""

    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    text_model: str = "gemini-3-flash-preview"
    image_model: str = "gemini-2.5-flash-image"
    timeout_seconds: float = 60.0
    image_aspect_ratio: str = "2:3"


class CoverConfig(BaseModel):
    """Cover image URL templates."""

    drive_image_template: str = "https://lh3.googleusercontent.com/u/0/d/{file_id}"
    placeholder_template: str = "https://via.placeholder.com/400x600/4f46e5/ffffff?text={text}"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    covers: CoverConfig = Field(default_factory=CoverConfig)

    # API key loaded from environment
    gemini_api_key: str | None = None


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    # Secrets never come from the YAML file
    yaml_data.pop("gemini_api_key", None)
    config = AppConfig(**yaml_data)

    config.gemini_api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")

    return config
