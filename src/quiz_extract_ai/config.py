"""
Configuration management for quiz-extract-ai.

Handles loading configuration from YAML files and environment variables.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file if present (before Settings initialization)
load_dotenv()

# Conventional tessdata locations, checked in order
DEFAULT_TESSDATA_CANDIDATES = [
    "/usr/share/tesseract-ocr/5/tessdata",
    "/usr/share/tesseract-ocr/4.00/tessdata",
    "/usr/share/tessdata",
    "/usr/local/share/tessdata",
    "/opt/homebrew/share/tessdata",
    "C:/Program Files/Tesseract-OCR/tessdata",
]


class GenerationProvider(str, Enum):
    """Available LLM providers."""

    OPENAI = "openai"
    OPENROUTER = "openrouter"


class OCRConfig(BaseModel):
    """Configuration for Tesseract OCR."""

    enabled: bool = Field(default=True)
    language: str = Field(default="eng")
    # Explicit tessdata directory; takes precedence over the candidates below
    tessdata_dir: Path | None = Field(default=None)
    tessdata_candidates: list[Path] = Field(
        default_factory=lambda: [Path(p) for p in DEFAULT_TESSDATA_CANDIDATES]
    )
    page_segmentation_mode: int = Field(default=3, ge=0, le=13)
    timeout_seconds: int = Field(default=60, ge=0, le=600)  # 0 = no timeout
    max_concurrent_images: int = Field(default=1, ge=1, le=16)
    # Path to the tesseract binary, if not on PATH
    tesseract_cmd: str = Field(default="")

    @field_validator("tessdata_dir")
    @classmethod
    def expand_tessdata_dir(cls, v: Path | None) -> Path | None:
        """Expand user home directory."""
        return Path(v).expanduser() if v else None


class GenerationConfig(BaseModel):
    """Configuration for the question-generation model."""

    provider: GenerationProvider = Field(default=GenerationProvider.OPENAI)
    model: str = Field(default="default")
    api_key: str = Field(default="")
    base_url: str = Field(default="")
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4096, ge=256, le=32000)
    timeout_seconds: float = Field(default=120.0, ge=5.0, le=600.0)
    max_retries: int = Field(default=3, ge=1, le=10)
    # Request a JSON object response format (disable for endpoints that reject it)
    json_mode: bool = Field(default=True)
    # Optional secondary provider used when the primary fails
    fallback_provider: GenerationProvider | None = Field(default=None)
    fallback_model: str = Field(default="default")
    fallback_api_key: str = Field(default="")


class ExtractionConfig(BaseModel):
    """Configuration for text extraction and prompting."""

    # Use pymupdf4llm markdown output for PDFs (keeps tables readable)
    pdf_markdown: bool = Field(default=False)
    # Truncate document text before prompting (0 = unlimited)
    max_input_chars: int = Field(default=0, ge=0)
    # Return no questions for blank documents without calling the model
    skip_model_on_empty_text: bool = Field(default=False)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO")
    file: Path | None = Field(default=None)
    format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    max_file_size_mb: int = Field(default=10, ge=1, le=100)
    backup_count: int = Field(default=5, ge=1, le=20)


class Settings(BaseSettings):
    """Main settings class that combines all configurations."""

    model_config = SettingsConfigDict(
        env_prefix="QUIZ_EXTRACT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    ocr: OCRConfig = Field(default_factory=OCRConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def __init__(self, **data: Any) -> None:
        """Initialize with environment variable fallbacks for API keys."""
        super().__init__(**data)
        if not self.generation.api_key:
            self.generation.api_key = _provider_api_key(self.generation.provider)
        if self.generation.fallback_provider and not self.generation.fallback_api_key:
            self.generation.fallback_api_key = _provider_api_key(self.generation.fallback_provider)
        if not self.ocr.tessdata_dir and os.getenv("TESSDATA_PREFIX"):
            self.ocr.tessdata_dir = Path(os.environ["TESSDATA_PREFIX"])

    @classmethod
    def from_yaml(cls, path: Path | str) -> Settings:
        """Load settings from a YAML file, with environment variable overrides."""
        path = Path(path)
        if not path.exists():
            # Return defaults if file doesn't exist
            return cls()

        with open(path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        # Process environment variable substitutions in YAML values
        yaml_config = _substitute_env_vars(yaml_config)

        return cls(**yaml_config)


def _provider_api_key(provider: GenerationProvider) -> str:
    env_var = {
        GenerationProvider.OPENAI: "OPENAI_API_KEY",
        GenerationProvider.OPENROUTER: "OPENROUTER_API_KEY",
    }[provider]
    return os.getenv(env_var, "")


def _substitute_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively substitute ${ENV_VAR} patterns in config values."""
    result = {}
    for key, value in config.items():
        if isinstance(value, dict):
            result[key] = _substitute_env_vars(value)
        elif isinstance(value, str) and value.startswith("${") and value.endswith("}"):
            env_var = value[2:-1]
            result[key] = os.getenv(env_var, "")
        elif isinstance(value, list):
            result[key] = [
                _substitute_env_vars(item) if isinstance(item, dict) else item for item in value
            ]
        else:
            result[key] = value
    return result


def load_config(path: Path | str | None = None) -> Settings:
    """
    Load configuration from YAML file or return defaults.

    Args:
        path: Path to YAML config file. If None, looks for config.yaml in current directory.

    Returns:
        Settings instance with merged YAML and environment configurations.
    """
    if path is None:
        default_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(".quiz-extract.yaml"),
        ]
        for p in default_paths:
            if p.exists():
                path = p
                break

    if path is not None:
        return Settings.from_yaml(path)

    return Settings()


DEFAULT_CONFIG_YAML = """# quiz-extract-ai configuration

ocr:
  enabled: true
  language: eng
  # tessdata_dir: /usr/share/tesseract-ocr/5/tessdata
  page_segmentation_mode: 3
  timeout_seconds: 60
  # OCR embedded DOCX pictures concurrently (1 = sequential)
  max_concurrent_images: 1

generation:
  # "openai" or "openrouter"
  provider: openai
  model: default
  # api_key: ${OPENAI_API_KEY}
  temperature: 0.2
  max_tokens: 4096
  max_retries: 3
  # fallback_provider: openrouter
  # fallback_model: default
  # fallback_api_key: ${OPENROUTER_API_KEY}

extraction:
  pdf_markdown: false
  max_input_chars: 0
  skip_model_on_empty_text: false

logging:
  level: INFO
  # file: ./logs/quiz-extract.log
"""


def create_default_config(path: Path | str = "config.yaml") -> None:
    """Create a default configuration file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(DEFAULT_CONFIG_YAML)
