"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from quiz_extract_ai.config import (
    DEFAULT_CONFIG_YAML,
    GenerationProvider,
    Settings,
    create_default_config,
    load_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("OPENAI_API_KEY", "OPENROUTER_API_KEY", "TESSDATA_PREFIX", "QUIZ_TEST_KEY"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings()

    assert settings.ocr.enabled
    assert settings.ocr.language == "eng"
    assert settings.ocr.max_concurrent_images == 1
    assert settings.generation.provider == GenerationProvider.OPENAI
    assert settings.generation.json_mode
    assert settings.extraction.max_input_chars == 0
    assert not settings.extraction.skip_model_on_empty_text
    assert settings.logging.file is None


def test_api_key_from_provider_env(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-env")

    settings = Settings(generation={"provider": "openrouter"})

    assert settings.generation.api_key == "sk-or-env"


def test_fallback_key_from_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-primary")
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-fallback")

    settings = Settings(generation={"fallback_provider": "openrouter"})

    assert settings.generation.api_key == "sk-primary"
    assert settings.generation.fallback_api_key == "sk-fallback"


def test_explicit_key_not_overridden(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    assert Settings(generation={"api_key": "sk-explicit"}).generation.api_key == "sk-explicit"


def test_tessdata_prefix_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TESSDATA_PREFIX", str(tmp_path))
    assert Settings().ocr.tessdata_dir == tmp_path


def test_nested_env_override(monkeypatch):
    monkeypatch.setenv("QUIZ_EXTRACT_OCR__LANGUAGE", "eng+hin")
    monkeypatch.setenv("QUIZ_EXTRACT_EXTRACTION__MAX_INPUT_CHARS", "5000")

    settings = Settings()

    assert settings.ocr.language == "eng+hin"
    assert settings.extraction.max_input_chars == 5000


def test_out_of_range_rejected():
    with pytest.raises(ValidationError):
        Settings(ocr={"page_segmentation_mode": 42})


def test_yaml_with_env_substitution(monkeypatch, tmp_path):
    monkeypatch.setenv("QUIZ_TEST_KEY", "sk-from-yaml-env")
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "generation": {"api_key": "${QUIZ_TEST_KEY}", "model": "quality"},
                "ocr": {"enabled": False, "tessdata_dir": "~/tessdata"},
            }
        )
    )

    settings = load_config(path)

    assert settings.generation.api_key == "sk-from-yaml-env"
    assert settings.generation.model == "quality"
    assert not settings.ocr.enabled
    assert settings.ocr.tessdata_dir == Path("~/tessdata").expanduser()


def test_missing_yaml_gives_defaults(tmp_path):
    assert Settings.from_yaml(tmp_path / "absent.yaml").ocr.enabled


def test_load_config_discovers_file_in_cwd(monkeypatch, tmp_path):
    (tmp_path / "config.yaml").write_text("ocr:\n  language: deu\n")
    monkeypatch.chdir(tmp_path)

    assert load_config().ocr.language == "deu"


def test_default_config_loads(tmp_path):
    path = tmp_path / "nested" / "config.yaml"
    create_default_config(path)

    assert path.read_text() == DEFAULT_CONFIG_YAML
    settings = load_config(path)
    assert settings.generation.provider == GenerationProvider.OPENAI
    assert settings.ocr.page_segmentation_mode == 3
