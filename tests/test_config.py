import pytest

from finmate.config import (
    DEFAULT_BASE_URL,
    DEFAULT_FALLBACK_MODELS,
    DEFAULT_PRIMARY_MODEL,
    ExtractionSettings,
    parse_model_list,
)
from finmate.errors import ConfigurationError


def test_defaults_from_empty_env():
    settings = ExtractionSettings.from_env({})

    assert settings.api_key is None
    assert settings.project_id is None
    assert settings.primary_model == DEFAULT_PRIMARY_MODEL
    assert settings.fallback_models == DEFAULT_FALLBACK_MODELS
    assert settings.base_url == DEFAULT_BASE_URL
    with pytest.raises(ConfigurationError):
        settings.require_credentials()


def test_primary_env_vars_take_precedence():
    settings = ExtractionSettings.from_env(
        {
            "GOOGLE_API_KEY": "google",
            "GEMINI_API_KEY": "gemini",
            "GOOGLE_PROJECT_ID": "proj-a",
            "GOOGLE_CLOUD_PROJECT": "proj-b",
            "PARSE_FIELDS_MODEL": "custom-model",
            "PARSE_FIELDS_MODEL_FALLBACKS": " alt-1, ,alt-2 ,",
            "FINMATE_GENERATIVE_BASE_URL": "http://localhost:9999/v1/",
        }
    )

    assert settings.require_credentials() == "google"
    assert settings.project_id == "proj-a"
    assert settings.primary_model == "custom-model"
    assert settings.fallback_models == ("alt-1", "alt-2")
    assert settings.base_url == "http://localhost:9999/v1"


def test_alternate_env_vars():
    settings = ExtractionSettings.from_env(
        {"GEMINI_API_KEY": "gemini", "GOOGLE_CLOUD_PROJECT": "proj-b", "GOOGLE_API_KEY": "  "}
    )
    assert settings.api_key == "gemini"
    assert settings.project_id == "proj-b"


def test_key_without_project_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        ExtractionSettings.from_env({"GOOGLE_API_KEY": "k"}).require_credentials()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, ()), ("", ()), ("a", ("a",)), ("a,b", ("a", "b")), (" , a ,, b ", ("a", "b"))],
)
def test_parse_model_list(raw, expected):
    assert parse_model_list(raw) == expected
