import pytest

from conftest import FakeCompletion
from soil_advisor.config import Settings, load_settings
from soil_advisor.main import create_app


def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-test")
    monkeypatch.setenv("OPENWEATHER_API_KEY", "w-key")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, https://farm.example")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    s = load_settings()
    assert s.gemini_api_key == "g-key"
    assert s.gemini_model == "gemini-test"
    assert s.openweather_api_key == "w-key"
    assert s.port == 8080
    assert s.cors_origins == ["http://localhost:5173", "https://farm.example"]
    assert s.log_level == "DEBUG"


def test_defaults():
    s = Settings()
    assert s.port == 3000
    assert s.default_location == "New Delhi, India"
    assert s.gemini_max_retries == 0
    assert s.openweather_api_key == ""


def test_startup_aborts_without_gemini_key():
    with pytest.raises(RuntimeError, match="GEMINI_API_KEY"):
        create_app(Settings(gemini_api_key=""))


def test_injected_completion_needs_no_key():
    app = create_app(Settings(), llm=FakeCompletion())
    assert app.state.llm is not None
    assert not app.state.weather.configured
