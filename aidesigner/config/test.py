"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_available_llm_providers,
    get_environment,
    get_environment_info,
    get_session_db_path,
    list_environment_variables,
)


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("COMPLETION_MAX_RETRIES", raising=False)
        assert get_environment(EnvVar.COMPLETION_MAX_RETRIES) == 2

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("COMPLETION_MAX_RETRIES", "9")
        assert get_environment(EnvVar.COMPLETION_MAX_RETRIES, override=4) == 4

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("COMPLETION_MAX_RETRIES", "5")
        result = get_environment(EnvVar.COMPLETION_MAX_RETRIES)
        assert result == 5
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_float_type_conversion(self, monkeypatch):
        """Float type conversion from string."""
        monkeypatch.setenv("COMPLETION_RETRY_DELAY", "0.25")
        assert get_environment(EnvVar.COMPLETION_RETRY_DELAY) == 0.25

    @pytest.mark.unit
    def test_invalid_float_returns_default(self, monkeypatch):
        """Invalid float value returns default."""
        monkeypatch.setenv("COMPLETION_TIMEOUT", "soon")
        assert get_environment(EnvVar.COMPLETION_TIMEOUT) == 60.0

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Invalid integer value returns default."""
        monkeypatch.setenv("COMPLETION_MAX_RETRIES", "many")
        assert get_environment(EnvVar.COMPLETION_MAX_RETRIES) == 2

    @pytest.mark.unit
    def test_path_type_conversion(self, monkeypatch, tmp_path):
        """Path variables are converted to Path objects."""
        monkeypatch.setenv("SESSION_DB_PATH", str(tmp_path / "s.db"))
        assert get_environment(EnvVar.SESSION_DB_PATH) == tmp_path / "s.db"

    @pytest.mark.unit
    def test_none_default_for_api_keys(self, monkeypatch):
        """API keys default to None when not set."""
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        assert get_environment(EnvVar.GEMINI_API_KEY) is None


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.COMPLETION_RETRY_DELAY)
        assert isinstance(info, EnvConfig)
        assert info.name == "COMPLETION_RETRY_DELAY"
        assert info.default == 2.0
        assert info.var_type is float
        assert info.category == "completion"

    @pytest.mark.unit
    def test_description_present(self):
        """Description field is populated."""
        assert "Gemini" in get_environment_info(EnvVar.GEMINI_API_KEY).description


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_returns_all_variables(self):
        """Returns all EnvVar members when no category."""
        assert len(list_environment_variables()) == len(EnvVar)

    @pytest.mark.unit
    def test_llm_category(self):
        """LLM category includes API keys."""
        llm_vars = list_environment_variables("llm")
        assert EnvVar.GEMINI_API_KEY in llm_vars
        assert EnvVar.ANTHROPIC_API_KEY in llm_vars
        assert EnvVar.COMPLETION_TIMEOUT not in llm_vars


class TestConvenience:
    """Tests for derived configuration helpers."""

    @pytest.mark.unit
    def test_session_db_path_override(self, tmp_path):
        """Explicit override wins."""
        assert get_session_db_path(tmp_path / "x.db") == tmp_path / "x.db"

    @pytest.mark.unit
    def test_session_db_path_default(self, monkeypatch):
        """Falls back to a file under the home directory."""
        monkeypatch.delenv("SESSION_DB_PATH", raising=False)
        path = get_session_db_path()
        assert isinstance(path, Path)
        assert path.name == "session.db"

    @pytest.mark.unit
    def test_available_providers(self, monkeypatch):
        """Only providers with keys are reported."""
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        assert get_available_llm_providers() == ["openai"]
