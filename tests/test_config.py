"""
Tests for the configuration accessor.
"""

from pathlib import Path

import pytest

from callback_auth.core.config import (
    CALLBACK_AUTH_URI_PROPERTY,
    DEFAULT_RECORD_FILENAME,
    ConfigurationService,
    Settings,
    get_settings,
)
from callback_auth.core.exceptions import ConfigurationError

from conftest import CALLBACK_URI, make_settings


class TestCallbackURI:

    def test_configured_uri_is_returned(self, config):
        assert config.callback_uri() == CALLBACK_URI

    def test_missing_uri_is_a_configuration_error(self, home):
        config = ConfigurationService(make_settings(home, CALLBACK_AUTH_URI=None))

        with pytest.raises(ConfigurationError) as exc_info:
            config.callback_uri()

        assert exc_info.value.property_name == CALLBACK_AUTH_URI_PROPERTY

    def test_blank_uri_counts_as_missing(self, home):
        config = ConfigurationService(make_settings(home, CALLBACK_AUTH_URI="   "))

        with pytest.raises(ConfigurationError):
            config.callback_uri()

    @pytest.mark.parametrize("value", ["not a uri", "ftp://files.test/auth", "/relative/path"])
    def test_non_http_uri_is_rejected(self, home, value):
        config = ConfigurationService(make_settings(home, CALLBACK_AUTH_URI=value))

        with pytest.raises(ConfigurationError) as exc_info:
            config.callback_uri()

        assert "valid URI" in str(exc_info.value)

    def test_uri_may_carry_its_own_query(self, home):
        config = ConfigurationService(make_settings(home, CALLBACK_AUTH_URI="https://cb.test/auth?key=1"))
        assert config.callback_uri() == "https://cb.test/auth?key=1"


class TestMockFlag:

    def test_defaults_to_false(self, config):
        assert config.use_mock_service() is False

    def test_enabled(self, home):
        config = ConfigurationService(make_settings(home, CALLBACK_USE_MOCK_SERVICE=True))
        assert config.use_mock_service() is True

    def test_property_name_alias_is_read_from_environment(self, home, monkeypatch):
        monkeypatch.setenv("callback-use-mock-service", "true")
        monkeypatch.setenv("callback-auth-uri", "http://alias.test/cb")

        settings = Settings(_env_file=None, CALLBACK_AUTH_HOME=str(home))

        assert settings.CALLBACK_USE_MOCK_SERVICE is True
        assert settings.CALLBACK_AUTH_URI == "http://alias.test/cb"

    def test_unparseable_boolean_fails_settings_load(self, monkeypatch):
        monkeypatch.setenv("CALLBACK_USE_MOCK_SERVICE", "sometimes")
        get_settings.cache_clear()
        try:
            with pytest.raises(ConfigurationError):
                get_settings()
        finally:
            get_settings.cache_clear()


class TestDefaultRecordPath:

    def test_fixed_filename_under_home(self, config, home):
        assert config.default_record_path() == Path(home) / DEFAULT_RECORD_FILENAME
        assert DEFAULT_RECORD_FILENAME == "callback-default-response.json"

    def test_path_is_computed_even_when_file_is_absent(self, home):
        config = ConfigurationService(make_settings(home / "missing"))
        assert config.default_record_path().name == DEFAULT_RECORD_FILENAME


class TestSettingsValidation:

    def test_log_level_is_normalised(self, home):
        assert make_settings(home, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_unknown_environment_rejected(self, home):
        with pytest.raises(ValueError):
            make_settings(home, ENVIRONMENT="moon")

    def test_cors_origins_from_csv(self, home):
        settings = make_settings(home, CORS_ORIGINS="http://a.test, http://b.test")
        assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]
