"""
Unit tests for configuration loading and validation.
"""

import logging

import pytest

from ai_code_reviewer.config import (
    AppConfig,
    ConfigValidator,
    LaaSConfig,
    ReviewConfig,
    DEFAULT_FILE_EXTENSIONS,
    setup_logging,
)
from ai_code_reviewer.exceptions import ConfigurationError


class TestAppConfig:
    """Unit tests for AppConfig."""

    def test_from_env_reads_api_key(self, monkeypatch):
        monkeypatch.setenv("LAAS_API_KEY", "secret")
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("DEBUG", raising=False)

        config = AppConfig.from_env()

        assert config.laas.api_key == "secret"
        assert config.review.file_extensions == DEFAULT_FILE_EXTENSIONS
        assert config.logging.level == "WARNING"

    def test_from_env_ignores_project_settings(self, monkeypatch):
        monkeypatch.setenv("LAAS_API_KEY", "secret")
        monkeypatch.setenv("LAAS_PROJECT_ID", "OTHER")

        assert AppConfig.from_env().laas.project_id == LaaSConfig().project_id

    def test_config_is_immutable(self, config):
        with pytest.raises(Exception):
            config.debug = True

    @pytest.mark.parametrize("api_key", [None, "", "   "])
    def test_missing_api_key_fails_validation(self, api_key):
        config = AppConfig(laas=LaaSConfig(api_key=api_key))

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigValidator(config).validate()

        assert "LAAS_API_KEY" in str(exc_info.value)

    def test_validator_returns_config(self, config):
        assert ConfigValidator(config).validate() is config

    def test_validation_collects_errors(self):
        config = AppConfig(
            laas=LaaSConfig(api_key="k", timeout_seconds=0),
            review=ReviewConfig(file_extensions=(), max_concurrency=0),
        )

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        message = str(exc_info.value)
        assert "Timeout must be positive" in message
        assert "At least one file extension is required" in message
        assert "Max concurrency must be positive" in message

    def test_with_overrides(self, config):
        updated = config.with_overrides(**{
            "review.file_extensions": (".py",),
            "review.max_concurrency": 4,
            "laas.timeout_seconds": None,
        })

        assert updated.review.file_extensions == (".py",)
        assert updated.review.max_concurrency == 4
        assert updated.laas.timeout_seconds == config.laas.timeout_seconds
        assert config.review.file_extensions == DEFAULT_FILE_EXTENSIONS

    def test_to_dict_excludes_secret(self, config):
        data = config.to_dict()

        assert "api_key" not in data["laas"]
        assert data["review"]["file_extensions"] == list(DEFAULT_FILE_EXTENSIONS)


class TestYamlConfig:

    def test_from_yaml(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LAAS_API_KEY", "from-env")
        config_file = tmp_path / "reviewer.yaml"
        config_file.write_text(
            "laas:\n"
            "  project_id: MY-PROJECT\n"
            "  preset_hash: my-preset\n"
            "review:\n"
            "  file_extensions: ['.py', '.pyi']\n"
            "  max_concurrency: 2\n"
            "logging:\n"
            "  level: INFO\n",
            encoding="utf-8",
        )

        config = AppConfig.from_yaml(str(config_file))

        assert config.laas.api_key == "from-env"
        assert config.laas.project_id == "MY-PROJECT"
        assert config.laas.preset_hash == "my-preset"
        assert config.review.file_extensions == (".py", ".pyi")
        assert config.review.max_concurrency == 2
        assert config.logging.level == "INFO"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            AppConfig.from_yaml(str(tmp_path / "missing.yaml"))

    @pytest.mark.parametrize("content, expected", [
        ("laas:\n  timeout_seconds: '30'\n", "Timeout must be a number"),
        ("logging:\n  level: 10\n", "Invalid log level: 10"),
        ("review:\n  max_concurrency: two\n", "Max concurrency must be an integer"),
        ("review:\n  file_extensions: [1, 2]\n", "File extensions must be a list of strings"),
        ("review:\n  preview_length: -1\n", "Preview length must be a non-negative integer"),
    ])
    def test_wrong_value_types_fail_validation(self, tmp_path, monkeypatch, content, expected):
        monkeypatch.setenv("LAAS_API_KEY", "key")
        config_file = tmp_path / "reviewer.yaml"
        config_file.write_text(content, encoding="utf-8")

        config = AppConfig.from_yaml(str(config_file))

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        assert expected in str(exc_info.value)

    def test_single_extension_string(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LAAS_API_KEY", "key")
        config_file = tmp_path / "reviewer.yaml"
        config_file.write_text("review:\n  file_extensions: .py\n", encoding="utf-8")

        assert AppConfig.from_yaml(str(config_file)).review.file_extensions == (".py",)

    @pytest.mark.parametrize("content", ["laas: [1, 2]\n", "review: {\n"])
    def test_malformed_file(self, tmp_path, content):
        config_file = tmp_path / "reviewer.yaml"
        config_file.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigurationError):
            AppConfig.from_yaml(str(config_file))

    def test_unknown_key(self, tmp_path):
        config_file = tmp_path / "reviewer.yaml"
        config_file.write_text("laas:\n  unknown: 1\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            AppConfig.from_yaml(str(config_file))


class TestLogging:

    def test_file_handler_added(self, tmp_path):
        log_file = tmp_path / "review.log"
        config = AppConfig(laas=LaaSConfig(api_key="k")).with_overrides(**{"logging.file_path": str(log_file)})
        root = logging.getLogger()
        before = list(root.handlers)

        try:
            setup_logging(config)
            added = [h for h in root.handlers if h not in before]
            assert any(getattr(h, "baseFilename", None) == str(log_file) for h in added)
        finally:
            for handler in [h for h in root.handlers if h not in before]:
                root.removeHandler(handler)
                handler.close()
