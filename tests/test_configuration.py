"""Tests for the layered configuration manager and logging setup."""

import logging
import logging.handlers

import pytest
import yaml

from famfin.shared.core import configuration
from famfin.shared.core.configuration import (
    ConfigManager,
    LoggingConfig,
    SystemConfig,
    ValidationLevel,
)
from famfin.shared.core.logging_setup import configure_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in configuration.ENV_MAP:
        monkeypatch.delenv(key, raising=False)
    yield
    configuration.reset_config()


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


class TestConfigManager:
    """Precedence: environment over user.yaml over defaults.yaml."""

    def test_missing_files_give_model_defaults(self, tmp_path):
        """An empty config directory yields the built-in defaults."""
        config = ConfigManager(config_dir=tmp_path).get_config()
        assert config == SystemConfig()
        assert config.storage.token_key == "userToken"
        assert config.storage.user_key == "userData"
        assert config.api.timeout is None

    def test_packaged_defaults_load(self):
        """The shipped defaults.yaml validates."""
        config = ConfigManager().get_config()
        assert config.api.base_url.endswith("/api")
        assert config.ui.default_period_months == 6

    def test_user_config_overrides_defaults(self, tmp_path):
        write_yaml(tmp_path / "defaults.yaml", {"api": {"base_url": "http://a/api"}})
        write_yaml(tmp_path / "user.yaml", {"api": {"base_url": "http://b/api"}})

        config = ConfigManager(config_dir=tmp_path).get_config()
        assert config.api.base_url == "http://b/api"

    def test_env_overrides_user_config(self, tmp_path, monkeypatch):
        write_yaml(tmp_path / "user.yaml", {"ui": {"port": 9000}})
        monkeypatch.setenv("FAMFIN_UI_PORT", "9100")
        monkeypatch.setenv("FAMFIN_UI_WEB_MODE", "yes")

        config = ConfigManager(config_dir=tmp_path).get_config()
        assert config.ui.port == 9100
        assert config.ui.web_mode is True

    def test_env_file_is_loaded(self, tmp_path, monkeypatch):
        """Values from the given .env file apply like process variables."""
        # Registered so teardown removes what load_dotenv sets
        monkeypatch.setenv("FAMFIN_API_BASE_URL", "unset")
        monkeypatch.delenv("FAMFIN_API_BASE_URL")
        env_file = tmp_path / ".env"
        env_file.write_text("FAMFIN_API_BASE_URL=http://env-file/api\n", encoding="utf-8")

        config = ConfigManager(config_dir=tmp_path, env_file=env_file).get_config()
        assert config.api.base_url == "http://env-file/api"

    def test_unconvertible_env_value_is_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FAMFIN_API_TIMEOUT", "soon")
        config = ConfigManager(config_dir=tmp_path).get_config()
        assert config.api.timeout is None

    def test_strict_validation_raises(self, tmp_path):
        """Unknown keys are rejected in strict mode."""
        write_yaml(tmp_path / "user.yaml", {"api": {"nope": 1}})
        with pytest.raises(ValueError):
            ConfigManager(config_dir=tmp_path).get_config(ValidationLevel.STRICT)

    def test_lenient_validation_falls_back(self, tmp_path):
        write_yaml(tmp_path / "user.yaml", {"ui": {"port": 1}})
        config = ConfigManager(config_dir=tmp_path).get_config(ValidationLevel.LENIENT)
        assert config == SystemConfig()

    def test_save_user_config_merges_and_reloads(self, tmp_path):
        manager = ConfigManager(config_dir=tmp_path)
        assert manager.save_user_config({"ui": {"currency": "USD"}})
        assert manager.save_user_config({"ui": {"locale": "en-US"}})

        saved = yaml.safe_load((tmp_path / "user.yaml").read_text(encoding="utf-8"))
        assert saved == {"ui": {"currency": "USD", "locale": "en-US"}}
        assert manager.get_config().ui.currency == "USD"

    def test_global_manager_is_reused(self, tmp_path):
        first = configuration.get_config_manager(tmp_path)
        assert configuration.get_config_manager() is first
        configuration.reset_config()
        assert configuration.get_config_manager() is not first


class TestLoggingSetup:
    """Rotating file + console handlers on the root logger."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        yield
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)

    def test_configure_logging_installs_handlers(self, tmp_path):
        path = configure_logging(LoggingConfig(log_dir="logs", level="INFO"), tmp_path)

        assert path == tmp_path / "logs" / "famfin.log"
        root = logging.getLogger()
        file_handlers = [h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert root.level == logging.INFO
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_configure_logging_twice_does_not_duplicate(self, tmp_path):
        configure_logging(LoggingConfig(log_dir="logs"), tmp_path)
        configure_logging(LoggingConfig(log_dir="logs"), tmp_path)
        assert len(logging.getLogger().handlers) == 2
