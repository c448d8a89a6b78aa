"""配置管理测试."""

from pathlib import Path

import pytest

from tickerboard.core.config import (
    ConfigManager,
    DisplayConfig,
    LoggingConfig,
    ProviderConfig,
    TickerboardConfig,
    load_config,
    load_config_from_env,
)

ENV_NAMES = (
    "TICKERBOARD_PROVIDER_TIMEOUT",
    "TICKERBOARD_USER_AGENT",
    "TICKERBOARD_VERIFY_SSL",
    "TICKERBOARD_QQ_PAGE_URL",
    "TICKERBOARD_REFRESH_INTERVAL",
    "TICKERBOARD_LOGGING_LEVEL",
    "TICKERBOARD_LOGGING_FILE",
    "TICKERBOARD_LOGGING_SERIALIZE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


class TestConfigModels:
    """配置模型测试"""

    def test_defaults(self):
        config = TickerboardConfig()

        assert config.providers.timeout == 10.0
        assert config.providers.yahoo_cookie_url == "https://fc.yahoo.com"
        assert config.providers.qq_encoding == "gbk"
        assert config.display.refresh_interval == 0.0
        assert config.logging.level == "INFO"
        assert config.logging.file is None

    def test_from_dict_partial(self):
        config = TickerboardConfig.from_dict({"providers": {"timeout": 3.5}, "logging": {"level": "DEBUG"}})

        assert config.providers.timeout == 3.5
        assert config.providers.verify_ssl is True
        assert config.logging.level == "DEBUG"
        assert config.display == DisplayConfig()

    def test_to_dict_round_trip(self):
        config = TickerboardConfig(
            providers=ProviderConfig(timeout=2.0, qq_page_url="https://mirror.example.com/"),
            display=DisplayConfig(refresh_interval=5.0),
            logging=LoggingConfig(level="WARNING", serialize=True),
        )

        assert TickerboardConfig.from_dict(config.to_dict()) == config


class TestConfigManager:
    """配置管理器测试"""

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        manager = ConfigManager(tmp_path / "absent.toml")

        assert manager.get_config() == TickerboardConfig()

    def test_loads_toml(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[providers]\ntimeout = 4.0\nuser_agent = "board/1.0"\n\n[display]\nrefresh_interval = 30\n',
            encoding="utf-8",
        )

        config = ConfigManager(path).get_config()

        assert config.providers.timeout == 4.0
        assert config.providers.user_agent == "board/1.0"
        assert config.display.refresh_interval == 30

    def test_broken_file_falls_back_to_defaults(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[providers\ntimeout = ", encoding="utf-8")

        assert ConfigManager(path).get_config() == TickerboardConfig()

    def test_unknown_key_falls_back_to_defaults(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[display]\ncolumns = 3\n", encoding="utf-8")

        assert ConfigManager(path).get_config() == TickerboardConfig()

    def test_update_config_merges_nested(self, tmp_path: Path):
        manager = ConfigManager(tmp_path / "absent.toml")

        manager.update_config(providers={"timeout": 1.5})

        config = manager.get_config()
        assert config.providers.timeout == 1.5
        assert config.providers.yahoo_quote_url == ProviderConfig().yahoo_quote_url


class TestEnvironmentOverrides:
    """环境变量测试"""

    def test_empty_environment(self):
        assert load_config_from_env() == {}

    def test_reads_variables(self, monkeypatch):
        monkeypatch.setenv("TICKERBOARD_PROVIDER_TIMEOUT", "2.5")
        monkeypatch.setenv("TICKERBOARD_VERIFY_SSL", "no")
        monkeypatch.setenv("TICKERBOARD_REFRESH_INTERVAL", "15")
        monkeypatch.setenv("TICKERBOARD_LOGGING_LEVEL", "debug")
        monkeypatch.setenv("TICKERBOARD_LOGGING_SERIALIZE", "true")

        overrides = load_config_from_env()

        assert overrides["providers"] == {"timeout": 2.5, "verify_ssl": False}
        assert overrides["display"] == {"refresh_interval": 15.0}
        assert overrides["logging"] == {"level": "debug", "serialize": True}

    def test_environment_wins_over_file(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text('[logging]\nlevel = "ERROR"\nfile = "board.log"\n', encoding="utf-8")
        monkeypatch.setenv("TICKERBOARD_LOGGING_LEVEL", "DEBUG")

        config = load_config(path)

        assert config.logging.level == "DEBUG"
        assert config.logging.file == "board.log"
