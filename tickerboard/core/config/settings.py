"""配置管理模块 - 处理tickerboard的配置"""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from tickerboard.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:120.0) Gecko/20100101 Firefox/120.0"
)


@dataclass
class ProviderConfig:
    """提供商配置"""

    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    verify_ssl: bool = True
    yahoo_quote_url: str = "https://query1.finance.yahoo.com/v7/finance/quote"
    yahoo_cookie_url: str = "https://fc.yahoo.com"
    yahoo_crumb_url: str = "https://query2.finance.yahoo.com/v1/test/getcrumb"
    qq_page_url: str = "https://finance.qq.com/"
    qq_encoding: str = "gbk"


@dataclass
class DisplayConfig:
    """显示配置"""

    refresh_interval: float = 0.0


@dataclass
class LoggingConfig:
    """日志配置"""

    level: str = "INFO"
    file: str | None = None
    serialize: bool = False


@dataclass
class TickerboardConfig:
    """tickerboard主配置"""

    providers: ProviderConfig = field(default_factory=ProviderConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "TickerboardConfig":
        """从字典创建配置"""
        return cls(
            providers=ProviderConfig(**config_dict.get("providers", {})),
            display=DisplayConfig(**config_dict.get("display", {})),
            logging=LoggingConfig(**config_dict.get("logging", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "providers": asdict(self.providers),
            "display": asdict(self.display),
            "logging": asdict(self.logging),
        }


def _deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = _deep_update(d.get(k, {}), v)
        else:
            d[k] = v
    return d


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_path: Path | None = None):
        """初始化配置管理器

        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
        """
        self.config_path = config_path or Path.home() / ".tickerboard" / "config.toml"
        self.config = self._load_config()

    def _load_config(self) -> TickerboardConfig:
        if not self.config_path.exists():
            return TickerboardConfig()

        try:
            with open(self.config_path, "rb") as f:
                config_dict = tomllib.load(f)
            return TickerboardConfig.from_dict(config_dict)
        except (OSError, tomllib.TOMLDecodeError, TypeError) as e:
            # 配置文件有问题时使用默认配置
            logger.warning(f"Failed to load config from {self.config_path}: {e}")
            return TickerboardConfig()

    def get_config(self) -> TickerboardConfig:
        """获取当前配置"""
        return self.config

    def update_config(self, **updates: Any) -> None:
        """更新配置"""
        config_dict = _deep_update(self.config.to_dict(), updates)
        self.config = TickerboardConfig.from_dict(config_dict)


def _env_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_config_from_env() -> dict[str, Any]:
    """从环境变量加载配置"""
    config: dict[str, Any] = {}

    provider_config: dict[str, Any] = {}
    timeout = os.getenv("TICKERBOARD_PROVIDER_TIMEOUT")
    if timeout is not None:
        provider_config["timeout"] = float(timeout)
    user_agent = os.getenv("TICKERBOARD_USER_AGENT")
    if user_agent:
        provider_config["user_agent"] = user_agent
    verify_ssl = os.getenv("TICKERBOARD_VERIFY_SSL")
    if verify_ssl is not None:
        provider_config["verify_ssl"] = _env_bool(verify_ssl)
    qq_page_url = os.getenv("TICKERBOARD_QQ_PAGE_URL")
    if qq_page_url:
        provider_config["qq_page_url"] = qq_page_url
    if provider_config:
        config["providers"] = provider_config

    refresh = os.getenv("TICKERBOARD_REFRESH_INTERVAL")
    if refresh is not None:
        config["display"] = {"refresh_interval": float(refresh)}

    logging_config: dict[str, Any] = {}
    level = os.getenv("TICKERBOARD_LOGGING_LEVEL")
    if level is not None:
        logging_config["level"] = level
    log_file = os.getenv("TICKERBOARD_LOGGING_FILE")
    if log_file is not None:
        logging_config["file"] = log_file
    serialize = os.getenv("TICKERBOARD_LOGGING_SERIALIZE")
    if serialize is not None:
        logging_config["serialize"] = _env_bool(serialize)
    if logging_config:
        config["logging"] = logging_config

    return config


def load_config(config_path: Path | None = None) -> TickerboardConfig:
    """Load the config file and apply environment overrides on top."""
    manager = ConfigManager(config_path)
    overrides = load_config_from_env()
    if overrides:
        manager.update_config(**overrides)
    return manager.get_config()
