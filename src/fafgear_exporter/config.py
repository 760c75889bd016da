"""
FAF Gear Exporter - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量 (.env) 或字典中加载配置。
"""

import logging
import math
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_LISTEN_ADDRESS = ":9101"
DEFAULT_METRICS_PATH = "/metrics"
DEFAULT_FETCH_ADDRESS = "127.0.0.1:1370"
DEFAULT_TIMEOUT = 5.0
DEFAULT_NAMESPACE = "fafgearclient"
DEFAULT_LOG_LEVEL = "INFO"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_address(address: str, default_host: str = "") -> tuple[str, int]:
    """将 "host:port" 解析为 (host, port)。

    支持 IPv6 写法 "[::1]:1370"；host 为空时使用 default_host
    (例如 ":9101" 表示监听所有地址)。

    Raises:
        ConfigError: 缺少端口或端口非法。
    """
    host, sep, port_str = str(address).rpartition(":")
    if not sep:
        raise ConfigError(f"地址缺少端口: '{address}'")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]

    try:
        port = int(port_str)
    except ValueError:
        raise ConfigError(f"端口格式无效: '{address}'") from None

    if not 0 < port < 65536:
        raise ConfigError(f"端口超出范围: '{address}'")

    return host or default_host, port


@dataclass(frozen=True)
class ExporterConfig:
    """导出器的强类型配置对象。

    所有字段均为只读 (frozen=True)，启动后配置不可变。

    Attributes:
        listen_address: HTTP 监听地址 ("host:port"，host 可省略)。
        metrics_path: 指标暴露路径。
        fetch_address: 状态服务器地址 ("host:port")。
        timeout: 单次状态抓取的总时限 (秒)。
        namespace: 指标名前缀。
        log_level: 日志级别。
    """

    listen_address: str = DEFAULT_LISTEN_ADDRESS
    metrics_path: str = DEFAULT_METRICS_PATH
    fetch_address: str = DEFAULT_FETCH_ADDRESS
    timeout: float = DEFAULT_TIMEOUT
    namespace: str = DEFAULT_NAMESPACE
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def listen_host_port(self) -> tuple[str, int]:
        return parse_address(self.listen_address, default_host="0.0.0.0")


def create_config_from_dict(raw_data: dict[str, Any]) -> ExporterConfig:
    """通用工厂：将字典转换为强类型配置对象。

    所有字段均可选，缺失时使用默认值。

    Args:
        raw_data: 原始配置字典 (来自 TOML、Env 或命令行)。

    Returns:
        ExporterConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 字段格式错误时抛出。
    """
    try:

        def _get(key: str, default: Any) -> Any:
            val = raw_data.get(key)
            return default if val is None else val

        listen_address = str(_get("listen_address", DEFAULT_LISTEN_ADDRESS))
        parse_address(listen_address)

        fetch_address = str(_get("fetch_address", DEFAULT_FETCH_ADDRESS))
        parse_address(fetch_address)

        metrics_path = str(_get("metrics_path", DEFAULT_METRICS_PATH))
        if not metrics_path.startswith("/"):
            raise ConfigError(f"指标路径必须以 '/' 开头: '{metrics_path}'")

        try:
            timeout = float(_get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError):
            raise ConfigError(f"超时格式无效: {raw_data.get('timeout')}") from None
        if not math.isfinite(timeout) or timeout <= 0:
            raise ConfigError(f"超时必须为正的有限数: {timeout}")

        namespace = str(_get("namespace", DEFAULT_NAMESPACE))
        if not namespace.isidentifier():
            raise ConfigError(f"指标前缀无效: '{namespace}'")

        log_level = str(_get("log_level", DEFAULT_LOG_LEVEL)).upper()
        if log_level not in _LOG_LEVELS:
            raise ConfigError(f"日志级别无效: '{log_level}'")

        return ExporterConfig(
            listen_address=listen_address,
            metrics_path=metrics_path,
            fetch_address=fetch_address,
            timeout=timeout,
            namespace=namespace,
            log_level=log_level,
        )

    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"配置生成失败: {e}") from e


def load_config_from_toml(file_path: Path, profile: str = "default") -> ExporterConfig:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [exporter]: 单一配置块。
    3. Root: 兼容根目录直接配置。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    raw_config: dict[str, Any] = {}

    if "profile" in data:
        if profile not in data["profile"]:
            if profile != "default":
                raise ConfigError(f"未找到预设: [profile.{profile}]")
        else:
            raw_config = data["profile"][profile]
    elif "exporter" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [exporter] 节，忽略 profile='{profile}'。")
        raw_config = data["exporter"]
    else:
        raw_config = data

    return create_config_from_dict(raw_config)


# 字段映射表 (Config Field -> Env Suffix)
ENV_MAP = {
    "listen_address": "LISTEN_ADDRESS",
    "metrics_path": "METRICS_PATH",
    "fetch_address": "FETCH_ADDRESS",
    "timeout": "TIMEOUT",
    "namespace": "NAMESPACE",
    "log_level": "LOG_LEVEL",
}


def read_env_values(env_file: Path | None = None) -> dict[str, str]:
    """读取所有以 `FAFGEAR_` 开头的环境变量。

    如果给出 env_file 且文件存在，先用 python-dotenv 将其载入进程环境
    (不覆盖已存在的变量)。
    """
    if env_file is not None and env_file.exists():
        load_dotenv(dotenv_path=env_file, override=False)
        logger.debug(f"已加载环境文件: {env_file}")

    raw_data = {}
    for cfg_key, env_suffix in ENV_MAP.items():
        val = os.environ.get(f"FAFGEAR_{env_suffix}")
        if val is not None:
            raw_data[cfg_key] = val
    return raw_data


def load_config_from_env(env_file: Path | None = None) -> ExporterConfig:
    """从环境变量加载配置 (Docker/Cloud Friendly)。

    例如: `FAFGEAR_FETCH_ADDRESS` -> `fetch_address`。
    未设置的字段使用默认值。
    """
    return create_config_from_dict(read_env_values(env_file))
