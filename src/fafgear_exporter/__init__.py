# src/fafgear_exporter/__init__.py
"""
FAF Gear Exporter v1.0.0
将 FAF gear 服务器的状态协议桥接为 Prometheus 指标。
"""

__version__ = "1.0.0"

from .client import ProtocolClient
from .collector import StatusCollector
from .config import (
    ExporterConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)
from .exceptions import ConfigError, ExporterError, NetworkError, ProtocolError
from .metrics import FafGearCollector, MetricRegistry
from .state import STATUS_FIELDS, FetchResult, StatusField, StatusSnapshot

__all__ = [
    "ProtocolClient",
    "StatusCollector",
    "ExporterConfig",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "ExporterError",
    "ConfigError",
    "NetworkError",
    "ProtocolError",
    "FafGearCollector",
    "MetricRegistry",
    "STATUS_FIELDS",
    "FetchResult",
    "StatusField",
    "StatusSnapshot",
]
