# src/fafgear_exporter/main.py
"""
FAF Gear Exporter 命令行入口。

配置优先级: 命令行参数 > TOML 文件 (--config) 或环境变量 (FAFGEAR_*, 含 .env) > 默认值。
"""

import argparse
import logging
import sys
from dataclasses import asdict, replace
from pathlib import Path

from prometheus_client import CollectorRegistry

from . import __version__
from .client import ProtocolClient
from .collector import StatusCollector
from .config import (
    ExporterConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)
from .exceptions import ExporterError
from .metrics import FafGearCollector, MetricRegistry
from .server import create_app, serve

logger = logging.getLogger("FafGearExporter")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fafgear-exporter",
        description="Expose FAF gear server status as Prometheus metrics.",
    )
    parser.add_argument(
        "--web.listen-address",
        dest="listen_address",
        help="Address to listen on for telemetry (default :9101)",
    )
    parser.add_argument(
        "--web.telemetry-path",
        dest="metrics_path",
        help="Path under which to expose metrics (default /metrics)",
    )
    parser.add_argument(
        "--metric.fetch-address",
        dest="fetch_address",
        help="Address from where to collect statistics (default 127.0.0.1:1370)",
    )
    parser.add_argument(
        "--timeout", type=float, help="Deadline per status request in seconds"
    )
    parser.add_argument("--log-level", dest="log_level", help="Logging level")
    parser.add_argument("--config", type=Path, help="TOML configuration file")
    parser.add_argument(
        "--profile", default="default", help="Profile name inside the TOML file"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def resolve_config(args: argparse.Namespace) -> ExporterConfig:
    """按优先级合并配置来源。"""
    if args.config is not None:
        base = load_config_from_toml(args.config, args.profile)
    else:
        base = load_config_from_env(Path.cwd() / ".env")

    overrides = {
        key: getattr(args, key)
        for key in ("listen_address", "metrics_path", "fetch_address", "timeout", "log_level")
        if getattr(args, key) is not None
    }
    if not overrides:
        return base
    return create_config_from_dict(asdict(replace(base, **overrides)))


def build_registry(config: ExporterConfig) -> CollectorRegistry:
    """组装 Client -> Collector -> Prometheus Registry。"""
    client = ProtocolClient(timeout=config.timeout)
    status_collector = StatusCollector(client)
    metric_registry = MetricRegistry.build(config.namespace)

    registry = CollectorRegistry()
    registry.register(
        FafGearCollector(metric_registry, status_collector, config.fetch_address)
    )
    return registry


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
    except ExporterError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.critical(f"启动失败: {e}")
        return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
    )
    logger.info(f"FAF Gear Exporter v{__version__} 启动")
    logger.info(f"状态服务器: {config.fetch_address} (超时 {config.timeout}s)")

    try:
        registry = build_registry(config)
        host, port = config.listen_host_port
        serve(host, port, create_app(registry, config.metrics_path))
    except ExporterError as e:
        logger.critical(f"启动失败: {e}")
        return 1
    except OSError as e:
        logger.critical(f"HTTP 服务启动失败 {config.listen_address}: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("收到用户中断信号 (Ctrl+C)，准备退出...")

    return 0


if __name__ == "__main__":
    sys.exit(main())
