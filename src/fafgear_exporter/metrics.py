# File: src/fafgear_exporter/metrics.py
"""
FAF Gear Exporter - 指标模块 (Metrics)

1. MetricRegistry: 启动时构造一次的指标描述表，显式传入采集桥接器。
2. FafGearCollector: prometheus_client 的自定义 Collector，每次抓取执行一次状态采集。
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from .collector import StatusCollector
from .state import STATUS_FIELDS, StatusField, StatusSnapshot

logger = logging.getLogger(__name__)

# 各字段的帮助文本
FIELD_DOCUMENTATION: dict[StatusField, str] = {
    StatusField.QUERY_QUEUE_SIZE: "How many queries are waiting to be processed.",
    StatusField.DATABASE_CONNECTIONS_MAX: "How many database connections are allowed in total.",
    StatusField.DATABASE_CONNECTIONS_ACTIVE: "How many database connections are active at the moment.",
    StatusField.THREADPOOL_INPUT_COUNT: "Number of threads in the input threadpool.",
    StatusField.THREADPOOL_INPUT_RUNNING: "Running tasks in the input threadpool.",
    StatusField.THREADPOOL_INPUT_QUEUED: "Queued tasks in the input threadpool.",
    StatusField.THREADPOOL_INPUT_TOTAL: "Total tasks handled by the input threadpool.",
    StatusField.THREADPOOL_DATABASE_COUNT: "Number of threads in the database threadpool.",
    StatusField.THREADPOOL_DATABASE_RUNNING: "Running tasks in the database threadpool.",
    StatusField.THREADPOOL_DATABASE_QUEUED: "Queued tasks in the database threadpool.",
    StatusField.THREADPOOL_DATABASE_TOTAL: "Total tasks handled by the database threadpool.",
}

UP_DOCUMENTATION = "Was the last status request successful."


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """拼接完整指标名，跳过空段。"""
    return "_".join(part for part in (namespace, subsystem, name) if part)


@dataclass(frozen=True)
class MetricDescriptor:
    name: str
    documentation: str


@dataclass(frozen=True)
class MetricRegistry:
    """指标描述表。

    启动时通过 build() 构造一次，之后只读。
    fields 与 STATUS_FIELDS 一一对应，位置相同。
    """

    up: MetricDescriptor
    fields: tuple[MetricDescriptor, ...]

    @classmethod
    def build(cls, namespace: str) -> "MetricRegistry":
        up = MetricDescriptor(build_fq_name(namespace, "", "fafgeard_up"), UP_DOCUMENTATION)
        fields = tuple(
            MetricDescriptor(
                build_fq_name(namespace, "server", f.metric_name),
                FIELD_DOCUMENTATION[f],
            )
            for f in STATUS_FIELDS
        )
        return cls(up=up, fields=fields)

    def families(self, snapshot: StatusSnapshot | None = None) -> list[GaugeMetricFamily]:
        """生成 up + 11 个字段的 Gauge 指标族。

        snapshot 为 None 时只生成无样本的描述 (供 describe 使用)。
        """
        if snapshot is None:
            descriptors = (self.up, *self.fields)
            return [GaugeMetricFamily(d.name, d.documentation) for d in descriptors]

        families = [
            GaugeMetricFamily(self.up.name, self.up.documentation, value=snapshot.up)
        ]
        for descriptor, value in zip(self.fields, snapshot.as_dict().values()):
            families.append(
                GaugeMetricFamily(descriptor.name, descriptor.documentation, value=value)
            )
        return families


class FafGearCollector(Collector):
    """prometheus_client 自定义 Collector。

    每次 HTTP 抓取触发一次 collect()，对目标执行一次同步状态采集。
    并发抓取各自打开独立连接，本对象不持有可变状态。
    """

    def __init__(
        self,
        registry: MetricRegistry,
        status_collector: StatusCollector,
        address: str,
    ) -> None:
        self.registry = registry
        self.status_collector = status_collector
        self.address = address

    def describe(self) -> Iterator[GaugeMetricFamily]:
        # 注册时不触发网络请求
        return iter(self.registry.families())

    def collect(self) -> Iterator[GaugeMetricFamily]:
        snapshot = self.status_collector.collect_sync(self.address)
        if not snapshot.reachable:
            logger.debug(f"目标不可达: {self.address}")
        yield from self.registry.families(snapshot)
