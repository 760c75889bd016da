# File: src/fafgear_exporter/collector.py
"""
FAF Gear 状态采集器 (Status Collector)

每次抓取调用一次：通过 ProtocolClient 获取原始载荷，
解码为固定 11 位的整数快照。不重试、不缓存、不并发。
"""

import asyncio
import logging

from .client import ProtocolClient
from .protocols import packets
from .state import StatusSnapshot

logger = logging.getLogger(__name__)


class StatusCollector:
    """将一次 fetch 的结果转换为 StatusSnapshot。"""

    def __init__(self, client: ProtocolClient) -> None:
        self.client = client

    async def collect(self, address: str) -> StatusSnapshot:
        """执行一次抓取并解码。

        Args:
            address: 状态服务器地址 ("host:port")。

        Returns:
            StatusSnapshot: 失败时 reachable=False 且全部字段为 0。
        """
        result = await self.client.fetch(address)
        if not result.ok:
            return StatusSnapshot.unreachable()

        fields = packets.decode_status_payload(result.payload)
        logger.debug(f"状态快照: {fields}")
        return StatusSnapshot(reachable=True, fields=fields)

    def collect_sync(self, address: str) -> StatusSnapshot:
        """collect 的同步版本，每次调用使用独立的事件循环。"""
        return asyncio.run(self.collect(address))
