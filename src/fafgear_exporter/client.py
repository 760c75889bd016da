# File: src/fafgear_exporter/client.py
"""
FAF Gear 协议客户端 (Protocol Client) [Asyncio Edition]

职责：
1. 流程编排：Connect -> Handshake -> Status Request -> Payload。
2. 资源管理：每次 fetch 独占一条 TCP 连接，任何分支退出前都会关闭。
3. 异常处理：将网络/协议异常折叠为 FetchResult(ok=False) 反馈给 Collector。
"""

import asyncio
import logging

from .config import parse_address
from .exceptions import ConfigError, NetworkError, ProtocolError
from .network import StreamClient
from .protocols import constants, packets
from .state import FetchResult

logger = logging.getLogger(__name__)

# --- 超时设置 (Fail Fast) ---
DEFAULT_TIMEOUT = 5.0


class ProtocolClient:
    """FAF Gear 状态协议客户端。

    客户端本身不持有连接，也不缓存结果，可以被多个并发抓取共享。
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        protocol_version: int = constants.Code.PROTOCOL_VERSION,
        packet_type: int = constants.Code.STATUS_REQUEST,
    ) -> None:
        """初始化协议客户端。

        Args:
            timeout: 单次 fetch 的总时限 (秒)，同时作为每次读写的上限。
            protocol_version: 握手时发送的协议版本号。
            packet_type: 状态请求包类型。
        """
        self.timeout = timeout
        # 提前构建请求包，常量越界在构造时即可暴露
        self._handshake_pkt = packets.build_handshake(protocol_version)
        self._request_pkt = packets.build_status_request(packet_type)

    async def fetch(self, address: str) -> FetchResult:
        """对目标地址执行一次完整的状态交互。

        不重试。连接、读写、短读等任何失败都表现为 ok=False，
        调用方无法区分“服务器不可达”与“服务器返回了错误数据”。

        Args:
            address: 目标地址，形如 "host:port"。

        Returns:
            FetchResult: 成功时 ok=True 且 payload 为状态文本；
                短读时 ok=False 且 payload 为已读到的部分；其余失败 payload 为空。
        """
        try:
            host, port = parse_address(address)
        except ConfigError as e:
            logger.warning(f"目标地址无效: {e}")
            return FetchResult(ok=False)

        stream = StreamClient(host, port, self.timeout)
        try:
            return await asyncio.wait_for(self._exchange(stream), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"状态抓取超时 {address} ({self.timeout}s)")
            return FetchResult(ok=False)
        except (NetworkError, ProtocolError) as e:
            logger.warning(f"状态抓取失败 {address}: {e}")
            return FetchResult(ok=False)
        finally:
            await stream.close()

    def fetch_sync(self, address: str) -> FetchResult:
        """fetch 的同步版本，供没有事件循环的调用方 (如 HTTP 处理线程) 使用。"""
        return asyncio.run(self.fetch(address))

    async def _exchange(self, stream: StreamClient) -> FetchResult:
        await stream.connect()
        await self._handshake(stream)
        length = await self._request_status(stream)
        return await self._read_payload(stream, length)

    async def _handshake(self, stream: StreamClient) -> None:
        """发送协议版本并读取 1 字节确认。

        确认字节的取值不做校验，只要求读到 1 字节。
        """
        await stream.send(self._handshake_pkt)
        ack = await stream.receive(constants.HANDSHAKE_ACK_LEN)
        if len(ack) < constants.HANDSHAKE_ACK_LEN:
            raise ProtocolError("握手确认字节缺失")
        logger.debug(f"handshake_ack: {ack.hex()}")

    async def _request_status(self, stream: StreamClient) -> int:
        """发送状态请求包，返回服务端声明的载荷长度。"""
        await stream.send(self._request_pkt)
        data = await stream.receive(constants.STATUS_LENGTH_LEN)
        return packets.parse_status_length(data)

    async def _read_payload(self, stream: StreamClient, length: int) -> FetchResult:
        data = await stream.receive(length)
        payload = packets.decode_payload_text(data)

        if len(data) != length:
            # 短读：返回已读部分，但必须标记为失败
            logger.warning(f"状态载荷短读: 声明 {length} 字节，实际 {len(data)} 字节")
            return FetchResult(ok=False, payload=payload)

        logger.debug(f"status_payload: {payload!r}")
        return FetchResult(ok=True, payload=payload)
