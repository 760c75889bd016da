# src/fafgear_exporter/network.py
"""
FAF Gear Exporter - 网络模块 (Network) [Asyncio Edition]

封装 TCP 流的连接、发送、接收与关闭逻辑。
该模块屏蔽了底层 StreamReader/StreamWriter 的细节，向协议客户端提供纯粹的 bytes 收发接口。
每个 StreamClient 只服务于一次抓取，不在多次抓取之间复用。
"""

import asyncio
import logging
from typing import Optional

from .exceptions import NetworkError

logger = logging.getLogger(__name__)


class StreamClient:
    """
    封装 asyncio TCP 操作的客户端。
    """

    def __init__(self, host: str, port: int, timeout: float):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    @property
    def is_connected(self) -> bool:
        return self.writer is not None and not self.writer.is_closing()

    async def connect(self) -> None:
        """
        建立 TCP 连接。
        """
        target = (self.host, self.port)
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port), timeout=self.timeout
            )
            logger.debug(f"TCP 连接已建立: {target}")
        except asyncio.TimeoutError:
            raise NetworkError(f"连接超时 {target} ({self.timeout}s)") from None
        except (OSError, UnicodeError, ValueError) as e:
            # 非法主机名 (空标签、超长标签、NUL) 会抛出 UnicodeError / ValueError
            raise NetworkError(f"连接失败 {target}: {e}") from e

    async def send(self, packet: bytes) -> None:
        """
        发送数据并等待缓冲区清空。
        """
        if not self.is_connected:
            raise NetworkError("连接未建立或已关闭")

        if not packet:
            raise NetworkError("发送失败: 写入 0 字节")

        assert self.writer is not None

        try:
            self.writer.write(packet)
            await asyncio.wait_for(self.writer.drain(), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise NetworkError(f"发送超时 ({self.timeout}s)") from None
        except OSError as e:
            raise NetworkError(f"发送失败: {e}") from e

    async def receive(self, length: int) -> bytes:
        """
        接收至多 length 字节。

        对端提前关闭时返回已读到的部分，由调用方判断是否短读。
        """
        if self.reader is None:
            raise NetworkError("连接未建立")

        try:
            return await asyncio.wait_for(
                self.reader.readexactly(length), timeout=self.timeout
            )
        except asyncio.IncompleteReadError as e:
            logger.debug(f"对端提前关闭: 期望 {length} 字节，实际 {len(e.partial)} 字节")
            return e.partial
        except asyncio.TimeoutError:
            raise NetworkError(f"接收超时 ({self.timeout}s)") from None
        except OSError as e:
            raise NetworkError(f"接收错误: {e}") from e

    async def close(self) -> None:
        """关闭连接 (幂等，不抛异常)"""
        writer, self.writer, self.reader = self.writer, None, None
        if writer is None:
            return

        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug(f"关闭连接时出现异常 (已忽略): {e}")
        logger.debug("TCP 连接已关闭")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
