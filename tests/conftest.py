# tests/conftest.py
import asyncio
import socket
import socketserver
import sys
import threading
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path

import pytest

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from fafgear_exporter.config import ExporterConfig

# 示例载荷 (前三个字段非零)
SAMPLE_PAYLOAD = b"3;10;2;0;0;0;0;0;0;0;0"


@pytest.fixture
def valid_config():
    """[Fixture] 返回一个指向本机的 ExporterConfig 对象。"""
    return ExporterConfig(
        listen_address="127.0.0.1:9101",
        metrics_path="/metrics",
        fetch_address="127.0.0.1:1370",
        timeout=1.0,
        namespace="fafgearclient",
        log_level="DEBUG",
    )


@pytest.fixture
def closed_address():
    """[Fixture] 返回一个当前无人监听的本机地址 (连接会被拒绝)。"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    return f"127.0.0.1:{port}"


@pytest.fixture
def status_server():
    """
    [Fixture] 脚本化的 asyncio 状态服务器工厂。

    用法:
        async with status_server(payload=b"...") as (address, received):
            ...

    Args (工厂参数):
        ack: 握手确认字节。None 表示读到握手后直接断开。
        length: 长度字节。None 表示读到请求后直接断开；默认按 payload 长度生成。
        payload: 状态载荷。
        stall: True 表示接受连接后不做任何回复 (用于超时测试)。
    """

    @asynccontextmanager
    async def _start(
        payload: bytes = SAMPLE_PAYLOAD,
        ack: bytes | None = b"\x01",
        length: bytes | None = b"",
        stall: bool = False,
    ):
        received: list[bytes] = []
        if length == b"":
            length = bytes([len(payload)])

        async def handler(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
            try:
                if stall:
                    await reader.read()
                    return
                received.append(await reader.readexactly(1))
                if ack is None:
                    return
                writer.write(ack)
                await writer.drain()

                received.append(await reader.readexactly(5))
                if length is None:
                    return
                writer.write(length + payload)
                await writer.drain()
            except (asyncio.IncompleteReadError, ConnectionError):
                pass
            finally:
                writer.close()
                try:
                    await writer.wait_closed()
                except ConnectionError:
                    pass

        server = await asyncio.start_server(handler, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        try:
            yield f"127.0.0.1:{port}", received
        finally:
            server.close()
            await server.wait_closed()

    return _start


class _StatusHandler(socketserver.BaseRequestHandler):
    def handle(self):
        self.request.recv(1)
        self.request.sendall(b"\x01")
        self.request.recv(5)
        payload = self.server.payload
        self.request.sendall(bytes([len(payload)]) + payload)


class _ThreadedStatusServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True


@pytest.fixture
def threaded_status_server():
    """
    [Fixture] 在后台线程运行的同步状态服务器，供 collect_sync / HTTP 抓取测试使用。
    """

    @contextmanager
    def _start(payload: bytes = SAMPLE_PAYLOAD):
        server = _ThreadedStatusServer(("127.0.0.1", 0), _StatusHandler)
        server.payload = payload
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        try:
            host, port = server.server_address
            yield f"{host}:{port}"
        finally:
            server.shutdown()
            server.server_close()

    return _start
