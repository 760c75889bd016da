# src/fafgear_exporter/protocols/__init__.py
"""
FAF Gear 协议层 (Protocol Layer)

本包负责协议数据包的纯粹构建 (Build) 与解析 (Parse)。

- 不包含任何 socket 操作或网络 I/O。
- 不依赖于 client 或 network 层。
"""

from . import constants
from .packets import (
    build_handshake,
    build_status_request,
    decode_status_payload,
    parse_int_field,
    parse_status_length,
)

__all__ = [
    "constants",
    "build_handshake",
    "build_status_request",
    "parse_status_length",
    "parse_int_field",
    "decode_status_payload",
]
