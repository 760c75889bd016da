# File: src/fafgear_exporter/protocols/packets.py
"""
FAF Gear 状态协议封包构建器 (Packet Builders)

负责将常量转换为符合协议规范的二进制字节流 (bytes)，
以及将服务端的响应解析为 Python 数据。
本模块是无状态的 (Stateless)，不包含任何 socket 操作。
"""

import logging
import re
import struct

from ..exceptions import ProtocolError
from ..state import FIELD_COUNT
from . import constants

logger = logging.getLogger(__name__)

# 与服务端 Atoi 一致：可选符号 + ASCII 十进制数字，不允许空白与下划线
_INT_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)

# =========================================================================
# Handshake
# =========================================================================


def build_handshake(version: int = constants.Code.PROTOCOL_VERSION) -> bytes:
    """构建握手包。

    结构: Version(int8)

    Args:
        version: 协议版本号，默认为 1。

    Returns:
        bytes: 1 字节的握手包。

    Raises:
        ProtocolError: 版本号超出 int8 范围。
    """
    try:
        return struct.pack(constants.HANDSHAKE_FORMAT, version)
    except struct.error as e:
        raise ProtocolError(f"协议版本超出 int8 范围: {version}") from e


# =========================================================================
# Status Request
# =========================================================================


def build_status_request(
    packet_type: int = constants.Code.STATUS_REQUEST,
    data_len: int = constants.STATUS_REQUEST_BODY_LEN,
) -> bytes:
    """构建状态请求包。

    结构: Type(int8) + Length(int32)，小端序，共 5 字节。

    Raises:
        ProtocolError: 字段值超出对应整数范围。
    """
    try:
        return struct.pack(constants.STATUS_REQUEST_FORMAT, packet_type, data_len)
    except struct.error as e:
        raise ProtocolError(
            f"状态请求字段越界: type={packet_type}, len={data_len}"
        ) from e


def parse_status_length(data: bytes) -> int:
    """解析状态长度字节。

    长度字段为有符号 8 位整数，因此载荷最长 127 字节。
    线上值 >= 128 会被解码为负数，这里视为协议错误而不是改按无符号解读。

    Args:
        data: 接收到的 1 字节响应。

    Returns:
        int: 即将到来的载荷长度 (0-127)。

    Raises:
        ProtocolError: 数据长度不为 1 或解码结果为负。
    """
    if len(data) != constants.STATUS_LENGTH_LEN:
        raise ProtocolError(f"状态长度字节缺失 (收到 {len(data)} 字节)")

    (length,) = struct.unpack(constants.STATUS_LENGTH_FORMAT, data)
    if length < 0:
        raise ProtocolError(f"状态长度为负 (线上值 0x{data.hex()})，超出 int8 表示范围")

    logger.debug("status_length: %d", length)
    return length


# =========================================================================
# Payload
# =========================================================================


def decode_payload_text(data: bytes) -> str:
    """将载荷字节解码为文本，非 ASCII 字节替换为占位符。"""
    return data.decode(constants.PAYLOAD_ENCODING, errors="replace")


def parse_int_field(text: str) -> int:
    """解析单个十进制整数字段，失败时返回 0。

    非数字、空串或超出 int64 范围都会得到 0，与真实上报的 0 无法区分。
    """
    if not _INT_PATTERN.fullmatch(text):
        return 0

    value = int(text)
    if not constants.INT_FIELD_MIN <= value <= constants.INT_FIELD_MAX:
        return 0
    return value


def decode_status_payload(payload: str) -> tuple[int, ...]:
    """将 `;` 分隔的状态文本解码为固定 11 位的整数元组。

    - 多出的字段被忽略。
    - 缺失的字段保持为 0。
    - 单个字段解析失败只影响该字段。

    Args:
        payload: 服务端返回的状态文本。

    Returns:
        tuple[int, ...]: 按字段表顺序排列的 11 个整数。
    """
    parts = payload.split(constants.FIELD_SEPARATOR)[:FIELD_COUNT]
    values = [parse_int_field(part) for part in parts]
    values.extend([0] * (FIELD_COUNT - len(values)))
    return tuple(values)
