# src/fafgear_exporter/protocols/constants.py
"""
FAF Gear 状态协议常量表 (Constants)

仅定义协议的结构性常量（版本号、包类型、字节布局）。
所有多字节整数均为小端序。
"""


# =========================================================================
# 协议操作码 (Protocol Codes)
# =========================================================================
class Code:
    """握手与请求包中的常量字段"""

    PROTOCOL_VERSION = 1  # 握手时发送的协议版本 (Client -> Server)
    STATUS_REQUEST = 1  # 状态请求包类型 (Client -> Server)


# =========================================================================
# 字节布局 (struct 格式)
# =========================================================================
HANDSHAKE_FORMAT = "<b"  # int8 版本号
STATUS_REQUEST_FORMAT = "<bi"  # int8 包类型 + int32 包体长度
STATUS_LENGTH_FORMAT = "<b"  # int8 载荷长度

HANDSHAKE_LEN = 1
HANDSHAKE_ACK_LEN = 1
STATUS_REQUEST_LEN = 5
STATUS_LENGTH_LEN = 1

# 状态请求不携带包体
STATUS_REQUEST_BODY_LEN = 0

# 载荷长度字段为有符号 8 位，最大只能表示 127 字节
MAX_PAYLOAD_LEN = 127

# =========================================================================
# 载荷格式 (Payload)
# =========================================================================
FIELD_SEPARATOR = ";"
PAYLOAD_ENCODING = "ascii"

# 服务端原生整数宽度 (有符号 64 位)
INT_FIELD_MIN = -(2**63)
INT_FIELD_MAX = 2**63 - 1
