# File: src/fafgear_exporter/exceptions.py
"""
FAF Gear Exporter - 异常体系 (Exceptions)

定义库内统一使用的异常类。
协议客户端在边界处会将这些异常折叠为 FetchResult(ok=False)，
因此它们只在底层模块之间传递，不会泄露到 HTTP 抓取流程中。
"""


class ExporterError(Exception):
    """导出器所有内部异常的基类。"""

    pass


class ConfigError(ExporterError):
    """配置加载或校验失败。

    触发场景:
    1. 地址格式错误 (如缺少端口、端口非数字)。
    2. 超时时间非正数。
    3. 找不到配置文件或 Profile。
    """

    pass


class NetworkError(ExporterError):
    """网络层面的错误 (I/O 级别)。

    触发场景:
    1. DNS 解析或 TCP 连接失败。
    2. 发送 (write) 失败或写入 0 字节。
    3. 接收 (read) 超时或连接被重置。
    """

    pass


class ProtocolError(ExporterError):
    """协议交互错误 (逻辑级别)。

    触发场景:
    1. 握手确认字节缺失。
    2. 状态长度字节缺失或为负数 (线上值 >= 128)。
    3. 常量超出封包字段的取值范围。
    """

    pass
