# File: src/fafgear_exporter/state.py
"""
FAF Gear Exporter - 数据模块

定义状态载荷的字段表 (Schema) 以及一次抓取产生的只读数据对象。
本模块不包含业务逻辑，仅作为数据容器供 Client 与 Collector 传递。
"""

from dataclasses import dataclass, field
from enum import IntEnum


class StatusField(IntEnum):
    """状态载荷的固定字段表。

    枚举值即字段在 `;` 分隔载荷中的位置。
    位置是协议约定：第 N 位永远表示同一个指标。
    """

    QUERY_QUEUE_SIZE = 0
    DATABASE_CONNECTIONS_MAX = 1
    DATABASE_CONNECTIONS_ACTIVE = 2
    THREADPOOL_INPUT_COUNT = 3
    THREADPOOL_INPUT_RUNNING = 4
    THREADPOOL_INPUT_QUEUED = 5
    THREADPOOL_INPUT_TOTAL = 6
    THREADPOOL_DATABASE_COUNT = 7
    THREADPOOL_DATABASE_RUNNING = 8
    THREADPOOL_DATABASE_QUEUED = 9
    THREADPOOL_DATABASE_TOTAL = 10

    @property
    def metric_name(self) -> str:
        """字段对应的指标名 (小写蛇形)。"""
        return self.name.lower()


# 按载荷顺序排列的字段表
STATUS_FIELDS: tuple[StatusField, ...] = tuple(sorted(StatusField))
FIELD_COUNT = len(STATUS_FIELDS)


@dataclass(frozen=True)
class FetchResult:
    """一次协议交互的原始结果。

    Attributes:
        ok: 完整交互成功且载荷长度与声明一致时为 True。
        payload: 原始状态文本。失败时为空串，短读时为已读到的部分。
    """

    ok: bool
    payload: str = ""


@dataclass(frozen=True)
class StatusSnapshot:
    """一次抓取解码后的状态快照。

    每次抓取都会新建，构造后不可变，交给导出层后即丢弃。

    注意: 不可达时所有字段均为 0，与服务端真实上报的 0 无法区分。

    Attributes:
        reachable: 协议交互是否完整成功。
        fields: 按 STATUS_FIELDS 顺序排列的 11 个整数。
    """

    reachable: bool
    fields: tuple[int, ...] = field(default=(0,) * FIELD_COUNT)

    def __post_init__(self) -> None:
        if len(self.fields) != FIELD_COUNT:
            raise ValueError(
                f"StatusSnapshot 需要 {FIELD_COUNT} 个字段，实际为 {len(self.fields)}"
            )

    @classmethod
    def unreachable(cls) -> "StatusSnapshot":
        """构造目标不可达时的全零快照。"""
        return cls(reachable=False)

    def get(self, status_field: StatusField) -> int:
        """按字段名读取数值。"""
        return self.fields[status_field]

    @property
    def up(self) -> int:
        """可达标志的数值形式 (1/0)，用于 up 指标。"""
        return 1 if self.reachable else 0

    def as_dict(self) -> dict[str, int]:
        """返回按字段表顺序排列的 {指标名: 数值}。"""
        return {f.metric_name: self.fields[f] for f in STATUS_FIELDS}
