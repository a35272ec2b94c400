"""适配层的返回值模型

使用 dataclass 定义类型安全的返回值，替代进程内直接退出。
宿主（多生态包管理前端）根据 OpResult 自行决定退出码和输出。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class OpSuccess:
    """操作成功，value 为操作的返回数据（可为 None）"""

    value: Any = None

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        value = self.value
        if hasattr(value, "to_dict"):
            value = value.to_dict()
        elif isinstance(value, list):
            value = [v.to_dict() if hasattr(v, "to_dict") else v for v in value]
        return {"ok": True, "value": value}


@dataclass
class OpFailure:
    """操作失败

    kind 取自异常的 code（NETWORK_ERROR / NOT_FOUND / MANIFEST_IO_ERROR ...）
    """

    kind: str
    message: str

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"ok": False, "kind": self.kind, "message": self.message}


# OpResult 是两者的联合类型
OpResult = OpSuccess | OpFailure
