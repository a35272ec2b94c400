"""核心数据模型

包名、版本约束、精确版本在清单中都是不透明字符串，这里只给出类型别名，
便于在签名中区分语义。
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

PkgName = str
PkgSpec = str      # 版本约束；Stack 后端恒为空串，版本由精选集 + extra-deps 锁定
PkgVersion = str   # 精确版本；仅对精选集之外的包有意义


@dataclass
class PkgInfo:
    """单个包解析后的元信息，缺失字段为空串"""

    name: PkgName
    description: str = ""
    version: PkgVersion = ""
    homepage_url: str = ""
    source_code_url: str = ""
    bug_tracker_url: str = ""
    author: str = ""
    license: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class AddedPackage:
    """一次 add 操作中单个包的落盘结果"""

    name: PkgName
    curated: bool
    version: PkgVersion = ""   # 仅 extra-dep 记录锁定版本

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
