"""适配层协议定义

宿主（多生态包管理前端）只依赖此协议，不依赖具体后端实现。
所有操作都返回 OpResult，由宿主决定输出和退出码。
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from stackpm.core.models import PkgName, PkgSpec
from stackpm.core.result_models import OpResult


@runtime_checkable
class LanguageBackend(Protocol):
    """单个生态的后端适配器"""

    name: str
    specfile: str
    lockfile: str
    filename_patterns: list[str]
    quirks: frozenset[str]

    def search(self, query: str) -> OpResult:
        """value: list[PkgInfo]"""
        ...

    def info(self, name: PkgName) -> OpResult:
        """value: PkgInfo"""
        ...

    def add(self, packages: dict[PkgName, PkgSpec], project_name: str = "") -> OpResult:
        """value: list[AddedPackage]"""
        ...

    def remove(self, names: set[PkgName]) -> OpResult:
        """value: set[PkgName]（实际删除的包）"""
        ...

    def list_specfile(self) -> OpResult:
        """value: dict[PkgName, PkgSpec]"""
        ...

    def list_lockfile(self) -> OpResult:
        """value: dict[PkgName, PkgVersion]"""
        ...

    def lock(self) -> OpResult:
        ...

    def install(self) -> OpResult:
        ...

    def guess(self) -> OpResult:
        """value: dict[PkgName, bool]"""
        ...

    def get_package_dir(self) -> str:
        ...
