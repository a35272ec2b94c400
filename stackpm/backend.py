"""Haskell Stack 后端 — 宿主调用的适配层

依赖模型拆分在两份清单中:
  - project.cabal: 直接依赖名，不带版本约束
  - stack.yaml:    精选集 (Stackage LTS) 标识 + 精选集之外包的精确版本 (extra-deps)

Stack 的构建计划总是可复现的，版本由 resolver + extra-deps 精确锁定，
因此 lock 是空操作，add / remove 同时维护两份清单。

库内部抛 StackPMError，本层统一转换为 OpResult，不在库内退出进程。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from stackpm.core.exceptions import NotSupportedError, StackPMError
from stackpm.core.models import PkgName, PkgSpec
from stackpm.core.result_models import OpFailure, OpResult, OpSuccess

if TYPE_CHECKING:
    from stackpm.services.container import ServiceContainer

logger = logging.getLogger(__name__)

QUIRK_ADD_REMOVE_ALSO_LOCKS = "add_remove_also_locks"


def _run(op: str, fn: Callable[[], Any]) -> OpResult:
    """执行操作，把业务异常转换为 OpFailure"""
    try:
        return OpSuccess(fn())
    except StackPMError as e:
        logger.error("%s 失败 [%s]: %s", op, e.code, e)
        return OpFailure(kind=e.code, message=str(e))


class StackBackend:
    """haskell-stack 后端"""

    name = "haskell-stack"
    filename_patterns = ["*.hs"]
    quirks = frozenset({QUIRK_ADD_REMOVE_ALSO_LOCKS})

    def __init__(self, container: ServiceContainer) -> None:
        self._c = container

    @property
    def specfile(self) -> str:
        return self._c.config.specfile

    @property
    def lockfile(self) -> str:
        return self._c.config.lockfile

    # ---- 元数据 ----

    def search(self, query: str) -> OpResult:
        return _run("search", lambda: self._c.resolver.search(query))

    def info(self, name: PkgName) -> OpResult:
        return _run("info", lambda: self._c.resolver.info(name))

    # ---- 清单 ----

    def add(self, packages: dict[PkgName, PkgSpec], project_name: str = "") -> OpResult:
        return _run("add", lambda: self._c.sync.add(packages, project_name))

    def remove(self, names: set[PkgName]) -> OpResult:
        return _run("remove", lambda: self._c.sync.remove(names))

    def list_specfile(self) -> OpResult:
        return _run("list_specfile", self._c.manifests.list_specfile)

    def list_lockfile(self) -> OpResult:
        return _run("list_lockfile", self._c.manifests.list_lockfile)

    def lock(self) -> OpResult:
        """版本已由 resolver + extra-deps 精确锁定，无需额外操作"""
        return OpSuccess()

    # ---- 环境 ----

    def install(self) -> OpResult:
        return _run("install", lambda: self._c.installer.install().returncode)

    def guess(self) -> OpResult:
        """从源码推断依赖：本后端不支持，显式返回失败"""
        def _unsupported() -> None:
            raise NotSupportedError(f"{self.name} 不支持从源码推断依赖 (guess)")
        return _run("guess", _unsupported)

    def get_package_dir(self) -> str:
        # Stack 实际使用两处: ~/.stack/ 存放精选集的包，项目内 .stack-work 存放其余
        return self._c.config.package_dir
