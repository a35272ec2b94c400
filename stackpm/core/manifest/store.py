"""清单存储 — project.cabal (specfile) 与 stack.yaml (lockfile) 的读写

两份清单的约束:
  1. stack.yaml 中每个 extra-dep 的包名都必须出现在 project.cabal 中
  2. 精选集 (Stackage) 内的包只写 project.cabal，不写 stack.yaml

注意: 两个文件分别写入，跨文件不具备原子性。一次调用可能写完一个文件后失败，
多包调用也可能部分完成，此时约束 1 会暂时不成立。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from stackpm.core.exceptions import ManifestIOError
from stackpm.core.manifest import cabal, stack_yaml
from stackpm.core.manifest.cabal import CabalFile
from stackpm.core.manifest.io import ManifestIO
from stackpm.core.manifest.stack_yaml import StackYaml
from stackpm.core.models import PkgName, PkgSpec, PkgVersion

logger = logging.getLogger(__name__)


class ManifestStore:
    """两份耦合清单的行级读写"""

    def __init__(
        self,
        io: ManifestIO,
        *,
        specfile: str = "project.cabal",
        lockfile: str = "stack.yaml",
        resolver: str = "lts-16.10",
        system_ghc: bool = True,
    ) -> None:
        self.io = io
        self.specfile = specfile
        self.lockfile = lockfile
        self.resolver = resolver
        self.system_ghc = system_ghc

    # ------------------------------------------------------------------
    # 加载 / 保存
    # ------------------------------------------------------------------

    def _load_spec(self) -> CabalFile:
        return CabalFile(self.io.read(self.specfile))

    def _load_lock(self) -> StackYaml:
        # 锁文件缺失但 specfile 存在（手工删除）时按空文件处理，写回时重建
        if not self.io.exists(self.lockfile):
            if not self.io.exists(self.specfile):
                raise ManifestIOError(f"清单未初始化: {self.specfile} 不存在")
            logger.warning("锁文件不存在，将重新创建: %s", self.lockfile)
            return StackYaml(stack_yaml.scaffold(self.resolver, self.system_ghc))
        return StackYaml(self.io.read(self.lockfile))

    # ------------------------------------------------------------------
    # 初始化
    # ------------------------------------------------------------------

    def ensure_initialized(self, project_name: str = "") -> bool:
        """specfile 不存在时写入初始清单，返回是否新建

        已有的 lockfile 保留不动（其中可能有手写的 resolver 与 extra-deps）。
        """
        if self.io.exists(self.specfile):
            return False
        self.io.write(self.specfile, cabal.scaffold(project_name))
        if self.io.exists(self.lockfile):
            logger.warning(
                "%s 不存在但 %s 已存在，保留现有 %s", self.specfile, self.lockfile, self.lockfile,
            )
        else:
            self.io.write(
                self.lockfile, stack_yaml.scaffold(self.resolver, self.system_ghc),
            )
        logger.info(
            "已初始化清单: %s, %s (resolver=%s)",
            self.specfile, self.lockfile, self.resolver,
        )
        return True

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def list_specfile(self) -> dict[PkgName, PkgSpec]:
        """列出直接依赖，版本约束恒为空串；specfile 不存在时返回空字典"""
        if not self.io.exists(self.specfile):
            return {}
        return {name: "" for name in self._load_spec().dependencies()}

    def list_lockfile(self) -> dict[PkgName, PkgVersion]:
        """列出 extra-deps 的锁定版本；lockfile 不存在时返回空字典"""
        if not self.io.exists(self.lockfile):
            return {}
        return StackYaml(self.io.read(self.lockfile)).extra_deps()

    # ------------------------------------------------------------------
    # 修改
    # ------------------------------------------------------------------

    def append_dependency(self, name: PkgName) -> None:
        spec = self._load_spec()
        spec.append(name)
        self.io.write(self.specfile, spec.render())
        logger.debug("%s += %s", self.specfile, name)

    def append_extra_dep(self, name: PkgName, version: PkgVersion) -> None:
        lock = self._load_lock()
        lock.append(name, version)
        self.io.write(self.lockfile, lock.render())
        logger.debug("%s += %s-%s", self.lockfile, name, version)

    def update_extra_dep(self, name: PkgName, version: PkgVersion) -> None:
        """修改已锁定包的版本，未锁定时等同 append_extra_dep"""
        lock = self._load_lock()
        if not lock.replace(name, version):
            lock.append(name, version)
        self.io.write(self.lockfile, lock.render())
        logger.debug("%s: %s -> %s", self.lockfile, name, version)

    def remove_dependencies(self, names: Iterable[PkgName]) -> set[PkgName]:
        """从两份清单中删除指定包的行，返回实际被删除的包名

        lockfile 只删除当前已锁定的精确 "name-version" 行；
        不在任何清单中的包名静默忽略。
        """
        names = list(names)
        removed: set[PkgName] = set()

        spec = self._load_spec() if self.io.exists(self.specfile) else None
        lock = StackYaml(self.io.read(self.lockfile)) if self.io.exists(self.lockfile) else None
        pinned = lock.extra_deps() if lock else {}

        for name in names:
            if lock is not None and name in pinned and lock.remove(name, pinned[name]):
                removed.add(name)
            if spec is not None and spec.remove(name):
                removed.add(name)

        if spec is not None:
            self.io.write(self.specfile, spec.render())
        if lock is not None:
            self.io.write(self.lockfile, lock.render())
        return removed
