"""同步服务 — 批量添加 / 删除依赖

组合 MetadataResolver 与 ManifestStore:

  add:    初始化清单 → 并发解析全部包 → 分类（精选集 / extra-dep）→ 写清单
  remove: 从两份清单删除对应行

分类规则是启发式的: Hoogle 的 docs 文本中出现 "Not on Stackage" 即视为
不在精选集中。该标记来自上游的自由文本，并非结构化字段，上游措辞变化会导致
误判；在有更可靠的信号（如直接查询 Stackage 快照）之前保持此行为。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from stackpm.core.exceptions import ValidationError
from stackpm.core.manifest import ManifestStore
from stackpm.core.models import AddedPackage, PkgInfo, PkgName, PkgSpec
from stackpm.core.resolver import MetadataResolver

logger = logging.getLogger(__name__)


class SyncService:
    """依赖增删的编排"""

    def __init__(
        self,
        store: ManifestStore,
        resolver: MetadataResolver,
        *,
        not_curated_marker: str = "Not on Stackage",
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.not_curated_marker = not_curated_marker

    def is_curated(self, info: PkgInfo) -> bool:
        """根据描述文本判断是否在精选集中（启发式）"""
        return self.not_curated_marker not in info.description

    def add(
        self, requested: dict[PkgName, PkgSpec], project_name: str = "",
    ) -> list[AddedPackage]:
        """添加依赖

        任一包解析失败或无法确定 extra-dep 版本则整体失败，此时不会写入任何依赖行
        （清单脚手架在解析前已创建）。
        """
        self.store.ensure_initialized(project_name)
        if not requested:
            return []

        names = list(requested)
        infos = self.resolver.info_many(names)

        # 先确定每个包的落盘方式，任何一个无法锁定版本都不写清单
        plan: list[AddedPackage] = []
        for name in names:
            info = infos[name]
            curated = self.is_curated(info)
            version = "" if curated else (requested[name] or info.version)
            if not curated and not version:
                raise ValidationError(
                    f"{name} 不在精选集中，且 .cabal 缺少 version 字段，"
                    f"无法写入 extra-deps，请显式指定版本 ({name}@<version>)",
                )
            plan.append(AddedPackage(name=name, curated=curated, version=version))

        existing = self.store.list_specfile()
        pinned = self.store.list_lockfile()
        for pkg in plan:
            name, version = pkg.name, pkg.version
            if not pkg.curated:
                logger.info(
                    "%s 不在精选集中（依据描述标记 '%s'），锁定为 extra-dep: %s",
                    name, self.not_curated_marker, version,
                )
                if name not in pinned:
                    self.store.append_extra_dep(name, version)
                elif pinned[name] != version:
                    self.store.update_extra_dep(name, version)
            if name in existing:
                logger.info("%s 已在 %s 中，跳过", name, self.store.specfile)
            else:
                self.store.append_dependency(name)
        return plan

    def remove(self, names: Iterable[PkgName]) -> set[PkgName]:
        """删除依赖，返回实际删除的包名；不在清单中的包名静默忽略"""
        names = set(names)
        removed = self.store.remove_dependencies(sorted(names))
        ignored = names - removed
        if ignored:
            logger.debug("清单中不存在，忽略: %s", ", ".join(sorted(ignored)))
        if removed:
            logger.info("已删除依赖: %s", ", ".join(sorted(removed)))
        return removed
