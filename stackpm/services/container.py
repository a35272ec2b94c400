"""服务容器 — 统一依赖注入

所有组件通过容器获取，同一容器内的实例共享状态。
CLI 应通过 get_container() 获取，而非直接 import 构造。

依赖关系图（→ 表示依赖）:
  sync    → manifests, resolver
  backend → sync, manifests, resolver, installer

用法:
    container = ServiceContainer()
    backend = container.backend          # 懒加载

    # 显式注入配置 / 清单读写
    cfg = Config.from_file("stackpm.yml")
    container = ServiceContainer(config=cfg, manifest_io=MemoryManifestIO())
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stackpm.backend import StackBackend
    from stackpm.core.config import Config
    from stackpm.core.manifest import ManifestIO, ManifestStore
    from stackpm.core.resolver import MetadataResolver
    from stackpm.services.install_service import InstallService
    from stackpm.services.sync_service import SyncService

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(
        self,
        config: Config | None = None,
        manifest_io: ManifestIO | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from stackpm.core.config import get_config
            config = get_config()
        self._config = config
        self._manifest_io = manifest_io

    @property
    def config(self) -> Config:
        return self._config

    @property
    def manifests(self) -> ManifestStore:
        if "manifests" not in self._instances:
            from stackpm.core.manifest import FileManifestIO, ManifestStore
            cfg = self._config
            self._instances["manifests"] = ManifestStore(
                self._manifest_io or FileManifestIO(cfg.project_dir),
                specfile=cfg.specfile,
                lockfile=cfg.lockfile,
                resolver=cfg.curated_resolver,
                system_ghc=cfg.system_ghc,
            )
        return self._instances["manifests"]  # type: ignore[return-value]

    @property
    def resolver(self) -> MetadataResolver:
        if "resolver" not in self._instances:
            from stackpm.core.resolver import HoogleClient, MetadataResolver
            cfg = self._config
            self._instances["resolver"] = MetadataResolver(
                HoogleClient(
                    cfg.search_url,
                    package_prefix=cfg.package_prefix,
                    timeout=cfg.http_timeout,
                ),
                max_workers=cfg.max_workers,
                timeout=cfg.http_timeout,
            )
        return self._instances["resolver"]  # type: ignore[return-value]

    @property
    def sync(self) -> SyncService:
        if "sync" not in self._instances:
            from stackpm.services.sync_service import SyncService
            self._instances["sync"] = SyncService(
                self.manifests, self.resolver,
                not_curated_marker=self._config.not_curated_marker,
            )
        return self._instances["sync"]  # type: ignore[return-value]

    @property
    def installer(self) -> InstallService:
        if "installer" not in self._instances:
            from stackpm.services.install_service import InstallService
            self._instances["installer"] = InstallService(
                self._config.project_dir,
                cmd=self._config.install_cmd,
                timeout=self._config.install_timeout or None,
            )
        return self._instances["installer"]  # type: ignore[return-value]

    @property
    def backend(self) -> StackBackend:
        if "backend" not in self._instances:
            from stackpm.backend import StackBackend
            self._instances["backend"] = StackBackend(self)
        return self._instances["backend"]  # type: ignore[return-value]


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例（线程安全）"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def reset_container() -> None:
    """重置全局容器（CLI 切换配置或测试时使用）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None
