"""包元数据解析器

组合两个数据源:
  1. Hoogle 检索 → 包名、简介 (docs)、Hackage 页面地址
  2. Hackage 上的 <url>/src/<name>.cabal → 版本、源码地址、问题追踪、作者、许可证

每个命中的 .cabal 拉取相互独立，使用有界线程池并发拉取；
任一拉取失败即整体失败（first-error-wins），不返回部分结果、不重试。
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from stackpm.core.exceptions import NetworkError, PackageNotFoundError, ValidationError
from stackpm.core.models import PkgInfo, PkgName
from stackpm.core.resolver.cabal_meta import parse_cabal_fields
from stackpm.core.resolver.hoogle import HoogleClient, SearchHit
from stackpm.utils.net import HttpFetcher, get_fetcher

logger = logging.getLogger(__name__)


class MetadataResolver:
    """名称 / 查询词 → PkgInfo"""

    def __init__(
        self,
        search_client: HoogleClient | None = None,
        *,
        fetcher: HttpFetcher | None = None,
        max_workers: int = 8,
        timeout: float | None = 60,
    ) -> None:
        self.search_client = search_client or HoogleClient(fetcher=fetcher, timeout=timeout)
        self._fetcher = fetcher
        self.max_workers = max(1, max_workers)
        self.timeout = timeout

    @property
    def fetcher(self) -> HttpFetcher:
        return self._fetcher or get_fetcher()

    # ------------------------------------------------------------------
    # 对外接口
    # ------------------------------------------------------------------

    def search(self, query: str) -> list[PkgInfo]:
        """检索包，按上游相关度排序；无结果返回空列表"""
        hits = [h for h in self.search_client.search(query) if self._fetchable(h)]
        return self._resolve_hits(hits)

    def info(self, name: PkgName) -> PkgInfo:
        """精确解析单个包；没有同名候选时抛 PackageNotFoundError

        先按包名过滤检索结果再拉取 .cabal，上游排序不作为匹配依据。
        """
        if not name:
            raise ValidationError("包名不能为空")
        hits = [h for h in self.search_client.search(name) if h.name == name]
        hits = [h for h in hits if self._fetchable(h)]
        if not hits:
            raise PackageNotFoundError(name)
        info = self.to_pkg_info(hits[0], self.fetch_cabal(hits[0]))
        if info.name != name:
            raise PackageNotFoundError(name)
        return info

    def info_many(self, names: list[PkgName]) -> dict[PkgName, PkgInfo]:
        """并发解析多个包，任一失败即整体失败"""
        if not names:
            return {}
        workers = min(self.max_workers, len(names))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            infos = list(executor.map(self.info, names))
        return dict(zip(names, infos))

    # ------------------------------------------------------------------
    # 内部实现
    # ------------------------------------------------------------------

    @staticmethod
    def _fetchable(hit: SearchHit) -> bool:
        if not hit.url:
            logger.warning("检索结果缺少 url，跳过: %s", hit.name)
            return False
        return True

    def _resolve_hits(self, hits: list[SearchHit]) -> list[PkgInfo]:
        if not hits:
            return []
        workers = min(self.max_workers, len(hits))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            documents = list(executor.map(self.fetch_cabal, hits))
        return [self.to_pkg_info(h, doc) for h, doc in zip(hits, documents)]

    def cabal_url(self, hit: SearchHit) -> str:
        return f"{hit.url.rstrip('/')}/src/{hit.name}.cabal"

    def fetch_cabal(self, hit: SearchHit) -> str:
        url = self.cabal_url(hit)
        body = self.fetcher.get(url, timeout=self.timeout)
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise NetworkError(f".cabal 文件编码错误: {url} - {e}") from e

    @staticmethod
    def to_pkg_info(hit: SearchHit, cabal_text: str) -> PkgInfo:
        fields = parse_cabal_fields(cabal_text)
        return PkgInfo(
            name=hit.name,
            description=hit.docs.replace("\n", ""),
            version=fields.get("version", ""),
            homepage_url=hit.url,
            # .cabal 的 homepage 通常指向源码仓库
            source_code_url=fields.get("homepage", ""),
            bug_tracker_url=fields.get("bug-reports", ""),
            author=fields.get("author", ""),
            license=fields.get("license", ""),
        )
