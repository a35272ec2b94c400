"""Hoogle 全文检索客户端

请求:
    GET <search_url>?mode=json&format=text&hoogle=<query> is:package

响应为 JSON 数组，每个元素形如:
    {"item": "package aeson", "url": "https://hackage.haskell.org/package/aeson",
     "docs": "Fast JSON parsing and encoding\\n...", ...}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from urllib.parse import quote, urlencode

from stackpm.core.exceptions import NetworkError
from stackpm.utils.net import HttpFetcher, get_fetcher

logger = logging.getLogger(__name__)


@dataclass
class SearchHit:
    """一条包类型的检索结果"""

    name: str
    url: str
    docs: str = ""


class HoogleClient:
    """Hoogle 检索，仅返回包类型的结果，保持上游相关度顺序"""

    def __init__(
        self,
        search_url: str = "https://hoogle.haskell.org/",
        *,
        package_prefix: str = "package ",
        fetcher: HttpFetcher | None = None,
        timeout: float | None = 60,
    ) -> None:
        self.search_url = search_url
        self.package_prefix = package_prefix
        self._fetcher = fetcher
        self.timeout = timeout

    @property
    def fetcher(self) -> HttpFetcher:
        return self._fetcher or get_fetcher()

    def build_url(self, query: str) -> str:
        params = urlencode(
            {"mode": "json", "format": "text", "hoogle": f"{query} is:package"},
            quote_via=quote,
        )
        return f"{self.search_url}?{params}"

    def search(self, query: str) -> list[SearchHit]:
        url = self.build_url(query)
        body = self.fetcher.get(url, timeout=self.timeout)
        try:
            results = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise NetworkError(f"检索响应格式错误: {url} - {e}") from e
        if not isinstance(results, list):
            raise NetworkError(f"检索响应格式错误: {url} - 期望 JSON 数组")

        hits: list[SearchHit] = []
        for result in results:
            if not isinstance(result, dict):
                continue
            item = result.get("item") or ""
            if not item.startswith(self.package_prefix):
                if item:
                    logger.debug("跳过非包结果: %s", item)
                continue
            name = item[len(self.package_prefix):]
            if not name:
                continue
            hits.append(SearchHit(
                name=name,
                url=result.get("url") or "",
                docs=result.get("docs") or "",
            ))
        logger.info("检索 '%s': %d 个包", query, len(hits))
        return hits
