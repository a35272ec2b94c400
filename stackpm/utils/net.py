"""HTTP 访问 — Hoogle 检索与 Hackage .cabal 拉取共用的 GET 抽象

默认实现基于 urllib.request；测试通过 set_fetcher() 注入假实现，不访问真实网络。
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from typing import Protocol
from urllib.parse import urlsplit

from stackpm.core.exceptions import NetworkError, ValidationError

logger = logging.getLogger(__name__)

HTTP_SCHEMES = ("http", "https")

# 单个响应体上限 (16MB)，.cabal 与搜索结果都远小于此
MAX_RESPONSE_SIZE = 16 * 1024 * 1024


def check_http_url(url: str) -> str:
    """只接受带主机名的 http/https 地址，原样返回 url

    检索结果中的 url 来自上游，拼接前需要拦住 file:// 或相对路径。
    """
    parts = urlsplit(url)
    if parts.scheme not in HTTP_SCHEMES or not parts.netloc:
        raise ValidationError(f"仅支持 http/https 地址: {url!r}")
    return url


class HttpFetcher(Protocol):
    """HTTP GET 协议 — 返回响应体字节，任何失败抛 NetworkError"""

    def get(self, url: str, *, timeout: float | None = None) -> bytes:
        ...


class UrllibFetcher:
    """基于 urllib.request 的默认实现"""

    def __init__(self, user_agent: str = "stackpm") -> None:
        self.user_agent = user_agent

    def get(self, url: str, *, timeout: float | None = None) -> bytes:
        request = urllib.request.Request(
            check_http_url(url), headers={"User-Agent": self.user_agent},
        )
        logger.debug("GET %s", url)
        try:
            with urllib.request.urlopen(request, timeout=timeout) as resp:  # nosec B310
                body = resp.read(MAX_RESPONSE_SIZE + 1)
        except urllib.error.HTTPError as e:
            raise NetworkError(f"HTTP 错误 {e.code}: {url} - {e.reason}") from e
        except urllib.error.URLError as e:
            raise NetworkError(f"网络错误: {url} - {e.reason}") from e
        except OSError as e:
            raise NetworkError(f"网络错误: {url} - {e}") from e
        if len(body) > MAX_RESPONSE_SIZE:
            raise NetworkError(f"响应过大: {url} (超过 {MAX_RESPONSE_SIZE} 字节)")
        return body


_default_fetcher: HttpFetcher = UrllibFetcher()


def get_fetcher() -> HttpFetcher:
    return _default_fetcher


def set_fetcher(fetcher: HttpFetcher) -> None:
    """替换全局默认 fetcher（测试用）"""
    global _default_fetcher  # noqa: PLW0603
    _default_fetcher = fetcher
