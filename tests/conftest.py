"""测试共享 fixture — 假 HTTP fetcher + 内存清单

网络访问统一由 FakeFetcher 模拟:
  - Hoogle 检索: 按查询词返回预置的 JSON 数组
  - .cabal 拉取: 按包名返回预置文本，未预置时抛 NetworkError (模拟 404)
"""

from __future__ import annotations

import json
from urllib.parse import parse_qs, urlparse

import pytest

from stackpm.core.exceptions import NetworkError
from stackpm.core.manifest import ManifestStore, MemoryManifestIO
from stackpm.core.resolver import HoogleClient, MetadataResolver

NOT_ON_STACKAGE = "Not on Stackage, so not a part of any curated set."


def hit(name: str, docs: str = "") -> dict[str, str]:
    return {
        "item": f"package {name}",
        "url": f"https://hackage.haskell.org/package/{name}",
        "docs": docs,
        "type": "",
    }


def cabal_doc(name: str, version: str, **extra: str) -> str:
    lines = [
        f"name:                {name}",
        f"version:             {version}",
        "license:             BSD3",
        "author:              Jane Doe <jane@example.com>",
        f"homepage:            https://github.com/example/{name}",
        f"bug-reports:         https://github.com/example/{name}/issues",
        "",
        "library",
        "  exposed-modules:   Data.Example",
        "  build-depends:     base >=4.9 && <5",
    ]
    lines += [f"{k}: {v}" for k, v in extra.items()]
    return "\n".join(lines) + "\n"


class FakeFetcher:
    """HttpFetcher 的测试实现"""

    def __init__(self) -> None:
        self.search_results: dict[str, list] = {}
        self.cabal_files: dict[str, str] = {}
        self.fail_urls: set[str] = set()
        self.calls: list[str] = []

    def add_package(self, name: str, version: str, docs: str = "") -> None:
        self.search_results.setdefault(name, []).insert(0, hit(name, docs))
        self.cabal_files[name] = cabal_doc(name, version)

    def add_hit(self, query: str, name: str, docs: str = "") -> None:
        """为查询词追加一条检索结果（排在已有结果之后）"""
        self.search_results.setdefault(query, []).append(hit(name, docs))

    def get(self, url: str, *, timeout: float | None = None) -> bytes:
        self.calls.append(url)
        if url in self.fail_urls:
            raise NetworkError(f"网络错误: {url} - connection refused")
        parsed = urlparse(url)
        if parsed.path.endswith(".cabal"):
            name = parsed.path.rsplit("/", 1)[-1][: -len(".cabal")]
            if name not in self.cabal_files:
                raise NetworkError(f"HTTP 错误 404: {url} - Not Found")
            return self.cabal_files[name].encode("utf-8")
        query = parse_qs(parsed.query)["hoogle"][0].removesuffix(" is:package")
        return json.dumps(self.search_results.get(query, [])).encode("utf-8")


@pytest.fixture()
def fetcher() -> FakeFetcher:
    f = FakeFetcher()
    f.add_package("aeson", "2.0.3.0", docs="Fast JSON parsing and encoding\nA JSON library.")
    f.add_package("text-show", "3.9.2", docs=f"Efficient conversion of values into Text\n{NOT_ON_STACKAGE}")
    f.add_package("acme-missiles", "0.3", docs=NOT_ON_STACKAGE)
    f.add_package("foo", "1.0.0", docs="Foo utilities")
    f.add_package("bar", "2.1", docs="Bar utilities")
    return f


@pytest.fixture()
def resolver(fetcher: FakeFetcher) -> MetadataResolver:
    return MetadataResolver(HoogleClient(fetcher=fetcher), fetcher=fetcher, max_workers=4)


@pytest.fixture()
def memory_io() -> MemoryManifestIO:
    return MemoryManifestIO()


@pytest.fixture()
def store(memory_io: MemoryManifestIO) -> ManifestStore:
    return ManifestStore(memory_io)
