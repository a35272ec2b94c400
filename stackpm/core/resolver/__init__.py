"""元数据解析模块

拆分说明:
- hoogle.py: Hoogle 全文检索
- cabal_meta.py: .cabal 字段解析
- resolver.py: 组合两者得到 PkgInfo
"""

from stackpm.core.resolver.cabal_meta import parse_cabal_fields
from stackpm.core.resolver.hoogle import HoogleClient, SearchHit
from stackpm.core.resolver.resolver import MetadataResolver

__all__ = [
    "HoogleClient",
    "MetadataResolver",
    "SearchHit",
    "parse_cabal_fields",
]
