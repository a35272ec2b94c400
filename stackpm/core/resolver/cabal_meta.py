"""包的 .cabal 声明文件解析

只提取 "key: value" 形式的行:
  - key 为冒号前连续的非空白字符
  - value 为冒号后（至少一个空格）的剩余内容，去掉首尾空白
不符合该形式的行直接跳过，不报错。

顶格的行属于包的全局字段；缩进的行属于 library / source-repository / flag
等段落或多行 description。同名 key 以顶格行为准，同一层级内以后出现的为准。
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

_FIELD_RE = re.compile(r"(\S+): +(.+)")


def parse_cabal_fields(text: str) -> dict[str, str]:
    """解析 .cabal 文本为 {key: value}"""
    top: dict[str, str] = {}
    nested: dict[str, str] = {}
    skipped = 0
    for line in text.splitlines():
        m = _FIELD_RE.search(line)
        if not m:
            if line.strip():
                skipped += 1
            continue
        value = m.group(2).strip()
        if value:
            target = nested if line[:1] in (" ", "\t") else top
            target[m.group(1)] = value
    if skipped:
        logger.debug("跳过 %d 行无法识别的 .cabal 内容", skipped)
    return {**nested, **top}
