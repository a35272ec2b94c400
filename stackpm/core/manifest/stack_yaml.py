"""stack.yaml 的行级模型

只识别顶层 extra-deps 块，其余内容（resolver、system-ghc、注释等）原样保留:

    resolver: lts-16.10
    system-ghc: true
    extra-deps:
    - acme-missiles-0.3
    - text-show-3.9.2

块 = "extra-deps:" 行 + 其后的列表项 / 缩进行 / 注释行，直到下一个顶层键。
"""

from __future__ import annotations

import logging
import re

from stackpm.core.exceptions import ManifestIOError
from stackpm.core.models import PkgName, PkgVersion

logger = logging.getLogger(__name__)

EXTRA_DEPS_MARKER = "extra-deps:\n"

_MARKER_RE = re.compile(r"^extra-deps\s*:(?P<inline>.*)$")
_ENTRY_RE = re.compile(r"""^(?P<indent>[ \t]*)-[ \t]+["']?(?P<token>[^\s"'#]+)["']?[ \t]*(#.*)?$""")


def scaffold(resolver: str, system_ghc: bool = True) -> str:
    """生成初始 stack.yaml 内容

    system-ghc 为 true 时，仅当本机 GHC 版本与 resolver 要求一致才会使用本机 GHC，
    否则 stack 仍按需下载。
    """
    return f"resolver: {resolver}\nsystem-ghc: {'true' if system_ghc else 'false'}\n"


def entry_line(name: PkgName, version: PkgVersion) -> str:
    return f"- {name}-{version}\n"


def split_name_version(token: str) -> tuple[PkgName, PkgVersion] | None:
    """按最后一个连字符拆分 "name-version"，包名本身可以含连字符

    >>> split_name_version("text-show-3.9.2")
    ('text-show', '3.9.2')
    """
    name, sep, version = token.rpartition("-")
    if not sep or not name or not version:
        return None
    return name, version


def _is_top_level_key(line: str) -> bool:
    stripped = line.rstrip("\r\n")
    return bool(stripped) and stripped[0] not in " \t-#"


class StackYaml:
    """按行保存的 stack.yaml，render() 逐字节还原未修改的行"""

    def __init__(self, text: str) -> None:
        self.lines: list[str] = text.splitlines(keepends=True)

    def render(self) -> str:
        return "".join(self.lines)

    def _marker_index(self) -> int | None:
        for i, line in enumerate(self.lines):
            if _MARKER_RE.match(line.rstrip("\r\n")):
                return i
        return None

    def _block(self) -> tuple[int, int] | None:
        """返回 extra-deps 块内容行的 [start, end) 区间（不含标记行、不含尾部空行）"""
        marker = self._marker_index()
        if marker is None:
            return None
        end = marker + 1
        last = marker + 1
        while end < len(self.lines) and not _is_top_level_key(self.lines[end]):
            if self.lines[end].strip():
                last = end + 1
            end += 1
        return marker + 1, last

    def _entries(self) -> list[tuple[int, str]]:
        block = self._block()
        if block is None:
            return []
        found = []
        for j in range(*block):
            m = _ENTRY_RE.match(self.lines[j].rstrip("\r\n"))
            if m:
                found.append((j, m.group("token")))
        return found

    def extra_deps(self) -> dict[PkgName, PkgVersion]:
        """解析 extra-deps 为 {name: version}，git/路径等非 name-version 项跳过"""
        result: dict[PkgName, PkgVersion] = {}
        for _, token in self._entries():
            parts = split_name_version(token) if "/" not in token else None
            if parts is None:
                logger.debug("跳过无法识别的 extra-deps 项: %s", token)
                continue
            name, version = parts
            result[name] = version
        return result

    def ensure_marker(self) -> None:
        """确保存在 extra-deps 标记行，缺失时追加到文件末尾"""
        marker = self._marker_index()
        if marker is None:
            if self.lines and not self.lines[-1].endswith("\n"):
                self.lines[-1] += "\n"
            self.lines.append(EXTRA_DEPS_MARKER)
            return
        line = self.lines[marker]
        inline = _MARKER_RE.match(line.rstrip("\r\n")).group("inline")
        inline = inline.split("#", 1)[0].strip()
        if inline == "[]":
            newline = line[len(line.rstrip("\r\n")):] or "\n"
            self.lines[marker] = "extra-deps:" + newline
        elif inline:
            raise ManifestIOError(
                f"不支持的 extra-deps 内联写法: {line.strip()}，请改为块状列表",
            )

    def append(self, name: PkgName, version: PkgVersion) -> None:
        """在 extra-deps 块末尾追加 "- name-version" 行"""
        self.ensure_marker()
        _, end = self._block()
        if end > 0 and not self.lines[end - 1].endswith("\n"):
            self.lines[end - 1] += "\n"
        self.lines.insert(end, entry_line(name, version))

    def replace(self, name: PkgName, version: PkgVersion) -> bool:
        """把已有条目改为新版本（保留缩进和换行），不存在返回 False"""
        for j, token in self._entries():
            parts = split_name_version(token)
            if parts and parts[0] == name:
                old = f"{name}-{parts[1]}"
                self.lines[j] = self.lines[j].replace(old, f"{name}-{version}", 1)
                return True
        return False

    def remove(self, name: PkgName, version: PkgVersion) -> bool:
        """删除精确为 "name-version" 的条目行，返回是否有删除"""
        target = f"{name}-{version}"
        drop = {j for j, token in self._entries() if token == target}
        if not drop:
            return False
        self.lines = [line for j, line in enumerate(self.lines) if j not in drop]
        return True
