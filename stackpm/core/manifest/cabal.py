"""project.cabal 的行级模型

不做完整的 Cabal 语法解析，只识别 build-depends 字段块:

    executable main
      ...
      build-depends:
        base >= 4.7 && < 5
        , aeson
        , text

字段块 = "build-depends:" 所在行 + 其后缩进更深的连续非空行。
块内以逗号开头的行视为本后端管理的依赖行，逗号后第一个词为包名。
其余行原样保留。
"""

from __future__ import annotations

import re

from stackpm.core.models import PkgName

DEP_PREFIX = "    , "

_FIELD_RE = re.compile(r"^(?P<indent>[ \t]*)build-depends\s*:", re.IGNORECASE)
_DEP_RE = re.compile(r"^[ \t]+,\s*(?P<name>[^\s,]+)")

SCAFFOLD_TEMPLATE = """\
name:                {name}
version:             0.0.0
build-type:          Simple
cabal-version:       >=1.10

executable main
  hs-source-dirs:      .
  main-is:             main.hs
  default-language:    Haskell2010
  build-depends:       
    base >= 4.7 && < 5
"""


def scaffold(project_name: str = "") -> str:
    """生成初始 project.cabal 内容"""
    return SCAFFOLD_TEMPLATE.format(name=project_name or "project")


def dependency_line(name: PkgName) -> str:
    return f"{DEP_PREFIX}{name}\n"


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


class CabalFile:
    """按行保存的 project.cabal，render() 逐字节还原未修改的行"""

    def __init__(self, text: str) -> None:
        self.lines: list[str] = text.splitlines(keepends=True)

    def render(self) -> str:
        return "".join(self.lines)

    def _blocks(self) -> list[tuple[int, int]]:
        """返回所有 build-depends 字段块的 [start, end) 行区间"""
        blocks: list[tuple[int, int]] = []
        i = 0
        while i < len(self.lines):
            m = _FIELD_RE.match(self.lines[i])
            if not m:
                i += 1
                continue
            field_indent = _indent_width(self.lines[i])
            end = i + 1
            while end < len(self.lines):
                line = self.lines[end]
                if not line.strip() or _indent_width(line) <= field_indent:
                    break
                end += 1
            blocks.append((i, end))
            i = end
        return blocks

    def _dep_indices(self) -> list[int]:
        blocks = self._blocks()
        if blocks:
            candidates = (j for start, end in blocks for j in range(start + 1, end))
        else:
            # 没有 build-depends 字段时退化为全文扫描
            candidates = iter(range(len(self.lines)))
        return [j for j in candidates if _DEP_RE.match(self.lines[j])]

    @staticmethod
    def dep_name(line: str) -> PkgName:
        m = _DEP_RE.match(line)
        return m.group("name") if m else ""

    def dependencies(self) -> list[PkgName]:
        """按文件顺序列出依赖名（不含首项 base 等非逗号行）"""
        return [self.dep_name(self.lines[j]) for j in self._dep_indices()]

    def append(self, name: PkgName) -> None:
        """在最后一个 build-depends 块末尾追加依赖行，无此字段时追加到文件末尾"""
        blocks = self._blocks()
        pos = blocks[-1][1] if blocks else len(self.lines)
        if pos > 0 and not self.lines[pos - 1].endswith("\n"):
            self.lines[pos - 1] += "\n"
        self.lines.insert(pos, dependency_line(name))

    def remove(self, name: PkgName) -> bool:
        """删除包名匹配的所有依赖行，返回是否有删除"""
        drop = {j for j in self._dep_indices() if self.dep_name(self.lines[j]) == name}
        if not drop:
            return False
        self.lines = [line for j, line in enumerate(self.lines) if j not in drop]
        return True
