"""清单文件读写抽象

ManifestStore 不直接假设当前工作目录，而是通过 ManifestIO 读写:
  - FileManifestIO: 以项目目录为根的真实文件，原子写入
  - MemoryManifestIO: 纯内存实现，供测试和 dry-run 使用

内容一律按原样读写（保留 \\r\\n 等换行），保证未修改的行逐字节不变。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from stackpm.core.exceptions import ManifestIOError
from stackpm.utils.yaml_io import atomic_write

logger = logging.getLogger(__name__)


class ManifestIO(Protocol):
    """清单读写协议，name 为相对项目根的文件名"""

    def exists(self, name: str) -> bool:
        ...

    def read(self, name: str) -> str:
        """读取全文，任何失败（包括文件不存在）抛 ManifestIOError"""
        ...

    def write(self, name: str, content: str) -> None:
        """整体覆盖写入，失败抛 ManifestIOError"""
        ...


class FileManifestIO:
    """基于文件系统的实现"""

    def __init__(self, root: str | Path = ".") -> None:
        self.root = Path(root)

    def path(self, name: str) -> Path:
        return self.root / name

    def exists(self, name: str) -> bool:
        return self.path(name).exists()

    def read(self, name: str) -> str:
        p = self.path(name)
        try:
            with open(p, encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestIOError(f"读取清单失败: {p} - {e}") from e

    def write(self, name: str, content: str) -> None:
        p = self.path(name)
        try:
            atomic_write(p, content)
        except OSError as e:
            raise ManifestIOError(f"写入清单失败: {p} - {e}") from e
        logger.debug("已写入清单: %s (%d 字节)", p, len(content))


class MemoryManifestIO:
    """内存实现，files 可直接预置或断言"""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files: dict[str, str] = dict(files or {})

    def exists(self, name: str) -> bool:
        return name in self.files

    def read(self, name: str) -> str:
        if name not in self.files:
            raise ManifestIOError(f"读取清单失败: {name} 不存在")
        return self.files[name]

    def write(self, name: str, content: str) -> None:
        self.files[name] = content
