"""文件读写工具

- load_yaml:    读取 stackpm.yml 之类的配置文件（PyYAML safe_load）
- atomic_write: 清单文件的整体替换写入，进程中途退出也不会留下半个文件
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

MAX_YAML_SIZE = 1024 * 1024

# mkstemp 创建的文件是 0600，新建清单改用常规权限
NEW_FILE_MODE = 0o644


def atomic_write(path: Path, content: str) -> None:
    """同目录临时文件 + os.replace

    内容按原样写入（newline=""），已有文件的权限位保持不变。
    失败时删除临时文件并重新抛出 OSError。
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        mode = stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        mode = NEW_FILE_MODE
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


def load_yaml(path: str | Path) -> dict[str, Any]:
    """读取 YAML 映射

    文件不存在或为空返回 {}；顶层不是映射时告警并返回 {}。
    超过 MAX_YAML_SIZE 抛 ValueError，语法错误抛 yaml.YAMLError。
    """
    p = Path(path)
    if not p.exists():
        logger.debug("配置文件不存在，使用默认值: %s", p)
        return {}
    size = p.stat().st_size
    if size > MAX_YAML_SIZE:
        raise ValueError(f"YAML 文件过大: {p} ({size} 字节 > {MAX_YAML_SIZE})")

    with open(p, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("%s 顶层不是映射 (%s)，已忽略", p, type(data).__name__)
        return {}
    return data
