"""清单存储模块

拆分说明:
- io.py: 读写抽象（文件 / 内存）
- cabal.py: project.cabal 行级模型
- stack_yaml.py: stack.yaml 行级模型
- store.py: 两份清单的协同读写
"""

from stackpm.core.manifest.cabal import CabalFile
from stackpm.core.manifest.io import FileManifestIO, ManifestIO, MemoryManifestIO
from stackpm.core.manifest.stack_yaml import StackYaml, split_name_version
from stackpm.core.manifest.store import ManifestStore

__all__ = [
    "CabalFile",
    "FileManifestIO",
    "ManifestIO",
    "ManifestStore",
    "MemoryManifestIO",
    "StackYaml",
    "split_name_version",
]
