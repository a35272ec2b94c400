"""统一异常体系

所有业务异常继承 StackPMError，替代散落的 ValueError / RuntimeError。
适配层 (backend.py) 据此映射为 OpFailure，CLI 层据此输出友好提示。
"""

from __future__ import annotations


class StackPMError(Exception):
    """后端基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(StackPMError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class NetworkError(StackPMError):
    """搜索或元数据拉取失败（网络错误、HTTP 错误、响应无法解析）"""

    code = "NETWORK_ERROR"


class PackageNotFoundError(StackPMError):
    """没有与包名精确匹配的候选"""

    code = "NOT_FOUND"

    def __init__(self, name: str) -> None:
        super().__init__(f"找不到依赖包: {name}")
        self.name = name


class ManifestIOError(StackPMError):
    """清单文件 (project.cabal / stack.yaml) 读写失败"""

    code = "MANIFEST_IO_ERROR"


class ExecutionError(StackPMError):
    """外部命令执行失败"""

    code = "EXECUTION_ERROR"


class NotSupportedError(StackPMError):
    """后端不支持该操作"""

    code = "NOT_SUPPORTED"


class ValidationError(StackPMError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []
