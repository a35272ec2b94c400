"""外部命令执行 — stack 等工具链进程的统一入口

通过 CommandExecutor 协议抽象子进程执行，InstallService 只依赖协议，
测试时注入假执行器即可，不会真正调用 stack。
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Protocol

from stackpm.core.exceptions import ExecutionError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """一次进程执行的结果，输出按文本保存，不做解析"""

    returncode: int
    stdout: str
    stderr: str
    cmd: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def output_tail(self, lines: int = 20) -> str:
        """取 stderr（为空时取 stdout）的最后若干行

        stack 的报错摘要出现在输出末尾，前面多是下载与编译进度。
        """
        text = self.stderr.strip() or self.stdout.strip()
        return "\n".join(text.splitlines()[-lines:])


class CommandExecutor(Protocol):
    """命令执行器协议

    env 只包含需要覆盖的变量，由实现负责与当前进程环境合并。
    进程无法启动时抛 OSError，超时抛 ExecutionError。
    """

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        ...


class LocalExecutor:
    """本地子进程执行器（默认实现）"""

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        logger.debug("执行: %s (cwd=%s)", " ".join(cmd), cwd)
        full_env = {**os.environ, **env} if env else None
        try:
            r = subprocess.run(
                cmd, capture_output=True, text=True,
                cwd=cwd, env=full_env, check=False, timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ExecutionError(f"命令超时 ({timeout}s): {' '.join(cmd)}") from e
        logger.debug("退出码: %d", r.returncode)
        return CommandResult(r.returncode, r.stdout, r.stderr, cmd=list(cmd))


_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    return _default_executor


def set_executor(executor: CommandExecutor) -> None:
    """替换全局默认执行器（测试用）"""
    global _default_executor  # noqa: PLW0603
    _default_executor = executor
