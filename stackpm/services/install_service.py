"""安装服务 — 委托 stack 物化依赖环境

只执行 `stack build --dependencies-only`，输出写入日志，不做解析。
"""

from __future__ import annotations

import logging

from stackpm.core.exceptions import ExecutionError
from stackpm.utils.shell import CommandExecutor, CommandResult, get_executor

logger = logging.getLogger(__name__)


class InstallService:
    def __init__(
        self,
        project_dir: str = ".",
        *,
        cmd: list[str] | None = None,
        timeout: float | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.project_dir = project_dir
        self.cmd = list(cmd or ["stack", "build", "--dependencies-only"])
        self.timeout = timeout
        self._executor = executor

    @property
    def executor(self) -> CommandExecutor:
        return self._executor or get_executor()

    def install(self) -> CommandResult:
        logger.info("安装依赖: %s (cwd=%s)", " ".join(self.cmd), self.project_dir)
        try:
            r = self.executor.execute(self.cmd, cwd=self.project_dir, timeout=self.timeout)
        except OSError as e:
            raise ExecutionError(f"无法执行 {self.cmd[0]}: {e}") from e
        if r.stdout:
            logger.debug(r.stdout)
        if not r.success:
            raise ExecutionError(f"安装失败 (rc={r.returncode}):\n{r.output_tail()}")
        return r
