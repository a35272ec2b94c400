"""stackpm 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

import sys

import click

from stackpm import __version__
from stackpm.core.config import init_config
from stackpm.core.exceptions import StackPMError
from stackpm.core.protocols import LanguageBackend
from stackpm.core.result_models import OpFailure, OpResult
from stackpm.services.container import get_container, reset_container
from stackpm.utils.logger import setup_logging_from_env


def _backend() -> LanguageBackend:
    """获取全局服务容器中后端的快捷方式"""
    return get_container().backend


def _unwrap(result: OpResult):
    """成功返回 value；失败输出到 stderr 并以状态码 1 退出"""
    if isinstance(result, OpFailure):
        click.echo(f"错误 [{result.kind}]: {result.message}", err=True)
        sys.exit(1)
    return result.value


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default="stackpm.yml", help="配置文件路径")
@click.option("--project-dir", "-C", default=None, help="项目目录（覆盖配置）")
def main(config_path: str, project_dir: str | None) -> None:
    """stackpm - Haskell Stack 包管理后端"""
    setup_logging_from_env()
    try:
        cfg = init_config(config_path)
    except (StackPMError, ValueError, OSError) as e:
        click.echo(f"错误 [CONFIG_ERROR]: {e}", err=True)
        sys.exit(1)
    if project_dir:
        cfg.project_dir = project_dir
    reset_container()


# 注册各领域子命令
from stackpm.cli.cmd_pkg import register as _reg_pkg  # noqa: E402
from stackpm.cli.cmd_env import register as _reg_env  # noqa: E402

_reg_pkg(main)
_reg_env(main)
