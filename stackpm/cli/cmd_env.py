"""CLI — 环境相关命令（安装、锁定、推断、包目录）"""

from __future__ import annotations

import click

from stackpm.cli import _backend, _unwrap


def register(group: click.Group) -> None:
    group.add_command(install)
    group.add_command(lock)
    group.add_command(guess)
    group.add_command(package_dir)


@click.command()
def install() -> None:
    """执行 stack build --dependencies-only 安装依赖"""
    _unwrap(_backend().install())
    click.echo("依赖已安装。")


@click.command()
def lock() -> None:
    """锁定版本（Stack 下版本已由 resolver 精确锁定，无需操作）"""
    _unwrap(_backend().lock())


@click.command()
def guess() -> None:
    """从源码推断依赖（本后端不支持）"""
    guessed = _unwrap(_backend().guess())
    for name in guessed:
        click.echo(f"  {name}")


@click.command(name="package-dir")
def package_dir() -> None:
    """输出项目内的包目录"""
    click.echo(_backend().get_package_dir())
