"""CLI — 包检索与清单管理命令"""

from __future__ import annotations

import json

import click

from stackpm.cli import _backend, _unwrap
from stackpm.core.exceptions import ValidationError


def register(group: click.Group) -> None:
    group.add_command(search)
    group.add_command(info)
    group.add_command(add)
    group.add_command(remove)
    group.add_command(list_deps)


def _parse_pkg_args(pkgs: tuple[str, ...]) -> dict[str, str]:
    """解析 name 或 name@version 参数"""
    result: dict[str, str] = {}
    for p in pkgs:
        name, _, version = p.partition("@")
        name = name.strip()
        if not name:
            raise ValidationError(f"包名不能为空: '{p}'")
        result[name] = version.strip()
    return result


@click.command()
@click.argument("query")
@click.option("--json", "as_json", is_flag=True, help="以 JSON 输出")
def search(query: str, as_json: bool) -> None:
    """检索包（按相关度排序）"""
    results = _unwrap(_backend().search(query))
    if as_json:
        click.echo(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2))
        return
    if not results:
        click.echo("没有匹配的包。")
        return
    for r in results:
        click.echo(f"  {r.name:24s} {r.version:10s} {r.description[:80]}")


@click.command()
@click.argument("name")
@click.option("--json", "as_json", is_flag=True, help="以 JSON 输出")
def info(name: str, as_json: bool) -> None:
    """查看单个包的元信息"""
    pkg = _unwrap(_backend().info(name))
    data = pkg.to_dict()
    if as_json:
        click.echo(json.dumps(data, ensure_ascii=False, indent=2))
        return
    for key, value in data.items():
        if value:
            click.echo(f"{key:16s} {value}")


@click.command()
@click.argument("pkgs", nargs=-1, required=True)
@click.option("--project-name", default="", help="新建 project.cabal 时使用的项目名")
def add(pkgs: tuple[str, ...], project_name: str) -> None:
    """添加依赖，格式 name 或 name@version（版本仅对精选集之外的包生效）"""
    try:
        requested = _parse_pkg_args(pkgs)
    except ValidationError as e:
        raise click.BadParameter(str(e)) from e
    added = _unwrap(_backend().add(requested, project_name))
    for a in added:
        where = "stackage" if a.curated else f"extra-dep {a.version}"
        click.echo(f"已添加: {a.name} ({where})")


@click.command()
@click.argument("names", nargs=-1, required=True)
def remove(names: tuple[str, ...]) -> None:
    """删除依赖（不在清单中的包名忽略）"""
    removed = _unwrap(_backend().remove(set(names)))
    for name in sorted(removed):
        click.echo(f"已删除: {name}")


@click.command(name="list")
@click.option("--lock", is_flag=True, help="列出 stack.yaml 中锁定的 extra-deps")
def list_deps(lock: bool) -> None:
    """列出直接依赖或锁定版本"""
    backend = _backend()
    if lock:
        pinned = _unwrap(backend.list_lockfile())
        for name, version in pinned.items():
            click.echo(f"  {name} {version}")
        return
    for name in _unwrap(backend.list_specfile()):
        click.echo(f"  {name}")
