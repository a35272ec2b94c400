"""CLI 端到端测试 — click CliRunner"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

import stackpm.core.config as cfgmod
import stackpm.utils.net as net
import stackpm.utils.shell as shell
from stackpm import __version__
from stackpm.cli import main
from stackpm.services.container import reset_container
from stackpm.utils.logger import reset_logging
from stackpm.utils.shell import CommandResult


class OkExecutor:
    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    def execute(self, cmd, *, cwd=".", env=None, timeout=None) -> CommandResult:
        self.calls.append(cmd)
        return CommandResult(0, "", "")


@pytest.fixture()
def cli(tmp_path: Path, fetcher, monkeypatch: pytest.MonkeyPatch):
    """返回在 tmp_path 项目中执行命令的函数"""
    monkeypatch.setattr(cfgmod, "_current", None)
    monkeypatch.setattr(net, "_default_fetcher", fetcher)
    monkeypatch.setattr(shell, "_default_executor", OkExecutor())
    monkeypatch.delenv("STACKPM_LOG_LEVEL", raising=False)
    monkeypatch.delenv("STACKPM_LOG_JSON", raising=False)
    reset_container()
    runner = CliRunner()
    config = str(tmp_path / "stackpm.yml")

    def invoke(*args: str):
        return runner.invoke(main, ["-c", config, "-C", str(tmp_path), *args])

    yield invoke
    reset_container()
    reset_logging()


class TestPackageCommands:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_add_and_list(self, cli, tmp_path: Path) -> None:
        result = cli("add", "aeson", "acme-missiles@1.2.3")
        assert result.exit_code == 0, result.output
        assert "已添加: aeson (stackage)" in result.output
        assert "已添加: acme-missiles (extra-dep 1.2.3)" in result.output
        assert (tmp_path / "project.cabal").exists()

        result = cli("list")
        assert result.output.splitlines() == ["  aeson", "  acme-missiles"]
        result = cli("list", "--lock")
        assert result.output.splitlines() == ["  acme-missiles 1.2.3"]

    def test_project_name(self, cli, tmp_path: Path) -> None:
        cli("add", "aeson", "--project-name", "demo")
        assert (tmp_path / "project.cabal").read_text().startswith("name:                demo\n")

    def test_add_empty_name_rejected(self, cli) -> None:
        result = cli("add", "@1.0")
        assert result.exit_code == 2
        assert "包名不能为空" in result.output

    def test_add_unknown_package(self, cli) -> None:
        result = cli("add", "nonexist")
        assert result.exit_code == 1
        assert "错误 [NOT_FOUND]" in result.output

    def test_remove(self, cli) -> None:
        cli("add", "foo", "bar")
        result = cli("remove", "foo", "nonexist")
        assert result.exit_code == 0
        assert result.output.splitlines() == ["已删除: foo"]
        assert cli("list").output.splitlines() == ["  bar"]

    def test_search_json(self, cli, fetcher) -> None:
        fetcher.add_hit("json", "aeson")
        result = cli("search", "json", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [d["name"] for d in data] == ["aeson"]
        assert data[0]["version"] == "2.0.3.0"

    def test_search_empty(self, cli) -> None:
        result = cli("search", "zzz")
        assert "没有匹配的包" in result.output

    def test_info(self, cli) -> None:
        result = cli("info", "text-show", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output)["license"] == "BSD3"


class TestEnvCommands:
    def test_install(self, cli) -> None:
        result = cli("install")
        assert result.exit_code == 0
        assert "依赖已安装" in result.output
        assert shell.get_executor().calls == [["stack", "build", "--dependencies-only"]]

    def test_lock(self, cli) -> None:
        result = cli("lock")
        assert result.exit_code == 0
        assert result.output == ""

    def test_guess_unsupported(self, cli) -> None:
        result = cli("guess")
        assert result.exit_code == 1
        assert "错误 [NOT_SUPPORTED]" in result.output

    def test_package_dir(self, cli) -> None:
        assert cli("package-dir").output.strip() == ".stack-work"


class TestConfigFile:
    def test_resolver_from_config(self, cli, tmp_path: Path) -> None:
        (tmp_path / "stackpm.yml").write_text("curated_resolver: lts-22.7\nsystem_ghc: false\n")
        assert cli("add", "aeson").exit_code == 0
        assert (tmp_path / "stack.yaml").read_text() == "resolver: lts-22.7\nsystem-ghc: false\n"

    def test_invalid_config(self, cli, tmp_path: Path) -> None:
        (tmp_path / "stackpm.yml").write_text("max_workers: 0\n")
        result = cli("list")
        assert result.exit_code == 1
        assert "CONFIG_ERROR" in result.output
