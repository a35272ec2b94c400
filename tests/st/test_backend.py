"""StackBackend 端到端测试 — 真实文件 (tmp_path) + 假网络 + 假执行器"""

from __future__ import annotations

from pathlib import Path

import pytest

import stackpm.utils.net as net
import stackpm.utils.shell as shell
from stackpm.backend import QUIRK_ADD_REMOVE_ALSO_LOCKS, StackBackend
from stackpm.core.config import Config
from stackpm.core.models import PkgInfo
from stackpm.core.protocols import LanguageBackend
from stackpm.core.result_models import OpFailure, OpSuccess
from stackpm.services.container import ServiceContainer
from stackpm.utils.shell import CommandResult


class FakeExecutor:
    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self.calls: list[tuple[list[str], str]] = []

    def execute(self, cmd, *, cwd=".", env=None, timeout=None) -> CommandResult:
        self.calls.append((cmd, cwd))
        return CommandResult(self.returncode, "", "build failed" if self.returncode else "")


@pytest.fixture()
def executor(monkeypatch: pytest.MonkeyPatch) -> FakeExecutor:
    ex = FakeExecutor()
    monkeypatch.setattr(shell, "_default_executor", ex)
    return ex


@pytest.fixture()
def backend(tmp_path: Path, fetcher, executor, monkeypatch: pytest.MonkeyPatch) -> StackBackend:
    monkeypatch.setattr(net, "_default_fetcher", fetcher)
    return ServiceContainer(config=Config(project_dir=str(tmp_path), max_workers=4)).backend


def _value(result):
    assert isinstance(result, OpSuccess), result
    return result.value


class TestSurface:
    def test_implements_protocol(self, backend: StackBackend) -> None:
        assert isinstance(backend, LanguageBackend)

    def test_constants(self, backend: StackBackend) -> None:
        assert backend.name == "haskell-stack"
        assert backend.specfile == "project.cabal"
        assert backend.lockfile == "stack.yaml"
        assert backend.filename_patterns == ["*.hs"]
        assert QUIRK_ADD_REMOVE_ALSO_LOCKS in backend.quirks
        assert backend.get_package_dir() == ".stack-work"

    def test_lock_is_noop(self, backend: StackBackend, tmp_path: Path) -> None:
        result = backend.lock()
        assert result.ok and result.value is None
        assert list(tmp_path.iterdir()) == []

    def test_guess_not_supported(self, backend: StackBackend) -> None:
        result = backend.guess()
        assert isinstance(result, OpFailure)
        assert result.kind == "NOT_SUPPORTED"


class TestMetadata:
    def test_info_exact_name(self, backend: StackBackend) -> None:
        pkg = _value(backend.info("aeson"))
        assert isinstance(pkg, PkgInfo)
        assert pkg.name == "aeson"
        assert pkg.version == "2.0.3.0"
        assert pkg.description == "Fast JSON parsing and encodingA JSON library."
        assert pkg.homepage_url == "https://hackage.haskell.org/package/aeson"
        assert pkg.source_code_url == "https://github.com/example/aeson"
        assert pkg.bug_tracker_url == "https://github.com/example/aeson/issues"
        assert pkg.author == "Jane Doe <jane@example.com>"
        assert pkg.license == "BSD3"

    def test_info_unknown(self, backend: StackBackend) -> None:
        result = backend.info("nonexist")
        assert isinstance(result, OpFailure)
        assert result.kind == "NOT_FOUND"
        assert "nonexist" in result.message

    def test_search_keeps_upstream_order(self, backend: StackBackend, fetcher) -> None:
        fetcher.add_hit("json", "aeson")
        fetcher.add_hit("json", "text-show")
        names = [p.name for p in _value(backend.search("json"))]
        assert names == ["aeson", "text-show"]

    def test_search_no_results(self, backend: StackBackend) -> None:
        assert _value(backend.search("zzz")) == []

    def test_search_network_failure(self, backend: StackBackend, fetcher) -> None:
        fetcher.add_hit("json", "aeson")
        fetcher.add_hit("json", "missing-cabal")
        result = backend.search("json")
        assert isinstance(result, OpFailure)
        assert result.kind == "NETWORK_ERROR"


class TestManifests:
    def test_add_in_empty_dir_creates_scaffolds(self, backend: StackBackend, tmp_path: Path) -> None:
        _value(backend.add({"aeson": ""}))
        cabal = (tmp_path / "project.cabal").read_text()
        stack = (tmp_path / "stack.yaml").read_text()
        assert cabal.startswith("name:                project\n")
        assert cabal.endswith("    base >= 4.7 && < 5\n    , aeson\n")
        assert stack == "resolver: lts-16.10\nsystem-ghc: true\n"
        assert _value(backend.list_specfile()) == {"aeson": ""}

    def test_add_not_curated_with_version(self, backend: StackBackend, tmp_path: Path) -> None:
        _value(backend.add({"acme-missiles": "1.2.3"}))
        assert _value(backend.list_lockfile()) == {"acme-missiles": "1.2.3"}
        stack = (tmp_path / "stack.yaml").read_text()
        assert stack.endswith("extra-deps:\n- acme-missiles-1.2.3\n")

    def test_hyphenated_name_round_trip(self, backend: StackBackend) -> None:
        _value(backend.add({"text-show": ""}))
        assert _value(backend.list_lockfile()) == {"text-show": "3.9.2"}

    def test_add_then_remove(self, backend: StackBackend) -> None:
        _value(backend.add({"foo": "", "bar": ""}))
        assert _value(backend.remove({"foo"})) == {"foo"}
        assert _value(backend.list_specfile()) == {"bar": ""}

    def test_remove_undoes_add(self, backend: StackBackend, tmp_path: Path) -> None:
        _value(backend.add({"aeson": ""}))
        spec_before = (tmp_path / "project.cabal").read_bytes()
        lock_before = (tmp_path / "stack.yaml").read_bytes()
        _value(backend.add({"acme-missiles": ""}))
        _value(backend.remove({"acme-missiles"}))
        assert (tmp_path / "project.cabal").read_bytes() == spec_before
        assert (tmp_path / "stack.yaml").read_bytes() == lock_before + b"extra-deps:\n"

    def test_add_unknown_package_fails(self, backend: StackBackend) -> None:
        result = backend.add({"nonexist": ""})
        assert isinstance(result, OpFailure)
        assert result.kind == "NOT_FOUND"
        assert _value(backend.list_specfile()) == {}

    def test_list_without_manifests(self, backend: StackBackend) -> None:
        assert _value(backend.list_specfile()) == {}
        assert _value(backend.list_lockfile()) == {}

    def test_preserves_crlf_and_comments(self, backend: StackBackend, tmp_path: Path) -> None:
        (tmp_path / "project.cabal").write_bytes(
            b"name: demo\r\n\r\nlibrary\r\n  -- deps\r\n  build-depends:\r\n    base\r\n    , bar\r\n",
        )
        (tmp_path / "stack.yaml").write_bytes(b"# pinned\r\nresolver: lts-22.7\r\n")
        _value(backend.add({"foo": ""}))
        _value(backend.remove({"bar"}))
        assert (tmp_path / "project.cabal").read_bytes() == (
            b"name: demo\r\n\r\nlibrary\r\n  -- deps\r\n  build-depends:\r\n    base\r\n    , foo\n"
        )
        assert (tmp_path / "stack.yaml").read_bytes() == b"# pinned\r\nresolver: lts-22.7\r\n"


class TestInstall:
    def test_install_runs_stack(self, backend: StackBackend, executor: FakeExecutor, tmp_path: Path) -> None:
        assert _value(backend.install()) == 0
        assert executor.calls == [(["stack", "build", "--dependencies-only"], str(tmp_path))]

    def test_install_failure(self, backend: StackBackend, executor: FakeExecutor) -> None:
        executor.returncode = 1
        result = backend.install()
        assert isinstance(result, OpFailure)
        assert result.kind == "EXECUTION_ERROR"
