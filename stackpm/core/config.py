"""后端配置

默认值即 Stack 后端的约定（清单文件名、精选集版本、Hoogle 地址等），
可由项目内的 stackpm.yml 覆盖:

    curated_resolver: lts-22.7
    max_workers: 4
    install_cmd: [stack, --no-nix, build, --dependencies-only]

未识别的键放入 extra，不报错。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields

import yaml

from stackpm.core.exceptions import ConfigError
from stackpm.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "stackpm.yml"


@dataclass
class Config:
    # 项目目录与清单文件
    project_dir: str = "."
    specfile: str = "project.cabal"
    lockfile: str = "stack.yaml"
    package_dir: str = ".stack-work"

    # 元数据解析
    search_url: str = "https://hoogle.haskell.org/"
    package_prefix: str = "package "
    max_workers: int = 8
    http_timeout: int = 60

    # 精选集 (Stackage)
    curated_resolver: str = "lts-16.10"
    system_ghc: bool = True
    not_curated_marker: str = "Not on Stackage"

    # 安装
    install_cmd: list[str] = field(
        default_factory=lambda: ["stack", "build", "--dependencies-only"],
    )
    install_timeout: int = 0  # 秒，0 表示不限时

    extra: dict = field(default_factory=dict)

    def validate(self) -> None:
        """检查取值范围，不合法抛 ConfigError"""
        problems = []
        if not isinstance(self.max_workers, int) or self.max_workers < 1:
            problems.append(f"max_workers 必须 >= 1: {self.max_workers!r}")
        if not isinstance(self.http_timeout, (int, float)) or self.http_timeout <= 0:
            problems.append(f"http_timeout 必须 > 0: {self.http_timeout!r}")
        if not isinstance(self.install_timeout, (int, float)) or self.install_timeout < 0:
            problems.append(f"install_timeout 不能为负: {self.install_timeout!r}")
        cmd = self.install_cmd
        if not isinstance(cmd, list) or not cmd or not all(isinstance(a, str) for a in cmd):
            problems.append(f"install_cmd 必须是非空字符串列表: {self.install_cmd!r}")
        if not self.curated_resolver:
            problems.append("curated_resolver 不能为空")
        if problems:
            raise ConfigError("; ".join(problems))

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """读取 YAML 配置，文件不存在时全部取默认值"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, ValueError) as e:
            raise ConfigError(f"配置文件无法解析: {path} - {e}") from e

        names = {f.name for f in fields(cls)} - {"extra"}
        known = {k: v for k, v in data.items() if k in names}
        unknown = {k: v for k, v in data.items() if k not in names}
        if unknown:
            logger.debug("未识别的配置项: %s", ", ".join(map(str, unknown)))
        cfg = cls(**known, extra=unknown)
        try:
            cfg.validate()
        except ConfigError as e:
            raise ConfigError(f"配置文件无效: {path} - {e}") from e
        return cfg

    def to_dict(self) -> dict:
        return asdict(self)


# 进程级当前配置，由 CLI 入口 init_config() 设置
_current: Config | None = None


def get_config() -> Config:
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_FILE) -> Config:
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("已加载配置: %s (project_dir=%s)", path, _current.project_dir)
    return _current
