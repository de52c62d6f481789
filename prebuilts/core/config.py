"""集中配置管理

支持从 YAML 文件加载 + 编程式覆盖（CLI 选项优先于配置文件）。
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from prebuilts.core.exceptions import ConfigError
from prebuilts.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "configs/default.yml"
DEFAULT_REPOS_FILE = "configs/repos.yml"

_SWIFT_VERSION_RE = re.compile(r"^\d+\.\d+$")


def check_swift_version(value: str) -> str:
    """校验工具链版本为 major.minor 形式，空串表示自动检测"""
    if value and not _SWIFT_VERSION_RE.match(value):
        raise ConfigError(f"swift_version 必须形如 major.minor: {value!r}")
    return value


@dataclass
class Config:
    """全局配置"""

    # 目录
    stage_dir: str = "stage"
    repos_file: str = DEFAULT_REPOS_FILE

    # 容器构建
    docker: bool = False
    docker_only: bool = False
    docker_command: str = "docker"
    docker_image_root: str = "swiftlang/swift:nightly-6.1-"

    # 工具链 major.minor，留空则通过 swift --version 检测
    swift_version: str = ""

    # 主机 OS 覆盖（macos / linux / windows），留空自动检测
    host_os: str = ""

    # 丢弃子进程输出
    quiet: bool = False

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        for flag in ("docker", "docker_only", "quiet"):
            if flag in matched and not isinstance(matched[flag], bool):
                raise ConfigError(f"配置项 {flag} 必须为布尔值: {path}")
        # YAML 会把 6.10 解析成浮点数 6.1，必须加引号
        if "swift_version" in matched:
            version = matched["swift_version"]
            if version is None:
                version = ""
            if not isinstance(version, str):
                raise ConfigError(f"配置项 swift_version 必须是字符串（请加引号）: {path}")
            matched["swift_version"] = check_swift_version(version)
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def repos_path(self, override: str | None = None) -> tuple[str, bool]:
        """返回 (清单路径, 是否必须存在)

        只有未显式指定 (默认路径) 时才允许回退到内置清单。
        """
        if override:
            return override, True
        return self.repos_file, self.repos_file != DEFAULT_REPOS_FILE

    def to_dict(self) -> dict:
        from dataclasses import asdict
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_FILE) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
