"""核心数据模型

代码仓 / 版本 / 库描述，以及构建选项与产物报告，集中定义供各服务导入。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from prebuilts.core.platforms import Platform

# =========================================================================
# 代码仓描述
# =========================================================================


@dataclass
class LibrarySpec:
    """一个预编译静态库: 由若干 target/product 组成，可导出 C 模块头文件"""

    name: str
    products: list[str] = field(default_factory=list)
    c_modules: list[str] = field(default_factory=list)

    @property
    def static_lib_name(self) -> str:
        return f"lib{self.name}.a"


@dataclass
class PackageSpec:
    """代码仓内需要构建的库集合"""

    libraries: list[LibrarySpec] = field(default_factory=list)


@dataclass
class VersionSpec:
    """代码仓的一个可构建 tag"""

    tag: str
    # C 模块名 → 源码相对路径片段，覆盖默认的 Sources/<模块名>
    c_module_paths: dict[str, list[str]] = field(default_factory=dict)

    def c_module_dir(self, module: str) -> list[str]:
        return list(self.c_module_paths.get(module, ["Sources", module]))


@dataclass
class RepoSpec:
    """上游源码仓库，以 url 为唯一标识"""

    url: str
    package: PackageSpec = field(default_factory=PackageSpec)
    versions: list[VersionSpec] = field(default_factory=list)

    @property
    def name(self) -> str:
        """URL 最后一段，用作 checkout 目录和产物目录名"""
        return self.url.rstrip("/").rsplit("/", 1)[-1]


# =========================================================================
# 构建选项 / 结果
# =========================================================================


@dataclass
class BuildOptions:
    """一次流水线运行的选项"""

    stage_dir: Path
    swift_version: str
    docker: bool = False
    docker_only: bool = False
    docker_command: str = "docker"
    docker_image_root: str = "swiftlang/swift:nightly-6.1-"
    quiet: bool = False

    @property
    def use_containers(self) -> bool:
        return self.docker or self.docker_only


@dataclass
class ArchiveArtifact:
    """单个 (库 × 平台 × 版本) 的归档产物"""

    repo: str
    tag: str
    library: str
    platform: Platform
    path: Path
    checksum: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "repo": self.repo,
            "tag": self.tag,
            "library": self.library,
            "platform": str(self.platform),
            "file": self.path.name,
            "path": str(self.path),
            "checksum": self.checksum,
        }


@dataclass
class BuildReport:
    """流水线运行报告"""

    stage_dir: Path
    swift_version: str
    artifacts: list[ArchiveArtifact] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage_dir": str(self.stage_dir),
            "swift_version": self.swift_version,
            "artifacts": [a.to_dict() for a in self.artifacts],
        }
