"""SwiftPM 构建工具调用

- 在 checkout 的 Package.swift 中追加静态库 product
- 为目标架构构建该 product（release、无调试信息），可选在容器内执行
- 定位构建产物: 静态库与 Modules 目录
"""

from __future__ import annotations

import logging
from pathlib import Path

from prebuilts.core.host import HostPlatform
from prebuilts.core.models import BuildOptions, LibrarySpec
from prebuilts.core.platforms import Platform, docker_platform
from prebuilts.services.staging import SCRATCH_DIR
from prebuilts.utils.shell import CommandExecutor, run_cmd

logger = logging.getLogger(__name__)

BUILD_CONFIGURATION = "release"


class SwiftPackageBuilder:
    """swift package / swift build 命令封装"""

    def __init__(
        self,
        options: BuildOptions,
        host: HostPlatform,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.options = options
        self.host = host
        self.executor = executor

    # ---- 产物路径 ----

    @staticmethod
    def build_dir(repo_dir: Path) -> Path:
        return repo_dir / SCRATCH_DIR / BUILD_CONFIGURATION

    def library_file(self, repo_dir: Path, library: LibrarySpec) -> Path:
        return self.build_dir(repo_dir) / library.static_lib_name

    def modules_dir(self, repo_dir: Path) -> Path:
        return self.build_dir(repo_dir) / "Modules"

    # ---- 命令 ----

    def add_product_command(self, library: LibrarySpec) -> str:
        q = self.host.quote
        targets = " ".join(q(p) for p in library.products)
        return (
            f"swift package add-product {q(library.name)} "
            f"--type static-library --targets {targets}"
        )

    def container_prefix(self, repo_dir: Path, platform: Platform) -> str:
        """容器包装前缀；平台不支持容器或未启用容器时返回空串"""
        tag = platform.docker_tag
        if not self.options.use_containers or tag is None:
            return ""
        q = self.host.quote
        mount = q(str(repo_dir))
        image = q(f"{self.options.docker_image_root}{tag}")
        return (
            f"{self.options.docker_command} run --rm "
            f"--platform {docker_platform(platform.arch)} "
            f"-v {mount}:{mount} -w {mount} {image} "
        )

    def build_command(self, repo_dir: Path, library: LibrarySpec, platform: Platform) -> str:
        return (
            self.container_prefix(repo_dir, platform)
            + f"swift build -c {BUILD_CONFIGURATION} -debug-info-format none "
            f"--arch {platform.arch} --product {self.host.quote(library.name)}"
        )

    # ---- 执行 ----

    def add_static_product(self, repo_dir: Path, library: LibrarySpec) -> None:
        """在 Package.swift 中声明静态库 product"""
        run_cmd(
            self.add_product_command(library), cwd=repo_dir,
            host=self.host, executor=self.executor, quiet=self.options.quiet,
        )
        logger.info("已声明静态库 product: %s (%d 个 target)", library.name, len(library.products))

    def build(self, repo_dir: Path, library: LibrarySpec, platform: Platform) -> None:
        run_cmd(
            self.build_command(repo_dir, library, platform), cwd=repo_dir,
            host=self.host, executor=self.executor, quiet=self.options.quiet,
        )
        logger.info("构建完成: %s [%s]", library.name, platform)
