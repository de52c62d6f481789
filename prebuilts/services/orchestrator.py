"""预编译产物流水线编排器

代码仓 → 版本 → 库 → 平台 四层串行循环:

  1. clone 到 src/<repo>
  2. 每个版本: 建输出目录 → checkout tag
  3. 每个库: add-product → 逐平台 [建收集目录 → 清构建缓存 → 构建 →
     收集产物 → 打包 → 校验和 → 删收集目录] → reset --hard
  4. 全部结束后删除 src/

任何一步失败立即上抛，不重试也不跳过。
"""

from __future__ import annotations

import logging
from pathlib import Path

from prebuilts.core.host import HostPlatform, host_platform
from prebuilts.core.models import (
    ArchiveArtifact,
    BuildOptions,
    BuildReport,
    LibrarySpec,
    RepoSpec,
    VersionSpec,
)
from prebuilts.core.platforms import Platform, all_platforms, can_build
from prebuilts.services.packaging import Packager, sha256_file
from prebuilts.services.source import GitCheckout
from prebuilts.services.staging import StagingArea
from prebuilts.services.swiftpm import SwiftPackageBuilder
from prebuilts.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class PrebuiltsBuilder:
    """构建矩阵编排器（单线程，步骤严格有序）"""

    def __init__(
        self,
        options: BuildOptions,
        *,
        executor: CommandExecutor | None = None,
        host: HostPlatform | None = None,
        platforms: list[Platform] | None = None,
    ) -> None:
        self.options = options
        self.host = host or host_platform()
        self.platforms = list(platforms) if platforms is not None else all_platforms()
        self.staging = StagingArea(options.stage_dir)
        self.git = GitCheckout(self.host, executor, quiet=options.quiet)
        self.swiftpm = SwiftPackageBuilder(options, self.host, executor)
        self.packager = Packager(self.host, executor, quiet=options.quiet)

    def can_build(self, platform: Platform) -> bool:
        return can_build(
            platform,
            host_os=self.host.os,
            docker=self.options.docker,
            docker_only=self.options.docker_only,
        )

    def run(self, repos: list[RepoSpec]) -> BuildReport:
        """执行完整流水线，返回全部产物及其校验和"""
        report = BuildReport(
            stage_dir=self.staging.root, swift_version=self.options.swift_version,
        )
        self.staging.reset()

        for repo in repos:
            self._build_repo(repo, report)

        self.staging.remove_src()
        logger.info("流水线完成: 共 %d 个产物", len(report.artifacts))
        return report

    # ---- 各层循环 ----

    def _build_repo(self, repo: RepoSpec, report: BuildReport) -> None:
        repo_dir = self.staging.repo_dir(repo.name)
        self.git.clone(repo.url, repo_dir)

        for version in repo.versions:
            version_dir = self.staging.ensure_version_dir(repo.name, version.tag)
            self.git.checkout(repo_dir, version.tag)

            for library in repo.package.libraries:
                self.swiftpm.add_static_product(repo_dir, library)
                for platform in self.platforms:
                    if not self.can_build(platform):
                        continue
                    artifact = self._build_platform(
                        repo, version, library, platform, repo_dir, version_dir,
                    )
                    report.artifacts.append(artifact)
                # 每个库的 manifest 修改相互隔离
                self.git.reset_hard(repo_dir)

    def _build_platform(
        self,
        repo: RepoSpec,
        version: VersionSpec,
        library: LibrarySpec,
        platform: Platform,
        repo_dir: Path,
        version_dir: Path,
    ) -> ArchiveArtifact:
        logger.info("开始构建: %s@%s %s [%s]", repo.name, version.tag, library.name, platform)
        self.staging.create_collection_dirs()
        self.staging.purge_scratch(repo_dir)

        self.swiftpm.build(repo_dir, library, platform)
        self._collect(repo_dir, version, library)

        archive = self.packager.package(
            self.staging.root, version_dir, self.options.swift_version, library, platform,
        )
        checksum = sha256_file(archive)
        logger.info("校验和 %s: %s", archive.name, checksum)

        self.staging.remove_collection_dirs()
        return ArchiveArtifact(
            repo=repo.name, tag=version.tag, library=library.name,
            platform=platform, path=archive, checksum=checksum,
        )

    def _collect(self, repo_dir: Path, version: VersionSpec, library: LibrarySpec) -> None:
        """把静态库、模块接口文件和 C 模块头文件拷贝到收集目录"""
        staging = self.staging
        staging.copy_file(
            self.swiftpm.library_file(repo_dir, library),
            staging.lib_dir / library.static_lib_name,
        )
        staging.copy_dir_contents(self.swiftpm.modules_dir(repo_dir), staging.modules_dir)

        for module in library.c_modules:
            src_include = repo_dir.joinpath(*version.c_module_dir(module)) / "include"
            dest_include = staging.include_dir / module
            staging.make_dir(dest_include)
            staging.copy_dir_contents(src_include, dest_include)
