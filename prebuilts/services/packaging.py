"""产物打包与校验和

归档命名: {工具链 major.minor}-{库名}-{平台标识}.zip，
写入 {stage}/{repo}/{tag}/。打包后立即计算 SHA-256 作为完整性指纹。
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from prebuilts.core.exceptions import FilesystemError, MissingOutputError
from prebuilts.core.host import HostPlatform
from prebuilts.core.models import LibrarySpec
from prebuilts.core.platforms import Platform
from prebuilts.services.staging import INCLUDE_DIR, LIB_DIR, MODULES_DIR
from prebuilts.utils.shell import CommandExecutor, run_cmd

logger = logging.getLogger(__name__)

ARCHIVE_EXT = "zip"


def archive_name(swift_version: str, library: str, platform: Platform | str) -> str:
    return f"{swift_version}-{library}-{platform}.{ARCHIVE_EXT}"


def content_dirs(library: LibrarySpec) -> list[str]:
    """参与打包的收集目录；没有 C 模块时不带 include"""
    dirs = [LIB_DIR, MODULES_DIR]
    if library.c_modules:
        dirs.append(INCLUDE_DIR)
    return dirs


def sha256_file(path: Path) -> str:
    """分块读取文件计算 SHA-256 十六进制摘要"""
    sha256 = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(65536), b""):
                sha256.update(chunk)
    except FileNotFoundError as e:
        raise MissingOutputError(str(path)) from e
    except OSError as e:
        raise FilesystemError("read", str(path), str(e)) from e
    return sha256.hexdigest()


class Packager:
    """在暂存根目录下调用主机归档工具打包收集目录"""

    def __init__(
        self, host: HostPlatform, executor: CommandExecutor | None = None, quiet: bool = False,
    ) -> None:
        self.host = host
        self.executor = executor
        self.quiet = quiet

    def package(
        self,
        stage_root: Path,
        version_dir: Path,
        swift_version: str,
        library: LibrarySpec,
        platform: Platform,
    ) -> Path:
        """打包并返回归档路径；归档缺失视为错误"""
        archive = version_dir / archive_name(swift_version, library.name, platform)
        command = self.host.archive_command(str(archive), content_dirs(library))
        run_cmd(
            command, cwd=stage_root, host=self.host,
            executor=self.executor, quiet=self.quiet,
        )
        if not archive.is_file():
            raise MissingOutputError(str(archive))
        logger.info("已打包: %s", archive)
        return archive
