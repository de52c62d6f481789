"""暂存目录管理

目录布局 (stage_dir 下):
    src/<repo>/          临时 checkout，流水线结束时删除
    lib/ Modules/ include/
                         每个 (库, 平台) 的收集目录，打包后立即删除
                         构建失败时保留，由下次运行的 reset() 清除
    <repo>/<tag>/        版本输出目录，保存最终归档

所有 OSError 转为 FilesystemError；拷贝源不存在转为 MissingOutputError。
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from prebuilts.core.exceptions import FilesystemError, MissingOutputError

logger = logging.getLogger(__name__)

LIB_DIR = "lib"
# 与消费端解包后的 -I<artifact>/Modules 路径一致
MODULES_DIR = "Modules"
INCLUDE_DIR = "include"
SRC_DIR = "src"
SCRATCH_DIR = ".build"


class StagingArea:
    """暂存目录树管理器"""

    def __init__(self, stage_dir: str | Path) -> None:
        self.root = Path(stage_dir).absolute()

    # ---- 路径 ----

    @property
    def src_dir(self) -> Path:
        return self.root / SRC_DIR

    @property
    def lib_dir(self) -> Path:
        return self.root / LIB_DIR

    @property
    def modules_dir(self) -> Path:
        return self.root / MODULES_DIR

    @property
    def include_dir(self) -> Path:
        return self.root / INCLUDE_DIR

    def collection_dirs(self) -> list[Path]:
        return [self.lib_dir, self.modules_dir, self.include_dir]

    def repo_dir(self, repo_name: str) -> Path:
        return self.src_dir / repo_name

    def version_dir(self, repo_name: str, tag: str) -> Path:
        return self.root / repo_name / tag

    # ---- 生命周期 ----

    def reset(self) -> None:
        """销毁并重建暂存根目录和 src/，不复用上一次运行的任何状态"""
        logger.info("暂存目录: %s", self.root)
        if self.root.exists():
            self._rmtree(self.root)
        self._mkdir(self.root)
        self._mkdir(self.src_dir)

    def ensure_version_dir(self, repo_name: str, tag: str) -> Path:
        path = self.version_dir(repo_name, tag)
        if not path.exists():
            self._mkdir(path)
        return path

    def create_collection_dirs(self) -> None:
        for path in self.collection_dirs():
            self._mkdir(path)

    def remove_collection_dirs(self) -> None:
        """删除收集目录；目录必须存在，缺失视为错误"""
        for path in self.collection_dirs():
            self._rmtree(path)

    def purge_scratch(self, repo_dir: Path) -> None:
        """清除上一个平台遗留的增量构建目录"""
        scratch = repo_dir / SCRATCH_DIR
        if scratch.exists():
            logger.debug("清理构建缓存: %s", scratch)
            self._rmtree(scratch)

    def remove_src(self) -> None:
        self._rmtree(self.src_dir)

    # ---- 拷贝 ----

    def copy_file(self, src: Path, dest: Path) -> None:
        """拷贝单个文件或目录；源必须存在，目标不得存在"""
        if not src.exists():
            raise MissingOutputError(str(src))
        if dest.exists():
            raise FilesystemError("copy", str(dest), "目标已存在")
        try:
            if src.is_dir():
                shutil.copytree(src, dest, symlinks=True)
            else:
                shutil.copy2(src, dest)
        except OSError as e:
            raise FilesystemError("copy", str(src), str(e)) from e

    def copy_dir_contents(self, src_dir: Path, dest_dir: Path) -> list[Path]:
        """把 src_dir 下每一项拷贝到 dest_dir，返回拷贝后的路径"""
        if not src_dir.is_dir():
            raise MissingOutputError(str(src_dir))
        copied: list[Path] = []
        for item in sorted(src_dir.iterdir()):
            dest = dest_dir / item.name
            self.copy_file(item, dest)
            copied.append(dest)
        return copied

    def make_dir(self, path: Path) -> None:
        self._mkdir(path)

    # ---- 内部 ----

    @staticmethod
    def _mkdir(path: Path) -> None:
        try:
            path.mkdir(parents=True)
        except OSError as e:
            raise FilesystemError("mkdir", str(path), str(e)) from e

    @staticmethod
    def _rmtree(path: Path) -> None:
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise FilesystemError("remove", str(path), str(e)) from e
