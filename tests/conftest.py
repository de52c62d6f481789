"""共享 fixture: 模拟 git / swift / zip 的命令执行器

FakeExecutor 解析经 bash -c 包装的命令行，在文件系统上模拟各工具的效果:

  git clone URL DEST      创建 DEST 并写入 repo_files 中的源码文件
  swift build --arch A    在 cwd/.build/release 下生成 lib<product>.a 和 Modules/
  zip -r ARCHIVE DIRS     用 zipfile 真实打包 cwd 下的 DIRS
  其余命令                只记录不执行

fail_on / signal_on 命中子串时分别返回退出码 1 / 被信号 9 终止。
"""

from __future__ import annotations

import shlex
import zipfile
from pathlib import Path

import pytest

from prebuilts.core.host import HostPlatform
from prebuilts.core.models import BuildOptions, LibrarySpec, PackageSpec, RepoSpec, VersionSpec
from prebuilts.core.platforms import OS
from prebuilts.utils.logger import reset_logging
from prebuilts.utils.shell import CommandResult


class FakeExecutor:
    def __init__(self, repo_files: dict[str, str] | None = None) -> None:
        self.repo_files = repo_files or {}
        self.commands: list[tuple[str, Path]] = []
        self.fail_on: str = ""
        self.signal_on: str = ""
        self.stdout: str = ""

    def execute(self, argv, *, cwd, quiet=False, capture=False) -> CommandResult:
        command = argv[-1]
        self.commands.append((command, Path(cwd)))
        if self.fail_on and self.fail_on in command:
            return CommandResult(returncode=1)
        if self.signal_on and self.signal_on in command:
            return CommandResult(returncode=-9)

        tokens = shlex.split(command)
        if tokens[:2] == ["git", "clone"]:
            self._clone(Path(tokens[3]))
        elif "swift" in tokens and tokens[tokens.index("swift") + 1] == "build":
            self._build(Path(cwd), tokens)
        elif tokens[:2] == ["zip", "-r"]:
            self._zip(Path(cwd), Path(tokens[2]), tokens[3:])
        return CommandResult(returncode=0, stdout=self.stdout)

    def commands_matching(self, text: str) -> list[str]:
        return [c for c, _ in self.commands if text in c]

    def _clone(self, dest: Path) -> None:
        dest.mkdir(parents=True)
        for rel, content in self.repo_files.items():
            path = dest / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)

    @staticmethod
    def _build(repo_dir: Path, tokens: list[str]) -> None:
        arch = tokens[tokens.index("--arch") + 1]
        product = tokens[tokens.index("--product") + 1]
        build_dir = repo_dir / ".build" / "release"
        modules = build_dir / "Modules"
        modules.mkdir(parents=True, exist_ok=True)
        (build_dir / f"lib{product}.a").write_text(f"archive {product} {arch}")
        (modules / f"{product}.swiftmodule").write_text(f"module {arch}")
        (modules / f"{arch}.marker").write_text(arch)

    @staticmethod
    def _zip(root: Path, archive: Path, dirs: list[str]) -> None:
        with zipfile.ZipFile(archive, "w") as zf:
            for d in dirs:
                for path in sorted((root / d).rglob("*")):
                    zf.write(path, path.relative_to(root).as_posix())


@pytest.fixture(autouse=True)
def _clean_logging():
    """CLI 入口会配置根日志器，测试结束后清理，避免写入已关闭的捕获流"""
    yield
    reset_logging()


@pytest.fixture()
def fake_executor():
    return FakeExecutor(repo_files={
        "Package.swift": "// swift-tools-version:5.9\n",
        "Sources/_SwiftSyntaxCShims/include/SwiftSyntaxCShims.h": "#pragma once\n",
        "Sources/_SwiftSyntaxCShims/include/module.modulemap": "module _SwiftSyntaxCShims {}\n",
    })


@pytest.fixture()
def mac_host():
    return HostPlatform(os=OS.MACOS)


@pytest.fixture()
def options(tmp_path):
    return BuildOptions(stage_dir=tmp_path / "stage", swift_version="6.1")


@pytest.fixture()
def syntax_repo():
    return RepoSpec(
        url="https://github.com/swiftlang/swift-syntax",
        package=PackageSpec(libraries=[
            LibrarySpec(
                name="MacroSupport",
                products=["SwiftSyntax", "SwiftSyntaxMacros"],
                c_modules=["_SwiftSyntaxCShims"],
            ),
        ]),
        versions=[VersionSpec(tag="600.0.1")],
    )
