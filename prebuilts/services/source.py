"""Git 源码操作: clone / checkout tag / reset --hard

同一代码仓的各版本共用一份工作树，因此版本必须串行处理。
"""

from __future__ import annotations

import logging
from pathlib import Path

from prebuilts.core.host import HostPlatform
from prebuilts.utils.shell import CommandExecutor, run_cmd

logger = logging.getLogger(__name__)


class GitCheckout:
    """基于 git 命令行的工作树管理"""

    def __init__(
        self, host: HostPlatform, executor: CommandExecutor | None = None, quiet: bool = False,
    ) -> None:
        self.host = host
        self.executor = executor
        self.quiet = quiet

    def _git(self, args: str, cwd: Path) -> None:
        run_cmd(
            f"git {args}", cwd=cwd, host=self.host,
            executor=self.executor, quiet=self.quiet,
        )

    def clone(self, url: str, dest: Path) -> None:
        q = self.host.quote
        self._git(f"clone {q(url)} {q(str(dest))}", cwd=dest.parent)
        logger.info("已克隆: %s -> %s", url, dest)

    def checkout(self, repo_dir: Path, tag: str) -> None:
        self._git(f"checkout {self.host.quote(tag)}", cwd=repo_dir)
        logger.info("已切换版本: %s@%s", repo_dir.name, tag)

    def reset_hard(self, repo_dir: Path) -> None:
        """丢弃工作树上的全部修改（生成的 product 定义、构建副产物）"""
        self._git("reset --hard", cwd=repo_dir)
