"""Shell 命令执行工具: 统一子进程调用

通过 CommandExecutor 协议抽象子进程执行，方便测试替换。
命令总是在显式指定的工作目录下运行，不修改进程当前目录。
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from prebuilts.core.exceptions import CommandAbortedError, CommandFailedError, ToolchainError
from prebuilts.core.host import HostPlatform, host_platform
from prebuilts.core.platforms import OS

logger = logging.getLogger(__name__)

# Windows 上进程因未处理异常退出时返回 NTSTATUS 错误码 (如 0xC0000005)
_NTSTATUS_ERROR = 0xC0000000


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）

    returncode 为负数表示进程被对应编号的信号终止（POSIX 约定）。
    Windows 上 returncode >= 0xC0000000 表示进程异常退出。
    """

    returncode: int
    stdout: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


# =========================================================================
# 命令执行器协议
# =========================================================================

class CommandExecutor(Protocol):
    """命令执行器协议

    argv 已经由主机策略包装为 shell 调用；capture=True 时收集 stdout，
    quiet=True 时丢弃输出，否则输出直接透传到当前终端。
    """

    def execute(
        self,
        argv: list[str],
        *,
        cwd: Path,
        quiet: bool = False,
        capture: bool = False,
    ) -> CommandResult:
        ...


class LocalExecutor:
    """本地子进程执行器（默认实现），无超时，阻塞直到进程退出"""

    def execute(
        self,
        argv: list[str],
        *,
        cwd: Path,
        quiet: bool = False,
        capture: bool = False,
    ) -> CommandResult:
        if capture:
            stdout = subprocess.PIPE
        elif quiet:
            stdout = subprocess.DEVNULL
        else:
            stdout = None
        r = subprocess.run(
            argv, cwd=str(cwd), check=False, text=True,
            stdout=stdout,
            stderr=subprocess.DEVNULL if quiet else None,
        )
        return CommandResult(returncode=r.returncode, stdout=r.stdout or "")


# =========================================================================
# 全局默认执行器（可替换）
# =========================================================================

_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    """获取全局默认命令执行器"""
    return _default_executor


def set_executor(executor: CommandExecutor) -> None:
    """替换全局默认命令执行器（用于测试）"""
    global _default_executor  # noqa: PLW0603
    _default_executor = executor


# =========================================================================
# 命令调用
# =========================================================================

def run_cmd(
    command: str,
    *,
    cwd: Path,
    host: HostPlatform | None = None,
    executor: CommandExecutor | None = None,
    quiet: bool = False,
    capture: bool = False,
) -> CommandResult:
    """经主机 shell 执行命令行，失败即抛异常

    异常:
        CommandFailedError: 正常退出但退出码非零
        CommandAbortedError: 被信号终止、Windows 上异常退出或进程无法启动
    """
    host = host or host_platform()
    executor = executor or get_executor()
    logger.info("执行: %s (cwd=%s)", command, cwd)
    try:
        result = executor.execute(
            host.shell_argv(command), cwd=cwd, quiet=quiet, capture=capture,
        )
    except OSError as e:
        raise CommandAbortedError(command, reason=str(e)) from e
    if result.returncode < 0:
        raise CommandAbortedError(command, signal=-result.returncode)
    if host.os == OS.WINDOWS and result.returncode >= _NTSTATUS_ERROR:
        raise CommandAbortedError(command, reason=hex(result.returncode))
    if result.returncode != 0:
        raise CommandFailedError(result.returncode, command)
    return result


_SWIFT_VERSION_RE = re.compile(r"Swift version (\d+)\.(\d+)")


def parse_swift_version(output: str) -> str:
    """从 `swift --version` 输出中提取 major.minor"""
    m = _SWIFT_VERSION_RE.search(output)
    if m is None:
        raise ToolchainError(f"无法识别 Swift 工具链版本: {output.strip()[:200]}")
    return f"{m.group(1)}.{m.group(2)}"


def detect_swift_version(
    *, cwd: Path, host: HostPlatform | None = None, executor: CommandExecutor | None = None,
) -> str:
    """执行 swift --version 检测工具链版本"""
    result = run_cmd(
        "swift --version", cwd=cwd, host=host, executor=executor, capture=True,
    )
    version = parse_swift_version(result.stdout)
    logger.info("检测到 Swift 工具链版本: %s", version)
    return version
