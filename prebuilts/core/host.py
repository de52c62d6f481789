"""主机平台策略

启动时根据检测到（或配置指定）的主机 OS 选择一次策略，
统一提供 shell 调用方式、归档命令和参数转义，调用点不再按 OS 分支。
"""

from __future__ import annotations

import shlex
import subprocess
import sys
from dataclasses import dataclass

from prebuilts.core.exceptions import ConfigError
from prebuilts.core.platforms import OS


def detect_host_os() -> OS:
    """根据 sys.platform 识别主机 OS"""
    if sys.platform == "darwin":
        return OS.MACOS
    if sys.platform.startswith("win"):
        return OS.WINDOWS
    return OS.LINUX


@dataclass(frozen=True)
class HostPlatform:
    """POSIX 主机: bash 执行命令，zip 打包"""

    os: OS

    def shell_argv(self, command: str) -> list[str]:
        return ["/bin/bash", "-c", command]

    def quote(self, arg: str) -> str:
        return shlex.quote(arg)

    def archive_command(self, archive: str, dirs: list[str]) -> str:
        """生成把 dirs 打包为 archive 的命令行（在暂存根目录下执行）"""
        return " ".join(["zip", "-r", self.quote(archive), *(self.quote(d) for d in dirs)])


@dataclass(frozen=True)
class WindowsHostPlatform(HostPlatform):
    """Windows 主机: cmd.exe 执行命令，tar -a 按扩展名生成 zip"""

    def shell_argv(self, command: str) -> list[str]:
        return ["C:\\Windows\\System32\\cmd.exe", "/c", command]

    def quote(self, arg: str) -> str:
        return subprocess.list2cmdline([arg])

    def archive_command(self, archive: str, dirs: list[str]) -> str:
        return " ".join(["tar", "-acf", self.quote(archive), *(self.quote(d) for d in dirs)])


def host_platform(host_os: OS | str | None = None) -> HostPlatform:
    """选择主机策略；host_os 为空时自动检测"""
    if not host_os:
        resolved = detect_host_os()
    else:
        try:
            resolved = OS(host_os)
        except ValueError:
            raise ConfigError(
                f"不支持的主机 OS: {host_os}（可选: macos / linux / windows）"
            ) from None
    if resolved == OS.WINDOWS:
        return WindowsHostPlatform(os=resolved)
    return HostPlatform(os=resolved)
