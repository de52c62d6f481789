"""支持的构建目标平台目录

(操作系统, 架构) 的固定有序枚举。每个平台可选地关联一个容器交叉构建
镜像标签（按 OS 发行版族划分），无标签的平台不能在容器内构建。
"""

from __future__ import annotations

from enum import Enum


class OS(str, Enum):
    """操作系统族"""
    MACOS = "macos"
    WINDOWS = "windows"
    LINUX = "linux"

    def __str__(self) -> str:
        return self.value


class Arch(str, Enum):
    """CPU 架构"""
    X86_64 = "x86_64"
    AARCH64 = "aarch64"

    def __str__(self) -> str:
        return self.value


class Platform(str, Enum):
    """构建目标平台，值即产物命名中的平台标识"""
    MACOS_AARCH64 = "macos_aarch64"
    MACOS_X86_64 = "macos_x86_64"
    WINDOWS_AARCH64 = "windows_aarch64"
    WINDOWS_X86_64 = "windows_x86_64"
    UBUNTU_JAMMY_AARCH64 = "ubuntu_jammy_aarch64"
    UBUNTU_JAMMY_X86_64 = "ubuntu_jammy_x86_64"
    UBUNTU_FOCAL_AARCH64 = "ubuntu_focal_aarch64"
    UBUNTU_FOCAL_X86_64 = "ubuntu_focal_x86_64"
    AMAZONLINUX2_AARCH64 = "amazonlinux2_aarch64"
    AMAZONLINUX2_X86_64 = "amazonlinux2_x86_64"
    RHEL_UBI9_AARCH64 = "rhel_ubi9_aarch64"
    RHEL_UBI9_X86_64 = "rhel_ubi9_x86_64"

    def __str__(self) -> str:
        return self.value

    @property
    def arch(self) -> Arch:
        if self.value.endswith(Arch.AARCH64.value):
            return Arch.AARCH64
        return Arch.X86_64

    @property
    def os(self) -> OS:
        if self.value.startswith("macos_"):
            return OS.MACOS
        if self.value.startswith("windows_"):
            return OS.WINDOWS
        return OS.LINUX

    @property
    def docker_tag(self) -> str | None:
        return docker_tag(self)


# 容器镜像标签: 平台 → 镜像后缀（拼接在镜像前缀之后）
_DOCKER_TAGS: dict[Platform, str] = {
    Platform.UBUNTU_JAMMY_AARCH64: "jammy",
    Platform.UBUNTU_JAMMY_X86_64: "jammy",
    Platform.UBUNTU_FOCAL_AARCH64: "focal",
    Platform.UBUNTU_FOCAL_X86_64: "focal",
    Platform.AMAZONLINUX2_AARCH64: "amazonlinux2",
    Platform.AMAZONLINUX2_X86_64: "amazonlinux2",
    Platform.RHEL_UBI9_AARCH64: "rhel-ubi9",
    Platform.RHEL_UBI9_X86_64: "rhel-ubi9",
}

_DOCKER_PLATFORMS: dict[Arch, str] = {
    Arch.AARCH64: "linux/arm64",
    Arch.X86_64: "linux/amd64",
}


def all_platforms() -> list[Platform]:
    """返回全部支持平台（声明顺序）"""
    return list(Platform)


def docker_tag(platform: Platform) -> str | None:
    """平台对应的容器镜像后缀，不支持容器构建时返回 None"""
    return _DOCKER_TAGS.get(platform)


def docker_platform(arch: Arch) -> str:
    """架构 → 容器运行时的 --platform 取值"""
    return _DOCKER_PLATFORMS[arch]


def can_build(
    platform: Platform, *, host_os: OS, docker: bool = False, docker_only: bool = False,
) -> bool:
    """判断当前主机配置下该平台是否可构建

    规则:
        - docker_only: 仅 Linux 平台（全部经容器构建）
        - 平台 OS 与主机一致: 本机直接构建
        - 启用 docker 且平台为 Linux: 容器辅助构建
    """
    if docker_only:
        return platform.os == OS.LINUX
    if platform.os == host_os:
        return True
    return docker and platform.os == OS.LINUX


def parse_platform(value: str) -> Platform:
    """平台标识字符串 → Platform，未知标识抛 ValueError"""
    try:
        return Platform(value)
    except ValueError:
        known = ", ".join(p.value for p in Platform)
        raise ValueError(f"未知平台 '{value}'，可用: {known}") from None
