"""静态依赖目录

集中声明构建所需的逻辑包、各包管理器的包名映射、子模块清单、
归档下载地址与系统库候选目录。运行时只读，不从环境推导。

逻辑包按构建依赖顺序排列；展开后的 apt/dnf/pacman/brew 列表与
历史安装脚本保持一致，保证命令输出可复现。
"""

from __future__ import annotations

from types import MappingProxyType

from provisioner.core.models import (
    LogicalPackage,
    PackageManager,
    PackageManagerProfile,
    SubmoduleEntry,
)

RELEASE_URL = "https://github.com/LizardByte/build-deps/releases/latest/download"
ARCHIVE_PREFIX = "ffmpeg"
BUILD_DEPS_DIR = "third-party/build-deps"

VCPKG_REPO_URL = "https://github.com/microsoft/vcpkg.git"

# =========================================================================
# 子模块
# =========================================================================

SUBMODULES: tuple[SubmoduleEntry, ...] = (
    SubmoduleEntry("third-party/moonlight-common-c", has_nested_submodules=True),
    SubmoduleEntry("third-party/Simple-Web-Server"),
    SubmoduleEntry("third-party/libdisplaydevice"),
    SubmoduleEntry("third-party/inputtino"),
    SubmoduleEntry("third-party/nanors"),
    SubmoduleEntry("third-party/tray"),
    SubmoduleEntry("third-party/nv-codec-headers"),
    SubmoduleEntry("third-party/nvapi-open-source-sdk"),
    SubmoduleEntry("third-party/googletest"),
    SubmoduleEntry("third-party/doxyconfig"),
    SubmoduleEntry("third-party/wayland-protocols"),
    SubmoduleEntry("third-party/wlr-protocols"),
)

# =========================================================================
# 逻辑包
# =========================================================================

LOGICAL_PACKAGES: tuple[LogicalPackage, ...] = tuple(
    LogicalPackage(name) for name in (
        "toolchain",
        "cmake",
        "ninja",
        "git",
        "curl-dev",
        "miniupnpc-dev",
        "openssl-dev",
        "ffmpeg-dev",
        "x11-dev",
        "xcb-dev",
        "drm-dev",
        "va-dev",
        "vdpau-dev",
        "numa-dev",
        "pulse-dev",
        "opus-dev",
        "evdev-dev",
        "cap-dev",
        "boost-dev",
        "wayland-dev",
        "wayland-protocols",
        "notify-dev",
        "appindicator-dev",
        "pkg-config",
    )
)

# 未识别包管理器时给出的手工安装提示
MANUAL_INSTALL_HINTS: tuple[str, ...] = (
    "cmake, ninja, git",
    "libcurl development headers",
    "miniupnpc development headers",
    "openssl development headers",
    "ffmpeg development headers",
    "X11/Wayland development headers",
    "boost development headers",
    "opus development headers",
)

_APT_NAMES = {
    "toolchain": "build-essential",
    "cmake": "cmake",
    "ninja": "ninja-build",
    "git": "git",
    "curl-dev": "libcurl4-openssl-dev",
    "miniupnpc-dev": "libminiupnpc-dev",
    "openssl-dev": "libssl-dev",
    "ffmpeg-dev": ("libavcodec-dev", "libavutil-dev", "libswscale-dev"),
    "x11-dev": ("libx11-dev", "libxfixes-dev", "libxrandr-dev"),
    "xcb-dev": ("libxcb1-dev", "libxcb-shm0-dev", "libxcb-xfixes0-dev"),
    "drm-dev": "libdrm-dev",
    "va-dev": "libva-dev",
    "vdpau-dev": "libvdpau-dev",
    "numa-dev": "libnuma-dev",
    "pulse-dev": "libpulse-dev",
    "opus-dev": "libopus-dev",
    "evdev-dev": "libevdev-dev",
    "cap-dev": "libcap-dev",
    "boost-dev": "libboost-all-dev",
    "wayland-dev": "libwayland-dev",
    "wayland-protocols": "wayland-protocols",
    "notify-dev": "libnotify-dev",
    "appindicator-dev": "libappindicator3-dev",
    "pkg-config": "pkg-config",
}

_DNF_NAMES = {
    "toolchain": "@development-tools",
    "cmake": "cmake",
    "ninja": "ninja-build",
    "git": "git",
    "curl-dev": "libcurl-devel",
    "miniupnpc-dev": "miniupnpc-devel",
    "openssl-dev": "openssl-devel",
    "ffmpeg-dev": "ffmpeg-devel",
    "x11-dev": ("libX11-devel", "libXfixes-devel", "libXrandr-devel"),
    "xcb-dev": "libxcb-devel",
    "drm-dev": "libdrm-devel",
    "va-dev": "libva-devel",
    "vdpau-dev": "libvdpau-devel",
    "numa-dev": "numactl-devel",
    "pulse-dev": "pulseaudio-libs-devel",
    "opus-dev": "opus-devel",
    "evdev-dev": "libevdev-devel",
    "cap-dev": "libcap-devel",
    "boost-dev": "boost-devel",
    "wayland-dev": "wayland-devel",
    "wayland-protocols": "wayland-protocols-devel",
    "notify-dev": "libnotify-devel",
    "appindicator-dev": "libappindicator-devel",
    "pkg-config": "pkgconfig",
}

_PACMAN_NAMES = {
    "toolchain": "base-devel",
    "cmake": "cmake",
    "ninja": "ninja",
    "git": "git",
    "curl-dev": "curl",
    "miniupnpc-dev": "miniupnpc",
    "openssl-dev": "openssl",
    "ffmpeg-dev": "ffmpeg",
    "x11-dev": ("libx11", "libxfixes", "libxrandr"),
    "xcb-dev": "libxcb",
    "drm-dev": "libdrm",
    "va-dev": "libva",
    "vdpau-dev": "libvdpau",
    "numa-dev": "numactl",
    "pulse-dev": "libpulse",
    "opus-dev": "opus",
    "evdev-dev": "libevdev",
    "cap-dev": "libcap",
    "boost-dev": "boost",
    "wayland-dev": "wayland",
    "wayland-protocols": "wayland-protocols",
    "notify-dev": "libnotify",
    "appindicator-dev": "libappindicator-gtk3",
    "pkg-config": "pkgconf",
}

# Homebrew 只覆盖跨平台部分，Linux 专用的显示/输入库不映射
_BREW_NAMES = {
    "cmake": "cmake",
    "ninja": "ninja",
    "git": "git",
    "curl-dev": "curl",
    "miniupnpc-dev": "miniupnpc",
    "openssl-dev": "openssl",
    "ffmpeg-dev": "ffmpeg",
    "opus-dev": "opus",
    "boost-dev": "boost",
    "pkg-config": "pkg-config",
}

MANAGER_PROFILES: MappingProxyType[PackageManager, PackageManagerProfile] = MappingProxyType({
    PackageManager.APT: PackageManagerProfile(
        manager=PackageManager.APT,
        install_command=("apt-get", "install", "-y"),
        package_name_map=MappingProxyType(_APT_NAMES),
        pre_install_commands=(("apt-get", "update"),),
    ),
    PackageManager.DNF: PackageManagerProfile(
        manager=PackageManager.DNF,
        install_command=("dnf", "install", "-y"),
        package_name_map=MappingProxyType(_DNF_NAMES),
    ),
    PackageManager.PACMAN: PackageManagerProfile(
        manager=PackageManager.PACMAN,
        install_command=("pacman", "-Syu", "--noconfirm"),
        package_name_map=MappingProxyType(_PACMAN_NAMES),
    ),
    PackageManager.BREW: PackageManagerProfile(
        manager=PackageManager.BREW,
        install_command=("brew", "install"),
        package_name_map=MappingProxyType(_BREW_NAMES),
        needs_elevation=False,
    ),
})

# 包管理器探测顺序（先命中者生效）: (管理器, 可执行文件名)
MANAGER_PROBES: tuple[tuple[PackageManager, str], ...] = (
    (PackageManager.APT, "apt-get"),
    (PackageManager.DNF, "dnf"),
    (PackageManager.PACMAN, "pacman"),
    (PackageManager.BREW, "brew"),
)

# =========================================================================
# Windows: vcpkg
# =========================================================================

VCPKG_PACKAGES: tuple[str, ...] = (
    "curl",
    "miniupnpc",
    "openssl",
    "opus",
    "boost-locale",
    "boost-log",
    "boost-program-options",
    "boost-process",
)

# =========================================================================
# 系统库候选目录（归档下载失败时的降级提示）
# =========================================================================


def library_candidates(arch: str) -> tuple[str, ...]:
    """按优先级返回系统库候选目录，先存在者生效"""
    return (
        f"/usr/lib/{arch}-linux-gnu",
        "/usr/lib64",
        "/usr/lib",
        "/opt/homebrew/lib",
        "/usr/local/lib",
    )
