"""平台画像解析

resolve() 永不抛异常: 无法识别的主机降级为 unknown / none。
包管理器探测是基于 ToolProbe 的纯函数，测试可注入任意主机画像。
"""

from __future__ import annotations

import logging
import platform

from provisioner.core.catalog import MANAGER_PROBES
from provisioner.core.models import OsFamily, PackageManager, PlatformProfile
from provisioner.core.protocols import ToolProbe

logger = logging.getLogger(__name__)

_SYSTEM_FAMILIES = {
    "linux": OsFamily.LINUX,
    "windows": OsFamily.WINDOWS,
    "darwin": OsFamily.MACOS,
}


def detect_os_family(system: str) -> OsFamily:
    return _SYSTEM_FAMILIES.get(system.strip().lower(), OsFamily.UNKNOWN)


def detect_package_manager(probe: ToolProbe) -> PackageManager:
    """按 apt -> dnf -> pacman -> brew 顺序探测，先命中者生效"""
    for manager, binary in MANAGER_PROBES:
        if probe.has_tool(binary):
            return manager
    return PackageManager.NONE


def resolve(
    probe: ToolProbe | None = None,
    *,
    system: str | None = None,
    machine: str | None = None,
) -> PlatformProfile:
    """解析当前主机的平台画像"""
    if probe is None:
        from provisioner.utils.shell import LocalExecutor
        probe = LocalExecutor()

    os_family = detect_os_family(platform.system() if system is None else system)
    arch = (platform.machine() if machine is None else machine).strip() or "unknown"

    # Windows 的包阶段走 vcpkg，不探测系统包管理器
    if os_family is OsFamily.WINDOWS:
        manager = PackageManager.NONE
    else:
        manager = detect_package_manager(probe)

    profile = PlatformProfile(os_family=os_family, arch=arch, package_manager=manager)
    logger.info(
        "平台: os=%s arch=%s pkg=%s",
        profile.os_family.value, profile.arch, profile.package_manager.value,
    )
    return profile
