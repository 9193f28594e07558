"""系统包安装 — 逻辑包 -> 包管理器包名

未识别包管理器时只输出手工安装提示（degraded），不执行任何命令。
包管理器调用失败通常是系统性问题（源损坏、无网络），因此不重试，
整个阶段直接判定为 failed。
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Sequence

from provisioner.core.catalog import MANAGER_PROFILES, MANUAL_INSTALL_HINTS
from provisioner.core.exceptions import ExecutionError
from provisioner.core.models import (
    LogicalPackage,
    PackageManager,
    PackageManagerProfile,
    PlatformProfile,
    ProvisioningResult,
    Stage,
    StageStatus,
)
from provisioner.core.protocols import CommandRunner, ToolProbe
from provisioner.utils.shell import run_cmd

logger = logging.getLogger(__name__)


def _current_euid() -> int | None:
    geteuid = getattr(os, "geteuid", None)
    return geteuid() if geteuid else None


class PackageSetTranslator:
    """按平台画像选择包管理器并安装逻辑包集合"""

    def __init__(
        self,
        runner: CommandRunner,
        probe: ToolProbe,
        profiles: Mapping[PackageManager, PackageManagerProfile] = MANAGER_PROFILES,
        euid: int | None = None,
    ) -> None:
        self.runner = runner
        self.probe = probe
        self.profiles = profiles
        self.euid = _current_euid() if euid is None else euid

    def install(
        self, profile: PlatformProfile, packages: Sequence[LogicalPackage],
    ) -> ProvisioningResult:
        mgr = self.profiles.get(profile.package_manager)
        if mgr is None:
            logger.warning("  未识别的包管理器，请手动安装依赖")
            return ProvisioningResult(
                stage=Stage.PACKAGES,
                status=StageStatus.DEGRADED,
                detail="未检测到支持的包管理器",
                advisories=[f"请手动安装: {hint}" for hint in MANUAL_INSTALL_HINTS],
            )

        names = mgr.translate(packages)
        prefix = self.elevation_prefix(mgr)
        label = mgr.manager.value
        logger.info("  使用 %s 包管理器 (%d 个包)", label, len(names))

        try:
            for pre in mgr.pre_install_commands:
                run_cmd(self.runner, [*prefix, *pre], label=f"{label} 预处理", capture=False)
            run_cmd(
                self.runner, [*prefix, *mgr.install_command, *names],
                label=f"{label} 安装", capture=False,
            )
        except ExecutionError as e:
            logger.error("  系统包安装失败: %s", e)
            return ProvisioningResult(
                stage=Stage.PACKAGES,
                status=StageStatus.FAILED,
                detail=str(e),
                advisories=[f"检查 {label} 软件源与网络后重新运行"],
            )

        logger.info("  系统包已安装")
        return ProvisioningResult(
            stage=Stage.PACKAGES,
            status=StageStatus.OK,
            detail=f"{label}: {len(names)} 个包",
        )

    def elevation_prefix(self, mgr: PackageManagerProfile) -> list[str]:
        """apt/dnf/pacman 需要 sudo；已是 root 或没有 sudo 时不加"""
        if not mgr.needs_elevation or self.euid == 0:
            return []
        if not self.probe.has_tool("sudo"):
            logger.warning("  未找到 sudo，以当前用户身份调用 %s", mgr.manager.value)
            return []
        return ["sudo"]
