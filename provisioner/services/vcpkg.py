"""Windows 包阶段 — vcpkg 克隆、引导与安装

行为与系统包安装一致: 任一步骤失败即判定 failed，不重试。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from provisioner.core.catalog import VCPKG_PACKAGES, VCPKG_REPO_URL
from provisioner.core.exceptions import ExecutionError
from provisioner.core.models import ProvisioningResult, Stage, StageStatus
from provisioner.core.protocols import CommandRunner
from provisioner.utils.shell import run_cmd

logger = logging.getLogger(__name__)


class VcpkgProvisioner:
    """固定包清单的 vcpkg 安装器"""

    def __init__(
        self,
        runner: CommandRunner,
        vcpkg_root: str | Path,
        triplet: str = "x64-windows",
    ) -> None:
        self.runner = runner
        self.root = Path(vcpkg_root)
        self.triplet = triplet

    @property
    def executable(self) -> Path:
        return self.root / "vcpkg.exe"

    def install(self, packages: Sequence[str] = VCPKG_PACKAGES) -> ProvisioningResult:
        try:
            if not (self.root / ".vcpkg-root").exists():
                logger.info("  克隆 vcpkg 到 %s", self.root)
                run_cmd(
                    self.runner, ["git", "clone", VCPKG_REPO_URL, str(self.root)],
                    label="vcpkg clone", capture=False,
                )
            if not self.executable.exists():
                run_cmd(
                    self.runner, [str(self.root / "bootstrap-vcpkg.bat"), "-disableMetrics"],
                    cwd=self.root, label="vcpkg bootstrap", capture=False,
                )
            run_cmd(
                self.runner,
                [str(self.executable), "install", "--triplet", self.triplet, *packages],
                cwd=self.root, label="vcpkg install", capture=False,
            )
        except ExecutionError as e:
            logger.error("  vcpkg 安装失败: %s", e)
            return ProvisioningResult(
                stage=Stage.PACKAGES,
                status=StageStatus.FAILED,
                detail=str(e),
                advisories=[f"检查 {self.root} 后重新运行，或设置 VcpkgRoot 指向已有 vcpkg"],
            )

        toolchain = self.root / "scripts" / "buildsystems" / "vcpkg.cmake"
        return ProvisioningResult(
            stage=Stage.PACKAGES,
            status=StageStatus.OK,
            detail=f"vcpkg ({self.triplet}): {len(packages)} 个包",
            advisories=[f"CMake 参数: -DCMAKE_TOOLCHAIN_FILE={toolchain}"],
        )
