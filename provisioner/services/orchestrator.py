"""依赖准备编排器 — 协调 3 个阶段

阶段顺序固定:
1. submodules - 初始化 Git 子模块
2. packages   - 安装系统包（Windows 上为 vcpkg）
3. archive    - 下载 FFmpeg 预编译依赖

各阶段互不依赖数据，只共享只读的 PlatformProfile。任一阶段 failed
时退出码非零；degraded 只输出提示，不阻断后续手工构建。
"""

from __future__ import annotations

import logging
from typing import Callable

import click

from provisioner.core.exceptions import ProvisionError
from provisioner.core.host import resolve
from provisioner.core.models import (
    PlatformProfile,
    ProvisioningResult,
    ProvisionOptions,
    RunReport,
    Stage,
    StageStatus,
)
from provisioner.services.container import ServiceContainer

logger = logging.getLogger(__name__)

STAGE_TITLES = {
    Stage.SUBMODULES: "Step 1: 初始化 Git 子模块",
    Stage.PACKAGES: "Step 2: 安装系统包",
    Stage.ARCHIVE: "Step 3: 下载 FFmpeg 构建依赖",
}

NEXT_STEPS = (
    "mkdir -p build && cd build",
    "cmake .. -G Ninja",
    "ninja",
)


class Driver:
    """按固定顺序执行各阶段并汇总结果"""

    def __init__(
        self,
        container: ServiceContainer,
        profile: PlatformProfile | None = None,
        echo: Callable[[str], None] = click.echo,
    ) -> None:
        self.c = container
        self._profile = profile
        self.echo = echo

    @property
    def profile(self) -> PlatformProfile:
        """首次访问时解析，之后只读"""
        if self._profile is None:
            self._profile = resolve(self.c.probe)
        return self._profile

    def run(self, options: ProvisionOptions) -> int:
        """执行全部阶段，打印汇总，返回退出码"""
        self.echo("=== 构建依赖准备 ===")
        self.echo(f"仓库: {self.c.config.root.resolve()}")
        self.echo("")
        report = self.execute(options)
        for line in render_summary(report):
            self.echo(line)
        return report.exit_status

    def execute(self, options: ProvisionOptions) -> RunReport:
        report = RunReport()
        profile = self.profile
        cfg = self.c.config

        report.results.append(self._run_stage(
            Stage.SUBMODULES, options.skip_submodules,
            lambda: self.c.submodules.provision(cfg.submodules),
        ))
        report.results.append(self._run_stage(
            Stage.PACKAGES, options.skip_packages,
            lambda: self._install_packages(profile),
        ))
        report.results.append(self._run_stage(
            Stage.ARCHIVE, options.skip_build_deps,
            lambda: self.c.archive.provision(profile),
        ))
        return report

    def _install_packages(self, profile: PlatformProfile) -> ProvisioningResult:
        if profile.is_windows:
            return self.c.vcpkg.install()
        return self.c.packages.install(profile, self.c.config.packages)

    @staticmethod
    def _run_stage(
        stage: Stage, skip: bool, action: Callable[[], ProvisioningResult],
    ) -> ProvisioningResult:
        log_extra = {"stage": stage.value}
        if skip:
            logger.info("已跳过", extra=log_extra)
            return ProvisioningResult(stage=stage, status=StageStatus.SKIPPED, detail="已跳过")

        logger.info(STAGE_TITLES[stage], extra=log_extra)
        try:
            result = action()
        except ProvisionError as e:
            logger.exception("阶段异常 (%s)", e.code, extra=log_extra)
            result = ProvisioningResult(stage=stage, status=StageStatus.FAILED, detail=str(e))
        logger.info("%s: %s", result.status.value, result.detail, extra=log_extra)
        return result


def render_summary(report: RunReport) -> list[str]:
    """汇总各阶段结果 + 后续手工步骤（无论成败都输出）"""
    title = "=== 依赖准备完成 ===" if report.exit_status == 0 else "=== 依赖准备未完成 ==="
    lines = ["", title, ""]
    for r in report.results:
        lines.append(f"  [{r.status.value:8s}] {r.stage.value:10s} {r.detail}")

    advisories = [a for r in report.results for a in r.advisories]
    if advisories:
        lines += ["", "提示:"]
        lines += [f"  - {a}" for a in advisories]

    lines += ["", "构建步骤:"]
    lines += [f"  {step}" for step in NEXT_STEPS]
    lines += [
        "",
        "多显示器串流: 在启动请求中使用 display 参数:",
        "  ?display=DP-1  或  ?display=0",
        "",
    ]
    return lines
