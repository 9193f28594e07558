"""Git 子模块准备 — 三级回退

1. 批量: git submodule update --init --recursive
2. 批量失败时逐个子模块重试，单个失败只记录不中断
3. 对声明了嵌套子模块的条目，进入其目录再执行一次递归初始化

重复执行会收敛到同一工作树状态。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from provisioner.core.models import (
    ProvisioningResult,
    Stage,
    StageStatus,
    SubmoduleEntry,
)
from provisioner.core.protocols import CommandRunner

logger = logging.getLogger(__name__)

GIT_SUBMODULE_UPDATE = ("git", "submodule", "update", "--init", "--recursive")


class SubmoduleProvisioner:
    """子模块同步器"""

    def __init__(self, runner: CommandRunner, repo_root: str | Path = ".") -> None:
        self.runner = runner
        self.repo_root = Path(repo_root)

    def provision(self, entries: Sequence[SubmoduleEntry]) -> ProvisioningResult:
        if not self.has_vcs_metadata():
            logger.error("版本控制元数据缺失: %s", self.repo_root / ".git")
            return ProvisioningResult(
                stage=Stage.SUBMODULES,
                status=StageStatus.FAILED,
                detail=f"{self.repo_root} 不是 git 工作树",
                advisories=["请在 git clone 得到的源码目录中运行，或加 --skip-submodules"],
            )

        failures: list[str] = []
        bulk_ok = self._update(self.repo_root)
        if bulk_ok:
            logger.info("  批量同步完成")
        else:
            logger.warning("  部分子模块失败，逐个初始化...")
            failures.extend(self._per_entry(entries))

        nested_failures = self._nested_fixup(entries)
        failures.extend(f"{p} (嵌套)" for p in nested_failures)

        if failures:
            logger.warning("  子模块同步未完全成功: %s", ", ".join(failures))
            return ProvisioningResult(
                stage=Stage.SUBMODULES,
                status=StageStatus.DEGRADED,
                detail=f"{len(failures)} 个子模块失败: {', '.join(failures)}",
                advisories=["可稍后手动执行 git submodule update --init --recursive"],
            )

        detail = "批量同步" if bulk_ok else f"逐个同步 {len(entries)} 个子模块"
        logger.info("  子模块已初始化")
        return ProvisioningResult(stage=Stage.SUBMODULES, status=StageStatus.OK, detail=detail)

    def has_vcs_metadata(self) -> bool:
        """.git 可以是目录，也可以是 worktree/子模块的 gitfile"""
        return (self.repo_root / ".git").exists()

    def _per_entry(self, entries: Sequence[SubmoduleEntry]) -> list[str]:
        failed: list[str] = []
        for entry in entries:
            logger.info("  初始化 %s...", entry.path)
            if not self._update(self.repo_root, entry.path):
                logger.warning("  子模块失败（非致命）: %s", entry.path)
                failed.append(entry.path)
        return failed

    def _nested_fixup(self, entries: Sequence[SubmoduleEntry]) -> list[str]:
        failed: list[str] = []
        for entry in entries:
            if not entry.has_nested_submodules:
                continue
            entry_dir = self.repo_root / entry.path
            if not entry_dir.is_dir():
                continue
            logger.info("  初始化嵌套子模块: %s", entry.path)
            if not self._update(entry_dir):
                logger.warning("  嵌套子模块失败（非致命）: %s", entry.path)
                failed.append(entry.path)
        return failed

    def _update(self, cwd: Path, path: str = "") -> bool:
        cmd = [*GIT_SUBMODULE_UPDATE, path] if path else list(GIT_SUBMODULE_UPDATE)
        r = self.runner.run_command(cmd, cwd=cwd)
        if not r.success:
            logger.debug("  rc=%d: %s", r.returncode, r.stderr.strip()[:300])
        return r.success
