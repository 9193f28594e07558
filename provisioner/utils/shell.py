"""Shell 命令执行工具 — 统一子进程调用

LocalExecutor 实现 CommandRunner / ToolProbe 协议，编排逻辑通过协议调用，
测试时注入伪实现，无需 patch subprocess。
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from provisioner.core.exceptions import ExecutionError
from provisioner.core.protocols import CommandRunner

logger = logging.getLogger(__name__)


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


# =========================================================================
# 默认实现: 本地执行器
# =========================================================================

class LocalExecutor:
    """本地子进程执行器

    capture=False 时输出直接透传到终端（包管理器的进度信息需要用户可见）。
    命令不存在或超时不抛异常，统一折算为非零返回码。
    """

    def __init__(self, default_timeout: float | None = None) -> None:
        self.default_timeout = default_timeout

    def run_command(
        self,
        cmd: Sequence[str],
        *,
        cwd: str | Path = ".",
        timeout: float | None = None,
        capture: bool = True,
    ) -> CommandResult:
        args = [str(c) for c in cmd]
        logger.debug("执行: %s (cwd=%s)", " ".join(args), cwd)
        try:
            r = subprocess.run(
                args, capture_output=capture, text=True,
                cwd=str(cwd), check=False,
                timeout=timeout if timeout is not None else self.default_timeout,
            )
        except FileNotFoundError as e:
            return CommandResult(returncode=127, stderr=str(e))
        except subprocess.TimeoutExpired as e:
            return CommandResult(returncode=124, stderr=f"命令超时 ({e.timeout}s)")
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout or "",
            stderr=r.stderr or "",
        )

    def has_tool(self, name: str) -> bool:
        return shutil.which(name) is not None


# =========================================================================
# 便捷函数
# =========================================================================

def run_cmd(
    runner: CommandRunner,
    cmd: Sequence[str], *, cwd: str | Path = ".",
    label: str = "cmd",
    capture: bool = True,
) -> CommandResult:
    """执行命令，失败抛 ExecutionError

    Args:
        runner: 命令执行器
        cmd: 命令参数列表
        cwd: 工作目录
        label: 日志标签
        capture: 是否捕获输出
    """
    logger.info("  %s: %s (cwd=%s)", label, " ".join(cmd), cwd)
    r = runner.run_command(cmd, cwd=cwd, capture=capture)
    if not r.success:
        raise ExecutionError(f"{label}失败 (rc={r.returncode}): {r.stderr[:500]}")
    return r
