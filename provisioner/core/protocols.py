"""主机能力协议定义

编排逻辑只依赖以下窄接口，不直接调用 subprocess / urllib / tarfile:
- CommandRunner: 执行外部命令（git、包管理器、vcpkg）
- ToolProbe: 探测可执行文件是否存在
- Downloader: 下载归档
- Extractor: 解压归档

使用 typing.Protocol 而非 ABC，测试时注入伪实现即可模拟任意主机。
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from provisioner.utils.shell import CommandResult


class CommandRunner(Protocol):
    """外部命令执行协议"""

    def run_command(
        self,
        cmd: Sequence[str],
        *,
        cwd: str | Path = ".",
        timeout: float | None = None,
        capture: bool = True,
    ) -> CommandResult:
        """执行命令并返回结果，不因非零退出码抛异常"""
        ...


class ToolProbe(Protocol):
    """工具存在性探测协议"""

    def has_tool(self, name: str) -> bool:
        ...


class Downloader(Protocol):
    """归档下载协议"""

    def download(self, url: str, dest: Path) -> Path:
        """下载 url 到 dest，失败抛 DownloadError / ValidationError"""
        ...


class Extractor(Protocol):
    """归档解压协议"""

    def extract(self, archive: Path, dest: Path) -> None:
        """解压 archive 到 dest，覆盖已有文件"""
        ...
