"""测试公共夹具 — 主机能力伪实现

编排逻辑只依赖 CommandRunner / ToolProbe / Downloader / Extractor 协议，
这里的伪实现记录调用并按需模拟失败，不触碰真实 git / 包管理器 / 网络。
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import pytest

from provisioner.utils.shell import CommandResult


class FakeRunner:
    """记录命令的执行器；fail(cmd, cwd) 返回 True 表示该命令失败"""

    def __init__(self, fail: Callable[[tuple[str, ...], str], bool] | None = None) -> None:
        self.calls: list[tuple[tuple[str, ...], str]] = []
        self._fail = fail or (lambda cmd, cwd: False)

    def run_command(
        self,
        cmd: Sequence[str],
        *,
        cwd: str | Path = ".",
        timeout: float | None = None,
        capture: bool = True,
    ) -> CommandResult:
        key = tuple(str(c) for c in cmd)
        self.calls.append((key, str(cwd)))
        if self._fail(key, str(cwd)):
            return CommandResult(returncode=1, stderr="simulated failure")
        return CommandResult(returncode=0)

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [c for c, _ in self.calls]


class FakeProbe:
    """只认为给定工具存在"""

    def __init__(self, tools: Sequence[str] = ()) -> None:
        self.tools = set(tools)
        self.asked: list[str] = []

    def has_tool(self, name: str) -> bool:
        self.asked.append(name)
        return name in self.tools


class FakeDownloader:
    """成功时把 payload 写到目标路径，否则抛出 error"""

    def __init__(self, payload: bytes = b"", error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.urls: list[str] = []

    def download(self, url: str, dest: Path) -> Path:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(self.payload)
        return dest


class FakeExtractor:
    """记录解压调用，并在目标目录写入标记文件"""

    def __init__(self) -> None:
        self.calls: list[tuple[Path, Path]] = []

    def extract(self, archive: Path, dest: Path) -> None:
        assert archive.exists()
        self.calls.append((archive, dest))
        (dest / "extracted.txt").write_text(archive.name)


@pytest.fixture
def fake_runner_cls() -> type[FakeRunner]:
    return FakeRunner


@pytest.fixture
def fake_probe_cls() -> type[FakeProbe]:
    return FakeProbe


@pytest.fixture
def fake_downloader_cls() -> type[FakeDownloader]:
    return FakeDownloader


@pytest.fixture
def fake_extractor_cls() -> type[FakeExtractor]:
    return FakeExtractor


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """带 .git 目录的伪工作树"""
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    return repo
