"""预编译 FFmpeg 归档准备

按平台键拼出下载地址，下载到临时目录后解压到
third-party/build-deps/dist/<platform_key>/。

下载失败（404、网络错误、超时）不视为致命: 探测系统库目录并给出
手工配置提示，阶段结果为 degraded，因为预编译包缺失有文档化的
手工替代方案（FFMPEG_PREPARED_BINARIES / 系统 FFmpeg 开发包）。
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable

from provisioner.core.catalog import (
    ARCHIVE_PREFIX,
    BUILD_DEPS_DIR,
    RELEASE_URL,
    library_candidates,
)
from provisioner.core.exceptions import DownloadError, ProvisioningFailure, ValidationError
from provisioner.core.models import (
    ArchiveSpec,
    OsFamily,
    PlatformProfile,
    ProvisioningResult,
    Stage,
    StageStatus,
)
from provisioner.core.protocols import Downloader, Extractor

logger = logging.getLogger(__name__)

_FAMILY_KEYS = {
    OsFamily.LINUX: "Linux",
    OsFamily.WINDOWS: "Windows",
    OsFamily.MACOS: "Darwin",
    OsFamily.UNKNOWN: "Unknown",
}

# Windows 分支只发布 x86_64 归档
_WINDOWS_ARCH = "x86_64"


def platform_key(profile: PlatformProfile) -> str:
    """平台键只由 os_family 和 arch 决定"""
    if profile.os_family is OsFamily.WINDOWS:
        return f"Windows-{_WINDOWS_ARCH}"
    return f"{_FAMILY_KEYS[profile.os_family]}-{profile.arch}"


def archive_spec(
    profile: PlatformProfile,
    release_url: str = RELEASE_URL,
    repo_root: str | Path = ".",
) -> ArchiveSpec:
    key = platform_key(profile)
    ext = ".zip" if profile.is_windows else ".tar.gz"
    name = f"{ARCHIVE_PREFIX}-{key}{ext}"
    dest = Path(repo_root) / BUILD_DEPS_DIR / "dist" / key
    return ArchiveSpec(
        platform_key=key,
        url=f"{release_url.rstrip('/')}/{name}",
        destination_dir=str(dest),
        archive_name=name,
    )


class ArchiveProvisioner:
    """下载并解压平台预编译归档，失败时降级为系统库提示"""

    def __init__(
        self,
        downloader: Downloader,
        extractor: Extractor,
        repo_root: str | Path = ".",
        release_url: str = RELEASE_URL,
        dir_exists: Callable[[str], bool] = os.path.isdir,
    ) -> None:
        self.downloader = downloader
        self.extractor = extractor
        self.repo_root = Path(repo_root)
        self.release_url = release_url
        self._dir_exists = dir_exists

    def provision(self, profile: PlatformProfile) -> ProvisioningResult:
        spec = archive_spec(profile, self.release_url, self.repo_root)
        dest = Path(spec.destination_dir)
        dest.mkdir(parents=True, exist_ok=True)

        logger.info("  尝试下载: %s", spec.url)
        tmp_dir = Path(tempfile.mkdtemp(prefix="deps-provision-"))
        try:
            archive = tmp_dir / spec.archive_name
            try:
                self.downloader.download(spec.url, archive)
            except (DownloadError, ValidationError) as e:
                logger.warning("  无法下载预编译 FFmpeg: %s", e)
                return self._degrade(profile, f"下载失败: {e}")

            logger.info("  解压到: %s", dest)
            try:
                self.extractor.extract(archive, dest)
            except (ProvisioningFailure, OSError) as e:
                logger.warning("  解压失败: %s", e)
                return self._degrade(profile, f"解压失败: {e}")
        finally:
            shutil.rmtree(tmp_dir, ignore_errors=True)

        logger.info("  FFmpeg 预编译包已就绪")
        return ProvisioningResult(
            stage=Stage.ARCHIVE,
            status=StageStatus.OK,
            detail=f"{spec.platform_key} -> {dest}",
        )

    def find_system_library_dir(self, profile: PlatformProfile) -> str | None:
        """按优先级探测系统库目录，先存在者生效"""
        if profile.is_windows:
            return None
        for candidate in library_candidates(profile.arch):
            if self._dir_exists(candidate):
                return candidate
        return None

    def _degrade(self, profile: PlatformProfile, detail: str) -> ProvisioningResult:
        logger.info("  尝试改用系统 FFmpeg...")
        advisories: list[str] = []
        lib_dir = self.find_system_library_dir(profile)
        if lib_dir:
            advisories.append(f"系统库目录: {lib_dir}")
        advisories.append(
            "可能需要设置 CMake 选项 FFMPEG_PREPARED_BINARIES，或安装 FFmpeg 开发包"
        )
        return ProvisioningResult(
            stage=Stage.ARCHIVE,
            status=StageStatus.DEGRADED,
            detail=detail,
            advisories=advisories,
        )
