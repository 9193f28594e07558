"""领域数据模型

数据类:
- PlatformProfile: 主机平台画像（OS 家族 / 架构 / 包管理器）
- LogicalPackage / PackageManagerProfile: 逻辑包与包管理器映射
- SubmoduleEntry: 子模块声明
- ArchiveSpec: 预编译归档描述
- ProvisioningResult / RunReport: 阶段结果与汇总
- ProvisionOptions: 阶段跳过开关
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Sequence, Union


class OsFamily(str, Enum):
    LINUX = "linux"
    WINDOWS = "windows"
    MACOS = "macos"
    UNKNOWN = "unknown"


class PackageManager(str, Enum):
    APT = "apt"
    DNF = "dnf"
    PACMAN = "pacman"
    BREW = "brew"
    NONE = "none"


class Stage(str, Enum):
    SUBMODULES = "submodules"
    PACKAGES = "packages"
    ARCHIVE = "archive"


class StageStatus(str, Enum):
    OK = "ok"
    SKIPPED = "skipped"
    DEGRADED = "degraded"
    FAILED = "failed"


# =========================================================================
# 平台画像
# =========================================================================

@dataclass(frozen=True)
class PlatformProfile:
    """主机平台画像，每次运行只解析一次，之后只读"""

    os_family: OsFamily
    arch: str
    package_manager: PackageManager = PackageManager.NONE

    @property
    def is_windows(self) -> bool:
        return self.os_family is OsFamily.WINDOWS


# =========================================================================
# 包映射
# =========================================================================

PackageNames = Union[str, Sequence[str]]


@dataclass(frozen=True)
class LogicalPackage:
    """与包管理器无关的依赖标识"""

    name: str


@dataclass(frozen=True)
class PackageManagerProfile:
    """单个包管理器的安装命令与包名映射"""

    manager: PackageManager
    install_command: tuple[str, ...]
    package_name_map: Mapping[str, PackageNames]
    pre_install_commands: tuple[tuple[str, ...], ...] = ()
    needs_elevation: bool = True

    def translate(self, packages: Sequence[LogicalPackage]) -> list[str]:
        """按声明顺序展开逻辑包，一对多映射会被拍平。

        映射表中不存在的逻辑包对该管理器跳过（如 brew 没有 X11 包）。
        """
        names: list[str] = []
        for pkg in packages:
            mapped = self.package_name_map.get(pkg.name)
            if mapped is None:
                continue
            if isinstance(mapped, str):
                names.append(mapped)
            else:
                names.extend(mapped)
        return names


# =========================================================================
# 子模块 / 归档
# =========================================================================

@dataclass(frozen=True)
class SubmoduleEntry:
    """子模块声明；has_nested_submodules 表示其内部还有子模块"""

    path: str
    has_nested_submodules: bool = False


@dataclass(frozen=True)
class ArchiveSpec:
    """预编译归档: 平台键 + 下载地址 + 解压目标目录"""

    platform_key: str
    url: str
    destination_dir: str
    archive_name: str


# =========================================================================
# 结果
# =========================================================================

@dataclass
class ProvisioningResult:
    """单个阶段的执行结果，仅供 Driver 汇总展示"""

    stage: Stage
    status: StageStatus
    detail: str = ""
    advisories: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.status is StageStatus.FAILED


@dataclass
class RunReport:
    """一次运行的阶段结果汇总"""

    results: list[ProvisioningResult] = field(default_factory=list)

    @property
    def exit_status(self) -> int:
        return 1 if any(r.failed for r in self.results) else 0

    @property
    def degraded(self) -> list[ProvisioningResult]:
        return [r for r in self.results if r.status is StageStatus.DEGRADED]

    def get(self, stage: Stage) -> ProvisioningResult | None:
        for r in self.results:
            if r.stage is stage:
                return r
        return None


@dataclass(frozen=True)
class ProvisionOptions:
    """阶段跳过开关"""

    skip_submodules: bool = False
    skip_packages: bool = False
    skip_build_deps: bool = False
