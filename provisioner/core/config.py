"""集中配置管理

所有阶段共享一个不可变的 ProvisionConfig，由 CLI 入口显式构造并传入，
不设全局单例。支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from provisioner.core.catalog import LOGICAL_PACKAGES, RELEASE_URL, SUBMODULES
from provisioner.core.exceptions import ConfigurationError
from provisioner.core.models import LogicalPackage, SubmoduleEntry
from provisioner.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "configs/provision.yml"


def default_vcpkg_root() -> str:
    """VcpkgRoot 环境变量优先，否则 %USERPROFILE%\\vcpkg"""
    root = os.environ.get("VcpkgRoot", "")
    if root:
        return root
    profile = os.environ.get("USERPROFILE") or str(Path.home())
    return str(Path(profile) / "vcpkg")


@dataclass(frozen=True)
class ProvisionConfig:
    """依赖准备配置（只读）"""

    # 目录
    repo_root: str = "."

    # 归档下载
    release_url: str = RELEASE_URL
    download_timeout: float = 60.0
    download_retries: int = 3
    retry_base_delay: float = 1.0

    # 外部命令
    command_timeout: float | None = None

    # Windows: vcpkg
    vcpkg_root: str = field(default_factory=default_vcpkg_root)
    vcpkg_triplet: str = "x64-windows"

    # 依赖清单
    submodules: tuple[SubmoduleEntry, ...] = SUBMODULES
    packages: tuple[LogicalPackage, ...] = LOGICAL_PACKAGES

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_CONFIG_FILE) -> ProvisionConfig:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, OSError, ValueError) as e:
            raise ConfigurationError(f"配置文件无法读取: {path} - {e}") from e
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        matched = {k: v for k, v in data.items() if k in known}
        unknown = sorted(str(k) for k in data if k not in known)
        if unknown:
            logger.warning("忽略未知配置项: %s", ", ".join(unknown))

        if "submodules" in matched:
            matched["submodules"] = _parse_submodules(matched["submodules"])
        if "packages" in matched:
            matched["packages"] = _parse_packages(matched["packages"])
        _check_numbers(matched)

        # 环境变量 VcpkgRoot 优先于配置文件
        env_vcpkg = os.environ.get("VcpkgRoot", "")
        if env_vcpkg:
            matched["vcpkg_root"] = env_vcpkg

        cfg = cls(**matched)
        logger.info("配置已加载: %s", path)
        return cfg

    def with_overrides(self, **changes: Any) -> ProvisionConfig:
        """返回覆盖部分字段后的新配置"""
        return replace(self, **changes)

    @property
    def root(self) -> Path:
        return Path(self.repo_root)


def _parse_submodules(raw: Any) -> tuple[SubmoduleEntry, ...]:
    """submodules 支持字符串或 {path, nested} 映射"""
    if not isinstance(raw, list):
        raise ConfigurationError("submodules 必须是列表")
    entries: list[SubmoduleEntry] = []
    for item in raw:
        if isinstance(item, str):
            entries.append(SubmoduleEntry(item))
        elif isinstance(item, dict) and isinstance(item.get("path"), str):
            entries.append(SubmoduleEntry(
                item["path"], has_nested_submodules=bool(item.get("nested", False)),
            ))
        else:
            raise ConfigurationError(f"无效的子模块声明: {item!r}")
    return tuple(entries)


def _parse_packages(raw: Any) -> tuple[LogicalPackage, ...]:
    if not isinstance(raw, list) or not all(isinstance(n, str) for n in raw):
        raise ConfigurationError("packages 必须是字符串列表")
    return tuple(LogicalPackage(n) for n in raw)


def _check_numbers(matched: dict[str, Any]) -> None:
    for key in ("download_timeout", "retry_base_delay"):
        if key in matched and not isinstance(matched[key], (int, float)):
            raise ConfigurationError(f"{key} 必须是数字: {matched[key]!r}")
    retries = matched.get("download_retries", 0)
    if not isinstance(retries, int) or retries < 0:
        raise ConfigurationError(f"download_retries 必须是非负整数: {retries!r}")
    timeout = matched.get("command_timeout")
    if timeout is not None and not isinstance(timeout, (int, float)):
        raise ConfigurationError(f"command_timeout 必须是数字: {timeout!r}")
