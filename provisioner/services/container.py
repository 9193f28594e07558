"""服务容器 — 统一依赖注入

各阶段服务与主机能力（命令执行、工具探测、下载、解压）都通过容器获取，
同一容器内实例共享。测试时通过构造参数注入伪实现即可模拟任意主机。

依赖关系图（→ 表示依赖）:
  submodules → runner
  packages   → runner, probe
  vcpkg      → runner
  archive    → downloader, extractor

用法:
    container = ServiceContainer(config)
    result = container.archive.provision(profile)

    # 注入伪实现
    container = ServiceContainer(config, runner=FakeRunner(), probe=FakeProbe({"apt-get"}))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from provisioner.core.config import ProvisionConfig
    from provisioner.core.protocols import CommandRunner, Downloader, Extractor, ToolProbe
    from provisioner.services.archive import ArchiveProvisioner
    from provisioner.services.packages import PackageSetTranslator
    from provisioner.services.submodules import SubmoduleProvisioner
    from provisioner.services.vcpkg import VcpkgProvisioner


class ServiceContainer:
    """懒加载服务容器 — 持有一次运行的配置、主机能力与阶段服务"""

    def __init__(
        self,
        config: ProvisionConfig,
        *,
        runner: CommandRunner | None = None,
        probe: ToolProbe | None = None,
        downloader: Downloader | None = None,
        extractor: Extractor | None = None,
        dir_exists: Callable[[str], bool] | None = None,
        euid: int | None = None,
    ) -> None:
        self._config = config
        self._instances: dict[str, object] = {}
        for key, value in (
            ("runner", runner), ("probe", probe),
            ("downloader", downloader), ("extractor", extractor),
        ):
            if value is not None:
                self._instances[key] = value
        self._dir_exists = dir_exists
        self._euid = euid

    @property
    def config(self) -> ProvisionConfig:
        return self._config

    # ---- 主机能力 ----

    @property
    def runner(self) -> CommandRunner:
        if "runner" not in self._instances:
            from provisioner.utils.shell import LocalExecutor
            self._instances["runner"] = LocalExecutor(
                default_timeout=self._config.command_timeout,
            )
        return self._instances["runner"]  # type: ignore[return-value]

    @property
    def probe(self) -> ToolProbe:
        if "probe" not in self._instances:
            from provisioner.utils.shell import LocalExecutor
            self._instances["probe"] = LocalExecutor()
        return self._instances["probe"]  # type: ignore[return-value]

    @property
    def downloader(self) -> Downloader:
        if "downloader" not in self._instances:
            from provisioner.utils.net import HttpDownloader
            self._instances["downloader"] = HttpDownloader(
                timeout=self._config.download_timeout,
                retries=self._config.download_retries,
                base_delay=self._config.retry_base_delay,
            )
        return self._instances["downloader"]  # type: ignore[return-value]

    @property
    def extractor(self) -> Extractor:
        if "extractor" not in self._instances:
            from provisioner.utils.extract import ArchiveExtractor
            self._instances["extractor"] = ArchiveExtractor()
        return self._instances["extractor"]  # type: ignore[return-value]

    # ---- 阶段服务 ----

    @property
    def submodules(self) -> SubmoduleProvisioner:
        if "submodules" not in self._instances:
            from provisioner.services.submodules import SubmoduleProvisioner
            self._instances["submodules"] = SubmoduleProvisioner(
                self.runner, repo_root=self._config.root,
            )
        return self._instances["submodules"]  # type: ignore[return-value]

    @property
    def packages(self) -> PackageSetTranslator:
        if "packages" not in self._instances:
            from provisioner.services.packages import PackageSetTranslator
            self._instances["packages"] = PackageSetTranslator(
                self.runner, self.probe, euid=self._euid,
            )
        return self._instances["packages"]  # type: ignore[return-value]

    @property
    def vcpkg(self) -> VcpkgProvisioner:
        if "vcpkg" not in self._instances:
            from provisioner.services.vcpkg import VcpkgProvisioner
            self._instances["vcpkg"] = VcpkgProvisioner(
                self.runner,
                vcpkg_root=self._config.vcpkg_root,
                triplet=self._config.vcpkg_triplet,
            )
        return self._instances["vcpkg"]  # type: ignore[return-value]

    @property
    def archive(self) -> ArchiveProvisioner:
        if "archive" not in self._instances:
            from provisioner.services.archive import ArchiveProvisioner
            kwargs = {"dir_exists": self._dir_exists} if self._dir_exists else {}
            self._instances["archive"] = ArchiveProvisioner(
                self.downloader,
                self.extractor,
                repo_root=self._config.root,
                release_url=self._config.release_url,
                **kwargs,
            )
        return self._instances["archive"]  # type: ignore[return-value]
