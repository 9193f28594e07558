"""deps-provision 命令行接口

POSIX 与 Windows 共用同一入口，Windows 风格的 -SkipVcpkg / -SkipBuildDeps
作为别名接受。未知参数在任何阶段执行前失败，退出码 1。
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Callable, Sequence

import click

from provisioner import __version__
from provisioner.core.config import DEFAULT_CONFIG_FILE, ProvisionConfig
from provisioner.core.exceptions import ConfigurationError
from provisioner.core.models import ProvisionOptions
from provisioner.services.container import ServiceContainer
from provisioner.services.orchestrator import Driver
from provisioner.utils.logger import setup_logging

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130

ContainerFactory = Callable[[ProvisionConfig], ServiceContainer]


@click.command(
    name="deps-provision",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__)
@click.option("--skip-submodules", is_flag=True, help="跳过 Git 子模块初始化")
@click.option(
    "--skip-packages", "--skip-vcpkg", "-SkipVcpkg", is_flag=True,
    help="跳过系统包安装（Windows 上为 vcpkg）",
)
@click.option(
    "--skip-build-deps", "-SkipBuildDeps", is_flag=True,
    help="跳过 FFmpeg 预编译依赖下载",
)
@click.option(
    "--repo-root", default=None, type=click.Path(file_okay=False),
    help="源码仓库根目录（默认取配置 repo_root，未配置时为当前目录）",
)
@click.option("--config", "config_path", default=DEFAULT_CONFIG_FILE, help="配置文件路径")
@click.pass_context
def cli(
    ctx: click.Context,
    skip_submodules: bool, skip_packages: bool, skip_build_deps: bool,
    repo_root: str | None, config_path: str,
) -> int:
    """准备原生构建所需的子模块、系统包与预编译依赖"""
    setup_logging(
        level=os.getenv("PROVISION_LOG_LEVEL", "INFO"),
        json_output=os.getenv("PROVISION_LOG_JSON", "") == "1",
    )

    config = ProvisionConfig.from_file(config_path)
    if repo_root:
        config = config.with_overrides(repo_root=repo_root)

    obj: dict[str, Any] = ctx.obj or {}
    factory: ContainerFactory = obj.get("container_factory", ServiceContainer)
    driver = Driver(factory(config))
    return driver.run(ProvisionOptions(
        skip_submodules=skip_submodules,
        skip_packages=skip_packages,
        skip_build_deps=skip_build_deps,
    ))


def main(argv: Sequence[str] | None = None, obj: dict[str, Any] | None = None) -> int:
    """解析参数并执行，返回进程退出码"""
    try:
        rv = cli.main(
            args=list(argv) if argv is not None else None,
            prog_name="deps-provision",
            standalone_mode=False,
            obj=obj,
        )
    except click.UsageError as e:
        err = ConfigurationError(e.format_message())
        click.echo(f"错误: {err}", err=True)
        return err.exit_code
    except ConfigurationError as e:
        click.echo(f"配置错误: {e}", err=True)
        return e.exit_code
    except click.exceptions.Abort:
        click.echo("已中断", err=True)
        return EXIT_INTERRUPTED
    return rv if isinstance(rv, int) else 0


def run() -> None:
    """console_scripts 入口"""
    sys.exit(main())
