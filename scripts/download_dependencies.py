#!/usr/bin/env python3
"""依赖准备入口脚本

供构建文档直接调用，--repo-root 默认为本脚本的上级目录。

用法:
    python scripts/download_dependencies.py [--skip-submodules] [--skip-packages] [--skip-build-deps]

    # Windows
    python scripts/download_dependencies.py -SkipVcpkg -SkipBuildDeps
"""

from __future__ import annotations

import sys
from pathlib import Path

from provisioner.cli import main

REPO_ROOT = Path(__file__).resolve().parent.parent


if __name__ == "__main__":
    argv = sys.argv[1:]
    if "--repo-root" not in argv:
        argv = ["--repo-root", str(REPO_ROOT), *argv]
    sys.exit(main(argv))
