"""归档解压工具 — tar.gz / zip"""

from __future__ import annotations

import logging
import tarfile
import zipfile
import zlib
from pathlib import Path

from provisioner.core.exceptions import ProvisioningFailure

logger = logging.getLogger(__name__)


class ArchiveExtractor:
    """按扩展名分派的解压器，已存在的文件被覆盖"""

    def extract(self, archive: Path, dest: Path) -> None:
        dest.mkdir(parents=True, exist_ok=True)
        try:
            if archive.name.endswith(".zip"):
                self._extract_zip(archive, dest)
            else:
                with tarfile.open(archive) as tf:
                    tf.extractall(path=str(dest), filter="data")  # noqa: S202
        # 截断的 gzip 流抛 EOFError，损坏的压缩块抛 zlib.error
        except (tarfile.TarError, zipfile.BadZipFile, EOFError, zlib.error) as e:
            raise ProvisioningFailure(f"解压失败 {archive.name}: {e}") from e
        logger.info("  已解压: %s -> %s", archive.name, dest)

    @staticmethod
    def _extract_zip(archive: Path, dest: Path) -> None:
        root = dest.resolve()
        with zipfile.ZipFile(archive) as zf:
            for member in zf.namelist():
                target = (root / member).resolve()
                if target != root and root not in target.parents:
                    raise ProvisioningFailure(f"zip 成员越界: {member}")
            zf.extractall(path=str(dest))
