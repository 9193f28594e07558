"""网络工具 — URL 安全校验 + 带重试的归档下载"""

from __future__ import annotations

import http.client
import logging
import random
import shutil
import time
import urllib.error
import urllib.request
from pathlib import Path
from typing import Callable
from urllib.parse import urlparse

from provisioner.core.exceptions import DownloadError, ValidationError

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = frozenset(("http", "https"))

# 这些 4xx 状态码属于暂时性错误，可以重试
_RETRYABLE_CLIENT_CODES = frozenset((408, 429))


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )


def retry_delay_seconds(attempt: int, base_delay: float = 1.0, max_delay: float = 30.0) -> float:
    """指数退避 + 25% 抖动"""
    capped = min(base_delay * (2 ** max(0, attempt - 1)), max_delay)
    return capped + random.random() * 0.25 * capped


class HttpDownloader:
    """HTTP 归档下载器

    每次请求带显式超时；网络错误、超时与 5xx 按指数退避重试，
    其余 4xx（如 404）立即失败。连接中途断开（IncompleteRead 等）同样重试。
    失败或被中断时删除半成品文件。
    """

    def __init__(
        self,
        timeout: float = 60.0,
        retries: int = 3,
        base_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.timeout = timeout
        self.retries = retries
        self.base_delay = base_delay
        self._sleep = sleep

    def download(self, url: str, dest: Path) -> Path:
        validate_url_scheme(url, context="archive download")
        dest.parent.mkdir(parents=True, exist_ok=True)

        attempts = self.retries + 1
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                self._fetch_once(url, dest)
                logger.info("  已保存: %s", dest)
                return dest
            except urllib.error.HTTPError as e:
                dest.unlink(missing_ok=True)
                if e.code < 500 and e.code not in _RETRYABLE_CLIENT_CODES:
                    raise DownloadError(f"下载失败: {url} - HTTP {e.code}") from e
                last_error = e
            except (urllib.error.URLError, OSError, http.client.HTTPException) as e:
                dest.unlink(missing_ok=True)
                last_error = e

            if attempt < attempts:
                delay = retry_delay_seconds(attempt, self.base_delay)
                logger.warning(
                    "  下载失败，%.1fs 后重试 (%d/%d): %s",
                    delay, attempt, self.retries, last_error,
                )
                self._sleep(delay)

        raise DownloadError(f"下载失败: {url} - {last_error}") from last_error

    def _fetch_once(self, url: str, dest: Path) -> None:
        logger.info("  下载: %s", url)
        req = urllib.request.Request(url, headers={"User-Agent": "deps-provisioner"})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:  # nosec B310
                with open(dest, "wb") as f:
                    shutil.copyfileobj(resp, f)
        except KeyboardInterrupt:
            dest.unlink(missing_ok=True)
            raise
