"""统一异常体系

所有业务异常继承 ProvisionError，替代散落的 ValueError / RuntimeError。
CLI 层可据此输出友好提示并映射退出码。
"""

from __future__ import annotations


class ProvisionError(Exception):
    """工具基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigurationError(ProvisionError):
    """命令行参数或配置文件无效，在任何阶段执行前终止"""

    code = "CONFIG_ERROR"
    exit_code = 1


class ProvisioningFailure(ProvisionError):
    """某个准备阶段失败"""

    code = "PROVISIONING_FAILURE"


class ExecutionError(ProvisionError):
    """外部命令返回非零退出码"""

    code = "EXECUTION_ERROR"


class DownloadError(ProvisionError, ConnectionError):
    """归档下载失败（网络错误、HTTP 错误、超时）"""

    code = "DOWNLOAD_ERROR"


class ValidationError(ProvisionError, ValueError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"
