"""统一异常体系

所有业务异常继承 PrebuiltsError。流水线内部不做任何局部恢复，
异常直接上抛到 CLI 层，由其输出失败命令/路径并以非零状态退出。
"""

from __future__ import annotations


class PrebuiltsError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(PrebuiltsError):
    """配置文件或代码仓清单内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(PrebuiltsError):
    """代码仓 / 版本 / 库描述校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class CommandFailedError(PrebuiltsError):
    """外部命令正常结束但退出码非零"""

    code = "COMMAND_FAILED"

    def __init__(self, returncode: int, command: str) -> None:
        super().__init__(f"命令退出码 {returncode}: {command}")
        self.returncode = returncode
        self.command = command


class CommandAbortedError(PrebuiltsError):
    """外部命令被信号终止，或进程无法启动"""

    code = "COMMAND_ABORTED"

    def __init__(
        self, command: str, *, signal: int | None = None, reason: str = "",
    ) -> None:
        if signal is not None:
            message = f"命令被信号 {signal} 终止: {command}"
        else:
            message = f"命令异常终止 ({reason}): {command}"
        super().__init__(message)
        self.command = command
        self.signal = signal
        self.reason = reason


class FilesystemError(PrebuiltsError):
    """暂存目录上的文件系统操作失败"""

    code = "FILESYSTEM_ERROR"

    def __init__(self, operation: str, path: str, reason: str = "") -> None:
        message = f"文件系统操作 {operation} 失败: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.operation = operation
        self.path = path


class MissingOutputError(PrebuiltsError):
    """构建后缺少预期产物"""

    code = "MISSING_OUTPUT"

    def __init__(self, path: str) -> None:
        super().__init__(f"缺少构建产物: {path}")
        self.path = path


class ToolchainError(PrebuiltsError):
    """无法确定工具链版本"""

    code = "TOOLCHAIN_ERROR"
