"""子进程句柄：持有一次外部命令的生命周期，阻塞等待退出码并收集输出。"""

from __future__ import annotations

from dataclasses import dataclass
import subprocess
from typing import Optional, Sequence

from framecut.core.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class ExitResult:
    """子进程结束后的退出码与输出。

    - returncode: 进程退出码；无法启动时为 None。
    - spawn_error: 启动失败时的异常描述（如可执行文件不存在）。
    """

    returncode: Optional[int]
    stdout: str
    stderr: str
    spawn_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.spawn_error is None and self.returncode == 0

    def diagnostics(self) -> str:
        """拼接诊断信息，供异常消息携带。"""

        if self.spawn_error:
            return self.spawn_error
        return self.stderr


class ProcessHandle:
    """单个外部进程的封装，`run()` 一次性阻塞直到进程退出。"""

    def __init__(self, args: Sequence[str], *, timeout: Optional[float] = None) -> None:
        if not args:
            raise ValueError("args must not be empty")
        self.args = [str(arg) for arg in args]
        self.timeout = timeout

    def run(self) -> ExitResult:
        logger.debug("运行外部命令: %s", " ".join(self.args))
        try:
            completed = subprocess.run(
                self.args,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            # 启动失败或超时；超时时 subprocess.run 已负责杀掉子进程
            return ExitResult(returncode=None, stdout="", stderr="", spawn_error=f"{self.args[0]}: {exc}")
        return ExitResult(
            returncode=completed.returncode,
            stdout=completed.stdout.decode("utf-8", errors="replace"),
            stderr=completed.stderr.decode("utf-8", errors="replace"),
        )
