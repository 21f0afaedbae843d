"""
執行上下文
一次同步共用一個可取消旗標，任何元件發生致命錯誤都可以終止整次執行
"""

import threading
from typing import Optional

from .errors import SyncCancelled


class RunContext:
    """可取消的執行上下文"""

    def __init__(self):
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._error: Optional[BaseException] = None

    def cancel(self, error: Optional[BaseException] = None) -> None:
        """標記取消；只保留第一個致命錯誤"""
        with self._lock:
            if self._error is None and error is not None:
                self._error = error
            self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def raise_if_cancelled(self) -> None:
        if self._cancelled.is_set():
            raise SyncCancelled("同步已取消")
