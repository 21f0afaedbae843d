"""
進度彙整器
執行緒安全地累計已複製的檔案數與位元組數，並定期輸出傳輸速率
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from utils import SyncLogger, LogIcons
from utils.formatting import format_bytes, format_count, format_duration


@dataclass(frozen=True)
class StatsSnapshot:
    """SyncStats 的唯讀快照"""
    files: int
    bytes: int
    elapsed: float

    @property
    def mb_per_sec(self) -> float:
        if self.elapsed <= 0:
            return 0.0
        return self.bytes / self.elapsed / (1024 * 1024)

    def summary(self) -> str:
        return (
            f"已複製 {format_count(self.files)} 個檔案，"
            f"總大小: {format_bytes(self.bytes)}，"
            f"耗時: {format_duration(self.elapsed)}，"
            f"MB/sec: {self.mb_per_sec:.2f}"
        )


class ProgressAggregator:
    """同步統計（唯一跨執行緒共享的可變狀態）"""

    def __init__(
        self,
        logger: Optional[SyncLogger] = None,
        interval: float = 5.0,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Args:
            logger: 日誌記錄器（None 時不輸出報告）
            interval: 定期報告間隔（秒）
            clock: 時間來源，測試時可替換
        """
        self.logger = logger
        self.interval = interval
        self._clock = clock

        self._lock = threading.Lock()
        self._files = 0
        self._bytes = 0
        self._started_at: Optional[float] = None

        self._timer_lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._running = False

    # ─────────────────────────────────────────────────────────────
    # 計數
    # ─────────────────────────────────────────────────────────────
    def record_copy(self, num_bytes: int) -> None:
        """記錄一個已完成的版本複製"""
        if num_bytes < 0:
            raise ValueError(f"位元組數不可為負: {num_bytes}")
        with self._lock:
            self._files += 1
            self._bytes += num_bytes

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            if self._started_at is None:
                elapsed = 0.0
            else:
                elapsed = self._clock() - self._started_at
            return StatsSnapshot(self._files, self._bytes, elapsed)

    # ─────────────────────────────────────────────────────────────
    # 定期報告
    # ─────────────────────────────────────────────────────────────
    def start(self) -> None:
        """開始計時並啟動定期報告"""
        with self._lock:
            self._started_at = self._clock()
        with self._timer_lock:
            self._running = True
            self._arm_timer()

    def stop(self) -> StatsSnapshot:
        """停止定期報告並輸出最後一次摘要"""
        with self._timer_lock:
            self._running = False
            if self._timer:
                self._timer.cancel()
                self._timer = None
        return self.report()

    def report(self) -> StatsSnapshot:
        snap = self.snapshot()
        if self.logger:
            self.logger.info(LogIcons.PROGRESS, snap.summary())
        return snap

    def _arm_timer(self) -> None:
        # 需持有 _timer_lock
        t = threading.Timer(self.interval, self._on_tick)
        t.daemon = True
        self._timer = t
        t.start()

    def _on_tick(self) -> None:
        with self._timer_lock:
            if not self._running:
                return
        self.report()
        with self._timer_lock:
            if self._running:
                self._arm_timer()
