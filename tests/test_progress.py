"""
測試 ProgressAggregator

定期報告使用 threading.Timer，測試中替換成可控的 FakeTimer
"""

import threading

import pytest

from core.progress import ProgressAggregator, StatsSnapshot
from fakes import DummyLogger


class FakeTimer:
    """
    可控 Timer：
    - start() 不等時間，只排入 queue
    - 測試端自己決定 fire() 何時執行
    """
    timers = []

    def __init__(self, delay, func):
        self.delay = delay
        self.func = func
        self.cancelled = False
        self.daemon = False

    def cancel(self):
        self.cancelled = True

    def start(self):
        FakeTimer.timers.append(self)

    def fire(self):
        if not self.cancelled:
            self.func()


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture(autouse=True)
def patch_threading_timer(monkeypatch):
    FakeTimer.timers.clear()
    monkeypatch.setattr(threading, "Timer", FakeTimer)
    yield
    FakeTimer.timers.clear()


@pytest.fixture
def clock():
    return FakeClock()


class TestCounters:
    """測試計數"""

    def test_record_copy(self):
        progress = ProgressAggregator()
        progress.record_copy(10)
        progress.record_copy(0)
        progress.record_copy(5)

        snap = progress.snapshot()
        assert snap.files == 3
        assert snap.bytes == 15

    def test_negative_bytes_rejected(self):
        with pytest.raises(ValueError):
            ProgressAggregator().record_copy(-1)

    def test_concurrent_updates(self):
        progress = ProgressAggregator()

        def work():
            for _ in range(1000):
                progress.record_copy(2)

        threads = [threading.Thread(target=work) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snap = progress.snapshot()
        assert snap.files == 8000
        assert snap.bytes == 16000

    def test_elapsed_uses_clock(self, clock):
        progress = ProgressAggregator(clock=clock)
        assert progress.snapshot().elapsed == 0.0

        progress.start()
        clock.now += 12.5
        assert progress.snapshot().elapsed == 12.5
        progress.stop()


class TestReporting:
    """測試定期報告"""

    def test_timer_rearms_until_stopped(self, clock):
        logger = DummyLogger()
        progress = ProgressAggregator(logger, interval=5, clock=clock)

        progress.start()
        assert len(FakeTimer.timers) == 1
        assert FakeTimer.timers[0].delay == 5
        assert FakeTimer.timers[0].daemon is True

        progress.record_copy(1024)
        FakeTimer.timers.pop(0).fire()
        assert len(logger.messages("info")) == 1
        assert len(FakeTimer.timers) == 1

        progress.stop()
        assert FakeTimer.timers[0].cancelled is True
        # stop 會輸出最後一次摘要
        assert len(logger.messages("info")) == 2

    def test_tick_after_stop_is_ignored(self, clock):
        logger = DummyLogger()
        progress = ProgressAggregator(logger, interval=5, clock=clock)
        progress.start()
        timer = FakeTimer.timers.pop(0)
        progress.stop()

        timer.func()

        assert len(logger.messages("info")) == 1
        assert FakeTimer.timers == []


class TestStatsSnapshot:
    """測試摘要格式"""

    def test_summary(self):
        snap = StatsSnapshot(files=1234, bytes=3 * 1024 * 1024, elapsed=2.0)
        text = snap.summary()

        assert "1,234" in text
        assert "3.0 MiB" in text
        assert "2s" in text
        assert "MB/sec: 1.50" in text

    def test_zero_elapsed(self):
        assert StatsSnapshot(0, 0, 0.0).mb_per_sec == 0.0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
