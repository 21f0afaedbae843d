"""
傳輸工作單元
將單一物件版本由來源串流複製到目的端，並寫入包含指紋的 metadata
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from .context import RunContext
from .errors import SyncCancelled, TransferError
from .fingerprint import FingerprintPolicy
from .progress import ProgressAggregator
from .storage import DestinationStore, ObjectVersion, SourceObjectStream, SourceStore
from utils import SyncLogger


@dataclass(frozen=True)
class TransferTask:
    """一個待複製的物件版本"""
    version: ObjectVersion

    @property
    def key(self) -> str:
        return self.version.key

    @property
    def version_id(self) -> str:
        return self.version.version_id


class TransferWorker:
    """物件版本複製器（可在多個執行緒間共用，本身不持有可變狀態）"""

    def __init__(
        self,
        source: SourceStore,
        destination: DestinationStore,
        progress: ProgressAggregator,
        context: RunContext,
        logger: Optional[SyncLogger] = None
    ):
        self.source = source
        self.destination = destination
        self.progress = progress
        self.context = context
        self.logger = logger

    def transfer(self, task: TransferTask) -> int:
        """
        複製單一版本

        步驟：開啟來源串流 → 開啟目的端寫入 → 逐塊複製 → 完成寫入 →
        更新 metadata（來源 metadata + 指紋）→ 計入統計

        Returns:
            複製的位元組數

        Raises:
            TransferError: 任一步驟失敗
            SyncCancelled: 執行已被取消
        """
        self.context.raise_if_cancelled()

        try:
            stream = self.source.get_object_stream(task.key, task.version_id)
        except Exception as e:
            raise TransferError(task.key, task.version_id, e) from e

        try:
            copied = self._copy_stream(stream, task.key)
            metadata = FingerprintPolicy.build_destination_metadata(
                stream.metadata,
                stream.fingerprint
            )
            self.destination.update_metadata(task.key, metadata)
        except SyncCancelled:
            raise
        except Exception as e:
            raise TransferError(task.key, task.version_id, e) from e
        finally:
            stream.close()

        self.progress.record_copy(copied)

        if self.logger:
            self.logger.debug(
                f"已複製 {task.key} (version: {task.version_id}, {copied} bytes)"
            )
        return copied

    def transfer_batch(self, tasks: Iterable[TransferTask]) -> int:
        """依傳入順序複製同一個 key 的多個版本"""
        total = 0
        for task in tasks:
            total += self.transfer(task)
        return total

    def _copy_stream(self, stream: SourceObjectStream, key: str) -> int:
        writer = self.destination.open_writer(key)
        copied = 0

        # 失敗或取消時不呼叫 close：未完成的寫入不會在目的端產生物件
        for chunk in stream.chunks:
            self.context.raise_if_cancelled()
            if not chunk:
                continue
            writer.write(chunk)
            copied += len(chunk)

        writer.close()
        return copied

