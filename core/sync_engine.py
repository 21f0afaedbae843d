"""
同步引擎
分頁列舉來源物件 → 決策 → 展開版本 → 並發複製 → 彙整統計
"""

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .context import RunContext
from .decision import Decision, decide, is_directory_marker
from .errors import ConflictError, ListingError, SyncCancelled, TransferError
from .progress import ProgressAggregator, StatsSnapshot
from .prober import DestinationProber
from .storage import DestinationStore, ObjectPage, SourceObject, SourceStore
from .transfer import TransferTask, TransferWorker
from .versions import VersionEnumerator
from utils import SyncLogger, LogIcons


class SyncState(Enum):
    IDLE = "idle"
    LISTING = "listing"
    PROCESSING_PAGE = "processing_page"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SyncResult:
    """一次同步的結果"""
    ok: bool
    stats: StatsSnapshot
    error: Optional[BaseException] = None
    pages: int = 0
    skipped: int = 0


class SyncEngine:
    """單向同步驅動器（來源 → 目的端）"""

    def __init__(
        self,
        source: SourceStore,
        destination: DestinationStore,
        logger: SyncLogger,
        force: bool = False,
        prefix: str = "",
        max_workers: int = 16,
        report_interval: float = 5.0,
        dry_run: bool = False,
        versioning_enabled: Optional[bool] = None,
        progress: Optional[ProgressAggregator] = None
    ):
        """
        初始化同步引擎

        Args:
            source: 來源儲存
            destination: 目的端儲存
            logger: 日誌記錄器
            force: 略過指紋比對，刪除目的端既有物件後重新複製
            prefix: 只同步此前綴下的物件
            max_workers: 每頁的最大並發傳輸數
            report_interval: 進度報告間隔（秒）
            dry_run: 只輸出決策，不刪除也不複製
            versioning_enabled: 來源是否開啟版本控制（None 時於執行時查詢）
            progress: 進度彙整器（None 時自動建立）
        """
        self.source = source
        self.destination = destination
        self.logger = logger
        self.force = force
        self.prefix = prefix or ""
        self.max_workers = max_workers
        self.dry_run = dry_run
        self.versioning_enabled = versioning_enabled

        self.progress = progress or ProgressAggregator(logger, interval=report_interval)
        self.context = RunContext()
        self.prober = DestinationProber(destination)
        self.versions = VersionEnumerator(source)
        self.worker = TransferWorker(
            source,
            destination,
            self.progress,
            self.context,
            logger
        )

        self.state = SyncState.IDLE
        self._pages = 0
        self._skipped = 0

    def run(self) -> SyncResult:
        """
        執行同步（核心流程）

        任何致命錯誤都會取消整次執行並回傳 ok=False 的結果，
        由呼叫端決定如何結束程序
        """
        self.progress.start()
        try:
            if self.versioning_enabled is None:
                self.versioning_enabled = self._query_versioning()

            page_token: Optional[str] = None
            while True:
                self.state = SyncState.LISTING
                page = self._list_page(page_token)
                self._pages += 1

                self.state = SyncState.PROCESSING_PAGE
                self._process_page(page)

                if not page.next_token:
                    break
                page_token = page.next_token

            self.state = SyncState.DONE

        except Exception as e:
            self.context.cancel(e)
            self.state = SyncState.FAILED

        except BaseException:
            # KeyboardInterrupt 等：通知進行中的傳輸停止後往上拋
            self.context.cancel()
            self.state = SyncState.FAILED
            raise

        finally:
            stats = self.progress.stop()

        if self.state is SyncState.FAILED:
            error = self.context.error
            self.logger.error(LogIcons.ERROR, f"同步失敗: {error}")
            return SyncResult(False, stats, error, self._pages, self._skipped)

        self.logger.success(LogIcons.COMPLETE, "同步完成")
        return SyncResult(True, stats, None, self._pages, self._skipped)

    # ─────────────────────────────────────────────────────────────
    # 列舉
    # ─────────────────────────────────────────────────────────────
    def _query_versioning(self) -> bool:
        try:
            enabled = self.source.is_versioning_enabled()
        except Exception as e:
            raise ListingError(f"無法取得版本控制狀態: {e}") from e
        self.logger.info(LogIcons.CONNECT, f"來源 bucket 版本控制: {enabled}")
        return enabled

    def _list_page(self, page_token: Optional[str]) -> ObjectPage:
        try:
            return self.source.list_objects(self.prefix, page_token)
        except Exception as e:
            raise ListingError(f"列出來源物件失敗: {e}") from e

    # ─────────────────────────────────────────────────────────────
    # 單頁處理
    # ─────────────────────────────────────────────────────────────
    def _process_page(self, page: ObjectPage) -> None:
        """
        依列舉順序決策並派送傳輸，等待本頁全部完成後才返回

        同一頁內最多 max_workers 個 key 同時傳輸；
        同一 key 的多個版本在同一個工作中依序複製
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures: Dict[Future, str] = {}
            try:
                for obj in page.objects:
                    self.context.raise_if_cancelled()
                    tasks = self._plan(obj)
                    if tasks:
                        future = executor.submit(self._run_batch, tasks)
                        futures[future] = obj.key

                # 頁面屏障
                for future in as_completed(futures):
                    future.result()

            except BaseException as e:
                if not isinstance(e, SyncCancelled):
                    self.context.cancel(e)
                for future in futures:
                    future.cancel()
                raise

    def _run_batch(self, tasks: List[TransferTask]) -> int:
        try:
            return self.worker.transfer_batch(tasks)
        except SyncCancelled:
            raise
        except BaseException as e:
            self.context.cancel(e)
            raise

    def _plan(self, obj: SourceObject) -> List[TransferTask]:
        """
        決定單一物件是否需要複製，需要時回傳其所有版本的傳輸任務

        Raises:
            ConflictError: 指紋不一致且未指定 force
        """
        key = obj.key

        if is_directory_marker(key):
            self.logger.debug(f"略過資料夾物件: {key!r}")
            self._skipped += 1
            return []

        probe = self.prober.probe(key)
        decision = decide(obj.fingerprint, probe, self.force)

        if decision is Decision.SKIP:
            self.logger.info(LogIcons.MATCH, f"物件 {key} 一致 (ETag: {obj.fingerprint})")
            self._skipped += 1
            return []

        if decision is Decision.CONFLICT:
            raise ConflictError(key, obj.fingerprint, key, probe.fingerprint)

        if probe.found and not self.force and probe.fingerprint is None:
            self.logger.warning(
                LogIcons.WARNING,
                f"GCS 物件: {key}\n"
                f"  metadata 中找不到 ETag – 物件可能已損毀，強制複製"
            )

        if self.dry_run:
            self.logger.info(LogIcons.NOTE, f"[dry-run] 待複製: {key}")
            return []

        if probe.found and self.force:
            self._purge_destination(key)

        self.logger.info(LogIcons.UPLOAD, f"物件 {key} – 複製中")

        versions = self.versions.list_versions(key)
        if len(versions) > 1:
            self.logger.info(LogIcons.VERSION, f"{key} – 偵測到 {len(versions)} 個版本")

        # 由舊到新寫入，目的端最新的 generation 才會是來源的最新版本
        return [TransferTask(v) for v in reversed(versions)]

    def _purge_destination(self, key: str) -> None:
        """force 模式下複製前先清除目的端物件"""
        try:
            if self.versioning_enabled:
                self.destination.delete_all_versions(key)
            else:
                self.destination.delete_object(key)
        except Exception as e:
            raise TransferError(key, None, e) from e
        self.logger.info(LogIcons.DELETE, f"已刪除目的端物件: {key}")
