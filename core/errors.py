"""
同步錯誤分類
所有致命錯誤皆繼承 SyncError，由 SyncEngine 統一收斂為 SyncResult
"""

from typing import Optional


class SyncError(Exception):
    """同步過程中的致命錯誤"""


class ListingError(SyncError):
    """來源列舉（物件/版本）失敗"""


class ProbeError(SyncError):
    """目的端存在性檢查失敗（非「不存在」的其他錯誤）"""

    def __init__(self, key: str, cause: Exception):
        super().__init__(f"目的端檢查失敗 {key}: {cause}")
        self.key = key
        self.cause = cause


class ConflictError(SyncError):
    """指紋不一致且未指定 --force"""

    def __init__(
        self,
        key: str,
        source_fingerprint: str,
        destination_name: str,
        destination_fingerprint: str
    ):
        super().__init__(
            "偵測到不一致:\n"
            f"  S3 物件: {key}\n"
            f"  GCS 物件: {destination_name}\n"
            f"  S3 ETag: {source_fingerprint}\n"
            f"  GCS Metadata ETag: {destination_fingerprint}"
        )
        self.key = key
        self.source_fingerprint = source_fingerprint
        self.destination_name = destination_name
        self.destination_fingerprint = destination_fingerprint


class TransferError(SyncError):
    """讀取/寫入/metadata 更新/刪除失敗"""

    def __init__(self, key: str, version_id: Optional[str], cause: Exception):
        where = f"{key} (version: {version_id})" if version_id else key
        super().__init__(f"複製失敗 {where}: {cause}")
        self.key = key
        self.version_id = version_id
        self.cause = cause


class SyncCancelled(SyncError):
    """同步已被取消（其他工作發生致命錯誤）"""
