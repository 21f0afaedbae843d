"""
GCS 目的端
以 google-cloud-storage 實作 DestinationStore，所有請求套用同一個重試策略
"""

from typing import Any, BinaryIO, Dict, Optional

from google.api_core.exceptions import NotFound
from google.cloud import storage

from core.storage import DestinationStore
from utils.retry import build_retry


class GcsDestination(DestinationStore):
    """GCS bucket"""

    def __init__(
        self,
        bucket: str,
        project: Optional[str] = None,
        retry_settings: Optional[Dict[str, Any]] = None,
        client: Any = None
    ):
        """
        Args:
            bucket: GCS bucket 名稱
            project: GCP 專案（None 時由環境推斷）
            retry_settings: 重試參數，見 utils.retry.DEFAULT_RETRY_SETTINGS
            client: 已建立的 storage.Client（測試用）
        """
        self.bucket = bucket

        if client is None:
            client = storage.Client(project=project) if project else storage.Client()

        self._client = client
        self._bucket = client.bucket(bucket)
        self._retry = build_retry(retry_settings)

    def head_object(self, key: str) -> Optional[Dict[str, str]]:
        blob = self._bucket.get_blob(key, retry=self._retry)
        if blob is None:
            return None
        return dict(blob.metadata or {})

    def open_writer(self, key: str) -> BinaryIO:
        blob = self._bucket.blob(key)
        return blob.open("wb", retry=self._retry)

    def update_metadata(self, key: str, metadata: Dict[str, str]) -> None:
        blob = self._bucket.blob(key)
        blob.metadata = metadata
        blob.patch(retry=self._retry)

    def delete_object(self, key: str, version_id: Optional[str] = None) -> None:
        generation = int(version_id) if version_id else None
        try:
            self._bucket.delete_blob(key, generation=generation, retry=self._retry)
        except NotFound:
            # 已不存在即達成目的
            pass

    def delete_all_versions(self, key: str) -> None:
        blobs = self._client.list_blobs(
            self._bucket,
            prefix=key,
            versions=True,
            retry=self._retry,
        )
        for blob in blobs:
            if blob.name != key:
                continue
            self.delete_object(key, str(blob.generation))
