"""
S3 來源
以 boto3 實作 SourceStore
"""

from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config

from core.storage import ObjectPage, ObjectVersion, SourceObject, SourceObjectStream, SourceStore


DEFAULT_CHUNK_SIZE = 8 * 1024 * 1024


class S3Source(SourceStore):
    """S3 bucket（唯讀）"""

    def __init__(
        self,
        bucket: str,
        region: str,
        endpoint_url: Optional[str] = None,
        page_size: int = 1000,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        client: Any = None
    ):
        """
        Args:
            bucket: S3 bucket 名稱
            region: AWS region
            endpoint_url: S3 相容服務（MinIO 等）的端點
            page_size: 每頁列舉的物件數上限
            chunk_size: 讀取串流的區塊大小
            client: 已建立的 boto3 S3 client（測試用）
        """
        self.bucket = bucket
        self.page_size = page_size
        self.chunk_size = chunk_size

        if client is None:
            kwargs: Dict[str, Any] = {
                # 來源端不重試，失敗即中止，交由重新執行收斂
                "config": Config(
                    region_name=region,
                    retries={"max_attempts": 1, "mode": "standard"},
                ),
            }
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("s3", **kwargs)

        self._client = client

    def list_objects(
        self,
        prefix: str = "",
        page_token: Optional[str] = None
    ) -> ObjectPage:
        kwargs: Dict[str, Any] = {"Bucket": self.bucket, "MaxKeys": self.page_size}
        if prefix:
            kwargs["Prefix"] = prefix
        if page_token:
            kwargs["ContinuationToken"] = page_token

        resp = self._client.list_objects_v2(**kwargs)

        objects = [
            SourceObject(
                key=obj["Key"],
                fingerprint=obj["ETag"],
                size=obj.get("Size", 0),
            )
            for obj in resp.get("Contents", [])
        ]

        next_token = None
        if resp.get("IsTruncated"):
            next_token = resp.get("NextContinuationToken")

        return ObjectPage(objects, next_token)

    def list_versions(self, key: str) -> List[ObjectVersion]:
        """
        列出 key 的所有版本（新到舊，不含 delete marker）

        S3 只支援以 prefix 列舉版本；結果依 key 字典序排列，
        key 本身排在所有以它為前綴的 key 之前，遇到其他 key 即可停止
        """
        versions: List[ObjectVersion] = []
        kwargs: Dict[str, Any] = {"Bucket": self.bucket, "Prefix": key}

        while True:
            resp = self._client.list_object_versions(**kwargs)

            for item in resp.get("Versions", []):
                if item["Key"] != key:
                    return versions
                versions.append(ObjectVersion(key, item["VersionId"]))

            if not resp.get("IsTruncated"):
                return versions

            kwargs["KeyMarker"] = resp["NextKeyMarker"]
            kwargs["VersionIdMarker"] = resp["NextVersionIdMarker"]

    def get_object_stream(self, key: str, version_id: str) -> SourceObjectStream:
        resp = self._client.get_object(
            Bucket=self.bucket,
            Key=key,
            VersionId=version_id,
        )
        body = resp["Body"]

        return SourceObjectStream(
            chunks=body.iter_chunks(self.chunk_size),
            metadata=dict(resp.get("Metadata") or {}),
            fingerprint=resp["ETag"],
            on_close=body.close,
        )

    def is_versioning_enabled(self) -> bool:
        resp = self._client.get_bucket_versioning(Bucket=self.bucket)
        return resp.get("Status") == "Enabled"
