"""
測試用假物件：記憶體內的來源/目的端儲存與日誌
"""

import hashlib
import threading
from io import BytesIO
from typing import Dict, List, Optional

from core.storage import (
    DestinationStore,
    ObjectPage,
    ObjectVersion,
    SourceObject,
    SourceObjectStream,
    SourceStore,
)


class DummyLogger:
    def __init__(self):
        self.records = []
        self._lock = threading.Lock()

    def _add(self, level, icon, msg):
        with self._lock:
            self.records.append((level, icon, msg))

    def info(self, icon, msg, **kwargs):
        self._add("info", icon, msg)

    def success(self, icon, msg, **kwargs):
        self._add("success", icon, msg)

    def warning(self, icon, msg, **kwargs):
        self._add("warning", icon, msg)

    def error(self, icon, msg, **kwargs):
        self._add("error", icon, msg)

    def debug(self, msg):
        self._add("debug", None, msg)

    def messages(self, level=None):
        return [m for (lv, _, m) in self.records if level is None or lv == level]


def etag_of(data: bytes) -> str:
    return f'"{hashlib.md5(data).hexdigest()}"'


class InMemorySource(SourceStore):
    """
    假 S3：每個 key 保存新到舊的版本列表
    """

    def __init__(self, versioning: bool = False, page_size: int = 1000, chunk_size: int = 4):
        self.bucket = "src-bucket"
        self.versioning = versioning
        self.page_size = page_size
        self.chunk_size = chunk_size
        # key -> [ {version_id, data, etag, metadata}, ... ]（新到舊）
        self._objects: Dict[str, List[dict]] = {}
        self._counter = 0
        self.fail_list = False
        self.fail_get = set()
        self.get_calls: List[tuple] = []
        self._lock = threading.Lock()

    def put(self, key: str, data: bytes, etag: Optional[str] = None, metadata=None) -> str:
        self._counter += 1
        version_id = f"v{self._counter}" if self.versioning else "null"
        entry = {
            "version_id": version_id,
            "data": data,
            "etag": etag or etag_of(data),
            "metadata": dict(metadata or {}),
        }
        if self.versioning:
            self._objects.setdefault(key, []).insert(0, entry)
        else:
            self._objects[key] = [entry]
        return version_id

    def list_objects(self, prefix: str = "", page_token: Optional[str] = None) -> ObjectPage:
        if self.fail_list:
            raise RuntimeError("list failed")
        keys = sorted(k for k in self._objects if k.startswith(prefix))
        start = int(page_token) if page_token else 0
        chunk = keys[start:start + self.page_size]
        objects = [
            SourceObject(k, self._objects[k][0]["etag"], len(self._objects[k][0]["data"]))
            for k in chunk
        ]
        end = start + self.page_size
        next_token = str(end) if end < len(keys) else None
        return ObjectPage(objects, next_token)

    def list_versions(self, key: str) -> List[ObjectVersion]:
        # 模擬 S3 的 prefix 列舉：相鄰 key 也會被帶回
        result = []
        for k in sorted(self._objects):
            if k.startswith(key):
                result.extend(ObjectVersion(k, v["version_id"]) for v in self._objects[k])
        return result

    def get_object_stream(self, key: str, version_id: str) -> SourceObjectStream:
        with self._lock:
            self.get_calls.append((key, version_id))
        if key in self.fail_get:
            raise IOError(f"read failed: {key}")
        for v in self._objects.get(key, []):
            if v["version_id"] == version_id:
                data = v["data"]
                chunks = iter([
                    data[i:i + self.chunk_size]
                    for i in range(0, len(data), self.chunk_size)
                ])
                return SourceObjectStream(chunks, dict(v["metadata"]), v["etag"])
        raise KeyError(f"NoSuchKey: {key}@{version_id}")

    def is_versioning_enabled(self) -> bool:
        return self.versioning


class FakeWriter:
    def __init__(self, store: "InMemoryDestination", key: str):
        self.store = store
        self.key = key
        self.buffer = BytesIO()
        self.closed = False

    def write(self, data: bytes) -> int:
        self.store._before_write(self.key)
        if self.key in self.store.fail_write:
            raise IOError(f"write failed: {self.key}")
        return self.buffer.write(data)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.store._commit(self.key, self.buffer.getvalue())


class InMemoryDestination(DestinationStore):
    """
    假 GCS：每個 key 保存舊到新的 generation 列表，最後一個為現行版本
    """

    def __init__(self, versioning: bool = False):
        self.bucket = "dst-bucket"
        self.versioning = versioning
        self._objects: Dict[str, List[dict]] = {}
        self._lock = threading.Lock()
        self.fail_head = set()
        self.fail_write = set()
        self.fail_metadata = set()
        self.deleted: List[str] = []
        self.writes: List[str] = []

    def seed(self, key: str, data: bytes, metadata=None) -> None:
        self._commit(key, data)
        self._objects[key][-1]["metadata"] = dict(metadata or {})

    def _commit(self, key: str, data: bytes) -> None:
        with self._lock:
            self.writes.append(key)
            generation = {"data": data, "metadata": {}}
            if self.versioning:
                self._objects.setdefault(key, []).append(generation)
            else:
                self._objects[key] = [generation]

    def _before_write(self, key: str) -> None:
        """子類別可覆寫以控制寫入時序"""

    def head_object(self, key: str) -> Optional[Dict[str, str]]:
        if key in self.fail_head:
            raise PermissionError(f"403 Forbidden: {key}")
        with self._lock:
            gens = self._objects.get(key)
            if not gens:
                return None
            return dict(gens[-1]["metadata"])

    def open_writer(self, key: str) -> FakeWriter:
        return FakeWriter(self, key)

    def update_metadata(self, key: str, metadata: Dict[str, str]) -> None:
        if key in self.fail_metadata:
            raise IOError(f"patch failed: {key}")
        with self._lock:
            self._objects[key][-1]["metadata"] = dict(metadata)

    def delete_object(self, key: str, version_id: Optional[str] = None) -> None:
        with self._lock:
            self.deleted.append(key)
            gens = self._objects.get(key, [])
            if gens:
                gens.pop()
            if not gens:
                self._objects.pop(key, None)

    def delete_all_versions(self, key: str) -> None:
        with self._lock:
            self.deleted.append(key)
            self._objects.pop(key, None)

    # ── 測試輔助 ──
    def generations(self, key: str) -> List[dict]:
        return list(self._objects.get(key, []))

    def data(self, key: str) -> bytes:
        return self._objects[key][-1]["data"]

    def metadata(self, key: str) -> Dict[str, str]:
        return self._objects[key][-1]["metadata"]

    def keys(self) -> List[str]:
        return sorted(self._objects)
