"""
物件儲存抽象介面
來源（S3）與目的端（GCS）的實作位於 backends/，同步核心只依賴這裡的介面
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Dict, Iterator, List, Optional


@dataclass(frozen=True)
class SourceObject:
    """來源列舉結果中的單一物件"""
    key: str
    fingerprint: str
    size: int = 0


@dataclass
class ObjectPage:
    """一頁列舉結果，next_token 為 None 表示已到最後一頁"""
    objects: List[SourceObject]
    next_token: Optional[str] = None


@dataclass(frozen=True)
class ObjectVersion:
    """(key, version_id)；未開啟版本控制時 version_id 為 'null'"""
    key: str
    version_id: str


@dataclass
class SourceObjectStream:
    """單一版本的內容串流與 metadata"""
    chunks: Iterator[bytes]
    metadata: Dict[str, str] = field(default_factory=dict)
    fingerprint: str = ""
    on_close: Optional[Callable[[], None]] = None

    def close(self) -> None:
        if self.on_close:
            self.on_close()


@dataclass(frozen=True)
class ProbeResult:
    """目的端檢查結果"""
    found: bool
    fingerprint: Optional[str] = None

    @classmethod
    def not_found(cls) -> "ProbeResult":
        return cls(found=False)


class SourceStore(ABC):
    """來源儲存（唯讀）"""

    bucket: str

    @abstractmethod
    def list_objects(
        self,
        prefix: str = "",
        page_token: Optional[str] = None
    ) -> ObjectPage:
        """列出一頁物件"""

    @abstractmethod
    def list_versions(self, key: str) -> List[ObjectVersion]:
        """列出 key 的所有版本（新到舊）"""

    @abstractmethod
    def get_object_stream(self, key: str, version_id: str) -> SourceObjectStream:
        """開啟指定版本的讀取串流"""

    @abstractmethod
    def is_versioning_enabled(self) -> bool:
        """bucket 是否開啟版本控制"""


class DestinationStore(ABC):
    """目的端儲存"""

    bucket: str

    @abstractmethod
    def head_object(self, key: str) -> Optional[Dict[str, str]]:
        """
        取得物件 metadata

        Returns:
            物件不存在時回傳 None；存在但無 metadata 時回傳空字典
        """

    @abstractmethod
    def open_writer(self, key: str) -> BinaryIO:
        """開啟寫入串流（close 時完成上傳）"""

    @abstractmethod
    def update_metadata(self, key: str, metadata: Dict[str, str]) -> None:
        """覆寫物件的自訂 metadata"""

    @abstractmethod
    def delete_object(self, key: str, version_id: Optional[str] = None) -> None:
        """刪除物件（指定 version_id 時只刪該版本）"""

    @abstractmethod
    def delete_all_versions(self, key: str) -> None:
        """刪除物件的所有版本"""
