"""
版本列舉器
"""

from typing import List

from .errors import ListingError
from .storage import ObjectVersion, SourceStore


class VersionEnumerator:
    """列出單一 key 需要複製的所有版本"""

    def __init__(self, source: SourceStore):
        self.source = source

    def list_versions(self, key: str) -> List[ObjectVersion]:
        """
        取得 key 的所有版本，沿用來源的順序（由新到舊）

        Raises:
            ListingError: 列舉失敗或找不到任何版本
        """
        try:
            versions = self.source.list_versions(key)
        except Exception as e:
            raise ListingError(f"列出版本失敗 {key}: {e}") from e

        # prefix 列舉可能帶回 a.txt.bak 這類相鄰 key
        versions = [v for v in versions if v.key == key]

        if not versions:
            raise ListingError(f"找不到物件版本: {key}")

        return versions
