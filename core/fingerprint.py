"""
指紋策略
來源 ETag 以自訂 metadata 形式保存在目的端物件上，用於判斷物件是否已同步
"""

from typing import Dict, Optional


class FingerprintPolicy:
    """指紋（ETag）存取與比對"""

    METADATA_KEY = "ETag"

    @staticmethod
    def to_metadata(fingerprint: str) -> Dict[str, str]:
        """產生要寫入目的端的 metadata 項目"""
        return {FingerprintPolicy.METADATA_KEY: fingerprint}

    @staticmethod
    def from_metadata(metadata: Optional[Dict[str, str]]) -> Optional[str]:
        """
        從目的端 metadata 取出指紋

        Returns:
            指紋字串；metadata 不存在或沒有 ETag 項目時回傳 None
        """
        if not metadata:
            return None
        return metadata.get(FingerprintPolicy.METADATA_KEY)

    @staticmethod
    def matches(source_fingerprint: str, destination_fingerprint: str) -> bool:
        """
        比較兩個指紋

        指紋是不透明字串，不做大小寫或引號正規化
        """
        return source_fingerprint == destination_fingerprint

    @staticmethod
    def build_destination_metadata(
        source_metadata: Optional[Dict[str, str]],
        fingerprint: str
    ) -> Dict[str, str]:
        """來源 metadata 全部保留，再加上指紋（同名時以指紋為準）"""
        metadata = dict(source_metadata or {})
        metadata.update(FingerprintPolicy.to_metadata(fingerprint))
        return metadata
