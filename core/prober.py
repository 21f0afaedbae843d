"""
目的端探測
判斷目的端物件是否存在並取出已保存的指紋
"""

from .errors import ProbeError
from .fingerprint import FingerprintPolicy
from .storage import DestinationStore, ProbeResult


class DestinationProber:
    """目的端存在性檢查"""

    def __init__(self, destination: DestinationStore):
        self.destination = destination

    def probe(self, key: str) -> ProbeResult:
        """
        檢查 key 在目的端的狀態

        Returns:
            ProbeResult(found=False) 或 ProbeResult(found=True, fingerprint=...)

        Raises:
            ProbeError: 無法確定物件是否存在
        """
        try:
            metadata = self.destination.head_object(key)
        except Exception as e:
            raise ProbeError(key, e) from e

        if metadata is None:
            return ProbeResult.not_found()

        return ProbeResult(
            found=True,
            fingerprint=FingerprintPolicy.from_metadata(metadata)
        )
