"""
決策引擎
依來源指紋、目的端探測結果與 force 旗標決定 SKIP / COPY / CONFLICT
"""

from enum import Enum

from .fingerprint import FingerprintPolicy
from .storage import ProbeResult


class Decision(Enum):
    SKIP = "skip"
    COPY = "copy"
    CONFLICT = "conflict"


def is_directory_marker(key: str) -> bool:
    """
    是否為「資料夾」佔位物件

    S3 主控台建立資料夾時會產生以 '/' 結尾的空物件，這類 key 不做同步
    """
    return not key or key.endswith("/")


def decide(source_fingerprint: str, probe: ProbeResult, force: bool) -> Decision:
    """
    決定單一物件的處理方式（純函數）

    | probe                  | force | 結果     |
    |------------------------|-------|----------|
    | 不存在                 | 任意  | COPY     |
    | 存在，指紋相同         | False | SKIP     |
    | 存在，指紋不同         | False | CONFLICT |
    | 存在，無指紋           | False | COPY     |
    | 存在                   | True  | COPY     |

    force 時的刪除動作由 SyncEngine 在複製前執行
    """
    if not probe.found or force:
        return Decision.COPY

    if probe.fingerprint is None:
        return Decision.COPY

    if FingerprintPolicy.matches(source_fingerprint, probe.fingerprint):
        return Decision.SKIP

    return Decision.CONFLICT
