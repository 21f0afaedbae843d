"""
目的端重試策略
沿用 google-cloud-storage 內建的可重試判斷（含 resumable upload 的
InvalidResponse 與底層連線錯誤），只調整退避參數；這是整個系統唯一的重試層
"""

from typing import Any, Dict, Optional

from google.api_core.retry import Retry
from google.cloud.storage.retry import DEFAULT_RETRY


DEFAULT_RETRY_SETTINGS: Dict[str, float] = {
    'initial': 2.0,       # 首次等待上限（秒），實際值含隨機抖動
    'maximum': 60.0,      # 單次等待上限
    'multiplier': 3.0,    # 退避係數
    'deadline': 600.0,    # 單一操作重試總時限
}


def build_retry(settings: Optional[Dict[str, Any]] = None) -> Retry:
    """
    建立 GCS 操作使用的 Retry 物件

    Args:
        settings: 覆寫 DEFAULT_RETRY_SETTINGS 的欄位（值為 None 時沿用預設）

    Example:
        retry = build_retry({'maximum': 30})
        blob.patch(retry=retry)
    """
    merged = dict(DEFAULT_RETRY_SETTINGS)
    merged.update({k: v for k, v in (settings or {}).items() if v is not None})

    return DEFAULT_RETRY.with_delay(
        initial=float(merged['initial']),
        maximum=float(merged['maximum']),
        multiplier=float(merged['multiplier']),
    ).with_timeout(float(merged['deadline']))
