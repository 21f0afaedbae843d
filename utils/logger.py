"""
統一日誌系統
提供格式化的日誌輸出，支援終端和檔案雙重記錄
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


# 第三方套件的 INFO/DEBUG 對同步進度沒有幫助
NOISY_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3", "google")


class SyncLogger:
    """同步系統日誌管理器"""

    def __init__(self, project_name: str, log_dir: Optional[str] = "logs"):
        """
        Args:
            project_name: logger 名稱，也是日誌檔名前綴
            log_dir: 日誌目錄；None 時只輸出到終端
        """
        self.project_name = project_name
        self.logger = logging.getLogger(project_name)
        self.logger.setLevel(logging.DEBUG)

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

        # 避免重複添加 handler
        if self.logger.handlers:
            return

        # Console Handler（終端輸出）
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_formatter = logging.Formatter(
            '[%(asctime)s] %(message)s',
            datefmt='%H:%M:%S'
        )
        console_handler.setFormatter(console_formatter)
        self.logger.addHandler(console_handler)

        if log_dir is None:
            return

        # File Handler（檔案輸出）
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        log_file = log_path / f"{project_name}_{datetime.now():%Y%m%d}.log"
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        self.logger.addHandler(file_handler)

    def _log(self, level: int, icon: str, message: str, **kwargs) -> None:
        self.logger.log(level, f"{icon} {message}", **kwargs)

    def info(self, icon, message):
        self._log(logging.INFO, icon, message)

    def success(self, icon, message):
        """完成類訊息，與 info 同級"""
        self._log(logging.INFO, icon, message)

    def warning(self, icon, message):
        self._log(logging.WARNING, icon, message)

    def error(self, icon, message, exc_info=None):
        """exc_info 為真時附上 traceback"""
        self._log(logging.ERROR, icon, message, exc_info=exc_info)

    def debug(self, message):
        """只寫入日誌檔，不加圖示"""
        self.logger.debug(message)


# 日誌圖示常數
class LogIcons:
    """統一的日誌圖示"""
    START = "🏁"
    CONNECT = "📡"
    PROGRESS = "🔄"
    MATCH = "🟰"
    VERSION = "🗂️"
    DELETE = "🗑️"
    UPLOAD = "📤"
    COMPLETE = "✅"
    ERROR = "❌"
    WARNING = "⚠️"
    NOTE = "📝"
