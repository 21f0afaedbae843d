"""
工具模組
"""

from .logger import SyncLogger, LogIcons
from .config_loader import ConfigLoader
from .formatting import format_bytes, format_duration, format_count

__all__ = [
    'SyncLogger',
    'LogIcons',
    'ConfigLoader',
    'format_bytes',
    'format_duration',
    'format_count',
]
