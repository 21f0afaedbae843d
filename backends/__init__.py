"""
儲存後端
"""

from .s3_source import S3Source
from .gcs_destination import GcsDestination

__all__ = [
    'S3Source',
    'GcsDestination',
]
