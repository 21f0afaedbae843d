"""
核心模組
"""

from .sync_engine import SyncEngine, SyncResult, SyncState
from .storage import (
    DestinationStore,
    ObjectPage,
    ObjectVersion,
    ProbeResult,
    SourceObject,
    SourceObjectStream,
    SourceStore,
)
from .decision import Decision, decide, is_directory_marker
from .fingerprint import FingerprintPolicy
from .progress import ProgressAggregator, StatsSnapshot
from .errors import (
    ConflictError,
    ListingError,
    ProbeError,
    SyncCancelled,
    SyncError,
    TransferError,
)

__all__ = [
    'SyncEngine',
    'SyncResult',
    'SyncState',
    'SourceStore',
    'DestinationStore',
    'SourceObject',
    'SourceObjectStream',
    'ObjectPage',
    'ObjectVersion',
    'ProbeResult',
    'Decision',
    'decide',
    'is_directory_marker',
    'FingerprintPolicy',
    'ProgressAggregator',
    'StatsSnapshot',
    'SyncError',
    'ListingError',
    'ProbeError',
    'ConflictError',
    'TransferError',
    'SyncCancelled',
]
