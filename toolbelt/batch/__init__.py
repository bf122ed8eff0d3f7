"""
Batch module for resumable imports.
"""

from .checkpoint_manager import CheckpointManager
from .importer import BatchImporter, CancellationToken, fingerprint, run_with_retries

__all__ = ['CheckpointManager', 'BatchImporter', 'CancellationToken', 'fingerprint', 'run_with_retries']
