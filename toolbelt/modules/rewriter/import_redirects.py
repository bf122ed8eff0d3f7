"""`redirects import`: resumable import of a redirects CSV."""

import logging
import sys
import time
from typing import Any, Callable, Dict, Optional, TextIO

from ...batch import BatchImporter, CancellationToken, CheckpointManager, fingerprint, run_with_retries
from ...batch.importer import split_batches
from ...clients import RewriterClient
from ...conf import BATCH_SIZE, MAX_RETRIES, RETRY_DELAY_SECONDS, Config
from ...errors import RoutesIndexMissing
from ...logging import ProgressTracker
from .redirects import read_csv, validate_redirects

logger = logging.getLogger(__name__)

CHECKPOINT_CATEGORY = 'imports'


def ensure_index_creation(client: RewriterClient):
    """
    Make sure the redirects index exists.

    Raises:
        RoutesIndexMissing: If it did not; its creation has been requested
    """
    if client.routes_index() is None:
        client.create_routes_index()
        raise RoutesIndexMissing("Error getting redirects index. Please try again in some seconds..")


def import_redirects(
    csv_path: str,
    config: Config,
    client: Optional[RewriterClient] = None,
    checkpoint_manager: Optional[CheckpointManager] = None,
    cancel_token: Optional[CancellationToken] = None,
    out: TextIO = sys.stdout,
    max_retries: int = MAX_RETRIES,
    retry_delay: float = RETRY_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep
) -> Dict[str, Any]:
    """
    Import the redirects of a CSV file into the current workspace.

    Progress is checkpointed per batch, so running the command again on the
    same file (in the same account and workspace) continues where the last
    run stopped.

    Args:
        csv_path: Path to the CSV file
        config: Toolbelt configuration
        client: Rewriter client (built from config if not given)
        checkpoint_manager: Checkpoint store (config.checkpoint_db if not given)
        cancel_token: Token to stop the import between batches
        out: Stream for progress and messages
        max_retries: Retries of the whole import after a failure
        retry_delay: Seconds between retries
        sleep: Sleep function

    Returns:
        Result of the last import run

    Raises:
        RoutesIndexMissing: If the redirects index had to be created
        InputValidationError: If the file is malformed; nothing is imported
        ImportCancelled: If the user interrupted the import
        ImportFailed: If the import failed more than max_retries times
    """
    client = client or RewriterClient(config)
    checkpoint_manager = checkpoint_manager or CheckpointManager(config.checkpoint_db)
    account = config.get_account()
    workspace = config.get_workspace()

    ensure_index_creation(client)

    rows, raw = read_csv(csv_path)
    records = [redirect.to_input() for redirect in validate_redirects(rows)]

    importer = BatchImporter(checkpoint_manager, batch_size=BATCH_SIZE, category=CHECKPOINT_CATEGORY)
    key = fingerprint(account, workspace, raw)
    total = len(split_batches(records, BATCH_SIZE))

    def attempt() -> Dict[str, Any]:
        resume_index = checkpoint_manager.get(CHECKPOINT_CATEGORY, key)
        tracker = ProgressTracker(
            total=total,
            description='Importing routes...',
            current=min(resume_index, total),
            stream=out
        )
        with tracker:
            return importer.run(
                records,
                account=account,
                workspace=workspace,
                raw_input=raw,
                sink=client,
                progress_callback=tracker,
                cancel_token=cancel_token
            )

    def on_retry(retry: int, error: Exception):
        out.write('\nError handling import\n')
        out.write(f'Retrying in {retry_delay:g} seconds...\n')
        out.write('Press CTRL+C to abort\n')
        out.flush()

    result = run_with_retries(attempt, max_retries=max_retries, retry_delay=retry_delay,
                              on_retry=on_retry, sleep=sleep)
    out.write('Finished!\n')
    return result
