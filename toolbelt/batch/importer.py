"""
Resumable batch importer.
Submits records to a remote sink in fixed-size batches and records, after
every accepted batch, how far the import got so a rerun of the same input
skips the batches already submitted.
"""

import hashlib
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .checkpoint_manager import CheckpointManager
from ..errors import CheckpointWriteError, ImportCancelled, ImportFailed

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = 'imports'


class Sink(Protocol):
    """Anything that durably accepts a batch of records."""

    def submit(self, batch: List[Any]) -> None: ...


class CancellationToken:
    """Flag checked by the importer before each batch submission."""

    def __init__(self):
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


def fingerprint(account: str, workspace: str, raw_input: bytes) -> str:
    """Digest identifying an input file within an account/workspace."""
    digest = hashlib.md5()
    digest.update(f"{account}{workspace}".encode('utf-8'))
    digest.update(raw_input)
    return digest.hexdigest()


def split_batches(records: Sequence[Any], batch_size: int) -> List[List[Any]]:
    """Partition records, in order, into batches of at most batch_size."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    return [list(records[i:i + batch_size]) for i in range(0, len(records), batch_size)]


class BatchImporter:
    """
    Sequential batch importer with checkpoint integration.

    Batches are submitted one at a time; batch i+1 is never attempted before
    batch i was accepted. The checkpoint for an input always equals the number
    of batches the sink accepted for it.
    """

    def __init__(
        self,
        checkpoint_manager: CheckpointManager,
        batch_size: int = 100,
        category: str = DEFAULT_CATEGORY
    ):
        """
        Initialize batch importer.

        Args:
            checkpoint_manager: Store holding resume points
            batch_size: Number of records per batch
            category: Checkpoint category to record progress under
        """
        self.checkpoint_manager = checkpoint_manager
        self.batch_size = batch_size
        self.category = category

    def run(
        self,
        records: Sequence[Any],
        account: str,
        workspace: str,
        raw_input: bytes,
        sink: Sink,
        progress_callback: Optional[Callable[[int, int], None]] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> Dict[str, Any]:
        """
        Import records, resuming from the last checkpoint for this input.

        Args:
            records: Validated records to submit
            account: Account the records are imported into
            workspace: Workspace the records are imported into
            raw_input: Raw bytes of the input file, part of the fingerprint
            sink: Receiver of each batch
            progress_callback: Called with (current, total) batches after
                every accepted batch
            cancel_token: Token that stops the run before the next batch

        Returns:
            Dictionary with fingerprint, total batches, resumed_from and
            submitted counts

        Raises:
            ImportCancelled: If the token was cancelled or the user interrupted
                the run; progress up to the last accepted batch is saved
            CheckpointWriteError: If progress could not be saved
            Exception: Whatever the sink raised, after progress was saved
        """
        key = fingerprint(account, workspace, raw_input)
        batches = split_batches(records, self.batch_size)
        total = len(batches)

        resume_index = self.checkpoint_manager.get(self.category, key)

        if resume_index >= total:
            logger.info(f"Nothing to import for {key}: "
                        f"{resume_index} of {total} batches already submitted")
            return {
                'fingerprint': key,
                'total': total,
                'resumed_from': resume_index,
                'submitted': 0
            }

        if resume_index:
            logger.info(f"Resuming import {key} from batch {resume_index} of {total}")
        else:
            logger.info(f"Starting import {key}: {len(records)} records, {total} batches")

        counter = 0
        for batch_num, batch in enumerate(batches[resume_index:], start=resume_index):
            if cancel_token is not None and cancel_token.cancelled:
                self._cancel(key, resume_index + counter)

            try:
                sink.submit(batch)
            except KeyboardInterrupt:
                if cancel_token is not None:
                    cancel_token.cancel()
                self._cancel(key, resume_index + counter)
            except Exception as e:
                logger.warning(f"Batch {batch_num} of {key} failed: {e}")
                self.checkpoint_manager.save(self.category, key, resume_index + counter)
                raise

            counter += 1
            self.checkpoint_manager.save(self.category, key, resume_index + counter)

            if progress_callback:
                progress_callback(resume_index + counter, total)

            logger.debug(f"Batch {batch_num} of {key} submitted ({len(batch)} records)")

        logger.info(f"Import complete: {key} - {counter} batches submitted")

        return {
            'fingerprint': key,
            'total': total,
            'resumed_from': resume_index,
            'submitted': counter
        }

    def _cancel(self, key: str, batch_index: int):
        """Persist progress and stop the run."""
        self.checkpoint_manager.save(self.category, key, batch_index)
        logger.info(f"Import {key} cancelled at batch {batch_index}")
        raise ImportCancelled(batch_index)


def run_with_retries(
    run: Callable[[], Dict[str, Any]],
    max_retries: int,
    retry_delay: float,
    on_retry: Optional[Callable[[int, Exception], None]] = None,
    sleep: Callable[[float], None] = time.sleep
) -> Dict[str, Any]:
    """
    Call run until it succeeds, retrying after a fixed delay.

    Each attempt is a fresh call, so a resumable run reloads its checkpoint
    and never resubmits accepted batches. Cancellation and checkpoint write
    failures are not retried.

    Args:
        run: Zero-argument callable performing the whole import
        max_retries: Maximum number of retries after the first attempt
        retry_delay: Seconds to wait before each retry
        on_retry: Called with (retry number, error) before waiting
        sleep: Sleep function

    Raises:
        ImportCancelled: As soon as run raises it
        CheckpointWriteError: As soon as run raises it
        ImportFailed: When the last retry failed too
    """
    attempt = 0
    while True:
        try:
            return run()
        except (ImportCancelled, CheckpointWriteError):
            raise
        except Exception as e:
            if attempt >= max_retries:
                logger.error(f"Import failed after {attempt + 1} attempts: {e}")
                raise ImportFailed(attempt + 1, e) from e

            attempt += 1
            logger.warning(f"Import attempt {attempt} failed: {e}")
            if on_retry:
                on_retry(attempt, e)
            sleep(retry_delay)
