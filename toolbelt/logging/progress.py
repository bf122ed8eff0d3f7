"""
Progress tracking with ETA estimation and a textual progress bar.
"""

import time
from typing import Optional, Callable, Dict, Any, TextIO
import structlog


class ProgressTracker:
    """
    Track progress and render it as a progress bar on a stream.

    Can be handed to BatchImporter.run as its progress_callback.
    """

    def __init__(
        self,
        total: int,
        description: str = "",
        current: int = 0,
        bar_width: int = 40,
        stream: Optional[TextIO] = None,
        callback: Optional[Callable[[Dict], None]] = None,
        logger: Optional[Any] = None
    ):
        """
        Initialize progress tracker.

        Args:
            total: Total number of steps
            description: Text shown before the bar
            current: Steps already done (e.g. when resuming)
            bar_width: Width of progress bar in characters
            stream: Stream the bar is written to (None disables rendering)
            callback: Optional callback called with the summary on updates
            logger: Optional structured logger for progress logging
        """
        self.total = total
        self.description = description
        self.bar_width = bar_width
        self.stream = stream
        self.callback = callback
        self.logger = logger or structlog.get_logger(__name__)

        self.current = current
        self.start_current = current
        self.start_time = time.time()

    @property
    def percentage(self) -> float:
        """Current completion percentage, capped at 100."""
        if self.total == 0:
            return 0.0
        percentage = (self.current / self.total) * 100
        return min(percentage, 100.0)

    def __call__(self, current: int, total: int):
        """Progress observer interface: receive (current, total)."""
        self.total = total
        self.update(current)

    def update(self, current: int):
        """
        Update progress to a specific value.

        Args:
            current: Number of steps done
        """
        self.current = current

        if self.callback:
            self.callback(self.get_summary())

        if self.logger:
            self.logger.debug(
                "progress_update",
                description=self.description,
                current=self.current,
                total=self.total,
                percentage=round(self.percentage, 2)
            )

        self.render()

    def increment(self, amount: int = 1):
        self.update(self.current + amount)

    def estimate_remaining(self) -> Optional[Dict[str, float]]:
        """
        Estimate remaining time based on the rate since the tracker started.

        Returns:
            Dictionary with estimated_seconds and items_per_second,
            or None if cannot estimate
        """
        elapsed = time.time() - self.start_time
        done = self.current - self.start_current

        if elapsed == 0 or done <= 0:
            return None

        items_per_second = done / elapsed
        remaining_items = max(self.total - self.current, 0)

        return {
            'estimated_seconds': remaining_items / items_per_second,
            'items_per_second': items_per_second,
            'remaining_items': remaining_items
        }

    def get_progress_bar(self) -> str:
        """
        Generate the progress bar line.

        Returns:
            String like "Importing routes... [=====     ] 50.0% (1/2)"
        """
        ratio = min(self.current / max(self.total, 1), 1.0)
        filled_width = int(self.bar_width * ratio)
        bar = '=' * filled_width + ' ' * (self.bar_width - filled_width)
        line = f"[{bar}] {self.percentage:.1f}% ({self.current}/{self.total})"

        eta = self.estimate_remaining()
        if eta and not self.is_complete():
            line += f" ETA {eta['estimated_seconds']:.0f}s"

        if self.description:
            return f"{self.description} {line}"
        return line

    def render(self):
        """Redraw the bar in place on the stream."""
        if self.stream is None:
            return
        self.stream.write('\r' + self.get_progress_bar())
        self.stream.flush()

    def is_complete(self) -> bool:
        return self.current >= self.total

    def get_summary(self) -> Dict[str, Any]:
        """
        Get progress summary.

        Returns:
            Dictionary with all progress metrics
        """
        elapsed = time.time() - self.start_time
        eta = self.estimate_remaining()

        summary = {
            'description': self.description,
            'total': self.total,
            'current': self.current,
            'percentage': round(self.percentage, 2),
            'elapsed_seconds': round(elapsed, 2),
            'is_complete': self.is_complete()
        }

        if eta:
            summary['estimated_remaining_seconds'] = round(eta['estimated_seconds'], 2)
            summary['items_per_second'] = round(eta['items_per_second'], 2)

        return summary

    def __enter__(self):
        self.render()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Finish the bar line and log the final summary."""
        if self.stream is not None:
            self.stream.write('\n')
            self.stream.flush()
        if self.logger:
            self.logger.debug("progress_complete", **self.get_summary())
        return False

    def __str__(self) -> str:
        return self.get_progress_bar()
