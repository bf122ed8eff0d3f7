"""
Tests for correlation context and progress tracking.
"""

import time
from io import StringIO

import structlog


class TestCorrelationContext:
    """Test suite for correlation ID context manager."""

    def test_binds_context(self):
        from toolbelt.logging.correlation import CorrelationContext

        with CorrelationContext(run_id="run_1", command="redirects import",
                                account="store", workspace="dev") as ctx:
            bound = structlog.contextvars.get_contextvars()
            assert ctx.run_id == "run_1"
            assert bound == {
                'run_id': 'run_1',
                'command': 'redirects import',
                'account': 'store',
                'workspace': 'dev',
            }

        assert structlog.contextvars.get_contextvars() == {}

    def test_skips_empty_values(self):
        from toolbelt.logging.correlation import CorrelationContext

        with CorrelationContext(command="files ls"):
            bound = structlog.contextvars.get_contextvars()
            assert 'account' not in bound
            assert bound['run_id'].startswith('run_')


class TestProgressTracker:
    """Test suite for progress tracking."""

    def test_observer_interface(self):
        from toolbelt.logging.progress import ProgressTracker

        tracker = ProgressTracker(total=3)
        tracker(2, 4)

        assert tracker.current == 2
        assert tracker.total == 4
        assert tracker.percentage == 50.0

    def test_starts_at_resume_point(self):
        from toolbelt.logging.progress import ProgressTracker

        tracker = ProgressTracker(total=4, current=1)
        assert tracker.percentage == 25.0
        assert tracker.estimate_remaining() is None

    def test_eta_counts_only_new_progress(self):
        from toolbelt.logging.progress import ProgressTracker

        tracker = ProgressTracker(total=10, current=5)
        time.sleep(0.05)
        tracker.update(6)

        eta = tracker.estimate_remaining()
        assert eta is not None
        assert eta['remaining_items'] == 4
        assert eta['items_per_second'] > 0

    def test_renders_bar_to_stream(self):
        from toolbelt.logging.progress import ProgressTracker

        out = StringIO()
        with ProgressTracker(total=2, description="Importing routes...", bar_width=10,
                             stream=out) as tracker:
            tracker.increment()
            tracker.increment()

        output = out.getvalue()
        assert output.startswith('\rImporting routes... [')
        assert '\rImporting routes... [==========] 100.0% (2/2)' in output
        assert output.endswith('\n')

    def test_no_stream_renders_nothing(self):
        from toolbelt.logging.progress import ProgressTracker

        tracker = ProgressTracker(total=2)
        tracker.update(1)
        assert '(1/2)' in str(tracker)

    def test_zero_total(self):
        from toolbelt.logging.progress import ProgressTracker

        tracker = ProgressTracker(total=0)
        assert tracker.percentage == 0.0
        assert tracker.is_complete()

    def test_caps_at_100_percent(self):
        from toolbelt.logging.progress import ProgressTracker

        tracker = ProgressTracker(total=100)
        tracker.update(150)
        assert tracker.percentage == 100.0

    def test_callback(self):
        from toolbelt.logging.progress import ProgressTracker

        callback_data = []
        tracker = ProgressTracker(total=100, callback=callback_data.append)
        tracker.update(25)
        tracker.update(50)

        assert [d['current'] for d in callback_data] == [25, 50]
