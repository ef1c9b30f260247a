from __future__ import annotations

from unittest.mock import Mock, patch

from fleet_split.models.pipeline_state import PipelineState, ProgressEvent
from fleet_split.services.progress import ProgressTracker, is_tty_enabled


def _event(percent: int, state: PipelineState = PipelineState.EXPORTING) -> ProgressEvent:
    return ProgressEvent(state=state, percent=percent, message=f"at {percent}")


def test_is_tty_enabled_returns_stdout_isatty():
    with patch('sys.stdout.isatty', return_value=True):
        assert is_tty_enabled() is True

    with patch('sys.stdout.isatty', return_value=False):
        assert is_tty_enabled() is False


class TestProgressTracker:
    """Test cases for ProgressTracker class."""

    def test_init_with_tty_enabled(self):
        with patch('fleet_split.services.progress.is_tty_enabled', return_value=True), \
             patch('fleet_split.services.progress.tqdm') as mock_tqdm:

            tracker = ProgressTracker(description="Test")

            assert tracker.enabled is True
            assert tracker.percent == 0
            mock_tqdm.assert_called_once_with(
                total=100,
                desc="Test",
                unit="%",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    def test_init_with_tty_disabled(self):
        with patch('fleet_split.services.progress.is_tty_enabled', return_value=False):
            tracker = ProgressTracker()
            assert tracker.enabled is False
            assert tracker.pbar is None

    def test_update_advances_by_delta(self):
        mock_pbar = Mock()
        with patch('fleet_split.services.progress.is_tty_enabled', return_value=True), \
             patch('fleet_split.services.progress.tqdm', return_value=mock_pbar):

            tracker = ProgressTracker()
            tracker(_event(10, PipelineState.READING))
            tracker(_event(25, PipelineState.READING))

            assert [c.args[0] for c in mock_pbar.update.call_args_list] == [10, 15]
            mock_pbar.set_postfix.assert_called_with(stage="reading")
            assert tracker.percent == 25
            assert tracker.last_message == "at 25"

    def test_update_never_goes_backwards(self):
        mock_pbar = Mock()
        with patch('fleet_split.services.progress.is_tty_enabled', return_value=True), \
             patch('fleet_split.services.progress.tqdm', return_value=mock_pbar):

            tracker = ProgressTracker()
            tracker.update(_event(60))
            tracker.update(_event(60))
            tracker.update(_event(40))

            mock_pbar.update.assert_called_once_with(60)
            assert tracker.percent == 60

    def test_update_with_tty_disabled_tracks_percent(self):
        with patch('fleet_split.services.progress.is_tty_enabled', return_value=False):
            tracker = ProgressTracker()
            tracker.update(_event(95, PipelineState.ARCHIVING))
            assert tracker.percent == 95

    def test_context_manager_closes_bar(self):
        mock_pbar = Mock()
        with patch('fleet_split.services.progress.is_tty_enabled', return_value=True), \
             patch('fleet_split.services.progress.tqdm', return_value=mock_pbar):

            with ProgressTracker() as tracker:
                tracker.update(_event(100, PipelineState.DONE))

            mock_pbar.close.assert_called_once()
            assert tracker.pbar is None
