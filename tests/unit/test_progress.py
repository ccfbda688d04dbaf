from __future__ import annotations

from unittest.mock import Mock, patch

from sheet_snapshot.services.progress import ProgressTracker, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    """is_tty_enabled mirrors sys.stdout.isatty()."""
    with patch('sys.stdout.isatty', return_value=True):
        assert is_tty_enabled() is True

    with patch('sys.stdout.isatty', return_value=False):
        assert is_tty_enabled() is False


class TestProgressTracker:
    """Test cases for ProgressTracker class."""

    def test_init_with_tty_enabled(self):
        with patch('sheet_snapshot.services.progress.is_tty_enabled', return_value=True), \
             patch('sheet_snapshot.services.progress.tqdm') as mock_tqdm:

            tracker = ProgressTracker(7, description="Fetching sheets")

            assert tracker.total_sheets == 7
            assert tracker.description == "Fetching sheets"
            assert tracker.finished == 0
            assert tracker.enabled is True

            mock_tqdm.assert_called_once_with(
                total=7,
                desc="Fetching sheets",
                unit="sheet",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    def test_init_with_tty_disabled(self):
        with patch('sheet_snapshot.services.progress.is_tty_enabled', return_value=False), \
             patch('sheet_snapshot.services.progress.tqdm') as mock_tqdm:
            tracker = ProgressTracker(3)

            assert tracker.enabled is False
            assert tracker.pbar is None
            mock_tqdm.assert_not_called()

    def test_finish_sheet_with_tty_enabled(self):
        mock_pbar = Mock()

        with patch('sheet_snapshot.services.progress.is_tty_enabled', return_value=True), \
             patch('sheet_snapshot.services.progress.tqdm', return_value=mock_pbar):

            tracker = ProgressTracker(3, description="Fetching")
            tracker.finish_sheet("Top Rounds")
            tracker.finish_sheet("Locations Metadata", success=False)

            assert tracker.finished == 2
            assert tracker.failed == 1
            assert mock_pbar.update.call_count == 2
            mock_pbar.set_description.assert_called_with("Fetching (Locations Metadata)")
            mock_pbar.set_postfix.assert_called_with(failed=1)

    def test_finish_sheet_with_tty_disabled(self):
        with patch('sheet_snapshot.services.progress.is_tty_enabled', return_value=False):
            tracker = ProgressTracker(3)
            tracker.finish_sheet("Top Rounds", success=False)

            assert tracker.finished == 1
            assert tracker.failed == 1

    def test_context_manager_closes_bar(self):
        mock_pbar = Mock()

        with patch('sheet_snapshot.services.progress.is_tty_enabled', return_value=True), \
             patch('sheet_snapshot.services.progress.tqdm', return_value=mock_pbar):
            with ProgressTracker(1) as tracker:
                tracker.finish_sheet("Top Rounds")

            mock_pbar.close.assert_called_once()
            assert tracker.pbar is None

    def test_close_is_idempotent(self):
        mock_pbar = Mock()

        with patch('sheet_snapshot.services.progress.is_tty_enabled', return_value=True), \
             patch('sheet_snapshot.services.progress.tqdm', return_value=mock_pbar):
            tracker = ProgressTracker(1)
            tracker.close()
            tracker.close()

            mock_pbar.close.assert_called_once()
