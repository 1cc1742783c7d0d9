"""Unit tests for audio playback sinks."""

import threading
from unittest.mock import MagicMock, patch

import pytest

from nurtra.audio import MockAudioPlayback, create_audio_playback
from nurtra.config import AudioConfig


class TestMockAudioPlayback:
    """Tests for MockAudioPlayback."""

    def test_records_played_audio(self) -> None:
        playback = MockAudioPlayback()
        playback.play(b"abc", 22050)

        assert playback.play_count == 1
        assert playback.played_audio == b"abc"
        assert playback.is_playing

    def test_finish_fires_callback_once(self) -> None:
        """Test the completion callback is one-shot."""
        playback = MockAudioPlayback()
        callback = MagicMock()
        playback.play(b"abc", 22050, on_finished=callback)

        assert playback.finish()
        assert not playback.finish()
        callback.assert_called_once()
        assert not playback.is_playing

    def test_stop_drops_callback(self) -> None:
        """Test a stopped clip never reports completion."""
        playback = MockAudioPlayback()
        callback = MagicMock()
        playback.play(b"abc", 22050, on_finished=callback)

        playback.stop()

        assert not playback.has_pending_callback
        assert not playback.finish()
        callback.assert_not_called()
        assert playback.stop_count == 1

    def test_new_play_supersedes_callback(self) -> None:
        """Test starting a clip discards the previous clip's callback."""
        playback = MockAudioPlayback()
        first, second = MagicMock(), MagicMock()
        playback.play(b"1", 22050, on_finished=first)
        playback.play(b"2", 22050, on_finished=second)

        playback.finish()

        first.assert_not_called()
        second.assert_called_once()

    def test_finish_after(self) -> None:
        """Test clips complete on their own when finish_after is set."""
        playback = MockAudioPlayback(finish_after=0.05)
        done = threading.Event()
        playback.play(b"abc", 22050, on_finished=done.set)

        assert done.wait(2)

    def test_finish_after_cancelled_by_stop(self) -> None:
        playback = MockAudioPlayback(finish_after=0.05)
        done = threading.Event()
        playback.play(b"abc", 22050, on_finished=done.set)
        playback.stop()

        assert not done.wait(0.2)


class TestCreateAudioPlayback:
    """Tests for the playback factory."""

    def test_mock(self) -> None:
        playback = create_audio_playback(AudioConfig(sample_rate=16000), use_mock=True)

        assert isinstance(playback, MockAudioPlayback)
        assert playback.sample_rate == 16000

    def test_pyaudio_missing(self) -> None:
        """Test a clear error when PyAudio is not installed."""
        with patch("nurtra.audio.pyaudio_backend.PYAUDIO_AVAILABLE", False):
            with pytest.raises(RuntimeError, match="audio"):
                create_audio_playback(AudioConfig())
