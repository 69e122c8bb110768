"""Test configuration and fixtures.

Provides reusable fixtures for:
- Sample LRC transcripts
- A manually driven clock
- A fake resume timer that records start/cancel calls
"""

import pytest

from lyric_scroll.lrc_parser import LRCParser
from lyric_scroll.settings import SyncSettings
from lyric_scroll.sync_engine import LyricSyncEngine


SAMPLE_LRC = """
[ti:Sample Song]
[ar:Sample Artist]
[al:Sample Album]

[00:01.00]First line
[00:02.00]Second line
[00:03.00]Third line
"""


class FakeClock:
    """Clock returning a settable time in milliseconds."""

    def __init__(self, now_ms: float = 0.0):
        self.now_ms = now_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, delta_ms: float) -> None:
        self.now_ms += delta_ms


class FakeTimer:
    """Single-shot timer stand-in: start() replaces any pending callback."""

    def __init__(self):
        self.delay_ms = None
        self.callback = None
        self.starts = 0
        self.cancels = 0

    @property
    def is_active(self) -> bool:
        return self.callback is not None

    def start(self, delay_ms, callback):
        self.delay_ms = delay_ms
        self.callback = callback
        self.starts += 1

    def cancel(self):
        self.callback = None
        self.cancels += 1

    def fire(self):
        callback, self.callback = self.callback, None
        if callback is not None:
            callback()


@pytest.fixture
def sample_lrc():
    return SAMPLE_LRC


@pytest.fixture
def sample_timeline():
    return LRCParser.parse(SAMPLE_LRC)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_timer():
    return FakeTimer()


@pytest.fixture
def make_engine(clock):
    """Build an engine with recording listeners attached."""

    def _make(timer=None, **overrides):
        settings = SyncSettings(**overrides)
        engine = LyricSyncEngine(settings=settings, clock=clock, timer=timer)
        engine.line_events = []
        engine.scroll_events = []
        engine.on_active_line_changed(lambda idx, line: engine.line_events.append((idx, line)))
        engine.on_scroll_requested(engine.scroll_events.append)
        return engine

    return _make
