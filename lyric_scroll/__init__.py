"""
Lyric Scroll

Sincroniza letras LRC con un reloj de reproducción externo y decide
qué línea está activa y dónde debe quedar el scroll de la vista.
"""

from .index_resolver import resolve
from .lrc_parser import LRCParser, LyricLine, Timeline, parse
from .offset_calculator import LayoutMode, LineHeights, compute_offset
from .scroll_arbitrator import ScrollArbitrator, ScrollGate
from .settings import SettingsManager, SyncSettings
from .sync_engine import LyricSyncEngine

__version__ = "1.0.0"

__all__ = [
    "LRCParser",
    "LayoutMode",
    "LineHeights",
    "LyricLine",
    "LyricSyncEngine",
    "ScrollArbitrator",
    "ScrollGate",
    "SettingsManager",
    "SyncSettings",
    "Timeline",
    "compute_offset",
    "parse",
    "resolve",
]
