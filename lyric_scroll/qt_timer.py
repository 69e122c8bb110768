"""
Timer de reanudación sobre el event loop de Qt.

Usa un QTimer single-shot: cada start() reinicia el timer, así un
evento de scroll nuevo reemplaza el plazo pendiente en lugar de sumarse.
"""

import logging
from typing import Callable, Optional

from PyQt6.QtCore import Qt, QTimer

logger = logging.getLogger(__name__)


class QtResumeTimer:
    """Callback diferido y cancelable para ScrollArbitrator."""

    def __init__(self):
        self._callback: Optional[Callable[[], None]] = None
        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._on_timeout)

    def start(self, delay_ms: int, callback: Callable[[], None]) -> None:
        """(Re)inicia el timer; reemplaza cualquier callback pendiente."""
        self._callback = callback
        self._timer.start(max(0, int(delay_ms)))

    def cancel(self) -> None:
        """Detiene el timer si estaba activo."""
        self._timer.stop()
        self._callback = None

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    def _on_timeout(self) -> None:
        callback, self._callback = self._callback, None
        if callback is None:
            return
        try:
            callback()
        except Exception as e:
            logger.error(f"Error en callback del timer de reanudación: {e}")
