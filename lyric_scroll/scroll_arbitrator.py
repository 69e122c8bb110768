"""
Arbitraje entre auto-scroll y scroll manual del usuario.

Cuando el usuario desplaza la vista, el auto-scroll queda suspendido
durante un periodo de silencio configurable. Cada nuevo evento de scroll
reinicia el plazo (no se acumulan timers). Al vencer, el control vuelve
al seguimiento automático.

El arbitrador no sabe nada de píxeles: solo decide si el offset calculado
puede aplicarse.
"""

import logging
import time
from enum import Enum
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

# Reloj inyectable que retorna milisegundos
Clock = Callable[[], float]


class ScrollGate(Enum):
    """Estado del arbitrador."""

    AUTO_FOLLOWING = "auto_following"  # El motor puede mover el scroll
    USER_OVERRIDDEN = "user_overridden"  # El usuario tiene el control


class ResumeTimer(Protocol):
    """Callback diferido y reiniciable (p.ej. un QTimer single-shot)."""

    def start(self, delay_ms: int, callback: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...


def monotonic_ms() -> float:
    """Reloj monotónico en milisegundos."""
    return time.monotonic() * 1000.0


class ScrollArbitrator:
    """
    Máquina de dos estados que habilita o bloquea el auto-scroll.

    El vencimiento del plazo se detecta de dos formas: cuando dispara el
    timer (si hay uno) o cuando se consulta el estado con el reloj ya
    pasado del plazo. En ambos casos on_resume se llama una sola vez.
    """

    def __init__(
        self,
        quiet_period_ms: int = 3000,
        enabled: bool = True,
        clock: Optional[Clock] = None,
        timer: Optional[ResumeTimer] = None,
        on_resume: Optional[Callable[[], None]] = None,
    ):
        """
        Args:
            quiet_period_ms: Tiempo sin scroll del usuario antes de retomar el auto-scroll.
            enabled: Si es False nunca se autoriza scroll programático.
            clock: Reloj en milisegundos (por defecto monotónico).
            timer: Timer diferido opcional para retomar sin esperar una consulta.
            on_resume: Callback al volver a AUTO_FOLLOWING por vencimiento del plazo.
        """
        self._quiet_period_ms = max(0, int(quiet_period_ms))
        self._enabled = enabled
        self._clock = clock or monotonic_ms
        self._timer = timer
        self._on_resume = on_resume

        self._state = ScrollGate.AUTO_FOLLOWING
        self._resume_deadline_ms: Optional[float] = None

    @property
    def state(self) -> ScrollGate:
        """Estado actual (aplica el vencimiento del plazo si corresponde)."""
        self.poll()
        return self._state

    @property
    def resume_deadline_ms(self) -> Optional[float]:
        """Instante absoluto en que se retoma el auto-scroll, o None."""
        return self._resume_deadline_ms

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value
        logger.debug(f"Auto-scroll {'habilitado' if value else 'deshabilitado'}")

    @property
    def quiet_period_ms(self) -> int:
        return self._quiet_period_ms

    @quiet_period_ms.setter
    def quiet_period_ms(self, value: int) -> None:
        # Solo afecta a los próximos eventos de scroll
        self._quiet_period_ms = max(0, int(value))

    @property
    def may_auto_scroll(self) -> bool:
        """True si el motor puede aplicar el offset calculado."""
        return self._enabled and self.state is ScrollGate.AUTO_FOLLOWING

    def report_user_scroll(self) -> None:
        """
        Registra un scroll/arrastre del usuario.

        Pasa a USER_OVERRIDDEN y empuja el plazo a ahora + periodo de silencio.
        """
        self._resume_deadline_ms = self._clock() + self._quiet_period_ms

        if self._state is ScrollGate.AUTO_FOLLOWING:
            self._state = ScrollGate.USER_OVERRIDDEN
            logger.debug(f"Scroll manual: auto-scroll suspendido ({self._quiet_period_ms}ms)")

        # Reiniciar timer (interacciones sucesivas extienden el plazo)
        if self._timer is not None:
            self._timer.start(self._quiet_period_ms, self._on_timer_fired)

    def poll(self) -> bool:
        """
        Verifica si venció el plazo y, en ese caso, retoma el auto-scroll.

        Returns:
            True si en esta llamada se volvió a AUTO_FOLLOWING.
        """
        if self._state is not ScrollGate.USER_OVERRIDDEN:
            return False
        if self._resume_deadline_ms is None or self._clock() < self._resume_deadline_ms:
            return False

        self._state = ScrollGate.AUTO_FOLLOWING
        self._resume_deadline_ms = None
        if self._timer is not None:
            self._timer.cancel()
        logger.debug("Plazo vencido: auto-scroll retomado")

        if self._on_resume is not None:
            self._on_resume()
        return True

    def force_auto_follow(self) -> None:
        """
        Vuelve de inmediato a AUTO_FOLLOWING sin esperar el plazo.

        Usado por el comando "ir a la línea actual"; no llama a on_resume
        porque quien lo invoca hace el scroll él mismo.
        """
        if self._timer is not None:
            self._timer.cancel()
        if self._state is ScrollGate.USER_OVERRIDDEN:
            logger.debug("Salto explícito: auto-scroll retomado")
        self._state = ScrollGate.AUTO_FOLLOWING
        self._resume_deadline_ms = None

    def _on_timer_fired(self) -> None:
        if self.poll():
            return

        # El timer puede disparar unos ms antes del plazo; reprogramar el resto
        if self._state is ScrollGate.USER_OVERRIDDEN and self._resume_deadline_ms is not None:
            remaining = max(1, int(self._resume_deadline_ms - self._clock()) + 1)
            self._timer.start(remaining, self._on_timer_fired)
