"""
Motor de sincronización de letras y auto-scroll.

Una instancia por sesión. Recibe del host:
- El texto del transcript (LRC)
- La posición de reproducción en cada tick
- La altura medida de cada línea
- Los eventos de scroll del usuario y el comando "ir a la línea actual"

Y emite:
- Cambio de línea activa (índice, línea)
- Comando de scroll (offset en píxeles)

Todo es síncrono y de un solo hilo; el único comportamiento diferido es
el plazo de reanudación del ScrollArbitrator.
"""

import logging
from typing import Callable, Optional

from .index_resolver import resolve
from .lrc_parser import LRCParser, LyricLine, Timeline
from .offset_calculator import LayoutMode, LineHeights, compute_offset, padding_px
from .scroll_arbitrator import Clock, ResumeTimer, ScrollArbitrator
from .settings import SyncSettings

logger = logging.getLogger(__name__)


# Type alias para callbacks
OnActiveLineChangedCallback = Callable[[int, Optional[LyricLine]], None]
OnScrollRequestedCallback = Callable[[float], None]


class LyricSyncEngine:
    """
    Motor de sincronización de letras con la reproducción.

    Determina la línea activa para cada posición de reproducción y
    calcula el scroll que la deja visible, respetando el scroll manual
    del usuario.
    """

    # Límites de offset ajustable
    MIN_OFFSET_MS = -10000  # -10 segundos
    MAX_OFFSET_MS = 10000  # +10 segundos

    def __init__(
        self,
        settings: Optional[SyncSettings] = None,
        clock: Optional[Clock] = None,
        timer: Optional[ResumeTimer] = None,
    ):
        """
        Inicializa el motor de sincronización.

        Args:
            settings: Configuración; por defecto SyncSettings().
            clock: Reloj en ms para el plazo de scroll manual.
            timer: Timer diferido para retomar el auto-scroll (p.ej. QtResumeTimer).
        """
        self._settings = settings or SyncSettings()
        self._settings.validate()

        # Estado de letras
        self._timeline = Timeline()
        self._line_heights = LineHeights(0)

        # Estado de sincronización
        self._active_index: int = -1
        self._position_ms: float = 0
        self._offset_ms: int = 0
        self._viewport_height: float = self._settings.viewport_height
        self._last_scroll_offset: Optional[float] = None

        self._arbitrator = ScrollArbitrator(
            quiet_period_ms=self._settings.user_scroll_quiet_period_ms,
            enabled=self._settings.auto_scroll_enabled,
            clock=clock,
            timer=timer,
            on_resume=self._on_auto_scroll_resumed,
        )

        # Callbacks
        self._on_active_line_changed: list[OnActiveLineChangedCallback] = []
        self._on_scroll_requested: list[OnScrollRequestedCallback] = []

    # --- Transcript ---

    def set_transcript(self, lrc_content: str) -> Timeline:
        """
        Parsea y establece un transcript nuevo.

        Args:
            lrc_content: Texto en formato LRC.

        Returns:
            El Timeline resultante.
        """
        timeline = LRCParser.parse(lrc_content)
        self.set_timeline(timeline)
        return timeline

    def set_timeline(self, timeline: Timeline) -> None:
        """
        Reemplaza el Timeline actual.

        Las alturas y el índice activo se reinician juntos, antes de
        cualquier recálculo, para no indexar alturas viejas con el
        timeline nuevo.
        """
        self._timeline = timeline
        self._line_heights = LineHeights(len(timeline))
        self._active_index = -1
        self._last_scroll_offset = None

        logger.info(
            f"Letras cargadas: {len(timeline)} líneas"
            + (f" (offset {timeline.offset_ms}ms)" if timeline.offset_ms else "")
        )

        # La línea nombrada cambió aunque el índice coincida: notificar siempre
        self._active_index = self._resolve_index()
        self._notify_active_line_changed()
        self._maybe_request_scroll()

    # --- Entradas del host ---

    def report_playback_time(self, position_ms: float) -> None:
        """
        Actualiza la posición de reproducción (la llamada más reciente gana).

        Args:
            position_ms: Posición en milisegundos; no puede ser NaN.
        """
        self._position_ms = position_ms
        # Resolver antes de consultar el arbitrador: si el plazo vence en este
        # tick, el scroll de reanudación ya usa la línea nueva
        self._update_active_index()

    def report_line_height(self, index: int, height_px: float) -> None:
        """
        Registra la altura renderizada de una línea.

        Puede llegar en cualquier orden y repetirse si cambia el layout.
        """
        if self._line_heights.report(index, height_px):
            self._maybe_request_scroll()

    def report_user_scroll(self) -> None:
        """El usuario desplazó la vista: suspender el auto-scroll."""
        self._arbitrator.report_user_scroll()

    def jump_to_current_line(self) -> float:
        """
        Vuelve al seguimiento automático y hace scroll a la línea actual.

        Funciona aunque el auto-scroll esté deshabilitado por configuración.

        Returns:
            El offset emitido.
        """
        self._arbitrator.force_auto_follow()
        offset = self.current_offset()
        self._emit_scroll(offset)
        return offset

    def set_viewport_height(self, height_px: float) -> None:
        """Actualiza el alto visible del área de scroll."""
        self._viewport_height = max(0.0, float(height_px))
        self._maybe_request_scroll()

    def apply_settings(self, settings: SyncSettings) -> None:
        """
        Aplica una configuración nueva sin perder el estado de la sesión.

        El alto reportado por el host con set_viewport_height se conserva,
        salvo que la configuración nueva traiga un viewport_height distinto.
        """
        settings.validate()
        if settings.viewport_height != self._settings.viewport_height:
            self._viewport_height = settings.viewport_height
        self._settings = settings
        self._arbitrator.enabled = settings.auto_scroll_enabled
        self._arbitrator.quiet_period_ms = settings.user_scroll_quiet_period_ms
        self._maybe_request_scroll()

    # --- Offset de sincronización ---

    @property
    def offset_ms(self) -> int:
        """Retorna el offset manual actual en ms."""
        return self._offset_ms

    def adjust_offset(self, delta_ms: int) -> int:
        """
        Ajusta el offset de sincronización.

        Args:
            delta_ms: Cambio en milisegundos (positivo = adelantar letras)

        Returns:
            Nuevo valor de offset.
        """
        new_offset = self._offset_ms + delta_ms
        self._offset_ms = max(self.MIN_OFFSET_MS, min(self.MAX_OFFSET_MS, new_offset))
        logger.info(f"Offset ajustado: {self._offset_ms}ms")

        # Forzar recálculo inmediato con el nuevo offset
        self._update_active_index()
        return self._offset_ms

    def step_offset(self, direction: int) -> int:
        """
        Mueve el offset un paso de offset_step_ms (como los hotkeys de ajuste).

        Args:
            direction: Positivo = adelantar letras, negativo = retrasarlas.

        Returns:
            Nuevo valor de offset.
        """
        if direction == 0:
            return self._offset_ms
        step = self._settings.offset_step_ms
        return self.adjust_offset(step if direction > 0 else -step)

    def reset_offset(self) -> None:
        """Reinicia el offset a 0."""
        self._offset_ms = 0
        logger.info("Offset reiniciado a 0")
        self._update_active_index()

    # --- Consultas ---

    @property
    def timeline(self) -> Timeline:
        return self._timeline

    @property
    def line_heights(self) -> LineHeights:
        return self._line_heights

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def arbitrator(self) -> ScrollArbitrator:
        return self._arbitrator

    @property
    def settings(self) -> SyncSettings:
        return self._settings

    @property
    def layout_mode(self) -> LayoutMode:
        if self._settings.center_line_enabled:
            return LayoutMode.CENTERED
        return LayoutMode.TOP_ALIGNED

    def current_offset(self) -> float:
        """Offset calculado para la línea activa actual."""
        return compute_offset(
            self._line_heights,
            self._active_index,
            self.layout_mode,
            self._viewport_height,
            self._settings.center_offset_fraction,
        )

    def padding(self) -> tuple[float, float]:
        """
        Espacio reservado (arriba, abajo) en píxeles.

        Solo se reserva con auto-scroll habilitado.
        """
        if not self._settings.auto_scroll_enabled:
            return 0.0, 0.0
        return (
            padding_px(self._viewport_height, self._settings.top_padding_fraction),
            padding_px(self._viewport_height, self._settings.bottom_padding_fraction),
        )

    def get_current_line(self) -> tuple[int, Optional[LyricLine]]:
        """Retorna (índice, línea) activos, o (-1, None)."""
        if self._active_index < 0:
            return -1, None
        return self._active_index, self._timeline[self._active_index]

    def get_context_lines(
        self, before: int = 2, after: int = 2
    ) -> list[tuple[int, LyricLine]]:
        """
        Obtiene líneas de contexto alrededor de la línea actual.

        Returns:
            Lista de tuplas (índice_relativo, LyricLine)
        """
        return self._timeline.context_lines(self._active_index, before, after)

    def get_progress(self) -> tuple[int, int]:
        """
        Obtiene el progreso actual (línea actual / total).

        Returns:
            Tupla (línea_actual, total_líneas)
        """
        return self._active_index + 1, len(self._timeline)

    # --- Callbacks públicos ---

    def on_active_line_changed(self, callback: OnActiveLineChangedCallback) -> None:
        """Registra callback para cambios de línea activa."""
        self._on_active_line_changed.append(callback)

    def on_scroll_requested(self, callback: OnScrollRequestedCallback) -> None:
        """Registra callback para comandos de scroll."""
        self._on_scroll_requested.append(callback)

    # --- Internos ---

    def _resolve_index(self) -> int:
        adjusted_pos = self._position_ms + self._timeline.offset_ms + self._offset_ms
        return resolve(self._timeline, adjusted_pos)

    def _update_active_index(self) -> None:
        line_idx = self._resolve_index()

        # Solo notificar si cambió la línea
        if line_idx != self._active_index:
            self._active_index = line_idx
            self._notify_active_line_changed()

        self._maybe_request_scroll()

    def _maybe_request_scroll(self) -> None:
        """Emite scroll si el arbitrador lo permite y el offset cambió."""
        if not self._arbitrator.may_auto_scroll:
            return

        offset = self.current_offset()
        if offset != self._last_scroll_offset:
            self._emit_scroll(offset)

    def _on_auto_scroll_resumed(self) -> None:
        # El usuario movió la vista: el último offset emitido ya no vale
        if self._arbitrator.enabled:
            self._emit_scroll(self.current_offset())

    def _emit_scroll(self, offset: float) -> None:
        self._last_scroll_offset = offset
        for callback in self._on_scroll_requested:
            try:
                callback(offset)
            except Exception as e:
                logger.error(f"Error en callback on_scroll_requested: {e}")

    def _notify_active_line_changed(self) -> None:
        index, line = self.get_current_line()
        for callback in self._on_active_line_changed:
            try:
                callback(index, line)
            except Exception as e:
                logger.error(f"Error en callback on_active_line_changed: {e}")
