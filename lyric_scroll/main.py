"""
Lyric Scroll - demo de consola

Reproduce un archivo LRC contra un reloj simulado sobre el event loop de
Qt y registra en el log los cambios de línea activa y los comandos de
scroll que emitiría el motor.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QCoreApplication, QElapsedTimer, QTimer

from .lrc_parser import LyricLine
from .qt_timer import QtResumeTimer
from .settings import SettingsManager
from .sync_engine import LyricSyncEngine

# Configurar logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

# 50ms para suavidad
TICK_INTERVAL_MS = 50


class PlaybackSimulator:
    """
    Simula un reproductor: avanza un reloj y alimenta al motor en cada tick.

    Reporta una altura fija para cada línea, como haría el host al
    terminar el layout.
    """

    def __init__(
        self,
        app: QCoreApplication,
        engine: LyricSyncEngine,
        speed: float = 1.0,
        line_height: float = 42,
    ):
        self.app = app
        self.engine = engine
        self.speed = speed
        self.line_height = line_height

        self._elapsed = QElapsedTimer()
        self._tick_timer = QTimer()
        self._tick_timer.timeout.connect(self._on_tick)

        self.engine.on_active_line_changed(self._on_active_line_changed)
        self.engine.on_scroll_requested(self._on_scroll_requested)

    @property
    def end_position_ms(self) -> float:
        """Última línea + periodo de silencio."""
        return (
            self.engine.timeline.duration_ms
            + self.engine.settings.user_scroll_quiet_period_ms
        )

    def start(self) -> None:
        for index in range(len(self.engine.timeline)):
            self.engine.report_line_height(index, self.line_height)

        self._elapsed.start()
        self._tick_timer.start(TICK_INTERVAL_MS)
        logger.info("Reproducción simulada iniciada")

    def _on_tick(self) -> None:
        position_ms = self._elapsed.elapsed() * self.speed
        self.engine.report_playback_time(position_ms)

        if position_ms >= self.end_position_ms:
            self._tick_timer.stop()
            logger.info("Reproducción simulada terminada")
            self.app.quit()

    def _on_active_line_changed(self, index: int, line: Optional[LyricLine]) -> None:
        current, total = self.engine.get_progress()
        if line is None:
            logger.info(f"[{current}/{total}] (sin línea activa)")
        else:
            logger.info(f"[{current}/{total}] {line}")

    def _on_scroll_requested(self, offset_px: float) -> None:
        logger.info(f"Scroll a {offset_px:.1f}px")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lyric-scroll",
        description="Reproduce un archivo LRC con un reloj simulado.",
    )
    parser.add_argument("lrc_file", type=Path, help="Archivo .lrc")
    parser.add_argument("--speed", type=float, default=1.0, help="Velocidad del reloj simulado")
    parser.add_argument("--viewport-height", type=float, default=None, help="Alto del viewport en px")
    parser.add_argument("--line-height", type=float, default=42, help="Alto de cada línea en px")
    parser.add_argument("--settings", type=Path, default=None, help="Archivo de configuración JSON")
    parser.add_argument(
        "--offset-steps",
        type=int,
        default=0,
        help="Pasos de offset_step_ms a aplicar (positivo = adelantar letras)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Punto de entrada principal."""
    args = build_arg_parser().parse_args(argv)

    try:
        lrc_content = args.lrc_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"No se pudo leer {args.lrc_file}: {e}")
        return 1

    settings = SettingsManager(args.settings).settings
    if args.viewport_height is not None:
        settings.viewport_height = args.viewport_height

    # Crear aplicación Qt (sin ventanas)
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    engine = LyricSyncEngine(settings=settings, timer=QtResumeTimer())
    simulator = PlaybackSimulator(app, engine, speed=max(0.1, args.speed), line_height=args.line_height)

    engine.set_transcript(lrc_content)
    for _ in range(abs(args.offset_steps)):
        engine.step_offset(args.offset_steps)
    if not len(engine.timeline):
        logger.warning("El archivo no contiene líneas sincronizadas")

    # Arrancar dentro del event loop
    QTimer.singleShot(0, simulator.start)
    app.exec()
    return 0


if __name__ == "__main__":
    sys.exit(main())
