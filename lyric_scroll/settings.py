"""
Gestor de configuración persistente.

Carga y guarda la configuración de sincronización y auto-scroll en JSON.
Provee valores por defecto y validación.
"""

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Ruta por defecto del archivo de configuración
DEFAULT_SETTINGS_PATH = Path.home() / ".lyric-scroll" / "settings.json"


@dataclass
class SyncSettings:
    """Configuración del motor de sincronización."""

    # --- Auto-scroll ---
    auto_scroll_enabled: bool = True
    user_scroll_quiet_period_ms: int = 3000

    # --- Layout ---
    center_line_enabled: bool = True
    center_offset_fraction: float = 0.3
    top_padding_fraction: float = 0.45
    bottom_padding_fraction: float = 0.5
    viewport_height: float = 500

    # --- Offset manual ---
    offset_step_ms: int = 500

    def validate(self) -> None:
        """Valida y corrige valores fuera de rango."""
        self.user_scroll_quiet_period_ms = max(500, min(30000, int(self.user_scroll_quiet_period_ms)))
        self.center_offset_fraction = max(0.05, min(0.95, float(self.center_offset_fraction)))
        self.top_padding_fraction = max(0.0, min(1.0, float(self.top_padding_fraction)))
        self.bottom_padding_fraction = max(0.0, min(1.0, float(self.bottom_padding_fraction)))
        self.viewport_height = max(0.0, float(self.viewport_height))
        self.offset_step_ms = max(100, min(2000, int(self.offset_step_ms)))


class SettingsManager:
    """
    Persistencia de SyncSettings entre sesiones del motor.

    El JSON solo puede sobrescribir campos del dataclass; cualquier otra
    clave se ignora. Persiste en ~/.lyric-scroll/settings.json
    """

    def __init__(self, path: Optional[Path] = None):
        self._path = path or DEFAULT_SETTINGS_PATH
        self._settings = SyncSettings()
        self.load()

    @property
    def settings(self) -> SyncSettings:
        return self._settings

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """Lee la configuración de sincronización; sin archivo se queda con los defaults."""
        if not self._path.exists():
            logger.info(f"Sin configuración de sincronización en {self._path}, usando defaults")
            return

        known_fields = {f.name for f in fields(SyncSettings)}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("se esperaba un objeto JSON")

            settings = SyncSettings(**{k: v for k, v in data.items() if k in known_fields})
            settings.validate()
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Configuración de sincronización inválida ({e}); usando defaults")
            self._settings = SyncSettings()
            return

        self._settings = settings
        logger.info(
            f"Configuración cargada desde {self._path} "
            f"(auto-scroll={'on' if settings.auto_scroll_enabled else 'off'}, "
            f"silencio={settings.user_scroll_quiet_period_ms}ms)"
        )

    def save(self) -> None:
        """Valida y escribe la configuración actual en disco."""
        try:
            self._settings.validate()
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(asdict(self._settings), ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            logger.debug(f"Configuración de sincronización guardada en {self._path}")
        except OSError as e:
            logger.warning(f"No se pudo guardar la configuración en {self._path}: {e}")

    def reset(self) -> None:
        """Vuelve a los valores por defecto y los persiste."""
        self._settings = SyncSettings()
        self.save()
        logger.info("Configuración de sincronización restaurada")
