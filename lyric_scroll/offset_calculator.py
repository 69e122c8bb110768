"""
Cálculo del desplazamiento de scroll para la línea activa.

Las alturas de línea llegan de forma incremental desde el host; las que
aún no se midieron cuentan como 0, de modo que el offset es siempre
definido y converge al valor correcto a medida que llegan las medidas.
"""

import logging
import math
from collections.abc import Mapping
from enum import Enum
from typing import Iterator

logger = logging.getLogger(__name__)


class LayoutMode(Enum):
    """Posición de la línea activa dentro del viewport."""

    TOP_ALIGNED = "top"  # Línea activa arriba del área visible
    CENTERED = "centered"  # Línea activa a una fracción fija del viewport


class LineHeights(Mapping):
    """
    Alturas en píxeles medidas por el host, indexadas por línea.

    Solo crece en cobertura: las entradas se agregan o actualizan, nunca
    se eliminan. Se descarta entera cuando cambia el Timeline.
    """

    def __init__(self, line_count: int):
        self._line_count = line_count
        self._heights: dict[int, float] = {}

    @property
    def line_count(self) -> int:
        return self._line_count

    def report(self, index: int, height_px: float) -> bool:
        """
        Registra la altura medida de una línea.

        Args:
            index: Índice de la línea en el Timeline actual.
            height_px: Altura en píxeles.

        Returns:
            True si la medida se aceptó, False si se ignoró.
        """
        if not 0 <= index < self._line_count:
            logger.debug(f"Altura ignorada: índice {index} fuera de rango")
            return False
        if not math.isfinite(height_px) or height_px < 0:
            logger.debug(f"Altura ignorada: valor inválido {height_px} para línea {index}")
            return False

        self._heights[index] = float(height_px)
        return True

    @property
    def is_complete(self) -> bool:
        """True si todas las líneas ya tienen altura medida."""
        return len(self._heights) == self._line_count

    def __getitem__(self, index: int) -> float:
        return self._heights[index]

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._heights))

    def __len__(self) -> int:
        return len(self._heights)


def compute_offset(
    line_heights: Mapping,
    active_index: int,
    mode: LayoutMode,
    viewport_height: float,
    center_offset_fraction: float,
) -> float:
    """
    Calcula el scroll vertical que lleva la línea activa a su posición.

    Args:
        line_heights: Alturas por índice; las ausentes valen 0.
        active_index: Línea activa (-1 = ninguna).
        mode: TOP_ALIGNED o CENTERED.
        viewport_height: Alto visible del área de scroll en píxeles.
        center_offset_fraction: Fracción (0, 1) del viewport donde queda
            el centro de la línea activa en modo CENTERED.

    Returns:
        Offset en píxeles, nunca negativo.
    """
    if active_index < 0:
        return 0.0

    before = sum(line_heights.get(i, 0.0) for i in range(active_index))

    if mode is LayoutMode.CENTERED:
        target = (
            before
            - viewport_height * center_offset_fraction
            + line_heights.get(active_index, 0.0) / 2
        )
    else:
        target = before

    return max(0.0, float(target))


def padding_px(viewport_height: float, fraction: float) -> float:
    """Espacio en blanco reservado arriba/abajo de la lista para poder llegar a la primera/última línea."""
    return max(0.0, viewport_height * fraction)
