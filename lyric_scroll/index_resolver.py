"""
Resolución de la línea activa para una posición de reproducción.

Es una función pura de (timeline, posición): no guarda cursor, así que
se corrige sola ante seeks hacia atrás o saltos hacia adelante.
"""

from bisect import bisect_right
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lrc_parser import Timeline


def resolve(timeline: "Timeline", current_time_ms: float) -> int:
    """
    Determina el índice de la línea activa.

    Args:
        timeline: Timeline ordenado por timestamp.
        current_time_ms: Posición de reproducción en milisegundos.
            Precondición: no puede ser NaN (resultado indefinido).

    Returns:
        Mayor índice i con timeline[i].timestamp_ms <= current_time_ms,
        o -1 si ninguna línea ha empezado (o el timeline está vacío).
    """
    if not timeline.lines:
        return -1

    # bisect_right ubica la posición tras los timestamps iguales
    return bisect_right(timeline.timestamps, current_time_ms) - 1
