"""
Parser para formato LRC (Lyrics)

Formato LRC estándar:
[mm:ss.xx] Línea de letra
[00:12.00] Primera línea
[00:17.20][00:45.10] Línea repetida (un timestamp por aparición)

Tags de metadatos (opcionales):
[ti:Título]
[ar:Artista]
[al:Álbum]
[offset:+/-ms]

El parser nunca lanza excepciones: las líneas que no empiezan con un
timestamp reconocible se descartan en silencio.
"""

import re
from dataclasses import dataclass
from functools import cached_property
from typing import Iterator, Optional

from .index_resolver import resolve


@dataclass(frozen=True)
class LyricLine:
    """Representa una línea de letra con su timestamp."""

    id: int  # Posición en el timeline ordenado
    timestamp_ms: int  # Tiempo en milisegundos
    text: str  # Vacío = pausa instrumental

    @property
    def timestamp_seconds(self) -> float:
        """Retorna el timestamp en segundos."""
        return self.timestamp_ms / 1000.0

    def __str__(self) -> str:
        return f"{format_timestamp(self.timestamp_ms)}{self.text}"


@dataclass(frozen=True)
class Timeline:
    """
    Secuencia inmutable de líneas ordenadas por timestamp, con metadatos.

    Un transcript nuevo produce un Timeline nuevo; nunca se modifica en sitio.
    """

    lines: tuple[LyricLine, ...] = ()
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    offset_ms: int = 0  # Offset global en ms (tag [offset:])

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[LyricLine]:
        return iter(self.lines)

    def __getitem__(self, index: int) -> LyricLine:
        return self.lines[index]

    @cached_property
    def timestamps(self) -> tuple[int, ...]:
        """Timestamps en orden ascendente (se calcula una sola vez)."""
        return tuple(line.timestamp_ms for line in self.lines)

    @property
    def duration_ms(self) -> int:
        """Duración estimada basada en el último timestamp."""
        if not self.lines:
            return 0
        return self.lines[-1].timestamp_ms

    def line_at(self, position_ms: float) -> tuple[int, Optional[LyricLine]]:
        """
        Encuentra la línea que corresponde a una posición temporal.

        Args:
            position_ms: Posición actual en milisegundos (sin offset aplicado)

        Returns:
            Tupla (índice, LyricLine) o (-1, None) si no hay línea
        """
        idx = resolve(self, position_ms)
        if idx >= 0:
            return idx, self.lines[idx]
        return -1, None

    def context_lines(
        self, current_idx: int, before: int = 2, after: int = 2
    ) -> list[tuple[int, LyricLine]]:
        """
        Obtiene líneas de contexto alrededor de la línea actual.

        Args:
            current_idx: Índice de la línea actual
            before: Cantidad de líneas anteriores
            after: Cantidad de líneas siguientes

        Returns:
            Lista de tuplas (índice_relativo, LyricLine)
            donde índice_relativo es 0 para la actual, negativo para anteriores, positivo para siguientes
        """
        if current_idx < 0 or not self.lines:
            return []

        start_idx = max(0, current_idx - before)
        end_idx = min(len(self.lines), current_idx + after + 1)

        return [(idx - current_idx, self.lines[idx]) for idx in range(start_idx, end_idx)]


def format_timestamp(timestamp_ms: int) -> str:
    """Formatea milisegundos como tag LRC [mm:ss.xx] (centésimas truncadas)."""
    minutes, rest = divmod(max(0, int(timestamp_ms)), 60000)
    seconds, millis = divmod(rest, 1000)
    return f"[{minutes:02d}:{seconds:02d}.{millis // 10:02d}]"


class LRCParser:
    """Parser para archivos/strings en formato LRC."""

    # Timestamp al inicio del texto restante: [mm:ss.xx], [mm:ss:xx] o [mm:ss]
    # Minutos acotados: un tag desmesurado se trata como línea sin timestamp
    TIMESTAMP_PATTERN = re.compile(r"\s*\[(\d{1,6}):(\d{1,2})(?:[.:](\d+))?\]")

    # Regex para tags de metadatos: [tag:valor]
    TAG_PATTERN = re.compile(r"\[([a-zA-Z]+):([^\]]*)\]")

    # Valor de [offset:]: entero con signo opcional, a lo sumo 9 dígitos
    OFFSET_PATTERN = re.compile(r"[+-]?\d{1,9}")

    @classmethod
    def parse(cls, lrc_content: str) -> Timeline:
        """
        Parsea contenido LRC a un Timeline.

        Args:
            lrc_content: String con contenido en formato LRC

        Returns:
            Timeline con las líneas ordenadas (puede estar vacío)
        """
        entries: list[tuple[int, str]] = []
        metadata: dict[str, str] = {}

        for raw_line in lrc_content.splitlines():
            line = raw_line.strip()
            if not line:
                continue

            timestamps, text = cls._split_leading_timestamps(line)

            if not timestamps:
                tag_match = cls.TAG_PATTERN.fullmatch(line)
                if tag_match:
                    metadata[tag_match.group(1).lower()] = tag_match.group(2).strip()
                continue

            # Una entrada por timestamp: [00:12.00][00:24.00] Texto
            for ts in timestamps:
                entries.append((ts, text))

        # sort() es estable: los timestamps repetidos conservan el orden del texto
        entries.sort(key=lambda entry: entry[0])

        return Timeline(
            lines=tuple(
                LyricLine(id=idx, timestamp_ms=ts, text=text)
                for idx, (ts, text) in enumerate(entries)
            ),
            title=metadata.get("ti"),
            artist=metadata.get("ar"),
            album=metadata.get("al"),
            offset_ms=cls._parse_offset(metadata.get("offset")),
        )

    @classmethod
    def _split_leading_timestamps(cls, line: str) -> tuple[list[int], str]:
        """Extrae los timestamps iniciales y el texto que les sigue."""
        timestamps = []
        pos = 0

        while True:
            match = cls.TIMESTAMP_PATTERN.match(line, pos)
            if match is None:
                break

            minutes = int(match.group(1))
            seconds = int(match.group(2))

            # Fracción decimal de segundo, truncada a milisegundos
            fraction = (match.group(3) or "0")[:3].ljust(3, "0")

            timestamps.append((minutes * 60 + seconds) * 1000 + int(fraction))
            pos = match.end()

        return timestamps, line[pos:].strip()

    @classmethod
    def _parse_offset(cls, value: Optional[str]) -> int:
        if not value or not cls.OFFSET_PATTERN.fullmatch(value):
            return 0
        return int(value)

    @classmethod
    def to_lrc(cls, timeline: Timeline) -> str:
        """
        Convierte un Timeline de vuelta a formato LRC string.

        Args:
            timeline: Timeline a convertir

        Returns:
            String en formato LRC
        """
        result = []

        # Agregar metadatos
        if timeline.title:
            result.append(f"[ti:{timeline.title}]")
        if timeline.artist:
            result.append(f"[ar:{timeline.artist}]")
        if timeline.album:
            result.append(f"[al:{timeline.album}]")
        if timeline.offset_ms != 0:
            result.append(f"[offset:{timeline.offset_ms:+d}]")

        if result:
            result.append("")  # Línea vacía después de metadatos

        # Agregar líneas
        for line in timeline:
            result.append(str(line))

        return "\n".join(result)


def parse(lrc_content: str) -> Timeline:
    """Atajo para LRCParser.parse."""
    return LRCParser.parse(lrc_content)
