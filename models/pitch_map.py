from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List

from pitch.notes import ordered_pitches


@dataclass(frozen=True)
class PitchMapData:
    pitch: str
    prefix: str
    suffix: str


class PitchMap:
    """Prefix/suffix appended to aliases per pitch (prefix.map)."""

    def __init__(self) -> None:
        self._pitches: List[str] = ordered_pitches()
        self._prefixes: Dict[str, str] = {}
        self._suffixes: Dict[str, str] = {}

    def get_prefix(self, pitch: str) -> str:
        return self._prefixes.get(pitch, "")

    def get_suffix(self, pitch: str) -> str:
        return self._suffixes.get(pitch, "")

    def put(self, pitch: str, prefix: str, suffix: str) -> None:
        self._prefixes[pitch] = prefix
        self._suffixes[pitch] = suffix

    def ordered_pitches(self) -> Iterator[str]:
        return iter(self._pitches)

    def data(self) -> Iterator[PitchMapData]:
        for pitch in self._pitches:
            yield PitchMapData(pitch, self.get_prefix(pitch), self.get_suffix(pitch))
