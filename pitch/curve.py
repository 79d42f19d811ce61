from __future__ import annotations

import logging
import math
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from models.note import PitchbendData
from pitch.portamento import Portamento, make_portamento


logger = logging.getLogger(__name__)

MS_PER_STEP = 5
# Pitch steps per beat at the reference tempo (480 ms per beat); the grid itself ignores tempo.
STEPS_PER_BEAT = 96
BASE64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"


def encode_12bit(value: int) -> str:
    """Two characters encoding a 12-bit two's complement number (-2048 to 2047)."""
    if value < 0:
        value += 4096
    value = max(0, min(4095, value))
    result = ""
    for six_bit in (value // 64, value % 64):
        if not 0 <= six_bit < 64:
            return "AA"
        result += BASE64_ALPHABET[six_bit]
    if len(result) != 2:
        return "AA"
    return result


def next_pitch_step(position_ms: float) -> int:
    return int(math.ceil(position_ms / MS_PER_STEP))


def prev_pitch_step(position_ms: float) -> int:
    prev_step = int(math.floor(position_ms / MS_PER_STEP))
    if prev_step == next_pitch_step(position_ms):
        # Never let both step functions land on the same step.
        return prev_step - 1
    return prev_step


def ms_to_step(position_ms: float) -> int:
    return int(math.floor(position_ms / MS_PER_STEP))


class Pitchbend:
    """Stack of portamentos covering one pitch step; the newest one wins."""

    def __init__(self, portamento: Portamento):
        self._portamentos: List[Portamento] = [portamento]

    def add_portamento(self, portamento: Portamento) -> None:
        self._portamentos.append(portamento)

    def remove_portamento(self, anchor_ms: int) -> bool:
        for i in range(len(self._portamentos) - 1, -1, -1):
            if self._portamentos[i].anchor_ms == anchor_ms:
                del self._portamentos[i]
                return True
        return False

    def is_empty(self) -> bool:
        return not self._portamentos

    def portamento(self) -> Optional[Portamento]:
        if not self._portamentos:
            return None
        return self._portamentos[-1]

    def apply(self, position_ms: float) -> float:
        return self._portamentos[-1].apply(position_ms)

    def __len__(self) -> int:
        return len(self._portamentos)


class PitchCurve:
    def __init__(self) -> None:
        self._pitchbends: Dict[int, Pitchbend] = {}

    @staticmethod
    def _segments(
        note_start_ms: int, data: PitchbendData, prev_note_num: int, cur_note_num: int
    ) -> Iterator[Tuple[Portamento, range]]:
        """Each pitch bend segment with the steps it covers, ends summed one width at a time."""
        start_ms = note_start_ms + data.start_offset()
        pitch_start = prev_note_num * 10.0
        for i, width in enumerate(data.pbw):
            end_ms = start_ms + width
            pitch_end = cur_note_num * 10.0
            if i < len(data.pby):
                pitch_end += data.pby[i]
            shape = data.pbm[i] if i < len(data.pbm) else ""
            portamento = make_portamento(
                note_start_ms, start_ms, pitch_start, end_ms, pitch_end, shape
            )
            yield portamento, range(next_pitch_step(start_ms), prev_pitch_step(end_ms) + 1)
            start_ms = end_ms
            pitch_start = pitch_end

    def add_pitchbends(
        self, note_start_ms: int, data: PitchbendData, prev_note_num: int, cur_note_num: int
    ) -> None:
        if data.is_empty():
            logger.debug("Note at %s ms has no usable pitch bend, skipping", note_start_ms)
            return
        for portamento, steps in self._segments(note_start_ms, data, prev_note_num, cur_note_num):
            for step in steps:
                if step in self._pitchbends:
                    self._pitchbends[step].add_portamento(portamento)
                else:
                    self._pitchbends[step] = Pitchbend(portamento)

    def remove_pitchbends(self, note_start_ms: int, data: PitchbendData) -> None:
        if data.is_empty():
            logger.debug("Note at %s ms has no usable pitch bend, nothing to remove", note_start_ms)
            return
        # Pitches do not affect which steps a segment covers.
        for _, steps in self._segments(note_start_ms, data, 0, 0):
            for step in steps:
                pitchbend = self._pitchbends.get(step)
                if pitchbend is None:
                    continue
                if not pitchbend.remove_portamento(note_start_ms):
                    logger.warning(
                        "No portamento anchored at %s ms on pitch step %s", note_start_ms, step
                    )
                    continue
                if pitchbend.is_empty():
                    del self._pitchbends[step]

    def sample(self, first_step: int, last_step: int) -> np.ndarray:
        """Pitch (tenths) at every step of the span, NaN where no portamento is active."""
        count = max(0, last_step - first_step + 1)
        values = np.full(count, np.nan, dtype=np.float64)
        for step in range(first_step, last_step + 1):
            pitchbend = self._pitchbends.get(step)
            if pitchbend is not None:
                values[step - first_step] = pitchbend.apply(step * MS_PER_STEP)
        return values

    def render(self, first_step: int, last_step: int, note_num: int) -> str:
        """Writes out a span of the curve in the format resamplers read."""
        if last_step < first_step:
            return ""
        note_pitch = note_num * 10.0
        default_pitch = 0.0
        for step in range(first_step, last_step + 1):
            pitchbend = self._pitchbends.get(step)
            if pitchbend is not None and pitchbend.portamento() is not None:
                default_pitch = pitchbend.portamento().start_pitch
                break

        samples = self.sample(first_step, last_step)
        cents = np.floor((samples - note_pitch) * 10 + 0.5)

        parts: List[str] = []
        index = 0
        count = len(samples)
        while index < count:
            step = first_step + index
            if not np.isnan(samples[index]):
                parts.append(encode_12bit(int(cents[index])))
                portamento = self._pitchbends[step].portamento()
                if portamento is not None:
                    default_pitch = portamento.end_pitch
                index += 1
                continue
            run_end = index
            while run_end < count and np.isnan(samples[run_end]):
                run_end += 1
            num_empty = run_end - index
            parts.append(encode_12bit(int(math.floor((default_pitch - note_pitch) * 10 + 0.5))))
            if num_empty > 1:
                parts.append(f"#{num_empty - 1}#")
            index = run_end
        return "".join(parts)

    def has_step(self, step: int) -> bool:
        return step in self._pitchbends

    def steps(self) -> List[int]:
        return sorted(self._pitchbends)

    def depth(self, step: int) -> int:
        pitchbend = self._pitchbends.get(step)
        return len(pitchbend) if pitchbend else 0

    def __len__(self) -> int:
        return len(self._pitchbends)
