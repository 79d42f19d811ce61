from __future__ import annotations

from typing import List, Optional


NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
REVERSE_PITCHES = list(reversed(NOTE_NAMES))


def pitch_to_note_num(pitch: str) -> Optional[int]:
    pitch = pitch.strip().upper()
    if len(pitch) < 2:
        return None
    if pitch[1] == "#":
        name = pitch[:2]
        octave_str = pitch[2:]
    else:
        name = pitch[:1]
        octave_str = pitch[1:]
    if name not in NOTE_NAMES:
        return None
    try:
        octave = int(octave_str)
    except ValueError:
        return None
    return (octave + 1) * 12 + NOTE_NAMES.index(name)


def note_num_to_pitch(note_num: int) -> str:
    name = NOTE_NAMES[note_num % 12]
    octave = note_num // 12 - 1
    return f"{name}{octave}"


def ordered_pitches() -> List[str]:
    """All 84 pitch names from B7 down to C1."""
    pitches: List[str] = []
    for octave in range(7, 0, -1):
        for name in REVERSE_PITCHES:
            pitches.append(f"{name}{octave}")
    return pitches
