from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from pitch.notes import note_num_to_pitch


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PitchbendData:
    """UTAU mode2 pitch bend: PBS start offset, PBW widths, PBY end offsets, PBM shapes."""

    pbs: Tuple[float, ...] = ()
    pbw: Tuple[float, ...] = ()
    pby: Tuple[float, ...] = ()
    pbm: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not self.pbs or not self.pbw

    def start_offset(self) -> float:
        return self.pbs[0]

    def to_dict(self) -> dict:
        return {
            "pbs": list(self.pbs),
            "pbw": list(self.pbw),
            "pby": list(self.pby),
            "pbm": list(self.pbm),
        }

    @staticmethod
    def from_dict(data: dict) -> "PitchbendData":
        return PitchbendData(
            pbs=tuple(float(v) for v in data.get("pbs", [])),
            pbw=tuple(float(v) for v in data.get("pbw", [])),
            pby=tuple(float(v) for v in data.get("pby", [])),
            pbm=tuple(str(v) for v in data.get("pbm", [])),
        )


@dataclass(frozen=True)
class EnvelopeData:
    widths: Tuple[float, ...] = (0.0, 5.0, 35.0, 0.0, 0.0)
    heights: Tuple[float, ...] = (100.0, 100.0, 100.0, 100.0, 100.0)

    def to_dict(self) -> dict:
        return {"widths": list(self.widths), "heights": list(self.heights)}

    @staticmethod
    def from_dict(data: dict) -> "EnvelopeData":
        default = EnvelopeData()
        return EnvelopeData(
            widths=tuple(float(v) for v in data.get("widths", default.widths)),
            heights=tuple(float(v) for v in data.get("heights", default.heights)),
        )


@dataclass(frozen=True)
class NoteConfigData:
    # None means "use the voicebank value".
    preutter: Optional[float] = None
    overlap: Optional[float] = None
    start_point: float = 0.0
    velocity: float = 100.0
    intensity: float = 100.0
    modulation: float = 0.0
    flags: str = ""

    def to_dict(self) -> dict:
        return {
            "preutter": self.preutter,
            "overlap": self.overlap,
            "start_point": self.start_point,
            "velocity": self.velocity,
            "intensity": self.intensity,
            "modulation": self.modulation,
            "flags": self.flags,
        }

    @staticmethod
    def from_dict(data: dict) -> "NoteConfigData":
        return NoteConfigData(
            preutter=data.get("preutter"),
            overlap=data.get("overlap"),
            start_point=data.get("start_point", 0.0),
            velocity=data.get("velocity", 100.0),
            intensity=data.get("intensity", 100.0),
            modulation=data.get("modulation", 0.0),
            flags=data.get("flags", ""),
        )


@dataclass
class Note:
    delta: int = 0
    duration: int = 0
    length: int = 0
    note_num: int = 60
    lyric: str = ""
    true_lyric: str = ""
    envelope: EnvelopeData = field(default_factory=EnvelopeData)
    pitchbends: PitchbendData = field(default_factory=PitchbendData)
    config: NoteConfigData = field(default_factory=NoteConfigData)
    # Filled in by the standardizer.
    real_preutter: float = 0.0
    real_overlap: float = 0.0
    auto_start_point: float = 0.0

    def __post_init__(self) -> None:
        if self.duration < 0:
            logger.warning("Note duration must not be negative, got %s", self.duration)
            self.duration = 0
        if self.length < 0:
            logger.warning("Note length must not be negative, got %s", self.length)
            self.length = 0
        if self.length > self.duration:
            self.length = self.duration

    def pitch(self) -> str:
        return note_num_to_pitch(self.note_num)

    def with_length(self, length: int) -> "Note":
        return replace(self, length=max(0, min(self.duration, length)))

    def get_update_data(self, position: int) -> "NoteUpdateData":
        return NoteUpdateData(
            position=position,
            true_lyric=self.true_lyric,
            envelope=self.envelope,
            pitchbends=self.pitchbends,
            config=self.config,
            real_preutter=self.real_preutter,
            real_overlap=self.real_overlap,
            auto_start_point=self.auto_start_point,
        )

    def get_data(self, position: int) -> "NoteData":
        return NoteData(
            position=position,
            duration=self.duration,
            pitch=self.pitch(),
            lyric=self.lyric,
            true_lyric=self.true_lyric,
            envelope=self.envelope,
            pitchbend=self.pitchbends,
            config=self.config,
        )


@dataclass(frozen=True)
class NoteData:
    """A note as seen from outside the song: absolute position and pitch name."""

    position: int
    duration: int
    pitch: str
    lyric: str
    true_lyric: Optional[str] = None
    envelope: Optional[EnvelopeData] = None
    pitchbend: Optional[PitchbendData] = None
    config: Optional[NoteConfigData] = None

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "duration": self.duration,
            "pitch": self.pitch,
            "lyric": self.lyric,
            "true_lyric": self.true_lyric,
            "envelope": self.envelope.to_dict() if self.envelope else None,
            "pitchbend": self.pitchbend.to_dict() if self.pitchbend else None,
            "config": self.config.to_dict() if self.config else None,
        }

    @staticmethod
    def from_dict(data: dict) -> "NoteData":
        return NoteData(
            position=int(data["position"]),
            duration=int(data["duration"]),
            pitch=data["pitch"],
            lyric=data.get("lyric", ""),
            true_lyric=data.get("true_lyric"),
            envelope=EnvelopeData.from_dict(data["envelope"]) if data.get("envelope") else None,
            pitchbend=PitchbendData.from_dict(data["pitchbend"]) if data.get("pitchbend") else None,
            config=NoteConfigData.from_dict(data["config"]) if data.get("config") else None,
        )


@dataclass(frozen=True)
class NoteUpdateData:
    """Render-derived state of one note, enough for a caller to redraw or undo it."""

    position: int
    true_lyric: str
    envelope: EnvelopeData
    pitchbends: PitchbendData
    config: NoteConfigData
    real_preutter: float = 0.0
    real_overlap: float = 0.0
    auto_start_point: float = 0.0


@dataclass
class MutateResponse:
    notes: List[NoteUpdateData] = field(default_factory=list)
    prev: Optional[NoteUpdateData] = None
    next: Optional[NoteUpdateData] = None

    def render_span(self) -> Optional[Tuple[int, int]]:
        positions = [data.position for data in self.notes]
        if self.prev is not None:
            positions.append(self.prev.position)
        if self.next is not None:
            positions.append(self.next.position)
        if not positions:
            return None
        return min(positions), max(positions)
