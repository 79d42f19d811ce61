from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Optional

from models.errors import NoteAlreadyExistsError, NoteNotFoundError
from models.note import MutateResponse, Note, NoteData, NoteUpdateData
from models.note_list import NoteList, NoteNode, NoteRegion, RegionBounds
from models.settings import EngineSettings
from models.standardizer import NoteStandardizer
from models.voicebank import Voicebank
from pitch.curve import PitchCurve
from pitch.notes import pitch_to_note_num


logger = logging.getLogger(__name__)


class SongBuilder:
    """Working copy of a song. Shares the note list and pitch curve of the song it came from."""

    def __init__(self, song: "Song"):
        self._song = song

    def set_tempo(self, tempo: float) -> "SongBuilder":
        settings = self._song.settings
        if settings.min_tempo <= tempo <= settings.max_tempo:
            self._song.tempo = float(tempo)
        else:
            logger.warning("Tempo of %s is out of bounds, keeping %s", tempo, self._song.tempo)
        return self

    def set_project_name(self, name: str) -> "SongBuilder":
        self._song.project_name = name
        return self

    def set_output_file(self, output_file: Path) -> "SongBuilder":
        self._song.output_file = Path(output_file)
        return self

    def set_voicebank(self, voicebank: Optional[Voicebank]) -> "SongBuilder":
        self._song.voicebank = voicebank
        return self

    def set_flags(self, flags: str) -> "SongBuilder":
        self._song.flags = flags
        return self

    def set_mode2(self, mode2: bool) -> "SongBuilder":
        self._song.mode2 = mode2
        return self

    def set_instrumental(self, instrumental: Optional[Path]) -> "SongBuilder":
        self._song.instrumental = Path(instrumental) if instrumental else None
        return self

    def add_note(self, note: Note) -> "SongBuilder":
        """Appends a note note.delta ms after the last one."""
        song = self._song
        prev = song.note_list.tail()
        try:
            node = song.note_list.append_note(note)
        except NoteAlreadyExistsError as e:
            logger.warning("Skipping note: %s", e)
            return self
        prev_note_num = prev.note.note_num if prev else node.note.note_num
        song.pitch_curve.add_pitchbends(
            node.position, node.note.pitchbends, prev_note_num, node.note.note_num
        )
        return self

    def build(self) -> "Song":
        song = self._song
        song.note_list.standardize(song.standardizer, song.voicebank)
        song.last_rendered_region = None
        return song


class Song:
    """A song: its settings, its notes and the pitch curve derived from them."""

    def __init__(
        self,
        voicebank: Optional[Voicebank] = None,
        standardizer: Optional[NoteStandardizer] = None,
        note_list: Optional[NoteList] = None,
        pitch_curve: Optional[PitchCurve] = None,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.voicebank = voicebank
        self.standardizer = standardizer or NoteStandardizer(self.settings.auto_adjust_overlap)
        self.note_list = note_list if note_list is not None else NoteList()
        self.pitch_curve = pitch_curve if pitch_curve is not None else PitchCurve()
        self.tempo = self.settings.default_tempo
        self.project_name = self.settings.default_project_name
        self.output_file = Path(self.settings.default_output_file)
        self.flags = ""
        self.mode2 = True
        self.instrumental: Optional[Path] = None
        # Cleared whenever the song changes.
        self.last_rendered_region: Optional[RegionBounds] = None

    def to_builder(self) -> SongBuilder:
        song = Song(
            self.voicebank, self.standardizer, self.note_list, self.pitch_curve, self.settings
        )
        return (
            SongBuilder(song)
            .set_tempo(self.tempo)
            .set_project_name(self.project_name)
            .set_output_file(self.output_file)
            .set_flags(self.flags)
            .set_mode2(self.mode2)
            .set_instrumental(self.instrumental)
        )

    # Note mutation.

    def add_notes(self, notes: Iterable[NoteData]) -> List[int]:
        """Inserts notes in order. Notes landing on an occupied position are skipped."""
        notes = list(notes)
        if not notes:
            logger.error("Add notes called on an empty list")
            return []
        added: List[int] = []
        hint: Optional[NoteNode] = None
        for data in notes:
            note_num = pitch_to_note_num(data.pitch)
            if note_num is None:
                logger.warning("Skipping note at %s with invalid pitch %r", data.position, data.pitch)
                continue
            note = Note(
                delta=data.position,
                duration=data.duration,
                length=data.duration,
                note_num=note_num,
                lyric=data.lyric,
                true_lyric=data.true_lyric or "",
            )
            if data.envelope is not None:
                note = replace(note, envelope=data.envelope)
            if data.pitchbend is not None:
                note = replace(note, pitchbends=data.pitchbend)
            if data.config is not None:
                note = replace(note, config=data.config)
            try:
                node = self.note_list.insert_note(note, data.position, hint=hint)
            except NoteAlreadyExistsError as e:
                logger.info("Skipping note: %s", e)
                continue
            hint = node
            prev = self.note_list.get_prev(node)
            prev_note_num = prev.note.note_num if prev else note_num
            self.pitch_curve.add_pitchbends(
                node.position, node.note.pitchbends, prev_note_num, note_num
            )
            added.append(node.position)
        self.last_rendered_region = None
        return added

    def remove_notes(self, positions: Iterable[int]) -> MutateResponse:
        """Removes notes and reports the closest surviving neighbours on each side."""
        positions = set(positions)
        response = MutateResponse()
        if not positions:
            logger.error("Remove notes called on an empty collection")
            return response

        neighbors = set()
        for position in sorted(positions):
            try:
                removed = self.note_list.remove_note(position)
            except NoteNotFoundError as e:
                logger.warning("%s", e)
                continue
            self.pitch_curve.remove_pitchbends(position, removed.note.pitchbends)
            response.notes.append(removed.note.get_update_data(position))
            for neighbor in (removed.prev_position, removed.next_position):
                if neighbor is not None and neighbor not in positions:
                    neighbors.add(neighbor)

        surviving = [pos for pos in neighbors if pos in self.note_list]
        if surviving:
            first, last = min(surviving), max(surviving)
            response.prev = self.note_list.get_note(first).note.get_update_data(first)
            response.next = self.note_list.get_note(last).note.get_update_data(last)
        self.last_rendered_region = None
        return response

    def modify_note(self, data: NoteData) -> NoteUpdateData:
        """Replaces envelope and pitch bend in place. Position, lyric and duration stay."""
        node = self.note_list.get_note(data.position)
        if node is None:
            raise NoteNotFoundError(data.position)
        note = node.note
        if data.envelope is not None:
            note = replace(note, envelope=data.envelope)
        if data.pitchbend is not None:
            self.pitch_curve.remove_pitchbends(data.position, note.pitchbends)
            note = replace(note, pitchbends=data.pitchbend)
            prev = self.note_list.get_prev(node)
            prev_note_num = prev.note.note_num if prev else note.note_num
            self.pitch_curve.add_pitchbends(
                data.position, note.pitchbends, prev_note_num, note.note_num
            )
        node.note = note
        self.last_rendered_region = None
        return note.get_update_data(data.position)

    def standardize_notes(self, first_position: int, last_position: int) -> MutateResponse:
        self.last_rendered_region = None
        return self.note_list.standardize_run(
            first_position, last_position, self.standardizer, self.voicebank, self.pitch_curve
        )

    # Queries.

    def get_notes(self) -> List[NoteData]:
        return [node.note.get_data(node.position) for node in self.note_list.iter_nodes()]

    def get_note(self, position: int) -> Optional[Note]:
        node = self.note_list.get_note(position)
        return node.note if node else None

    def get_next_note(self, position: int) -> Optional[int]:
        node = self.note_list.get_note(position)
        if node is None:
            return None
        nxt = self.note_list.get_next(node)
        return nxt.position if nxt else None

    def get_prev_note(self, position: int) -> Optional[int]:
        node = self.note_list.get_note(position)
        if node is None:
            return None
        prev = self.note_list.get_prev(node)
        return prev.position if prev else None

    def get_note_iterator(self, bounds: Optional[RegionBounds] = None) -> NoteRegion:
        return self.note_list.bounded_iterator(bounds or RegionBounds.whole_song())

    @property
    def num_notes(self) -> int:
        return len(self.note_list)

    def get_pitch_string(self, first_step: int, last_step: int, note_num: int) -> str:
        return self.pitch_curve.render(first_step, last_step, note_num)

    def set_rendered(self, region: RegionBounds) -> None:
        self.last_rendered_region = region

    def voice_dir(self) -> Optional[Path]:
        return self.voicebank.location if self.voicebank else None
