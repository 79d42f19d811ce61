from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from models.note import NoteData
from models.settings import EngineSettings
from models.song import Song
from models.voicebank import Voicebank


SONG_SUFFIX = ".json"


def song_to_dict(song: Song) -> dict:
    return {
        "project_name": song.project_name,
        "tempo": song.tempo,
        "flags": song.flags,
        "mode2": song.mode2,
        "output_file": str(song.output_file),
        "instrumental": str(song.instrumental) if song.instrumental else None,
        "voicebank_path": str(song.voice_dir()) if song.voice_dir() else None,
        "notes": [note.to_dict() for note in song.get_notes()],
    }


def save_song(song: Song, path: Path) -> Path:
    path = Path(path)
    if path.suffix != SONG_SUFFIX:
        path = path.with_suffix(SONG_SUFFIX)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(song_to_dict(song), indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def load_song(
    path: Path,
    voicebank: Optional[Voicebank] = None,
    settings: Optional[EngineSettings] = None,
) -> Song:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    song = Song(voicebank=voicebank, settings=settings)
    builder = (
        song.to_builder()
        .set_project_name(data.get("project_name", song.project_name))
        .set_tempo(data.get("tempo", song.tempo))
        .set_flags(data.get("flags", ""))
        .set_mode2(data.get("mode2", True))
        .set_instrumental(data.get("instrumental"))
    )
    if data.get("output_file"):
        builder.set_output_file(Path(data["output_file"]))
    song = builder.build()
    notes = [NoteData.from_dict(note) for note in data.get("notes", [])]
    if notes:
        song.add_notes(notes)
        head, tail = song.note_list.head(), song.note_list.tail()
        if head is not None:
            song.standardize_notes(head.position, tail.position)
    return song
