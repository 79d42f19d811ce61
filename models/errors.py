from __future__ import annotations

from pathlib import Path


class NoteAlreadyExistsError(ValueError):
    def __init__(self, position: int):
        super().__init__(f"A note already exists at position {position}")
        self.position = position


class NoteNotFoundError(LookupError):
    def __init__(self, position: int):
        super().__init__(f"No note found at position {position}")
        self.position = position


class InvalidVoicebankError(ValueError):
    def __init__(self, location: Path):
        super().__init__(f"Not a voicebank (no oto.ini or oto_ini.txt): {location}")
        self.location = location
