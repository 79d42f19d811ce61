from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Optional


@dataclass
class EngineSettings:
    default_tempo: float = 125.0
    min_tempo: float = 50.0
    max_tempo: float = 260.0
    default_project_name: str = "(no title)"
    default_output_file: str = "outputFile"
    # Lines of comma separated equivalent lyrics; built-in kana tables when unset.
    lyric_conversion_path: Optional[str] = None
    auto_adjust_overlap: bool = True

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "EngineSettings":
        known = {f.name for f in fields(EngineSettings)}
        return EngineSettings(**{k: v for k, v in (data or {}).items() if k in known})
