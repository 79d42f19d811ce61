from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Optional

from models.note import Note

if TYPE_CHECKING:
    from models.voicebank import Voicebank


logger = logging.getLogger(__name__)


class NoteStandardizer:
    """Resolves a note's alias and the preutterance/overlap it will actually use."""

    def __init__(self, auto_adjust: bool = True):
        self.auto_adjust = auto_adjust

    def standardize(
        self,
        prev: Optional[Note],
        note: Note,
        voicebank: Optional["Voicebank"],
    ) -> Note:
        config = None
        if voicebank is not None:
            prev_lyric = prev.lyric if prev is not None else ""
            config = voicebank.get_lyric_config(prev_lyric, note.lyric, note.pitch())
        if config is None:
            logger.debug("No alias found for lyric %r at %s", note.lyric, note.pitch())
            true_lyric = note.lyric
            preutter = note.config.preutter or 0.0
            overlap = note.config.overlap or 0.0
        else:
            true_lyric = config.true_lyric
            preutter = note.config.preutter if note.config.preutter is not None else config.preutterance
            overlap = note.config.overlap if note.config.overlap is not None else config.overlap

        real_preutter = preutter
        real_overlap = overlap
        if self.auto_adjust and prev is not None:
            gap = max(0, note.delta - prev.length)
            max_occupied = gap + prev.length / 2.0
            occupied = preutter - overlap
            if occupied > max_occupied and occupied > 0:
                ratio = max_occupied / occupied
                real_preutter = preutter * ratio
                real_overlap = overlap * ratio

        return replace(
            note,
            true_lyric=true_lyric,
            real_preutter=real_preutter,
            real_overlap=real_overlap,
            auto_start_point=preutter - real_preutter,
        )
