from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

from models.errors import NoteAlreadyExistsError, NoteNotFoundError
from models.note import MutateResponse, Note, NoteUpdateData

if TYPE_CHECKING:
    from models.standardizer import NoteStandardizer
    from models.voicebank import Voicebank
    from pitch.curve import PitchCurve


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionBounds:
    min_ms: int
    max_ms: int

    @staticmethod
    def whole_song() -> "RegionBounds":
        return RegionBounds(0, 2**63 - 1)

    def contains(self, position_ms: int) -> bool:
        return self.min_ms <= position_ms <= self.max_ms

    def is_valid(self) -> bool:
        return self.min_ms <= self.max_ms


@dataclass
class NoteNode:
    """One slot of the note list. Links are ids into the list's arena."""

    id: int
    position: int
    note: Note
    prev_id: Optional[int] = None
    next_id: Optional[int] = None


@dataclass(frozen=True)
class RemovedNote:
    note: Note
    position: int
    prev_position: Optional[int]
    next_position: Optional[int]

    @property
    def has_prev(self) -> bool:
        return self.prev_position is not None

    @property
    def has_next(self) -> bool:
        return self.next_position is not None


class NoteRegion:
    """Restartable view over the notes whose position lies inside some bounds."""

    def __init__(self, note_list: "NoteList", bounds: RegionBounds):
        self._note_list = note_list
        self._bounds = bounds

    def __iter__(self) -> Iterator[Note]:
        for node in self._note_list.iter_nodes(self._bounds):
            yield node.note


class NoteList:
    def __init__(self) -> None:
        self._nodes: Dict[int, NoteNode] = {}
        self._index: Dict[int, int] = {}
        self._head_id: Optional[int] = None
        self._tail_id: Optional[int] = None
        self._next_id = 0

    # Navigation.

    def get_note(self, position: int) -> Optional[NoteNode]:
        node_id = self._index.get(position)
        if node_id is None:
            return None
        return self._nodes[node_id]

    def get_prev(self, node: NoteNode) -> Optional[NoteNode]:
        return self._nodes.get(node.prev_id) if node.prev_id is not None else None

    def get_next(self, node: NoteNode) -> Optional[NoteNode]:
        return self._nodes.get(node.next_id) if node.next_id is not None else None

    def head(self) -> Optional[NoteNode]:
        return self._nodes.get(self._head_id) if self._head_id is not None else None

    def tail(self) -> Optional[NoteNode]:
        return self._nodes.get(self._tail_id) if self._tail_id is not None else None

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, position: int) -> bool:
        return position in self._index

    def iter_nodes(self, bounds: Optional[RegionBounds] = None) -> Iterator[NoteNode]:
        node = self.head()
        while node is not None:
            if bounds is not None:
                if node.position > bounds.max_ms:
                    return
                if node.position < bounds.min_ms:
                    node = self.get_next(node)
                    continue
            yield node
            node = self.get_next(node)

    def __iter__(self) -> Iterator[Note]:
        for node in self.iter_nodes():
            yield node.note

    def bounded_iterator(self, bounds: RegionBounds) -> NoteRegion:
        return NoteRegion(self, bounds)

    # Mutation.

    def _find_prev(self, position: int, start: Optional[NoteNode]) -> Optional[NoteNode]:
        """Last node strictly before position, walking from start (or the head)."""
        node = start if start is not None else self.head()
        if node is None:
            return None
        while node is not None and node.position > position:
            node = self.get_prev(node)
        if node is None:
            return None
        nxt = self.get_next(node)
        while nxt is not None and nxt.position < position:
            node = nxt
            nxt = self.get_next(node)
        return node

    def _valid_hint(self, hint: Optional[NoteNode], hint_position: Optional[int]) -> Optional[NoteNode]:
        if hint is not None and self._nodes.get(hint.id) is hint:
            return hint
        if hint_position is not None:
            return self.get_note(hint_position)
        return None

    def _fit_length(self, node: NoteNode) -> None:
        nxt = self.get_next(node)
        if nxt is None:
            node.note = node.note.with_length(node.note.duration)
        else:
            node.note = node.note.with_length(nxt.position - node.position)

    def insert_note(
        self,
        note: Note,
        position: int,
        hint: Optional[NoteNode] = None,
        hint_position: Optional[int] = None,
    ) -> NoteNode:
        if position in self._index:
            raise NoteAlreadyExistsError(position)
        prev = self._find_prev(position, self._valid_hint(hint, hint_position))
        nxt = self.get_next(prev) if prev is not None else self.head()

        node = NoteNode(
            id=self._next_id,
            position=position,
            note=replace(note, delta=position - (prev.position if prev else 0)),
            prev_id=prev.id if prev else None,
            next_id=nxt.id if nxt else None,
        )
        self._next_id += 1
        self._nodes[node.id] = node
        self._index[position] = node.id

        if prev is not None:
            prev.next_id = node.id
            self._fit_length(prev)
        else:
            self._head_id = node.id
        if nxt is not None:
            nxt.prev_id = node.id
            nxt.note = replace(nxt.note, delta=nxt.position - position)
        else:
            self._tail_id = node.id
        self._fit_length(node)
        return node

    def append_note(self, note: Note) -> NoteNode:
        """Adds a note note.delta ms after the current last note."""
        tail = self.tail()
        position = (tail.position if tail else 0) + max(0, note.delta)
        return self.insert_note(note, position, hint=tail)

    def remove_note(self, position: int) -> RemovedNote:
        node_id = self._index.get(position)
        if node_id is None:
            raise NoteNotFoundError(position)
        node = self._nodes[node_id]
        prev = self.get_prev(node)
        nxt = self.get_next(node)

        if prev is not None:
            prev.next_id = nxt.id if nxt else None
        else:
            self._head_id = nxt.id if nxt else None
        if nxt is not None:
            nxt.prev_id = prev.id if prev else None
            nxt.note = replace(nxt.note, delta=nxt.position - (prev.position if prev else 0))
        else:
            self._tail_id = prev.id if prev else None
        if prev is not None:
            self._fit_length(prev)

        del self._index[position]
        del self._nodes[node_id]
        return RemovedNote(
            note=node.note,
            position=position,
            prev_position=prev.position if prev else None,
            next_position=nxt.position if nxt else None,
        )

    # Standardization.

    def _restandardize(
        self,
        node: NoteNode,
        standardizer: "NoteStandardizer",
        voicebank: "Voicebank",
        pitch_curve: Optional["PitchCurve"],
    ) -> None:
        prev = self.get_prev(node)
        old_note = node.note
        node.note = standardizer.standardize(
            prev.note if prev else None,
            node.note,
            voicebank,
        )
        if pitch_curve is not None:
            prev_note_num = prev.note.note_num if prev else node.note.note_num
            pitch_curve.remove_pitchbends(node.position, old_note.pitchbends)
            pitch_curve.add_pitchbends(
                node.position, node.note.pitchbends, prev_note_num, node.note.note_num
            )

    def standardize(self, standardizer: "NoteStandardizer", voicebank: "Voicebank") -> None:
        """Re-resolves every note, without touching pitch curves."""
        for node in list(self.iter_nodes()):
            self._restandardize(node, standardizer, voicebank, None)

    def standardize_run(
        self,
        first_position: int,
        last_position: int,
        standardizer: "NoteStandardizer",
        voicebank: "Voicebank",
        pitch_curve: "PitchCurve",
    ) -> MutateResponse:
        response = MutateResponse()
        last_node = self.get_note(last_position)
        if last_node is None:
            logger.warning("Could not find last note at %s when standardizing", last_position)
            return response

        next_neighbor = self.get_next(last_node)
        if next_neighbor is not None:
            self._restandardize(next_neighbor, standardizer, voicebank, pitch_curve)
            response.next = next_neighbor.note.get_update_data(next_neighbor.position)

        updated: List[NoteUpdateData] = []
        node: Optional[NoteNode] = last_node
        while node is not None and node.position >= first_position:
            self._restandardize(node, standardizer, voicebank, pitch_curve)
            updated.append(node.note.get_update_data(node.position))
            node = self.get_prev(node)
        updated.reverse()
        response.notes = updated

        # The previous neighbour only needs its alias refreshed.
        if node is not None:
            self._restandardize(node, standardizer, voicebank, None)
            response.prev = node.note.get_update_data(node.position)
        return response
