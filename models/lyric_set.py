from __future__ import annotations

from typing import Dict, Iterable, List, Set


class DisjointLyricSet:
    """Groups of lyrics that sound the same, e.g. romaji, hiragana and katakana spellings."""

    def __init__(self) -> None:
        self._groups: Dict[str, Set[str]] = {}

    def add_group(self, *members: str) -> "DisjointLyricSet":
        members = tuple(m for m in members if m)
        if not members:
            return self
        merged: Set[str] = set(members)
        for member in members:
            existing = self._groups.get(member)
            if existing is not None:
                merged |= existing
        for member in merged:
            self._groups[member] = merged
        return self

    def add_groups(self, groups: Iterable[Iterable[str]]) -> "DisjointLyricSet":
        for group in groups:
            self.add_group(*group)
        return self

    def get_group(self, member: str) -> Set[str]:
        return set(self._groups.get(member, ()))

    def groups(self) -> List[Set[str]]:
        unique: Dict[int, Set[str]] = {}
        for group in self._groups.values():
            unique[id(group)] = group
        return [set(group) for group in unique.values()]

    def __contains__(self, member: str) -> bool:
        return member in self._groups

    def __len__(self) -> int:
        return len(self._groups)
