from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Protocol, Set

if TYPE_CHECKING:
    from models.voicebank import LyricConfig


NO_VOWEL = "-"


class LyricSource(Protocol):
    def lookup_config(self, alias: str) -> Optional["LyricConfig"]: ...

    def has_config(self, alias: str) -> bool: ...

    def pitch_suffix(self, pitch: str) -> str: ...

    def phonetic_group(self, token: str) -> Set[str]: ...


def all_combinations(prefix: str, lyric: str, suffix: str) -> List[str]:
    # Exact lyric first.
    return [lyric, lyric + suffix, prefix + lyric + suffix, prefix + lyric]


class LyricResolver:
    """Finds the alias a voicebank would sing for a lyric at a given pitch.

    An alias matching the lyric as written always wins. Only when none of
    the four prefix/suffix combinations exists are the phonetically
    equivalent spellings tried, and the smallest matching config is
    returned so the same inputs always resolve the same way.
    """

    def __init__(self, source: LyricSource):
        self._source = source

    def vowel(self, prev_lyric: str) -> str:
        """Vowel sound of a lyric, taken from the last letter of its ASCII spelling."""
        for member in sorted(self._source.phonetic_group(prev_lyric)):
            if member and member.isascii() and member.isalpha():
                return member.lower()[-1]
        return NO_VOWEL

    def resolve(self, prev_lyric: str, lyric: str, pitch: str) -> Optional["LyricConfig"]:
        prefix = self.vowel(prev_lyric) + " "
        suffix = self._source.pitch_suffix(pitch) if pitch else ""

        for combo in all_combinations(prefix, lyric, suffix):
            if self._source.has_config(combo):
                return self._source.lookup_config(combo)

        matches = set()
        for converted in self._source.phonetic_group(lyric):
            if converted == lyric:
                continue
            for combo in all_combinations(prefix, converted, suffix):
                if self._source.has_config(combo):
                    matches.add(self._source.lookup_config(combo))
        if matches:
            return min(matches)
        return None
