from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set

from models.lyric_resolver import LyricResolver
from models.lyric_set import DisjointLyricSet
from models.pitch_map import PitchMap, PitchMapData


logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class LyricConfig:
    """One oto.ini entry. Sorts by alias, then file, then category."""

    true_lyric: str
    file_name: str
    category: str = ""
    offset: float = field(default=0.0, compare=False)
    consonant: float = field(default=0.0, compare=False)
    cutoff: float = field(default=0.0, compare=False)
    preutterance: float = field(default=0.0, compare=False)
    overlap: float = field(default=0.0, compare=False)

    @staticmethod
    def from_values(
        true_lyric: str, file_name: str, values: Sequence[str], category: str = ""
    ) -> "LyricConfig":
        numbers = [_to_float(value) for value in values]
        numbers += [0.0] * (5 - len(numbers))
        offset, consonant, cutoff, preutterance, overlap = numbers[:5]
        return LyricConfig(
            true_lyric=true_lyric,
            file_name=file_name,
            category=category,
            offset=offset,
            consonant=consonant,
            cutoff=cutoff,
            preutterance=preutterance,
            overlap=overlap,
        )

    def config_values(self) -> List[float]:
        return [self.offset, self.consonant, self.cutoff, self.preutterance, self.overlap]


def _to_float(value: str) -> float:
    try:
        return float(str(value).strip() or 0.0)
    except ValueError:
        logger.warning("Invalid oto value %r, using 0", value)
        return 0.0


class LyricConfigMap:
    def __init__(self) -> None:
        self._configs: Dict[str, LyricConfig] = {}

    def has_lyric(self, lyric: str) -> bool:
        return lyric in self._configs

    def get_config(self, lyric: str) -> Optional[LyricConfig]:
        return self._configs.get(lyric)

    def add_config(self, config: LyricConfig) -> bool:
        if config.true_lyric in self._configs:
            return False
        self._configs[config.true_lyric] = config
        return True

    def set_config(self, config: LyricConfig) -> None:
        self._configs[config.true_lyric] = config

    def remove_config(self, lyric: str) -> Optional[LyricConfig]:
        return self._configs.pop(lyric, None)

    def categories(self) -> Set[str]:
        return {config.category for config in self._configs.values()}

    def get_configs(self, category: Optional[str] = None) -> Iterator[LyricConfig]:
        configs = sorted(self._configs.values())
        return iter([c for c in configs if category is None or c.category == category])

    def __len__(self) -> int:
        return len(self._configs)


class VoicebankBuilder:
    def __init__(self, voicebank: "Voicebank"):
        self._voicebank = voicebank

    def set_location(self, location: Path) -> "VoicebankBuilder":
        self._voicebank.location = Path(location)
        return self

    def set_name(self, name: str) -> "VoicebankBuilder":
        self._voicebank.name = name
        return self

    def set_author(self, author: str) -> "VoicebankBuilder":
        self._voicebank.author = author
        return self

    def set_description(self, description: str) -> "VoicebankBuilder":
        self._voicebank.description = description
        return self

    def set_image_name(self, image_name: str) -> "VoicebankBuilder":
        self._voicebank.image_name = image_name
        return self

    def add_lyric(self, config: LyricConfig) -> "VoicebankBuilder":
        if not self._voicebank.lyric_configs.add_config(config):
            logger.debug("Duplicate alias %r ignored", config.true_lyric)
        return self

    def add_pitch_map(self, pitch: str, prefix: str, suffix: str) -> "VoicebankBuilder":
        self._voicebank.pitch_map.put(pitch, prefix, suffix)
        return self

    def add_conversion_group(self, *members: str) -> "VoicebankBuilder":
        self._voicebank.conversion_set.add_group(*members)
        return self

    def add_conversion_groups(self, groups: Iterable[Iterable[str]]) -> "VoicebankBuilder":
        self._voicebank.conversion_set.add_groups(groups)
        return self

    def build(self) -> "Voicebank":
        if self._voicebank.location is None:
            logger.warning("Built a voicebank without a location")
        return self._voicebank


class Voicebank:
    """In-memory voicebank: aliases, pitch map and lyric conversion groups."""

    def __init__(
        self,
        lyric_configs: Optional[LyricConfigMap] = None,
        pitch_map: Optional[PitchMap] = None,
        conversion_set: Optional[DisjointLyricSet] = None,
    ) -> None:
        self.lyric_configs = lyric_configs if lyric_configs is not None else LyricConfigMap()
        self.pitch_map = pitch_map if pitch_map is not None else PitchMap()
        self.conversion_set = conversion_set if conversion_set is not None else DisjointLyricSet()
        self.location: Optional[Path] = None
        self.name = ""
        self.author = ""
        self.description = ""
        self.image_name = ""
        self._resolver = LyricResolver(self)

    @staticmethod
    def builder() -> VoicebankBuilder:
        return VoicebankBuilder(Voicebank())

    def to_builder(self) -> VoicebankBuilder:
        # The new voicebank shares this one's configs, pitch map and conversion set.
        copy = Voicebank(self.lyric_configs, self.pitch_map, self.conversion_set)
        builder = VoicebankBuilder(copy)
        if self.location is not None:
            builder.set_location(self.location)
        return (
            builder.set_name(self.name)
            .set_author(self.author)
            .set_description(self.description)
            .set_image_name(self.image_name)
        )

    # Lookup surface used by LyricResolver.

    def lookup_config(self, alias: str) -> Optional[LyricConfig]:
        return self.lyric_configs.get_config(alias)

    def has_config(self, alias: str) -> bool:
        return self.lyric_configs.has_lyric(alias)

    def pitch_prefix(self, pitch: str) -> str:
        return self.pitch_map.get_prefix(pitch)

    def pitch_suffix(self, pitch: str) -> str:
        return self.pitch_map.get_suffix(pitch)

    def phonetic_group(self, token: str) -> Set[str]:
        return self.conversion_set.get_group(token)

    def get_lyric_config(
        self, prev_lyric: str, lyric: Optional[str] = None, pitch: str = ""
    ) -> Optional[LyricConfig]:
        """Resolves a lyric. With one argument it resolves with no previous lyric and no pitch."""
        if lyric is None:
            return self._resolver.resolve("", prev_lyric, "")
        return self._resolver.resolve(prev_lyric, lyric, pitch)

    # Editing.

    def categories(self) -> Set[str]:
        return self.lyric_configs.categories()

    def get_lyric_configs(self, category: Optional[str] = None) -> Iterator[LyricConfig]:
        return self.lyric_configs.get_configs(category)

    def add_lyric_data(self, config: LyricConfig) -> bool:
        return self.lyric_configs.add_config(config)

    def modify_lyric_data(self, config: LyricConfig) -> None:
        self.lyric_configs.set_config(config)

    def remove_lyric_config(self, lyric: str) -> None:
        if self.lyric_configs.remove_config(lyric) is None:
            logger.warning("Tried to remove unknown alias %r", lyric)

    def get_pitch_data(self) -> Iterator[PitchMapData]:
        return self.pitch_map.data()

    def set_pitch_data(self, data: PitchMapData) -> None:
        self.pitch_map.put(data.pitch, data.prefix, data.suffix)

    def __repr__(self) -> str:
        return f"Voicebank(name={self.name!r}, location={self.location!s}, aliases={len(self.lyric_configs)})"
