from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import yaml

from models.errors import InvalidVoicebankError
from models.parsers import (
    parse_conversion_text,
    parse_oto_line,
    parse_pitch_map_line,
    read_text_guess,
)
from models.romaji import default_conversion_groups
from models.voicebank import LyricConfig, Voicebank, VoicebankBuilder


logger = logging.getLogger(__name__)

OTO_NAMES = ("oto.ini", "oto_ini.txt")
PITCH_MAP_NAMES = ("prefix.map", "prefixmap")
MAX_OTO_DEPTH = 10


def is_voicebank(folder: Path) -> bool:
    folder = Path(folder)
    if not folder.is_dir():
        folder = folder.parent
    return any((folder / name).exists() for name in OTO_NAMES)


def _read_optional(path: Path) -> str:
    if not path.is_file():
        return ""
    return read_text_guess(path)


def load_voicebank(folder: Path, conversion_path: Optional[Path] = None) -> Voicebank:
    folder = Path(folder)
    if not folder.exists():
        raise FileNotFoundError(str(folder))
    if not folder.is_dir():
        folder = folder.parent
    if not is_voicebank(folder):
        raise InvalidVoicebankError(folder)

    logger.info("Reading voicebank at %s", folder)
    builder = Voicebank.builder().set_location(folder).set_name(folder.name)
    _parse_character_txt(folder, builder)
    _parse_character_yaml(folder, builder)
    builder.set_description(_read_optional(folder / "readme.txt"))

    for oto_path in sorted(_find_oto_files(folder)):
        parse_oto_ini(oto_path, folder, builder)
    # Later files win when both exist.
    for name in PITCH_MAP_NAMES:
        parse_pitch_map(folder / name, builder)

    if conversion_path is not None:
        builder.add_conversion_groups(load_conversion_groups(conversion_path))
    else:
        builder.add_conversion_groups(default_conversion_groups())

    voicebank = builder.build()
    logger.info("Loaded voicebank %r with %d aliases", voicebank.name, len(voicebank.lyric_configs))
    return voicebank


def _find_oto_files(folder: Path) -> List[Path]:
    found: List[Path] = []
    for name in OTO_NAMES:
        for path in folder.rglob(name):
            if len(path.relative_to(folder).parts) <= MAX_OTO_DEPTH:
                found.append(path)
    return found


def _parse_character_txt(folder: Path, builder: VoicebankBuilder) -> None:
    text = _read_optional(folder / "character.txt")
    for raw in text.splitlines():
        line = raw.strip()
        lower = line.lower()
        if lower.startswith("name="):
            builder.set_name(line[len("name="):].strip())
        elif line.startswith("名前："):
            builder.set_name(line[len("名前："):].strip())
        elif lower.startswith("author="):
            builder.set_author(line[len("author="):].strip())
        elif lower.startswith("cv："):
            builder.set_author(line[len("cv："):].strip())
        elif lower.startswith("image="):
            builder.set_image_name(line[len("image="):].strip())
        elif line.startswith("画像："):
            builder.set_image_name(line[len("画像："):].strip())


def _parse_character_yaml(folder: Path, builder: VoicebankBuilder) -> None:
    yaml_path = folder / "character.yaml"
    if not yaml_path.exists():
        return
    try:
        data = yaml.safe_load(read_text_guess(yaml_path))
    except yaml.YAMLError:
        logger.exception("Failed to parse %s", yaml_path)
        return
    if not isinstance(data, dict):
        return
    name = data.get("name") or data.get("Name")
    if name:
        builder.set_name(str(name))
    author = data.get("author") or data.get("Author")
    if author:
        builder.set_author(str(author))
    image = data.get("image") or data.get("Image")
    if image:
        builder.set_image_name(str(image))


def parse_oto_ini(path: Path, voicebank_dir: Path, builder: VoicebankBuilder) -> int:
    """Adds every alias of one oto.ini to the builder. Returns how many were read."""
    category = path.parent.relative_to(voicebank_dir).as_posix()
    if category == ".":
        category = ""
    count = 0
    for line in read_text_guess(path).splitlines():
        parsed = parse_oto_line(line)
        if parsed is None:
            continue
        alias, wav_name, values = parsed
        if len(values) != 5:
            logger.warning("Unexpected oto.ini line in %s: %r", path, line)
            continue
        builder.add_lyric(LyricConfig.from_values(alias, wav_name, values, category))
        count += 1
    return count


def parse_pitch_map(path: Path, builder: VoicebankBuilder) -> None:
    for line in _read_optional(path).splitlines():
        parsed = parse_pitch_map_line(line)
        if parsed:
            builder.add_pitch_map(*parsed)


def load_conversion_groups(path: Path) -> List[List[str]]:
    path = Path(path)
    if not path.is_file():
        logger.warning("Lyric conversion file %s not found, using built-in kana tables", path)
        return [list(group) for group in default_conversion_groups()]
    return parse_conversion_text(read_text_guess(path))
