from __future__ import annotations

import re
from typing import List, Optional, Tuple
from pathlib import Path


PITCH_MAP_PATTERN = re.compile(r"([a-gA-G]#?[1-7])\t(\S*)\t(\S.*)")


def parse_oto_line(line: str) -> Optional[Tuple[str, str, List[str]]]:
    """alias, wav name and timing values of one oto.ini line."""
    raw = line.strip()
    if not raw:
        return None
    if raw.startswith("#") or raw.startswith(";"):
        return None
    if "=" not in raw:
        return None

    wav_name, rest = raw.split("=", 1)
    wav_name = wav_name.strip()
    parts = rest.split(",")
    alias = parts[0].strip()
    if not wav_name:
        return None
    if not alias:
        alias = Path(wav_name).stem
    return alias, wav_name, [p.strip() for p in parts[1:]]


def parse_pitch_map_line(line: str) -> Optional[Tuple[str, str, str]]:
    match = PITCH_MAP_PATTERN.search(line.strip("\r\n"))
    if not match:
        return None
    pitch, prefix, suffix = match.groups()
    return pitch.upper(), prefix, suffix.strip()


def parse_conversion_line(line: str) -> List[str]:
    return [p.strip() for p in line.strip().split(",") if p.strip()]


def parse_conversion_text(text: str) -> List[List[str]]:
    groups: List[List[str]] = []
    for line in text.splitlines():
        parsed = parse_conversion_line(line)
        if parsed:
            groups.append(parsed)
    return groups


def read_text_guess(path: Path) -> str:
    raw = path.read_bytes()
    if raw.startswith(b"\xff\xfe") or raw.startswith(b"\xfe\xff"):
        try:
            return raw.decode("utf-16")
        except UnicodeDecodeError:
            pass
    if raw.startswith(b"\xef\xbb\xbf"):
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            pass

    encodings = [
        "utf-8",
        "utf-8-sig",
        "utf-16",
        "utf-16-le",
        "utf-16-be",
        "cp932",
        "shift_jis",
        "euc_jp",
        "gbk",
        "cp936",
        "big5",
        "cp950",
        "euc_kr",
    ]
    for enc in encodings:
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    return raw.decode("utf-8", errors="ignore")
