from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from models.errors import InvalidVoicebankError
from models.song import Song
from pitch.curve import ms_to_step
from storage.settings_io import load_settings
from storage.song_io import load_song
from storage.voicebank_io import load_voicebank


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("utsu_engine")


def render_lines(song: Song) -> List[str]:
    lines = []
    for node in song.note_list.iter_nodes():
        note = node.note
        first_step = ms_to_step(node.position - note.real_preutter)
        last_step = ms_to_step(node.position + note.duration)
        pitch = song.get_pitch_string(first_step, last_step, note.note_num)
        lines.append(f"{node.position}\t{note.true_lyric}\t{note.pitch()}\t{pitch}")
    return lines


def _cmd_render(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    conversion = Path(settings.lyric_conversion_path) if settings.lyric_conversion_path else None
    voicebank = load_voicebank(Path(args.voicebank), conversion)
    song = load_song(Path(args.song), voicebank, settings)
    for line in render_lines(song):
        print(line)
    return 0


def _cmd_resolve(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    conversion = Path(settings.lyric_conversion_path) if settings.lyric_conversion_path else None
    voicebank = load_voicebank(Path(args.voicebank), conversion)
    config = voicebank.get_lyric_config(args.prev, args.lyric, args.pitch)
    if config is None:
        print(f"No alias for {args.lyric!r}")
        return 1
    print(f"{config.true_lyric}\t{config.file_name}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="UTAU song engine tools")
    parser.add_argument("--config", default=None, help="YAML settings file")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Print the pitch string of every note")
    render.add_argument("voicebank", help="Voicebank folder (contains oto.ini)")
    render.add_argument("song", help="Song JSON file")
    render.set_defaults(func=_cmd_render)

    resolve = sub.add_parser("resolve", help="Print the alias a lyric resolves to")
    resolve.add_argument("voicebank", help="Voicebank folder (contains oto.ini)")
    resolve.add_argument("lyric")
    resolve.add_argument("--prev", default="", help="Lyric of the previous note")
    resolve.add_argument("--pitch", default="", help="Pitch name such as C4")
    resolve.set_defaults(func=_cmd_resolve)

    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (FileNotFoundError, InvalidVoicebankError) as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
