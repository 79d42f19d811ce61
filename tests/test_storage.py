import tempfile
import unittest
from pathlib import Path

import yaml

from main import main, render_lines
from models.errors import InvalidVoicebankError
from models.note import NoteData, PitchbendData
from models.settings import EngineSettings
from models.song import Song
from storage.settings_io import load_settings, save_settings
from storage.song_io import load_song, save_song
from storage.voicebank_io import is_voicebank, load_conversion_groups, load_voicebank


OTO = "\n".join([
    "a.wav=a,0,100,-200,60,10",
    "_ka.wav=a か,1,2,3,100,20",
    "_ka.wav=- か,1,2,3,100,20",
    "broken.wav=x,1,2",
    "",
])


def write_voicebank(root: Path) -> Path:
    folder = root / "Test.utau"
    (folder / "sub").mkdir(parents=True)
    (folder / "oto.ini").write_text(OTO, encoding="utf-8")
    (folder / "sub" / "oto.ini").write_text("ki.wav=,0,0,0,0,0\n", encoding="utf-8")
    (folder / "character.txt").write_text("name=Tester\nauthor=Someone\nimage=img.bmp\n", encoding="utf-8")
    (folder / "readme.txt").write_text("A test voicebank.", encoding="utf-8")
    (folder / "prefix.map").write_text("C5\t\t↑\n", encoding="utf-8")
    return folder


class TestVoicebankIO(unittest.TestCase):
    def test_load_voicebank(self):
        with tempfile.TemporaryDirectory() as tmp:
            folder = write_voicebank(Path(tmp))
            self.assertTrue(is_voicebank(folder))
            voicebank = load_voicebank(folder)
        self.assertEqual(voicebank.name, "Tester")
        self.assertEqual(voicebank.author, "Someone")
        self.assertEqual(voicebank.image_name, "img.bmp")
        self.assertEqual(voicebank.description, "A test voicebank.")
        self.assertEqual(voicebank.pitch_suffix("C5"), "↑")
        self.assertTrue(voicebank.has_config("a か"))
        self.assertFalse(voicebank.has_config("x"))
        self.assertEqual(voicebank.lookup_config("a").preutterance, 60.0)
        self.assertEqual(voicebank.lookup_config("ki").category, "sub")
        self.assertEqual(voicebank.get_lyric_config("a", "ka", "C4").true_lyric, "a か")

    def test_character_yaml_overrides_name(self):
        with tempfile.TemporaryDirectory() as tmp:
            folder = write_voicebank(Path(tmp))
            (folder / "character.yaml").write_text(
                yaml.safe_dump({"name": "YamlName"}, allow_unicode=True), encoding="utf-8"
            )
            voicebank = load_voicebank(folder)
        self.assertEqual(voicebank.name, "YamlName")

    def test_name_defaults_to_folder(self):
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp) / "Plain"
            folder.mkdir()
            (folder / "oto_ini.txt").write_text("a.wav=a,0,0,0,0,0\n", encoding="utf-8")
            voicebank = load_voicebank(folder)
        self.assertEqual(voicebank.name, "Plain")
        self.assertTrue(voicebank.has_config("a"))

    def test_invalid_voicebank(self):
        with tempfile.TemporaryDirectory() as tmp:
            self.assertFalse(is_voicebank(Path(tmp)))
            with self.assertRaises(InvalidVoicebankError):
                load_voicebank(Path(tmp))
            with self.assertRaises(FileNotFoundError):
                load_voicebank(Path(tmp) / "missing")

    def test_conversion_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            folder = write_voicebank(Path(tmp))
            conversions = Path(tmp) / "conversions.txt"
            conversions.write_text("ka,か,カ\nki,き\n", encoding="utf-8")
            self.assertEqual(load_conversion_groups(conversions), [["ka", "か", "カ"], ["ki", "き"]])
            voicebank = load_voicebank(folder, conversions)
        self.assertEqual(voicebank.phonetic_group("ki"), {"ki", "き"})
        self.assertEqual(voicebank.phonetic_group("a"), set())


class TestSettingsIO(unittest.TestCase):
    def test_defaults_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            settings = load_settings(Path(tmp) / "missing.yaml")
        self.assertEqual(settings, EngineSettings())

    def test_round_trip_writes_only_changes(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = save_settings(EngineSettings(default_tempo=140.0), Path(tmp) / "settings.yaml")
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
            settings = load_settings(path)
        self.assertEqual(data, {"default_tempo": 140.0})
        self.assertEqual(settings.default_tempo, 140.0)
        self.assertEqual(settings.max_tempo, 260.0)

    def test_ignores_bad_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.yaml"
            path.write_text("- just\n- a list\n", encoding="utf-8")
            self.assertEqual(load_settings(path), EngineSettings())
            path.write_text("min_tempo: 300\nunknown: 1\n", encoding="utf-8")
            settings = load_settings(path)
        self.assertEqual(settings.min_tempo, 50.0)


class TestSongIO(unittest.TestCase):
    def test_round_trip(self):
        with tempfile.TemporaryDirectory() as tmp:
            voicebank = load_voicebank(write_voicebank(Path(tmp)))
            song = Song(voicebank=voicebank).to_builder().set_project_name("Song").set_tempo(150).build()
            bend = PitchbendData(pbs=(-40.0,), pbw=(80.0,), pby=(0.0,), pbm=("s",))
            song.add_notes([
                NoteData(0, 480, "C4", "a"),
                NoteData(480, 480, "D4", "か", pitchbend=bend),
            ])
            path = save_song(song, Path(tmp) / "song")
            self.assertEqual(path.suffix, ".json")
            loaded = load_song(path, voicebank)
        self.assertEqual(loaded.project_name, "Song")
        self.assertEqual(loaded.tempo, 150.0)
        notes = loaded.get_notes()
        self.assertEqual([n.position for n in notes], [0, 480])
        self.assertEqual(notes[1].pitchbend, bend)
        self.assertEqual(notes[1].true_lyric, "a か")
        self.assertEqual(loaded.get_pitch_string(88, 88, 62), "84")


class TestMain(unittest.TestCase):
    def test_resolve_command(self):
        with tempfile.TemporaryDirectory() as tmp:
            folder = write_voicebank(Path(tmp))
            settings = Path(tmp) / "settings.yaml"
            self.assertEqual(main(["--config", str(settings), "resolve", str(folder), "か", "--prev", "a"]), 0)
            self.assertEqual(main(["--config", str(settings), "resolve", str(folder), "zzz"]), 1)
            self.assertEqual(main(["--config", str(settings), "resolve", str(Path(tmp) / "nope"), "a"]), 2)

    def test_render_lines(self):
        song = Song()
        song.add_notes([NoteData(0, 100, "C4", "a")])
        song.standardize_notes(0, 0)
        self.assertEqual(render_lines(song), ["0\ta\tC4\tAA#20#"])


if __name__ == "__main__":
    unittest.main()
