import tempfile
import unittest
from pathlib import Path

from models.parsers import (
    parse_conversion_text,
    parse_oto_line,
    parse_pitch_map_line,
    read_text_guess,
)


class TestParsers(unittest.TestCase):
    def test_parse_oto_line(self):
        self.assertEqual(
            parse_oto_line("a.wav=a,0,100,-200,50,10"),
            ("a", "a.wav", ["0", "100", "-200", "50", "10"]),
        )
        self.assertEqual(parse_oto_line("_ka.wav=a か,1,2,3,4,5")[0], "a か")
        self.assertIsNone(parse_oto_line("# comment"))
        self.assertIsNone(parse_oto_line("no equals sign"))
        self.assertIsNone(parse_oto_line(""))

    def test_parse_oto_line_uses_file_name_without_alias(self):
        alias, wav_name, values = parse_oto_line("ka.wav=,0,0,0,0,0")
        self.assertEqual(alias, "ka")
        self.assertEqual(wav_name, "ka.wav")
        self.assertEqual(len(values), 5)

    def test_parse_pitch_map_line(self):
        self.assertEqual(parse_pitch_map_line("C5\t\t↑"), ("C5", "", "↑"))
        self.assertEqual(parse_pitch_map_line("a#3\tpre\t_low"), ("A#3", "pre", "_low"))
        self.assertIsNone(parse_pitch_map_line("C8\t\t↑"))
        self.assertIsNone(parse_pitch_map_line("C4 no tabs"))

    def test_parse_conversion_text(self):
        text = "a,あ,ア\n\nka, か ,カ\n"
        self.assertEqual(parse_conversion_text(text), [["a", "あ", "ア"], ["ka", "か", "カ"]])

    def test_read_text_guess_utf8(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "oto.ini"
            path.write_text("a.wav=あ,0,0,0,0,0\n", encoding="utf-8")
            self.assertEqual(read_text_guess(path), "a.wav=あ,0,0,0,0,0\n")


if __name__ == "__main__":
    unittest.main()
