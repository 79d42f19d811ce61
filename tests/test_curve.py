import string
import unittest

from models.note import PitchbendData
from pitch.curve import (
    BASE64_ALPHABET,
    PitchCurve,
    encode_12bit,
    ms_to_step,
    next_pitch_step,
    prev_pitch_step,
)
from pitch.portamento import make_portamento


ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "+/"


def glide(pbs=-50.0, pbw=(100.0,), pby=(0.0,), pbm=("s",)):
    return PitchbendData(pbs=(pbs,), pbw=tuple(pbw), pby=tuple(pby), pbm=tuple(pbm))


class TestEncode12Bit(unittest.TestCase):
    def test_alphabet(self):
        self.assertEqual(BASE64_ALPHABET, ALPHABET)
        self.assertEqual(len(set(BASE64_ALPHABET)), 64)

    def test_every_symbol(self):
        for i, symbol in enumerate(ALPHABET):
            self.assertEqual(encode_12bit(i), "A" + symbol)
            self.assertEqual(encode_12bit(i * 64), symbol + "A")

    def test_known_values(self):
        self.assertEqual(encode_12bit(0), "AA")
        self.assertEqual(encode_12bit(4095), "//")
        self.assertEqual(encode_12bit(-1), "//")
        self.assertEqual(encode_12bit(2048), "gA")
        self.assertEqual(encode_12bit(-2048), "gA")
        self.assertEqual(encode_12bit(100), "Bk")
        self.assertEqual(encode_12bit(-200), "84")

    def test_clamps_out_of_range(self):
        self.assertEqual(encode_12bit(5000), "//")
        self.assertEqual(encode_12bit(-5000), "AA")


class TestPitchSteps(unittest.TestCase):
    def test_steps_never_collide(self):
        self.assertEqual(next_pitch_step(10), 2)
        self.assertEqual(prev_pitch_step(10), 1)
        self.assertEqual(next_pitch_step(12), 3)
        self.assertEqual(prev_pitch_step(12), 2)
        for ms in range(0, 100):
            self.assertEqual(prev_pitch_step(ms) + 1, next_pitch_step(ms))

    def test_ms_to_step(self):
        self.assertEqual(ms_to_step(0), 0)
        self.assertEqual(ms_to_step(14), 2)
        self.assertEqual(ms_to_step(-1), -1)


class TestPortamento(unittest.TestCase):
    def test_linear(self):
        p = make_portamento(0, 0.0, 600.0, 100.0, 620.0, "s")
        self.assertAlmostEqual(p.apply(50), 610.0)
        self.assertAlmostEqual(p.apply(-20), 600.0)
        self.assertAlmostEqual(p.apply(200), 620.0)

    def test_s_curve_is_default(self):
        p = make_portamento(0, 0.0, 600.0, 100.0, 620.0, "unknown")
        self.assertEqual(p.shape, "")
        self.assertAlmostEqual(p.apply(50), 610.0)
        self.assertLess(p.apply(25), 605.0)

    def test_ease_shapes(self):
        ease_out = make_portamento(0, 0.0, 0.0, 100.0, 10.0, "r")
        ease_in = make_portamento(0, 0.0, 0.0, 100.0, 10.0, "J")
        self.assertGreater(ease_out.apply(50), 5.0)
        self.assertLess(ease_in.apply(50), 5.0)

    def test_zero_width(self):
        p = make_portamento(0, 10.0, 600.0, 10.0, 620.0)
        self.assertEqual(p.apply(10), 620.0)


class TestPitchCurve(unittest.TestCase):
    def test_empty_render(self):
        curve = PitchCurve()
        self.assertEqual(curve.render(0, 4, 0), "AA#4#")
        self.assertEqual(curve.render(0, 1, 0), "AA#1#")
        self.assertEqual(curve.render(0, 0, 0), "AA")
        self.assertEqual(curve.render(5, 4, 0), "")

    def test_empty_pitch_data_is_ignored(self):
        curve = PitchCurve()
        curve.add_pitchbends(100, PitchbendData(), 60, 62)
        curve.add_pitchbends(100, PitchbendData(pbs=(-10.0,)), 60, 62)
        curve.remove_pitchbends(100, PitchbendData())
        self.assertEqual(len(curve), 0)

    def test_add_covers_expected_steps(self):
        curve = PitchCurve()
        curve.add_pitchbends(100, glide(), 60, 62)
        self.assertEqual(curve.steps(), list(range(10, 30)))

    def test_render_active_steps(self):
        curve = PitchCurve()
        curve.add_pitchbends(100, glide(), 60, 62)
        self.assertEqual(curve.render(10, 10, 60), "AA")
        self.assertEqual(curve.render(20, 20, 60), "Bk")
        self.assertEqual(curve.render(28, 32, 60), "C0C+DI#2#")

    def test_default_pitch_comes_from_first_portamento(self):
        curve = PitchCurve()
        curve.add_pitchbends(100, glide(), 60, 62)
        self.assertEqual(curve.render(0, 12, 60), "AA#9#AAAKAU")

    def test_pby_offsets_end_pitch(self):
        curve = PitchCurve()
        curve.add_pitchbends(100, glide(pby=(5.0,)), 60, 62)
        self.assertEqual(curve.render(20, 20, 60), encode_12bit(125))
        # Past the glide the default is its end pitch, 250 cents above C4.
        self.assertTrue(curve.render(28, 30, 60).endswith(encode_12bit(250)))

    def test_multiple_segments_chain(self):
        curve = PitchCurve()
        data = PitchbendData(pbs=(0.0,), pbw=(50.0, 50.0), pby=(10.0, 0.0), pbm=("s", "s"))
        curve.add_pitchbends(0, data, 60, 60)
        self.assertEqual(curve.steps(), list(range(0, 20)))
        # First segment ends one semitone up, second returns.
        self.assertEqual(curve.render(5, 5, 60), encode_12bit(50))
        self.assertEqual(curve.render(15, 15, 60), encode_12bit(50))

    def test_add_then_remove_restores_render(self):
        curve = PitchCurve()
        curve.add_pitchbends(0, glide(pbs=0.0, pbw=(60.0,)), 60, 64)
        before = curve.render(0, 60, 62)
        data = glide(pbs=-30.0, pbw=(80.0,), pby=(3.0,), pbm=("",))
        curve.add_pitchbends(40, data, 64, 60)
        self.assertNotEqual(curve.render(0, 60, 62), before)
        curve.remove_pitchbends(40, data)
        self.assertEqual(curve.render(0, 60, 62), before)

    def test_remove_deletes_empty_steps(self):
        curve = PitchCurve()
        data = glide()
        curve.add_pitchbends(100, data, 60, 62)
        curve.remove_pitchbends(100, data)
        self.assertEqual(len(curve), 0)
        self.assertEqual(curve.render(0, 4, 0), "AA#4#")

    def test_remove_fractional_segments(self):
        curve = PitchCurve()
        expected = curve.render(0, 200, 60)
        data = PitchbendData(pbs=(-10.7,), pbw=(0.1, 0.6), pby=(0.0, 0.0), pbm=("", ""))
        curve.add_pitchbends(480, data, 60, 62)
        self.assertTrue(curve.has_step(94))
        curve.remove_pitchbends(480, data)
        self.assertEqual(curve.steps(), [])
        self.assertEqual(curve.render(0, 200, 60), expected)

    def test_remove_many_fractional_widths(self):
        curve = PitchCurve()
        data = glide(pbs=-33.3, pbw=(0.1, 0.2, 0.3, 12.35, 20.05), pby=(1.0, 2.0, 3.0, 4.0, 0.0))
        curve.add_pitchbends(1000, data, 60, 64)
        self.assertGreater(len(curve), 0)
        curve.remove_pitchbends(1000, data)
        self.assertEqual(len(curve), 0)

    def test_sample_only_covers_span(self):
        curve = PitchCurve()
        curve.add_pitchbends(0, glide(pbs=0.0, pbw=(100.0,)), 60, 62)
        curve.add_pitchbends(1000, glide(pbs=0.0, pbw=(100.0,)), 62, 64)
        samples = curve.sample(195, 205)
        self.assertEqual(len(samples), 11)
        self.assertTrue(all(value == value for value in samples[5:]))
        self.assertEqual(samples[5], 620.0)
        self.assertTrue(all(value != value for value in samples[:5]))
        curve = PitchCurve()
        first = glide(pbs=0.0, pbw=(100.0,))
        second = glide(pbs=-50.0, pbw=(100.0,))
        curve.add_pitchbends(0, first, 60, 62)
        curve.add_pitchbends(80, second, 62, 64)
        self.assertEqual(curve.depth(10), 2)
        curve.remove_pitchbends(0, first)
        self.assertEqual(curve.depth(10), 1)
        self.assertFalse(curve.has_step(0))
        self.assertTrue(curve.has_step(25))


if __name__ == "__main__":
    unittest.main()
