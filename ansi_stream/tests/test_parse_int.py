import unittest

from ansi_stream.tokenizer import parse_int


class ParseIntTests(unittest.TestCase):
    def test_positive_and_negative(self):
        self.assertEqual(parse_int("123"), 123)
        self.assertEqual(parse_int("0"), 0)
        self.assertEqual(parse_int("-123"), -123)
        self.assertEqual(parse_int("-0"), 0)

    def test_leading_zeros(self):
        self.assertEqual(parse_int("0123"), 123)
        self.assertEqual(parse_int("-001"), -1)
        self.assertEqual(parse_int("000"), 0)

    def test_substrings(self):
        params = "38;2;-1;128;255"
        self.assertEqual(parse_int(params, 0, 2), 38)
        self.assertEqual(parse_int(params, 3, 4), 2)
        self.assertEqual(parse_int(params, 5, 7), -1)
        self.assertEqual(parse_int(params, 8, 11), 128)
        self.assertEqual(parse_int(params, 12, 15), 255)
        self.assertEqual(parse_int("start-456end", 5, 9), -456)

    def test_empty_and_invalid_ranges(self):
        self.assertIsNone(parse_int(""))
        self.assertIsNone(parse_int("123", 1, 1))
        self.assertIsNone(parse_int("123", 2, 1))
        self.assertIsNone(parse_int("123", 5, 9))
        self.assertIsNone(parse_int("123", -1, 3))

    def test_end_past_string_is_clamped(self):
        self.assertEqual(parse_int("123", 0, 4), 123)

    def test_non_numeric(self):
        for value in ("abc", "1a3", "12a", "-", "-abc", "-;", "1;2", "1.5", "1,000", "1-2", "٣"):
            with self.subTest(value=value):
                self.assertIsNone(parse_int(value))

    def test_large_numbers_are_exact(self):
        self.assertEqual(parse_int("999999999999999999999"), 999999999999999999999)
        self.assertEqual(parse_int("-999999999"), -999999999)

    def test_huge_digit_runs_saturate(self):
        value = parse_int("9" * 100000)
        self.assertEqual(value, int("9" * 64))
        self.assertEqual(parse_int("-" + "1" * 5000), -int("9" * 64))
        self.assertEqual(parse_int("0" * 5000 + "7"), 7)


if __name__ == "__main__":
    unittest.main()
