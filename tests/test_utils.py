"""
Unit tests for input parsing and numeric helpers.
"""

import math
import unittest

from presale_npv.utils import (
    clamp,
    coerce_installment_count,
    finite_or_zero,
    parse_amount,
    parse_currency,
    parse_percent,
)


class TestNumericHelpers(unittest.TestCase):

    def test_clamp(self):
        self.assertEqual(clamp(-1, 0, 1), 0)
        self.assertEqual(clamp(0.5, 0, 1), 0.5)
        self.assertEqual(clamp(7, 0, 1), 1)

    def test_finite_or_zero(self):
        self.assertEqual(finite_or_zero(3.5), 3.5)
        self.assertEqual(finite_or_zero("2"), 2.0)
        for bad in (math.nan, math.inf, -math.inf, None, "abc", object()):
            self.assertEqual(finite_or_zero(bad), 0.0)

    def test_coerce_installment_count(self):
        self.assertEqual(coerce_installment_count(24), 24)
        self.assertEqual(coerce_installment_count(24.9), 24)
        self.assertEqual(coerce_installment_count("36"), 36)
        for bad in (-1, -0.5, math.nan, math.inf, None, "twelve"):
            self.assertEqual(coerce_installment_count(bad), 0)


class TestParseCurrency(unittest.TestCase):

    def test_masked_text(self):
        self.assertEqual(parse_currency("$5,000,000.00"), 5_000_000.0)
        self.assertEqual(parse_currency("MXN 1,234.5"), 1_234.5)

    def test_extra_dots_dropped(self):
        self.assertEqual(parse_currency("1.2.3"), 1.23)

    def test_partial_input_is_zero(self):
        for text in ("", "$", "-", "abc", None):
            self.assertEqual(parse_currency(text), 0.0)

    def test_negative(self):
        self.assertEqual(parse_currency("-250"), -250.0)


class TestParsePercent(unittest.TestCase):

    def test_forms(self):
        self.assertEqual(parse_percent("12"), 12.0)
        self.assertEqual(parse_percent("12.5%"), 12.5)
        self.assertEqual(parse_percent(" 12,5 % "), 12.5)
        self.assertEqual(parse_percent(7), 7.0)

    def test_invalid(self):
        for text in ("", "abc", "nan", "inf"):
            with self.assertRaises(ValueError):
                parse_percent(text)


class TestParseAmount(unittest.TestCase):

    def test_suffixes(self):
        self.assertEqual(parse_amount("500k"), 500_000.0)
        self.assertEqual(parse_amount("5M"), 5_000_000.0)
        self.assertEqual(parse_amount("1.5m"), 1_500_000.0)

    def test_separators_and_sign(self):
        self.assertEqual(parse_amount("$5,000,000"), 5_000_000.0)
        self.assertEqual(parse_amount(" 1234.5 "), 1_234.5)

    def test_invalid(self):
        for text in ("", "five", "1e999"):
            with self.assertRaises(ValueError):
                parse_amount(text)


if __name__ == "__main__":
    unittest.main()
