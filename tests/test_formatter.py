"""
Unit tests for display formatting.
"""

import math
import unittest

from presale_npv.formatter import format_currency, format_fraction, format_pct


class TestFormatting(unittest.TestCase):

    def test_currency(self):
        self.assertEqual(format_currency(5_000_000), "$5,000,000.00")
        self.assertEqual(format_currency(1_234.5), "$1,234.50")
        self.assertEqual(format_currency(0.004), "$0.00")
        self.assertEqual(format_currency(-1_234.5), "-$1,234.50")

    def test_currency_non_finite(self):
        for value in (math.nan, math.inf, None):
            self.assertEqual(format_currency(value), "$0.00")

    def test_percent(self):
        self.assertEqual(format_pct(12), "12.00%")
        self.assertEqual(format_pct(12.5), "12.50%")
        self.assertEqual(format_pct(math.nan), "0.00%")

    def test_fraction(self):
        self.assertEqual(format_fraction(0.0094888), "0.95%")
        self.assertEqual(format_fraction(0.3), "30.00%")
        self.assertEqual(format_fraction(math.inf), "0.00%")


if __name__ == "__main__":
    unittest.main()
