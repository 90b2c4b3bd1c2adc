"""
Tests for the Flask front end and its JSON endpoint.
"""

import unittest

from presale_npv.data_models import DEFAULT_CUSTOM, DEFAULT_TERMS, DEFAULT_TRADITIONAL
from presale_npv.engine import compare_schemes
from presale_npv.formatter import format_currency
from presale_npv_web.app import app


class TestIndexPage(unittest.TestCase):

    def setUp(self):
        app.config["TESTING"] = True
        self.client = app.test_client()

    def test_defaults(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        page = response.get_data(as_text=True)
        comparison = compare_schemes(DEFAULT_TERMS, DEFAULT_TRADITIONAL, DEFAULT_CUSTOM)
        self.assertIn('value="$5,000,000.00"', page)
        self.assertIn('value="12.00%"', page)
        self.assertIn("Scheme: Traditional", page)
        self.assertIn("Scheme: Custom", page)
        self.assertIn(format_currency(comparison.traditional.result.npv), page)
        self.assertIn(format_currency(comparison.npv_difference), page)
        self.assertIn('id="results-t"', page)
        self.assertIn('id="results-c"', page)
        self.assertNotIn('class="warning"', page)

    def test_submitted_form(self):
        response = self.client.post(
            "/",
            data={
                "base_value": "$1,000",
                "rate": "0",
                "installments": "12",
                "t_mode": "percent",
                "t_initial_pct": "70",
                "t_installment_pct": "50%",
                "t_show_results": "1",
                "c_mode": "absolute",
                "c_initial_abs": "$300",
                "c_installment_abs": "200",
            },
        )
        self.assertEqual(response.status_code, 200)
        page = response.get_data(as_text=True)
        self.assertIn('value="$1,000.00"', page)
        self.assertIn('value="50.00%"', page)
        self.assertIn('value="$300.00"', page)
        self.assertIn("In Traditional, initial % plus installments % exceed 100%", page)
        # Traditional: remainder clamped to 0, so 700 + 500 at a zero rate.
        self.assertIn("$1,200.00", page)
        # Traditional 1,200 minus Custom 1,000.
        self.assertIn('<strong id="npv-difference">$200.00</strong>', page)
        self.assertIn('id="results-t"', page)
        self.assertNotIn('id="results-c"', page)

    def test_remainder_and_equivalents_under_inputs(self):
        page = self.client.get("/").get_data(as_text=True)
        self.assertIn('<input type="text" value="30.00%" readonly>', page)
        self.assertIn("$ equiv.: $500,000.00", page)
        self.assertIn("$ equiv.: $1,500,000.00", page)

    def test_absolute_equivalents_are_not_clamped(self):
        response = self.client.post(
            "/",
            data={"base_value": "1000", "c_mode": "absolute", "c_initial_abs": "1500", "c_installment_abs": "0", "c_show_results": "1"},
        )
        page = response.get_data(as_text=True)
        self.assertIn("% equiv.: 150.00%", page)
        self.assertIn("% equiv.: 0.00%", page)
        self.assertIn('<input type="text" value="$0.00" disabled>', page)

    def test_too_many_installments(self):
        response = self.client.post("/", data={"installments": "1e12", "t_show_results": "1", "c_show_results": "1"})
        self.assertEqual(response.status_code, 200)
        page = response.get_data(as_text=True)
        self.assertIn("Number of installments must not exceed 1200", page)
        self.assertIn('name="installments" value="24"', page)

    def test_unparsable_rate_keeps_default(self):
        response = self.client.post("/", data={"rate": "abc", "t_show_results": "1", "c_show_results": "1"})
        self.assertEqual(response.status_code, 200)
        self.assertIn('value="12.00%"', response.get_data(as_text=True))

    def test_invalid_mode_falls_back_to_percent(self):
        response = self.client.post("/", data={"t_mode": "bogus", "t_show_results": "1"})
        self.assertEqual(response.status_code, 200)
        self.assertIn('name="t_initial_pct" value="10.00%"', response.get_data(as_text=True))


class TestCompareApi(unittest.TestCase):

    def setUp(self):
        app.config["TESTING"] = True
        self.client = app.test_client()

    def test_compare(self):
        payload = {
            "base_value": 5_000_000,
            "annual_rate_pct": 12,
            "installment_count": 24,
            "traditional": {"initial": 10, "installment": 60},
            "custom": {"input_mode": "absolute", "initial": 1_500_000, "installment": 2_500_000, "defer_remainder": True},
        }
        response = self.client.post("/api/compare", json=payload)
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data["traditional"]["input_mode"], "percent")
        self.assertTrue(data["custom"]["defer_remainder"])
        self.assertEqual(data["custom"]["result"]["remainder_period"], 25)
        self.assertAlmostEqual(
            data["npv_difference"], data["traditional"]["result"]["npv"] - data["custom"]["result"]["npv"], places=6
        )
        self.assertEqual(data["warnings"], [])

    def test_defaults_for_shared_terms(self):
        payload = {"traditional": {"initial": 10, "installment": 60}, "custom": {"initial": 30, "installment": 50}}
        response = self.client.post("/api/compare", json=payload)
        self.assertEqual(response.status_code, 200)
        expected = compare_schemes(DEFAULT_TERMS, DEFAULT_TRADITIONAL, DEFAULT_CUSTOM)
        self.assertAlmostEqual(response.get_json()["npv_difference"], expected.npv_difference, places=6)

    def test_rejects_bad_payloads(self):
        bad_payloads = [
            [1, 2, 3],
            {"traditional": {"initial": 10}, "custom": {"initial": 30, "installment": 50}},
            {"traditional": {"initial": "ten", "installment": 60}, "custom": {"initial": 30, "installment": 50}},
            {"base_value": -1, "traditional": {"initial": 10, "installment": 60}, "custom": {"initial": 30, "installment": 50}},
            {"traditional": {"input_mode": "bogus", "initial": 10, "installment": 60}, "custom": {"initial": 30, "installment": 50}},
            {"traditional": {"initial": 10, "installment": 60, "defer_remainder": "false"}, "custom": {"initial": 30, "installment": 50}},
            {"installment_count": 1e12, "traditional": {"initial": 10, "installment": 60}, "custom": {"initial": 30, "installment": 50}},
            {"installment_count": 1201, "traditional": {"initial": 10, "installment": 60}, "custom": {"initial": 30, "installment": 50}},
        ]
        for payload in bad_payloads:
            response = self.client.post("/api/compare", json=payload)
            self.assertEqual(response.status_code, 400, payload)
            self.assertIn("error", response.get_json())

    def test_longest_schedule_accepted(self):
        payload = {"installment_count": 1200, "traditional": {"initial": 10, "installment": 60}, "custom": {"initial": 30, "installment": 50, "defer_remainder": False}}
        response = self.client.post("/api/compare", json=payload)
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data["installment_count"], 1200)
        self.assertFalse(data["custom"]["defer_remainder"])
        self.assertEqual(data["custom"]["result"]["remainder_period"], 1200)

    def test_rejects_non_json(self):
        response = self.client.post("/api/compare", data="not json", content_type="text/plain")
        self.assertEqual(response.status_code, 400)


if __name__ == "__main__":
    unittest.main()
