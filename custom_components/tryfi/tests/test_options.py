"""
Tests for TryFiOptions: merging data and options, validation fallbacks and
ignored pet matching.
"""

from __future__ import annotations

import unittest

from custom_components.tryfi.coordinator_utils import split_ignored
from custom_components.tryfi.options import TryFiOptions, pet_names

from .test_common import make_entry, make_pet


class TestTryFiOptions(unittest.TestCase):

    def test_defaults(self):
        options = TryFiOptions.from_entry(make_entry())

        self.assertEqual(options.polling_interval, 60)
        self.assertEqual(options.escape_alert_type, "leak")
        self.assertEqual(options.ignored_pets, ())
        self.assertEqual(options.escape_confirmations, 2)
        self.assertEqual(options.escape_check_interval, 30)

    def test_options_override_data(self):
        entry = make_entry(options={"polling_interval": 120}, polling_interval=90)

        self.assertEqual(TryFiOptions.from_entry(entry).polling_interval, 120)

    def test_values_in_data_are_used_without_options(self):
        entry = make_entry(escape_confirmations=3)

        self.assertEqual(TryFiOptions.from_entry(entry).escape_confirmations, 3)

    def test_numeric_strings_are_coerced(self):
        options = TryFiOptions.from_dict({"polling_interval": "45", "escape_check_interval": "10"})

        self.assertEqual(options.polling_interval, 45)
        self.assertEqual(options.escape_check_interval, 10)

    def test_out_of_range_values_fall_back_with_warning(self):
        raw = {"polling_interval": 1, "escape_confirmations": 0, "escape_check_interval": 2}

        with self.assertLogs("custom_components.tryfi.options", level="WARNING") as logs:
            options = TryFiOptions.from_dict(raw)

        self.assertEqual(len(logs.records), 3)
        self.assertEqual(options, TryFiOptions())

    def test_unknown_alert_type_falls_back(self):
        with self.assertLogs("custom_components.tryfi.options", level="WARNING"):
            options = TryFiOptions.from_dict({"escape_alert_type": "siren"})

        self.assertEqual(options.escape_alert_type, "leak")

    def test_alert_type_is_case_insensitive(self):
        self.assertEqual(TryFiOptions.from_dict({"escape_alert_type": "Motion"}).escape_alert_type, "motion")

    def test_ignored_pets_from_comma_string(self):
        options = TryFiOptions.from_dict({"ignored_pets": " Rex, Bella ,,"})
        self.assertEqual(options.ignored_pets, ("Rex", "Bella"))

    def test_ignored_pets_from_list(self):
        options = TryFiOptions.from_dict({"ignored_pets": ["Rex", " "]})
        self.assertEqual(options.ignored_pets, ("Rex",))

    def test_is_ignored_is_case_insensitive(self):
        options = TryFiOptions(ignored_pets=("Rex",))

        self.assertTrue(options.is_ignored("rex"))
        self.assertTrue(options.is_ignored("REX"))
        self.assertFalse(options.is_ignored("Rexy"))

    def test_pet_names_none(self):
        self.assertEqual(pet_names(None), ())


class TestSplitIgnored(unittest.TestCase):

    def test_split(self):
        rex = make_pet("a", name="Rex")
        bella = make_pet("b", name="Bella")

        tracked, ignored = split_ignored([rex, bella], TryFiOptions(ignored_pets=("rex",)))

        self.assertEqual(tracked, [bella])
        self.assertEqual(ignored, [rex])
