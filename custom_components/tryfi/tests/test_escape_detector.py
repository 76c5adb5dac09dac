"""
Tests for EscapeDetector: debounce counter, confirmation threshold,
transition events and recheck requests.
"""

from __future__ import annotations

import unittest

from custom_components.tryfi.escape_detector import (
    SAFE_STATUS,
    EscapeDetector,
    EscapeEvent,
    EscapeState,
    EscapeStatus,
    is_escaped,
)
from custom_components.tryfi.models import PetLocation

from .test_common import HOME, OUTSIDE, make_pet


def _run(detector: EscapeDetector, readings: list[bool], pet_id: str = "pet-1"):
    return [detector.evaluate(pet_id, escaped) for escaped in readings]


class TestIsEscaped(unittest.TestCase):

    def test_outside_and_alone_is_escaped(self):
        self.assertTrue(is_escaped(make_pet(location=OUTSIDE)))

    def test_inside_safe_place_is_not_escaped(self):
        self.assertFalse(is_escaped(make_pet(location=HOME)))

    def test_with_companion_outside_is_not_escaped(self):
        self.assertFalse(is_escaped(make_pet(location=OUTSIDE, connected_to="Alice")))

    def test_area_name_alone_does_not_make_a_place_safe(self):
        location = PetLocation(area_name="Mitte")
        self.assertTrue(is_escaped(make_pet(location=location)))


class TestEscapeDetector(unittest.TestCase):

    def test_unknown_pet_is_safe(self):
        detector = EscapeDetector(threshold=2)
        self.assertEqual(detector.status("nobody"), SAFE_STATUS)

    def test_threshold_below_one_rejected(self):
        with self.assertRaises(ValueError):
            EscapeDetector(threshold=0)

    def test_two_escaped_readings_confirm_with_threshold_two(self):
        detector = EscapeDetector(threshold=2)

        first, second = _run(detector, [True, True])

        self.assertEqual(first.status, EscapeStatus(EscapeState.SUSPECTED, 1))
        self.assertIsNone(first.event)
        self.assertEqual(second.status, EscapeStatus(EscapeState.CONFIRMED, 2))
        self.assertIs(second.event, EscapeEvent.CONFIRMED)

    def test_interrupted_sequence_never_confirms(self):
        detector = EscapeDetector(threshold=2)

        decisions = _run(detector, [True, False, True])

        self.assertNotIn(EscapeEvent.CONFIRMED, [d.event for d in decisions])
        self.assertEqual(decisions[-1].status, EscapeStatus(EscapeState.SUSPECTED, 1))

    def test_counter_non_decreasing_while_escaped_and_reset_on_safe(self):
        detector = EscapeDetector(threshold=3)
        readings = [True, True, True, True, True, False, True, True, False]

        counters = [d.status.counter for d in _run(detector, readings)]

        self.assertEqual(counters, [1, 2, 3, 3, 3, 0, 1, 2, 0])

    def test_confirmation_fires_once_while_still_escaped(self):
        detector = EscapeDetector(threshold=2)

        events = [d.event for d in _run(detector, [True] * 6)]

        self.assertEqual(events.count(EscapeEvent.CONFIRMED), 1)

    def test_threshold_one_confirms_on_first_reading(self):
        detector = EscapeDetector(threshold=1)

        decision = detector.evaluate("pet-1", True)

        self.assertIs(decision.state, EscapeState.CONFIRMED)
        self.assertIs(decision.event, EscapeEvent.CONFIRMED)
        self.assertFalse(decision.needs_recheck)

    def test_safe_after_confirmed_clears(self):
        detector = EscapeDetector(threshold=2)
        _run(detector, [True, True])

        decision = detector.evaluate("pet-1", False)

        self.assertEqual(decision.status, SAFE_STATUS)
        self.assertIs(decision.event, EscapeEvent.CLEARED)

    def test_safe_after_suspected_recovers_without_clearing(self):
        detector = EscapeDetector(threshold=2)
        detector.evaluate("pet-1", True)

        decision = detector.evaluate("pet-1", False)

        self.assertIs(decision.event, EscapeEvent.RECOVERED)

    def test_safe_while_safe_emits_nothing(self):
        detector = EscapeDetector(threshold=2)

        decision = detector.evaluate("pet-1", False)

        self.assertIsNone(decision.event)
        self.assertFalse(decision.needs_recheck)

    def test_recheck_requested_only_while_suspected(self):
        detector = EscapeDetector(threshold=3)

        needs = [d.needs_recheck for d in _run(detector, [True, True, True, False])]

        self.assertEqual(needs, [True, True, False, False])

    def test_pets_are_independent(self):
        detector = EscapeDetector(threshold=2)
        detector.evaluate("a", True)
        detector.evaluate("b", False)

        self.assertIs(detector.status("a").state, EscapeState.SUSPECTED)
        self.assertIs(detector.status("b").state, EscapeState.SAFE)

    def test_discard_forgets_pet(self):
        detector = EscapeDetector(threshold=2)
        _run(detector, [True, True])

        detector.discard("pet-1")

        self.assertEqual(detector.status("pet-1"), SAFE_STATUS)
        self.assertNotIn("pet-1", detector.snapshot())

    def test_snapshot_reports_every_evaluated_pet(self):
        detector = EscapeDetector(threshold=2)
        detector.evaluate("a", True)
        detector.evaluate("b", False)

        snapshot = detector.snapshot()

        self.assertEqual(snapshot["a"], EscapeStatus(EscapeState.SUSPECTED, 1))
        self.assertEqual(snapshot["b"], SAFE_STATUS)
