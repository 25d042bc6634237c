"""Tests for outline validation against the padded box."""

from __future__ import annotations

import unittest

from src.geometry.polygon import has_duplicate_neighbours, validate_outline


SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


class TestValidateOutline(unittest.TestCase):

    def testvalid_square(self):
        self.assertEqual(validate_outline(SQUARE, 10, 10), [])

    def testtoo_few_vertices(self):
        errors = validate_outline(SQUARE[:2], 10, 10)
        self.assertEqual(len(errors), 1)
        self.assertIn("need at least 3", errors[0])

    def testoutside_box(self):
        errors = validate_outline(SQUARE, 5, 5)
        self.assertEqual(sum("outside" in e for e in errors), 3)

    def testzero_area(self):
        errors = validate_outline([(0, 0), (5, 0), (10, 0)], 10, 10)
        self.assertTrue(any("zero area" in e for e in errors))

    def testself_intersection(self):
        bowtie = [(0, 0), (10, 10), (10, 0), (0, 4)]
        errors = validate_outline(bowtie, 10, 10)
        self.assertTrue(any("self-intersecting" in e for e in errors))

    def testcounter_clockwise_on_screen_rejected(self):
        errors = validate_outline(list(reversed(SQUARE)), 10, 10)
        self.assertEqual(errors, ["Polygon must wind clockwise on screen."])

    def testcoincident_neighbours(self):
        self.assertTrue(has_duplicate_neighbours(SQUARE + [(0.0, 10.0)]))
        self.assertFalse(has_duplicate_neighbours(SQUARE))
        errors = validate_outline(SQUARE + [(0.0, 10.0)], 10, 10)
        self.assertTrue(any("coincident" in e for e in errors))
