# -*- coding: utf-8 -*-
"""
Tests for the host-free geometry: bounding boxes, polylines and the
curve/curve intersector used offline.
"""

import unittest

from autolineweight.core.bbox import BoundingBox, coincides, union_all
from autolineweight.core.curves import PolylineCurve, line, midpoint
from autolineweight.core.intersect import curve_curve
from autolineweight.core.intervals import Interval


class _Pt(object):
    def __init__(self, x, y, z):
        self.X, self.Y, self.Z = x, y, z


class TestBoundingBox(unittest.TestCase):

    def test_from_points_accepts_2d_3d_and_point_objects(self):
        box = BoundingBox.from_points([(0, 0), (2, 1, 3), _Pt(-1, 4, 0)])
        self.assertEqual(box, BoundingBox(-1, 0, 0, 2, 4, 3))

    def test_from_points_empty_returns_none(self):
        self.assertIsNone(BoundingBox.from_points([]))

    def test_coincides_is_inclusive(self):
        a = BoundingBox(0, 0, 0, 1, 1, 0)
        self.assertTrue(coincides(a, BoundingBox(1, 1, 0, 2, 2, 0)))
        self.assertFalse(coincides(a, BoundingBox(1.5, 0, 0, 2, 1, 0)))

    def test_coincides_checks_z(self):
        a = BoundingBox(0, 0, 0, 1, 1, 1)
        self.assertFalse(coincides(a, BoundingBox(0, 0, 2, 1, 1, 3)))

    def test_union_all_skips_none(self):
        box = union_all([None, BoundingBox(0, 0, 0, 1, 1, 0), BoundingBox(-2, 3, 0, 0, 4, 0)])
        self.assertEqual(box, BoundingBox(-2, 0, 0, 1, 4, 0))
        self.assertIsNone(union_all([None]))

    def test_inflate(self):
        box = BoundingBox(0, 0, 0, 1, 1, 1).inflate(0.5)
        self.assertEqual(box.min, (-0.5, -0.5, -0.5))
        self.assertEqual(box.max, (1.5, 1.5, 1.5))


class TestPolylineCurve(unittest.TestCase):

    def test_needs_two_points(self):
        with self.assertRaises(ValueError):
            PolylineCurve([(0, 0)])

    def test_arc_length_parameterisation(self):
        c = PolylineCurve([(0, 0), (3, 0), (3, 4)])
        self.assertEqual(c.length(), 7.0)
        self.assertEqual(c.domain, Interval(0, 7))
        self.assertEqual(c.point_at(5.0), (3.0, 2.0, 0.0))
        self.assertEqual(c.length_parameter(100.0), 7.0)

    def test_trim_keeps_parameters(self):
        c = line((0, 0), (10, 0))
        piece = c.trim(Interval(3, 6))
        self.assertEqual(piece.domain, Interval(3, 6))
        self.assertEqual(piece.point_at_start, (3.0, 0.0, 0.0))
        self.assertEqual(piece.point_at_end, (6.0, 0.0, 0.0))
        self.assertEqual(piece.point_at(4.0), (4.0, 0.0, 0.0))

    def test_trim_across_vertex_keeps_vertex(self):
        c = PolylineCurve([(0, 0), (3, 0), (3, 4)])
        piece = c.trim(Interval(2, 5))
        self.assertEqual(piece.points, [(2.0, 0.0, 0.0), (3.0, 0.0, 0.0), (3.0, 2.0, 0.0)])

    def test_trim_outside_or_empty_returns_none(self):
        c = line((0, 0), (10, 0))
        self.assertIsNone(c.trim(Interval(12, 15)))
        self.assertIsNone(c.trim(Interval(4, 4)))

    def test_translate(self):
        c = line((1, 1), (2, 1)).translate(-1, -1)
        self.assertEqual(c.point_at_start, (0.0, 0.0, 0.0))
        self.assertEqual(c.point_at_end, (1.0, 0.0, 0.0))

    def test_midpoint_is_half_arc_length(self):
        c = PolylineCurve([(0, 0), (3, 0), (3, 4)])
        self.assertEqual(midpoint(c), (3.0, 0.5, 0.0))

    def test_midpoint_of_trimmed_curve(self):
        c = line((0, 0), (10, 0)).trim(Interval(6, 10))
        self.assertEqual(midpoint(c), (8.0, 0.0, 0.0))


class TestCurveCurve(unittest.TestCase):

    def test_collinear_overlap_reports_run_on_both_curves(self):
        events = curve_curve(line((0, 0), (10, 0)), line((3, 0), (6, 0)), 0.001)
        self.assertEqual(len(events), 1)
        ev = events[0]
        self.assertTrue(ev.is_overlap)
        self.assertEqual(ev.overlap_a, Interval(3, 6))
        self.assertEqual(ev.overlap_b.increasing(), Interval(0, 3))

    def test_reversed_overlap(self):
        events = curve_curve(line((0, 0), (10, 0)), line((8, 0), (2, 0)), 0.001)
        self.assertTrue(events[0].is_overlap)
        self.assertEqual(events[0].overlap_a, Interval(2, 8))

    def test_crossing_reports_point(self):
        events = curve_curve(line((0, 0), (10, 0)), line((4, -1), (4, 1)), 0.001)
        self.assertEqual(len(events), 1)
        self.assertTrue(events[0].is_point)
        self.assertAlmostEqual(events[0].param_a, 4.0)
        self.assertAlmostEqual(events[0].param_b, 1.0)

    def test_disjoint_returns_nothing(self):
        self.assertEqual(curve_curve(line((0, 0), (1, 0)), line((0, 1), (1, 1)), 0.001), [])

    def test_parallel_offset_within_tolerance_is_overlap(self):
        events = curve_curve(line((0, 0), (10, 0)), line((2, 0.0005), (4, 0.0005)), 0.001)
        self.assertTrue(events[0].is_overlap)

    def test_short_touching_run_is_a_point(self):
        events = curve_curve(line((0, 0), (10, 0)), line((10, 0), (12, 0)), 0.001)
        self.assertEqual(len(events), 1)
        self.assertFalse(events[0].is_overlap)
        self.assertAlmostEqual(events[0].param_a, 10.0)

    def test_point_events_inside_overlap_are_dropped(self):
        a = PolylineCurve([(0, 0), (5, 0), (10, 0)])
        events = curve_curve(a, line((2, 0), (8, 0)), 0.001)
        self.assertTrue(all(ev.is_overlap for ev in events))
        self.assertEqual(len(events), 2)


if __name__ == "__main__":
    unittest.main()
