"""
test_two_link.py: unit tests for the two-link IK solver and angle helpers.

Tests cover:
  - solve_two_link: normal, overstretched, dead-zone and zero-length cases
  - interior_angle: right angles, reflection above 180 deg, zero vectors
  - polar / lerp helpers
"""

import math

import pytest

from bikefit.kinematics.two_link import (
    distance,
    interior_angle,
    lerp,
    midpoint,
    polar,
    solve_two_link,
)
from bikefit.schemas import Point2D


ORIGIN = Point2D(0.0, 0.0)


class TestSolveTwoLink:

    def test_three_four_five_triangle(self):
        """Links 3 and 4 reaching 5 away form a right angle at the joint."""
        joint = solve_two_link(ORIGIN, Point2D(5.0, 0.0), 3.0, 4.0)
        assert joint.x == pytest.approx(1.8)
        assert joint.y == pytest.approx(2.4)
        assert distance(joint, Point2D(5.0, 0.0)) == pytest.approx(4.0)
        assert interior_angle(joint, ORIGIN, Point2D(5.0, 0.0)) == pytest.approx(90.0)

    def test_joint_rotates_positive(self):
        """The joint always lands on the +alpha side of root->target (+y here)."""
        joint = solve_two_link(ORIGIN, Point2D(6.0, 0.0), 4.0, 4.0)
        assert joint.y > 0

    def test_link_lengths_preserved(self):
        root, target = Point2D(-2.0, 7.0), Point2D(3.5, -1.0)
        joint = solve_two_link(root, target, 6.0, 5.0)
        assert distance(root, joint) == pytest.approx(6.0)
        assert distance(joint, target) == pytest.approx(5.0)

    def test_overstretched_projects_on_line(self):
        joint = solve_two_link(ORIGIN, Point2D(10.0, 0.0), 3.0, 4.0)
        assert joint.x == pytest.approx(30.0 / 7.0)
        assert joint.y == pytest.approx(0.0)

    def test_exact_reach_is_fully_extended(self):
        """Distance == total length gives a straight limb (180 deg)."""
        target = Point2D(7.0, 0.0)
        joint = solve_two_link(ORIGIN, target, 3.0, 4.0)
        assert joint.x == pytest.approx(3.0)
        assert interior_angle(joint, ORIGIN, target) == pytest.approx(180.0)

    def test_exact_reach_diagonal(self):
        target = Point2D(3.0 * 7.0 / 5.0, 4.0 * 7.0 / 5.0)
        joint = solve_two_link(ORIGIN, target, 3.0, 4.0)
        assert interior_angle(joint, ORIGIN, target) == pytest.approx(180.0, abs=1e-4)

    def test_dead_zone_uses_midpoint(self):
        joint = solve_two_link(ORIGIN, Point2D(1.0, 0.0), 3.0, 5.0)
        assert joint == pytest.approx(Point2D(0.5, 0.0))

    def test_coincident_root_and_target(self):
        joint = solve_two_link(Point2D(2.0, 3.0), Point2D(2.0, 3.0), 4.0, 4.0)
        assert joint == pytest.approx(Point2D(2.0, 3.0))

    def test_coincident_with_unequal_links(self):
        joint = solve_two_link(Point2D(2.0, 3.0), Point2D(2.0, 3.0), 4.4, 5.6)
        assert all(math.isfinite(v) for v in joint)
        assert joint == pytest.approx(Point2D(2.0, 3.0))

    def test_zero_length_links(self):
        joint = solve_two_link(ORIGIN, Point2D(1.0, 0.0), 0.0, 0.0)
        assert joint == pytest.approx(Point2D(0.5, 0.0))

    def test_zero_root_link(self):
        joint = solve_two_link(ORIGIN, Point2D(1.0, 0.0), 0.0, 1.0)
        assert joint == ORIGIN


class TestInteriorAngle:

    def test_right_angle(self):
        assert interior_angle(ORIGIN, Point2D(1.0, 0.0), Point2D(0.0, 1.0)) == pytest.approx(90.0)

    def test_reflected_above_180(self):
        a = Point2D(math.cos(math.radians(170)), math.sin(math.radians(170)))
        b = Point2D(math.cos(math.radians(-170)), math.sin(math.radians(-170)))
        assert interior_angle(ORIGIN, a, b) == pytest.approx(20.0)

    def test_order_does_not_matter(self):
        a, b = Point2D(3.0, 1.0), Point2D(-1.0, 2.0)
        assert interior_angle(ORIGIN, a, b) == pytest.approx(interior_angle(ORIGIN, b, a))

    def test_zero_length_arm_is_finite(self):
        value = interior_angle(ORIGIN, ORIGIN, Point2D(1.0, 1.0))
        assert math.isfinite(value)
        assert 0.0 <= value <= 180.0


class TestHelpers:

    def test_polar_screen_axes(self):
        p = polar(Point2D(1.0, 1.0), 2.0, math.pi / 2)
        assert p == pytest.approx(Point2D(1.0, 3.0))

    def test_negative_length_walks_backwards(self):
        p = polar(ORIGIN, -2.0, 0.0)
        assert p == pytest.approx(Point2D(-2.0, 0.0))

    def test_lerp_and_midpoint(self):
        a, b = Point2D(0.0, 0.0), Point2D(4.0, -8.0)
        assert lerp(a, b, 0.25) == pytest.approx(Point2D(1.0, -2.0))
        assert midpoint(a, b) == pytest.approx(Point2D(2.0, -4.0))
