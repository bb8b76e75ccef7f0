"""Tests for surface materials."""

import dataclasses
import pytest

from chunktrace.color import Color
from chunktrace.materials import Material


class TestMaterial:
    """Test Material."""

    def test_defaults_to_diffuse(self):
        material = Material(Color(255, 0, 0))
        assert material.color == Color(255, 0, 0)
        assert material.reflective is False

    def test_reflective(self):
        assert Material(Color(0, 0, 0), reflective=True).reflective

    def test_is_immutable(self):
        material = Material(Color(1, 2, 3))
        with pytest.raises(dataclasses.FrozenInstanceError):
            material.reflective = True

    def test_equality(self):
        assert Material(Color(1, 2, 3)) == Material(Color(1, 2, 3))
        assert Material(Color(1, 2, 3)) != Material(Color(1, 2, 3), True)
