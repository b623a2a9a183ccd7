"""Tests for constants, geometry helpers and unit conversions."""

import pytest
import numpy as np

from fresim.utilities.fire_util import (MaterialCategory, StructuralRole, RestraintCondition,
                                        ExposureConfiguration, UtilFuncs)
from fresim.utilities.unit_conversions import m_to_mm, hr_to_s, s_to_hr, m_min_to_m_s


class TestConstants:
    """Tests for name lookups on the constant classes."""

    def test_material_from_name(self):
        assert MaterialCategory.from_name("Siliceous") == MaterialCategory.SILICEOUS
        assert MaterialCategory.from_name(" semilightweight ") == MaterialCategory.SEMI_LIGHTWEIGHT

    def test_unknown_name(self):
        with pytest.raises(KeyError):
            MaterialCategory.from_name("Granite")

    def test_role_and_restraint_from_name(self):
        assert StructuralRole.from_name("ConcreteColumn") == StructuralRole.CONCRETE_COLUMN
        assert RestraintCondition.from_name("notapplicable") == RestraintCondition.NOT_APPLICABLE
        assert ExposureConfiguration.from_name("OneSide") == ExposureConfiguration.ONE_SIDE

    def test_names_round_trip(self):
        for constants in (MaterialCategory, StructuralRole, RestraintCondition):
            for value, name in constants.names.items():
                assert constants.ids[name] == value


class TestUtilFuncs:
    """Tests for geometry helpers."""

    def test_to_point_2d(self):
        assert np.allclose(UtilFuncs.to_point((1.0, 2.0)), [1.0, 2.0, 0.0])

    def test_to_point_invalid(self):
        with pytest.raises(ValueError):
            UtilFuncs.to_point((1.0,))

    def test_distance_to_box(self):
        box_min = np.array([0.0, 0.0, 0.0])
        box_max = np.array([1.0, 1.0, 1.0])

        assert UtilFuncs.distance_to_box(np.array([0.5, 0.5, 0.5]), box_min, box_max) == 0.0
        assert UtilFuncs.distance_to_box(np.array([4.0, 5.0, 1.0]), box_min, box_max) == pytest.approx(5.0)

    def test_box_center(self):
        assert np.allclose(UtilFuncs.box_center((0, 0, 0), (2, 4, 6)), [1.0, 2.0, 3.0])

    def test_format_time(self):
        assert UtilFuncs.format_time(3725.9) == "01:02:05"
        assert UtilFuncs.format_time(90061) == "1:01:01:01"


class TestUnitConversions:
    """Tests for unit conversion helpers."""

    def test_m_to_mm(self):
        assert m_to_mm(0.125) == pytest.approx(125.0)

    def test_hours(self):
        assert hr_to_s(1.5) == pytest.approx(5400.0)
        assert s_to_hr(5400.0) == pytest.approx(1.5)

    def test_rate(self):
        assert m_min_to_m_s(0.5) == pytest.approx(0.5 / 60)
