"""Tests for IntegrityColorMap."""

import pytest
from unittest.mock import MagicMock
import matplotlib.colors as mcolors

from fresim.fire_simulator.visualizer import IntegrityColorMap
from fresim.utilities.fire_util import IntegrityState


class TestIntegrityColorMap:
    """Tests for mapping element states to colours."""

    @pytest.fixture
    def cmap(self):
        return IntegrityColorMap()

    def test_failed_is_black(self, cmap):
        assert cmap.color_for(IntegrityState.FAILED, 0.3) == mcolors.to_rgba('k')

    def test_healthy_keeps_original_color(self, cmap):
        assert cmap.color_for(IntegrityState.HEALTHY, 0.0, 'tab:blue') == mcolors.to_rgba('tab:blue')

    def test_exposed_gradient_ends(self, cmap):
        assert cmap.color_for(IntegrityState.EXPOSED, 0.0) == pytest.approx((0.0, 1.0, 0.0, 1.0))
        assert cmap.color_for(IntegrityState.EXPOSED, 1.0) == pytest.approx((1.0, 0.0, 0.0, 1.0))

    def test_progress_clipped(self, cmap):
        assert cmap.exposure_color(2.0) == cmap.exposure_color(1.0)
        assert cmap.exposure_color(-1.0) == cmap.exposure_color(0.0)

    def test_red_increases_with_progress(self, cmap):
        reds = [cmap.exposure_color(p)[0] for p in (0.0, 0.25, 0.5, 0.75, 1.0)]

        assert reds == sorted(reds)

    def test_colors_for_sim(self, cmap):
        tracker = MagicMock(state=IntegrityState.EXPOSED, failure_progress=1.0)
        sim = MagicMock(trackers={4: tracker})

        colors = cmap.colors_for_sim(sim)

        assert list(colors) == [4]
        assert colors[4] == pytest.approx((1.0, 0.0, 0.0, 1.0))
