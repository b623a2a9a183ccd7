"""Presentation colours for element integrity.

Hosts that render the model can colour each element from its tracker state:
the element's own colour while healthy, a green to red gradient over the
fraction of its rating used up while exposed, and black once it failed.

.. autoclass:: IntegrityColorMap
    :members:
"""
from typing import Dict, Tuple

import matplotlib.colors as mcolors

from fresim.utilities.fire_util import IntegrityState

RGBA = Tuple[float, float, float, float]


class IntegrityColorMap:
    """Maps tracker state and failure progress to RGBA colours.

    Attributes:
        cmap (mcolors.LinearSegmentedColormap): Gradient evaluated over failure progress.
        failed_color (tuple): RGBA colour of failed elements.
    """

    def __init__(self, exposed_start='#00ff00', exposed_end='#ff0000', failed_color='k'):
        self.cmap = mcolors.LinearSegmentedColormap.from_list(
            "integrity", [mcolors.to_rgba(exposed_start), mcolors.to_rgba(exposed_end)]
        )
        self.failed_color = mcolors.to_rgba(failed_color)

    def exposure_color(self, progress: float) -> RGBA:
        """Gradient colour for a failure progress in [0, 1] (clipped)."""
        progress = min(max(float(progress), 0.0), 1.0)
        return tuple(float(c) for c in self.cmap(progress))

    def color_for(self, state: int, progress: float = 0.0, original_color='w') -> RGBA:
        """Colour of an element.

        Args:
            state (int): IntegrityState constant.
            progress (float, optional): Fraction of the rating used up. Unrated
                exposed elements report 0 and stay at the start of the gradient.
            original_color (optional): Any matplotlib colour spec, used while healthy.
        """
        if state == IntegrityState.FAILED:
            return self.failed_color

        elif state == IntegrityState.EXPOSED:
            return self.exposure_color(progress)

        return mcolors.to_rgba(original_color)

    def colors_for_sim(self, sim, original_colors: Dict[int, object] = None) -> Dict[int, RGBA]:
        """Colour of every element of a `FireResistanceSim`, keyed by element id."""
        original_colors = original_colors or {}

        colors = {}
        for element_id, tracker in sim.trackers.items():
            colors[element_id] = self.color_for(tracker.state, tracker.failure_progress,
                                                original_colors.get(element_id, 'w'))

        return colors
