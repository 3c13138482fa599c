import matplotlib

matplotlib.use("Agg")

import pytest

from special_curves.animation import AnimationSpec


@pytest.fixture
def tiny_spec():
    """Small canvas and a handful of frames, enough to exercise every pass."""
    def make(name="curve", duration=1, frame_rate=6):
        return AnimationSpec(name, duration=duration, frame_rate=frame_rate, width=100, height=200, dpi=50)
    return make
