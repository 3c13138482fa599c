import numpy as np
from fractions import Fraction
from matplotlib.colors import hsv_to_rgb

from .curves import Point


HUE_MODES = ('index', 'degrees', 'sweep')


class ParameterDomain:
    """
    Closed parameter interval [start, stop] split into `samples` equal steps.

    The interval may run backwards (start > stop), in which case the step is
    negative and the curve is traced in that direction.
    """

    def __init__(self, start, stop, samples):
        samples = int(samples)
        if samples < 1:
            raise ValueError(f"Domain needs at least one step, got samples={samples}.")
        self.start = float(start)
        self.stop = float(stop)
        self.samples = samples

    @property
    def step(self):
        return (self.stop - self.start) / self.samples

    def parameter(self, i):
        """Parameter value of sample i."""
        return self.start + i * self.step

    def parameters(self):
        """All samples + 1 parameter values, start included and stop reached."""
        return self.start + np.arange(self.samples + 1) * self.step

    def parameter_at(self, frame, total_frames):
        """Current parameter once `frame` of `total_frames` frames have elapsed."""
        return self.start + (self.stop - self.start) * frame / total_frames

    def __repr__(self):
        return f"ParameterDomain(start={self.start!r}, stop={self.stop!r}, samples={self.samples})"


class SampleTable:
    """
    Read-only table of curve points at evenly spaced parameter values.

    Attributes:
    -----------
    domain : ParameterDomain
        The sampled domain.
    params : np.ndarray
        Parameter values, shape (N + 1,).
    points : np.ndarray
        Curve points, shape (N + 1, 2).
    """

    def __init__(self, domain, params, points):
        self.domain = domain
        self.params = params
        self.points = points
        self.params.setflags(write=False)
        self.points.setflags(write=False)

    @property
    def samples(self):
        return self.domain.samples

    def __len__(self):
        return len(self.points)

    def __getitem__(self, i):
        if not 0 <= i <= self.samples:
            raise IndexError(f"Sample index {i} outside [0, {self.samples}].")
        x, y = self.points[i]
        return Point(float(x), float(y))

    def segments(self, count):
        """
        First `count` line segments of the table, clamped to [0, N].

        Returns:
        --------
        np.ndarray
            Array of shape (count, 2, 2); segment i joins points i and i + 1.
        """
        count = max(0, min(int(count), self.samples))
        return np.stack([self.points[:count], self.points[1:count + 1]], axis=1)


def build_samples(domain, curve):
    """
    Samples `curve` at the N + 1 parameter values of `domain`.

    The result only depends on the domain and the curve, so rebuilding with
    the same inputs reproduces the table bit for bit.
    """
    params = domain.parameters()
    return SampleTable(domain, params, curve.points(params))


def trace_length(frame, total_frames, samples):
    """
    Number of trace segments visible at `frame`.

    The trace reveals round(frame * N / total_frames) segments, never fewer
    than zero and never more than N.
    """
    if total_frames < 1:
        raise ValueError("total_frames must be at least 1.")
    count = round(Fraction(int(frame) * samples, total_frames))
    return max(0, min(count, samples))


def segment_colors(table, hue_by='index', saturation=1.0, value=1.0):
    """
    RGB color of every segment of `table`, as an array of shape (N, 3).

    Parameters:
    -----------
    table : SampleTable
        Table whose segments are colored.
    hue_by : str, optional
        'index'   -> hue = i mod 360 for segment i (counted from 1),
        'degrees' -> hue = degrees(t) mod 360 at the segment start,
        'sweep'   -> hue = 360 i / N, one full turn over the whole table.
    saturation, value : float, optional
        Fixed HSV saturation and value.
    """
    n = table.samples
    index = np.arange(1, n + 1)
    if hue_by == 'index':
        hue = np.mod(index, 360)
    elif hue_by == 'degrees':
        hue = np.mod(np.degrees(table.params[:-1]), 360)
    elif hue_by == 'sweep':
        hue = np.mod(360.0 * index / n, 360)
    else:
        raise ValueError(f"hue_by must be one of {list(HUE_MODES)}")

    hsv = np.column_stack([hue / 360.0,
                           np.full(n, float(saturation)),
                           np.full(n, float(value))])
    return hsv_to_rgb(hsv)
