import numpy as np
from typing import NamedTuple


# Denominators closer to zero than this collapse the point onto the origin.
DEGENERACY_TOLERANCE = 1e-6


class Point(NamedTuple):
    """A point of the drawing plane (y grows downwards, as on screen)."""
    x: float
    y: float


class CurveModel:
    """
    Base class for closed-form curves.

    Subclasses implement `_coordinates(t)`, which must accept a scalar or a
    numpy array of parameter values and return the matching x and y
    coordinates, already flipped to screen orientation.
    """

    def _coordinates(self, t):
        raise NotImplementedError

    def point_at(self, t):
        """Returns the point of the curve at parameter t."""
        x, y = self._coordinates(float(t))
        return Point(float(x), float(y))

    def points(self, t):
        """
        Evaluates the curve at every parameter value of t.

        Parameters:
        -----------
        t : array_like
            Parameter values.

        Returns:
        --------
        np.ndarray
            Array of shape (len(t), 2) holding x and y columns.
        """
        t = np.asarray(t, dtype=float)
        x, y = self._coordinates(t)
        x = np.broadcast_to(np.asarray(x, dtype=float), t.shape)
        y = np.broadcast_to(np.asarray(y, dtype=float), t.shape)
        return np.column_stack([x, y])


class Roulette(CurveModel):
    """
    Curve traced by a point on a circle rolling around a fixed circle.

    The fixed circle has radius R and is centered at the origin. The rolling
    circle has radius r and rolls inside it (hypocycloid) or outside of it
    (epicycloid). The generating point starts on the fixed circle at (R, 0).

    Attributes:
    -----------
    R : float
        Radius of the fixed circle.
    r : float
        Radius of the rolling circle.
    internal : bool
        True for a hypocycloid, False for an epicycloid.
    """

    def __init__(self, R, r, internal=True):
        if R <= 0:
            raise ValueError("Fixed circle radius 'R' must be positive.")
        if r <= 0:
            raise ValueError("Rolling circle radius 'r' must be positive.")
        self.R = float(R)
        self.r = float(r)
        self.internal = bool(internal)

    @property
    def sign(self):
        return 1.0 if self.internal else -1.0

    @property
    def center_distance(self):
        """Distance between the two circle centers, R - r inside, R + r outside."""
        return self.R - self.sign * self.r

    @property
    def cusps(self):
        return self.R / self.r

    def center_at(self, t):
        """Center C of the rolling circle at parameter t."""
        d = self.center_distance
        return Point(float(d * np.cos(t)), float(-d * np.sin(t)))

    def contact_at(self, t):
        """Contact point T of both circles, always on the fixed circle."""
        return Point(float(self.R * np.cos(t)), float(-self.R * np.sin(t)))

    def spin_at(self, t):
        """Angle of the generating radius of the rolling circle at parameter t."""
        return (self.center_distance / self.r) * t

    def _coordinates(self, t):
        d = self.center_distance
        center_x = d * np.cos(t)
        center_y = -d * np.sin(t)

        spin = self.spin_at(t)
        # Outside rolling mirrors the generating radius horizontally
        trace_x = center_x + self.sign * self.r * np.cos(spin)
        trace_y = center_y + self.r * np.sin(spin)
        return trace_x, trace_y


class ParametricCurve(CurveModel):
    """
    Curve given by closed-form x(t), y(t) in mathematical orientation.

    Parameters:
    -----------
    x, y : callable
        Functions of the parameter, numpy-vectorised.
    denominator : callable, optional
        Shared denominator of the formulas. Wherever its magnitude falls
        under `tolerance` the curve is pinned to the origin.
    tolerance : float, optional
        Degeneracy tolerance (default: 1e-6).
    """

    def __init__(self, x, y, denominator=None, tolerance=DEGENERACY_TOLERANCE):
        self._x = x
        self._y = y
        self._denominator = denominator
        self.tolerance = float(tolerance)

    def _raw(self, t):
        return self._x(t), self._y(t)

    def _coordinates(self, t):
        with np.errstate(divide='ignore', invalid='ignore'):
            x, y = self._raw(t)
            if self._denominator is not None:
                degenerate = np.abs(self._denominator(t)) < self.tolerance
                x = np.where(degenerate, 0.0, x)
                y = np.where(degenerate, 0.0, y)
        return x, -y


class PolarCurve(ParametricCurve):
    """
    Curve given by its polar radius r(theta).

    The radius is converted with x = r cos(theta), y = r sin(theta) before
    the screen flip. `denominator` and `tolerance` behave as in
    ParametricCurve.
    """

    def __init__(self, radius, denominator=None, tolerance=DEGENERACY_TOLERANCE):
        super().__init__(None, None, denominator, tolerance)
        self.radius = radius

    def _raw(self, theta):
        r = self.radius(theta)
        return r * np.cos(theta), r * np.sin(theta)


class AgnesiConstruction(CurveModel):
    """
    Tangent construction of the Witch of Agnesi.

    An auxiliary circle of radius a sits on the x axis with its top at
    M = (0, 2a). A line from the origin at angle theta from the vertical
    crosses the circle at A and the horizontal line y = 2a at N. The curve
    point P shares the abscissa of N and the ordinate of A.
    """

    def __init__(self, a):
        if a <= 0:
            raise ValueError("Circle radius 'a' must be positive.")
        self.a = float(a)

    def construction(self, theta):
        """Returns the construction points (A, N, P) for angle theta."""
        a = self.a
        A = Point(float(a * np.sin(2 * theta)), float(-2 * a * np.cos(theta) ** 2))
        N = Point(float(2 * a * np.tan(theta)), -2 * a)
        P = Point(N.x, A.y)
        return A, N, P

    def _coordinates(self, theta):
        x = 2 * self.a * np.tan(theta)
        y = -2 * self.a * np.cos(theta) ** 2
        return x, y


def bernoulli_lemniscate(c):
    """Lemniscate of Bernoulli with foci at (-c, 0) and (c, 0)."""
    scale = c * np.sqrt(2)
    denominator = lambda t: 1 + np.sin(t) ** 2
    return ParametricCurve(
        lambda t: scale * np.cos(t) / denominator(t),
        lambda t: scale * np.cos(t) * np.sin(t) / denominator(t),
        denominator=denominator,
    )


def folium_of_descartes(a):
    """Folium of Descartes x^3 + y^3 = 3axy in polar form."""
    denominator = lambda theta: np.sin(theta) ** 3 + np.cos(theta) ** 3
    return PolarCurve(
        lambda theta: 3 * a * np.sin(theta) * np.cos(theta) / denominator(theta),
        denominator=denominator,
    )


def butterfly(scale):
    """Temple H. Fay's butterfly curve, radius multiplied by `scale`."""
    return PolarCurve(
        lambda theta: scale * (np.exp(np.sin(theta))
                               - 2 * np.cos(4 * theta)
                               - np.sin((2 * theta - np.pi) / 24) ** 5)
    )
