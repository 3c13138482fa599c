import math
import numpy as np
from fractions import Fraction

from .animation import AnimationSpec, CurveAnimation
from .captions import TextBlock, TimedText
from .curves import Roulette
from .sampling import ParameterDomain


class RouletteAnimation(CurveAnimation):
    """
    Geometric construction of a roulette traced by a rolling circle.

    Draws the fixed circle, the rolling circle with its center C, the contact
    point T of both circles and the generating point P, linked by the
    segments listed in `links`. The animation covers as many turns of the
    center as the curve needs to close.

    Parameters:
    -----------
    spec : AnimationSpec
        Canvas and timing.
    curve : Roulette
        The rolling construction.
    texts : list[TextBlock], optional
        Title, captions and equations.
    links : sequence of str, optional
        Segments to draw, as pairs of point names among 'O', 'C', 'T', 'P'
        (default: ('OT', 'TP')).
    point_colors : dict, optional
        Color of the T and P markers (default: white).
    fixed_label : tuple, optional
        (text, (x, y)) label of the fixed radius, drawn once.
    max_revolutions : int, optional
        Turns shown when R/r is irrational (default: 5).
    """

    def __init__(self, spec, curve, texts=(), links=('OT', 'TP'), point_colors=None,
                 fixed_label=None, max_revolutions=5, **kwargs):
        self.links = [tuple(link) for link in links]
        for link in self.links:
            if len(link) != 2 or not set(link) <= set('OCTP'):
                raise ValueError(f"Invalid link {''.join(link)!r}; use pairs of 'O', 'C', 'T', 'P'.")
        self.point_colors = dict(point_colors or {})
        self.fixed_label = fixed_label
        self.revolutions = closing_revolutions(curve.R / curve.r, max_revolutions)

        domain = ParameterDomain(0, 2 * np.pi * self.revolutions, spec.total_frames)
        super().__init__(curve, domain, spec, texts=texts, **kwargs)

    def _setup_geometry(self):
        curve = self.curve
        self.fixed_circle = self._add_circle((0, 0), curve.R)
        self.rolling_circle = self._add_circle((curve.center_distance, 0), curve.r)
        self.center_dot = self._add_dot()

        self.link_lines = [self._add_segment() for _ in self.links]

        self.dots = {}
        self.labels = {}
        for name in 'TP':
            style = self.style.replace(color=self.point_colors.get(name, self.style.color), fontsize=50)
            self.dots[name] = self._add_dot(style=style)
            self.labels[name] = self._add_label(f"$\\mathrm{{{name}}}$", (0, 0), style)

        if self.fixed_label is not None:
            text, position = self.fixed_label
            self._add_label(f"$\\mathrm{{{text}}}$", position, self.style.replace(fontsize=50))

    def _construction_points(self, t):
        return {
            'O': (0.0, 0.0),
            'C': self.curve.center_at(t),
            'T': self.curve.contact_at(t),
            'P': self.curve.point_at(t),
        }

    def _draw_geometry(self, frame, t):
        points = self._construction_points(t)
        C, T, P = points['C'], points['T'], points['P']

        self.rolling_circle.center = C
        self.center_dot.center = C
        self.dots['T'].center = T
        self.dots['P'].center = P

        for line, (a, b) in zip(self.link_lines, self.links):
            self._move_segment(line, points[a], points[b])

        # Labels sit just outside the fixed circle and past the rim of the rolling one
        self.labels['T'].set_position((1.1 * T[0], 1.1 * T[1]))
        self.labels['P'].set_position((C[0] + 1.3 * (P[0] - C[0]), C[1] + 1.3 * (P[1] - C[1])))

        return ([self.rolling_circle, self.center_dot] + self.link_lines
                + list(self.dots.values()) + list(self.labels.values()))


class Hypocycloid(RouletteAnimation):
    """
    Hypocycloid with `cusps` cusps: a circle of radius r = R / cusps rolling
    inside the fixed circle of radius R.

    `rolling_label`, if given, labels the rolling radius next to the
    contact point as the construction turns.
    """

    def __init__(self, spec, cusps, R=None, rolling_label=None, **kwargs):
        R = 0.35 * spec.width if R is None else R
        if cusps <= 1:
            raise ValueError(f"A hypocycloid needs R/r > 1, got cusps={cusps}.")
        self.rolling_label = rolling_label
        super().__init__(spec, Roulette(R, R / float(cusps), internal=True), **kwargs)

    def _setup_geometry(self):
        super()._setup_geometry()
        self.rolling_text = None
        if self.rolling_label is not None:
            self.rolling_text = self._add_label(f"$\\mathrm{{{self.rolling_label}}}$", (0, 0),
                                                self.style.replace(fontsize=44))

    def _draw_geometry(self, frame, t):
        artists = super()._draw_geometry(frame, t)
        if self.rolling_text is not None:
            # Slightly behind the contact point, halfway along the rolling diameter
            reach = self.curve.R - self.curve.r / 2
            angle = t - np.pi / 36
            self.rolling_text.set_position((reach * np.cos(angle), -reach * np.sin(angle)))
            artists.append(self.rolling_text)
        return artists

    @classmethod
    def astroid(cls, spec=None):
        """Four-cusped hypocycloid, R = 4r."""
        spec = spec or AnimationSpec("astroid", duration=15, frame_rate=25)
        R = 0.35 * spec.width
        H = spec.height
        texts = [
            TextBlock([-0.4 * H], "Astroid", fontsize=81, weight='heavy'),
            TextBlock([-0.35 * H, -0.31 * H, -0.27 * H], TimedText.constant(
                "The Astroid is a four-cusped hypocycloid:",
                "The locus of a point (P) on a circle rolling",
                "inside another with four times its radius.",
            ), fontsize=48),
            TextBlock([0.25 * H, 0.30 * H], TimedText.constant(
                r"$x(t) = a\ \cos^3 t$",
                r"$y(t) = a\ \sin^3 t$",
            ), fontsize=48),
        ]
        return cls(spec, cusps=4, R=R, texts=texts, fixed_label=('a', (-R / 2, -25)),
                   hue_by='index', saturation=1.0)

    @classmethod
    def deltoid(cls, spec=None):
        """Three-cusped hypocycloid, R = 3r."""
        spec = spec or AnimationSpec("deltoid", duration=10, frame_rate=30)
        R = 0.35 * spec.width
        H = spec.height
        half = Fraction(1, 2)
        texts = [
            TextBlock([-0.42 * H], "Deltoid", fontsize=80, weight='heavy'),
            TextBlock([-0.34 * H, -0.30 * H, -0.26 * H], TimedText([
                (half, ("The Deltoid is a three-cusped hypocycloid:",
                        "The locus of a point on a circle rolling",
                        "inside another with three times its radius.")),
                (None, ("It is generated by tracking a fixed point",
                        "as the smaller circle rolls",
                        "inside the larger one.")),
            ])),
            TextBlock([0.27 * H, 0.32 * H, 0.35 * H], TimedText.constant(
                "Parametric Equations",
                r"$x(t) = a\,(2\cos t + \cos 2t)$",
                r"$y(t) = a\,(2\sin t - \sin 2t)$",
            ), fontsize=40, weight='heavy'),
        ]
        return cls(spec, cusps=3, R=R, texts=texts, fixed_label=('3a', (-R / 2, -30)),
                   rolling_label='a', hue_by='index', saturation=0.85)


class Epicycloid(RouletteAnimation):
    """
    Epicycloid with `cusps` cusps: a circle of radius r = R / cusps rolling
    outside the fixed circle of radius R.
    """

    def __init__(self, spec, cusps, R=None, **kwargs):
        R = 0.125 * spec.width if R is None else R
        if cusps <= 0:
            raise ValueError(f"An epicycloid needs R/r > 0, got cusps={cusps}.")
        kwargs.setdefault('links', ('OC', 'CP'))
        super().__init__(spec, Roulette(R, R / float(cusps), internal=False), **kwargs)

    @classmethod
    def cardioid(cls, spec=None):
        """One-cusped epicycloid, both circles of radius a."""
        spec = spec or AnimationSpec("cardioid", duration=15, frame_rate=25)
        R = 0.125 * spec.width
        H = spec.height
        texts = [
            TextBlock([-0.4 * H], "Cardioid", fontsize=81, weight='heavy'),
            TextBlock([-0.35 * H, -0.31 * H, -0.27 * H], TimedText.constant(
                "The Cardioid is a one-cusped epicycloid:",
                "The locus of a point (P) on a circle rolling",
                "outside another with equal radius size.",
            ), fontsize=48),
            TextBlock([0.25 * H, 0.30 * H, 0.33 * H], TimedText.constant(
                "Parametric Equations",
                r"$x(t) = a\ (2 \cos t - \cos 2t)$",
                r"$y(t) = a\ (2 \sin t - \sin 2t)$",
            ), fontsize=50, weight='heavy'),
        ]
        return cls(spec, cusps=1, R=R, texts=texts, background='black',
                   point_colors={'T': 'red', 'P': 'blue'}, fixed_label=('a', (-R / 2, -15)),
                   hue_by='index', saturation=1.0)


def closing_revolutions(ratio, max_revolutions=5, denom_threshold=100):
    """
    Turns of the rolling circle's center needed for the curve to close.

    Integer ratios R/r close after one turn and rational ones p/q after q
    turns. Ratios that only approximate a fraction with a large denominator
    are treated as irrational and shown for `max_revolutions` turns.
    """
    if not math.isfinite(ratio) or ratio <= 0:
        raise ValueError(f"Radius ratio must be a positive finite number, got {ratio}.")
    fraction = Fraction(ratio).limit_denominator(1000)
    if fraction.denominator > denom_threshold or not math.isclose(float(fraction), ratio, rel_tol=1e-9):
        print(f"n={ratio:.4f} interpreted as irrational, setting revolutions to {max_revolutions}.")
        return max_revolutions
    return fraction.denominator


if __name__ == "__main__":
    Hypocycloid.astroid().generate_animation()
    Hypocycloid.deltoid().generate_animation()
    Epicycloid.cardioid().generate_animation()
