import numpy as np
from fractions import Fraction

from .animation import AnimationSpec, AxisArrow, CurveAnimation
from .captions import TextBlock, TimedText
from .curves import bernoulli_lemniscate, butterfly, folium_of_descartes
from .sampling import ParameterDomain


class Lemniscate(CurveAnimation):
    """
    Lemniscate of Bernoulli with its two foci.

    The trace uses a fixed number of samples, independent of the frame
    count, and a marker P follows its tip, joined to both foci.
    """

    NUM_POINTS = 500

    def __init__(self, spec=None, c=None, samples=NUM_POINTS):
        spec = spec or AnimationSpec("bernoulli_lemniscate", duration=5, frame_rate=25)
        W, H = spec.width, spec.height
        self.c = 0.23 * W if c is None else float(c)

        texts = [
            TextBlock([-0.3 * H], "Bernoulli's Lemniscate", fontsize=60, weight='heavy'),
            TextBlock([-0.25 * H, -0.22 * H], TimedText.constant(
                "Points P whose distances to the foci F1 and F2",
                "multiply to the square of half their separation.",
            ), fontsize=38),
            TextBlock([0.15 * H, 0.20 * H], TimedText.constant(
                "Cartesian Equation",
                r"$(x^2 + y^2)^2 = 2c^2\,(x^2 - y^2)$",
            ), fontsize=40, weight='heavy'),
        ]
        x_reach, y_reach = 0.37 * W, 0.185 * W
        axes = [
            AxisArrow((-x_reach, 0), (x_reach, 0), 'x', (x_reach + 20, 20)),
            AxisArrow((0, y_reach), (0, -y_reach), 'y', (-20, -y_reach - 20)),
        ]
        super().__init__(bernoulli_lemniscate(self.c), ParameterDomain(0, 2 * np.pi, samples), spec,
                         texts=texts, axes=axes, background='black',
                         hue_by='sweep', saturation=0.5)

    @property
    def foci(self):
        return (-self.c, 0.0), (self.c, 0.0)

    def _setup_geometry(self):
        style = self.style.replace(fontsize=60)
        for name, focus in zip(('F_1', 'F_2'), self.foci):
            self._add_dot(focus, radius=6)
            self._add_label(f"${name}$", (focus[0], 50), style)

        self.focal_lines = [self._add_segment(style=self.style.replace(linewidth=4)) for _ in self.foci]
        self.tip = self._add_dot(radius=6)
        self.tip_label = self._add_label("$P$", (0, 0), style)

    def _draw_geometry(self, frame, t):
        count = self.segments_at(frame)
        visible = count > 0
        tip = self.samples[count]

        for line, focus in zip(self.focal_lines, self.foci):
            self._move_segment(line, focus, tip)
        self.tip.center = tip
        self.tip_label.set_position((tip.x, tip.y - 50))

        artists = self.focal_lines + [self.tip, self.tip_label]
        for artist in artists:
            artist.set_visible(visible)
        return artists


class Folium(CurveAnimation):
    """Folium of Descartes, traced in polar form between its asymptote branches."""

    THETA_MIN = -0.2 * np.pi
    THETA_MAX = 0.7 * np.pi

    def __init__(self, spec=None, a=None):
        spec = spec or AnimationSpec("folium_of_descartes", duration=10, frame_rate=30)
        W, H = spec.width, spec.height
        self.a = W / 10 if a is None else float(a)

        texts = [
            TextBlock([-H / 3], "Folium of Descartes", fontsize=60, weight='heavy'),
            TextBlock([-H / 3 + 90, -H / 3 + 150], TimedText([
                (Fraction(1, 2), ("Cubic algebraic curve introduced by René Descartes (1638)",
                                  "defined by a symmetric relation between x and y")),
                (None, ("Exhibits a nodal singularity at the origin",
                        "and elegant rotational geometry")),
            ]), fontsize=38),
            TextBlock([H / 5, H / 5 + 100, H / 5 + 225], TimedText([
                (Fraction(1, 3), ("Cartesian Equation",
                                  r"$x^3 + y^3 = 3axy$")),
                (Fraction(2, 3), ("Parametric Equations",
                                  r"$x(t) = \frac{3at}{1 + t^3}$",
                                  r"$y(t) = \frac{3at^2}{1 + t^3}$")),
                (None, ("Polar Equation",
                        r"$r(\theta) = \frac{3a\,\sin\theta\,\cos\theta}{\sin^3\theta + \cos^3\theta}$")),
            ]), fontsize=44, weight='heavy'),
        ]
        axes = [
            AxisArrow((-0.35 * W, 0), (0.35 * W, 0), 'x', (0.35 * W, 40)),
            AxisArrow((0, 0.3 * W), (0, -0.35 * W), 'y', (-40, -0.36 * W + 40)),
        ]
        domain = ParameterDomain(self.THETA_MIN, self.THETA_MAX, spec.total_frames)
        super().__init__(folium_of_descartes(self.a), domain, spec, texts=texts, axes=axes,
                         hue_by='degrees', saturation=0.6)


class Butterfly(CurveAnimation):
    """Butterfly curve of Temple H. Fay, twelve half-turns of its polar angle."""

    def __init__(self, spec=None, scale=None):
        spec = spec or AnimationSpec("butterfly_curve", duration=15, frame_rate=60)
        W, H = spec.width, spec.height
        self.scale = W / 10 if scale is None else float(scale)

        texts = [
            TextBlock([-H / 3], "Butterfly Curve", fontsize=60, weight='heavy'),
            TextBlock([-H / 3 + 100, -H / 3 + 160], TimedText.constant(
                "The butterfly curve is a transcendental plane",
                "curve discovered by Temple H. Fay in 1989.",
            ), fontsize=45),
            TextBlock([H / 5, H / 5 + 100, H / 5 + 160], TimedText([
                (Fraction(1, 2), ("Parametric Equations",
                                  r"$x(t) = \sin t\,\left(e^{\cos t} - 2\cos 4t - \sin^5(t/12)\right)$",
                                  r"$y(t) = \cos t\,\left(e^{\cos t} - 2\cos 4t - \sin^5(t/12)\right)$")),
                (None, ("Polar Equation",
                        r"$r(\theta) = e^{\sin\theta} - 2\cos 4\theta - \sin^5\left(\frac{2\theta - \pi}{24}\right)$")),
            ]), fontsize=36, weight='heavy'),
        ]
        axes = [
            AxisArrow((-0.4 * W, 0), (0.4 * W, 0), 'x', (0.4 * W, 50)),
            AxisArrow((0, 0.3 * W), (0, -0.4 * W), 'y', (-50, -0.4 * W + 25)),
        ]
        domain = ParameterDomain(0, 12 * np.pi, spec.total_frames)
        super().__init__(butterfly(self.scale), domain, spec, texts=texts, axes=axes,
                         hue_by='degrees', saturation=0.5)


if __name__ == "__main__":
    Lemniscate().generate_animation()
    Folium().generate_animation()
    Butterfly().generate_animation()
