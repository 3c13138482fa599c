import numpy as np
from fractions import Fraction

from .animation import GRAY13, AnimationSpec, AxisArrow, CurveAnimation
from .captions import TextBlock, TimedText
from .curves import AgnesiConstruction
from .sampling import ParameterDomain


class WitchOfAgnesi(CurveAnimation):
    """
    Tangent construction and trace of the Witch of Agnesi.

    The construction line through the origin sweeps from theta = pi/3 down
    to -pi/3, so the curve is drawn from right to left.

    Construction points:
      O - origin, bottom of the auxiliary circle
      M - top of the auxiliary circle, on the line y = 2a
      A - second intersection of line ON with the auxiliary circle
      N - intersection of the construction line with y = 2a
      P - point of the curve, below N and level with A
    """

    THETA_START = np.pi / 3
    THETA_STOP = -np.pi / 3

    # Label offsets from their points, in pixels
    LABEL_OFFSETS = {
        'O': (-50, 50),
        'M': (-50, -10),
        'A': (-50, 0),
        'N': (-50, -10),
        'P': (20, -5),
    }

    def __init__(self, spec=None, a=None):
        spec = spec or AnimationSpec("witch_of_agnesi", duration=10, frame_rate=30)
        W, H = spec.width, spec.height
        self.scale_x = 0.45 * W
        self.scale_y = 0.30 * W
        a = 0.4 * self.scale_y if a is None else a

        half = Fraction(1, 2)
        texts = [
            TextBlock([-0.3 * H], "Witch of Agnesi", fontsize=60, weight='heavy'),
            TextBlock([-0.25 * H, -0.22 * H, -0.19 * H], TimedText([
                (half, ("Plane curve studied by Fermat, Grandi and Newton,",
                        "popularized by Maria Gaetana Agnesi (1748). It is a",
                        "rational algebraic curve with a horizontal asymptote.")),
                (None, ("Its name arose from a mistranslation of",
                        "the Italian word 'versoria' which",
                        "refers to a turning line used in navigation")),
            ]), fontsize=38),
            TextBlock([0.10 * H, 0.15 * H, 0.19 * H], TimedText([
                (half, ("Cartesian Equation",
                        r"$y = \frac{8a^3}{x^2 + 4a^2}$")),
                (None, ("Parametric Equations",
                        r"$x(\theta) = 2a\ \tan\theta$",
                        r"$y(\theta) = 2a\ \cos^2\theta$")),
            ]), fontsize=40, weight='heavy'),
        ]
        axes = [
            AxisArrow((-self.scale_x, 0), (self.scale_x, 0), 'x', (self.scale_x - 20, 40)),
            AxisArrow((0, 0.2 * self.scale_y), (0, -self.scale_y), 'y', (-40, -self.scale_y)),
        ]
        domain = ParameterDomain(self.THETA_START, self.THETA_STOP, spec.total_frames)
        super().__init__(AgnesiConstruction(a), domain, spec, texts=texts, axes=axes,
                         background=GRAY13, hue_by='index', saturation=0.65)

    @property
    def a(self):
        return self.curve.a

    def _setup_geometry(self):
        a = self.a
        guide = self.style.replace(color='gray')

        self._add_circle((0, -a), a, style=guide)
        self._add_segment((-self.scale_x, -2 * a), (self.scale_x, -2 * a), style=guide)
        self.ray = self._add_segment(style=guide)
        self.level = self._add_segment(style=guide)
        self.drop = self._add_segment(style=guide)

        label_style = self.style.replace(fontsize=40)
        self.dots = {}
        self.labels = {}
        for name in 'OMANP':
            self.dots[name] = self._add_dot()
            self.labels[name] = self._add_label(f"${name}$", (0, 0), label_style)

    def _draw_geometry(self, frame, t):
        A, N, P = self.curve.construction(t)
        points = {'O': (0.0, 0.0), 'M': (0.0, -2 * self.a), 'A': A, 'N': N, 'P': P}

        self._move_segment(self.ray, points['O'], N)
        self._move_segment(self.level, A, P)
        self._move_segment(self.drop, N, (N.x, 0.0))

        for name, (x, y) in points.items():
            dx, dy = self.LABEL_OFFSETS[name]
            self.dots[name].center = (x, y)
            self.labels[name].set_position((x + dx, y + dy))

        return ([self.ray, self.level, self.drop]
                + list(self.dots.values()) + list(self.labels.values()))


if __name__ == "__main__":
    WitchOfAgnesi().generate_animation()
