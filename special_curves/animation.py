import warnings
from pathlib import Path
from typing import NamedTuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib import patches
from matplotlib.animation import FuncAnimation
from matplotlib.collections import LineCollection

from .export import encode_video, export_gif, prepare_frames_dir, save_frames
from .sampling import build_samples, segment_colors, trace_length


# Vertical video canvas, in pixels
WIDTH = 1080
HEIGHT = 1920
DPI = 100

GRAY10 = '#1a1a1a'
GRAY13 = '#212121'


class AnimationSpec:
    """
    Canvas, timing and naming of one animation.

    Attributes:
    -----------
    name : str
        Curve name, used for the output directory and file names.
    duration : float
        Length of the animation in seconds.
    frame_rate : int
        Frames per second.
    width, height : int
        Canvas size in pixels (default: 1080x1920).
    dpi : int
        Resolution used to convert pixel sizes into matplotlib points.
    """

    def __init__(self, name, duration=10, frame_rate=30, width=WIDTH, height=HEIGHT, dpi=DPI):
        if not name:
            raise ValueError("Animation 'name' must be a non-empty string.")
        for label, value in (('duration', duration), ('frame_rate', frame_rate),
                             ('width', width), ('height', height), ('dpi', dpi)):
            if value <= 0:
                raise ValueError(f"'{label}' must be positive, got {value}.")
        self.name = name
        self.duration = duration
        self.frame_rate = frame_rate
        self.width = int(width)
        self.height = int(height)
        self.dpi = dpi

    @property
    def total_frames(self):
        return int(round(self.duration * self.frame_rate))

    def outputs_dir(self, root='.'):
        return Path(root) / self.name / 'outputs'

    def replace(self, **changes):
        """Copy of this spec with some attributes changed."""
        values = dict(name=self.name, duration=self.duration, frame_rate=self.frame_rate,
                      width=self.width, height=self.height, dpi=self.dpi)
        values.update(changes)
        return AnimationSpec(**values)

    def __repr__(self):
        return (f"AnimationSpec(name={self.name!r}, duration={self.duration}, "
                f"frame_rate={self.frame_rate}, width={self.width}, height={self.height})")


class Style:
    """
    Drawing attributes handed explicitly to every artist.

    Sizes are given in canvas pixels and converted to matplotlib points
    with the animation dpi, so the layout does not depend on it.
    """

    def __init__(self, color='white', linewidth=5, fontsize=46, weight='normal', dpi=DPI):
        self.color = color
        self.linewidth = linewidth
        self.fontsize = fontsize
        self.weight = weight
        self.dpi = dpi

    def replace(self, **changes):
        values = dict(color=self.color, linewidth=self.linewidth, fontsize=self.fontsize,
                      weight=self.weight, dpi=self.dpi)
        values.update(changes)
        return Style(**values)

    def points(self, pixels):
        return pixels * 72.0 / self.dpi

    def line_kwargs(self):
        return dict(color=self.color, lw=self.points(self.linewidth))

    def text_kwargs(self):
        return dict(color=self.color, fontsize=self.points(self.fontsize),
                    fontweight=self.weight, ha='center', va='center')


class AxisArrow(NamedTuple):
    start: tuple
    end: tuple
    label: str
    label_at: tuple


def default_axes(spec, extent=0.4):
    """Cartesian axis arrows spanning `extent` of the canvas width each way."""
    reach = extent * spec.width
    return [
        AxisArrow((-reach, 0), (reach, 0), 'x', (reach, 50)),
        AxisArrow((0, reach), (0, -reach), 'y', (-50, -reach)),
    ]


class CurveAnimation:
    """
    Progressive trace of a curve on a vertical canvas.

    Every frame is composed of three passes drawn in a fixed order:
      1) backdrop: background, axis arrows, title, captions and equations,
      2) geometry: construction circles, points and labels of the current
         parameter (subclasses override `_setup_geometry`/`_draw_geometry`),
      3) trace: the colored segments of the sample table revealed so far.

    A frame only depends on its index, never on the previous frame.

    Parameters:
    -----------
    curve : CurveModel
        Curve being traced.
    domain : ParameterDomain
        Parameter interval and number of sample steps N.
    spec : AnimationSpec
        Canvas and timing.
    texts : list[TextBlock], optional
        Title, captions and equation panels.
    axes : list[AxisArrow], optional
        Axis arrows; defaults to `default_axes(spec)`.
    background : str, optional
        Canvas color (default: gray10).
    hue_by, saturation, value : optional
        Trace coloring, see `segment_colors`.
    trace_width : float, optional
        Width of the traced curve in pixels (default: 5).
    """

    ARROW_HEAD = 25  # pixels

    def __init__(self, curve, domain, spec, texts=(), axes=None, background=GRAY10,
                 hue_by='index', saturation=1.0, value=1.0, trace_width=5):
        self.curve = curve
        self.domain = domain
        self.spec = spec
        self.texts = list(texts)
        self.axes = list(axes) if axes is not None else default_axes(spec)
        self.background = background
        self.style = Style(dpi=spec.dpi)
        self.trace_width = trace_width

        self.samples = build_samples(domain, curve)
        self.trace_colors = segment_colors(self.samples, hue_by, saturation, value)
        self._check_canvas_bounds()

        # Plotting attributes initialized in _setup_plot()
        self.fig = None
        self.ax = None
        self.trace = None
        self.text_artists = []
        self.anim = None

    def _check_canvas_bounds(self):
        points = self.samples.points
        finite = np.isfinite(points).all(axis=1)
        if not finite.all():
            warnings.warn(f"Curve '{self.spec.name}' has {np.count_nonzero(~finite)} non-finite samples; "
                          "those segments will not be drawn.")
        half_w, half_h = self.spec.width / 2, self.spec.height / 2
        inside = (np.abs(points[finite, 0]) <= half_w) & (np.abs(points[finite, 1]) <= half_h)
        if not inside.all():
            warnings.warn(f"Curve '{self.spec.name}' leaves the {self.spec.width}x{self.spec.height} canvas; "
                          "the trace will be clipped.")

    @property
    def total_frames(self):
        return self.spec.total_frames

    def parameter_at(self, frame):
        """Curve parameter shown by the construction at `frame`."""
        return self.domain.parameter_at(frame, self.total_frames)

    def segments_at(self, frame):
        """Number of trace segments visible at `frame`."""
        return trace_length(frame, self.total_frames, self.samples.samples)

    # --- Figure setup ---

    def _setup_plot(self):
        """Creates the figure, the static backdrop and the animated artists."""
        spec = self.spec
        with plt.style.context('dark_background'):
            self.fig = plt.figure(figsize=(spec.width / spec.dpi, spec.height / spec.dpi), dpi=spec.dpi)
            self.ax = self.fig.add_axes([0, 0, 1, 1])

        self.fig.patch.set_facecolor(self.background)
        self.ax.set_facecolor(self.background)
        # Origin at the center, y pointing down like screen coordinates
        self.ax.set_xlim(-spec.width / 2, spec.width / 2)
        self.ax.set_ylim(spec.height / 2, -spec.height / 2)
        self.ax.set_aspect('equal', adjustable='box')
        self.ax.set_axis_off()

        self._setup_backdrop()
        self._setup_geometry()

        self.trace = LineCollection([], linewidths=self.style.points(self.trace_width),
                                    capstyle='round', zorder=4)
        self.ax.add_collection(self.trace)

    def _setup_backdrop(self):
        for arrow in self.axes:
            self._add_arrow(arrow.start, arrow.end)
            self._add_label(f"${arrow.label}$", arrow.label_at, self.style.replace(fontsize=42), zorder=1)

        self.text_artists = []
        for block in self.texts:
            style = self.style.replace(fontsize=block.fontsize, weight=block.weight)
            self.text_artists.append([self._add_label('', (0, y), style, zorder=1) for y in block.rows])

    def _setup_geometry(self):
        """Creates the construction artists. No construction by default."""

    # --- Artist helpers, each takes its style explicitly ---

    def _add_arrow(self, start, end, style=None):
        style = style or self.style
        return self.ax.annotate(
            '', xy=end, xytext=start, zorder=1,
            arrowprops=dict(arrowstyle='-|>', color=style.color, lw=style.points(style.linewidth),
                            mutation_scale=style.points(self.ARROW_HEAD) / 0.4,
                            shrinkA=0, shrinkB=0))

    def _add_label(self, text, position, style=None, zorder=3):
        style = style or self.style
        return self.ax.text(position[0], position[1], text, zorder=zorder, **style.text_kwargs())

    def _add_circle(self, center, radius, style=None, zorder=2):
        style = style or self.style
        circle = patches.Circle(center, radius, fill=False, zorder=zorder, **style.line_kwargs())
        self.ax.add_patch(circle)
        return circle

    def _add_dot(self, center=(0, 0), style=None, radius=8):
        style = style or self.style
        dot = patches.Circle(center, radius, color=style.color, zorder=3)
        self.ax.add_patch(dot)
        return dot

    def _add_segment(self, start=(0, 0), end=(0, 0), style=None):
        style = style or self.style
        line, = self.ax.plot([start[0], end[0]], [start[1], end[1]], '-', zorder=2, **style.line_kwargs())
        return line

    @staticmethod
    def _move_segment(line, start, end):
        line.set_data([start[0], end[0]], [start[1], end[1]])

    # --- Frame passes ---

    def _draw_backdrop(self, frame):
        artists = []
        for block, rows in zip(self.texts, self.text_artists):
            for artist, line in zip(rows, block.lines_at(frame, self.total_frames)):
                artist.set_text(line)
            artists.extend(rows)
        return artists

    def _draw_geometry(self, frame, t):
        """Moves the construction artists to parameter t; returns them."""
        return []

    def _draw_trace(self, frame):
        count = self.segments_at(frame)
        self.trace.set_segments(self.samples.segments(count))
        self.trace.set_color(self.trace_colors[:count])
        return [self.trace]

    def _animate_frame(self, frame):
        """Updates every artist for `frame` (backdrop, then geometry, then trace)."""
        t = self.parameter_at(frame)
        artists = self._draw_backdrop(frame)
        artists.extend(self._draw_geometry(frame, t))
        artists.extend(self._draw_trace(frame))
        return artists

    # --- Animation driver ---

    def render_frame(self, frame):
        """Renders `frame` and returns it as an RGBA array of shape (height, width, 4)."""
        if self.fig is None:
            self._setup_plot()
        self._animate_frame(frame)
        self.fig.canvas.draw()
        return np.array(self.fig.canvas.buffer_rgba())

    def render_frames(self):
        """Yields the rasters of frames 1..total_frames, in order."""
        for frame in range(1, self.total_frames + 1):
            yield self.render_frame(frame)

    def close(self):
        if self.fig is not None:
            plt.close(self.fig)
        self.fig = None
        self.ax = None

    def preview(self):
        """Shows the animation in a matplotlib window."""
        self._setup_plot()
        self.anim = FuncAnimation(self.fig, self._animate_frame, frames=range(1, self.total_frames + 1),
                                  interval=1000 / self.spec.frame_rate, blit=False, repeat=False)
        plt.show()
        return self.anim

    def generate_animation(self, save_anim=True, save_video=True, output_root='.'):
        """
        Renders the animation and exports it, or shows it.

        Frames are written to <output_root>/<name>/outputs/frames, encoded
        into <name>.gif next to them and, when `save_video` is set, into
        <name>.mp4 with ffmpeg.

        Parameters:
        -----------
        save_anim : bool, optional
            Export files (default: True). When False the animation is shown
            in a window instead.
        save_video : bool, optional
            Also encode the MP4 (default: True). Requires ffmpeg on the PATH.
        output_root : str or Path, optional
            Directory holding the per-curve output folders (default: '.').

        Returns:
        --------
        dict or matplotlib.animation.FuncAnimation
            Paths of the written 'frames' directory, 'gif' and 'mp4' files,
            or the animation object when previewing.
        """
        if not save_anim:
            return self.preview()

        outputs = self.spec.outputs_dir(output_root)
        frames_dir = outputs / 'frames'
        gif_path = outputs / f"{self.spec.name}.gif"

        print(f"Generating animation with {self.total_frames} frames...")
        prepare_frames_dir(frames_dir)
        self._setup_plot()
        try:
            frame_files = save_frames(self.render_frames(), frames_dir, total=self.total_frames)
        finally:
            self.close()

        print(f"Saving animation to {gif_path.resolve()}...")
        export_gif(frame_files, gif_path, self.spec.frame_rate)
        print("Animation saved successfully!")
        written = {'frames': frames_dir, 'gif': gif_path}

        if save_video:
            written['mp4'] = encode_video(frames_dir, outputs / f"{self.spec.name}.mp4", self.spec.frame_rate)
        return written
