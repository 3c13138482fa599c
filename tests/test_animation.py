import matplotlib.pyplot as plt
import numpy as np
import pytest
from PIL import Image

from special_curves import CURVES, export
from special_curves.__main__ import main
from special_curves.animation import GRAY10, AnimationSpec, Style
from special_curves.export import frame_filename
from special_curves.polar_curves import Lemniscate
from special_curves.roulettes import Epicycloid, Hypocycloid, RouletteAnimation, closing_revolutions


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


def test_total_frames():
    assert AnimationSpec("astroid", duration=15, frame_rate=25).total_frames == 375
    assert AnimationSpec("butterfly_curve", duration=15, frame_rate=60).total_frames == 900
    assert AnimationSpec("bernoulli_lemniscate", duration=5, frame_rate=25).total_frames == 125


@pytest.mark.parametrize("changes", [
    dict(name=""),
    dict(duration=0),
    dict(frame_rate=-1),
    dict(width=0),
    dict(dpi=0),
])
def test_spec_validation(changes):
    values = dict(name="curve", duration=1, frame_rate=6)
    values.update(changes)
    with pytest.raises(ValueError):
        AnimationSpec(**values)


def test_outputs_dir(tmp_path):
    spec = AnimationSpec("deltoid")
    assert spec.outputs_dir(tmp_path) == tmp_path / "deltoid" / "outputs"
    assert spec.replace(frame_rate=60).outputs_dir(tmp_path) == tmp_path / "deltoid" / "outputs"
    assert spec.replace(frame_rate=60).total_frames == 600


def test_style_converts_pixels_to_points():
    assert Style(dpi=100).points(50) == pytest.approx(36.0)
    assert Style(dpi=72).points(50) == pytest.approx(50.0)
    kwargs = Style(color='red', linewidth=10, dpi=100).line_kwargs()
    assert kwargs == dict(color='red', lw=pytest.approx(7.2))


def test_closing_revolutions():
    assert closing_revolutions(4) == 1
    assert closing_revolutions(3.0) == 1
    assert closing_revolutions(2.5) == 2
    assert closing_revolutions(np.pi) == 5
    assert closing_revolutions(np.sqrt(2), max_revolutions=7) == 7
    with pytest.raises(ValueError):
        closing_revolutions(0)


def test_roulette_construction_validation(tiny_spec):
    with pytest.raises(ValueError):
        Hypocycloid(tiny_spec(), cusps=1)
    with pytest.raises(ValueError):
        Epicycloid(tiny_spec(), cusps=0)
    with pytest.raises(ValueError):
        Hypocycloid(tiny_spec(), cusps=4, links=('OX',))


def test_roulette_domain_spans_closing_turns(tiny_spec):
    astroid = Hypocycloid.astroid(tiny_spec("astroid"))
    assert isinstance(astroid, RouletteAnimation)
    assert astroid.samples.samples == astroid.total_frames == 6
    assert astroid.parameter_at(6) == pytest.approx(2 * np.pi)

    five_halves = Hypocycloid(tiny_spec(), cusps=2.5)
    assert five_halves.revolutions == 2
    assert five_halves.parameter_at(6) == pytest.approx(4 * np.pi)


def test_render_frame_matches_canvas():
    spec = AnimationSpec("astroid", duration=1, frame_rate=6, width=100, height=400, dpi=50)
    astroid = Hypocycloid.astroid(spec)
    frame = astroid.render_frame(1)
    assert frame.shape == (400, 100, 4)
    assert frame.dtype == np.uint8
    # Bottom-left corner is left to the background
    assert tuple(frame[-1, 0]) == (0x1a, 0x1a, 0x1a, 255)
    assert astroid.background == GRAY10
    astroid.close()


def test_trace_grows_with_frames(tiny_spec):
    astroid = Hypocycloid.astroid(tiny_spec("astroid"))
    astroid.render_frame(1)
    assert len(astroid.trace.get_segments()) == 1
    astroid.render_frame(4)
    assert len(astroid.trace.get_segments()) == 4
    astroid.render_frame(6)
    assert len(astroid.trace.get_segments()) == 6
    # Frames are independent of the order they are drawn in
    astroid.render_frame(2)
    assert len(astroid.trace.get_segments()) == 2
    astroid.close()


def test_rendering_is_reproducible(tiny_spec):
    first = Hypocycloid.deltoid(tiny_spec("deltoid"))
    second = Hypocycloid.deltoid(tiny_spec("deltoid"))
    assert np.array_equal(first.render_frame(3), second.render_frame(3))
    first.close()
    second.close()


def test_deltoid_captions_switch_at_half(tiny_spec):
    deltoid = Hypocycloid.deltoid(tiny_spec("deltoid"))
    deltoid.render_frame(2)
    caption = deltoid.text_artists[1][0]
    assert caption.get_text().startswith("The Deltoid")
    deltoid.render_frame(3)
    assert caption.get_text().startswith("It is generated")
    assert deltoid.text_artists[0][0].get_text() == "Deltoid"
    deltoid.close()


def test_lemniscate_tip_hidden_until_trace_starts(tiny_spec):
    lemniscate = Lemniscate(tiny_spec("bernoulli_lemniscate"))
    assert lemniscate.samples.samples == 500
    lemniscate.render_frame(0)
    assert not lemniscate.tip.get_visible()
    lemniscate.render_frame(1)
    assert lemniscate.tip.get_visible()
    assert lemniscate.segments_at(1) == 83
    assert np.allclose(lemniscate.tip.center, lemniscate.samples[83])
    lemniscate.close()


def test_render_frames_yields_every_frame(tiny_spec):
    deltoid = Hypocycloid.deltoid(tiny_spec("deltoid", duration=0.5))
    frames = list(deltoid.render_frames())
    assert len(frames) == 3
    deltoid.close()


@pytest.mark.parametrize("name", sorted(CURVES))
def test_every_curve_renders(name, tiny_spec):
    animation = CURVES[name](tiny_spec(name))
    assert np.isfinite(animation.samples.points).all()
    for frame in (1, 3, animation.total_frames):
        raster = animation.render_frame(frame)
        assert raster.shape == (200, 100, 4)
    animation.close()


def test_generate_animation_writes_frames_and_gif(tiny_spec, tmp_path):
    spec = tiny_spec("cardioid")
    frames_dir = spec.outputs_dir(tmp_path) / "frames"
    frames_dir.mkdir(parents=True)
    (frames_dir / frame_filename(99)).write_bytes(b"stale")

    written = Epicycloid.cardioid(spec).generate_animation(save_video=False, output_root=tmp_path)

    assert set(written) == {'frames', 'gif'}
    names = sorted(path.name for path in frames_dir.iterdir())
    assert names == [frame_filename(i) for i in range(1, 7)]
    with Image.open(written['gif']) as gif:
        assert gif.size == (100, 200)
        assert gif.n_frames == 6
    assert written['gif'] == spec.outputs_dir(tmp_path) / "cardioid.gif"


def test_generate_animation_encodes_video(tiny_spec, tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(export.shutil, "which", lambda name: "ffmpeg")
    monkeypatch.setattr(export.subprocess, "run", lambda cmd, check: calls.append(cmd))

    spec = tiny_spec("astroid", duration=0.5)
    written = Hypocycloid.astroid(spec).generate_animation(output_root=tmp_path)

    assert written['mp4'] == spec.outputs_dir(tmp_path) / "astroid.mp4"
    cmd, = calls
    assert cmd[cmd.index("-i") + 1] == str(spec.outputs_dir(tmp_path) / "frames" / "%010d.png")
    assert cmd[-1] == str(written['mp4'])


def test_generate_animation_fails_without_ffmpeg(tiny_spec, tmp_path, monkeypatch):
    monkeypatch.setattr(export.shutil, "which", lambda name: None)
    spec = tiny_spec("astroid", duration=0.5)
    with pytest.raises(RuntimeError):
        Hypocycloid.astroid(spec).generate_animation(output_root=tmp_path)
    # The GIF is exported before the video step
    assert (spec.outputs_dir(tmp_path) / "astroid.gif").exists()


def test_main_rejects_unknown_curves():
    with pytest.raises(SystemExit):
        main(["astroid", "spirograph"])


def test_main_runs_requested_curves(monkeypatch):
    generated = []

    class Recorder:
        def __init__(self, name):
            self.name = name

        def generate_animation(self):
            generated.append(self.name)

    for name in CURVES:
        monkeypatch.setitem(CURVES, name, lambda name=name: Recorder(name))

    main(["deltoid", "cardioid"])
    assert generated == ["deltoid", "cardioid"]
    generated.clear()
    main()
    assert generated == list(CURVES)
