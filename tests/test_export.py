import subprocess

import numpy as np
import pytest
from PIL import Image

from special_curves import export
from special_curves.export import (encode_video, export_gif, frame_filename, prepare_frames_dir,
                                   save_frames, video_command)


def solid_frames(count, size=(8, 6)):
    colors = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0)]
    return [np.full(size + (4,), colors[i % len(colors)] + (255,), dtype=np.uint8) for i in range(count)]


def test_frame_names_are_zero_padded():
    assert frame_filename(1) == "0000000001.png"
    assert frame_filename(375) == "0000000375.png"


def test_prepare_frames_dir_removes_stale_frames(tmp_path):
    frames_dir = tmp_path / "astroid" / "outputs" / "frames"
    frames_dir.mkdir(parents=True)
    (frames_dir / frame_filename(999)).write_bytes(b"old")

    assert prepare_frames_dir(frames_dir) == frames_dir
    assert frames_dir.is_dir()
    assert list(frames_dir.iterdir()) == []


def test_save_frames_writes_sequential_pngs(tmp_path):
    paths = save_frames(solid_frames(3), tmp_path, total=3)
    assert [path.name for path in paths] == [frame_filename(i) for i in (1, 2, 3)]
    with Image.open(paths[1]) as image:
        assert image.size == (6, 8)
        assert image.convert('RGB').getpixel((0, 0)) == (0, 255, 0)


def test_export_gif_from_arrays(tmp_path):
    gif_path = export_gif(solid_frames(4), tmp_path / "nested" / "curve.gif", frame_rate=25)
    with Image.open(gif_path) as gif:
        assert gif.n_frames == 4
        assert gif.info['duration'] == 40
        assert gif.info['loop'] == 0


def test_export_gif_from_frame_files(tmp_path):
    paths = save_frames(solid_frames(3), tmp_path)
    gif_path = export_gif(paths, tmp_path / "curve.gif", frame_rate=30)
    with Image.open(gif_path) as gif:
        assert gif.n_frames == 3


def test_export_gif_needs_frames(tmp_path):
    with pytest.raises(ValueError):
        export_gif([], tmp_path / "empty.gif", frame_rate=30)
    assert not (tmp_path / "empty.gif").exists()


def test_video_command(tmp_path):
    cmd = video_command("ffmpeg", tmp_path, tmp_path / "deltoid.mp4", 30)
    assert cmd[0] == "ffmpeg"
    assert cmd[cmd.index("-r") + 1] == "30"
    assert cmd[cmd.index("-i") + 1] == str(tmp_path / "%010d.png")
    assert cmd[cmd.index("-c:v") + 1] == "h264"
    assert cmd[cmd.index("-crf") + 1] == "0"
    assert cmd[-1] == str(tmp_path / "deltoid.mp4")


def test_encode_video_without_ffmpeg(monkeypatch, tmp_path):
    monkeypatch.setattr(export.shutil, "which", lambda name: None)
    with pytest.raises(RuntimeError, match="ffmpeg"):
        encode_video(tmp_path, tmp_path / "curve.mp4", 30)


def test_encode_video_runs_ffmpeg(monkeypatch, tmp_path):
    calls = []
    monkeypatch.setattr(export.shutil, "which", lambda name: "/usr/bin/ffmpeg")
    monkeypatch.setattr(export.subprocess, "run", lambda cmd, check: calls.append((cmd, check)))

    mp4_path = encode_video(tmp_path / "frames", tmp_path / "out" / "curve.mp4", 25)
    assert mp4_path == tmp_path / "out" / "curve.mp4"
    assert (tmp_path / "out").is_dir()
    (cmd, check), = calls
    assert check is True
    assert cmd[0] == "/usr/bin/ffmpeg"
    assert cmd[cmd.index("-r") + 1] == "25"


def test_encode_video_failure_propagates(monkeypatch, tmp_path):
    def fail(cmd, check):
        raise subprocess.CalledProcessError(1, cmd)

    monkeypatch.setattr(export.shutil, "which", lambda name: "/usr/bin/ffmpeg")
    monkeypatch.setattr(export.subprocess, "run", fail)
    with pytest.raises(subprocess.CalledProcessError):
        encode_video(tmp_path, tmp_path / "curve.mp4", 30)
