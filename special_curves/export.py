import shutil
import subprocess
from pathlib import Path

import numpy as np
from PIL import Image
from tqdm import tqdm


FRAME_PATTERN = "%010d.png"  # Zero-padded sequential frame names, starting at 1


def frame_filename(index):
    """File name of frame `index`, e.g. 0000000001.png."""
    return FRAME_PATTERN % index


def prepare_frames_dir(frames_dir):
    """Recreates `frames_dir` empty, dropping frames left over by a previous run."""
    frames_dir = Path(frames_dir)
    if frames_dir.exists():
        shutil.rmtree(frames_dir)
    frames_dir.mkdir(parents=True)
    return frames_dir


def save_frames(frames, frames_dir, total=None):
    """
    Writes raster frames as numbered PNG files.

    Parameters:
    -----------
    frames : iterable of np.ndarray
        RGB or RGBA frames in display order.
    frames_dir : str or Path
        Existing directory receiving the files.
    total : int, optional
        Expected number of frames, used by the progress bar.

    Returns:
    --------
    list[Path]
        Written files, in frame order.
    """
    frames_dir = Path(frames_dir)
    paths = []
    with tqdm(total=total, desc="Rendering frames", unit="frame", ncols=100) as pbar:
        for index, frame in enumerate(frames, start=1):
            path = frames_dir / frame_filename(index)
            Image.fromarray(np.asarray(frame, dtype=np.uint8)).save(path)
            paths.append(path)
            pbar.update(1)
    return paths


def _as_image(frame):
    if isinstance(frame, (str, Path)):
        with Image.open(frame) as image:
            return image.convert('RGB')
    return Image.fromarray(np.asarray(frame, dtype=np.uint8)).convert('RGB')


def export_gif(frames, gif_path, frame_rate):
    """
    Encodes frames into a looping GIF.

    Parameters:
    -----------
    frames : iterable
        Raster frames (arrays) or paths to image files, in display order.
        Frames are decoded lazily, one at a time.
    gif_path : str or Path
        Destination file; parent directories are created.
    frame_rate : float
        Frames per second.

    Raises:
    -------
    ValueError
        If `frames` is empty.
    """
    gif_path = Path(gif_path)
    images = (_as_image(frame) for frame in frames)
    try:
        first = next(images)
    except StopIteration:
        raise ValueError("Cannot export a GIF without frames.") from None

    gif_path.parent.mkdir(parents=True, exist_ok=True)
    first.save(gif_path, save_all=True, append_images=images,
               duration=int(round(1000 / frame_rate)), loop=0)
    return gif_path


def video_command(ffmpeg, frames_dir, mp4_path, frame_rate):
    """Lossless h264 encode of the numbered PNG frames in `frames_dir`."""
    return [
        ffmpeg, "-y",
        "-r", str(frame_rate),
        "-i", str(Path(frames_dir) / FRAME_PATTERN),
        "-c:v", "h264",
        "-crf", "0",
        str(mp4_path),
    ]


def encode_video(frames_dir, mp4_path, frame_rate):
    """
    Encodes the PNG frames of `frames_dir` into an MP4 with ffmpeg.

    The call blocks until ffmpeg exits. There is no timeout and no retry:
    whatever ffmpeg prints is the diagnostic of a failed run.

    Raises:
    -------
    RuntimeError
        If ffmpeg is not on the PATH.
    subprocess.CalledProcessError
        If ffmpeg exits with a non-zero status.
    """
    ffmpeg = shutil.which("ffmpeg")
    if ffmpeg is None:
        raise RuntimeError("ffmpeg not found on PATH. Install ffmpeg (or add it to PATH) to export MP4.")

    mp4_path = Path(mp4_path)
    mp4_path.parent.mkdir(parents=True, exist_ok=True)
    cmd = video_command(ffmpeg, frames_dir, mp4_path, frame_rate)

    print("\nGenerating MP4 using ffmpeg...\n")
    print(" ".join(cmd))
    subprocess.run(cmd, check=True)
    print(f"\nMP4 generated at: {mp4_path.resolve()}")
    return mp4_path
