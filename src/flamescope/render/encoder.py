"""
FFmpeg video encoder.

Pipes raw RGB frames to ffmpeg via stdin. No intermediate files:
frames go straight from numpy arrays to the encoder.
"""

import subprocess
from pathlib import Path
from typing import Callable, Iterator


# Quality presets: (preset, crf, pix_fmt)
QUALITY_PRESETS = {
    "high": ("slow", "18", "yuv444p"),
    "medium": ("medium", "23", "yuv420p"),
    "fast": ("ultrafast", "28", "yuv420p"),
}


def build_command(
    output_path: Path,
    width: int,
    height: int,
    fps: int,
    quality: str = "high",
) -> list[str]:
    """ffmpeg argument list for a silent H.264 encode from stdin."""
    preset, crf, pix_fmt = QUALITY_PRESETS.get(quality, QUALITY_PRESETS["high"])
    return [
        "ffmpeg", "-y",
        "-loglevel", "error",
        # Raw video input from pipe
        "-f", "rawvideo",
        "-pix_fmt", "rgb24",
        "-s", f"{width}x{height}",
        "-r", str(fps),
        "-i", "pipe:0",
        # Video encoding
        "-c:v", "libx264",
        "-preset", preset,
        "-crf", crf,
        "-pix_fmt", pix_fmt,
        "-an",
        str(output_path),
    ]


def encode_video(
    frame_iterator: Iterator,
    output_path: Path,
    width: int = 640,
    height: int = 640,
    fps: int = 60,
    quality: str = "high",
    total_frames: int | None = None,
    progress_callback: Callable[[int, int], None] | None = None,
) -> Path:
    """
    Encode frames to MP4.

    Args:
        frame_iterator: Yields (H, W, 3) uint8 numpy arrays.
        output_path: Output MP4 path.
        width: Frame width.
        height: Frame height.
        fps: Frames per second.
        quality: "high", "medium", or "fast".
        total_frames: Total frame count for progress reporting.
        progress_callback: Optional callback(current_frame, total_frames).

    Returns:
        Path to the output file.

    Raises:
        RuntimeError: ffmpeg exited with a non-zero status.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    # libx264 with yuv420p needs even dimensions
    if "420" in QUALITY_PRESETS.get(quality, QUALITY_PRESETS["high"])[2]:
        if width % 2 or height % 2:
            raise ValueError(
                f"Quality '{quality}' needs even frame dimensions, got {width}x{height}"
            )

    with subprocess.Popen(
        build_command(output_path, width, height, fps, quality),
        stdin=subprocess.PIPE,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE,
    ) as proc:
        try:
            for count, frame in enumerate(frame_iterator, start=1):
                proc.stdin.write(frame.tobytes())
                if progress_callback and total_frames:
                    progress_callback(count, total_frames)
        except BrokenPipeError:
            # ffmpeg died early; its stderr says why
            pass
        _, stderr = proc.communicate()

    if proc.returncode != 0:
        message = stderr.decode("utf-8", errors="replace").strip()[-500:]
        raise RuntimeError(f"ffmpeg exited with code {proc.returncode}: {message}")

    return output_path
