"""
CLI entry point for the flame renderer.

Usage:
    flamescope [options]
    python -m flamescope [options]
"""

import argparse
import sys
import time
from pathlib import Path

from flamescope.engine import FlameConfig
from flamescope.errors import ConfigurationError
from flamescope.io.exporter import SnapshotExporter
from flamescope.render.encoder import encode_video
from flamescope.render.renderer import FlameRenderer

PROFILES = {
    "low": {"resolution": 320, "fps": 30, "quality": "fast"},
    "medium": {"resolution": 640, "fps": 60, "quality": "medium"},
    "high": {"resolution": 1280, "fps": 60, "quality": "high"},
}


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  leaf frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  leaf frame {current}/{total}", flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flamescope",
        description="Progressive fractal flame attractor renderer",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("flame.png"),
        help="Final PNG snapshot path (default: flame.png)",
    )
    # Presentation: a live window or an MP4, not both
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--video",
        type=Path,
        default=None,
        help="Also encode every frame to this MP4 path",
    )
    target.add_argument("--preview", action="store_true", help="Show a live preview window")
    parser.add_argument("--no-metadata", action="store_true", help="Skip the JSON sidecar")

    # Resolution & Profile
    parser.add_argument(
        "-p", "--profile", type=str, default="medium",
        choices=sorted(PROFILES),
        help="Target profile (low: 320px 30fps, medium: 640px 60fps, high: 1280px 60fps)",
    )
    parser.add_argument("--resolution", type=int, default=None, help="Square image size (overrides profile)")
    parser.add_argument("-f", "--fps", type=int, default=None, help="Frames per second (overrides profile)")

    # Engine
    parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: fresh entropy)")
    parser.add_argument(
        "--seed-threshold", type=int, default=250_000,
        help="Points the warm-up batch must reach (default: 250000)",
    )
    parser.add_argument(
        "--leaf-budget", type=float, default=3.0e8,
        help="Bound on total leaves, sets the traversal depth (default: 3e8)",
    )
    parser.add_argument(
        "--affine-scale", type=float, default=1.0,
        help="Scale of the random affine matrices (default: 1.0)",
    )
    parser.add_argument(
        "--leaves-per-frame", type=int, default=1,
        help="Traversal leaves accumulated per presented frame (default: 1)",
    )

    # Limits
    parser.add_argument(
        "--max-frames", type=int, default=None,
        help="Stop after N frames even if leaves remain",
    )

    # Quality
    parser.add_argument(
        "-q", "--quality", type=str, default=None,
        choices=["high", "medium", "fast"],
        help="Encoding quality (defaults to profile quality)",
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    p_cfg = PROFILES[args.profile]
    resolution = args.resolution or p_cfg["resolution"]
    fps = args.fps or p_cfg["fps"]
    quality = args.quality or p_cfg["quality"]

    for path in (args.output, args.video):
        if path is not None and not path.parent.exists():
            print(f"Error: Output directory not found: {path.parent}", file=sys.stderr)
            sys.exit(1)

    config = FlameConfig(
        resolution=resolution,
        fps=fps,
        seed_threshold=args.seed_threshold,
        leaf_budget=args.leaf_budget,
        leaves_per_frame=args.leaves_per_frame,
        affine_scale=args.affine_scale,
    )

    # Step 1: Seed
    print(f"Seeding attractor ({config.seed_threshold} points)")
    t0 = time.time()
    try:
        renderer = FlameRenderer(config, seed=args.seed)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    state = renderer.state
    total_frames = renderer.total_frames
    if args.max_frames is not None:
        total_frames = min(total_frames, args.max_frames)

    print(f"  Seed rounds: {state.seed_rounds}")
    print(f"  Seed points: {len(state.seed)}")
    print(f"  Max depth: {state.max_depth} (branching {state.branching_factor})")
    print(f"  Leaves: {state.total_leaves}")
    print(f"  Seeding took {time.time() - t0:.1f}s")

    # Step 2: Drive
    print(f"\nRendering {total_frames} frames at {resolution}x{resolution} @ {fps}fps")
    t1 = time.time()

    if args.preview:
        from flamescope.render.preview import run_preview

        frames = run_preview(renderer, max_frames=args.max_frames, progress_callback=_progress_bar)
    elif args.video is not None:
        try:
            encode_video(
                frame_iterator=renderer.render_frames(args.max_frames, progress_callback=_progress_bar),
                output_path=args.video,
                width=resolution,
                height=resolution,
                fps=fps,
                quality=quality,
            )
        except (ValueError, RuntimeError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        frames = renderer.frames_rendered
    else:
        frames = 0
        for _ in renderer.render_frames(args.max_frames, progress_callback=_progress_bar):
            frames += 1

    elapsed = time.time() - t1

    # Step 3: Export
    exporter = SnapshotExporter()
    exporter.export_png(state, args.output)
    if not args.no_metadata:
        exporter.export_json(state, args.output.with_suffix(".json"), rng_seed=args.seed)

    print(f"\nDone! {state.leaves_visited}/{state.total_leaves} leaves")
    print(f"  time = {elapsed:.1f}s, frames = {frames}, fps = {frames / max(elapsed, 0.01):.1f}")
    print(f"  Output: {args.output}")
    if args.video is not None:
        print(f"  Video: {args.video}")


if __name__ == "__main__":
    main()
