"""CLI for rendering the displacement map animation to image files."""

import argparse
import logging
import sys
from pathlib import Path

from tqdm import tqdm

from dispmap import DispMapError, DisplacementAnimation, FilterConfig
from dispmap.codecs import load_map, load_target, save_frame, save_gif

COMPONENTS = ["blue", "green", "red", "0", "1", "2"]


def _component(value):
    return int(value) if value.isdigit() else value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a displacement map animation")
    parser.add_argument("map", type=Path, help="Map image (read as 3-channel BGR), wider than the target")
    parser.add_argument("target", type=Path, help="Target image with a transparent layer (4-channel PNG)")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output directory for frames")
    parser.add_argument("-c", "--config", type=Path, help="YAML configuration file")
    parser.add_argument("--component-x", choices=COMPONENTS, help="Map channel driving x displacement")
    parser.add_argument("--component-y", choices=COMPONENTS, help="Map channel driving y displacement")
    parser.add_argument("--scale-x", type=int, help="Displacement strength along rows")
    parser.add_argument("--scale-y", type=int, help="Displacement strength along columns")
    parser.add_argument("--step", type=int, help="Crop window advance per frame in pixels")
    parser.add_argument("--max-frames", type=int, help="Stop after this many frames")
    parser.add_argument("-w", "--workers", type=int, help="Threads per displacement pass")
    parser.add_argument("--gif", type=Path, help="Also write the frames as an animated GIF")
    parser.add_argument("--frame-ms", type=int, default=33, help="GIF frame duration in milliseconds")
    parser.add_argument("--no-progress", action="store_true", help="Disable progress bar")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = FilterConfig.from_yaml(args.config) if args.config else FilterConfig()
        cfg = cfg.replace(
            component_x=_component(args.component_x) if args.component_x else None,
            component_y=_component(args.component_y) if args.component_y else None,
            scale_x=args.scale_x,
            scale_y=args.scale_y,
            step=args.step,
            max_frames=args.max_frames,
            workers=args.workers,
        )

        map_img = load_map(args.map)
        target = load_target(args.target)
        print(f"map size: {map_img.width}x{map_img.height} channels: {map_img.channels}")
        print(f"target size: {target.width}x{target.height} channels: {target.channels}")

        anim = DisplacementAnimation(cfg)
        total = anim.count(map_img, target)
        keep = [] if args.gif else None

        for i, (offset, frame) in enumerate(
            tqdm(anim.frames(map_img, target), total=total, disable=args.no_progress, desc="frames")
        ):
            save_frame(args.output / f"frame_{i:05d}.png", frame)
            if keep is not None:
                keep.append(frame)

        if keep is not None:
            save_gif(args.gif, keep, frame_ms=args.frame_ms)
    except DispMapError as e:
        print(f"!!! {e}", file=sys.stderr)
        return 1

    print(f"\nRendering complete:")
    print(f"  Frames: {total}")
    print(f"  Output: {args.output}")
    if args.gif:
        print(f"  GIF: {args.gif}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
