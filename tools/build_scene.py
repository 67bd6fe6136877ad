#!/usr/bin/env python3
"""Build a SceneV1 level from a detections JSON file.

    python tools/build_scene.py detections.json --out scene.json
    python tools/build_scene.py detections.json --world 1280x720 --strategy spiral -v
"""
import argparse, json, logging, sys

from photo_platformer.config import CONFIGS
from photo_platformer.constraints import SceneConstraints
from photo_platformer.layouts import STRATEGY_NAMES
from photo_platformer.level_gen import LevelBuilder
from photo_platformer.physics import compute_physics


def parse_world(text):
    try:
        w, h = (float(v) for v in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {text!r}")
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError(f"world size must be positive, got {text!r}")
    return w, h


def main(argv=None):
    p = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    p.add_argument('detections', type=str, help='DetectionResponse JSON file')
    p.add_argument('--out', type=str, default='-', help='output file (default: stdout)')
    p.add_argument('--strategy', choices=STRATEGY_NAMES)
    p.add_argument('--world', type=parse_world, help='also emit physics for WIDTHxHEIGHT')
    p.add_argument('--preset', choices=sorted(CONFIGS), default='default')
    p.add_argument('-v', '--verbose', action='store_true')
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        with open(args.detections) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        p.error(f"cannot read {args.detections}: {e}")

    plan = LevelBuilder().plan(data, strategy=args.strategy)
    scene = SceneConstraints.require_valid(plan.scene)

    result = {"scene": scene.to_dict(), "seed": plan.seed, "strategy": plan.strategy}
    if args.world:
        world_w, world_h = args.world
        phys = compute_physics(world_w, world_h, scene, CONFIGS[args.preset])
        result["physics"] = phys.to_dict()

    text = json.dumps(result, indent=2)
    if args.out == '-':
        sys.stdout.write(text + "\n")
    else:
        with open(args.out, 'w') as f:
            f.write(text + "\n")
        print(f"Wrote {args.out}")


if __name__ == '__main__':
    main()
