import argparse
import json
import time

import numpy as np

from rayviz.camera import Camera
from rayviz.renderer import Raytracer, RenderMode, save_image
from rayviz.scene import Scene
from rayviz.scene_parser import parse_scene_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Interactive ray/path tracer core')
    parser.add_argument('output_image', type=str, help='Name of the output image file')
    parser.add_argument('--scene', type=str, default=None, help='Path to a scene file (default: demo scene)')
    parser.add_argument('--width', type=int, default=None, help='Image width')
    parser.add_argument('--height', type=int, default=None, help='Image height')
    parser.add_argument(
        '--mode',
        choices=[mode.value for mode in RenderMode],
        default=None,
        help='Light transport algorithm',
    )
    parser.add_argument('--bounces', type=int, default=None, help='Maximum number of bounces per ray')
    parser.add_argument('--samples', type=int, default=None, help='Samples per pixel')
    parser.add_argument('--seed', type=int, default=None, help='Seed for a reproducible render')
    parser.add_argument('--paths', type=int, default=0, help='Number of ray paths to record for the debug view')
    parser.add_argument('--paths-output', type=str, default=None, help='JSON file for the recorded ray paths')
    return parser


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)

    def log_phase(label: str, seconds: float) -> None:
        print(f"[phase] {label}: {seconds:.2f}s")

    parse_start = time.perf_counter()
    if args.scene is not None:
        camera, raytracer, scene = parse_scene_file(args.scene)
        if camera is None:
            raise ValueError("Scene file is missing a camera ('cam' line)")
    else:
        camera, raytracer, scene = Camera.default(), None, Scene.default()
    log_phase("parse_scene", time.perf_counter() - parse_start)

    if raytracer is None:
        raytracer = Raytracer()
    if args.width is not None:
        raytracer.width = args.width
    if args.height is not None:
        raytracer.height = args.height
    if args.mode is not None:
        raytracer.mode = RenderMode(args.mode)
    if args.bounces is not None:
        raytracer.max_bounces = args.bounces
    if args.samples is not None:
        raytracer.samples_per_pixel = args.samples
    rng = np.random.default_rng(args.seed)

    render_start = time.perf_counter()
    pixels = raytracer.render(scene, camera, rng)
    log_phase("render", time.perf_counter() - render_start)

    save_start = time.perf_counter()
    save_image(pixels, raytracer.width, raytracer.height, args.output_image)
    log_phase("save_image", time.perf_counter() - save_start)

    paths = []
    if args.paths > 0:
        paths_start = time.perf_counter()
        paths = raytracer.trace_paths(scene, camera, args.paths, rng)
        log_phase("trace_paths", time.perf_counter() - paths_start)
        if args.paths_output is not None:
            with open(args.paths_output, 'w') as f:
                json.dump([path.to_dict() for path in paths], f, indent=2)

    print(
        "[stats] mode={mode}, pixels={pixels}, samples={samples}, bounces={bounces}, paths={paths}, hits={hits}".format(
            mode=RenderMode(raytracer.mode).value,
            pixels=raytracer.width * raytracer.height,
            samples=raytracer.samples_per_pixel,
            bounces=raytracer.max_bounces,
            paths=len(paths),
            hits=sum(1 for path in paths if path.hit),
        )
    )


def run() -> None:
    program_start = time.time()
    readable_start = time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(program_start))
    print(f"[timer] Program started at {readable_start}")
    try:
        main()
    finally:
        program_end = time.time()
        readable_end = time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(program_end))
        elapsed = program_end - program_start
        print(f"[timer] Program ended at {readable_end} (elapsed {elapsed:.2f}s)")


if __name__ == '__main__':
    run()
