from typing import List, Tuple

import numpy as np

from rayviz.camera import Camera
from rayviz.renderer import Raytracer, RenderMode
from rayviz.scene import Scene
from rayviz.surfaces.cube import Cube
from rayviz.surfaces.infinite_plane import InfinitePlane
from rayviz.surfaces.sphere import Sphere
from rayviz.typings.light import Light
from rayviz.typings.material import Material, MaterialType

PARAMETER_COUNTS = {
    "cam": 8,
    "set": 5,
    "mtl": 9,
    "sph": 5,
    "pln": 7,
    "box": 7,
    "lgt": 7,
    "dlt": 7,
}
RENDER_MODES = (RenderMode.RAYTRACING, RenderMode.PATHTRACING)


def _material(materials: List[Material], index: float, line_number: int) -> Material:
    # 1-based, each surface gets its own copy
    mat_idx = int(index)
    if not (1 <= mat_idx <= len(materials)):
        raise ValueError("line {}: material index {} out of range".format(line_number, mat_idx))
    return materials[mat_idx - 1].copy()


def parse_scene_file(file_path: str) -> Tuple[Camera | None, Raytracer | None, Scene]:
    with open(file_path, 'r') as f:
        return parse_scene(f)


def parse_scene(lines) -> Tuple[Camera | None, Raytracer | None, Scene]:
    """Build camera, render settings and scene from scene-file lines.

    Materials are referenced by 1-based index in definition order, so a
    material must be declared before the surfaces that use it.
    """
    camera: Camera | None = None
    raytracer: Raytracer | None = None
    scene = Scene()
    materials: List[Material] = []
    for line_number, line in enumerate(lines, start=1):
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        parts = line.split()
        obj_type = parts[0]
        if obj_type not in PARAMETER_COUNTS:
            raise ValueError("Unknown object type: {}".format(obj_type))
        params = [float(p) for p in parts[1:]]
        if len(params) != PARAMETER_COUNTS[obj_type]:
            raise ValueError(
                "line {}: '{}' takes {} parameters, got {}".format(
                    line_number, obj_type, PARAMETER_COUNTS[obj_type], len(params)
                )
            )

        if obj_type == "cam":
            camera = Camera(
                np.asarray(params[:3], dtype=float),
                np.asarray(params[3:6], dtype=float),
                params[6],
                params[7],
            )
        elif obj_type == "set":
            if int(params[4]) not in (0, 1):
                raise ValueError("line {}: render mode must be 0 or 1".format(line_number))
            raytracer = Raytracer(
                width=int(params[0]),
                height=int(params[1]),
                max_bounces=int(params[2]),
                samples_per_pixel=int(params[3]),
                mode=RENDER_MODES[int(params[4])],
            )
        elif obj_type == "mtl":
            materials.append(
                Material(
                    np.asarray(params[:3], dtype=float),
                    params[3],
                    params[4],
                    params[5],
                    params[6],
                    params[7],
                    MaterialType(int(params[8])),
                )
            )
        elif obj_type == "sph":
            scene.add(Sphere(np.asarray(params[:3], dtype=float), params[3], _material(materials, params[4], line_number)))
        elif obj_type == "pln":
            scene.add(
                InfinitePlane(
                    np.asarray(params[:3], dtype=float),
                    np.asarray(params[3:6], dtype=float),
                    _material(materials, params[6], line_number),
                )
            )
        elif obj_type == "box":
            scene.add(
                Cube(
                    np.asarray(params[:3], dtype=float),
                    np.asarray(params[3:6], dtype=float),
                    _material(materials, params[6], line_number),
                )
            )
        elif obj_type == "lgt":
            scene.add(Light.point(np.asarray(params[:3], dtype=float), np.asarray(params[3:6], dtype=float), params[6]))
        elif obj_type == "dlt":
            scene.add(
                Light.directional(np.asarray(params[:3], dtype=float), np.asarray(params[3:6], dtype=float), params[6])
            )
    return camera, raytracer, scene
