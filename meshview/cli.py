"""
Command-line model inspector.

Loads a model the way the viewer does (falling back to the default asset
once if the requested file fails) and prints what the renderer would get:
counts, bounding box and the fit-to-view transform.

Usage:
    $ meshview path/to/model.obj
    $ python -m meshview scene.gltf --fallback test_files/cube.obj --verbose
"""
import argparse
import logging

import numpy as np

from meshview import config
from meshview.bounds import compute_bounds, normalization
from meshview.errors import MeshLoadError
from meshview.loader import load
from meshview.logging_config import setup_logging

logger = logging.getLogger(__name__)


def load_with_fallback(file_path, fallback_path=config.DEFAULT_MODEL_PATH):
    """
    Load `file_path`; on any failure log it and load `fallback_path` exactly once.

    Returns:
        (Mesh, path actually loaded)

    Raises:
        MeshLoadError: if the fallback fails as well
    """
    try:
        return load(file_path).validate(), file_path
    except MeshLoadError as e:
        logger.error("Failed to load %s: %s", file_path, e)

    logger.warning("Loading default model %s...", fallback_path)
    return load(fallback_path).validate(), fallback_path


def _fmt(vector):
    return "(" + ", ".join(f"{v:.6g}" for v in np.asarray(vector, dtype=float)) + ")"


def describe(mesh, loaded_path, target_extent=config.TARGET_EXTENT):
    """Human-readable summary of a loaded mesh and its normalization"""
    lines = [
        f"Model: {loaded_path}",
        f"Vertices: {mesh.vertex_count}",
        f"Indices: {mesh.index_count} ({mesh.triangle_count} triangles)",
        f"Normals: {len(mesh.normals) if mesh.normals is not None else 'none'}",
    ]

    if mesh.vertex_count == 0:
        lines.append("Bounds: empty model, nothing to normalize")
        return "\n".join(lines)

    bounds = compute_bounds(mesh)
    norm = normalization(mesh, target_extent)
    lines += [
        f"Bounds: min {_fmt(bounds.min)} max {_fmt(bounds.max)}",
        f"Center: {_fmt(norm.center)}",
        f"Largest dimension: {bounds.max_dimension:.6g}",
        f"Scale: {norm.scale:.6g} (fits a {target_extent:g}-unit cube)",
    ]
    if mesh.triangle_count == 0:
        lines.append("Warning: no triangles, nothing for a triangle-list renderer to draw")
    return "\n".join(lines)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="meshview",
        description="Load an OBJ or glTF model and report its normalized geometry.",
    )
    parser.add_argument("model", nargs="?", default=config.DEFAULT_MODEL_PATH,
                        help="Model to load (.obj or .gltf, default: %(default)s)")
    parser.add_argument("--fallback", default=config.DEFAULT_MODEL_PATH,
                        help="Model loaded if the first one fails (default: %(default)s)")
    parser.add_argument("--target-extent", type=float, default=config.TARGET_EXTENT,
                        help="Edge length of the cube the model is fitted into")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log skipped lines and other parser details")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.target_extent <= 0:
        build_parser().error("--target-extent must be positive")

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    try:
        mesh, loaded_path = load_with_fallback(args.model, args.fallback)
    except MeshLoadError as e:
        logger.critical("Failed to load default model %s: %s", args.fallback, e)
        return 1

    print(describe(mesh, loaded_path, args.target_extent))
    return 0
