"""
Bounding box and fit-to-view normalization.

The model is never rewritten: normalization is a (scale, center) pair that
the renderer folds into its model matrix, so the same Mesh can be fitted to
different target volumes without parsing it again.
"""
from dataclasses import dataclass

import numpy as np

from meshview.config import TARGET_EXTENT
from meshview.mesh import Mesh


@dataclass(frozen=True, eq=False)
class Bounds:
    """Axis-aligned bounding box of a vertex set"""
    min: np.ndarray
    max: np.ndarray

    @property
    def center(self):
        return (self.min + self.max) / 2

    @property
    def size(self):
        return self.max - self.min

    @property
    def max_dimension(self):
        return float(np.max(self.size))


@dataclass(frozen=True)
class Normalization:
    """Uniform scale applied after moving `center` to the origin"""
    scale: float
    center: tuple = (0.0, 0.0, 0.0)


def _as_vertices(vertices):
    if isinstance(vertices, Mesh):
        vertices = vertices.vertices
    return np.asarray(vertices, dtype=np.float64).reshape(-1, 3)


def compute_bounds(vertices):
    """
    Compute the axis-aligned bounding box of a vertex set.

    Args:
        vertices: (N, 3) array-like of positions, or a Mesh

    Returns:
        Bounds with min/max per axis; center, size and max_dimension derive from them

    Raises:
        ValueError: if there are no vertices
    """
    vertices = _as_vertices(vertices)
    if len(vertices) == 0:
        raise ValueError("Cannot compute bounds of an empty vertex set")

    # fmin/fmax skip NaN components instead of propagating them
    min_bounds = np.fmin.reduce(vertices, axis=0)
    max_bounds = np.fmax.reduce(vertices, axis=0)
    return Bounds(min=min_bounds, max=max_bounds)


def fit_scale(bounds, target_extent=TARGET_EXTENT):
    """
    Scale factor that makes the largest side of `bounds` equal to `target_extent`.

    A flat or single-point model (max_dimension == 0) is left unscaled, as is
    one whose extent is not a finite number.
    """
    max_dimension = bounds.max_dimension
    if not np.isfinite(max_dimension) or max_dimension <= 0:
        return 1.0
    return target_extent / max_dimension


def normalization(vertices, target_extent=TARGET_EXTENT):
    """
    Derive the transform that centers a model at the origin and fits it in a cube.

    Args:
        vertices: (N, 3) array-like of positions, or a Mesh
        target_extent: Edge length of the cube to fit into (2.0 gives the [-1, 1] cube)

    Returns:
        Normalization; a model without vertices gets scale 1 and center at the origin
    """
    vertices = _as_vertices(vertices)
    if len(vertices) == 0:
        return Normalization(scale=1.0)

    bounds = compute_bounds(vertices)
    center = tuple(float(c) for c in bounds.center)
    return Normalization(scale=fit_scale(bounds, target_extent), center=center)


def apply_normalization(vertices, norm):
    """
    Return a new array of positions with `norm` applied: (v - center) * scale.

    The input is left untouched. Mostly useful for checking a normalization;
    the renderer applies the same transform on the GPU.
    """
    vertices = _as_vertices(vertices)
    return (vertices - np.asarray(norm.center)) * norm.scale
