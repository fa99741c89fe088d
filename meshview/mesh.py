"""
Mesh container shared by every parser.

A Mesh is built once per successful parse and never changes afterwards: the
arrays it holds are flagged read-only, so the normalizer and the renderer can
both read them without copying defensively.
"""
from dataclasses import dataclass
from typing import Optional

import numpy as np

from meshview.errors import MeshIndexError


def _frozen(array, dtype, shape):
    data = np.array(array, dtype=dtype).reshape(shape)
    data.setflags(write=False)
    return data


@dataclass(frozen=True, eq=False)
class Mesh:
    """
    Normalized, renderer-ready mesh.

    Attributes:
        vertices: float32 array of shape (N, 3), row index = vertex id
        indices: uint32 array of shape (M,), M a multiple of 3, one triangle per triple
        normals: float32 array of shape (K, 3) or None when the source had none
    """
    vertices: np.ndarray
    indices: np.ndarray
    normals: Optional[np.ndarray] = None

    def __post_init__(self):
        vertices = _frozen(self.vertices, np.float32, (-1, 3))
        indices = _frozen(self.indices, np.uint32, (-1,))
        if indices.size % 3 != 0:
            raise ValueError(f"Index count {indices.size} is not a multiple of 3")

        # frozen dataclass, so go through object.__setattr__
        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "indices", indices)
        if self.normals is not None:
            object.__setattr__(self, "normals", _frozen(self.normals, np.float32, (-1, 3)))

    @classmethod
    def empty(cls):
        return cls(vertices=np.zeros((0, 3), dtype=np.float32),
                   indices=np.zeros(0, dtype=np.uint32))

    @property
    def vertex_count(self):
        return len(self.vertices)

    @property
    def index_count(self):
        return len(self.indices)

    @property
    def triangle_count(self):
        return len(self.indices) // 3

    @property
    def triangles(self):
        """Indices viewed as an (M/3, 3) array, one row per triangle"""
        return self.indices.reshape(-1, 3)

    def indices_in_range(self):
        if self.indices.size == 0:
            return True
        return int(self.indices.max()) < self.vertex_count

    def validate(self):
        """
        Check that every triangle names an existing vertex.

        Parsers do not enforce this (an OBJ face may reference a vertex that
        never appears), so callers run it before uploading the index buffer.

        Raises:
            MeshIndexError: if any index is >= the vertex count
        """
        if not self.indices_in_range():
            raise MeshIndexError(
                f"Index {int(self.indices.max())} out of range for "
                f"{self.vertex_count} vertices"
            )
        return self
