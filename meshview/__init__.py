"""
Load OBJ and glTF models into a renderer-ready Mesh and fit them to view.
"""
from meshview.bounds import Bounds, Normalization, compute_bounds, fit_scale, normalization
from meshview.errors import (
    BufferRangeError,
    BufferReadError,
    InvalidGltfJson,
    InvalidVertexComponent,
    MeshIndexError,
    MeshIOError,
    MeshLoadError,
    UnsupportedFormat,
    UnsupportedGltfFeature,
    UnsupportedIndexType,
)
from meshview.gltf_parser import parse_gltf
from meshview.loader import load
from meshview.mesh import Mesh
from meshview.obj_parser import parse_obj

__version__ = "0.1.0"
