"""
Pick a parser from the file suffix and load the model.
"""
import logging
import os

from meshview.config import SUPPORTED_SUFFIXES
from meshview.errors import UnsupportedFormat
from meshview.gltf_parser import parse_gltf
from meshview.obj_parser import parse_obj

logger = logging.getLogger(__name__)

PARSERS = {
    ".obj": parse_obj,
    ".gltf": parse_gltf,
}


def parser_for(file_path):
    """
    Return the parse function for `file_path`, chosen by case-insensitive suffix.

    Raises:
        UnsupportedFormat: for any suffix other than .obj or .gltf (.glb included)
    """
    path = os.fspath(file_path)
    name = path.lower()
    # a bare ".obj" file name is an OBJ file too
    for suffix, parser in PARSERS.items():
        if name.endswith(suffix):
            return parser
    raise UnsupportedFormat(os.path.splitext(name)[1], SUPPORTED_SUFFIXES, path)


def load(file_path):
    """
    Load a .obj or .gltf model.

    Args:
        file_path: Path to the model file

    Returns:
        Mesh

    Raises:
        MeshLoadError: any parser failure, passed through unchanged
    """
    parser = parser_for(file_path)
    logger.debug("Loading %s with %s", file_path, parser.__name__)
    return parser(file_path)
