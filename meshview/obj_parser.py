"""
Wavefront OBJ reader.

Only the geometry records are read:
  - v  x y z     vertex position
  - vn x y z     vertex normal
  - f  a b c ... polygon, each corner "v", "v/vt", "v//vn" or "v/vt/vn"

Every other record (comments, materials, groups, texture coordinates,
smoothing groups...) is skipped. The file is read one line at a time.
"""
import logging
import re

from meshview.errors import InvalidVertexComponent, MeshIOError
from meshview.mesh import Mesh

logger = logging.getLogger(__name__)

AXES = ("x", "y", "z")
MAX_INDEX = 0xFFFFFFFF

_INDEX_PATTERN = re.compile(r"\+?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def parse_obj(file_path):
    """
    Load an OBJ file into a Mesh.

    Args:
        file_path: Path to the .obj file

    Returns:
        Mesh with triangulated indices; normals is None when the file has no `vn` lines

    Raises:
        MeshIOError: the file cannot be opened or is not valid UTF-8
        InvalidVertexComponent: a `v`/`vn` line holds non-numeric text
    """
    try:
        f = open(file_path, 'r', encoding='utf-8')
    except OSError as e:
        raise MeshIOError(f"Failed to open file {file_path}: {e}", file_path) from e

    with f:
        return parse_obj_stream(f, file_path)


def parse_obj_stream(lines, file_path="<stream>"):
    """
    Build a Mesh from an iterable of OBJ text lines (an open file, a list...).

    Args:
        lines: Iterable yielding one line of text at a time
        file_path: Name used in error and log messages

    Returns:
        Mesh
    """
    vertices = []
    normals = []
    indices = []

    line_number = 0
    try:
        for line in lines:
            line_number += 1
            tokens = line.split()
            if not tokens:
                continue

            tag = tokens[0]
            if tag == 'v':
                vertex = _parse_vector(tokens, line, line_number, file_path, "vertex")
                if vertex is not None:
                    vertices.append(vertex)
            elif tag == 'vn':
                normal = _parse_vector(tokens, line, line_number, file_path, "normal")
                if normal is not None:
                    normals.append(normal)
            elif tag == 'f':
                corners = parse_face_corners(tokens[1:])
                if len(corners) < len(tokens) - 1:
                    logger.debug("%s:%d: dropped %d unresolvable face corner(s)",
                                 file_path, line_number, len(tokens) - 1 - len(corners))
                for triangle in triangulate(corners):
                    indices.extend(triangle)
    except UnicodeDecodeError as e:
        # raised by the file iterator while decoding the next line
        raise MeshIOError(
            f"Failed to read line {line_number + 1} of {file_path}: {e}", file_path
        ) from e

    logger.info("OBJ Parser: Loaded %d vertices, %d indices (%d triangles)",
                len(vertices), len(indices), len(indices) // 3)

    return Mesh(
        vertices=vertices,
        indices=indices,
        normals=normals if normals else None,
    )


def _parse_vector(tokens, line, line_number, file_path, kind):
    """Read the three components of a `v`/`vn` record, None for a short line"""
    if len(tokens) < 4:
        logger.debug("%s:%d: skipping short %s line %r", file_path, line_number, kind, line.rstrip())
        return None

    values = []
    for axis, text in zip(AXES, tokens[1:4]):
        # float() alone would also take "1_0" and non-ASCII digits
        if not _FLOAT_PATTERN.fullmatch(text):
            raise InvalidVertexComponent(axis, line.rstrip("\r\n"), line_number,
                                         file_path, kind)
        values.append(float(text))
    return values


def parse_face_corners(corner_tokens):
    """
    Resolve the position index of each face corner.

    Only the first slash-separated field is used. OBJ indices are 1-based and
    are returned 0-based; a corner whose position field is not a positive
    integer is dropped.

    Args:
        corner_tokens: The tokens after the `f` tag, e.g. ["1/1/1", "2//2", "3"]

    Returns:
        List of 0-based vertex ids
    """
    corners = []
    for token in corner_tokens:
        position = token.split('/')[0]
        if not _INDEX_PATTERN.fullmatch(position):
            continue
        index = int(position)
        if index < 1 or index > MAX_INDEX:
            continue
        corners.append(index - 1)
    return corners


def triangulate(corners):
    """
    Split a polygon into triangles fanned around its first corner.

    A triangle comes out unchanged, a quad splits along the v0-v2 diagonal
    into (v0, v1, v2) and (v0, v2, v3), and a larger polygon gives
    (v0, vi, vi+1) for i in 1..n-2. Polygons are assumed convex and planar.
    Fewer than 3 corners gives nothing.

    Args:
        corners: 0-based vertex ids of the polygon, in winding order

    Returns:
        List of (a, b, c) tuples
    """
    if len(corners) < 3:
        return []

    first = corners[0]
    return [(first, corners[i], corners[i + 1]) for i in range(1, len(corners) - 1)]
