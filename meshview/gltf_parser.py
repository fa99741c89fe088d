"""
Minimal glTF 2.0 reader.

Reads the JSON (.gltf) flavour with one external or embedded buffer, and
takes geometry from the first primitive of the first mesh only:
  - POSITION: float32 VEC3, tightly packed
  - indices:  unsigned byte / short / int, tightly packed, widened to uint32

Supported subset:
  - no .glb containers, no byteStride, no sparse accessors
  - accessor type/componentType of POSITION are assumed, not checked
  - triangle lists only, every accessor must live in buffers[0]
  - extra meshes and primitives are ignored
"""
import base64
import binascii
import json
import logging
from pathlib import Path
from urllib.parse import unquote

import numpy as np

from meshview.errors import (
    BufferRangeError,
    BufferReadError,
    InvalidGltfJson,
    MeshIOError,
    UnsupportedGltfFeature,
    UnsupportedIndexType,
)
from meshview.mesh import Mesh

logger = logging.getLogger(__name__)

# Accessor component types (GL enums)
UNSIGNED_BYTE = 5121
UNSIGNED_SHORT = 5123
UNSIGNED_INT = 5125

# Primitive topology
TRIANGLES = 4

INDEX_DTYPES = {
    UNSIGNED_BYTE: np.dtype('u1'),
    UNSIGNED_SHORT: np.dtype('<u2'),
    UNSIGNED_INT: np.dtype('<u4'),
}

POSITION_DTYPE = np.dtype('<f4')
POSITION_STRIDE = 3 * POSITION_DTYPE.itemsize  # 12 bytes per vertex


def parse_gltf(file_path):
    """
    Load a .gltf file into a Mesh.

    Args:
        file_path: Path to the .gltf document; buffer URIs resolve against its directory

    Returns:
        Mesh with normals None. A document without a mesh or primitive gives an empty Mesh.

    Raises:
        MeshIOError: the document cannot be read
        InvalidGltfJson: the document is not JSON or lacks required fields
        BufferReadError: the buffer file cannot be read or its data URI cannot be decoded
        BufferRangeError: an accessor reaches past the end of the buffer
        UnsupportedIndexType: indices use a componentType other than 5121/5123/5125
        UnsupportedGltfFeature: not a triangle list, or an accessor lives in another buffer
    """
    path = Path(file_path)
    try:
        json_text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise MeshIOError(f"Failed to read glTF file {file_path}: {e}", str(file_path)) from e

    return parse_gltf_document(json_text, path.parent, str(file_path))


def parse_gltf_document(json_text, base_dir, file_path="<document>"):
    """
    Build a Mesh from glTF JSON text.

    Args:
        json_text: The glTF JSON document
        base_dir: Directory that relative buffer URIs resolve against
        file_path: Name used in error and log messages

    Returns:
        Mesh
    """
    document = GltfDocument.from_json(json_text, file_path)
    buffer_data = document.read_buffer(Path(base_dir))

    vertices = np.zeros((0, 3), dtype=np.float32)
    indices = np.zeros(0, dtype=np.uint32)

    primitive = document.first_primitive()
    if primitive is not None:
        mode = primitive.get("mode", TRIANGLES)
        if mode != TRIANGLES:
            raise UnsupportedGltfFeature(
                f"{file_path}: primitive mode {mode!r} is not supported, only triangle lists (4)",
                file_path,
            )

        position_index = primitive["attributes"].get("POSITION")
        if position_index is not None:
            vertices = document.read_positions(position_index, buffer_data)

        indices_index = primitive.get("indices")
        if indices_index is not None:
            indices = document.read_indices(indices_index, buffer_data)
            if len(indices) % 3 != 0:
                raise UnsupportedGltfFeature(
                    f"{file_path}: index count {len(indices)} is not a multiple of 3",
                    file_path,
                )

    logger.info("GLTF Parser: Loaded %d vertices, %d indices (%d triangles)",
                len(vertices), len(indices), len(indices) // 3)

    return Mesh(vertices=vertices, indices=indices, normals=None)


def _fail(file_path, message):
    return InvalidGltfJson(f"{file_path}: {message}", file_path)


def _check_index(value, where, file_path):
    # bool is an int subclass but never a valid glTF index
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise _fail(file_path, f"{where} must be a non-negative integer, got {value!r}")
    return value


def _optional_index(obj, key, where, file_path):
    value = obj.get(key)
    if value is None:
        return None
    return _check_index(value, f"{where}.{key}", file_path)


def _required_index(obj, key, where, file_path):
    if key not in obj:
        raise _fail(file_path, f"{where} is missing required field '{key}'")
    return _check_index(obj[key], f"{where}.{key}", file_path)


def _list_of_objects(document, key, file_path):
    items = document.get(key, [])
    if not isinstance(items, list):
        raise _fail(file_path, f"'{key}' must be an array")
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise _fail(file_path, f"{key}[{i}] must be an object")
    return items


class GltfDocument:
    """
    The parts of a glTF document this reader understands.

    Built with `from_json`, which checks the structure of every buffer,
    bufferView, accessor and mesh up front so the decoding steps only have
    to deal with byte ranges.
    """

    def __init__(self, buffers, buffer_views, accessors, meshes, file_path="<document>"):
        self.buffers = buffers
        self.buffer_views = buffer_views
        self.accessors = accessors
        self.meshes = meshes
        self.file_path = file_path

    @classmethod
    def from_json(cls, json_text, file_path="<document>"):
        try:
            document = json.loads(json_text)
        except (json.JSONDecodeError, RecursionError) as e:
            raise _fail(file_path, f"Failed to parse JSON: {e}") from e

        if not isinstance(document, dict):
            raise _fail(file_path, "top-level value must be an object")

        buffers = _list_of_objects(document, "buffers", file_path)
        buffer_views = _list_of_objects(document, "bufferViews", file_path)
        accessors = _list_of_objects(document, "accessors", file_path)
        meshes = _list_of_objects(document, "meshes", file_path)

        for i, buffer in enumerate(buffers):
            if not isinstance(buffer.get("uri"), str):
                raise _fail(file_path, f"buffers[{i}].uri must be a string")
            _required_index(buffer, "byteLength", f"buffers[{i}]", file_path)

        for i, view in enumerate(buffer_views):
            where = f"bufferViews[{i}]"
            _required_index(view, "buffer", where, file_path)
            _required_index(view, "byteLength", where, file_path)
            _optional_index(view, "byteOffset", where, file_path)

        for i, accessor in enumerate(accessors):
            where = f"accessors[{i}]"
            _required_index(accessor, "bufferView", where, file_path)
            _required_index(accessor, "componentType", where, file_path)
            _required_index(accessor, "count", where, file_path)
            _optional_index(accessor, "byteOffset", where, file_path)
            if not isinstance(accessor.get("type"), str):
                raise _fail(file_path, f"{where}.type must be a string")

        for i, mesh in enumerate(meshes):
            primitives = mesh.get("primitives")
            if not isinstance(primitives, list):
                raise _fail(file_path, f"meshes[{i}].primitives must be an array")
            for j, primitive in enumerate(primitives):
                where = f"meshes[{i}].primitives[{j}]"
                if not isinstance(primitive, dict):
                    raise _fail(file_path, f"{where} must be an object")
                attributes = primitive.get("attributes")
                if not isinstance(attributes, dict):
                    raise _fail(file_path, f"{where}.attributes must be an object")
                for name, value in attributes.items():
                    _check_index(value, f"{where}.attributes.{name}", file_path)
                _optional_index(primitive, "indices", where, file_path)

        return cls(buffers, buffer_views, accessors, meshes, file_path)

    def read_buffer(self, base_dir):
        """
        Fetch the bytes of the first buffer.

        A `data:` URI is decoded in place; anything else is a path relative
        to `base_dir`.
        """
        if not self.buffers:
            raise _fail(self.file_path, "document declares no buffers")

        buffer = self.buffers[0]
        uri = buffer["uri"]
        if uri.startswith("data:"):
            data = self._decode_data_uri(uri)
        else:
            buffer_path = base_dir / unquote(uri)
            try:
                data = buffer_path.read_bytes()
            except OSError as e:
                raise BufferReadError(f"Failed to read buffer {buffer_path}: {e}", self.file_path) from e

        if len(data) != buffer["byteLength"]:
            logger.debug("%s: buffer holds %d bytes, byteLength says %d",
                         self.file_path, len(data), buffer["byteLength"])
        return data

    def _decode_data_uri(self, uri):
        header, sep, payload = uri.partition(",")
        if not sep or not header.endswith(";base64"):
            raise BufferReadError(f"Unsupported buffer data URI: {header}", self.file_path)
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise BufferReadError(f"Failed to decode buffer data URI: {e}", self.file_path) from e

    def first_primitive(self):
        """First primitive of the first mesh, or None when there is none"""
        if not self.meshes:
            logger.debug("%s: no meshes, returning an empty mesh", self.file_path)
            return None
        if len(self.meshes) > 1:
            logger.debug("%s: ignoring %d extra mesh(es)", self.file_path, len(self.meshes) - 1)

        primitives = self.meshes[0]["primitives"]
        if not primitives:
            logger.debug("%s: first mesh has no primitives, returning an empty mesh", self.file_path)
            return None
        if len(primitives) > 1:
            logger.debug("%s: ignoring %d extra primitive(s)", self.file_path, len(primitives) - 1)
        return primitives[0]

    def accessor_offset(self, accessor_index):
        """
        Resolve an accessor to (accessor, absolute byte offset into buffers[0]).

        The offset is bufferView.byteOffset + accessor.byteOffset, missing values counting as 0.
        """
        if accessor_index >= len(self.accessors):
            raise _fail(self.file_path, f"accessors[{accessor_index}] does not exist")
        accessor = self.accessors[accessor_index]

        view_index = accessor["bufferView"]
        if view_index >= len(self.buffer_views):
            raise _fail(self.file_path, f"bufferViews[{view_index}] does not exist")
        view = self.buffer_views[view_index]

        if view["buffer"] != 0:
            raise UnsupportedGltfFeature(
                f"{self.file_path}: bufferViews[{view_index}] uses buffer {view['buffer']}, "
                f"only the first buffer is supported",
                self.file_path,
            )

        offset = (view.get("byteOffset") or 0) + (accessor.get("byteOffset") or 0)
        return accessor, offset

    def _check_range(self, what, offset, length, buffer_data):
        if offset + length > len(buffer_data):
            raise BufferRangeError(what, offset, length, len(buffer_data), self.file_path)

    def read_positions(self, accessor_index, buffer_data):
        """Decode a POSITION accessor into a float32 (count, 3) array"""
        accessor, offset = self.accessor_offset(accessor_index)
        count = accessor["count"]
        if count == 0:
            return np.zeros((0, 3), dtype=np.float32)

        self._check_range(f"POSITION accessor {accessor_index}", offset,
                          count * POSITION_STRIDE, buffer_data)
        positions = np.frombuffer(buffer_data, dtype=POSITION_DTYPE, count=count * 3, offset=offset)
        return positions.reshape(count, 3).astype(np.float32)

    def read_indices(self, accessor_index, buffer_data):
        """Decode an index accessor into a uint32 array, whatever its stored width"""
        accessor, offset = self.accessor_offset(accessor_index)
        component_type = accessor["componentType"]
        dtype = INDEX_DTYPES.get(component_type)
        if dtype is None:
            raise UnsupportedIndexType(component_type, self.file_path)

        count = accessor["count"]
        if count == 0:
            return np.zeros(0, dtype=np.uint32)

        self._check_range(f"index accessor {accessor_index}", offset,
                          count * dtype.itemsize, buffer_data)
        raw = np.frombuffer(buffer_data, dtype=dtype, count=count, offset=offset)
        return raw.astype(np.uint32)
