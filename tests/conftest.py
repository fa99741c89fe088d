import json
from pathlib import Path

import numpy as np
import pytest

SAMPLES_DIR = Path(__file__).resolve().parent.parent / "test_files"


@pytest.fixture
def samples_dir():
    return SAMPLES_DIR


@pytest.fixture
def write_obj(tmp_path):
    """Write OBJ text to a file under tmp_path and return its path"""
    def _write(text, name="model.obj"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def write_gltf(tmp_path):
    """
    Write a one-primitive glTF document plus its .bin buffer.

    The buffer is laid out as: padding, positions (float32 VEC3), indices.
    Keyword arguments let each test bend one part of the layout.
    """
    def _write(positions=((0, 0, 0), (2, 0, 0), (0, 2, 0)),
               indices=(0, 1, 2),
               index_dtype="<u2",
               component_type=5123,
               padding=b"",
               accessor_offset=None,
               document_patch=None,
               buffer_bytes=None,
               write_buffer=True,
               name="model.gltf"):
        position_bytes = np.asarray(positions, dtype="<f4").tobytes()
        index_bytes = np.asarray(indices, dtype=index_dtype).tobytes() if indices is not None else b""
        data = padding + position_bytes + index_bytes
        if buffer_bytes is not None:
            data = buffer_bytes

        position_view = {"buffer": 0, "byteOffset": len(padding), "byteLength": len(position_bytes)}
        index_view = {"buffer": 0, "byteOffset": len(padding) + len(position_bytes),
                      "byteLength": len(index_bytes)}
        position_accessor = {"bufferView": 0, "componentType": 5126,
                             "count": len(positions), "type": "VEC3"}
        if accessor_offset is not None:
            position_accessor["byteOffset"] = accessor_offset

        primitive = {"attributes": {"POSITION": 0}}
        accessors = [position_accessor]
        if indices is not None:
            accessors.append({"bufferView": 1, "componentType": component_type,
                              "count": len(indices), "type": "SCALAR"})
            primitive["indices"] = 1

        document = {
            "asset": {"version": "2.0"},
            "buffers": [{"uri": "model.bin", "byteLength": len(data)}],
            "bufferViews": [position_view, index_view],
            "accessors": accessors,
            "meshes": [{"primitives": [primitive]}],
        }
        if document_patch is not None:
            document_patch(document)

        if write_buffer:
            (tmp_path / "model.bin").write_bytes(data)
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path
    return _write
