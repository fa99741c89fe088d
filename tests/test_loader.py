import pytest

from meshview import loader
from meshview.errors import MeshIOError, UnsupportedFormat
from meshview.gltf_parser import parse_gltf
from meshview.loader import load, parser_for
from meshview.obj_parser import parse_obj

TRIANGLE_OBJ = "v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n"


@pytest.mark.parametrize("path, expected", [
    ("model.obj", parse_obj),
    ("model.OBJ", parse_obj),
    ("dir.with.dots/Model.Obj", parse_obj),
    ("scene.gltf", parse_gltf),
    ("scene.GlTF", parse_gltf),
    ("dir/.obj", parse_obj),
    (".GLTF", parse_gltf),
])
def test_parser_chosen_by_suffix(path, expected):
    assert parser_for(path) is expected


@pytest.mark.parametrize("path", ["model.glb", "model.stl", "model", "obj", "model.obj.bak"])
def test_unsupported_suffix(path):
    with pytest.raises(UnsupportedFormat) as excinfo:
        load(path)
    message = str(excinfo.value)
    assert ".obj" in message
    assert ".gltf" in message
    assert excinfo.value.accepted == (".obj", ".gltf")


def test_mixed_case_obj_is_loaded(write_obj):
    mesh = load(write_obj(TRIANGLE_OBJ, name="model.OBJ"))
    assert mesh.indices.tolist() == [0, 1, 2]


def test_bare_suffix_file_name_is_loaded(write_obj):
    mesh = load(write_obj(TRIANGLE_OBJ, name=".obj"))
    assert mesh.triangle_count == 1


def test_accepts_str_paths(write_obj):
    mesh = load(str(write_obj(TRIANGLE_OBJ)))
    assert mesh.vertex_count == 3


def test_dispatches_to_registered_parser(monkeypatch):
    calls = []
    monkeypatch.setitem(loader.PARSERS, ".gltf", lambda path: calls.append(path) or "mesh")
    assert load("a/b/c.GLTF") == "mesh"
    assert calls == ["a/b/c.GLTF"]


def test_parser_errors_pass_through(tmp_path):
    with pytest.raises(MeshIOError):
        load(tmp_path / "missing.obj")


def test_load_gltf_sample(samples_dir):
    mesh = load(samples_dir / "triangle.gltf")
    assert mesh.triangle_count == 1
