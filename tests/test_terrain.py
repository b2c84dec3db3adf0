import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import config
from atlas import AtlasConfig, make_debug_atlas
from faces import FaceId, FACE_NORMALS, decode_array, encode
from shading import sample_atlas, shade_fragments
from terrain import Block, Terrain


def test_get_out_of_bounds():
    t = Terrain(4, 4, 4)
    assert t.get(0, 0, 0) is Block.EMPTY
    assert t.get(-1, 0, 0) is Block.OOB
    assert t.get(0, 4, 0) is Block.OOB
    assert t.is_pos_oob(0, 0, 4)
    with pytest.raises(IndexError):
        t.set(4, 0, 0, Block.STONE)


def test_is_filled():
    assert Block.DIRT.is_filled
    assert Block.STONE.is_filled
    assert not Block.EMPTY.is_filled
    assert not Block.OOB.is_filled


def test_get_neighbors():
    t = Terrain(2, 2, 2)
    t.set(1, 1, 1, Block.DIRT)
    neighbors = t.get_neighbors(0, 0, 0)
    assert len(neighbors) == 26
    assert neighbors.count(Block.OOB) == 19
    assert neighbors.count(Block.DIRT) == 1
    # x, then z, then y: the last entry is (+1, +1, +1).
    assert neighbors[-1] is Block.DIRT


def test_generate_layers():
    t = Terrain(16, 32, 16).generate()
    assert t.get(3, 0, 3) is Block.STONE
    assert t.get(3, config.STONE_HEIGHT - 1, 3) is Block.STONE
    assert t.get(3, config.STONE_HEIGHT, 3) is Block.DIRT
    assert t.get(3, config.DIRT_HEIGHT - 1, 3) is Block.DIRT
    assert t.get(3, config.DIRT_HEIGHT, 3) is Block.EMPTY


def test_single_block_mesh():
    t = Terrain(3, 3, 3)
    t.set(1, 1, 1, Block.STONE)
    mesh = t.build_mesh()
    assert mesh.positions.shape == (24, 3)
    assert mesh.packed.shape == (24,)
    assert mesh.indices.shape == (36,)
    block_types, face_ids = decode_array(mesh.packed)
    assert np.all(block_types == Block.STONE)
    assert sorted(face_ids.tolist()) == sorted(list(range(6)) * 4)
    for quad in range(6):
        face = FaceId(int(face_ids[quad * 4]))
        corners = mesh.positions[quad * 4:quad * 4 + 4]
        normal = np.array(FACE_NORMALS[face])
        axis = int(np.flatnonzero(normal)[0])
        # All corners sit on the face plane.
        expected = 2.0 if normal[axis] > 0 else 1.0
        assert np.all(corners[:, axis] == expected)
        # Counter-clockwise seen from outside.
        p0, p1, p2 = corners[:3]
        assert np.allclose(np.cross(p1 - p0, p2 - p0), normal)


def test_hidden_faces_culled():
    t = Terrain(2, 1, 1)
    t.set(0, 0, 0, Block.DIRT)
    t.set(1, 0, 0, Block.STONE)
    mesh = t.build_mesh()
    assert len(mesh.positions) == 10 * 4
    assert encode(Block.DIRT, FaceId.POS_X) not in mesh.packed
    assert encode(Block.STONE, FaceId.NEG_X) not in mesh.packed


def test_empty_mesh():
    mesh = Terrain(2, 2, 2).build_mesh()
    assert mesh.positions.shape == (0, 3)
    assert len(mesh.packed) == 0
    assert len(mesh.indices) == 0


def test_generated_mesh_face_counts():
    t = Terrain(16, 32, 16).generate()
    mesh = t.build_mesh()
    _, face_ids = decode_array(mesh.packed)
    quads = face_ids[::4]
    assert np.count_nonzero(quads == FaceId.POS_Y) == 16 * 16
    assert np.count_nonzero(quads == FaceId.NEG_Y) == 16 * 16
    assert np.count_nonzero(quads == FaceId.POS_X) == 16 * config.DIRT_HEIGHT
    assert len(mesh.indices) == 6 * len(quads)
    assert mesh.indices.max() == len(mesh.positions) - 1


def test_rendered_surface_highlights_slice():
    t = Terrain(4, 32, 4).generate()
    mesh = t.build_mesh()
    centres = mesh.positions.reshape(-1, 4, 3).mean(axis=1)
    packed = mesh.packed[::4]
    img = make_debug_atlas(4, cell_size=8)
    top = decode_array(packed)[1] == FaceId.POS_Y

    highlighted = shade_fragments(packed, centres, img, AtlasConfig(4, config.DIRT_HEIGHT))
    top_left = sample_atlas(img, (0.5 / 4, 0.5 / 4))
    assert np.allclose(highlighted[top], top_left)

    normal = shade_fragments(packed, centres, img, AtlasConfig(4, 0))
    dirt_cell = sample_atlas(img, ((Block.DIRT + 0.5) / 4, 0.5 / 4))
    assert np.allclose(normal[top], dirt_cell)


def test_block_names():
    assert [str(b) for b in Block] == ["Oob", "Empty", "Dirt", "Stone"]


def test_layer_rows_use_block_names():
    t = Terrain(3, 2, 1)
    t.set(0, 0, 0, Block.STONE)
    t.set(1, 0, 0, Block.DIRT)
    assert t.layer_rows(0) == ["StoneDirtEmpty", "EmptyEmptyEmpty"]


def test_debug_dump_logs_layers(monkeypatch, capsys):
    monkeypatch.setattr(config, "LOG_LEVEL", "DEBUG")
    monkeypatch.setattr(config, "LOG_COLOR", False)
    t = Terrain(2, 1, 2)
    t.set(1, 0, 1, Block.DIRT)
    t.debug_dump()
    lines = [line.split("] ", 1)[1] for line in capsys.readouterr().out.splitlines()]
    assert lines == ["z=0", "EmptyEmpty", "z=1", "EmptyDirt"]
