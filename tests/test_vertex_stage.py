import os
import sys

import numpy as np

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from vertex_stage import as_matrix, transform_vertices


def _translation(x, y, z):
    m = np.eye(4)
    m[:3, 3] = (x, y, z)
    return m


def test_identity_passthrough():
    positions = np.array([[0.0, 1.0, 2.0], [3.5, -1.0, 0.25]])
    packed = np.array([0x25, 0xFFFF_FF13], dtype=np.uint32)
    out = transform_vertices(positions, packed, np.eye(4), np.eye(4), np.eye(4))
    assert np.allclose(out.clip_position[:, :3], positions)
    assert np.allclose(out.clip_position[:, 3], 1.0)
    assert np.array_equal(out.local_position, positions.astype(np.float32))
    assert np.array_equal(out.packed_block, packed)


def test_local_position_not_transformed():
    positions = np.array([[1.0, 2.0, 3.0]])
    out = transform_vertices(positions, [7], _translation(10, 0, 0), np.eye(4), np.eye(4))
    assert np.allclose(out.clip_position[0], (11, 2, 3, 1))
    assert np.allclose(out.local_position[0], (1, 2, 3))


def test_matrix_order_projection_view_model():
    model = _translation(1, 0, 0)
    view = np.diag([2.0, 2.0, 2.0, 1.0])
    projection = _translation(0, 0, -5)
    out = transform_vertices([[0, 0, 0]], [0], model, view, projection)
    assert np.allclose(out.clip_position[0], (2, 0, -5, 1))


def test_flat_matrices_are_column_major():
    m = _translation(4, 5, 6)
    flat = m.ravel(order='F')
    assert np.array_equal(as_matrix(flat), m)
    assert np.array_equal(as_matrix(m), m)


def test_instance_model_lookup():
    models = [_translation(0, 0, 0), _translation(0, 10, 0)]
    positions = np.zeros((3, 3))
    out = transform_vertices(positions, [0, 0, 0], models, np.eye(4), np.eye(4),
                             instance_indices=[1, 0, 1])
    assert np.allclose(out.clip_position[:, 1], [10, 0, 10])
