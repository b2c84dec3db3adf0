from collections import namedtuple

import numpy as np

VertexOutput = namedtuple('VertexOutput', ['clip_position', 'local_position', 'packed_block'])


def as_matrix(m):
    """ Return `m` as a row-major (4, 4) float64 array.

    Flat 16-element sequences (pyglet Mat4, GL uniform data) are column-major.
    """
    arr = np.asarray(m, dtype=np.float64)
    if arr.shape == (4, 4):
        return arr
    return arr.reshape(4, 4).T


def instance_models(instance_indices, model_matrices):
    """ Look up the model matrix for each vertex's instance. """
    matrices = np.stack([as_matrix(m) for m in model_matrices])
    return matrices[np.asarray(instance_indices, dtype=np.intp)]


def transform_vertices(positions, packed, model, view, projection, instance_indices=None):
    """ Vertex stage for N vertices.

    Positions are transformed to clip space with projection * view * model;
    the object-space positions and packed descriptors pass through untouched
    for the fragment stage.

    When `instance_indices` is given, `model` is a sequence of per-instance
    model matrices and each vertex uses the matrix of its instance.
    """
    local = np.asarray(positions, dtype=np.float32).reshape(-1, 3)
    packed = np.asarray(packed, dtype=np.uint32).ravel()
    homogeneous = np.hstack([local.astype(np.float64), np.ones((len(local), 1))])
    view_projection = as_matrix(projection) @ as_matrix(view)
    if instance_indices is None:
        clip = homogeneous @ (view_projection @ as_matrix(model)).T
    else:
        models = instance_models(instance_indices, model)
        clip = np.einsum('ij,njk,nk->ni', view_projection, models, homogeneous)
    return VertexOutput(clip.astype(np.float32), local, packed)
