"""
atlas.py - face to atlas cell mapping

Maps a (block type, face, object-space position) triple to a normalized UV
in the shared terrain atlas plus the per-face shade factor. The atlas is a
square grid of texture_count x texture_count cells; block types are laid
out row-major, left to right and top to bottom, and every face of a block
samples the same cell.

Top faces (POS_Y) lying in the highlighted slice ignore the block type and
sample the top-left cell unshaded, so the selected layer stands out.

All functions here are pure. texture_count >= 1 is a precondition of the
mapping functions; AtlasConfig enforces it at construction.
"""

import colorsys
import math
from collections import namedtuple
from typing import Tuple

import numpy as np

import config
from faces import FaceId

# Fraction of the sampled colour removed per face. Top faces are brightest,
# bottom faces darkest.
SHADE_TABLE = {
    FaceId.POS_X: 0.1,
    FaceId.NEG_X: 0.4,
    FaceId.POS_Y: 0.0,
    FaceId.NEG_Y: 0.8,
    FaceId.POS_Z: 0.2,
    FaceId.NEG_Z: 0.5,
}

# Position axes (0=x, 1=y, 2=z) forming the in-cell (u, v) per face.
FACE_AXES = {
    FaceId.POS_X: (1, 2),
    FaceId.NEG_X: (1, 2),
    FaceId.POS_Y: (0, 2),
    FaceId.NEG_Y: (0, 2),
    FaceId.POS_Z: (0, 1),
    FaceId.NEG_Z: (0, 1),
}

_SHADE_ARRAY = np.array([SHADE_TABLE[f] for f in FaceId], dtype=np.float64)
_AXES_ARRAY = np.array([FACE_AXES[f] for f in FaceId], dtype=np.intp)


class AtlasConfig(namedtuple('AtlasConfig', ['texture_count', 'terrain_slice_y'])):
    """ Per-draw read-only settings for the atlas mapping.

    texture_count : int
        Atlas grid dimension (texture_count x texture_count cells), >= 1.
    terrain_slice_y : int
        Block layer whose top faces render highlighted, >= 0.

    Instances are immutable; use `with_slice` to move the highlight.
    """
    __slots__ = ()

    def __new__(cls, texture_count, terrain_slice_y=0):
        texture_count = int(texture_count)
        terrain_slice_y = int(terrain_slice_y)
        if texture_count < 1:
            raise ValueError(f"texture_count must be >= 1, got {texture_count}")
        if terrain_slice_y < 0:
            raise ValueError(f"terrain_slice_y must be >= 0, got {terrain_slice_y}")
        return super().__new__(cls, texture_count, terrain_slice_y)

    @classmethod
    def from_config(cls):
        return cls(getattr(config, 'TEXTURE_COUNT', 1),
                   getattr(config, 'TERRAIN_SLICE_Y', 0))

    def with_slice(self, terrain_slice_y):
        return AtlasConfig(self.texture_count, terrain_slice_y)


def fract(p):
    """ Fractional part within the unit cube, always in [0, 1). """
    return p - math.floor(p)


def cell_origin(block_type, texture_count):
    """ Return the (column, row) of the atlas cell holding `block_type`. """
    return block_type % texture_count, block_type // texture_count


def map_face(block_type, face_id, position, atlas_config) -> Tuple[Tuple[float, float], float]:
    """ Map one fragment to its atlas UV and shade.

    Parameters
    ----------
    block_type : int
        Decoded block type (0-15).
    face_id : int
        Decoded face id (0-7); ids past NEG_Z behave like NEG_Z.
    position : sequence of 3 floats
        Object-space position of the fragment.
    atlas_config : AtlasConfig

    Returns
    -------
    uv : tuple of 2 floats
        Normalized atlas coordinate. A highlighted top face is normalized
        too: its in-cell (fract(x), fract(z)) lands in the top-left cell, so
        with texture_count=4 (0.3, 0.7) comes back as (0.075, 0.175).
    shade : float
        Fraction of the sampled colour to remove.

    """
    n = atlas_config.texture_count
    face = FaceId.resolve(face_id)
    frac = [fract(c) for c in position]
    u_axis, v_axis = FACE_AXES[face]
    column, row = cell_origin(int(block_type), n)
    if face == FaceId.POS_Y and math.floor(position[1]) == atlas_config.terrain_slice_y:
        column, row = 0, 0
    uv = ((column + frac[u_axis]) / n, (row + frac[v_axis]) / n)
    return uv, SHADE_TABLE[face]


def map_fragments(block_types, face_ids, positions, atlas_config):
    """ Vectorized `map_face` over N fragments.

    Returns (uv, shade) with shapes (N, 2) and (N,), element-wise equal to
    calling `map_face` per fragment.
    """
    n = atlas_config.texture_count
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    block_types = np.asarray(block_types).astype(np.int64).ravel()
    face_ids = np.asarray(face_ids).astype(np.int64).ravel()

    faces = np.where((face_ids < 0) | (face_ids > FaceId.NEG_Z), int(FaceId.NEG_Z), face_ids)
    floors = np.floor(positions)
    frac = positions - floors
    local = np.take_along_axis(frac, _AXES_ARRAY[faces], axis=1)

    origin = np.stack([block_types % n, block_types // n], axis=1).astype(np.float64)
    highlight = (faces == FaceId.POS_Y) & (floors[:, 1] == atlas_config.terrain_slice_y)
    origin[highlight] = 0.0

    uv = (origin + local) / n
    return uv, _SHADE_ARRAY[faces]


def make_debug_atlas(texture_count, cell_size=None):
    """ Build a placeholder atlas: one flat colour per cell with a darker
    one texel border.

    Returns a top-down (row 0 is the top of the atlas) uint8 RGBA array of
    shape (texture_count * cell_size, texture_count * cell_size, 4).
    """
    if cell_size is None:
        cell_size = getattr(config, 'DEBUG_ATLAS_CELL_SIZE', 16)
    if cell_size < 1:
        raise ValueError(f"cell_size must be >= 1, got {cell_size}")
    n = AtlasConfig(texture_count).texture_count
    size = n * cell_size
    image = np.empty((size, size, 4), dtype=np.uint8)
    image[..., 3] = 255
    border = np.zeros((cell_size, cell_size), dtype=bool)
    border[[0, -1], :] = True
    border[:, [0, -1]] = True
    for index in range(n * n):
        column, row = cell_origin(index, n)
        rgb = np.array(colorsys.hsv_to_rgb(index / (n * n), 0.6, 0.9)) * 255
        cell = np.broadcast_to(rgb, (cell_size, cell_size, 3)).copy()
        cell[border] *= 0.6
        y0, x0 = row * cell_size, column * cell_size
        image[y0:y0 + cell_size, x0:x0 + cell_size, :3] = np.rint(cell).astype(np.uint8)
    return image
