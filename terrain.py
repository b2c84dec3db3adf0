from collections import namedtuple
from enum import IntEnum

import numpy as np

import config
import logutil
from faces import FaceId, FACE_NORMALS, encode_array


class Block(IntEnum):
    """ Block kinds. The value is also the block's atlas cell index. """
    OOB = 0
    EMPTY = 1
    DIRT = 2
    STONE = 3

    @property
    def is_filled(self):
        return self in (Block.DIRT, Block.STONE)

    def __str__(self):
        return self.name.title()


_FILLED = np.zeros(max(Block) + 1, dtype=bool)
_FILLED[[Block.DIRT, Block.STONE]] = True

# Corners of each face of the unit cube at the origin, counter-clockwise
# seen from outside, indexed by FaceId.
FACE_CORNERS = np.array([
        [(1,0,1), (1,0,0), (1,1,0), (1,1,1)],  # pos x
        [(0,0,0), (0,0,1), (0,1,1), (0,1,0)],  # neg x
        [(0,1,0), (0,1,1), (1,1,1), (1,1,0)],  # top
        [(0,0,0), (1,0,0), (1,0,1), (0,0,1)],  # bottom
        [(0,0,1), (1,0,1), (1,1,1), (0,1,1)],  # front
        [(1,0,0), (0,0,0), (0,1,0), (1,1,0)],  # back
], dtype=np.float32)

QUAD_INDICES = np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32)

Mesh = namedtuple('Mesh', ['positions', 'packed', 'indices'])


class Terrain(object):
    """ Fixed size voxel volume indexed as blocks[x, y, z]. """

    def __init__(self, size_x=None, size_y=None, size_z=None):
        self.size_x = size_x if size_x is not None else config.MAP_SIZE_X
        self.size_y = size_y if size_y is not None else config.MAP_SIZE_Y
        self.size_z = size_z if size_z is not None else config.MAP_SIZE_Z
        self.blocks = np.full((self.size_x, self.size_y, self.size_z), Block.EMPTY, dtype=np.uint8)

    @property
    def shape(self):
        return self.blocks.shape

    def is_pos_oob(self, x, y, z):
        return (x < 0 or y < 0 or z < 0
                or x >= self.size_x or y >= self.size_y or z >= self.size_z)

    def get(self, x, y, z):
        if self.is_pos_oob(x, y, z):
            return Block.OOB
        return Block(int(self.blocks[x, y, z]))

    def set(self, x, y, z, block):
        if self.is_pos_oob(x, y, z):
            raise IndexError(f"block position {(x, y, z)} outside terrain {self.shape}")
        self.blocks[x, y, z] = Block(block)

    def get_neighbors(self, x, y, z):
        """ Return the 26 blocks around (x, y, z), iterating x, then z, then y. """
        neighbors = []
        for dx in (-1, 0, 1):
            for dz in (-1, 0, 1):
                for dy in (-1, 0, 1):
                    if dx == 0 and dy == 0 and dz == 0:
                        continue
                    neighbors.append(self.get(x + dx, y + dy, z + dz))
        return neighbors

    def filled_mask(self):
        return _FILLED[self.blocks]

    def generate(self):
        """ Fill the volume with stone below STONE_HEIGHT and dirt up to
        DIRT_HEIGHT; everything above stays empty.

        """
        stone = min(getattr(config, 'STONE_HEIGHT', 16), self.size_y)
        dirt = min(getattr(config, 'DIRT_HEIGHT', 24), self.size_y)
        self.blocks[:] = Block.EMPTY
        self.blocks[:, :stone, :] = Block.STONE
        self.blocks[:, stone:dirt, :] = Block.DIRT
        logutil.log("TERRAIN", f"generated {self.shape} stone<{stone} dirt<{dirt}")
        if getattr(config, 'LOG_TERRAIN_DUMP', False):
            self.debug_dump()
        return self

    def layer_rows(self, z):
        """ Text rows for the layer at `z`, bottom row first, one block name
        per column (e.g. "StoneStoneDirt").

        """
        return [''.join(str(Block(int(b))) for b in self.blocks[:, y, z])
                for y in range(self.size_y)]

    def debug_dump(self):
        for z in range(self.size_z):
            logutil.log("TERRAIN", f"z={z}", level="DEBUG")
            for row in self.layer_rows(z):
                logutil.log("TERRAIN", row, level="DEBUG")

    def build_mesh(self):
        """ Build one quad per filled block face not covered by a filled
        neighbour.

        Returns
        -------
        mesh : Mesh
            positions : (4*Q, 3) float32 object-space corner positions
            packed : (4*Q,) uint32 packed block descriptors
            indices : (6*Q,) uint32 triangle indices

        """
        sx, sy, sz = self.shape
        filled = self.filled_mask()
        padded = np.pad(filled, 1, mode='constant', constant_values=False)
        block_size = getattr(config, 'BLOCK_SIZE', 1.0)
        positions = []
        packed = []
        for face in FaceId:
            dx, dy, dz = FACE_NORMALS[face]
            neighbor = padded[1 + dx:1 + dx + sx, 1 + dy:1 + dy + sy, 1 + dz:1 + dz + sz]
            exposed = filled & ~neighbor
            coords = np.argwhere(exposed)
            if len(coords) == 0:
                continue
            corners = coords[:, np.newaxis, :].astype(np.float32) + FACE_CORNERS[face][np.newaxis, :, :]
            positions.append(corners.reshape(-1, 3) * block_size)
            packed.append(np.repeat(encode_array(self.blocks[exposed], int(face)), 4))

        if not positions:
            return Mesh(np.zeros((0, 3), dtype=np.float32),
                        np.zeros(0, dtype=np.uint32),
                        np.zeros(0, dtype=np.uint32))

        positions = np.concatenate(positions).astype(np.float32)
        packed = np.concatenate(packed).astype(np.uint32)
        quads = len(positions) // 4
        base = np.arange(quads, dtype=np.uint32) * 4
        indices = (base[:, np.newaxis] + QUAD_INDICES[np.newaxis, :]).ravel()
        logutil.log("TERRAIN", f"mesh built: {quads} faces", level="DEBUG")
        return Mesh(positions, packed, indices)
