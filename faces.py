from collections import namedtuple
from enum import IntEnum

import numpy as np

BLOCK_TYPE_MASK = 0xF
FACE_ID_SHIFT = 4
FACE_ID_MASK = 0x7


class FaceId(IntEnum):
    POS_X = 0
    NEG_X = 1
    POS_Y = 2
    NEG_Y = 3
    POS_Z = 4
    NEG_Z = 5

    @classmethod
    def resolve(cls, face_id):
        """ Return the face whose behaviour applies to a raw 3 bit `face_id`.

        Ids 6 and 7 are unused by the mesher and fall back to NEG_Z.

        """
        face_id = int(face_id)
        if 0 <= face_id <= cls.NEG_Z:
            return cls(face_id)
        return cls.NEG_Z


# Outward normal per face, indexed by FaceId.
FACE_NORMALS = [
    ( 1, 0, 0), #pos x
    (-1, 0, 0), #neg x
    ( 0, 1, 0), #up
    ( 0,-1, 0), #down
    ( 0, 0, 1), #forward
    ( 0, 0,-1), #back
]


BlockDescriptor = namedtuple('BlockDescriptor', ['block_type', 'face_id'])


def decode(packed):
    """ Split a packed per-vertex descriptor into block type and face id.

    Parameters
    ----------
    packed : int
        32 bit descriptor; block type in bits 0-3, face id in bits 4-6.
        Higher bits are reserved and ignored.

    Returns
    -------
    descriptor : BlockDescriptor

    """
    packed = int(packed)
    return BlockDescriptor(packed & BLOCK_TYPE_MASK,
                           (packed >> FACE_ID_SHIFT) & FACE_ID_MASK)


def encode(block_type, face_id):
    """ Pack `block_type` and `face_id` into a descriptor. Out of range
    values are masked into their bit fields.

    """
    return ((int(block_type) & BLOCK_TYPE_MASK)
            | ((int(face_id) & FACE_ID_MASK) << FACE_ID_SHIFT))


def decode_array(packed):
    """ Vectorized `decode`: returns (block_types, face_ids) as uint8 arrays. """
    packed = np.asarray(packed).astype(np.uint32)
    block_types = (packed & BLOCK_TYPE_MASK).astype(np.uint8)
    face_ids = ((packed >> FACE_ID_SHIFT) & FACE_ID_MASK).astype(np.uint8)
    return block_types, face_ids


def encode_array(block_types, face_ids):
    block_types = np.asarray(block_types).astype(np.uint32) & BLOCK_TYPE_MASK
    face_ids = np.asarray(face_ids).astype(np.uint32) & FACE_ID_MASK
    return block_types | (face_ids << FACE_ID_SHIFT)
