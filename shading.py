import numpy as np

from atlas import map_face, map_fragments
from faces import decode, decode_array


def sample_atlas(image, uv):
    """ Nearest-texel lookup with repeat wrapping.

    `image` is a top-down (H, W, C) array; uint8 images are converted to
    floats in [0, 1]. `uv` has shape (..., 2); the result has shape (..., C).
    """
    image = np.asarray(image)
    h, w = image.shape[:2]
    uv = np.asarray(uv, dtype=np.float64)
    u = uv[..., 0] - np.floor(uv[..., 0])
    v = uv[..., 1] - np.floor(uv[..., 1])
    col = np.minimum((u * w).astype(np.intp), w - 1)
    row = np.minimum((v * h).astype(np.intp), h - 1)
    texels = image[row, col]
    if image.dtype == np.uint8:
        texels = texels / 255.0
    return texels.astype(np.float32)


def apply_shade(color, shade):
    """ Return (1 - shade) * color for every channel, alpha included. """
    color = np.asarray(color, dtype=np.float32)
    shade = np.asarray(shade, dtype=np.float32)
    return np.expand_dims(1.0 - shade, -1) * color


def shade_fragment(packed, position, image, atlas_config):
    """ Final RGBA colour for a single fragment. """
    block_type, face_id = decode(packed)
    uv, shade = map_face(block_type, face_id, position, atlas_config)
    return apply_shade(sample_atlas(image, uv), shade)


def shade_fragments(packed, positions, image, atlas_config):
    """ CPU fragment stage: decode, map, sample and shade N fragments.

    Parameters
    ----------
    packed : array of N packed descriptors
    positions : (N, 3) array of object-space positions
    image : top-down atlas image
    atlas_config : AtlasConfig

    Returns
    -------
    colors : (N, C) float32 array

    """
    block_types, face_ids = decode_array(packed)
    uv, shade = map_fragments(block_types, face_ids, positions, atlas_config)
    return apply_shade(sample_atlas(image, uv), shade)
