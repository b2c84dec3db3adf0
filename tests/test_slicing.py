import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from atlas import AtlasConfig
from slicing import SliceController, SCROLL_PIXELS


def test_scroll_moves_slice():
    ctl = SliceController(AtlasConfig(4, 10), map_size_y=32)
    assert ctl.scroll(3).terrain_slice_y == 13
    assert ctl.scroll(-5).terrain_slice_y == 8
    assert ctl.scroll(1.7).terrain_slice_y == 9


def test_scroll_clamps_to_volume():
    ctl = SliceController(AtlasConfig(4, 1), map_size_y=32)
    assert ctl.scroll(-10).terrain_slice_y == 0
    assert ctl.scroll(100).terrain_slice_y == 31


def test_initial_slice_clamped():
    ctl = SliceController(AtlasConfig(4, 50), map_size_y=8)
    assert ctl.slice_y == 7


def test_pixel_scroll_ignored():
    ctl = SliceController(AtlasConfig(4, 5), map_size_y=32)
    assert ctl.scroll(40, SCROLL_PIXELS).terrain_slice_y == 5


def test_changes_return_new_configs():
    first = AtlasConfig(4, 5)
    ctl = SliceController(first, map_size_y=32)
    before = ctl.atlas_config
    after = ctl.scroll(2)
    assert before.terrain_slice_y == 5
    assert after.terrain_slice_y == 7
    assert after.texture_count == 4
    assert first == AtlasConfig(4, 5)


def test_invalid_height():
    with pytest.raises(ValueError):
        SliceController(AtlasConfig(4, 0), map_size_y=0)
