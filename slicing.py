import config
import logutil
from atlas import AtlasConfig

SCROLL_LINES = 'line'
SCROLL_PIXELS = 'pixel'


class SliceController(object):
    """ Tracks the highlighted terrain layer and moves it with the mouse
    wheel, clamped to the height of the volume.

    Every change produces a fresh AtlasConfig; configs handed out earlier
    are never modified.
    """

    def __init__(self, atlas_config=None, map_size_y=None):
        if atlas_config is None:
            atlas_config = AtlasConfig.from_config()
        self.map_size_y = map_size_y if map_size_y is not None else config.MAP_SIZE_Y
        if self.map_size_y < 1:
            raise ValueError(f"map_size_y must be >= 1, got {self.map_size_y}")
        self.atlas_config = atlas_config.with_slice(self.clamp(atlas_config.terrain_slice_y))

    @property
    def slice_y(self):
        return self.atlas_config.terrain_slice_y

    def clamp(self, slice_y):
        return max(0, min(int(slice_y), self.map_size_y - 1))

    def set_slice(self, slice_y):
        new_slice = self.clamp(slice_y)
        if new_slice != self.slice_y:
            self.atlas_config = self.atlas_config.with_slice(new_slice)
            logutil.log("SLICE", f"slice={new_slice}")
        return self.atlas_config

    def scroll(self, amount, unit=SCROLL_LINES):
        """ Apply a wheel event and return the current AtlasConfig.

        Line scrolls move the slice by int(amount) layers; pixel scrolls are
        logged and otherwise ignored.
        """
        if unit == SCROLL_PIXELS:
            logutil.log("SLICE", f"ignoring pixel scroll {amount}", level="DEBUG")
            return self.atlas_config
        return self.set_slice(self.slice_y + int(amount))
