# Atlas layout: the atlas image is a TEXTURE_COUNT x TEXTURE_COUNT grid of cells.
TEXTURE_COUNT = 4

# Atlas image. When missing, the viewer generates a debug atlas instead.
ATLAS_TEXTURE_PATH = 'terrain_atlas.png'
# Texels per cell edge for the generated debug atlas.
DEBUG_ATLAS_CELL_SIZE = 16

# Size of the voxel volume in blocks.
MAP_SIZE_X = 16
MAP_SIZE_Z = 16
MAP_SIZE_Y = 32
BLOCK_SIZE = 1.0

# Terrain generation: stone below STONE_HEIGHT, dirt up to DIRT_HEIGHT.
STONE_HEIGHT = 16
DIRT_HEIGHT = 24

# Horizontal layer highlighted at startup (block y coordinate).
TERRAIN_SLICE_Y = DIRT_HEIGHT

# Viewer window.
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
TICKS_PER_SEC = 60
FOV = 65.0
# Fly camera: start pose, mouse sensitivity, speed in blocks per second
# and the multiplier applied while shift is held.
CAMERA_START_POSITION = (-10.0, 0.0, -10.0)
CAMERA_START_TARGET = (5.0, 10.0, 10.0)
CAMERA_SENSITIVITY = 0.00012
CAMERA_SPEED = 20.0
CAMERA_SHIFT_MULTIPLIER = 2.0
CLEAR_COLOR = (0.5, 0.69, 1.0, 1.0)

# Minimum level printed by logutil: DEBUG, INFO, WARN or ERROR.
LOG_LEVEL = 'INFO'

# Enable ANSI colors in logs.
LOG_COLOR = True

# Log per-frame timings and frame boundaries.
LOG_MAIN_LOOP = False

# Dump the generated terrain layer by layer at DEBUG level.
LOG_TERRAIN_DUMP = False
