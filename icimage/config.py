"""
Configuration constants for icimage.
"""

from .const import MAGIC, VERSION


class Config:
    """Configuration constants for icimage."""

    # Container format
    MAGIC = MAGIC
    VERSION = VERSION
    MAX_DIMENSION = 255
    MAX_FRAMES = 255
    MAX_PALETTE_COLORS = 255
    MAX_PALETTE_NAME_BYTES = 255
    MAX_PALETTE_ID = 0xFFFF

    # File extensions
    STATIC_EXT = '.ici'
    ANIMATED_EXT = '.ica'

    # Output
    OUTPUT_DIR = 'out'
    DEFAULT_SCALE = 1
    DEFAULT_ANIMATION_FORMAT = 'webp'  # webp or gif
    DEFAULT_FRAME_MS = 100  # used when per_frame rounds below 1 ms

    # Importing RGB images quantizes down to this many colors
    QUANTIZE_COLORS = 255

    DEBUG_MODE = False
