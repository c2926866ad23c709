"""icimage package entrypoints."""

from .animated import AnimatedIndexedImage
from .color import BLACK, TRANSPARENT, WHITE, Color
from .const import FileType, PaletteType, PlayType
from .image import IndexedImage
from .jasc_palette import JascPalette, PaletteError
from .palette import FilePalette, simplify_palette, simplify_palette_to_fit
from .scaling import Scaling, ScalingType
from .timing import FrameTimer
from .wrapper import IndexedWrapper, load_bytes, load_file

__all__ = [
    'AnimatedIndexedImage', 'BLACK', 'Color', 'FilePalette', 'FileType', 'FrameTimer',
    'IndexedImage', 'IndexedWrapper', 'JascPalette', 'PaletteError', 'PaletteType',
    'PlayType', 'Scaling', 'ScalingType', 'TRANSPARENT', 'WHITE', 'load_bytes',
    'load_file', 'simplify_palette', 'simplify_palette_to_fit',
]
