"""
Wire-level constants and enums for ICI/ICA containers.
"""

from enum import Enum
from typing import Optional


MAGIC = b'ICI'
VERSION = 1
HEADER = MAGIC + bytes([VERSION])


class FileType(Enum):
    """Container type tag, stored right after the header."""
    IMAGE = 1
    ANIMATED = 2

    @property
    def display_name(self) -> str:
        if self is FileType.IMAGE:
            return 'Image'
        return 'Animated Image'

    @property
    def ext(self) -> str:
        if self is FileType.IMAGE:
            return 'ici'
        return 'ica'

    @classmethod
    def from_byte(cls, value: int) -> Optional['FileType']:
        try:
            return cls(value)
        except ValueError:
            return None


class PaletteType(Enum):
    """How palette data is stored in a container."""
    NO_DATA = 0
    ID = 1
    NAME = 2
    COLORS = 3

    @classmethod
    def from_byte(cls, value: int) -> Optional['PaletteType']:
        try:
            return cls(value)
        except ValueError:
            return None


class PlayType(Enum):
    """
    Animation playback modes.

    ONCE and ONCE_REVERSED start paused and stop (and reset) when finished.
    The three LOOPS* modes start playing and never stop on their own.
    """
    ONCE = 0  # 0 -> end, then reset
    ONCE_REVERSED = 1  # end -> 0, then reset
    LOOPS = 2  # 0 -> end, repeat
    LOOPS_REVERSED = 3  # end -> 0, repeat
    LOOPS_BOTH = 4  # 0 -> end -> 0, repeat

    @property
    def is_looping(self) -> bool:
        return self in (PlayType.LOOPS, PlayType.LOOPS_REVERSED, PlayType.LOOPS_BOTH)

    @classmethod
    def from_byte(cls, value: int) -> Optional['PlayType']:
        try:
            return cls(value)
        except ValueError:
            return None
