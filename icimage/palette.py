"""
Palette codec: how (and whether) colors are stored inside a container.

Block layout, starting at the palette tag byte:

    NoData  [0]
    ID      [1][id hi][id lo]
    Name    [2][len][len bytes of UTF-8]
    Colors  [3][count][count * (r, g, b, a)]
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .color import Color
from .config import Config
from .const import PaletteType
from .errors import (
    InvalidFileFormat,
    PaletteIdOutOfRange,
    PaletteNameNotUtf8,
    PaletteNameTooLong,
    PaletteNameTooShort,
    PaletteTooManyColors,
)


@dataclass(frozen=True)
class FilePalette(object):
    """
    Palette descriptor written with every container.

    Use the factory methods rather than building one by hand:
    `FilePalette.no_data()`, `FilePalette.with_id(5)`,
    `FilePalette.with_name('pico-8')`, `FilePalette.colors()`.
    """
    type: PaletteType
    id: Optional[int] = None
    name: Optional[str] = None

    @staticmethod
    def no_data() -> 'FilePalette':
        """No palette information; the reader supplies colors."""
        return FilePalette(PaletteType.NO_DATA)

    @staticmethod
    def with_id(palette_id: int) -> 'FilePalette':
        """Palette id, the reader needs to know what it refers to."""
        if not 0 <= palette_id <= Config.MAX_PALETTE_ID:
            raise PaletteIdOutOfRange(palette_id)
        return FilePalette(PaletteType.ID, id=palette_id)

    @staticmethod
    def with_name(name: str) -> 'FilePalette':
        """Palette name (1..=255 UTF-8 bytes), checked when written."""
        return FilePalette(PaletteType.NAME, name=name)

    @staticmethod
    def colors() -> 'FilePalette':
        """Include the image's colors."""
        return FilePalette(PaletteType.COLORS)

    @property
    def tag(self) -> int:
        return self.type.value

    def __str__(self) -> str:
        if self.type == PaletteType.ID:
            return f"ID({self.id})"
        if self.type == PaletteType.NAME:
            return f"Name({self.name})"
        if self.type == PaletteType.COLORS:
            return "Colors"
        return "NoData"


# ============================================================================
# ENCODE / DECODE
# ============================================================================

def write(palette: FilePalette, colors: Sequence[Color], output: bytearray) -> None:
    """
    Append the palette block for `palette` to `output`.

    Args:
        palette: Descriptor to write
        colors: Image colors (only used for FilePalette.colors())
        output: Buffer to append to

    Raises:
        PaletteNameTooShort / PaletteNameTooLong: Name not 1..=255 bytes
        PaletteTooManyColors: More than 255 colors with FilePalette.colors()
        PaletteIdOutOfRange: ID does not fit in 16 bits
    """
    if palette.type == PaletteType.NO_DATA:
        output.append(palette.tag)
    elif palette.type == PaletteType.ID:
        if palette.id is None or not 0 <= palette.id <= Config.MAX_PALETTE_ID:
            raise PaletteIdOutOfRange(palette.id)
        output.append(palette.tag)
        output.extend(palette.id.to_bytes(2, 'big'))
    elif palette.type == PaletteType.NAME:
        name_bytes = (palette.name or '').encode('utf-8')
        if len(name_bytes) < 1:
            raise PaletteNameTooShort()
        if len(name_bytes) > Config.MAX_PALETTE_NAME_BYTES:
            raise PaletteNameTooLong(len(name_bytes))
        output.append(palette.tag)
        output.append(len(name_bytes))
        output.extend(name_bytes)
    else:
        if len(colors) > Config.MAX_PALETTE_COLORS:
            raise PaletteTooManyColors(len(colors))
        output.append(palette.tag)
        output.append(len(colors))
        for color in colors:
            output.extend((color.r, color.g, color.b, color.a))


def encode(palette: FilePalette, colors: Sequence[Color]) -> bytes:
    """Palette block for `palette` as bytes."""
    output = bytearray()
    write(palette, colors, output)
    return bytes(output)


def read(start_idx: int, data: bytes) -> Tuple[int, FilePalette, Optional[List[Color]]]:
    """
    Read a palette block starting at `start_idx`.

    Bytes after the block are ignored.

    Args:
        start_idx: Offset of the palette tag byte
        data: Whole container

    Returns:
        (bytes consumed, descriptor, colors or None when not embedded)

    Raises:
        InvalidFileFormat: Unknown tag or truncated block
        PaletteNameNotUtf8: Name bytes are not valid UTF-8
    """
    if len(data) <= start_idx:
        raise InvalidFileFormat(start_idx, "No data after header, expected palette format")
    pal_type = PaletteType.from_byte(data[start_idx])
    idx = start_idx + 1

    if pal_type == PaletteType.NO_DATA:
        return 1, FilePalette.no_data(), None

    if pal_type == PaletteType.ID:
        if len(data) < idx + 2:
            raise InvalidFileFormat(idx, "No data after palette format, expected ID")
        palette_id = int.from_bytes(data[idx:idx + 2], 'big')
        return 3, FilePalette.with_id(palette_id), None

    if pal_type == PaletteType.NAME:
        if len(data) <= idx:
            raise InvalidFileFormat(idx, "No data after palette format, expected palette name length")
        length = data[idx]
        if length == 0:
            raise InvalidFileFormat(idx, "Palette name length is 0")
        idx += 1
        if len(data) < idx + length:
            raise InvalidFileFormat(idx, "Incomplete data after palette name length, expected palette name")
        try:
            name = bytes(data[idx:idx + length]).decode('utf-8')
        except UnicodeDecodeError as e:
            raise PaletteNameNotUtf8(idx, e) from e
        return length + 2, FilePalette.with_name(name), None

    if pal_type == PaletteType.COLORS:
        if len(data) <= idx:
            raise InvalidFileFormat(idx, "No data after palette format, expected color count")
        count = data[idx]
        idx += 1
        end = count * 4
        if len(data) < idx + end:
            raise InvalidFileFormat(
                idx, f"Incomplete data after palette color count, expected {count} colors"
            )
        colors = [
            Color(data[pos], data[pos + 1], data[pos + 2], data[pos + 3])
            for pos in range(idx, idx + end, 4)
        ]
        return end + 2, FilePalette.colors(), colors

    raise InvalidFileFormat(start_idx, f"Unsupported palette type {data[start_idx]}")


def decode(data: bytes, offset: int = 0) -> Tuple[int, FilePalette, Optional[List[Color]]]:
    """Same as `read`, with the arguments in (data, offset) order."""
    return read(offset, data)


# ============================================================================
# PALETTE SIMPLIFICATION
# ============================================================================

def _distinct_count(colors: Sequence[Color]) -> int:
    return len(set(colors))


def simplify_palette(colors: Sequence[Color], threshold: int) -> List[Color]:
    """
    Merge colors whose difference is below `threshold`.

    Both colors are replaced by their midpoint, so the result keeps the same
    length (and every pixel index stays valid) but contains duplicates.
    A high threshold flattens gradients; 2 is a sensible start, 1020 the max.

    Args:
        colors: Palette to simplify
        threshold: Exclusive upper bound of `Color.diff` for a merge

    Returns:
        New list of colors, same length as `colors`
    """
    output = list(colors)
    if not output:
        return output
    idx = 0
    while True:
        color = output[idx]
        to_merge = None
        for i, cmp_color in enumerate(output):
            diff = color.diff(cmp_color)
            if idx != i and 0 < diff < threshold:
                to_merge = i
                break
        if to_merge is not None:
            merged = output[idx].mid(output[to_merge])
            output[idx] = merged
            output[to_merge] = merged
        else:
            idx += 1
            if idx >= len(output):
                break
    return output


def simplify_palette_to_fit(colors: Sequence[Color], max_colors: int) -> List[Color]:
    """Simplify with a growing threshold until there are fewer than `max_colors` distinct colors."""
    if max_colors < 2:
        raise ValueError("max_colors must be at least 2")
    output = list(colors)
    threshold = 2
    while _distinct_count(output) >= max_colors:
        output = simplify_palette(output, threshold)
        threshold += 10
    return output
