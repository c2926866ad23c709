"""
Exceptions raised by icimage.

Every failure is reported by raising one of these; nothing is retried and
no partial result is returned.
"""


class IndexedImageError(ValueError):
    """Base class for all icimage errors."""


# ============================================================================
# DECODE ERRORS
# ============================================================================

class DecodeError(IndexedImageError):
    """Raised while reading a container; `offset` is where the problem was found."""

    def __init__(self, offset: int, message: str):
        self.offset = offset
        self.message = message
        super().__init__(f"Invalid file format/contents at {offset}: {message}")


class NotIciFile(DecodeError):
    def __init__(self, offset: int = 0):
        super().__init__(offset, "Invalid file header")


class UnknownIciVersion(DecodeError):
    def __init__(self, version: int, offset: int = 3):
        self.version = version
        super().__init__(offset, f"Unsupported ICI version {version}")


class UnknownFileType(DecodeError):
    def __init__(self, value: int, offset: int = 4, expected: str = None):
        self.value = value
        self.expected = expected
        message = f"Unsupported file type {value}"
        if expected:
            message += f", expected {expected} file"
        super().__init__(offset, message)


class InvalidFileFormat(DecodeError):
    pass


class PaletteNameNotUtf8(DecodeError):
    def __init__(self, offset: int, reason: UnicodeDecodeError):
        self.reason = reason
        super().__init__(offset, f"Palette name was not valid UTF-8 ({reason.reason})")


# ============================================================================
# PALETTE ERRORS
# ============================================================================

class PaletteNameTooShort(IndexedImageError):
    def __init__(self):
        super().__init__("Palette name must have at least 1 character")


class PaletteNameTooLong(IndexedImageError):
    def __init__(self, length: int):
        self.length = length
        super().__init__(f"Palette name has more than 255 bytes ({length})")


class PaletteTooManyColors(IndexedImageError):
    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Palette has more than 255 colors ({count})")


class PaletteIdOutOfRange(IndexedImageError):
    def __init__(self, palette_id: int):
        self.palette_id = palette_id
        super().__init__(f"Palette id {palette_id} does not fit in 16 bits")


class PaletteTooFewColors(IndexedImageError):
    def __init__(self, required: int):
        self.required = required
        super().__init__(f"Image requires a palette with at least {required} colors")


class IdOutsideOfNewPalette(IndexedImageError):
    def __init__(self, palette_id: int, palette_len: int):
        self.palette_id = palette_id
        self.palette_len = palette_len
        super().__init__(f"ID {palette_id} was outside of new palette (len {palette_len})")


class PaletteIsEmpty(IndexedImageError):
    def __init__(self):
        super().__init__("Palette is empty")


# ============================================================================
# GEOMETRY / ACCESS ERRORS
# ============================================================================

class WidthIsZero(IndexedImageError):
    def __init__(self):
        super().__init__("Image width is 0")


class HeightIsZero(IndexedImageError):
    def __init__(self):
        super().__init__("Image height is 0")


class DimensionTooLarge(IndexedImageError):
    def __init__(self, name: str, value: int, limit: int):
        self.name = name
        self.value = value
        self.limit = limit
        super().__init__(f"Image {name} {value} is larger than {limit}")


class TooManyFrames(IndexedImageError):
    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Animation must have 1..=255 frames, found {count}")


class MissingData(IndexedImageError):
    def __init__(self, count: int, expected: int):
        self.count = count
        self.expected = expected
        super().__init__(f"Missing pixels data, count: {count} expected: {expected}")


class IndexOutOfRange(IndexedImageError, IndexError):
    def __init__(self, index: int, limit: int, name: str):
        self.index = index
        self.limit = limit
        self.name = name
        super().__init__(f"Index {index} was outside of {name} (len {limit})")


# ============================================================================
# SCALING / TIMING ERRORS
# ============================================================================

class InvalidScaleParams(IndexedImageError):
    def __init__(self, x_scale: int, y_scale: int):
        self.x_scale = x_scale
        self.y_scale = y_scale
        super().__init__(f"Invalid scale params: {x_scale}, {y_scale} (must be > 0)")


class TooBigPostScale(IndexedImageError):
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        super().__init__(f"Image would be too big after scaling ({width}x{height}), max is 255x255")


class NegativePerFrame(IndexedImageError):
    def __init__(self, per_frame: float):
        self.per_frame = per_frame
        super().__init__(f"Per frame timing must be greater than 0: {per_frame}")
