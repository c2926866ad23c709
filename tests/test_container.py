import struct

import pytest

from icimage.animated import AnimatedIndexedImage
from icimage.color import TRANSPARENT, Color
from icimage.const import HEADER, FileType, PlayType
from icimage.errors import (
    DecodeError,
    InvalidFileFormat,
    NotIciFile,
    PaletteNameTooShort,
    UnknownFileType,
    UnknownIciVersion,
)
from icimage.file import expect_format, verify_format
from icimage.image import IndexedImage
from icimage.palette import FilePalette


COLORS = [TRANSPARENT, Color(50, 51, 52, 53), Color(60, 61, 62, 63)]
COLOR_BYTES = [0, 0, 0, 0, 50, 51, 52, 53, 60, 61, 62, 63]
PER_FRAME_BYTES = [63, 211, 51, 51, 51, 51, 51, 51]  # 0.3


def static_image():
    return IndexedImage(2, 2, COLORS, [0, 0, 1, 2])


def animated_image(frame_count=2, pixels=(0, 0, 1, 2, 1, 2, 1, 0), play_type=PlayType.ONCE):
    return AnimatedIndexedImage(2, 2, 0.3, frame_count, COLORS, list(pixels), play_type)


def static_header(*palette_block):
    return HEADER + bytes([FileType.IMAGE.value, *palette_block])


def animated_header(*palette_block):
    return HEADER + bytes([FileType.ANIMATED.value, *palette_block])


# ============================================================================
# HEADER
# ============================================================================

def test_verify_format():
    assert verify_format(b'ICI\x01\x01') == FileType.IMAGE
    assert verify_format(b'ICI\x01\x02') == FileType.ANIMATED
    assert expect_format(b'ICI\x01\x01\x00', FileType.IMAGE) == (FileType.IMAGE, 5)


def test_bad_magic():
    for data in (b'', b'IC', b'PNG\x01\x01', b'ici\x01\x01'):
        with pytest.raises(NotIciFile) as exc:
            verify_format(data)
        assert exc.value.offset == 0


def test_missing_version_and_type():
    with pytest.raises(InvalidFileFormat) as exc:
        verify_format(b'ICI')
    assert exc.value.offset == 3

    with pytest.raises(InvalidFileFormat) as exc:
        verify_format(b'ICI\x01')
    assert exc.value.offset == 4


def test_unknown_version():
    with pytest.raises(UnknownIciVersion) as exc:
        IndexedImage.from_file_contents(b'ICI\x02\x01\x00\x01\x01\x00')
    assert exc.value.offset == 3
    assert exc.value.version == 2


def test_unknown_file_type_names_expected_type():
    with pytest.raises(UnknownFileType) as exc:
        IndexedImage.from_file_contents(b'ICI\x01\x09\x00\x01\x01\x00')
    assert exc.value.offset == 4
    assert "expected Image file" in str(exc.value)

    with pytest.raises(UnknownFileType) as exc:
        AnimatedIndexedImage.from_file_contents(b'ICI\x01\x00')
    assert "expected Animated Image file" in str(exc.value)


def test_wrong_container_type():
    data = animated_image().to_file_contents(FilePalette.no_data())
    with pytest.raises(InvalidFileFormat) as exc:
        IndexedImage.from_file_contents(data)
    assert exc.value.offset == 4

    data = static_image().to_file_contents(FilePalette.no_data())
    with pytest.raises(InvalidFileFormat) as exc:
        AnimatedIndexedImage.from_file_contents(data)
    assert exc.value.offset == 4


# ============================================================================
# STATIC
# ============================================================================

def test_static_colors_bytes():
    data = static_image().to_file_contents(FilePalette.colors())
    assert data == static_header(3, 3, *COLOR_BYTES, 2, 2, 0, 0, 1, 2)

    image, palette = IndexedImage.from_file_contents(data)
    assert palette == FilePalette.colors()
    assert image == static_image()
    assert image.to_file_contents(FilePalette.colors()) == data


def test_static_no_data_fabricates_transparent_palette():
    data = static_image().to_file_contents(FilePalette.no_data())
    assert data == static_header(0, 2, 2, 0, 0, 1, 2)

    image, palette = IndexedImage.from_file_contents(data)
    assert palette == FilePalette.no_data()
    assert image.get_palette() == [TRANSPARENT, TRANSPARENT, TRANSPARENT]

    image.set_palette(COLORS)
    assert image == static_image()


def test_static_id_and_name():
    data = static_image().to_file_contents(FilePalette.with_id(15))
    assert data == static_header(1, 0, 15, 2, 2, 0, 0, 1, 2)
    image, palette = IndexedImage.from_file_contents(data)
    assert palette.id == 15
    assert len(image.get_palette()) == 3

    data = static_image().to_file_contents(FilePalette.with_name('Test'))
    assert data == static_header(2, 4, *b'Test', 2, 2, 0, 0, 1, 2)
    image, palette = IndexedImage.from_file_contents(data)
    assert palette.name == 'Test'
    image.set_palette(COLORS)
    assert image == static_image()


def test_static_encode_is_idempotent():
    image = static_image()
    for palette in (FilePalette.no_data(), FilePalette.with_id(3), FilePalette.colors()):
        assert image.to_file_contents(palette) == image.to_file_contents(palette)


def test_static_trailing_bytes_ignored():
    data = static_image().to_file_contents(FilePalette.colors()) + b'\x01\x02\x03'
    image, _ = IndexedImage.from_file_contents(data)
    assert image == static_image()


def test_static_smallest_file():
    image, palette = IndexedImage.from_file_contents(static_header(0, 1, 1, 0))
    assert image.size == (1, 1)
    assert image.get_palette() == [TRANSPARENT]
    assert palette == FilePalette.no_data()


def test_static_zero_geometry():
    with pytest.raises(InvalidFileFormat) as exc:
        IndexedImage.from_file_contents(static_header(0, 0, 2))
    assert exc.value.offset == 6

    with pytest.raises(InvalidFileFormat) as exc:
        IndexedImage.from_file_contents(static_header(0, 2, 0))
    assert exc.value.offset == 7


def test_static_truncated():
    with pytest.raises(InvalidFileFormat) as exc:
        IndexedImage.from_file_contents(static_header(0, 2))
    assert exc.value.offset == 6

    with pytest.raises(InvalidFileFormat) as exc:
        IndexedImage.from_file_contents(static_header(0, 2, 2, 0, 0, 1))
    assert exc.value.offset == 8

    with pytest.raises(InvalidFileFormat) as exc:
        IndexedImage.from_file_contents(static_header(1, 0))
    assert exc.value.offset == 6


def test_static_empty_color_table():
    with pytest.raises(InvalidFileFormat) as exc:
        IndexedImage.from_file_contents(static_header(3, 0, 1, 1, 0))
    assert exc.value.offset == 6


def test_static_file_round_trip(tmp_path):
    path = str(tmp_path / 'test.ici')
    static_image().to_file(path, FilePalette.colors())
    image, palette = IndexedImage.from_file(path)
    assert image == static_image()
    assert palette == FilePalette.colors()


# ============================================================================
# ANIMATED
# ============================================================================

def test_animated_no_data_bytes():
    data = animated_image().to_file_contents(FilePalette.no_data())
    assert data == animated_header(0, 2, 2, 0, 2, *PER_FRAME_BYTES, 0, 0, 1, 2, 1, 2, 1, 0)

    image, palette = AnimatedIndexedImage.from_file_contents(data)
    assert palette == FilePalette.no_data()
    assert image.get_palette() == [TRANSPARENT] * 3
    assert image.frame_count == 2
    assert image.get_per_frame() == 0.3
    assert image.play_type == PlayType.ONCE

    image.set_palette(COLORS)
    assert image == animated_image()


def test_animated_id_bytes():
    pixels = (0, 0, 1, 2, 0, 0, 1, 2, 2, 1, 0, 0)
    source = animated_image(3, pixels, PlayType.ONCE_REVERSED)
    data = source.to_file_contents(FilePalette.with_id(15))
    assert data == animated_header(1, 0, 15, 2, 2, 1, 3, *PER_FRAME_BYTES, *pixels)

    image, palette = AnimatedIndexedImage.from_file_contents(data)
    assert palette == FilePalette.with_id(15)
    image.set_palette(COLORS)
    assert image == source


def test_animated_name_bytes():
    source = animated_image(play_type=PlayType.LOOPS)
    data = source.to_file_contents(FilePalette.with_name('Test'))
    assert data == animated_header(2, 4, *b'Test', 2, 2, 2, 2, *PER_FRAME_BYTES, 0, 0, 1, 2, 1, 2, 1, 0)

    image, palette = AnimatedIndexedImage.from_file_contents(data)
    assert palette.name == 'Test'
    image.set_palette(COLORS)
    assert image == source


def test_animated_colors_bytes():
    pixels = (0, 0, 1, 2, 1, 2, 1, 0, 0, 0, 0, 1, 2, 1, 2, 1)
    source = animated_image(4, pixels, PlayType.LOOPS_BOTH)
    data = source.to_file_contents(FilePalette.colors())
    assert data == animated_header(3, 3, *COLOR_BYTES, 2, 2, 4, 4, *PER_FRAME_BYTES, *pixels)

    image, palette = AnimatedIndexedImage.from_file_contents(data + b'\xff')
    assert palette == FilePalette.colors()
    assert image == source


def with_field(data: bytes, offset: int, value: int) -> bytes:
    output = bytearray(data)
    output[offset] = value
    return bytes(output)


def test_animated_bad_fields():
    data = animated_image().to_file_contents(FilePalette.no_data())

    with pytest.raises(InvalidFileFormat) as exc:
        AnimatedIndexedImage.from_file_contents(with_field(data, 6, 0))
    assert exc.value.offset == 6

    with pytest.raises(InvalidFileFormat) as exc:
        AnimatedIndexedImage.from_file_contents(with_field(data, 8, 5))
    assert exc.value.offset == 8

    with pytest.raises(InvalidFileFormat) as exc:
        AnimatedIndexedImage.from_file_contents(with_field(data, 9, 0))
    assert exc.value.offset == 9
    assert "no frames" in str(exc.value)


def test_animated_bad_per_frame():
    header = animated_header(0, 1, 1, 2, 1)
    for per_frame in (0.0, -1.0):
        data = header + struct.pack('>d', per_frame) + b'\x00'
        with pytest.raises(InvalidFileFormat) as exc:
            AnimatedIndexedImage.from_file_contents(data)
        assert exc.value.offset == 10


def test_animated_truncated():
    data = animated_image().to_file_contents(FilePalette.no_data())

    with pytest.raises(InvalidFileFormat) as exc:
        AnimatedIndexedImage.from_file_contents(data[:12])
    assert exc.value.offset == 6

    with pytest.raises(InvalidFileFormat) as exc:
        AnimatedIndexedImage.from_file_contents(data[:-1])
    assert exc.value.offset == 18


def test_decode_errors_share_base_class():
    for data in (b'', b'ICI\x05', b'ICI\x01\x01\x07'):
        with pytest.raises(DecodeError):
            IndexedImage.from_file_contents(data)


def test_animated_file_round_trip(tmp_path):
    path = str(tmp_path / 'test.ica')
    animated_image().to_file(path, FilePalette.colors())
    image, _ = AnimatedIndexedImage.from_file(path)
    assert image == animated_image()


def test_failed_encode_keeps_existing_file(tmp_path):
    path = tmp_path / 'test.ici'
    static_image().to_file(str(path), FilePalette.colors())
    before = path.read_bytes()

    with pytest.raises(PaletteNameTooShort):
        static_image().to_file(str(path), FilePalette.with_name(''))
    assert path.read_bytes() == before

    anim_path = tmp_path / 'test.ica'
    animated_image().to_file(str(anim_path), FilePalette.colors())
    anim_before = anim_path.read_bytes()
    with pytest.raises(PaletteNameTooShort):
        animated_image().to_file(str(anim_path), FilePalette.with_name(''))
    assert anim_path.read_bytes() == anim_before
