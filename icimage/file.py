"""
Container framing shared by the static and animated codecs.

    offset 0  'I' 'C' 'I'
    offset 3  version (1)
    offset 4  file type (1 = image, 2 = animated)
    offset 5  palette block, see palette.py
"""

from typing import Optional, Tuple

from .const import HEADER, MAGIC, FileType
from .errors import InvalidFileFormat, NotIciFile, UnknownFileType, UnknownIciVersion


FILE_TYPE_OFFSET = len(HEADER)
PALETTE_OFFSET = FILE_TYPE_OFFSET + 1
ANY_FILE_TYPE = " or ".join(file_type.display_name for file_type in FileType)


def write_header(file_type: FileType, output: bytearray) -> None:
    output.extend(HEADER)
    output.append(file_type.value)


def verify_format(data: bytes, expected: Optional[FileType] = None) -> FileType:
    """
    Check magic, version and type tag.

    Args:
        data: Whole container
        expected: Named in the error message if the type byte is unknown,
            otherwise every known type is listed

    Returns:
        The container's FileType

    Raises:
        NotIciFile: Missing or wrong magic
        UnknownIciVersion: Magic matches but version isn't supported
        InvalidFileFormat: No type byte
        UnknownFileType: Type byte isn't 1 or 2
    """
    if len(data) < len(MAGIC) or bytes(data[:len(MAGIC)]) != MAGIC:
        raise NotIciFile(0)
    if len(data) < len(HEADER):
        raise InvalidFileFormat(len(MAGIC), "Missing version byte")
    version = data[len(MAGIC)]
    if version != HEADER[-1]:
        raise UnknownIciVersion(version, len(MAGIC))
    if len(data) <= FILE_TYPE_OFFSET:
        raise InvalidFileFormat(FILE_TYPE_OFFSET, "No data after header, expected file type")
    file_type = FileType.from_byte(data[FILE_TYPE_OFFSET])
    if file_type is None:
        raise UnknownFileType(
            data[FILE_TYPE_OFFSET],
            FILE_TYPE_OFFSET,
            expected.display_name if expected else ANY_FILE_TYPE,
        )
    return file_type


def expect_format(data: bytes, expected: FileType) -> Tuple[FileType, int]:
    """
    Like `verify_format` but also requires a specific type.

    Returns:
        (file type, offset of the palette block)
    """
    file_type = verify_format(data, expected)
    if file_type != expected:
        raise InvalidFileFormat(
            FILE_TYPE_OFFSET,
            f"Expected {expected.display_name} file but found {file_type.display_name}",
        )
    return file_type, PALETTE_OFFSET
