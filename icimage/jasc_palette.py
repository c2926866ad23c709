"""
JASC-PAL text palettes (Paint Shop Pro format).

    JASC-PAL
    0100
    <count>
    R G B [A]     one line per color, alpha only written when not 255
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from .color import Color


FILE_HEADER = 'JASC-PAL'
FILE_VER = '0100'


class ParseIssue(Enum):
    FILE_DESC = 'Error parsing the file type descriptor'
    VERSION = 'Error parsing the version'
    COLOR_COUNT = 'Error parsing the color count'
    COLOR_SPLITTING = 'Error splitting color'
    COLOR_NUMBERS = 'Error parsing color'


class PaletteError(ValueError):
    """
    A JASC-PAL file could not be read.

    `issue` is set for parse failures; `line` is the color number (0 based)
    for COLOR_SPLITTING and COLOR_NUMBERS.
    """

    INVALID_FILE_TYPE = 'Invalid file type'
    UNSUPPORTED_VERSION = 'Palette file version is not supported'
    INCORRECT_NUMBER_OF_COLORS = 'Palette file has the wrong number of colors'

    def __init__(self, message: str, issue: Optional[ParseIssue] = None, line: Optional[int] = None):
        self.issue = issue
        self.line = line
        super().__init__(message)

    @classmethod
    def parse(cls, issue: ParseIssue, line: Optional[int] = None) -> 'PaletteError':
        message = issue.value if line is None else f"{issue.value} {line}"
        return cls(message, issue, line)


def _parse_byte(text: str) -> Optional[int]:
    if not text.isdecimal():
        return None
    value = int(text)
    if value > 255:
        return None
    return value


@dataclass
class JascPalette(object):
    colors: List[Color] = field(default_factory=list)

    @staticmethod
    def from_colors(colors: Sequence[Color]) -> 'JascPalette':
        return JascPalette(list(colors))

    def to_file_contents(self) -> str:
        lines = [FILE_HEADER, FILE_VER, str(len(self.colors))]
        for color in self.colors:
            line = f"{color.r} {color.g} {color.b}"
            if color.a != 255:
                line += f" {color.a}"
            lines.append(line)
        return '\n'.join(lines) + '\n'

    @staticmethod
    def from_file_contents(text: str) -> 'JascPalette':
        """
        Parse JASC-PAL text.

        Raises:
            PaletteError: Wrong header, version or color count, or a bad color line
        """
        lines = text.splitlines()
        if not lines:
            raise PaletteError.parse(ParseIssue.FILE_DESC)
        if lines[0] != FILE_HEADER:
            raise PaletteError(PaletteError.INVALID_FILE_TYPE)
        if len(lines) < 2:
            raise PaletteError.parse(ParseIssue.VERSION)
        if lines[1] != FILE_VER:
            raise PaletteError(PaletteError.UNSUPPORTED_VERSION)
        if len(lines) < 3:
            raise PaletteError.parse(ParseIssue.COLOR_COUNT)
        count = _parse_byte(lines[2])
        if count is None:
            raise PaletteError.parse(ParseIssue.COLOR_COUNT)

        color_lines = lines[3:]
        if len(color_lines) != count:
            raise PaletteError(PaletteError.INCORRECT_NUMBER_OF_COLORS)

        colors = []
        for i, line in enumerate(color_lines):
            values = line.split()
            if len(values) not in (3, 4):
                raise PaletteError.parse(ParseIssue.COLOR_SPLITTING, i)
            channels = [_parse_byte(value) for value in values]
            if any(channel is None for channel in channels):
                raise PaletteError.parse(ParseIssue.COLOR_NUMBERS, i)
            colors.append(Color(*channels))
        return JascPalette(colors)

    def to_file(self, path: str) -> None:
        with open(path, 'w', encoding='utf-8', newline='\n') as fp:
            fp.write(self.to_file_contents())

    @staticmethod
    def from_file(path: str) -> 'JascPalette':
        with open(path, 'r', encoding='utf-8') as fp:
            return JascPalette.from_file_contents(fp.read())
