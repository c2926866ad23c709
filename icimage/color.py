"""
RGBA color value used by palettes.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple


@dataclass(frozen=True)
class Color(object):
    """Four byte channels. Equality is structural."""
    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self):
        for channel in (self.r, self.g, self.b, self.a):
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel out of range: {channel}")

    @staticmethod
    def transparent() -> 'Color':
        return Color(0, 0, 0, 0)

    @staticmethod
    def gray(value: int) -> 'Color':
        return Color(value, value, value, 255)

    @staticmethod
    def from_rgba(value: Sequence[int]) -> 'Color':
        r, g, b, a = value
        return Color(r, g, b, a)

    @staticmethod
    def from_rgb(value: Sequence[int]) -> 'Color':
        """Alpha is set to 255."""
        r, g, b = value
        return Color(r, g, b, 255)

    def to_rgba(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    def to_rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def as_array(self) -> bytes:
        return bytes(self.to_rgba())

    def diff(self, other: 'Color') -> int:
        """Sum of absolute channel differences (0..=1020)."""
        return (
            abs(self.r - other.r)
            + abs(self.g - other.g)
            + abs(self.b - other.b)
            + abs(self.a - other.a)
        )

    def mid(self, other: 'Color') -> 'Color':
        """Per channel midpoint, rounded down."""
        def midpoint(lhs: int, rhs: int) -> int:
            return min(lhs, rhs) + abs(lhs - rhs) // 2

        return Color(
            midpoint(self.r, other.r),
            midpoint(self.g, other.g),
            midpoint(self.b, other.b),
            midpoint(self.a, other.a),
        )


TRANSPARENT = Color(0, 0, 0, 0)
BLACK = Color.gray(0)
WHITE = Color.gray(255)
