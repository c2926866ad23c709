"""
Pillow / numpy interop: render indexed images to RGBA and import images.
"""

from typing import List, Optional, Union

import numpy as np
from PIL import Image

from .animated import AnimatedIndexedImage
from .color import Color
from .config import Config
from .const import PlayType
from .errors import DimensionTooLarge, IndexOutOfRange
from .image import IndexedImage


def _palette_lut(palette: List[Color]) -> np.ndarray:
    return np.array([color.to_rgba() for color in palette], dtype=np.uint8).reshape(-1, 4)


def to_rgba_array(image: Union[IndexedImage, AnimatedIndexedImage], frame: int = 0) -> np.ndarray:
    """
    Look up every pixel of `frame` in the palette.

    Returns:
        numpy array (height, width, 4) uint8

    Raises:
        IndexOutOfRange: Bad frame, or a pixel references a color past the palette
    """
    if not 0 <= frame < image.frame_count:
        raise IndexOutOfRange(frame, image.frame_count, 'frames')
    grid = image._grid()[frame]
    palette = image.get_palette()
    highest = int(grid.max())
    if highest >= len(palette):
        raise IndexOutOfRange(highest, len(palette), 'palette')
    return _palette_lut(palette)[grid]


def to_pil_image(
    image: Union[IndexedImage, AnimatedIndexedImage],
    frame: int = 0,
    scale: int = 1,
) -> Image.Image:
    """
    Get Pillow Image of a frame.

    Args:
        image: Image to render
        frame: Frame number (0-indexed)
        scale: Integer enlargement, nearest neighbour

    Returns:
        PIL Image in RGBA mode
    """
    if scale < 1:
        raise ValueError(f"Scale must be at least 1, got {scale}")
    img = Image.fromarray(to_rgba_array(image, frame))
    if scale != 1:
        img = img.resize((img.width * scale, img.height * scale), Image.NEAREST)
    return img


def save_png(image: Union[IndexedImage, AnimatedIndexedImage], output, scale: int = 1, frame: int = 0) -> None:
    """Save one frame as PNG to a path or a writable file object."""
    img = to_pil_image(image, frame, scale)
    if hasattr(output, "write"):
        img.save(output, format="PNG")
    else:
        img.save(output)


def _playback_order(image: AnimatedIndexedImage) -> List[int]:
    frames = list(range(image.frame_count))
    play_type = image.play_type
    if play_type in (PlayType.ONCE_REVERSED, PlayType.LOOPS_REVERSED):
        return frames[::-1]
    if play_type == PlayType.LOOPS_BOTH and len(frames) > 2:
        return frames + frames[-2:0:-1]
    return frames


def frame_duration_ms(image: AnimatedIndexedImage) -> int:
    duration = int(round(image.get_per_frame() * 1000))
    if duration < 1:
        return Config.DEFAULT_FRAME_MS
    return duration


def save_animation(
    image: AnimatedIndexedImage,
    output,
    scale: int = 1,
    fmt: Optional[str] = None,
) -> None:
    """
    Convert animation to an animated WebP or GIF.

    Frames are written in playback order. Looping play types loop forever,
    ONCE and ONCE_REVERSED play a single time.

    Args:
        image: Animation to save
        output: Path or writable file object
        scale: Integer enlargement, nearest neighbour
        fmt: 'webp' or 'gif'; defaults to the path's extension, then
            Config.DEFAULT_ANIMATION_FORMAT
    """
    if fmt is None:
        if isinstance(output, str) and output.lower().endswith('.gif'):
            fmt = 'gif'
        elif isinstance(output, str) and output.lower().endswith('.webp'):
            fmt = 'webp'
        else:
            fmt = Config.DEFAULT_ANIMATION_FORMAT
    fmt = fmt.lower()
    if fmt not in ('webp', 'gif'):
        raise ValueError(f"Unsupported animation format: {fmt}")

    frames = [to_pil_image(image, frame, scale) for frame in _playback_order(image)]
    save_kwargs = dict(
        append_images=frames[1:],
        duration=frame_duration_ms(image),
        save_all=True,
    )

    if fmt == 'webp':
        primary = frames[0]
        save_kwargs.update(
            loop=0 if image.play_type.is_looping else 1,
            disposal=0,
            lossless=True,
        )
    else:
        def to_gif_frame(img: Image.Image) -> Image.Image:
            return img.convert('P', palette=Image.ADAPTIVE)

        primary = to_gif_frame(frames[0])
        save_kwargs['append_images'] = [to_gif_frame(frame) for frame in frames[1:]]
        save_kwargs['disposal'] = 2
        # GIFs without a loop entry play once
        if image.play_type.is_looping:
            save_kwargs['loop'] = 0

    if hasattr(output, "write"):
        primary.save(output, format=fmt.upper(), **save_kwargs)
    else:
        primary.save(output, **save_kwargs)


# ============================================================================
# IMPORT
# ============================================================================

def _indexed_palette(pil: Image.Image) -> List[Color]:
    """RGBA palette of a mode 'P' image, including per-index transparency."""
    raw = pil.getpalette() or []
    colors = [Color(raw[i], raw[i + 1], raw[i + 2]) for i in range(0, len(raw) - 2, 3)]
    transparency = pil.info.get("transparency")
    if isinstance(transparency, bytes):
        for idx, alpha in enumerate(transparency[:len(colors)]):
            color = colors[idx]
            colors[idx] = Color(color.r, color.g, color.b, alpha)
    elif isinstance(transparency, int) and transparency < len(colors):
        color = colors[transparency]
        colors[transparency] = Color(color.r, color.g, color.b, 0)
    return colors


def _unique_colors(rgba: np.ndarray):
    flat = rgba.reshape(-1, 4)
    colors, inverse = np.unique(flat, axis=0, return_inverse=True)
    return colors, inverse.reshape(-1)


def from_pil_image(pil: Image.Image) -> IndexedImage:
    """
    Build an IndexedImage from a Pillow image.

    Palette images ('P' mode) keep their palette and indices when every used
    index fits in 255 colors. Anything else is converted to RGBA and, if it
    has more than Config.QUANTIZE_COLORS distinct colors, quantized.

    Raises:
        DimensionTooLarge: If the image is larger than 255 in either axis
    """
    width, height = pil.size
    if width > Config.MAX_DIMENSION:
        raise DimensionTooLarge('width', width, Config.MAX_DIMENSION)
    if height > Config.MAX_DIMENSION:
        raise DimensionTooLarge('height', height, Config.MAX_DIMENSION)

    if pil.mode == 'P':
        indices = np.asarray(pil, dtype=np.uint8)
        highest = int(indices.max())
        palette = _indexed_palette(pil)
        if highest < Config.MAX_PALETTE_COLORS and highest < len(palette):
            return IndexedImage(width, height, palette[:highest + 1], indices)

    rgba = np.asarray(pil.convert('RGBA'), dtype=np.uint8)
    colors, inverse = _unique_colors(rgba)
    if len(colors) > Config.QUANTIZE_COLORS:
        quantized = pil.convert('RGBA').quantize(colors=Config.QUANTIZE_COLORS)
        colors, inverse = _unique_colors(np.asarray(quantized.convert('RGBA'), dtype=np.uint8))
    palette = [Color.from_rgba(tuple(int(v) for v in color)) for color in colors]
    return IndexedImage(width, height, palette, inverse.astype(np.uint8))
