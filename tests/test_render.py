import io

import numpy as np
import pytest
from PIL import Image

from icimage.animated import AnimatedIndexedImage
from icimage.color import BLACK, TRANSPARENT, WHITE, Color
from icimage.config import Config
from icimage.const import PlayType
from icimage.errors import DimensionTooLarge, IndexOutOfRange
from icimage.image import IndexedImage
from icimage.render import (
    _playback_order,
    frame_duration_ms,
    from_pil_image,
    save_animation,
    save_png,
    to_pil_image,
    to_rgba_array,
)


COLORS = [TRANSPARENT, Color(50, 51, 52, 53), Color(60, 61, 62, 63)]
RGB = [Color(255, 0, 0), Color(0, 255, 0), Color(0, 0, 255)]


def static_image():
    return IndexedImage(2, 2, COLORS, [0, 0, 1, 2])


def animation(play_type=PlayType.LOOPS, per_frame=0.1):
    # one pixel, a different color per frame
    return AnimatedIndexedImage(1, 1, per_frame, 3, RGB, [0, 1, 2], play_type)


def test_to_rgba_array():
    array = to_rgba_array(static_image())
    assert array.shape == (2, 2, 4)
    assert array.dtype == np.uint8
    assert tuple(array[0, 0]) == (0, 0, 0, 0)
    assert tuple(array[1, 0]) == (50, 51, 52, 53)
    assert tuple(array[1, 1]) == (60, 61, 62, 63)


def test_to_rgba_array_animated_frames():
    image = animation()
    assert tuple(to_rgba_array(image, 2)[0, 0]) == (0, 0, 255, 255)
    with pytest.raises(IndexOutOfRange) as exc:
        to_rgba_array(image, 3)
    assert exc.value.name == 'frames'


def test_render_checks_palette():
    image = IndexedImage(1, 1, [BLACK], [0])
    image.set_pixel(0, 3)
    with pytest.raises(IndexOutOfRange) as exc:
        to_rgba_array(image)
    assert exc.value.name == 'palette'


def test_to_pil_image_scaled():
    img = to_pil_image(static_image(), scale=3)
    assert img.mode == 'RGBA'
    assert img.size == (6, 6)
    assert img.getpixel((5, 5)) == (60, 61, 62, 63)
    assert img.getpixel((2, 0)) == (0, 0, 0, 0)


def test_save_png():
    output = io.BytesIO()
    save_png(static_image(), output, scale=2)
    output.seek(0)
    with Image.open(output) as img:
        assert img.format == 'PNG'
        assert img.size == (4, 4)


def test_playback_order():
    assert _playback_order(animation(PlayType.LOOPS)) == [0, 1, 2]
    assert _playback_order(animation(PlayType.ONCE_REVERSED)) == [2, 1, 0]
    assert _playback_order(animation(PlayType.LOOPS_REVERSED)) == [2, 1, 0]
    assert _playback_order(animation(PlayType.LOOPS_BOTH)) == [0, 1, 2, 1]


def test_frame_duration_ms():
    assert frame_duration_ms(animation(per_frame=0.25)) == 250
    assert frame_duration_ms(animation(per_frame=0.0001)) == Config.DEFAULT_FRAME_MS


def test_save_animation_gif():
    output = io.BytesIO()
    save_animation(animation(PlayType.LOOPS), output, fmt='gif')
    output.seek(0)
    with Image.open(output) as img:
        assert img.format == 'GIF'
        assert img.n_frames == 3
        assert img.info.get('loop') == 0


def test_save_animation_gif_once():
    output = io.BytesIO()
    save_animation(animation(PlayType.ONCE), output, fmt='gif')
    output.seek(0)
    with Image.open(output) as img:
        assert img.n_frames == 3
        assert 'loop' not in img.info


def test_save_animation_webp(tmp_path):
    path = str(tmp_path / 'anim.webp')
    save_animation(animation(PlayType.LOOPS_BOTH), path, scale=2)
    with Image.open(path) as img:
        assert img.format == 'WEBP'
        assert img.size == (2, 2)
        assert img.n_frames == 4


def test_save_animation_rejects_unknown_format():
    with pytest.raises(ValueError):
        save_animation(animation(), io.BytesIO(), fmt='apng')


# ============================================================================
# IMPORT
# ============================================================================

def test_from_pil_rgb_image():
    pil = Image.new('RGB', (2, 2), (255, 0, 0))
    pil.putpixel((1, 0), (0, 255, 0))
    pil.putpixel((1, 1), (0, 0, 255))
    image = from_pil_image(pil)
    assert image.size == (2, 2)
    assert len(image.get_palette()) == 3
    assert np.array_equal(to_rgba_array(image), np.asarray(pil.convert('RGBA')))


def test_from_pil_palette_image_keeps_indices():
    pil = Image.new('P', (3, 1), 0)
    pil.putpalette([0, 0, 0, 255, 255, 255, 255, 0, 0])
    pil.putpixel((1, 0), 2)
    pil.putpixel((2, 0), 1)
    image = from_pil_image(pil)
    assert image.get_pixels() == bytes([0, 2, 1])
    assert image.get_palette() == [BLACK, WHITE, Color(255, 0, 0)]


def test_from_pil_quantizes_many_colors():
    pil = Image.new('RGB', (16, 16))
    for y in range(16):
        for x in range(16):
            pil.putpixel((x, y), (x * 16, y * 16, 128))
    image = from_pil_image(pil)
    assert image.size == (16, 16)
    assert len(image.get_palette()) <= Config.QUANTIZE_COLORS
    to_rgba_array(image)


def test_from_pil_too_big():
    with pytest.raises(DimensionTooLarge):
        from_pil_image(Image.new('RGB', (256, 1)))
