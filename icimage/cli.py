"""
icimage command line.

Commands:
- info FILE...                       Describe .ici/.ica containers
- render FILE [-o DIR] [--scale N]   Decode to PNG (static) or WebP (animated)
- render-folder DIR [-o DIR]         Decode every container in a folder
- convert IMAGE OUT.ici              Convert a Pillow-readable image
- palette FILE [-o OUT.pal]          Export a container's palette as JASC-PAL
"""

import argparse
import os
import sys
from typing import List, Optional

from PIL import Image, UnidentifiedImageError
from tqdm import tqdm

from .config import Config
from .errors import IndexedImageError
from .jasc_palette import JascPalette
from .palette import FilePalette
from .render import from_pil_image, save_animation, save_png
from .scaling import Scaling
from .wrapper import IndexedWrapper, load_file


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def parse_palette_arg(text: str) -> FilePalette:
    """
    Parse a --palette value.

    Accepts 'colors', 'none', 'id:<0..65535>' or 'name:<text>'.
    """
    if text == 'colors':
        return FilePalette.colors()
    if text == 'none':
        return FilePalette.no_data()
    if text.startswith('id:'):
        try:
            palette_id = int(text[3:])
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid palette id: {text[3:]!r}")
        try:
            return FilePalette.with_id(palette_id)
        except IndexedImageError as e:
            raise argparse.ArgumentTypeError(str(e))
    if text.startswith('name:'):
        return FilePalette.with_name(text[5:])
    raise argparse.ArgumentTypeError(f"Unknown palette option: {text!r}")


def find_containers(folder: str) -> List[str]:
    """Sorted .ici and .ica files directly inside `folder`."""
    exts = (Config.STATIC_EXT, Config.ANIMATED_EXT)
    return sorted(
        os.path.join(folder, name)
        for name in os.listdir(folder)
        if name.lower().endswith(exts)
    )


def describe(wrapper: IndexedWrapper, palette: FilePalette) -> List[str]:
    lines = [
        f"  Type: {wrapper.file_type.display_name}",
        f"  Size: {wrapper.width}x{wrapper.height}",
        f"  Palette: {palette} ({len(wrapper.get_palette())} colors)",
    ]
    if wrapper.is_animation:
        image = wrapper.image
        lines.append(f"  Frames: {image.frame_count}")
        lines.append(f"  Play type: {image.play_type.name}")
        lines.append(f"  Per frame: {image.get_per_frame():.3f}s")
    return lines


# ============================================================================
# COMMANDS
# ============================================================================

def info_files(paths: List[str]) -> int:
    failed = 0
    for path in paths:
        print(os.path.basename(path))
        try:
            wrapper, palette = load_file(path)
        except (IndexedImageError, OSError) as e:
            print(f"  [ERROR] {e}")
            failed += 1
            continue
        for line in describe(wrapper, palette):
            print(line)
    return 1 if failed else 0


def render_file(
    path: str,
    output_dir: str = None,
    scale: int = Config.DEFAULT_SCALE,
    epx: Optional[int] = None,
    log=print,
) -> str:
    """
    Decode a single container into a PNG (static) or WebP (animated).

    Args:
        path: .ici or .ica file
        output_dir: Directory to place the output (default: Config.OUTPUT_DIR)
        scale: Integer enlargement applied when saving
        epx: 2 or 4 to EPX-scale the indexed image before saving
        log: Where progress lines go (print, or tqdm.write inside a bar)

    Returns:
        Path to the generated file, or empty string on failure
    """
    if output_dir is None:
        output_dir = Config.OUTPUT_DIR
    try:
        os.makedirs(output_dir, exist_ok=True)
        wrapper, _ = load_file(path)
        if epx == 2:
            wrapper = wrapper.scale(Scaling.epx2x())
        elif epx == 4:
            wrapper = wrapper.scale(Scaling.epx4x())

        base_name = os.path.splitext(os.path.basename(path))[0]
        if wrapper.is_animation:
            out_path = os.path.join(output_dir, f"{base_name}.{Config.DEFAULT_ANIMATION_FORMAT}")
            save_animation(wrapper.image, out_path, scale=scale)
        else:
            out_path = os.path.join(output_dir, f"{base_name}.png")
            save_png(wrapper.image, out_path, scale=scale)
    except (IndexedImageError, OSError, ValueError) as e:
        log(f"  [ERROR] Decode failed ({os.path.basename(path)}): {e}")
        return ""
    log(f"  [OK] Decoded -> {os.path.basename(out_path)}")
    return out_path


def render_folder(folder: str, output_dir: str = None, scale: int = Config.DEFAULT_SCALE) -> List[str]:
    """
    Decode every container in `folder`.

    Returns:
        Paths of the generated files
    """
    paths = find_containers(folder)
    if not paths:
        print("No .ici/.ica files to decode.")
        return []

    print("\n" + "-" * 70)
    print(f"Decoding {len(paths)} files from {folder}...")
    outputs: List[str] = []
    for path in tqdm(paths, desc="Decoding", unit="file"):
        out_path = render_file(path, output_dir, scale, log=tqdm.write)
        if out_path:
            outputs.append(out_path)
    print(f"[OK] Decoded {len(outputs)}/{len(paths)} files")
    return outputs


def convert_image(src: str, dst: str, palette: FilePalette) -> bool:
    try:
        with Image.open(src) as pil:
            image = from_pil_image(pil)
        image.to_file(dst, palette)
    except (IndexedImageError, OSError, UnidentifiedImageError) as e:
        print(f"[ERROR] Convert failed ({os.path.basename(src)}): {e}")
        return False
    print(
        f"[OK] {os.path.basename(src)} -> {os.path.basename(dst)} "
        f"({image.width}x{image.height}, {len(image.get_palette())} colors)"
    )
    return True


def export_palette(path: str, out_path: str = None) -> bool:
    if out_path is None:
        out_path = os.path.splitext(path)[0] + '.pal'
    try:
        wrapper, _ = load_file(path)
        JascPalette.from_colors(wrapper.get_palette()).to_file(out_path)
    except (IndexedImageError, OSError) as e:
        print(f"[ERROR] Palette export failed ({os.path.basename(path)}): {e}")
        return False
    print(f"[OK] Palette -> {os.path.basename(out_path)}")
    return True


# ============================================================================
# ENTRY POINT
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='icimage', description="Indexed color image (.ici/.ica) tools")
    sub = parser.add_subparsers(dest='command', required=True)

    info = sub.add_parser('info', help="Describe containers")
    info.add_argument('files', nargs='+')

    render = sub.add_parser('render', help="Decode to PNG or WebP")
    render.add_argument('file')
    render.add_argument('-o', '--output-dir', default=None)
    render.add_argument('--scale', type=int, default=Config.DEFAULT_SCALE)
    render.add_argument('--epx', type=int, choices=(2, 4), default=None)

    folder = sub.add_parser('render-folder', help="Decode every container in a folder")
    folder.add_argument('folder')
    folder.add_argument('-o', '--output-dir', default=None)
    folder.add_argument('--scale', type=int, default=Config.DEFAULT_SCALE)

    convert = sub.add_parser('convert', help="Convert an image to .ici")
    convert.add_argument('image')
    convert.add_argument('output')
    convert.add_argument('--palette', type=parse_palette_arg, default=FilePalette.colors())

    palette = sub.add_parser('palette', help="Export palette as JASC-PAL")
    palette.add_argument('file')
    palette.add_argument('-o', '--output', default=None)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if Config.DEBUG_MODE:
        print("=" * 70)
        print("[!] DEBUG MODE ACTIVE")
        print("=" * 70)

    if args.command == 'info':
        return info_files(args.files)
    if args.command == 'render':
        return 0 if render_file(args.file, args.output_dir, args.scale, args.epx) else 1
    if args.command == 'render-folder':
        if not os.path.isdir(args.folder):
            print(f"[ERROR] Not a folder: {args.folder}")
            return 1
        paths = find_containers(args.folder)
        outputs = render_folder(args.folder, args.output_dir, args.scale)
        return 0 if len(outputs) == len(paths) else 1
    if args.command == 'convert':
        return 0 if convert_image(args.image, args.output, args.palette) else 1
    return 0 if export_palette(args.file, args.output) else 1


if __name__ == "__main__":
    sys.exit(main())
