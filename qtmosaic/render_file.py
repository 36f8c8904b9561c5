import argparse
import sys

from .config import load_settings
from .display import show
from .logging_setup import setup_logging
from .quadtree import InvalidGeometry, render_image
from .utils import ImageLoadError, load_rgba, save_output


def build_parser(settings):
    parser = argparse.ArgumentParser(description='Render an image as a quadtree outline mosaic.')
    parser.add_argument('-i', '--input', type=str, required=True, help='Input image filename')
    parser.add_argument('-t', '--threshold', type=int, default=settings.color_threshold,
                        help=f'Sum of averaged channels a region must exceed to be outlined (default {settings.color_threshold})')
    parser.add_argument('-m', '--min-rect', type=int, default=settings.min_rect_size,
                        help=f'Smallest rectangle side that is still split (default {settings.min_rect_size})')
    parser.add_argument('-o', '--output', type=str, required=False, help='Save the rendered image to this file')
    parser.add_argument('--no-show', action='store_true', help="Don't open a window with the result")
    return parser


def main(argv=None):
    settings = load_settings()
    args = build_parser(settings).parse_args(argv)
    setup_logging(settings.log_level, settings.log_folder)

    try:
        pixels, width, height = load_rgba(args.input)
    except ImageLoadError as e:
        print(f"{e}. Please check the path and try again.")
        sys.exit(1)
    print(f"Opened (read) {args.input} ({width}x{height})")

    try:
        output = render_image(pixels, width, height, args.threshold, args.min_rect)
    except InvalidGeometry as e:
        print(f"ERROR: {e}")
        sys.exit(1)
    print("Finished rendering quadtree")

    if args.output:
        save_output(output, width, height, args.output)
        print(f"Output image saved to {args.output}")

    if not args.no_show:
        show(output, width, height, title=args.input)

    return output


if __name__ == "__main__":
    main()
