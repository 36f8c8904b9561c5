import logging

import numpy as np

logger = logging.getLogger(__name__)

BYTES_PER_PIXEL = 4
OPAQUE = 255


class QuadtreeError(Exception):
    """Base error for quadtree rendering failures."""


class InvalidGeometry(QuadtreeError, ValueError):
    """Raised when buffers, dimensions or a rectangle don't fit together."""


def pixel_index(x, y, buffer_width):
    """
    Byte offset of pixel (x, y) in a buffer that is buffer_width pixels wide.

    Works on plain ints as well as numpy index arrays.
    """
    return y * buffer_width * BYTES_PER_PIXEL + x * BYTES_PER_PIXEL


def read_pixel(buffer, x, y, buffer_width):
    index = pixel_index(x, y, buffer_width)
    return tuple(int(channel) for channel in buffer[index:index + BYTES_PER_PIXEL])


def set_color(buffer, index, r, g, b, a):
    # Pixels are written blue first, red third.
    buffer[index + 3] = a
    buffer[index + 2] = r
    buffer[index + 1] = g
    buffer[index] = b


def average_color(pixels, x1, y1, x2, y2):
    """
    Average red, green and blue over the half-open region [x1, x2) x [y1, y2).

    Args:
    - pixels: (height, width, 4) uint8 array in RGBA order.

    Returns:
    - (r, g, b) truncated means, (0, 0, 0) when the region is empty.
    """
    segment = pixels[y1:y2, x1:x2, :3]
    count = segment.shape[0] * segment.shape[1]
    if count == 0:
        return 0, 0, 0

    sums = segment.reshape(-1, 3).sum(axis=0, dtype=np.uint64)
    r, g, b = (int(total) // count for total in sums)
    return r, g, b


def draw_border(buffer, x1, y1, x2, y2, buffer_width, color):
    """Outline the rectangle in a flat output buffer: rows y1/y2 over [x1, x2), columns x1/x2 over [y1, y2)."""
    r, g, b = color
    xs = np.arange(x1, x2)
    ys = np.arange(y1, y2)

    set_color(buffer, pixel_index(xs, y1, buffer_width), r, g, b, OPAQUE)
    set_color(buffer, pixel_index(xs, y2, buffer_width), r, g, b, OPAQUE)
    set_color(buffer, pixel_index(x1, ys, buffer_width), r, g, b, OPAQUE)
    set_color(buffer, pixel_index(x2, ys, buffer_width), r, g, b, OPAQUE)


def validate_geometry(input, output, x1, y1, x2, y2, buffer_width, color_threshold, min_rect_size):
    """
    Check everything render() relies on, once, before any recursion happens.

    Returns:
    - The buffer height in pixels.

    Raises:
    - InvalidGeometry on any mismatch.
    """
    if buffer_width <= 0:
        raise InvalidGeometry(f"Buffer width must be positive, got {buffer_width}")

    if len(input) != len(output):
        raise InvalidGeometry(f"Input and output lengths differ: {len(input)} != {len(output)}")

    stride = buffer_width * BYTES_PER_PIXEL
    if len(output) == 0 or len(output) % stride != 0:
        raise InvalidGeometry(f"Buffer length {len(output)} is not a whole number of {buffer_width}px rows")

    if memoryview(output).readonly:
        raise InvalidGeometry("Output buffer is read-only")

    height = len(output) // stride
    if not (0 <= x1 <= x2 < buffer_width):
        raise InvalidGeometry(f"x range {x1}..{x2} outside 0..{buffer_width - 1}")
    if not (0 <= y1 <= y2 < height):
        raise InvalidGeometry(f"y range {y1}..{y2} outside 0..{height - 1}")

    if color_threshold < 0:
        raise InvalidGeometry(f"Color threshold must not be negative, got {color_threshold}")

    # A 1x1 rectangle is its own bottom-right quadrant when the floor is 0.
    if min_rect_size < 1:
        raise InvalidGeometry(f"Minimum rectangle size must be at least 1, got {min_rect_size}")

    return height


def render(input, output, x1, y1, x2, y2, buffer_width, color_threshold, min_rect_size):
    """
    Render the quadtree outline of input's (x1, y1)-(x2, y2) rectangle into output.

    input is any RGBA byte buffer, output a writable buffer of the same length
    (usually a zero-filled bytearray). Both are viewed as numpy arrays without
    copying, so output is modified in place.
    """
    height = validate_geometry(input, output, x1, y1, x2, y2, buffer_width, color_threshold, min_rect_size)

    pixels = np.frombuffer(input, dtype=np.uint8).reshape(height, buffer_width, BYTES_PER_PIXEL)
    target = np.frombuffer(output, dtype=np.uint8)

    logger.debug(f"Rendering ({x1},{y1})-({x2},{y2}) of a {buffer_width}x{height} buffer, "
                 f"threshold {color_threshold}, min rect {min_rect_size}")
    split_rectangle(pixels, target, x1, y1, x2, y2, buffer_width, color_threshold, min_rect_size)


def split_rectangle(pixels, target, x1, y1, x2, y2, buffer_width, color_threshold, min_rect_size):
    r, g, b = average_color(pixels, x1, y1, x2, y2)

    if r + g + b > color_threshold:
        draw_border(target, x1, y1, x2, y2, buffer_width, (r, g, b))

    if abs(x1 - x2) > min_rect_size and abs(y1 - y2) > min_rect_size:
        mid_x = (x1 + x2) // 2
        mid_y = (y1 + y2) // 2

        segments = [
            (x1, y1, mid_x, mid_y),  # Top-left
            (mid_x, y1, x2, mid_y),  # Top-right
            (x1, mid_y, mid_x, y2),  # Bottom-left
            (mid_x, mid_y, x2, y2)   # Bottom-right
        ]

        for segment in segments:
            split_rectangle(pixels, target, *segment, buffer_width, color_threshold, min_rect_size)


def render_image(input, width, height, color_threshold=280, min_rect_size=1):
    """
    Render a whole decoded image.

    Args:
    - input: RGBA bytes, width * height * 4 long.
    - width, height: image dimensions in pixels.

    Returns:
    - A new bytearray of the same length holding the outline mosaic in B, G, R, A order.
    """
    if width <= 0 or height <= 0:
        raise InvalidGeometry(f"Image dimensions must be positive, got {width}x{height}")
    if len(input) != width * height * BYTES_PER_PIXEL:
        raise InvalidGeometry(f"Expected {width * height * BYTES_PER_PIXEL} bytes for {width}x{height}, got {len(input)}")

    output = bytearray(len(input))
    render(input, output, 0, 0, width - 1, height - 1, width, color_threshold, min_rect_size)
    return output
