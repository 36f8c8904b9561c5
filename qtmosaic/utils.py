import io
import logging

import numpy as np
import pillow_heif
from PIL import Image, UnidentifiedImageError

from .quadtree import BYTES_PER_PIXEL, QuadtreeError

logger = logging.getLogger(__name__)

# Lets Image.open read .heic uploads like any other format
pillow_heif.register_heif_opener()

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'heic'}


class ImageLoadError(QuadtreeError):
    """Raised when an image can't be opened or decoded."""


def _to_rgba(image):
    if image.mode != 'RGBA':
        image = image.convert('RGBA')
    width, height = image.size
    return image.tobytes(), width, height


def load_rgba(image_path):
    """
    Open an image file and flatten it to RGBA bytes.

    Returns:
    - (pixels, width, height) with pixels width * height * 4 bytes long.
    """
    try:
        with Image.open(image_path) as image:
            return _to_rgba(image)
    except (OSError, UnidentifiedImageError) as e:
        raise ImageLoadError(f"Error opening image {image_path}: {e}") from e


def decode_rgba(data):
    """Same as load_rgba() for an image already read into memory."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            return _to_rgba(image)
    except (OSError, UnidentifiedImageError) as e:
        raise ImageLoadError(f"Error decoding image: {e}") from e


def allowed_image(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def validate_image(file):
    if not allowed_image(file.filename):
        return False, "Unsupported file extension"

    try:
        image = Image.open(file)
        image.verify()  # Verify that the image file is not corrupted
    except (OSError, UnidentifiedImageError):
        return False, "The file is not a valid image or is corrupted"
    finally:
        file.seek(0)  # Reset file pointer for further operations

    return True, "Image is valid"


def to_bgra_array(output, width, height):
    """View a rendered buffer as a (height, width, 4) array in B, G, R, A order."""
    return np.frombuffer(output, dtype=np.uint8).reshape(height, width, BYTES_PER_PIXEL)


def to_image(output, width, height):
    """
    Convert a rendered buffer to an RGB Pillow image.

    Alpha is dropped the same way an XRGB display surface ignores it, so
    untouched pixels come out black.
    """
    bgra = to_bgra_array(output, width, height)
    rgb = np.ascontiguousarray(bgra[:, :, 2::-1])
    return Image.fromarray(rgb)


def save_output(output, width, height, output_path):
    to_image(output, width, height).save(output_path)
    logger.debug(f"Saved {width}x{height} render to {output_path}")


def encode_png(output, width, height):
    image_buffer = io.BytesIO()
    to_image(output, width, height).save(image_buffer, format='PNG')
    image_buffer.seek(0)  # Rewind the buffer to the beginning
    return image_buffer
