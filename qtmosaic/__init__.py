"""Quadtree outline mosaics: split an image into average-colored rectangles and draw their borders."""

__version__ = '0.1.0'

from .quadtree import InvalidGeometry, QuadtreeError, average_color, render, render_image
