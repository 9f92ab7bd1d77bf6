# ABOUTME: Reporter for 1D, 2D and 3D images and their levels
# ABOUTME: Size, pixel format, data size and image flags per level

from typing import List

from ..records import Category, ImageData, flag_labels
from .common import CategoryReporter, format_size, format_value


class ImageReporter(CategoryReporter):
    categories = (Category.IMAGE1D, Category.IMAGE2D, Category.IMAGE3D)
    referenced_by = ('texture', 'textures')

    def describe(self, category, id, image: ImageData, level=0) -> List[str]:
        pixel_format = image.format
        if image.compressed:
            pixel_format += ', compressed'
        lines = [
            f"  Level {level}: {format_value(image.size)} @ {pixel_format} "
            f"({format_size(image.data_size)})"
        ]
        if image.flags:
            lines.append(f"    Flags: {flag_labels(image.flags)}")
        return lines
