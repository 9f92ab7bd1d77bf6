# ABOUTME: Reporter for textures
# ABOUTME: Texture type, referenced image, sampler filtering and wrapping

from typing import List

from ..records import Category, TextureData
from .common import CategoryReporter, format_value


class TextureReporter(CategoryReporter):
    categories = (Category.TEXTURE,)
    referenced_by = ('material attribute', 'material attributes')

    def describe(self, category, id, texture: TextureData, level=0) -> List[str]:
        return [
            f"  Type: {texture.type.label}, image {texture.image}",
            f"  Filter: min {texture.minification.label}, "
            f"mag {texture.magnification.label}, mipmap {texture.mipmap.label}",
            f"  Wrapping: {format_value(texture.wrapping)}",
        ]
