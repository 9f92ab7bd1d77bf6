# ABOUTME: Configuration dataclass for report settings
# ABOUTME: Validates category selection, bounds mode and color choice

from dataclasses import dataclass
from typing import Dict, TextIO

from .records import Category


# Which categories each toggle turns on
CATEGORY_OPTIONS: Dict[str, tuple] = {
    'scenes': (Category.SCENE,),
    'objects': (Category.OBJECT,),
    'animations': (Category.ANIMATION,),
    'skins': (Category.SKIN2D, Category.SKIN3D),
    'lights': (Category.LIGHT,),
    'materials': (Category.MATERIAL,),
    'meshes': (Category.MESH,),
    'textures': (Category.TEXTURE,),
    'images': (Category.IMAGE1D, Category.IMAGE2D, Category.IMAGE3D),
}

COLOR_MODES = {'auto', 'on', 'off'}


@dataclass
class ReportConfig:
    """Configuration of a single report run."""

    scenes: bool = False
    objects: bool = False
    animations: bool = False
    skins: bool = False
    lights: bool = False
    materials: bool = False
    meshes: bool = False
    textures: bool = False
    images: bool = False
    scenes_objects: bool = False  # Shorthand for scenes and objects together

    compute_bounds: bool = False  # Touches every vertex, off by default
    color: str = 'auto'  # 'auto', 'on' or 'off'

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.scenes_objects:
            self.scenes = True
            self.objects = True

        if self.color not in COLOR_MODES:
            raise ValueError(f"Invalid color mode: {self.color}")

    @property
    def all_categories(self) -> bool:
        """True if no category was selected explicitly."""
        return not any(getattr(self, option) for option in CATEGORY_OPTIONS)

    def selected(self, category: Category) -> bool:
        if self.all_categories:
            return True
        return any(getattr(self, option) and category in categories
                   for option, categories in CATEGORY_OPTIONS.items())

    def use_color(self, sink: TextIO) -> bool:
        """Resolve the color mode against the output stream."""
        if self.color == 'auto':
            isatty = getattr(sink, 'isatty', None)
            return bool(isatty and isatty())
        return self.color == 'on'
