"""Category reporters turning asset records into report lines."""

from typing import Dict, Optional

from ..bounds import BoundsCalculator
from ..names import NameResolver
from ..records import Category
from .common import CategoryReporter, Entry, Style, format_header
from .scenes import SceneReporter, ObjectReporter
from .animations import AnimationReporter
from .skins import SkinReporter
from .lights import LightReporter
from .materials import MaterialReporter
from .meshes import MeshReporter
from .textures import TextureReporter
from .images import ImageReporter

REPORTER_CLASSES = [
    SceneReporter,
    ObjectReporter,
    AnimationReporter,
    SkinReporter,
    LightReporter,
    MaterialReporter,
    MeshReporter,
    TextureReporter,
    ImageReporter,
]


def build_reporters(names: NameResolver, style: Optional[Style] = None,
                    bounds: Optional[BoundsCalculator] = None) -> Dict[Category, CategoryReporter]:
    """Create one reporter per category, sharing instances across e.g. 2D and 3D skins."""
    reporters = {}
    for reporter_class in REPORTER_CLASSES:
        reporter = reporter_class(names, style, bounds)
        for category in reporter_class.categories:
            reporters[category] = reporter
    return reporters


__all__ = [
    'CategoryReporter', 'Entry', 'Style', 'format_header', 'build_reporters',
    'SceneReporter', 'ObjectReporter', 'AnimationReporter', 'SkinReporter',
    'LightReporter', 'MaterialReporter', 'MeshReporter', 'TextureReporter',
    'ImageReporter',
]
