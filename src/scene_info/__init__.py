"""Asset info report - Describes scenes, meshes, materials, textures and images of a 3D asset."""

from .config import ReportConfig
from .driver import ReportDriver
from .records import Category
from .source import RecordSource

__version__ = '0.1.0'

__all__ = ['ReportConfig', 'ReportDriver', 'Category', 'RecordSource']
