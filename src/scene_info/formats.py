# ABOUTME: Vertex and index storage formats for raw mesh buffers
# ABOUTME: Maps format names to numpy dtypes, component counts and normalization

from dataclasses import dataclass
from typing import Dict

import numpy as np


@dataclass(frozen=True)
class VertexFormat:
    """
    Storage format of one vertex attribute element.

    Attributes:
        name: Display name, e.g. 'Vector3' or 'Vector4ubNormalized'
        dtype: Little-endian numpy dtype string of a single component
        components: Number of components per element
        normalized: Integer components map to [0, 1] or [-1, 1]
    """
    name: str
    dtype: str
    components: int
    normalized: bool = False

    @property
    def component_size(self) -> int:
        return np.dtype(self.dtype).itemsize

    @property
    def size(self) -> int:
        """Size of one element in bytes."""
        return self.component_size * self.components

    @property
    def is_floating_point(self) -> bool:
        return np.dtype(self.dtype).kind == 'f'

    def __str__(self) -> str:
        return self.name


# (vector suffix, scalar name, component dtype, has normalized variants)
_COMPONENT_TYPES = [
    ('h', 'Half', '<f2', False),
    ('', 'Float', '<f4', False),
    ('d', 'Double', '<f8', False),
    ('ub', 'UnsignedByte', 'u1', True),
    ('b', 'Byte', 'i1', True),
    ('us', 'UnsignedShort', '<u2', True),
    ('s', 'Short', '<i2', True),
    ('ui', 'UnsignedInt', '<u4', False),
    ('i', 'Int', '<i4', False),
]


def _build_registry() -> Dict[str, VertexFormat]:
    formats = {}
    for suffix, scalar, dtype, normalizable in _COMPONENT_TYPES:
        names = [(scalar, 1)] + [(f"Vector{n}{suffix}", n) for n in (2, 3, 4)]
        for name, components in names:
            formats[name] = VertexFormat(name, dtype, components)
            if normalizable:
                normalized = name + 'Normalized'
                formats[normalized] = VertexFormat(normalized, dtype, components, True)
    return formats


VERTEX_FORMATS: Dict[str, VertexFormat] = _build_registry()

# Formats allowed for index buffers
INDEX_FORMATS = ('UnsignedByte', 'UnsignedShort', 'UnsignedInt')


def vertex_format(name: str) -> VertexFormat:
    """
    Look up a vertex format by name.

    Raises:
        ValueError: If the format is not known
    """
    try:
        return VERTEX_FORMATS[name]
    except KeyError:
        raise ValueError(f"Unknown vertex format: {name}") from None


def index_format(name: str) -> VertexFormat:
    """Look up an index format ('UnsignedByte', 'UnsignedShort' or 'UnsignedInt')."""
    if name not in INDEX_FORMATS:
        raise ValueError(f"Invalid index format: {name}")
    return VERTEX_FORMATS[name]
