# ABOUTME: Per-component min/max ranges over raw vertex attribute buffers
# ABOUTME: Decodes half, integer and normalized storage with numpy before comparing

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from .formats import VertexFormat
from .records import MeshAttribute, MeshAttributeData, MeshData, MeshIndexData
from .utils.logging_utils import LOGGER_NAME


# Attributes bounds are calculated for. Custom attributes are skipped.
BOUNDED_ATTRIBUTES = (
    MeshAttribute.POSITION,
    MeshAttribute.NORMAL,
    MeshAttribute.TANGENT,
    MeshAttribute.BITANGENT,
    MeshAttribute.TEXTURE_COORDINATES,
    MeshAttribute.COLOR,
    MeshAttribute.OBJECT_ID,
)

# Compared as integers, everything else as floating point
INTEGER_ATTRIBUTES = (MeshAttribute.OBJECT_ID,)


@dataclass
class Bounds:
    """Per-component minimum and maximum."""
    min: Tuple
    max: Tuple


def decode_attribute(attribute: MeshAttributeData, vertex_count: int) -> np.ndarray:
    """
    View a strided attribute as a (vertex_count, components) array.

    Array attributes are flattened, so a Vector3[2] attribute has 6
    components. No data is copied.
    """
    fmt = attribute.format
    components = fmt.components * max(attribute.array_size, 1)
    return np.ndarray(
        shape=(vertex_count, components),
        dtype=np.dtype(fmt.dtype),
        buffer=attribute.data,
        offset=attribute.offset,
        strides=(attribute.stride, fmt.component_size),
    )


def unpack(values: np.ndarray, fmt: VertexFormat, integer: bool = False) -> np.ndarray:
    """
    Expand stored values into their logical numeric range.

    Args:
        values: Raw component values
        fmt: Storage format of the values
        integer: Keep integer storage as integers instead of converting to float

    Returns:
        float64 array, or int64 array when integer is set and storage is integral
    """
    if fmt.is_floating_point:
        return values.astype(np.float64)

    if fmt.normalized:
        info = np.iinfo(values.dtype)
        unpacked = values.astype(np.float64) / info.max
        # Signed normalized has one more negative value than positive
        if info.min < 0:
            unpacked = np.maximum(unpacked, -1.0)
        return unpacked

    if integer:
        return values.astype(np.int64)
    return values.astype(np.float64)


class BoundsCalculator:
    """
    Calculates attribute bounds of meshes.

    This touches every vertex, so the report only runs it when asked to.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def calculate(self, mesh: MeshData) -> Dict[int, Bounds]:
        """
        Calculate bounds of all bounded attributes of a mesh.

        Args:
            mesh: Mesh to go through

        Returns:
            Dict mapping attribute index in mesh.attributes to its bounds.
            Attributes that aren't bounded, and empty meshes, have no entry.
        """
        bounds = {}
        if mesh.vertex_count == 0:
            return bounds

        for i, attribute in enumerate(mesh.attributes):
            if attribute.name not in BOUNDED_ATTRIBUTES:
                continue

            raw = decode_attribute(attribute, mesh.vertex_count)
            values = unpack(raw, attribute.format,
                            integer=attribute.name in INTEGER_ATTRIBUTES)
            bounds[i] = Bounds(tuple(values.min(axis=0).tolist()),
                               tuple(values.max(axis=0).tolist()))

        self.logger.debug("Calculated bounds of %d attributes over %d vertices",
                          len(bounds), mesh.vertex_count)
        return bounds

    def index_bounds(self, indices: Optional[MeshIndexData]) -> Optional[Bounds]:
        """Smallest and largest index value, or None for non-indexed or empty meshes."""
        if indices is None or indices.count == 0:
            return None
        values = np.frombuffer(indices.data, dtype=np.dtype(indices.format.dtype),
                               count=indices.count)
        return Bounds((int(values.min()),), (int(values.max()),))
