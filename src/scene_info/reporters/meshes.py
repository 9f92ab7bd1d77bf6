# ABOUTME: Reporter for meshes and their levels
# ABOUTME: Index and attribute layout, with optional per-attribute bounds

from typing import List

from ..bounds import Bounds
from ..records import Category, MeshAttributeData, MeshData
from .common import CategoryReporter, duplicate_marker, format_data, format_value, plural


def format_bounds(bounds: Bounds) -> str:
    if len(bounds.min) == 1:
        return f"Bounds: {format_value(bounds.min[0])} to {format_value(bounds.max[0])}"
    return f"Bounds: {format_value(bounds.min)} to {format_value(bounds.max)}"


class MeshReporter(CategoryReporter):
    """
    Describes every level of a mesh under one header.

    When a BoundsCalculator is given, each bounded attribute and the index
    buffer get a nested bounds line.
    """

    categories = (Category.MESH,)
    referenced_by = ('object', 'objects')

    def describe(self, category, id, mesh: MeshData, level=0) -> List[str]:
        lines = [
            f"  Level {level}: {plural(mesh.vertex_count, 'vertex', 'vertices')}, "
            f"{mesh.primitive.label} ({format_data(mesh.vertex_data_size, mesh.data_flags)})"
        ]

        if mesh.indices is not None:
            fmt = mesh.indices.format
            lines.append(
                f"    {plural(mesh.indices.count, 'index', 'indices')} @ {fmt.name}, "
                f"stride {fmt.size} "
                f"({format_data(len(mesh.indices.data), mesh.index_data_flags)})"
            )
            if self.bounds is not None:
                index_bounds = self.bounds.index_bounds(mesh.indices)
                if index_bounds is not None:
                    lines.append("      " + format_bounds(index_bounds))

        attribute_bounds = self.bounds.calculate(mesh) if self.bounds is not None else {}
        seen = set()
        for i, attribute in enumerate(mesh.attributes):
            lines.append("    " + self.describe_attribute(attribute, seen))
            if i in attribute_bounds:
                lines.append("      " + format_bounds(attribute_bounds[i]))
        return lines

    def describe_attribute(self, attribute: MeshAttributeData, seen: set) -> str:
        text = (f"Offset {attribute.offset}: "
                f"{self.names.resolve(Category.MESH, attribute.name)} @ {attribute.format.name}")
        if attribute.array_size:
            text += f"[{attribute.array_size}]"
        text += f", stride {attribute.stride}"
        key = (attribute.name, attribute.format.name, attribute.array_size)
        return text + duplicate_marker(key, seen, self.style)
