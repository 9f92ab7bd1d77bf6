# ABOUTME: Reporter for materials, their attributes and layers
# ABOUTME: Base layer first, then named or unnamed extra layers

from typing import List

from ..records import Category, LAYER_NAME, MaterialAttributeData, MaterialData, flag_labels
from ..references import OutOfRangeReference
from .common import CategoryReporter, format_value


class MaterialReporter(CategoryReporter):
    categories = (Category.MATERIAL,)
    referenced_by = ('object', 'objects')

    def describe(self, category, id, material: MaterialData, level=0) -> List[str]:
        lines = []
        if material.types:
            lines.append(f"  Type: {flag_labels(material.types)}")

        for i, layer in enumerate(material.layers):
            attributes = [a for a in layer if a.name != LAYER_NAME]
            if i == 0:
                if not attributes:
                    continue
                lines.append("  Base layer:")
            else:
                layer_name = next((a.value for a in layer if a.name == LAYER_NAME), '')
                lines.append(f"  Layer {i}:" + (f" {layer_name}" if layer_name else ''))
            for attribute in attributes:
                lines.append("    " + self.describe_attribute(attribute))
        return lines

    def describe_attribute(self, attribute: MaterialAttributeData) -> str:
        return f"{attribute.name} @ {attribute.type}: {format_value(attribute.value)}"

    def describe_out_of_range(self, reference: OutOfRangeReference) -> str:
        return (f"Attribute {reference.label} references "
                f"{reference.target_category.tag} {reference.target} "
                f"out of range of {reference.target_count}")
