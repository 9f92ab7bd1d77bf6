# ABOUTME: Reporter for lights
# ABOUTME: Type, color, intensity, and attenuation and range where they apply

from typing import List

from ..records import Category, LightData, LightType
from .common import CategoryReporter, format_value


class LightReporter(CategoryReporter):
    categories = (Category.LIGHT,)
    referenced_by = ('object', 'objects')

    def describe(self, category, id, light: LightData, level=0) -> List[str]:
        light_type = light.type.label
        if light.type is LightType.SPOT:
            light_type += (f", {format_value(light.inner_cone_angle)} - "
                           f"{format_value(light.outer_cone_angle)} degrees")

        lines = [
            f"  Type: {light_type}",
            f"  Color: {format_value(light.color)}",
            f"  Intensity: {format_value(light.intensity)}",
        ]
        # Ambient and directional lights have no falloff
        if light.has_attenuation:
            lines.append(f"  Attenuation: {format_value(light.attenuation)}")
            lines.append(f"  Range: {format_value(light.range)}")
        return lines
