# ABOUTME: Reporters for scenes and the objects they reference
# ABOUTME: Lists fields in canonical order and aggregates per-object fields across scenes

from typing import Callable, Dict, List, Union

from ..records import Category, SceneData, SceneField, SceneFieldData, flag_labels
from ..references import OutOfRangeReference
from .common import CategoryReporter, duplicate_marker, format_data, format_header, plural


def field_order(name: Union[SceneField, int]):
    """Sort key putting builtin fields first in declaration order, custom ones after."""
    if isinstance(name, SceneField):
        return (0, name.value)
    return (1, 0)


class SceneReporter(CategoryReporter):
    categories = (Category.SCENE,)

    def describe(self, category, id, scene: SceneData, level=0) -> List[str]:
        lines = [
            f"  Bound: {plural(scene.mapping_bound, 'object')} @ {scene.mapping_type} "
            f"({format_data(scene.data_size, scene.data_flags)})"
        ]
        if not scene.fields:
            return lines

        lines.append("  Fields:")
        seen = set()
        # sorted() is stable, custom fields stay in encounter order
        for f in sorted(scene.fields, key=lambda f: field_order(f.name)):
            lines.append("    " + self.describe_field(f, seen))
        return lines

    def describe_field(self, f: SceneFieldData, seen: set) -> str:
        text = f"{self.names.resolve(Category.SCENE, f.name)} @ {f.field_type}"
        if f.array_size:
            text += f"[{f.array_size}]"
        if f.flags:
            text += ', ' + flag_labels(f.flags)
        text += ', ' + plural(f.size, 'entry', 'entries')
        return text + duplicate_marker((f.name, f.field_type, f.array_size), seen, self.style)

    def describe_out_of_range(self, reference: OutOfRangeReference) -> str:
        if reference.target_category is Category.OBJECT:
            return (f"{self.names.resolve(Category.SCENE, reference.field)} field maps "
                    f"object {reference.object} out of range of {reference.target_count}")
        return (f"Object {reference.object} references "
                f"{reference.target_category.tag} {reference.target} "
                f"out of range of {reference.target_count}")


class ObjectReporter(CategoryReporter):
    """
    Lists objects with the fields they have across all scenes.

    Objects are never fetched on their own, so this collects field
    membership from every successfully retrieved scene and renders
    everything in one go after the scenes.
    """

    categories = (Category.OBJECT,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._fields: Dict[int, Dict[Union[SceneField, int], int]] = {}

    def add_scene(self, scene_id: int, scene: SceneData) -> None:
        for f in scene.fields:
            for obj in f.mapping:
                fields = self._fields.setdefault(int(obj), {})
                fields[f.name] = fields.get(f.name, 0) + 1

    def field_list(self, obj: int) -> str:
        fields = self._fields.get(obj, {})
        names = []
        for name in sorted(fields, key=field_order):
            text = self.names.resolve(Category.SCENE, name)
            if fields[name] > 1:
                text += f"[{fields[name]}]"
            names.append(text)
        return ', '.join(names)

    def render_all(self, count: int, name_of: Callable[[int], str]) -> List[str]:
        """
        Render all objects that are in some scene or have a name.

        Args:
            count: Object count of the asset
            name_of: Returns the name of an object id
        """
        lines = []
        for obj in range(count):
            name = name_of(obj)
            if obj not in self._fields and not name:
                continue
            lines.append(format_header(Category.OBJECT, obj, name, style=self.style))
            if obj in self._fields:
                lines.append("  Fields: " + self.field_list(obj))
        return lines
