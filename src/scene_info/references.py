# ABOUTME: Counts how often each record is referenced from scenes, materials and textures
# ABOUTME: Records out-of-range references separately from unreferenced ids

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from .records import (
    Category, IMAGE_CATEGORIES, MaterialData, SceneData, SceneField, SceneFieldData,
    TextureData
)


@dataclass
class OutOfRangeReference:
    """A reference whose target id is outside [0, target_count)."""
    source_category: Category
    source_id: int
    label: str
    target_category: Category
    target: int
    target_count: int
    object: Optional[int] = None
    # Scene field the reference comes from, for objects a scene maps past the object count
    field: Optional[Union[SceneField, int]] = None


# Which categories each source category references
REFERENCE_TARGETS = {
    Category.SCENE: (Category.MESH, Category.MATERIAL, Category.LIGHT,
                     Category.SKIN2D, Category.SKIN3D),
    Category.MATERIAL: (Category.TEXTURE,),
    Category.TEXTURE: IMAGE_CATEGORIES,
}

_SCENE_FIELD_TARGETS = {
    SceneField.MESH: Category.MESH,
    SceneField.MESH_MATERIAL: Category.MATERIAL,
    SceneField.LIGHT: Category.LIGHT,
}


class ReferenceAnalyzer:
    """
    Tallies references between records of one asset.

    Every valid id of every target category is pre-seeded with a zero count,
    so an id that was never referenced is distinguishable from one that is
    out of range. Malformed indices are data, nothing here raises.

    Usage:
        analyzer = ReferenceAnalyzer({Category.MESH: 3, ...})
        analyzer.track(Category.SCENE)
        analyzer.add(Category.SCENE, 0, scene)
        analyzer.reference_count(Category.MESH, 1)
    """

    def __init__(self, counts: Dict[Category, int]):
        self._counts = dict(counts)
        self._references: Dict[Category, Dict[int, int]] = {}
        for targets in REFERENCE_TARGETS.values():
            for target in targets:
                self._references[target] = {i: 0 for i in range(self._counts.get(target, 0))}
        self._tracked = set()
        self.out_of_range: List[OutOfRangeReference] = []

    def track(self, source_category: Category) -> None:
        """Mark a source category as scanned, making its targets' counts meaningful."""
        self._tracked.add(source_category)

    def is_tracked(self, target_category: Category) -> bool:
        return any(target_category in REFERENCE_TARGETS[source]
                   for source in self._tracked)

    def add(self, category: Category, id: int, record) -> None:
        """Scan one successfully retrieved record, ignoring non-source categories."""
        if category is Category.SCENE:
            self.add_scene(id, record)
        elif category is Category.MATERIAL:
            self.add_material(id, record)
        elif category is Category.TEXTURE:
            self.add_texture(id, record)

    def add_scene(self, scene_id: int, scene: SceneData) -> None:
        skin_target = Category.SKIN2D if scene.is_2d else Category.SKIN3D
        for f in scene.fields:
            self._check_mapping(scene_id, f)
            if f.name is SceneField.SKIN:
                target = skin_target
            else:
                target = _SCENE_FIELD_TARGETS.get(f.name)
            if target is None or f.values is None:
                continue
            for obj, value in zip(f.mapping, f.values):
                value = int(value)
                # -1 is "no material"
                if f.name is SceneField.MESH_MATERIAL and value == -1:
                    continue
                self._add(Category.SCENE, scene_id, f.name.label, target, value, int(obj))

    def _check_mapping(self, scene_id: int, f: SceneFieldData) -> None:
        """Record objects a field maps that are past the object count, once per field."""
        if Category.OBJECT not in self._counts:
            return
        object_count = self._counts[Category.OBJECT]
        label = f.name.label if isinstance(f.name, SceneField) else str(f.name)
        for obj in sorted({int(o) for o in f.mapping if int(o) >= object_count}):
            self.out_of_range.append(OutOfRangeReference(
                Category.SCENE, scene_id, label, Category.OBJECT, obj, object_count,
                obj, f.name))

    def add_material(self, material_id: int, material: MaterialData) -> None:
        for attribute in material.attributes:
            if attribute.is_texture:
                self._add(Category.MATERIAL, material_id, attribute.name,
                          Category.TEXTURE, int(attribute.value))

    def add_texture(self, texture_id: int, texture: TextureData) -> None:
        self._add(Category.TEXTURE, texture_id, 'image',
                  texture.image_category, int(texture.image))

    def _add(self, source_category, source_id, label, target, value, obj=None):
        # Categories missing from counts aren't supported by the source
        if target not in self._counts:
            return
        counts = self._references[target]
        if value in counts:
            counts[value] += 1
        else:
            self.out_of_range.append(OutOfRangeReference(
                source_category, source_id, label, target, value,
                self._counts.get(target, 0), obj))

    def reference_count(self, category: Category, id: int) -> Optional[int]:
        """
        Number of references to a record.

        Returns:
            The count, or None if nothing referencing this category was scanned
        """
        if not self.is_tracked(category):
            return None
        return self._references.get(category, {}).get(id)

    def references(self, category: Category) -> Dict[int, int]:
        return dict(self._references.get(category, {}))

    def unreferenced(self, category: Category) -> List[int]:
        return [i for i, n in self._references.get(category, {}).items() if n == 0]

    def out_of_range_from(self, category: Category, id: int) -> List[OutOfRangeReference]:
        """Out-of-range references originating from one record, in scan order."""
        return [r for r in self.out_of_range
                if r.source_category is category and r.source_id == id]
