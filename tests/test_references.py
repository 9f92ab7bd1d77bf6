# ABOUTME: Test suite for reference counting between scenes, materials, textures and images
# ABOUTME: Covers pre-seeded zero counts, out-of-range findings and tracking

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from scene_info.records import (
    Category, MaterialAttributeData, MaterialData, MaterialType, SamplerFilter,
    SamplerMipmap, SamplerWrapping, SceneData, SceneField, SceneFieldData,
    TextureData, TextureType
)
from scene_info.references import ReferenceAnalyzer


def make_texture(texture_type, image):
    return TextureData(texture_type, SamplerFilter.LINEAR, SamplerFilter.LINEAR,
                       SamplerMipmap.BASE, SamplerWrapping.REPEAT, image)


class TestSceneReferences:
    """Tests for references from scene fields."""

    def test_counts_are_multiplicities(self):
        """Test that every mapping entry counts, duplicates included."""
        analyzer = ReferenceAnalyzer({Category.MESH: 3})
        analyzer.track(Category.SCENE)
        scene = SceneData('UnsignedInt', 4, [
            SceneFieldData(SceneField.MESH, [0, 1, 2, 3], 'UnsignedInt', [2, 2, 0, 2]),
        ])
        analyzer.add(Category.SCENE, 0, scene)

        assert analyzer.references(Category.MESH) == {0: 1, 1: 0, 2: 3}
        assert analyzer.unreferenced(Category.MESH) == [1]
        assert analyzer.out_of_range == []

    def test_every_id_referenced_or_unreferenced(self):
        """Test that valid ids partition into referenced and unreferenced."""
        analyzer = ReferenceAnalyzer({Category.LIGHT: 5})
        analyzer.track(Category.SCENE)
        analyzer.add_scene(0, SceneData('UnsignedInt', 3, [
            SceneFieldData(SceneField.LIGHT, [0, 1, 2], 'UnsignedInt', [4, 1, 7]),
        ]))

        counts = analyzer.references(Category.LIGHT)
        referenced = {i for i, n in counts.items() if n > 0}
        unreferenced = set(analyzer.unreferenced(Category.LIGHT))
        assert referenced | unreferenced == set(range(5))
        assert not referenced & unreferenced

    def test_value_equal_to_count_is_out_of_range(self):
        """Test the boundary value of an out-of-range reference."""
        analyzer = ReferenceAnalyzer({Category.MESH: 2})
        analyzer.add_scene(3, SceneData('UnsignedInt', 8, [
            SceneFieldData(SceneField.MESH, [7], 'UnsignedInt', [2]),
        ]))

        assert len(analyzer.out_of_range) == 1
        reference = analyzer.out_of_range[0]
        assert reference.source_category is Category.SCENE
        assert reference.source_id == 3
        assert reference.object == 7
        assert reference.target_category is Category.MESH
        assert reference.target == 2
        assert reference.target_count == 2
        assert analyzer.out_of_range_from(Category.SCENE, 3) == [reference]
        assert analyzer.out_of_range_from(Category.SCENE, 0) == []

    def test_no_material_is_skipped(self):
        """Test that a material index of -1 is neither counted nor out of range."""
        analyzer = ReferenceAnalyzer({Category.MATERIAL: 1})
        analyzer.add_scene(0, SceneData('UnsignedInt', 2, [
            SceneFieldData(SceneField.MESH_MATERIAL, [0, 1], 'Int', [-1, 0]),
        ]))

        assert analyzer.references(Category.MATERIAL) == {0: 1}
        assert analyzer.out_of_range == []

    def test_skin_dimensionality(self):
        """Test that skins of 2D scenes count toward 2D skins."""
        analyzer = ReferenceAnalyzer({Category.SKIN2D: 1, Category.SKIN3D: 1})
        analyzer.add_scene(0, SceneData('UnsignedInt', 1, [
            SceneFieldData(SceneField.TRANSFORMATION, [0], 'Matrix3x3'),
            SceneFieldData(SceneField.SKIN, [0], 'UnsignedInt', [0]),
        ]))
        analyzer.add_scene(1, SceneData('UnsignedInt', 1, [
            SceneFieldData(SceneField.SKIN, [0], 'UnsignedInt', [0]),
        ]))

        assert analyzer.references(Category.SKIN2D) == {0: 1}
        assert analyzer.references(Category.SKIN3D) == {0: 1}

    def test_fields_without_targets_ignored(self):
        """Test that parent and custom fields don't count as references."""
        analyzer = ReferenceAnalyzer({Category.MESH: 1})
        analyzer.add_scene(0, SceneData('UnsignedInt', 2, [
            SceneFieldData(SceneField.PARENT, [0, 1], 'Int', [-1, 0]),
            SceneFieldData(1234, [1], 'UnsignedInt', [55]),
        ]))

        assert analyzer.references(Category.MESH) == {0: 0}
        assert analyzer.out_of_range == []

    def test_objects_past_object_count(self):
        """Test that objects mapped past the object count are reported once per field."""
        analyzer = ReferenceAnalyzer({Category.OBJECT: 2, Category.MESH: 1})
        analyzer.add_scene(0, SceneData('UnsignedInt', 6, [
            SceneFieldData(SceneField.MESH, [0, 5, 5], 'UnsignedInt', [0, 0, 0]),
        ]))

        assert analyzer.references(Category.MESH) == {0: 3}
        assert len(analyzer.out_of_range) == 1
        reference = analyzer.out_of_range[0]
        assert reference.target_category is Category.OBJECT
        assert reference.target == 5
        assert reference.target_count == 2
        assert reference.field is SceneField.MESH

    def test_object_mapping_unchecked_without_objects(self):
        """Test that mappings aren't checked when objects aren't supported."""
        analyzer = ReferenceAnalyzer({Category.MESH: 1})
        analyzer.add_scene(0, SceneData('UnsignedInt', 6, [
            SceneFieldData(SceneField.MESH, [5], 'UnsignedInt', [0]),
        ]))

        assert analyzer.out_of_range == []


class TestMaterialAndTextureReferences:
    """Tests for references from materials and textures."""

    def test_texture_attributes(self):
        """Test that only UnsignedInt attributes named *Texture are references."""
        analyzer = ReferenceAnalyzer({Category.TEXTURE: 2})
        analyzer.add_material(0, MaterialData(MaterialType.PHONG, [
            MaterialAttributeData('DiffuseTexture', 1),
            MaterialAttributeData('NormalTexture', 5),
            MaterialAttributeData('DiffuseTextureMatrix', (1.0, 0.0, 0.0, 1.0)),
            MaterialAttributeData('Shininess', 80.0),
        ]))

        assert analyzer.references(Category.TEXTURE) == {0: 0, 1: 1}
        assert len(analyzer.out_of_range) == 1
        assert analyzer.out_of_range[0].label == 'NormalTexture'
        assert analyzer.out_of_range[0].target == 5

    def test_texture_image_category(self):
        """Test that texture types map to the right image category."""
        analyzer = ReferenceAnalyzer({Category.IMAGE1D: 1, Category.IMAGE2D: 2,
                                      Category.IMAGE3D: 1})
        analyzer.add_texture(0, make_texture(TextureType.TEXTURE_1D, 0))
        analyzer.add_texture(1, make_texture(TextureType.TEXTURE_1D_ARRAY, 1))
        analyzer.add_texture(2, make_texture(TextureType.CUBE_MAP, 0))
        analyzer.add_texture(3, make_texture(TextureType.TEXTURE_2D, 2))

        assert analyzer.references(Category.IMAGE1D) == {0: 1}
        assert analyzer.references(Category.IMAGE2D) == {0: 0, 1: 1}
        assert analyzer.references(Category.IMAGE3D) == {0: 1}
        assert [(r.source_id, r.target_category) for r in analyzer.out_of_range] == \
            [(3, Category.IMAGE2D)]

    def test_unsupported_target_not_out_of_range(self):
        """Test that references into categories without a count are ignored."""
        analyzer = ReferenceAnalyzer({Category.TEXTURE: 1})
        analyzer.add_texture(0, make_texture(TextureType.TEXTURE_2D, 0))
        analyzer.add_material(0, MaterialData(MaterialType.PHONG, [
            MaterialAttributeData('DiffuseTexture', 0),
        ]))

        assert analyzer.out_of_range == []
        assert analyzer.references(Category.IMAGE2D) == {}
        assert analyzer.references(Category.TEXTURE) == {0: 1}


class TestTracking:
    """Tests for when reference counts are reported."""

    def test_untracked_counts_are_none(self):
        """Test that counts aren't reported before their source ran."""
        analyzer = ReferenceAnalyzer({Category.MESH: 1, Category.TEXTURE: 1})

        assert analyzer.reference_count(Category.MESH, 0) is None

        analyzer.track(Category.SCENE)
        assert analyzer.reference_count(Category.MESH, 0) == 0
        assert analyzer.reference_count(Category.TEXTURE, 0) is None

    def test_non_source_categories_ignored(self):
        """Test that adding a record of a non-source category does nothing."""
        analyzer = ReferenceAnalyzer({Category.MESH: 1})
        analyzer.add(Category.MESH, 0, object())

        assert analyzer.references(Category.MESH) == {0: 0}
