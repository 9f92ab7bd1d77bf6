# ABOUTME: RecordSource backed by a trimesh scene loaded from disk
# ABOUTME: Exposes the scene graph, geometry, materials and texture images as records

import logging
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Union

import numpy as np
import trimesh
from PIL import Image

from .formats import index_format, vertex_format
from .records import (
    Category, ImageData, MaterialAttributeData, MaterialData, MaterialType,
    MeshAttribute, MeshAttributeData, MeshData, MeshIndexData, MeshPrimitive,
    SamplerFilter, SamplerMipmap, SamplerWrapping, SceneData, SceneField,
    SceneFieldData, TextureData, TextureType
)
from .source import RecordSource
from .utils.logging_utils import LOGGER_NAME


# trimesh PBR material attribute -> texture attribute name in the report
PBR_TEXTURES = [
    ('baseColorTexture', 'BaseColorTexture'),
    ('metallicRoughnessTexture', 'MetalnessTexture'),
    ('normalTexture', 'NormalTexture'),
    ('occlusionTexture', 'OcclusionTexture'),
    ('emissiveTexture', 'EmissiveTexture'),
]

# PIL image mode -> pixel format name
PIXEL_FORMATS = {
    '1': 'R1Unorm',
    'L': 'R8Unorm',
    'LA': 'RG8Unorm',
    'P': 'R8Unorm',
    'RGB': 'RGB8Unorm',
    'RGBA': 'RGBA8Unorm',
    'I': 'R32I',
    'F': 'R32F',
    'I;16': 'R16Unorm',
}

SUPPORTED_FILE_TYPES = {'.glb', '.gltf', '.obj', '.ply', '.stl', '.off', '.dae', '.3mf'}


def _color_to_float(color) -> tuple:
    """trimesh stores colors as RGBA bytes."""
    return tuple(float(c) / 255.0 for c in np.asarray(color).ravel())


class TrimeshSource(RecordSource):
    """
    Record source over a trimesh.Scene.

    Objects are scene graph nodes (base frame first, the rest sorted by
    name), meshes are the scene geometries, materials are collected from
    geometry visuals in geometry order, and every distinct texture image
    becomes one texture plus one 2D image.
    """

    def __init__(self, scene: trimesh.Scene, logger: Optional[logging.Logger] = None):
        self.scene = scene
        self.logger = logger or logging.getLogger(LOGGER_NAME)

        graph = scene.graph
        others = sorted((n for n in graph.nodes if n != graph.base_frame), key=str)
        self._nodes = [graph.base_frame] + others
        self._node_index = {node: i for i, node in enumerate(self._nodes)}

        self._geometry_names = list(scene.geometry.keys())
        self._geometry_index = {name: i for i, name in enumerate(self._geometry_names)}

        self._materials = []
        self._images: List[Image.Image] = []
        self._collect_materials()

        self.logger.debug(
            "Scene has %d nodes, %d geometries, %d materials, %d images",
            len(self._nodes), len(self._geometry_names),
            len(self._materials), len(self._images)
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'TrimeshSource':
        """
        Load a file into a scene.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file type isn't supported
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Input not found: {path}")
        if path.suffix.lower() not in SUPPORTED_FILE_TYPES:
            raise ValueError(
                f"Unsupported file type: {path.suffix}\n"
                f"Supported: {sorted(SUPPORTED_FILE_TYPES)}"
            )
        return cls(trimesh.load(str(path), force='scene'))

    def _material_of(self, geometry):
        visual = getattr(geometry, 'visual', None)
        if isinstance(visual, trimesh.visual.texture.TextureVisuals):
            return visual.material
        return None

    def _collect_materials(self):
        seen = set()
        for geometry in self.scene.geometry.values():
            material = self._material_of(geometry)
            if material is None or id(material) in seen:
                continue
            seen.add(id(material))
            self._materials.append(material)

            for image in self._material_images(material).values():
                if not any(image is i for i in self._images):
                    self._images.append(image)

    def _material_images(self, material) -> Dict[str, Image.Image]:
        """Texture attribute name -> image of a material."""
        images = {}
        if isinstance(material, trimesh.visual.material.PBRMaterial):
            for attribute, name in PBR_TEXTURES:
                image = getattr(material, attribute, None)
                if image is not None:
                    images[name] = image
        elif getattr(material, 'image', None) is not None:
            images['DiffuseTexture'] = material.image
        return images

    def _image_index(self, image) -> int:
        return next(i for i, candidate in enumerate(self._images) if candidate is image)

    # -- RecordSource interface ---------------------------------------------

    def capabilities(self) -> FrozenSet[Category]:
        return frozenset({Category.SCENE, Category.OBJECT, Category.MATERIAL,
                          Category.MESH, Category.TEXTURE, Category.IMAGE2D})

    def count(self, category: Category) -> int:
        return {
            Category.SCENE: 1,
            Category.OBJECT: len(self._nodes),
            Category.MATERIAL: len(self._materials),
            Category.MESH: len(self._geometry_names),
            Category.TEXTURE: len(self._images),
            Category.IMAGE2D: len(self._images),
        }.get(category, 0)

    def name(self, category: Category, id: int) -> str:
        if category is Category.OBJECT:
            return str(self._nodes[id])
        if category is Category.MESH:
            return str(self._geometry_names[id])
        if category is Category.MATERIAL:
            return getattr(self._materials[id], 'name', None) or ''
        return ''

    def fetch(self, category: Category, id: int, level: int = 0):
        builders = {
            Category.SCENE: self._scene,
            Category.MATERIAL: self._material,
            Category.MESH: self._mesh,
            Category.TEXTURE: self._texture,
            Category.IMAGE2D: self._image,
        }
        builder = builders.get(category)
        if builder is None or level != 0 or not 0 <= id < self.count(category):
            self.logger.error("%s %d level %d does not exist", category.tag, id, level)
            return None
        try:
            return builder(id)
        except (ValueError, TypeError) as e:
            self.logger.error("%s %d could not be converted: %s", category.tag, id, e)
            return None

    # -- Record builders ----------------------------------------------------

    def _scene(self, id: int) -> SceneData:
        transforms = self.scene.graph.transforms
        parents = transforms.parents
        children = [node for node in self._nodes if node in parents]

        with_geometry = []
        meshes = []
        materials = []
        for node in self._nodes:
            geometry_name = transforms.node_data[node].get('geometry')
            if geometry_name is None or geometry_name not in self._geometry_index:
                continue
            with_geometry.append(self._node_index[node])
            meshes.append(self._geometry_index[geometry_name])
            material = self._material_of(self.scene.geometry[geometry_name])
            materials.append(next(
                (i for i, m in enumerate(self._materials) if m is material), -1))

        child_ids = [self._node_index[node] for node in children]
        fields = [
            SceneFieldData(SceneField.PARENT, child_ids, 'Int',
                           [self._node_index[parents[node]] for node in children]),
            SceneFieldData(SceneField.TRANSFORMATION, child_ids, 'Matrix4x4'),
            SceneFieldData(SceneField.MESH, with_geometry, 'UnsignedInt', meshes),
            SceneFieldData(SceneField.MESH_MATERIAL, with_geometry, 'Int', materials),
        ]
        # 4-byte mapping plus value of each entry
        data_size = len(child_ids) * (4 + 4) + len(child_ids) * (4 + 64) + \
            len(with_geometry) * (4 + 4) * 2
        return SceneData('UnsignedInt', len(self._nodes), fields, data_size)

    def _material(self, id: int) -> MaterialData:
        material = self._materials[id]
        attributes = []
        if isinstance(material, trimesh.visual.material.PBRMaterial):
            types = MaterialType.PBR_METALLIC_ROUGHNESS
            if material.baseColorFactor is not None:
                attributes.append(MaterialAttributeData(
                    'BaseColor', _color_to_float(material.baseColorFactor)))
            if material.metallicFactor is not None:
                attributes.append(MaterialAttributeData('Metalness', float(material.metallicFactor)))
            if material.roughnessFactor is not None:
                attributes.append(MaterialAttributeData('Roughness', float(material.roughnessFactor)))
            if material.emissiveFactor is not None:
                attributes.append(MaterialAttributeData(
                    'EmissiveColor', tuple(float(c) for c in material.emissiveFactor)))
            if material.doubleSided:
                attributes.append(MaterialAttributeData('DoubleSided', True))
            if material.alphaCutoff is not None:
                attributes.append(MaterialAttributeData('AlphaMask', float(material.alphaCutoff)))
        else:
            types = MaterialType.PHONG
            for attribute, name in (('ambient', 'AmbientColor'), ('diffuse', 'DiffuseColor'),
                                    ('specular', 'SpecularColor')):
                color = getattr(material, attribute, None)
                if color is not None:
                    attributes.append(MaterialAttributeData(name, _color_to_float(color)))
            glossiness = getattr(material, 'glossiness', None)
            if glossiness is not None:
                attributes.append(MaterialAttributeData('Shininess', float(glossiness)))

        for name, image in self._material_images(material).items():
            attributes.append(MaterialAttributeData(name, self._image_index(image)))

        return MaterialData(types, attributes)

    def _mesh(self, id: int) -> MeshData:
        geometry = self.scene.geometry[self._geometry_names[id]]

        if isinstance(geometry, trimesh.Trimesh):
            primitive = MeshPrimitive.TRIANGLES
        elif isinstance(geometry, trimesh.PointCloud):
            primitive = MeshPrimitive.POINTS
        else:
            raise TypeError(f"unsupported geometry type {type(geometry).__name__}")

        vertices = np.asarray(geometry.vertices, dtype=np.float32)
        attributes = [MeshAttributeData(MeshAttribute.POSITION, vertex_format('Vector3'), vertices)]

        indices = None
        if primitive is MeshPrimitive.TRIANGLES:
            attributes.append(MeshAttributeData(
                MeshAttribute.NORMAL, vertex_format('Vector3'),
                np.asarray(geometry.vertex_normals, dtype=np.float32)))

            visual = geometry.visual
            if isinstance(visual, trimesh.visual.texture.TextureVisuals) and visual.uv is not None:
                attributes.append(MeshAttributeData(
                    MeshAttribute.TEXTURE_COORDINATES, vertex_format('Vector2'),
                    np.asarray(visual.uv, dtype=np.float32)))
            elif visual.kind == 'vertex':
                attributes.append(MeshAttributeData(
                    MeshAttribute.COLOR, vertex_format('Vector4ubNormalized'),
                    np.asarray(visual.vertex_colors, dtype=np.uint8)))

            indices = MeshIndexData(index_format('UnsignedInt'),
                                    np.asarray(geometry.faces, dtype=np.uint32))

        elif getattr(geometry, 'colors', None) is not None and len(geometry.colors):
            attributes.append(MeshAttributeData(
                MeshAttribute.COLOR, vertex_format('Vector4ubNormalized'),
                np.asarray(geometry.colors, dtype=np.uint8)))

        return MeshData(primitive, len(vertices), attributes, indices)

    def _texture(self, id: int) -> TextureData:
        # trimesh keeps no sampler state, these are the glTF defaults
        return TextureData(TextureType.TEXTURE_2D, SamplerFilter.LINEAR,
                           SamplerFilter.LINEAR, SamplerMipmap.LINEAR,
                           SamplerWrapping.REPEAT, id)

    def _image(self, id: int) -> ImageData:
        image = self._images[id]
        return ImageData(image.size, PIXEL_FORMATS.get(image.mode, image.mode),
                         len(image.tobytes()))
