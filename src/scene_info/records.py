# ABOUTME: Record types returned by a RecordSource for each asset category
# ABOUTME: Scenes, animations, skins, lights, materials, meshes, textures and images

import math
from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np

from .formats import VertexFormat


def camel_case(name: str) -> str:
    """Turn an enum member name like 'TEXTURE_1D_ARRAY' into 'Texture1DArray'."""
    return ''.join(
        part[0] + part[1:].lower() if part[:1].isalpha() else part
        for part in name.split('_')
    )


class _Labelled:
    """Mixin giving enum members a CamelCase display label."""

    @property
    def label(self) -> str:
        return camel_case(self.name)


def flag_labels(flags: Flag) -> str:
    """Comma-joined labels of the set bits, in declaration order."""
    return ', '.join(member.label for member in type(flags) if member in flags)


class Category(Enum):
    """Top-level record groups, in report order. Values are the line tags."""
    SCENE = 'Scene'
    OBJECT = 'Object'
    ANIMATION = 'Animation'
    SKIN2D = '2D skin'
    SKIN3D = '3D skin'
    LIGHT = 'Light'
    MATERIAL = 'Material'
    MESH = 'Mesh'
    TEXTURE = 'Texture'
    IMAGE1D = '1D image'
    IMAGE2D = '2D image'
    IMAGE3D = '3D image'

    @property
    def tag(self) -> str:
        return self.value


IMAGE_CATEGORIES = (Category.IMAGE1D, Category.IMAGE2D, Category.IMAGE3D)
SKIN_CATEGORIES = (Category.SKIN2D, Category.SKIN3D)


class DataFlag(_Labelled, Flag):
    OWNED = auto()
    EXTERNALLY_OWNED = auto()
    GLOBAL = auto()
    MUTABLE = auto()


# Flags of data allocated by the source itself, not shown in the report
DEFAULT_DATA_FLAGS = DataFlag.OWNED | DataFlag.MUTABLE


# -- Scenes ------------------------------------------------------------------

class SceneField(_Labelled, Enum):
    """Builtin scene fields, in canonical listing order."""
    PARENT = auto()
    TRANSFORMATION = auto()
    TRANSLATION = auto()
    ROTATION = auto()
    SCALING = auto()
    MESH = auto()
    MESH_MATERIAL = auto()
    LIGHT = auto()
    CAMERA = auto()
    SKIN = auto()
    IMPORTER_STATE = auto()


class SceneFieldFlag(_Labelled, Flag):
    OFFSET_ONLY = auto()
    IMPLICIT_MAPPING = auto()
    ORDERED_MAPPING = auto()


_TRANSFORM_FIELDS = (SceneField.TRANSFORMATION, SceneField.TRANSLATION,
                     SceneField.ROTATION, SceneField.SCALING)
_TYPES_2D = {'Matrix3x3', 'Matrix3x3d', 'Matrix3x2', 'Matrix3x2d', 'Vector2',
             'Vector2d', 'Complex', 'Complexd', 'DualComplex', 'DualComplexd'}
_TYPES_3D = {'Matrix4x4', 'Matrix4x4d', 'Matrix4x3', 'Matrix4x3d', 'Vector3',
             'Vector3d', 'Quaternion', 'Quaterniond', 'DualQuaternion',
             'DualQuaterniond'}


@dataclass
class SceneFieldData:
    """
    One field of a scene: an object mapping plus per-entry values.

    Attributes:
        name: Builtin SceneField, or an int for a custom field
        mapping: Object id of each entry
        field_type: Storage type name, e.g. 'UnsignedInt' or 'Matrix4x4'
        values: Entry values, required for fields referencing other records
        array_size: Array length of each entry, 0 for non-array fields
        flags: SceneFieldFlag bits
    """
    name: Union[SceneField, int]
    mapping: Sequence[int]
    field_type: str
    values: Optional[Sequence[Any]] = None
    array_size: int = 0
    flags: SceneFieldFlag = SceneFieldFlag(0)

    def __post_init__(self):
        if self.values is not None and len(self.values) != len(self.mapping):
            raise ValueError(
                f"Field has {len(self.mapping)} mapping entries "
                f"but {len(self.values)} values"
            )

    @property
    def size(self) -> int:
        return len(self.mapping)

    @property
    def is_custom(self) -> bool:
        return not isinstance(self.name, SceneField)


@dataclass
class SceneData:
    mapping_type: str
    mapping_bound: int
    fields: List[SceneFieldData]
    data_size: int = 0
    data_flags: DataFlag = DEFAULT_DATA_FLAGS

    def field(self, name: Union[SceneField, int]) -> Optional[SceneFieldData]:
        """First field of given name, or None."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def _transform_types(self):
        return {f.field_type for f in self.fields if f.name in _TRANSFORM_FIELDS}

    @property
    def is_2d(self) -> bool:
        return bool(self._transform_types() & _TYPES_2D)

    @property
    def is_3d(self) -> bool:
        return bool(self._transform_types() & _TYPES_3D)


# -- Animations --------------------------------------------------------------

class AnimationTrackTarget(_Labelled, Enum):
    TRANSLATION_2D = auto()
    TRANSLATION_3D = auto()
    ROTATION_2D = auto()
    ROTATION_3D = auto()
    SCALING_2D = auto()
    SCALING_3D = auto()


class Interpolation(_Labelled, Enum):
    CONSTANT = auto()
    LINEAR = auto()
    SPLINE = auto()
    CUSTOM = auto()


class Extrapolation(_Labelled, Enum):
    EXTRAPOLATED = auto()
    CONSTANT = auto()
    DEFAULT_CONSTRUCTED = auto()


@dataclass
class AnimationTrackData:
    target_type: Union[AnimationTrackTarget, int]
    target: int
    value_type: str
    keys: Sequence[float]
    result_type: Optional[str] = None
    interpolation: Interpolation = Interpolation.LINEAR
    before: Extrapolation = Extrapolation.CONSTANT
    after: Optional[Extrapolation] = None

    def __post_init__(self):
        if self.after is None:
            self.after = self.before

    @property
    def duration(self) -> Optional[Tuple[float, float]]:
        if not len(self.keys):
            return None
        return float(min(self.keys)), float(max(self.keys))


@dataclass
class AnimationData:
    tracks: List[AnimationTrackData]
    duration: Optional[Tuple[float, float]] = None
    data_size: int = 0
    data_flags: DataFlag = DEFAULT_DATA_FLAGS

    def __post_init__(self):
        # Implicit duration spans all track keys
        if self.duration is None:
            ranges = [t.duration for t in self.tracks if t.duration is not None]
            if ranges:
                self.duration = (min(r[0] for r in ranges), max(r[1] for r in ranges))
            else:
                self.duration = (0.0, 0.0)


# -- Skins -------------------------------------------------------------------

@dataclass
class SkinData:
    joints: Sequence[int]
    inverse_bind_matrices: Optional[Sequence[Any]] = None

    def __post_init__(self):
        if self.inverse_bind_matrices is not None and \
                len(self.inverse_bind_matrices) != len(self.joints):
            raise ValueError(
                f"Skin has {len(self.joints)} joints but "
                f"{len(self.inverse_bind_matrices)} inverse bind matrices"
            )


# -- Lights ------------------------------------------------------------------

class LightType(_Labelled, Enum):
    AMBIENT = auto()
    DIRECTIONAL = auto()
    POINT = auto()
    SPOT = auto()


@dataclass
class LightData:
    type: LightType
    color: Tuple[float, float, float]
    intensity: float
    attenuation: Optional[Tuple[float, float, float]] = None
    range: float = math.inf
    inner_cone_angle: float = 0.0
    outer_cone_angle: float = 45.0

    def __post_init__(self):
        if self.attenuation is None:
            if self.type in (LightType.POINT, LightType.SPOT):
                self.attenuation = (1.0, 0.0, 1.0)
            else:
                self.attenuation = (1.0, 0.0, 0.0)

    @property
    def has_attenuation(self) -> bool:
        return self.type in (LightType.POINT, LightType.SPOT)


# -- Materials ---------------------------------------------------------------

class MaterialType(_Labelled, Flag):
    FLAT = auto()
    PHONG = auto()
    PBR_METALLIC_ROUGHNESS = auto()
    PBR_SPECULAR_GLOSSINESS = auto()
    PBR_CLEAR_COAT = auto()


LAYER_NAME = '$LayerName'


def infer_attribute_type(value: Any) -> str:
    """Type name of a material attribute value."""
    if isinstance(value, (bool, np.bool_)):
        return 'Bool'
    if isinstance(value, (int, np.integer)):
        return 'UnsignedInt' if value >= 0 else 'Int'
    if isinstance(value, (float, np.floating)):
        return 'Float'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, Enum):
        return type(value).__name__
    if isinstance(value, (tuple, list, np.ndarray)):
        n = len(value)
        if n in (2, 3, 4):
            return f'Vector{n}'
        if n == 9:
            return 'Matrix3x3'
    return 'Pointer'


@dataclass
class MaterialAttributeData:
    name: str
    value: Any
    type: Optional[str] = None

    def __post_init__(self):
        if self.type is None:
            self.type = infer_attribute_type(self.value)

    @property
    def is_texture(self) -> bool:
        """Attribute holds an index into the texture list."""
        return self.type == 'UnsignedInt' and self.name.endswith('Texture')


@dataclass
class MaterialData:
    """
    Material with attributes optionally split into layers.

    layer_offsets holds the end offset of each layer in attributes, the
    first layer being the base layer. None means a single base layer.
    """
    types: MaterialType
    attributes: List[MaterialAttributeData]
    layer_offsets: Optional[Sequence[int]] = None

    def __post_init__(self):
        self.attributes = [
            a if isinstance(a, MaterialAttributeData) else MaterialAttributeData(*a)
            for a in self.attributes
        ]
        if self.layer_offsets is not None:
            offsets = list(self.layer_offsets)
            if offsets != sorted(offsets) or (offsets and offsets[-1] != len(self.attributes)):
                raise ValueError(f"Invalid material layer offsets: {offsets}")

    @property
    def layers(self) -> List[List[MaterialAttributeData]]:
        if self.layer_offsets is None:
            return [list(self.attributes)]
        layers = []
        begin = 0
        for end in self.layer_offsets:
            layers.append(self.attributes[begin:end])
            begin = end
        return layers


# -- Meshes ------------------------------------------------------------------

class MeshPrimitive(_Labelled, Enum):
    POINTS = auto()
    LINES = auto()
    LINE_LOOP = auto()
    LINE_STRIP = auto()
    TRIANGLES = auto()
    TRIANGLE_STRIP = auto()
    TRIANGLE_FAN = auto()
    INSTANCES = auto()
    FACES = auto()
    EDGES = auto()
    MESHLETS = auto()


class MeshAttribute(_Labelled, Enum):
    POSITION = auto()
    TANGENT = auto()
    BITANGENT = auto()
    NORMAL = auto()
    TEXTURE_COORDINATES = auto()
    COLOR = auto()
    JOINT_IDS = auto()
    WEIGHTS = auto()
    OBJECT_ID = auto()


def _to_bytes(data) -> bytes:
    if isinstance(data, np.ndarray):
        return np.ascontiguousarray(data).tobytes()
    return bytes(data)


@dataclass
class MeshIndexData:
    format: VertexFormat
    data: bytes

    def __post_init__(self):
        self.data = _to_bytes(self.data)

    @property
    def count(self) -> int:
        return len(self.data) // self.format.size


@dataclass
class MeshAttributeData:
    """
    One vertex attribute inside a raw vertex buffer.

    The same buffer object may be shared by several attributes of an
    interleaved layout, each with its own offset and stride.
    """
    name: Union[MeshAttribute, int]
    format: VertexFormat
    data: bytes
    offset: int = 0
    stride: Optional[int] = None
    array_size: int = 0

    def __post_init__(self):
        if not isinstance(self.data, bytes):
            self.data = _to_bytes(self.data)
        if self.stride is None:
            self.stride = self.format.size * max(self.array_size, 1)

    @property
    def is_custom(self) -> bool:
        return not isinstance(self.name, MeshAttribute)


@dataclass
class MeshData:
    primitive: MeshPrimitive
    vertex_count: int
    attributes: List[MeshAttributeData] = field(default_factory=list)
    indices: Optional[MeshIndexData] = None
    vertex_data_size: Optional[int] = None
    data_flags: DataFlag = DEFAULT_DATA_FLAGS
    index_data_flags: DataFlag = DEFAULT_DATA_FLAGS

    def __post_init__(self):
        if self.vertex_data_size is None:
            # Interleaved attributes share one buffer, count it once
            buffers = {id(a.data): len(a.data) for a in self.attributes}
            self.vertex_data_size = sum(buffers.values())


# -- Textures ----------------------------------------------------------------

class TextureType(_Labelled, Enum):
    TEXTURE_1D = auto()
    TEXTURE_1D_ARRAY = auto()
    TEXTURE_2D = auto()
    TEXTURE_2D_ARRAY = auto()
    TEXTURE_3D = auto()
    CUBE_MAP = auto()
    CUBE_MAP_ARRAY = auto()


class SamplerFilter(_Labelled, Enum):
    NEAREST = auto()
    LINEAR = auto()


class SamplerMipmap(_Labelled, Enum):
    BASE = auto()
    NEAREST = auto()
    LINEAR = auto()


class SamplerWrapping(_Labelled, Enum):
    REPEAT = auto()
    MIRRORED_REPEAT = auto()
    CLAMP_TO_EDGE = auto()
    CLAMP_TO_BORDER = auto()
    MIRROR_CLAMP_TO_EDGE = auto()


_TEXTURE_IMAGE_CATEGORY = {
    TextureType.TEXTURE_1D: Category.IMAGE1D,
    TextureType.TEXTURE_1D_ARRAY: Category.IMAGE2D,
    TextureType.TEXTURE_2D: Category.IMAGE2D,
    TextureType.TEXTURE_2D_ARRAY: Category.IMAGE3D,
    TextureType.TEXTURE_3D: Category.IMAGE3D,
    TextureType.CUBE_MAP: Category.IMAGE3D,
    TextureType.CUBE_MAP_ARRAY: Category.IMAGE3D,
}


@dataclass
class TextureData:
    type: TextureType
    minification: SamplerFilter
    magnification: SamplerFilter
    mipmap: SamplerMipmap
    wrapping: Union[SamplerWrapping, Tuple[SamplerWrapping, ...]]
    image: int

    def __post_init__(self):
        if isinstance(self.wrapping, SamplerWrapping):
            self.wrapping = (self.wrapping,) * 3
        else:
            self.wrapping = tuple(self.wrapping)

    @property
    def image_category(self) -> Category:
        return _TEXTURE_IMAGE_CATEGORY[self.type]


# -- Images ------------------------------------------------------------------

class ImageFlag(_Labelled, Flag):
    ARRAY = auto()
    CUBE_MAP = auto()


@dataclass
class ImageData:
    size: Tuple[int, ...]
    format: str
    data_size: int = 0
    compressed: bool = False
    flags: ImageFlag = ImageFlag(0)

    def __post_init__(self):
        self.size = tuple(int(s) for s in self.size)
        if not 1 <= len(self.size) <= 3:
            raise ValueError(f"Invalid image size: {self.size}")

    @property
    def dimensions(self) -> int:
        return len(self.size)
