import logging
from typing import List, Optional, Dict, Tuple
import numpy as np

from .errors import FormatError, ParseError
from .events import ElementEnd, ElementStart, EventCursor, Source, get_float, get_int, get_str, iter_events
from .material import MaterialResolver, RenderPass

logger = logging.getLogger(__name__)

MAX_FACE_INDEX = 0xFFFF


class Vertex:
    """Vertex attributes and the bone weights that skin it"""

    def __init__(self):
        self.position = np.zeros(3)
        self.normal = np.zeros(3)
        self.tex_coords = np.zeros(2)
        # (bone_index, weight) in encounter order, not normalized
        self.bone_weights: List[Tuple[int, float]] = []

    @property
    def bones(self) -> List[int]:
        return [bone for bone, _ in self.bone_weights]

    @property
    def weights(self) -> List[float]:
        return [weight for _, weight in self.bone_weights]

    def __repr__(self) -> str:
        return f"Vertex(position={self.position.tolist()}, weights={len(self.bone_weights)})"


class Mesh:
    POSITION = 'position'
    NORMAL = 'normal'
    UV0 = 'uv0'
    """Mesh class for storing one submesh's geometry, skinning data and render passes"""

    def __init__(self, vertices: List[Vertex], faces: np.ndarray, render_passes: List[RenderPass], name: str = ""):
        """
        Initialize mesh

        Args:
            vertices: Vertex list, fixed size
            faces: (M, 3) uint16 array of vertex indices
            render_passes: Resolved render passes for this submesh
            name: Mesh name
        """
        self.name = name
        self.vertices = vertices
        self.faces = faces
        self.render_passes = render_passes
        self.bounds_min: Optional[np.ndarray] = None
        self.bounds_max: Optional[np.ndarray] = None
        if vertices:
            positions = self.get_vertex_attribute(Mesh.POSITION)
            self.bounds_min = np.min(positions, axis=0)
            self.bounds_max = np.max(positions, axis=0)

    def get_vertex_attribute(self, name: str) -> Optional[np.ndarray]:
        """Get a packed vertex attribute array

        Args:
            name: Attribute name (Mesh.POSITION, Mesh.NORMAL or Mesh.UV0)

        Returns:
            (N, 3) or (N, 2) float32 array, or None for an unknown attribute
        """
        field = {Mesh.POSITION: 'position', Mesh.NORMAL: 'normal', Mesh.UV0: 'tex_coords'}.get(name)
        if field is None:
            return None
        width = 2 if name == Mesh.UV0 else 3
        if not self.vertices:
            return np.zeros((0, width), dtype=np.float32)
        return np.array([getattr(v, field) for v in self.vertices], dtype=np.float32)

    def has_skinning_data(self) -> bool:
        """Check if any vertex carries a bone weight"""
        return any(v.bone_weights for v in self.vertices)

    def get_vertex_count(self) -> int:
        return len(self.vertices)

    def get_face_count(self) -> int:
        return len(self.faces)

    def get_max_face_index(self) -> int:
        """
        Get the largest vertex index referenced by a face

        Returns:
            Largest index, or -1 if the mesh has no faces
        """
        return int(self.faces.max()) if len(self.faces) else -1

    def bounds_center(self) -> Optional[np.ndarray]:
        if self.bounds_min is not None and self.bounds_max is not None:
            return (self.bounds_min + self.bounds_max) * 0.5
        return None

    def to_json(self) -> Dict:
        return {
            "name": self.name,
            "vertex_count": self.get_vertex_count(),
            "face_count": self.get_face_count(),
            "skinned": self.has_skinning_data(),
            "materials": [p.material.to_json() for p in self.render_passes],
        }

    def __repr__(self) -> str:
        return f"Mesh(name='{self.name}', vertices={self.get_vertex_count()}, faces={self.get_face_count()}, passes={len(self.render_passes)})"


def _get_count(event: ElementStart, key: str) -> int:
    count = get_int(event, key)
    if count < 0:
        raise FormatError(f"<{event.name} {key}='{count}'> must not be negative")
    return count


def _get_face_index(event: ElementStart, key: str) -> int:
    index = get_int(event, key)
    if not 0 <= index <= MAX_FACE_INDEX:
        raise ParseError(f"<face {key}='{index}'> does not fit in 16 bits")
    return index


def _current_vertex(vertices: Optional[List[Vertex]], vertex_cursor: int, element: str) -> Vertex:
    if vertices is None:
        raise FormatError(f"<{element}> appears before the geometry vertex count")
    if vertex_cursor >= len(vertices):
        raise FormatError(f"<{element}> for vertex {vertex_cursor} exceeds vertexcount {len(vertices)}")
    return vertices[vertex_cursor]


def _read_submesh(cursor: EventCursor, start: ElementStart, materials: MaterialResolver, name: str) -> Mesh:
    render_passes = materials.resolve_render_passes(get_str(start, "material"))

    faces: Optional[np.ndarray] = None
    face_cursor = 0
    vertices: Optional[List[Vertex]] = None
    # Every vertexbuffer describes other attributes of the same vertices
    vertex_cursor = 0

    for event in cursor.scope():
        if isinstance(event, ElementEnd):
            if event.name == "vertexbuffer":
                vertex_cursor = 0
            elif event.name == "vertex":
                vertex_cursor += 1
            continue

        if event.name == "faces":
            if faces is not None:
                raise FormatError(f"faces declared twice in submesh '{name}'")
            faces = np.zeros((_get_count(event, "count"), 3), dtype=np.uint16)
        elif event.name == "face":
            if faces is None:
                raise FormatError(f"<face> appears before the faces count in submesh '{name}'")
            if face_cursor >= len(faces):
                raise FormatError(f"submesh '{name}' has more faces than its count of {len(faces)}")
            faces[face_cursor] = [_get_face_index(event, key) for key in ("v1", "v2", "v3")]
            face_cursor += 1
        elif event.name == "geometry":
            if vertices is not None:
                raise FormatError(f"geometry declared twice in submesh '{name}'")
            vertices = [Vertex() for _ in range(_get_count(event, "vertexcount"))]
        elif event.name == "position":
            vertex = _current_vertex(vertices, vertex_cursor, event.name)
            vertex.position = np.array([get_float(event, k) for k in ("x", "y", "z")])
        elif event.name == "normal":
            vertex = _current_vertex(vertices, vertex_cursor, event.name)
            vertex.normal = np.array([get_float(event, k) for k in ("x", "y", "z")])
        elif event.name == "texcoord":
            vertex = _current_vertex(vertices, vertex_cursor, event.name)
            vertex.tex_coords = np.array([get_float(event, "u"), get_float(event, "v")])
        elif event.name == "vertexboneassignment":
            if vertices is None:
                raise FormatError(f"<vertexboneassignment> appears before the geometry vertex count in submesh '{name}'")
            vertex_index = get_int(event, "vertexindex")
            if not 0 <= vertex_index < len(vertices):
                raise FormatError(f"bone assignment targets vertex {vertex_index} of {len(vertices)}")
            vertices[vertex_index].bone_weights.append((get_int(event, "boneindex"), get_float(event, "weight")))

    if faces is None:
        faces = np.zeros((0, 3), dtype=np.uint16)
    elif face_cursor < len(faces):
        logger.warning("Submesh '%s' declares %d faces but lists %d", name, len(faces), face_cursor)

    return Mesh(vertices if vertices is not None else [], faces, render_passes, name=name)


def read_meshes(source: Source, materials: MaterialResolver) -> List[Mesh]:
    """
    Read every submesh of a mesh asset

    Args:
        source: File path or binary file object of the mesh XML
        materials: Resolver for submesh material references

    Returns:
        One Mesh per submesh, in document order

    Raises:
        ParseError: A token failed to parse
        FormatError: Geometry or face declarations are inconsistent
        ResourceNotFoundError: A material or texture is missing
    """
    cursor = EventCursor(iter_events(source))
    meshes: List[Mesh] = []
    for event in cursor:
        if isinstance(event, ElementStart) and event.name == "submesh":
            mesh = _read_submesh(cursor, event, materials, name=f"submesh_{len(meshes)}")
            meshes.append(mesh)
    logger.info("Read %d submeshes with %d vertices", len(meshes), sum(m.get_vertex_count() for m in meshes))
    return meshes
