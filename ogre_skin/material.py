import logging
from typing import Any, Dict, List, Optional, TextIO
import numpy as np

from .resources import MATERIAL_KIND, TEXTURE_KIND, ResourceResolver, TextureCache
from .utils.common import strip_filename

logger = logging.getLogger(__name__)

DEFAULT_SHININESS = 1.0
DEFAULT_TRANSPARENCY = 1.0


class Material:
    """Fixed-function lighting coefficients and texture handles for one pass"""

    def __init__(self, name: str = ""):
        """
        Initialize material with black colors and opaque emissive alpha

        Args:
            name: Stripped name of the material descriptor
        """
        self.name = name
        self.ambient = np.zeros(4, dtype=np.float32)
        self.diffuse = np.zeros(4, dtype=np.float32)
        self.specular = np.zeros(4, dtype=np.float32)
        self.emissive = np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float32)
        self.shininess = DEFAULT_SHININESS
        self.transparency = DEFAULT_TRANSPARENCY
        self.texture: Optional[Any] = None
        self.bump_texture: Optional[Any] = None

    def to_json(self) -> dict:
        return {
            "name": self.name,
            "ambient": self.ambient.tolist(),
            "diffuse": self.diffuse.tolist(),
            "specular": self.specular.tolist(),
            "emissive": self.emissive.tolist(),
            "shininess": self.shininess,
            "transparency": self.transparency,
            "texture": None if self.texture is None else str(self.texture),
            "bump_texture": None if self.bump_texture is None else str(self.bump_texture),
        }

    def __repr__(self) -> str:
        return f"Material(name='{self.name}', texture={self.texture!r})"


class RenderPass:
    """One resolved material used to draw a submesh"""

    def __init__(self, material: Material):
        self.material = material

    def __repr__(self) -> str:
        return f"RenderPass(material='{self.material.name}')"


def _parse_floats(tokens: List[str], count: int) -> Optional[np.ndarray]:
    if len(tokens) < count:
        return None
    try:
        return np.array([float(t) for t in tokens[:count]], dtype=np.float32)
    except ValueError:
        return None


class MaterialResolver:
    """
    Reads line-oriented material descriptors into render passes.

    Supported directives, one per line::

        ambient r g b a
        diffuse r g b a
        specular r g b a
        emissive r g b
        texture <file>
        texture_bump <file>

    Anything else, including malformed directive lines, is skipped.
    """

    def __init__(self,
                 resources: ResourceResolver,
                 texture_cache: Optional[TextureCache] = None,
                 material_kind: str = MATERIAL_KIND,
                 texture_kind: str = TEXTURE_KIND):
        self.resources = resources
        self.texture_cache = texture_cache if texture_cache is not None else TextureCache()
        self.material_kind = material_kind
        self.texture_kind = texture_kind
        self._materials: Dict[str, Material] = {}

    def resolve_render_passes(self, material_name: str) -> List[RenderPass]:
        """
        Resolve a submesh material reference to its render passes

        Args:
            material_name: Material reference as written in the mesh asset

        Returns:
            List holding exactly one RenderPass

        Raises:
            ResourceNotFoundError: Material or one of its textures is missing
        """
        return [RenderPass(self.resolve_material(material_name))]

    def resolve_material(self, material_name: str) -> Material:
        stripped = strip_filename(material_name)
        if stripped not in self._materials:
            identifier = self.resources.require(material_name, self.material_kind)
            with self.resources.open_text(identifier) as stream:
                self._materials[stripped] = self.read_material(stream, stripped)
        return self._materials[stripped]

    def read_material(self, stream: TextIO, name: str = "") -> Material:
        """
        Parse a material descriptor

        Args:
            stream: Text stream of the descriptor
            name: Material name used for logging and the result

        Returns:
            Material instance
        """
        material = Material(name)
        for line in stream:
            tokens = line.split()
            if not tokens:
                continue
            command, args = tokens[0], tokens[1:]

            if command in ("ambient", "diffuse", "specular"):
                color = _parse_floats(args, 4)
                if color is None:
                    logger.debug("Skipping malformed '%s' line in material %s", command, name)
                    continue
                setattr(material, command, color)
            elif command == "emissive":
                rgb = _parse_floats(args, 3)
                if rgb is None:
                    logger.debug("Skipping malformed 'emissive' line in material %s", name)
                    continue
                material.emissive = np.append(rgb, np.float32(1.0))
            elif command in ("texture", "texture_bump"):
                if not args:
                    logger.debug("Skipping '%s' line without a file in material %s", command, name)
                    continue
                texture = self._resolve_texture(args[0])
                logger.debug("Found %s %s in material file %s", command, strip_filename(args[0]), name)
                if command == "texture":
                    material.texture = texture
                else:
                    material.bump_texture = texture
        return material

    def _resolve_texture(self, filename: str) -> Any:
        identifier = self.resources.require(filename, self.texture_kind)
        return self.texture_cache.get(identifier)
