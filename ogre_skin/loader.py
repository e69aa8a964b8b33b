"""
Top-level loading of a mesh asset and its skeleton asset into one Model.

Loading is all-or-nothing: any failure in either stream is reported as a
ModelLoadError naming both assets, with the original error as its cause.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack
from pathlib import Path
from typing import List, Optional

from .errors import AssetError, FormatError, ModelLoadError
from .events import Source
from .material import MaterialResolver
from .mesh import Mesh, read_meshes
from .model import Model, assemble_model
from .resources import MATERIAL_KIND, MODEL_KIND, TEXTURE_KIND, DirectoryResources, ResourceResolver, TextureCache
from .skeleton import read_skeleton
from .utils.config import default_config

logger = logging.getLogger(__name__)


def describe_source(source: Source) -> str:
    """Return a printable identifier for a path or file object"""
    if isinstance(source, (str, Path)):
        return str(source)
    return str(getattr(source, "name", repr(source)))


def check_face_indices(meshes: List[Mesh]) -> None:
    """
    Check that every face references an existing vertex

    Raises:
        FormatError: A face index is not below its mesh's vertex count
    """
    for mesh in meshes:
        max_index = mesh.get_max_face_index()
        if max_index >= mesh.get_vertex_count():
            raise FormatError(
                f"{mesh.name} face index {max_index} is out of range for "
                f"{mesh.get_vertex_count()} vertices"
            )


def load_model(mesh_source: Source,
               skeleton_source: Source,
               resources: ResourceResolver,
               texture_cache: Optional[TextureCache] = None,
               parallel: bool = False,
               validate_face_indices: bool = False,
               material_kind: str = MATERIAL_KIND,
               texture_kind: str = TEXTURE_KIND,
               name: str = "") -> Model:
    """
    Load a mesh asset and its skeleton asset into a Model

    Args:
        mesh_source: Path or binary file object of the mesh XML
        skeleton_source: Path or binary file object of the skeleton XML
        resources: Resolver used for materials and textures
        texture_cache: Cache that turns texture identifiers into handles
        parallel: Parse the two streams on separate threads
        validate_face_indices: Reject faces that reference missing vertices
        material_kind: Resource kind of material descriptors
        texture_kind: Resource kind of textures
        name: Model name

    Returns:
        The assembled Model

    Raises:
        ModelLoadError: Either asset is unreadable, malformed or references a
            missing resource
    """
    mesh_id = describe_source(mesh_source)
    skeleton_id = describe_source(skeleton_source)
    materials = MaterialResolver(resources, texture_cache, material_kind, texture_kind)

    logger.info("Loading model from mesh %s and skeleton %s", mesh_id, skeleton_id)
    try:
        if parallel:
            with ThreadPoolExecutor(max_workers=2) as executor:
                mesh_future = executor.submit(read_meshes, mesh_source, materials)
                skeleton_future = executor.submit(read_skeleton, skeleton_source)
                meshes = mesh_future.result()
                skeleton = skeleton_future.result()
        else:
            meshes = read_meshes(mesh_source, materials)
            skeleton = read_skeleton(skeleton_source)

        if validate_face_indices:
            check_face_indices(meshes)
    except (AssetError, OSError) as e:
        logger.error("Failed to load model (mesh %s, skeleton %s): %s", mesh_id, skeleton_id, e)
        raise ModelLoadError(mesh_id, skeleton_id, e) from e

    return assemble_model(meshes, skeleton, name=name)


class ModelSource:
    """Loads a model whose mesh and skeleton are named resources"""

    def __init__(self,
                 resources: ResourceResolver,
                 mesh_name: str,
                 skeleton_name: str,
                 texture_cache: Optional[TextureCache] = None,
                 config: Optional[dict] = None):
        """
        Args:
            resources: Resolver for the mesh, skeleton, materials and textures
            mesh_name: Resource name of the mesh XML
            skeleton_name: Resource name of the skeleton XML
            texture_cache: Cache that turns texture identifiers into handles
            config: Loader configuration, see ``ogre_skin.utils.config``
        """
        self.resources = resources
        self.mesh_name = mesh_name
        self.skeleton_name = skeleton_name
        self.texture_cache = texture_cache if texture_cache is not None else TextureCache()
        self.config = config if config is not None else default_config()

    @classmethod
    def from_config(cls, config: dict, mesh_name: str, skeleton_name: str,
                    texture_cache: Optional[TextureCache] = None) -> 'ModelSource':
        resources = DirectoryResources(config["resource_dir"], config["package"])
        return cls(resources, mesh_name, skeleton_name, texture_cache, config)

    def load(self) -> Model:
        """
        Resolve both assets and load them

        Returns:
            The assembled Model

        Raises:
            ModelLoadError: An asset is missing, unreadable or malformed
        """
        model_kind = self.config.get("model_kind", MODEL_KIND)
        try:
            mesh_id = self.resources.require(self.mesh_name, model_kind)
            skeleton_id = self.resources.require(self.skeleton_name, model_kind)
        except AssetError as e:
            raise ModelLoadError(self.mesh_name, self.skeleton_name, e) from e

        with ExitStack() as stack:
            try:
                mesh_stream = stack.enter_context(self.resources.open_resource(mesh_id))
                skeleton_stream = stack.enter_context(self.resources.open_resource(skeleton_id))
            except OSError as e:
                raise ModelLoadError(mesh_id, skeleton_id, e) from e
            return load_model(
                mesh_stream,
                skeleton_stream,
                self.resources,
                texture_cache=self.texture_cache,
                parallel=self.config.get("parallel", False),
                validate_face_indices=self.config.get("validate_face_indices", False),
                material_kind=self.config.get("material_kind", MATERIAL_KIND),
                texture_kind=self.config.get("texture_kind", TEXTURE_KIND),
                name=self.mesh_name,
            )
