from typing import List, Optional, Tuple
import numpy as np
from .mesh import Mesh
from .skeleton import Skeleton


class Model:
    """Model class holding the meshes of a skinned model and their skeleton"""

    def __init__(self, meshes: List[Mesh], skeleton: Skeleton, name: str = ""):
        """
        Initialize model

        Args:
            meshes: Submeshes in asset order
            skeleton: Skeleton the meshes are skinned to
            name: Model name
        """
        self.name = name
        self.meshes = meshes
        self.skeleton = skeleton

    def get_mesh_count(self) -> int:
        return len(self.meshes)

    def is_skinned(self) -> bool:
        """
        Check if at least one mesh carries bone weights

        Returns:
            True if any mesh has skinning data
        """
        return any(mesh.has_skinning_data() for mesh in self.meshes)

    def get_total_vertex_count(self) -> int:
        return sum(mesh.get_vertex_count() for mesh in self.meshes)

    def get_total_face_count(self) -> int:
        return sum(mesh.get_face_count() for mesh in self.meshes)

    def get_bounds(self) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        """
        Calculate merged bounds of all meshes

        Returns:
            Tuple of (bounds_min, bounds_max) as 3D arrays, or None if no valid bounds
        """
        valid_bounds = [(mesh.bounds_min, mesh.bounds_max) for mesh in self.meshes
                        if mesh.bounds_min is not None and mesh.bounds_max is not None]
        if not valid_bounds:
            return None

        all_mins = np.array([bounds[0] for bounds in valid_bounds])
        all_maxs = np.array([bounds[1] for bounds in valid_bounds])
        return (np.min(all_mins, axis=0), np.max(all_maxs, axis=0))

    def to_json(self) -> dict:
        return {
            "name": self.name,
            "vertex_count": self.get_total_vertex_count(),
            "face_count": self.get_total_face_count(),
            "meshes": [mesh.to_json() for mesh in self.meshes],
            "skeleton": self.skeleton.to_json(),
        }

    def __repr__(self) -> str:
        return f"Model(name='{self.name}', meshes={len(self.meshes)}, skeleton={self.skeleton!r})"


def assemble_model(meshes: List[Mesh], skeleton: Skeleton, name: str = "") -> Model:
    """Combine the mesh list and skeleton of a loaded asset pair"""
    return Model(list(meshes), skeleton, name=name)
