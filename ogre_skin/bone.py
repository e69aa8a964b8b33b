import numpy as np

from .transform import RigidTransform


class Bone:
    """Bone class for storing the rest transform and hierarchy link"""

    def __init__(self, name: str, index: int, transform: RigidTransform = None):
        """
        Initialize bone

        Args:
            name: Bone name, unique within its skeleton
            index: Bone index in skeleton
            transform: Rest transform relative to the parent bone
        """
        self.name = name
        self.index = index
        self.transform: RigidTransform = transform if transform is not None else RigidTransform.identity()

        # Hierarchy, -1 until a boneparent link names a parent
        self.parent_index: int = -1

    @property
    def position(self) -> np.ndarray:
        """Local translation vector"""
        return self.transform.translation

    @property
    def rotation(self) -> np.ndarray:
        """Local rotation quaternion (x, y, z, w)"""
        return self.transform.quaternion

    def has_parent(self) -> bool:
        """
        Check if bone has a parent

        Returns:
            True if a parent index is set
        """
        return self.parent_index != -1

    def to_json(self) -> dict:
        """
        Convert bone to JSON-serializable dictionary

        Returns:
            Dictionary representation of bone
        """
        return {
            "name": self.name,
            "index": self.index,
            "parent_index": self.parent_index,
            "position": self.position.tolist(),
            "rotation": self.rotation.tolist(),
        }

    def __repr__(self) -> str:
        parent_info = f", parent={self.parent_index}" if self.has_parent() else ""
        return f"Bone(name='{self.name}', index={self.index}{parent_info})"
