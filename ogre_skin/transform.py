from enum import Enum
from typing import Sequence, Tuple
import numpy as np
from scipy.spatial.transform import Rotation

from .events import ElementStart, EventCursor, get_float


class TransformPart(Enum):
    """Tagged parts of a rigid transform, independent of the source vocabulary"""
    TRANSLATION = "translation"
    ROTATION = "rotation"
    AXIS = "axis"


# Rest-pose bones say position/rotation, keyframes say translate/rotate.
TRANSFORM_VOCABULARY = {
    "position": TransformPart.TRANSLATION,
    "translate": TransformPart.TRANSLATION,
    "rotation": TransformPart.ROTATION,
    "rotate": TransformPart.ROTATION,
    "axis": TransformPart.AXIS,
}


def _frozen(values: Sequence[float], size: int) -> np.ndarray:
    array = np.array(values, dtype=np.float64).reshape(size)
    array.setflags(write=False)
    return array


def _angle_axis_to_rotation(angle: float, axis: np.ndarray) -> Rotation:
    length = np.linalg.norm(axis)
    if length == 0.0:
        return Rotation.identity()
    return Rotation.from_rotvec(axis / length * angle)


class RigidTransform:
    """Immutable translation + rotation, without scale"""

    def __init__(self,
                 translation: Sequence[float] = (0.0, 0.0, 0.0),
                 angle: float = 0.0,
                 axis: Sequence[float] = (0.0, 0.0, 0.0)):
        """
        Initialize transform from a translation and an angle-axis rotation

        Args:
            translation: Translation vector (x, y, z)
            angle: Rotation angle in radians
            axis: Rotation axis, not necessarily unit length
        """
        self._translation = _frozen(translation, 3)
        self._angle = float(angle)
        self._axis = _frozen(axis, 3)
        self._rotation = _angle_axis_to_rotation(self._angle, self._axis)

    @classmethod
    def identity(cls) -> 'RigidTransform':
        return cls()

    @classmethod
    def from_rotation(cls, translation: Sequence[float], rotation: Rotation) -> 'RigidTransform':
        """Build a transform from an existing scipy rotation"""
        rotvec = rotation.as_rotvec()
        angle = float(np.linalg.norm(rotvec))
        axis = rotvec / angle if angle > 0.0 else np.zeros(3)
        return cls(translation, angle, axis)

    @property
    def translation(self) -> np.ndarray:
        return self._translation

    @property
    def angle(self) -> float:
        return self._angle

    @property
    def axis(self) -> np.ndarray:
        return self._axis

    @property
    def rotation(self) -> Rotation:
        return self._rotation

    @property
    def quaternion(self) -> np.ndarray:
        """Unit quaternion (x, y, z, w)"""
        return self._rotation.as_quat()

    def __mul__(self, other: 'RigidTransform') -> 'RigidTransform':
        """Compose transforms: the result applies ``other`` first, then ``self``"""
        if not isinstance(other, RigidTransform):
            return NotImplemented
        return self.compose(other)

    def compose(self, other: 'RigidTransform') -> 'RigidTransform':
        rotation = self._rotation * other._rotation
        translation = self._translation + self._rotation.apply(np.array(other._translation))
        return RigidTransform.from_rotation(translation, rotation)

    def inverse(self) -> 'RigidTransform':
        rotation = self._rotation.inv()
        return RigidTransform.from_rotation(-rotation.apply(np.array(self._translation)), rotation)

    def apply(self, points: np.ndarray) -> np.ndarray:
        """
        Transform points

        Args:
            points: (3,) or (N, 3) array

        Returns:
            Transformed points with the same shape
        """
        # scipy rejects read-only buffers such as Bone.position
        return self._rotation.apply(np.array(points, dtype=np.float64)) + self._translation

    def to_matrix(self) -> np.ndarray:
        """
        Get 4x4 transformation matrix

        Returns:
            4x4 matrix, column vectors, translation in the last column
        """
        matrix = np.eye(4)
        matrix[0:3, 0:3] = self._rotation.as_matrix()
        matrix[0:3, 3] = self._translation
        return matrix

    def is_identity(self, tol: float = 1e-9) -> bool:
        return bool(np.allclose(self._translation, 0.0, atol=tol) and self._rotation.magnitude() <= tol)

    def allclose(self, other: 'RigidTransform', tol: float = 1e-9) -> bool:
        """Compare translation and rotation within tolerance (q and -q are equal)"""
        if not np.allclose(self._translation, other._translation, atol=tol):
            return False
        return bool((self._rotation.inv() * other._rotation).magnitude() <= tol)

    def to_json(self) -> dict:
        return {
            "translation": self._translation.tolist(),
            "rotation": self.quaternion.tolist(),
        }

    def __repr__(self) -> str:
        return f"RigidTransform(translation={self._translation.tolist()}, angle={self._angle}, axis={self._axis.tolist()})"


def _read_xyz(event: ElementStart) -> Tuple[float, float, float]:
    return (get_float(event, "x"), get_float(event, "y"), get_float(event, "z"))


def read_rigid_transform(cursor: EventCursor) -> RigidTransform:
    """
    Read one transform from the children of the element just opened on the cursor.

    Consumes events until the enclosing element (bone or keyframe) closes.

    Args:
        cursor: Event cursor positioned right after the enclosing element's start

    Returns:
        RigidTransform with any missing part left at zero
    """
    translation = (0.0, 0.0, 0.0)
    angle = 0.0
    axis = (0.0, 0.0, 0.0)

    for event in cursor.scope():
        if not isinstance(event, ElementStart):
            continue
        part = TRANSFORM_VOCABULARY.get(event.name)
        if part is TransformPart.TRANSLATION:
            translation = _read_xyz(event)
        elif part is TransformPart.ROTATION:
            angle = get_float(event, "angle")
        elif part is TransformPart.AXIS:
            axis = _read_xyz(event)

    return RigidTransform(translation, angle, axis)
