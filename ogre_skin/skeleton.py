import logging
from typing import Dict, List, Optional

from .anim import Animation, read_animation
from .bone import Bone
from .errors import FormatError
from .events import ElementStart, EventCursor, Source, get_int, get_str, iter_events
from .transform import RigidTransform, read_rigid_transform

logger = logging.getLogger(__name__)


class Skeleton:
    """Skeleton class for managing bones in preorder and their animations"""

    def __init__(self, bones: List[Bone], animations: Optional[List[Animation]] = None, name: str = ""):
        """
        Initialize skeleton and compute its inverse bind pose

        Args:
            bones: Bones in preorder, index equal to list position
            animations: Animations targeting these bones
            name: Skeleton name

        Raises:
            FormatError: Bones do not form a preorder hierarchy rooted at index 0
        """
        validate_hierarchy(bones)
        self.name = name
        self.bones = bones
        self.animations: List[Animation] = animations if animations is not None else []
        self._bone_map: Dict[str, Bone] = {bone.name: bone for bone in bones}
        self.bind_pose: List[RigidTransform] = calculate_bind_pose(bones)
        self.inv_bind_pose: List[RigidTransform] = [t.inverse() for t in self.bind_pose]

    def get_bone_by_name(self, name: str) -> Optional[Bone]:
        """
        Get bone by name

        Args:
            name: Bone name

        Returns:
            Bone instance or None if not found
        """
        return self._bone_map.get(name)

    def get_bone_count(self) -> int:
        return len(self.bones)

    def get_root_bones(self) -> List[Bone]:
        return [bone for bone in self.bones if not bone.has_parent()]

    def get_children(self, bone: Bone) -> List[Bone]:
        """
        Get all direct children of a bone

        Args:
            bone: Parent bone

        Returns:
            List of child Bone instances
        """
        return [b for b in self.bones if b.parent_index == bone.index]

    def get_animation(self, name: str) -> Optional[Animation]:
        for anim in self.animations:
            if anim.name == name:
                return anim
        return None

    def to_json(self) -> Dict:
        """
        Convert skeleton to JSON format

        Returns:
            Dict containing skeleton data
        """
        return {
            "name": self.name,
            "bone_count": len(self.bones),
            "bones": [bone.to_json() for bone in self.bones],
            "inv_bind_pose": [t.to_json() for t in self.inv_bind_pose],
            "animations": [anim.to_json() for anim in self.animations],
        }

    def __repr__(self) -> str:
        return f"Skeleton(name='{self.name}', bones={len(self.bones)}, animations={len(self.animations)})"


def validate_hierarchy(bones: List[Bone]) -> None:
    """Check that bone 0 is a root and every parent precedes its children"""
    if not bones or bones[0].parent_index != -1:
        raise FormatError("malformed bone hierarchy: bone 0 must be the root")
    for i in range(1, len(bones)):
        if bones[i].parent_index >= i:
            raise FormatError(
                f"malformed bone hierarchy: bone {i} '{bones[i].name}' "
                f"has parent {bones[i].parent_index}"
            )


def calculate_bind_pose(bones: List[Bone]) -> List[RigidTransform]:
    """
    Compose local bone transforms into global bind transforms.

    One forward pass; preorder guarantees a parent's global transform is ready
    before any of its children.
    """
    bind_pose: List[RigidTransform] = []
    for bone in bones:
        if bone.has_parent():
            bind_pose.append(bind_pose[bone.parent_index] * bone.transform)
        else:
            bind_pose.append(bone.transform)
    return bind_pose


def _read_bone(cursor: EventCursor, start: ElementStart, bone_names: Dict[str, int]) -> Bone:
    index = len(bone_names)
    if get_int(start, "id") != index:
        raise FormatError(f"out-of-order bone id {start.attributes.get('id')}, expected {index}")
    name = get_str(start, "name")
    if name in bone_names:
        raise FormatError(f"duplicate bone name '{name}'")
    return Bone(name, index, read_rigid_transform(cursor))


def _link_parent(start: ElementStart, bones: List[Bone], bone_names: Dict[str, int]) -> None:
    child_name = get_str(start, "bone")
    parent_name = get_str(start, "parent")
    for name in (child_name, parent_name):
        if name not in bone_names:
            raise FormatError(f"unknown bone name '{name}' in boneparent")
    bones[bone_names[child_name]].parent_index = bone_names[parent_name]


def read_skeleton(source: Source, name: str = "") -> Skeleton:
    """
    Read a skeleton asset

    Args:
        source: File path or binary file object of the skeleton XML
        name: Skeleton name

    Returns:
        Validated Skeleton with inverse bind pose and animations

    Raises:
        ParseError: A token failed to parse
        FormatError: Bone ids, names or the hierarchy are invalid
    """
    cursor = EventCursor(iter_events(source))
    bones: List[Bone] = []
    animations: List[Animation] = []
    bone_names: Dict[str, int] = {}

    for event in cursor:
        if not isinstance(event, ElementStart):
            continue
        if event.name == "bone":
            bone = _read_bone(cursor, event, bone_names)
            bones.append(bone)
            bone_names[bone.name] = bone.index
        elif event.name == "boneparent":
            _link_parent(event, bones, bone_names)
        elif event.name == "animation":
            animations.append(read_animation(cursor, event, bone_names))

    skeleton = Skeleton(bones, animations, name=name)
    logger.info("Read skeleton with %d bones and %d animations", len(bones), len(animations))
    return skeleton
