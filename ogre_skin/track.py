from typing import List, Optional, Tuple

from .events import ElementStart, EventCursor, get_float
from .transform import RigidTransform, read_rigid_transform


class Keyframe:
    """Keyframe class for storing a time-transform pair"""

    def __init__(self, time: float, transform: RigidTransform):
        """
        Initialize keyframe

        Args:
            time: Time in seconds
            transform: Bone transform relative to its rest pose parent space
        """
        self.time = time
        self.transform = transform

    def __repr__(self) -> str:
        return f"Keyframe(time={self.time}, transform={self.transform})"


class Track:
    """Track class for storing one bone's keyframes"""

    def __init__(self, bone_name: str, bone_index: int, keyframes: Optional[List[Keyframe]] = None):
        """
        Initialize track

        Args:
            bone_name: Name of the animated bone
            bone_index: Index of the animated bone in its skeleton
            keyframes: Keyframes in non-decreasing time order
        """
        self.bone_name = bone_name
        self.bone_index = bone_index
        self.keyframes: List[Keyframe] = keyframes if keyframes is not None else []

    def get_keyframe_count(self) -> int:
        return len(self.keyframes)

    def get_times(self) -> List[float]:
        return [k.time for k in self.keyframes]

    def get_time_range(self) -> Tuple[float, float]:
        """
        Get time range of the track

        Returns:
            Tuple of (start_time, end_time) or (0, 0) if no keyframes
        """
        if not self.keyframes:
            return (0.0, 0.0)
        return (self.keyframes[0].time, self.keyframes[-1].time)

    def to_json(self) -> dict:
        return {
            "bone": self.bone_name,
            "bone_index": self.bone_index,
            "keyframes": [
                {"time": k.time, **k.transform.to_json()} for k in self.keyframes
            ],
        }

    def __repr__(self) -> str:
        return f"Track(bone='{self.bone_name}', keyframes={len(self.keyframes)})"


def read_keyframes(cursor: EventCursor) -> List[Keyframe]:
    """
    Read the keyframe list of the track element just opened on the cursor.

    Keyframes are kept in document order unless some keyframe's time is not after
    the one before it, in which case the list gets one stable sort by time.

    Args:
        cursor: Event cursor positioned right after a track start

    Returns:
        Keyframes in non-decreasing time order
    """
    keyframes: List[Keyframe] = []
    last_time: Optional[float] = None
    needs_sort = False

    for event in cursor.scope():
        if isinstance(event, ElementStart) and event.name == "keyframe":
            time = get_float(event, "time")
            if last_time is not None and time <= last_time:
                needs_sort = True
            last_time = time
            keyframes.append(Keyframe(time, read_rigid_transform(cursor)))

    if needs_sort:
        keyframes.sort(key=lambda k: k.time)
    return keyframes
