from typing import Dict, List, Optional

from .errors import FormatError
from .events import ElementStart, EventCursor, get_float, get_str
from .track import Track, read_keyframes


class Animation:
    """Animation class holding one optional track per skeleton bone"""

    def __init__(self, name: str, duration: float, bone_count: int):
        """
        Initialize animation

        Args:
            name: Animation name
            duration: Animation duration in seconds
            bone_count: Number of bones in the owning skeleton
        """
        self.name = name
        self.duration = duration
        # Indexed like the skeleton's bones; None for bones without a track
        self.tracks: List[Optional[Track]] = [None] * bone_count

    def get_track(self, bone_index: int) -> Optional[Track]:
        return self.tracks[bone_index]

    def get_track_by_bone_name(self, bone_name: str) -> Optional[Track]:
        for track in self.tracks:
            if track is not None and track.bone_name == bone_name:
                return track
        return None

    def get_track_count(self) -> int:
        """
        Get number of bones that have a track

        Returns:
            Track count
        """
        return sum(1 for track in self.tracks if track is not None)

    def to_json(self) -> dict:
        return {
            "name": self.name,
            "duration": self.duration,
            "tracks": [track.to_json() for track in self.tracks if track is not None],
        }

    def __repr__(self) -> str:
        return f"Animation(name='{self.name}', duration={self.duration}s, tracks={self.get_track_count()})"


def read_animation(cursor: EventCursor, start: ElementStart, bone_names: Dict[str, int]) -> Animation:
    """
    Read the animation element just opened on the cursor.

    Args:
        cursor: Event cursor positioned right after the animation start
        start: The animation start event
        bone_names: Completed bone name to index table

    Returns:
        Animation with one track slot per bone

    Raises:
        FormatError: A track names an unknown bone or a bone has two tracks
    """
    anim = Animation(get_str(start, "name"), get_float(start, "length"), len(bone_names))

    for event in cursor.scope():
        if not isinstance(event, ElementStart) or event.name != "track":
            continue
        bone_name = get_str(event, "bone")
        if bone_name not in bone_names:
            raise FormatError(f"unknown bone name '{bone_name}' in animation '{anim.name}'")
        bone_index = bone_names[bone_name]
        if anim.tracks[bone_index] is not None:
            raise FormatError(f"duplicate track for bone '{bone_name}' in animation '{anim.name}'")
        anim.tracks[bone_index] = Track(bone_name, bone_index, read_keyframes(cursor))

    return anim
