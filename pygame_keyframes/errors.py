from typing import Any


class KeyframeError(Exception):
    """Base class for timeline mutation errors"""


class DuplicateKeyframeError(KeyframeError):
    """A keyframe property already exists for this track at this millisecond"""

    def __init__(self, name: str, millisecond: Any):
        self.name = name
        self.millisecond = millisecond
        super().__init__(f"Tried to add a duplicate keyframe property, {name} @ {millisecond} ms")


class OccupiedDestinationError(KeyframeError):
    """Moving a keyframe property onto a millisecond that is already populated"""

    def __init__(self, name: str, millisecond: Any):
        self.name = name
        self.millisecond = millisecond
        super().__init__(
            f"Tried to move {name} to {millisecond} ms, but a keyframe property already exists there")


class OutOfOrderKeyframeWarning(UserWarning):
    """A keyframe property was inserted before the end of its track"""
