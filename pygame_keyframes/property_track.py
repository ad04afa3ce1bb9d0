from bisect import bisect_left
from typing import Iterator, List, Optional

from pygame_keyframes.errors import DuplicateKeyframeError
from pygame_keyframes.keyframe_property import KeyframeProperty


def _millisecond(keyframe_property: KeyframeProperty) -> float:
    return keyframe_property.millisecond


class PropertyTrack:
    """Ordered keyframe properties for one named track.

    Properties are kept ascending by millisecond with no two at the same
    millisecond, and each property's ``next_property`` is re-pointed at its
    successor after every structural change.
    """

    def __init__(self, name: str):
        self.name = name
        self._properties: List[KeyframeProperty] = []

    def __len__(self) -> int:
        return len(self._properties)

    def __iter__(self) -> Iterator[KeyframeProperty]:
        return iter(self._properties)

    def __getitem__(self, index: int) -> KeyframeProperty:
        return self._properties[index]

    def __repr__(self):
        return f"PropertyTrack({self.name!r}, milliseconds={self.milliseconds()!r})"

    @property
    def first(self) -> Optional[KeyframeProperty]:
        return self._properties[0] if self._properties else None

    @property
    def last(self) -> Optional[KeyframeProperty]:
        return self._properties[-1] if self._properties else None

    def milliseconds(self) -> List[float]:
        return [keyframe_property.millisecond for keyframe_property in self._properties]

    def properties(self) -> List[KeyframeProperty]:
        """Copy of the track's properties in order"""
        return list(self._properties)

    def insertion_point(self, millisecond: float) -> int:
        return bisect_left(self._properties, millisecond, key=_millisecond)

    def index_of(self, millisecond: float) -> int:
        """Index of the property exactly at ``millisecond``, or -1"""
        index = self.insertion_point(millisecond)
        if index < len(self._properties) and self._properties[index].millisecond == millisecond:
            return index
        return -1

    def get(self, millisecond: float) -> Optional[KeyframeProperty]:
        index = self.index_of(millisecond)
        return self._properties[index] if index != -1 else None

    def has(self, millisecond: float) -> bool:
        return self.index_of(millisecond) != -1

    def latest_as_of(self, millisecond: float) -> Optional[KeyframeProperty]:
        """Most recent property at or before ``millisecond``.

        Times before the track's first property get that first property.
        """
        if not self._properties:
            return None

        index = self.insertion_point(millisecond)
        if index < len(self._properties) and self._properties[index].millisecond == millisecond:
            return self._properties[index]
        if index >= 1:
            return self._properties[index - 1]
        return self._properties[0]

    def insert(self, keyframe_property: KeyframeProperty) -> bool:
        """Insert in millisecond order.

        Raises DuplicateKeyframeError, leaving the track untouched, if the
        millisecond is taken. Returns True when the property did not land at
        the end of the track.
        """
        index = self.insertion_point(keyframe_property.millisecond)
        before_end = index < len(self._properties)
        if before_end and self._properties[index].millisecond == keyframe_property.millisecond:
            raise DuplicateKeyframeError(self.name, keyframe_property.millisecond)

        self._properties.insert(index, keyframe_property)
        self.relink()
        return before_end

    def remove_at(self, index: int) -> KeyframeProperty:
        keyframe_property = self._properties.pop(index)
        keyframe_property.link_to_next(None)
        self.relink()
        return keyframe_property

    def remove(self, millisecond: float) -> Optional[KeyframeProperty]:
        index = self.index_of(millisecond)
        if index == -1:
            return None
        return self.remove_at(index)

    def clear(self) -> List[KeyframeProperty]:
        removed, self._properties = self._properties, []
        return removed

    def sort(self):
        """Stable re-sort after properties were moved in place"""
        self._properties.sort(key=_millisecond)
        self.relink()

    def relink(self):
        properties = self._properties
        for index, keyframe_property in enumerate(properties):
            keyframe_property.link_to_next(
                properties[index + 1] if index + 1 < len(properties) else None)
