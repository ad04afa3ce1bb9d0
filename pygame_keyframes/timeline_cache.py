from bisect import bisect_left
from itertools import chain
from typing import Dict, List, Mapping, Optional

from pygame_keyframes.keyframe_property import KeyframeProperty
from pygame_keyframes.property_track import PropertyTrack

CACHE_DEBUG = False


class CacheEntry:
    """Latest keyframe property of every track as of ``millisecond``"""

    def __init__(self, millisecond: float, properties: Optional[Dict[str, KeyframeProperty]] = None):
        self.millisecond = millisecond
        self.properties: Dict[str, KeyframeProperty] = properties if properties is not None else {}

    def __repr__(self):
        return f"CacheEntry({self.millisecond!r}, {sorted(self.properties)!r})"

    def copy_at(self, millisecond: float) -> 'CacheEntry':
        return CacheEntry(millisecond, dict(self.properties))

    def get(self, name: str) -> Optional[KeyframeProperty]:
        return self.properties.get(name)


def _millisecond(item) -> float:
    return item.millisecond


class TimelineCache:
    """Lazily rebuilt lookup table over an actor's property tracks.

    Holds one entry for millisecond 0 and one for every millisecond at which
    any track has a property, plus the scheduled (function) properties in
    time order. Any track edit invalidates it; the next read rebuilds it
    completely.
    """

    def __init__(self):
        self._entries: List[CacheEntry] = []
        self._function_properties: List[KeyframeProperty] = []
        self.valid = False

    @property
    def entries(self) -> List[CacheEntry]:
        return list(self._entries)

    @property
    def function_properties(self) -> List[KeyframeProperty]:
        return list(self._function_properties)

    def invalidate(self):
        self.valid = False

    def ensure_valid(self, property_tracks: Mapping[str, PropertyTrack]):
        if not self.valid:
            self.rebuild(property_tracks)

    def rebuild(self, property_tracks: Mapping[str, PropertyTrack]):
        properties = sorted(chain.from_iterable(property_tracks.values()), key=_millisecond)

        # Tracks that start after 0 look ahead to their first property
        current_entry = CacheEntry(0, {name: track.latest_as_of(0)
                                       for name, track in property_tracks.items() if len(track)})
        entries = [current_entry]
        function_properties = []

        for keyframe_property in properties:
            if keyframe_property.millisecond != current_entry.millisecond:
                current_entry = current_entry.copy_at(keyframe_property.millisecond)
                entries.append(current_entry)

            current_entry.properties[keyframe_property.name] = keyframe_property

            if keyframe_property.is_scheduled:
                function_properties.append(keyframe_property)

        self._entries = entries
        self._function_properties = function_properties
        self.valid = True

        if CACHE_DEBUG:
            print(f"Rebuilt timeline cache: {len(entries)} entries, "
                  f"{len(function_properties)} function keyframes")

    def entry_for(self, millisecond: float) -> Optional[CacheEntry]:
        """Exact or immediately preceding entry; the first entry for earlier times"""
        if not self._entries:
            return None

        index = bisect_left(self._entries, millisecond, key=_millisecond)
        if index < len(self._entries) and self._entries[index].millisecond == millisecond:
            return self._entries[index]
        if index >= 1:
            return self._entries[index - 1]
        return self._entries[0]

    def rearm_function_keyframes_from(self, millisecond: float):
        """Let every function keyframe at or after ``millisecond`` fire again"""
        index = bisect_left(self._function_properties, millisecond, key=_millisecond)
        for keyframe_property in self._function_properties[index:]:
            keyframe_property.has_fired = False
