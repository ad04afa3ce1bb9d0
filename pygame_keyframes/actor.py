import itertools
import warnings
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pygame_keyframes.easing import DEFAULT_EASING, EasingSpec, compose_easing
from pygame_keyframes.errors import (
    DuplicateKeyframeError, OccupiedDestinationError, OutOfOrderKeyframeWarning
)
from pygame_keyframes.events import ActorOwner
from pygame_keyframes.keyframe_property import (
    ACTIVE_TRACK, FUNCTION_TRACK, KeyframeProperty, Scheduled
)
from pygame_keyframes.property_track import PropertyTrack
from pygame_keyframes.timeline_cache import TimelineCache

ACTOR_DEBUG = False

_actor_ids = itertools.count(1)


def _noop(*args, **kwargs):
    pass


@dataclass
class KeyframePolicy:
    """Rules applied while keyframe properties are added"""
    warn_on_out_of_order_keyframes: bool = False
    default_easing: str = DEFAULT_EASING


@dataclass
class InterpolationHooks:
    """Optional callbacks run around each property interpolation"""
    before_interpolate: Optional[Callable[[KeyframeProperty], None]] = None
    after_interpolate: Optional[Callable[[KeyframeProperty, Dict[str, Any]], None]] = None


@dataclass
class ActorConfig:
    """Complete configuration for an actor"""
    # Rendering pass-through, never called by the timeline itself
    context: Any = None
    setup: Callable = _noop
    render: Callable = _noop
    teardown: Callable = _noop

    # Falls back to the owner's policy, then to the defaults
    policy: Optional[KeyframePolicy] = None
    hooks: InterpolationHooks = field(default_factory=InterpolationHooks)


DEFAULT_POLICY = KeyframePolicy()


class Actor:
    """One animated entity and its keyframe timeline.

    Keyframes are stored as one PropertyTrack per property name. State for a
    point in time is resolved through a TimelineCache that is rebuilt lazily
    after any edit. Mutators return the actor so calls can be chained.

        actor = Actor()
        actor.keyframe(0, {'x': 0}).keyframe(1000, {'x': 100}, 'easeOutSine')
        actor.resolve_state_at(500)  # {'x': 70.71...}
    """

    def __init__(self, config: ActorConfig = None, owner: ActorOwner = None):
        self.config = config or ActorConfig()
        self.id = f"actor_{next(_actor_ids)}"
        self.owner = owner

        self.context = self.config.context
        self.setup = self.config.setup
        self.render = self.config.render
        self.teardown = self.config.teardown
        self.hooks = self.config.hooks

        self.data: Dict[str, Any] = {}
        self.was_active = True

        self._property_tracks: Dict[str, PropertyTrack] = {}
        self._keyframe_properties: Dict[str, KeyframeProperty] = {}
        self._cache = TimelineCache()
        self._state: Dict[str, Any] = {}

    def __repr__(self):
        return f"Actor({self.id!r}, tracks={self.get_track_names()!r})"

    @property
    def policy(self) -> KeyframePolicy:
        if self.config.policy is not None:
            return self.config.policy
        if self.owner is not None and self.owner.policy is not None:
            return self.owner.policy
        return DEFAULT_POLICY

    def is_attached(self) -> bool:
        return self.owner is not None

    # Current state

    def get(self) -> Dict[str, Any]:
        """Copy of the most recently resolved state"""
        return dict(self._state)

    def set(self, state: Mapping[str, Any]) -> 'Actor':
        self._state = dict(state)
        return self

    # Internal bookkeeping

    def _notify_changed(self):
        if self.owner is not None:
            self.owner.notify_changed(self)

    def _cleanup_after_modification(self):
        for track in self._property_tracks.values():
            track.sort()
        self._cache.invalidate()
        self._notify_changed()

    def _remove_empty_tracks(self):
        for track_name in [name for name, track in self._property_tracks.items() if not len(track)]:
            del self._property_tracks[track_name]
            if ACTOR_DEBUG:
                print(f"{self.id}: removed empty track '{track_name}'")
            if self.owner is not None:
                self.owner.notify_track_removed(self, track_name)

    def _detach_property(self, keyframe_property: KeyframeProperty, silent: bool = False):
        self._keyframe_properties.pop(keyframe_property.id, None)
        keyframe_property.detach()
        if not silent and self.owner is not None:
            self.owner.notify_removed(keyframe_property, self)

    def _select_tracks(self, track_name: Optional[str]) -> List[PropertyTrack]:
        if track_name is None:
            return list(self._property_tracks.values())
        track = self._property_tracks.get(track_name)
        return [track] if track is not None else []

    def _add_keyframe_property(self, keyframe_property: KeyframeProperty):
        if keyframe_property.actor is not None and keyframe_property.actor is not self:
            raise ValueError(f"{keyframe_property!r} belongs to another actor")

        name = keyframe_property.name
        track = self._property_tracks.get(name)
        is_new_track = track is None
        if is_new_track:
            track = PropertyTrack(name)

        if track.has(keyframe_property.millisecond):
            raise DuplicateKeyframeError(name, keyframe_property.millisecond)

        if self.owner is not None:
            self.owner.notify_before_add(keyframe_property)

        before_end = track.insert(keyframe_property)

        if is_new_track:
            self._property_tracks[name] = track
        keyframe_property.actor = self
        self._keyframe_properties[keyframe_property.id] = keyframe_property
        self._cache.invalidate()

        if before_end and self.policy.warn_on_out_of_order_keyframes:
            warnings.warn(OutOfOrderKeyframeWarning(
                f"Added a keyframe property before end of track, {name} @ "
                f"{keyframe_property.millisecond} ms < {keyframe_property.next_property.millisecond} ms"),
                stacklevel=3)

        if self.owner is not None:
            if is_new_track:
                self.owner.notify_track_added(keyframe_property)
            self.owner.notify_added(keyframe_property)

    # Keyframe mutation

    def keyframe(self, millisecond: float,
                 state: Union[Mapping[str, Any], Callable, Scheduled],
                 easing: Union[EasingSpec, Mapping[str, EasingSpec]] = None) -> 'Actor':
        """Add a keyframe property for every entry of ``state`` at ``millisecond``.

        ``state`` maps property names to values. A callable (or a
        ``Scheduled``) instead of a mapping, or ``Scheduled`` values inside it,
        become function keyframes that run once when the timeline reaches
        ``millisecond``.

        ``easing`` is one easing for every property or a mapping of property
        name to easing; unspecified properties use the policy's default. The
        easing of a keyframe shapes the tween that arrives at it.

        Raises DuplicateKeyframeError if a property already has a keyframe at
        ``millisecond``; properties added before the failing one are kept.
        """
        if callable(state) or isinstance(state, Scheduled):
            state = {FUNCTION_TRACK: state}

        easings = compose_easing(state.keys(), easing, self.policy.default_easing)
        added = False
        try:
            for name, value in state.items():
                track_name = FUNCTION_TRACK if isinstance(value, Scheduled) else name
                self._add_keyframe_property(
                    KeyframeProperty(millisecond, track_name, value, easings[name]))
                added = True
        finally:
            if added:
                self._notify_changed()

        return self

    def add_keyframe_property(self, keyframe_property: KeyframeProperty) -> 'Actor':
        """Attach a single property, e.g. one that was detached earlier"""
        self._add_keyframe_property(keyframe_property)
        self._notify_changed()
        return self

    def copy_keyframe(self, copy_to: float, copy_from: float) -> 'Actor':
        """Copy every property at ``copy_from`` to ``copy_to``"""
        source_values = {}
        source_easings = {}

        for track_name, track in self._property_tracks.items():
            keyframe_property = track.get(copy_from)
            if keyframe_property is not None:
                source_values[track_name] = keyframe_property.value
                source_easings[track_name] = keyframe_property.easing

        if source_values:
            self.keyframe(copy_to, source_values, source_easings)
        return self

    def move_keyframe(self, move_from: float, move_to: float) -> bool:
        """Move every property at ``move_from`` to ``move_to``.

        Returns False, changing nothing, if there is no keyframe at
        ``move_from`` or there already is one at ``move_to``.
        """
        if not self.has_keyframe_at(move_from) or self.has_keyframe_at(move_to):
            return False

        for track in self._property_tracks.values():
            keyframe_property = track.get(move_from)
            if keyframe_property is not None:
                keyframe_property.millisecond = move_to

        self._cleanup_after_modification()
        return True

    def modify_keyframe(self, millisecond: float,
                        state_modification: Mapping[str, Any],
                        easing_modification: Optional[Mapping[str, EasingSpec]] = None) -> 'Actor':
        """Patch values and easings of the keyframe at ``millisecond``.

        Properties without a keyframe property at ``millisecond`` get a new
        one when ``state_modification`` holds a value for them. ``Scheduled``
        values patch the function track, as they do in ``keyframe``.
        """
        easing_modification = easing_modification or {}

        for name in dict.fromkeys([*state_modification, *easing_modification]):
            value = state_modification.get(name)
            track_name = FUNCTION_TRACK if isinstance(value, Scheduled) else name
            keyframe_property = self.get_keyframe_property(track_name, millisecond)

            if keyframe_property is not None:
                keyframe_property.modify_with({
                    'value': value,
                    'easing': easing_modification.get(name),
                })
            elif value is not None:
                self._add_keyframe_property(KeyframeProperty(
                    millisecond, track_name, value,
                    easing_modification.get(name) or self.policy.default_easing))

        self._cleanup_after_modification()
        return self

    def remove_keyframe(self, millisecond: float) -> 'Actor':
        """Remove the properties of every track at ``millisecond``"""
        for track in self._property_tracks.values():
            keyframe_property = track.remove(millisecond)
            if keyframe_property is not None:
                self._detach_property(keyframe_property)

        self._remove_empty_tracks()
        self._cleanup_after_modification()
        return self

    def remove_all_keyframes(self) -> 'Actor':
        """Remove every keyframe property.

        This bulk path does not send before-remove or removed notifications
        for the individual properties.
        """
        for track in self._property_tracks.values():
            track.clear()

        for keyframe_property in list(self._keyframe_properties.values()):
            self._detach_property(keyframe_property, silent=True)

        self._remove_empty_tracks()
        self._keyframe_properties = {}

        # Runs the regular post-removal cleanup
        return self.remove_keyframe(0)

    def get_keyframe_property(self, track_name: str, millisecond: float) -> Optional[KeyframeProperty]:
        track = self._property_tracks.get(track_name)
        if track is None:
            return None
        return track.get(millisecond)

    def modify_keyframe_property(self, track_name: str, millisecond: float,
                                 new_properties: Mapping[str, Any]) -> 'Actor':
        """Patch one property's millisecond, easing and/or value.

        Raises OccupiedDestinationError if the new millisecond is already
        taken on the track.
        """
        keyframe_property = self.get_keyframe_property(track_name, millisecond)
        if keyframe_property is None:
            return self

        destination = new_properties.get('millisecond')
        if (destination is not None and destination != millisecond
                and self.has_keyframe_at(destination, track_name)):
            raise OccupiedDestinationError(track_name, destination)

        keyframe_property.modify_with(new_properties)
        self._cleanup_after_modification()
        return self

    def remove_keyframe_property(self, track_name: str, millisecond: float) -> Optional[KeyframeProperty]:
        """Remove one property and return it, or None if there was none"""
        track = self._property_tracks.get(track_name)
        if track is None:
            return None

        index = track.index_of(millisecond)
        if index == -1:
            return None

        keyframe_property = track[index]
        if self.owner is not None:
            self.owner.notify_before_remove(keyframe_property)

        track.remove_at(index)
        self._detach_property(keyframe_property)

        self._remove_empty_tracks()
        self._cleanup_after_modification()
        return keyframe_property

    def set_active(self, millisecond: float, is_active: bool) -> 'Actor':
        """Turn state resolution on or off from ``millisecond`` onwards.

        Actors are active until their first active-track keyframe.
        """
        active_property = self.get_keyframe_property(ACTIVE_TRACK, millisecond)

        if active_property is not None:
            active_property.value = bool(is_active)
            self._notify_changed()
        else:
            self.add_keyframe_property(KeyframeProperty(millisecond, ACTIVE_TRACK, bool(is_active)))

        return self

    def wait(self, until: float) -> 'Actor':
        """Hold the final state of every track until ``until``.

        Does nothing unless ``until`` is later than the current end.
        """
        end = self.get_end()
        if until <= end:
            return self

        values = {}
        easings = {}
        for track_name, track in self._property_tracks.items():
            if track_name == FUNCTION_TRACK:
                continue
            latest_property = track.latest_as_of(end)
            values[track_name] = latest_property.get_value_at(end)
            easings[track_name] = latest_property.easing

        if ACTOR_DEBUG:
            print(f"{self.id}: waiting from {end} ms until {until} ms")

        self.modify_keyframe(end, values, easings)
        self.keyframe(until, values, easings)
        return self

    # Queries

    def has_keyframe_at(self, millisecond: float, track_name: Optional[str] = None) -> bool:
        return any(track.has(millisecond) for track in self._select_tracks(track_name))

    def get_track_names(self) -> List[str]:
        return list(self._property_tracks)

    def get_properties_in_track(self, track_name: str) -> Optional[List[KeyframeProperty]]:
        track = self._property_tracks.get(track_name)
        if track is None:
            return None
        return track.properties()

    def get_start(self, track_name: Optional[str] = None) -> float:
        starts = [track.first.millisecond for track in self._select_tracks(track_name) if len(track)]
        return min(starts) if starts else 0

    def get_end(self, track_name: Optional[str] = None) -> float:
        ends = [track.last.millisecond for track in self._select_tracks(track_name) if len(track)]
        return max([0, *ends])

    def get_length(self, track_name: Optional[str] = None) -> float:
        return self.get_end(track_name) - self.get_start(track_name)

    # State resolution

    def resolve_state_at(self, millisecond: float, rearm_function_keyframes: bool = True) -> Dict[str, Any]:
        """Compute every property's value at ``millisecond``.

        Due function keyframes are invoked instead of contributing a value.
        Returns an empty dict, and sets ``was_active`` to False, while the
        active track says the actor is inactive. Unless
        ``rearm_function_keyframes`` is False, function keyframes at or after
        ``millisecond`` are allowed to fire again afterwards, so seeking back
        replays them.
        """
        start = self.get_start()
        end = self.get_end()
        millisecond = min(end, millisecond)
        interpolated: Dict[str, Any] = {}

        self._cache.ensure_valid(self._property_tracks)
        entry = self._cache.entry_for(millisecond)

        # Actors are active from 0 until an active keyframe says otherwise
        active_property = entry.get(ACTIVE_TRACK)
        if active_property is not None and millisecond >= active_property.millisecond:
            self.was_active = bool(active_property.get_value_at(millisecond))
            if not self.was_active:
                return interpolated
        else:
            self.was_active = True

        is_single_keyframe = start == end
        before_interpolate = self.hooks.before_interpolate
        after_interpolate = self.hooks.after_interpolate

        for name, keyframe_property in entry.properties.items():
            if name == ACTIVE_TRACK:
                continue

            if is_single_keyframe:
                if keyframe_property.should_invoke_for_millisecond(millisecond):
                    keyframe_property.invoke(millisecond)
                    keyframe_property.has_fired = False
                elif not keyframe_property.is_scheduled:
                    interpolated[name] = keyframe_property.value
                continue

            if before_interpolate is not None:
                before_interpolate(keyframe_property)

            if keyframe_property.should_invoke_for_millisecond(millisecond):
                keyframe_property.invoke(millisecond)
                continue
            if keyframe_property.is_scheduled:
                continue

            interpolated[name] = keyframe_property.get_value_at(millisecond)

            if after_interpolate is not None:
                after_interpolate(keyframe_property, interpolated)

        if rearm_function_keyframes:
            self._cache.rearm_function_keyframes_from(millisecond)

        return interpolated

    def update_state(self, millisecond: float, rearm_function_keyframes: bool = True) -> 'Actor':
        """Resolve the state at ``millisecond`` and store it if the actor is active.

        Resolution is clamped to the end of the timeline and re-arms function
        keyframes from there, so a function keyframe at the end fires again on
        every call past the end. Per-tick forward playback should pass
        ``rearm_function_keyframes=False`` and re-arm only when seeking back.
        """
        state = self.resolve_state_at(millisecond, rearm_function_keyframes)
        if self.was_active:
            self.set(state)
        return self

    # Serialization

    def export_timeline(self, with_ids: bool = False) -> Dict[str, Any]:
        """Plain-data copy of the timeline, in the layout import_timeline reads"""
        return {
            'start': self.get_start(),
            'end': self.get_end(),
            'trackNames': self.get_track_names(),
            'propertyTracks': {
                track_name: [keyframe_property.export_property_data(with_ids)
                             for keyframe_property in track]
                for track_name, track in self._property_tracks.items()
            },
        }

    def import_timeline(self, actor_data: Mapping[str, Any]) -> 'Actor':
        """Add the keyframes of an exported timeline; existing ones are kept"""
        for property_track in actor_data.get('propertyTracks', {}).values():
            for property_data in property_track:
                self.keyframe(property_data['millisecond'],
                              {property_data['name']: property_data['value']},
                              property_data.get('easing'))
        return self
