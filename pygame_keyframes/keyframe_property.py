import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from pygame_keyframes.easing import DEFAULT_EASING, EasingSpec
from pygame_keyframes.tweening import interpolate

# Reserved track names
FUNCTION_TRACK = "function"
ACTIVE_TRACK = "_active"

MODIFIABLE_FIELDS = ("millisecond", "easing", "value")

_property_ids = itertools.count(1)


@dataclass(frozen=True)
class Scheduled:
    """A state value that is a one-shot callback rather than something to tween.

    The callback is called as ``callback(actor, drift)`` where ``drift`` is
    how many milliseconds after its scheduled time it actually ran.
    """
    callback: Callable[[Any, float], Any]


class PropertyKind(Enum):
    """What a keyframe property carries"""
    VALUED = "valued"
    SCHEDULED = "scheduled"


class KeyframeProperty:
    """One scheduled value (or callback) at one millisecond for one named track.

    While attached to an actor, ``next_property`` points at the following
    property of the same track; it supplies the upper bound for interpolation.
    """

    def __init__(self, millisecond: float, name: str, value: Any,
                 easing: EasingSpec = DEFAULT_EASING):
        self.id = f"keyframe_property_{next(_property_ids)}"
        self.millisecond = millisecond
        self.name = name
        self.easing = easing or DEFAULT_EASING
        self.set_value(value)

        self.next_property: Optional['KeyframeProperty'] = None
        self.has_fired = False
        self.actor = None

    def __repr__(self):
        return (f"KeyframeProperty(millisecond={self.millisecond!r}, name={self.name!r}, "
                f"value={self.value!r}, easing={self.easing!r})")

    def set_value(self, value: Any):
        """Store a payload, unwrapping ``Scheduled`` callbacks"""
        if isinstance(value, Scheduled):
            self.kind = PropertyKind.SCHEDULED
            self.value = value.callback
        elif self.name == FUNCTION_TRACK:
            self.kind = PropertyKind.SCHEDULED
            self.value = value
        else:
            self.kind = PropertyKind.VALUED
            self.value = value

    @property
    def is_scheduled(self) -> bool:
        return self.kind is PropertyKind.SCHEDULED

    def get_value_at(self, millisecond: float) -> Any:
        """Value of this property's track at ``millisecond``.

        The time is bounded to the span between this property and the next
        one, so earlier times hold this value and a property with no successor
        holds forever. Easing comes from the destination property.
        """
        if self.is_scheduled or isinstance(self.value, bool):
            return self.value

        next_property = self.next_property
        if next_property is None:
            return self.value

        bounded_millisecond = min(max(millisecond, self.millisecond), next_property.millisecond)
        delta = next_property.millisecond - self.millisecond
        position = (bounded_millisecond - self.millisecond) / delta

        return interpolate(self.value, next_property.value, position, next_property.easing)

    def link_to_next(self, next_property: Optional['KeyframeProperty'] = None):
        self.next_property = next_property

    def modify_with(self, new_properties: Mapping[str, Any]):
        """Patch millisecond, easing and/or value; None entries are ignored"""
        for field_name in MODIFIABLE_FIELDS:
            if new_properties.get(field_name) is None:
                continue
            if field_name == "value":
                self.set_value(new_properties[field_name])
            else:
                setattr(self, field_name, new_properties[field_name])

    def should_invoke_for_millisecond(self, millisecond: float) -> bool:
        return self.is_scheduled and millisecond >= self.millisecond and not self.has_fired

    def invoke(self, millisecond: Optional[float] = None) -> Any:
        drift = 0 if millisecond is None else millisecond - self.millisecond
        return_value = self.value(self.actor, drift)
        self.has_fired = True
        return return_value

    def detach(self) -> 'KeyframeProperty':
        """Clear ownership and the forward link"""
        self.actor = None
        self.next_property = None
        return self

    def export_property_data(self, with_id: bool = False) -> Dict[str, Any]:
        data = {
            'millisecond': self.millisecond,
            'name': self.name,
            'value': self.value,
            'easing': self.easing,
        }
        if with_id:
            data['id'] = self.id
        return data
