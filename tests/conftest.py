import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame  # noqa: E402

from pygame_keyframes.actor import Actor  # noqa: E402
from pygame_keyframes.events import ActorOwner  # noqa: E402


class RecordingOwner(ActorOwner):
    """Owner that records every notification it receives"""

    def __init__(self, policy=None):
        self.policy = policy
        self.calls = []

    def notify_changed(self, actor):
        self.calls.append(('changed', actor))

    def notify_before_add(self, keyframe_property):
        self.calls.append(('before_add', keyframe_property))

    def notify_added(self, keyframe_property):
        self.calls.append(('added', keyframe_property))

    def notify_track_added(self, keyframe_property):
        self.calls.append(('track_added', keyframe_property))

    def notify_before_remove(self, keyframe_property):
        self.calls.append(('before_remove', keyframe_property))

    def notify_removed(self, keyframe_property, actor=None):
        self.calls.append(('removed', keyframe_property))

    def notify_track_removed(self, actor, track_name):
        self.calls.append(('track_removed', track_name))

    def names(self):
        return [call[0] for call in self.calls]


def assert_tracks_sorted_and_linked(actor):
    for track_name in actor.get_track_names():
        properties = actor.get_properties_in_track(track_name)
        milliseconds = [keyframe_property.millisecond for keyframe_property in properties]
        assert milliseconds == sorted(set(milliseconds)), track_name
        for current, following in zip(properties, properties[1:] + [None]):
            assert current.next_property is following
            assert current.actor is actor


@pytest.fixture
def actor():
    return Actor()


@pytest.fixture
def owner():
    return RecordingOwner()


@pytest.fixture
def owned_actor(owner):
    return Actor(owner=owner)


@pytest.fixture
def pygame_events():
    pygame.init()
    pygame.event.clear()
    yield pygame.event
    pygame.event.clear()
    pygame.quit()


@pytest.fixture
def check_tracks():
    return assert_tracks_sorted_and_linked
