"""Notifications from an actor to whatever owns it.

An actor reports structural timeline changes to its ``owner``. ``ActorOwner``
ignores them; ``PygameEventOwner`` turns each one into a pygame event so a
regular event loop can react to them.
"""

import pygame

EVENTS_DEBUG = False

# Define custom pygame events
UI_ACTOR_TIMELINE_MODIFIED = pygame.USEREVENT + 200
UI_ACTOR_BEFORE_ADD_KEYFRAME_PROPERTY = pygame.USEREVENT + 201
UI_ACTOR_KEYFRAME_PROPERTY_ADDED = pygame.USEREVENT + 202
UI_ACTOR_KEYFRAME_PROPERTY_TRACK_ADDED = pygame.USEREVENT + 203
UI_ACTOR_BEFORE_REMOVE_KEYFRAME_PROPERTY = pygame.USEREVENT + 204
UI_ACTOR_KEYFRAME_PROPERTY_REMOVED = pygame.USEREVENT + 205
UI_ACTOR_KEYFRAME_PROPERTY_TRACK_REMOVED = pygame.USEREVENT + 206


class ActorOwner:
    """Owning container of one or more actors; every hook is a no-op here"""

    # Policy adopted by attached actors that were not given one explicitly
    policy = None

    def notify_changed(self, actor):
        pass

    def notify_before_add(self, keyframe_property):
        pass

    def notify_added(self, keyframe_property):
        pass

    def notify_track_added(self, keyframe_property):
        pass

    def notify_before_remove(self, keyframe_property):
        pass

    def notify_removed(self, keyframe_property, actor=None):
        pass

    def notify_track_removed(self, actor, track_name: str):
        pass


class PygameEventOwner(ActorOwner):
    """Posts actor notifications to the pygame event queue"""

    def __init__(self, policy=None):
        self.policy = policy

    @staticmethod
    def _post(event_type: int, event_data: dict):
        if EVENTS_DEBUG:
            print(f"Posting {pygame.event.event_name(event_type)}: {event_data}")
        pygame.event.post(pygame.event.Event(event_type, event_data))

    def _post_property(self, event_type: int, keyframe_property, actor=None):
        event_data = {
            'actor': actor if actor is not None else keyframe_property.actor,
            'keyframe_property': keyframe_property,
            'track_name': keyframe_property.name,
            'millisecond': keyframe_property.millisecond,
        }
        self._post(event_type, event_data)

    def notify_changed(self, actor):
        self._post(UI_ACTOR_TIMELINE_MODIFIED, {'actor': actor})

    def notify_before_add(self, keyframe_property):
        self._post_property(UI_ACTOR_BEFORE_ADD_KEYFRAME_PROPERTY, keyframe_property)

    def notify_added(self, keyframe_property):
        self._post_property(UI_ACTOR_KEYFRAME_PROPERTY_ADDED, keyframe_property)

    def notify_track_added(self, keyframe_property):
        self._post_property(UI_ACTOR_KEYFRAME_PROPERTY_TRACK_ADDED, keyframe_property)

    def notify_before_remove(self, keyframe_property):
        self._post_property(UI_ACTOR_BEFORE_REMOVE_KEYFRAME_PROPERTY, keyframe_property)

    def notify_removed(self, keyframe_property, actor=None):
        self._post_property(UI_ACTOR_KEYFRAME_PROPERTY_REMOVED, keyframe_property, actor)

    def notify_track_removed(self, actor, track_name: str):
        self._post(UI_ACTOR_KEYFRAME_PROPERTY_TRACK_REMOVED,
                   {'actor': actor, 'track_name': track_name})
