"""Tests for adding, moving, modifying and removing keyframes."""

import warnings

import pytest

from pygame_keyframes.actor import Actor, ActorConfig, KeyframePolicy
from pygame_keyframes.errors import (
    DuplicateKeyframeError, OccupiedDestinationError, OutOfOrderKeyframeWarning
)
from pygame_keyframes.keyframe_property import ACTIVE_TRACK, FUNCTION_TRACK, KeyframeProperty, Scheduled


def milliseconds(actor, track_name):
    return [keyframe_property.millisecond
            for keyframe_property in actor.get_properties_in_track(track_name)]


class TestKeyframe:

    def test_creates_one_track_per_property(self, actor, check_tracks):
        actor.keyframe(0, {'x': 0, 'y': 0}).keyframe(1000, {'x': 100})

        assert actor.get_track_names() == ['x', 'y']
        assert milliseconds(actor, 'x') == [0, 1000]
        assert milliseconds(actor, 'y') == [0]
        check_tracks(actor)

    def test_out_of_order_inserts_stay_sorted(self, actor, check_tracks):
        for millisecond in (1000, 250, 2000, 0, 750):
            actor.keyframe(millisecond, {'x': millisecond})

        assert milliseconds(actor, 'x') == [0, 250, 750, 1000, 2000]
        check_tracks(actor)

    def test_single_easing_applies_to_every_property(self, actor):
        actor.keyframe(0, {'x': 0, 'y': 0}, 'easeOutSine')

        assert actor.get_keyframe_property('x', 0).easing == 'easeOutSine'
        assert actor.get_keyframe_property('y', 0).easing == 'easeOutSine'

    def test_easing_mapping_defaults_to_linear(self, actor):
        actor.keyframe(0, {'x': 0, 'y': 0}, {'x': 'easeInQuad'})

        assert actor.get_keyframe_property('x', 0).easing == 'easeInQuad'
        assert actor.get_keyframe_property('y', 0).easing == 'linear'

    def test_policy_default_easing(self):
        actor = Actor(ActorConfig(policy=KeyframePolicy(default_easing='easeInOutQuad')))
        actor.keyframe(0, {'x': 0})
        assert actor.get_keyframe_property('x', 0).easing == 'easeInOutQuad'


class TestDuplicateKeyframes:

    def test_duplicate_leaves_track_unchanged(self, actor, check_tracks):
        actor.keyframe(0, {'x': 0}).keyframe(1000, {'x': 100})
        before = actor.get_properties_in_track('x')

        with pytest.raises(DuplicateKeyframeError) as error_info:
            actor.keyframe(1000, {'x': 5})

        assert error_info.value.name == 'x'
        assert error_info.value.millisecond == 1000
        assert actor.get_properties_in_track('x') == before
        assert actor.get_keyframe_property('x', 1000).value == 100
        assert before[0].next_property is before[1]
        check_tracks(actor)

    def test_other_properties_of_the_same_keyframe_are_kept(self, actor):
        actor.keyframe(1000, {'x': 100})

        with pytest.raises(DuplicateKeyframeError):
            actor.keyframe(1000, {'y': 1, 'x': 5})

        assert actor.get_keyframe_property('y', 1000).value == 1
        assert actor.get_keyframe_property('x', 1000).value == 100

    def test_duplicate_sends_no_notifications(self, owned_actor, owner):
        owned_actor.keyframe(0, {'x': 0})
        owner.calls.clear()

        with pytest.raises(DuplicateKeyframeError):
            owned_actor.keyframe(0, {'x': 1})

        assert owner.calls == []


class TestOutOfOrderWarning:

    def test_warns_when_policy_asks_for_it(self):
        actor = Actor(ActorConfig(policy=KeyframePolicy(warn_on_out_of_order_keyframes=True)))
        actor.keyframe(1000, {'x': 1})

        with pytest.warns(OutOfOrderKeyframeWarning, match='x @ 500 ms < 1000 ms'):
            actor.keyframe(500, {'x': 0})

        assert milliseconds(actor, 'x') == [500, 1000]

    def test_owner_policy_is_used(self, owner):
        owner.policy = KeyframePolicy(warn_on_out_of_order_keyframes=True)
        actor = Actor(owner=owner)
        actor.keyframe(1000, {'x': 1})

        with pytest.warns(OutOfOrderKeyframeWarning):
            actor.keyframe(500, {'x': 0})

    def test_silent_by_default(self, actor):
        actor.keyframe(1000, {'x': 1})

        with warnings.catch_warnings():
            warnings.simplefilter('error')
            actor.keyframe(500, {'x': 0})
            actor.keyframe(2000, {'x': 2})


class TestHasKeyframeAt:

    def test_any_track(self, actor):
        actor.keyframe(0, {'x': 0}).keyframe(500, {'y': 1})

        assert actor.has_keyframe_at(500)
        assert not actor.has_keyframe_at(250)

    def test_named_track(self, actor):
        actor.keyframe(0, {'x': 0}).keyframe(500, {'y': 1})

        assert actor.has_keyframe_at(500, 'y')
        assert not actor.has_keyframe_at(500, 'x')
        assert not actor.has_keyframe_at(500, 'missing')


class TestCopyKeyframe:

    def test_copies_values_and_easings(self, actor):
        actor.keyframe(0, {'x': 10, 'y': 15}, {'y': 'easeInQuad'}).keyframe(1000, {'x': 50, 'y': 75})
        actor.copy_keyframe(2000, 0)

        assert actor.get_keyframe_property('x', 2000).value == 10
        assert actor.get_keyframe_property('y', 2000).value == 15
        assert actor.get_keyframe_property('y', 2000).easing == 'easeInQuad'
        assert actor.resolve_state_at(2000) == {'x': 10, 'y': 15}

    def test_skips_tracks_without_a_keyframe(self, actor):
        actor.keyframe(0, {'x': 10}).keyframe(500, {'y': 1})
        actor.copy_keyframe(1000, 500)

        assert milliseconds(actor, 'x') == [0]
        assert milliseconds(actor, 'y') == [500, 1000]

    def test_copying_nothing_is_a_no_op(self, owned_actor, owner):
        owned_actor.keyframe(0, {'x': 10})
        owner.calls.clear()

        owned_actor.copy_keyframe(1000, 500)
        assert owned_actor.get_end() == 0
        assert owner.calls == []


class TestMoveKeyframe:

    @pytest.fixture
    def moving_actor(self, actor):
        return actor.keyframe(0, {'x': 0, 'y': 0}).keyframe(1000, {'x': 100}, 'easeInQuad')

    def test_missing_source_fails(self, moving_actor):
        assert moving_actor.move_keyframe(500, 2000) is False
        assert milliseconds(moving_actor, 'x') == [0, 1000]

    def test_occupied_destination_fails(self, moving_actor):
        assert moving_actor.move_keyframe(0, 1000) is False
        assert milliseconds(moving_actor, 'x') == [0, 1000]
        assert milliseconds(moving_actor, 'y') == [0]

    def test_move_keeps_identity(self, moving_actor, check_tracks):
        moved = moving_actor.get_keyframe_property('x', 1000)

        assert moving_actor.move_keyframe(1000, 2000) is True

        assert milliseconds(moving_actor, 'x') == [0, 2000]
        assert moving_actor.get_keyframe_property('x', 2000) is moved
        assert moved.value == 100
        assert moved.easing == 'easeInQuad'
        assert milliseconds(moving_actor, 'y') == [0]
        check_tracks(moving_actor)

    def test_move_past_other_keyframes_resorts(self, actor, check_tracks):
        actor.keyframe(0, {'x': 0}).keyframe(500, {'x': 5}).keyframe(1000, {'x': 10})

        assert actor.move_keyframe(0, 1500)
        assert milliseconds(actor, 'x') == [500, 1000, 1500]
        assert actor.resolve_state_at(1250) == {'x': 5}
        check_tracks(actor)


class TestModifyKeyframe:

    @pytest.fixture
    def three_keyframes(self, actor):
        return actor.keyframe(0, {'x': 10, 'y': 20}) \
            .keyframe(1000, {'x': 20, 'y': 40}) \
            .keyframe(2000, {'x': 30, 'y': 60})

    def test_patches_values_and_easings(self, three_keyframes):
        three_keyframes.modify_keyframe(1000, {'y': 150}, {'x': 'easeOutSine'})

        x_property = three_keyframes.get_keyframe_property('x', 1000)
        y_property = three_keyframes.get_keyframe_property('y', 1000)
        assert (x_property.value, x_property.easing) == (20, 'easeOutSine')
        assert (y_property.value, y_property.easing) == (150, 'linear')

    def test_missing_properties_are_created(self, three_keyframes, check_tracks):
        three_keyframes.modify_keyframe(1500, {'x': 25, 'z': 1})

        assert milliseconds(three_keyframes, 'x') == [0, 1000, 1500, 2000]
        assert milliseconds(three_keyframes, 'z') == [1500]
        check_tracks(three_keyframes)

    def test_easing_only_patch_does_not_create(self, three_keyframes):
        three_keyframes.modify_keyframe(1500, {}, {'x': 'easeInQuad'})
        assert milliseconds(three_keyframes, 'x') == [0, 1000, 2000]

    def test_scheduled_values_go_to_the_function_track(self, three_keyframes):
        calls = []
        three_keyframes.modify_keyframe(500, {'ping': Scheduled(lambda target, drift: calls.append(drift))})

        assert 'ping' not in three_keyframes.get_track_names()
        assert milliseconds(three_keyframes, FUNCTION_TRACK) == [500]
        assert three_keyframes.resolve_state_at(600) == {'x': 16, 'y': 32}
        assert calls == [100]

    def test_created_properties_use_the_policy_easing(self):
        actor = Actor(ActorConfig(policy=KeyframePolicy(default_easing='easeInOutQuad')))
        actor.keyframe(0, {'x': 0}).modify_keyframe(1000, {'x': 10, 'y': 1}, {'y': 'easeOutSine'})

        assert actor.get_keyframe_property('x', 1000).easing == 'easeInOutQuad'
        assert actor.get_keyframe_property('y', 1000).easing == 'easeOutSine'


class TestRemoveKeyframe:

    def test_removes_from_every_track(self, actor, check_tracks):
        actor.keyframe(0, {'x': 0, 'y': 0}).keyframe(1000, {'x': 1, 'y': 1}).keyframe(2000, {'x': 2})
        removed = actor.get_keyframe_property('x', 1000)

        actor.remove_keyframe(1000)

        assert milliseconds(actor, 'x') == [0, 2000]
        assert milliseconds(actor, 'y') == [0]
        assert removed.actor is None
        assert removed.next_property is None
        check_tracks(actor)

    def test_empty_tracks_are_dropped(self, actor):
        actor.keyframe(0, {'x': 0}).keyframe(1000, {'y': 1})
        actor.remove_keyframe(1000)

        assert actor.get_track_names() == ['x']
        assert actor.get_properties_in_track('y') is None

    def test_missing_millisecond_is_ignored(self, actor):
        actor.keyframe(0, {'x': 0})
        actor.remove_keyframe(500)
        assert milliseconds(actor, 'x') == [0]


class TestRemoveAllKeyframes:

    def test_clears_everything(self, actor):
        actor.keyframe(0, {'x': 0}).keyframe(1000, {'x': 1, 'y': 2}).set_active(500, False)
        properties = actor.get_properties_in_track('x')

        actor.remove_all_keyframes()

        assert actor.get_track_names() == []
        assert actor.get_end() == 0
        assert actor.resolve_state_at(500) == {}
        assert all(keyframe_property.actor is None for keyframe_property in properties)

    def test_is_silent_about_individual_properties(self, owned_actor, owner):
        owned_actor.keyframe(0, {'x': 0}).keyframe(1000, {'x': 1})
        owner.calls.clear()

        owned_actor.remove_all_keyframes()

        assert 'removed' not in owner.names()
        assert 'before_remove' not in owner.names()
        assert 'changed' in owner.names()
        assert ('track_removed', 'x') in owner.calls


class TestKeyframeProperties:

    def test_get_keyframe_property(self, actor):
        actor.keyframe(0, {'x': 0})

        assert actor.get_keyframe_property('x', 0).value == 0
        assert actor.get_keyframe_property('x', 10) is None
        assert actor.get_keyframe_property('missing', 0) is None

    def test_modify_millisecond(self, actor, check_tracks):
        actor.keyframe(0, {'x': 0}).keyframe(1000, {'x': 100})
        actor.modify_keyframe_property('x', 0, {'millisecond': 1500, 'value': 7})

        assert milliseconds(actor, 'x') == [1000, 1500]
        assert actor.get_keyframe_property('x', 1500).value == 7
        check_tracks(actor)

    def test_modify_onto_occupied_millisecond_raises(self, actor, check_tracks):
        actor.keyframe(0, {'x': 0}).keyframe(1000, {'x': 100})

        with pytest.raises(OccupiedDestinationError):
            actor.modify_keyframe_property('x', 0, {'millisecond': 1000, 'value': 5})

        assert milliseconds(actor, 'x') == [0, 1000]
        assert actor.get_keyframe_property('x', 0).value == 0
        check_tracks(actor)

    def test_modify_onto_another_tracks_millisecond(self, actor):
        actor.keyframe(0, {'x': 0}).keyframe(1000, {'y': 100})
        actor.modify_keyframe_property('x', 0, {'millisecond': 1000})
        assert milliseconds(actor, 'x') == [1000]

    def test_modify_missing_property_is_a_no_op(self, actor):
        actor.keyframe(0, {'x': 0})
        assert actor.modify_keyframe_property('x', 500, {'value': 1}) is actor
        assert actor.get_keyframe_property('x', 0).value == 0

    def test_remove_returns_the_property(self, owned_actor, owner, check_tracks):
        owned_actor.keyframe(0, {'x': 0}).keyframe(1000, {'x': 100})
        target = owned_actor.get_keyframe_property('x', 1000)
        owner.calls.clear()

        removed = owned_actor.remove_keyframe_property('x', 1000)

        assert removed is target
        assert removed.actor is None
        assert owner.names()[:2] == ['before_remove', 'removed']
        assert owner.names()[-1] == 'changed'
        assert milliseconds(owned_actor, 'x') == [0]
        check_tracks(owned_actor)

    def test_remove_missing_returns_none(self, actor):
        actor.keyframe(0, {'x': 0})

        assert actor.remove_keyframe_property('x', 500) is None
        assert actor.remove_keyframe_property('y', 0) is None

    def test_detached_property_can_be_added_back(self, actor, check_tracks):
        actor.keyframe(0, {'x': 0}).keyframe(1000, {'x': 100})
        removed = actor.remove_keyframe_property('x', 1000)

        actor.add_keyframe_property(removed)

        assert actor.get_keyframe_property('x', 1000) is removed
        assert actor.resolve_state_at(500) == {'x': 50}
        check_tracks(actor)

    def test_property_of_another_actor_is_rejected(self, actor):
        other = Actor().keyframe(0, {'x': 0})

        with pytest.raises(ValueError):
            actor.add_keyframe_property(other.get_keyframe_property('x', 0))

    def test_properties_in_track_is_a_copy(self, actor):
        actor.keyframe(0, {'x': 0}).keyframe(1000, {'x': 100})

        properties = actor.get_properties_in_track('x')
        properties.clear()
        assert milliseconds(actor, 'x') == [0, 1000]


class TestSetActive:

    def test_creates_active_keyframes(self, actor):
        actor.set_active(250, False)

        active = actor.get_keyframe_property(ACTIVE_TRACK, 250)
        assert isinstance(active, KeyframeProperty)
        assert active.value is False

    def test_overwrites_existing_active_keyframe(self, actor):
        actor.keyframe(0, {'x': 0}).keyframe(1000, {'x': 10}).set_active(250, False)
        assert actor.resolve_state_at(500) == {}

        actor.set_active(250, True)

        assert milliseconds(actor, ACTIVE_TRACK) == [250]
        assert actor.resolve_state_at(500) == {'x': 5}


class TestQueries:

    def test_start_end_and_length(self, actor):
        actor.keyframe(250, {'x': 0}).keyframe(1000, {'x': 1}).keyframe(500, {'y': 0}).keyframe(3000, {'y': 1})

        assert actor.get_start() == 250
        assert actor.get_end() == 3000
        assert actor.get_length() == 2750
        assert actor.get_start('y') == 500
        assert actor.get_end('x') == 1000
        assert actor.get_length('x') == 750

    def test_unknown_track(self, actor):
        actor.keyframe(250, {'x': 0})

        assert actor.get_start('missing') == 0
        assert actor.get_end('missing') == 0
        assert actor.get_length('missing') == 0


class TestWait:

    def test_extends_every_track(self, actor, check_tracks):
        actor.keyframe(0, {'x': 0}).keyframe(500, {'y': 50}).keyframe(1000, {'x': 100})

        actor.wait(2000)

        assert actor.get_end() == 2000
        assert milliseconds(actor, 'x') == [0, 1000, 2000]
        assert milliseconds(actor, 'y') == [500, 1000, 2000]
        assert actor.get_keyframe_property('y', 1000).value == 50
        assert actor.resolve_state_at(1500) == {'x': 100, 'y': 50}
        check_tracks(actor)

    def test_keeps_trajectory_before_the_end(self, actor):
        actor.keyframe(0, {'x': 0}).keyframe(1000, {'x': 100}, 'easeInQuad')
        before = actor.resolve_state_at(500)

        actor.wait(3000)

        assert actor.resolve_state_at(500) == before
        assert actor.get_keyframe_property('x', 3000).easing == 'easeInQuad'

    def test_does_nothing_before_the_end(self, actor):
        actor.keyframe(0, {'x': 0}).keyframe(1000, {'x': 100})

        actor.wait(1000)
        actor.wait(500)

        assert milliseconds(actor, 'x') == [0, 1000]


def test_sort_invariant_over_mixed_edits(actor, check_tracks):
    actor.keyframe(500, {'x': 5, 'y': 5})
    actor.keyframe(0, {'x': 0})
    actor.keyframe(2000, {'x': 20, 'y': 20})
    actor.move_keyframe(500, 1500)
    actor.modify_keyframe(250, {'y': 2})
    actor.modify_keyframe_property('x', 0, {'millisecond': 3000})
    actor.copy_keyframe(100, 1500)
    actor.remove_keyframe(2000)

    assert milliseconds(actor, 'x') == [100, 1500, 3000]
    assert milliseconds(actor, 'y') == [100, 250, 1500]
    check_tracks(actor)
