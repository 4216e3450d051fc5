"""Tests for the transition manager."""

import pytest

from conftest import SequenceRandom, make_entities
from core.exceptions import TransitionConfigError
from spatial.entities import Transform
from spatial.transitions import TransitionManager


def targets_at(*positions, rotation=(0.0, 0.0, 0.0)):
    return tuple(Transform(position=p, rotation=rotation) for p in positions)


class RenderCounter:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


@pytest.fixture
def entities():
    return make_entities(3)


@pytest.fixture
def renders():
    return RenderCounter()


@pytest.fixture
def manager(entities, renders):
    return TransitionManager(entities, render_callback=renders, rng=SequenceRandom([0.5]))


TARGETS_A = targets_at((100.0, 0.0, 0.0), (0.0, 100.0, 0.0), (0.0, 0.0, 100.0), rotation=(0.1, 0.2, 0.3))
TARGETS_B = targets_at((-50.0, -50.0, -50.0), (10.0, 20.0, 30.0), (7.0, 8.0, 9.0), rotation=(1.0, 0.0, -1.0))


class TestScheduling:
    def test_two_tasks_per_entity_plus_render_driver(self, manager):
        manager.transform_to(TARGETS_A, 1.0)

        assert manager.active_task_count == 3 * 2 + 1
        channels = [(t.entity_index, t.channel) for t in manager.tasks]
        assert channels == [
            (0, "position"),
            (0, "rotation"),
            (1, "position"),
            (1, "rotation"),
            (2, "position"),
            (2, "rotation"),
        ]

    def test_durations_drawn_independently(self, entities):
        rng = SequenceRandom([0.0, 0.5, 0.25, 0.75, 0.1, 0.9])
        manager = TransitionManager(entities, rng=rng)

        manager.transform_to(TARGETS_A, 2.0)

        assert [t.duration for t in manager.tasks] == pytest.approx([2.0, 3.0, 2.5, 3.5, 2.2, 3.8])
        assert manager.render_task.duration == 4.0

    def test_tasks_start_at_last_tick_time(self, manager):
        manager.tick(5.0)
        manager.transform_to(TARGETS_A, 1.0)

        assert all(t.start_time == 5.0 for t in manager.tasks)
        assert manager.render_task.start_time == 5.0

    def test_explicit_start_time(self, manager):
        manager.transform_to(TARGETS_A, 1.0, start_time=2.5)
        assert manager.tasks[0].start_time == 2.5

    def test_negative_duration_rejected(self, manager):
        with pytest.raises(TransitionConfigError):
            manager.transform_to(TARGETS_A, -1.0)
        assert not manager.is_active


class TestCompletion:
    def test_entities_reach_targets(self, manager, entities):
        manager.transform_to(TARGETS_A, 1.0)

        assert manager.tick(2.0) is False
        for entity, target in zip(entities, TARGETS_A):
            assert entity.transform == target
        assert not manager.is_active

    def test_staggered_finish(self, entities):
        manager = TransitionManager(entities, rng=SequenceRandom([0.0, 0.99]))
        manager.transform_to(TARGETS_A, 1.0)

        manager.tick(1.0)

        # durations alternate 1.0 (position) and 1.99 (rotation)
        assert entities[0].position == TARGETS_A[0].position
        assert entities[0].rotation != TARGETS_A[0].rotation
        assert all(t.channel == "rotation" for t in manager.tasks)

    def test_exponential_easing_applied(self, entities):
        manager = TransitionManager(entities, rng=SequenceRandom([0.0]))
        manager.transform_to(TARGETS_A, 2.0)

        manager.tick(0.5)
        assert entities[0].position == pytest.approx((1.5625, 0.0, 0.0))

        manager.tick(1.0)
        assert entities[0].position == pytest.approx((50.0, 0.0, 0.0))

    def test_zero_duration_snaps_on_next_tick(self, manager, entities, renders):
        manager.transform_to(TARGETS_B, 0.0)
        assert manager.tick(0.0) is False
        assert [e.transform for e in entities] == list(TARGETS_B)
        assert renders.calls == 1


class TestCancellation:
    def test_second_call_replaces_all_tasks(self, manager):
        manager.transform_to(TARGETS_A, 1.0)
        first_tasks = manager.tasks
        first_render = manager.render_task

        manager.tick(0.5)
        manager.transform_to(TARGETS_B, 1.0)

        assert manager.active_task_count == 7
        assert not set(map(id, first_tasks)) & set(map(id, manager.tasks))
        assert manager.render_task is not first_render

    def test_resumes_from_partial_values(self, manager, entities):
        manager.transform_to(TARGETS_A, 1.0)
        manager.tick(0.75)
        partial = [e.position for e in entities]

        manager.transform_to(TARGETS_B, 1.0)

        positions = [t.start for t in manager.tasks if t.channel == "position"]
        assert positions == partial
        assert partial[0] != (0.0, 0.0, 0.0)
        assert partial[0] != TARGETS_A[0].position

    def test_final_state_is_second_target(self, manager, entities):
        manager.transform_to(TARGETS_A, 1.0)
        manager.tick(0.5)
        manager.transform_to(TARGETS_B, 1.0)

        t = 0.5
        while manager.tick(t):
            t += 0.1

        for entity, target in zip(entities, TARGETS_B):
            assert entity.transform == target

    def test_cancel_all(self, manager):
        manager.transform_to(TARGETS_A, 1.0)
        assert manager.cancel_all() == 7
        assert not manager.is_active


class TestRenderDriver:
    def test_fires_every_tick_until_twice_base(self, manager, renders):
        manager.transform_to(TARGETS_A, 1.0)

        for step in range(1, 9):
            manager.tick(step * 0.25)
            assert renders.calls == step

        assert not manager.is_active
        manager.tick(2.25)
        manager.tick(2.5)
        assert renders.calls == 8

    def test_render_sees_values_written_this_tick(self, entities):
        seen = []
        manager = TransitionManager(
            entities,
            render_callback=lambda: seen.append(entities[0].position),
            rng=SequenceRandom([0.0]),
        )
        manager.transform_to(TARGETS_A, 1.0)

        manager.tick(1.0)
        assert seen[-1] == TARGETS_A[0].position

    def test_runs_without_callback(self, entities):
        manager = TransitionManager(entities)
        manager.transform_to(TARGETS_A, 1.0)
        assert manager.tick(0.1) is True


class TestCapacity:
    def test_entities_without_target_untouched(self, manager, entities):
        entities[2].set_position((9.0, 9.0, 9.0))
        manager.transform_to(TARGETS_A[:2], 1.0)

        assert manager.skipped_entities == 1
        assert manager.active_task_count == 2 * 2 + 1

        manager.tick(2.0)
        assert entities[2].position == (9.0, 9.0, 9.0)
        assert entities[0].position == TARGETS_A[0].position

    def test_extra_targets_ignored(self, manager, entities):
        extra = TARGETS_A + targets_at((1.0, 1.0, 1.0))
        manager.transform_to(extra, 1.0)

        assert manager.skipped_entities == 0
        assert manager.active_task_count == 7

    def test_empty_targets_still_drive_render(self, manager, renders):
        manager.transform_to((), 1.0)
        assert manager.active_task_count == 1

        manager.tick(1.0)
        assert renders.calls == 1


class TestReentrancy:
    def test_transform_from_render_callback_is_deferred(self, entities):
        manager = TransitionManager(entities, rng=SequenceRandom([0.0]))
        state = {"triggered": False, "count_during": None}

        def on_render():
            if not state["triggered"]:
                state["triggered"] = True
                manager.transform_to(TARGETS_B, 1.0)
                state["count_during"] = manager.transition_count

        manager.render_callback = on_render
        manager.transform_to(TARGETS_A, 1.0)

        manager.tick(0.5)

        # request was held until the tick finished iterating
        assert state["count_during"] == 1
        assert manager.transition_count == 2
        assert manager.active_task_count == 7
        assert all(t.start_time == 0.5 for t in manager.tasks)
        position_starts = [t.start for t in manager.tasks if t.channel == "position"]
        assert position_starts == [e.position for e in entities]

        manager.tick(2.5)
        for entity, target in zip(entities, TARGETS_B):
            assert entity.transform == target
