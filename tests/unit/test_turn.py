"""Unit tests for revolver.engine.turn.

Tests cover:
- initialize_game: roster layout and starting values
- draw_armed_actor: uniform over the living, dead skipped, empty table
- resolve_shot: blank probability, edge probabilities, long-run rate
- apply_damage: exactly one point, alive flip, dead actors rejected
- evaluate_outcome: winner / no winner / continue
- record_turn: append-only history
- Phase transitions and rejection of off-schedule commands
- Three consecutive hits eliminating a 3-health target
"""

import random
from datetime import datetime, timezone

import pytest

from revolver.engine.errors import InvalidActor, InvalidPhase, InvalidState
from revolver.engine.randomness import ScriptedRandom, pick_index
from revolver.engine.turn import (
    apply_damage,
    begin_shot,
    draw_armed_actor,
    evaluate_outcome,
    finish_spin,
    initialize_game,
    record_turn,
    resolve_shot,
    resolve_turn,
    select_target,
    start_spin,
)
from revolver.models import ActorKind, GameConfig, GamePhase

FIXED_TIME = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

# Draws below 0.5 are blanks at the default blank probability
HIT = 0.9
BLANK = 0.1


def arm(state, shooter_id, target_id=None):
    """Put a state into CHOOSING_TARGET with the given shooter (and target)."""
    return state.model_copy(
        update={
            "phase": GamePhase.CHOOSING_TARGET,
            "armed_actor_id": shooter_id,
            "selected_target_id": target_id,
        }
    )


class TestInitializeGame:
    def test_default_roster(self, default_config):
        state = initialize_game(default_config, now=FIXED_TIME)

        assert [a.id for a in state.actors] == ["player-0", "ai-1", "ai-2", "ai-3", "ai-4"]
        assert [a.name for a in state.actors] == ["You", "Viktor", "Natasha", "Boris", "Svetlana"]
        assert [a.position for a in state.actors] == [0, 1, 2, 3, 4]
        assert state.actors[0].kind == ActorKind.HUMAN
        assert all(a.kind == ActorKind.AUTONOMOUS for a in state.actors[1:])
        assert all(a.health == 3 and a.is_alive for a in state.actors)

    def test_initial_phase_and_bookkeeping(self, default_config):
        state = initialize_game(default_config, now=FIXED_TIME)

        assert state.phase == GamePhase.SETUP
        assert state.armed_actor_id is None
        assert state.selected_target_id is None
        assert state.history == ()
        assert len(state.grudges) == 0
        assert state.started_at == FIXED_TIME
        assert state.last_saved_at == FIXED_TIME

    def test_names_fall_back_when_pool_runs_out(self):
        config = GameConfig(actor_count=7, starting_health=2)
        state = initialize_game(config, now=FIXED_TIME)

        assert [a.name for a in state.actors[5:]] == ["Bot 5", "Bot 6"]
        assert all(a.health == 2 for a in state.actors)
        assert all(a.token for a in state.actors)


class TestDrawArmedActor:
    def test_draw_maps_range_onto_living_actors(self, make_state):
        state = make_state(health={"player-0": 0, "ai-2": 0})
        # Living in seat order: ai-1, ai-3, ai-4
        assert draw_armed_actor(state, ScriptedRandom([0.0])) == "ai-1"
        assert draw_armed_actor(state, ScriptedRandom([0.4])) == "ai-3"
        assert draw_armed_actor(state, ScriptedRandom([0.999])) == "ai-4"

    def test_draw_is_roughly_uniform(self, fresh_state):
        rng = random.Random(2024)
        counts = {a.id: 0 for a in fresh_state.actors}
        for _ in range(10_000):
            counts[draw_armed_actor(fresh_state, rng)] += 1

        for count in counts.values():
            assert 1_800 < count < 2_200

    def test_draw_ignores_shoot_chance_biases(self, fresh_state):
        # Same draw regardless of advisory biases, which the function never sees
        assert draw_armed_actor(fresh_state, ScriptedRandom([0.0])) == "player-0"

    def test_draw_with_nobody_alive_raises(self, make_state):
        state = make_state(health={a: 0 for a in ["player-0", "ai-1", "ai-2", "ai-3", "ai-4"]})
        with pytest.raises(InvalidState):
            draw_armed_actor(state, ScriptedRandom([0.5]))


class TestResolveShot:
    def test_draw_below_probability_is_blank(self):
        assert resolve_shot(ScriptedRandom([0.49]), 0.5).is_blank
        assert not resolve_shot(ScriptedRandom([0.5]), 0.5).is_blank

    @pytest.mark.parametrize("draw", [0.0, 0.3, 0.999])
    def test_edge_probabilities(self, draw):
        assert not resolve_shot(ScriptedRandom([draw]), 0.0).is_blank
        assert resolve_shot(ScriptedRandom([draw]), 1.0).is_blank

    def test_consumes_exactly_one_draw(self):
        rng = ScriptedRandom([0.2, 0.8])
        resolve_shot(rng, 0.5)
        assert rng.remaining == 1

    @pytest.mark.slow
    def test_long_run_blank_rate_converges(self):
        rng = random.Random(7)
        blanks = sum(resolve_shot(rng, 0.5).is_blank for _ in range(20_000))
        assert 0.48 < blanks / 20_000 < 0.52


class TestApplyDamage:
    def test_takes_exactly_one_point(self, fresh_state):
        actor = fresh_state.get_actor("ai-1")
        damaged = apply_damage(actor)
        assert damaged.health == actor.health - 1
        assert damaged.is_alive
        assert actor.health == 3

    def test_alive_flips_at_zero(self, make_state):
        actor = make_state(health={"ai-1": 1}).get_actor("ai-1")
        damaged = apply_damage(actor)
        assert damaged.health == 0
        assert not damaged.is_alive

    def test_dead_actor_takes_no_further_damage(self, make_state):
        actor = make_state(health={"ai-1": 0}).get_actor("ai-1")
        with pytest.raises(InvalidActor):
            apply_damage(actor)


class TestEvaluateOutcome:
    def test_one_survivor_wins(self, make_state):
        state = make_state(health={"player-0": 0, "ai-1": 0, "ai-2": 0, "ai-4": 0})
        outcome = evaluate_outcome(state.actors)
        assert outcome.over
        assert outcome.winner_id == "ai-3"

    def test_nobody_left_is_over_without_winner(self, make_state):
        state = make_state(health={a.id: 0 for a in make_state().actors})
        outcome = evaluate_outcome(state.actors)
        assert outcome.over
        assert outcome.winner_id is None

    def test_two_or_more_continue(self, make_state):
        state = make_state(health={"player-0": 0, "ai-1": 0, "ai-2": 0})
        outcome = evaluate_outcome(state.actors)
        assert not outcome.over
        assert outcome.winner_id is None


class TestRecordTurn:
    def test_appends_without_touching_prior_records(self, fresh_state):
        first = record_turn(fresh_state, "player-0", "ai-1", True, False, now=FIXED_TIME)
        second = record_turn(first, "ai-1", "player-0", False, False, now=FIXED_TIME)

        assert len(fresh_state.history) == 0
        assert len(first.history) == 1
        assert len(second.history) == 2
        assert second.history[0] is first.history[0]
        assert second.history[1].shooter_id == "ai-1"
        assert not second.history[1].was_blank

    def test_defaults_to_wall_clock(self, fresh_state):
        state = record_turn(fresh_state, "player-0", "ai-1", True, False)
        assert state.history[0].timestamp.tzinfo is not None


class TestPhaseTransitions:
    def test_full_turn(self, fresh_state, default_config):
        state = start_spin(fresh_state)
        assert state.phase == GamePhase.SPINNING

        state = finish_spin(state, ScriptedRandom([0.0]))
        assert state.phase == GamePhase.CHOOSING_TARGET
        assert state.armed_actor_id == "player-0"

        state = select_target(state, "ai-2")
        assert state.selected_target_id == "ai-2"

        state = begin_shot(state)
        assert state.phase == GamePhase.SHOOTING

        state, record, outcome = resolve_turn(state, ScriptedRandom([HIT]), default_config, now=FIXED_TIME)
        assert state.phase == GamePhase.SETUP
        assert state.armed_actor_id is None
        assert state.selected_target_id is None
        assert state.get_actor("ai-2").health == 2
        assert record.shooter_id == "player-0"
        assert record.target_id == "ai-2"
        assert not record.was_blank
        assert not record.killed
        assert not outcome.over

    def test_blank_leaves_health_alone(self, fresh_state, default_config):
        state = begin_shot(arm(fresh_state, "ai-1", "ai-2"))
        state, record, _ = resolve_turn(state, ScriptedRandom([BLANK]), default_config, now=FIXED_TIME)
        assert state.get_actor("ai-2").health == 3
        assert record.was_blank

    def test_blank_at_autonomous_target_records_grudge(self, fresh_state, default_config):
        state = begin_shot(arm(fresh_state, "player-0", "ai-1"))
        state, record, _ = resolve_turn(state, ScriptedRandom([BLANK]), default_config, now=FIXED_TIME)
        assert record.was_blank
        assert state.grudges.against("ai-1") == ("player-0",)

    def test_hit_or_human_target_records_no_grudge(self, fresh_state, default_config):
        hit = begin_shot(arm(fresh_state, "player-0", "ai-1"))
        hit, _, _ = resolve_turn(hit, ScriptedRandom([HIT]), default_config, now=FIXED_TIME)
        assert len(hit.grudges) == 0

        at_human = begin_shot(arm(fresh_state, "ai-2", "player-0"))
        at_human, _, _ = resolve_turn(at_human, ScriptedRandom([BLANK]), default_config, now=FIXED_TIME)
        assert len(at_human.grudges) == 0

    def test_reselecting_replaces_target(self, fresh_state):
        state = select_target(arm(fresh_state, "player-0"), "ai-1")
        state = select_target(state, "ai-3")
        assert state.selected_target_id == "ai-3"

    def test_final_kill_ends_game(self, make_state, default_config):
        state = make_state(health={"ai-1": 0, "ai-2": 0, "ai-3": 0, "ai-4": 1})
        state = begin_shot(arm(state, "player-0", "ai-4"))
        state, record, outcome = resolve_turn(state, ScriptedRandom([HIT]), default_config, now=FIXED_TIME)

        assert record.killed
        assert outcome.over
        assert outcome.winner_id == "player-0"
        assert state.phase == GamePhase.GAME_OVER

    @pytest.mark.parametrize(
        "command",
        [
            lambda s: finish_spin(s, ScriptedRandom([0.0])),
            lambda s: select_target(s, "ai-1"),
            lambda s: begin_shot(s),
            lambda s: resolve_turn(s, ScriptedRandom([HIT]), GameConfig()),
        ],
    )
    def test_off_schedule_commands_in_setup_rejected(self, fresh_state, command):
        with pytest.raises(InvalidPhase):
            command(fresh_state)

    def test_spin_rejected_outside_setup(self, fresh_state):
        with pytest.raises(InvalidPhase):
            start_spin(arm(fresh_state, "player-0"))

    def test_commands_rejected_after_game_over(self, fresh_state):
        over = fresh_state.model_copy(update={"phase": GamePhase.GAME_OVER})
        with pytest.raises(InvalidPhase):
            start_spin(over)
        with pytest.raises(InvalidPhase):
            begin_shot(over)

    def test_self_target_rejected(self, fresh_state):
        with pytest.raises(InvalidActor, match="themselves"):
            select_target(arm(fresh_state, "ai-1"), "ai-1")

    def test_dead_target_rejected(self, make_state):
        state = arm(make_state(health={"ai-2": 0}), "ai-1")
        with pytest.raises(InvalidActor, match="eliminated"):
            select_target(state, "ai-2")

    def test_unknown_target_rejected(self, fresh_state):
        with pytest.raises(InvalidActor, match="Unknown"):
            select_target(arm(fresh_state, "ai-1"), "ai-99")

    def test_shoot_without_target_rejected(self, fresh_state):
        with pytest.raises(InvalidActor, match="No target"):
            begin_shot(arm(fresh_state, "ai-1"))

    def test_dead_shooter_rejected(self, make_state):
        state = arm(make_state(health={"ai-1": 0}), "ai-1", "ai-2")
        with pytest.raises(InvalidActor):
            begin_shot(state)


class TestThreeHitsEliminate:
    def test_target_goes_three_two_one_zero(self, fresh_state, default_config):
        state = fresh_state
        health_seen = []
        alive_seen = []
        for _ in range(3):
            state = start_spin(state)
            state = finish_spin(state, ScriptedRandom([0.0]))  # human armed
            state = select_target(state, "ai-3")
            state = begin_shot(state)
            state, record, _ = resolve_turn(state, ScriptedRandom([HIT]), default_config, now=FIXED_TIME)
            health_seen.append(state.get_actor("ai-3").health)
            alive_seen.append(state.get_actor("ai-3").is_alive)

        assert health_seen == [2, 1, 0]
        assert alive_seen == [True, True, False]
        assert [r.killed for r in state.history] == [False, False, True]
        assert state.phase == GamePhase.SETUP
        assert len(state.alive_actors) == 4


class TestRandomHelpers:
    def test_pick_index_clamps_top_of_range(self):
        class AlmostOne:
            def random(self):
                return 0.9999999999999999

        assert pick_index(AlmostOne(), 3) == 2

    def test_scripted_random_exhaustion(self):
        rng = ScriptedRandom([0.5])
        rng.random()
        with pytest.raises(InvalidState, match="exhausted"):
            rng.random()
