"""Tests for villain combat and wound healing."""

import random

import pytest

from pyzorkcore.engine.actors import ActorManager, ActorState
from pyzorkcore.engine.combat import (
    COMBAT_EVENT,
    CURE_EVENT,
    CURE_WAIT,
    MAX_WOUNDS,
    STILL_RECOVERING,
    THIEF,
    TROLL,
    Blow,
    player_attack,
    register_combat,
    roll_blow,
    villain_for,
    wound_player,
)
from pyzorkcore.engine.events import EventScheduler
from pyzorkcore.engine.models import PLAYER, GameFlag, ObjectFlag, ObjectID, RoomID
from pyzorkcore.engine.thief import REVIVES, make_thief
from pyzorkcore.engine.troll import make_troll
from pyzorkcore.engine.world import create_demo_world


class FixedRandom(random.Random):
    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def state():
    state = create_demo_world()
    state.events = EventScheduler()
    state.current_room = RoomID.TROLL_ROOM
    return state


@pytest.fixture
def manager(state):
    manager = ActorManager()
    manager.register(make_troll())
    manager.register(make_thief())
    register_combat(manager, state)
    return manager


@pytest.fixture
def troll(manager):
    return manager.get(ObjectID.TROLL)


@pytest.fixture
def sword(state):
    state.move_object(ObjectID.SWORD, PLAYER)
    return state.get_object(ObjectID.SWORD)


def run_turn(state) -> list[str]:
    state.events.process_turn(state)
    return state.drain_output()


class TestBlows:
    @pytest.mark.parametrize("value,blow", [
        (0.0, Blow.MISSED),
        (0.49, Blow.MISSED),
        (0.5, Blow.LIGHT_WOUND),
        (0.9, Blow.SERIOUS_WOUND),
        (0.97, Blow.STAGGER),
    ])
    def test_roll_blow(self, value, blow):
        assert roll_blow(value) == blow

    def test_villain_lookup(self):
        assert villain_for(ObjectID.TROLL) is TROLL
        assert villain_for(ObjectID.THIEF) is THIEF
        assert villain_for(ObjectID.CYCLOPS) is None


class TestVillainAttacks:
    """Tests for the combat daemon."""

    def test_registration(self, state, manager):
        assert state.events.event_ids() == [COMBAT_EVENT, CURE_EVENT]
        assert state.events.status(COMBAT_EVENT).is_daemon
        assert not state.events.is_enabled(CURE_EVENT)

    def test_register_without_scheduler(self):
        state = create_demo_world()

        register_combat(ActorManager(), state)

        assert state.events is None

    def test_calm_troll_leaves_player_alone(self, state, manager):
        state.rng = FixedRandom(0.9)

        assert run_turn(state) == []
        assert state.wounds == 0

    def test_fighting_troll_wounds_player(self, state, troll):
        state.rng = FixedRandom(0.6)
        troll.on_attacked(state)

        messages = run_turn(state)

        assert len(messages) == 1
        assert messages[0] in TROLL.light_wound
        assert state.wounds == 1
        assert state.events.is_enabled(CURE_EVENT)
        assert state.events.remaining_ticks(CURE_EVENT) == CURE_WAIT

    def test_miss(self, state, troll):
        state.rng = FixedRandom(0.1)
        troll.on_attacked(state)

        messages = run_turn(state)

        assert messages[0] in TROLL.missed
        assert state.wounds == 0
        assert not state.events.is_enabled(CURE_EVENT)

    def test_disarmed_troll_cowers(self, state, troll):
        troll.on_attacked(state)
        state.move_object(ObjectID.AXE, RoomID.TROLL_ROOM)

        assert run_turn(state) == []

    def test_fight_ends_when_player_leaves(self, state, troll):
        troll.on_attacked(state)
        state.set_flag(GameFlag.PLAYER_STAGGERED)
        state.current_room = RoomID.CELLAR

        run_turn(state)

        assert troll.state == ActorState.NORMAL
        assert not state.object_has_flag(ObjectID.TROLL, ObjectFlag.FIGHTBIT)
        assert not state.has_flag(GameFlag.PLAYER_STAGGERED)

    def test_fatal_wound(self, state, troll):
        state.rng = FixedRandom(0.6)
        state.wounds = MAX_WOUNDS
        troll.on_attacked(state)

        messages = run_turn(state)

        assert messages == [TROLL.killed]
        assert state.has_flag(GameFlag.PLAYER_KILLED)
        assert state.has_flag(GameFlag.GAME_OVER)

    def test_stagger_spoils_next_swing(self, state, troll, sword):
        state.rng = FixedRandom(0.99)
        troll.on_attacked(state)

        assert run_turn(state) == [TROLL.stagger]
        assert state.has_flag(GameFlag.PLAYER_STAGGERED)

        player_attack(troll, sword, state)

        assert state.drain_output() == [STILL_RECOVERING]
        assert not state.has_flag(GameFlag.PLAYER_STAGGERED)
        assert troll.state == ActorState.FIGHTING


class TestRecovery:
    """Tests for villains coming round."""

    def test_troll_wakes_fighting(self, state, troll):
        state.rng = FixedRandom(0.1)
        troll.transition_state(ActorState.UNCONSCIOUS, state)

        assert run_turn(state) == []
        assert troll.state == ActorState.UNCONSCIOUS

        assert run_turn(state) == ["The troll stirs, quickly resuming a fighting stance."]
        assert troll.state == ActorState.FIGHTING
        assert state.get_object(ObjectID.AXE).location == ObjectID.TROLL
        assert not state.has_flag(GameFlag.TROLL_FLAG)

    def test_stays_out_while_player_away(self, state, troll):
        state.rng = FixedRandom(0.1)
        troll.transition_state(ActorState.UNCONSCIOUS, state)
        state.current_room = RoomID.CELLAR

        for _ in range(5):
            run_turn(state)

        assert troll.state == ActorState.UNCONSCIOUS

    def test_thief_wakes_and_slips_away(self, state, manager):
        state.rng = FixedRandom(0.1)
        state.current_room = RoomID.CELLAR
        state.move_object(ObjectID.THIEF, RoomID.CELLAR)
        thief_obj = state.get_object(ObjectID.THIEF)
        thief_obj.remove_flag(ObjectFlag.INVISIBLE)
        thief = manager.get(ObjectID.THIEF)
        thief.transition_state(ActorState.UNCONSCIOUS, state)

        run_turn(state)
        messages = run_turn(state)

        assert messages == [REVIVES]
        assert thief.state == ActorState.NORMAL
        assert not thief_obj.is_visible()


class TestPlayerAttack:
    """Tests for the player's swing."""

    def test_knockout(self, state, troll, sword):
        state.rng = FixedRandom(0.1)

        player_attack(troll, sword, state)

        assert state.drain_output() == ["The troll is knocked out by a blow from your sword!"]
        assert troll.state == ActorState.UNCONSCIOUS

    def test_dodge(self, state, troll, sword):
        state.rng = FixedRandom(0.9)

        player_attack(troll, sword, state)

        assert state.drain_output() == ["The troll dodges your blow."]
        assert troll.state == ActorState.FIGHTING

    def test_thief_knocked_out_then_killed(self, state, manager, sword):
        state.rng = FixedRandom(0.1)
        state.current_room = RoomID.CELLAR
        state.move_object(ObjectID.THIEF, RoomID.CELLAR)
        state.get_object(ObjectID.THIEF).remove_flag(ObjectFlag.INVISIBLE)
        thief = manager.get(ObjectID.THIEF)

        player_attack(thief, sword, state)
        assert thief.state == ActorState.UNCONSCIOUS
        state.drain_output()

        player_attack(thief, sword, state)

        messages = state.drain_output()
        assert messages[0] == "The unconscious thief cannot defend himself: He dies."
        assert thief.state == ActorState.DEAD
        assert state.score == 25


class TestHealing:
    """Tests for the cure interrupt."""

    def test_wounds_heal_one_at_a_time(self, state, manager):
        state.current_room = RoomID.WEST_OF_HOUSE
        assert wound_player(state, 2) is False

        for _ in range(CURE_WAIT):
            run_turn(state)
        assert state.wounds == 1
        assert state.events.is_enabled(CURE_EVENT)

        for _ in range(CURE_WAIT):
            run_turn(state)
        assert state.wounds == 0
        assert not state.events.is_enabled(CURE_EVENT)

    def test_new_wound_restarts_countdown(self, state, manager):
        wound_player(state, 1)
        for _ in range(10):
            run_turn(state)

        wound_player(state, 1)

        assert state.events.remaining_ticks(CURE_EVENT) == CURE_WAIT
        assert state.wounds == 2
