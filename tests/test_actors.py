"""Tests for the actor state machines: cyclops, troll, thief and the shared framework."""

import logging
import random

import pytest

from pyzorkcore.engine.actors import (
    Actor,
    ActorKind,
    ActorManager,
    ActorState,
    InvalidTransition,
    actor_daemon_id,
)
from pyzorkcore.engine.cyclops import (
    CYCLOPS_AWAKE_LDESC,
    CYCLOPS_DRINKS,
    CYCLOPS_EATS_PLAYER,
    CYCLOPS_GARLIC,
    CYCLOPS_LUNCH,
    CYCLOPS_MAD_MESSAGES,
    CYCLOPS_NOT_THIRSTY,
    CYCLOPS_REFUSES,
    CYCLOPS_SHRUGS,
    CYCLOPS_SLEEPING_LDESC,
    CYCLOPS_WAKES,
    CyclopsMood,
    make_cyclops,
)
from pyzorkcore.engine.events import EventScheduler
from pyzorkcore.engine.models import PLAYER, GameFlag, ObjectFlag, ObjectID, RoomFlag, RoomID
from pyzorkcore.engine.thief import (
    APPEARS,
    PRESENT_LDESC,
    REVIVES,
    SWIPES,
    VANISHES,
    ThiefMood,
    make_thief,
)
from pyzorkcore.engine.troll import (
    ARMED_LDESC,
    DISARMED_LDESC,
    UNCONSCIOUS_LDESC,
    TrollMood,
    make_troll,
)
from pyzorkcore.engine.world import create_demo_world


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def state():
    state = create_demo_world()
    state.events = EventScheduler()
    return state


@pytest.fixture
def manager(state):
    manager = ActorManager()
    manager.register(make_cyclops())
    manager.register(make_troll())
    manager.attach(state.events)
    return manager


@pytest.fixture
def cyclops(manager):
    return manager.get(ObjectID.CYCLOPS)


@pytest.fixture
def troll(manager):
    return manager.get(ObjectID.TROLL)


class TestActorFramework:
    """Tests for the shared actor record and manager."""

    def test_mood_defaults_per_kind(self):
        assert Actor("BOB").mood is None
        assert isinstance(Actor("C", ActorKind.CYCLOPS).mood, CyclopsMood)
        assert isinstance(Actor("T", ActorKind.TROLL).mood, TrollMood)
        assert isinstance(Actor("R", ActorKind.THIEF).mood, ThiefMood)

    def test_generic_actor_turns_hostile(self, state):
        bob = Actor("BOB")

        bob.on_attacked(state)

        assert bob.state == ActorState.FIGHTING
        assert bob.should_act(state)
        assert bob.execute_turn(state) is False
        assert bob.on_receive_item(state, state.get_object(ObjectID.GARLIC)) is False
        assert bob.on_talk(state) is None

    def test_dead_is_terminal(self, state):
        bob = Actor("BOB")
        bob.transition_state(ActorState.DEAD, state)

        assert bob.is_dead
        assert not bob.should_act(state)
        with pytest.raises(InvalidTransition):
            bob.transition_state(ActorState.NORMAL, state)

    def test_same_state_is_noop(self, state, cyclops):
        cyclops.transition_state(ActorState.NORMAL, state)

        assert state.drain_output() == []
        assert not state.has_flag(GameFlag.CYCLOPS_FLAG)

    def test_fighting_sets_fightbit(self, state, troll):
        troll_obj = state.get_object(ObjectID.TROLL)

        troll.transition_state(ActorState.FIGHTING, state)
        assert troll_obj.has_flag(ObjectFlag.FIGHTBIT)

        troll.transition_state(ActorState.UNCONSCIOUS, state)
        assert not troll_obj.has_flag(ObjectFlag.FIGHTBIT)

    def test_manager_unknown_actor(self, state, manager):
        garlic = state.get_object(ObjectID.GARLIC)

        assert manager.handle_attack("NOBODY", state) is False
        assert manager.handle_receive_item("NOBODY", state, garlic) is False
        assert manager.run_actor("NOBODY", state) is False
        manager.transition("NOBODY", ActorState.DEAD, state)

    def test_attach_registers_daemons(self, state, manager):
        assert state.events.event_ids() == [
            actor_daemon_id(ObjectID.CYCLOPS),
            actor_daemon_id(ObjectID.TROLL),
        ]
        assert state.events.status("actor:TROLL").is_daemon

    def test_unregistered_actor_daemon_is_noop(self, state, manager):
        state.current_room = RoomID.CYCLOPS_ROOM
        manager.unregister(ObjectID.CYCLOPS)

        state.events.process_turn(state)

        assert state.drain_output() == []

    def test_execute_turn_contains_errors(self, state, caplog, monkeypatch):
        manager = ActorManager()
        bob = manager.register(Actor("BOB"))

        def broken(state):
            raise RuntimeError("confused")

        monkeypatch.setattr(bob, "execute_turn", broken)

        with caplog.at_level(logging.ERROR, logger="pyzorkcore.engine.actors"):
            assert manager.execute_turn(state) is False

        assert "Error executing actor BOB: confused" in caplog.text


class TestCyclops:
    """Tests for the cyclops wrath counter."""

    def test_no_action_without_player(self, state, cyclops):
        for _ in range(10):
            state.events.process_turn(state)

        assert cyclops.mood.wrath == 0
        assert state.drain_output() == []

    def test_escalates_then_eats_player(self, state, cyclops):
        state.current_room = RoomID.CYCLOPS_ROOM

        for index in range(6):
            state.events.process_turn(state)
            assert state.drain_output() == [CYCLOPS_MAD_MESSAGES[index]]

        assert cyclops.mood.wrath == 6
        state.events.process_turn(state)

        assert state.drain_output() == [CYCLOPS_EATS_PLAYER]
        assert state.has_flag(GameFlag.CYCLOPS_ATE_PLAYER)
        assert state.has_flag(GameFlag.GAME_OVER)
        assert not state.events.is_enabled("actor:CYCLOPS")

    def test_lunch_makes_him_thirsty(self, state, cyclops):
        state.current_room = RoomID.CYCLOPS_ROOM
        lunch = state.get_object(ObjectID.LUNCH)

        assert cyclops.on_receive_item(state, lunch)

        assert lunch.location is None
        assert cyclops.mood.wrath == -1
        assert cyclops.mood.thirsty
        assert state.drain_output() == [CYCLOPS_LUNCH]

        state.events.process_turn(state)
        assert cyclops.mood.wrath == -2
        assert state.drain_output() == [CYCLOPS_MAD_MESSAGES[1]]

    def test_lunch_after_wrath_keeps_magnitude(self, state, cyclops):
        cyclops.mood.wrath = 3

        cyclops.on_receive_item(state, state.get_object(ObjectID.LUNCH))

        assert cyclops.mood.wrath == -3

    def test_second_lunch_declined_silently(self, state, cyclops):
        cyclops.mood.wrath = -2
        lunch = state.get_object(ObjectID.LUNCH)

        assert cyclops.on_receive_item(state, lunch) is False

        assert lunch.location == PLAYER
        assert state.drain_output() == []

    def test_lunch_then_water_puts_him_to_sleep(self, state, cyclops):
        state.current_room = RoomID.CYCLOPS_ROOM
        cyclops.on_receive_item(state, state.get_object(ObjectID.LUNCH))
        state.drain_output()

        bottle = state.get_object(ObjectID.BOTTLE)
        assert cyclops.on_receive_item(state, bottle)

        cyclops_obj = state.get_object(ObjectID.CYCLOPS)
        assert cyclops.state == ActorState.SLEEPING
        assert state.drain_output() == [CYCLOPS_DRINKS]
        assert state.get_object(ObjectID.WATER).location is None
        assert bottle.location == RoomID.CYCLOPS_ROOM
        assert bottle.has_flag(ObjectFlag.OPENBIT)
        assert not cyclops_obj.has_flag(ObjectFlag.FIGHTBIT)
        assert cyclops_obj.properties["LDESC"] == CYCLOPS_SLEEPING_LDESC
        assert state.has_flag(GameFlag.CYCLOPS_FLAG)
        assert state.score == 10

        for _ in range(10):
            state.events.process_turn(state)
        assert state.drain_output() == []

    def test_water_refused_when_not_thirsty(self, state, cyclops):
        water = state.get_object(ObjectID.WATER)

        assert cyclops.on_receive_item(state, water) is False

        assert state.drain_output() == [CYCLOPS_NOT_THIRSTY]
        assert water.location == ObjectID.BOTTLE

    def test_empty_bottle_is_refused(self, state, cyclops):
        cyclops.mood.wrath = -1
        state.move_object(ObjectID.WATER, None)

        assert cyclops.on_receive_item(state, state.get_object(ObjectID.BOTTLE)) is False

        assert state.drain_output() == [CYCLOPS_REFUSES]

    def test_garlic_and_other_items_refused(self, state, cyclops):
        assert cyclops.on_receive_item(state, state.get_object(ObjectID.GARLIC)) is False
        assert cyclops.on_receive_item(state, state.get_object(ObjectID.LAMP)) is False

        assert state.drain_output() == [CYCLOPS_GARLIC, CYCLOPS_REFUSES]

    def test_attack_shrugs(self, state, cyclops):
        state.events.disable("actor:CYCLOPS")

        cyclops.on_attacked(state, state.get_object(ObjectID.SWORD))

        assert state.drain_output() == [CYCLOPS_SHRUGS]
        assert state.events.is_enabled("actor:CYCLOPS")
        assert cyclops.state == ActorState.NORMAL

    def test_attack_wakes_sleeping_cyclops(self, state, cyclops):
        state.current_room = RoomID.CYCLOPS_ROOM
        cyclops.mood.wrath = -2
        cyclops.transition_state(ActorState.SLEEPING, state)

        cyclops.on_attacked(state)

        cyclops_obj = state.get_object(ObjectID.CYCLOPS)
        assert cyclops.state == ActorState.NORMAL
        assert state.drain_output() == [CYCLOPS_WAKES]
        assert cyclops.mood.wrath == 2
        assert cyclops_obj.has_flag(ObjectFlag.FIGHTBIT)
        assert cyclops_obj.properties["LDESC"] == CYCLOPS_AWAKE_LDESC
        assert not state.has_flag(GameFlag.CYCLOPS_FLAG)

    def test_score_awarded_once(self, state, cyclops):
        cyclops.transition_state(ActorState.SLEEPING, state)
        cyclops.transition_state(ActorState.NORMAL, state)
        cyclops.transition_state(ActorState.SLEEPING, state)

        assert state.score == 10

    def test_missing_object_is_noop(self, state, cyclops):
        state.current_room = RoomID.CYCLOPS_ROOM
        del state.objects[ObjectID.CYCLOPS]

        assert cyclops.execute_turn(state) is False
        assert cyclops.on_receive_item(state, state.get_object(ObjectID.LUNCH)) is False
        cyclops.on_attacked(state)

        assert state.drain_output() == []

    def test_talk(self, state, cyclops):
        assert "eating" in cyclops.on_talk(state)
        cyclops.transition_state(ActorState.SLEEPING, state)
        assert "asleep" in cyclops.on_talk(state)


class TestTroll:
    """Tests for the troll's axe and gifts."""

    @pytest.fixture(autouse=True)
    def in_troll_room(self, state):
        state.current_room = RoomID.TROLL_ROOM

    def test_idle_with_axe(self, state, troll):
        assert troll.execute_turn(state) is False
        assert state.drain_output() == []

    def test_recovers_dropped_axe(self, state, troll):
        state.rng = FixedRandom(0.1)
        state.move_object(ObjectID.AXE, RoomID.TROLL_ROOM)

        assert troll.execute_turn(state)

        axe = state.get_object(ObjectID.AXE)
        assert axe.location == ObjectID.TROLL
        assert axe.has_flag(ObjectFlag.NDESCBIT)
        assert not troll.mood.disarmed
        assert "recovers his weapon" in state.drain_output()[0]
        assert state.get_object(ObjectID.TROLL).properties["LDESC"] == ARMED_LDESC

    def test_cowers_when_recovery_fails(self, state, troll):
        state.rng = FixedRandom(0.8)
        state.move_object(ObjectID.AXE, RoomID.TROLL_ROOM)

        assert troll.execute_turn(state)

        assert state.get_object(ObjectID.AXE).location == RoomID.TROLL_ROOM
        assert troll.mood.disarmed
        assert "cowers in terror" in state.drain_output()[0]
        assert state.get_object(ObjectID.TROLL).properties["LDESC"] == DISARMED_LDESC

    def test_fighting_troll_recovers_more_often(self, state, troll):
        state.rng = FixedRandom(0.8)
        state.move_object(ObjectID.AXE, RoomID.TROLL_ROOM)
        troll.transition_state(ActorState.FIGHTING, state)

        troll.execute_turn(state)

        assert state.get_object(ObjectID.AXE).location == ObjectID.TROLL

    def test_recovery_out_of_sight_is_silent(self, state, troll):
        state.rng = FixedRandom(0.1)
        state.move_object(ObjectID.AXE, RoomID.TROLL_ROOM)
        state.current_room = RoomID.CELLAR

        assert troll.execute_turn(state) is False

        assert state.get_object(ObjectID.AXE).location == ObjectID.TROLL
        assert state.drain_output() == []

    def test_attack_makes_him_fight(self, state, troll):
        troll.on_attacked(state, state.get_object(ObjectID.SWORD))

        assert troll.state == ActorState.FIGHTING

    def test_unconscious_then_wakes(self, state, troll):
        troll.transition_state(ActorState.UNCONSCIOUS, state)

        troll_obj = state.get_object(ObjectID.TROLL)
        assert state.get_object(ObjectID.AXE).location == RoomID.TROLL_ROOM
        assert state.object_has_flag(ObjectID.AXE, ObjectFlag.WEAPONBIT)
        assert troll_obj.properties["LDESC"] == UNCONSCIOUS_LDESC
        assert state.has_flag(GameFlag.TROLL_FLAG)
        assert troll.execute_turn(state) is False

        troll.transition_state(ActorState.FIGHTING, state)

        assert state.drain_output() == ["The troll stirs, quickly resuming a fighting stance."]
        assert state.get_object(ObjectID.AXE).location == ObjectID.TROLL
        assert not troll.mood.disarmed
        assert not state.has_flag(GameFlag.TROLL_FLAG)
        assert troll_obj.has_flag(ObjectFlag.FIGHTBIT)

    def test_wakes_without_axe(self, state, troll):
        troll.transition_state(ActorState.UNCONSCIOUS, state)
        state.move_object(ObjectID.AXE, PLAYER)

        troll.transition_state(ActorState.FIGHTING, state)

        assert troll.mood.disarmed
        assert state.get_object(ObjectID.TROLL).properties["LDESC"] == "A troll is here."

    def test_death(self, state, troll):
        troll.transition_state(ActorState.DEAD, state)

        assert state.get_object(ObjectID.TROLL).location is None
        assert state.get_object(ObjectID.AXE).location == RoomID.TROLL_ROOM
        assert state.has_flag(GameFlag.TROLL_FLAG)
        assert state.score == 10
        assert state.drain_output() == [
            "The troll's body disappears in a cloud of greasy black smoke."
        ]
        with pytest.raises(InvalidTransition):
            troll.transition_state(ActorState.FIGHTING, state)

    def test_fatal_gift(self, state, troll):
        state.rng = FixedRandom(0.1)
        knife = state.get_object(ObjectID.KNIFE)
        state.move_object(ObjectID.KNIFE, PLAYER)

        assert troll.on_receive_item(state, knife)

        messages = state.drain_output()
        assert "internal hemorrhage" in messages[0]
        assert troll.state == ActorState.DEAD
        assert knife.location is None
        assert state.has_flag(GameFlag.TROLL_FLAG)

    def test_blade_thrown_back(self, state, troll):
        state.rng = FixedRandom(0.5)
        sword = state.get_object(ObjectID.SWORD)
        state.move_object(ObjectID.SWORD, PLAYER)

        assert troll.on_receive_item(state, sword)

        assert sword.location == RoomID.TROLL_ROOM
        assert troll.state == ActorState.NORMAL
        assert state.object_has_flag(ObjectID.TROLL, ObjectFlag.FIGHTBIT)
        assert "the sword falls to the floor" in state.drain_output()[0]

    def test_eats_other_gifts(self, state, troll):
        garlic = state.get_object(ObjectID.GARLIC)

        assert troll.on_receive_item(state, garlic)

        assert garlic.location is None
        assert "gleefully eats it" in state.drain_output()[0]

    def test_axe_gift(self, state, troll):
        axe = state.get_object(ObjectID.AXE)
        assert troll.on_receive_item(state, axe) is False
        assert "get the axe first" in state.drain_output()[0]

        state.move_object(ObjectID.AXE, PLAYER)
        troll.mood.disarmed = True
        assert troll.on_receive_item(state, axe)

        assert axe.location == ObjectID.TROLL
        assert not troll.mood.disarmed

    def test_dead_troll_accepts_nothing(self, state, troll):
        troll.transition_state(ActorState.DEAD, state)

        assert troll.on_receive_item(state, state.get_object(ObjectID.GARLIC)) is False
        troll.on_attacked(state)
        assert troll.state == ActorState.DEAD


class TestThief:
    """Tests for the thief."""

    @pytest.fixture
    def thief(self):
        return make_thief()

    @pytest.fixture
    def thief_obj(self, state):
        return state.get_object(ObjectID.THIEF)

    @pytest.fixture
    def egg(self, state):
        return state.get_object(ObjectID.EGG)

    def show(self, thief_obj, state, room_id):
        """Put the thief in a room, visible, with the player."""
        state.move_object(ObjectID.THIEF, room_id)
        state.current_room = room_id
        thief_obj.remove_flag(ObjectFlag.INVISIBLE)

    def test_roams_outside_the_house(self, state, thief, thief_obj):
        visited = []
        for _ in range(12):
            thief.execute_turn(state)
            visited.append(thief_obj.location)

        assert visited[:5] == [
            RoomID.CELLAR,
            RoomID.TROLL_ROOM,
            RoomID.CYCLOPS_ROOM,
            RoomID.STRANGE_PASSAGE,
            RoomID.TREASURE_ROOM,
        ]
        assert RoomID.WEST_OF_HOUSE not in visited
        assert RoomID.LIVING_ROOM not in visited
        assert not thief_obj.is_visible()

    def test_robs_visited_room_and_stashes_loot(self, state, thief, thief_obj, egg):
        state.rng = FixedRandom(0.1)
        state.rooms[RoomID.STRANGE_PASSAGE].flags |= RoomFlag.TOUCHBIT
        state.move_object(ObjectID.THIEF, RoomID.STRANGE_PASSAGE)

        thief.execute_turn(state)

        assert egg.location == ObjectID.THIEF
        assert not egg.is_visible()
        assert egg.has_flag(ObjectFlag.TOUCHBIT)
        assert thief_obj.location == RoomID.TREASURE_ROOM

        thief.execute_turn(state)

        assert egg.location == RoomID.TREASURE_ROOM
        assert egg.is_visible()
        assert state.drain_output() == []

    def test_unvisited_room_not_robbed(self, state, thief, egg):
        state.rng = FixedRandom(0.1)
        state.move_object(ObjectID.THIEF, RoomID.STRANGE_PASSAGE)

        thief.execute_turn(state)

        assert egg.location == RoomID.STRANGE_PASSAGE

    def test_swipes_treasure_in_the_dark(self, state, thief, thief_obj, egg):
        state.rng = FixedRandom(0.1)
        state.current_room = RoomID.CELLAR
        state.move_object(ObjectID.THIEF, RoomID.CELLAR)
        state.move_object(ObjectID.EGG, PLAYER)

        assert thief.execute_turn(state)

        assert state.drain_output() == [SWIPES]
        assert egg.location == ObjectID.THIEF
        assert thief_obj.location == RoomID.TROLL_ROOM

    def test_no_theft_with_troll_present(self, state, thief, egg):
        state.rng = FixedRandom(0.1)
        state.current_room = RoomID.TROLL_ROOM
        state.move_object(ObjectID.THIEF, RoomID.TROLL_ROOM)
        state.move_object(ObjectID.EGG, PLAYER)

        thief.execute_turn(state)

        assert egg.location == PLAYER

    def test_appears_to_player_with_light(self, state, thief, thief_obj):
        state.rng = FixedRandom(0.1)
        state.current_room = RoomID.CELLAR
        state.move_object(ObjectID.THIEF, RoomID.CELLAR)
        state.move_object(ObjectID.LAMP, PLAYER)
        state.get_object(ObjectID.LAMP).add_flag(ObjectFlag.ONBIT)

        assert thief.execute_turn(state)

        assert state.drain_output() == [APPEARS]
        assert thief_obj.is_visible()
        assert thief_obj.location == RoomID.CELLAR
        assert thief.mood.has_appeared
        assert thief_obj in state.reachable_objects()

    def test_hides_when_player_leaves(self, state, thief, thief_obj):
        self.show(thief_obj, state, RoomID.CELLAR)
        thief.mood.has_appeared = True
        state.current_room = RoomID.WEST_OF_HOUSE

        thief.execute_turn(state)

        assert not thief_obj.is_visible()
        assert not thief.mood.has_appeared
        assert thief_obj.location == RoomID.CELLAR

        thief.execute_turn(state)
        assert thief_obj.location == RoomID.TROLL_ROOM

    def test_stands_while_fighting(self, state, thief, thief_obj):
        self.show(thief_obj, state, RoomID.CELLAR)
        thief.on_attacked(state)

        assert thief.state == ActorState.FIGHTING
        assert thief.execute_turn(state) is False
        assert thief_obj.location == RoomID.CELLAR

    def test_knocked_out_drops_stiletto(self, state, thief, thief_obj):
        self.show(thief_obj, state, RoomID.CELLAR)
        stiletto = state.get_object(ObjectID.STILETTO)

        thief.transition_state(ActorState.UNCONSCIOUS, state)

        assert stiletto.location == RoomID.CELLAR
        assert stiletto.has_flag(ObjectFlag.WEAPONBIT)
        assert not stiletto.has_flag(ObjectFlag.NDESCBIT)
        assert thief_obj.properties["LDESC"] == "An unconscious robber is lying here."

    def test_revives_and_slips_away(self, state, thief, thief_obj):
        self.show(thief_obj, state, RoomID.CELLAR)
        thief.transition_state(ActorState.UNCONSCIOUS, state)

        thief.transition_state(ActorState.NORMAL, state)

        assert state.drain_output() == [REVIVES]
        assert state.get_object(ObjectID.STILETTO).location == ObjectID.THIEF
        assert not thief_obj.is_visible()
        assert thief_obj.properties["LDESC"] == PRESENT_LDESC

    def test_death_leaves_booty(self, state, thief, thief_obj, egg):
        self.show(thief_obj, state, RoomID.CELLAR)
        state.move_object(ObjectID.EGG, ObjectID.THIEF)
        egg.add_flag(ObjectFlag.INVISIBLE)

        thief.transition_state(ActorState.DEAD, state)

        assert state.drain_output() == [VANISHES, "The robber's booty remains."]
        assert egg.location == RoomID.CELLAR
        assert egg.is_visible()
        assert state.get_object(ObjectID.STILETTO).location == RoomID.CELLAR
        assert thief_obj.location is None
        assert state.score == 25

        assert thief.execute_turn(state) is False

    def test_refuses_gifts(self, state, thief):
        garlic = state.get_object(ObjectID.GARLIC)

        assert thief.on_receive_item(state, garlic) is False
        assert "not interested in your possession" in state.drain_output()[0]
        assert garlic.location == RoomID.LIVING_ROOM
        assert "formally introduced" in thief.on_talk(state)
