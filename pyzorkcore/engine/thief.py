"""Thief behavior.

The thief roams every land room outside the house without being seen. He
pockets treasures lying in rooms the player has visited, lifts them from
the player in the dark, and stashes his haul in the treasure room. Now
and then he shows himself to a player carrying a light.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pyzorkcore.engine.actors import (
    Actor,
    ActorKind,
    ActorState,
    BaseRules,
    get_actor_object,
    is_with_player,
    tell_if_visible,
)
from pyzorkcore.engine.models import LIMBO, GameObject, ObjectFlag, ObjectID, RoomFlag, RoomID

if TYPE_CHECKING:
    from pyzorkcore.engine.state import GameState

logger = logging.getLogger(__name__)

ROB_CHANCE = 0.75
STEAL_CHANCE = 0.30
DROP_JUNK_CHANCE = 0.30
APPEAR_CHANCE = 0.30

DEFEAT_POINTS = 25

PRESENT_LDESC = "A seedy-looking individual with a large bag is here."
UNCONSCIOUS_LDESC = "An unconscious robber is lying here."

APPEARS = (
    "Someone carrying a large bag is casually leaning against one of the "
    "walls here. He does not speak, but it is clear from his aspect that "
    "the bag will be taken only over his dead body."
)
SWIPES = "The robber stealthily approaches and swipes something from you!"
DROPS_JUNK = "The robber, rummaging through his bag, dropped a few items he found valueless."
REVIVES = (
    "The robber revives, briefly feigning continued unconsciousness, and, "
    "when he sees his moment, scrambles away from you."
)
VANISHES = (
    "Almost as soon as the thief breathes his last breath, a cloud of "
    "sinister black fog envelops him, and when the fog lifts, the carcass "
    "has disappeared."
)


@dataclass
class ThiefMood:
    has_appeared: bool = False


def make_thief(actor_id: str = ObjectID.THIEF) -> Actor:
    """Create a thief actor, unseen."""
    return Actor(actor_id, ActorKind.THIEF, mood=ThiefMood())


def _pocket(obj: GameObject, state: "GameState") -> None:
    state.move_object(obj.id, ObjectID.THIEF)
    obj.add_flag(ObjectFlag.TOUCHBIT | ObjectFlag.INVISIBLE)


def _drop_stiletto(thief: GameObject, state: "GameState") -> None:
    stiletto = state.get_object(ObjectID.STILETTO)
    if stiletto is not None and stiletto.location == thief.id:
        state.move_object(stiletto.id, thief.location)
        stiletto.remove_flag(ObjectFlag.NDESCBIT)
        stiletto.add_flag(ObjectFlag.WEAPONBIT)


def _recover_stiletto(thief: GameObject, state: "GameState") -> None:
    stiletto = state.get_object(ObjectID.STILETTO)
    if stiletto is not None and stiletto.location == thief.location:
        stiletto.add_flag(ObjectFlag.NDESCBIT)
        stiletto.remove_flag(ObjectFlag.WEAPONBIT)
        state.move_object(stiletto.id, thief.id)


class ThiefRules(BaseRules):
    """Rules for the thief."""

    def new_mood(self) -> ThiefMood:
        return ThiefMood()

    def execute_turn(self, actor: Actor, state: "GameState") -> bool:
        thief = get_actor_object(actor, state)
        if thief is None or thief.location is None:
            return False
        # Stands his ground while fighting; knocked out he does nothing
        if actor.state != ActorState.NORMAL:
            return False

        room_id = thief.location
        visible = thief.is_visible()
        with_player = room_id == state.current_room
        shown = False

        if room_id == RoomID.TREASURE_ROOM and not with_player:
            self._deposit_booty(state)
        elif with_player and not state.is_room_lit() and not state.is_present(ObjectID.TROLL):
            if state.rng.random() < STEAL_CHANCE and self._steal_from_player(state):
                state.tell(SWIPES)
                shown = True
        else:
            if visible and not with_player:
                thief.add_flag(ObjectFlag.INVISIBLE)
                actor.mood.has_appeared = False

            room = state.get_room(room_id)
            if room is not None and room.is_visited():
                self._rob_room(room_id, state)

            if with_player and not visible and state.is_room_lit():
                if state.rng.random() < APPEAR_CHANCE:
                    thief.remove_flag(ObjectFlag.INVISIBLE)
                    thief.properties["LDESC"] = PRESENT_LDESC
                    actor.mood.has_appeared = True
                    state.tell(APPEARS)
                    return True

        if not visible:
            _recover_stiletto(thief, state)
            self._move_on(thief, state)

        if room_id != RoomID.TREASURE_ROOM and self._drop_junk(thief, room_id, state):
            shown = True

        return shown

    def _deposit_booty(self, state: "GameState") -> None:
        for obj in state.objects_in(ObjectID.THIEF):
            if obj.value > 0 and obj.id != ObjectID.STILETTO:
                obj.remove_flag(ObjectFlag.INVISIBLE)
                state.move_object(obj.id, RoomID.TREASURE_ROOM)
                logger.debug(f"Thief stashed {obj.id}")

    def _rob_room(self, room_id: str, state: "GameState") -> bool:
        stolen = False
        for obj in state.objects_in(room_id):
            if obj.value <= 0 or not obj.is_visible() or obj.has_flag(ObjectFlag.SACREDBIT):
                continue
            if state.rng.random() < ROB_CHANCE:
                _pocket(obj, state)
                stolen = True
                logger.debug(f"Thief stole {obj.id} from {room_id}")
        return stolen

    def _steal_from_player(self, state: "GameState") -> bool:
        treasures = [obj for obj in state.inventory_objects() if obj.value > 0]
        if not treasures:
            return False
        target = treasures[int(state.rng.random() * len(treasures))]
        _pocket(target, state)
        logger.debug(f"Thief took {target.id} from the player")
        return True

    def _drop_junk(self, thief: GameObject, room_id: str, state: "GameState") -> bool:
        dropped = False
        for obj in state.objects_in(thief.id):
            if obj.id == ObjectID.STILETTO or obj.value > 0:
                continue
            if state.rng.random() < DROP_JUNK_CHANCE:
                obj.remove_flag(ObjectFlag.INVISIBLE)
                state.move_object(obj.id, room_id)
                dropped = True

        if dropped and room_id == state.current_room:
            state.tell(DROPS_JUNK)
            return True
        return False

    def _move_on(self, thief: GameObject, state: "GameState") -> None:
        """Walk to the next land room in map order, skipping the house."""
        room_ids = list(state.rooms)
        if thief.location not in room_ids:
            return

        start = room_ids.index(thief.location)
        for step in range(1, len(room_ids)):
            room = state.rooms[room_ids[(start + step) % len(room_ids)]]
            if room.is_sacred() or not room.flags & RoomFlag.RLANDBIT:
                continue
            state.move_object(thief.id, room.id)
            thief.remove_flag(ObjectFlag.FIGHTBIT)
            thief.add_flag(ObjectFlag.INVISIBLE)
            return

    def on_receive_item(self, actor: Actor, state: "GameState", item: GameObject) -> bool:
        if actor.state != ActorState.DEAD:
            state.tell('The thief is not interested in your possession. "Doing unto others before..."')
        return False

    def on_state_changed(
        self, actor: Actor, old: ActorState, new: ActorState, state: "GameState"
    ) -> None:
        thief = get_actor_object(actor, state)
        if thief is None:
            return

        if new == ActorState.DEAD:
            visible = is_with_player(actor, state) and thief.is_visible()
            _drop_stiletto(thief, state)
            for obj in state.objects_in(thief.id):
                obj.remove_flag(ObjectFlag.INVISIBLE)
                state.move_object(obj.id, thief.location)
            state.score_action("DEFEAT_THIEF", DEFEAT_POINTS)
            if visible:
                state.tell(VANISHES)
                state.tell("The robber's booty remains.")
            state.move_object(thief.id, LIMBO)
            logger.debug("Thief defeated")

        elif new == ActorState.UNCONSCIOUS:
            _drop_stiletto(thief, state)
            thief.properties["LDESC"] = UNCONSCIOUS_LDESC

        elif new == ActorState.NORMAL and old == ActorState.UNCONSCIOUS:
            tell_if_visible(actor, state, REVIVES)
            thief.properties["LDESC"] = PRESENT_LDESC
            _recover_stiletto(thief, state)
            thief.add_flag(ObjectFlag.INVISIBLE)
            actor.mood.has_appeared = False

    def on_talk(self, actor: Actor, state: "GameState") -> str | None:
        return "The thief says nothing, as you have not been formally introduced."
