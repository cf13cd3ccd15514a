"""Troll behavior.

The troll blocks the passages out of his room and fights with an axe. He
tries to pick the axe back up whenever it lies on the floor beside him.
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
from pyzorkcore.engine.models import LIMBO, GameFlag, GameObject, ObjectFlag, ObjectID

if TYPE_CHECKING:
    from pyzorkcore.engine.state import GameState

logger = logging.getLogger(__name__)

# Chance the troll picks his axe back up on a turn
RECOVER_CHANCE = 0.75
RECOVER_CHANCE_FIGHTING = 0.90

# Chance a gifted blade kills him
FATAL_GIFT_CHANCE = 0.20

DEFEAT_POINTS = 10

ARMED_LDESC = "A nasty-looking troll, brandishing a bloody axe, blocks all passages out of the room."
DISARMED_LDESC = "A pathetically babbling troll is here."
UNCONSCIOUS_LDESC = "An unconscious troll is sprawled on the floor. All passages out of the room are open."
PLAIN_LDESC = "A troll is here."


@dataclass
class TrollMood:
    disarmed: bool = False


def make_troll(actor_id: str = ObjectID.TROLL) -> Actor:
    """Create a troll actor, armed."""
    return Actor(actor_id, ActorKind.TROLL, mood=TrollMood())


def _take_axe(troll: GameObject, axe: GameObject, state: "GameState") -> None:
    axe.add_flag(ObjectFlag.NDESCBIT)
    axe.remove_flag(ObjectFlag.WEAPONBIT)
    state.move_object(axe.id, troll.id)
    troll.properties["LDESC"] = ARMED_LDESC


def _drop_axe(troll: GameObject, state: "GameState") -> None:
    axe = state.get_object(ObjectID.AXE)
    if axe is not None and axe.location == troll.id:
        state.move_object(axe.id, troll.location)
        axe.remove_flag(ObjectFlag.NDESCBIT)
        axe.add_flag(ObjectFlag.WEAPONBIT)


class TrollRules(BaseRules):
    """Rules for the troll."""

    def new_mood(self) -> TrollMood:
        return TrollMood()

    def execute_turn(self, actor: Actor, state: "GameState") -> bool:
        if actor.state in (ActorState.NORMAL, ActorState.FIGHTING):
            return self._try_recover_axe(actor, state)
        return False

    def _try_recover_axe(self, actor: Actor, state: "GameState") -> bool:
        troll = get_actor_object(actor, state)
        axe = state.get_object(ObjectID.AXE)
        if troll is None or axe is None:
            return False

        if axe.location == troll.id or axe.location != troll.location:
            return False

        chance = RECOVER_CHANCE_FIGHTING if actor.state == ActorState.FIGHTING else RECOVER_CHANCE
        if state.rng.random() < chance:
            _take_axe(troll, axe, state)
            actor.mood.disarmed = False
            message = (
                "The troll, angered and humiliated, recovers his weapon. "
                "He appears to have an axe to grind with you."
            )
        else:
            troll.properties["LDESC"] = DISARMED_LDESC
            actor.mood.disarmed = True
            message = (
                "The troll, disarmed, cowers in terror, pleading for his life "
                "in the guttural tongue of the trolls."
            )

        if is_with_player(actor, state):
            state.tell(message)
            return True
        return False

    def on_attacked(
        self, actor: Actor, state: "GameState", weapon: GameObject | None = None
    ) -> None:
        if get_actor_object(actor, state) is None or actor.state == ActorState.DEAD:
            return
        if actor.state != ActorState.FIGHTING:
            actor.transition_state(ActorState.FIGHTING, state)

    def on_receive_item(self, actor: Actor, state: "GameState", item: GameObject) -> bool:
        troll = get_actor_object(actor, state)
        if troll is None or actor.state == ActorState.DEAD:
            return False

        if item.id == ObjectID.AXE:
            if not state.is_in_inventory(ObjectID.AXE):
                state.tell("You would have to get the axe first, and that seems unlikely.")
                return False
            state.tell("The troll scratches his head in confusion, then takes the axe.")
            troll.add_flag(ObjectFlag.FIGHTBIT)
            state.move_object(ObjectID.AXE, troll.id)
            actor.mood.disarmed = False
            return True

        if item.id in (ObjectID.KNIFE, ObjectID.SWORD):
            if state.rng.random() < FATAL_GIFT_CHANCE:
                state.tell(
                    "The troll, who is not overly proud, graciously accepts the gift "
                    "and eats it hungrily. Poor troll, he dies from an internal "
                    "hemorrhage and his carcass disappears in a sinister black fog."
                )
                state.move_object(item.id, LIMBO)
                actor.transition_state(ActorState.DEAD, state)
                return True
            state.move_object(item.id, state.current_room)
            state.tell(
                "The troll, who is not overly proud, graciously accepts the gift "
                "and, being for the moment sated, throws it back. Fortunately, the "
                f"troll has poor control, and the {item.name.lower()} falls to the "
                "floor. He does not look pleased."
            )
            troll.add_flag(ObjectFlag.FIGHTBIT)
            return True

        state.tell(
            "The troll, who is not overly proud, graciously accepts the gift "
            "and not having the most discriminating tastes, gleefully eats it."
        )
        state.move_object(item.id, LIMBO)
        return True

    def on_state_changed(
        self, actor: Actor, old: ActorState, new: ActorState, state: "GameState"
    ) -> None:
        troll = get_actor_object(actor, state)
        if troll is None:
            return

        if new == ActorState.DEAD:
            visible = is_with_player(actor, state)
            _drop_axe(troll, state)
            state.set_flag(GameFlag.TROLL_FLAG)
            state.move_object(troll.id, LIMBO)
            state.score_action("DEFEAT_TROLL", DEFEAT_POINTS)
            if visible:
                state.tell("The troll's body disappears in a cloud of greasy black smoke.")
            logger.debug("Troll defeated")

        elif new == ActorState.UNCONSCIOUS:
            _drop_axe(troll, state)
            troll.properties["LDESC"] = UNCONSCIOUS_LDESC
            state.set_flag(GameFlag.TROLL_FLAG)

        elif new == ActorState.FIGHTING and old == ActorState.UNCONSCIOUS:
            tell_if_visible(actor, state, "The troll stirs, quickly resuming a fighting stance.")
            axe = state.get_object(ObjectID.AXE)
            if axe is not None and axe.location == troll.location:
                _take_axe(troll, axe, state)
            elif axe is not None and axe.location == troll.id:
                troll.properties["LDESC"] = ARMED_LDESC
            else:
                troll.properties["LDESC"] = PLAIN_LDESC
            actor.mood.disarmed = axe is None or axe.location != troll.id
            state.set_flag(GameFlag.TROLL_FLAG, False)

    def on_talk(self, actor: Actor, state: "GameState") -> str | None:
        return "The troll isn't much of a conversationalist."
