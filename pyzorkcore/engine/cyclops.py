"""Cyclops behavior.

The cyclops guards the stairs with a wrath counter. The sign of the counter
is his mood (negative means thirsty after eating the hot peppers) and its
magnitude is how close he is to eating the player.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pyzorkcore.engine.actors import (
    Actor,
    ActorKind,
    ActorState,
    BaseRules,
    actor_daemon_id,
    get_actor_object,
    is_with_player,
    tell_if_visible,
)
from pyzorkcore.engine.models import LIMBO, GameFlag, GameObject, ObjectFlag, ObjectID

if TYPE_CHECKING:
    from pyzorkcore.engine.state import GameState

logger = logging.getLogger(__name__)

CYCLOPS_MAD_MESSAGES = (
    "The cyclops seems somewhat agitated.",
    "The cyclops appears to be getting more agitated.",
    "The cyclops is moving about the room, looking for something.",
    "The cyclops was looking for salt and pepper. No doubt they are "
    "condiments for his upcoming snack.",
    "The cyclops is moving toward you in an unfriendly manner.",
    "You have two choices: 1. Leave  2. Become dinner.",
)

CYCLOPS_EATS_PLAYER = (
    "The cyclops, tired of all of your games and trickery, grabs you firmly. "
    "As he licks his chops, he says \"Mmm. Just like Mom used to make 'em.\" "
    "It's nice to be appreciated."
)

CYCLOPS_LUNCH = (
    "The cyclops says \"Mmm Mmm. I love hot peppers! But oh, could I use a "
    "drink. Perhaps I could drink the blood of that thing.\" From the gleam "
    "in his eye, it could be surmised that you are \"that thing\"."
)

CYCLOPS_DRINKS = (
    "The cyclops takes the bottle, checks that it's open, and drinks the "
    "water. A moment later, he lets out a yawn that nearly blows you over, "
    "and then falls fast asleep (what did you put in that drink, anyway?)."
)

CYCLOPS_NOT_THIRSTY = "The cyclops apparently is not thirsty and refuses your generous offer."
CYCLOPS_GARLIC = "The cyclops may be hungry, but there is a limit."
CYCLOPS_REFUSES = "The cyclops is not so stupid as to eat THAT!"
CYCLOPS_SHRUGS = "The cyclops shrugs but otherwise ignores your pitiful attempt."
CYCLOPS_WAKES = "The cyclops yawns and stares at the thing that woke him up."
CYCLOPS_SLEEPING_LDESC = "The cyclops is sleeping blissfully at the foot of the stairs."
CYCLOPS_AWAKE_LDESC = "A hungry cyclops is standing at the foot of the stairs."

# Magnitude past which the cyclops loses patience
MAX_WRATH = 5

DEFEAT_POINTS = 10


@dataclass
class CyclopsMood:
    """Wrath counter. Negative while thirsty."""

    wrath: int = 0

    @property
    def thirsty(self) -> bool:
        return self.wrath < 0


def make_cyclops(actor_id: str = ObjectID.CYCLOPS) -> Actor:
    """Create a cyclops actor in its starting mood."""
    return Actor(actor_id, ActorKind.CYCLOPS, mood=CyclopsMood())


def _arm(actor: Actor, state: "GameState") -> None:
    if state.events is not None:
        state.events.enable(actor_daemon_id(actor.actor_id))


def _disarm(actor: Actor, state: "GameState") -> None:
    if state.events is not None:
        state.events.disable(actor_daemon_id(actor.actor_id))


class CyclopsRules(BaseRules):
    """Rules for the cyclops."""

    def new_mood(self) -> CyclopsMood:
        return CyclopsMood()

    def should_act(self, actor: Actor, state: "GameState") -> bool:
        if actor.state == ActorState.DEAD:
            return False
        return is_with_player(actor, state)

    def execute_turn(self, actor: Actor, state: "GameState") -> bool:
        if get_actor_object(actor, state) is None:
            return False
        if actor.state in (ActorState.DEAD, ActorState.SLEEPING):
            return False
        if not is_with_player(actor, state):
            return False

        mood: CyclopsMood = actor.mood
        if abs(mood.wrath) > MAX_WRATH:
            state.tell(CYCLOPS_EATS_PLAYER)
            state.set_flag(GameFlag.CYCLOPS_ATE_PLAYER)
            state.set_flag(GameFlag.GAME_OVER)
            _disarm(actor, state)
            logger.info("Player eaten by the cyclops")
            return True

        # Magnitude grows by one, sign kept
        mood.wrath = mood.wrath - 1 if mood.wrath < 0 else mood.wrath + 1
        state.tell(CYCLOPS_MAD_MESSAGES[abs(mood.wrath) - 1])
        return True

    def on_attacked(
        self, actor: Actor, state: "GameState", weapon: GameObject | None = None
    ) -> None:
        if get_actor_object(actor, state) is None or actor.state == ActorState.DEAD:
            return
        if actor.state == ActorState.SLEEPING:
            actor.transition_state(ActorState.NORMAL, state)
            return
        _arm(actor, state)
        state.tell(CYCLOPS_SHRUGS)

    def on_receive_item(self, actor: Actor, state: "GameState", item: GameObject) -> bool:
        if get_actor_object(actor, state) is None:
            return False

        mood: CyclopsMood = actor.mood

        if item.id == ObjectID.LUNCH:
            if mood.thirsty:
                return False
            state.move_object(ObjectID.LUNCH, LIMBO)
            state.tell(CYCLOPS_LUNCH)
            mood.wrath = min(-1, -mood.wrath)
            _arm(actor, state)
            return True

        water = state.get_object(ObjectID.WATER)
        gives_water = item.id == ObjectID.WATER or (
            item.id == ObjectID.BOTTLE
            and water is not None
            and water.location == ObjectID.BOTTLE
        )
        if gives_water:
            if not mood.thirsty:
                state.tell(CYCLOPS_NOT_THIRSTY)
                return False
            state.move_object(ObjectID.WATER, LIMBO)
            bottle = state.get_object(ObjectID.BOTTLE)
            if bottle is not None:
                state.move_object(ObjectID.BOTTLE, state.current_room)
                bottle.add_flag(ObjectFlag.OPENBIT)
            state.tell(CYCLOPS_DRINKS)
            actor.transition_state(ActorState.SLEEPING, state)
            return True

        if item.id == ObjectID.GARLIC:
            state.tell(CYCLOPS_GARLIC)
            return False

        state.tell(CYCLOPS_REFUSES)
        return False

    def on_state_changed(
        self, actor: Actor, old: ActorState, new: ActorState, state: "GameState"
    ) -> None:
        cyclops = get_actor_object(actor, state)
        if cyclops is None:
            return

        if new == ActorState.SLEEPING:
            cyclops.remove_flag(ObjectFlag.FIGHTBIT)
            cyclops.properties["LDESC"] = CYCLOPS_SLEEPING_LDESC
            state.set_flag(GameFlag.CYCLOPS_FLAG)
            state.score_action("DEFEAT_CYCLOPS", DEFEAT_POINTS)
        elif new == ActorState.NORMAL and old == ActorState.SLEEPING:
            tell_if_visible(actor, state, CYCLOPS_WAKES)
            cyclops.add_flag(ObjectFlag.FIGHTBIT)
            cyclops.properties["LDESC"] = CYCLOPS_AWAKE_LDESC
            state.set_flag(GameFlag.CYCLOPS_FLAG, False)
            actor.mood.wrath = abs(actor.mood.wrath)
            _arm(actor, state)

    def on_talk(self, actor: Actor, state: "GameState") -> str | None:
        if actor.state == ActorState.SLEEPING:
            return "No use talking to him. He's fast asleep."
        return "The cyclops prefers eating to making conversation."
