"""Villain combat and wound healing.

A villain fighting in the player's room swings at the player once per
turn while he holds his weapon. Blows leave wounds, which heal one at a
time on the cure interrupt; too many and the player dies. A villain
knocked out with the player beside him comes round after a few turns.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from pyzorkcore.engine.actors import Actor, ActorManager, ActorState
from pyzorkcore.engine.events import EventHandler
from pyzorkcore.engine.models import GameFlag, GameObject, ObjectID

if TYPE_CHECKING:
    from pyzorkcore.engine.state import GameState

logger = logging.getLogger(__name__)

COMBAT_EVENT = "I-FIGHT"
CURE_EVENT = "I-CURE"

# Turns between healed wounds
CURE_WAIT = 30

# Wounds the player can carry; one more is fatal
MAX_WOUNDS = 4

# Chance a blow from the player knocks a villain out
KNOCKOUT_CHANCE = 0.4

# Waking odds (percent) gained per turn a villain lies unconscious
WAKE_STEP = 25

STILL_RECOVERING = "You are still recovering from that last blow, so your attack is ineffective."


class Blow(Enum):
    """Outcome of a villain's swing at the player."""

    MISSED = auto()
    LIGHT_WOUND = auto()
    SERIOUS_WOUND = auto()
    STAGGER = auto()


@dataclass(frozen=True)
class Villain:
    """A fighting actor, its weapon and what its blows look like."""

    actor_id: str
    weapon: str
    wake_state: ActorState
    missed: tuple[str, ...]
    light_wound: tuple[str, ...]
    serious_wound: tuple[str, ...]
    stagger: str
    killed: str


TROLL = Villain(
    actor_id=ObjectID.TROLL,
    weapon=ObjectID.AXE,
    wake_state=ActorState.FIGHTING,
    missed=(
        "The troll swings his axe, but misses.",
        "The troll's axe whistles past your ear.",
    ),
    light_wound=(
        "The troll's axe grazes you.",
        "The troll nicks you with his axe.",
    ),
    serious_wound=(
        "The troll's axe strikes you with a mighty blow!",
        "The troll wounds you seriously with his axe!",
    ),
    stagger="The troll's blow staggers you!",
    killed="The troll's axe cleaves you in twain!",
)

THIEF = Villain(
    actor_id=ObjectID.THIEF,
    weapon=ObjectID.STILETTO,
    wake_state=ActorState.NORMAL,
    missed=(
        "The thief's stiletto misses you by an inch.",
        "The thief lunges at you but misses.",
    ),
    light_wound=(
        "The thief pricks you with his stiletto.",
        "The thief's blade scratches you.",
    ),
    serious_wound=(
        "The thief stabs you with his stiletto!",
        "The thief's blade finds its mark!",
    ),
    stagger="The thief's attack staggers you!",
    killed="The thief's stiletto finds your heart!",
)

VILLAINS = {villain.actor_id: villain for villain in (TROLL, THIEF)}


def villain_for(actor_id: str) -> Villain | None:
    return VILLAINS.get(actor_id)


def roll_blow(value: float) -> Blow:
    """Map a random draw in [0, 1) to a blow."""
    if value < 0.5:
        return Blow.MISSED
    if value < 0.8:
        return Blow.LIGHT_WOUND
    if value < 0.95:
        return Blow.SERIOUS_WOUND
    return Blow.STAGGER


def is_armed(villain: Villain, state: "GameState") -> bool:
    weapon = state.get_object(villain.weapon)
    return weapon is not None and weapon.location == villain.actor_id


def wound_player(state: "GameState", amount: int) -> bool:
    """Add wounds and start healing. Returns True if the player died."""
    state.wounds += amount
    if state.wounds > MAX_WOUNDS:
        state.set_flag(GameFlag.PLAYER_KILLED)
        state.set_flag(GameFlag.GAME_OVER)
        logger.info(f"Player killed after {state.moves} moves")
        return True
    if state.events is not None:
        state.events.queue_interrupt(CURE_EVENT, CURE_WAIT)
    return False


def villain_attack(villain: Villain, state: "GameState") -> Blow:
    """One swing at the player."""
    blow = roll_blow(state.rng.random())

    if blow == Blow.MISSED:
        state.tell(state.rng.choice(villain.missed))
    elif blow == Blow.STAGGER:
        state.tell(villain.stagger)
        state.set_flag(GameFlag.PLAYER_STAGGERED)
    else:
        serious = blow == Blow.SERIOUS_WOUND
        messages = villain.serious_wound if serious else villain.light_wound
        if wound_player(state, 2 if serious else 1):
            state.tell(villain.killed)
        else:
            state.tell(state.rng.choice(messages))

    logger.debug(f"{villain.actor_id} attacks: {blow.name}")
    return blow


def player_attack(actor: Actor, weapon: GameObject, state: "GameState") -> None:
    """The player swings at a villain."""
    obj = state.get_object(actor.actor_id)
    name = obj.name.lower() if obj is not None else actor.actor_id.lower()

    if actor.state == ActorState.UNCONSCIOUS:
        state.tell(f"The unconscious {name} cannot defend himself: He dies.")
        actor.transition_state(ActorState.DEAD, state)
        return

    actor.on_attacked(state, weapon)
    if state.has_flag(GameFlag.PLAYER_STAGGERED):
        state.set_flag(GameFlag.PLAYER_STAGGERED, False)
        state.tell(STILL_RECOVERING)
        return

    if state.rng.random() < KNOCKOUT_CHANCE:
        state.tell(f"The {name} is knocked out by a blow from your {weapon.name.lower()}!")
        actor.transition_state(ActorState.UNCONSCIOUS, state)
    else:
        state.tell(f"The {name} dodges your blow.")


def combat_handler(actors: ActorManager) -> EventHandler:
    """Build the daemon that runs villain attacks and recovery."""
    wake_odds: dict[str, int] = {}

    def handler(state: "GameState") -> bool:
        changed = False
        for villain in VILLAINS.values():
            actor = actors.get(villain.actor_id)
            obj = state.get_object(villain.actor_id)
            if actor is None or obj is None or actor.is_dead:
                continue

            if obj.location != state.current_room or not obj.is_visible():
                # Player walked away from the fight
                if actor.state == ActorState.FIGHTING:
                    actor.transition_state(ActorState.NORMAL, state)
                    state.set_flag(GameFlag.PLAYER_STAGGERED, False)
                continue

            if actor.state == ActorState.UNCONSCIOUS:
                odds = wake_odds.get(villain.actor_id, 0)
                if odds > 0 and state.rng.random() * 100 < odds:
                    wake_odds.pop(villain.actor_id)
                    actor.transition_state(villain.wake_state, state)
                    changed = True
                else:
                    wake_odds[villain.actor_id] = min(100, odds + WAKE_STEP)

            elif actor.state == ActorState.FIGHTING and is_armed(villain, state):
                if state.has_flag(GameFlag.GAME_OVER):
                    break
                villain_attack(villain, state)
                changed = True

        return changed

    return handler


def heal_wounds(state: "GameState") -> bool:
    """Cure one wound and queue the next cure while any remain."""
    if state.wounds > 0:
        state.wounds -= 1
        logger.debug(f"Healed a wound, {state.wounds} left")
    if state.wounds > 0 and state.events is not None:
        state.events.queue_interrupt(CURE_EVENT, CURE_WAIT)
    return False


def register_combat(actors: ActorManager, state: "GameState") -> None:
    """Register the combat daemon and the (idle) cure interrupt."""
    events = state.events
    if events is None:
        return
    events.register_daemon(COMBAT_EVENT, combat_handler(actors))
    events.register_interrupt(CURE_EVENT, heal_wounds, CURE_WAIT)
    events.disable(CURE_EVENT)
