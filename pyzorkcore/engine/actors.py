"""NPC actor behavior framework for PyZorkCore.

Every non-player character is an ``Actor`` record: an id, a kind tag, a
state-machine state and a kind-specific mood struct. Behavior lives in one
``ActorRules`` object per kind, so the set of kinds is closed and every
actor answers the same capability calls.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Protocol

from pyzorkcore.engine.models import GameObject, ObjectFlag

if TYPE_CHECKING:
    from pyzorkcore.engine.events import EventScheduler
    from pyzorkcore.engine.state import GameState

logger = logging.getLogger(__name__)


class ActorState(Enum):
    """State-machine states of an actor. DEAD is terminal."""

    NORMAL = auto()
    FIGHTING = auto()
    UNCONSCIOUS = auto()
    DEAD = auto()
    SLEEPING = auto()
    FLEEING = auto()


class ActorKind(Enum):
    """Kinds of actor, each with its own rules and mood struct."""

    GENERIC = auto()
    CYCLOPS = auto()
    TROLL = auto()
    THIEF = auto()


class InvalidTransition(ValueError):
    """Raised for a transition the state machine does not allow."""


class ActorRules(Protocol):
    """Capability interface every actor kind implements."""

    def new_mood(self) -> Any: ...

    def should_act(self, actor: "Actor", state: "GameState") -> bool: ...

    def execute_turn(self, actor: "Actor", state: "GameState") -> bool: ...

    def on_attacked(
        self, actor: "Actor", state: "GameState", weapon: GameObject | None = None
    ) -> None: ...

    def on_receive_item(self, actor: "Actor", state: "GameState", item: GameObject) -> bool: ...

    def on_state_changed(
        self, actor: "Actor", old: ActorState, new: ActorState, state: "GameState"
    ) -> None: ...

    def on_talk(self, actor: "Actor", state: "GameState") -> str | None: ...


@dataclass
class Actor:
    """One NPC: kind tag, state and kind-specific counters."""

    actor_id: str
    kind: ActorKind = ActorKind.GENERIC
    state: ActorState = ActorState.NORMAL
    mood: Any = None

    def __post_init__(self) -> None:
        if self.mood is None:
            self.mood = rules_for(self.kind).new_mood()

    @property
    def rules(self) -> ActorRules:
        return rules_for(self.kind)

    @property
    def is_dead(self) -> bool:
        return self.state == ActorState.DEAD

    def should_act(self, state: "GameState") -> bool:
        return self.rules.should_act(self, state)

    def execute_turn(self, state: "GameState") -> bool:
        """Run one turn of behavior. Returns True on a visible change."""
        return self.rules.execute_turn(self, state)

    def on_attacked(self, state: "GameState", weapon: GameObject | None = None) -> None:
        self.rules.on_attacked(self, state, weapon)

    def on_receive_item(self, state: "GameState", item: GameObject) -> bool:
        """Offer an item. Returns True if the actor accepted it."""
        return self.rules.on_receive_item(self, state, item)

    def on_talk(self, state: "GameState") -> str | None:
        """What the actor says back, or None for the default reply."""
        return self.rules.on_talk(self, state)

    def transition_state(self, new_state: ActorState, state: "GameState") -> None:
        """Move to a new state.

        Keeps the actor object's FIGHTBIT in step with the state, then runs
        the kind's state-change hook. Leaving DEAD is a caller error.
        """
        old_state = self.state
        if old_state == new_state:
            return
        if old_state == ActorState.DEAD:
            raise InvalidTransition(f"{self.actor_id} is dead and cannot become {new_state.name}")

        self.state = new_state
        logger.debug(f"{self.actor_id}: {old_state.name} -> {new_state.name}")

        obj = state.get_object(self.actor_id)
        if obj is not None:
            if new_state == ActorState.FIGHTING:
                obj.add_flag(ObjectFlag.FIGHTBIT)
            elif new_state in (ActorState.UNCONSCIOUS, ActorState.DEAD, ActorState.SLEEPING):
                obj.remove_flag(ObjectFlag.FIGHTBIT)

        self.rules.on_state_changed(self, old_state, new_state, state)


class BaseRules:
    """Default behavior shared by all kinds."""

    def new_mood(self) -> Any:
        return None

    def should_act(self, actor: Actor, state: "GameState") -> bool:
        # Actors don't act when dead
        return actor.state != ActorState.DEAD

    def execute_turn(self, actor: Actor, state: "GameState") -> bool:
        return False

    def on_attacked(
        self, actor: Actor, state: "GameState", weapon: GameObject | None = None
    ) -> None:
        # Become hostile
        if actor.state == ActorState.NORMAL:
            actor.transition_state(ActorState.FIGHTING, state)

    def on_receive_item(self, actor: Actor, state: "GameState", item: GameObject) -> bool:
        return False

    def on_state_changed(
        self, actor: Actor, old: ActorState, new: ActorState, state: "GameState"
    ) -> None:
        pass

    def on_talk(self, actor: Actor, state: "GameState") -> str | None:
        return None


# ============ Helpers for kind rules ============

def get_actor_object(actor: Actor, state: "GameState") -> GameObject | None:
    """The world object backing an actor, or None once it is gone."""
    return state.get_object(actor.actor_id)


def is_with_player(actor: Actor, state: "GameState") -> bool:
    obj = state.get_object(actor.actor_id)
    return obj is not None and obj.location == state.current_room


def tell_if_visible(actor: Actor, state: "GameState", message: str) -> bool:
    """Show a message only if the player can see the actor."""
    obj = state.get_object(actor.actor_id)
    if obj is not None and obj.location == state.current_room and obj.is_visible():
        state.tell(message)
        return True
    return False


def actor_daemon_id(actor_id: str) -> str:
    """Scheduler id of the daemon that drives an actor."""
    return f"actor:{actor_id}"


_RULES: dict[ActorKind, ActorRules] = {}


def rules_for(kind: ActorKind) -> ActorRules:
    """Rules object for an actor kind."""
    if not _RULES:
        from pyzorkcore.engine.cyclops import CyclopsRules
        from pyzorkcore.engine.thief import ThiefRules
        from pyzorkcore.engine.troll import TrollRules

        _RULES.update({
            ActorKind.GENERIC: BaseRules(),
            ActorKind.CYCLOPS: CyclopsRules(),
            ActorKind.TROLL: TrollRules(),
            ActorKind.THIEF: ThiefRules(),
        })
    return _RULES[kind]


class ActorManager:
    """Holds every active actor and routes events to them."""

    def __init__(self) -> None:
        self._actors: dict[str, Actor] = {}

    def register(self, actor: Actor) -> Actor:
        self._actors[actor.actor_id] = actor
        return actor

    def unregister(self, actor_id: str) -> None:
        self._actors.pop(actor_id, None)

    def get(self, actor_id: str) -> Actor | None:
        return self._actors.get(actor_id)

    def actor_ids(self) -> list[str]:
        return list(self._actors)

    def clear(self) -> None:
        self._actors.clear()

    def run_actor(self, actor_id: str, state: "GameState") -> bool:
        """One scheduled turn for one actor. A removed actor is a no-op."""
        actor = self.get(actor_id)
        if actor is None or not actor.should_act(state):
            return False
        return actor.execute_turn(state)

    def execute_turn(self, state: "GameState") -> bool:
        """Run every actor once, outside the scheduler."""
        changed = False
        for actor_id in self.actor_ids():
            try:
                if self.run_actor(actor_id, state):
                    changed = True
            except Exception as e:
                logger.error(f"Error executing actor {actor_id}: {e}")
        return changed

    def attach(self, scheduler: "EventScheduler", enabled: bool = True) -> None:
        """Register one daemon per actor so the scheduler drives them."""
        for actor_id in self.actor_ids():
            self.attach_actor(scheduler, actor_id, enabled)

    def attach_actor(
        self, scheduler: "EventScheduler", actor_id: str, enabled: bool = True
    ) -> None:
        scheduler.register_daemon(
            actor_daemon_id(actor_id),
            lambda state, actor_id=actor_id: self.run_actor(actor_id, state),
            enabled,
        )

    def handle_attack(
        self, actor_id: str, state: "GameState", weapon: GameObject | None = None
    ) -> bool:
        """Tell an actor it was attacked. Returns False if no such actor."""
        actor = self.get(actor_id)
        if actor is None:
            return False
        actor.on_attacked(state, weapon)
        return True

    def handle_receive_item(self, actor_id: str, state: "GameState", item: GameObject) -> bool:
        actor = self.get(actor_id)
        if actor is None:
            return False
        return actor.on_receive_item(state, item)

    def transition(self, actor_id: str, new_state: ActorState, state: "GameState") -> None:
        actor = self.get(actor_id)
        if actor is not None:
            actor.transition_state(new_state, state)
