"""Verb handlers for PyZorkCore - command execution."""

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable

from pyzorkcore.engine.combat import CURE_EVENT, MAX_WOUNDS, player_attack, villain_for
from pyzorkcore.engine.daemons import (
    is_burned_out,
    light_source_for,
    start_light_timer,
    stop_light_timer,
)
from pyzorkcore.engine.models import PLAYER, DirectionEntity, GameObject, ObjectFlag, ObjectID
from pyzorkcore.engine.parser import ParsedCommand
from pyzorkcore.engine.world import describe_room, move_player

if TYPE_CHECKING:
    from pyzorkcore.engine.game import Game
    from pyzorkcore.engine.state import GameState


@dataclass
class VerbResult:
    """Result of executing a verb."""

    success: bool
    message: str = ""
    end_turn: bool = True  # Whether this action uses a turn
    quit_requested: bool = False
    restart_requested: bool = False


class VerbHandler:
    """Handles verb execution for the game."""

    def __init__(self, game: "Game") -> None:
        """Initialize verb handler with game reference."""
        self.game = game

        # Map verbs to handler methods
        self.handlers: dict[str, Callable[[ParsedCommand], VerbResult]] = {
            # Movement
            "GO": self.do_walk,
            "WALK": self.do_walk,
            "RUN": self.do_walk,
            "PROCEED": self.do_walk,
            "STEP": self.do_walk,
            "CLIMB": self.do_walk,
            "ENTER": self.do_walk,

            # Looking
            "LOOK": self.do_look,
            "EXAMINE": self.do_examine,
            "DESCRIBE": self.do_examine,

            # Object manipulation
            "TAKE": self.do_take,
            "GET": self.do_take,
            "GRAB": self.do_take,
            "CARRY": self.do_take,
            "HOLD": self.do_take,
            "DROP": self.do_drop,
            "GIVE": self.do_give,
            "OFFER": self.do_give,
            "FEED": self.do_give,

            # Inventory
            "INVENTORY": self.do_inventory,

            # Combat
            "ATTACK": self.do_attack,
            "KILL": self.do_attack,
            "FIGHT": self.do_attack,
            "HIT": self.do_attack,
            "SLAY": self.do_attack,
            "MURDER": self.do_attack,

            # Light
            "LIGHT": self.do_light,
            "EXTINGUISH": self.do_extinguish,
            "DOUSE": self.do_extinguish,
            "TURN": self.do_turn,

            # Communication
            "HELLO": self.do_hello,
            "TELL": self.do_hello,
            "SAY": self.do_say,

            # Meta commands
            "WAIT": self.do_wait,
            "DIAGNOSE": self.do_diagnose,
            "SCORE": self.do_score,
            "QUIT": self.do_quit,
            "RESTART": self.do_restart,
            "VERSION": self.do_version,
        }

    @property
    def state(self) -> "GameState":
        return self.game.state

    def execute(self, command: ParsedCommand) -> VerbResult:
        """Execute a parsed command."""
        handler = self.handlers.get(command.verb)
        if handler:
            return handler(command)
        return VerbResult(
            success=False,
            message=f"I don't know how to {command.verb.lower()}.",
            end_turn=False,
        )

    # ============ Movement ============

    def do_walk(self, cmd: ParsedCommand) -> VerbResult:
        """Handle movement commands."""
        if not isinstance(cmd.direct_object, DirectionEntity):
            return VerbResult(
                success=False,
                message="Which direction do you want to go?",
                end_turn=False,
            )

        success, message = move_player(self.state, cmd.direct_object.name)
        return VerbResult(success=success, message=message)

    # ============ Looking ============

    def do_look(self, cmd: ParsedCommand) -> VerbResult:
        """Handle LOOK and LOOK AT."""
        if cmd.indirect_object is not None and cmd.preposition in ("AT", "ON", "IN"):
            return self._examine(cmd.indirect_object)
        if cmd.direct_object is not None and not isinstance(cmd.direct_object, DirectionEntity):
            return self._examine(cmd.direct_object)
        return VerbResult(success=True, message=describe_room(self.state), end_turn=False)

    def do_examine(self, cmd: ParsedCommand) -> VerbResult:
        if cmd.direct_object is None:
            return VerbResult(
                success=False,
                message="What do you want to examine?",
                end_turn=False,
            )
        return self._examine(cmd.direct_object)

    def _examine(self, obj: GameObject) -> VerbResult:
        text = obj.properties.get("LDESC") if obj.is_actor() else None
        text = text or obj.description
        if obj.is_light_source():
            lit = "on" if obj.is_on() else "off"
            text = f"{text} It is {lit}." if text else f"The {obj.display_name} is {lit}."
        if not text:
            text = f"There's nothing special about the {obj.display_name}."
        return VerbResult(success=True, message=text, end_turn=False)

    # ============ Object Manipulation ============

    def do_take(self, cmd: ParsedCommand) -> VerbResult:
        """Handle TAKE command."""
        if cmd.is_all_objects:
            return self._take_all()

        obj = cmd.direct_object
        if obj is None:
            return VerbResult(
                success=False,
                message="What do you want to take?",
                end_turn=False,
            )

        if obj.location == PLAYER:
            return VerbResult(
                success=False,
                message="You already have that!",
                end_turn=False,
            )

        if not obj.is_takeable():
            if obj.is_actor():
                message = f"The {obj.display_name} doesn't want to be taken."
            else:
                message = f"You can't take the {obj.display_name}."
            return VerbResult(success=False, message=message, end_turn=False)

        self.state.move_object(obj.id, PLAYER)
        obj.add_flag(ObjectFlag.TOUCHBIT)
        return VerbResult(success=True, message="Taken.")

    def _take_all(self) -> VerbResult:
        """Take all visible takeable objects in room."""
        lines = []
        for obj in self.state.objects_in(self.state.current_room):
            if obj.is_takeable() and obj.is_visible():
                self.state.move_object(obj.id, PLAYER)
                obj.add_flag(ObjectFlag.TOUCHBIT)
                lines.append(f"{obj.display_name}: Taken.")

        if not lines:
            return VerbResult(
                success=False,
                message="There's nothing here to take.",
                end_turn=False,
            )
        return VerbResult(success=True, message="\n".join(lines))

    def do_drop(self, cmd: ParsedCommand) -> VerbResult:
        """Handle DROP command."""
        if cmd.is_all_objects:
            return self._drop_all()

        obj = cmd.direct_object
        if obj is None:
            return VerbResult(
                success=False,
                message="What do you want to drop?",
                end_turn=False,
            )

        if obj.location != PLAYER:
            return VerbResult(
                success=False,
                message="You're not carrying that.",
                end_turn=False,
            )

        self.state.move_object(obj.id, self.state.current_room)
        return VerbResult(success=True, message="Dropped.")

    def _drop_all(self) -> VerbResult:
        """Drop all carried objects."""
        lines = []
        for obj in self.state.inventory_objects():
            self.state.move_object(obj.id, self.state.current_room)
            lines.append(f"{obj.display_name}: Dropped.")

        if not lines:
            return VerbResult(
                success=False,
                message="You are empty-handed.",
                end_turn=False,
            )
        return VerbResult(success=True, message="\n".join(lines))

    def do_give(self, cmd: ParsedCommand) -> VerbResult:
        """Handle GIVE <item> TO <actor>."""
        item, target = cmd.direct_object, cmd.indirect_object
        if item is None or target is None:
            return VerbResult(
                success=False,
                message="Give what to whom?",
                end_turn=False,
            )

        if not self._is_held(item):
            return VerbResult(success=False, message="You don't have that.", end_turn=False)

        actor = self.game.actors.get(target.id)
        if actor is None or not target.is_actor():
            return VerbResult(
                success=False,
                message=f"You can't give a {item.display_name} to a {target.display_name}!",
                end_turn=False,
            )

        accepted = actor.on_receive_item(self.state, item)
        message = "" if self.state.output else f"The {target.display_name} refuses it politely."
        return VerbResult(success=accepted, message=message)

    def _is_held(self, obj: GameObject) -> bool:
        if obj.location == PLAYER:
            return True
        container = self.state.get_object(obj.location) if obj.location else None
        return container is not None and container.location == PLAYER

    # ============ Inventory ============

    def do_inventory(self, cmd: ParsedCommand) -> VerbResult:
        """Handle INVENTORY command."""
        inventory = self.state.inventory_objects()

        if not inventory:
            return VerbResult(
                success=True,
                message="You are empty-handed.",
                end_turn=False,
            )

        lines = ["You are carrying:"]
        for obj in inventory:
            lines.append(f"  A {obj.display_name}")
            if obj.is_container():
                for inner in self.state.objects_in(obj.id):
                    lines.append(f"  The {obj.display_name} contains:")
                    lines.append(f"    A quantity of {inner.display_name}")
        return VerbResult(success=True, message="\n".join(lines), end_turn=False)

    # ============ Combat ============

    def do_attack(self, cmd: ParsedCommand) -> VerbResult:
        """Handle ATTACK/KILL command."""
        target = cmd.direct_object
        if target is None:
            return VerbResult(
                success=False,
                message="What do you want to attack?",
                end_turn=False,
            )

        actor = self.game.actors.get(target.id)
        if actor is None or not target.is_actor():
            return VerbResult(
                success=False,
                message=f"I've known strange people, but fighting a {target.display_name}?",
                end_turn=False,
            )

        weapon = cmd.indirect_object
        if weapon is None:
            weapon = next(
                (o for o in self.state.inventory_objects() if o.has_flag(ObjectFlag.WEAPONBIT)),
                None,
            )
        elif weapon.location != PLAYER:
            return VerbResult(success=False, message="You don't have that.", end_turn=False)

        if weapon is None:
            return VerbResult(
                success=False,
                message=(
                    f"Trying to attack the {target.display_name} with your bare "
                    "hands is suicidal."
                ),
                end_turn=False,
            )

        if villain_for(actor.actor_id) is not None:
            player_attack(actor, weapon, self.state)
            return VerbResult(success=True)

        self.game.actors.handle_attack(target.id, self.state, weapon)
        return VerbResult(success=True)

    # ============ Light ============

    def do_light(self, cmd: ParsedCommand) -> VerbResult:
        """Handle LIGHT command."""
        obj = cmd.direct_object
        if obj is None:
            return VerbResult(
                success=False,
                message="What do you want to light?",
                end_turn=False,
            )

        if not obj.is_light_source():
            return VerbResult(
                success=False,
                message=f"You can't light the {obj.display_name}.",
                end_turn=False,
            )

        if obj.is_on():
            return VerbResult(
                success=False,
                message=f"The {obj.display_name} is already on.",
                end_turn=False,
            )

        source = light_source_for(obj.id)
        if source is not None and is_burned_out(self.state, source):
            return VerbResult(
                success=False,
                message=f"A burned-out {obj.name.lower()} won't light.",
                end_turn=False,
            )

        obj.add_flag(ObjectFlag.ONBIT)
        if source is not None and self.game.config.clock.light_timers:
            start_light_timer(self.state, source)

        message = f"The {obj.display_name} is now on."
        if obj.id == ObjectID.CANDLES:
            message = "The candles are lit."
        return VerbResult(success=True, message=message)

    def do_extinguish(self, cmd: ParsedCommand) -> VerbResult:
        """Handle EXTINGUISH command."""
        obj = cmd.direct_object
        if obj is None:
            return VerbResult(
                success=False,
                message="What do you want to turn off?",
                end_turn=False,
            )

        if not obj.is_light_source():
            return VerbResult(
                success=False,
                message=f"You can't turn off the {obj.display_name}.",
                end_turn=False,
            )

        if not obj.is_on():
            return VerbResult(
                success=False,
                message=f"The {obj.display_name} is already off.",
                end_turn=False,
            )

        obj.remove_flag(ObjectFlag.ONBIT)
        source = light_source_for(obj.id)
        if source is not None:
            stop_light_timer(self.state, source)
        return VerbResult(success=True, message=f"The {obj.display_name} is now off.")

    def do_turn(self, cmd: ParsedCommand) -> VerbResult:
        """Handle TURN ON and TURN OFF."""
        # "turn on lamp" leaves the lamp in the indirect slot
        target = cmd.direct_object or cmd.indirect_object
        if cmd.preposition == "ON":
            return self.do_light(replace(cmd, direct_object=target))
        if cmd.preposition == "OFF":
            return self.do_extinguish(replace(cmd, direct_object=target))
        return VerbResult(success=False, message="Turn it on or off?", end_turn=False)

    # ============ Communication ============

    def do_hello(self, cmd: ParsedCommand) -> VerbResult:
        target = cmd.direct_object
        if target is None:
            return VerbResult(success=True, message="Hello.", end_turn=False)

        actor = self.game.actors.get(target.id)
        reply = actor.on_talk(self.state) if actor else None
        if reply is None:
            reply = f"It's not clear that a {target.display_name} can talk."
        return VerbResult(success=True, message=reply)

    def do_say(self, cmd: ParsedCommand) -> VerbResult:
        text = (cmd.raw_input or "").split(None, 1)
        if len(text) < 2:
            return VerbResult(success=False, message="Say what?", end_turn=False)
        return VerbResult(success=True, message=f'"{text[1]}"')

    # ============ Meta Commands ============

    def do_wait(self, cmd: ParsedCommand) -> VerbResult:
        """Handle WAIT command."""
        return VerbResult(success=True, message="Time passes...")

    def do_diagnose(self, cmd: ParsedCommand) -> VerbResult:
        wounds = self.state.wounds
        if wounds == 0:
            return VerbResult(success=True, message="You are in perfect health.", end_turn=False)

        kind = "a light wound" if wounds == 1 else f"{wounds} wounds"
        lines = [f"You have {kind}."]
        if self.game.events.is_enabled(CURE_EVENT):
            ticks = self.game.events.remaining_ticks(CURE_EVENT)
            lines.append(f"The next will be cured after {ticks} moves.")
        if wounds == MAX_WOUNDS:
            lines.append("You can be killed by one more light wound.")
        return VerbResult(success=True, message=" ".join(lines), end_turn=False)

    def do_score(self, cmd: ParsedCommand) -> VerbResult:
        """Handle SCORE command."""
        state = self.state
        return VerbResult(
            success=True,
            message=(
                f"Your score is {state.score} (out of {state.max_score}), "
                f"in {state.moves} move{'s' if state.moves != 1 else ''}."
            ),
            end_turn=False,
        )

    def do_quit(self, cmd: ParsedCommand) -> VerbResult:
        return VerbResult(
            success=True,
            message="Goodbye!",
            end_turn=False,
            quit_requested=True,
        )

    def do_restart(self, cmd: ParsedCommand) -> VerbResult:
        return VerbResult(
            success=True,
            message="Restarting.",
            end_turn=False,
            restart_requested=True,
        )

    def do_version(self, cmd: ParsedCommand) -> VerbResult:
        """Handle VERSION command."""
        from pyzorkcore import __version__

        return VerbResult(
            success=True,
            message=f"PyZorkCore version {__version__}",
            end_turn=False,
        )
