"""Game state management for PyZorkCore."""

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pyzorkcore.engine.models import (
    PLAYER,
    GameFlag,
    GameObject,
    ObjectFlag,
    Room,
    RoomFlag,
)

if TYPE_CHECKING:
    from pyzorkcore.engine.events import EventScheduler


@dataclass
class LightTimerState:
    """Progress of a light source through its depletion stages."""

    object_id: str
    stage_index: int = 0


@dataclass
class GameState:
    """Complete mutable world state for a session.

    The parser never sees this; it is what the scheduler, actor rules and
    the executor read and write.
    """

    current_room: str = ""
    rooms: dict[str, Room] = field(default_factory=dict)
    objects: dict[str, GameObject] = field(default_factory=dict)

    moves: int = 0
    score: int = 0
    max_score: int = 350
    flags: GameFlag = GameFlag.NONE

    # Wounds taken in combat, healed one at a time
    wounds: int = 0

    # One-time score awards already granted
    scored_actions: set[str] = field(default_factory=set)

    # Light source depletion progress, keyed by object id
    light_timers: dict[str, LightTimerState] = field(default_factory=dict)

    # Seedable randomness for actors and background messages
    rng: random.Random = field(default_factory=random.Random)

    # Messages produced this turn, drained by the game loop
    output: list[str] = field(default_factory=list)

    # Scheduler driving this state, set by the game at bootstrap
    events: "EventScheduler | None" = field(default=None, repr=False)

    # ============ Objects and rooms ============

    def add_room(self, room: Room) -> None:
        self.rooms[room.id] = room

    def add_object(self, obj: GameObject) -> None:
        self.objects[obj.id] = obj

    def get_room(self, room_id: str) -> Room | None:
        return self.rooms.get(room_id)

    def get_current_room(self) -> Room | None:
        return self.rooms.get(self.current_room)

    def get_object(self, object_id: str) -> GameObject | None:
        return self.objects.get(object_id)

    def move_object(self, object_id: str, location: str | None) -> None:
        """Move an object to a room, container, actor or out of play (None)."""
        obj = self.objects.get(object_id)
        if obj is not None:
            obj.location = location

    def objects_in(self, location: str) -> list[GameObject]:
        """Objects whose location is exactly ``location``, in definition order."""
        return [obj for obj in self.objects.values() if obj.location == location]

    def inventory_objects(self) -> list[GameObject]:
        return self.objects_in(PLAYER)

    def is_in_inventory(self, object_id: str) -> bool:
        obj = self.objects.get(object_id)
        return obj is not None and obj.location == PLAYER

    def is_present(self, object_id: str) -> bool:
        """Check if an object is held by the player or in the current room."""
        obj = self.objects.get(object_id)
        if obj is None:
            return False
        return obj.location in (PLAYER, self.current_room)

    def reachable_objects(self) -> list[GameObject]:
        """Objects the player can currently refer to.

        Inventory, the current room, the room's global scenery, and the
        contents of open containers among those. Invisible objects are
        never reachable.
        """
        found: list[GameObject] = []
        seen: set[str] = set()

        def add(obj: GameObject) -> None:
            if obj.id not in seen and obj.is_visible():
                seen.add(obj.id)
                found.append(obj)

        for obj in self.objects_in(self.current_room):
            add(obj)
        for obj in self.inventory_objects():
            add(obj)

        room = self.get_current_room()
        if room:
            for obj_id in room.global_objects:
                obj = self.objects.get(obj_id)
                if obj:
                    add(obj)

        for container in list(found):
            if container.is_container() and container.is_open():
                for obj in self.objects_in(container.id):
                    add(obj)

        return found

    def is_room_lit(self, room_id: str | None = None) -> bool:
        """Check if a room is lit naturally or by an active light source."""
        room = self.get_room(room_id or self.current_room)
        if room is None:
            return False
        if room.flags & RoomFlag.ONBIT:
            return True
        candidates = self.objects_in(room.id) + self.inventory_objects()
        return any(obj.is_light_source() and obj.is_on() for obj in candidates)

    # ============ Flags ============

    def has_flag(self, flag: GameFlag) -> bool:
        return bool(self.flags & flag)

    def set_flag(self, flag: GameFlag, value: bool = True) -> None:
        if value:
            self.flags |= flag
        else:
            self.flags &= ~flag

    # ============ Score and moves ============

    def add_score(self, points: int) -> None:
        """Add points to the score."""
        self.score += points

    def score_action(self, action: str, points: int) -> bool:
        """Award points for an action once per game. Returns True if awarded."""
        if action in self.scored_actions:
            return False
        self.scored_actions.add(action)
        self.add_score(points)
        return True

    def increment_moves(self) -> None:
        """Increment the move counter."""
        self.moves += 1

    # ============ Output ============

    def tell(self, message: str) -> None:
        """Queue a message for the player."""
        self.output.append(message)

    def drain_output(self) -> list[str]:
        """Return and clear the queued messages."""
        messages, self.output = self.output, []
        return messages

    def object_has_flag(self, object_id: str, flag: ObjectFlag) -> bool:
        obj = self.objects.get(object_id)
        return obj is not None and obj.has_flag(flag)
