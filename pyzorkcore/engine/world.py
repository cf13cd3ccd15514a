"""World management for PyZorkCore - navigation, room descriptions and the demo map."""

from pyzorkcore.engine.models import (
    PLAYER,
    GameFlag,
    GameObject,
    ObjectFlag,
    ObjectID,
    Room,
    RoomFlag,
    RoomID,
)
from pyzorkcore.engine.state import GameState

# Exits that only open once a global flag is set: (room, direction) -> (flag, refusal)
GUARDED_EXITS: dict[tuple[str, str], tuple[GameFlag, str]] = {
    (RoomID.TROLL_ROOM, "EAST"): (
        GameFlag.TROLL_FLAG,
        "The troll fends you off with a menacing gesture.",
    ),
    (RoomID.TROLL_ROOM, "WEST"): (
        GameFlag.TROLL_FLAG,
        "The troll fends you off with a menacing gesture.",
    ),
    (RoomID.CYCLOPS_ROOM, "UP"): (
        GameFlag.CYCLOPS_FLAG,
        "The cyclops doesn't look like he'll let you past.",
    ),
}

DARK_ROOM = "It is pitch black. You are likely to be eaten by a grue."


def can_move(state: GameState, room: Room, direction: str) -> tuple[bool, str | None, str | None]:
    """
    Check if movement is possible.

    Returns:
        (can_move, destination_room_id, error_message)
    """
    destination = room.exits.get(direction)
    if destination is None:
        return False, None, "You can't go that way."

    guard = GUARDED_EXITS.get((room.id, direction))
    if guard is not None:
        flag, message = guard
        guardian = _guardian_for(room.id)
        if not state.has_flag(flag) and guardian is not None and state.is_present(guardian):
            return False, None, message

    return True, destination, None


def _guardian_for(room_id: str) -> str | None:
    if room_id == RoomID.TROLL_ROOM:
        return ObjectID.TROLL
    if room_id == RoomID.CYCLOPS_ROOM:
        return ObjectID.CYCLOPS
    return None


def move_player(state: GameState, direction: str) -> tuple[bool, str]:
    """
    Attempt to move the player in a direction.

    Returns:
        (success, message)
    """
    room = state.get_current_room()
    if not room:
        return False, "You are nowhere!"

    ok, destination_id, error = can_move(state, room, direction.upper())
    if not ok:
        return False, error or "You can't go that way."

    destination = state.get_room(destination_id)
    if not destination:
        return False, f"The path leads nowhere. (Missing room: {destination_id})"

    state.current_room = destination.id
    text = describe_room(state, destination, force_long=not destination.is_visited())
    destination.flags |= RoomFlag.TOUCHBIT
    return True, text


def describe_room(state: GameState, room: Room | None = None, force_long: bool = True) -> str:
    """Get the description of a room, with the objects visible in it."""
    room = room or state.get_current_room()
    if room is None:
        return "You are nowhere!"

    if not state.is_room_lit(room.id):
        return DARK_ROOM

    parts = [room.name]
    if force_long and room.description:
        parts.append(room.description)

    for obj in state.objects_in(room.id):
        if not obj.is_visible() or obj.has_flag(ObjectFlag.NDESCBIT):
            continue
        ldesc = obj.properties.get("LDESC")
        if ldesc:
            parts.append(ldesc)
        else:
            parts.append(f"There is a {obj.display_name} here.")

    return "\n".join(parts)


def create_demo_world(state: GameState | None = None) -> GameState:
    """Populate a state with a small map around the troll and cyclops rooms."""
    state = state or GameState()

    state.add_room(Room(
        id=RoomID.WEST_OF_HOUSE,
        name="West of House",
        description=(
            "You are standing in an open field west of a white house, "
            "with a boarded front door."
        ),
        flags=RoomFlag.RLANDBIT | RoomFlag.ONBIT | RoomFlag.SACREDBIT,
        exits={"EAST": RoomID.LIVING_ROOM},
    ))
    state.add_room(Room(
        id=RoomID.LIVING_ROOM,
        name="Living Room",
        description=(
            "You are in the living room. There is a doorway to the west and "
            "a dark staircase leading down."
        ),
        flags=RoomFlag.RLANDBIT | RoomFlag.ONBIT | RoomFlag.SACREDBIT,
        exits={"WEST": RoomID.WEST_OF_HOUSE, "DOWN": RoomID.CELLAR},
    ))
    state.add_room(Room(
        id=RoomID.CELLAR,
        name="Cellar",
        description=(
            "You are in a dark and damp cellar with a narrow passageway "
            "leading north. A stairway leads up."
        ),
        flags=RoomFlag.RLANDBIT,
        exits={"UP": RoomID.LIVING_ROOM, "NORTH": RoomID.TROLL_ROOM},
    ))
    state.add_room(Room(
        id=RoomID.TROLL_ROOM,
        name="The Troll Room",
        description=(
            "This is a small room with passages to the east and south and a "
            "forbidding hole leading west. Bloodstains and deep scratches "
            "(perhaps made by an axe) mar the walls."
        ),
        flags=RoomFlag.RLANDBIT,
        exits={
            "SOUTH": RoomID.CELLAR,
            "EAST": RoomID.CYCLOPS_ROOM,
            "WEST": RoomID.STRANGE_PASSAGE,
        },
    ))
    state.add_room(Room(
        id=RoomID.CYCLOPS_ROOM,
        name="Cyclops Room",
        description=(
            "This room has an exit on the west side, and a staircase "
            "leading up."
        ),
        flags=RoomFlag.RLANDBIT,
        exits={"WEST": RoomID.TROLL_ROOM, "UP": RoomID.STRANGE_PASSAGE},
    ))
    state.add_room(Room(
        id=RoomID.STRANGE_PASSAGE,
        name="Strange Passage",
        description="This is a long passage. To the east is a small room.",
        flags=RoomFlag.RLANDBIT,
        exits={
            "DOWN": RoomID.CYCLOPS_ROOM,
            "EAST": RoomID.TROLL_ROOM,
            "UP": RoomID.TREASURE_ROOM,
        },
    ))
    state.add_room(Room(
        id=RoomID.TREASURE_ROOM,
        name="Treasure Room",
        description=(
            "This is a large room, whose east wall is solid granite. A number "
            "of discarded bags, which crumble at your touch, are scattered "
            "about on the floor. There is an exit down a staircase."
        ),
        flags=RoomFlag.RLANDBIT,
        exits={"DOWN": RoomID.STRANGE_PASSAGE},
    ))

    for obj in _demo_objects():
        state.add_object(obj)

    state.current_room = RoomID.WEST_OF_HOUSE
    state.rooms[RoomID.WEST_OF_HOUSE].flags |= RoomFlag.TOUCHBIT
    return state


def _demo_objects() -> list[GameObject]:
    return [
        GameObject(
            id=ObjectID.LAMP,
            name="lamp",
            synonyms=["lantern"],
            adjectives=["brass"],
            description="A battery-powered brass lantern.",
            flags=ObjectFlag.TAKEBIT | ObjectFlag.LIGHTBIT,
            location=RoomID.LIVING_ROOM,
        ),
        GameObject(
            id=ObjectID.SWORD,
            name="sword",
            synonyms=["blade"],
            adjectives=["elvish"],
            description="An elvish sword of great antiquity.",
            flags=ObjectFlag.TAKEBIT | ObjectFlag.WEAPONBIT,
            location=RoomID.LIVING_ROOM,
        ),
        GameObject(
            id=ObjectID.KNIFE,
            name="knife",
            adjectives=["rusty"],
            flags=ObjectFlag.TAKEBIT | ObjectFlag.WEAPONBIT,
            location=RoomID.CELLAR,
        ),
        GameObject(
            id=ObjectID.LUNCH,
            name="lunch",
            synonyms=["sandwich", "peppers", "food"],
            adjectives=["hot"],
            description="A hot pepper sandwich.",
            flags=ObjectFlag.TAKEBIT | ObjectFlag.FOODBIT,
            location=PLAYER,
        ),
        GameObject(
            id=ObjectID.BOTTLE,
            name="bottle",
            adjectives=["glass"],
            flags=ObjectFlag.TAKEBIT | ObjectFlag.CONTBIT | ObjectFlag.TRANSBIT,
            location=PLAYER,
        ),
        GameObject(
            id=ObjectID.WATER,
            name="water",
            flags=ObjectFlag.DRINKBIT,
            location=ObjectID.BOTTLE,
        ),
        GameObject(
            id=ObjectID.GARLIC,
            name="garlic",
            synonyms=["clove"],
            flags=ObjectFlag.TAKEBIT | ObjectFlag.FOODBIT,
            location=RoomID.LIVING_ROOM,
        ),
        GameObject(
            id=ObjectID.CANDLES,
            name="candles",
            synonyms=["candle"],
            adjectives=["pair"],
            flags=ObjectFlag.TAKEBIT | ObjectFlag.LIGHTBIT,
            location=RoomID.WEST_OF_HOUSE,
        ),
        GameObject(
            id=ObjectID.TROLL,
            name="troll",
            synonyms=["monster"],
            adjectives=["nasty"],
            flags=ObjectFlag.ACTORBIT,
            location=RoomID.TROLL_ROOM,
            properties={
                "LDESC": "A nasty-looking troll, brandishing a bloody axe, "
                         "blocks all passages out of the room.",
            },
        ),
        GameObject(
            id=ObjectID.AXE,
            name="axe",
            synonyms=["hatchet"],
            adjectives=["bloody"],
            flags=ObjectFlag.NDESCBIT,
            location=ObjectID.TROLL,
        ),
        GameObject(
            id=ObjectID.CYCLOPS,
            name="cyclops",
            synonyms=["monster", "giant"],
            adjectives=["hungry"],
            flags=ObjectFlag.ACTORBIT,
            location=RoomID.CYCLOPS_ROOM,
            properties={"LDESC": "A hungry cyclops is standing at the foot of the stairs."},
        ),
        GameObject(
            id=ObjectID.THIEF,
            name="thief",
            synonyms=["robber", "burglar"],
            adjectives=["shady"],
            flags=ObjectFlag.ACTORBIT | ObjectFlag.INVISIBLE,
            location=RoomID.TREASURE_ROOM,
            properties={"LDESC": "A seedy-looking individual with a large bag is here."},
        ),
        GameObject(
            id=ObjectID.STILETTO,
            name="stiletto",
            adjectives=["vicious"],
            flags=ObjectFlag.TAKEBIT | ObjectFlag.NDESCBIT,
            location=ObjectID.THIEF,
        ),
        GameObject(
            id=ObjectID.EGG,
            name="egg",
            adjectives=["jeweled"],
            description="A jewel-encrusted egg, set with a delicate clasp.",
            flags=ObjectFlag.TAKEBIT,
            location=RoomID.STRANGE_PASSAGE,
            properties={"VALUE": 5},
        ),
    ]
