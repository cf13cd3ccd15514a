"""Core data models for PyZorkCore game entities."""

from dataclasses import dataclass, field
from enum import IntFlag


class ObjectFlag(IntFlag):
    """Object capability flags (from the ZIL object definitions).

    This is the only flag set an object carries. Markers that were once
    attached by name (invisible, touched, burned out) are members here.
    """

    NONE = 0
    TAKEBIT = 1  # Can be picked up
    CONTBIT = 2  # Is a container
    OPENBIT = 4  # Container is open
    LIGHTBIT = 8  # Provides light
    ONBIT = 16  # Light source is on
    WEAPONBIT = 32  # Usable as a weapon
    ACTORBIT = 64  # Is an actor/NPC
    DOORBIT = 128  # Is a door
    BURNBIT = 256  # Can burn
    FOODBIT = 512  # Can be eaten
    DRINKBIT = 1024  # Can be drunk
    NDESCBIT = 2048  # Not described in room listings
    INVISIBLE = 4096  # Not visible to the player
    TRANSBIT = 8192  # Transparent
    READBIT = 16384  # Can be read
    SURFACEBIT = 32768  # Things can be put on it
    TOOLBIT = 65536  # Is a tool
    TURNBIT = 131072  # Can be turned
    CLIMBBIT = 262144  # Can be climbed
    SACREDBIT = 524288  # Special handling
    VEHBIT = 1048576  # Is a vehicle
    TRYTAKEBIT = 2097152  # Special handling when taken
    SEARCHBIT = 4194304  # Can be searched
    FLAMEBIT = 8388608  # Is a flame
    RMUNGBIT = 16777216  # Used up / destroyed (burned-out lamp)
    TOUCHBIT = 33554432  # Has been touched or used
    FIGHTBIT = 67108864  # Engaged in combat
    STAGGERED = 134217728  # Actor is staggered
    WEARBIT = 268435456  # Can be worn


class RoomFlag(IntFlag):
    """Room property flags."""

    NONE = 0
    RLANDBIT = 1  # Room is on land
    ONBIT = 2  # Room is naturally lit
    SACREDBIT = 4  # No fighting allowed
    MAZEBIT = 8  # Part of the maze
    NONLANDBIT = 16  # Water room
    TOUCHBIT = 32  # Visited


class GameFlag(IntFlag):
    """World-global flags.

    Every global condition the actors and daemons read or write is a
    member; nothing is addressed by free-form name.
    """

    NONE = 0
    CYCLOPS_FLAG = 1  # Cyclops asleep or gone
    TROLL_FLAG = 2  # Troll dealt with, passages open
    WON_FLAG = 4  # Game won (scheduler wind-down)
    CYCLOPS_ATE_PLAYER = 8  # Cyclops consumed the player
    DAM_LIGHTS = 16
    LOW_TIDE = 32
    MAGIC_FLAG = 64
    RAINBOW_FLAG = 128
    DOME_FLAG = 256
    LLD_FLAG = 512
    EMPTY_HANDED = 1024
    PLAYER_STAGGERED = 2048
    GAME_OVER = 4096
    PLAYER_KILLED = 8192  # Player died of wounds


# Location id for objects removed from play
LIMBO = None

# Location id for the player's inventory
PLAYER = "PLAYER"


@dataclass(eq=False)
class GameObject:
    """An object, creature or piece of scenery in the game world.

    Objects compare by identity: two distinct objects with the same name
    are still two candidates to the parser.
    """

    id: str
    name: str
    synonyms: list[str] = field(default_factory=list)
    adjectives: list[str] = field(default_factory=list)
    description: str = ""
    flags: ObjectFlag = ObjectFlag.NONE
    location: str | None = None
    properties: dict = field(default_factory=dict)

    def has_flag(self, flag: ObjectFlag) -> bool:
        """Check if the object carries a flag."""
        return bool(self.flags & flag)

    def add_flag(self, flag: ObjectFlag) -> None:
        self.flags |= flag

    def remove_flag(self, flag: ObjectFlag) -> None:
        self.flags &= ~flag

    def all_names(self) -> set[str]:
        """Upper-cased canonical name plus synonyms."""
        return {n.upper() for n in [self.name, *self.synonyms]}

    def all_adjectives(self) -> set[str]:
        return {a.upper() for a in self.adjectives}

    @property
    def display_name(self) -> str:
        """Name as shown to the player, with the first adjective if any."""
        if self.adjectives and not self.name.lower().startswith(self.adjectives[0].lower()):
            return f"{self.adjectives[0].lower()} {self.name.lower()}"
        return self.name.lower()

    def is_takeable(self) -> bool:
        return self.has_flag(ObjectFlag.TAKEBIT)

    def is_container(self) -> bool:
        return self.has_flag(ObjectFlag.CONTBIT)

    def is_open(self) -> bool:
        return self.has_flag(ObjectFlag.OPENBIT)

    def is_light_source(self) -> bool:
        return self.has_flag(ObjectFlag.LIGHTBIT)

    def is_on(self) -> bool:
        return self.has_flag(ObjectFlag.ONBIT)

    def is_actor(self) -> bool:
        return self.has_flag(ObjectFlag.ACTORBIT)

    def is_visible(self) -> bool:
        return not self.has_flag(ObjectFlag.INVISIBLE)

    @property
    def value(self) -> int:
        """Treasure value; zero for everything else."""
        return self.properties.get("VALUE", 0)


@dataclass(eq=False)
class DirectionEntity(GameObject):
    """Lightweight pseudo-entity standing for a movement direction.

    Synthesized by the parser for ``GO NORTH`` and bare directions; it is
    never part of the world and never placed anywhere.
    """

    @classmethod
    def for_direction(cls, direction: str) -> "DirectionEntity":
        direction = direction.upper()
        return cls(id=direction, name=direction)


@dataclass
class Room:
    """Represents a room in the game world."""

    id: str
    name: str
    description: str = ""
    flags: RoomFlag = RoomFlag.RLANDBIT | RoomFlag.ONBIT
    exits: dict[str, str] = field(default_factory=dict)  # DIRECTION -> room id
    global_objects: list[str] = field(default_factory=list)

    def is_lit(self) -> bool:
        """Check if room is naturally lit."""
        return bool(self.flags & RoomFlag.ONBIT)

    def is_visited(self) -> bool:
        return bool(self.flags & RoomFlag.TOUCHBIT)

    def is_sacred(self) -> bool:
        """Check if fighting is forbidden."""
        return bool(self.flags & RoomFlag.SACREDBIT)


# Well-known object ids used by the actor and daemon rules
class ObjectID:
    """Standard object identifiers."""

    LAMP = "LAMP"
    CANDLES = "CANDLES"
    CYCLOPS = "CYCLOPS"
    TROLL = "TROLL"
    AXE = "AXE"
    LUNCH = "LUNCH"
    WATER = "WATER"
    BOTTLE = "BOTTLE"
    GARLIC = "GARLIC"
    KNIFE = "KNIFE"
    SWORD = "SWORD"
    THIEF = "THIEF"
    STILETTO = "STILETTO"
    EGG = "EGG"


class RoomID:
    """Standard room identifiers."""

    WEST_OF_HOUSE = "WEST-OF-HOUSE"
    LIVING_ROOM = "LIVING-ROOM"
    CELLAR = "CELLAR"
    TROLL_ROOM = "TROLL-ROOM"
    CYCLOPS_ROOM = "CYCLOPS-ROOM"
    STRANGE_PASSAGE = "STRANGE-PASSAGE"
    TREASURE_ROOM = "TREASURE-ROOM"
