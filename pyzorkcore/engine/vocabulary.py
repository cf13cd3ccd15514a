"""Game vocabulary - word categories and abbreviations."""

from enum import Enum, auto


class LexicalCategory(Enum):
    """Grammatical categories a vocabulary word can belong to."""

    VERB = auto()
    NOUN = auto()
    ADJECTIVE = auto()
    PREPOSITION = auto()
    DIRECTION = auto()
    ARTICLE = auto()
    PRONOUN = auto()
    CONJUNCTION = auto()
    UNKNOWN = auto()


class Slot(Enum):
    """Grammatical slot a word is read in."""

    COMMAND = auto()  # Leading position, where the verb is expected
    REMAINDER = auto()  # Anywhere after the verb


# Reading chosen for a word with several categories when no slot is known.
# Explicit so that the result never depends on declaration order.
PRIMARY_PRECEDENCE = (
    LexicalCategory.VERB,
    LexicalCategory.DIRECTION,
    LexicalCategory.PREPOSITION,
    LexicalCategory.PRONOUN,
    LexicalCategory.ARTICLE,
    LexicalCategory.CONJUNCTION,
    LexicalCategory.ADJECTIVE,
    LexicalCategory.NOUN,
)

SLOT_PRECEDENCE = {
    Slot.COMMAND: (LexicalCategory.VERB, LexicalCategory.DIRECTION),
    Slot.REMAINDER: (LexicalCategory.PREPOSITION, LexicalCategory.DIRECTION),
}


class Vocabulary:
    """Static word list of the game.

    A word may carry more than one category (``stone`` is a noun and an
    adjective, ``board`` a verb and a noun). ``classify`` gives the primary
    reading; ``classify_in_slot`` lets the grammatical position decide.
    """

    VERBS = (
        "take", "get", "hold", "carry", "remove", "grab", "catch",
        "drop", "put", "place", "insert", "stuff", "hide",
        "open", "close",
        "examine", "x", "look", "l", "read", "describe",
        "inventory", "i",
        "go", "walk", "run", "proceed", "step",
        "attack", "fight", "kill", "hurt", "injure", "hit", "murder", "slay",
        "eat", "drink", "consume", "taste", "bite",
        "give", "offer", "feed", "donate",
        "throw", "toss", "hurl", "chuck",
        "turn", "flip", "set",
        "push", "press", "pull", "tug", "yank",
        "move", "roll",
        "climb", "sit",
        "light", "extinguish", "douse",
        "unlock", "lock",
        "tie", "untie", "fasten", "unfasten",
        "search", "find", "seek",
        "wait", "z",
        "quit", "q",
        "save", "restore",
        "score", "restart",
        "verbose", "brief", "superbrief",
        "diagnose",
        "hello", "hi",
        "goodbye", "bye",
        "thank",
        "yes", "y", "no",
        "tell", "ask", "answer", "reply",
        "board", "enter", "disembark",
        "fill", "empty", "pour", "spill",
        "break", "smash", "destroy", "damage",
        "burn", "ignite", "incinerate",
        "cut", "slice", "pierce",
        "dig",
        "inflate", "deflate",
        "kick", "kiss",
        "knock", "rap",
        "listen",
        "make",
        "melt",
        "oil", "grease", "lubricate",
        "play",
        "pray",
        "raise", "lift", "lower",
        "ring",
        "rub", "touch", "feel",
        "shake",
        "smell", "sniff",
        "squeeze",
        "stand",
        "strike",
        "swim", "wade",
        "swing",
        "wave",
        "wear",
        "wind",
        "yell", "scream", "shout",
        "say", "echo", "dance", "sleep", "wake",
        "ulysses", "odysseus",
        "xyzzy", "plugh", "plover",
        "jump", "leap", "dive",
        "curse", "damn",
        "sing",
        "again", "g",
        "oops",
        "version",
    )

    PREPOSITIONS = (
        "with", "using", "through", "thru",
        "in", "inside", "into",
        "on", "onto",
        "under", "underneath", "beneath", "below",
        "at", "to", "from",
        "for", "about",
        "off", "over",
        "behind",
        "across",
        "around",
        "against",
        "between",
    )

    DIRECTIONS = (
        "north", "n",
        "south", "s",
        "east", "e",
        "west", "w",
        "up", "u",
        "down", "d",
        "northeast", "ne",
        "northwest", "nw",
        "southeast", "se",
        "southwest", "sw",
        "out", "exit", "leave",
    )

    ARTICLES = ("the", "a", "an")

    PRONOUNS = ("it", "them", "all", "everything", "you")

    CONJUNCTIONS = ("and", "then")

    NOUNS = (
        "myself", "me", "self",
        "skull", "head",
        "chalice", "cup",
        "trident", "fork",
        "diamond", "emerald", "figurine",
        "sword", "blade", "weapon",
        "lamp", "lantern",
        "rope", "knife", "stiletto", "torch",
        "treasure", "treasures",
        "test",
        "door", "doors", "window", "windows", "wall", "walls",
        "floor", "ground", "ceiling", "sky",
        "house", "building", "tree", "trees", "forest",
        "water", "stream", "river",
        "mailbox", "box",
        "leaflet", "booklet", "pamphlet",
        "mat", "rug", "trap", "trapdoor", "grating",
        "leaves", "leaf", "nest", "bird", "egg", "eggs",
        "jewel", "jewels", "jewelry", "coins", "coin",
        "coffin", "casket", "sceptre", "scepter",
        "bracelet", "necklace", "painting", "picture",
        "bottle", "flask",
        "food", "lunch", "dinner", "sandwich", "peppers",
        "garlic", "clove",
        "book", "books", "candles", "candle", "match", "matches",
        "wrench", "screwdriver",
        "hands", "hand", "lungs",
        "thief", "robber", "burglar",
        "troll", "monster",
        "cyclops", "giant",
        "case", "trophy", "bag", "sack", "chest", "basket", "bucket", "pail",
        "pot",
        "shovel", "spade", "axe", "hatchet",
        "bell", "buoy", "pump", "slide", "machine",
        "switch", "button", "lever",
        "mirror", "glass", "pole",
        "board", "boards", "plank",
        "bolt", "bubble", "bubbles", "coal", "pile", "sand",
        "stone", "rock", "stones", "rocks",
        "teeth", "tooth", "timber", "tool", "tools",
        "stairs", "staircase",
    )

    ADJECTIVES = (
        "white", "crystal", "silver", "gold", "golden", "brass", "wooden",
        "rusty", "small", "tiny", "little", "large", "big", "huge", "enormous",
        "old", "ancient", "new", "broken", "sharp", "dull", "heavy",
        "dark", "black", "bright", "shiny", "dirty", "clean", "wet", "dry",
        "hot", "cold", "warm", "cool", "beautiful", "ugly", "strange", "normal",
        "magic", "magical", "dead", "living", "locked", "unlocked",
        "empty", "full", "jade", "ivory", "platinum", "jeweled",
        "engraved", "carved", "painted", "leather", "cloth",
        "steel", "iron", "copper", "bronze", "stone", "marble", "granite",
        "sandy", "rocky", "leafy", "grassy", "muddy", "dusty", "moldy",
        "rotten", "fresh", "stale", "sweet", "sour", "bitter", "salty",
        "spicy", "bland", "delicious", "disgusting", "fragrant", "smelly",
        "loud", "quiet", "silent", "noisy", "elvish", "nasty", "glass",
        "pair", "bloody", "hungry",
    )

    ABBREVIATIONS = {
        # Directions
        "n": "north",
        "s": "south",
        "e": "east",
        "w": "west",
        "u": "up",
        "d": "down",
        "ne": "northeast",
        "nw": "northwest",
        "se": "southeast",
        "sw": "southwest",
        # Commands
        "i": "inventory",
        "x": "examine",
        "l": "look",
        "z": "wait",
        "q": "quit",
        "y": "yes",
        "g": "again",
    }

    def __init__(self) -> None:
        """Build the word table from the category lists."""
        self._words: dict[str, set[LexicalCategory]] = {}
        self._canonical: dict[str, str] = {}
        self._load(self.VERBS, LexicalCategory.VERB)
        self._load(self.PREPOSITIONS, LexicalCategory.PREPOSITION)
        self._load(self.DIRECTIONS, LexicalCategory.DIRECTION)
        self._load(self.ARTICLES, LexicalCategory.ARTICLE)
        self._load(self.PRONOUNS, LexicalCategory.PRONOUN)
        self._load(self.CONJUNCTIONS, LexicalCategory.CONJUNCTION)
        self._load(self.NOUNS, LexicalCategory.NOUN)
        self._load(self.ADJECTIVES, LexicalCategory.ADJECTIVE)

    def _load(self, words: tuple[str, ...], category: LexicalCategory) -> None:
        for word in words:
            self._words.setdefault(word.lower(), set()).add(category)

    def add_word(
        self,
        word: str,
        category: LexicalCategory,
        canonical_form: str | None = None,
    ) -> None:
        """Add a word (or another reading of a known word)."""
        self._words.setdefault(word.lower(), set()).add(category)
        if canonical_form:
            self._canonical[word.lower()] = canonical_form.lower()

    def categories(self, word: str) -> frozenset[LexicalCategory]:
        """All categories the word belongs to (empty if unknown)."""
        return frozenset(self._words.get(word.lower(), ()))

    def classify(self, word: str) -> LexicalCategory:
        """Primary category of a word, UNKNOWN if absent."""
        found = self._words.get(word.lower())
        if not found:
            return LexicalCategory.UNKNOWN
        for category in PRIMARY_PRECEDENCE:
            if category in found:
                return category
        return LexicalCategory.UNKNOWN

    def classify_in_slot(self, word: str, slot: Slot) -> LexicalCategory:
        """Category of a word as read in a grammatical slot.

        The command slot prefers a verb reading, then a direction. After the
        verb a preposition reading wins, then a direction. Otherwise the
        primary reading applies.
        """
        found = self.categories(word)
        for category in SLOT_PRECEDENCE[slot]:
            if category in found:
                return category
        return self.classify(word)

    def has_word(self, word: str) -> bool:
        return word.lower() in self._words

    def expand_abbreviation(self, word: str) -> str:
        """Full form of an abbreviation, or the word itself."""
        return self.ABBREVIATIONS.get(word.lower(), word)

    def is_abbreviation(self, word: str) -> bool:
        return word.lower() in self.ABBREVIATIONS

    def canonical_form(self, word: str) -> str:
        """Canonical form of a synonym, or the word itself."""
        return self._canonical.get(word.lower(), word)

    def is_ambiguous(self, word: str) -> bool:
        """Check if a word has more than one grammatical reading."""
        return len(self.categories(word)) > 1
