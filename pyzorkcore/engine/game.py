"""Main game engine for PyZorkCore."""

import logging
from dataclasses import dataclass, field

from pyzorkcore.config import Config
from pyzorkcore.engine.actors import ActorManager
from pyzorkcore.engine.combat import register_combat
from pyzorkcore.engine.cyclops import make_cyclops
from pyzorkcore.engine.events import EventScheduler
from pyzorkcore.engine.feedback import ParserFeedback
from pyzorkcore.engine.lexer import Lexer
from pyzorkcore.engine.models import GameFlag, ObjectID
from pyzorkcore.engine.parser import BEG_PARDON, ParseFailure, Parser, ParserSession
from pyzorkcore.engine.state import GameState
from pyzorkcore.engine.thief import make_thief
from pyzorkcore.engine.troll import make_troll
from pyzorkcore.engine.verbs import VerbHandler
from pyzorkcore.engine.world import create_demo_world, describe_room

logger = logging.getLogger(__name__)

GAME_OVER_MESSAGE = "Your adventure is over. You may RESTART or QUIT."


@dataclass
class GameResult:
    """Result of processing a turn."""

    messages: list[str] = field(default_factory=list)
    quit_requested: bool = False
    player_died: bool = False
    game_over: bool = False
    score_change: int = 0
    parse_failure: ParseFailure | None = None


class Game:
    """Main game engine - coordinates parser, clock and actors."""

    def __init__(
        self,
        state: GameState | None = None,
        config: Config | None = None,
        seed: int | None = None,
    ) -> None:
        """Initialize game with state and configuration.

        Args:
            state: World state; the demo world is built if omitted.
            config: Settings; defaults if omitted.
            seed: Seed for the state's random generator, overriding config.
        """
        self.config = config or Config()
        self.seed = seed if seed is not None else self.config.game.seed
        self.state = state or create_demo_world()
        if self.seed is not None:
            self.state.rng.seed(self.seed)

        self.parser = Parser(strict_vocabulary=self.config.parser.strict_vocabulary)
        self.session = ParserSession()
        self.feedback = ParserFeedback()
        self.events = EventScheduler()
        self.actors = ActorManager()
        self.verbs = VerbHandler(self)

        self._bootstrap()

    def _bootstrap(self) -> None:
        """Attach the scheduler to the state and register combat and actor daemons."""
        self.state.events = self.events
        register_combat(self.actors, self.state)
        if self.state.get_object(ObjectID.CYCLOPS):
            self.actors.register(make_cyclops())
        if self.state.get_object(ObjectID.TROLL):
            self.actors.register(make_troll())
        if self.state.get_object(ObjectID.THIEF):
            self.actors.register(make_thief())
        self.actors.attach(self.events)
        logger.debug(f"Bootstrapped events: {self.events.event_ids()}")

    def start(self) -> str:
        """Start a new game. Returns opening text."""
        lines = [
            "ZORK I: The Great Underground Empire",
            "PyZorkCore engine",
            "",
            f"Welcome, {self.config.game.player_name}.",
            "",
            describe_room(self.state),
        ]
        return "\n".join(lines)

    def restart(self) -> None:
        """Throw the world away and start over with the same seed."""
        self.state = create_demo_world()
        if self.seed is not None:
            self.state.rng.seed(self.seed)
        self.session.reset()
        self.feedback.reset()
        self.events.clear()
        self.actors.clear()
        self._bootstrap()
        logger.info("Game restarted")

    def process_input(self, input_text: str) -> GameResult:
        """Process player input and return result."""
        result = GameResult()
        words = Lexer.split_words(input_text)

        if not words:
            result.messages.append(BEG_PARDON)
            return result

        first = self.parser.vocabulary.expand_abbreviation(words[0])
        if first == "again":
            repeat = self.feedback.handle_again()
            if not repeat.success:
                result.messages.append(repeat.message)
                return result
            words = Lexer.split_words(repeat.input_text)
        elif first == "oops":
            fixed = self.feedback.handle_oops(words[1:])
            if not fixed.success:
                result.messages.append(fixed.message)
                return result
            if fixed.message:
                result.messages.append(fixed.message)
            words = Lexer.split_words(fixed.input_text)

        if self.state.has_flag(GameFlag.GAME_OVER) and words[0] not in ("restart", "quit", "q"):
            result.game_over = True
            result.messages.append(GAME_OVER_MESSAGE)
            return result

        text = " ".join(words)
        parsed = self.parser.parse(
            self.parser.lexer.tokens_from_words(words),
            self.state.reachable_objects(),
            self.session,
        )

        if isinstance(parsed, ParseFailure):
            # Parse failures don't use a turn
            self.feedback.record_failure(text)
            self._note_unknown_word(parsed, words)
            result.parse_failure = parsed
            result.messages.append(parsed.message)
            return result

        score_before = self.state.score
        verb_result = self.verbs.execute(parsed)
        self.feedback.record_success(text)

        result.messages.extend(self.state.drain_output())
        if verb_result.message:
            result.messages.append(verb_result.message)

        if verb_result.quit_requested:
            result.quit_requested = True
            return result

        if verb_result.restart_requested:
            self.restart()
            result.messages.append(self.start())
            return result

        # If action used a turn, process events
        if verb_result.end_turn:
            self.events.process_turn(self.state, self.state.has_flag(GameFlag.WON_FLAG))
            result.messages.extend(self.state.drain_output())

        result.score_change = self.state.score - score_before

        if self.state.has_flag(GameFlag.GAME_OVER):
            result.game_over = True
            result.player_died = self.state.has_flag(
                GameFlag.CYCLOPS_ATE_PLAYER | GameFlag.PLAYER_KILLED
            )
            if result.player_died:
                result.messages.append("    ****  You have died  ****")

        return result

    def _note_unknown_word(self, failure: ParseFailure, words: list[str]) -> None:
        """Remember a misspelt word so OOPS can replace it."""
        word = failure.word
        if word and word in words and not self.parser.vocabulary.has_word(word):
            self.feedback.record_unknown_word(word, words.index(word))
        else:
            self.feedback.clear_unknown_word()

    def get_current_room_description(self) -> str:
        """Get description of current room."""
        return describe_room(self.state)

    def get_prompt(self) -> str:
        """Get the input prompt."""
        return ">"


def create_game(seed: int | None = None, config: Config | None = None) -> Game:
    """Create a new game with the demo world."""
    return Game(config=config, seed=seed)
