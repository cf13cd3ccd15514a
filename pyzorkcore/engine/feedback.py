"""Parser feedback - AGAIN/OOPS handling and parser-specific messages.

Follows the OOPS and AGAIN behavior of the classic Zork parser.
"""

from dataclasses import dataclass


def which_message(object_type: str, candidates: list[str]) -> str:
    """Ask the player to pick between candidates (WHICH-PRINT)."""
    object_type = object_type.lower()
    if not candidates:
        return f"Which {object_type} do you mean?"
    if len(candidates) == 1:
        return f"Which {object_type} do you mean, the {candidates[0]}?"
    if len(candidates) == 2:
        return f"Which {object_type} do you mean, the {candidates[0]} or the {candidates[1]}?"
    all_but_last = ", ".join(f"the {c}" for c in candidates[:-1])
    return f"Which {object_type} do you mean, {all_but_last}, or the {candidates[-1]}?"


@dataclass
class FeedbackResult:
    """Outcome of an AGAIN or OOPS request."""

    success: bool
    message: str | None = None
    input_text: str | None = None  # Input to re-run on success


class ParserFeedback:
    """Remembers enough about previous input to support AGAIN and OOPS."""

    NOTHING_TO_REPEAT = "Beg pardon?"
    REPEAT_MISTAKE = "That would just repeat a mistake."
    NO_WORD_TO_REPLACE = "There was no word to replace!"
    OOPS_MULTI_WORD = "Warning: only the first word after OOPS is used."

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Forget everything (game restart)."""
        self.last_input = ""
        self.last_command = ""
        self.last_unknown_word = ""
        self.last_unknown_index = -1
        self.can_repeat = False

    @property
    def has_unknown_word(self) -> bool:
        return bool(self.last_unknown_word) and self.last_unknown_index >= 0

    def record_success(self, input_text: str) -> None:
        """Remember a command that parsed and ran."""
        self.last_input = input_text
        self.last_command = input_text
        self.can_repeat = True
        self.clear_unknown_word()

    def record_failure(self, input_text: str) -> None:
        self.last_input = input_text
        self.can_repeat = False

    def record_unknown_word(self, word: str, index: int) -> None:
        self.last_unknown_word = word
        self.last_unknown_index = index

    def clear_unknown_word(self) -> None:
        self.last_unknown_word = ""
        self.last_unknown_index = -1

    def handle_again(self) -> FeedbackResult:
        """Return the last successful input for re-execution."""
        if not self.last_input.strip():
            return FeedbackResult(False, self.NOTHING_TO_REPEAT)
        if not self.can_repeat:
            return FeedbackResult(False, self.REPEAT_MISTAKE)
        return FeedbackResult(True, input_text=self.last_command)

    def handle_oops(self, words: list[str]) -> FeedbackResult:
        """Replace the last unknown word with the first correction word."""
        if not words:
            return FeedbackResult(False, self.NO_WORD_TO_REPLACE)
        if not self.has_unknown_word:
            return FeedbackResult(False, self.NO_WORD_TO_REPLACE)

        previous = self.last_input.split()
        if self.last_unknown_index >= len(previous):
            return FeedbackResult(False, self.NO_WORD_TO_REPLACE)

        previous[self.last_unknown_index] = words[0]
        self.clear_unknown_word()
        warning = self.OOPS_MULTI_WORD if len(words) > 1 else None
        return FeedbackResult(True, warning, " ".join(previous))
