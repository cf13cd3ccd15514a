"""Lexer - splits player input into classified word tokens."""

from dataclasses import dataclass

from pyzorkcore.engine.vocabulary import LexicalCategory, Slot, Vocabulary


@dataclass
class Token:
    """A single word of input and its lexical category."""

    word: str
    category: LexicalCategory = LexicalCategory.UNKNOWN
    position: int = 0


class Lexer:
    """Turns raw text into tokens annotated from the vocabulary."""

    def __init__(self, vocabulary: Vocabulary | None = None) -> None:
        self.vocabulary = vocabulary or Vocabulary()

    @staticmethod
    def split_words(text: str) -> list[str]:
        """Lower-case the input and split it into words.

        Punctuation other than apostrophes and hyphens separates words.
        """
        text = text.lower().strip()
        text = "".join(c if c.isalnum() or c in "'-" else " " for c in text)
        return text.split()

    def tokenize(self, text: str) -> list[Token]:
        """Break input into classified tokens."""
        return self.tokens_from_words(self.split_words(text))

    def tokens_from_words(self, words: list[str]) -> list[Token]:
        """Classify pre-split words.

        Abbreviations are expanded. The first word is read in the command
        slot so that a verb reading wins there; the rest get their primary
        reading and are re-read in context by the parser.
        """
        tokens = []
        for position, raw in enumerate(words):
            word = self.vocabulary.expand_abbreviation(raw.lower())
            slot_category = (
                self.vocabulary.classify_in_slot(word, Slot.COMMAND)
                if position == 0
                else self.vocabulary.classify(word)
            )
            tokens.append(Token(word, slot_category, position))
        return tokens
