"""Game engine components for PyZorkCore."""

from pyzorkcore.engine.actors import Actor, ActorKind, ActorManager, ActorState, InvalidTransition
from pyzorkcore.engine.events import EventScheduler
from pyzorkcore.engine.game import Game, GameResult, create_game
from pyzorkcore.engine.lexer import Lexer, Token
from pyzorkcore.engine.models import DirectionEntity, GameFlag, GameObject, ObjectFlag, Room
from pyzorkcore.engine.parser import ParsedCommand, ParseFailure, Parser, ParserSession
from pyzorkcore.engine.state import GameState
from pyzorkcore.engine.vocabulary import LexicalCategory, Vocabulary

__all__ = [
    "Actor",
    "ActorKind",
    "ActorManager",
    "ActorState",
    "InvalidTransition",
    "EventScheduler",
    "Game",
    "GameResult",
    "create_game",
    "Lexer",
    "Token",
    "DirectionEntity",
    "GameFlag",
    "GameObject",
    "ObjectFlag",
    "Room",
    "ParsedCommand",
    "ParseFailure",
    "Parser",
    "ParserSession",
    "GameState",
    "LexicalCategory",
    "Vocabulary",
]
