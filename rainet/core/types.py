from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Tuple


class PlayerId(IntEnum):
    P1 = 1
    P2 = 2

    def opponent(self) -> "PlayerId":
        return PlayerId.P2 if self == PlayerId.P1 else PlayerId.P1

    def setup_row(self) -> int:
        return 1 if self == PlayerId.P1 else 6

    def exit_row(self) -> int:
        return 0 if self == PlayerId.P1 else 7

    def setup_positions(self) -> Tuple["Position", ...]:
        back = self.exit_row()
        front = self.setup_row()
        return (
            Position(back, 0),
            Position(back, 1),
            Position(back, 2),
            Position(back, 5),
            Position(back, 6),
            Position(back, 7),
            Position(front, 3),
            Position(front, 4),
        )


class CardKind(Enum):
    LINK = "L"
    VIRUS = "V"


class StackChoice(Enum):
    LINK = "L"
    VIRUS = "V"

    @classmethod
    def for_kind(cls, kind: CardKind) -> "StackChoice":
        return cls.LINK if kind == CardKind.LINK else cls.VIRUS


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    def manhattan_distance(self, other: "Position") -> int:
        return abs(self.row - other.row) + abs(self.col - other.col)

    def as_tuple(self) -> Tuple[int, int]:
        return (self.row, self.col)


@dataclass(frozen=True)
class Card:
    kind: CardKind
    owner: PlayerId
    revealed: bool = False
    boosted: bool = False


class PhaseKind(Enum):
    SETUP = "setup"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Phase:
    """Setup carries the player placing cards, GameOver carries the winner."""

    kind: PhaseKind
    player: Optional[PlayerId] = None

    @classmethod
    def setup(cls, player: PlayerId) -> "Phase":
        return cls(PhaseKind.SETUP, player)

    @classmethod
    def playing(cls) -> "Phase":
        return cls(PhaseKind.PLAYING)

    @classmethod
    def game_over(cls, winner: PlayerId) -> "Phase":
        return cls(PhaseKind.GAME_OVER, winner)

    @property
    def is_setup(self) -> bool:
        return self.kind == PhaseKind.SETUP

    @property
    def is_playing(self) -> bool:
        return self.kind == PhaseKind.PLAYING

    @property
    def is_game_over(self) -> bool:
        return self.kind == PhaseKind.GAME_OVER


class MoveOutcome(Enum):
    TURN_ENDS = "turn_ends"
    CAN_MOVE_AGAIN = "can_move_again"


class ErrorCategory(Enum):
    PHASE = "phase"
    SPATIAL = "spatial"
    OCCUPANCY = "occupancy"
    RULE = "rule"
    RESOURCE = "resource"
    EXCLUSIVITY = "exclusivity"
    TARGETING = "targeting"


class GameError(Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    NOT_ADJACENT = "not_adjacent"
    NO_CARD = "no_card"
    NOT_YOUR_CARD = "not_your_card"
    OCCUPIED_BY_OWN_CARD = "occupied_by_own_card"
    OWN_EXIT_BLOCKED = "own_exit_blocked"
    OPPONENT_FIREWALL = "opponent_firewall"
    INVALID_SETUP_POSITION = "invalid_setup_position"
    SETUP_EXHAUSTED = "setup_exhausted"
    SETUP_NOT_CURRENT_PLAYER = "setup_not_current_player"
    NOT_IN_SETUP_PHASE = "not_in_setup_phase"
    NOT_IN_PLAYING_PHASE = "not_in_playing_phase"
    NOT_ON_OPPONENT_EXIT = "not_on_opponent_exit"
    FIREWALL_ON_EXIT = "firewall_on_exit"
    TERMINAL_CARD_USED = "terminal_card_used"
    INVALID_TARGET = "invalid_target"
    PENDING_BOOST_MOVE = "pending_boost_move"
    NO_PENDING_BOOST_MOVE = "no_pending_boost_move"
    CANNOT_ENTER_SERVER_WITH_BOOST = "cannot_enter_server_with_boost"

    @property
    def category(self) -> ErrorCategory:
        return _ERROR_CATEGORIES[self]


_ERROR_CATEGORIES = {
    GameError.NOT_IN_SETUP_PHASE: ErrorCategory.PHASE,
    GameError.NOT_IN_PLAYING_PHASE: ErrorCategory.PHASE,
    GameError.SETUP_NOT_CURRENT_PLAYER: ErrorCategory.PHASE,
    GameError.OUT_OF_BOUNDS: ErrorCategory.SPATIAL,
    GameError.NOT_ADJACENT: ErrorCategory.SPATIAL,
    GameError.NO_CARD: ErrorCategory.OCCUPANCY,
    GameError.NOT_YOUR_CARD: ErrorCategory.OCCUPANCY,
    GameError.OCCUPIED_BY_OWN_CARD: ErrorCategory.OCCUPANCY,
    GameError.INVALID_SETUP_POSITION: ErrorCategory.OCCUPANCY,
    GameError.OWN_EXIT_BLOCKED: ErrorCategory.RULE,
    GameError.OPPONENT_FIREWALL: ErrorCategory.RULE,
    GameError.FIREWALL_ON_EXIT: ErrorCategory.RULE,
    GameError.NOT_ON_OPPONENT_EXIT: ErrorCategory.RULE,
    GameError.SETUP_EXHAUSTED: ErrorCategory.RESOURCE,
    GameError.TERMINAL_CARD_USED: ErrorCategory.RESOURCE,
    GameError.PENDING_BOOST_MOVE: ErrorCategory.EXCLUSIVITY,
    GameError.NO_PENDING_BOOST_MOVE: ErrorCategory.EXCLUSIVITY,
    GameError.CANNOT_ENTER_SERVER_WITH_BOOST: ErrorCategory.EXCLUSIVITY,
    GameError.INVALID_TARGET: ErrorCategory.TARGETING,
}


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an engine operation: either committed or rejected, never both."""

    error: Optional[GameError] = None
    outcome: Optional[MoveOutcome] = None

    @classmethod
    def success(cls, outcome: Optional[MoveOutcome] = None) -> "ActionResult":
        return cls(error=None, outcome=outcome)

    @classmethod
    def rejected(cls, error: GameError) -> "ActionResult":
        return cls(error=error, outcome=None)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class Move:
    origin: Position
    target: Position

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.origin.row, self.origin.col, self.target.row, self.target.col)
