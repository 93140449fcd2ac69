"""Core game logic for Rai-Net."""

from .board import BOARD_SIZE, EXIT_CELLS, Board, exit_owner, is_exit
from .player import SETUP_LINKS, SETUP_TOTAL, SETUP_VIRUSES, TERMINAL_SLOTS, PlayerState
from .state import WIN_THRESHOLD, GameState
from .rules import (
    ACTION_VECTOR_SIZE,
    DIRECTIONS,
    END_TURN_ACTION,
    ENTER_ACTION_OFFSET,
    EXIT_ORDER,
    MOVE_ACTIONS,
    ActionKind,
    ActionVector,
    decode_action,
    encode_move,
    enumerate_legal_moves,
    enumerate_server_entries,
    initialize_game_state,
)
from .types import (
    ActionResult,
    Card,
    CardKind,
    ErrorCategory,
    GameError,
    Move,
    MoveOutcome,
    Phase,
    PhaseKind,
    PlayerId,
    Position,
    StackChoice,
)

__all__ = [
    "ACTION_VECTOR_SIZE",
    "BOARD_SIZE",
    "DIRECTIONS",
    "END_TURN_ACTION",
    "ENTER_ACTION_OFFSET",
    "EXIT_CELLS",
    "EXIT_ORDER",
    "MOVE_ACTIONS",
    "SETUP_LINKS",
    "SETUP_TOTAL",
    "SETUP_VIRUSES",
    "TERMINAL_SLOTS",
    "WIN_THRESHOLD",
    "ActionKind",
    "ActionResult",
    "ActionVector",
    "Board",
    "Card",
    "CardKind",
    "ErrorCategory",
    "GameError",
    "GameState",
    "Move",
    "MoveOutcome",
    "Phase",
    "PhaseKind",
    "PlayerId",
    "PlayerState",
    "Position",
    "StackChoice",
    "decode_action",
    "encode_move",
    "enumerate_legal_moves",
    "enumerate_server_entries",
    "exit_owner",
    "initialize_game_state",
    "is_exit",
]
