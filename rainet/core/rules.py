from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .board import BOARD_SIZE, EXIT_CELLS, Board, exit_owner
from .state import GameState
from .types import Move, Position

DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
EXIT_ORDER: Tuple[Position, ...] = tuple(sorted(EXIT_CELLS, key=Position.as_tuple))

MOVE_ACTIONS = BOARD_SIZE * BOARD_SIZE * len(DIRECTIONS)
ENTER_ACTION_OFFSET = MOVE_ACTIONS
END_TURN_ACTION = ENTER_ACTION_OFFSET + len(EXIT_ORDER)
ACTION_VECTOR_SIZE = END_TURN_ACTION + 1


class ActionKind(Enum):
    MOVE = "move"
    ENTER = "enter"
    END_TURN = "end_turn"


@dataclass(frozen=True)
class ActionVector:
    """Flat index encoding of the actions a policy can choose while playing.

    Moves are indexed by origin cell and direction, server entries by exit
    cell, followed by a single end-turn slot.
    """

    kind: ActionKind
    origin: Optional[Position] = None
    direction_index: int = 0

    def to_move(self) -> Move:
        if self.kind != ActionKind.MOVE or self.origin is None:
            raise ValueError("Only move actions have a destination.")
        dr, dc = DIRECTIONS[self.direction_index]
        return Move(self.origin, Position(self.origin.row + dr, self.origin.col + dc))

    @staticmethod
    def from_move(move: Move) -> "ActionVector":
        delta = (move.target.row - move.origin.row, move.target.col - move.origin.col)
        if delta not in DIRECTIONS:
            raise ValueError("Move is not a single orthogonal step.")
        if not Board.in_bounds(move.origin):
            raise ValueError("Move origin is off the board.")
        return ActionVector(ActionKind.MOVE, move.origin, DIRECTIONS.index(delta))

    @staticmethod
    def for_entry(origin: Position) -> "ActionVector":
        if origin not in EXIT_CELLS:
            raise ValueError("Server entry must start on an exit cell.")
        return ActionVector(ActionKind.ENTER, origin)

    def to_index(self) -> int:
        if self.kind == ActionKind.END_TURN:
            return END_TURN_ACTION
        if self.kind == ActionKind.ENTER:
            return ENTER_ACTION_OFFSET + EXIT_ORDER.index(self.origin)
        base = self.origin.row * BOARD_SIZE + self.origin.col
        return base * len(DIRECTIONS) + self.direction_index

    @staticmethod
    def from_index(index: int) -> "ActionVector":
        if not 0 <= index < ACTION_VECTOR_SIZE:
            raise ValueError("Action index out of range.")
        if index == END_TURN_ACTION:
            return ActionVector(ActionKind.END_TURN)
        if index >= ENTER_ACTION_OFFSET:
            return ActionVector(ActionKind.ENTER, EXIT_ORDER[index - ENTER_ACTION_OFFSET])
        direction_index = index % len(DIRECTIONS)
        cell = index // len(DIRECTIONS)
        return ActionVector(ActionKind.MOVE, Position(cell // BOARD_SIZE, cell % BOARD_SIZE), direction_index)


def encode_move(move: Move) -> int:
    return ActionVector.from_move(move).to_index()


def decode_action(index: int) -> ActionVector:
    return ActionVector.from_index(index)


def initialize_game_state() -> GameState:
    return GameState()


def enumerate_legal_moves(state: GameState) -> List[Move]:
    """Every move the engine would accept right now.

    While a boost continuation is pending only moves of the boosted card are
    listed, since those are the only ones ``continue_boost_move`` takes.
    """
    if not state.phase.is_playing:
        return []
    if state.pending_boost_move is not None:
        origins = [state.pending_boost_move]
    else:
        origins = [pos for pos, _ in state.cards_of(state.current_player)]

    legal: List[Move] = []
    for origin in origins:
        for dr, dc in DIRECTIONS:
            target = Position(origin.row + dr, origin.col + dc)
            if state.validate_move(origin, target) is None:
                legal.append(Move(origin, target))
    return legal


def enumerate_server_entries(state: GameState) -> List[Position]:
    if not state.phase.is_playing or state.pending_boost_move is not None:
        return []
    opponent = state.current_player.opponent()
    return [
        pos
        for pos in EXIT_ORDER
        if exit_owner(pos) == opponent and state.board.has_own_card(pos, state.current_player)
    ]
