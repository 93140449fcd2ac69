from __future__ import annotations

from typing import Iterator, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from .types import Card, PlayerId, Position

BOARD_SIZE = 8

CardArray = NDArray[np.object_]
FirewallArray = NDArray[np.int8]


class Board:
    """Spatial storage only: cards and firewall markers on an 8x8 grid.

    Callers are responsible for bounds checking through ``in_bounds``.
    """

    def __init__(
        self,
        cards: Optional[CardArray] = None,
        firewalls: Optional[FirewallArray] = None,
    ) -> None:
        if cards is None:
            cards = np.full((BOARD_SIZE, BOARD_SIZE), None, dtype=object)
        if firewalls is None:
            firewalls = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
        self.cards = cards  # shape (8, 8), Optional[Card] per cell
        self.firewalls = firewalls  # shape (8, 8), 0 (none) or owning PlayerId value

    @staticmethod
    def in_bounds(pos: Position) -> bool:
        return 0 <= pos.row < BOARD_SIZE and 0 <= pos.col < BOARD_SIZE

    def get(self, pos: Position) -> Optional[Card]:
        return self.cards[pos.row, pos.col]

    def set(self, pos: Position, card: Optional[Card]) -> None:
        self.cards[pos.row, pos.col] = card

    def has_own_card(self, pos: Position, player: PlayerId) -> bool:
        card = self.get(pos)
        return card is not None and card.owner == player

    def has_opponent_card(self, pos: Position, player: PlayerId) -> bool:
        card = self.get(pos)
        return card is not None and card.owner == player.opponent()

    def firewall_owner(self, pos: Position) -> Optional[PlayerId]:
        value = int(self.firewalls[pos.row, pos.col])
        return PlayerId(value) if value else None

    def set_firewall(self, pos: Position, owner: Optional[PlayerId]) -> None:
        self.firewalls[pos.row, pos.col] = 0 if owner is None else int(owner)

    def occupied(self) -> Iterator[Tuple[Position, Card]]:
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                card = self.cards[row, col]
                if card is not None:
                    yield Position(row, col), card

    def firewall_cells(self) -> Iterator[Tuple[Position, PlayerId]]:
        for row, col in np.argwhere(self.firewalls != 0):
            yield Position(int(row), int(col)), PlayerId(int(self.firewalls[row, col]))

    def copy(self) -> "Board":
        # Card is frozen, so a shallow copy of the object grid is enough.
        return Board(cards=self.cards.copy(), firewalls=self.firewalls.copy())

    def __repr__(self) -> str:
        rows = []
        for row in range(BOARD_SIZE):
            cells = []
            for col in range(BOARD_SIZE):
                card = self.cards[row, col]
                if card is None:
                    cells.append(".")
                else:
                    symbol = card.kind.value
                    cells.append(symbol if card.owner == PlayerId.P1 else symbol.lower())
            rows.append(" ".join(cells))
        return "\n".join(rows)


EXIT_CELLS = {
    Position(0, 3): PlayerId.P1,
    Position(0, 4): PlayerId.P1,
    Position(7, 3): PlayerId.P2,
    Position(7, 4): PlayerId.P2,
}


def is_exit(pos: Position) -> bool:
    return pos in EXIT_CELLS


def exit_owner(pos: Position) -> Optional[PlayerId]:
    return EXIT_CELLS.get(pos)
