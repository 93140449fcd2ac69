from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .types import Card, PlayerId, Position, StackChoice

SETUP_LINKS = 4
SETUP_VIRUSES = 4
SETUP_TOTAL = SETUP_LINKS + SETUP_VIRUSES
TERMINAL_SLOTS = 2


def _empty_slots() -> List[Optional[Position]]:
    return [None] * TERMINAL_SLOTS


def _unused_flags() -> np.ndarray:
    return np.zeros(TERMINAL_SLOTS, dtype=bool)


@dataclass
class PlayerState:
    id: PlayerId
    link_stack: List[Card] = field(default_factory=list)
    virus_stack: List[Card] = field(default_factory=list)
    line_boosts: List[Optional[Position]] = field(default_factory=_empty_slots)
    firewalls: List[Optional[Position]] = field(default_factory=_empty_slots)
    virus_checks_used: np.ndarray = field(default_factory=_unused_flags)  # shape (2,), dtype=bool
    not_found_used: np.ndarray = field(default_factory=_unused_flags)  # shape (2,), dtype=bool
    links_left: int = SETUP_LINKS
    viruses_left: int = SETUP_VIRUSES
    placed: int = 0

    def add_to_stack(self, card: Card, stack: StackChoice) -> None:
        if stack == StackChoice.LINK:
            self.link_stack.append(card)
        else:
            self.virus_stack.append(card)

    def boost_slot_at(self, pos: Position) -> Optional[int]:
        for index, slot in enumerate(self.line_boosts):
            if slot == pos:
                return index
        return None

    def copy(self) -> "PlayerState":
        return PlayerState(
            id=self.id,
            link_stack=list(self.link_stack),
            virus_stack=list(self.virus_stack),
            line_boosts=list(self.line_boosts),
            firewalls=list(self.firewalls),
            virus_checks_used=self.virus_checks_used.copy(),
            not_found_used=self.not_found_used.copy(),
            links_left=self.links_left,
            viruses_left=self.viruses_left,
            placed=self.placed,
        )
