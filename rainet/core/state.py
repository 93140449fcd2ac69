from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple

from .board import Board, exit_owner, is_exit
from .player import SETUP_TOTAL, TERMINAL_SLOTS, PlayerState
from .types import (
    ActionResult,
    Card,
    CardKind,
    GameError,
    MoveOutcome,
    Phase,
    PlayerId,
    Position,
    StackChoice,
)

WIN_THRESHOLD = 4


@dataclass
class GameState:
    board: Board = field(default_factory=Board)
    player1: PlayerState = field(default_factory=lambda: PlayerState(PlayerId.P1))
    player2: PlayerState = field(default_factory=lambda: PlayerState(PlayerId.P2))
    current_player: PlayerId = PlayerId.P1
    phase: Phase = field(default_factory=lambda: Phase.setup(PlayerId.P1))
    pending_boost_move: Optional[Position] = None

    def copy(self) -> "GameState":
        return GameState(
            board=self.board.copy(),
            player1=self.player1.copy(),
            player2=self.player2.copy(),
            current_player=self.current_player,
            phase=self.phase,
            pending_boost_move=self.pending_boost_move,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def player(self, player: PlayerId) -> PlayerState:
        return self.player1 if player == PlayerId.P1 else self.player2

    is_exit = staticmethod(is_exit)
    exit_owner = staticmethod(exit_owner)

    @property
    def is_terminal(self) -> bool:
        return self.phase.is_game_over

    @property
    def winner(self) -> Optional[PlayerId]:
        return self.phase.player if self.phase.is_game_over else None

    def cards_of(self, player: PlayerId) -> Iterable[Tuple[Position, Card]]:
        for pos, card in self.board.occupied():
            if card.owner == player:
                yield pos, card

    def can_place_setup(self, player: PlayerId, pos: Position) -> bool:
        return (
            Board.in_bounds(pos)
            and pos in player.setup_positions()
            and self.board.get(pos) is None
        )

    def check_winner(self) -> Optional[PlayerId]:
        # P1 is checked first, so a simultaneous threshold goes to P1.
        p1, p2 = self.player1, self.player2
        if len(p1.link_stack) >= WIN_THRESHOLD or len(p2.virus_stack) >= WIN_THRESHOLD:
            return PlayerId.P1
        if len(p2.link_stack) >= WIN_THRESHOLD or len(p1.virus_stack) >= WIN_THRESHOLD:
            return PlayerId.P2
        return None

    def validate_move(self, origin: Position, target: Position) -> Optional[GameError]:
        """Return the reason a single adjacent move is illegal, or None.

        Does not look at the pending boost marker; ``start_move`` and
        ``continue_boost_move`` handle that themselves.
        """
        if not self.phase.is_playing:
            return GameError.NOT_IN_PLAYING_PHASE
        if not Board.in_bounds(origin) or not Board.in_bounds(target):
            return GameError.OUT_OF_BOUNDS
        if origin.manhattan_distance(target) != 1:
            return GameError.NOT_ADJACENT
        card = self.board.get(origin)
        if card is None:
            return GameError.NO_CARD
        mover = self.current_player
        if card.owner != mover:
            return GameError.NOT_YOUR_CARD
        if self.board.has_own_card(target, mover):
            return GameError.OCCUPIED_BY_OWN_CARD
        if exit_owner(target) == mover:
            return GameError.OWN_EXIT_BLOCKED
        if self.board.firewall_owner(target) == mover.opponent():
            return GameError.OPPONENT_FIREWALL
        return None

    # ------------------------------------------------------------------
    # Setup phase
    # ------------------------------------------------------------------
    def _setup_turn_error(self, player: PlayerId) -> Optional[GameError]:
        if not self.phase.is_setup:
            return GameError.NOT_IN_SETUP_PHASE
        if self.phase.player != player:
            return GameError.SETUP_NOT_CURRENT_PLAYER
        return None

    def place_setup_card(self, player: PlayerId, pos: Position, kind: CardKind) -> ActionResult:
        error = self._setup_turn_error(player)
        if error is not None:
            return ActionResult.rejected(error)
        if not Board.in_bounds(pos):
            return ActionResult.rejected(GameError.OUT_OF_BOUNDS)
        if not self.can_place_setup(player, pos):
            return ActionResult.rejected(GameError.INVALID_SETUP_POSITION)

        state = self.player(player)
        left = state.links_left if kind == CardKind.LINK else state.viruses_left
        if left <= 0:
            return ActionResult.rejected(GameError.SETUP_EXHAUSTED)

        if kind == CardKind.LINK:
            state.links_left -= 1
        else:
            state.viruses_left -= 1
        state.placed += 1
        self.board.set(pos, Card(kind=kind, owner=player))

        if state.placed == SETUP_TOTAL:
            self.phase = Phase.setup(PlayerId.P2) if player == PlayerId.P1 else Phase.playing()
        return ActionResult.success()

    def remove_setup_card(self, player: PlayerId, pos: Position) -> ActionResult:
        error = self._setup_turn_error(player)
        if error is not None:
            return ActionResult.rejected(error)
        if not Board.in_bounds(pos):
            return ActionResult.rejected(GameError.OUT_OF_BOUNDS)
        card = self.board.get(pos)
        if card is None:
            return ActionResult.rejected(GameError.NO_CARD)
        if card.owner != player:
            return ActionResult.rejected(GameError.NOT_YOUR_CARD)

        self.board.set(pos, None)
        state = self.player(player)
        state.placed = max(0, state.placed - 1)
        if card.kind == CardKind.LINK:
            state.links_left += 1
        else:
            state.viruses_left += 1
        return ActionResult.success()

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------
    def start_move(self, origin: Position, target: Position) -> ActionResult:
        if self.pending_boost_move is not None:
            return ActionResult.rejected(GameError.PENDING_BOOST_MOVE)
        error = self.validate_move(origin, target)
        if error is not None:
            return ActionResult.rejected(error)
        return ActionResult.success(self._commit_move(origin, target, continuation=False))

    def continue_boost_move(self, origin: Position, target: Position) -> ActionResult:
        if self.pending_boost_move is None or self.pending_boost_move != origin:
            return ActionResult.rejected(GameError.NO_PENDING_BOOST_MOVE)
        error = self.validate_move(origin, target)
        if error is not None:
            return ActionResult.rejected(error)
        self.pending_boost_move = None
        return ActionResult.success(self._commit_move(origin, target, continuation=True))

    def _commit_move(self, origin: Position, target: Position, *, continuation: bool) -> MoveOutcome:
        mover = self.current_player
        card = self.board.get(origin)
        captured = self.board.get(target)

        if captured is not None:
            if captured.boosted:
                self._release_boost(captured.owner, target)
            trophy = replace(captured, revealed=True, boosted=False)
            self.player(mover).add_to_stack(trophy, StackChoice.for_kind(trophy.kind))

        self.board.set(origin, None)
        self.board.set(target, card)

        if not card.boosted:
            return MoveOutcome.TURN_ENDS

        # The slot tracks the card's cell even when the move captured.
        self._carry_boost(mover, origin, target)
        # A boost grants one extra step; the continuation never re-arms the chain.
        if captured is not None or continuation:
            return MoveOutcome.TURN_ENDS
        self.pending_boost_move = target
        return MoveOutcome.CAN_MOVE_AGAIN

    def enter_server_center(self, origin: Position, reveal: bool, stack: StackChoice) -> ActionResult:
        """Score the card standing on the opponent's exit into ``stack``.

        The stack is the caller's choice and need not match the card's kind.
        """
        if not self.phase.is_playing:
            return ActionResult.rejected(GameError.NOT_IN_PLAYING_PHASE)
        if self.pending_boost_move is not None:
            return ActionResult.rejected(GameError.CANNOT_ENTER_SERVER_WITH_BOOST)
        if not Board.in_bounds(origin):
            return ActionResult.rejected(GameError.OUT_OF_BOUNDS)
        card = self.board.get(origin)
        if card is None:
            return ActionResult.rejected(GameError.NO_CARD)
        mover = self.current_player
        if card.owner != mover:
            return ActionResult.rejected(GameError.NOT_YOUR_CARD)
        if exit_owner(origin) != mover.opponent():
            return ActionResult.rejected(GameError.NOT_ON_OPPONENT_EXIT)

        if card.boosted:
            self._release_boost(mover, origin)
        self.board.set(origin, None)
        scored = replace(card, boosted=False, revealed=card.revealed or reveal)
        self.player(mover).add_to_stack(scored, stack)
        return ActionResult.success()

    # ------------------------------------------------------------------
    # Terminal cards
    # ------------------------------------------------------------------
    def _terminal_error(self, index: int, *positions: Position) -> Optional[GameError]:
        if not self.phase.is_playing:
            return GameError.NOT_IN_PLAYING_PHASE
        if self.pending_boost_move is not None:
            return GameError.PENDING_BOOST_MOVE
        if not 0 <= index < TERMINAL_SLOTS:
            return GameError.INVALID_TARGET
        if not all(Board.in_bounds(pos) for pos in positions):
            return GameError.OUT_OF_BOUNDS
        return None

    def use_line_boost_attach(self, index: int, pos: Position) -> ActionResult:
        error = self._terminal_error(index, pos)
        if error is not None:
            return ActionResult.rejected(error)
        card = self.board.get(pos)
        if card is None:
            return ActionResult.rejected(GameError.NO_CARD)
        player = self.current_player
        if card.owner != player:
            return ActionResult.rejected(GameError.NOT_YOUR_CARD)
        state = self.player(player)
        holder = state.boost_slot_at(pos)
        if holder is not None and holder != index:
            return ActionResult.rejected(GameError.INVALID_TARGET)

        previous = state.line_boosts[index]
        state.line_boosts[index] = pos
        if previous is not None and previous != pos:
            self._sync_boost_flag(player, previous)
        self._sync_boost_flag(player, pos)
        return ActionResult.success()

    def use_line_boost_detach(self, index: int) -> ActionResult:
        error = self._terminal_error(index)
        if error is not None:
            return ActionResult.rejected(error)
        player = self.current_player
        state = self.player(player)
        pos = state.line_boosts[index]
        if pos is None:
            return ActionResult.rejected(GameError.INVALID_TARGET)

        state.line_boosts[index] = None
        self._sync_boost_flag(player, pos)
        return ActionResult.success()

    def use_virus_check(self, index: int, pos: Position) -> ActionResult:
        error = self._terminal_error(index, pos)
        if error is not None:
            return ActionResult.rejected(error)
        player = self.current_player
        state = self.player(player)
        if state.virus_checks_used[index]:
            return ActionResult.rejected(GameError.TERMINAL_CARD_USED)
        card = self.board.get(pos)
        if card is None:
            return ActionResult.rejected(GameError.NO_CARD)
        if card.owner == player or card.revealed:
            return ActionResult.rejected(GameError.INVALID_TARGET)

        self.board.set(pos, replace(card, revealed=True))
        state.virus_checks_used[index] = True
        return ActionResult.success()

    def use_firewall_place(self, index: int, pos: Position) -> ActionResult:
        error = self._terminal_error(index, pos)
        if error is not None:
            return ActionResult.rejected(error)
        if is_exit(pos):
            return ActionResult.rejected(GameError.FIREWALL_ON_EXIT)
        player = self.current_player
        state = self.player(player)
        if state.firewalls[index] is not None or self.board.firewall_owner(pos) is not None:
            return ActionResult.rejected(GameError.INVALID_TARGET)

        state.firewalls[index] = pos
        self.board.set_firewall(pos, player)
        return ActionResult.success()

    def use_firewall_remove(self, index: int) -> ActionResult:
        error = self._terminal_error(index)
        if error is not None:
            return ActionResult.rejected(error)
        state = self.player(self.current_player)
        pos = state.firewalls[index]
        state.firewalls[index] = None
        if pos is not None:
            self.board.set_firewall(pos, None)
        return ActionResult.success()

    def use_404(self, index: int, first: Position, second: Position, swap: bool) -> ActionResult:
        """Hide two own cards again, optionally exchanging their cells.

        A line boost follows its card through the exchange; the boosted flag
        of both cells is then recomputed from the slots.
        """
        error = self._terminal_error(index, first, second)
        if error is not None:
            return ActionResult.rejected(error)
        player = self.current_player
        state = self.player(player)
        if state.not_found_used[index]:
            return ActionResult.rejected(GameError.TERMINAL_CARD_USED)
        if first == second:
            return ActionResult.rejected(GameError.INVALID_TARGET)
        card_a = self.board.get(first)
        card_b = self.board.get(second)
        if card_a is None or card_b is None:
            return ActionResult.rejected(GameError.NO_CARD)
        if card_a.owner != player or card_b.owner != player:
            return ActionResult.rejected(GameError.NOT_YOUR_CARD)

        card_a = replace(card_a, revealed=False)
        card_b = replace(card_b, revealed=False)
        if swap:
            self.board.set(first, card_b)
            self.board.set(second, card_a)
            state.line_boosts = [_swapped(slot, first, second) for slot in state.line_boosts]
        else:
            self.board.set(first, card_a)
            self.board.set(second, card_b)

        self._sync_boost_flag(player, first)
        self._sync_boost_flag(player, second)
        state.not_found_used[index] = True
        return ActionResult.success()

    # ------------------------------------------------------------------
    # Turn handling
    # ------------------------------------------------------------------
    def end_turn(self) -> ActionResult:
        if not self.phase.is_playing:
            return ActionResult.success()
        self.pending_boost_move = None
        winner = self.check_winner()
        if winner is not None:
            self.phase = Phase.game_over(winner)
            return ActionResult.success()
        self.current_player = self.current_player.opponent()
        return ActionResult.success()

    # ------------------------------------------------------------------
    # Line boost bookkeeping
    # ------------------------------------------------------------------
    def _release_boost(self, player: PlayerId, pos: Position) -> None:
        state = self.player(player)
        state.line_boosts = [None if slot == pos else slot for slot in state.line_boosts]
        self._sync_boost_flag(player, pos)

    def _carry_boost(self, player: PlayerId, origin: Position, target: Position) -> None:
        state = self.player(player)
        state.line_boosts = [target if slot == origin else slot for slot in state.line_boosts]

    def _sync_boost_flag(self, player: PlayerId, pos: Position) -> None:
        card = self.board.get(pos)
        if card is None or card.owner != player:
            return
        attached = self.player(player).boost_slot_at(pos) is not None
        if card.boosted != attached:
            self.board.set(pos, replace(card, boosted=attached))

    def __repr__(self) -> str:
        return (
            f"GameState(phase={self.phase.kind.value}, current={self.current_player.name}, "
            f"pending={self.pending_boost_move})\n{self.board!r}"
        )


def _swapped(slot: Optional[Position], first: Position, second: Position) -> Optional[Position]:
    if slot == first:
        return second
    if slot == second:
        return first
    return slot

