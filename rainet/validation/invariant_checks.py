from __future__ import annotations

from rainet.core import (
    SETUP_TOTAL,
    Board,
    GameState,
    PlayerId,
    is_exit,
)


class InvariantViolation(ValueError):
    pass


def check_boost_slots(state: GameState) -> None:
    for player in PlayerId:
        slots = [slot for slot in state.player(player).line_boosts if slot is not None]
        if len(set(slots)) != len(slots):
            raise InvariantViolation(f"{player.name} has two line boosts on one cell")
        for slot in slots:
            card = state.board.get(slot) if Board.in_bounds(slot) else None
            if card is None or card.owner != player:
                raise InvariantViolation(f"{player.name} line boost at {slot.as_tuple()} has no own card")
    for pos, card in state.board.occupied():
        attached = pos in state.player(card.owner).line_boosts
        if card.boosted != attached:
            raise InvariantViolation(f"boost flag out of sync at {pos.as_tuple()}")


def check_firewalls(state: GameState) -> None:
    expected = {}
    for player in PlayerId:
        for slot in state.player(player).firewalls:
            if slot is None:
                continue
            if is_exit(slot):
                raise InvariantViolation(f"{player.name} firewall on exit {slot.as_tuple()}")
            expected[slot] = player
    actual = dict(state.board.firewall_cells())
    if actual != expected:
        raise InvariantViolation("firewall grid does not match firewall slots")


def check_setup_counters(state: GameState) -> None:
    for player in PlayerId:
        ps = state.player(player)
        if ps.links_left < 0 or ps.viruses_left < 0:
            raise InvariantViolation(f"{player.name} setup counters went negative")
        if ps.links_left + ps.viruses_left + ps.placed != SETUP_TOTAL:
            raise InvariantViolation(f"{player.name} setup counters do not add up")


def check_card_conservation(state: GameState) -> None:
    placed = state.player1.placed + state.player2.placed
    on_board = sum(1 for _ in state.board.occupied())
    in_stacks = sum(
        len(state.player(player).link_stack) + len(state.player(player).virus_stack)
        for player in PlayerId
    )
    if on_board + in_stacks != placed:
        raise InvariantViolation(
            f"card count mismatch: {on_board} on board + {in_stacks} in stacks != {placed} placed"
        )


def check_invariants(state: GameState) -> None:
    if state.pending_boost_move is not None and not state.phase.is_playing:
        raise InvariantViolation("boost move pending outside of play")
    check_setup_counters(state)
    check_card_conservation(state)
    check_boost_slots(state)
    check_firewalls(state)
