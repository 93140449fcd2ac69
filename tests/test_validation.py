from dataclasses import replace

import pytest

from rainet.core import Card, CardKind, Phase, PlayerId, Position, initialize_game_state
from rainet.validation import (
    InvariantViolation,
    check_boost_slots,
    check_card_conservation,
    check_firewalls,
    check_invariants,
    check_setup_counters,
)

P1 = PlayerId.P1
P2 = PlayerId.P2


def set_up_game():
    state = initialize_game_state()
    kinds = [CardKind.LINK, CardKind.VIRUS] * 4
    for player in PlayerId:
        for pos, kind in zip(player.setup_positions(), kinds):
            assert state.place_setup_card(player, pos, kind).ok
    assert state.phase == Phase.playing()
    return state


def test_fresh_and_set_up_games_pass():
    check_invariants(initialize_game_state())
    check_invariants(set_up_game())


def test_engine_sequence_keeps_invariants():
    state = set_up_game()
    steps = [
        lambda: state.use_line_boost_attach(0, Position(1, 3)),
        state.end_turn,
        lambda: state.use_firewall_place(0, Position(3, 3)),
        state.end_turn,
        lambda: state.start_move(Position(1, 3), Position(2, 3)),
        lambda: state.continue_boost_move(Position(2, 3), Position(2, 2)),
        state.end_turn,
        lambda: state.use_virus_check(0, Position(2, 2)),
        state.end_turn,
        lambda: state.use_404(0, Position(2, 2), Position(1, 4), True),
        state.end_turn,
    ]
    for step in steps:
        assert step().ok
        check_invariants(state)
    assert state.player1.line_boosts[0] == Position(1, 4)
    assert state.board.get(Position(1, 4)).boosted


def test_stale_boost_flag_is_reported():
    state = set_up_game()
    pos = Position(1, 3)
    state.board.set(pos, replace(state.board.get(pos), boosted=True))
    with pytest.raises(InvariantViolation):
        check_boost_slots(state)


def test_boost_slot_on_opponent_card_is_reported():
    state = set_up_game()
    state.player1.line_boosts[1] = Position(6, 3)
    with pytest.raises(InvariantViolation):
        check_boost_slots(state)


def test_firewall_grid_mismatch_is_reported():
    state = set_up_game()
    state.board.set_firewall(Position(4, 4), P2)
    with pytest.raises(InvariantViolation):
        check_firewalls(state)


def test_setup_counters_must_add_up():
    state = initialize_game_state()
    state.player1.links_left = 5
    with pytest.raises(InvariantViolation):
        check_setup_counters(state)


def test_lost_card_is_reported():
    state = set_up_game()
    state.board.set(Position(7, 0), None)
    with pytest.raises(InvariantViolation):
        check_card_conservation(state)
    state.player1.link_stack.append(Card(CardKind.LINK, P2, revealed=True))
    check_card_conservation(state)


def test_pending_boost_outside_play_is_reported():
    state = initialize_game_state()
    state.pending_boost_move = Position(1, 3)
    with pytest.raises(InvariantViolation):
        check_invariants(state)
