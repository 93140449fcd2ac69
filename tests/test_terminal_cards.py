from rainet.core import (
    Card,
    CardKind,
    GameError,
    GameState,
    Phase,
    PlayerId,
    Position,
    initialize_game_state,
)

P1 = PlayerId.P1
P2 = PlayerId.P2


def playing_state() -> GameState:
    state = initialize_game_state()
    state.phase = Phase.playing()
    return state


def put(state: GameState, row: int, col: int, owner: PlayerId, kind: CardKind = CardKind.LINK, **flags) -> Position:
    pos = Position(row, col)
    state.board.set(pos, Card(kind, owner, **flags))
    return pos


def test_line_boost_attach_and_detach():
    state = playing_state()
    pos = put(state, 2, 2, P1)

    assert state.use_line_boost_attach(1, pos).ok
    assert state.player(P1).line_boosts == [None, pos]
    assert state.board.get(pos).boosted

    assert state.use_line_boost_detach(1).ok
    assert state.player(P1).line_boosts == [None, None]
    assert not state.board.get(pos).boosted
    assert state.use_line_boost_detach(1).error == GameError.INVALID_TARGET


def test_line_boost_attach_requires_own_card():
    state = playing_state()
    theirs = put(state, 5, 5, P2)
    assert state.use_line_boost_attach(0, theirs).error == GameError.NOT_YOUR_CARD
    assert state.use_line_boost_attach(0, Position(4, 4)).error == GameError.NO_CARD
    assert state.use_line_boost_attach(2, theirs).error == GameError.INVALID_TARGET
    assert state.use_line_boost_attach(0, Position(4, 8)).error == GameError.OUT_OF_BOUNDS


def test_reattaching_a_slot_moves_the_boost():
    state = playing_state()
    first = put(state, 2, 2, P1)
    second = put(state, 2, 3, P1)
    assert state.use_line_boost_attach(0, first).ok

    assert state.use_line_boost_attach(0, second).ok
    assert state.player(P1).line_boosts == [second, None]
    assert not state.board.get(first).boosted
    assert state.board.get(second).boosted

    assert state.use_line_boost_attach(1, second).error == GameError.INVALID_TARGET


def test_virus_check_reveals_once_per_slot():
    state = playing_state()
    target = put(state, 5, 5, P2, CardKind.VIRUS)
    other = put(state, 5, 6, P2, CardKind.LINK)

    assert state.use_virus_check(0, target).ok
    assert state.board.get(target).revealed
    assert bool(state.player(P1).virus_checks_used[0])

    assert state.use_virus_check(0, other).error == GameError.TERMINAL_CARD_USED
    assert not state.board.get(other).revealed
    assert state.use_virus_check(1, other).ok


def test_virus_check_targets_hidden_opponent_cards_only():
    state = playing_state()
    mine = put(state, 2, 2, P1)
    seen = put(state, 5, 5, P2, revealed=True)

    assert state.use_virus_check(0, mine).error == GameError.INVALID_TARGET
    assert state.use_virus_check(0, seen).error == GameError.INVALID_TARGET
    assert state.use_virus_check(0, Position(4, 4)).error == GameError.NO_CARD
    assert not state.player(P1).virus_checks_used.any()


def test_firewall_place_and_remove():
    state = playing_state()
    pos = Position(4, 4)

    assert state.use_firewall_place(0, pos).ok
    assert state.player(P1).firewalls == [pos, None]
    assert state.board.firewall_owner(pos) == P1

    assert state.use_firewall_place(0, Position(4, 5)).error == GameError.INVALID_TARGET
    assert state.use_firewall_place(1, pos).error == GameError.INVALID_TARGET

    assert state.use_firewall_remove(0).ok
    assert state.player(P1).firewalls == [None, None]
    assert state.board.firewall_owner(pos) is None
    # Removing an empty slot is harmless.
    assert state.use_firewall_remove(0).ok


def test_firewall_cannot_go_on_exit():
    state = playing_state()
    for pos in (Position(0, 3), Position(7, 4)):
        assert state.use_firewall_place(0, pos).error == GameError.FIREWALL_ON_EXIT
    assert state.use_firewall_place(0, Position(8, 4)).error == GameError.OUT_OF_BOUNDS
    assert state.player(P1).firewalls == [None, None]


def test_404_swap_moves_boost_with_card():
    state = playing_state()
    first = put(state, 1, 0, P1, CardKind.LINK, revealed=True)
    second = put(state, 1, 1, P1, CardKind.VIRUS, revealed=True)
    assert state.use_line_boost_attach(0, first).ok

    assert state.use_404(0, first, second, True).ok

    moved = state.board.get(second)
    stayed = state.board.get(first)
    assert moved.kind == CardKind.LINK
    assert stayed.kind == CardKind.VIRUS
    assert moved.boosted
    assert not stayed.boosted
    assert not moved.revealed and not stayed.revealed
    assert state.player(P1).line_boosts[0] == second
    assert bool(state.player(P1).not_found_used[0])


def test_404_without_swap_only_hides():
    state = playing_state()
    first = put(state, 1, 0, P1, CardKind.LINK, revealed=True)
    second = put(state, 1, 1, P1, CardKind.VIRUS)
    assert state.use_line_boost_attach(1, first).ok

    assert state.use_404(1, first, second, False).ok
    assert state.board.get(first).kind == CardKind.LINK
    assert state.board.get(first).boosted
    assert not state.board.get(first).revealed
    assert not state.board.get(second).boosted

    assert state.use_404(1, first, second, True).error == GameError.TERMINAL_CARD_USED


def test_404_rejections():
    state = playing_state()
    mine = put(state, 1, 0, P1)
    theirs = put(state, 6, 0, P2)

    assert state.use_404(0, mine, theirs, True).error == GameError.NOT_YOUR_CARD
    assert state.use_404(0, mine, Position(3, 3), True).error == GameError.NO_CARD
    assert state.use_404(0, mine, mine, True).error == GameError.INVALID_TARGET
    assert state.use_404(0, mine, Position(9, 9), True).error == GameError.OUT_OF_BOUNDS
    assert state.use_404(-1, mine, theirs, True).error == GameError.INVALID_TARGET
    assert not state.player(P1).not_found_used.any()


def test_terminal_cards_act_for_current_player():
    state = playing_state()
    state.current_player = P2
    mine = put(state, 6, 6, P2)
    assert state.use_line_boost_attach(0, mine).ok
    assert state.player(P2).line_boosts[0] == mine
    assert state.player(P1).line_boosts == [None, None]
