from rainet.core import Board, Card, CardKind, PlayerId, Position, exit_owner, is_exit


def test_in_bounds_rejects_edges_and_negatives():
    assert Board.in_bounds(Position(0, 0))
    assert Board.in_bounds(Position(7, 7))
    assert not Board.in_bounds(Position(8, 0))
    assert not Board.in_bounds(Position(0, 8))
    assert not Board.in_bounds(Position(-1, 3))


def test_set_and_ownership_queries():
    board = Board()
    pos = Position(2, 5)
    assert board.get(pos) is None
    board.set(pos, Card(CardKind.VIRUS, PlayerId.P2))

    assert board.get(pos).kind == CardKind.VIRUS
    assert board.has_own_card(pos, PlayerId.P2)
    assert board.has_opponent_card(pos, PlayerId.P1)
    assert not board.has_own_card(pos, PlayerId.P1)
    assert not board.has_opponent_card(Position(0, 0), PlayerId.P1)


def test_card_and_firewall_share_a_cell():
    board = Board()
    pos = Position(4, 4)
    board.set(pos, Card(CardKind.LINK, PlayerId.P1))
    board.set_firewall(pos, PlayerId.P1)

    assert board.firewall_owner(pos) == PlayerId.P1
    assert board.get(pos).owner == PlayerId.P1
    assert list(board.firewall_cells()) == [(pos, PlayerId.P1)]

    board.set_firewall(pos, None)
    assert board.firewall_owner(pos) is None


def test_copy_is_independent():
    board = Board()
    board.set(Position(1, 1), Card(CardKind.LINK, PlayerId.P1))
    clone = board.copy()
    clone.set(Position(1, 1), None)
    clone.set_firewall(Position(3, 3), PlayerId.P2)

    assert board.get(Position(1, 1)) is not None
    assert board.firewall_owner(Position(3, 3)) is None


def test_exit_cells():
    assert exit_owner(Position(0, 3)) == PlayerId.P1
    assert exit_owner(Position(0, 4)) == PlayerId.P1
    assert exit_owner(Position(7, 3)) == PlayerId.P2
    assert exit_owner(Position(7, 4)) == PlayerId.P2
    assert exit_owner(Position(0, 2)) is None
    assert is_exit(Position(7, 4))
    assert not is_exit(Position(6, 4))
