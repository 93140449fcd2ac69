import numpy as np
import pytest

from rainet import RaiNetEnv
from rainet.core import (
    ACTION_VECTOR_SIZE,
    END_TURN_ACTION,
    Card,
    CardKind,
    Move,
    Phase,
    PlayerId,
    Position,
    encode_move,
    enumerate_legal_moves,
    initialize_game_state,
)
from rainet.features import HIDDEN_OPPONENT, OPP_LINK, OPP_VIRUS


def test_reset_returns_valid_observation():
    env = RaiNetEnv()
    obs, info = env.reset(seed=0)

    assert obs["board"].shape == (12, 8, 8)
    assert obs["aux"].shape == (25,)
    assert info["legal_action_mask"].shape == (ACTION_VECTOR_SIZE,)
    assert info["current_player"] == PlayerId.P1
    assert env.observation_space.contains(obs)


def test_reset_deals_full_hidden_setup():
    env = RaiNetEnv()
    obs, _ = env.reset(seed=3)
    assert obs["board"][HIDDEN_OPPONENT].sum() == 8
    assert obs["board"][OPP_LINK].sum() == 0
    assert obs["board"][OPP_VIRUS].sum() == 0
    for player in PlayerId:
        state = env._state.player(player)
        assert state.placed == 8
        assert state.links_left == state.viruses_left == 0


def test_seeded_reset_is_reproducible():
    first, _ = RaiNetEnv().reset(seed=11)
    second, _ = RaiNetEnv().reset(seed=11)
    np.testing.assert_array_equal(first["board"], second["board"])


def test_legal_mask_matches_enumeration():
    env = RaiNetEnv()
    env.reset(seed=1)
    mask = env.legal_action_mask()
    legal = enumerate_legal_moves(env._state)
    assert np.count_nonzero(mask) == len(legal)
    for move in legal:
        assert mask[encode_move(move)] == 1
    assert mask[END_TURN_ACTION] == 0


def test_step_passes_turn():
    env = RaiNetEnv()
    obs, info = env.reset(seed=2)
    action = int(np.flatnonzero(info["legal_action_mask"])[0])

    next_obs, reward, terminated, truncated, next_info = env.step(action)

    assert reward == 0.0
    assert not terminated
    assert not truncated
    assert next_info["current_player"] == PlayerId.P2
    assert next_obs["aux"][0] == 1.0


def test_illegal_actions_raise():
    env = RaiNetEnv()
    _, info = env.reset(seed=4)
    illegal = int(np.flatnonzero(info["legal_action_mask"] == 0)[0])
    with pytest.raises(ValueError):
        env.step(illegal)
    with pytest.raises(ValueError):
        env.step(ACTION_VECTOR_SIZE)


def test_truncates_after_max_turns():
    env = RaiNetEnv(max_turns=1)
    _, info = env.reset(seed=5)
    action = int(np.flatnonzero(info["legal_action_mask"])[0])
    _, _, terminated, truncated, _ = env.step(action)
    assert not terminated
    assert truncated


def test_entering_server_wins_for_p1():
    env = RaiNetEnv()
    env.reset(seed=6)
    state = initialize_game_state()
    state.phase = Phase.playing()
    state.player1.link_stack = [Card(CardKind.LINK, PlayerId.P2, revealed=True) for _ in range(3)]
    state.board.set(Position(7, 3), Card(CardKind.LINK, PlayerId.P1))
    env._state = state

    mask = env.legal_action_mask()
    assert mask[258] == 1
    _, reward, terminated, truncated, info = env.step(258)
    assert terminated and not truncated
    assert reward == 1.0
    assert not info["legal_action_mask"].any()


def test_pending_boost_allows_end_turn():
    env = RaiNetEnv()
    env.reset(seed=7)
    state = initialize_game_state()
    state.phase = Phase.playing()
    state.board.set(Position(3, 3), Card(CardKind.LINK, PlayerId.P1, boosted=True))
    state.player1.line_boosts[0] = Position(3, 3)
    state.board.set(Position(5, 5), Card(CardKind.LINK, PlayerId.P2))
    env._state = state

    env.step(encode_move_from(3, 3, 4, 3))
    assert env._state.current_player == PlayerId.P1
    mask = env.legal_action_mask()
    assert mask[END_TURN_ACTION] == 1
    assert mask[encode_move_from(4, 3, 5, 3)] == 1
    assert mask[encode_move_from(5, 5, 5, 4)] == 0

    env.step(END_TURN_ACTION)
    assert env._state.current_player == PlayerId.P2
    assert env._state.pending_boost_move is None


def test_render_ansi():
    env = RaiNetEnv(render_mode="ansi")
    env.reset(seed=8)
    rows = env.render().splitlines()
    assert len(rows) == 8
    assert all(len(row) == 8 for row in rows)
    assert rows[3] == "........"


def encode_move_from(r0, c0, r1, c1):
    return encode_move(Move(Position(r0, c0), Position(r1, c1)))
