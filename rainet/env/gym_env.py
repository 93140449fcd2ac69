from __future__ import annotations

from typing import Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from rainet.core import (
    ACTION_VECTOR_SIZE,
    BOARD_SIZE,
    END_TURN_ACTION,
    ActionKind,
    ActionResult,
    ActionVector,
    CardKind,
    MoveOutcome,
    PlayerId,
    Position,
    StackChoice,
    decode_action,
    encode_move,
    enumerate_legal_moves,
    enumerate_server_entries,
    exit_owner,
    initialize_game_state,
)
from rainet.features import (
    AUX_VECTOR_SIZE,
    BOARD_CHANNELS,
    build_aux_vector,
    build_board_tensor,
)


class RaiNetEnv(gym.Env):
    """Self-play environment over the playing phase.

    Both sides act through the same env; observations are always built for
    the player to move, so hidden opponent cards stay hidden. Terminal cards
    are not part of the action space.
    """

    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(
        self,
        *,
        max_turns: int = 400,
        enforce_legal_actions: bool = True,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._max_turns = max_turns
        self._enforce_legal = enforce_legal_actions
        self.render_mode = render_mode

        board_shape = (BOARD_CHANNELS, BOARD_SIZE, BOARD_SIZE)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0.0, high=1.0, shape=board_shape, dtype=np.float32),
                "aux": spaces.Box(low=0.0, high=1.0, shape=(AUX_VECTOR_SIZE,), dtype=np.float32),
            }
        )
        self.action_space = spaces.Discrete(ACTION_VECTOR_SIZE)

        self._state = initialize_game_state()
        self._turns = 0
        self._last_info: Dict[str, object] = {}

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        if options and "max_turns" in options:
            self._max_turns = int(options["max_turns"])
        self._state = initialize_game_state()
        self._turns = 0
        for player in PlayerId:
            self._deal_setup(player)
        observation = self._build_observation()
        info = self._build_info()
        self._last_info = info
        return observation, info

    def step(self, action_index: int):
        if not self.action_space.contains(action_index):
            raise ValueError(f"Action index {action_index} out of bounds.")

        legal_mask = self.legal_action_mask()
        if self._enforce_legal and not legal_mask[action_index]:
            raise ValueError("Illegal action provided and enforce_legal_actions=True.")

        mover = self._state.current_player
        result = self._apply(decode_action(int(action_index)))
        if not result.ok:
            raise ValueError(f"Engine rejected action {action_index}: {result.error.name}")
        if self._state.current_player != mover or self._state.is_terminal:
            self._turns += 1

        observation = self._build_observation()
        info = self._build_info()
        self._last_info = info

        reward = self._compute_reward(self._state.winner)
        terminated = self._state.is_terminal
        truncated = not terminated and self._turns >= self._max_turns

        return observation, reward, terminated, truncated, info

    def legal_action_mask(self) -> np.ndarray:
        mask = np.zeros(self.action_space.n, dtype=np.int8)
        state = self._state
        if not state.phase.is_playing:
            return mask
        for move in enumerate_legal_moves(state):
            mask[encode_move(move)] = 1
        for origin in enumerate_server_entries(state):
            mask[ActionVector.for_entry(origin).to_index()] = 1
        # Ending the turn is the boost opt-out, and the pass for a player with no move.
        if state.pending_boost_move is not None or not mask.any():
            mask[END_TURN_ACTION] = 1
        return mask

    def render(self):
        if self.render_mode != "ansi":
            raise NotImplementedError("Only 'ansi' render mode is supported.")
        return self._render_ascii()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _deal_setup(self, player: PlayerId) -> None:
        kinds = [CardKind.LINK] * 4 + [CardKind.VIRUS] * 4
        order = self.np_random.permutation(len(kinds))
        for pos, kind_index in zip(player.setup_positions(), order):
            result = self._state.place_setup_card(player, pos, kinds[int(kind_index)])
            if not result.ok:
                raise RuntimeError(f"Setup placement failed for {player.name}: {result.error.name}")

    def _apply(self, action: ActionVector) -> ActionResult:
        state = self._state
        if action.kind == ActionKind.END_TURN:
            return state.end_turn()
        if action.kind == ActionKind.ENTER:
            card = state.board.get(action.origin)
            stack = StackChoice.for_kind(card.kind) if card is not None else StackChoice.LINK
            result = state.enter_server_center(action.origin, False, stack)
            if result.ok:
                state.end_turn()
            return result

        move = action.to_move()
        if state.pending_boost_move is not None:
            result = state.continue_boost_move(move.origin, move.target)
            if result.ok:
                state.end_turn()
            return result
        result = state.start_move(move.origin, move.target)
        if result.ok and result.outcome == MoveOutcome.TURN_ENDS:
            state.end_turn()
        return result

    def _build_observation(self) -> Dict[str, np.ndarray]:
        board = build_board_tensor(self._state)
        aux = build_aux_vector(self._state)
        return {"board": board, "aux": aux}

    def _build_info(self) -> Dict[str, object]:
        return {
            "legal_action_mask": self.legal_action_mask(),
            "current_player": self._state.current_player,
        }

    def _compute_reward(self, winner: Optional[PlayerId]) -> float:
        if winner == PlayerId.P1:
            return 1.0
        if winner == PlayerId.P2:
            return -1.0
        return 0.0

    def _render_ascii(self) -> str:
        rows = []
        for r in range(BOARD_SIZE):
            row = []
            for c in range(BOARD_SIZE):
                card = self._state.board.cards[r, c]
                if card is not None:
                    symbol = card.kind.value
                    row.append(symbol if card.owner == PlayerId.P1 else symbol.lower())
                elif self._state.board.firewalls[r, c]:
                    row.append("#")
                elif exit_owner(Position(r, c)) is not None:
                    row.append("*")
                else:
                    row.append(".")
            rows.append("".join(row))
        return "\n".join(rows)
