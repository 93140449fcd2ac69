from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import torch

from rainet.core import (
    BOARD_SIZE,
    EXIT_CELLS,
    WIN_THRESHOLD,
    CardKind,
    GameState,
    PhaseKind,
    PlayerId,
    PlayerState,
)

# Channels are relative to the viewer; the opponent's hidden cards only ever
# show up in HIDDEN_OPPONENT, never in a kind channel.
OWN_LINK = 0
OWN_VIRUS = 1
OPP_LINK = 2
OPP_VIRUS = 3
HIDDEN_OPPONENT = 4
OWN_REVEALED = 5
OWN_BOOST = 6
OPP_BOOST = 7
OWN_FIREWALL = 8
OPP_FIREWALL = 9
OWN_EXIT = 10
OPP_EXIT = 11
BOARD_CHANNELS = 12

_PHASES = (PhaseKind.SETUP, PhaseKind.PLAYING, PhaseKind.GAME_OVER)
_SLOT_FEATURES = 8  # line boosts, firewalls, virus checks, 404s; two slots each
AUX_VECTOR_SIZE = 1 + len(_PHASES) + 1 + 4 + 2 * _SLOT_FEATURES


def build_board_tensor(state: GameState, viewer: Optional[PlayerId] = None) -> np.ndarray:
    """Return a (BOARD_CHANNELS, 8, 8) channel-first tensor seen by ``viewer``.

    ``viewer`` defaults to the player to move.
    """
    viewer = state.current_player if viewer is None else viewer
    tensor = np.zeros((BOARD_CHANNELS, BOARD_SIZE, BOARD_SIZE), dtype=np.float32)

    for pos, card in state.board.occupied():
        r, c = pos.row, pos.col
        if card.owner == viewer:
            tensor[OWN_LINK if card.kind == CardKind.LINK else OWN_VIRUS, r, c] = 1.0
            if card.revealed:
                tensor[OWN_REVEALED, r, c] = 1.0
            if card.boosted:
                tensor[OWN_BOOST, r, c] = 1.0
            continue
        if card.revealed:
            tensor[OPP_LINK if card.kind == CardKind.LINK else OPP_VIRUS, r, c] = 1.0
        else:
            tensor[HIDDEN_OPPONENT, r, c] = 1.0
        if card.boosted:
            tensor[OPP_BOOST, r, c] = 1.0

    own_firewalls = state.board.firewalls == int(viewer)
    tensor[OWN_FIREWALL][own_firewalls] = 1.0
    tensor[OPP_FIREWALL][(state.board.firewalls != 0) & ~own_firewalls] = 1.0

    for pos, owner in EXIT_CELLS.items():
        tensor[OWN_EXIT if owner == viewer else OPP_EXIT, pos.row, pos.col] = 1.0
    return tensor


def _slot_usage(player: PlayerState) -> np.ndarray:
    return np.concatenate(
        [
            np.array([slot is not None for slot in player.line_boosts], dtype=np.float32),
            np.array([slot is not None for slot in player.firewalls], dtype=np.float32),
            player.virus_checks_used.astype(np.float32),
            player.not_found_used.astype(np.float32),
        ]
    )


def build_aux_vector(state: GameState, viewer: Optional[PlayerId] = None) -> np.ndarray:
    viewer = state.current_player if viewer is None else viewer
    own = state.player(viewer)
    opponent = state.player(viewer.opponent())

    aux = np.zeros((AUX_VECTOR_SIZE,), dtype=np.float32)
    aux[0] = 1.0 if state.current_player == viewer else 0.0
    aux[1 + _PHASES.index(state.phase.kind)] = 1.0
    offset = 1 + len(_PHASES)
    aux[offset] = 1.0 if state.pending_boost_move is not None else 0.0
    offset += 1
    stacks = [len(own.link_stack), len(own.virus_stack), len(opponent.link_stack), len(opponent.virus_stack)]
    aux[offset : offset + 4] = np.minimum(np.array(stacks, dtype=np.float32) / WIN_THRESHOLD, 1.0)
    offset += 4
    aux[offset : offset + _SLOT_FEATURES] = _slot_usage(own)
    aux[offset + _SLOT_FEATURES :] = _slot_usage(opponent)
    return aux


def state_to_numpy(state: GameState, viewer: Optional[PlayerId] = None) -> Tuple[np.ndarray, np.ndarray]:
    return build_board_tensor(state, viewer), build_aux_vector(state, viewer)


def state_to_torch(
    state: GameState,
    viewer: Optional[PlayerId] = None,
    *,
    device: Optional[torch.device] = None,
    dtype: torch.dtype = torch.float32,
) -> Tuple[torch.Tensor, torch.Tensor]:
    board_np, aux_np = state_to_numpy(state, viewer)
    board = torch.from_numpy(board_np).to(device=device, dtype=dtype)
    aux = torch.from_numpy(aux_np).to(device=device, dtype=dtype)
    return board, aux
