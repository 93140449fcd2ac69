"""Rai-Net rules engine and its surrounding tooling."""

from . import core, env, features, protocol, session, validation
from .core import (
    ActionResult,
    Card,
    CardKind,
    GameError,
    GameState,
    MoveOutcome,
    Phase,
    PlayerId,
    Position,
    StackChoice,
    initialize_game_state,
)
from .env import RaiNetEnv
from .features import (
    AUX_VECTOR_SIZE,
    BOARD_CHANNELS,
    build_aux_vector,
    build_board_tensor,
    state_to_numpy,
    state_to_torch,
)
from .protocol import ProtocolError, encode_state, parse_op, parse_state
from .session import Match, MatchConfig, MatchReply, load_match_config
from .validation import InvariantViolation, check_invariants

__all__ = [
    "core",
    "env",
    "features",
    "protocol",
    "session",
    "validation",
    "ActionResult",
    "Card",
    "CardKind",
    "GameError",
    "GameState",
    "MoveOutcome",
    "Phase",
    "PlayerId",
    "Position",
    "StackChoice",
    "initialize_game_state",
    "RaiNetEnv",
    "AUX_VECTOR_SIZE",
    "BOARD_CHANNELS",
    "build_aux_vector",
    "build_board_tensor",
    "state_to_numpy",
    "state_to_torch",
    "ProtocolError",
    "encode_state",
    "parse_op",
    "parse_state",
    "Match",
    "MatchConfig",
    "MatchReply",
    "load_match_config",
    "InvariantViolation",
    "check_invariants",
]
