"""Viewer-relative observation tensors."""

from .observation import (
    AUX_VECTOR_SIZE,
    BOARD_CHANNELS,
    HIDDEN_OPPONENT,
    OPP_LINK,
    OPP_VIRUS,
    OWN_BOOST,
    OWN_LINK,
    OWN_VIRUS,
    build_aux_vector,
    build_board_tensor,
    state_to_numpy,
    state_to_torch,
)

__all__ = [
    "AUX_VECTOR_SIZE",
    "BOARD_CHANNELS",
    "HIDDEN_OPPONENT",
    "OPP_LINK",
    "OPP_VIRUS",
    "OWN_BOOST",
    "OWN_LINK",
    "OWN_VIRUS",
    "build_aux_vector",
    "build_board_tensor",
    "state_to_numpy",
    "state_to_torch",
]
