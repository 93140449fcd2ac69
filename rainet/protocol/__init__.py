"""Text wire format shared by servers and remote clients."""

from .codec import (
    BoostOp,
    EndTurnOp,
    EnterOp,
    FirewallPlaceOp,
    FirewallRemoveOp,
    LineBoostAttachOp,
    LineBoostDetachOp,
    MoveOp,
    NotFoundOp,
    Op,
    ProtocolError,
    RemoveOp,
    SetupOp,
    VirusCheckOp,
    encode_error,
    encode_op,
    encode_state,
    parse_op,
    parse_state,
)

__all__ = [
    "BoostOp",
    "EndTurnOp",
    "EnterOp",
    "FirewallPlaceOp",
    "FirewallRemoveOp",
    "LineBoostAttachOp",
    "LineBoostDetachOp",
    "MoveOp",
    "NotFoundOp",
    "Op",
    "ProtocolError",
    "RemoveOp",
    "SetupOp",
    "VirusCheckOp",
    "encode_error",
    "encode_op",
    "encode_state",
    "parse_op",
    "parse_state",
]
