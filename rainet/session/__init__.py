from .config import MatchConfig, load_match_config
from .match import BAD_OP, NOT_YOUR_TURN, Match, MatchFullError, MatchReply

__all__ = [
    "BAD_OP",
    "NOT_YOUR_TURN",
    "Match",
    "MatchConfig",
    "MatchFullError",
    "MatchReply",
    "load_match_config",
]
