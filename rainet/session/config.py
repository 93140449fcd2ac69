from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml


@dataclass
class MatchConfig:
    player_names: Tuple[str, str] = ("P1", "P2")
    check_invariants: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown match config keys: {sorted(unknown)}")
        kwargs = dict(data)
        if "player_names" in kwargs:
            names = tuple(str(name) for name in kwargs["player_names"])
            if len(names) != 2:
                raise ValueError("player_names must list exactly two names.")
            kwargs["player_names"] = names
        if "check_invariants" in kwargs:
            kwargs["check_invariants"] = bool(kwargs["check_invariants"])
        return cls(**kwargs)


def load_match_config(path: Optional[Union[str, Path]]) -> MatchConfig:
    if path is None:
        return MatchConfig()
    path = Path(path)
    if not path.exists():
        return MatchConfig()
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return MatchConfig.from_dict(data.get("match", data))
