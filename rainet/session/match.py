from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from rainet.core import (
    ActionResult,
    GameError,
    GameState,
    MoveOutcome,
    PlayerId,
    Position,
    initialize_game_state,
)
from rainet.protocol import (
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
)
from rainet.validation import check_invariants

from .config import MatchConfig

logger = logging.getLogger(__name__)

NOT_YOUR_TURN = "NOT_YOUR_TURN"
BAD_OP = "BAD_OP"


class MatchFullError(RuntimeError):
    pass


@dataclass(frozen=True)
class MatchReply:
    """What the transport should do after an operation.

    ``broadcast`` goes to every participant; ``reply`` only to the sender.
    """

    broadcast: Optional[str] = None
    reply: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_code is None


class Match:
    """One exclusively owned game, with every operation serialized by a lock."""

    def __init__(self, config: Optional[MatchConfig] = None) -> None:
        self.config = config or MatchConfig()
        self.game: GameState = initialize_game_state()
        self.names: List[str] = list(self.config.player_names)
        self.seats: Dict[PlayerId, str] = {}
        self._lock = threading.Lock()

    def join(self, name: str) -> PlayerId:
        name = "_".join(name.split()) or "anonymous"
        with self._lock:
            for player in PlayerId:
                if player not in self.seats:
                    self.seats[player] = name
                    self.names[int(player) - 1] = name
                    logger.info("hello %s -> %s", name, player.name)
                    return player
        raise MatchFullError(f"match already has two players; {name} cannot join")

    def snapshot(self) -> str:
        with self._lock:
            return encode_state(self.game, self.names)

    def apply(self, player: PlayerId, op: Union[Op, str]) -> MatchReply:
        if isinstance(op, str):
            try:
                op = parse_op(op)
            except ProtocolError as exc:
                logger.info("unparsable op from %s: %s", player.name, exc)
                return MatchReply(reply=encode_error(BAD_OP), error_code=BAD_OP)

        with self._lock:
            logger.info("op %s by %s", encode_op(op), player.name)
            game = self.game
            if game.phase.is_playing and player != game.current_player:
                logger.info("rejected %s: %s is not to move", encode_op(op), player.name)
                return MatchReply(reply=encode_error(NOT_YOUR_TURN), error_code=NOT_YOUR_TURN)

            result = self._dispatch(player, op)
            if not result.ok:
                logger.info("rejected %s by %s: %s", encode_op(op), player.name, result.error.name)
                return MatchReply(reply=encode_error(result.error), error_code=result.error.name)

            if self.config.check_invariants:
                check_invariants(game)
            if game.is_terminal:
                logger.info("game over, winner %s", game.winner.name)
            return MatchReply(broadcast=encode_state(game, self.names))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _dispatch(self, player: PlayerId, op: Op) -> ActionResult:
        game = self.game
        if isinstance(op, SetupOp):
            return game.place_setup_card(player, op.pos, op.kind)
        if isinstance(op, RemoveOp):
            return game.remove_setup_card(player, op.pos)
        if isinstance(op, EndTurnOp):
            return game.end_turn()
        if isinstance(op, MoveOp):
            result = game.start_move(op.origin, op.target)
            if result.ok and result.outcome == MoveOutcome.TURN_ENDS:
                game.end_turn()
            return result
        if isinstance(op, BoostOp):
            return self._then_end_turn(game.continue_boost_move(op.origin, op.target))
        if isinstance(op, EnterOp):
            return self._then_end_turn(game.enter_server_center(op.origin, op.reveal, op.stack))

        state = game.player(player)
        if isinstance(op, LineBoostAttachOp):
            index = _slot_holding(state.line_boosts, op.pos)
            if index is None:
                index = _first_free(state.line_boosts)
            return self._then_end_turn(game.use_line_boost_attach(index, op.pos))
        if isinstance(op, LineBoostDetachOp):
            index = _slot_holding(state.line_boosts, op.pos)
            if index is None:
                return ActionResult.rejected(GameError.INVALID_TARGET)
            return self._then_end_turn(game.use_line_boost_detach(index))
        if isinstance(op, VirusCheckOp):
            index = _first_unused(state.virus_checks_used)
            return self._then_end_turn(game.use_virus_check(index, op.pos))
        if isinstance(op, FirewallPlaceOp):
            index = _first_free(state.firewalls)
            return self._then_end_turn(game.use_firewall_place(index, op.pos))
        if isinstance(op, FirewallRemoveOp):
            index = _slot_holding(state.firewalls, op.pos)
            if index is None:
                return ActionResult.rejected(GameError.INVALID_TARGET)
            return self._then_end_turn(game.use_firewall_remove(index))
        if isinstance(op, NotFoundOp):
            index = _first_unused(state.not_found_used)
            return self._then_end_turn(game.use_404(index, op.first, op.second, op.swap))
        raise TypeError(f"unsupported operation {op!r}")

    def _then_end_turn(self, result: ActionResult) -> ActionResult:
        if result.ok:
            self.game.end_turn()
        return result


def _slot_holding(slots: List[Optional[Position]], pos: Position) -> Optional[int]:
    for index, slot in enumerate(slots):
        if slot == pos:
            return index
    return None


def _first_free(slots: List[Optional[Position]]) -> int:
    for index, slot in enumerate(slots):
        if slot is None:
            return index
    return 0


def _first_unused(flags) -> int:
    for index, used in enumerate(flags):
        if not used:
            return index
    return 0
