"""Line-oriented text codec for operations and state snapshots.

Commands arrive as ``OP ...`` lines; the full state goes out as a block of
lines framed by ``STATE_BEGIN`` / ``STATE_END``. Nothing here touches sockets.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from rainet.core import (
    BOARD_SIZE,
    Card,
    CardKind,
    GameError,
    GameState,
    Phase,
    PlayerId,
    PlayerState,
    Position,
    StackChoice,
)


class ProtocolError(ValueError):
    pass


@dataclass(frozen=True)
class SetupOp:
    kind: CardKind
    pos: Position


@dataclass(frozen=True)
class RemoveOp:
    pos: Position


@dataclass(frozen=True)
class MoveOp:
    origin: Position
    target: Position


@dataclass(frozen=True)
class BoostOp:
    origin: Position
    target: Position


@dataclass(frozen=True)
class EnterOp:
    origin: Position
    reveal: bool
    stack: StackChoice


@dataclass(frozen=True)
class LineBoostAttachOp:
    pos: Position


@dataclass(frozen=True)
class LineBoostDetachOp:
    pos: Position


@dataclass(frozen=True)
class VirusCheckOp:
    pos: Position


@dataclass(frozen=True)
class FirewallPlaceOp:
    pos: Position


@dataclass(frozen=True)
class FirewallRemoveOp:
    pos: Position


@dataclass(frozen=True)
class NotFoundOp:
    first: Position
    second: Position
    swap: bool


@dataclass(frozen=True)
class EndTurnOp:
    pass


Op = Union[
    SetupOp,
    RemoveOp,
    MoveOp,
    BoostOp,
    EnterOp,
    LineBoostAttachOp,
    LineBoostDetachOp,
    VirusCheckOp,
    FirewallPlaceOp,
    FirewallRemoveOp,
    NotFoundOp,
    EndTurnOp,
]


# ----------------------------------------------------------------------
# Token helpers
# ----------------------------------------------------------------------
class _Tokens:
    def __init__(self, line: str) -> None:
        self._line = line
        self._parts = line.split()
        self._index = 0

    def next(self) -> str:
        if self._index >= len(self._parts):
            raise ProtocolError(f"truncated line: {self._line!r}")
        token = self._parts[self._index]
        self._index += 1
        return token

    def next_int(self) -> int:
        token = self.next()
        try:
            return int(token)
        except ValueError as exc:
            raise ProtocolError(f"expected integer, got {token!r}") from exc

    def next_pos(self) -> Position:
        return Position(self.next_int(), self.next_int())

    def next_bool(self) -> bool:
        return parse_bool(self.next())


def parse_bool(token: str) -> bool:
    if token == "1":
        return True
    if token == "0":
        return False
    raise ProtocolError(f"expected 0 or 1, got {token!r}")


def parse_player(token: str) -> PlayerId:
    try:
        return PlayerId[token]
    except KeyError as exc:
        raise ProtocolError(f"unknown player {token!r}") from exc


def parse_card_kind(token: str) -> CardKind:
    try:
        return CardKind(token)
    except ValueError as exc:
        raise ProtocolError(f"unknown card kind {token!r}") from exc


def parse_stack(token: str) -> StackChoice:
    try:
        return StackChoice(token)
    except ValueError as exc:
        raise ProtocolError(f"unknown stack {token!r}") from exc


def format_pos(pos: Optional[Position]) -> str:
    return "-" if pos is None else f"{pos.row},{pos.col}"


def parse_optional_pos(token: str) -> Optional[Position]:
    if token == "-":
        return None
    row, sep, col = token.partition(",")
    if not sep:
        raise ProtocolError(f"expected row,col or -, got {token!r}")
    try:
        return Position(int(row), int(col))
    except ValueError as exc:
        raise ProtocolError(f"bad position {token!r}") from exc


def bool_num(value: bool) -> str:
    return "1" if value else "0"


# ----------------------------------------------------------------------
# Operations
# ----------------------------------------------------------------------
def parse_op(line: str) -> Op:
    tokens = _Tokens(line.strip())
    if tokens.next() != "OP":
        raise ProtocolError(f"not an operation: {line!r}")
    verb = tokens.next()
    if verb == "SETUP":
        kind = parse_card_kind(tokens.next())
        return SetupOp(kind, tokens.next_pos())
    if verb == "REMOVE":
        return RemoveOp(tokens.next_pos())
    if verb == "MOVE":
        return MoveOp(tokens.next_pos(), tokens.next_pos())
    if verb == "BOOST":
        return BoostOp(tokens.next_pos(), tokens.next_pos())
    if verb == "ENTER":
        origin = tokens.next_pos()
        reveal = tokens.next_bool()
        return EnterOp(origin, reveal, parse_stack(tokens.next()))
    if verb == "LINEBOOST":
        action = tokens.next()
        if action == "ATTACH":
            return LineBoostAttachOp(tokens.next_pos())
        if action == "DETACH":
            return LineBoostDetachOp(tokens.next_pos())
        raise ProtocolError(f"unknown LINEBOOST action {action!r}")
    if verb == "VIRUSCHECK":
        return VirusCheckOp(tokens.next_pos())
    if verb == "FIREWALL":
        action = tokens.next()
        if action == "PLACE":
            return FirewallPlaceOp(tokens.next_pos())
        if action == "REMOVE":
            return FirewallRemoveOp(tokens.next_pos())
        raise ProtocolError(f"unknown FIREWALL action {action!r}")
    if verb == "NOTFOUND":
        first = tokens.next_pos()
        second = tokens.next_pos()
        return NotFoundOp(first, second, tokens.next_bool())
    if verb == "ENDTURN":
        return EndTurnOp()
    raise ProtocolError(f"unknown operation {verb!r}")


def encode_op(op: Op) -> str:
    def pos(p: Position) -> str:
        return f"{p.row} {p.col}"

    if isinstance(op, SetupOp):
        return f"OP SETUP {op.kind.value} {pos(op.pos)}"
    if isinstance(op, RemoveOp):
        return f"OP REMOVE {pos(op.pos)}"
    if isinstance(op, MoveOp):
        return f"OP MOVE {pos(op.origin)} {pos(op.target)}"
    if isinstance(op, BoostOp):
        return f"OP BOOST {pos(op.origin)} {pos(op.target)}"
    if isinstance(op, EnterOp):
        return f"OP ENTER {pos(op.origin)} {bool_num(op.reveal)} {op.stack.value}"
    if isinstance(op, LineBoostAttachOp):
        return f"OP LINEBOOST ATTACH {pos(op.pos)}"
    if isinstance(op, LineBoostDetachOp):
        return f"OP LINEBOOST DETACH {pos(op.pos)}"
    if isinstance(op, VirusCheckOp):
        return f"OP VIRUSCHECK {pos(op.pos)}"
    if isinstance(op, FirewallPlaceOp):
        return f"OP FIREWALL PLACE {pos(op.pos)}"
    if isinstance(op, FirewallRemoveOp):
        return f"OP FIREWALL REMOVE {pos(op.pos)}"
    if isinstance(op, NotFoundOp):
        return f"OP NOTFOUND {pos(op.first)} {pos(op.second)} {bool_num(op.swap)}"
    if isinstance(op, EndTurnOp):
        return "OP ENDTURN"
    raise TypeError(f"not an operation: {op!r}")


def encode_error(error: Union[GameError, str]) -> str:
    code = error.name if isinstance(error, GameError) else error
    return f"ERR {code}\n"


# ----------------------------------------------------------------------
# State snapshots
# ----------------------------------------------------------------------
def _encode_phase(phase: Phase) -> str:
    if phase.is_setup:
        return f"PHASE SETUP {phase.player.name}"
    if phase.is_game_over:
        return f"PHASE GAMEOVER {phase.player.name}"
    return "PHASE PLAYING"


def _player_lines(state: PlayerState) -> Iterator[str]:
    name = state.id.name
    yield (
        f"PLAYER {name} SETUP_LINKS {state.links_left} "
        f"SETUP_VIRUSES {state.viruses_left} SETUP_PLACED {state.placed}"
    )
    yield f"PLAYER {name} LINEBOOST {' '.join(format_pos(slot) for slot in state.line_boosts)}"
    yield f"PLAYER {name} FIREWALL {' '.join(format_pos(slot) for slot in state.firewalls)}"
    yield f"PLAYER {name} VIRUSCHECK {' '.join(bool_num(bool(v)) for v in state.virus_checks_used)}"
    yield f"PLAYER {name} NOTFOUND {' '.join(bool_num(bool(v)) for v in state.not_found_used)}"


def encode_state(game: GameState, names: Sequence[str] = ("P1", "P2")) -> str:
    lines: List[str] = ["STATE_BEGIN", _encode_phase(game.phase), f"CURRENT {game.current_player.name}"]
    pending = game.pending_boost_move
    lines.append("PENDING NONE" if pending is None else f"PENDING {pending.row} {pending.col}")
    for player in PlayerId:
        lines.extend(_player_lines(game.player(player)))
    for player in PlayerId:
        state = game.player(player)
        lines.append(f"STACKS {player.name} LINK {len(state.link_stack)} VIRUS {len(state.virus_stack)}")

    cards = list(game.board.occupied())
    lines.append(f"CARDS {len(cards)}")
    for pos, card in cards:
        lines.append(
            f"CARD {pos.row} {pos.col} {card.owner.name} {card.kind.value} "
            f"{bool_num(card.revealed)} {bool_num(card.boosted)}"
        )

    firewalls = list(game.board.firewall_cells())
    lines.append(f"FIREWALLS {len(firewalls)}")
    for pos, owner in firewalls:
        lines.append(f"FW {pos.row} {pos.col} {owner.name}")

    lines.append(f"NAMES {names[0]} {names[1]}")
    lines.append("STATE_END")
    return "\n".join(lines) + "\n"


def _board_pos(tokens: _Tokens) -> Position:
    pos = tokens.next_pos()
    if not (0 <= pos.row < BOARD_SIZE and 0 <= pos.col < BOARD_SIZE):
        raise ProtocolError(f"position {pos.as_tuple()} is off the board")
    return pos


def _placeholder_stack(owner: PlayerId, kind: CardKind, count: int) -> List[Card]:
    return [Card(kind=kind, owner=owner, revealed=True) for _ in range(count)]


def _parse_player_line(game: GameState, tokens: _Tokens) -> None:
    state = game.player(parse_player(tokens.next()))
    key = tokens.next()
    if key == "SETUP_LINKS":
        state.links_left = tokens.next_int()
        tokens.next()
        state.viruses_left = tokens.next_int()
        tokens.next()
        state.placed = tokens.next_int()
    elif key == "LINEBOOST":
        state.line_boosts = [parse_optional_pos(tokens.next()), parse_optional_pos(tokens.next())]
    elif key == "FIREWALL":
        state.firewalls = [parse_optional_pos(tokens.next()), parse_optional_pos(tokens.next())]
    elif key == "VIRUSCHECK":
        state.virus_checks_used[:] = [tokens.next_bool(), tokens.next_bool()]
    elif key == "NOTFOUND":
        state.not_found_used[:] = [tokens.next_bool(), tokens.next_bool()]
    else:
        raise ProtocolError(f"unknown PLAYER field {key!r}")


def parse_state(lines: Sequence[str]) -> Tuple[GameState, List[str]]:
    """Rebuild a state from ``encode_state`` output.

    Stack contents are not on the wire, so stacks come back as revealed
    placeholder cards of the stack's own kind.
    """
    game = GameState()
    names = ["P1", "P2"]
    iterator = iter(lines)
    for line in iterator:
        tokens = _Tokens(line)
        if not line.split():
            continue
        head = tokens.next()
        if head == "PHASE":
            which = tokens.next()
            if which == "SETUP":
                game.phase = Phase.setup(parse_player(tokens.next()))
            elif which == "PLAYING":
                game.phase = Phase.playing()
            elif which == "GAMEOVER":
                game.phase = Phase.game_over(parse_player(tokens.next()))
            else:
                raise ProtocolError(f"unknown phase {which!r}")
        elif head == "CURRENT":
            game.current_player = parse_player(tokens.next())
        elif head == "PENDING":
            token = tokens.next()
            if token == "NONE":
                game.pending_boost_move = None
            else:
                try:
                    row = int(token)
                except ValueError as exc:
                    raise ProtocolError(f"bad pending row {token!r}") from exc
                game.pending_boost_move = Position(row, tokens.next_int())
        elif head == "PLAYER":
            _parse_player_line(game, tokens)
        elif head == "STACKS":
            player = parse_player(tokens.next())
            tokens.next()
            link_count = tokens.next_int()
            tokens.next()
            virus_count = tokens.next_int()
            state = game.player(player)
            state.link_stack = _placeholder_stack(player, CardKind.LINK, link_count)
            state.virus_stack = _placeholder_stack(player, CardKind.VIRUS, virus_count)
        elif head == "CARDS":
            for _ in range(tokens.next_int()):
                card_tokens = _Tokens(_next_line(iterator, "CARD"))
                card_tokens.next()
                pos = _board_pos(card_tokens)
                owner = parse_player(card_tokens.next())
                kind = parse_card_kind(card_tokens.next())
                revealed = card_tokens.next_bool()
                boosted = card_tokens.next_bool()
                game.board.set(pos, Card(kind=kind, owner=owner, revealed=revealed, boosted=boosted))
        elif head == "FIREWALLS":
            for _ in range(tokens.next_int()):
                fw_tokens = _Tokens(_next_line(iterator, "FW"))
                fw_tokens.next()
                pos = _board_pos(fw_tokens)
                game.board.set_firewall(pos, parse_player(fw_tokens.next()))
        elif head == "NAMES":
            names = [tokens.next(), tokens.next()]
        # STATE_BEGIN, STATE_END and unknown lines are skipped.
    return game, names


def _next_line(iterator: Iterator[str], expected: str) -> str:
    try:
        line = next(iterator)
    except StopIteration as exc:
        raise ProtocolError(f"snapshot ended before {expected} line") from exc
    if not line.startswith(expected + " "):
        raise ProtocolError(f"expected {expected} line, got {line!r}")
    return line
