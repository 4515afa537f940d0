"""Wire commands exchanged between the battle server and its clients."""

from __future__ import annotations

import re
from dataclasses import dataclass

from navalbattle.board import BOARD_SIZE, INVALID_COORDINATES, ShipKind

MAX_MSG = 1024

CMD_JOIN = "JOIN"
CMD_READY = "READY"
CMD_POS = "POS"
CMD_FIRE = "FIRE"
CMD_HIT = "HIT"
CMD_MISS = "MISS"
CMD_SUNK = "SUNK"
CMD_WIN = "WIN"
CMD_LOSE = "LOSE"

INVALID_JOIN = "Comando inválido!"
INVALID_POS_COMMAND = "Comando invalido. Use POS."
INVALID_POS_FORMAT = "Formato inválido. Utilize 'POS <tipo> <x> <y> <H|V> <direcao>'"
INVALID_FIRE_COMMAND = "Digite o comando correto!"
INVALID_FIRE_FORMAT = "Formato inválido. Utilize 'FIRE <x> <y>'"

_CONVERSIONS = {
    "s": re.compile(r"\s*(\S+)"),
    "d": re.compile(r"\s*([+-]?\d+)"),
    "c": re.compile(r"\s*(\S)"),
}


class ProtocolError(ValueError):
    """A client message that cannot be acted upon.

    ``reply`` is the text to send back to the client, or ``None`` when the
    message is simply ignored.
    """

    def __init__(self, message: str, *, silent: bool = False) -> None:
        super().__init__(message)
        self.silent = silent

    @property
    def reply(self) -> str | None:
        return None if self.silent else str(self)


@dataclass(frozen=True)
class PositionCommand:
    """A parsed ``POS`` request; ``kind`` is ``None`` for an unknown ship type."""

    kind: ShipKind | None
    label: str
    x: int
    y: int
    orientation: str
    direction: str


def _scan(text: str, conversions: str) -> list[str | int]:
    """Read whitespace-separated fields, stopping at the first that fails."""
    values: list[str | int] = []
    pos = 0
    for conv in conversions:
        match = _CONVERSIONS[conv].match(text, pos)
        if match is None:
            break
        field_text = match.group(1)
        values.append(int(field_text) if conv == "d" else field_text)
        pos = match.end()
    return values


def _on_board(x: int, y: int) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


def _resolve_kind(label: str) -> ShipKind | None:
    return next((kind for kind in ShipKind if label.startswith(kind.label)), None)


def parse_join(message: str) -> str:
    """Return the player name given in a ``JOIN`` message (empty if none)."""
    if not message.startswith(CMD_JOIN):
        raise ProtocolError(INVALID_JOIN)
    fields = _scan(message[len(CMD_JOIN):], "s")
    return str(fields[0]) if fields else ""


def parse_position(message: str) -> PositionCommand:
    """Parse ``POS <tipo> <x> <y> <H|V> <direcao>``."""
    if not message.startswith(CMD_POS):
        raise ProtocolError(INVALID_POS_COMMAND)
    fields = _scan(message[len(CMD_POS):], "sddcc")
    if len(fields) != 5:
        raise ProtocolError(INVALID_POS_FORMAT)
    label, x, y, orientation, direction = fields
    if not _on_board(x, y):
        raise ProtocolError(INVALID_COORDINATES)
    return PositionCommand(_resolve_kind(label), label, x, y, orientation, direction)


def parse_fire(message: str) -> tuple[int, int]:
    """Parse ``FIRE <x> <y>`` into a pair of board coordinates."""
    if not message.startswith(CMD_FIRE):
        raise ProtocolError(INVALID_FIRE_COMMAND)
    fields = _scan(message[len(CMD_FIRE):], "dd")
    if len(fields) != 2:
        raise ProtocolError(INVALID_FIRE_FORMAT, silent=True)
    x, y = fields
    if not _on_board(x, y):
        raise ProtocolError(INVALID_COORDINATES)
    return x, y