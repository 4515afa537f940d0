"""Boards, fleets and shot resolution for the naval battle game."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

BOARD_SIZE = 8
WATER = "~"
HIT_MARK = "O"
MISS_MARK = "X"

INVALID_PLACEMENT = "Posicionamento inválido!"
INVALID_KIND = (
    "Erro ao posicionar. Tipo digitado incorreto ou limite de navios desse tipo atingido."
)
INVALID_COORDINATES = "Coordenadas invalidas!"
INVALID_SHOT = "Jogada Invalida! Digite outra coordenada."

Cell = tuple[int, int]
Grid = list[list[str]]

_STEPS: dict[tuple[str, str], Cell] = {
    ("H", "D"): (0, 1),
    ("H", "E"): (0, -1),
    ("V", "B"): (1, 0),
    ("V", "C"): (-1, 0),
}


class ShipKind(Enum):
    """Ship types with their wire name, length and number per fleet."""

    SUBMARINE = ("SUBMARINO", 1, 1)
    FRIGATE = ("FRAGATA", 2, 2)
    DESTROYER = ("DESTROYER", 3, 1)

    def __init__(self, label: str, length: int, count: int) -> None:
        self.label = label
        self.length = length
        self.count = count

    @property
    def symbol(self) -> str:
        return self.label[0]


class ShotResult(Enum):
    HIT = "HIT"
    SUNK = "SUNK"
    MISS = "MISS"


class PlacementError(ValueError):
    """A ship could not be placed; the message is the reply for the player."""


TOTAL_SHIPS = sum(kind.count for kind in ShipKind)


def _new_grid() -> Grid:
    return [[WATER] * BOARD_SIZE for _ in range(BOARD_SIZE)]


def _in_bounds(x: int, y: int) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


def render_board(grid: Grid) -> str:
    """Render a grid with column numbers on top and row numbers on the left."""
    header = "  " + " ".join(str(col) for col in range(BOARD_SIZE)) + "\n"
    rows = "".join(
        f"{index} " + "".join(f"{cell} " for cell in row) + "\n"
        for index, row in enumerate(grid)
    )
    return header + rows


@dataclass
class Fleet:
    """One player's ships and the record of the shots they have fired."""

    ships: Grid = field(default_factory=_new_grid)
    shots: Grid = field(default_factory=_new_grid)
    ships_alive: int = TOTAL_SHIPS
    remaining: dict[ShipKind, int] = field(
        default_factory=lambda: {kind: kind.count for kind in ShipKind}
    )
    _placed: list[tuple[ShipKind, tuple[Cell, ...]]] = field(
        default_factory=list, init=False, repr=False
    )

    @property
    def complete(self) -> bool:
        """True once every ship of the fleet has been placed."""
        return not any(self.remaining.values())

    def place_ship(
        self, kind: ShipKind, x: int, y: int, orientation: str, direction: str
    ) -> tuple[Cell, ...]:
        """Place a ship starting at (x, y) and return the cells it occupies.

        Orientation is ``H`` (direction ``D`` right or ``E`` left) or ``V``
        (direction ``B`` down or ``C`` up).
        """
        if self.remaining.get(kind, 0) <= 0:
            raise PlacementError(INVALID_KIND)
        if not _in_bounds(x, y):
            raise PlacementError(INVALID_COORDINATES)
        step = _STEPS.get((orientation, direction))
        if step is None:
            raise PlacementError(INVALID_PLACEMENT)
        dx, dy = step
        cells = tuple((x + dx * i, y + dy * i) for i in range(kind.length))
        if not all(_in_bounds(r, c) and self.ships[r][c] == WATER for r, c in cells):
            raise PlacementError(INVALID_PLACEMENT)
        for r, c in cells:
            self.ships[r][c] = kind.symbol
        self.remaining[kind] -= 1
        self._placed.append((kind, cells))
        return cells

    def _ship_at(self, x: int, y: int) -> tuple[Cell, ...]:
        return next(cells for _, cells in self._placed if (x, y) in cells)

    def fire_at(self, target: Fleet, x: int, y: int) -> ShotResult:
        """Fire at (x, y) on the target's board and record the shot here."""
        if not _in_bounds(x, y):
            raise ValueError(INVALID_COORDINATES)
        if self.shots[x][y] in (HIT_MARK, MISS_MARK):
            raise ValueError(INVALID_SHOT)
        if target.ships[x][y] == WATER:
            self.shots[x][y] = MISS_MARK
            return ShotResult.MISS
        self.shots[x][y] = HIT_MARK
        cells = target._ship_at(x, y)
        if all(self.shots[r][c] == HIT_MARK for r, c in cells):
            target.ships_alive -= 1
            return ShotResult.SUNK
        return ShotResult.HIT

    def render_ships(self) -> str:
        return render_board(self.ships)

    def render_shots(self) -> str:
        return render_board(self.shots)