import pytest

from navalbattle.board import (
    BOARD_SIZE,
    Fleet,
    PlacementError,
    ShipKind,
    ShotResult,
    render_board,
)


def _full_fleet():
    fleet = Fleet()
    fleet.place_ship(ShipKind.SUBMARINE, 0, 0, "H", "D")
    fleet.place_ship(ShipKind.FRIGATE, 2, 0, "H", "D")
    fleet.place_ship(ShipKind.FRIGATE, 4, 0, "V", "B")
    fleet.place_ship(ShipKind.DESTROYER, 7, 7, "H", "E")
    return fleet


def test_render_empty_board_layout():
    text = Fleet().render_ships()
    lines = text.split("\n")
    assert text.startswith("  0 1 2 3 4 5 6 7\n")
    assert text.endswith("\n")
    assert len(lines) == BOARD_SIZE + 2
    for index, line in enumerate(lines[1:-1]):
        assert line.startswith(f"{index} ")
        assert line.count("~") == BOARD_SIZE


def test_render_board_shows_cells():
    grid = [["~"] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    grid[1][2] = "S"
    line = render_board(grid).split("\n")[2]
    assert line.split() == ["1", "~", "~", "S", "~", "~", "~", "~", "~"]


@pytest.mark.parametrize(
    "orientation, direction, expected",
    [
        ("H", "D", ((3, 3), (3, 4))),
        ("H", "E", ((3, 3), (3, 2))),
        ("V", "B", ((3, 3), (4, 3))),
        ("V", "C", ((3, 3), (2, 3))),
    ],
)
def test_place_frigate_in_each_direction(orientation, direction, expected):
    fleet = Fleet()
    cells = fleet.place_ship(ShipKind.FRIGATE, 3, 3, orientation, direction)
    assert cells == expected
    assert all(fleet.ships[r][c] == "F" for r, c in cells)
    assert fleet.remaining[ShipKind.FRIGATE] == ShipKind.FRIGATE.count - 1


def test_edge_placements_fit():
    fleet = Fleet()
    assert fleet.place_ship(ShipKind.FRIGATE, 2, 1, "H", "E") == ((2, 1), (2, 0))
    assert fleet.place_ship(ShipKind.FRIGATE, 6, 7, "V", "B") == ((6, 7), (7, 7))


def test_overlap_is_rejected():
    fleet = Fleet()
    fleet.place_ship(ShipKind.SUBMARINE, 1, 1, "H", "D")
    with pytest.raises(PlacementError):
        fleet.place_ship(ShipKind.DESTROYER, 1, 0, "H", "D")
    assert fleet.ships[1][0] == "~"
    assert fleet.ships[1][1] == "S"


def test_limit_per_kind():
    fleet = Fleet()
    fleet.place_ship(ShipKind.SUBMARINE, 0, 0, "H", "D")
    with pytest.raises(PlacementError) as info:
        fleet.place_ship(ShipKind.SUBMARINE, 5, 5, "H", "D")
    assert str(info.value).startswith("Erro ao posicionar")


def test_off_board_start_is_rejected():
    with pytest.raises(PlacementError) as info:
        Fleet().place_ship(ShipKind.SUBMARINE, 8, 0, "H", "D")
    assert str(info.value) == "Coordenadas invalidas!"


def test_fleet_complete_after_all_ships():
    fleet = Fleet()
    assert not fleet.complete
    fleet = _full_fleet()
    assert fleet.complete
    assert fleet.ships_alive == sum(kind.count for kind in ShipKind)


def test_miss_marks_shot_board():
    shooter, target = Fleet(), _full_fleet()
    assert shooter.fire_at(target, 5, 5) is ShotResult.MISS
    assert shooter.shots[5][5] == "X"
    assert target.ships_alive == sum(kind.count for kind in ShipKind)


def test_repeated_shot_is_rejected():
    shooter, target = Fleet(), _full_fleet()
    shooter.fire_at(target, 0, 0)
    with pytest.raises(ValueError, match="Jogada Invalida"):
        shooter.fire_at(target, 0, 0)


def test_shot_off_board_is_rejected():
    with pytest.raises(ValueError, match="Coordenadas invalidas"):
        Fleet().fire_at(_full_fleet(), 0, 8)


def test_submarine_sinks_with_one_hit():
    shooter, target = Fleet(), _full_fleet()
    alive = target.ships_alive
    assert shooter.fire_at(target, 0, 0) is ShotResult.SUNK
    assert shooter.shots[0][0] == "O"
    assert target.ships_alive == alive - 1


def test_frigates_are_tracked_separately():
    shooter, target = Fleet(), _full_fleet()
    alive = target.ships_alive
    assert shooter.fire_at(target, 2, 0) is ShotResult.HIT
    assert shooter.fire_at(target, 4, 0) is ShotResult.HIT
    assert target.ships_alive == alive
    assert shooter.fire_at(target, 5, 0) is ShotResult.SUNK
    assert shooter.fire_at(target, 2, 1) is ShotResult.SUNK
    assert target.ships_alive == alive - 2


def test_destroyer_needs_three_hits():
    shooter, target = Fleet(), _full_fleet()
    results = [shooter.fire_at(target, 7, y) for y in (7, 6, 5)]
    assert results == [ShotResult.HIT, ShotResult.HIT, ShotResult.SUNK]


def test_sinking_everything_leaves_no_ships():
    shooter, target = Fleet(), _full_fleet()
    for x in range(BOARD_SIZE):
        for y in range(BOARD_SIZE):
            shooter.fire_at(target, x, y)
    assert target.ships_alive == 0
    shots = shooter.render_shots()
    assert shots.count("O") == sum(k.length * k.count for k in ShipKind)
    assert "~" not in shots


def test_render_shots_reflects_marks():
    shooter, target = Fleet(), _full_fleet()
    shooter.fire_at(target, 0, 0)
    shooter.fire_at(target, 0, 1)
    row = shooter.render_shots().split("\n")[1]
    assert row.split()[:3] == ["0", "O", "X"]