# navalbattle

A two-player naval battle game on an 8×8 board, played over TCP. One
player runs the server and both players connect with the terminal client.
The game's messages are in Portuguese.

## Installing

    pip install .

## Playing

Start the server. It waits for two players:

    navalbattle-server

Each player then starts a client:

    navalbattle-client

Both programs use port 8080 by default. The server listens on all
interfaces and the client connects to 127.0.0.1. Both take `--host` and
`--port`; run either command with `--help` to see them.

### Joining

When the client starts, type `JOIN <your_name>`. Once both players have
joined, each is told their player number. If a player sends anything
other than `JOIN`, that player is told `Comando inválido!` and the
server stops with an error.

### Placing ships

Each player places four ships:

| Ship      | Count | Length | Board mark |
|-----------|-------|--------|------------|
| SUBMARINO | 1     | 1      | `S`        |
| FRAGATA   | 2     | 2      | `F`        |
| DESTROYER | 1     | 3      | `D`        |

Place a ship with:

    POS <type> <x> <y> <H|V> <direction>

`x` is the row and `y` is the column. Both run from 0 to 7. A horizontal
ship (`H`) extends right (`D`) or left (`E`). A vertical ship (`V`)
extends down (`B`) or up (`C`). A placement is refused if the ship would
leave the board or cross another ship, if the type is unknown, or if all
ships of that type are already placed; the server says why and you try
again. After each ship is placed, the client shows your board.

### Battle

Once both players have placed their ships, the server asks for `READY`
(any line is taken as ready). It then picks the first player at random.
On your turn, fire with:

    FIRE <x> <y>

The server answers with your updated tracking board and `HIT`, `MISS`
or `SUNK`. On the tracking board, `O` is a hit and `X` is a miss.
Coordinates off the board, or a square you have already shot, are
rejected and you fire again. Your opponent is told the result of each
shot.

The first player to sink all four enemy ships receives `WIN` and the
other player receives `LOSE`. The server then sends `FIM` and exits.

## Wire format

Clients send one command per line (newline-terminated). The server sends
UTF-8 text messages, each terminated by a NUL byte.

## Using the library

The game rules can be used without a network:

```python
from navalbattle.board import Fleet, ShipKind, ShotResult

mine, theirs = Fleet(), Fleet()
theirs.place_ship(ShipKind.SUBMARINE, 0, 0, "H", "D")
result = mine.fire_at(theirs, 0, 0)   # ShotResult.SUNK
print(mine.render_shots())
```

`Fleet.place_ship` raises `PlacementError` for a refused placement, and
`Fleet.fire_at` raises `ValueError` for an off-board or repeated shot.
`render_board` renders any grid; `Fleet.render_ships` and
`Fleet.render_shots` render a fleet's two boards.

`navalbattle.protocol` parses the text commands with `parse_join`,
`parse_position` and `parse_fire`. A malformed command raises
`ProtocolError`, whose `reply` is the text the server sends back.

`navalbattle.server.GameServer` can be run from code. Use port 0 to get
a free port, which `port` holds after `bind()`; `serve()` plays one
game. `navalbattle.client.run_client` plays one game from any pair of
text streams and returns `"WIN"` or `"LOSE"`.

## Limits

The server hosts a single game between exactly two players and then
exits. It does not handle reconnects, spectators or more than one game
at a time, and keeps no scores or history.

## Running the tests

    pip install .[test]
    pytest