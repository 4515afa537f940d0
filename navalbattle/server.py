"""TCP server that hosts a two-player naval battle."""

from __future__ import annotations

import argparse
import random
import socket
import sys
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from navalbattle.board import INVALID_KIND, Fleet, PlacementError, ShipKind
from navalbattle.protocol import (
    CMD_LOSE,
    CMD_WIN,
    MAX_MSG,
    ProtocolError,
    parse_fire,
    parse_join,
    parse_position,
)

DEFAULT_PORT = 8080
PLAYERS = 2
MESSAGE_END = b"\0"

PLACEMENT_PROMPT = (
    "Posicione seus navios utilizando o seguinte comando "
    "'POS <tipo> <x> <y> <H|V> <direcao>'\n"
    "Tipos disponiveis: 1 SUBMARINO, 2 FRAGATAS, 1 DESTROYER"
)
SHIP_PLACED = "Navio posicionado!"
ALL_PLACED = "Todos os navios posicionados"
READY_PROMPT = "Quando estiver pronto digite 'READY'!"
TURN_MARKER = "Seu turno!"
YOUR_TURN = (
    TURN_MARKER + "\nUtilize o comando 'FIRE <x> <y> para disparar no adversario!\n"
)
OPPONENT_TURN = "Turno do adversario!"
OPPONENT_INVALID_SHOT = "Jogada Invalida! O adversario tentou uma jogada invalida."
GAME_OVER = "FIM"


class _Connection:
    """A player's socket: newline-terminated commands in, NUL-terminated messages out."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._reader = sock.makefile("rb")
        self._send_lock = threading.Lock()

    def send(self, text: str) -> None:
        with self._send_lock:
            self._sock.sendall(text.encode("utf-8") + MESSAGE_END)

    def receive(self) -> str:
        line = self._reader.readline(MAX_MSG)
        if not line:
            raise ConnectionError("player disconnected")
        return line.decode("utf-8", "replace").rstrip("\r\n")

    def shutdown(self) -> None:
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass

    def close(self) -> None:
        self._reader.close()
        self._sock.close()


@dataclass
class _Player:
    id: int
    connection: _Connection
    name: str = ""
    fleet: Fleet = field(default_factory=Fleet)


class GameServer:
    """Accepts two players, lets them place their fleets and referees the battle."""

    def __init__(self, host: str = "", port: int = DEFAULT_PORT) -> None:
        self.host = host
        self.port = port
        self.first_turn: int | None = None
        self._listener: socket.socket | None = None
        self._players: list[_Player] = []
        self._turn = 0
        self._aborted = False
        self._turn_changed = threading.Condition()

    def __enter__(self) -> GameServer:
        if self._listener is None:
            self.bind()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def bind(self) -> None:
        """Open the listening socket; ``port`` then holds the actual port."""
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            listener.bind((self.host, self.port))
            listener.listen(PLAYERS)
        except OSError:
            listener.close()
            raise
        self._listener = listener
        self.port = listener.getsockname()[1]
        print(f"Servidor aguardando jogadores na porta {self.port}...", flush=True)

    def serve(self) -> None:
        """Run one complete game with the next two players to connect."""
        if self._listener is None:
            self.bind()
        listener = self._listener
        self._aborted = False
        self._players = [
            _Player(player_id, _Connection(listener.accept()[0]))
            for player_id in range(PLAYERS)
        ]
        try:
            self._join()
            print("Jogadores Conectados!", flush=True)
            self._run_phase(self._place_ships)
            self._turn = (
                random.randrange(PLAYERS) if self.first_turn is None else self.first_turn
            )
            self._run_phase(self._play, threading.Barrier(PLAYERS))
            for player in self._players:
                player.connection.send(GAME_OVER)
            print("FIM DE JOGO", flush=True)
        finally:
            for player in self._players:
                player.connection.close()
            self._players = []

    def close(self) -> None:
        """Stop listening and drop any connected players."""
        for player in list(self._players):
            player.connection.shutdown()
        if self._listener is not None:
            self._listener.close()
            self._listener = None

    def _join(self) -> None:
        for player in self._players:
            try:
                player.name = parse_join(player.connection.receive())
            except ProtocolError as exc:
                if exc.reply is not None:
                    player.connection.send(exc.reply)
                raise
        for player in self._players:
            player.connection.send(f"JOGO INICIADO!\nVoce e o jogador {player.id + 1}")

    def _run_phase(self, work: Callable[..., None], *barriers: threading.Barrier) -> None:
        errors: list[BaseException] = []

        def runner(player: _Player) -> None:
            try:
                work(player, *barriers)
            except Exception as exc:  # noqa: BLE001 - reported after the phase
                errors.append(exc)
                self._abort(barriers)

        threads = [
            threading.Thread(target=runner, args=(player,), daemon=True)
            for player in self._players
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        if errors:
            raise errors[0]

    def _abort(self, barriers: tuple[threading.Barrier, ...]) -> None:
        for player in self._players:
            player.connection.shutdown()
        for barrier in barriers:
            barrier.abort()
        with self._turn_changed:
            self._aborted = True
            self._turn_changed.notify_all()

    def _place_ships(self, player: _Player) -> None:
        connection, fleet = player.connection, player.fleet
        connection.send(PLACEMENT_PROMPT)
        while not fleet.complete:
            try:
                command = parse_position(connection.receive())
                if command.kind is None:
                    raise PlacementError(INVALID_KIND)
                cells = fleet.place_ship(
                    command.kind, command.x, command.y,
                    command.orientation, command.direction,
                )
            except (ProtocolError, PlacementError) as exc:
                connection.send(str(exc))
                continue
            if command.kind is ShipKind.FRIGATE:
                number = command.kind.count - fleet.remaining[command.kind]
                for x, y in cells:
                    print(f"Fragata {number} do Jogador {player.id + 1}: x: {x}, y: {y}",
                          flush=True)
            connection.send(f"\n{fleet.render_ships()}{SHIP_PLACED}")
        connection.send(ALL_PLACED)

    def _both_afloat(self) -> bool:
        return all(player.fleet.ships_alive > 0 for player in self._players)

    def _play(self, player: _Player, ready: threading.Barrier) -> None:
        connection = player.connection
        opponent = self._players[1 - player.id]
        connection.send(READY_PROMPT)
        connection.receive()
        ready.wait()
        connection.send(f"Jogadores Prontos!\nTurno do jogador {self._turn + 1}!")
        ready.wait()
        while self._both_afloat():
            with self._turn_changed:
                self._turn_changed.wait_for(
                    lambda: self._aborted or self._turn == player.id
                )
                if self._aborted:
                    raise ConnectionError("game aborted")
                if not self._both_afloat():
                    break
                self._take_turn(player, opponent)
        connection.send(CMD_WIN if player.fleet.ships_alive > 0 else CMD_LOSE)

    def _take_turn(self, player: _Player, opponent: _Player) -> None:
        connection = player.connection
        connection.send(YOUR_TURN + player.fleet.render_shots())
        opponent.connection.send(OPPONENT_TURN)
        try:
            x, y = parse_fire(connection.receive())
        except ProtocolError as exc:
            if exc.reply is not None:
                connection.send(exc.reply)
            return
        try:
            result = player.fleet.fire_at(opponent.fleet, x, y)
        except ValueError as exc:
            connection.send(str(exc))
            opponent.connection.send(OPPONENT_INVALID_SHOT)
            print(f"JOGADOR: {player.id + 1}\tJOGADA: {x} {y}", flush=True)
            return
        connection.send(player.fleet.render_shots() + result.value)
        opponent.connection.send(result.value)
        print(f"JOGADOR: {player.id}\tJOGADA: {x} {y}", flush=True)
        self._turn = opponent.id
        self._turn_changed.notify_all()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="navalbattle-server", description="Host a two-player naval battle."
    )
    parser.add_argument("--host", default="", help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="TCP port")
    args = parser.parse_args(argv)
    try:
        with GameServer(args.host, args.port) as server:
            server.serve()
    except (ProtocolError, OSError) as exc:
        print(f"erro: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())