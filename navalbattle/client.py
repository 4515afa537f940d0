"""Interactive terminal client for the naval battle server."""

from __future__ import annotations

import argparse
import socket
import sys
from typing import TextIO

from navalbattle.board import TOTAL_SHIPS
from navalbattle.protocol import CMD_LOSE, CMD_WIN, MAX_MSG
from navalbattle.server import DEFAULT_PORT, MESSAGE_END, SHIP_PLACED, TURN_MARKER

DEFAULT_HOST = "127.0.0.1"
JOIN_PROMPT = "Digite o comando 'JOIN <seu_nome>' para se conectar ao servidor"


class _MessageStream:
    """Splits the server's byte stream into NUL-terminated messages."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._buffer = bytearray()

    def receive(self) -> str:
        while (end := self._buffer.find(MESSAGE_END)) < 0:
            chunk = self._sock.recv(MAX_MSG)
            if not chunk:
                raise ConnectionError("servidor encerrou a conexao")
            self._buffer.extend(chunk)
        message = bytes(self._buffer[:end])
        del self._buffer[: end + 1]
        return message.decode("utf-8", "replace")

    def send(self, command: str) -> None:
        self._sock.sendall(command.encode("utf-8") + b"\n")


def run_client(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    input_stream: TextIO | None = None,
    output_stream: TextIO | None = None,
) -> str:
    """Play one game, reading commands from ``input_stream``.

    Returns ``WIN`` or ``LOSE``.
    """
    source = sys.stdin if input_stream is None else input_stream
    sink = sys.stdout if output_stream is None else output_stream

    def show(text: str, end: str = "\n") -> None:
        sink.write(text + end)
        sink.flush()

    def ask() -> str:
        line = source.readline()
        if not line:
            raise EOFError("entrada encerrada")
        return line.rstrip("\r\n")

    show(JOIN_PROMPT)
    command = ask()
    with socket.create_connection((host, port)) as sock:
        stream = _MessageStream(sock)
        stream.send(command)
        show("\n" + stream.receive())

        show(stream.receive())
        placed = 0
        while placed < TOTAL_SHIPS:
            stream.send(ask())
            reply = stream.receive()
            show(reply, "\n\n")
            if SHIP_PLACED in reply:
                placed += 1
        show(stream.receive(), "\n\n")

        show(stream.receive())
        stream.send(ask())
        show(stream.receive())

        while True:
            message = stream.receive()
            show("\n" + message)
            if message.startswith((CMD_WIN, CMD_LOSE)):
                outcome = CMD_WIN if message.startswith(CMD_WIN) else CMD_LOSE
                break
            if TURN_MARKER not in message:
                show(stream.receive(), "\n\n")
                continue
            stream.send(ask())
            show(stream.receive(), "\n\n")

        show(stream.receive())
    return outcome


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="navalbattle-client", description="Join a naval battle server."
    )
    parser.add_argument("--host", default=DEFAULT_HOST, help="server address")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="server port")
    args = parser.parse_args(argv)
    try:
        run_client(args.host, args.port, sys.stdin, sys.stdout)
    except (OSError, EOFError) as exc:
        print(f"erro: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())