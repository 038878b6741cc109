"""Terminal client for the dungeon game server."""

from __future__ import annotations

import argparse
import socket
import sys

PORT = 8080
SERVER_IP = "127.0.0.1"
BUFFER_SIZE = 1024


def run_client(host=SERVER_IP, port=PORT, input_stream=None, output_stream=None):
    """Relay server screens to the output and typed lines back to the server.

    Stops when the server closes the connection, when it sends ``exit``
    or when the input runs out. Raises OSError if the server is unreachable.
    """
    input_stream = sys.stdin if input_stream is None else input_stream
    output_stream = sys.stdout if output_stream is None else output_stream

    with socket.create_connection((host, port)) as sock:
        output_stream.write("Connected to server!\n")
        output_stream.flush()
        while True:
            data = sock.recv(BUFFER_SIZE)
            if not data:
                output_stream.write("Server disconnected\n")
                break
            text = data.decode("utf-8", errors="replace")
            output_stream.write(text)
            if text.startswith("exit"):
                break
            output_stream.write("> ")
            output_stream.flush()
            line = input_stream.readline()
            if not line:
                break
            sock.sendall(line.split("\n", 1)[0].encode())
        output_stream.flush()
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Dungeon game client.")
    parser.add_argument("--host", default=SERVER_IP)
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)
    try:
        return run_client(args.host, args.port)
    except OSError:
        print("\nConnection failed")
        return 1
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())