"""Interactive client for the image vault server."""

from __future__ import annotations

import argparse
import socket
import sys
from pathlib import Path

PORT = 8080
SERVER_IP = "127.0.0.1"
MAX_BUF = 65536
REPLY_LIMIT = 511


def menu_text():
    """Return the main menu shown before every choice."""
    return (
        "\n===== MENU =====\n"
        "1. Kirim dan decrypt file txt\n"
        "2. Download file jpeg dari server\n"
        "3. Exit\n"
        "Masukkan pilihan Anda: "
    )


def send_request(message, host=SERVER_IP, port=PORT, save_path=None):
    """Send one request and return the reply.

    With ``save_path`` the whole reply is also written to that file.
    Raises OSError when the server cannot be reached.
    """
    with socket.create_connection((host, port)) as sock:
        sock.sendall(message)
        sock.shutdown(socket.SHUT_WR)
        chunks = []
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    reply = b"".join(chunks)
    if save_path is not None:
        Path(save_path).write_bytes(reply)
        return reply
    return reply[:REPLY_LIMIT]


def build_decrypt_message(path):
    """Read a hex text file and wrap it in a DECRYPT request."""
    with open(path, "rb") as f:
        content = f.read(MAX_BUF - 1)
    return b"DECRYPT " + content


def _read_word(prompt):
    words = input(prompt).split()
    return words[0] if words else ""


def _print_reply(reply):
    if reply:
        print(f"Server: {reply.decode('utf-8', errors='replace')}")
    else:
        print("Gagal menerima balasan dari server.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Image vault client.")
    parser.add_argument("--host", default=SERVER_IP)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--base-dir", type=Path, default=Path("client"))
    args = parser.parse_args(argv)

    while True:
        print(menu_text(), end="")
        try:
            line = input()
        except EOFError:
            return 0
        try:
            choice = int(line.strip())
        except ValueError:
            choice = 0

        try:
            if choice == 1:
                fname = _read_word("Masukkan nama file txt (di folder client/secrets/): ")
                try:
                    message = build_decrypt_message(args.base_dir / "secrets" / fname)
                except OSError:
                    print("Gagal membuka file.")
                    continue
                _print_reply(send_request(message, args.host, args.port))
            elif choice == 2:
                fname = _read_word("Masukkan nama file jpeg: ")
                save_path = args.base_dir / fname
                send_request(f"DOWNLOAD {fname}".encode(), args.host, args.port, save_path)
                print(f"File berhasil disimpan di {save_path}")
            elif choice == 3:
                try:
                    _print_reply(send_request(b"EXIT", args.host, args.port))
                except OSError as exc:
                    print(f"Gagal connect ke server: {exc}", file=sys.stderr)
                print("Keluar dari program.")
                return 0
            else:
                print("Pilihan tidak valid.")
        except EOFError:
            return 0
        except OSError as exc:
            print(f"Gagal connect ke server: {exc}", file=sys.stderr)


if __name__ == "__main__":
    sys.exit(main())