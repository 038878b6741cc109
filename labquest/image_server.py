"""Image vault server: stores reversed-hex payloads as JPEG files and serves them back."""

from __future__ import annotations

import argparse
import socket
import socketserver
import sys
import time
from datetime import datetime
from pathlib import Path

PORT = 8080
MAX_BUF = 65536
DEFAULT_DB_DIR = Path("server") / "database"
DEFAULT_LOG_PATH = Path("server") / "server.log"

SAVE_ERROR_REPLY = b"[ERROR] Gagal menyimpan file."
NOT_FOUND_REPLY = b"[ERROR] File tidak ditemukan."
EXIT_REPLY = b"[EXIT] Client disconnected."
UNKNOWN_REPLY = b"[ERROR] Perintah tidak dikenali."


def log_message(log_path, source, action, info, when=None):
    """Append one line ``[source][timestamp]: [action] [info]`` to the log file."""
    when = when or datetime.now()
    line = f"[{source}][{when:%Y-%m-%d %H:%M:%S}]: [{action}] [{info}]\n"
    try:
        with open(log_path, "a", encoding="utf-8") as log:
            log.write(line)
    except OSError as exc:
        print(f"cannot write log {log_path}: {exc}", file=sys.stderr)


def decode_payload(text):
    """Reverse a hex string and decode it to bytes; a trailing odd digit is dropped."""
    digits = text.strip()[::-1]
    digits = digits[: len(digits) // 2 * 2]
    return bytes.fromhex(digits)


def _decrypt(payload, db_dir, log_path, now):
    log_message(log_path, "Client", "DECRYPT", "<data diterima>")
    filename = f"{int(now)}.jpeg"
    try:
        content = decode_payload(payload)
        (Path(db_dir) / filename).write_bytes(content)
    except (ValueError, OSError):
        log_message(log_path, "Server", "ERROR", "Gagal menyimpan file")
        return SAVE_ERROR_REPLY
    log_message(log_path, "Server", "SAVE", filename)
    return filename.encode()


def _download(fname, db_dir, log_path):
    log_message(log_path, "Client", "DOWNLOAD", fname)
    try:
        content = (Path(db_dir) / fname).read_bytes()
    except OSError:
        log_message(log_path, "Server", "ERROR", "Gagal menemukan file untuk dikirim ke client")
        return NOT_FOUND_REPLY
    log_message(log_path, "Server", "UPLOAD", fname)
    return content


def handle_request(data, db_dir=DEFAULT_DB_DIR, log_path=DEFAULT_LOG_PATH, now=None):
    """Process one raw request and return the reply bytes."""
    now = time.time() if now is None else now
    if data.startswith(b"DECRYPT"):
        return _decrypt(data[8:].decode("latin-1"), db_dir, log_path, now)
    if data.startswith(b"DOWNLOAD"):
        fname = data[9:].decode("utf-8", errors="replace").strip()
        return _download(fname, db_dir, log_path)
    if data.startswith(b"EXIT"):
        log_message(log_path, "Client", "EXIT", "Client requested to exit")
        return EXIT_REPLY
    log_message(log_path, "Server", "ERROR", "Perintah tidak dikenali")
    return UNKNOWN_REPLY


def _receive(sock):
    """Read until the peer stops sending or MAX_BUF bytes have arrived."""
    chunks = []
    total = 0
    while total < MAX_BUF:
        chunk = sock.recv(MAX_BUF - total)
        if not chunk:
            break
        chunks.append(chunk)
        total += len(chunk)
    return b"".join(chunks)


class _RequestHandler(socketserver.BaseRequestHandler):
    def handle(self):
        try:
            data = _receive(self.request)
        except OSError as exc:
            print(f"recv failed: {exc}", file=sys.stderr)
            return
        if not data:
            return
        reply = handle_request(data, self.server.db_dir, self.server.log_path)
        self.request.sendall(reply)


class _ImageServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, address, db_dir, log_path):
        self.db_dir = Path(db_dir)
        self.log_path = Path(log_path)
        super().__init__(address, _RequestHandler)


def serve(host="0.0.0.0", port=PORT, db_dir=DEFAULT_DB_DIR, log_path=DEFAULT_LOG_PATH):
    """Accept connections forever, answering one request per connection."""
    with _ImageServer((host, port), db_dir, log_path) as server:
        server.serve_forever()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Image vault server.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--db-dir", type=Path, default=DEFAULT_DB_DIR)
    parser.add_argument("--log", type=Path, default=DEFAULT_LOG_PATH)
    args = parser.parse_args(argv)
    args.db_dir.mkdir(parents=True, exist_ok=True)
    args.log.parent.mkdir(parents=True, exist_ok=True)
    try:
        serve(args.host, args.port, args.db_dir, args.log)
    except KeyboardInterrupt:
        pass
    except OSError as exc:
        print(f"server error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())