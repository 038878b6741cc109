import io
import socket
import threading

import pytest

from labquest.image_client import build_decrypt_message, main, menu_text, send_request


class FakeServer:
    def __init__(self, reply, connections=1):
        self.reply = reply
        self.received = []
        self.sock = socket.socket()
        self.sock.bind(("127.0.0.1", 0))
        self.sock.listen()
        self.port = self.sock.getsockname()[1]
        self.thread = threading.Thread(target=self._run, args=(connections,), daemon=True)
        self.thread.start()

    def _run(self, connections):
        for _ in range(connections):
            conn, _ = self.sock.accept()
            with conn:
                data = b""
                while True:
                    chunk = conn.recv(4096)
                    if not chunk:
                        break
                    data += chunk
                self.received.append(data)
                conn.sendall(self.reply)

    def close(self):
        self.thread.join(timeout=5)
        self.sock.close()


def _closed_port():
    s = socket.socket()
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


def test_menu_text_lists_options():
    text = menu_text()
    assert "1. Kirim dan decrypt file txt" in text
    assert "3. Exit" in text
    assert text.endswith("Masukkan pilihan Anda: ")


def test_build_decrypt_message(tmp_path):
    f = tmp_path / "a.txt"
    f.write_text("abcdef")
    assert build_decrypt_message(f) == b"DECRYPT abcdef"


def test_build_decrypt_message_missing(tmp_path):
    with pytest.raises(OSError):
        build_decrypt_message(tmp_path / "missing.txt")


def test_send_request_returns_reply():
    server = FakeServer(b"123.jpeg")
    reply = send_request(b"DECRYPT 00", "127.0.0.1", server.port)
    server.close()
    assert reply == b"123.jpeg"
    assert server.received == [b"DECRYPT 00"]


def test_send_request_saves_file(tmp_path):
    payload = bytes(range(256)) * 50
    server = FakeServer(payload)
    target = tmp_path / "x.jpeg"
    reply = send_request(b"DOWNLOAD x.jpeg", "127.0.0.1", server.port, target)
    server.close()
    assert reply == payload
    assert target.read_bytes() == payload


def test_send_request_connection_refused():
    with pytest.raises(OSError):
        send_request(b"EXIT", "127.0.0.1", _closed_port())


def test_main_exit(monkeypatch, capsys):
    server = FakeServer(b"[EXIT] Client disconnected.")
    monkeypatch.setattr("sys.stdin", io.StringIO("7\n3\n"))
    assert main(["--port", str(server.port)]) == 0
    server.close()
    out = capsys.readouterr().out
    assert "Pilihan tidak valid." in out
    assert "Server: [EXIT] Client disconnected." in out
    assert "Keluar dari program." in out
    assert server.received == [b"EXIT"]


def test_main_decrypt_and_download(tmp_path, monkeypatch, capsys):
    (tmp_path / "secrets").mkdir()
    (tmp_path / "secrets" / "s.txt").write_text("ffd8")
    server = FakeServer(b"42.jpeg", connections=3)
    monkeypatch.setattr("sys.stdin", io.StringIO("1\ns.txt\n2\n42.jpeg\n3\n"))
    main(["--port", str(server.port), "--base-dir", str(tmp_path)])
    server.close()
    out = capsys.readouterr().out
    assert server.received == [b"DECRYPT ffd8", b"DOWNLOAD 42.jpeg", b"EXIT"]
    assert (tmp_path / "42.jpeg").read_bytes() == b"42.jpeg"
    assert "File berhasil disimpan di" in out


def test_main_missing_secret(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("1\nnone.txt\n"))
    assert main(["--port", str(_closed_port()), "--base-dir", str(tmp_path)]) == 0
    assert "Gagal membuka file." in capsys.readouterr().out