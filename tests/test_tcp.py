from __future__ import annotations

import socket
import threading

import pytest

from yeectl.core.errors import (
    TransportConnectError,
    TransportReceiveError,
    TransportSendError,
)
from yeectl.transports import tcp
from yeectl.transports.tcp import TCPTransport, split_address


class FakeConnection:
    def __init__(self, *, fail_send: bool = False, fail_recv: bool = False, reply: bytes = b"") -> None:
        self.fail_send = fail_send
        self.fail_recv = fail_recv
        self.reply = reply
        self.sent = b""
        self.closed = False

    def sendall(self, data: bytes) -> None:
        if self.fail_send:
            raise BrokenPipeError("Broken pipe")
        self.sent += data

    def recv(self, bufsize: int) -> bytes:
        if self.fail_recv:
            raise TimeoutError("timed out")
        return self.reply[:bufsize]

    def close(self) -> None:
        self.closed = True


def _closed_port() -> int:
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    return port


def test_split_address() -> None:
    assert split_address("192.168.1.2:55443", 1) == ("192.168.1.2", 55443)
    assert split_address("192.168.1.2", 55443) == ("192.168.1.2", 55443)
    assert split_address("[fe80::1]:1234", 55443) == ("fe80::1", 1234)
    assert split_address("fe80::1", 55443) == ("fe80::1", 55443)


@pytest.mark.parametrize("address", ["10.0.0.1:port", ":55443", "10.0.0.1:70000", "[fe80::1", "10.0.0.1:5_5443", "10.0.0.1:+80", "10.0.0.1:８０"])
def test_split_address_rejects_malformed(address: str) -> None:
    with pytest.raises(TransportConnectError):
        split_address(address, 55443)


def test_refused_connection_is_connect_error() -> None:
    transport = TCPTransport()
    with pytest.raises(TransportConnectError):
        transport.send(f"127.0.0.1:{_closed_port()}", b"{}\r\n", timeout_s=1.0)


def test_write_failure_is_send_error(monkeypatch: pytest.MonkeyPatch) -> None:
    conn = FakeConnection(fail_send=True)
    monkeypatch.setattr(tcp.socket, "create_connection", lambda addr, timeout: conn)

    with pytest.raises(TransportSendError):
        TCPTransport().send("10.0.0.2:55443", b"{}\r\n")
    assert conn.closed


def test_read_failure_is_receive_error(monkeypatch: pytest.MonkeyPatch) -> None:
    conn = FakeConnection(fail_recv=True)
    monkeypatch.setattr(tcp.socket, "create_connection", lambda addr, timeout: conn)

    with pytest.raises(TransportReceiveError):
        TCPTransport().send("10.0.0.2:55443", b"{}\r\n")
    assert conn.sent == b"{}\r\n"
    assert conn.closed


def test_reply_is_bounded(monkeypatch: pytest.MonkeyPatch) -> None:
    conn = FakeConnection(reply=b"x" * 100)
    monkeypatch.setattr(tcp.socket, "create_connection", lambda addr, timeout: conn)

    assert TCPTransport().send("10.0.0.2", b"{}\r\n", max_reply_bytes=10) == b"x" * 10


def test_round_trip_against_local_server() -> None:
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    port = server.getsockname()[1]
    received: list[bytes] = []

    def serve() -> None:
        conn, _ = server.accept()
        with conn:
            received.append(conn.recv(2048))
            conn.sendall(b'{"id":0,"result":["ok"]}\r\n')

    worker = threading.Thread(target=serve, daemon=True)
    worker.start()
    try:
        reply = TCPTransport().send(
            f"127.0.0.1:{port}",
            b'{"id":0,"method":"toggle","params":[]}\r\n',
            timeout_s=2.0,
        )
    finally:
        worker.join(2.0)
        server.close()

    assert reply == b'{"id":0,"result":["ok"]}\r\n'
    assert received == [b'{"id":0,"method":"toggle","params":[]}\r\n']
