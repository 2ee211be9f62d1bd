"""Test helper functions."""

import json
import hmac
import hashlib
import time
from io import BytesIO
from typing import Any, Dict, Optional


def generate_stripe_signature(secret: str, payload: str, timestamp: Optional[int] = None) -> str:
    """Build a valid Stripe-Signature header for a payload."""
    if timestamp is None:
        timestamp = int(time.time())
    signed_payload = f"{timestamp}.{payload}"
    signature = hmac.new(
        secret.encode('utf-8'),
        signed_payload.encode('utf-8'),
        hashlib.sha256
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


class MockSocket:
    """Socket double feeding a raw HTTP request and collecting the response."""

    def __init__(self, raw_request: bytes):
        self.raw_request = raw_request
        self.sent = BytesIO()

    def makefile(self, *args, **kwargs):
        return BytesIO(self.raw_request)

    def sendall(self, data):
        self.sent.write(data)

    def close(self):
        pass


class HandlerResponse:
    def __init__(self, raw: bytes):
        head, _, body = raw.partition(b"\r\n\r\n")
        lines = head.decode("iso-8859-1").split("\r\n")
        self.status = int(lines[0].split(" ")[1])
        self.headers: Dict[str, str] = {}
        for line in lines[1:]:
            name, _, value = line.partition(":")
            self.headers[name.strip().lower()] = value.strip()
        self.body = body

    def json(self) -> Any:
        return json.loads(self.body.decode("utf-8"))


def call_handler(
    handler_cls,
    method: str = "GET",
    path: str = "/",
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> HandlerResponse:
    """Drive a BaseHTTPRequestHandler subclass through one request."""
    if body is None:
        payload = b""
    elif isinstance(body, bytes):
        payload = body
    elif isinstance(body, str):
        payload = body.encode("utf-8")
    else:
        payload = json.dumps(body).encode("utf-8")

    request_headers = {"Host": "localhost", "Content-Length": str(len(payload))}
    if payload:
        request_headers["Content-Type"] = "application/json"
    request_headers.update(headers or {})

    head = f"{method} {path} HTTP/1.0\r\n" + "".join(
        f"{name}: {value}\r\n" for name, value in request_headers.items()
    ) + "\r\n"

    sock = MockSocket(head.encode("iso-8859-1") + payload)
    handler_cls(sock, ("127.0.0.1", 8000), None)
    return HandlerResponse(sock.sent.getvalue())
