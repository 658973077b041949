"""Request pipeline for a single inspect server.

Each request passes the subnet gate, then the body size guard, and only
then reaches ``SimpleHTTPRequestHandler`` file serving.
"""
from __future__ import annotations

import http.client
import logging
from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler
from typing import Any

from inspect_http.core.network import SubnetFilter

logger = logging.getLogger(__name__)


class InspectRequestHandler(SimpleHTTPRequestHandler):
    def __init__(
        self,
        *args: Any,
        subnet_filter: SubnetFilter,
        max_body_bytes: int,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> None:
        # BaseRequestHandler.__init__ handles the request, so state goes first.
        self.subnet_filter = subnet_filter
        self.max_body_bytes = max_body_bytes
        self.timeout = timeout
        super().__init__(*args, **kwargs)

    def parse_request(self) -> bool:
        # Off-subnet clients get 403 before anything else: no 100 Continue
        # and no 400 for a request line that would not parse.
        client_address = self.client_address[0] if self.client_address else None
        if not self.subnet_filter.admit(client_address):
            self._forbid_unparsed()
            return False

        if not super().parse_request():
            return False

        raw_length = self.headers.get("Content-Length")
        if raw_length is not None:
            try:
                declared = int(raw_length)
            except ValueError:
                self._reject(HTTPStatus.BAD_REQUEST, b"Bad Request")
                return False
            if declared > self.max_body_bytes:
                self._reject(HTTPStatus.REQUEST_ENTITY_TOO_LARGE, b"Request Entity Too Large")
                return False

        return True

    def _forbid_unparsed(self) -> None:
        self.requestline = str(self.raw_requestline, "iso-8859-1").rstrip("\r\n")
        words = self.requestline.split()
        self.command = words[0] if words else None
        self.request_version = self.protocol_version
        # Consume the header block so closing the socket does not reset the
        # connection before the client reads the 403.
        try:
            http.client.parse_headers(self.rfile)
        except (http.client.HTTPException, OSError) as exc:
            logger.debug("Unreadable headers from rejected client: %s", exc)
        self._reject(HTTPStatus.FORBIDDEN, b"Forbidden")

    def _reject(self, status: HTTPStatus, body: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Connection", "close")
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)
        self.close_connection = True

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)


__all__ = ["InspectRequestHandler"]
