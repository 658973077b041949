"""One static file server bound to a root path, an IPv4 address and an ephemeral port."""
from __future__ import annotations

import logging
import os
import socketserver
import threading
from collections.abc import Callable
from functools import partial
from http.client import HTTPException
from http.server import ThreadingHTTPServer
from urllib.error import HTTPError, URLError
from urllib.request import ProxyHandler, Request, build_opener

from inspect_http.core.config import ServerConfig
from inspect_http.core.exceptions import (
    NoAddressError,
    ServerStartError,
    ServerStateError,
    WarmupFailedError,
)
from inspect_http.core.network import SubnetFilter, resolve_external_address

from .handler import InspectRequestHandler
from .models import ServerAddress, ServerState

logger = logging.getLogger(__name__)


class _InspectHTTPServer(ThreadingHTTPServer):
    # Non-daemon request threads are joined by server_close(), which is what
    # lets in-flight responses finish before the instance reports closed.
    daemon_threads = False
    block_on_close = True

    def server_bind(self) -> None:
        # HTTPServer.server_bind() does a reverse DNS lookup via getfqdn().
        socketserver.TCPServer.server_bind(self)
        host, port = self.server_address[:2]
        self.server_name = str(host)
        self.server_port = int(port)


def _probe_root(url: str, *, timeout_seconds: float) -> None:
    # A LAN proxy from the environment must not intercept a self-directed GET.
    opener = build_opener(ProxyHandler({}))
    try:
        with opener.open(Request(url, method="GET"), timeout=timeout_seconds):
            return
    except HTTPError as exc:
        # Any HTTP response implies the server is answering.
        exc.close()


class ServerInstance:
    """A running static server for one root path.

    Lifecycle: ``starting -> ready | failed`` and ``ready -> closing -> closed``.
    Address and port are fixed once ready.
    """

    def __init__(self, root_path: str, httpd: ThreadingHTTPServer) -> None:
        host, port = httpd.server_address[:2]
        self._root_path = root_path
        self._httpd = httpd
        self._address = ServerAddress(address=str(host), port=int(port))
        self._state = ServerState.STARTING
        self._state_lock = threading.Lock()
        self._closed = threading.Event()
        self._thread = threading.Thread(
            target=httpd.serve_forever,
            name=f"inspect-http:{self._address.port}",
            daemon=True,
        )

    @classmethod
    def start(
        cls,
        root_path: str | os.PathLike[str],
        *,
        address: str | None = None,
        config: ServerConfig | None = None,
    ) -> ServerInstance:
        """Bind, serve and warm up a server for ``root_path``.

        Raises:
            NoAddressError: no external IPv4 address could be found.
            ServerStartError: the listener could not be bound.
            WarmupFailedError: the readiness GET failed; the listener is released.
        """
        root = os.fspath(root_path)
        cfg = config or ServerConfig()

        host = address or cfg.bind_address
        if host is None:
            try:
                host = resolve_external_address()
            except NoAddressError as exc:
                raise NoAddressError(str(exc), root_path=root) from exc

        handler = partial(
            InspectRequestHandler,
            directory=root,
            subnet_filter=SubnetFilter(host),
            max_body_bytes=cfg.max_body_bytes,
            timeout=cfg.request_timeout_seconds,
        )
        try:
            httpd = _InspectHTTPServer((host, 0), handler)
        except OSError as exc:
            raise ServerStartError(
                f"Could not bind {host}: {exc}",
                root_path=root,
                context={"address": host},
            ) from exc

        instance = cls(root, httpd)
        instance._thread.start()

        url = instance.address.url
        try:
            _probe_root(url, timeout_seconds=cfg.probe_timeout_seconds)
        except (URLError, HTTPException, OSError) as exc:
            instance._release()
            raise WarmupFailedError(
                "Could not GET root after launching server",
                root_path=root,
                context={"url": url, "reason": str(exc)},
            ) from exc

        instance._state = ServerState.READY
        logger.info("Serving %s at %s", root, url)
        return instance

    @property
    def root_path(self) -> str:
        return self._root_path

    @property
    def address(self) -> ServerAddress:
        return self._address

    @property
    def state(self) -> ServerState:
        return self._state

    def _release(self) -> None:
        self._state = ServerState.FAILED
        self._httpd.shutdown()
        self._httpd.server_close()
        self._closed.set()

    def close(self, callback: Callable[[ServerInstance], None] | None = None) -> None:
        """Stop accepting connections and release the listener in the background.

        Returns immediately; in-flight requests drain before the socket is
        released. ``callback`` runs once, on the shutdown thread, after that.
        """
        with self._state_lock:
            if self._state is not ServerState.READY:
                raise ServerStateError(
                    f"Cannot close server in state '{self._state.value}'",
                    context={"root_path": self._root_path, "state": self._state.value},
                )
            self._state = ServerState.CLOSING

        threading.Thread(
            target=self._shutdown,
            args=(callback,),
            name=f"inspect-http-close:{self._address.port}",
            daemon=True,
        ).start()

    def _shutdown(self, callback: Callable[[ServerInstance], None] | None) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()
        self._state = ServerState.CLOSED
        self._closed.set()
        logger.info("Closed server for %s at %s", self._root_path, self._address.url)
        if callback is not None:
            callback(self)

    def wait_closed(self, timeout: float | None = None) -> bool:
        """Block until the listener is released; False on timeout."""
        return self._closed.wait(timeout)

    def __repr__(self) -> str:
        return (
            f"ServerInstance(root_path={self._root_path!r}, "
            f"address={self._address.url!r}, state={self._state.value!r})"
        )


__all__ = ["ServerInstance"]
