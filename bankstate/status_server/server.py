"""Status server lifecycle: STOPPED <-> RUNNING. Loopback-only uvicorn listener in one background thread.

- start(config): enableHttp=false or invalid port -> stays STOPPED (logged); bind on 127.0.0.1:port happens
  synchronously on the caller's thread, so bind errors are reported here and never reach the host.
- stop(): force exit (no drain), join worker, close socket -> STOPPED. No-op when STOPPED. With requests still in
  flight the join is cut short and the worker is left to finish them in the background.
- restart(config): stop() + start() under the same lock as start/stop, so two listeners never coexist.
"""

import enum
import logging
import socket
import threading
import time
from typing import Optional, Tuple

import uvicorn

from bankstate.config.settings import MAX_PORT, MIN_PORT, ServerConfig
from bankstate.core.logging_utils import log_server_transition
from bankstate.status_server.app import create_app
from bankstate.status_server.reader import BankStateReader

logger = logging.getLogger(__name__)

# Fixed: never exposed beyond the local machine
LOOPBACK_HOST = "127.0.0.1"
THREAD_NAME = "ExposeBankStateHttp"

_LISTEN_BACKLOG = 16
_STARTUP_TIMEOUT_SEC = 5.0
_STOP_JOIN_TIMEOUT_SEC = 5.0
# A host read stuck in a handler must not hold the lifecycle thread
_STOP_ABANDON_TIMEOUT_SEC = 0.25


class ServerState(str, enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"


def bind_loopback(port: int) -> socket.socket:
    """Bind and listen on 127.0.0.1:port. Raises OSError (port in use, permission denied)."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        if hasattr(socket, "SO_EXCLUSIVEADDRUSE"):
            # Windows: SO_REUSEADDR would allow binding over a live listener
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_EXCLUSIVEADDRUSE, 1)
        else:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((LOOPBACK_HOST, port))
        sock.listen(_LISTEN_BACKLOG)
    except OSError:
        sock.close()
        raise
    return sock


class StatusServer:
    """Owns the single listener. Lifecycle calls come from the host thread; requests are served on the worker."""

    def __init__(self, reader: BankStateReader) -> None:
        self._app = create_app(reader)
        self._lock = threading.RLock()
        self._state = ServerState.STOPPED
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None
        self._socket: Optional[socket.socket] = None
        self._address: Optional[Tuple[str, int]] = None

    @property
    def state(self) -> ServerState:
        with self._lock:
            self._reap_dead_worker()
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state == ServerState.RUNNING

    @property
    def address(self) -> Optional[Tuple[str, int]]:
        """Bound (host, port) while RUNNING, else None."""
        with self._lock:
            self._reap_dead_worker()
            return self._address

    @property
    def port(self) -> Optional[int]:
        address = self.address
        return address[1] if address else None

    def start(self, config: ServerConfig) -> bool:
        """Start listening per config. Returns True iff RUNNING afterwards. Never raises."""
        with self._lock:
            self._reap_dead_worker()
            if self._state == ServerState.RUNNING:
                logger.debug("start ignored: already running on %s:%s", *self._address)
                return True
            if not config.enable_http:
                logger.info("HTTP server disabled (enableHttp=false)")
                return False
            port = config.port
            if not config.port_valid:
                logger.warning("Port %s is invalid or privileged. Choose %s-%s.", port, MIN_PORT, MAX_PORT)
                return False
            try:
                sock = bind_loopback(port)
            except OSError as e:
                logger.error("Failed to start HTTP server (port %s): %s", port, e)
                return False
            try:
                server = uvicorn.Server(
                    uvicorn.Config(
                        self._app,
                        loop="asyncio",
                        http="h11",
                        lifespan="off",
                        log_config=None,
                        access_log=False,
                    )
                )
                thread = threading.Thread(target=self._serve, args=(server, sock), name=THREAD_NAME, daemon=True)
                thread.start()
            except Exception as e:
                logger.error("Failed to start HTTP server (port %s): %s", port, e)
                sock.close()
                return False
            if not self._wait_started(server, thread):
                logger.error("HTTP server on port %s did not come up; releasing port", port)
                self._shutdown_worker(server, thread, sock)
                return False
            self._server, self._thread, self._socket = server, thread, sock
            self._address = (LOOPBACK_HOST, sock.getsockname()[1])
            self._set_state(ServerState.RUNNING, "start", port=self._address[1])
            logger.info("Expose Bank State listening on http://%s:%s/state", LOOPBACK_HOST, self._address[1])
            return True

    def stop(self) -> None:
        """Close the listener immediately; in-flight requests may be abandoned. No-op when STOPPED."""
        with self._lock:
            if self._server is None:
                return
            server, thread, sock = self._server, self._thread, self._socket
            port = self._address[1] if self._address else None
            self._server = self._thread = self._socket = None
            self._address = None
            self._shutdown_worker(server, thread, sock)
            self._set_state(ServerState.STOPPED, "stop", port=port)

    def restart(self, config: ServerConfig) -> bool:
        """stop() then start(config) as one unit with respect to other lifecycle calls."""
        with self._lock:
            self.stop()
            return self.start(config)

    @staticmethod
    def _serve(server: uvicorn.Server, sock: socket.socket) -> None:
        try:
            server.run(sockets=[sock])
        except (Exception, SystemExit):
            logger.exception("HTTP server worker exited with error")

    @staticmethod
    def _wait_started(server: uvicorn.Server, thread: threading.Thread) -> bool:
        deadline = time.monotonic() + _STARTUP_TIMEOUT_SEC
        while time.monotonic() < deadline:
            if server.started:
                return True
            if not thread.is_alive():
                return False
            time.sleep(0.01)
        return server.started

    @staticmethod
    def _shutdown_worker(
        server: Optional[uvicorn.Server],
        thread: Optional[threading.Thread],
        sock: Optional[socket.socket],
    ) -> None:
        in_flight = 0
        if server is not None:
            server.should_exit = True
            server.force_exit = True
            in_flight = len(server.server_state.tasks)
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            timeout = _STOP_ABANDON_TIMEOUT_SEC if in_flight else _STOP_JOIN_TIMEOUT_SEC
            thread.join(timeout=timeout)
            if thread.is_alive() and in_flight:
                logger.info("HTTP server thread left to finish %d in-flight request(s)", in_flight)
            elif thread.is_alive():
                logger.warning("HTTP server thread did not exit within %.1fs", timeout)
        if sock is not None:
            try:
                sock.close()
            except OSError as e:
                logger.debug("socket close: %s", e)

    def _reap_dead_worker(self) -> None:
        """Worker died on its own (crash): release the socket and fall back to STOPPED."""
        if self._thread is None or self._thread.is_alive():
            return
        logger.error("HTTP server worker is no longer running; marking server stopped")
        port = self._address[1] if self._address else None
        sock = self._socket
        self._server = self._thread = self._socket = None
        self._address = None
        self._shutdown_worker(None, None, sock)
        self._set_state(ServerState.STOPPED, "worker_exited", port=port)

    def _set_state(self, to_state: ServerState, reason: str, **extra) -> None:
        from_state = self._state
        self._state = to_state
        log_server_transition(from_state.value, to_state.value, reason, extra={**extra, "host": LOOPBACK_HOST})
