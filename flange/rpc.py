"""Line-delimited JSON remote procedure calls to a :class:`SimulatorControl`."""

from __future__ import annotations

import json
import socket
import socketserver
import threading

from flange.errors import Timeout
from flange.event import SimulatorEvent

#: Port the control service listens on when none is configured.
DEFAULT_RCF_PORT = 50001

#: Default time to wait for a remote call to answer, in milliseconds.
DEFAULT_REMOTE_TIMEOUT_MS = 10000

_METHODS = frozenset(
    {
        "get_runnable",
        "set_runnable",
        "issue_terminate",
        "issue_reset",
        "push_event",
        "received_data_available",
        "pop_front",
        "pop_events",
        "current_clk",
    }
)

_ERROR_TYPES = {
    "IndexError": IndexError,
    "RuntimeError": RuntimeError,
    "ValueError": ValueError,
    "TypeError": TypeError,
    "KeyError": KeyError,
}


def _encode(value):
    if isinstance(value, SimulatorEvent):
        return value.to_dict()
    if isinstance(value, list):
        return [_encode(item) for item in value]
    return value


def _dispatch(control, line):
    try:
        request = json.loads(line)
        method = request["method"]
        params = list(request.get("params", []))
        if method not in _METHODS:
            raise ValueError(f"Unknown method: {method!r}")
        if method == "push_event":
            params = [SimulatorEvent.from_dict(params[0])]
        result = getattr(control, method)(*params)
    except Exception as exc:  # reported to the caller, not raised here
        return {"error": {"type": type(exc).__name__, "message": str(exc)}}
    return {"result": _encode(result)}


class _Handler(socketserver.StreamRequestHandler):
    def handle(self):
        for line in self.rfile:
            if not line.strip():
                continue
            reply = _dispatch(self.server.control, line)
            self.wfile.write(json.dumps(reply).encode() + b"\n")
            self.wfile.flush()


class _TcpServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True
    block_on_close = False

    def __init__(self, address, control):
        self.control = control
        super().__init__(address, _Handler)


class ControlServer:
    """Serve a :class:`SimulatorControl` to remote clients over TCP."""

    def __init__(self, control, host="0.0.0.0", port=DEFAULT_RCF_PORT):
        self.control = control
        self._server = _TcpServer((host, port), control)
        self.host, self.port = self._server.server_address[:2]
        self._thread = None
        self._closed = False

    def start(self):
        """Start answering requests in a background thread."""
        if self._closed:
            raise RuntimeError("Server has been stopped")
        if self._thread is None:
            self._thread = threading.Thread(
                target=self._server.serve_forever, name="flange-control", daemon=True
            )
            self._thread.start()
        return self

    def stop(self):
        """Stop serving and release the listening socket."""
        if self._closed:
            return
        self._closed = True
        if self._thread is not None:
            self._server.shutdown()
            self._thread.join()
            self._thread = None
        self._server.server_close()

    def __enter__(self):
        return self.start()

    def __exit__(self, *args):
        self.stop()


class ControlProxy:
    """Client side of :class:`ControlServer` with the same methods as the control.

    ``timeout`` is in milliseconds; a value of zero or less waits forever.
    """

    def __init__(self, host, port, timeout=DEFAULT_REMOTE_TIMEOUT_MS):
        self.host = host
        self.port = port
        self.timeout = timeout
        self._lock = threading.Lock()
        self._sock = None
        self._reader = None

    def _timeout_seconds(self):
        return self.timeout / 1000 if self.timeout and self.timeout > 0 else None

    def _disconnect(self):
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def _call(self, method, *params):
        request = json.dumps({"method": method, "params": list(params)}).encode() + b"\n"
        with self._lock:
            try:
                if self._sock is None:
                    self._sock = socket.create_connection(
                        (self.host, self.port), timeout=self._timeout_seconds()
                    )
                    self._reader = self._sock.makefile("rb")
                self._sock.settimeout(self._timeout_seconds())
                self._sock.sendall(request)
                line = self._reader.readline()
            except TimeoutError as exc:
                self._disconnect()
                raise Timeout(f"Remote call {method} timed out") from exc
            except OSError:
                self._disconnect()
                raise
            if not line:
                self._disconnect()
                raise ConnectionError("Connection to simulation closed")
        reply = json.loads(line)
        if "error" in reply:
            error = reply["error"]
            raise _ERROR_TYPES.get(error.get("type"), RuntimeError)(error.get("message", ""))
        return reply.get("result")

    def get_runnable(self):
        return bool(self._call("get_runnable"))

    def set_runnable(self, value):
        self._call("set_runnable", bool(value))

    def issue_terminate(self):
        self._call("issue_terminate")

    def issue_reset(self, count):
        self._call("issue_reset", int(count))

    def push_event(self, event):
        self._call("push_event", event.to_dict())

    def received_data_available(self):
        return bool(self._call("received_data_available"))

    def pop_front(self):
        return SimulatorEvent.from_dict(self._call("pop_front"))

    def pop_events(self):
        return [SimulatorEvent.from_dict(item) for item in self._call("pop_events")]

    def current_clk(self):
        return int(self._call("current_clk"))

    def close(self):
        """Close the connection; a later call reconnects."""
        with self._lock:
            self._disconnect()