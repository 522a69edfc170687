"""Entry points used by the simulator to exchange frames with software."""

from __future__ import annotations

import os
import re
import time

from flange.control import SimulatorControl
from flange.rpc import DEFAULT_RCF_PORT, ControlServer

_RX_RUNNABLE_STATE_SLEEP_S = 1.0

_services: list[SimulatorControl] = []
_servers: list[ControlServer] = []


def _to_port(text):
    match = re.match(r"\s*([+-]?)(\d+)", text)
    if match is None:
        return 0
    value = int(match.group(2))
    if match.group(1) == "-":
        value = -value
    return value % 65536


def dpi_comm_init(environ=None):
    """Create the control service, serve it and return its handle."""
    if _servers or _services:
        raise RuntimeError("Pre-existing services found; this is not supported for now.")
    environ = os.environ if environ is None else environ

    env_port = environ.get("FLANGE_SIMULATION_RCF_PORT")
    port = _to_port(env_port) if env_port is not None else DEFAULT_RCF_PORT
    if port == 0:
        raise RuntimeError(
            "Could not convert FLANGE_SIMULATION_RCF_PORT environment variable to a port."
        )

    handle = len(_servers)
    service = SimulatorControl()
    server = ControlServer(service, "0.0.0.0", port)
    server.start()
    _services.append(service)
    _servers.append(server)
    return handle


def dpi_comm_shutdown(handle):
    """Stop every server and drop every service."""
    while _servers:
        _servers.pop().stop()
    _services.clear()


def dpi_comm_tx(handle, data):
    """Hand words sent by the simulator to the service."""
    _services[handle].record_from_sim(data)


def dpi_comm_rx(handle, rx_ready):
    """Wait for the runnable state, then advance one clock and return an RxResult."""
    service = _services[handle]
    now = service.current_clk()
    while not service.get_runnable():
        time.sleep(_RX_RUNNABLE_STATE_SLEEP_S)
    return service.advance(rx_ready, now)