"""Client connecting to a running simulation."""

from __future__ import annotations

import os
import re
import time

from flange.errors import Timeout
from flange.event import TIMESTAMP_ASAP, EventType, SimulatorEvent
from flange.rpc import ControlProxy

_POLL_INTERVALS_S = (10e-6, 100e-6, 1e-3, 10e-3, 100e-3, 1.0)
_DEFAULT_HOST = "127.0.0.1"


def _atoi_port(text):
    match = re.match(r"\s*([+-]?)(\d+)", text)
    if match is None:
        return 0
    value = int(match.group(2))
    if match.group(1) == "-":
        value = -value
    return value % 65536


class SimulatorClient:
    """Connection to a simulation with helpers to send and receive words."""

    def __init__(self, ip, port):
        self._proxy = ControlProxy(ip, int(port))

    @classmethod
    def from_environment(cls, environ=None):
        """Connect using FLANGE_SIMULATION_RCF_HOST and FLANGE_SIMULATION_RCF_PORT."""
        environ = os.environ if environ is None else environ
        host = environ.get("FLANGE_SIMULATION_RCF_HOST", _DEFAULT_HOST)
        port = environ.get("FLANGE_SIMULATION_RCF_PORT")
        if port is None:
            raise RuntimeError(
                "No port to simulator found in environment (FLANGE_SIMULATION_RCF_PORT)."
            )
        return cls(host, _atoi_port(port))

    def send(self, words):
        """Send a packet of words, to be delivered as soon as possible."""
        self._proxy.push_event(SimulatorEvent(EventType.AL_DATA, TIMESTAMP_ASAP, words))

    def receive(self):
        """Return the words of the next packet from the simulation.

        Raises :class:`Timeout` if nothing arrives within about one second.
        """
        delays = iter(_POLL_INTERVALS_S)
        while not self._proxy.received_data_available():
            delay = next(delays, None)
            if delay is None:
                raise Timeout("Timeout while waiting for simulation response")
            time.sleep(delay)
        return self._proxy.pop_front().data

    def set_runnable(self, value):
        self._proxy.set_runnable(value)

    def get_runnable(self):
        return self._proxy.get_runnable()

    def receive_data_available(self):
        return self._proxy.received_data_available()

    def get_current_time(self):
        """Return the simulation time in clock cycles."""
        return self._proxy.current_clk()

    def set_remote_timeout(self, timeout):
        """Set the remote call timeout in milliseconds."""
        self._proxy.timeout = int(timeout)

    def issue_terminate(self):
        self._proxy.issue_terminate()

    def issue_reset(self, count=1):
        """Hold reset for ``count`` clock cycles."""
        self._proxy.issue_reset(count)

    def close(self):
        self._proxy.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()