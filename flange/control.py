"""Thread-safe I/O queues shared between the simulation and its clients."""

from __future__ import annotations

import copy
import threading
from collections import deque
from dataclasses import dataclass

from flange.event import TIMESTAMP_ASAP, EventType, SimulatorEvent


@dataclass(frozen=True)
class RxResult:
    """Outcome of one simulator clock step on the receive side."""

    valid: bool = False
    terminate: bool = False
    reset: bool = False
    data: tuple[int, ...] = ()


class SimulatorControl:
    """Queues of events to and from the simulation plus its control state.

    All methods may be called from several threads at once.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._to_sim: deque[SimulatorEvent] = deque()
        self._from_sim: deque[SimulatorEvent] = deque()
        self._current_clk = 0
        self._runnable = False
        self._pause_after_next_event_from_sim = False
        self._terminate_asap = False
        self._reset = 0

    def get_runnable(self):
        """Return whether the simulation may run."""
        with self._lock:
            return self._runnable

    def set_runnable(self, state):
        """Allow or stop execution of the simulation."""
        with self._lock:
            self._runnable = bool(state)

    def issue_terminate(self):
        """Ask the simulation to terminate as soon as possible."""
        with self._lock:
            self._terminate_asap = True

    def issue_reset(self, count):
        """Hold reset for ``count`` clock cycles."""
        with self._lock:
            self._reset = int(count)

    def push_event(self, event):
        """Queue an event for the simulation."""
        with self._lock:
            self._to_sim.append(copy.deepcopy(event))

    def received_data_available(self):
        """Return whether events from the simulation are waiting."""
        with self._lock:
            return bool(self._from_sim)

    def pop_front(self):
        """Remove and return the oldest event from the simulation."""
        with self._lock:
            if not self._from_sim:
                raise IndexError("No data from sim available!")
            return self._from_sim.popleft()

    def pop_events(self):
        """Remove and return all events from the simulation, oldest first."""
        with self._lock:
            if not self._from_sim:
                raise IndexError("No data from sim available!")
            events = list(self._from_sim)
            self._from_sim.clear()
            return events

    def current_clk(self):
        """Return the current simulation time in clock cycles."""
        with self._lock:
            return self._current_clk

    def record_from_sim(self, words):
        """Store words sent by the simulation at the current clock."""
        words = list(words)
        with self._lock:
            if words:
                self._from_sim.append(
                    SimulatorEvent(EventType.AL_DATA, self._current_clk, words)
                )
            if self._pause_after_next_event_from_sim:
                self._pause_after_next_event_from_sim = False
                self._runnable = False

    def advance(self, rx_ready, now):
        """Advance the clock by one cycle and hand the next due event to the simulation.

        ``now`` is the clock value observed before waiting for the runnable state.
        """
        with self._lock:
            self._current_clk += 1

            if self._terminate_asap:
                return RxResult(terminate=True)

            if self._reset > 0:
                self._reset -= 1
                return RxResult(reset=True)

            if not rx_ready or not self._to_sim:
                return RxResult()

            event = self._to_sim[0]
            if event.timestamp > now:
                return RxResult()
            if TIMESTAMP_ASAP < event.timestamp < now:
                raise RuntimeError("Illegal (early) timestamp found")

            event_type = event.event_type
            if event_type is EventType.PAUSE:
                self._runnable = False
                result = RxResult()
            elif event_type is EventType.PAUSE_AFTER_RECEIVE:
                self._pause_after_next_event_from_sim = True
                result = RxResult()
            elif event_type is EventType.TERMINATE:
                result = RxResult(terminate=True)
            elif event_type is EventType.AL_DATA:
                if not event.data:
                    raise IndexError("Data event without data")
                result = RxResult(valid=True, data=(event.data[0],))
            else:
                raise ValueError("Illegal SimulatorEvent found!")

            self._to_sim.popleft()
            return result