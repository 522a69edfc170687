"""Events exchanged between the software side and the simulation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

#: Timestamp value meaning "as soon as possible".
TIMESTAMP_ASAP = 0


class EventType(IntEnum):
    """Kind of a simulator event."""

    TERMINATE = 0
    AL_DATA = 1
    PAUSE = 2
    PAUSE_AFTER_RECEIVE = 3


@dataclass
class SimulatorEvent:
    """An event to be sent to or received from the simulation.

    Only events of type ``AL_DATA`` may carry data.
    """

    event_type: EventType = EventType.TERMINATE
    timestamp: int = 0
    data: list[int] = field(default_factory=list)

    def __post_init__(self):
        self.event_type = EventType(self.event_type)
        self.data = list(self.data)
        if self.data and self.event_type is not EventType.AL_DATA:
            raise ValueError("Trying to construct non-data event with data.")

    def to_dict(self):
        """Return a plain, serialisable representation of the event."""
        return {
            "event_type": int(self.event_type),
            "timestamp": self.timestamp,
            "data": list(self.data),
        }

    @classmethod
    def from_dict(cls, payload):
        """Build an event from the representation produced by :meth:`to_dict`."""
        return cls(
            EventType(payload["event_type"]),
            int(payload["timestamp"]),
            [int(word) for word in payload.get("data", [])],
        )