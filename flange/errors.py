"""Exceptions raised by the simulation interface."""


class Timeout(TimeoutError):
    """Raised when a call to the simulator does not answer in time."""

    def __init__(self, message):
        super().__init__(message)
        self.message = str(message)

    def __str__(self):
        return self.message