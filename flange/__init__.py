"""Event queues, TCP control service and client for driving a hardware simulation from software."""

__version__ = "0.1.0"
__all__ = ["client", "control", "dpi", "errors", "event", "rpc"]