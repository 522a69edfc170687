# flange

`flange` connects software to a running hardware simulation. The simulation side holds
two event queues: one carries events towards the simulator and the other carries events
back from it. It also holds a small amount of run state: runnable, terminate, reset and
the current clock. A client reaches that state over TCP. It can send data words, read
back responses and steer execution.

## Installation

```
pip install .
```

To also install the test dependencies:

```
pip install .[test]
```

## Modules

### `flange.event`

This module provides `SimulatorEvent`, `EventType` and `TIMESTAMP_ASAP`.

- An event type is one of `TERMINATE`, `AL_DATA`, `PAUSE` or `PAUSE_AFTER_RECEIVE`.
- A timestamp is counted in clock cycles. `TIMESTAMP_ASAP`, which is `0`, means "as soon as possible".
- Only `AL_DATA` events may carry data. Giving data to any other type raises `ValueError`.
- A default event is a `TERMINATE` at timestamp 0 with no data.
- `to_dict()` and `SimulatorEvent.from_dict()` convert an event to and from plain dictionaries.

### `flange.control`

This module provides `SimulatorControl` and `RxResult`. `SimulatorControl` is the
thread-safe holder of the queues and run state on the simulation side.

For clients:

- `push_event` queues an event towards the simulator.
- `received_data_available` reports whether events from the simulator are waiting.
- `pop_front` returns the oldest event from the simulator.
- `pop_events` returns all events from the simulator.
- Both `pop_front` and `pop_events` raise `IndexError` when nothing is waiting.
- `get_runnable` and `set_runnable` read and set the runnable state.
- `issue_terminate` asks the simulator to stop.
- `issue_reset(count)` holds reset for `count` clock cycles.
- `current_clk` returns the current clock.

For the simulator:

- `record_from_sim(words)` stores words the simulator sends out. A non-empty list of words becomes an `AL_DATA` event at the current clock. If a `PAUSE_AFTER_RECEIVE` was handled earlier, the runnable state is cleared.
- `advance(rx_ready, now)` performs one clock step and returns an `RxResult`, with the fields `valid`, `terminate`, `reset` and `data`. The steps are:
  1. Increment the clock.
  2. Report a pending terminate.
  3. Otherwise count down a pending reset.
  4. Otherwise, if `rx_ready` is true and the first queued event is due, hand it over.

What happens to a due event depends on its type:

- `PAUSE` clears the runnable state.
- `PAUSE_AFTER_RECEIVE` pauses after the next word from the simulator.
- `TERMINATE` sets `terminate`.
- `AL_DATA` delivers its first word.

A queued event whose timestamp is neither ASAP nor due yet, and lies before `now`,
raises `RuntimeError`.

### `flange.rpc`

This module exposes a `SimulatorControl` over TCP. Each request and each reply is one
JSON object on its own line.

- `ControlServer(control, host="0.0.0.0", port=DEFAULT_RCF_PORT)`:
  - `DEFAULT_RCF_PORT` is `50001`.
  - `start()` serves the control from a background thread.
  - `stop()` shuts the server down.
  - The server can be used as a context manager.
- `ControlProxy(host, port, timeout=DEFAULT_REMOTE_TIMEOUT_MS)`:
  - It offers the same client methods as `SimulatorControl` and calls them remotely.
  - `timeout` is in milliseconds. The default is 10000. A value of zero or less waits forever.
  - A call that times out raises `flange.errors.Timeout`.
  - Errors raised on the server side are raised again in the caller.
  - `close()` drops the connection. The next call reconnects.

### `flange.dpi`

This module holds the hooks a simulator loop calls.

- `dpi_comm_init(environ=None)`:
  - It starts a `SimulatorControl` served on `FLANGE_SIMULATION_RCF_PORT`, or on 50001 when that variable is unset, and returns a handle.
  - It raises `RuntimeError` if a service already exists.
  - It raises `RuntimeError` if the port value does not convert to a non-zero port.
- `dpi_comm_tx(handle, words)` passes words out of the simulator.
- `dpi_comm_rx(handle, rx_ready)` waits, polling once per second, until the service is runnable. It then advances one clock and returns an `RxResult`.
- `dpi_comm_shutdown(handle)` stops the server and drops the service.

### `flange.client`

This module provides `SimulatorClient`, the user-facing connection.

- `send(words)` queues an `AL_DATA` event with the ASAP timestamp.
- `receive()` polls with growing pauses and returns the data of the next event. It raises `Timeout` after about 1.1 s without data.
- `set_remote_timeout(ms)` changes the remote call timeout.
- It also has `set_runnable`, `get_runnable`, `receive_data_available`, `get_current_time`, `issue_terminate`, `issue_reset(count=1)` and `close`.
- It can be used as a context manager.

### `flange.errors`

`Timeout` is a subclass of `TimeoutError`. It is raised when the simulation does not
answer in time.

## Simulator side

```python
from flange.dpi import dpi_comm_init, dpi_comm_rx, dpi_comm_tx, dpi_comm_shutdown

handle = dpi_comm_init()            # listens on FLANGE_SIMULATION_RCF_PORT or 50001
result = dpi_comm_rx(handle, True)  # once per cycle; waits while not runnable
if result.valid:
    word = result.data[0]
dpi_comm_tx(handle, [0x1234])       # words produced by the design
dpi_comm_shutdown(handle)
```

## Client side

```python
from flange.client import SimulatorClient

with SimulatorClient("127.0.0.1", 50001) as sim:
    sim.issue_reset(4)
    sim.set_runnable(True)
    sim.send([0xCAFE])
    words = sim.receive()
    print(words, sim.get_current_time())
    sim.issue_terminate()
```

`SimulatorClient.from_environment(environ=None)` builds a client from environment
variables:

- `FLANGE_SIMULATION_RCF_HOST` gives the host. It defaults to `127.0.0.1`.
- `FLANGE_SIMULATION_RCF_PORT` gives the port. It is required; if it is unset, `RuntimeError` is raised.

## What this package does not do

- It contains no simulator. The `flange.dpi` hooks are plain Python functions. Whatever drives the design has to call them once per clock cycle; the package offers no native interface that an HDL simulator could load directly.
- It installs no command-line program.
- Nothing persists: all queues and state live in memory for as long as the process runs.

## Tests

```
pytest
```