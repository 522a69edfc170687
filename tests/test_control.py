import threading

import pytest

from flange.control import RxResult, SimulatorControl
from flange.event import EventType, SimulatorEvent


def test_general():
    ctrl = SimulatorControl()
    assert ctrl.get_runnable() is False

    ctrl.set_runnable(True)
    assert ctrl.get_runnable() is True

    ctrl.issue_terminate()
    ctrl.issue_reset(123)
    ctrl.push_event(SimulatorEvent())

    assert ctrl.received_data_available() is False
    with pytest.raises(IndexError):
        ctrl.pop_front()
    with pytest.raises(IndexError):
        ctrl.pop_events()
    assert ctrl.current_clk() == 0


def test_advance_increments_clock():
    ctrl = SimulatorControl()
    assert ctrl.advance(True, 0) == RxResult()
    assert ctrl.advance(True, 1) == RxResult()
    assert ctrl.current_clk() == 2


def test_terminate_takes_precedence():
    ctrl = SimulatorControl()
    ctrl.issue_reset(3)
    ctrl.issue_terminate()
    result = ctrl.advance(True, 0)
    assert result.terminate is True
    assert result.reset is False
    assert result.valid is False


def test_reset_counts_down():
    ctrl = SimulatorControl()
    ctrl.issue_reset(2)
    assert ctrl.advance(True, 0).reset is True
    assert ctrl.advance(True, 1).reset is True
    assert ctrl.advance(True, 2).reset is False


def test_data_event_delivered():
    ctrl = SimulatorControl()
    ctrl.push_event(SimulatorEvent(EventType.AL_DATA, 0, [23]))
    result = ctrl.advance(True, 0)
    assert result == RxResult(valid=True, data=(23,))
    assert ctrl.advance(True, 1) == RxResult()


def test_not_ready_keeps_event():
    ctrl = SimulatorControl()
    ctrl.push_event(SimulatorEvent(EventType.AL_DATA, 0, [17]))
    assert ctrl.advance(False, 0) == RxResult()
    assert ctrl.advance(True, 1).data == (17,)


def test_future_event_waits():
    ctrl = SimulatorControl()
    ctrl.push_event(SimulatorEvent(EventType.AL_DATA, 2, [17]))
    assert ctrl.advance(True, 0).valid is False
    assert ctrl.advance(True, 1).valid is False
    assert ctrl.advance(True, 2).data == (17,)


def test_early_timestamp_raises():
    ctrl = SimulatorControl()
    ctrl.push_event(SimulatorEvent(EventType.AL_DATA, 1, [17]))
    with pytest.raises(RuntimeError):
        ctrl.advance(True, 5)


def test_pause_clears_runnable():
    ctrl = SimulatorControl()
    ctrl.set_runnable(True)
    ctrl.push_event(SimulatorEvent(EventType.PAUSE, 0))
    assert ctrl.advance(True, 0) == RxResult()
    assert ctrl.get_runnable() is False


def test_terminate_event():
    ctrl = SimulatorControl()
    ctrl.push_event(SimulatorEvent(EventType.TERMINATE, 0))
    result = ctrl.advance(True, 0)
    assert result.terminate is True
    assert result.valid is False


def test_pause_after_receive():
    ctrl = SimulatorControl()
    ctrl.set_runnable(True)
    ctrl.push_event(SimulatorEvent(EventType.PAUSE_AFTER_RECEIVE, 0))
    ctrl.advance(True, 0)
    assert ctrl.get_runnable() is True
    ctrl.record_from_sim([])
    assert ctrl.get_runnable() is False
    assert ctrl.received_data_available() is False


def test_record_from_sim_stamps_current_clock():
    ctrl = SimulatorControl()
    ctrl.advance(True, 0)
    ctrl.advance(True, 1)
    ctrl.record_from_sim([5, 6])
    assert ctrl.received_data_available() is True
    assert ctrl.pop_front() == SimulatorEvent(EventType.AL_DATA, 2, [5, 6])
    assert ctrl.received_data_available() is False


def test_pop_events_returns_all_in_order():
    ctrl = SimulatorControl()
    ctrl.record_from_sim([1])
    ctrl.advance(True, 0)
    ctrl.record_from_sim([2])
    events = ctrl.pop_events()
    assert [e.data for e in events] == [[1], [2]]
    assert [e.timestamp for e in events] == [0, 1]
    assert ctrl.received_data_available() is False


def test_data_event_without_data_raises():
    ctrl = SimulatorControl()
    ctrl.push_event(SimulatorEvent(EventType.AL_DATA, 0))
    with pytest.raises(IndexError):
        ctrl.advance(True, 0)


def test_pushed_event_is_copied():
    ctrl = SimulatorControl()
    event = SimulatorEvent(EventType.AL_DATA, 0, [9])
    ctrl.push_event(event)
    event.data[0] = 1
    assert ctrl.advance(True, 0).data == (9,)


def test_concurrent_records():
    ctrl = SimulatorControl()
    threads = [
        threading.Thread(target=lambda: [ctrl.record_from_sim([1]) for _ in range(100)])
        for _ in range(4)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(ctrl.pop_events()) == 400