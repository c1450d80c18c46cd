import pytest

import demo
from demo import RANDOM_FUNCTIONS, DemoSequencer, Step, Timers
from state import DemoType, PaintFunction, PaintParams, is_continuous_tool


class StepLog:
    def __init__(self):
        self.calls = []

    def step(self, name):
        def routine(canvas, width, height, params, now):
            self.calls.append((name, now))
        return routine


@pytest.fixture
def scripted(monkeypatch):
    log = StepLog()
    monkeypatch.setitem(demo.SCRIPTS, DemoType.LANDSCAPE, [
        Step("a", log.step("a"), 0),
        Step("b", log.step("b"), 500),
    ])
    monkeypatch.setitem(demo.SCRIPTS, DemoType.PORTRAIT, [
        Step("p", log.step("p"), 0),
    ])
    return log


def _sequencer(canvas, functions=None):
    clears = []
    seq = DemoSequencer(canvas, PaintParams, lambda: clears.append(True),
                        on_function_change=(functions.append if functions is not None else None))
    return seq, clears


def test_timers_fire_in_order_and_cancel() -> None:
    fired = []
    timers = Timers()
    timers.call_later(0, 200, lambda now: fired.append("late"))
    early = timers.call_later(0, 100, lambda now: fired.append("early"))
    dropped = timers.call_later(0, 50, lambda now: fired.append("dropped"))
    timers.cancel(dropped)
    timers.run_due(99)
    assert fired == []
    timers.run_due(250)
    assert fired == ["early", "late"]
    assert len(timers) == 0
    timers.cancel(early)


def test_scripted_mode_clears_and_runs_first_step_immediately(recording_canvas, scripted) -> None:
    seq, clears = _sequencer(recording_canvas)
    seq.set_mode(DemoType.LANDSCAPE, now=0.0)
    assert clears == [True]
    assert [name for name, _ in scripted.calls] == ["a"]


def test_step_delay_scales_with_demo_speed(recording_canvas, scripted) -> None:
    seq, _ = _sequencer(recording_canvas)
    seq.set_speed(5)
    seq.set_mode(DemoType.LANDSCAPE, now=0.0)
    # "a" has delay 0 -> clamped to 100 ms
    seq.tick(0.05)
    assert len(scripted.calls) == 1
    seq.tick(0.15)
    assert [name for name, _ in scripted.calls] == ["a", "b"]


def test_sequence_restarts_after_pause(recording_canvas, scripted) -> None:
    seq, clears = _sequencer(recording_canvas)
    seq.set_speed(10)
    seq.set_mode(DemoType.LANDSCAPE, now=0.0)
    seq.tick(0.15)   # b
    seq.tick(0.7)    # end of list, pause scheduled
    assert len(clears) == 1
    seq.tick(2.0)
    assert len(clears) == 1
    seq.tick(2.8)
    assert len(clears) == 2
    assert [name for name, _ in scripted.calls] == ["a", "b", "a"]


def test_switching_to_random_cancels_scripted_steps(recording_canvas, scripted) -> None:
    seq, _ = _sequencer(recording_canvas)
    seq.set_mode(DemoType.LANDSCAPE, now=0.0)
    seq.set_mode(DemoType.RANDOM, now=0.01)
    count = len(scripted.calls)
    for k in range(1, 100):
        seq.tick(k * 0.1)
    assert len(scripted.calls) == count
    assert recording_canvas.calls


def test_stale_continuation_does_not_fire(recording_canvas, scripted) -> None:
    seq, _ = _sequencer(recording_canvas)
    seq.set_mode(DemoType.PORTRAIT, now=0.0)
    pending = list(seq.timers._pending.values())
    seq.stop()
    assert len(seq.timers) == 0
    for _, callback in pending:
        callback(10_000)
    assert [name for name, _ in scripted.calls] == ["p"]


def test_setting_same_mode_again_is_noop(recording_canvas, scripted) -> None:
    seq, clears = _sequencer(recording_canvas)
    seq.set_mode(DemoType.PORTRAIT, now=0.0)
    seq.set_mode(DemoType.PORTRAIT, now=0.0)
    assert clears == [True]


def test_random_mode_cycles_continuous_functions(recording_canvas) -> None:
    functions = []
    seq, clears = _sequencer(recording_canvas, functions)
    seq.set_mode(DemoType.RANDOM, now=100.0)
    assert functions == []
    assert clears == []

    # The first frame switches immediately, then every 2 s.
    seq.tick(100.5)
    assert recording_canvas.calls
    assert functions == [RANDOM_FUNCTIONS[1]]
    seq.tick(102.0)
    assert len(functions) == 1
    seq.tick(102.6)
    assert functions == RANDOM_FUNCTIONS[1:3]


def test_random_functions_exclude_gesture_and_instant_tools() -> None:
    assert all(is_continuous_tool(f) for f in RANDOM_FUNCTIONS)
    assert PaintFunction.FILL_AREA not in RANDOM_FUNCTIONS
    assert PaintFunction.DRAW_LINE not in RANDOM_FUNCTIONS
    assert PaintFunction.SPRAY_PAINT in RANDOM_FUNCTIONS


def test_random_anchor_orbits_canvas_center(recording_canvas, monkeypatch) -> None:
    monkeypatch.setattr(demo, "RANDOM_FUNCTIONS",
                        [PaintFunction.EMIT_PULSE, PaintFunction.DRAW_SPIRAL])
    seq, _ = _sequencer(recording_canvas)
    seq.set_mode(DemoType.RANDOM, now=0.0)
    seq.tick(0.0)
    # drawSpiral at t = 0: anchor is (0.8 w, 0.5 h) and the first point is size away in +x
    (_, args, _), = recording_canvas.named("stroke_path")
    assert args[0][0] == pytest.approx((400 * 0.8 + 30, 300 * 0.5))


def test_real_scripts_run_on_a_canvas() -> None:
    from canvas import Canvas

    for mode in (DemoType.LANDSCAPE, DemoType.PORTRAIT):
        canvas = Canvas(320, 240)
        seq = DemoSequencer(canvas, PaintParams, canvas.clear)
        seq.set_speed(10)
        seq.set_mode(mode, now=0.0)
        for k in range(1, 12):
            seq.tick(k * 0.1)
        seq.stop()
        assert (canvas.get_pixels()[..., :3] != 0).any()
