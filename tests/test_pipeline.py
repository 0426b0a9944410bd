import pytest

from gesteasy.config import Config, ConfigError, DebounceConfig
from gesteasy.gesture_classifier import MatchKind
from gesteasy.gesture_state_machine import DebouncePhase, GestureEvent
from gesteasy.pipeline import FrameResult, GesturePipeline

FRAME_MS = 33.0


@pytest.fixture
def pipeline(clock):
    p = GesturePipeline(Config(), clock=clock)
    p.enable()
    return p


def run(pipeline, clock, frames, **kwargs):
    results = []
    for frame in frames:
        results.append(pipeline.process_frame(frame, **kwargs))
        clock.advance(FRAME_MS)
    return results


def test_starts_inactive(clock, v_hand):
    p = GesturePipeline(clock=clock)
    assert p.active is False
    result = p.process_frame(v_hand)
    assert result == FrameResult.idle()
    assert p.state is None


def test_v_shape_held_confirms(pipeline, clock, v_hand):
    results = run(pipeline, clock, [v_hand] * 5)
    events = [r.event for r in results]
    assert events == [GestureEvent.NONE] * 4 + [GestureEvent.CONFIRM_NAVIGATE]
    assert all(r.match is MatchKind.V_SHAPE for r in results)


def test_pinch_clicks(pipeline, clock, pinch_hand):
    result = pipeline.process_frame(pinch_hand)
    assert result.event is GestureEvent.CLICK
    assert result.match is MatchKind.PINCH


def test_cursor_follows_index_tip(pipeline, clock, open_hand):
    # Seeded filter: first frame projects the raw index tip (200, 300)
    result = pipeline.process_frame(open_hand)
    assert result.hand_detected
    assert result.cursor.x == pytest.approx(200.0 / 640 * 1920)
    assert result.cursor.y == pytest.approx(300.0 / 480 * 1080)
    assert pipeline.last_cursor == result.cursor


def test_cursor_is_smoothed(pipeline, clock, hand_factory):
    run(pipeline, clock, [hand_factory((100.0, 100.0), (300.0, 100.0))])
    result = pipeline.process_frame(hand_factory((200.0, 100.0), (400.0, 100.0)))
    raw_x = 200.0 / 640 * 1920
    first_x = 100.0 / 640 * 1920
    assert first_x < result.cursor.x < raw_x


def test_no_hand_resets_accumulation(pipeline, clock, v_hand):
    results = run(pipeline, clock, [v_hand] * 4 + [None] + [v_hand] * 4)
    assert all(r.event is GestureEvent.NONE for r in results)
    assert results[4].cursor is None
    assert pipeline.state.state_machine.state.consecutive_v_matches == 4


def test_no_hand_keeps_last_cursor(pipeline, clock, open_hand):
    first = pipeline.process_frame(open_hand)
    pipeline.process_frame(None)
    assert pipeline.last_cursor == first.cursor


@pytest.mark.parametrize("bad", [
    [(1.0, 2.0, 3.0)] * 5,
    "nonsense",
    42,
    [[None, None, None]] * 21,
    [[10**400, 1, 1]] * 21,
])
def test_malformed_landmarks_count_as_no_hand(pipeline, clock, v_hand, bad):
    run(pipeline, clock, [v_hand] * 4)
    result = pipeline.process_frame(bad)
    assert result.event is GestureEvent.NONE
    assert result.cursor is None
    assert pipeline.state.state_machine.state.consecutive_v_matches == 0


def test_raw_point_lists_are_accepted(pipeline, clock, v_hand):
    raw = [list(p) for p in v_hand.landmarks]
    results = run(pipeline, clock, [raw] * 5)
    assert results[-1].event is GestureEvent.CONFIRM_NAVIGATE


def test_nan_fingertip_keeps_previous_cursor(pipeline, clock, hand_factory, open_hand):
    first = pipeline.process_frame(open_hand)
    nan_hand = hand_factory((float("nan"), float("nan")), (400.0, 300.0))
    result = pipeline.process_frame(nan_hand)
    assert result.cursor == first.cursor
    assert result.match is MatchKind.NO_MATCH


def test_suppressed_flag_short_circuits(pipeline, clock, v_hand):
    run(pipeline, clock, [v_hand] * 4)
    before = pipeline.state.state_machine.state.consecutive_v_matches
    result = pipeline.process_frame(v_hand, suppressed=True)
    assert result == FrameResult.idle()
    assert pipeline.state.state_machine.state.consecutive_v_matches == before
    assert pipeline.state.frame_count == 4


def test_pointer_click_pauses_processing(pipeline, clock, pinch_hand):
    pipeline.notify_pointer_click()
    assert pipeline.process_frame(pinch_hand).event is GestureEvent.NONE
    clock.advance(301)
    assert pipeline.process_frame(pinch_hand).event is GestureEvent.CLICK


def test_toggle_resets_state(pipeline, clock, v_hand):
    results = run(pipeline, clock, [v_hand] * 5)
    assert results[-1].event is GestureEvent.CONFIRM_NAVIGATE
    run(pipeline, clock, [v_hand] * 3)

    assert pipeline.toggle() is False
    assert pipeline.toggle() is True

    machine = pipeline.state.state_machine
    assert machine.phase is DebouncePhase.IDLE
    assert machine.state.consecutive_v_matches == 0
    assert machine.state.last_confirmed_at is None
    # Well inside the old cooldown window, a full sequence fires again
    results = run(pipeline, clock, [v_hand] * 5)
    assert results[-1].event is GestureEvent.CONFIRM_NAVIGATE


def test_disable_mid_sequence_emits_nothing(pipeline, clock, v_hand):
    run(pipeline, clock, [v_hand] * 4)
    pipeline.disable()
    assert pipeline.process_frame(v_hand).event is GestureEvent.NONE
    pipeline.enable()
    results = run(pipeline, clock, [v_hand] * 4)
    assert all(r.event is GestureEvent.NONE for r in results)


def test_step_calls_detector(pipeline, clock, pinch_hand):
    frames = []

    def detect(frame):
        frames.append(frame)
        return pinch_hand

    result = pipeline.step("frame-1", detect)
    assert frames == ["frame-1"]
    assert result.event is GestureEvent.CLICK


def test_step_skips_detector_when_inactive(clock):
    p = GesturePipeline(clock=clock)

    def detect(frame):
        raise AssertionError("detector should not run")

    assert p.step("frame", detect) == FrameResult.idle()


def test_step_survives_detector_failure(pipeline, clock, v_hand, caplog):
    run(pipeline, clock, [v_hand] * 4)

    def detect(frame):
        raise RuntimeError("model crashed")

    with caplog.at_level("WARNING", logger="gesteasy"):
        result = pipeline.step("frame", detect)
    assert result.event is GestureEvent.NONE
    assert result.cursor is None
    assert pipeline.state.state_machine.state.consecutive_v_matches == 0
    assert "Landmark detection failed" in caplog.text
    # Next frame works normally
    assert pipeline.step("frame", lambda f: v_hand).match is MatchKind.V_SHAPE


def test_reentrant_call_is_skipped(pipeline, clock, v_hand, monkeypatch):
    inner = []
    original = pipeline._classifier.classify_sample

    def classify_and_reenter(sample):
        inner.append(pipeline.process_frame(v_hand))
        return original(sample)

    monkeypatch.setattr(pipeline._classifier, "classify_sample", classify_and_reenter)
    outer = pipeline.process_frame(v_hand)

    assert inner == [FrameResult.idle()]
    assert outer.match is MatchKind.V_SHAPE
    assert pipeline.state.frame_count == 1
    assert pipeline.busy is False


def test_step_reentered_from_detector_is_skipped(pipeline, clock, v_hand):
    inner = []

    def detect(frame):
        if not inner:
            inner.append(pipeline.step("inner", detect))
        return v_hand

    outer = pipeline.step("outer", detect)

    assert inner == [FrameResult.idle()]
    assert outer.match is MatchKind.V_SHAPE
    assert pipeline.state.frame_count == 1
    assert pipeline.busy is False


def test_detector_disabling_pipeline_gives_idle(pipeline, clock, v_hand):
    def detect(frame):
        pipeline.disable()
        return v_hand

    assert pipeline.step("frame", detect) == FrameResult.idle()
    assert pipeline.busy is False


def test_busy_cleared_after_frame(pipeline, clock, v_hand):
    pipeline.process_frame(v_hand)
    assert pipeline.busy is False


def test_invalid_config_fails_fast(clock):
    with pytest.raises(ConfigError):
        GesturePipeline(Config(debounce=DebounceConfig(confirm_frame_threshold=0)), clock=clock)


def test_independent_pipelines(clock, v_hand):
    a = GesturePipeline(clock=clock)
    b = GesturePipeline(clock=clock)
    a.enable()
    b.enable()
    run(a, clock, [v_hand] * 4)
    assert b.state.state_machine.state.consecutive_v_matches == 0
