"""
Per-frame pipeline driver.

Wires smoothing, projection, geometry, classification and debouncing
together. The caller owns the frame cadence: call process_frame() (or
step() with a detector) once per available frame.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Optional
import time

from .config import Config
from .cursor_projector import CursorPosition, CursorProjector
from .geometry import GeometrySample, compute_geometry
from .gesture_classifier import GestureClassifier, MatchKind
from .gesture_state_machine import GestureEvent, GestureStateMachine
from .kalman_filter import KalmanFilter1D
from .landmarks import HandLandmarks, coerce_landmarks
from .logger import get_logger

logger = get_logger("pipeline")


@dataclass
class FrameResult:
    """Output of one frame."""
    cursor: Optional[CursorPosition] = None
    event: GestureEvent = GestureEvent.NONE
    match: Optional[MatchKind] = None
    geometry: Optional[GeometrySample] = None

    @classmethod
    def idle(cls) -> "FrameResult":
        return cls()

    @property
    def hand_detected(self) -> bool:
        return self.cursor is not None


@dataclass
class PipelineState:
    """Everything mutable for one gesture session."""
    filter_x: KalmanFilter1D
    filter_y: KalmanFilter1D
    state_machine: GestureStateMachine
    frame_count: int = 0

    @classmethod
    def create(cls, config: Config) -> "PipelineState":
        return cls(
            filter_x=KalmanFilter1D.from_config(config.smoothing),
            filter_y=KalmanFilter1D.from_config(config.smoothing),
            state_machine=GestureStateMachine(config.debounce),
        )


class GesturePipeline:
    """
    Landmark-to-intent pipeline.

    Gesture mode starts disabled; enable() creates a fresh PipelineState and
    disable() throws it away, so toggling always starts from IDLE with no
    cooldown.
    """

    def __init__(self, config: Optional[Config] = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize the pipeline.

        Args:
            config: GestEasy configuration (validated here)
            clock: Monotonic clock returning seconds
        """
        self._config = (config or Config()).validate()
        self._clock = clock

        self._classifier = GestureClassifier(self._config.gestures)
        self._projector = CursorProjector(self._config.cursor)
        self._pointer_suppression = self._config.debounce.pointer_click_suppression_ms / 1000.0

        self._state: Optional[PipelineState] = None
        self._pointer_suppressed_until: Optional[float] = None
        self._busy = False
        self._last_cursor: Optional[CursorPosition] = None

    @property
    def config(self) -> Config:
        return self._config

    @property
    def active(self) -> bool:
        return self._state is not None

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def state(self) -> Optional[PipelineState]:
        return self._state

    @property
    def last_cursor(self) -> Optional[CursorPosition]:
        """Most recent cursor, kept across frames without a hand."""
        return self._last_cursor

    def enable(self) -> None:
        if self._state is None:
            self._state = PipelineState.create(self._config)
            logger.info("Gesture mode enabled")

    def disable(self) -> None:
        if self._state is not None:
            self._state = None
            logger.info("Gesture mode disabled")

    def toggle(self) -> bool:
        """Flip gesture mode. Returns the new active flag."""
        if self.active:
            self.disable()
        else:
            self.enable()
        return self.active

    def notify_pointer_click(self) -> None:
        """A real pointer click happened; pause gesture processing briefly."""
        self._pointer_suppressed_until = self._clock() + self._pointer_suppression

    def pointer_suppressed(self, now: Optional[float] = None) -> bool:
        if self._pointer_suppressed_until is None:
            return False
        if now is None:
            now = self._clock()
        return now < self._pointer_suppressed_until

    def step(self, frame: Any, detect: Callable[[Any], Any],
             suppressed: bool = False) -> FrameResult:
        """
        Run the landmark source on `frame` and process the result.

        The pipeline stays busy while the detector runs, so a call that
        re-enters from inside `detect` is skipped. A failing detector is
        logged and the frame counts as "no hand".
        """
        if not self.active or suppressed or self.pointer_suppressed():
            return FrameResult.idle()
        if self._busy:
            logger.debug("step re-entered while busy, skipping frame")
            return FrameResult.idle()

        self._busy = True
        try:
            try:
                detection = detect(frame)
            except Exception:
                logger.warning("Landmark detection failed, treating frame as empty", exc_info=True)
                detection = None
            return self._process(detection)
        finally:
            self._busy = False

    def process_frame(self, landmarks: Any, suppressed: bool = False) -> FrameResult:
        """
        Process one frame of landmarks.

        Args:
            landmarks: HandLandmarks, a raw 21-point sequence, or None
            suppressed: Caller-side gate (e.g. a real click just happened)

        Returns:
            FrameResult with the cursor (None without a hand) and event.
        """
        if not self.active or suppressed or self.pointer_suppressed():
            return FrameResult.idle()
        if self._busy:
            logger.debug("process_frame re-entered while busy, skipping frame")
            return FrameResult.idle()

        self._busy = True
        try:
            return self._process(landmarks)
        finally:
            self._busy = False

    def _process(self, landmarks: Any) -> FrameResult:
        now = self._clock()
        # The detector may have switched gesture mode off or seen a pointer click
        if not self.active or self.pointer_suppressed(now):
            return FrameResult.idle()
        return self._run(coerce_landmarks(landmarks), now)

    def _run(self, hand: Optional[HandLandmarks], now: float) -> FrameResult:
        state = self._state
        state.frame_count += 1

        if hand is None:
            state.state_machine.update(None, now)
            return FrameResult.idle()

        # 1. Smooth the index fingertip, one filter per axis
        raw_x, raw_y, _ = hand.index_tip
        smoothed_x = state.filter_x.update(raw_x)
        smoothed_y = state.filter_y.update(raw_y)

        # 2. Project to output space
        cursor = self._projector.project(smoothed_x, smoothed_y)
        self._last_cursor = cursor

        # 3. Geometry + classification on raw landmarks
        sample = compute_geometry(hand)
        match = self._classifier.classify_sample(sample)

        # 4. Debounce
        event = state.state_machine.update(match, now)
        if event is not GestureEvent.NONE:
            logger.info(f"[{state.frame_count:5d}] {event.name}")

        return FrameResult(cursor=cursor, event=event, match=match, geometry=sample)
