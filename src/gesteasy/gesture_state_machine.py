"""
Gesture debounce state machine.

Turns per-frame matches into confirmed user actions:
- V-shape must hold for several consecutive frames before CONFIRM_NAVIGATE
  fires, and a cooldown blocks rapid re-triggering.
- Pinch fires CLICK on the first frame, followed by a short suppression
  window so a held pinch does not click on every frame.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .config import DebounceConfig, validate_debounce
from .gesture_classifier import MatchKind
from .logger import get_logger

logger = get_logger("gesture_state_machine")


class GestureEvent(Enum):
    """Event emitted to the presentation/navigation layer."""
    NONE = auto()
    CLICK = auto()
    CONFIRM_NAVIGATE = auto()


class DebouncePhase(Enum):
    IDLE = auto()          # No V-shape accumulated
    ACCUMULATING = auto()  # 1..threshold-1 consecutive V-shape frames
    CONFIRMED = auto()     # CONFIRM_NAVIGATE fired this frame


@dataclass
class GestureState:
    consecutive_v_matches: int = 0
    last_confirmed_at: Optional[float] = None
    suppressed_until: Optional[float] = None


class GestureStateMachine:
    """
    Owns GestureState and applies one transition per frame.

    Timestamps are seconds from a monotonic clock; durations in the config
    are milliseconds.
    """

    def __init__(self, config: Optional[DebounceConfig] = None):
        self._config = config or DebounceConfig()
        validate_debounce(self._config)

        self._threshold = self._config.confirm_frame_threshold
        self._cooldown = self._config.confirm_cooldown_ms / 1000.0
        self._click_suppression = self._config.click_suppression_ms / 1000.0

        self.state = GestureState()
        self._confirmed_this_frame = False

    @property
    def phase(self) -> DebouncePhase:
        if self._confirmed_this_frame:
            return DebouncePhase.CONFIRMED
        if self.state.consecutive_v_matches > 0:
            return DebouncePhase.ACCUMULATING
        return DebouncePhase.IDLE

    def cooldown_active(self, now: float) -> bool:
        last = self.state.last_confirmed_at
        return last is not None and (now - last) <= self._cooldown

    def click_suppressed(self, now: float) -> bool:
        until = self.state.suppressed_until
        return until is not None and now < until

    def reset(self) -> None:
        """Back to IDLE, clearing counters, cooldown and click suppression."""
        self.state = GestureState()
        self._confirmed_this_frame = False

    def update(self, match: Optional[MatchKind], now: float) -> GestureEvent:
        """
        Apply one frame.

        Args:
            match: This frame's classification, or None when no hand was detected
            now: Current monotonic time in seconds

        Returns:
            The event for this frame (at most one).
        """
        self._confirmed_this_frame = False
        state = self.state

        if match is MatchKind.V_SHAPE:
            state.consecutive_v_matches += 1
            if state.consecutive_v_matches >= self._threshold and not self.cooldown_active(now):
                logger.debug(
                    f"V-shape held for {state.consecutive_v_matches} frames, confirming"
                )
                state.consecutive_v_matches = 0
                state.last_confirmed_at = now
                self._confirmed_this_frame = True
                return GestureEvent.CONFIRM_NAVIGATE
            return GestureEvent.NONE

        # Anything but a V-shape breaks the streak
        state.consecutive_v_matches = 0

        if match is MatchKind.PINCH:
            if self.click_suppressed(now):
                return GestureEvent.NONE
            state.suppressed_until = now + self._click_suppression
            logger.debug("Pinch detected, emitting click")
            return GestureEvent.CLICK

        return GestureEvent.NONE
