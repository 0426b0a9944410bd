"""
GestEasy Gesture Module

Turns per-frame hand landmarks into a smoothed cursor and debounced
gesture events (click, confirm-navigate).
"""
from .config import Config, ConfigError, load_config
from .cursor_projector import CursorPosition, CursorProjector, project
from .geometry import GeometrySample, angle_from_reference, compute_geometry, distance
from .gesture_classifier import GestureClassifier, MatchKind, classify
from .gesture_state_machine import DebouncePhase, GestureEvent, GestureState, GestureStateMachine
from .kalman_filter import FilterState, KalmanFilter1D
from .landmarks import HandLandmarks, LandmarkError
from .logger import get_logger, setup_logging
from .pipeline import FrameResult, GesturePipeline, PipelineState

__all__ = [
    'Config',
    'ConfigError',
    'load_config',
    'CursorPosition',
    'CursorProjector',
    'project',
    'GeometrySample',
    'angle_from_reference',
    'compute_geometry',
    'distance',
    'GestureClassifier',
    'MatchKind',
    'classify',
    'DebouncePhase',
    'GestureEvent',
    'GestureState',
    'GestureStateMachine',
    'FilterState',
    'KalmanFilter1D',
    'HandLandmarks',
    'LandmarkError',
    'get_logger',
    'setup_logging',
    'FrameResult',
    'GesturePipeline',
    'PipelineState',
]
