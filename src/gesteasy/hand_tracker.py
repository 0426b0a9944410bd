"""
MediaPipe Hand Tracker wrapper using the Tasks API.
Landmark source for the gesture pipeline: camera capture plus hand landmark
detection, returned in source-frame pixel coordinates.
"""
from pathlib import Path
from typing import Optional, Sequence, Tuple
import time
import cv2
import numpy as np
import mediapipe as mp

from .config import Config, CameraConfig, CursorConfig, MediaPipeConfig
from .cursor_projector import CursorPosition
from .landmarks import HandLandmarks
from .logger import get_logger

logger = get_logger("hand_tracker")

# MediaPipe Tasks API imports
BaseOptions = mp.tasks.BaseOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode

MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)

# Hand connections for drawing (same as MediaPipe's HAND_CONNECTIONS)
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),      # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),      # Index
    (0, 9), (9, 10), (10, 11), (11, 12), # Middle
    (0, 13), (13, 14), (14, 15), (15, 16), # Ring
    (0, 17), (17, 18), (18, 19), (19, 20), # Pinky
    (5, 9), (9, 13), (13, 17),           # Palm
]


def to_pixel_landmarks(normalized: Sequence, width: int, height: int,
                       handedness: str = "Unknown", confidence: float = 1.0) -> HandLandmarks:
    """
    Convert MediaPipe normalized landmarks (objects with x, y, z in 0-1) to
    pixel coordinates. z is scaled by width, as MediaPipe documents.
    """
    points = [(lm.x * width, lm.y * height, lm.z * width) for lm in normalized]
    return HandLandmarks.from_points(points, handedness=handedness, confidence=confidence)


class HandTracker:
    """
    MediaPipe hand tracking wrapper with camera management.
    Uses the MediaPipe Tasks API (0.10+) in VIDEO mode.
    """

    # Default model path relative to project root
    DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent / "models" / "hand_landmarker.task"

    def __init__(self, config: Config, model_path: Optional[Path] = None):
        """
        Initialize hand tracker.

        Args:
            config: GestEasy configuration
            model_path: Path to hand_landmarker.task model file
        """
        self._camera_config: CameraConfig = config.camera
        self._cursor_config: CursorConfig = config.cursor
        self._mp_config: MediaPipeConfig = config.mediapipe
        self._model_path = Path(model_path or self.DEFAULT_MODEL_PATH)

        # Lazy initialization
        self._cap: Optional[cv2.VideoCapture] = None
        self._landmarker: Optional[HandLandmarker] = None

        # State
        self._is_running = False
        self._last_frame: Optional[np.ndarray] = None
        self._frame_count = 0
        self._start_perf: float = 0
        self._last_timestamp_ms: int = -1

    def start(self) -> bool:
        """
        Start camera capture and MediaPipe.

        Returns:
            True if started successfully, False otherwise.
        """
        if self._is_running:
            return True

        if not self._model_path.exists():
            logger.error(f"Model file not found: {self._model_path}")
            logger.error(f"Download from: {MODEL_URL}")
            return False

        self._cap = cv2.VideoCapture(self._camera_config.device_id)
        if not self._cap.isOpened():
            logger.error(f"Could not open camera {self._camera_config.device_id}")
            self._cap = None
            return False

        # Landmarks are reported against this size, so the projector must agree
        width, height = self._cursor_config.source_frame_size
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        self._cap.set(cv2.CAP_PROP_FPS, self._camera_config.fps)

        options = HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(self._model_path)),
            running_mode=VisionRunningMode.VIDEO,
            num_hands=self._mp_config.max_num_hands,
            min_hand_detection_confidence=self._mp_config.min_detection_confidence,
            min_tracking_confidence=self._mp_config.min_tracking_confidence,
        )

        self._landmarker = HandLandmarker.create_from_options(options)
        self._start_perf = time.perf_counter()
        self._last_timestamp_ms = -1
        self._is_running = True
        logger.info(f"Hand tracker started on camera {self._camera_config.device_id}")
        return True

    def stop(self) -> None:
        """Stop camera capture and release resources."""
        self._is_running = False

        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None

        if self._cap:
            self._cap.release()
            self._cap = None

        self._last_frame = None

    def read(self) -> Optional[np.ndarray]:
        """Grab the next camera frame (mirrored if configured), or None."""
        if not self._is_running or self._cap is None:
            return None
        ret, frame = self._cap.read()
        if not ret:
            return None
        self._frame_count += 1
        if self._camera_config.mirror:
            frame = cv2.flip(frame, 1)
        self._last_frame = frame
        return frame

    def detect(self, frame: Optional[np.ndarray]) -> Optional[HandLandmarks]:
        """
        Detect one hand in a BGR frame.

        Returns:
            HandLandmarks in pixels of the frame passed in, or None.
        """
        if frame is None or self._landmarker is None:
            return None

        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        # VIDEO mode needs strictly monotonic timestamps
        timestamp_ms = int((time.perf_counter() - self._start_perf) * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms

        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)
        if not result.hand_landmarks:
            return None

        height, width = frame.shape[:2]
        handedness = result.handedness[0][0]
        return to_pixel_landmarks(
            result.hand_landmarks[0], width, height,
            handedness=handedness.category_name,
            confidence=handedness.score,
        )

    def get_frame_with_landmarks(
        self,
        landmarks: Optional[HandLandmarks] = None,
        cursor: Optional[CursorPosition] = None,
        output_size: Optional[Tuple[float, float]] = None,
    ) -> Optional[np.ndarray]:
        """
        Get last frame with landmark and cursor overlay for debugging.

        Args:
            landmarks: If provided, draw the hand skeleton.
            cursor: If provided together with output_size, draw the cursor
                scaled back onto the camera frame.
        """
        if self._last_frame is None:
            return None

        frame = self._last_frame.copy()

        if landmarks is not None:
            for x, y, _ in landmarks.landmarks:
                cv2.circle(frame, (int(x), int(y)), 5, (0, 255, 0), -1)
            for start_idx, end_idx in HAND_CONNECTIONS:
                start = landmarks.landmarks[start_idx]
                end = landmarks.landmarks[end_idx]
                cv2.line(frame, (int(start[0]), int(start[1])), (int(end[0]), int(end[1])), (0, 255, 0), 2)

        if cursor is not None and output_size is not None:
            h, w = frame.shape[:2]
            cx = int(cursor.x / output_size[0] * w)
            cy = int(cursor.y / output_size[1] * h)
            cv2.circle(frame, (cx, cy), 10, (0, 0, 255), 2)

        return frame

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def frame_count(self) -> int:
        return self._frame_count
