import math
from dataclasses import dataclass

from .config import ConfigError


@dataclass
class FilterState:
    estimate: float = 0.0
    error_covariance: float = 1.0
    process_noise: float = 0.1
    measurement_noise: float = 0.01
    initialized: bool = False


class KalmanFilter1D:
    def __init__(self, process_noise=0.1, measurement_noise=0.01, seed_from_first_measurement=True):
        """
        Initialize a scalar Kalman filter for one cursor axis.

        Args:
            process_noise: Q. Higher = follows fast movement more eagerly.
            measurement_noise: R. Higher = trusts each landmark less (more smoothing).
            seed_from_first_measurement: Start at the first measurement instead of 0,
                so the cursor does not sweep in from the origin.
        """
        for name, value in (("process_noise", process_noise), ("measurement_noise", measurement_noise)):
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
                raise ConfigError(f"{name} must be a positive number, got {value!r}")

        self.seed_from_first_measurement = seed_from_first_measurement
        self.state = FilterState(
            process_noise=float(process_noise),
            measurement_noise=float(measurement_noise),
        )

    @classmethod
    def from_config(cls, config):
        """Build from a SmoothingConfig."""
        return cls(
            process_noise=config.process_noise,
            measurement_noise=config.measurement_noise,
            seed_from_first_measurement=config.seed_from_first_measurement,
        )

    @property
    def estimate(self) -> float:
        return self.state.estimate

    @property
    def error_covariance(self) -> float:
        return self.state.error_covariance

    def reset(self):
        """Back to the initial state, keeping the noise parameters."""
        self.state.estimate = 0.0
        self.state.error_covariance = 1.0
        self.state.initialized = False

    def update(self, measurement) -> float:
        """
        Filter one measurement.

        Args:
            measurement: Raw coordinate in source pixels

        Returns:
            Filtered value. Non-finite input leaves the state untouched and
            returns the previous estimate.
        """
        if measurement is None or not math.isfinite(measurement):
            return self.state.estimate

        s = self.state
        if not s.initialized:
            s.initialized = True
            if self.seed_from_first_measurement:
                s.estimate = float(measurement)
                s.error_covariance = s.measurement_noise
                return s.estimate

        # Predict: static model, uncertainty grows by Q
        predicted_cov = s.error_covariance + s.process_noise

        # Correct
        gain = predicted_cov / (predicted_cov + s.measurement_noise)
        s.estimate += gain * (measurement - s.estimate)
        s.error_covariance = predicted_cov * (1 - gain)

        return s.estimate

    __call__ = update
