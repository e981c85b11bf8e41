"""
Signal preprocessing: outlier clamping and fixed-coefficient bandpass conditioning.
"""

from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import signal

from brainscreen.core.config import settings
from brainscreen.core.logging import get_logger

logger = get_logger(__name__)

# Pre-computed biquad approximating a 1-40 Hz passband at ~520 Hz
BIQUAD_B = (0.0001, 0.0002, 0.0001)
BIQUAD_A = (1.0, -1.9978, 0.9978)

# Shorter inputs are returned unfiltered
MIN_FILTER_SAMPLES = 3

FilterState = NDArray[np.float64]


def clamp_outliers(
    samples: ArrayLike,
    limit: float | None = None
) -> NDArray[np.float64]:
    """
    Restrict every amplitude to [-limit, limit].

    Args:
        samples: Raw samples in microvolts
        limit: Amplitude bound, defaults to ``settings.outlier_limit``

    Returns:
        New array of the same length; the input is not modified
    """
    bound = settings.outlier_limit if limit is None else limit
    data = np.asarray(samples, dtype=np.float64)
    return np.clip(data, -bound, bound)


class BandpassConditioner:
    """
    Second-order recursive (biquad) filter with fixed coefficients.

    ``condition`` treats every call as an independent batch: the two prior
    inputs and two prior outputs start at zero each time. Callers that need
    to filter one long stream in bounded chunks use ``condition_chunk`` and
    thread the returned ``FilterState`` into the next call.
    """

    def __init__(
        self,
        b: Tuple[float, float, float] = BIQUAD_B,
        a: Tuple[float, float, float] = BIQUAD_A
    ) -> None:
        """
        Initialize the conditioner.

        Args:
            b: Feed-forward coefficients (b0, b1, b2)
            a: Feedback coefficients (1, a1, a2)
        """
        if len(b) != 3 or len(a) != 3:
            raise ValueError("Biquad needs exactly three b and three a coefficients")
        if a[0] != 1.0:
            raise ValueError(f"Leading feedback coefficient must be 1.0, got {a[0]}")

        self.b = np.asarray(b, dtype=np.float64)
        self.a = np.asarray(a, dtype=np.float64)

        logger.debug(
            "bandpass_conditioner_initialized",
            b=list(b),
            a=list(a)
        )

    def initial_state(self) -> FilterState:
        """Zero filter state (no prior inputs or outputs)."""
        return np.zeros(len(self.a) - 1, dtype=np.float64)

    def condition(self, samples: ArrayLike) -> NDArray[np.float64]:
        """
        Filter one complete capture.

        Args:
            samples: Clamped samples

        Returns:
            Filtered samples, same length and order as the input
        """
        data = np.asarray(samples, dtype=np.float64)

        if data.shape[0] < MIN_FILTER_SAMPLES:
            return data.copy()

        filtered, _ = signal.lfilter(self.b, self.a, data, zi=self.initial_state())
        return filtered

    def condition_chunk(
        self,
        samples: ArrayLike,
        state: FilterState | None = None
    ) -> tuple[NDArray[np.float64], FilterState]:
        """
        Filter one chunk of a longer stream.

        Args:
            samples: Next chunk of clamped samples
            state: State returned by the previous call, or None to start fresh

        Returns:
            (filtered chunk, state to pass with the next chunk)
        """
        data = np.asarray(samples, dtype=np.float64)
        zi = self.initial_state() if state is None else np.asarray(state, dtype=np.float64)

        if data.size == 0:
            return data.copy(), zi.copy()

        filtered, zf = signal.lfilter(self.b, self.a, data, zi=zi)
        return filtered, zf
