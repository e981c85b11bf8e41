"""
Synthetic sample source for testing and development without hardware.

Generates a single channel of microvolt samples composed of sinusoids at
chosen frequencies plus Gaussian noise, delivered in bursts of irregular
size like the real acquisition device.
"""

import time
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from brainscreen.core.config import settings
from brainscreen.core.logging import get_logger
from brainscreen.eeg.device_interface import SampleSource

logger = get_logger(__name__)

# (frequency Hz, amplitude uV)
Component = Tuple[float, float]

EYES_CLOSED_COMPONENTS: Tuple[Component, ...] = ((10.0, 40.0), (5.5, 10.0), (20.0, 8.0))


class SyntheticSampleSource(SampleSource):
    """
    Simulated acquisition device.

    Samples are generated from a continuous phase so consecutive bursts
    join without discontinuities.
    """

    def __init__(
        self,
        components: Sequence[Component] = EYES_CLOSED_COMPONENTS,
        noise_std: float = 2.0,
        sampling_rate: Optional[float] = None,
        burst_size: Tuple[int, int] = (8, 64),
        seed: Optional[int] = None
    ) -> None:
        """
        Initialize synthetic source.

        Args:
            components: Sinusoids as (frequency Hz, amplitude uV) pairs
            noise_std: Standard deviation of additive Gaussian noise (uV)
            sampling_rate: Sampling rate in Hz (default: settings.sampling_rate)
            burst_size: Inclusive (min, max) samples per burst
            seed: Random seed for reproducibility
        """
        self.components = tuple(components)
        self.noise_std = noise_std
        self._sampling_rate = settings.sampling_rate if sampling_rate is None else sampling_rate
        self.burst_size = burst_size
        self.rng = np.random.RandomState(seed)

        self.sample_index = 0
        self.is_streaming = False
        self.start_time: Optional[float] = None

        logger.info(
            "synthetic_source_initialized",
            sampling_rate=self._sampling_rate,
            components=[list(c) for c in self.components],
            noise_std=noise_std
        )

    @property
    def sampling_rate(self) -> float:
        return self._sampling_rate

    def generate(self, n_samples: int) -> NDArray[np.float64]:
        """
        Generate the next ``n_samples`` samples.

        Args:
            n_samples: Number of samples

        Returns:
            Array of shape (n_samples,) in microvolts
        """
        t = (self.sample_index + np.arange(n_samples)) / self._sampling_rate
        data = np.zeros(n_samples)

        for frequency, amplitude in self.components:
            data += amplitude * np.sin(2 * np.pi * frequency * t)

        if self.noise_std > 0:
            data += self.rng.normal(0.0, self.noise_std, n_samples)

        self.sample_index += n_samples
        return data

    def generate_capture(self, duration: float) -> NDArray[np.float64]:
        """Generate a whole capture of ``duration`` seconds."""
        return self.generate(int(duration * self._sampling_rate))

    def start_stream(self) -> None:
        self.is_streaming = True
        self.start_time = time.time()
        logger.info("synthetic_stream_started")

    def stop_stream(self) -> None:
        self.is_streaming = False
        duration = time.time() - self.start_time if self.start_time else 0
        logger.info(
            "synthetic_stream_stopped",
            duration_seconds=duration,
            total_samples=self.sample_index
        )

    def read_burst(self) -> Optional[NDArray[np.float64]]:
        if not self.is_streaming:
            return None
        low, high = self.burst_size
        return self.generate(int(self.rng.randint(low, high + 1)))

    def get_info(self) -> Dict:
        return {
            'device_type': 'synthetic',
            'sampling_rate': self._sampling_rate,
            'components': [list(c) for c in self.components],
            'noise_std': self.noise_std,
            'samples_generated': self.sample_index
        }
