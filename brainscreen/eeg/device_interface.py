"""
Abstract interface for raw sample sources.

The acquisition hardware (or a simulator standing in for it) delivers a
single channel of microvolt samples in variable-length bursts.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

import numpy as np
from numpy.typing import NDArray


class SampleSource(ABC):
    """
    Abstract base class for single-channel sample sources.

    All sources (simulator, real hardware bridges) must implement this interface.
    """

    @abstractmethod
    def start_stream(self) -> None:
        """Start streaming samples."""
        pass

    @abstractmethod
    def stop_stream(self) -> None:
        """Stop streaming samples."""
        pass

    @abstractmethod
    def read_burst(self) -> Optional[NDArray[np.float64]]:
        """
        Read the next burst of samples.

        Returns:
            1-D array of samples, or None when the stream is stopped
        """
        pass

    @abstractmethod
    def get_info(self) -> Dict:
        """
        Get source information.

        Returns:
            Dictionary with source info (type, sampling rate, ...)
        """
        pass

    @property
    @abstractmethod
    def sampling_rate(self) -> float:
        """Nominal sampling rate in Hz."""
        pass
